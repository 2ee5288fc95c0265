"""
Printer Configuration Management for the DXF print post-processor

Handles loading printer profiles from YAML config files. Falls back to
generic defaults if config is missing or incomplete.
"""

import yaml
from typing import Optional, Dict, Any


# =============================================================================
# DEFAULTS
# These are used as fallbacks when config values are missing
# =============================================================================

PRINTER_DEFAULTS = {
    'printer': {
        'name': 'Generic Printer'
    },
    'extrusion': {
        'per_mm': 1.0
    },
    'motion': {
        'feed_rate': 0.0  # 0 = don't emit a feed rate
    },
    'print_area': {
        'center_x': 0.0,
        'center_y': 0.0
    }
}


class PrinterConfig:
    """
    Printer settings for the post-processor.

    A config file holds either a single printer (top-level printer/extrusion/
    motion/print_area sections) or several named printers under `profiles`,
    with `default_profile` picking the one used when none is requested.
    """

    def __init__(self, config_data: Optional[Dict[str, Any]] = None, profile: Optional[str] = None):
        """
        Initialize printer config from YAML data.

        Args:
            config_data: Parsed YAML config dict, or None for defaults
            profile: Profile name, or None for the default profile

        Raises:
            ValueError: config is not a mapping, or the profile doesn't exist
        """
        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError(f"Printer config must be a mapping, got {type(config_data).__name__}")

        self._data = self._normalize_profiles(config_data)

        if profile is None:
            profile = self.default_profile
        if profile not in self._data['profiles']:
            available = ', '.join(sorted(self._data['profiles'])) or 'none'
            raise ValueError(f"Unknown printer profile '{profile}'. Available: {available}")
        self.profile = profile

    def _normalize_profiles(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Wrap a single-printer config as a profile named 'default'"""
        if 'profiles' in data:
            profiles = data.get('profiles') or {}
            if not isinstance(profiles, dict):
                raise ValueError(f"Printer config 'profiles' must be a mapping of name to settings, "
                                 f"got {type(profiles).__name__}")
            default_profile = data.get('default_profile') or next(iter(profiles), 'default')
            return {'default_profile': default_profile, 'profiles': profiles}

        return {
            'default_profile': 'default',
            'profiles': {'default': data}
        }

    def _get(self, *keys, default=None):
        """
        Safely get nested value from the active profile, falling back to
        PRINTER_DEFAULTS, then to `default`.
        """
        value = self._data['profiles'][self.profile]
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                value = None
            if value is None:
                break

        if value is not None:
            return value

        default_value = PRINTER_DEFAULTS
        for key in keys:
            if isinstance(default_value, dict):
                default_value = default_value.get(key)
            else:
                default_value = None
            if default_value is None:
                break

        return default_value if default_value is not None else default

    def _get_float(self, *keys) -> float:
        """Numeric setting; ValueError naming the key if it isn't a number"""
        value = self._get(*keys)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Printer config '{'.'.join(keys)}' must be a number, got {value!r}")

    @property
    def default_profile(self) -> str:
        return self._data['default_profile']

    def get_available_profiles(self):
        return list(self._data['profiles'])

    # ========================================================================
    # Printer Settings
    # ========================================================================

    @property
    def printer_name(self) -> str:
        return self._get('printer', 'name')

    @property
    def extrusion_per_mm(self) -> float:
        """Filament extruded per mm of travel"""
        return self._get_float('extrusion', 'per_mm')

    @property
    def feed_rate(self) -> float:
        """Print speed in mm/min (0 = not set)"""
        return self._get_float('motion', 'feed_rate')

    @property
    def center_x(self) -> float:
        return self._get_float('print_area', 'center_x')

    @property
    def center_y(self) -> float:
        return self._get_float('print_area', 'center_y')

    @classmethod
    def from_yaml(cls, yaml_content: str, profile: Optional[str] = None) -> 'PrinterConfig':
        """
        Create PrinterConfig from YAML string.

        Falls back to defaults if the YAML can't be parsed.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            print(f"Warning: Error parsing printer config YAML: {e}")
            print("Using default printer settings.")
            return cls()
        return cls(data, profile)

    @classmethod
    def from_file(cls, path: str, profile: Optional[str] = None) -> 'PrinterConfig':
        """Load PrinterConfig from a YAML file (IOError if it can't be read)"""
        with open(path, 'r') as f:
            return cls.from_yaml(f.read(), profile)

    def __repr__(self):
        return f"PrinterConfig(profile='{self.profile}', printer='{self.printer_name}')"


# =============================================================================
# YAML TEMPLATE
# =============================================================================

CONFIG_TEMPLATE = """# DXF print post-processor configuration
#
# All values are optional - any missing values use the built-in defaults.
# Command-line options override anything set here.

# Profile used when --profile is not given
default_profile: generic

profiles:
  generic:
    printer:
      name: "Generic Printer"

    extrusion:
      # Filament extruded per mm of travel (-E)
      per_mm: 1.0

    motion:
      # Print speed in mm/min (-F); 0 leaves the printer's current speed
      feed_rate: 0

    print_area:
      # The part's XY footprint is centered on this point
      center_x: 0.0
      center_y: 0.0

  # Example second printer
  # bed_220:
  #   extrusion:
  #     per_mm: 0.05
  #   motion:
  #     feed_rate: 1200
  #   print_area:
  #     center_x: 110.0
  #     center_y: 110.0
"""
