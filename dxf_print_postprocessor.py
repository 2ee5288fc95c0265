"""
DXF Print Post-Processor
Generates extrusion G-code for 3D printers from DXF polylines:
- Centers the part on the print area (XY only)
- Prints every polyline bottom-up with absolute extrusion
- Reports SPLINEs as unsupported
"""

# Standard library
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Iterable, List

# Local modules
from extrusion_writer import PREAMBLE, MotionGenerator, format_command, format_feed_rate
from print_geometry import ORIGIN, BoundingBox, Point, Polyline, compute_bounds, compute_shift, translate


SPLINE_NOTICE = "This tool does not yet convert SPLINEs!"


class EntityKind(Enum):
    POLYLINE = 'polyline'
    SPLINE = 'spline'
    OTHER = 'other'


@dataclass
class Entity:
    """A decoded drawing entity. Only POLYLINE entities carry vertices."""
    kind: EntityKind
    vertices: List[Point] = field(default_factory=list)
    dxftype: str = ''


@dataclass
class ConversionResult:
    """What happened during one conversion run"""
    bounds: BoundingBox
    shift: Point = ORIGIN
    num_polylines: int = 0
    num_commands: int = 0
    num_unsupported: int = 0
    total_extrusion: float = 0.0
    notices: List[str] = field(default_factory=list)


class DXFPrintPostProcessor:
    def __init__(self, e_per_mm: float = 1.0, feed_rate: float = 0.0,
                 center_x: float = 0.0, center_y: float = 0.0):
        """
        Initialize the post-processor

        Args:
            e_per_mm: Extrusion per mm of travel
            feed_rate: Print speed (mm/min); 0 leaves the printer's current speed
            center_x: X of print area center
            center_y: Y of print area center
        """
        self.e_per_mm = e_per_mm
        self.feed_rate = feed_rate
        self.center_x = center_x
        self.center_y = center_y

    @classmethod
    def from_config(cls, config) -> 'DXFPrintPostProcessor':
        """Create a post-processor from a PrinterConfig"""
        return cls(e_per_mm=config.extrusion_per_mm,
                   feed_rate=config.feed_rate,
                   center_x=config.center_x,
                   center_y=config.center_y)

    def collect_polylines(self, entities: Iterable[Entity], notices: List[str]) -> List[Polyline]:
        """Pick out polylines; note every SPLINE, ignore everything else"""
        polylines = []
        for entity in entities:
            if entity.kind is EntityKind.POLYLINE:
                polylines.append(list(entity.vertices))
            elif entity.kind is EntityKind.SPLINE:
                print(SPLINE_NOTICE)
                notices.append(SPLINE_NOTICE)
        return polylines

    def generate_gcode(self, entities: Iterable[Entity], out: IO[str]) -> ConversionResult:
        """
        Convert entities to G-code, writing lines to `out`.

        Polylines are translated in place so the part is centered on the print
        area, then printed in entity order with one extruder state for the run.

        Args:
            entities: Decoded drawing entities
            out: Text stream to write G-code to

        Returns:
            ConversionResult with the (untranslated) bounding box and counts
        """
        notices = []
        polylines = self.collect_polylines(entities, notices)
        bounds = compute_bounds(polylines)

        if bounds.is_empty:
            print("Warning: No polylines found - nothing to center, output will contain no moves")
        shift = compute_shift(bounds, self.center_x, self.center_y)

        if self.e_per_mm < 0:
            print(f"Warning: Negative extrusion per mm ({self.e_per_mm}) will retract filament while printing")

        for line in PREAMBLE:
            out.write(line + '\n')

        if self.feed_rate > 0:
            out.write(format_feed_rate(self.feed_rate) + '\n')

        motion = MotionGenerator(self.e_per_mm)
        num_commands = 0
        for polyline in polylines:
            translate(polyline, shift)
            for move in motion.extrude_polyline(polyline):
                out.write(format_command(move) + '\n')
                num_commands += 1

        return ConversionResult(bounds=bounds,
                                shift=shift,
                                num_polylines=len(polylines),
                                num_commands=num_commands,
                                num_unsupported=len(notices),
                                total_extrusion=motion.total_extrusion,
                                notices=notices)

    def print_summary(self, result: ConversionResult):
        """Print bounds and totals for the operator"""
        print("PRINT INFO:")
        bounds = result.bounds
        if bounds.is_empty:
            print("  No printable geometry found (no polylines)")
        else:
            print(f"X min: {bounds.min.x:f}; X max: {bounds.max.x:f}")
            print(f"Y min: {bounds.min.y:f}; Y max: {bounds.max.y:f}")
            print(f"Z min: {bounds.min.z:f}; Z max: {bounds.max.z:f}")
        print(f"Polylines: {result.num_polylines}, moves: {result.num_commands}")
        print(f"Total extrusion: {result.total_extrusion:f}")
        if result.num_unsupported:
            print(f"Skipped {result.num_unsupported} unsupported SPLINE(s)")
