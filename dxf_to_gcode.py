#!/usr/bin/env python3
"""
dxf-to-gcode - command line front end for the DXF print post-processor

Usage: dxf-to-gcode -E 1.2 file.dxf
"""

# Standard library
import argparse
import sys

# Third-party
import ezdxf

# Local modules
from dxf_print_postprocessor import DXFPrintPostProcessor
from dxf_reader import read_entities
from printer_config import CONFIG_TEMPLATE, PrinterConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Convert DXF polylines to 3D printer G-code')
    parser.add_argument('input_dxf', nargs='?', help='Input DXF file')
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Output G-code file (default: <input>.gcode)')
    parser.add_argument('-E', dest='e_per_mm', type=float, default=None,
                        help='Extrusion per mm of travel (default: 1.0)')
    parser.add_argument('-F', dest='feed_rate', type=float, default=None,
                        help='Speed in mm/min (default: not set)')
    parser.add_argument('--center-x', type=float, default=None,
                        help='X of print area center (default: 0)')
    parser.add_argument('--center-y', type=float, default=None,
                        help='Y of print area center (default: 0)')
    parser.add_argument('--config', type=str, default=None,
                        help='Printer config YAML file')
    parser.add_argument('--profile', type=str, default=None,
                        help='Printer profile from the config file (default: config default_profile)')
    parser.add_argument('--write-config', type=str, metavar='PATH', default=None,
                        help='Write a template printer config to PATH and exit')
    return parser


def load_config(args, parser) -> PrinterConfig:
    """Load the printer config named on the command line (defaults if none)"""
    try:
        if args.config:
            return PrinterConfig.from_file(args.config, args.profile)
        return PrinterConfig(profile=args.profile)
    except IOError as e:
        parser.exit(1, f"Error: Could not read config {args.config}: {e}\n")
    except ValueError as e:
        parser.error(str(e))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.write_config:
        try:
            with open(args.write_config, 'w') as f:
                f.write(CONFIG_TEMPLATE)
        except IOError as e:
            parser.exit(1, f"Error: Could not write config {args.write_config}: {e}\n")
        print(f"Config template written to {args.write_config}")
        return 0

    if not args.input_dxf:
        parser.error("input_dxf is required")

    config = load_config(args, parser)
    print(f"Printer profile: {config.profile} ({config.printer_name})")
    try:
        pp = DXFPrintPostProcessor.from_config(config)
    except ValueError as e:
        parser.error(str(e))

    # Command-line values override the config
    if args.e_per_mm is not None:
        pp.e_per_mm = args.e_per_mm
    if args.feed_rate is not None:
        pp.feed_rate = args.feed_rate
    if args.center_x is not None:
        pp.center_x = args.center_x
    if args.center_y is not None:
        pp.center_y = args.center_y

    # Read the whole drawing before creating the output file
    try:
        entities = read_entities(args.input_dxf)
    except IOError as e:
        print(f"Error: Could not open {args.input_dxf}: {e}", file=sys.stderr)
        return 1
    except ezdxf.DXFStructureError as e:
        print(f"Error: Invalid DXF file {args.input_dxf}: {e}", file=sys.stderr)
        return 1

    output_path = args.output or args.input_dxf + '.gcode'
    try:
        with open(output_path, 'w') as f:
            result = pp.generate_gcode(entities, f)
    except IOError as e:
        print(f"Error: Could not write {output_path}: {e}", file=sys.stderr)
        return 1

    print(f"G-code written to {output_path}")
    pp.print_summary(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
