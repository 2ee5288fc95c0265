#!/usr/bin/env python3
"""
gcode-verify - sanity checks for G-code produced by dxf-to-gcode

Re-reads a G-code file with pygcode and checks:
- units, positioning and extruder modes are set
- the extruder never runs backwards
- the part is centered on the print area
"""

import argparse
import sys

from pygcode import Line
from termcolor import colored


PASS = colored("PASS", "green")
FAIL = colored("FAIL", "red")
SKIP = colored("SKIP", "yellow")

REQUIRED_MODES = {
    ('G', 21): 'Metric units (G21)',
    ('G', 90): 'Absolute positioning (G90)',
    ('M', 82): 'Absolute extrusion (M82)',
}


def load_gcode_text(text):
    """Parse G-code text and return list of Line objects"""
    lines = []
    for line_num, line_text in enumerate(text.splitlines(), 1):
        try:
            lines.append(Line(line_text))
        except Exception as e:
            if line_text.strip() and not line_text.strip().startswith(';') and not line_text.strip().startswith('('):
                print(f"Warning: Could not parse line {line_num}: {line_text.strip()}")
                print(f"  Error: {e}")
    return lines


def load_gcode_file(gcode_file_path):
    """Load G-code file and return list of Line objects"""
    with open(gcode_file_path, "r") as f:
        return load_gcode_text(f.read())


def _words(line):
    if line.block and line.block.words:
        return line.block.words
    return []


def get_modes(gcode_lines):
    """Set of (letter, number) for every G and M word in the program"""
    modes = set()
    for line in gcode_lines:
        for word in _words(line):
            if word.letter in ('G', 'M'):
                modes.add((word.letter, int(word.value)))
    return modes


def get_extrusion_values(gcode_lines):
    """All E values, in program order"""
    values = []
    for line in gcode_lines:
        for word in _words(line):
            if word.letter == 'E':
                values.append(float(word.value))
    return values


def get_gcode_boundary(gcode_lines):
    """Extract the bounding box (min/max X, Y, Z) of all positioning moves"""
    bounds = {
        'X': {'min': None, 'max': None},
        'Y': {'min': None, 'max': None},
        'Z': {'min': None, 'max': None}
    }

    for line in gcode_lines:
        for word in _words(line):
            if word.letter in bounds:
                new_val = float(word.value)
                axis = bounds[word.letter]
                if axis['min'] is None or new_val < axis['min']:
                    axis['min'] = new_val
                if axis['max'] is None or new_val > axis['max']:
                    axis['max'] = new_val

    return bounds


def verify_modes(gcode_lines):
    print("Test: Verify Printer Modes")
    modes = get_modes(gcode_lines)

    all_passed = True
    for mode, description in REQUIRED_MODES.items():
        present = mode in modes
        print(f"\t{description} ---- {PASS if present else FAIL}")
        all_passed = all_passed and present
    return all_passed


def verify_extrusion(gcode_lines):
    print("\nTest: Verify Extrusion")
    values = get_extrusion_values(gcode_lines)

    decreases = [(i, a, b) for i, (a, b) in enumerate(zip(values, values[1:]), 1) if b < a]
    passed = not decreases
    print(f"\tExtrusion never decreases ---- {PASS if passed else FAIL}")
    if decreases:
        i, a, b = decreases[0]
        print(f"\t\tE{i}: {a:.6f} -> {b:.6f}")
    elif values:
        print(f"\t\tTotal extrusion: {values[-1]:.6f}")
    return passed


def verify_centering(gcode_lines, center_x=0.0, center_y=0.0, tolerance=1e-3):
    print("\nTest: Verify Print Centering")
    bounds = get_gcode_boundary(gcode_lines)

    if bounds['X']['min'] is None or bounds['Y']['min'] is None:
        print(f"\tXY center ---- {SKIP} (no moves)")
        return True

    mid_x = (bounds['X']['min'] + bounds['X']['max']) / 2
    mid_y = (bounds['Y']['min'] + bounds['Y']['max']) / 2
    passed = abs(mid_x - center_x) <= tolerance and abs(mid_y - center_y) <= tolerance

    print(f"\tXY center ---- {PASS if passed else FAIL}")
    print(f"\t\tCenter: ({mid_x:.4f}, {mid_y:.4f}), target: ({center_x:.4f}, {center_y:.4f})")
    for axis in ['X', 'Y', 'Z']:
        print(f"\t\t{axis}: [{bounds[axis]['min']:.4f}, {bounds[axis]['max']:.4f}]")
    return passed


def verify_gcode(gcode_lines, center_x=0.0, center_y=0.0, tolerance=1e-3):
    """Run every check; True if all passed"""
    modes_passed = verify_modes(gcode_lines)
    extrusion_passed = verify_extrusion(gcode_lines)
    centering_passed = verify_centering(gcode_lines, center_x, center_y, tolerance)

    all_passed = modes_passed and extrusion_passed and centering_passed
    print(f"\nOverall: {PASS if all_passed else FAIL}")
    return all_passed


def main(argv=None):
    parser = argparse.ArgumentParser(description='Verify G-code produced by dxf-to-gcode')
    parser.add_argument('gcode_file', help='G-code file to check')
    parser.add_argument('--center-x', type=float, default=0.0,
                        help='Expected X of print area center (default: 0)')
    parser.add_argument('--center-y', type=float, default=0.0,
                        help='Expected Y of print area center (default: 0)')
    parser.add_argument('--tolerance', type=float, default=1e-3,
                        help='Allowed centering error in mm (default: 0.001)')
    args = parser.parse_args(argv)

    try:
        gcode_lines = load_gcode_file(args.gcode_file)
    except IOError as e:
        print(f"Error: Could not open {args.gcode_file}: {e}", file=sys.stderr)
        return 1

    # Non-zero exit code indicates failure (for CI)
    return 0 if verify_gcode(gcode_lines, args.center_x, args.center_y, args.tolerance) else 1


if __name__ == "__main__":
    sys.exit(main())
