"""
Extrusion motion generation.

Turns polylines into travel/extrude moves for a printer running in absolute
extrusion mode (M82), and formats those moves as G-code lines.
"""

from dataclasses import dataclass
from typing import List, Union

from print_geometry import ORIGIN, Point, Polyline, distance


# Standard setup commands at the top of every program
PREAMBLE = [
    "G21 ;metric values",
    "G90 ;absolute positioning",
    "M82 ;set extruder to absolute mode",
]


@dataclass(frozen=True)
class TravelMove:
    """Move without depositing material"""
    to: Point


@dataclass(frozen=True)
class ExtrudeMove:
    """Move while extruding; extrusion is the running total for the whole print"""
    to: Point
    extrusion: float


MotionCommand = Union[TravelMove, ExtrudeMove]


@dataclass
class ExtruderState:
    current_position: Point = ORIGIN
    cumulative_extrusion: float = 0.0


def format_command(command: MotionCommand) -> str:
    """Format a move as a G-code line (fixed-point, no scientific notation)"""
    p = command.to
    if isinstance(command, ExtrudeMove):
        return f"G1 X{p.x:.6f} Y{p.y:.6f} Z{p.z:.6f} E{command.extrusion:.6f}"
    return f"G1 X{p.x:.6f} Y{p.y:.6f} Z{p.z:.6f}"


def format_feed_rate(feed_rate: float) -> str:
    return f"G1 F{feed_rate:.6f}"


class MotionGenerator:
    def __init__(self, e_per_mm: float = 1.0, state: ExtruderState = None):
        """
        Initialize the motion generator for one print

        Args:
            e_per_mm: Extrusion per mm of travel
            state: Extruder state to continue from (a fresh one if None)
        """
        self.e_per_mm = e_per_mm
        self.state = state if state is not None else ExtruderState()

    @property
    def total_extrusion(self) -> float:
        return self.state.cumulative_extrusion

    def travel_to(self, to: Point) -> TravelMove:
        self.state.current_position = to
        return TravelMove(to)

    def extrude_to(self, to: Point) -> ExtrudeMove:
        self.state.cumulative_extrusion += distance(self.state.current_position, to) * self.e_per_mm
        self.state.current_position = to
        return ExtrudeMove(to, self.state.cumulative_extrusion)

    def extrude_polyline(self, polyline: Polyline) -> List[MotionCommand]:
        """
        Generate moves for one polyline: travel to its start, then extrude
        along the remaining vertices.

        If the last vertex is lower than the first one, the polyline is
        reversed in place so that we always build upwards. Polylines with
        equal end heights keep their order.
        """
        if not polyline:
            return []

        if polyline[0].z > polyline[-1].z:
            polyline.reverse()

        moves = [self.travel_to(polyline[0])]
        for point in polyline[1:]:
            moves.append(self.extrude_to(point))
        return moves
