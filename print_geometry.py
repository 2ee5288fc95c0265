"""
Geometry helpers for the DXF print post-processor.

Points, polylines and bounding boxes, plus the centering math used to place
a part in the middle of the print area.
"""

import math
from typing import Iterable, List, NamedTuple


class Point(NamedTuple):
    """A 3D point (mm). Arithmetic is component-wise."""
    x: float
    y: float
    z: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> 'Point':
        return Point(self.x * factor, self.y * factor, self.z * factor)


ORIGIN = Point(0.0, 0.0, 0.0)

# Ordered vertex list - order is the traversal direction
Polyline = List[Point]


def distance(a: Point, b: Point) -> float:
    """Calculate 3D Euclidean distance between two points"""
    return math.sqrt((b.x - a.x)**2 + (b.y - a.y)**2 + (b.z - a.z)**2)


def translate(polyline: Polyline, shift: Point) -> None:
    """Shift every point of the polyline in place, keeping vertex order."""
    for i, point in enumerate(polyline):
        polyline[i] = point + shift


class BoundingBox:
    """
    Axis-aligned bounding box built by folding points into it.

    Starts inverted (min=+inf, max=-inf) so the first folded point sets both
    corners. A box that has never seen a point is empty and has no center.
    """

    def __init__(self):
        self.min = Point(math.inf, math.inf, math.inf)
        self.max = Point(-math.inf, -math.inf, -math.inf)
        self.num_points = 0

    @property
    def is_empty(self) -> bool:
        return self.num_points == 0

    def fold(self, point: Point) -> None:
        """Grow the box to include a point"""
        self.min = Point(min(self.min.x, point.x),
                         min(self.min.y, point.y),
                         min(self.min.z, point.z))
        self.max = Point(max(self.max.x, point.x),
                         max(self.max.y, point.y),
                         max(self.max.z, point.z))
        self.num_points += 1

    def fold_polyline(self, polyline: Iterable[Point]) -> None:
        for point in polyline:
            self.fold(point)

    def center(self) -> Point:
        if self.is_empty:
            raise ValueError("Empty bounding box has no center")
        return Point((self.min.x + self.max.x) / 2,
                     (self.min.y + self.max.y) / 2,
                     (self.min.z + self.max.z) / 2)

    def __repr__(self):
        if self.is_empty:
            return "BoundingBox(empty)"
        return f"BoundingBox(min={tuple(self.min)}, max={tuple(self.max)})"


# =============================================================================
# BOUNDS & CENTERING
# =============================================================================

def compute_bounds(polylines: Iterable[Polyline]) -> BoundingBox:
    """Fold every point of every polyline into one bounding box"""
    bounds = BoundingBox()
    for polyline in polylines:
        bounds.fold_polyline(polyline)
    return bounds


def compute_shift(bounds: BoundingBox, center_x: float = 0.0, center_y: float = 0.0) -> Point:
    """
    Calculate the translation that centers the XY footprint on the print area.

    Z is never shifted - it is the build height.

    Args:
        bounds: Bounding box of all geometry
        center_x: X of print area center
        center_y: Y of print area center

    Returns:
        Shift vector, or the zero vector if the box is empty
    """
    if bounds.is_empty:
        return ORIGIN
    return Point(center_x - (bounds.max.x + bounds.min.x) / 2,
                 center_y - (bounds.max.y + bounds.min.y) / 2,
                 0.0)
