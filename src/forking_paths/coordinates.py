"""Points in scene and screen space.

Node positions are stored in scene coordinates. The viewport maps them to
screen coordinates with ``screen = scene * scale + offset``.
"""

from __future__ import annotations

from dataclasses import dataclass

ORIGIN_TOLERANCE = 0.0


@dataclass(frozen=True)
class Point:
    """Immutable 2D point.

    Attributes:
        x: X coordinate
        y: Y coordinate

    Example:
        >>> Point(10, 20) + Point(5, 5)
        Point(x=15, y=25)
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        """Add two points coordinate-wise."""
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        """Subtract two points coordinate-wise.

        Example:
            >>> Point(5, 10) - Point(2, 3)
            Point(x=3, y=7)
        """
        return Point(self.x - other.x, self.y - other.y)

    def shifted(self, dx: float = 0.0, dy: float = 0.0) -> Point:
        """Return a copy moved by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    def is_origin(self) -> bool:
        """True for the degenerate (0, 0) point some input backends emit."""
        return abs(self.x) <= ORIGIN_TOLERANCE and abs(self.y) <= ORIGIN_TOLERANCE

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


def overlaps(a: Point, b: Point, reach_x: float, reach_y: float) -> bool:
    """True when two node anchors are closer than the reach on both axes.

    Example:
        >>> overlaps(Point(0, 0), Point(100, 100), 320, 240)
        True
        >>> overlaps(Point(0, 0), Point(400, 0), 320, 240)
        False
    """
    return abs(a.x - b.x) < reach_x and abs(a.y - b.y) < reach_y
