"""Axis-aligned bounding boxes.

BoundingBox is the leaf utility of the library: curves report one, the
bounding box hierarchy is a tree of them, and the intersection engine prunes
with `overlaps`.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from bezierbool.domain.point import Point


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned box spanned by two corners.

    The empty box has an infinite minimum and a negative infinite maximum so
    that it is the identity element of `union`.

    Attributes:
        min: Corner with the smallest coordinates
        max: Corner with the largest coordinates
    """

    min: Point
    max: Point

    @classmethod
    def empty(cls) -> "BoundingBox":
        """Create the empty box."""
        return cls(Point(math.inf, math.inf), Point(-math.inf, -math.inf))

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BoundingBox":
        """Smallest box containing all points.

        Args:
            points: Points to enclose

        Returns:
            Enclosing box, or the empty box for no points

        Examples:
            >>> box = BoundingBox.from_points([Point(0, 1), Point(2, -1)])
            >>> box.min, box.max
            (Point(x=0, y=-1), Point(x=2, y=1))
        """
        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for p in points:
            if p.x < min_x:
                min_x = p.x
            if p.x > max_x:
                max_x = p.x
            if p.y < min_y:
                min_y = p.y
            if p.y > max_y:
                max_y = p.y
        return cls(Point(min_x, min_y), Point(max_x, max_y))

    @property
    def is_empty(self) -> bool:
        return self.min.x > self.max.x or self.min.y > self.max.y

    @property
    def size(self) -> Point:
        """Width and height, clamped at zero for empty boxes."""
        return Point(max(self.max.x - self.min.x, 0.0), max(self.max.y - self.min.y, 0.0))

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    @property
    def area(self) -> float:
        size = self.size
        return size.x * size.y

    @property
    def center(self) -> Point:
        return Point(0.5 * (self.min.x + self.max.x), 0.5 * (self.min.y + self.max.y))

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box containing both boxes."""
        return BoundingBox(
            Point(min(self.min.x, other.min.x), min(self.min.y, other.min.y)),
            Point(max(self.max.x, other.max.x), max(self.max.y, other.max.y)),
        )

    def union_point(self, point: Point) -> "BoundingBox":
        """Smallest box containing this box and a point."""
        return BoundingBox(
            Point(min(self.min.x, point.x), min(self.min.y, point.y)),
            Point(max(self.max.x, point.x), max(self.max.y, point.y)),
        )

    def intersection(self, other: "BoundingBox") -> "BoundingBox":
        """Overlap of the two boxes.

        Returns:
            The shared region, or the empty box when the boxes are disjoint
        """
        box = BoundingBox(
            Point(max(self.min.x, other.min.x), max(self.min.y, other.min.y)),
            Point(min(self.max.x, other.max.x), min(self.max.y, other.max.y)),
        )
        if box.is_empty:
            return BoundingBox.empty()
        return box

    def contains(self, point: Point) -> bool:
        """Inclusive containment test."""
        return (
            self.min.x <= point.x <= self.max.x
            and self.min.y <= point.y <= self.max.y
        )

    def overlaps(self, other: "BoundingBox") -> bool:
        """Inclusive overlap test; boxes touching along an edge overlap."""
        return (
            self.min.x <= other.max.x
            and self.min.y <= other.max.y
            and other.min.x <= self.max.x
            and other.min.y <= self.max.y
        )

    def lower_bound_of_distance(self, point: Point) -> float:
        """Distance from the point to the nearest point of the box.

        Zero when the point lies inside the box.
        """
        clamped_x = min(max(point.x, self.min.x), self.max.x)
        clamped_y = min(max(point.y, self.min.y), self.max.y)
        return math.hypot(point.x - clamped_x, point.y - clamped_y)

    def upper_bound_of_distance(self, point: Point) -> float:
        """Distance from the point to the farthest corner of the box."""
        dx = max((point.x - self.min.x) ** 2, (point.x - self.max.x) ** 2)
        dy = max((point.y - self.min.y) ** 2, (point.y - self.max.y) ** 2)
        return math.sqrt(dx + dy)
