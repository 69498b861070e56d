"""Two-dimensional point and vector type.

Points double as vectors: every curve, box and path in bezierbool is built
from them, so the arithmetic here is kept small and allocation-light.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fontTools.misc.transform import Transform


@dataclass(frozen=True, slots=True)
class Point:
    """A point (or vector) in the plane.

    Immutable and hashable so it can be shared between curves, vertices and
    output paths without copying.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> "Point":
        return Point(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def dot(self, other: "Point") -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """Z component of the cross product with another vector.

        Positive when `other` lies counter-clockwise of this vector.
        """
        return self.x * other.y - self.y * other.x

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def perpendicular(self) -> "Point":
        """Vector rotated by +90 degrees."""
        return Point(-self.y, self.x)

    def normalized(self) -> "Point":
        """Unit vector in the same direction.

        Returns:
            The normalized vector, or the zero vector when this vector has no
            length.
        """
        length = self.length
        if length == 0.0:
            return Point(0.0, 0.0)
        return Point(self.x / length, self.y / length)

    def lerp(self, other: "Point", t: float) -> "Point":
        """Linear interpolation towards `other`.

        Examples:
            >>> Point(0.0, 0.0).lerp(Point(2.0, 4.0), 0.5)
            Point(x=1.0, y=2.0)
        """
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def transformed(self, transform: "Transform") -> "Point":
        """Apply an affine transform.

        Examples:
            >>> from fontTools.misc.transform import Transform
            >>> Point(1.0, 0.0).transformed(Transform(0, 1, -1, 0, -1, 1))
            Point(x=-1.0, y=2.0)
        """
        x, y = transform.transformPoint((self.x, self.y))
        return Point(x, y)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))
