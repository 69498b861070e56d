"""Bezier curve primitives.

Three curve variants make up a closed family:

- Line: order 1, two control points
- Quadratic: order 2, three control points
- Cubic: order 3, four control points

All of them are immutable values. Derived properties (bounding box,
derivative, length) are pure functions of the control points. Code that needs
to treat the variants differently checks `order`, which is fixed per class.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from bezierbool.domain.box import BoundingBox
from bezierbool.domain.point import Point
from bezierbool.exceptions import CurveError
from bezierbool.utils.roots import angle, clamp, droots

if TYPE_CHECKING:
    from fontTools.misc.transform import Transform

# 5-point Gauss-Legendre rule on [-1, 1].
_GAUSS_ABSCISSAE = (
    0.0,
    -0.5384693101056831,
    0.5384693101056831,
    -0.9061798459386640,
    0.9061798459386640,
)
_GAUSS_WEIGHTS = (
    0.5688888888888889,
    0.4786286704993665,
    0.4786286704993665,
    0.2369268850561891,
    0.2369268850561891,
)
_LENGTH_INTERVALS = 8
_PROJECTION_SAMPLES = 64


@dataclass(frozen=True, slots=True, order=True)
class Intersection:
    """Parameters of a meeting point of two curves.

    Ordered lexicographically on (t1, t2).

    Attributes:
        t1: Parameter on the first curve, in [0, 1]
        t2: Parameter on the second curve, in [0, 1]
    """

    t1: float
    t2: float

    def swapped(self) -> "Intersection":
        """The same meeting point seen from the other curve."""
        return Intersection(self.t2, self.t1)


class BezierCurve:
    """Behaviour shared by every curve variant.

    Subclasses are frozen dataclasses that provide `points` and may override
    evaluation with closed-form expressions.
    """

    __slots__ = ()

    order: ClassVar[int] = 0

    @property
    def points(self) -> tuple[Point, ...]:
        raise NotImplementedError

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def point_at(self, t: float) -> Point:
        """Evaluate the curve with de Casteljau's algorithm."""
        points = list(self.points)
        while len(points) > 1:
            points = [points[i].lerp(points[i + 1], t) for i in range(len(points) - 1)]
        return points[0]

    def derivative(self, t: float) -> Point:
        """First derivative with respect to t."""
        hodograph = self._hodograph()
        while len(hodograph) > 1:
            hodograph = [
                hodograph[i].lerp(hodograph[i + 1], t) for i in range(len(hodograph) - 1)
            ]
        return hodograph[0]

    def _hodograph(self) -> list[Point]:
        points = self.points
        n = self.order
        return [(points[i + 1] - points[i]) * n for i in range(n)]

    def normal(self, t: float) -> Point:
        """Unit normal, the derivative rotated by +90 degrees.

        When the derivative vanishes (coincident control points at an end) the
        direction towards the nearest distinct control point is used instead.
        """
        d = self.derivative(t)
        if d.x == 0.0 and d.y == 0.0:
            d = self._fallback_direction(t)
        return d.perpendicular().normalized()

    def _fallback_direction(self, t: float) -> Point:
        points = self.points
        if t <= 0.5:
            for p in points[1:]:
                if p != points[0]:
                    return p - points[0]
        else:
            for p in reversed(points[:-1]):
                if p != points[-1]:
                    return points[-1] - p
        return points[-1] - points[0]

    def split_at(self, t: float) -> tuple["Curve", "Curve"]:
        """Split into two curves at t.

        Returns:
            Tuple of (left, right) curves covering [0, t] and [t, 1]
        """
        points = list(self.points)
        left = [points[0]]
        right = [points[-1]]
        while len(points) > 1:
            points = [points[i].lerp(points[i + 1], t) for i in range(len(points) - 1)]
            left.append(points[0])
            right.append(points[-1])
        right.reverse()
        return curve_from_points(left), curve_from_points(right)

    def split(self, t1: float, t2: float) -> "Curve":
        """Portion of the curve between two parameters.

        The endpoints of the result are exactly `point_at(t1)` and
        `point_at(t2)`. When t1 > t2 the portion runs backwards.

        Args:
            t1: Parameter where the result starts
            t2: Parameter where the result ends

        Returns:
            Curve of the same order
        """
        if t1 == 0.0 and t2 == 1.0:
            return self  # type: ignore[return-value]
        start = self.point_at(t1)
        end = self.point_at(t2)
        k = (t2 - t1) / self.order
        if self.order == 1:
            return Line(start, end)
        if self.order == 2:
            return Quadratic(start, start + self.derivative(t1) * k, end)
        return Cubic(
            start,
            start + self.derivative(t1) * k,
            end - self.derivative(t2) * k,
            end,
        )

    def reversed(self) -> "Curve":
        return curve_from_points(tuple(reversed(self.points)))

    def transformed(self, transform: "Transform") -> "Curve":
        """Curve of the same order with every control point transformed."""
        return curve_from_points([point.transformed(transform) for point in self.points])

    def extrema(self) -> list[float]:
        """Parameters in (0, 1) where x or y reaches a local extremum."""
        if self.order < 2:
            return []
        hodograph = self._hodograph()
        result: set[float] = set()
        for coordinates in ([h.x for h in hodograph], [h.y for h in hodograph]):
            for t in droots(*coordinates):
                if 0.0 < t < 1.0:
                    result.add(t)
        return sorted(result)

    @property
    def bounding_box(self) -> BoundingBox:
        """Tight axis-aligned bounding box of the curve."""
        points = self.points
        box = BoundingBox.from_points((points[0], points[-1]))
        if all(box.contains(p) for p in points[1:-1]):
            return box
        for t in self.extrema():
            box = box.union_point(self.point_at(t))
        return box

    @property
    def bounding_box_of_points(self) -> BoundingBox:
        """Box of the control polygon."""
        return BoundingBox.from_points(self.points)

    @property
    def simple(self) -> bool:
        """Whether the curve bends one way and turns less than 60 degrees."""
        return self._end_normals_agree()

    def _end_normals_agree(self) -> bool:
        n1 = self.normal(0.0)
        n2 = self.normal(1.0)
        s = clamp(n1.dot(n2), -1.0, 1.0)
        return abs(math.acos(s)) < math.pi / 3.0

    def length(self) -> float:
        """Arc length by composite Gauss-Legendre quadrature."""
        total = 0.0
        step = 1.0 / _LENGTH_INTERVALS
        for i in range(_LENGTH_INTERVALS):
            mid = (i + 0.5) * step
            for x, w in zip(_GAUSS_ABSCISSAE, _GAUSS_WEIGHTS):
                total += w * self.derivative(mid + 0.5 * step * x).length
        return 0.5 * step * total

    def project(self, point: Point) -> tuple[Point, float]:
        """Closest point of the curve.

        Samples the curve and refines the best sample by a shrinking local
        search.

        Args:
            point: Query point

        Returns:
            Tuple of (closest point, parameter)
        """
        best_t = 0.0
        best_distance = math.inf
        for i in range(_PROJECTION_SAMPLES + 1):
            t = i / _PROJECTION_SAMPLES
            distance = (self.point_at(t) - point).length_squared
            if distance < best_distance:
                best_t, best_distance = t, distance
        step = 1.0 / _PROJECTION_SAMPLES
        while step > 1e-12:
            improved = False
            for candidate in (best_t - step, best_t + step):
                if 0.0 <= candidate <= 1.0:
                    distance = (self.point_at(candidate) - point).length_squared
                    if distance < best_distance:
                        best_t, best_distance = candidate, distance
                        improved = True
            if not improved:
                step *= 0.5
        return self.point_at(best_t), best_t

    def self_intersections(self) -> list[Intersection]:
        """Points where the curve crosses itself; only cubics can."""
        return []


@dataclass(frozen=True, slots=True)
class Line(BezierCurve):
    """Straight line segment."""

    p0: Point
    p1: Point

    order: ClassVar[int] = 1

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p0, self.p1)

    def point_at(self, t: float) -> Point:
        if t == 1.0:
            return self.p1
        return self.p0.lerp(self.p1, t)

    def derivative(self, t: float) -> Point:  # noqa: ARG002
        return self.p1 - self.p0

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points((self.p0, self.p1))

    @property
    def simple(self) -> bool:
        return True

    def length(self) -> float:
        return self.p0.distance_to(self.p1)

    def project(self, point: Point) -> tuple[Point, float]:
        direction = self.p1 - self.p0
        length_squared = direction.length_squared
        if length_squared == 0.0:
            return self.p0, 0.0
        t = clamp((point - self.p0).dot(direction) / length_squared, 0.0, 1.0)
        return self.point_at(t), t


@dataclass(frozen=True, slots=True)
class Quadratic(BezierCurve):
    """Quadratic Bezier curve."""

    p0: Point
    p1: Point
    p2: Point

    order: ClassVar[int] = 2

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p0, self.p1, self.p2)

    def point_at(self, t: float) -> Point:
        if t == 0.0:
            return self.p0
        if t == 1.0:
            return self.p2
        mt = 1.0 - t
        a = mt * mt
        b = 2.0 * mt * t
        c = t * t
        return Point(
            a * self.p0.x + b * self.p1.x + c * self.p2.x,
            a * self.p0.y + b * self.p1.y + c * self.p2.y,
        )

    def derivative(self, t: float) -> Point:
        mt = 1.0 - t
        return Point(
            2.0 * (mt * (self.p1.x - self.p0.x) + t * (self.p2.x - self.p1.x)),
            2.0 * (mt * (self.p1.y - self.p0.y) + t * (self.p2.y - self.p1.y)),
        )


@dataclass(frozen=True, slots=True)
class Cubic(BezierCurve):
    """Cubic Bezier curve."""

    p0: Point
    p1: Point
    p2: Point
    p3: Point

    order: ClassVar[int] = 3

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p0, self.p1, self.p2, self.p3)

    def point_at(self, t: float) -> Point:
        if t == 0.0:
            return self.p0
        if t == 1.0:
            return self.p3
        mt = 1.0 - t
        a = mt * mt * mt
        b = 3.0 * mt * mt * t
        c = 3.0 * mt * t * t
        d = t * t * t
        return Point(
            a * self.p0.x + b * self.p1.x + c * self.p2.x + d * self.p3.x,
            a * self.p0.y + b * self.p1.y + c * self.p2.y + d * self.p3.y,
        )

    def derivative(self, t: float) -> Point:
        mt = 1.0 - t
        a = mt * mt
        b = 2.0 * mt * t
        c = t * t
        d1 = self.p1 - self.p0
        d2 = self.p2 - self.p1
        d3 = self.p3 - self.p2
        return Point(
            3.0 * (a * d1.x + b * d2.x + c * d3.x),
            3.0 * (a * d1.y + b * d2.y + c * d3.y),
        )

    @property
    def simple(self) -> bool:
        if self.p0 == self.p1 == self.p2 == self.p3:
            return True
        a1 = angle(self.p0, self.p3, self.p1)
        a2 = angle(self.p0, self.p3, self.p2)
        if (a1 > 0 and a2 < 0) or (a1 < 0 and a2 > 0):
            return False
        return self._end_normals_agree()

    def self_intersections(self) -> list[Intersection]:
        """Loop point of the cubic, if it has one.

        Maps the curve to canonical form (first three control points sent to
        (0, 0), (0, 1) and (1, 1)) and classifies the position of the last
        point.

        Returns:
            A list with at most one Intersection, t1 < t2
        """
        d1 = self.p1 - self.p0
        d2 = self.p2 - self.p0
        a, c = d1.x, d1.y
        b, d = d2.x, d2.y
        det = a * d - b * c
        if det == 0.0:
            return []
        d3 = self.p3 - self.p0
        x = (-c * d3.x + a * d3.y) / det
        y = ((d - c) * d3.x + (a - b) * d3.y) / det
        if x >= 1.0:
            return []
        x_squared = x * x
        cusp_edge = -3.0 * x_squared + 6.0 * x - 12.0 * y + 9.0
        if cusp_edge <= 0.0:
            return []
        if x <= 0.0:
            if y < (-x_squared + 3.0 * x) / 3.0:
                return []
        elif y < (math.sqrt(3.0 * (4.0 * x - x_squared)) - x) / 2.0:
            return []
        radical = math.sqrt(cusp_edge)
        denominator = 3.0 - x - y
        t1 = 0.5 * (3.0 - x - radical) / denominator
        t2 = 0.5 * (3.0 - x + radical) / denominator
        return [Intersection(clamp(t1, 0.0, 1.0), clamp(t2, 0.0, 1.0))]


Curve = Line | Quadratic | Cubic


def curve_from_points(points: Sequence[Point]) -> Curve:
    """Build the curve variant matching the number of control points.

    Args:
        points: Two, three or four control points

    Returns:
        Line, Quadratic or Cubic

    Raises:
        CurveError: If the point count is not 2, 3 or 4
    """
    count = len(points)
    if count == 2:
        return Line(points[0], points[1])
    if count == 3:
        return Quadratic(points[0], points[1], points[2])
    if count == 4:
        return Cubic(points[0], points[1], points[2], points[3])
    raise CurveError(count)
