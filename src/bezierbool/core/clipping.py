"""Fat-line Bezier clipping.

For a pair of curves A and B, the control points of A are bounded by a band
(the fat line) around an orientation line through A. B's control points,
measured as signed distances from that line and plotted against their
parameter positions i/n, form a polygon whose convex hull must cross the band
wherever B can meet A. The parameter range of B outside the band is cut away,
and the roles of A and B swap on every step.

When a step fails to cut at least 20 percent of the domain, the curve with
the larger remaining domain is bisected and both halves are processed
recursively. The number of recursive calls and the number of steps per call
are both capped, so pathological inputs (for instance overlapping curves)
terminate with a best-effort answer.
"""

import logging
import math
from dataclasses import dataclass

from bezierbool.core.hull import convex_hull
from bezierbool.domain.curve import Curve, Intersection
from bezierbool.domain.point import Point

logger = logging.getLogger(__name__)

MIN_PRECISION = 1e-8
# Clip steps keeping more than this fraction of the domain trigger bisection.
MIN_CLIPPED_SIZE_THRESHOLD = 0.8
NEAR_EPSILON = 1e-6


@dataclass(frozen=True, slots=True)
class Interval:
    """Closed parameter interval [start, end]."""

    start: float
    end: float

    @property
    def middle(self) -> float:
        return 0.5 * (self.start + self.end)

    @property
    def extent(self) -> float:
        return self.end - self.start

    def value_at(self, t: float) -> float:
        return t * self.end + (1.0 - t) * self.start

    def map_to(self, sub: "Interval") -> "Interval":
        """Map a sub-interval of [0, 1] into this interval."""
        a = self.value_at(sub.start)
        b = self.value_at(sub.end)
        return Interval(a, b) if a <= b else Interval(b, a)

    def expanded_to(self, value: float) -> "Interval":
        start, end = self.start, self.end
        if value < start:
            start = value
        if value > end:
            end = value
        return Interval(start, end)


UNIT_INTERVAL = Interval(0.0, 1.0)
H1_INTERVAL = Interval(0.0, 0.5)
H2_INTERVAL = Interval(math.nextafter(0.5, 1.0), 1.0)


@dataclass(frozen=True, slots=True)
class _OrientationLine:
    """Normalized line; `signed_distance` is exact Euclidean distance."""

    start: Point
    end: Point

    @classmethod
    def through(cls, start: Point, end: Point) -> "_OrientationLine":
        # Start from the end nearer the origin to limit cancellation.
        if end.length_squared < start.length_squared:
            start, end = end, start
        return cls(start, start + (end - start).normalized())

    def signed_distance(self, point: Point) -> float:
        v = (self.end - self.start).perpendicular()
        return v.x * point.x + v.y * point.y + self.start.cross(self.end)


def _are_near(a: Point, b: Point, epsilon: float = NEAR_EPSILON) -> bool:
    return a.distance_to(b) <= epsilon


def is_constant(curve: Curve, precision: float) -> bool:
    """Whether every control point lies within `precision` of the start."""
    start = curve.start
    return all(_are_near(point, start, precision) for point in curve.points[1:])


def _pick_orientation_line(curve: Curve, precision: float) -> _OrientationLine:
    points = curve.points
    i = curve.order
    while i > 0 and _are_near(points[0], points[i], precision):
        i -= 1
    return _OrientationLine.through(points[0], points[i])


def _orthogonal_orientation_line(curve: Curve, point: Point) -> _OrientationLine:
    return _OrientationLine.through(point, point + (curve.end - curve.start).perpendicular())


def _fat_line_bounds(curve: Curve, line: _OrientationLine) -> Interval:
    bound = Interval(0.0, 0.0)
    for point in curve.points:
        bound = bound.expanded_to(line.signed_distance(point))
    return bound


def _crossing_x(p1: Point, p2: Point, y: float) -> float:
    # Only called on edges that cross the level y, so p1.y != p2.y.
    s = (y - p1.y) / (p2.y - p1.y)
    return (p2.x - p1.x) * s + p1.x


def _clip_interval(curve: Curve, line: _OrientationLine, bound: Interval) -> Interval | None:
    n = curve.order
    distances = [Point(i / n, line.signed_distance(p)) for i, p in enumerate(curve.points)]
    hull = convex_hull(distances)

    tmin, tmax = 1.0, 0.0

    def include(t: float) -> None:
        nonlocal tmin, tmax
        tmin = min(tmin, t)
        tmax = max(tmax, t)

    below = hull[0].y < bound.start
    above = hull[0].y > bound.end
    if not below and not above:
        include(hull[0].x)

    # Vertices inside the band, then crossings of both band edges along
    # every hull edge including the closing one.
    count = len(hull)
    for i in range(1, count + 1):
        previous, current = hull[i - 1], hull[i % count]
        now_below = current.y < bound.start
        now_above = current.y > bound.end
        if i < count and not now_below and not now_above:
            include(current.x)
        if now_below != below:
            include(_crossing_x(previous, current, bound.start))
            below = now_below
        if now_above != above:
            include(_crossing_x(previous, current, bound.end))
            above = now_above

    if tmin == 1.0 and tmax == 0.0:
        return None
    return Interval(tmin, tmax)


def _clip(a: Curve, b: Curve, precision: float) -> Interval | None:
    """Parameter range of `b` that may still meet `a`, or None if it cannot."""
    if is_constant(a, precision):
        line = _orthogonal_orientation_line(b, a.start.lerp(a.end, 0.5))
    else:
        line = _pick_orientation_line(a, precision)
    return _clip_interval(b, line, _fat_line_bounds(a, line))


def _portion(curve: Curve, interval: Interval) -> Curve:
    return curve.split(interval.start, interval.end)


class _Clipper:
    def __init__(self, precision: float, max_calls: int, max_iterations: int) -> None:
        self.precision = precision
        self.max_calls = max_calls
        self.max_iterations = max_iterations
        self.calls = 0

    def iterate(
        self,
        doms_a: list[Interval],
        doms_b: list[Interval],
        a: Curve,
        b: Curve,
        dom_a: Interval,
        dom_b: Interval,
    ) -> None:
        self.calls += 1
        if self.calls > self.max_calls:
            if self.calls == self.max_calls + 1:
                logger.debug("Clipping call limit of %d reached", self.max_calls)
            return

        precision = self.precision
        if is_constant(a, precision) and is_constant(b, precision):
            m1 = a.start.lerp(a.end, 0.5)
            m2 = b.start.lerp(b.end, 0.5)
            if _are_near(m1, m2):
                doms_a.append(dom_a)
                doms_b.append(dom_b)
            return

        # Index 0 follows A and index 1 follows B; c1 is the clipping curve.
        curves = [a, b]
        doms = [dom_a, dom_b]
        c1, c2 = 0, 1
        iteration = 1
        while iteration < self.max_iterations and (
            doms[0].extent >= precision or doms[1].extent >= precision
        ):
            iteration += 1
            dom = _clip(curves[c1], curves[c2], precision)
            if dom is None:
                return

            doms[c2] = doms[c2].map_to(dom)
            curves[c2] = _portion(curves[c2], dom)

            if is_constant(curves[c2], precision) and is_constant(curves[c1], precision):
                m1 = curves[c1].start.lerp(curves[c1].end, 0.5)
                m2 = curves[c2].start.lerp(curves[c2].end, 0.5)
                if _are_near(m1, m2):
                    break
                return

            if dom.extent > MIN_CLIPPED_SIZE_THRESHOLD:
                if doms[0].extent > doms[1].extent:
                    self._bisect(doms_a, doms_b, curves[0], curves[1], doms[0], doms[1])
                else:
                    self._bisect(doms_b, doms_a, curves[1], curves[0], doms[1], doms[0])
                return

            c1, c2 = c2, c1

        doms_a.append(doms[0])
        doms_b.append(doms[1])

    def _bisect(
        self,
        doms_split: list[Interval],
        doms_other: list[Interval],
        split: Curve,
        other: Curve,
        dom_split: Interval,
        dom_other: Interval,
    ) -> None:
        for half in (H1_INTERVAL, H2_INTERVAL):
            self.iterate(
                doms_split,
                doms_other,
                _portion(split, half),
                other,
                dom_split.map_to(half),
                dom_other,
            )


def clip_intersections(
    a: Curve,
    b: Curve,
    precision: float = 1e-6,
    max_calls: int = 100,
    max_iterations: int = 100,
) -> list[Intersection]:
    """Intersect two curves with fat-line clipping.

    Args:
        a: First curve
        b: Second curve
        precision: Domain size at which a solution is accepted; values below
            `MIN_PRECISION` are raised to it
        max_calls: Cap on recursive calls for this curve pair
        max_iterations: Cap on clip steps within one call

    Returns:
        Intersections at the midpoints of the final domains, unsorted and
        possibly containing near-duplicates
    """
    precision = max(precision, MIN_PRECISION)
    doms_a: list[Interval] = []
    doms_b: list[Interval] = []
    clipper = _Clipper(precision, max_calls, max_iterations)
    clipper.iterate(doms_a, doms_b, a, b, UNIT_INTERVAL, UNIT_INTERVAL)
    return [Intersection(da.middle, db.middle) for da, db in zip(doms_a, doms_b)]
