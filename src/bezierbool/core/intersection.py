"""Curve, component and path intersection.

Lines are intersected exactly. A line against a quadratic or cubic is solved
by aligning the curve to the line and finding the roots of its signed
distance. Two non-linear curves are intersected with one of two strategies:

- Subdivision (default): bisect both curves while their bounding boxes
  overlap, then intersect the chords of the small pieces.
- Clipping: fat-line Bezier clipping, see `bezierbool.core.clipping`.

Every result list is sorted by (t1, t2) with duplicates merged, and
parameters within `EPSILON` of 0 or 1 are snapped to exactly 0 or 1 so that
component boundaries can be stitched together downstream.
"""

import logging
import math
from dataclasses import dataclass

from bezierbool.config.settings import IntersectionConfig, IntersectionStrategy
from bezierbool.core.clipping import clip_intersections
from bezierbool.domain.box import BoundingBox
from bezierbool.domain.curve import BezierCurve, Curve, Intersection, Line
from bezierbool.domain.path import (
    ComponentIntersection,
    IndexedLocation,
    Path,
    PathComponent,
    PathIntersection,
    PathLocation,
)
from bezierbool.domain.point import Point
from bezierbool.utils.roots import EPSILON, SMALL_VALUE, approximately, droots, snap_unit

logger = logging.getLogger(__name__)

# Tolerance used when checking lines and curve-line pairs for coincidence.
TINY_VALUE = 1e-10


@dataclass(frozen=True, slots=True)
class _Subcurve:
    """A piece of a curve together with the parameter range it covers."""

    curve: Curve
    t1: float = 0.0
    t2: float = 1.0

    @property
    def can_split(self) -> bool:
        mid = 0.5 * (self.t1 + self.t2)
        return self.t1 < mid < self.t2

    def split(self) -> tuple["_Subcurve", "_Subcurve"]:
        mid = 0.5 * (self.t1 + self.t2)
        left, right = self.curve.split_at(0.5)
        return _Subcurve(left, self.t1, mid), _Subcurve(right, mid, self.t2)


def _point_close_to_curve(point: Point, curve: BezierCurve, accuracy: float) -> float | None:
    projection, t = curve.project(point)
    if (point - projection).length_squared < 4.0 * accuracy * accuracy:
        return t
    return None


def coincidence(curve1: Curve, curve2: Curve, accuracy: float) -> list[Intersection] | None:
    """Detect a shared stretch of two curves.

    The endpoints of each curve are projected onto the other; if they
    delimit an overlap that the curves trace together (checked at extra
    sample points for non-linear curves), the two ends of the overlap are
    returned.

    Args:
        curve1: First curve
        curve2: Second curve
        accuracy: Distance under which points are considered on a curve

    Returns:
        Two intersections marking the start and end of the overlap, or None
        when the curves are not coincident
    """
    range1_start, range1_end = float("inf"), float("-inf")
    range2_start, range2_end = float("inf"), float("-inf")

    t2 = _point_close_to_curve(curve1.start, curve2, accuracy)
    if t2 is not None:
        range1_start = 0.0
        range2_start, range2_end = min(range2_start, t2), max(range2_end, t2)
    t2 = _point_close_to_curve(curve1.end, curve2, accuracy)
    if t2 is not None:
        range1_end = 1.0
        range2_start, range2_end = min(range2_start, t2), max(range2_end, t2)
    t1 = _point_close_to_curve(curve2.start, curve1, accuracy)
    if t1 is not None:
        range2_start = 0.0
        range1_start, range1_end = min(range1_start, t1), max(range1_end, t1)
    t1 = _point_close_to_curve(curve2.end, curve1, accuracy)
    if t1 is not None:
        range2_end = 1.0
        range1_start, range1_end = min(range1_start, t1), max(range1_end, t1)

    if not (range1_end > range1_start and range2_end > range2_start):
        return None

    curve1_start = curve1.point_at(range1_start)
    curve1_end = curve1.point_at(range1_end)
    curve2_start = curve2.point_at(range2_start)
    curve2_end = curve2.point_at(range2_end)

    # Ignore overlaps shorter than the accuracy unless one curve is covered whole.
    if range1_end - range1_start < 1.0 and range2_end - range2_start < 1.0:
        if (curve1_end - curve1_start).length_squared < accuracy * accuracy:
            return None
        if (curve2_end - curve2_start).length_squared < accuracy * accuracy:
            return None

    reversed_ = (curve1_start - curve2_start).length_squared > (
        curve1_start - curve2_end
    ).length_squared
    first_t2, second_t2 = (range2_end, range2_start) if reversed_ else (range2_start, range2_end)

    samples = max(curve1.order, curve2.order) - 1
    if samples > 0:
        delta = (range1_end - range1_start) / (samples + 1)
        for i in range(1, samples + 1):
            point = curve1.point_at(range1_start + delta * i)
            if _point_close_to_curve(point, curve2, accuracy) is None:
                return None

    return [Intersection(range1_start, first_t2), Intersection(range1_end, second_t2)]


def intersect_lines(line1: Line, line2: Line, check_coincidence: bool = True) -> list[Intersection]:
    """Intersect two line segments.

    Degenerate (zero length) and parallel segments yield no intersection.
    Collinear overlapping segments yield the two ends of the overlap when
    `check_coincidence` is set.

    Examples:
        >>> from bezierbool.domain.point import Point
        >>> a = Line(Point(0, 0), Point(2, 2))
        >>> b = Line(Point(0, 2), Point(2, 0))
        >>> intersect_lines(a, b)
        [Intersection(t1=0.5, t2=0.5)]
    """
    if line1.p0 == line1.p1 or line2.p0 == line2.p1:
        return []
    if not line1.bounding_box.overlaps(line2.bounding_box):
        return []
    if check_coincidence:
        overlap = coincidence(line1, line2, TINY_VALUE)
        if overlap is not None:
            return overlap

    if line1.p1 == line2.p1:
        return [Intersection(1.0, 1.0)]
    if line1.p1 == line2.p0:
        return [Intersection(1.0, 0.0)]
    if line1.p0 == line2.p1:
        return [Intersection(0.0, 1.0)]
    if line1.p0 == line2.p0:
        return [Intersection(0.0, 0.0)]

    b1 = line1.p1 - line1.p0
    b2 = line2.p1 - line2.p0
    a, b = b1.x, -b2.x
    c, d = b1.y, -b2.y

    # Cramer's rule.
    det = a * d - b * c
    if det == 0.0:
        return []
    inv_det = 1.0 / det
    if not math.isfinite(inv_det):
        return []

    e = line2.p0.x - line1.p0.x
    f = line2.p0.y - line1.p0.y
    t1 = snap_unit((e * d - b * f) * inv_det)
    t2 = snap_unit((a * f - e * c) * inv_det)
    if not (0.0 <= t1 <= 1.0 and 0.0 <= t2 <= 1.0):
        return []
    return [Intersection(t1, t2)]


def intersect_curve_line(curve: Curve, line: Line, reverse: bool = False) -> list[Intersection]:
    """Intersect a quadratic or cubic with a line segment.

    Args:
        curve: Non-linear curve
        line: Line segment
        reverse: Report (t on line, t on curve) instead of (t on curve, t on line)

    Returns:
        Sorted intersections
    """
    if not line.bounding_box.overlaps(curve.bounding_box):
        return []
    overlap = coincidence(curve, line, TINY_VALUE)
    if overlap is not None:
        return sorted(i.swapped() for i in overlap) if reverse else overlap

    direction = line.p1 - line.p0
    length_squared = direction.length_squared
    if length_squared <= 0.0:
        return []
    normal = direction.perpendicular()
    aligned = [(p - line.p0).dot(normal) for p in curve.points]

    results: list[Intersection] = []
    for t1 in droots(*aligned):
        if not -SMALL_VALUE <= t1 <= 1.0 + SMALL_VALUE:
            continue
        t2 = (curve.point_at(t1) - line.p0).dot(direction) / length_squared
        if not -SMALL_VALUE <= t2 <= 1.0 + SMALL_VALUE:
            continue
        t1, t2 = snap_unit(t1), snap_unit(t2)
        results.append(Intersection(t2, t1) if reverse else Intersection(t1, t2))
    return _sorted_unique(results)


def _pairiteration(
    c1: _Subcurve,
    c2: _Subcurve,
    box1: BoundingBox,
    box2: BoundingBox,
    results: list[Intersection],
    accuracy: float,
    max_results: int,
) -> None:
    if len(results) >= max_results:
        return
    if not box1.overlaps(box2):
        return

    size1 = box1.size
    size2 = box2.size
    recurse1 = c1.can_split and size1.x + size1.y >= accuracy
    recurse2 = c2.can_split and size2.x + size2.y >= accuracy

    if not recurse1 and not recurse2:
        chord1 = Line(c1.curve.start, c1.curve.end)
        chord2 = Line(c2.curve.start, c2.curve.end)
        hits = intersect_lines(chord1, chord2, check_coincidence=False)
        if hits:
            t1, t2 = hits[0].t1, hits[0].t2
            results.append(
                Intersection(
                    t1 * c1.t2 + (1.0 - t1) * c1.t1,
                    t2 * c2.t2 + (1.0 - t2) * c2.t1,
                )
            )
    elif recurse1 and recurse2:
        l1, r1 = c1.split()
        l2, r2 = c2.split()
        l1b, r1b = l1.curve.bounding_box, r1.curve.bounding_box
        l2b, r2b = l2.curve.bounding_box, r2.curve.bounding_box
        _pairiteration(l1, l2, l1b, l2b, results, accuracy, max_results)
        _pairiteration(l1, r2, l1b, r2b, results, accuracy, max_results)
        _pairiteration(r1, l2, r1b, l2b, results, accuracy, max_results)
        _pairiteration(r1, r2, r1b, r2b, results, accuracy, max_results)
    elif recurse1:
        l1, r1 = c1.split()
        _pairiteration(l1, c2, l1.curve.bounding_box, box2, results, accuracy, max_results)
        _pairiteration(r1, c2, r1.curve.bounding_box, box2, results, accuracy, max_results)
    else:
        l2, r2 = c2.split()
        _pairiteration(c1, l2, box1, l2.curve.bounding_box, results, accuracy, max_results)
        _pairiteration(c1, r2, box1, r2.curve.bounding_box, results, accuracy, max_results)


def intersect_subdivision(
    curve1: Curve,
    curve2: Curve,
    accuracy: float = 0.5,
    max_results: int = 20,
) -> list[Intersection]:
    """Intersect two curves by recursive subdivision.

    Args:
        curve1: First curve
        curve2: Second curve
        accuracy: Width + height of a sub-curve box below which its chord is
            used in place of the curve
        max_results: Result count at which subdivision stops and the curves
            are checked for coincidence instead

    Returns:
        Sorted intersections. If the result cap is reached and the curves are
        not coincident, the (possibly incomplete) results found so far.
    """
    results: list[Intersection] = []
    _pairiteration(
        _Subcurve(curve1),
        _Subcurve(curve2),
        curve1.bounding_box,
        curve2.bounding_box,
        results,
        accuracy,
        max_results,
    )
    if len(results) >= max_results:
        overlap = coincidence(curve1, curve2, 0.1 * accuracy)
        if overlap is not None:
            return overlap
        logger.debug(
            "Subdivision stopped at %d results without finding a coincidence", len(results)
        )
    return _merge_close(curve1, curve2, results, accuracy)


def _sorted_unique(intersections: list[Intersection]) -> list[Intersection]:
    result: list[Intersection] = []
    for intersection in sorted(intersections):
        if not result or result[-1] != intersection:
            result.append(intersection)
    return result


def _merge_close(
    curve1: Curve, curve2: Curve, intersections: list[Intersection], distance: float
) -> list[Intersection]:
    """Snap, sort and drop results that land on the same point of both curves."""
    snapped = [Intersection(snap_unit(i.t1), snap_unit(i.t2)) for i in intersections]
    result: list[Intersection] = []
    for intersection in _sorted_unique(snapped):
        if result:
            previous = result[-1]
            same1 = curve1.point_at(previous.t1).distance_to(curve1.point_at(intersection.t1))
            same2 = curve2.point_at(previous.t2).distance_to(curve2.point_at(intersection.t2))
            if same1 < distance and same2 < distance:
                continue
        result.append(intersection)
    return result


def _merge_parametric(intersections: list[Intersection], tolerance: float) -> list[Intersection]:
    snapped = [Intersection(snap_unit(i.t1), snap_unit(i.t2)) for i in intersections]
    result: list[Intersection] = []
    for intersection in _sorted_unique(snapped):
        if result and (
            approximately(result[-1].t1, intersection.t1, tolerance)
            and approximately(result[-1].t2, intersection.t2, tolerance)
        ):
            continue
        result.append(intersection)
    return result


def intersect(
    curve1: Curve,
    curve2: Curve,
    config: IntersectionConfig | None = None,
    accuracy: float | None = None,
) -> list[Intersection]:
    """Intersect two curves.

    Args:
        curve1: First curve
        curve2: Second curve
        config: Strategy and tolerances (defaults to `IntersectionConfig()`)
        accuracy: Override of the strategy threshold (subdivision accuracy
            or clipping precision)

    Returns:
        Intersections sorted by (t1, t2), duplicates merged, with parameters
        snapped to 0 and 1

    Examples:
        >>> from bezierbool.domain.point import Point
        >>> intersect(Line(Point(0, 0), Point(1, 1)), Line(Point(0, 1), Point(1, 0)))
        [Intersection(t1=0.5, t2=0.5)]
    """
    if config is None:
        config = IntersectionConfig()
    threshold = config.threshold() if accuracy is None else accuracy

    if curve1.order == 1 and curve2.order == 1:
        return intersect_lines(curve1, curve2)
    if curve2.order == 1:
        return intersect_curve_line(curve1, curve2)
    if curve1.order == 1:
        return intersect_curve_line(curve2, curve1, reverse=True)

    if config.strategy == IntersectionStrategy.CLIPPING:
        precision = max(threshold, SMALL_VALUE)
        results = clip_intersections(
            curve1,
            curve2,
            precision=precision,
            max_calls=config.max_clipping_calls,
            max_iterations=config.max_clipping_iterations,
        )
        return _merge_parametric(results, max(10.0 * precision, EPSILON * 0.1))

    return intersect_subdivision(curve1, curve2, threshold, config.max_subdivision_results)


class CurveIntersector:
    """Intersection queries on components and paths.

    Element pairs are found through each component's bounding box hierarchy.
    Hits at the start of an element (t = 0) are dropped in favour of the same
    point at the end of the previous element (t = 1), so every join is
    reported once.

    Example:
        intersector = CurveIntersector(IntersectionConfig(strategy=IntersectionStrategy.CLIPPING))
        hits = intersector.path_intersections(path1, path2)
    """

    def __init__(
        self, config: IntersectionConfig | None = None, accuracy: float | None = None
    ) -> None:
        """Initialize the intersector.

        Args:
            config: Strategy and tolerances
            accuracy: Optional override of the strategy threshold
        """
        self.config = config or IntersectionConfig()
        self.accuracy = accuracy

    def intersect(self, curve1: Curve, curve2: Curve) -> list[Intersection]:
        return intersect(curve1, curve2, self.config, self.accuracy)

    def component_intersections(
        self, component1: PathComponent, component2: PathComponent
    ) -> list[ComponentIntersection]:
        """Intersections between two distinct components."""
        closed1 = component1.is_closed
        closed2 = component2.is_closed
        curves1 = component1.curves
        curves2 = component2.curves
        results: list[ComponentIntersection] = []
        for i1, i2 in component1.bvh.enumerate_overlaps(component2.bvh):
            for hit in self.intersect(curves1[i1], curves2[i2]):
                if hit.t1 == 0.0 and (closed1 or i1 > 0):
                    continue
                if hit.t2 == 0.0 and (closed2 or i2 > 0):
                    continue
                results.append(
                    ComponentIntersection(IndexedLocation(i1, hit.t1), IndexedLocation(i2, hit.t2))
                )
        return results

    def _neighbors_touch_only_at_join(self, component: PathComponent, i1: int, i2: int) -> bool:
        box1 = component.bvh.bounding_box_for_element(i1)
        box2 = component.bvh.bounding_box_for_element(i2)
        if box1.intersection(box2).area != 0.0:
            return False
        offset = component.offsets[i2]
        for point in component.points[offset + 1 : offset + component.orders[i2] + 1]:
            if box1.contains(point):
                return False
        return True

    def component_self_intersections(self, component: PathComponent) -> list[ComponentIntersection]:
        """Points where a component crosses or touches itself.

        Joins between consecutive elements (and the closing join of a closed
        component) are not reported.
        """
        closed = component.is_closed
        count = component.element_count
        curves = component.curves
        results: list[ComponentIntersection] = []
        for i1, i2 in component.bvh.enumerate_self_overlaps():
            hits: list[Intersection] = []
            if i1 == i2:
                hits = [
                    hit
                    for hit in curves[i1].self_intersections()
                    if count != 1 or not (hit.t1 == 0.0 and hit.t2 == 1.0)
                ]
            else:
                neighbors = i2 == i1 + 1 or (closed and i1 == 0 and i2 == count - 1)
                if neighbors and self._neighbors_touch_only_at_join(component, i1, i2):
                    continue
                for hit in self.intersect(curves[i1], curves[i2]):
                    if i2 == i1 + 1 and hit.t1 == 1.0 and hit.t2 == 0.0:
                        continue
                    if i1 == 0 and i2 == count - 1 and hit.t1 == 0.0 and hit.t2 == 1.0:
                        continue
                    if hit.t1 == 0.0 and (i1 > 0 or closed):
                        continue
                    if hit.t2 == 0.0:
                        continue
                    hits.append(hit)
            results.extend(
                ComponentIntersection(IndexedLocation(i1, hit.t1), IndexedLocation(i2, hit.t2))
                for hit in hits
            )
        return results

    def path_intersections(self, path1: Path, path2: Path) -> list[PathIntersection]:
        """Intersections between every pair of components of two paths."""
        if path1.is_empty or path2.is_empty:
            return []
        if not path1.bounding_box.overlaps(path2.bounding_box):
            return []
        results: list[PathIntersection] = []
        for c1, component1 in enumerate(path1.components):
            for c2, component2 in enumerate(path2.components):
                for hit in self.component_intersections(component1, component2):
                    results.append(_path_intersection(c1, c2, hit))
        return results

    def path_self_intersections(self, path: Path) -> list[PathIntersection]:
        """Self-intersections of every component plus crossings between components."""
        results: list[PathIntersection] = []
        components = path.components
        for c1 in range(len(components)):
            for c2 in range(c1, len(components)):
                if c1 == c2:
                    hits = self.component_self_intersections(components[c1])
                else:
                    hits = self.component_intersections(components[c1], components[c2])
                results.extend(_path_intersection(c1, c2, hit) for hit in hits)
        return results


def _path_intersection(c1: int, c2: int, hit: ComponentIntersection) -> PathIntersection:
    return PathIntersection(
        PathLocation(c1, hit.location1.element_index, hit.location1.t),
        PathLocation(c2, hit.location2.element_index, hit.location2.t),
    )
