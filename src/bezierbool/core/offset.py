"""Offset curves and outlines.

A curve is offset by first reducing it to simple pieces (each bends one way
and turns less than 60 degrees), then scaling every piece along its normals.
Scaling keeps the end tangents of a piece and moves its inner control points
along rays from the point where the end normals meet, which is exact for
circular arcs and close for any other simple piece.

Positive distances move along the curve normal (the derivative rotated by
+90 degrees), so they shrink counter-clockwise components and grow clockwise
ones.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from bezierbool.domain.curve import Curve, Line, curve_from_points
from bezierbool.domain.path import Path, PathComponent
from bezierbool.domain.point import Point
from bezierbool.exceptions import OffsetError
from bezierbool.utils.roots import lines_intersection

# Smallest parameter step taken while reducing, relative to the whole curve.
REDUCE_STEP = 0.01

# Sine of the smallest angle between tangents that are intersected at a join.
_PARALLEL_TOLERANCE = 1e-6


@dataclass(frozen=True, slots=True)
class Subcurve:
    """Piece of a curve together with the parameters it spans.

    Attributes:
        t1: Parameter on the original curve where the piece starts
        t2: Parameter on the original curve where the piece ends
        curve: The piece itself
    """

    t1: float
    t2: float
    curve: Curve


def reduce_curve(curve: Curve, step: float = REDUCE_STEP) -> list[Subcurve]:
    """Split a curve into simple pieces.

    The curve is cut at its extrema first. Each resulting piece is then
    walked from its start, taking the longest simple piece found by
    bisection each time. Pieces shorter than `step` are accepted whether or
    not they are simple.

    Args:
        curve: Curve to reduce
        step: Smallest parameter step, relative to the whole curve

    Returns:
        Contiguous pieces covering [0, 1] in order

    Examples:
        >>> line = Line(Point(0, 0), Point(1, 0))
        >>> [(piece.t1, piece.t2) for piece in reduce_curve(line)]
        [(0.0, 1.0)]
    """
    extrema: list[float] = []
    for t in curve.extrema():
        if t < step or 1.0 - t < step:
            continue
        if extrema and t - extrema[-1] < step:
            continue
        extrema.append(t)
    bounds = [0.0, *extrema, 1.0]

    pieces: list[Subcurve] = []
    for start, end in zip(bounds, bounds[1:]):
        span = end - start
        adjusted_step = step / span

        def on_curve(local: float, start: float = start, span: float = span) -> float:
            return start + span * local

        t1 = 0.0
        while t1 < 1.0:
            whole = curve.split(on_curve(t1), end)
            if 1.0 - t1 <= adjusted_step or whole.simple:
                pieces.append(Subcurve(on_curve(t1), end, whole))
                break
            lower = t1 + adjusted_step
            upper = 1.0
            while upper - lower > adjusted_step:
                middle = 0.5 * (lower + upper)
                if curve.split(on_curve(t1), on_curve(middle)).simple:
                    lower = middle
                else:
                    upper = middle
            pieces.append(
                Subcurve(on_curve(t1), on_curve(lower), curve.split(on_curve(t1), on_curve(lower)))
            )
            t1 = lower
    return pieces


def offset_point(curve: Curve, t: float, distance: float) -> Point:
    """Point `distance` away from the curve along its normal at t."""
    return curve.point_at(t) + curve.normal(t) * distance


def scale_curve(curve: Curve, distance: float) -> Curve | None:
    """Approximate the offset of a simple curve with one curve of the same order.

    Args:
        curve: Simple curve (see `reduce_curve`)
        distance: Offset distance along the normal

    Returns:
        Scaled curve, or None when the distance or a normal is not finite
    """
    if not math.isfinite(distance):
        return None
    n1 = curve.normal(0.0)
    n2 = curve.normal(1.0)
    if not (n1.is_finite() and n2.is_finite()):
        return None

    order = curve.order
    points = curve.points
    origin = lines_intersection(curve.start, curve.start + n1, curve.end, curve.end - n2)

    scaled = []
    for index, point in enumerate(points):
        from_start = index < 2 if order > 1 else index == 0
        t = 0.0 if from_start else 1.0
        reference = offset_point(curve, t, distance)
        if index in (0, order):
            scaled.append(reference)
            continue
        moved = None
        if origin is not None:
            tangent = curve.normal(t).perpendicular()
            moved = lines_intersection(reference, reference + tangent, origin, point)
        if moved is None:
            # No center to scale through; translate with the nearer end.
            moved = reference + (point - points[0 if from_start else order])
        scaled.append(moved)
    return curve_from_points(scaled)


def _with_ends(curve: Curve, start: Point | None = None, end: Point | None = None) -> Curve:
    points = list(curve.points)
    if start is not None:
        points[0] = start
    if end is not None:
        points[-1] = end
    return curve_from_points(points)


def _continuous(curves: Iterable[Curve]) -> list[Curve]:
    """Join neighbouring pieces at the midpoint of their gap."""
    result = list(curves)
    for i in range(len(result)):
        if i > 0:
            result[i] = _with_ends(result[i], start=result[i - 1].end)
        if i < len(result) - 1:
            result[i] = _with_ends(result[i], end=(result[i].end + result[i + 1].start) * 0.5)
    return result


def _scaled_pieces(pieces: list[Subcurve], distance: float) -> list[Curve]:
    scaled = (scale_curve(piece.curve, distance) for piece in pieces)
    return _continuous(curve for curve in scaled if curve is not None)


def offset_curve(curve: Curve, distance: float) -> list[Curve]:
    """Contiguous curves approximating the offset of a curve.

    Args:
        curve: Curve to offset
        distance: Offset distance along the normal; negative values offset
            to the other side

    Returns:
        Offset pieces in order, each one starting where the previous ends;
        empty when the distance is not finite
    """
    return _scaled_pieces(reduce_curve(curve), distance)


def outline_curve(
    curve: Curve, distance: float, distance_opposite: float | None = None
) -> PathComponent:
    """Closed outline around a curve, like a stroke with butt caps.

    Args:
        curve: Curve to outline
        distance: Offset along the normal
        distance_opposite: Offset against the normal (defaults to `distance`)

    Returns:
        Closed component: a cap line, the forward offset, a cap line and the
        reversed opposite offset

    Raises:
        OffsetError: If a distance is not finite
    """
    if distance_opposite is None:
        distance_opposite = distance
    pieces = reduce_curve(curve)
    forward = _scaled_pieces(pieces, distance)
    back = _scaled_pieces(pieces, -distance_opposite)
    if not forward or not back:
        raise OffsetError(distance, "the outline needs finite distances")
    back = [piece.reversed() for piece in reversed(back)]
    return PathComponent.from_curves(
        [
            Line(back[-1].end, forward[0].start),
            *forward,
            Line(forward[-1].end, back[0].start),
            *back,
        ]
    )


def offset_component(component: PathComponent, distance: float) -> PathComponent | None:
    """Offset every element of a component and reconnect the pieces.

    Where the offsets of neighbouring elements do not meet, both are moved to
    the point where their end tangents cross; closed components stay closed.

    Args:
        component: Component to offset
        distance: Offset distance along the normal

    Returns:
        Offset component, or None when nothing could be offset
    """
    curves = [piece for curve in component.curves for piece in offset_curve(curve, distance)]
    if not curves:
        return None
    reference = list(curves)

    def join(i: int, j: int) -> None:
        if curves[i].end == curves[j].start:
            return
        before = reference[i]
        after = reference[j]
        outgoing = before.derivative(1.0).normalized()
        incoming = after.derivative(0.0).normalized()
        point = None
        if abs(outgoing.cross(incoming)) > _PARALLEL_TOLERANCE:
            point = lines_intersection(
                before.end, before.end + outgoing, after.start, after.start + incoming
            )
        if point is None:
            point = (curves[i].end + curves[j].start) * 0.5
        curves[i] = _with_ends(curves[i], end=point)
        curves[j] = _with_ends(curves[j], start=point)

    for i in range(len(curves) - 1):
        join(i, i + 1)
    if component.is_closed:
        join(len(curves) - 1, 0)
    return PathComponent.from_curves(curves)


def offset_path(path: Path, distance: float) -> Path:
    """Offset every component of a path, dropping those that vanish.

    Examples:
        >>> inset = offset_path(Path.rectangle(0, 0, 4, 4), 1.0)
        >>> inset.bounding_box.min, inset.bounding_box.max
        (Point(x=1.0, y=1.0), Point(x=3.0, y=3.0))
    """
    components = (offset_component(component, distance) for component in path.components)
    return Path(tuple(component for component in components if component is not None))
