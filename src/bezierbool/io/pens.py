"""Converters between fontTools pens and paths.

Paths are drawn into any fontTools pen with `draw_path`; pen output is turned
back into a path with `PathPen`, which records the drawing commands with a
`RecordingPen` and converts the recording afterwards.
"""

from typing import Any

from fontTools.pens.basePen import AbstractPen, decomposeQuadraticSegment
from fontTools.pens.recordingPen import RecordingPen

from bezierbool.domain.curve import Cubic, Curve, Line, Quadratic
from bezierbool.domain.path import Path, PathComponent
from bezierbool.domain.point import Point
from bezierbool.exceptions import PathComponentError


def draw_path(path: Path, pen: AbstractPen) -> None:
    """Replay a path into a fontTools pen.

    Closed components end with `closePath`, open ones with `endPath`. The
    closing element of a closed component is drawn explicitly even when it
    is a straight line.

    Args:
        path: Path to draw
        pen: Any fontTools pen
    """
    for component in path.components:
        pen.moveTo(component.start.to_tuple())
        for curve in component.curves:
            points = [point.to_tuple() for point in curve.points[1:]]
            if curve.order == 1:
                pen.lineTo(points[0])
            elif curve.order == 2:
                pen.qCurveTo(*points)
            else:
                pen.curveTo(*points)
        if component.is_closed:
            pen.closePath()
        else:
            pen.endPath()


def path_from_recording(recording: list[tuple[str, tuple[Any, ...]]]) -> Path:
    """Convert a RecordingPen recording to a path.

    The RecordingPen records drawing commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), (x2, y2), ...))  # Quadratic spline
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ())

    A quadratic spline with several off-curve points is split at its implied
    on-curve points. `closePath` adds a straight segment back to the start
    when the contour does not already end there. Subpaths without any segment
    are dropped.

    Args:
        recording: List of drawing commands

    Returns:
        Path with one component per subpath

    Raises:
        PathComponentError: If a segment is drawn before `moveTo`, or a
            quadratic spline has no on-curve point
    """
    components: list[PathComponent] = []
    curves: list[Curve] = []
    start: Point | None = None
    current: Point | None = None

    def finish(close: bool) -> None:
        nonlocal curves, start, current
        if close and curves and current != start:
            curves.append(Line(current, start))
        if curves:
            components.append(PathComponent.from_curves(curves))
        curves = []
        start = current = None

    for command, args in recording:
        if command == "moveTo":
            finish(close=False)
            start = current = Point(*args[0])
            continue
        if command in ("closePath", "endPath"):
            finish(close=command == "closePath")
            continue
        if current is None:
            raise PathComponentError(f"'{command}' drawn before 'moveTo'")

        if command == "lineTo":
            end = Point(*args[0])
            curves.append(Line(current, end))
            current = end
        elif command == "qCurveTo":
            if args[-1] is None:
                raise PathComponentError("Quadratic splines need an on-curve end point")
            if len(args) == 1:
                end = Point(*args[0])
                curves.append(Line(current, end))
                current = end
                continue
            for control, end_tuple in decomposeQuadraticSegment(args):
                end = Point(*end_tuple)
                curves.append(Quadratic(current, Point(*control), end))
                current = end
        elif command == "curveTo":
            if len(args) != 3:
                raise PathComponentError(f"Expected 3 points for 'curveTo', got {len(args)}")
            p1, p2, p3 = (Point(*arg) for arg in args)
            curves.append(Cubic(current, p1, p2, p3))
            current = p3

    finish(close=False)
    return Path(tuple(components))


class PathPen(RecordingPen):
    """fontTools pen that builds a path.

    Example:
        pen = PathPen()
        glyph_set["O"].draw(pen)
        outline = pen.path
    """

    @property
    def path(self) -> Path:
        """Path drawn so far."""
        return path_from_recording(self.value)
