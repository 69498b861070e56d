"""Convex hull of a handful of points.

Fat-line clipping needs the hull of at most four distance points per
iteration, so a gift-wrapping (Jarvis) march is all that is required.
"""

from collections.abc import Sequence

from bezierbool.domain.point import Point


def _is_clockwise_turn(a: Point, b: Point, c: Point) -> bool:
    """Whether c lies clockwise of the ray a->b.

    Collinear points count as clockwise when c is farther from a than b, so
    the march skips interior collinear points.
    """
    if a == b:
        return False
    b_minus_a = b - a
    c_minus_a = c - a
    cross = b_minus_a.cross(c_minus_a)
    return cross < 0 or (cross == 0 and b_minus_a.length_squared < c_minus_a.length_squared)


def convex_hull(points: Sequence[Point]) -> list[Point]:
    """Convex hull in counter-clockwise order.

    The march starts from the point with the smallest x coordinate.

    Args:
        points: Input points; intended for small sets (four or fewer)

    Returns:
        Hull vertices without repetition of the first one. Empty for no input.

    Examples:
        >>> square = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1), Point(0.5, 0.5)]
        >>> len(convex_hull(square))
        4
    """
    count = len(points)
    if count == 0:
        return []

    first_index = 0
    for i in range(1, count):
        if points[i].x < points[first_index].x:
            first_index = i

    hull: list[Point] = []
    point_on_hull = points[first_index]
    # Each pass adds one hull vertex; NaN input could otherwise spin forever.
    for _ in range(count + 1):
        hull.append(point_on_hull)
        end_point = points[0]
        for candidate in points[1:]:
            if end_point == point_on_hull or _is_clockwise_turn(hull[-1], end_point, candidate):
                end_point = candidate
        if end_point == hull[0]:
            break
        point_on_hull = end_point
    return hull
