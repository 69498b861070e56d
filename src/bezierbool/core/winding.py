"""Winding counts and point containment.

The winding count of a point is found by casting a horizontal ray from the
point towards -x and summing the signed crossings of every element:
+1 where the boundary moves downwards across the ray, -1 where it moves
upwards. With a y-up frame a counter-clockwise component therefore has
winding count +1 inside.

Crossings count the upper endpoint of a piece and exclude the lower one, so
a join between two elements that keeps its vertical direction is counted
exactly once and a join that reverses it is counted twice or not at all.
"""

from bezierbool.core.bvh import BVHNode
from bezierbool.domain.curve import Curve
from bezierbool.domain.path import FillRule, Path, PathComponent
from bezierbool.domain.point import Point
from bezierbool.utils.roots import droots


def winding_count_adjustment(y: float, start_y: float, end_y: float) -> int:
    """Signed crossing of the level `y` by a y-monotonic run from start_y to end_y."""
    if end_y < y <= start_y:
        return 1
    if start_y < y <= end_y:
        return -1
    return 0


def _x_intercept(curve: Curve, y: float) -> float:
    start = curve.start
    end = curve.end
    if y == start.y:
        return start.x
    if y == end.y:
        return end.x
    linear_t = (y - start.y) / (end.y - start.y)
    linear_solution = start.x + (end.x - start.x) * linear_t
    if curve.order == 1:
        return linear_solution
    for t in droots(*(p.y - y for p in curve.points)):
        if 0.0 <= t <= 1.0:
            return curve.point_at(t).x
    return linear_solution


def _winding_count_incrementer(curve: Curve, point: Point) -> int:
    box = curve.bounding_box
    if box.min.x > point.x:
        return 0
    increment = winding_count_adjustment(point.y, curve.start.y, curve.end.y)
    if increment == 0:
        return 0
    if box.max.x >= point.x and not point.x > _x_intercept(curve, point.y):
        return 0
    return increment


def _y_monotonic_pieces(curve: Curve) -> list[Curve]:
    if curve.order == 1:
        return [curve]
    points = curve.points
    derivative_y = [points[i + 1].y - points[i].y for i in range(curve.order)]
    pieces: list[Curve] = []
    last = 0.0
    for t in droots(*derivative_y):
        if 0.0 < t < 1.0:
            pieces.append(curve.split(last, t))
            last = t
    if last < 1.0:
        pieces.append(curve.split(last, 1.0))
    return pieces


def winding_count(component: PathComponent, point: Point) -> int:
    """Winding count of a point with respect to a component.

    Args:
        component: Path component
        point: Query point

    Returns:
        The signed number of times the component winds around the point; 0 for
        open components and for points outside the component's bounding box

    Examples:
        >>> square = PathComponent(
        ...     [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1), Point(0, 0)],
        ...     [1, 1, 1, 1],
        ... )
        >>> winding_count(square, Point(0.5, 0.5))
        1
        >>> winding_count(square.reversed(), Point(0.5, 0.5))
        -1
    """
    if not component.is_closed or not component.bounding_box.contains(point):
        return 0

    count = 0
    curves = component.curves

    def visit(node: BVHNode, depth: int) -> bool:  # noqa: ARG001
        nonlocal count
        box = node.bounding_box
        if not (box.min.y <= point.y <= box.max.y and box.min.x <= point.x):
            return False
        if box.max.x < point.x:
            # The whole run lies left of the point; only its end heights matter.
            start = component.start_point_for_element(node.start_element_index)
            end = component.end_point_for_element(node.end_element_index)
            count += winding_count_adjustment(point.y, start.y, end.y)
            return False
        if not node.is_leaf:
            return True
        for piece in _y_monotonic_pieces(curves[node.element_index]):
            count += _winding_count_incrementer(piece, point)
        return True

    component.bvh.visit(visit)
    return count


def path_winding_count(path: Path, point: Point, ignoring: PathComponent | None = None) -> int:
    """Sum of the winding counts of every component except `ignoring`."""
    return sum(
        winding_count(component, point)
        for component in path.components
        if component is not ignoring
    )


def winding_count_implies_containment(count: int, fill_rule: FillRule) -> bool:
    if fill_rule == FillRule.WINDING:
        return count != 0
    return count % 2 != 0


def contains(path: Path, point: Point, fill_rule: FillRule = FillRule.WINDING) -> bool:
    """Whether a point is inside a path under the given fill rule.

    Examples:
        >>> contains(Path.rectangle(0, 0, 2, 2), Point(1, 1))
        True
        >>> contains(Path.rectangle(0, 0, 2, 2), Point(3, 1))
        False
    """
    return winding_count_implies_containment(path_winding_count(path, point), fill_rule)


def component_contains(
    component: PathComponent, point: Point, fill_rule: FillRule = FillRule.WINDING
) -> bool:
    return winding_count_implies_containment(winding_count(component, point), fill_rule)


def disjoint_components(path: Path) -> list[Path]:
    """Split a path into shapes that do not contain one another.

    Components not inside any other component (even-odd) are outer
    boundaries; every other component is filed under the smallest outer
    boundary containing its start point.

    Returns:
        One path per outer boundary, in the order the outer boundaries
        appear; each path lists its outer boundary first
    """
    fill_rule = FillRule.EVEN_ODD
    groups: dict[int, list[PathComponent]] = {}
    inner: list[PathComponent] = []
    for index, component in enumerate(path.components):
        count = path_winding_count(path, component.start, ignoring=component)
        if winding_count_implies_containment(count, fill_rule):
            inner.append(component)
        else:
            groups[index] = [component]

    for component in inner:
        owner: int | None = None
        for index, members in groups.items():
            outer = members[0]
            if owner is not None:
                owner_box = groups[owner][0].bounding_box
                if outer.bounding_box.intersection(owner_box) != outer.bounding_box:
                    continue
            if component_contains(outer, component.start, fill_rule):
                owner = index
        if owner is not None:
            groups[owner].append(component)

    return [Path(tuple(members)) for members in groups.values()]
