"""Nearest-point queries on components and paths.

Searches walk the bounding box hierarchy and skip every subtree whose box is
farther away than the best distance found so far. Box upper bounds tighten
that distance before any curve is projected.
"""

from bezierbool.core.bvh import BVHNode
from bezierbool.domain.path import IndexedLocation, Path, PathComponent, PathLocation
from bezierbool.domain.point import Point


def _search(component: PathComponent, point: Point) -> IndexedLocation | None:
    """Closest location found by a pruned hierarchy walk."""
    best: IndexedLocation | None = None
    best_upper_bound = float("inf")
    curves = component.curves

    def visit(node: BVHNode, depth: int) -> bool:  # noqa: ARG001
        nonlocal best, best_upper_bound
        box = node.bounding_box
        if box.lower_bound_of_distance(point) >= best_upper_bound:
            return False
        upper_bound = box.upper_bound_of_distance(point)
        if upper_bound < best_upper_bound:
            best_upper_bound = upper_bound
            best = IndexedLocation(node.start_element_index, 0.0)
        if node.is_leaf:
            projected, t = curves[node.element_index].project(point)
            distance = projected.distance_to(point)
            if distance < best_upper_bound:
                best_upper_bound = distance
                best = IndexedLocation(node.element_index, t)
        return True

    component.bvh.visit(visit)
    return best


def project_component(component: PathComponent, point: Point) -> tuple[Point, IndexedLocation]:
    """Closest point of a component.

    Args:
        component: Component to search
        point: Query point

    Returns:
        Tuple of (closest point, its location on the component)
    """
    location = _search(component, point)
    if location is None:
        location = component.start_location
    return component.point_at(location), location


def project(path: Path, point: Point) -> tuple[Point, PathLocation] | None:
    """Closest point of a path.

    Components are searched in order of their farthest box corner, and any
    component whose box is farther than the best point found is skipped.

    Args:
        path: Path to search
        point: Query point

    Returns:
        Tuple of (closest point, its location on the path), or None for an
        empty path

    Examples:
        >>> square = Path.rectangle(0, 0, 2, 2)
        >>> projected, location = project(square, Point(3, 1))
        >>> projected.to_tuple()
        (2.0, 1.0)
        >>> location.element_index
        1
    """
    candidates = sorted(
        (
            (component.bounding_box.upper_bound_of_distance(point), index, component)
            for index, component in enumerate(path.components)
        ),
        key=lambda candidate: (candidate[0], candidate[1]),
    )
    best: tuple[Point, PathLocation] | None = None
    best_distance = float("inf")
    for _, index, component in candidates:
        if component.bounding_box.lower_bound_of_distance(point) > best_distance:
            continue
        projected, location = project_component(component, point)
        distance = projected.distance_to(point)
        if distance < best_distance:
            best_distance = distance
            best = (projected, PathLocation(index, location.element_index, location.t))
    return best


def component_is_within_distance(component: PathComponent, point: Point, distance: float) -> bool:
    """Whether some point of a component lies within `distance` of `point`."""
    found = False
    curves = component.curves

    def visit(node: BVHNode, depth: int) -> bool:  # noqa: ARG001
        nonlocal found
        box = node.bounding_box
        if box.upper_bound_of_distance(point) <= distance:
            found = True
        elif node.is_leaf:
            projected, _ = curves[node.element_index].project(point)
            if projected.distance_to(point) <= distance:
                found = True
        return not found and box.lower_bound_of_distance(point) <= distance

    component.bvh.visit(visit)
    return found


def is_within_distance_of_boundary(path: Path, point: Point, distance: float) -> bool:
    """Whether the outline of a path passes within `distance` of `point`."""
    return any(
        component_is_within_distance(component, point, distance)
        for component in path.components
        if component.bounding_box.lower_bound_of_distance(point) <= distance
    )
