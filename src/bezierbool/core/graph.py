"""Augmented graph for boolean path operations.

Every closed component of the input paths becomes a circular doubly linked
list of vertices. Intersection points are spliced into the lists of both
paths as paired vertices sharing one location. The edges between vertices
are then classified as inside, outside or on the boundary of the other path,
and the result of a boolean operation is traced along the edges it keeps,
switching paths at crossing vertices. Edges shared by both paths are settled
per operation: each one is kept at most once, from the first path.

All vertices live in one arena (`AugmentedGraph.vertices`); links between
them are arena indices. The edge leaving vertex `i` forwards is identified by
`i`, which lets traversal keep a plain visited bitset.
"""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

from bezierbool.config.settings import ClassificationMode
from bezierbool.core.winding import path_winding_count, winding_count_implies_containment
from bezierbool.domain.curve import Curve, Line, curve_from_points
from bezierbool.domain.diagnostic import DiagnosticKind, TraversalDiagnostic
from bezierbool.domain.path import FillRule, Path, PathComponent, PathIntersection, PathLocation
from bezierbool.domain.point import Point
from bezierbool.exceptions import PathComponentError
from bezierbool.utils.roots import EPSILON

logger = logging.getLogger(__name__)


class EdgeType(Enum):
    """Position of an edge relative to the other path."""

    EXTERNAL = "external"
    INTERNAL = "internal"
    COINCIDENT = "coincident"


class BooleanOperation(str, Enum):
    """Boolean operation traced through the graph."""

    UNION = "union"
    INTERSECTION = "intersection"
    DIFFERENCE = "difference"
    REMOVE_CROSSINGS = "remove_crossings"


@dataclass(slots=True)
class Vertex:
    """A node of the augmented graph.

    Attributes:
        location: Point of the vertex
        is_intersection: Whether the vertex was inserted at an intersection
        next: Arena index of the following vertex
        previous: Arena index of the preceding vertex
        transition: Inner control points of the edge to `next`
        neighbor: Arena index of the paired vertex on the other path; cleared
            when the pair was superseded by another intersection at the same
            join
        split_t: Parameter on the unsplit element where the vertex was
            inserted (None for vertices at element joins)
        forward_edge: Classification of the edge to `next`
        winding_count: Winding count of the other path along the edge to
            `next`, recorded by relative classification
        on_first: Whether the vertex belongs to the first path
        shares_interior: For a coincident edge, whether the interiors of
            both paths lie on the same side of it
    """

    location: Point
    is_intersection: bool = False
    next: int = -1
    previous: int = -1
    transition: tuple[Point, ...] = ()
    neighbor: int | None = None
    split_t: float | None = None
    forward_edge: EdgeType = EdgeType.EXTERNAL
    winding_count: int | None = None
    on_first: bool = True
    shares_interior: bool = False


def kept_edge(operation: BooleanOperation, on_first: bool) -> EdgeType:
    """Edge type an operation keeps on the first or second path."""
    if operation == BooleanOperation.INTERSECTION:
        return EdgeType.INTERNAL
    if operation == BooleanOperation.DIFFERENCE and not on_first:
        return EdgeType.INTERNAL
    return EdgeType.EXTERNAL


def resolve_coincident(
    operation: BooleanOperation, on_first: bool, shares_interior: bool
) -> EdgeType:
    """Settle a coincident edge as internal or external for one operation.

    Union and intersection keep an edge with both interiors on the same side,
    difference keeps one with the interiors on opposite sides. Only the copy
    on the first path is kept; the second path's copy is discarded.

    Examples:
        >>> resolve_coincident(BooleanOperation.UNION, True, True)
        <EdgeType.EXTERNAL: 'external'>
        >>> resolve_coincident(BooleanOperation.UNION, False, True)
        <EdgeType.INTERNAL: 'internal'>
        >>> resolve_coincident(BooleanOperation.DIFFERENCE, True, True)
        <EdgeType.INTERNAL: 'internal'>
    """
    if operation == BooleanOperation.DIFFERENCE:
        keep = on_first and not shares_interior
    else:
        keep = on_first and shares_interior
    kept = kept_edge(operation, on_first)
    if keep:
        return kept
    return EdgeType.INTERNAL if kept == EdgeType.EXTERNAL else EdgeType.EXTERNAL


def vector_on_positive_side(v: Point, s1: Point, s2: Point) -> bool:
    """Whether `v` points into the positive region bounded by the rays s1 and s2."""
    if s2.cross(s1) > 0:
        return s2.cross(v) > 0 and s1.cross(v) < 0
    return s2.cross(v) > 0 or s1.cross(v) < 0


def winding_count_adjustment(v1: Point, v2: Point, s1: Point, s2: Point) -> int:
    """Change of winding count when passing through a vertex of another path.

    Args:
        v1: Backward ray along the incoming edge of the passing path
        v2: Forward ray along the outgoing edge of the passing path
        s1: Backward ray along the incoming edge of the other path
        s2: Forward ray along the outgoing edge of the other path

    Returns:
        -1 when going from the positive to the negative side, +1 the other
        way round, 0 when the side does not change
    """
    positive1 = vector_on_positive_side(v1, s1, s2)
    positive2 = vector_on_positive_side(v2, s1, s2)
    if positive1 == positive2:
        return 0
    return -1 if positive1 else 1


def _start_ray(curve: Curve) -> Point:
    points = curve.points
    for point in points[1:]:
        if point != points[0]:
            return point - points[0]
    return Point(0.0, 0.0)


def _end_ray(curve: Curve) -> Point:
    """Ray leaving the end of a curve backwards along it."""
    points = curve.points
    for point in reversed(points[:-1]):
        if point != points[-1]:
            return point - points[-1]
    return Point(0.0, 0.0)


class _VertexList:
    """Vertex lists of every component of one path."""

    def __init__(self, graph: "AugmentedGraph", path: Path, on_first: bool = True) -> None:
        self.graph = graph
        self.path = path
        self.on_first = on_first
        self.element_starts: list[list[int]] = [
            self._create_list(component) for component in path.components
        ]

    def _create_list(self, component: PathComponent) -> list[int]:
        if not component.is_closed:
            raise PathComponentError("Boolean operations require closed components")
        graph = self.graph
        starts = [
            graph.add_vertex(Vertex(component.start_point_for_element(i), on_first=self.on_first))
            for i in range(component.element_count)
        ]
        count = len(starts)
        for i, index in enumerate(starts):
            vertex = graph.vertices[index]
            vertex.next = starts[(i + 1) % count]
            vertex.previous = starts[(i - 1) % count]
            vertex.transition = component.curves[i].points[1:-1]
        return starts

    def insert(self, index: int, location: PathLocation) -> None:
        """Splice an intersection vertex into the list at a path location."""
        vertices = self.graph.vertices
        starts = self.element_starts[location.component_index]
        element_index = location.element_index
        t = location.t
        if t == 0.0:
            # Same point as the end of the previous element.
            element_index = (element_index - 1) % len(starts)
            t = 1.0

        if t == 1.0:
            self._replace(index, starts, (element_index + 1) % len(starts))
            return

        start = starts[element_index]
        while True:
            split_t = vertices[vertices[start].next].split_t
            if split_t is None or split_t >= t:
                break
            start = vertices[start].next
        end = vertices[start].next

        element = self.path.components[location.component_index].curves[element_index]
        t0 = vertices[start].split_t
        t1 = vertices[end].split_t
        first = element.split(0.0 if t0 is None else t0, t)
        second = element.split(t, 1.0 if t1 is None else t1)

        vertex = vertices[index]
        vertex.split_t = t
        vertex.previous = start
        vertex.next = end
        vertex.transition = second.points[1:-1]
        vertices[start].next = index
        vertices[start].transition = first.points[1:-1]
        vertices[end].previous = index

    def _replace(self, index: int, starts: list[int], position: int) -> None:
        vertices = self.graph.vertices
        replaced = starts[position]
        old = vertices[replaced]
        if old.neighbor is not None:
            vertices[old.neighbor].neighbor = None
        vertex = vertices[index]
        vertex.previous = index if old.previous == replaced else old.previous
        vertex.next = index if old.next == replaced else old.next
        vertex.transition = old.transition
        vertices[vertex.previous].next = index
        vertices[vertex.next].previous = index
        starts[position] = index

    def cycle(self, start: int) -> Iterator[int]:
        vertices = self.graph.vertices
        current = start
        while True:
            following = vertices[current].next
            yield current
            current = following
            if current == start:
                return

    def component_vertices(self, component_index: int) -> Iterator[int]:
        return self.cycle(self.element_starts[component_index][0])

    def all_vertices(self) -> Iterator[int]:
        for component_index in range(len(self.element_starts)):
            yield from self.component_vertices(component_index)

    def first_intersection(self, component_index: int) -> int | None:
        vertices = self.graph.vertices
        for index in self.component_vertices(component_index):
            if vertices[index].neighbor is not None:
                return index
        return None


class AugmentedGraph:
    """Paths with their mutual intersections spliced in.

    Construction inserts every intersection and classifies every edge; the
    graph is read-only afterwards and `perform` may be called for several
    operations.

    Example:
        hits = CurveIntersector().path_intersections(path1, path2)
        graph = AugmentedGraph(path1, path2, hits)
        union = graph.perform(BooleanOperation.UNION)
    """

    def __init__(
        self,
        path1: Path,
        path2: Path | None,
        intersections: Sequence[PathIntersection],
        classification: ClassificationMode = ClassificationMode.SAMPLED,
    ) -> None:
        """Build and classify the graph.

        Args:
            path1: First path; every component must be closed
            path2: Second path, or None (or `path1` itself) to combine
                `path1` with itself
            intersections: Intersections between the paths (or the
                self-intersections of `path1`)
            classification: Edge classification mode for two-path graphs;
                graphs of a single path always sample

        Raises:
            PathComponentError: If a component is open
        """
        self.vertices: list[Vertex] = []
        self.path1 = path1
        self.path2 = path1 if path2 is None else path2
        self.is_self = self.path2 is path1
        self.list1 = _VertexList(self, path1)
        self.list2 = self.list1 if self.is_self else _VertexList(self, self.path2, False)

        for intersection in intersections:
            location1 = intersection.location1
            location2 = intersection.location2
            average = self.path1.point_at(location1).lerp(self.path2.point_at(location2), 0.5)
            index1 = self.add_vertex(Vertex(average, is_intersection=True))
            index2 = self.add_vertex(
                Vertex(average, is_intersection=True, on_first=self.is_self)
            )
            self.vertices[index1].neighbor = index2
            self.vertices[index2].neighbor = index1
            self.list1.insert(index1, location1)
            self.list2.insert(index2, location2)

        if self.is_self:
            self._classify_sampled(self.list1, self.path1)
        elif classification == ClassificationMode.RELATIVE:
            self._classify_relative(self.list1, self.path2)
            self._classify_relative(self.list2, self.path1)
        else:
            self._classify_sampled(self.list1, self.path2)
            self._classify_sampled(self.list2, self.path1)

    def add_vertex(self, vertex: Vertex) -> int:
        self.vertices.append(vertex)
        return len(self.vertices) - 1

    # Edges

    def emit_next(self, index: int) -> Curve:
        """Curve from a vertex to the following one."""
        vertex = self.vertices[index]
        end = self.vertices[vertex.next].location
        return curve_from_points((vertex.location, *vertex.transition, end))

    def emit_previous(self, index: int) -> Curve:
        """Curve from a vertex back to the preceding one."""
        return self.emit_next(self.vertices[index].previous).reversed()

    def edge_type(self, index: int, operation: BooleanOperation | None = None) -> EdgeType:
        """Classification of the edge leaving a vertex forwards.

        Coincident edges are settled with `resolve_coincident` when an
        operation is given and reported as such otherwise.
        """
        vertex = self.vertices[index]
        if operation is None or vertex.forward_edge != EdgeType.COINCIDENT:
            return vertex.forward_edge
        return resolve_coincident(operation, vertex.on_first, vertex.shares_interior)

    def backward_edge(self, index: int, operation: BooleanOperation | None = None) -> EdgeType:
        return self.edge_type(self.vertices[index].previous, operation)

    # Classification

    @property
    def _fill_rule(self) -> FillRule:
        return FillRule.WINDING if self.is_self else FillRule.EVEN_ODD

    def _sample_points(self, index: int) -> tuple[Point, Point]:
        """Points just off either side of the middle of an edge."""
        edge = self.emit_next(index)
        point = edge.point_at(0.5)
        offset = edge.normal(0.5) * EPSILON
        return point + offset, point - offset

    def _sample_windings(self, index: int, other: Path) -> tuple[int, int]:
        point1, point2 = self._sample_points(index)
        return path_winding_count(other, point1), path_winding_count(other, point2)

    def _classify_unintersected(
        self, vertex_list: _VertexList, component_index: int, other: Path
    ) -> None:
        start = vertex_list.element_starts[component_index][0]
        count = path_winding_count(other, self.vertices[start].location)
        inside = winding_count_implies_containment(count, self._fill_rule)
        edge = EdgeType.INTERNAL if inside else EdgeType.EXTERNAL
        for index in vertex_list.cycle(start):
            self.vertices[index].forward_edge = edge

    def _classify_sampled_component(
        self, vertex_list: _VertexList, other: Path, start: int
    ) -> None:
        vertices = self.vertices
        fill_rule = self._fill_rule
        for index in vertex_list.cycle(start):
            vertex = vertices[index]
            if vertex.neighbor is None:
                vertex.forward_edge = vertices[vertex.previous].forward_edge
                vertex.shares_interior = vertices[vertex.previous].shares_interior
                continue
            count1, count2 = self._sample_windings(index, other)
            contained1 = winding_count_implies_containment(count1, fill_rule)
            contained2 = winding_count_implies_containment(count2, fill_rule)
            if self.is_self:
                internal = contained1 and contained2
                vertex.forward_edge = EdgeType.INTERNAL if internal else EdgeType.EXTERNAL
            elif contained1 == contained2:
                vertex.forward_edge = EdgeType.INTERNAL if contained1 else EdgeType.EXTERNAL
            else:
                vertex.forward_edge = EdgeType.COINCIDENT
                own = path_winding_count(vertex_list.path, self._sample_points(index)[0])
                vertex.shares_interior = contained1 == winding_count_implies_containment(
                    own, FillRule.EVEN_ODD
                )

    def _classify_sampled(self, vertex_list: _VertexList, other: Path) -> None:
        for component_index in range(len(vertex_list.element_starts)):
            start = vertex_list.first_intersection(component_index)
            if start is None:
                self._classify_unintersected(vertex_list, component_index, other)
            else:
                self._classify_sampled_component(vertex_list, other, start)

    def _has_coincident_edge(self, vertex_list: _VertexList, start: int, other: Path) -> bool:
        """Whether an edge between two intersections runs along the other path."""
        vertices = self.vertices
        for index in vertex_list.cycle(start):
            if vertices[index].neighbor is None or vertices[vertices[index].next].neighbor is None:
                continue
            contained1, contained2 = (
                winding_count_implies_containment(count, FillRule.EVEN_ODD)
                for count in self._sample_windings(index, other)
            )
            if contained1 != contained2:
                return True
        return False

    def _classify_relative(self, vertex_list: _VertexList, other: Path) -> None:
        vertices = self.vertices
        fill_rule = self._fill_rule
        for component_index in range(len(vertex_list.element_starts)):
            start = vertex_list.first_intersection(component_index)
            if start is None:
                self._classify_unintersected(vertex_list, component_index, other)
                continue
            count1, count2 = self._sample_windings(start, other)
            if count1 != count2 or self._has_coincident_edge(vertex_list, start, other):
                # Counts do not propagate along the other path's boundary.
                self._classify_sampled_component(vertex_list, other, start)
                continue

            count = count1
            for index in vertex_list.cycle(start):
                vertex = vertices[index]
                if vertex.neighbor is None:
                    vertex.forward_edge = vertices[vertex.previous].forward_edge
                    vertex.winding_count = vertices[vertex.previous].winding_count
                    continue
                if index != start:
                    neighbor = vertex.neighbor
                    count += winding_count_adjustment(
                        _end_ray(self.emit_next(vertex.previous)),
                        _start_ray(self.emit_next(index)),
                        _end_ray(self.emit_next(vertices[neighbor].previous)),
                        _start_ray(self.emit_next(neighbor)),
                    )
                vertex.winding_count = count
                inside = winding_count_implies_containment(count, fill_rule)
                vertex.forward_edge = EdgeType.INTERNAL if inside else EdgeType.EXTERNAL

    # Traversal predicates

    def is_entry(self, index: int, operation: BooleanOperation | None = None) -> bool:
        return (
            self.edge_type(index, operation) != EdgeType.EXTERNAL
            and self.backward_edge(index, operation) == EdgeType.EXTERNAL
        )

    def is_exit(self, index: int, operation: BooleanOperation | None = None) -> bool:
        return (
            self.edge_type(index, operation) == EdgeType.EXTERNAL
            and self.backward_edge(index, operation) != EdgeType.EXTERNAL
        )

    def is_crossing(self, index: int, operation: BooleanOperation | None = None) -> bool:
        """Whether traversal switches paths at this vertex.

        Both vertices of the pair must change sides. With an operation given,
        a run of edges shared with the other path counts as the side the
        operation settles it on, so a shared stretch between an outside and
        an inside edge yields a crossing at one of its ends on both paths.
        """
        if not (self.is_entry(index, operation) or self.is_exit(index, operation)):
            return False
        neighbor = self.vertices[index].neighbor
        if neighbor is None:
            return False
        return self.is_entry(neighbor, operation) or self.is_exit(neighbor, operation)

    def is_split_point(self, index: int) -> bool:
        """Whether a self graph should be cut apart at this vertex.

        A vertex where the path touches or crosses itself with every incident
        edge on the outside (a figure-eight) separates two loops that are
        traced independently.
        """
        if not self.is_self:
            return False
        neighbor = self.vertices[index].neighbor
        if neighbor is None:
            return False
        return all(
            self.vertices[i].forward_edge == EdgeType.EXTERNAL
            and self.backward_edge(i) == EdgeType.EXTERNAL
            for i in (index, neighbor)
        )

    def should_move_forwards(self, index: int, operation: BooleanOperation, on_first: bool) -> bool:
        return self.edge_type(index, operation) == kept_edge(operation, on_first)

    # Operations

    def _has_crossing(
        self, vertex_list: _VertexList, component_index: int, operation: BooleanOperation | None
    ) -> bool:
        return any(
            self.is_crossing(index, operation) or self.is_split_point(index)
            for index in vertex_list.component_vertices(component_index)
        )

    def non_crossing_components(
        self, vertex_list: _VertexList, operation: BooleanOperation | None = None
    ) -> list[PathComponent]:
        """Components of a list that traversal never passes through."""
        return [
            component
            for component_index, component in enumerate(vertex_list.path.components)
            if not self._has_crossing(vertex_list, component_index, operation)
        ]

    def _component_edge(
        self, vertex_list: _VertexList, component_index: int, operation: BooleanOperation
    ) -> EdgeType:
        """Side of the other path a component without crossings lies on.

        The first edge that is not shared with the other path decides, so a
        component touching the other boundary is not judged by a point on it.
        """
        indices = list(vertex_list.component_vertices(component_index))
        for index in indices:
            edge = self.vertices[index].forward_edge
            if edge != EdgeType.COINCIDENT:
                return edge
        return self.edge_type(indices[0], operation)

    def _filtered_non_crossing(self, operation: BooleanOperation) -> list[PathComponent]:
        if operation == BooleanOperation.REMOVE_CROSSINGS:
            return self.non_crossing_components(self.list1, operation)
        vertex_lists = (self.list1,) if self.is_self else (self.list1, self.list2)
        components: list[PathComponent] = []
        for vertex_list in vertex_lists:
            keep = kept_edge(operation, vertex_list.on_first)
            components.extend(
                component
                for component_index, component in enumerate(vertex_list.path.components)
                if not self._has_crossing(vertex_list, component_index, operation)
                and self._component_edge(vertex_list, component_index, operation) == keep
            )
        return components

    def _seeds(self, operation: BooleanOperation) -> list[int]:
        candidates = [
            index
            for index in self.list1.all_vertices()
            if self.is_crossing(index, operation) or self.is_split_point(index)
        ]
        forwards = [i for i in candidates if self.should_move_forwards(i, operation, True)]
        backwards = [i for i in candidates if not self.should_move_forwards(i, operation, True)]
        return forwards + backwards

    def _is_stop(
        self, index: int, operation: BooleanOperation, on_first: bool, forwards: bool
    ) -> bool:
        """Whether a walk reaching this vertex has to switch paths."""
        if self.vertices[index].neighbor is None:
            return False
        if self.is_split_point(index):
            return True
        if forwards:
            edge = self.edge_type(index, operation)
        else:
            edge = self.backward_edge(index, operation)
        return edge != kept_edge(operation, on_first)

    def perform(self, operation: BooleanOperation) -> Path:
        """Trace the result of a boolean operation.

        Args:
            operation: Operation to perform. For `DIFFERENCE` the second path
                must already be reversed.

        Returns:
            Result path. Inconsistencies met while tracing are recovered by
            closing the current component and are listed in the path's
            diagnostics.
        """
        vertices = self.vertices
        components = list(self._filtered_non_crossing(operation))
        diagnostics: list[TraversalDiagnostic] = []
        visited = [False] * len(vertices)

        for seed in self._seeds(operation):
            forwards = self.should_move_forwards(seed, operation, True)
            first_edge = seed if forwards else vertices[seed].previous
            if visited[first_edge]:
                continue

            curves: list[Curve] = []
            on_first = True
            current = seed
            diagnostic: TraversalDiagnostic | None = None
            while diagnostic is None:
                forwards = self.should_move_forwards(current, operation, on_first)
                walk_start = current
                while True:
                    edge = current if forwards else vertices[current].previous
                    if visited[edge]:
                        kind = (
                            DiagnosticKind.ALREADY_VISITED
                            if current == walk_start and current != seed
                            else DiagnosticKind.EDGE_REVISITED
                        )
                        diagnostic = self._inconsistency(kind, operation, current)
                        break
                    visited[edge] = True
                    if forwards:
                        curves.append(self.emit_next(current))
                    else:
                        curves.append(self.emit_previous(current))
                    current = vertices[current].next if forwards else vertices[current].previous
                    if current == seed or self._is_stop(current, operation, on_first, forwards):
                        break
                if diagnostic is not None or current == seed:
                    break
                current = vertices[current].neighbor
                on_first = not on_first
                if current == seed:
                    break

            if diagnostic is not None:
                diagnostics.append(diagnostic)
                if curves and curves[-1].end != curves[0].start:
                    curves.append(Line(curves[-1].end, curves[0].start))
            if curves:
                components.append(PathComponent.from_curves(curves))

        return Path(tuple(components), tuple(diagnostics))

    def _inconsistency(
        self, kind: DiagnosticKind, operation: BooleanOperation, index: int
    ) -> TraversalDiagnostic:
        location = self.vertices[index].location
        message = f"{operation.value}: edge at ({location.x:g}, {location.y:g}) already traced"
        logger.warning("Boolean traversal inconsistency: %s", message)
        return TraversalDiagnostic(kind, operation.value, message, location)
