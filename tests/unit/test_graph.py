"""Unit tests for the augmented graph.

Tests cover:
- Vertex insertion at intersections
- Sampled and relative edge classification
- Tracing union, intersection and difference
- Self graphs split at figure-eight vertices
- Open components
- Shared edges settled per operation
- Recovery from inconsistent graphs
"""

import logging

import pytest

from bezierbool.config import ClassificationMode
from bezierbool.core.geometry import path_area
from bezierbool.core.graph import (
    AugmentedGraph,
    BooleanOperation,
    EdgeType,
    kept_edge,
    resolve_coincident,
    vector_on_positive_side,
    winding_count_adjustment,
)
from bezierbool.core.intersection import CurveIntersector
from bezierbool.domain import Path, Point
from bezierbool.domain.diagnostic import DiagnosticKind
from bezierbool.exceptions import PathComponentError


def overlapping_squares() -> tuple[Path, Path]:
    """Two 2x2 squares overlapping in a 1x1 square."""
    return Path.rectangle(0, 0, 2, 2), Path.rectangle(1, 1, 2, 2)


def build_graph(
    path1: Path,
    path2: Path,
    classification: ClassificationMode = ClassificationMode.SAMPLED,
) -> AugmentedGraph:
    hits = CurveIntersector().path_intersections(path1, path2)
    return AugmentedGraph(path1, path2, hits, classification=classification)


class TestConstruction:
    """Tests for building the graph."""

    def test_vertices_for_elements_and_intersections(self):
        """One vertex per element plus a pair per intersection."""
        graph = build_graph(*overlapping_squares())

        assert len(graph.vertices) == 4 + 4 + 2 * 2
        intersections = [v for v in graph.vertices if v.is_intersection]
        assert len(intersections) == 4
        assert all(v.neighbor is not None for v in intersections)

    def test_paired_vertices_share_location(self):
        """Both vertices of an intersection sit at the same point."""
        graph = build_graph(*overlapping_squares())
        locations = set()

        for vertex in graph.vertices:
            if vertex.is_intersection:
                assert graph.vertices[vertex.neighbor].location == vertex.location
                locations.add(vertex.location)

        assert locations == {Point(2.0, 1.0), Point(1.0, 2.0)}

    def test_emitted_edges_are_contiguous(self):
        """Walking a component's vertices rebuilds its outline."""
        graph = build_graph(*overlapping_squares())

        for index, vertex in enumerate(graph.vertices):
            if vertex.next < 0:
                continue
            edge = graph.emit_next(index)
            assert edge.start == vertex.location
            assert edge.end == graph.vertices[vertex.next].location
            assert graph.emit_previous(vertex.next) == edge.reversed()

    def test_open_component_rejected(self):
        """Only closed components can be combined."""
        open_path = Path.polygon([Point(0, 0), Point(1, 0), Point(1, 1)], closed=False)

        with pytest.raises(PathComponentError):
            AugmentedGraph(open_path, None, [])


class TestClassification:
    """Tests for edge classification."""

    def test_sampled_classification(self):
        """Two edges of each square lie inside the other square."""
        graph = build_graph(*overlapping_squares())
        internal = [v for v in graph.vertices if v.forward_edge == EdgeType.INTERNAL]

        assert len(internal) == 4

    def test_relative_matches_sampled(self):
        """Propagating winding counts gives the same classification as sampling."""
        sampled = build_graph(*overlapping_squares())
        relative = build_graph(*overlapping_squares(), ClassificationMode.RELATIVE)

        assert [v.forward_edge for v in relative.vertices] == [
            v.forward_edge for v in sampled.vertices
        ]

    def test_unintersected_components(self):
        """Components without intersections are classified as a whole."""
        outer = Path.rectangle(0, 0, 4, 4)
        inner = Path.rectangle(1, 1, 2, 2)
        graph = build_graph(outer, inner)

        edges = [v.forward_edge for v in graph.vertices]
        assert edges == [EdgeType.EXTERNAL] * 4 + [EdgeType.INTERNAL] * 4

    def test_entry_and_exit(self):
        """Every crossing vertex is either an entry or an exit."""
        graph = build_graph(*overlapping_squares())

        for index, vertex in enumerate(graph.vertices):
            if vertex.is_intersection:
                assert graph.is_crossing(index)
                assert graph.is_entry(index) != graph.is_exit(index)


class TestPerform:
    """Tests for tracing operations."""

    def test_union(self):
        """The union of the squares is one L-shaped outline."""
        result = build_graph(*overlapping_squares()).perform(BooleanOperation.UNION)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(7.0)
        assert result.diagnostics == ()

    def test_intersection(self):
        """The intersection of the squares is the shared unit square."""
        result = build_graph(*overlapping_squares()).perform(BooleanOperation.INTERSECTION)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(1.0)

    def test_difference_with_reversed_path(self):
        """Difference traces the second path backwards."""
        square1, square2 = overlapping_squares()
        result = build_graph(square1, square2.reversed()).perform(BooleanOperation.DIFFERENCE)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(3.0)

    def test_graph_is_reusable(self):
        """Performing an operation does not change the graph."""
        graph = build_graph(*overlapping_squares())

        first = graph.perform(BooleanOperation.UNION)
        graph.perform(BooleanOperation.INTERSECTION)
        second = graph.perform(BooleanOperation.UNION)

        assert first == second

    def test_result_components_are_closed(self):
        """Traced components end where they start."""
        result = build_graph(*overlapping_squares()).perform(BooleanOperation.UNION)

        assert all(component.is_closed for component in result.components)

    def test_self_graph_splits_figure_eight(self):
        """A bowtie falls apart into its two lobes."""
        bowtie = Path.polygon([Point(0, 0), Point(2, 2), Point(2, 0), Point(0, 2)])
        hits = CurveIntersector().path_self_intersections(bowtie)
        graph = AugmentedGraph(bowtie, None, hits)

        result = graph.perform(BooleanOperation.REMOVE_CROSSINGS)

        assert graph.is_self
        assert len(result.components) == 2
        assert sorted(abs(path_area(Path((c,)))) for c in result.components) == [
            pytest.approx(1.0),
            pytest.approx(1.0),
        ]


class TestWindingAdjustment:
    """Tests for the side change at a vertex of another path."""

    def test_crossing_changes_side(self):
        """Passing across a horizontal path upwards enters the positive side."""
        s1 = Point(-1, 0)
        s2 = Point(1, 0)

        assert not vector_on_positive_side(Point(0, -1), s1, s2)
        assert vector_on_positive_side(Point(0, 1), s1, s2)
        assert winding_count_adjustment(Point(0, -1), Point(0, 1), s1, s2) == 1
        assert winding_count_adjustment(Point(0, 1), Point(0, -1), s1, s2) == -1

    def test_touching_keeps_side(self):
        """Bouncing off the other path does not change the count."""
        s1 = Point(-1, 0)
        s2 = Point(1, 0)

        assert winding_count_adjustment(Point(-1, 1), Point(1, 1), s1, s2) == 0


class TestSharedEdges:
    """Tests for edges that run along the other path."""

    @pytest.fixture
    def graph(self):
        """Unit squares sharing half of their bottom and top sides."""
        return build_graph(Path.rectangle(0, 0, 1, 1), Path.rectangle(0.5, 0, 1, 1))

    def linked_vertices(self, graph):
        return list(graph.list1.all_vertices()) + list(graph.list2.all_vertices())

    def test_coincident_edges(self, graph):
        """Both shared stretches are coincident on both paths."""
        coincident = [
            graph.vertices[i]
            for i in self.linked_vertices(graph)
            if graph.vertices[i].forward_edge == EdgeType.COINCIDENT
        ]

        assert len(coincident) == 4
        assert all(vertex.shares_interior for vertex in coincident)
        assert sum(vertex.on_first for vertex in coincident) == 2

    def test_crossings_pair_up(self, graph):
        """Settling the shared edges gives crossings on both paths of a pair."""
        for operation in (BooleanOperation.UNION, BooleanOperation.INTERSECTION):
            crossings = [i for i in self.linked_vertices(graph) if graph.is_crossing(i, operation)]

            assert len(crossings) == 4
            for index in crossings:
                assert graph.is_crossing(graph.vertices[index].neighbor, operation)

    def test_unsettled_edges_do_not_cross(self, graph):
        """Without an operation a shared stretch is neither inside nor outside."""
        assert not any(graph.is_crossing(i) for i in self.linked_vertices(graph))

    def test_union(self, graph):
        """The union is traced as one outline."""
        result = graph.perform(BooleanOperation.UNION)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(1.5)


class TestResolveCoincident:
    """Tests for settling shared edges per operation."""

    @pytest.mark.parametrize(
        "operation,first,second",
        [
            (BooleanOperation.UNION, EdgeType.EXTERNAL, EdgeType.INTERNAL),
            (BooleanOperation.INTERSECTION, EdgeType.INTERNAL, EdgeType.EXTERNAL),
            (BooleanOperation.DIFFERENCE, EdgeType.INTERNAL, EdgeType.EXTERNAL),
        ],
    )
    def test_interiors_on_same_side(self, operation, first, second):
        assert resolve_coincident(operation, True, True) == first
        assert resolve_coincident(operation, False, True) == second

    @pytest.mark.parametrize(
        "operation,first,second",
        [
            (BooleanOperation.UNION, EdgeType.INTERNAL, EdgeType.INTERNAL),
            (BooleanOperation.INTERSECTION, EdgeType.EXTERNAL, EdgeType.EXTERNAL),
            (BooleanOperation.DIFFERENCE, EdgeType.EXTERNAL, EdgeType.EXTERNAL),
        ],
    )
    def test_interiors_on_opposite_sides(self, operation, first, second):
        assert resolve_coincident(operation, True, False) == first
        assert resolve_coincident(operation, False, False) == second

    def test_kept_edges(self):
        """Difference keeps the inside of the second path."""
        assert kept_edge(BooleanOperation.DIFFERENCE, True) == EdgeType.EXTERNAL
        assert kept_edge(BooleanOperation.DIFFERENCE, False) == EdgeType.INTERNAL
        assert kept_edge(BooleanOperation.INTERSECTION, False) == EdgeType.INTERNAL


class TestInconsistencies:
    """Tests for recovering from a graph that cannot be traced cleanly."""

    def test_corrupted_classification(self, caplog):
        """A wrongly classified edge ends the walk with a closed component."""
        graph = build_graph(*overlapping_squares())
        entry = next(
            i for i in graph.list1.all_vertices() if graph.vertices[i].location == Point(2.0, 1.0)
        )
        partner = graph.vertices[entry].neighbor
        # The union walk now turns back along the second square.
        graph.vertices[partner].forward_edge = EdgeType.INTERNAL

        with caplog.at_level(logging.WARNING, logger="bezierbool.core.graph"):
            result = graph.perform(BooleanOperation.UNION)

        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.ALREADY_VISITED
        assert diagnostic.operation == "union"
        assert diagnostic.location == Point(2.0, 1.0)
        assert len(result.components) == 1
        assert result.components[0].is_closed
        assert "already traced" in caplog.text

    def test_clean_graph_has_no_diagnostics(self):
        """The uncorrupted graph traces without inconsistencies."""
        result = build_graph(*overlapping_squares()).perform(BooleanOperation.UNION)

        assert result.diagnostics == ()
