"""Unit tests for curve, component and path intersection.

Tests cover:
- Line/line intersection, parallel and collinear segments
- Curve/line intersection through the aligned polynomial
- Subdivision and clipping strategies on cubic pairs
- Coincident curves
- Join filtering for components and self-intersections
"""

import math

import pytest

from bezierbool.config import IntersectionConfig, IntersectionStrategy
from bezierbool.core.intersection import (
    CurveIntersector,
    coincidence,
    intersect,
    intersect_curve_line,
    intersect_lines,
    intersect_subdivision,
)
from bezierbool.domain import (
    Cubic,
    IndexedLocation,
    Intersection,
    Line,
    Path,
    PathLocation,
    Point,
    Quadratic,
)

ROOT_LOW = (1.0 - math.sqrt(0.5)) / 2.0
ROOT_HIGH = (1.0 + math.sqrt(0.5)) / 2.0

# Arch and an upside-down arch over the same x range; they cross where
# t^2 - t + 1/8 = 0 on both curves.
ARCH = Cubic(Point(0, 0), Point(0, 2), Point(2, 2), Point(2, 0))
BOWL = Cubic(Point(0, 1.5), Point(0, -0.5), Point(2, -0.5), Point(2, 1.5))

CLIPPING = IntersectionConfig(strategy=IntersectionStrategy.CLIPPING)


class TestLineIntersection:
    """Tests for intersect_lines."""

    def test_crossing_lines(self):
        """Diagonals of a square cross in the middle."""
        a = Line(Point(0, 0), Point(2, 2))
        b = Line(Point(0, 2), Point(2, 0))

        assert intersect_lines(a, b) == [Intersection(0.5, 0.5)]

    def test_parallel_lines(self):
        """Parallel lines never meet."""
        a = Line(Point(0, 0), Point(2, 0))
        b = Line(Point(0, 1), Point(2, 1))

        assert intersect_lines(a, b) == []

    def test_degenerate_line(self):
        """Zero length segments are ignored."""
        a = Line(Point(1, 1), Point(1, 1))
        b = Line(Point(0, 0), Point(2, 2))

        assert intersect_lines(a, b) == []

    def test_shared_endpoint(self):
        """Lines meeting at endpoints report exact parameters."""
        a = Line(Point(0, 0), Point(1, 0))
        b = Line(Point(1, 0), Point(1, 1))

        assert intersect_lines(a, b) == [Intersection(1.0, 0.0)]

    def test_collinear_overlap(self):
        """Overlapping collinear lines report the two ends of the overlap."""
        a = Line(Point(0, 0), Point(2, 0))
        b = Line(Point(1, 0), Point(3, 0))
        hits = intersect_lines(a, b)

        assert len(hits) == 2
        assert hits[0].t1 == pytest.approx(0.5)
        assert hits[0].t2 == pytest.approx(0.0)
        assert hits[1].t1 == pytest.approx(1.0)
        assert hits[1].t2 == pytest.approx(0.5)

    def test_near_endpoint_snaps(self):
        """Parameters within EPSILON of 1 snap to 1."""
        a = Line(Point(0, 0), Point(1, 0))
        b = Line(Point(1 - 1e-7, -1), Point(1 - 1e-7, 1))

        assert intersect_lines(a, b) == [Intersection(1.0, 0.5)]

    def test_lines_missing_each_other(self):
        """Segments whose extensions cross do not intersect."""
        a = Line(Point(0, 0), Point(1, 0))
        b = Line(Point(2, -1), Point(2, 1))

        assert intersect_lines(a, b) == []


class TestCurveLineIntersection:
    """Tests for intersect_curve_line."""

    def test_quadratic_and_horizontal_line(self):
        """A horizontal line cuts an arch twice."""
        arch = Quadratic(Point(0, 0), Point(1, 2), Point(2, 0))
        line = Line(Point(0, 0.5), Point(2, 0.5))
        hits = intersect_curve_line(arch, line)

        assert [hit.t1 for hit in hits] == [
            pytest.approx(ROOT_LOW, abs=1e-9),
            pytest.approx(ROOT_HIGH, abs=1e-9),
        ]
        for hit in hits:
            assert arch.point_at(hit.t1).distance_to(line.point_at(hit.t2)) < 1e-9

    def test_reverse_swaps_parameters(self):
        """With reverse set the line parameter comes first."""
        arch = Quadratic(Point(0, 0), Point(1, 2), Point(2, 0))
        line = Line(Point(0, 0.5), Point(2, 0.5))

        forward = intersect_curve_line(arch, line)
        backward = intersect_curve_line(arch, line, reverse=True)

        assert sorted(hit.swapped() for hit in forward) == backward

    def test_line_misses_curve(self):
        """A line above the arch does not meet it."""
        arch = Quadratic(Point(0, 0), Point(1, 2), Point(2, 0))
        line = Line(Point(0, 1.5), Point(2, 1.5))

        assert intersect_curve_line(arch, line) == []

    def test_dispatch_orders_curve_and_line(self):
        """intersect keeps parameters in argument order for mixed pairs."""
        arch = Quadratic(Point(0, 0), Point(1, 2), Point(2, 0))
        line = Line(Point(0, 0.5), Point(2, 0.5))

        assert intersect(line, arch) == sorted(hit.swapped() for hit in intersect(arch, line))


class TestCubicIntersection:
    """Tests for cubic/cubic intersection with both strategies."""

    def test_subdivision(self):
        """Subdivision finds both crossings of the arch and the bowl."""
        hits = intersect_subdivision(ARCH, BOWL, accuracy=1e-4)

        assert len(hits) == 2
        assert hits[0].t1 == pytest.approx(ROOT_LOW, abs=1e-3)
        assert hits[0].t2 == pytest.approx(ROOT_LOW, abs=1e-3)
        assert hits[1].t1 == pytest.approx(ROOT_HIGH, abs=1e-3)
        assert hits[1].t2 == pytest.approx(ROOT_HIGH, abs=1e-3)

    def test_clipping(self):
        """Fat-line clipping finds both crossings precisely."""
        hits = intersect(ARCH, BOWL, CLIPPING)

        assert len(hits) == 2
        assert hits[0].t1 == pytest.approx(ROOT_LOW, abs=1e-5)
        assert hits[1].t1 == pytest.approx(ROOT_HIGH, abs=1e-5)
        for hit in hits:
            assert ARCH.point_at(hit.t1).distance_to(BOWL.point_at(hit.t2)) < 1e-4

    @pytest.mark.parametrize("strategy", list(IntersectionStrategy))
    def test_strategies_are_symmetric(self, strategy):
        """Swapping the curves swaps the parameters."""
        config = IntersectionConfig(strategy=strategy)
        accuracy = 1e-4 if strategy == IntersectionStrategy.SUBDIVISION else None

        forward = intersect(ARCH, BOWL, config, accuracy)
        backward = intersect(BOWL, ARCH, config, accuracy)

        assert len(forward) == len(backward) == 2
        for hit, other in zip(forward, backward):
            assert hit.t1 == pytest.approx(other.t2, abs=1e-3)
            assert hit.t2 == pytest.approx(other.t1, abs=1e-3)

    @pytest.mark.parametrize("strategy", list(IntersectionStrategy))
    def test_disjoint_curves(self, strategy):
        """Curves with disjoint boxes do not intersect."""
        far = Cubic(Point(10, 0), Point(10, 2), Point(12, 2), Point(12, 0))

        assert intersect(ARCH, far, IntersectionConfig(strategy=strategy)) == []

    def test_results_are_sorted_and_snapped(self):
        """Curves meeting at their endpoints report exact 0 and 1."""
        first = Cubic(Point(0, 0), Point(1, 2), Point(2, 2), Point(3, 0))
        second = Cubic(Point(3, 0), Point(4, 2), Point(5, 2), Point(6, 0))

        hits = intersect(first, second)

        assert hits == [Intersection(1.0, 0.0)]


class TestCoincidence:
    """Tests for coincident curves."""

    def test_identical_cubics(self):
        """A curve coincides with itself from end to end."""
        overlap = coincidence(ARCH, ARCH, 1e-6)

        assert overlap is not None
        assert overlap[0].t1 == pytest.approx(0.0)
        assert overlap[1].t1 == pytest.approx(1.0)

    def test_partial_overlap(self):
        """A sub-curve coincides with the part it was cut from."""
        part = ARCH.split(0.25, 0.75)
        overlap = coincidence(ARCH, part, 1e-6)

        assert overlap is not None
        assert overlap[0].t1 == pytest.approx(0.25, abs=1e-6)
        assert overlap[0].t2 == pytest.approx(0.0, abs=1e-6)
        assert overlap[1].t1 == pytest.approx(0.75, abs=1e-6)
        assert overlap[1].t2 == pytest.approx(1.0, abs=1e-6)

    def test_crossing_curves_are_not_coincident(self):
        """Transversal curves do not share a stretch."""
        assert coincidence(ARCH, BOWL, 1e-6) is None

    def test_subdivision_detects_coincidence(self):
        """Subdivision of coincident curves stops at the cap and reports the overlap."""
        hits = intersect(ARCH, ARCH.split(0.25, 0.75), accuracy=1e-3)

        assert len(hits) == 2


class TestCurveIntersector:
    """Tests for component and path level queries."""

    def test_overlapping_squares(self):
        """Two overlapping squares cross twice, away from any corner."""
        square1 = Path.rectangle(0, 0, 2, 2)
        square2 = Path.rectangle(1, 1, 2, 2)

        hits = sorted(CurveIntersector().path_intersections(square1, square2))

        assert [(hit.location1, hit.location2) for hit in hits] == [
            (PathLocation(0, 1, 0.5), PathLocation(0, 0, 0.5)),
            (PathLocation(0, 2, 0.5), PathLocation(0, 3, 0.5)),
        ]

    def test_shared_corner_reported_once(self):
        """A corner touch is reported at the end of an element, not twice."""
        square1 = Path.rectangle(0, 0, 1, 1)
        square2 = Path.rectangle(1, 1, 1, 1)

        hits = CurveIntersector().path_intersections(square1, square2)

        assert len(hits) == 1
        assert hits[0].location1 == PathLocation(0, 1, 1.0)
        assert hits[0].location2 == PathLocation(0, 3, 1.0)

    def test_disjoint_paths(self):
        """Paths with disjoint boxes are skipped."""
        square1 = Path.rectangle(0, 0, 1, 1)
        square2 = Path.rectangle(5, 5, 1, 1)

        assert CurveIntersector().path_intersections(square1, square2) == []
        assert CurveIntersector().path_intersections(Path(), square2) == []

    def test_bowtie_self_intersection(self):
        """The crossing of a bowtie is its only self-intersection."""
        bowtie = Path.polygon([Point(0, 0), Point(2, 2), Point(2, 0), Point(0, 2)])
        component = bowtie.components[0]

        hits = CurveIntersector().component_self_intersections(component)

        assert len(hits) == 1
        assert hits[0].location1 == IndexedLocation(0, 0.5)
        assert hits[0].location2 == IndexedLocation(2, 0.5)

    def test_simple_polygon_has_no_self_intersections(self):
        """Joins between consecutive elements are not reported."""
        square = Path.rectangle(0, 0, 1, 1)

        assert CurveIntersector().path_self_intersections(square) == []

    def test_looping_cubic_component(self):
        """The loop of a single cubic is reported as a self-intersection."""
        loop = Cubic(Point(0, 0), Point(2, 2), Point(-1, 2), Point(1, 0))
        path = Path.from_curves([loop, Line(Point(1, 0), Point(0, 0))])

        hits = CurveIntersector().path_self_intersections(path)

        assert len(hits) == 1
        assert hits[0].location1.element_index == 0
        assert hits[0].location2.element_index == 0

    def test_crossings_between_components(self):
        """Self-intersections of a path include crossings between its components."""
        path = Path(
            Path.rectangle(0, 0, 2, 2).components + Path.rectangle(1, 1, 2, 2).components
        )

        hits = CurveIntersector().path_self_intersections(path)

        assert len(hits) == 2
        assert all(hit.location1.component_index == 0 for hit in hits)
        assert all(hit.location2.component_index == 1 for hit in hits)

    def test_accuracy_override(self):
        """The intersector passes its accuracy to the strategy."""
        intersector = CurveIntersector(accuracy=1e-4)
        hits = intersector.intersect(ARCH, BOWL)

        assert len(hits) == 2
        assert hits[0].t1 == pytest.approx(ROOT_LOW, abs=1e-3)
