"""Integration tests for boolean operations on curved and straight paths.

Tests cover:
- Overlapping circles with both intersection strategies
- Intersection points of the circles
- Squares with partly shared sides and internally tangent circles
- Rectangles with irrational offsets in both classification modes
- Area identities (inclusion-exclusion, difference)
- Holes cut from curved shapes
- Self-crossing stars
- SVG round trips of results
"""

import math

import pytest

from bezierbool import BooleanOperator, Path, Point, contains
from bezierbool.config import (
    BezierBoolSettings,
    BooleanConfig,
    ClassificationMode,
    IntersectionConfig,
    IntersectionStrategy,
)
from bezierbool.core.geometry import path_area
from bezierbool.core.intersection import CurveIntersector
from bezierbool.core.winding import path_winding_count
from bezierbool.io import path_from_svg, path_to_svg

# Lens of two unit circles whose centers are one radius apart.
LENS_AREA = 2 * math.pi / 3 - math.sqrt(3) / 2


def subdivision_operator(
    classification: ClassificationMode = ClassificationMode.SAMPLED,
) -> BooleanOperator:
    return BooleanOperator(
        BezierBoolSettings(
            boolean=BooleanConfig(accuracy=1e-4, classification=classification)
        )
    )


def clipping_operator() -> BooleanOperator:
    return BooleanOperator(
        BezierBoolSettings(
            intersection=IntersectionConfig(strategy=IntersectionStrategy.CLIPPING)
        )
    )


OPERATORS = [
    pytest.param(subdivision_operator, id="subdivision"),
    pytest.param(clipping_operator, id="clipping"),
]


@pytest.fixture
def circles():
    """Two unit circles one radius apart."""
    return Path.circle(Point(0, 0), 1.0), Path.circle(Point(1, 0), 1.0)


@pytest.fixture
def offset_rectangles():
    """A 2x2 square and a copy shifted by irrational amounts."""
    dx = math.sqrt(0.5)
    dy = math.sqrt(3) / 3
    return Path.rectangle(0, 0, 2, 2), Path.rectangle(dx, dy, 2, 2), (2 - dx) * (2 - dy)


class TestCircles:
    """Tests for boolean operations on overlapping circles."""

    @pytest.mark.parametrize(
        "intersector",
        [
            pytest.param(
                CurveIntersector(IntersectionConfig(strategy=IntersectionStrategy.CLIPPING)),
                id="clipping",
            ),
            pytest.param(CurveIntersector(accuracy=1e-4), id="subdivision"),
        ],
    )
    def test_intersection_points(self, circles, intersector):
        """The outlines meet near (0.5, +-sqrt(3)/2).

        The four-arc approximation strays up to about 2.7e-4 of the radius
        from the true circle, which bounds how close the points can get.
        """
        first, second = circles
        expected = [Point(0.5, -math.sqrt(3) / 2), Point(0.5, math.sqrt(3) / 2)]

        hits = intersector.path_intersections(first, second)
        points = [first.point_at(hit.location1) for hit in hits]

        assert {min(expected, key=point.distance_to) for point in points} == set(expected)
        for point in points:
            assert min(point.distance_to(target) for target in expected) < 5e-4
        for hit, point in zip(hits, points):
            assert second.point_at(hit.location2).distance_to(point) < 5e-4
        if intersector.config.strategy == IntersectionStrategy.CLIPPING:
            assert len(hits) == 2

    @pytest.mark.parametrize("make_operator", OPERATORS)
    def test_intersection_is_lens(self, circles, make_operator):
        """The intersection is the lens between the circles."""
        result = make_operator().intersection(*circles)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(LENS_AREA, rel=1e-2)
        assert contains(result, Point(0.5, 0))
        assert not contains(result, Point(-0.5, 0))
        assert result.diagnostics == ()

    @pytest.mark.parametrize("make_operator", OPERATORS)
    def test_union(self, circles, make_operator):
        """The union covers both circles once."""
        result = make_operator().union(*circles)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(2 * math.pi - LENS_AREA, rel=1e-2)
        assert result.diagnostics == ()

    @pytest.mark.parametrize("make_operator", OPERATORS)
    def test_difference(self, circles, make_operator):
        """The difference is a crescent."""
        result = make_operator().difference(*circles)

        assert len(result.components) == 1
        assert path_area(result) == pytest.approx(math.pi - LENS_AREA, rel=1e-2)
        assert contains(result, Point(-0.5, 0))
        assert not contains(result, Point(0.5, 0))

    @pytest.mark.parametrize("make_operator", OPERATORS)
    def test_operand_order(self, circles, make_operator):
        """Union and intersection do not depend on operand order."""
        operator = make_operator()
        first, second = circles

        assert path_area(operator.union(first, second)) == pytest.approx(
            path_area(operator.union(second, first)), rel=1e-3
        )
        assert path_area(operator.intersection(first, second)) == pytest.approx(
            path_area(operator.intersection(second, first)), rel=1e-3
        )

    def test_inclusion_exclusion(self, circles):
        """Area of the union plus the intersection equals the sum of the areas."""
        operator = subdivision_operator()
        first, second = circles

        total = path_area(operator.union(first, second)) + path_area(
            operator.intersection(first, second)
        )

        assert total == pytest.approx(path_area(first) + path_area(second), rel=1e-3)


class TestOffsetRectangles:
    """Tests for rectangles whose crossings are not on a grid."""

    @pytest.mark.parametrize("classification", list(ClassificationMode))
    def test_intersection(self, offset_rectangles, classification):
        """The intersection is the shared rectangle."""
        first, second, overlap = offset_rectangles

        result = subdivision_operator(classification).intersection(first, second)

        assert path_area(result) == pytest.approx(overlap)

    @pytest.mark.parametrize("classification", list(ClassificationMode))
    def test_identities(self, offset_rectangles, classification):
        """Union, intersection and difference areas are consistent."""
        first, second, overlap = offset_rectangles
        operator = subdivision_operator(classification)

        union_area = path_area(operator.union(first, second))
        difference_area = path_area(operator.difference(first, second))
        reverse_difference_area = path_area(operator.difference(second, first))

        assert union_area == pytest.approx(8 - overlap)
        assert difference_area == pytest.approx(4 - overlap)
        assert union_area == pytest.approx(difference_area + reverse_difference_area + overlap)

    def test_disjoint_intersection_is_empty(self):
        """Rectangles that do not meet have an empty intersection."""
        result = subdivision_operator().intersection(
            Path.rectangle(0, 0, 1, 1), Path.rectangle(math.pi, 0, 1, 1)
        )

        assert result.is_empty


class TestSharedEdges:
    """Tests for squares whose sides partly coincide."""

    @pytest.mark.parametrize("classification", list(ClassificationMode))
    def test_half_overlapping_squares(self, classification):
        """Unit squares sharing half their area unite into a 1.5 x 1 rectangle."""
        first = Path.rectangle(0, 0, 1, 1)
        second = Path.rectangle(0.5, 0, 1, 1)

        result = subdivision_operator(classification).union(first, second)
        box = result.bounding_box
        expected = first.bounding_box.union(second.bounding_box)

        assert box.min == expected.min
        assert box.max == expected.max
        assert path_area(result) == pytest.approx(1.5 * path_area(first), abs=1e-3)
        assert len(result.components) == 1

    def test_tangent_circles(self):
        """A circle touching the inside of another adds nothing to the union."""
        outer = Path.circle(Point(0, 0), 2.0)
        inner = Path.circle(Point(1, 0), 1.0)
        operator = subdivision_operator()

        assert path_area(operator.union(outer, inner)) == pytest.approx(4 * math.pi, rel=1e-3)
        assert path_area(operator.intersection(outer, inner)) == pytest.approx(
            math.pi, rel=1e-3
        )
        assert path_area(operator.difference(outer, inner)) == pytest.approx(
            3 * math.pi, rel=1e-3
        )


class TestHoles:
    """Tests for shapes with holes."""

    def test_circle_cut_from_square(self):
        """Subtracting an inner circle leaves a hole with winding count 0."""
        square = Path.rectangle(-2, -2, 4, 4)
        circle = Path.circle(Point(0, 0), 1.0)

        result = subdivision_operator().difference(square, circle)

        assert len(result.components) == 2
        assert path_area(result) == pytest.approx(16 - path_area(circle))
        assert path_winding_count(result, Point(0, 0)) == 0
        assert path_winding_count(result, Point(1.5, 1.5)) == 1

    def test_hole_survives_union(self):
        """A union with a shape outside the hole keeps the hole."""
        holed = Path(
            Path.rectangle(0, 0, 6, 6).components
            + Path.rectangle(2, 2, 2, 2).reversed().components
        )
        wing = Path.rectangle(5, 1, 3, 1)

        result = subdivision_operator().union(holed, wing)

        assert path_area(result) == pytest.approx(36 - 4 + 2)
        assert not contains(result, Point(3, 3))
        assert contains(result, Point(7, 1.5))


class TestRemoveCrossings:
    """Tests for removing self-crossings."""

    def test_pentagram(self):
        """The outline of a pentagram keeps the filled center."""
        angles = [math.pi / 2 + k * 4 * math.pi / 5 for k in range(5)]
        star = Path.polygon([Point(math.cos(angle), math.sin(angle)) for angle in angles])
        inner_radius = math.cos(2 * math.pi / 5) / math.cos(math.pi / 5)
        expected = 5 * inner_radius * math.sin(math.pi / 5)

        result = subdivision_operator().remove_crossings(star)

        assert len(result.components) == 1
        assert result.components[0].element_count == 10
        assert abs(path_area(result)) == pytest.approx(expected)
        assert contains(result, Point(0, 0))

    def test_idempotent(self):
        """A cleaned path has nothing left to clean."""
        bowtie = Path.polygon([Point(0, 0), Point(2, 2), Point(2, 0), Point(0, 2)])
        operator = subdivision_operator()

        once = operator.remove_crossings(bowtie)
        twice = operator.remove_crossings(once)

        assert len(twice.components) == len(once.components)
        assert abs(path_area(twice)) == pytest.approx(abs(path_area(once)))


class TestSVGRoundTrip:
    """Tests for results written as SVG path data."""

    def test_union_round_trip(self, circles):
        """Written results parse back to the same area."""
        result = subdivision_operator().union(*circles)

        parsed = path_from_svg(path_to_svg(result, precision=9))

        assert len(parsed.components) == len(result.components)
        assert path_area(parsed) == pytest.approx(path_area(result), rel=1e-6)
