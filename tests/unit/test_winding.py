"""Unit tests for winding counts and point containment.

Tests cover:
- Winding count sign for counter-clockwise and clockwise components
- Rays passing through vertices
- Curved elements split into y-monotonic pieces
- Fill rules and nested components
- Grouping of components into disjoint shapes
"""

from bezierbool.core.winding import (
    component_contains,
    contains,
    disjoint_components,
    path_winding_count,
    winding_count,
    winding_count_adjustment,
    winding_count_implies_containment,
)
from bezierbool.domain import FillRule, Line, Path, PathComponent, Point, Quadratic


def square(x: float, y: float, size: float) -> PathComponent:
    """Counter-clockwise square component."""
    return Path.rectangle(x, y, size, size).components[0]


class TestWindingCount:
    """Tests for winding_count on single components."""

    def test_counter_clockwise_square(self):
        """Counter-clockwise components wind +1 around interior points."""
        assert winding_count(square(0, 0, 2), Point(1, 1)) == 1

    def test_clockwise_square(self):
        """Clockwise components wind -1."""
        assert winding_count(square(0, 0, 2).reversed(), Point(1, 1)) == -1

    def test_outside_points(self):
        """Points outside the component have winding count 0."""
        component = square(0, 0, 2)

        assert winding_count(component, Point(3, 1)) == 0
        assert winding_count(component, Point(-1, 1)) == 0
        assert winding_count(component, Point(1, 5)) == 0

    def test_open_component(self):
        """Open components never contain a point."""
        component = PathComponent([Point(0, 0), Point(2, 0), Point(2, 2)], [1, 1])

        assert winding_count(component, Point(1.5, 0.5)) == 0

    def test_ray_through_vertex(self):
        """A ray through a vertex of a diamond is counted once."""
        diamond = Path.polygon([Point(1, 0), Point(2, 1), Point(1, 2), Point(0, 1)])

        assert winding_count(diamond.components[0], Point(1.5, 1)) == 1
        assert winding_count(diamond.components[0], Point(1, 1)) == 1

    def test_ray_through_horizontal_edge(self):
        """A ray along a horizontal edge neither adds nor drops a crossing."""
        notched = Path.polygon(
            [Point(0, 0), Point(4, 0), Point(4, 4), Point(2, 4), Point(2, 2), Point(0, 2)]
        )

        assert winding_count(notched.components[0], Point(3, 2)) == 1
        assert winding_count(notched.components[0], Point(1, 3)) == 0

    def test_quadratic_element(self):
        """Curved elements are split where they turn vertically."""
        component = PathComponent.from_curves(
            [
                Quadratic(Point(0, 0), Point(1, 2), Point(2, 0)),
                Line(Point(2, 0), Point(0, 0)),
            ]
        )

        assert winding_count(component, Point(1, 0.5)) == -1
        assert winding_count(component, Point(1, 1.5)) == 0
        assert winding_count(component, Point(0.05, 0.5)) == 0

    def test_circle(self):
        """Points inside and just outside a cubic circle."""
        circle = Path.circle(Point(0, 0), 1.0).components[0]

        assert winding_count(circle, Point(0, 0)) == 1
        assert winding_count(circle, Point(0.99, 0)) == 1
        assert winding_count(circle, Point(0.75, 0.6)) == 1
        assert winding_count(circle, Point(0.75, 0.7)) == 0
        assert winding_count(circle, Point(-1.01, 0)) == 0


class TestAdjustment:
    """Tests for the per-run crossing rule."""

    def test_downward_run(self):
        """Moving down across the level counts +1."""
        assert winding_count_adjustment(1.0, 2.0, 0.0) == 1

    def test_upward_run(self):
        """Moving up across the level counts -1."""
        assert winding_count_adjustment(1.0, 0.0, 2.0) == -1

    def test_upper_endpoint_is_counted(self):
        """The upper endpoint belongs to the run, the lower one does not."""
        assert winding_count_adjustment(2.0, 2.0, 0.0) == 1
        assert winding_count_adjustment(0.0, 2.0, 0.0) == 0
        assert winding_count_adjustment(2.0, 0.0, 2.0) == -1
        assert winding_count_adjustment(0.0, 0.0, 2.0) == 0


class TestContainment:
    """Tests for fill rules and containment."""

    def test_fill_rules(self):
        """Nonzero counts any winding, even-odd only odd ones."""
        assert winding_count_implies_containment(2, FillRule.WINDING)
        assert not winding_count_implies_containment(2, FillRule.EVEN_ODD)
        assert winding_count_implies_containment(-1, FillRule.EVEN_ODD)
        assert not winding_count_implies_containment(0, FillRule.WINDING)

    def test_nested_same_direction(self):
        """Nested components in the same direction sum to 2."""
        path = Path((square(0, 0, 4), square(1, 1, 2)))

        assert path_winding_count(path, Point(2, 2)) == 2
        assert contains(path, Point(2, 2))
        assert not contains(path, Point(2, 2), FillRule.EVEN_ODD)
        assert contains(path, Point(0.5, 0.5), FillRule.EVEN_ODD)

    def test_hole(self):
        """A clockwise inner component cuts a hole under both rules."""
        path = Path((square(0, 0, 4), square(1, 1, 2).reversed()))

        assert path_winding_count(path, Point(2, 2)) == 0
        assert not contains(path, Point(2, 2))
        assert not contains(path, Point(2, 2), FillRule.EVEN_ODD)

    def test_ignoring_component(self):
        """A component can be left out of the path winding count."""
        path = Path((square(0, 0, 4), square(1, 1, 2)))
        inner = path.components[1]

        assert path_winding_count(path, Point(2, 2), ignoring=inner) == 1

    def test_component_contains(self):
        """Containment in a single component."""
        assert component_contains(square(0, 0, 2), Point(1, 1))
        assert not component_contains(square(0, 0, 2), Point(3, 3))

    def test_empty_path(self):
        """Nothing is inside the empty path."""
        assert not contains(Path(), Point(0, 0))


class TestDisjointComponents:
    """Tests for disjoint_components."""

    def test_separate_shapes(self):
        """Each outer boundary collects the holes inside it."""
        path = Path(
            (
                square(0, 0, 4),
                square(10, 10, 1),
                square(1, 1, 2).reversed(),
            )
        )

        shapes = disjoint_components(path)

        assert len(shapes) == 2
        assert len(shapes[0].components) == 2
        assert shapes[0].components[0] == square(0, 0, 4)
        assert shapes[1].components == (square(10, 10, 1),)

    def test_island_inside_hole(self):
        """An island inside a hole is its own outer boundary."""
        path = Path(
            (
                square(0, 0, 10),
                square(2, 2, 6).reversed(),
                square(4, 4, 2),
            )
        )

        shapes = disjoint_components(path)

        assert len(shapes) == 2
        assert [len(shape.components) for shape in shapes] == [2, 1]
