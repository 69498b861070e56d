"""Unit tests for numeric helpers.

Tests cover:
- Bernstein root finding for degrees one to three
- Parameter snapping and tolerance comparison
- Range mapping and signed angles
"""

import math

import pytest

from bezierbool.domain import Point
from bezierbool.utils.roots import (
    EPSILON,
    angle,
    approximately,
    clamp,
    droots,
    map_range,
    snap_unit,
    sorted_unique,
)


class TestDroots:
    """Tests for real roots of Bernstein polynomials."""

    def test_linear_root(self):
        """A line from -1 to 3 crosses zero a quarter of the way."""
        assert droots(-1.0, 3.0) == [0.25]

    def test_constant_linear_has_no_root(self):
        """Equal coefficients describe a constant."""
        assert droots(2.0, 2.0) == []

    def test_quadratic_two_roots(self):
        """(t - 0.25)(t - 0.75) in Bernstein form."""
        assert droots(0.1875, -0.3125, 0.1875) == [0.25, 0.75]

    def test_quadratic_without_real_roots(self):
        """A parabola above the axis has no roots."""
        assert droots(1.0, 0.5, 1.0) == []

    def test_cubic_three_roots(self):
        """(t - 0.1)(t - 0.5)(t - 0.9) in Bernstein form."""
        p0 = -0.045
        p3 = 0.045
        slope = 0.59
        roots = droots(p0, p0 + slope / 3.0, p3 - slope / 3.0, p3)

        assert roots == [
            pytest.approx(0.1, abs=1e-9),
            pytest.approx(0.5, abs=1e-9),
            pytest.approx(0.9, abs=1e-9),
        ]

    def test_cubic_single_root(self):
        """t^3 - 0.125 has one real root at 0.5."""
        roots = droots(-0.125, -0.125, -0.125, 0.875)
        assert roots == [pytest.approx(0.5, abs=1e-9)]

    def test_roots_are_not_filtered_to_unit_interval(self):
        """Roots outside [0, 1] are reported too."""
        assert droots(1.0, 2.0) == [-1.0]

    def test_rejects_wrong_coefficient_count(self):
        """Only degrees one to three are supported."""
        with pytest.raises(ValueError):
            droots(1.0, 2.0, 3.0, 4.0, 5.0)


class TestSnapping:
    """Tests for parameter snapping and comparison."""

    def test_snap_unit(self):
        """Parameters within EPSILON of 0 or 1 snap exactly."""
        assert snap_unit(EPSILON / 2) == 0.0
        assert snap_unit(1.0 - EPSILON / 2) == 1.0
        assert snap_unit(-EPSILON / 2) == 0.0
        assert snap_unit(0.5) == 0.5
        assert snap_unit(2 * EPSILON) == 2 * EPSILON

    def test_approximately(self):
        """Comparison uses an inclusive absolute tolerance."""
        assert approximately(1.0, 1.0 + EPSILON / 2)
        assert not approximately(1.0, 1.1)
        assert approximately(1.0, 1.1, precision=0.2)

    def test_clamp(self):
        """Values are limited to the range."""
        assert clamp(-1.0, 0.0, 1.0) == 0.0
        assert clamp(2.0, 0.0, 1.0) == 1.0
        assert clamp(0.3, 0.0, 1.0) == 0.3

    def test_sorted_unique(self):
        """Exact duplicates are dropped after sorting."""
        assert sorted_unique([0.5, 0.1, 0.5, 0.3]) == [0.1, 0.3, 0.5]


class TestGeometryHelpers:
    """Tests for range mapping and angles."""

    def test_map_range(self):
        """Mapping the ends of the source range gives the target ends."""
        assert map_range(2.0, 2.0, 4.0, 0.0, 1.0) == 0.0
        assert map_range(4.0, 2.0, 4.0, 0.0, 1.0) == 1.0
        assert map_range(3.0, 2.0, 4.0, 10.0, 20.0) == 15.0

    def test_angle_sign(self):
        """Counter-clockwise angles are positive."""
        origin = Point(0.0, 0.0)

        assert angle(origin, Point(1.0, 0.0), Point(0.0, 1.0)) == pytest.approx(math.pi / 2)
        assert angle(origin, Point(0.0, 1.0), Point(1.0, 0.0)) == pytest.approx(-math.pi / 2)
