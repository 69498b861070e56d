"""Paths and path components.

A PathComponent is a contiguous run of curves stored as one flat point
buffer plus one order per element; a Path is an ordered collection of
components. Both are immutable values.

Locations address a point on a component (`IndexedLocation`) or on a path
(`PathLocation`) by element index and curve parameter.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING

from bezierbool.domain.box import BoundingBox
from bezierbool.domain.curve import Cubic, Curve, curve_from_points
from bezierbool.domain.diagnostic import TraversalDiagnostic
from bezierbool.domain.point import Point
from bezierbool.exceptions import PathComponentError, PathLocationError

if TYPE_CHECKING:
    from fontTools.misc.transform import Transform

    from bezierbool.core.bvh import BoundingBoxHierarchy

# Control point distance for a quarter circle made of one cubic.
_KAPPA = 0.5522847498307936


class FillRule(str, Enum):
    """Rule deciding which winding counts are inside a path."""

    WINDING = "winding"
    EVEN_ODD = "even_odd"


@dataclass(frozen=True, slots=True, order=True)
class IndexedLocation:
    """Location on a path component.

    Attributes:
        element_index: Index of the curve within the component
        t: Parameter on that curve
    """

    element_index: int
    t: float


@dataclass(frozen=True, slots=True, order=True)
class PathLocation:
    """Location on a path.

    Attributes:
        component_index: Index of the component within the path
        element_index: Index of the curve within the component
        t: Parameter on that curve
    """

    component_index: int
    element_index: int
    t: float

    @property
    def indexed(self) -> IndexedLocation:
        """The location within its component."""
        return IndexedLocation(self.element_index, self.t)


@dataclass(frozen=True, slots=True)
class ComponentIntersection:
    """Meeting point of two path components."""

    location1: IndexedLocation
    location2: IndexedLocation


@dataclass(frozen=True, slots=True, order=True)
class PathIntersection:
    """Meeting point of two paths."""

    location1: PathLocation
    location2: PathLocation


class PathComponent:
    """A contiguous sequence of curves.

    The component stores a flat point buffer together with the order of each
    element; element `i` uses the points from `offsets[i]` to
    `offsets[i] + orders[i]` inclusive, so consecutive elements share their
    join point.

    Example:
        square = PathComponent(
            [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1), Point(0, 0)],
            [1, 1, 1, 1],
        )
        assert square.is_closed
    """

    def __init__(self, points: Sequence[Point], orders: Sequence[int]) -> None:
        """Initialize the component.

        Args:
            points: Flat control point buffer
            orders: Order (1, 2 or 3) of every element

        Raises:
            PathComponentError: If there are no elements, an order is out of
                range, or the buffer length is not 1 + sum(orders)
        """
        points = tuple(points)
        orders = tuple(orders)
        if not orders:
            raise PathComponentError("A path component needs at least one element")
        for order in orders:
            if order not in (1, 2, 3):
                raise PathComponentError(f"Unsupported element order {order}")
        expected = 1 + sum(orders)
        if len(points) != expected:
            raise PathComponentError(
                f"Expected {expected} points for {len(orders)} elements, got {len(points)}"
            )

        offsets = []
        offset = 0
        for order in orders:
            offsets.append(offset)
            offset += order

        self._points: tuple[Point, ...] = points
        self._orders: tuple[int, ...] = orders
        self._offsets: tuple[int, ...] = tuple(offsets)

    @classmethod
    def from_curves(cls, curves: Iterable[Curve]) -> "PathComponent":
        """Build a component from contiguous curves.

        Args:
            curves: Curves where each one starts exactly where the previous
                one ends

        Returns:
            New component

        Raises:
            PathComponentError: If there are no curves or they are not
                contiguous
        """
        curves = list(curves)
        if not curves:
            raise PathComponentError("A path component needs at least one element")

        points = [curves[0].start]
        orders = []
        for index, curve in enumerate(curves):
            if curve.start != points[-1]:
                raise PathComponentError(
                    f"Curve {index} starts at {curve.start.to_tuple()} but the "
                    f"previous curve ends at {points[-1].to_tuple()}"
                )
            points.extend(curve.points[1:])
            orders.append(curve.order)
        return cls(points, orders)

    @property
    def points(self) -> tuple[Point, ...]:
        return self._points

    @property
    def orders(self) -> tuple[int, ...]:
        return self._orders

    @property
    def offsets(self) -> tuple[int, ...]:
        return self._offsets

    @property
    def element_count(self) -> int:
        return len(self._orders)

    def element(self, index: int) -> Curve:
        """Curve at the given element index."""
        offset = self._offsets[index]
        return curve_from_points(self._points[offset : offset + self._orders[index] + 1])

    @cached_property
    def curves(self) -> tuple[Curve, ...]:
        return tuple(self.element(i) for i in range(self.element_count))

    def start_point_for_element(self, index: int) -> Point:
        return self._points[self._offsets[index]]

    def end_point_for_element(self, index: int) -> Point:
        return self._points[self._offsets[index] + self._orders[index]]

    @property
    def start(self) -> Point:
        return self._points[0]

    @property
    def end(self) -> Point:
        return self._points[-1]

    @property
    def is_closed(self) -> bool:
        """Whether the first and last points coincide exactly."""
        return self._points[0] == self._points[-1]

    @property
    def start_location(self) -> IndexedLocation:
        return IndexedLocation(0, 0.0)

    @property
    def end_location(self) -> IndexedLocation:
        return IndexedLocation(self.element_count - 1, 1.0)

    @cached_property
    def bvh(self) -> "BoundingBoxHierarchy":
        """Bounding box hierarchy over the element boxes, built on first use."""
        from bezierbool.core.bvh import BoundingBoxHierarchy

        return BoundingBoxHierarchy([curve.bounding_box for curve in self.curves])

    @property
    def bounding_box(self) -> BoundingBox:
        """Tight box around every element."""
        return self.bvh.bounding_box

    @property
    def bounding_box_of_path(self) -> BoundingBox:
        """Box around every control point."""
        return BoundingBox.from_points(self._points)

    def _checked_element(self, location: IndexedLocation) -> Curve:
        if not 0 <= location.element_index < self.element_count:
            raise PathLocationError(location, f"component has {self.element_count} elements")
        return self.curves[location.element_index]

    def point_at(self, location: IndexedLocation) -> Point:
        """Point at a location.

        Raises:
            PathLocationError: If the element index is out of range
        """
        return self._checked_element(location).point_at(location.t)

    def derivative_at(self, location: IndexedLocation) -> Point:
        return self._checked_element(location).derivative(location.t)

    def normal_at(self, location: IndexedLocation) -> Point:
        return self._checked_element(location).normal(location.t)

    def reversed(self) -> "PathComponent":
        """Same curves traversed in the opposite direction."""
        return PathComponent(tuple(reversed(self._points)), tuple(reversed(self._orders)))

    def closed(self) -> "PathComponent":
        """This component, with a straight closing segment added if it is open."""
        if self.is_closed:
            return self
        return PathComponent(self._points + (self._points[0],), self._orders + (1,))

    def transformed(self, transform: "Transform") -> "PathComponent":
        """Component with every control point mapped by an affine transform.

        Args:
            transform: fontTools affine transform

        Returns:
            New component with the same element orders
        """
        return PathComponent(
            tuple(point.transformed(transform) for point in self._points), self._orders
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathComponent):
            return NotImplemented
        return self._orders == other._orders and self._points == other._points

    def __hash__(self) -> int:
        return hash((self._points, self._orders))

    def __repr__(self) -> str:
        return f"PathComponent(elements={self.element_count}, closed={self.is_closed})"


@dataclass(frozen=True)
class Path:
    """An ordered collection of path components.

    Attributes:
        components: Components in insertion order
        diagnostics: Inconsistencies recovered while building this path with a
            boolean operation; empty for well-formed inputs and for paths
            built directly. Not part of equality.
    """

    components: tuple[PathComponent, ...] = ()
    diagnostics: tuple[TraversalDiagnostic, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "diagnostics", tuple(self.diagnostics))

    @classmethod
    def from_curves(cls, curves: Iterable[Curve]) -> "Path":
        """Path with a single component made of contiguous curves."""
        return cls((PathComponent.from_curves(curves),))

    @classmethod
    def polygon(cls, points: Sequence[Point], closed: bool = True) -> "Path":
        """Path through the given points joined by straight lines.

        Args:
            points: Vertices in drawing order (at least two)
            closed: Add the segment back to the first point

        Returns:
            Single-component path

        Raises:
            PathComponentError: If fewer than two points are given
        """
        points = list(points)
        if len(points) < 2:
            raise PathComponentError("A polygon needs at least two points")
        if closed and points[-1] != points[0]:
            points.append(points[0])
        return cls((PathComponent(points, [1] * (len(points) - 1)),))

    @classmethod
    def rectangle(cls, x: float, y: float, width: float, height: float) -> "Path":
        """Counter-clockwise rectangle with its minimum corner at (x, y)."""
        return cls.polygon(
            [
                Point(x, y),
                Point(x + width, y),
                Point(x + width, y + height),
                Point(x, y + height),
            ]
        )

    @classmethod
    def circle(cls, center: Point, radius: float) -> "Path":
        """Counter-clockwise circle approximated by four cubic arcs.

        The first arc starts at the rightmost point of the circle.
        """
        cx, cy = center.x, center.y
        k = _KAPPA * radius
        start = Point(cx + radius, cy)
        top = Point(cx, cy + radius)
        left = Point(cx - radius, cy)
        bottom = Point(cx, cy - radius)
        return cls.from_curves(
            [
                Cubic(start, Point(cx + radius, cy + k), Point(cx + k, cy + radius), top),
                Cubic(top, Point(cx - k, cy + radius), Point(cx - radius, cy + k), left),
                Cubic(left, Point(cx - radius, cy - k), Point(cx - k, cy - radius), bottom),
                Cubic(bottom, Point(cx + k, cy - radius), Point(cx + radius, cy - k), start),
            ]
        )

    @property
    def is_empty(self) -> bool:
        return not self.components

    @property
    def bounding_box(self) -> BoundingBox:
        box = BoundingBox.empty()
        for component in self.components:
            box = box.union(component.bounding_box)
        return box

    def point_at(self, location: PathLocation) -> Point:
        """Point at a path location.

        Raises:
            PathLocationError: If the component or element index is out of range
        """
        if not 0 <= location.component_index < len(self.components):
            raise PathLocationError(location, f"path has {len(self.components)} components")
        return self.components[location.component_index].point_at(location.indexed)

    def reversed(self) -> "Path":
        """Every component traversed in the opposite direction."""
        return Path(tuple(component.reversed() for component in self.components))

    def closed(self) -> "Path":
        """Every open component closed with a straight segment."""
        return Path(tuple(component.closed() for component in self.components))

    def transformed(self, transform: "Transform") -> "Path":
        """Every component mapped by an affine transform."""
        return Path(tuple(component.transformed(transform) for component in self.components))

    def with_diagnostics(self, diagnostics: Iterable[TraversalDiagnostic]) -> "Path":
        return Path(self.components, tuple(diagnostics))

