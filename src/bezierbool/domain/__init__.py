"""Domain models for bezierbool.

This module contains the value types every algorithm works on. All models
are immutable (frozen dataclasses or read-only classes) so they can be shared
freely between intersection results, graph vertices and output paths.

Key classes:
- Point: A 2D point / vector
- BoundingBox: Axis-aligned box with overlap and distance-bound queries
- Line, Quadratic, Cubic: The closed family of Bezier curves
- Intersection: Parameter pair where two curves meet
- PathComponent: Contiguous curves in a flat point buffer
- Path: Ordered collection of components
- TraversalDiagnostic: Recovered inconsistency reported by boolean operations
"""

from bezierbool.domain.box import BoundingBox
from bezierbool.domain.curve import (
    BezierCurve,
    Cubic,
    Curve,
    Intersection,
    Line,
    Quadratic,
    curve_from_points,
)
from bezierbool.domain.diagnostic import DiagnosticKind, TraversalDiagnostic
from bezierbool.domain.path import (
    ComponentIntersection,
    FillRule,
    IndexedLocation,
    Path,
    PathComponent,
    PathIntersection,
    PathLocation,
)
from bezierbool.domain.point import Point

__all__: list[str] = [
    # Enums
    "DiagnosticKind",
    "FillRule",
    # Geometry primitives
    "BoundingBox",
    "Point",
    # Curves
    "BezierCurve",
    "Cubic",
    "Curve",
    "Intersection",
    "Line",
    "Quadratic",
    "curve_from_points",
    # Paths
    "ComponentIntersection",
    "IndexedLocation",
    "Path",
    "PathComponent",
    "PathIntersection",
    "PathLocation",
    "TraversalDiagnostic",
]
