"""Core algorithms for bezierbool.

This module contains the core algorithms for:

- Bounding box hierarchies over path elements
- Curve, component and path intersection (subdivision and fat-line clipping)
- Winding counts and point containment
- The augmented graph that boolean operations are traced through
- Boolean operations, nearest-point queries and area measurement
- Offset curves, outlines and offset paths

Key functions:
- intersect: Intersect two curves with the configured strategy
- contains: Test if a point is inside a path
- union, intersection, difference, remove_crossings: Boolean operations
- project: Find the closest point of a path
- offset_path: Offset every component of a path along its normals
- signed_area: Exact signed area of a component

Key classes:
- BoundingBoxHierarchy: Static BVH with overlap enumeration
- CurveIntersector: Intersection queries on components and paths
- AugmentedGraph: Intersection-augmented vertex lists with edge classification
- BooleanOperator: Runs boolean operations with one configuration
"""

from bezierbool.core.boolean import (
    BooleanOperator,
    contains_path,
    difference,
    intersection,
    remove_crossings,
    union,
)
from bezierbool.core.bvh import BoundingBoxHierarchy, BVHNode
from bezierbool.core.geometry import path_area, signed_area
from bezierbool.core.graph import AugmentedGraph, BooleanOperation, EdgeType
from bezierbool.core.intersection import CurveIntersector, intersect
from bezierbool.core.offset import (
    Subcurve,
    offset_component,
    offset_curve,
    offset_path,
    outline_curve,
    reduce_curve,
)
from bezierbool.core.projection import is_within_distance_of_boundary, project
from bezierbool.core.winding import contains, disjoint_components, winding_count

__all__ = [
    # Graph and operations
    "AugmentedGraph",
    "BVHNode",
    "BooleanOperation",
    "BooleanOperator",
    "BoundingBoxHierarchy",
    "CurveIntersector",
    "EdgeType",
    "Subcurve",
    "contains",
    "contains_path",
    "difference",
    "disjoint_components",
    "intersect",
    "intersection",
    "is_within_distance_of_boundary",
    "offset_component",
    "offset_curve",
    "offset_path",
    "outline_curve",
    "path_area",
    "project",
    "reduce_curve",
    "remove_crossings",
    "signed_area",
    "union",
    "winding_count",
]
