"""bezierbool - Boolean operations on vector paths.

bezierbool computes unions, intersections and differences of paths made of
lines, quadratic and cubic Bezier curves, and removes self-crossings from a
single path. The building blocks (curve intersection, winding counts,
bounding box hierarchies, nearest-point queries) are available on their own.

Example:
    >>> from bezierbool import Path, Point, union
    >>> result = union(Path.rectangle(0, 0, 2, 2), Path.rectangle(1, 1, 2, 2))
    >>> len(result.components)
    1
"""

__version__ = "0.1.0"

from bezierbool.config import BezierBoolSettings, get_default_settings
from bezierbool.core import (
    BooleanOperator,
    contains,
    contains_path,
    difference,
    intersection,
    project,
    remove_crossings,
    union,
)
from bezierbool.domain import (
    BoundingBox,
    Cubic,
    FillRule,
    Line,
    Path,
    PathComponent,
    Point,
    Quadratic,
)

__all__ = [
    "BezierBoolSettings",
    "BooleanOperator",
    "BoundingBox",
    "Cubic",
    "FillRule",
    "Line",
    "Path",
    "PathComponent",
    "Point",
    "Quadratic",
    "__version__",
    "contains",
    "contains_path",
    "difference",
    "get_default_settings",
    "intersection",
    "project",
    "remove_crossings",
    "union",
]
