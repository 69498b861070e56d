"""Diagnostics reported by boolean path operations.

Traversal of the augmented graph can run into topological inconsistencies
(usually caused by tangential or nearly coincident inputs). Those are
recovered locally and reported here instead of failing the operation.
"""

from dataclasses import dataclass
from enum import Enum, auto

from bezierbool.domain.point import Point


class DiagnosticKind(Enum):
    """Kind of traversal inconsistency."""

    ALREADY_VISITED = auto()
    EDGE_REVISITED = auto()


@dataclass(frozen=True, slots=True)
class TraversalDiagnostic:
    """A recovered inconsistency met while assembling a boolean result.

    Attributes:
        kind: What went wrong
        operation: Name of the boolean operation being performed
        message: Human readable description
        location: Point where traversal stopped
    """

    kind: DiagnosticKind
    operation: str
    message: str
    location: Point
