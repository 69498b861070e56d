"""Boolean operations on paths.

`BooleanOperator` prepares the operands, finds their intersections, builds an
`AugmentedGraph` and traces the requested operation through it. The module
level functions wrap a default operator.

Example:
    result = union(Path.rectangle(0, 0, 2, 2), Path.circle(Point(2, 2), 1))
"""

import time

import structlog

from bezierbool.config.settings import BezierBoolSettings, BooleanConfig, get_default_settings
from bezierbool.core.graph import AugmentedGraph, BooleanOperation
from bezierbool.core.intersection import CurveIntersector
from bezierbool.core.winding import contains
from bezierbool.domain.path import Path
from bezierbool.utils.logging import OperationLogger, OperationStats, get_logger


class BooleanOperator:
    """Runs boolean operations with one configuration.

    Operands are treated as filled shapes: open components are closed with a
    straight segment first (unless disabled in the configuration). Results are
    new paths; the operands are never modified.

    Example:
        operator = BooleanOperator()
        holed = operator.difference(outer, inner)
        print(operator.stats.operation_count)
    """

    def __init__(
        self,
        config: BezierBoolSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the operator.

        Args:
            config: Settings; the intersection and boolean sections are used
            logger: Structured logger (defaults to the package logger)
        """
        self.config = config or get_default_settings()
        self.logger = logger or get_logger(__name__)
        self.operation_logger = OperationLogger(self.logger)
        self.intersector = CurveIntersector(
            self.config.intersection, accuracy=self.config.boolean.accuracy
        )

    @property
    def stats(self) -> OperationStats:
        """Statistics of every operation run so far."""
        return self.operation_logger.stats

    def _prepare(self, path: Path) -> Path:
        if self.config.boolean.close_open_components:
            return path.closed()
        return path

    def _combine(self, path1: Path, path2: Path, operation: BooleanOperation) -> Path:
        start_time = time.time()
        self.operation_logger.log_operation_start(
            operation.value, len(path1.components), len(path2.components)
        )

        intersections = self.intersector.path_intersections(path1, path2)
        self.operation_logger.log_intersections(operation.value, len(intersections))

        graph = AugmentedGraph(
            path1, path2, intersections, classification=self.config.boolean.classification
        )
        result = graph.perform(operation)
        return self._finish(operation, result, start_time)

    def _finish(self, operation: BooleanOperation, result: Path, start_time: float) -> Path:
        for diagnostic in result.diagnostics:
            self.operation_logger.log_diagnostic(diagnostic)
        duration_ms = (time.time() - start_time) * 1000
        self.operation_logger.log_operation_complete(
            operation.value, len(result.components), duration_ms
        )
        return result

    def union(self, path1: Path, path2: Path) -> Path:
        """Area covered by either path."""
        path1 = self._prepare(path1)
        path2 = self._prepare(path2)
        if path1.is_empty:
            self.operation_logger.log_short_circuit("union", "first operand empty")
            return path2
        if path2.is_empty:
            self.operation_logger.log_short_circuit("union", "second operand empty")
            return path1
        return self._combine(path1, path2, BooleanOperation.UNION)

    def intersection(self, path1: Path, path2: Path) -> Path:
        """Area covered by both paths."""
        path1 = self._prepare(path1)
        path2 = self._prepare(path2)
        if path1.is_empty or path2.is_empty:
            self.operation_logger.log_short_circuit("intersection", "operand empty")
            return Path()
        return self._combine(path1, path2, BooleanOperation.INTERSECTION)

    def difference(self, path1: Path, path2: Path) -> Path:
        """Area covered by `path1` but not by `path2`."""
        path1 = self._prepare(path1)
        path2 = self._prepare(path2)
        if path1.is_empty or path2.is_empty:
            self.operation_logger.log_short_circuit("difference", "operand empty")
            return path1
        # Tracing the subtracted path backwards turns it into a hole.
        return self._combine(path1, path2.reversed(), BooleanOperation.DIFFERENCE)

    def remove_crossings(self, path: Path) -> Path:
        """Rebuild a path so that its outline no longer crosses itself.

        Regions with a nonzero winding count stay filled. Where the outline
        only touches itself (a figure-eight) it is split into separate loops.

        Args:
            path: Path to clean up

        Returns:
            Path whose components do not cross each other or themselves
        """
        path = self._prepare(path)
        if path.is_empty:
            self.operation_logger.log_short_circuit("remove_crossings", "operand empty")
            return path

        operation = BooleanOperation.REMOVE_CROSSINGS
        start_time = time.time()
        self.operation_logger.log_operation_start(operation.value, len(path.components), 0)

        intersections = self.intersector.path_self_intersections(path)
        self.operation_logger.log_intersections(operation.value, len(intersections))

        graph = AugmentedGraph(path, None, intersections)
        return self._finish(operation, graph.perform(operation), start_time)

    def contains_path(self, path1: Path, path2: Path) -> bool:
        """Whether `path2` lies entirely inside `path1`.

        True when the outlines do not meet and the start point of every
        component of `path2` is inside `path1` (nonzero rule).
        """
        path1 = self._prepare(path1)
        path2 = self._prepare(path2)
        if path1.is_empty or path2.is_empty:
            return False
        if not all(contains(path1, component.start) for component in path2.components):
            return False
        return not self.intersector.path_intersections(path1, path2)


def _operator(config: BezierBoolSettings | None, accuracy: float | None) -> BooleanOperator:
    config = config or get_default_settings()
    if accuracy is not None:
        boolean = BooleanConfig.model_validate(
            {**config.boolean.model_dump(), "accuracy": accuracy}
        )
        config = config.model_copy(update={"boolean": boolean})
    return BooleanOperator(config)


def union(
    path1: Path,
    path2: Path,
    accuracy: float | None = None,
    config: BezierBoolSettings | None = None,
) -> Path:
    """Union of two paths. See `BooleanOperator.union`.

    Args:
        path1: First operand
        path2: Second operand
        accuracy: Intersection accuracy, overriding the one in `config`
        config: Settings (defaults apply when omitted)

    Raises:
        pydantic.ValidationError: If `accuracy` is not positive
    """
    return _operator(config, accuracy).union(path1, path2)


def intersection(
    path1: Path,
    path2: Path,
    accuracy: float | None = None,
    config: BezierBoolSettings | None = None,
) -> Path:
    """Intersection of two paths. See `BooleanOperator.intersection`."""
    return _operator(config, accuracy).intersection(path1, path2)


def difference(
    path1: Path,
    path2: Path,
    accuracy: float | None = None,
    config: BezierBoolSettings | None = None,
) -> Path:
    """`path1` minus `path2`. See `BooleanOperator.difference`."""
    return _operator(config, accuracy).difference(path1, path2)


def remove_crossings(
    path: Path, accuracy: float | None = None, config: BezierBoolSettings | None = None
) -> Path:
    """Self-union of a path. See `BooleanOperator.remove_crossings`."""
    return _operator(config, accuracy).remove_crossings(path)


def contains_path(
    path1: Path,
    path2: Path,
    accuracy: float | None = None,
    config: BezierBoolSettings | None = None,
) -> bool:
    """Whether `path2` lies inside `path1`. See `BooleanOperator.contains_path`."""
    return _operator(config, accuracy).contains_path(path1, path2)
