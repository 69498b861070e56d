"""Logging utilities for bezierbool."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

from bezierbool.domain.diagnostic import TraversalDiagnostic


@dataclass
class OperationStats:
    """Statistics from a series of boolean operations."""

    operation_count: int = 0
    intersection_count: int = 0
    component_count: int = 0
    diagnostic_count: int = 0
    operations: dict[str, int] = field(default_factory=dict)
    total_duration_ms: float = 0.0

    @property
    def average_duration_ms(self) -> float:
        """Average duration of one operation."""
        if self.operation_count:
            return self.total_duration_ms / self.operation_count
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"bezierbool_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("bezierbool")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


def get_logger(name: str = "bezierbool") -> structlog.stdlib.BoundLogger:
    """Structlog logger backed by the stdlib logger of the same name.

    Until `configure_logging` is called, events only reach stdlib handlers
    the application installed itself.
    """
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


class OperationLogger:
    """Logger for boolean operations that also keeps running statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = OperationStats()

    def log_operation_start(self, operation: str, components1: int, components2: int) -> None:
        """Log start of a boolean operation."""
        self._logger.debug(
            "Starting operation",
            operation=operation,
            components1=components1,
            components2=components2,
        )

    def log_intersections(self, operation: str, count: int) -> None:
        """Log the number of intersections the graph is built from."""
        self._logger.debug("Intersections found", operation=operation, count=count)
        self._stats.intersection_count += count

    def log_operation_complete(
        self,
        operation: str,
        component_count: int,
        duration_ms: float,
    ) -> None:
        """Log a finished boolean operation."""
        self._logger.info(
            "Operation complete",
            operation=operation,
            components=component_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.operation_count += 1
        self._stats.component_count += component_count
        self._stats.total_duration_ms += duration_ms
        self._stats.operations[operation] = self._stats.operations.get(operation, 0) + 1

    def log_short_circuit(self, operation: str, reason: str) -> None:
        """Log an operation answered without building a graph."""
        self._logger.debug("Operation short-circuited", operation=operation, reason=reason)

    def log_diagnostic(self, diagnostic: TraversalDiagnostic) -> None:
        """Log a traversal inconsistency recovered by closing a component."""
        self._logger.warning(
            "Traversal inconsistency",
            operation=diagnostic.operation,
            kind=diagnostic.kind.name,
            x=diagnostic.location.x,
            y=diagnostic.location.y,
        )
        self._stats.diagnostic_count += 1

    @property
    def stats(self) -> OperationStats:
        """Get current operation statistics."""
        return self._stats
