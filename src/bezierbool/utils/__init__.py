"""Utility functions for bezierbool.

This module provides:

- Logging setup and operation statistics
- Numeric helpers and Bernstein polynomial root finding
"""

from bezierbool.utils.logging import (
    OperationLogger,
    OperationStats,
    configure_logging,
    get_logger,
)
from bezierbool.utils.roots import EPSILON, SMALL_VALUE, approximately, droots

__all__ = [
    "EPSILON",
    "SMALL_VALUE",
    "OperationLogger",
    "OperationStats",
    "approximately",
    "configure_logging",
    "droots",
    "get_logger",
]
