"""Configuration management for bezierbool.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- IntersectionConfig: Curve intersection strategy and tolerances
- BooleanConfig: Boolean operation settings
- LoggingConfig: Logging settings
- BezierBoolSettings: Main application settings
"""

from bezierbool.config.settings import (
    BezierBoolSettings,
    BooleanConfig,
    ClassificationMode,
    IntersectionConfig,
    IntersectionStrategy,
    LoggingConfig,
    get_default_settings,
)

__all__ = [
    "BezierBoolSettings",
    "BooleanConfig",
    "ClassificationMode",
    "IntersectionConfig",
    "IntersectionStrategy",
    "LoggingConfig",
    "get_default_settings",
]
