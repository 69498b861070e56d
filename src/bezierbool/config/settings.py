"""Configuration settings for bezierbool."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class IntersectionStrategy(str, Enum):
    """Algorithm used to intersect two non-linear curves."""

    SUBDIVISION = "subdivision"
    CLIPPING = "clipping"


class ClassificationMode(str, Enum):
    """How boolean operations decide which side of the other path an edge is on."""

    SAMPLED = "sampled"
    RELATIVE = "relative"


class IntersectionConfig(BaseModel):
    """Configuration for curve intersection.

    Tolerances are absolute (subdivision accuracy, in path units) or
    parametric (clipping precision), so they do not scale with the input.
    """

    strategy: IntersectionStrategy = Field(
        default=IntersectionStrategy.SUBDIVISION,
        description="Curve-curve intersection algorithm",
    )
    subdivision_accuracy: float = Field(
        default=0.5,
        gt=0.0,
        description="Stop subdividing once a sub-curve box has width + height below this",
    )
    clipping_precision: float = Field(
        default=1e-6,
        gt=0.0,
        le=0.1,
        description="Parameter interval size at which fat-line clipping stops",
    )
    max_subdivision_results: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Result count at which subdivision gives up and checks for coincidence",
    )
    max_clipping_calls: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum number of recursive clipping calls per curve pair",
    )
    max_clipping_iterations: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum number of clip steps within one clipping call",
    )

    def threshold(self) -> float:
        """Accuracy handed to the configured strategy."""
        if self.strategy == IntersectionStrategy.CLIPPING:
            return self.clipping_precision
        return self.subdivision_accuracy


class BooleanConfig(BaseModel):
    """Configuration for boolean path operations."""

    accuracy: float | None = Field(
        default=None,
        gt=0.0,
        description="Intersection accuracy override (None = use the intersection config)",
    )
    classification: ClassificationMode = Field(
        default=ClassificationMode.SAMPLED,
        description="Edge classification mode for two-path operations",
    )
    close_open_components: bool = Field(
        default=True,
        description="Close open components with a straight segment before combining",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class BezierBoolSettings(BaseModel):
    """Main application settings."""

    intersection: IntersectionConfig = Field(default_factory=IntersectionConfig)
    boolean: BooleanConfig = Field(default_factory=BooleanConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> BezierBoolSettings:
    """Get default application settings."""
    return BezierBoolSettings()
