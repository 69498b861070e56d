"""CLI application entry point for bezierbool.

This module provides the command line interface using Typer. Paths are given
as SVG path data strings, e.g. "M0 0 L2 0 L2 2 L0 2 Z".
"""

import time
from enum import Enum
from pathlib import Path as FilePath
from typing import Annotated

import typer

from bezierbool import __version__
from bezierbool.cli.output import (
    console,
    print_diagnostics,
    print_error,
    print_header,
    print_intersections,
    print_path_info,
    print_result,
    print_step,
    print_success,
)
from bezierbool.config import (
    BezierBoolSettings,
    BooleanConfig,
    ClassificationMode,
    IntersectionConfig,
    IntersectionStrategy,
    LoggingConfig,
)
from bezierbool.core import BooleanOperator, CurveIntersector, contains
from bezierbool.domain import FillRule, Path, Point
from bezierbool.exceptions import BezierBoolError, SVGPathError
from bezierbool.io import path_from_svg, path_to_svg
from bezierbool.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="bezierbool",
    help="Boolean operations on vector paths made of lines and Bezier curves.",
    add_completion=False,
    no_args_is_help=True,
)


class CombineOperation(str, Enum):
    """Operations offered by the combine command."""

    UNION = "union"
    INTERSECTION = "intersection"
    DIFFERENCE = "difference"


StrategyOption = Annotated[
    IntersectionStrategy,
    typer.Option("--strategy", "-s", help="Curve intersection algorithm"),
]
AccuracyOption = Annotated[
    float | None,
    typer.Option(
        "--accuracy",
        "-a",
        help="Intersection accuracy (default: 0.5 for subdivision, 1e-6 for clipping)",
        min=1e-12,
    ),
]
LogFileOption = Annotated[
    FilePath | None,
    typer.Option("--log-file", help="Write detailed logs to file"),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
]
QuietOption = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Only print the result"),
]
PrecisionOption = Annotated[
    int,
    typer.Option("--precision", "-p", help="Decimals written per coordinate", min=0, max=17),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]bezierbool[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Boolean operations on vector paths made of lines and Bezier curves."""


def _build_settings(
    strategy: IntersectionStrategy,
    accuracy: float | None,
    classification: ClassificationMode,
    log_file: FilePath | None,
    log_level: str,
) -> BezierBoolSettings:
    settings = BezierBoolSettings(
        intersection=IntersectionConfig(strategy=strategy),
        boolean=BooleanConfig(accuracy=accuracy, classification=classification),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    if log_file is not None:
        configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
            quiet=True,
        )
    return settings


def _read_path(data: str, label: str) -> Path:
    try:
        return path_from_svg(data)
    except SVGPathError as e:
        print_error(f"Could not parse {label}", details=e.reason)
        raise typer.Exit(code=1) from e


def _print_outcome(
    result: Path, message: str, duration_ms: float, precision: int, quiet: bool
) -> None:
    if quiet:
        print_result(path_to_svg(result, precision))
        return
    print_path_info("result", result)
    print_diagnostics(result.diagnostics)
    print_step("Path data")
    print_result(path_to_svg(result, precision))
    print_success(message, duration_ms)


@app.command()
def combine(
    operation: Annotated[
        CombineOperation,
        typer.Argument(help="Operation to perform", show_default=False),
    ],
    path1: Annotated[str, typer.Argument(help="First path (SVG path data)", show_default=False)],
    path2: Annotated[str, typer.Argument(help="Second path (SVG path data)", show_default=False)],
    strategy: StrategyOption = IntersectionStrategy.SUBDIVISION,
    accuracy: AccuracyOption = None,
    classification: Annotated[
        ClassificationMode,
        typer.Option("--classification", "-c", help="Edge classification mode"),
    ] = ClassificationMode.SAMPLED,
    precision: PrecisionOption = 6,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Combine two paths with union, intersection or difference.

    Example:
        bezierbool combine union "M0 0H2V2H0Z" "M1 1H3V3H1Z"
    """
    settings = _build_settings(strategy, accuracy, classification, log_file, log_level)
    first = _read_path(path1, "first path")
    second = _read_path(path2, "second path")

    if not quiet:
        print_header(__version__)
        print_step("Input")
        print_path_info("path 1", first)
        print_path_info("path 2", second)
        print_step(f"Computing {operation.value}")

    operator = BooleanOperator(settings)
    start_time = time.time()
    try:
        if operation == CombineOperation.UNION:
            result = operator.union(first, second)
        elif operation == CombineOperation.INTERSECTION:
            result = operator.intersection(first, second)
        else:
            result = operator.difference(first, second)
    except BezierBoolError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    duration_ms = (time.time() - start_time) * 1000

    message = f"{operation.value.capitalize()} complete"
    _print_outcome(result, message, duration_ms, precision, quiet)


@app.command("remove-crossings")
def remove_crossings(
    path: Annotated[str, typer.Argument(help="Path (SVG path data)", show_default=False)],
    strategy: StrategyOption = IntersectionStrategy.SUBDIVISION,
    accuracy: AccuracyOption = None,
    precision: PrecisionOption = 6,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Rebuild a path so that its outline no longer crosses itself.

    Example:
        bezierbool remove-crossings "M0 0L2 2L2 0L0 2Z"
    """
    settings = _build_settings(
        strategy, accuracy, ClassificationMode.SAMPLED, log_file, log_level
    )
    source = _read_path(path, "path")

    if not quiet:
        print_header(__version__)
        print_step("Input")
        print_path_info("path", source)
        print_step("Removing crossings")

    start_time = time.time()
    try:
        result = BooleanOperator(settings).remove_crossings(source)
    except BezierBoolError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    duration_ms = (time.time() - start_time) * 1000

    _print_outcome(result, "Crossings removed", duration_ms, precision, quiet)


@app.command()
def intersect(
    path1: Annotated[str, typer.Argument(help="First path (SVG path data)", show_default=False)],
    path2: Annotated[str, typer.Argument(help="Second path (SVG path data)", show_default=False)],
    strategy: StrategyOption = IntersectionStrategy.SUBDIVISION,
    accuracy: AccuracyOption = None,
) -> None:
    """List the points where two paths meet.

    Example:
        bezierbool intersect "M0 0H2V2H0Z" "M1 1H3V3H1Z"
    """
    first = _read_path(path1, "first path")
    second = _read_path(path2, "second path")

    intersector = CurveIntersector(IntersectionConfig(strategy=strategy), accuracy=accuracy)
    intersections = intersector.path_intersections(first, second)
    print_intersections(first, second, intersections)


@app.command("contains")
def contains_command(
    path: Annotated[str, typer.Argument(help="Path (SVG path data)", show_default=False)],
    x: Annotated[float, typer.Argument(help="X coordinate", show_default=False)],
    y: Annotated[float, typer.Argument(help="Y coordinate", show_default=False)],
    even_odd: Annotated[
        bool,
        typer.Option("--even-odd", help="Use the even-odd fill rule instead of nonzero"),
    ] = False,
) -> None:
    """Report whether a point lies inside a path.

    Prints "inside" or "outside"; the exit code is 0 either way.

    Example:
        bezierbool contains "M0 0H2V2H0Z" 1 1
    """
    source = _read_path(path, "path")
    fill_rule = FillRule.EVEN_ODD if even_odd else FillRule.WINDING
    inside = contains(source, Point(x, y), fill_rule)
    console.print("inside" if inside else "outside", highlight=False)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
