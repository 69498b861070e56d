"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from bezierbool.core.geometry import path_area
from bezierbool.domain.diagnostic import TraversalDiagnostic
from bezierbool.domain.path import Path, PathIntersection

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]bezierbool[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def _format_number(value: float) -> str:
    return f"{value:.6g}"


def print_path_info(label: str, path: Path) -> None:
    """Print a one-line summary of a path.

    Args:
        label: Name shown in front of the summary
        path: Path to describe
    """
    components = len(path.components)
    elements = sum(component.element_count for component in path.components)
    line = Text("  ")
    line.append(label, style="bold")
    line.append(f"  {components} components {SYM_DOT} {elements} elements")
    if not path.is_empty:
        box = path.bounding_box
        line.append(
            f" {SYM_DOT} area {_format_number(path_area(path))}"
            f" {SYM_DOT} box ({_format_number(box.min.x)}, {_format_number(box.min.y)})"
            f"–({_format_number(box.max.x)}, {_format_number(box.max.y)})"
        )
    console.print(line)


def print_result(data: str) -> None:
    """Print result path data without markup so it can be piped.

    Args:
        data: SVG path data
    """
    console.print(data, markup=False, highlight=False, soft_wrap=True)


def print_intersections(path1: Path, path2: Path, intersections: list[PathIntersection]) -> None:
    """Print a table of path intersections.

    Args:
        path1: First path
        path2: Second path
        intersections: Intersections between the two paths
    """
    if not intersections:
        console.print("  No intersections")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("path 1 (component, element, t)")
    table.add_column("path 2 (component, element, t)")
    for index, intersection in enumerate(intersections):
        location1 = intersection.location1
        location2 = intersection.location2
        point = path1.point_at(location1)
        table.add_row(
            str(index),
            _format_number(point.x),
            _format_number(point.y),
            f"{location1.component_index}, {location1.element_index}, "
            f"{_format_number(location1.t)}",
            f"{location2.component_index}, {location2.element_index}, "
            f"{_format_number(location2.t)}",
        )
    console.print(table)
    console.print(f"  [green]{len(intersections)}[/green] intersections")


def print_diagnostics(diagnostics: tuple[TraversalDiagnostic, ...]) -> None:
    """Print traversal diagnostics of a boolean result.

    Args:
        diagnostics: Diagnostics attached to the result path
    """
    for diagnostic in diagnostics:
        console.print(f"  [yellow]{SYM_WARN}[/yellow] {diagnostic.message}", highlight=False)


def print_success(message: str, duration_ms: float | None = None) -> None:
    """Print success message.

    Args:
        message: What was done
        duration_ms: Optional operation duration in milliseconds
    """
    suffix = f" in {duration_ms:.1f}ms" if duration_ms is not None else ""
    console.print(f"\n[bold green]{SYM_OK} {message}[/bold green]{suffix}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
