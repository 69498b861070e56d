"""Command-line interface for bezierbool.

This module provides the CLI using Typer with rich output. Every command
takes paths as SVG path data.

Key features:
- combine: union, intersection and difference of two paths
- remove-crossings: self-union of a path
- intersect: table of the points where two paths meet
- contains: point containment under either fill rule
"""

from bezierbool.cli.app import cli, main

__all__ = ["cli", "main"]
