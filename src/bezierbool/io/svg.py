"""SVG path data reading and writing.

Path data is parsed with fontTools' svgLib and written with its SVG path pen.
Coordinates are taken as they are; no y-axis flip is applied, so a shape that
is counter-clockwise in path coordinates appears clockwise on an SVG canvas.
"""

from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.svgLib.path import parse_path

from bezierbool.domain.path import Path
from bezierbool.exceptions import BezierBoolError, SVGPathError
from bezierbool.io.pens import PathPen, draw_path


def path_from_svg(data: str) -> Path:
    """Parse SVG path data.

    Elliptical arcs are converted to cubic curves.

    Args:
        data: Contents of an SVG `d` attribute

    Returns:
        Path with one component per subpath

    Raises:
        SVGPathError: If the data cannot be parsed

    Examples:
        >>> path = path_from_svg("M0 0 L2 0 L2 2 L0 2 Z")
        >>> path.components[0].element_count
        4
    """
    pen = PathPen()
    try:
        parse_path(data, pen)
        return pen.path
    except (ValueError, IndexError, BezierBoolError) as e:
        raise SVGPathError(data, str(e)) from e


def path_to_svg(path: Path, precision: int = 6) -> str:
    """Format a path as SVG path data.

    Args:
        path: Path to format
        precision: Maximum number of decimals per coordinate

    Returns:
        Path data string, e.g. "M0 0H2V2H0V0Z" for a square
    """

    def format_number(value: float) -> str:
        text = f"{value:.{precision}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return "0" if text in ("", "-0") else text

    pen = SVGPathPen(None, ntos=format_number)
    draw_path(path, pen)
    return pen.getCommands()
