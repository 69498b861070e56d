"""Area and length measurements of paths.

Areas are integrated exactly with Green's theorem by fontTools' `AreaPen`,
so quadratic and cubic elements contribute their true area rather than the
area of a flattened polygon.
"""

from fontTools.pens.areaPen import AreaPen

from bezierbool.domain.path import Path, PathComponent
from bezierbool.io.pens import draw_path


def signed_area(component: PathComponent) -> float:
    """Calculate the signed area enclosed by a component.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Open components are measured as if closed by a straight segment.

    Args:
        component: Path component

    Returns:
        Signed area in square units

    Examples:
        >>> square = Path.rectangle(0, 0, 1, 1).components[0]
        >>> signed_area(square)  # CCW square
        1.0
        >>> signed_area(square.reversed())  # CW square
        -1.0
    """
    pen = AreaPen()
    draw_path(Path((component.closed(),)), pen)
    return pen.value


def path_area(path: Path) -> float:
    """Sum of the signed areas of every component.

    For a path without crossings this is the filled area, with holes
    (components of opposite direction) subtracted.
    """
    return sum(signed_area(component) for component in path.components)


def is_clockwise(component: PathComponent) -> bool:
    """Whether a closed component winds clockwise (negative area)."""
    return signed_area(component) < 0


def component_length(component: PathComponent) -> float:
    """Arc length of a component."""
    return sum(curve.length() for curve in component.curves)
