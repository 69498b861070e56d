"""Numeric helpers shared by the curve and intersection code.

Polynomials are handled in Bernstein form throughout: `droots` receives the
Bernstein coefficients of a polynomial of degree one to three and returns its
real roots, unfiltered, in ascending order.
"""

import math
from collections.abc import Iterable

from bezierbool.domain.point import Point

# Snapping distance for parameters at 0 and 1.
EPSILON = 1e-5
SMALL_VALUE = 1e-8


def approximately(a: float, b: float, precision: float = EPSILON) -> bool:
    """Check whether two values are within `precision` of each other."""
    return abs(a - b) <= precision


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def map_range(value: float, ds: float, de: float, ts: float, te: float) -> float:
    """Map `value` from the interval [ds, de] onto [ts, te].

    Examples:
        >>> map_range(0.5, 0.0, 1.0, 2.0, 4.0)
        3.0
    """
    return ts + (te - ts) * ((value - ds) / (de - ds))


def snap_unit(t: float, epsilon: float = EPSILON) -> float:
    """Snap a parameter within `epsilon` of 0 or 1 to exactly 0 or 1."""
    if abs(t) <= epsilon:
        return 0.0
    if abs(t - 1.0) <= epsilon:
        return 1.0
    return t


def angle(o: Point, v1: Point, v2: Point) -> float:
    """Signed angle at `o` from `v1` to `v2`, in radians."""
    d1 = v1 - o
    d2 = v2 - o
    return math.atan2(d1.cross(d2), d1.dot(d2))


def lines_intersection(a1: Point, a2: Point, b1: Point, b2: Point) -> Point | None:
    """Meeting point of the infinite lines through (a1, a2) and (b1, b2).

    Returns:
        The point, or None for parallel or degenerate lines

    Examples:
        >>> lines_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        Point(x=1.0, y=1.0)
    """
    da = a2 - a1
    db = b2 - b1
    denominator = da.cross(db)
    if denominator == 0.0 or not math.isfinite(denominator):
        return None
    s = (b1 - a1).cross(db) / denominator
    return a1 + da * s


def sorted_unique(values: Iterable[float]) -> list[float]:
    """Sort values and drop exact duplicates."""
    result: list[float] = []
    for value in sorted(values):
        if not result or result[-1] != value:
            result.append(value)
    return result


def _cube_root(value: float) -> float:
    if value < 0:
        return -((-value) ** (1.0 / 3.0))
    return value ** (1.0 / 3.0)


def droots(*coefficients: float) -> list[float]:
    """Real roots of a polynomial given in Bernstein form.

    Args:
        *coefficients: Two, three or four Bernstein coefficients

    Returns:
        The real roots in ascending order. Roots are not restricted to [0, 1];
        callers filter them.

    Raises:
        ValueError: If the number of coefficients is not 2, 3 or 4

    Examples:
        >>> droots(-1.0, 1.0)
        [0.5]
        >>> droots(1.0, -1.0, 1.0)
        [0.5]
    """
    count = len(coefficients)
    if count == 2:
        return _linear_roots(*coefficients)
    if count == 3:
        return _quadratic_roots(*coefficients)
    if count == 4:
        return _cubic_roots(*coefficients)
    raise ValueError(f"droots expects 2 to 4 coefficients, got {count}")


def _linear_roots(p0: float, p1: float) -> list[float]:
    if p0 == p1:
        return []
    return [p0 / (p0 - p1)]


def _quadratic_roots(p0: float, p1: float, p2: float) -> list[float]:
    d = p0 - 2.0 * p1 + p2
    if abs(d) <= EPSILON:
        # Nearly linear.
        if p0 == p1:
            return []
        return [0.5 * p0 / (p0 - p1)]
    radical = p1 * p1 - p0 * p2
    if radical < 0:
        return []
    m1 = math.sqrt(radical)
    m2 = p0 - p1
    roots = [(m2 + m1) / d, (m2 - m1) / d]
    return sorted_unique(roots)


def _cubic_roots(p0: float, p1: float, p2: float, p3: float) -> list[float]:
    d = -p0 + 3.0 * p1 - 3.0 * p2 + p3
    a = 3.0 * p0 - 6.0 * p1 + 3.0 * p2
    b = -3.0 * p0 + 3.0 * p1
    c = p0
    if abs(d) < SMALL_VALUE:
        # Degree drops to two: a t^2 + b t + c in Bernstein form.
        return _quadratic_roots(c, b / 2.0 + c, a + b + c)

    a /= d
    b /= d
    c /= d
    p = (3.0 * b - a * a) / 3.0
    q = (2.0 * a * a * a - 9.0 * a * b + 27.0 * c) / 27.0
    q2 = q / 2.0
    discriminant = q2 * q2 + p * p * p / 27.0
    shift = a / 3.0

    if discriminant < -SMALL_VALUE:
        r = math.sqrt(-p * p * p / 27.0)
        cos_phi = clamp(-q / (2.0 * r), -1.0, 1.0)
        phi = math.acos(cos_phi)
        t1 = 2.0 * _cube_root(r)
        roots = [
            t1 * math.cos((phi + 2.0 * math.pi * k) / 3.0) - shift
            for k in range(3)
        ]
    elif discriminant > SMALL_VALUE:
        sd = math.sqrt(discriminant)
        roots = [_cube_root(-q2 + sd) - _cube_root(q2 + sd) - shift]
    else:
        u1 = _cube_root(-q2)
        roots = [2.0 * u1 - shift, -u1 - shift]
    return sorted_unique(roots)
