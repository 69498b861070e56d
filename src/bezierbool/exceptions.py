"""Exception hierarchy for bezierbool."""


class BezierBoolError(Exception):
    """Base exception for all bezierbool errors."""

    pass


class GeometryError(BezierBoolError):
    """Errors in geometric construction or calculations."""

    pass


class CurveError(GeometryError):
    """A curve was built from the wrong number of control points."""

    def __init__(self, point_count: int) -> None:
        self.point_count = point_count
        super().__init__(
            f"A curve needs 2, 3 or 4 control points, got {point_count}"
        )


class PathComponentError(GeometryError):
    """Malformed path component data (empty, non-contiguous, bad buffer)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PathLocationError(GeometryError):
    """A location does not address an element of the path."""

    def __init__(self, location: object, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Invalid location {location!r}: {reason}")


class SVGPathError(BezierBoolError):
    """SVG path data could not be parsed into a path."""

    def __init__(self, data: str, reason: str) -> None:
        self.data = data
        self.reason = reason
        super().__init__(f"Invalid SVG path data '{data}': {reason}")


class OffsetError(GeometryError):
    """A curve could not be offset by the requested distance."""

    def __init__(self, distance: float, reason: str) -> None:
        self.distance = distance
        self.reason = reason
        super().__init__(f"Cannot offset by {distance}: {reason}")
