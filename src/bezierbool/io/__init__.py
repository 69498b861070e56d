"""Path I/O layer for bezierbool.

This module converts paths to and from external representations using
fonttools:

- Drawing paths into any fontTools pen, and building paths from pen output
- Reading and writing SVG path data

Key functions:
- draw_path: Replay a path into a pen
- path_from_svg / path_to_svg: SVG path data conversion
"""

from bezierbool.io.pens import PathPen, draw_path, path_from_recording
from bezierbool.io.svg import path_from_svg, path_to_svg

__all__ = [
    "PathPen",
    "draw_path",
    "path_from_recording",
    "path_from_svg",
    "path_to_svg",
]
