"""
Patchwork Shapes Package
========================
A 2D vector-shape library: geometric primitives (circle, polygon, line
segment, ellipse), a thread-safe composite image, a text codec and
raster/SVG rendering adapters.
"""

from patchwork_shapes.core import CONFIG, configure, load_config, save_config, Profiler
from patchwork_shapes.models import (
    Vec2, BoundingBox, Color, ColorError,
    ShapeType, ShapeError, Shape,
    Circle, Polygon, Line, Ellipse, Image,
    TransformKind, CommandError, parse_command, apply_command
)
from patchwork_shapes.serialization import (
    ParseError, DecodeResult, encode_shape, encode_image,
    decode_shape, decode_records
)

__version__ = "0.1.0"

__all__ = [
    "CONFIG", "configure", "load_config", "save_config", "Profiler",
    "Vec2", "BoundingBox", "Color", "ColorError",
    "ShapeType", "ShapeError", "Shape",
    "Circle", "Polygon", "Line", "Ellipse", "Image",
    "TransformKind", "CommandError", "parse_command", "apply_command",
    "ParseError", "DecodeResult", "encode_shape", "encode_image",
    "decode_shape", "decode_records",
]
