"""
Patchwork Shapes - Data Models
==============================
This package contains the geometric value types, the primitive shapes,
the composite image and the named transform commands.
"""

from patchwork_shapes.models.geometry import (
    Vec2, BoundingBox, dot, norm, triangle_area
)
from patchwork_shapes.models.color import (
    ColorError, Color, parse_color
)
from patchwork_shapes.models.shape import (
    ShapeType, ShapeError, Shape,
    Circle, Polygon, Line, Ellipse,
    format_float, validate_axis
)
from patchwork_shapes.models.image import Image
from patchwork_shapes.models.commands import (
    TransformKind, CommandError, TransformCommand,
    parse_command, apply_command
)

__all__ = [
    'Vec2', 'BoundingBox', 'dot', 'norm', 'triangle_area',
    'ColorError', 'Color', 'parse_color',
    'ShapeType', 'ShapeError', 'Shape',
    'Circle', 'Polygon', 'Line', 'Ellipse',
    'format_float', 'validate_axis',
    'Image',
    'TransformKind', 'CommandError', 'TransformCommand',
    'parse_command', 'apply_command'
]
