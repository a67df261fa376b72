"""
Geometric shape models.
Provides the closed set of primitive shapes (circle, polygon, line segment,
ellipse) sharing one transform, metric and serialization contract.
Shapes are mutable and transformed in place; they carry no locking of their
own, so a single shape must not be mutated from several threads at once.
"""

import math
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import xml.etree.ElementTree as ET

from patchwork_shapes.core import CONFIG
from patchwork_shapes.models.color import Color, ColorValue
from patchwork_shapes.models.geometry import (
    Vec2, VectorLike, BoundingBox, triangle_area
)
from patchwork_shapes.utils.logger import get_logger

# Configure logger
logger = get_logger(__name__)

# Constants
SVG_PRECISION = 6  # Significant digits for SVG coordinates
DEFAULT_COLOR = (0, 0, 0)


class ShapeType(Enum):
    """Enum for the shape variants, valued by their serialization keyword."""
    CIRCLE = "circle"
    POLYGON = "polygon"
    LINE = "line"
    ELLIPSE = "ellipse"
    IMAGE = "image"

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional['ShapeType']:
        """
        Look up a primitive variant by its serialization keyword.

        Args:
            keyword: Record keyword, e.g. "circle"

        Returns:
            Matching type, or None for unknown keywords (and for the
            composite, which has no record of its own)
        """
        for shape_type in cls:
            if shape_type.value == keyword and shape_type.is_primitive:
                return shape_type
        return None

    @property
    def is_primitive(self) -> bool:
        """Check if this type is a leaf shape rather than a composite."""
        return self is not ShapeType.IMAGE


class ShapeError(Exception):
    """Custom exception for shape-related errors."""
    pass


def format_float(value: float) -> str:
    """Fixed-point float token with the configured number of decimals."""
    return f"{value:.{CONFIG['float_precision']}f}"


def _floats_equal(a: float, b: float) -> bool:
    return abs(a - b) <= CONFIG["float_tolerance"]


def _scale_about(point: Vec2, center: Vec2, ratio: float) -> Vec2:
    return center + ratio * (point - center)


def _reflect_across(point: Vec2, anchor: Vec2, direction: Vec2) -> Vec2:
    # Project onto the axis, then move twice the distance to the projection
    b = (point - anchor).dot(direction) / direction.dot(direction)
    foot = anchor + b * direction
    return point + 2 * (foot - point)


def validate_axis(direction: Vec2) -> None:
    if direction.is_zero():
        raise ShapeError("Axial symmetry requires a non-zero direction vector")


def _svg_number(value: float) -> str:
    return f"{value:.{SVG_PRECISION}g}"


class Shape:
    """
    Base class for all shapes.

    Defines the capability set every variant implements:
    metrics (`area`, `perimeter`), in-place transforms (`translate`,
    `homothety`, `rotate`, `central_sym`, `axial_sym`), the covering
    `bounding_box`, point membership for rasterizers, text serialization
    and debug formatting. Angles are in radians. When no center is given,
    `homothety` and `rotate` work about the shape's own reference point.

    Transform methods return the shape itself for method chaining.
    """

    __slots__ = ('_type', '_color')

    def __init__(self, shape_type: ShapeType, color: Optional[ColorValue] = None):
        """
        Initialize a new shape.

        Args:
            shape_type: Variant tag
            color: Shape color (defaults to black)
        """
        self._type = shape_type
        self._color = Color(color if color is not None else DEFAULT_COLOR)

    @property
    def type(self) -> ShapeType:
        """Get shape type."""
        return self._type

    @property
    def color(self) -> Color:
        """Get shape color."""
        return self._color

    def reference_point(self) -> Vec2:
        """
        Point used by `homothety` and `rotate` when no center is given.

        Returns:
            Reference point of the shape
        """
        raise NotImplementedError("Subclasses must implement reference_point")

    def area(self) -> float:
        """
        Area enclosed by the shape.

        Returns:
            Area value
        """
        raise NotImplementedError("Subclasses must implement area")

    def perimeter(self) -> float:
        """
        Length of the shape boundary.

        Returns:
            Perimeter value
        """
        raise NotImplementedError("Subclasses must implement perimeter")

    def translate(self, offset: VectorLike) -> 'Shape':
        """
        Move every positional parameter by an offset.

        Args:
            offset: Translation vector

        Returns:
            Self for method chaining
        """
        raise NotImplementedError("Subclasses must implement translate")

    def homothety(self, ratio: float, center: Optional[VectorLike] = None) -> 'Shape':
        """
        Scale about a center: every point M moves to center + ratio * (M - center).

        A ratio of 1 is the identity; negative ratios invert through the
        center. Radii scale by the absolute ratio.

        Args:
            ratio: Scale factor
            center: Fixed point (defaults to the reference point)

        Returns:
            Self for method chaining
        """
        raise NotImplementedError("Subclasses must implement homothety")

    def rotate(self, angle: float, center: Optional[VectorLike] = None) -> 'Shape':
        """
        Rotate counter-clockwise about a center.

        Args:
            angle: Rotation angle in radians
            center: Center of rotation (defaults to the reference point)

        Returns:
            Self for method chaining
        """
        raise NotImplementedError("Subclasses must implement rotate")

    def central_sym(self, center: VectorLike) -> 'Shape':
        """
        Point reflection through a center, i.e. a homothety of ratio -1.

        Args:
            center: Center of symmetry

        Returns:
            Self for method chaining
        """
        return self.homothety(-1.0, center)

    def axial_sym(self, point: VectorLike, direction: VectorLike) -> 'Shape':
        """
        Mirror reflection across the line through `point` along `direction`.

        Args:
            point: Any point of the axis
            direction: Axis direction

        Returns:
            Self for method chaining

        Raises:
            ShapeError: If the direction is the zero vector
        """
        raise NotImplementedError("Subclasses must implement axial_sym")

    def bounding_box(self) -> BoundingBox:
        """
        Get the integer axis-aligned box covering the shape.

        Returns:
            Bounding box
        """
        raise NotImplementedError("Subclasses must implement bounding_box")

    def contains_point(self, point: VectorLike) -> bool:
        """
        Check if a point lies inside the shape (boundary included).

        Args:
            point: Point to check

        Returns:
            True if the shape contains the point
        """
        raise NotImplementedError("Subclasses must implement contains_point")

    def serialize(self) -> str:
        """
        Encode the shape as a whitespace-separated record.

        Returns:
            Serialized record, starting with the shape keyword
        """
        raise NotImplementedError("Subclasses must implement serialize")

    def to_debug_string(self) -> str:
        """
        Human-readable multi-line description.

        Returns:
            Debug text
        """
        raise NotImplementedError("Subclasses must implement to_debug_string")

    def to_svg_element(self) -> ET.Element:
        """
        Convert shape to SVG element.

        Returns:
            XML element representing the shape
        """
        raise NotImplementedError("Subclasses must implement to_svg_element")

    def copy(self) -> 'Shape':
        """
        Create a deep copy of the shape.

        Returns:
            Copied shape
        """
        raise NotImplementedError("Subclasses must implement copy")

    def display(self, surface, ratio: float = 1.0) -> int:
        """
        Draw the shape on a raster surface.

        Args:
            surface: Target implementing the Surface protocol
            ratio: Uniform display scale about the surface center

        Returns:
            Number of pixels set (segments count as one)
        """
        from patchwork_shapes.render.rasterizer import rasterize
        return rasterize(self, surface, ratio)

    def _color_tokens(self) -> List[str]:
        return [str(channel) for channel in self._color.rgb]

    def _add_common_attributes(self, element: ET.Element) -> None:
        element.set('fill', self._color.to_svg_string())

    def __str__(self) -> str:
        return self.to_debug_string()


class Circle(Shape):
    """
    Circle defined by its center and radius.
    """

    __slots__ = ('_origin', '_radius')

    def __init__(
        self,
        origin: VectorLike,
        radius: float,
        color: Optional[ColorValue] = None
    ):
        """
        Initialize a circle.

        Args:
            origin: Center of the circle
            radius: Radius (negative values are clamped to 0)
            color: Circle color
        """
        super().__init__(ShapeType.CIRCLE, color)
        self._origin = Vec2.of(origin)
        self._radius = max(0.0, float(radius))

    @property
    def origin(self) -> Vec2:
        """Get center."""
        return self._origin

    @property
    def radius(self) -> float:
        """Get radius."""
        return self._radius

    def reference_point(self) -> Vec2:
        return self._origin

    def area(self) -> float:
        return math.pi * self._radius * self._radius

    def perimeter(self) -> float:
        return 2 * math.pi * self._radius

    def translate(self, offset: VectorLike) -> 'Circle':
        self._origin = self._origin + Vec2.of(offset)
        return self

    def homothety(self, ratio: float, center: Optional[VectorLike] = None) -> 'Circle':
        if center is not None:
            self._origin = _scale_about(self._origin, Vec2.of(center), ratio)
        self._radius *= abs(ratio)
        return self

    def rotate(self, angle: float, center: Optional[VectorLike] = None) -> 'Circle':
        # Rotating a circle about its own center changes nothing
        if center is not None:
            self._origin = self._origin.rotated(angle, Vec2.of(center))
        return self

    def axial_sym(self, point: VectorLike, direction: VectorLike) -> 'Circle':
        direction = Vec2.of(direction)
        validate_axis(direction)
        self._origin = _reflect_across(self._origin, Vec2.of(point), direction)
        return self

    def bounding_box(self) -> BoundingBox:
        r = Vec2(self._radius, self._radius)
        return BoundingBox.from_points((self._origin - r, self._origin + r))

    def contains_point(self, point: VectorLike) -> bool:
        d = Vec2.of(point) - self._origin
        return d.dot(d) <= self._radius * self._radius

    def serialize(self) -> str:
        tokens = [
            self._type.value,
            format_float(self._origin.x),
            format_float(self._origin.y),
            format_float(self._radius),
        ] + self._color_tokens()
        return " ".join(tokens)

    def to_debug_string(self) -> str:
        return f"Circle\n\t{self._origin} {self._radius:g} {self._color}"

    def to_svg_element(self) -> ET.Element:
        circle = ET.Element('circle')
        circle.set('cx', _svg_number(self._origin.x))
        circle.set('cy', _svg_number(self._origin.y))
        circle.set('r', _svg_number(self._radius))
        self._add_common_attributes(circle)
        return circle

    def copy(self) -> 'Circle':
        return Circle(self._origin, self._radius, self._color)

    def __eq__(self, other: object) -> bool:
        """Check if circles are equal."""
        if not isinstance(other, Circle):
            return NotImplemented
        return (
            self._origin == other._origin and
            _floats_equal(self._radius, other._radius) and
            self._color == other._color
        )

    __hash__ = None  # Mutable

    def __repr__(self) -> str:
        return f"Circle(origin={self._origin!r}, radius={self._radius!r}, color={self._color!r})"


class Polygon(Shape):
    """
    Polygon defined by an ordered vertex list.

    The boundary runs through the vertices in order and closes from the
    last vertex back to the first. At least three vertices are expected;
    this is not checked, and fewer give degenerate metrics.
    Self-intersecting outlines are not handled specially.
    """

    __slots__ = ('_points',)

    def __init__(
        self,
        points: Iterable[VectorLike],
        color: Optional[ColorValue] = None
    ):
        """
        Initialize a polygon.

        Args:
            points: Vertices in boundary order
            color: Polygon color
        """
        super().__init__(ShapeType.POLYGON, color)
        self._points: List[Vec2] = [Vec2.of(p) for p in points]

    @property
    def points(self) -> List[Vec2]:
        """Get a copy of the vertex list."""
        return list(self._points)

    def _extent_center(self) -> Vec2:
        if not self._points:
            return Vec2(0.0, 0.0)
        xs = [p.x for p in self._points]
        ys = [p.y for p in self._points]
        return Vec2((min(xs) + max(xs)) / 2.0, (min(ys) + max(ys)) / 2.0)

    def reference_point(self) -> Vec2:
        """Center of the (unrounded) bounding box."""
        return self._extent_center()

    def area(self) -> float:
        """Fan triangulation from the first vertex."""
        if len(self._points) < 3:
            return 0.0
        p0 = self._points[0]
        return sum(
            triangle_area(p0, self._points[i], self._points[i + 1])
            for i in range(1, len(self._points) - 1)
        )

    def perimeter(self) -> float:
        """Sum of edge lengths, closing edge included."""
        n = len(self._points)
        return sum(
            (self._points[(i + 1) % n] - self._points[i]).norm()
            for i in range(n)
        ) if n > 1 else 0.0

    def translate(self, offset: VectorLike) -> 'Polygon':
        offset = Vec2.of(offset)
        self._points = [p + offset for p in self._points]
        return self

    def homothety(self, ratio: float, center: Optional[VectorLike] = None) -> 'Polygon':
        center = Vec2.of(center) if center is not None else self.reference_point()
        self._points = [_scale_about(p, center, ratio) for p in self._points]
        return self

    def rotate(self, angle: float, center: Optional[VectorLike] = None) -> 'Polygon':
        center = Vec2.of(center) if center is not None else self.reference_point()
        self._points = [p.rotated(angle, center) for p in self._points]
        return self

    def axial_sym(self, point: VectorLike, direction: VectorLike) -> 'Polygon':
        direction = Vec2.of(direction)
        validate_axis(direction)
        anchor = Vec2.of(point)
        self._points = [_reflect_across(p, anchor, direction) for p in self._points]
        return self

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self._points)

    def contains_point(self, point: VectorLike) -> bool:
        """
        Even-odd ray casting test.

        Args:
            point: Point to check

        Returns:
            True if a horizontal ray from the point crosses the
            boundary an odd number of times
        """
        p = Vec2.of(point)
        inside = False
        n = len(self._points)
        j = n - 1
        for i in range(n):
            a = self._points[i]
            b = self._points[j]
            if (a.y >= p.y) != (b.y >= p.y):
                crossing_x = (b.x - a.x) * (p.y - a.y) / (b.y - a.y) + a.x
                if p.x <= crossing_x:
                    inside = not inside
            j = i
        return inside

    def serialize(self) -> str:
        tokens = [self._type.value, str(len(self._points))]
        for p in self._points:
            tokens.append(format_float(p.x))
            tokens.append(format_float(p.y))
        return " ".join(tokens + self._color_tokens())

    def to_debug_string(self) -> str:
        lines = ["Polygon"]
        lines.extend(f"\t{p}" for p in self._points)
        lines.append(f"\t{self._color}")
        return "\n".join(lines)

    def to_svg_element(self) -> ET.Element:
        polygon = ET.Element('polygon')
        polygon.set('points', " ".join(
            f"{_svg_number(p.x)},{_svg_number(p.y)}" for p in self._points
        ))
        self._add_common_attributes(polygon)
        return polygon

    def copy(self) -> 'Polygon':
        return Polygon(self._points, self._color)

    def __eq__(self, other: object) -> bool:
        """Check if polygons are equal (same vertices in the same order)."""
        if not isinstance(other, Polygon):
            return NotImplemented
        return (
            len(self._points) == len(other._points) and
            all(a == b for a, b in zip(self._points, other._points)) and
            self._color == other._color
        )

    __hash__ = None  # Mutable

    def __repr__(self) -> str:
        return f"Polygon(points={self._points!r}, color={self._color!r})"


class Line(Shape):
    """
    Directed line segment from `point` to `point + direction`.

    A segment has no interior: `contains_point` is always False, and area
    and perimeter report the configured degenerate metric (1.0 by default).
    """

    __slots__ = ('_point', '_direction')

    def __init__(
        self,
        point: VectorLike,
        direction: VectorLike,
        color: Optional[ColorValue] = None
    ):
        """
        Initialize a line segment.

        Args:
            point: Start point
            direction: Vector from the start point to the end point
            color: Line color
        """
        super().__init__(ShapeType.LINE, color)
        self._point = Vec2.of(point)
        self._direction = Vec2.of(direction)

    @property
    def point(self) -> Vec2:
        """Get start point."""
        return self._point

    @property
    def direction(self) -> Vec2:
        """Get direction vector."""
        return self._direction

    @property
    def end_point(self) -> Vec2:
        """Get end point."""
        return self._point + self._direction

    def endpoints(self) -> Tuple[Vec2, Vec2]:
        """Start and end points, as drawn by rasterizers."""
        return (self._point, self.end_point)

    def length(self) -> float:
        """Euclidean length of the segment."""
        return self._direction.norm()

    def reference_point(self) -> Vec2:
        """Midpoint of the segment, i.e. the centre of its extent."""
        return self._point + 0.5 * self._direction

    def area(self) -> float:
        return float(CONFIG["degenerate_metric"])

    def perimeter(self) -> float:
        return float(CONFIG["degenerate_metric"])

    def _set_endpoints(self, start: Vec2, end: Vec2) -> None:
        self._point = start
        self._direction = end - start

    def translate(self, offset: VectorLike) -> 'Line':
        self._point = self._point + Vec2.of(offset)
        return self

    def homothety(self, ratio: float, center: Optional[VectorLike] = None) -> 'Line':
        center = Vec2.of(center) if center is not None else self.reference_point()
        self._set_endpoints(
            _scale_about(self._point, center, ratio),
            _scale_about(self.end_point, center, ratio)
        )
        return self

    def rotate(self, angle: float, center: Optional[VectorLike] = None) -> 'Line':
        """Rotate about `center`, or about the start point when none is given."""
        center = Vec2.of(center) if center is not None else self._point
        self._set_endpoints(
            self._point.rotated(angle, center),
            self.end_point.rotated(angle, center)
        )
        return self

    def axial_sym(self, point: VectorLike, direction: VectorLike) -> 'Line':
        direction = Vec2.of(direction)
        validate_axis(direction)
        anchor = Vec2.of(point)
        self._set_endpoints(
            _reflect_across(self._point, anchor, direction),
            _reflect_across(self.end_point, anchor, direction)
        )
        return self

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.endpoints())

    def contains_point(self, point: VectorLike) -> bool:
        return False

    def serialize(self) -> str:
        tokens = [
            self._type.value,
            format_float(self._point.x),
            format_float(self._point.y),
            format_float(self._direction.x),
            format_float(self._direction.y),
        ] + self._color_tokens()
        return " ".join(tokens)

    def to_debug_string(self) -> str:
        return f"Line\n\t{self._point} {self._direction} {self._color}"

    def to_svg_element(self) -> ET.Element:
        end = self.end_point
        line = ET.Element('line')
        line.set('x1', _svg_number(self._point.x))
        line.set('y1', _svg_number(self._point.y))
        line.set('x2', _svg_number(end.x))
        line.set('y2', _svg_number(end.y))
        line.set('stroke', self._color.to_svg_string())
        return line

    def copy(self) -> 'Line':
        return Line(self._point, self._direction, self._color)

    def __eq__(self, other: object) -> bool:
        """Check if lines are equal."""
        if not isinstance(other, Line):
            return NotImplemented
        return (
            self._point == other._point and
            self._direction == other._direction and
            self._color == other._color
        )

    __hash__ = None  # Mutable

    def __repr__(self) -> str:
        return f"Line(point={self._point!r}, direction={self._direction!r}, color={self._color!r})"


class Ellipse(Shape):
    """
    Axis-aligned ellipse defined by its center and per-axis radii.

    Axes cannot be represented rotated, so `rotate` without a center is a
    no-op and `rotate` about another point only moves the center.
    """

    __slots__ = ('_origin', '_radius')

    def __init__(
        self,
        origin: VectorLike,
        radius: VectorLike,
        color: Optional[ColorValue] = None
    ):
        """
        Initialize an ellipse.

        Args:
            origin: Center of the ellipse
            radius: Semi-axes as (rx, ry); signs are dropped
            color: Ellipse color
        """
        super().__init__(ShapeType.ELLIPSE, color)
        rx, ry = Vec2.of(radius)
        self._origin = Vec2.of(origin)
        self._radius = Vec2(abs(rx), abs(ry))

    @property
    def origin(self) -> Vec2:
        """Get center."""
        return self._origin

    @property
    def radius(self) -> Vec2:
        """Get semi-axes."""
        return self._radius

    def reference_point(self) -> Vec2:
        return self._origin

    def area(self) -> float:
        return math.pi * self._radius.x * self._radius.y

    def perimeter(self) -> float:
        """Ramanujan's second approximation."""
        rx, ry = self._radius
        if rx + ry == 0:
            return 0.0
        h = ((rx - ry) / (rx + ry)) ** 2
        return math.pi * (rx + ry) * (1 + (3 * h) / (10 + math.sqrt(4 - 3 * h)))

    def translate(self, offset: VectorLike) -> 'Ellipse':
        self._origin = self._origin + Vec2.of(offset)
        return self

    def homothety(self, ratio: float, center: Optional[VectorLike] = None) -> 'Ellipse':
        if center is not None:
            self._origin = _scale_about(self._origin, Vec2.of(center), ratio)
        self._radius = abs(ratio) * self._radius
        return self

    def rotate(self, angle: float, center: Optional[VectorLike] = None) -> 'Ellipse':
        if center is not None:
            self._origin = self._origin.rotated(angle, Vec2.of(center))
        return self

    def axial_sym(self, point: VectorLike, direction: VectorLike) -> 'Ellipse':
        direction = Vec2.of(direction)
        validate_axis(direction)
        self._origin = _reflect_across(self._origin, Vec2.of(point), direction)
        return self

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(
            (self._origin - self._radius, self._origin + self._radius)
        )

    def contains_point(self, point: VectorLike) -> bool:
        d = Vec2.of(point) - self._origin
        rx, ry = self._radius
        return d.x * d.x * ry * ry + d.y * d.y * rx * rx <= rx * rx * ry * ry

    def serialize(self) -> str:
        tokens = [
            self._type.value,
            format_float(self._origin.x),
            format_float(self._origin.y),
            format_float(self._radius.x),
            format_float(self._radius.y),
        ] + self._color_tokens()
        return " ".join(tokens)

    def to_debug_string(self) -> str:
        return f"Ellipse\n\t{self._origin} {self._radius} {self._color}"

    def to_svg_element(self) -> ET.Element:
        ellipse = ET.Element('ellipse')
        ellipse.set('cx', _svg_number(self._origin.x))
        ellipse.set('cy', _svg_number(self._origin.y))
        ellipse.set('rx', _svg_number(self._radius.x))
        ellipse.set('ry', _svg_number(self._radius.y))
        self._add_common_attributes(ellipse)
        return ellipse

    def copy(self) -> 'Ellipse':
        return Ellipse(self._origin, self._radius, self._color)

    def __eq__(self, other: object) -> bool:
        """Check if ellipses are equal."""
        if not isinstance(other, Ellipse):
            return NotImplemented
        return (
            self._origin == other._origin and
            self._radius == other._radius and
            self._color == other._color
        )

    __hash__ = None  # Mutable

    def __repr__(self) -> str:
        return f"Ellipse(origin={self._origin!r}, radius={self._radius!r}, color={self._color!r})"
