"""
Geometric value types for the shape models.
Provides an immutable 2D vector and the integer bounding box consumed by
the rasterizer and by the composite container.
"""

import math
from typing import Iterable, Iterator, Tuple, Union

from patchwork_shapes.core import CONFIG

# Type definitions
VectorLike = Union['Vec2', Tuple[float, float]]


class Vec2:
    """
    Immutable 2D vector.

    Every arithmetic operation returns a new vector. Equality is
    component-wise within the configured float tolerance.
    """

    __slots__ = ('_x', '_y')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        """
        Initialize a vector.

        Args:
            x: X component
            y: Y component
        """
        self._x = float(x)
        self._y = float(y)

    @classmethod
    def of(cls, value: VectorLike) -> 'Vec2':
        """
        Coerce a vector or an (x, y) pair into a Vec2.

        Args:
            value: Vec2 instance or 2-item sequence

        Returns:
            Vec2 instance
        """
        if isinstance(value, Vec2):
            return value
        x, y = value
        return cls(x, y)

    @property
    def x(self) -> float:
        """Get x component."""
        return self._x

    @property
    def y(self) -> float:
        """Get y component."""
        return self._y

    def dot(self, other: 'Vec2') -> float:
        """Dot product with another vector."""
        return self._x * other._x + self._y * other._y

    def norm(self) -> float:
        """Euclidean length."""
        return math.hypot(self._x, self._y)

    def is_zero(self) -> bool:
        """Check if both components are exactly zero."""
        return self._x == 0.0 and self._y == 0.0

    def rotated(self, angle: float, center: 'Vec2' = None) -> 'Vec2':
        """
        Rotate counter-clockwise about a center point.

        Args:
            angle: Rotation angle in radians
            center: Center of rotation (defaults to the origin)

        Returns:
            Rotated vector
        """
        cx, cy = (center._x, center._y) if center is not None else (0.0, 0.0)
        s = math.sin(angle)
        c = math.cos(angle)
        dx = self._x - cx
        dy = self._y - cy
        return Vec2(dx * c - dy * s + cx, dx * s + dy * c + cy)

    def almost_equals(self, other: 'Vec2', tolerance: float = None) -> bool:
        """
        Compare with another vector using a float tolerance.

        Args:
            other: Vector to compare with
            tolerance: Maximum absolute difference per component

        Returns:
            True if both components are within tolerance
        """
        if tolerance is None:
            tolerance = CONFIG["float_tolerance"]
        return (
            abs(self._x - other._x) <= tolerance and
            abs(self._y - other._y) <= tolerance
        )

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self._x + other._x, self._y + other._y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self._x - other._x, self._y - other._y)

    def __mul__(self, scalar: float) -> 'Vec2':
        return Vec2(self._x * scalar, self._y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> 'Vec2':
        return Vec2(-self._x, -self._y)

    def __iter__(self) -> Iterator[float]:
        """Allow unpacking: x, y = vec"""
        yield self._x
        yield self._y

    def __eq__(self, other: object) -> bool:
        """Check if vectors are equal within tolerance."""
        if not isinstance(other, Vec2):
            return NotImplemented
        return self.almost_equals(other)

    def __hash__(self) -> int:
        return hash((round(self._x, 6), round(self._y, 6)))

    def __str__(self) -> str:
        return f"({self._x:g}, {self._y:g})"

    def __repr__(self) -> str:
        return f"Vec2({self._x!r}, {self._y!r})"


def dot(a: Vec2, b: Vec2) -> float:
    """Dot product of two vectors."""
    return a.dot(b)


def norm(v: Vec2) -> float:
    """Euclidean length of a vector."""
    return v.norm()


def triangle_area(a: Vec2, b: Vec2, c: Vec2) -> float:
    """Unsigned area of the triangle abc."""
    return 0.5 * abs((b.x - a.x) * (c.y - a.y) - (c.x - a.x) * (b.y - a.y))


class BoundingBox:
    """
    Immutable axis-aligned integer bounding box.

    A new box starts in the inverted sentinel state (minimum at
    +bbox_sentinel, maximum at -bbox_sentinel) so that a min/max sweep
    over points yields the covering box. A box that saw no points stays
    in that state and reports `is_empty`.
    """

    __slots__ = ('_x_min', '_x_max', '_y_min', '_y_max')

    def __init__(self, x_min: int, x_max: int, y_min: int, y_max: int):
        """
        Initialize a bounding box.

        Args:
            x_min: Left bound
            x_max: Right bound
            y_min: Top bound
            y_max: Bottom bound
        """
        self._x_min = int(x_min)
        self._x_max = int(x_max)
        self._y_min = int(y_min)
        self._y_max = int(y_max)

    @classmethod
    def empty(cls) -> 'BoundingBox':
        """Create the inverted sentinel box."""
        sentinel = CONFIG["bbox_sentinel"]
        return cls(sentinel, -sentinel, sentinel, -sentinel)

    @classmethod
    def from_points(cls, points: Iterable[Vec2]) -> 'BoundingBox':
        """
        Create the box covering a set of points.

        Args:
            points: Points to cover

        Returns:
            Covering box, or the sentinel box when no points are given
        """
        box = cls.empty()
        for point in points:
            box = box.include(point)
        return box

    @property
    def x_min(self) -> int:
        return self._x_min

    @property
    def x_max(self) -> int:
        return self._x_max

    @property
    def y_min(self) -> int:
        return self._y_min

    @property
    def y_max(self) -> int:
        return self._y_max

    @property
    def is_empty(self) -> bool:
        """Check if the box is inverted (covers nothing)."""
        return self._x_min > self._x_max or self._y_min > self._y_max

    @property
    def width(self) -> int:
        """Width of the box, 0 when empty."""
        return max(0, self._x_max - self._x_min)

    @property
    def height(self) -> int:
        """Height of the box, 0 when empty."""
        return max(0, self._y_max - self._y_min)

    @property
    def center(self) -> Vec2:
        """Center of the box."""
        return Vec2(
            (self._x_min + self._x_max) / 2.0,
            (self._y_min + self._y_max) / 2.0
        )

    def include(self, point: Vec2) -> 'BoundingBox':
        """
        Grow the box to cover a point.

        Args:
            point: Point to cover

        Returns:
            New bounding box
        """
        return BoundingBox(
            min(self._x_min, math.floor(point.x)),
            max(self._x_max, math.ceil(point.x)),
            min(self._y_min, math.floor(point.y)),
            max(self._y_max, math.ceil(point.y))
        )

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        """
        Smallest box covering both boxes.

        Empty boxes are neutral: the sentinel bounds never win the min/max.
        """
        return BoundingBox(
            min(self._x_min, other._x_min),
            max(self._x_max, other._x_max),
            min(self._y_min, other._y_min),
            max(self._y_max, other._y_max)
        )

    def contains(self, point: Vec2) -> bool:
        """Check if a point lies inside the box (bounds included)."""
        return (
            self._x_min <= point.x <= self._x_max and
            self._y_min <= point.y <= self._y_max
        )

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Bounds as (x_min, x_max, y_min, y_max)."""
        return (self._x_min, self._x_max, self._y_min, self._y_max)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return (
            f"BoundingBox(x_min={self._x_min}, x_max={self._x_max}, "
            f"y_min={self._y_min}, y_max={self._y_max})"
        )
