"""
Composite image model.
Provides the Image container that owns an ordered list of shapes and applies
every shape operation uniformly across them under a single lock.
"""

import threading
from typing import Iterator, List, Optional
import xml.etree.ElementTree as ET

from patchwork_shapes.core import Profiler
from patchwork_shapes.models.color import ColorValue
from patchwork_shapes.models.geometry import Vec2, VectorLike, BoundingBox
from patchwork_shapes.models.shape import (
    Shape, ShapeType, ShapeError, validate_axis
)
from patchwork_shapes.utils.logger import get_logger

# Configure logger
logger = get_logger(__name__)


class Image(Shape):
    """
    Thread-safe composite of shapes.

    Every public operation holds the image lock for its full duration, so
    each call is atomic with respect to other threads; sequences of calls
    are not. Components are owned by the image: `add_component` takes
    ownership and `components()` returns a snapshot of the list.

    Transforms are handed to every component unchanged; `homothety` and
    `rotate` without a center therefore work about each component's own
    reference point, and the image has none of its own.

    Images are not copyable through `copy.copy`/`copy.deepcopy`; use
    `clone()` for an explicit deep copy.
    """

    __slots__ = ('_components', '_annotation', '_origin', '_lock')

    def __init__(
        self,
        origin: VectorLike = (0.0, 0.0),
        annotation: str = "",
        color: Optional[ColorValue] = None
    ):
        """
        Initialize an empty image.

        Args:
            origin: Local offset applied to newly added components
            annotation: Free-form text carried with the image
            color: Nominal image color
        """
        super().__init__(ShapeType.IMAGE, color)
        self._components: List[Shape] = []
        self._annotation = annotation
        self._origin = Vec2.of(origin)
        self._lock = threading.RLock()

    @property
    def origin(self) -> Vec2:
        """Get local origin."""
        with self._lock:
            return self._origin

    @property
    def annotation(self) -> str:
        """Get annotation text."""
        return self.get_annotation()

    def add_component(self, shape: Shape) -> 'Image':
        """
        Take ownership of a shape, moving it by the current local origin.

        Args:
            shape: Shape to add (primitive or nested image)

        Returns:
            Self for method chaining

        Raises:
            ShapeError: If the image is added to itself or to an image
                it already contains
        """
        if shape is self or (isinstance(shape, Image) and shape.holds(self)):
            raise ShapeError("An image cannot contain itself")

        with self._lock:
            shape.translate(self._origin)
            self._components.append(shape)
            logger.debug(f"Added {shape.type.value} component ({len(self._components)} total)")
        return self

    def add_components(self, shapes) -> 'Image':
        """Add several shapes in order."""
        with self._lock:
            for shape in shapes:
                self.add_component(shape)
        return self

    def holds(self, shape: Shape) -> bool:
        """Check if a shape is a component of this image or of a nested one."""
        with self._lock:
            for component in self._components:
                if component is shape:
                    return True
                if isinstance(component, Image) and component.holds(shape):
                    return True
            return False

    def components(self) -> List[Shape]:
        """
        Get a snapshot of the component list.

        The list is a copy; the shapes themselves are still owned by the image.

        Returns:
            Components in insertion order
        """
        with self._lock:
            return list(self._components)

    def clear(self) -> 'Image':
        """Remove all components."""
        with self._lock:
            self._components.clear()
        return self

    def set_origin(self, origin: VectorLike) -> 'Image':
        """
        Reassign the local origin.

        Every component is translated by (old origin - new origin) before the
        new origin is stored, which shifts the absolute position of the whole
        image to follow the reassignment.

        Args:
            origin: New local origin

        Returns:
            Self for method chaining
        """
        origin = Vec2.of(origin)
        with self._lock:
            delta = self._origin - origin
            for component in self._components:
                component.translate(delta)
            self._origin = origin
        return self

    def annotate(self, text: str) -> 'Image':
        """Replace the annotation text."""
        with self._lock:
            self._annotation = text
        return self

    def get_annotation(self) -> str:
        """Get the annotation text."""
        with self._lock:
            return self._annotation

    def area(self) -> float:
        """Area of the aggregate bounding box."""
        box = self.bounding_box()
        return float(box.width * box.height)

    def perimeter(self) -> float:
        """Perimeter of the aggregate bounding box."""
        box = self.bounding_box()
        return float(2 * (box.width + box.height))

    def translate(self, offset: VectorLike) -> 'Image':
        offset = Vec2.of(offset)
        with self._lock:
            for component in self._components:
                component.translate(offset)
        return self

    def homothety(self, ratio: float, center: Optional[VectorLike] = None) -> 'Image':
        with self._lock:
            for component in self._components:
                component.homothety(ratio, center)
        return self

    def rotate(self, angle: float, center: Optional[VectorLike] = None) -> 'Image':
        with self._lock:
            for component in self._components:
                component.rotate(angle, center)
        return self

    def central_sym(self, center: VectorLike) -> 'Image':
        center = Vec2.of(center)
        with self._lock:
            for component in self._components:
                component.central_sym(center)
        return self

    def axial_sym(self, point: VectorLike, direction: VectorLike) -> 'Image':
        direction = Vec2.of(direction)
        # Reject before touching any component
        validate_axis(direction)
        with self._lock:
            for component in self._components:
                component.axial_sym(point, direction)
        return self

    def bounding_box(self) -> BoundingBox:
        """
        Union of the component boxes.

        Returns:
            Covering box, or the empty sentinel box for an empty image
        """
        with self._lock:
            box = BoundingBox.empty()
            for component in self._components:
                box = box.union(component.bounding_box())
            return box

    def contains_point(self, point: VectorLike) -> bool:
        point = Vec2.of(point)
        with self._lock:
            return any(c.contains_point(point) for c in self._components)

    def serialize(self) -> str:
        """
        Serialize every component followed by the annotation clause.

        Returns:
            Serialized image
        """
        from patchwork_shapes.serialization import encode_image
        with self._lock:
            return encode_image(self)

    def deserialize(self, text: str):
        """
        Replace the content of the image with decoded records.

        Existing components are discarded first; this is not a merge.
        Decoded shapes keep their serialized coordinates. The annotation is
        replaced only when the text carries an annotation clause. Malformed
        records are skipped and reported in the result.

        Args:
            text: Serialized image

        Returns:
            DecodeResult describing the decoded records and skipped ones
        """
        from patchwork_shapes.serialization import decode_records

        result = decode_records(text)
        with self._lock:
            self._components = list(result.shapes)
            if result.annotation is not None:
                self._annotation = result.annotation
        logger.debug(
            f"Deserialized {len(result.shapes)} components, skipped {len(result.errors)}"
        )
        return result

    def fit_ratio(self, width: int, height: int) -> float:
        """
        Uniform display ratio fitting the image into a centred viewport.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels

        Returns:
            Ratio, never above the configured maximum
        """
        from patchwork_shapes.render.rasterizer import fit_ratio
        return fit_ratio(self.bounding_box(), width, height)

    def display(self, surface, ratio: Optional[float] = None) -> int:
        """
        Draw every component with a single shared ratio.

        Args:
            surface: Target implementing the Surface protocol
            ratio: Display ratio (auto-fitted to the surface when None)

        Returns:
            Number of pixels set
        """
        with self._lock:
            if ratio is None:
                ratio = self.fit_ratio(surface.width, surface.height)
                logger.debug(f"Auto-fit display ratio: {ratio:.4f}")

            drawn = 0
            with Profiler("image_display"):
                for component in self._components:
                    drawn += component.display(surface, ratio)
            return drawn

    def to_svg_element(self) -> ET.Element:
        group = ET.Element('g')
        with self._lock:
            for component in self._components:
                group.append(component.to_svg_element())
        return group

    def clone(self) -> 'Image':
        """
        Create an independent deep copy of the image.

        Returns:
            New image with copied components, origin and annotation
        """
        with self._lock:
            duplicate = Image(self._origin, self._annotation, self._color)
            duplicate._components = [c.copy() for c in self._components]
            return duplicate

    def copy(self) -> 'Image':
        return self.clone()

    def to_debug_string(self) -> str:
        with self._lock:
            lines = [f"Image ({len(self._components)} components) origin {self._origin}"]
            for component in self._components:
                lines.append(component.to_debug_string())
            lines.append(f"annotation: {self._annotation}")
            return "\n".join(lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._components)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.components())

    def __copy__(self):
        raise TypeError("Image cannot be copied implicitly; use clone()")

    def __deepcopy__(self, memo):
        raise TypeError("Image cannot be copied implicitly; use clone()")

    def __eq__(self, other: object) -> bool:
        """Check if images hold equal components and the same annotation."""
        if not isinstance(other, Image):
            return NotImplemented
        if other is self:
            return True
        return (
            self.components() == other.components() and
            self.get_annotation() == other.get_annotation()
        )

    __hash__ = None  # Mutable

    def __repr__(self) -> str:
        return (
            f"Image(components={len(self)}, origin={self.origin!r}, "
            f"annotation={self.get_annotation()!r})"
        )
