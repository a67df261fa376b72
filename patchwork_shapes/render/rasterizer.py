"""
Scan rasterizer for shapes.

Shape coordinates are mapped to a viewport centred on the surface:
pixel = point * ratio + surface_size / 2. Filled shapes are drawn by scanning
their scaled bounding box and testing each pixel's pre-image with the shape's
point-membership predicate; line segments are handed to the surface as a
single segment.
"""

import math
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image as PILImage, ImageDraw
from typing_extensions import Protocol, runtime_checkable

from patchwork_shapes.core import CONFIG
from patchwork_shapes.models.color import Color, ColorValue
from patchwork_shapes.models.geometry import Vec2, BoundingBox
from patchwork_shapes.models.shape import Shape, ShapeType
from patchwork_shapes.utils.logger import get_logger

# Configure logger
logger = get_logger(__name__)


@runtime_checkable
class Surface(Protocol):
    """Pixel target consumed by the rasterizer."""

    @property
    def width(self) -> int:
        ...

    @property
    def height(self) -> int:
        ...

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        ...

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
        ...


class PillowSurface:
    """
    Surface backed by a Pillow RGB image.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: Optional[ColorValue] = None
    ):
        """
        Initialize a blank surface.

        Args:
            width: Width in pixels
            height: Height in pixels
            background: Fill color (defaults to the configured background)
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")

        if background is None:
            background = CONFIG["background_color"]
        self._image = PILImage.new('RGB', (width, height), Color(background).rgb)
        self._pixels = self._image.load()
        self._draw = ImageDraw.Draw(self._image)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def image(self) -> PILImage.Image:
        """Get the underlying Pillow image."""
        return self._image

    def set_pixel(self, x: int, y: int, color: ColorValue) -> None:
        # Out-of-surface pixels are ignored
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[x, y] = Color(color).rgb

    def get_pixel(self, x: int, y: int) -> Color:
        return Color(self._pixels[x, y])

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: ColorValue) -> None:
        self._draw.line([(x0, y0), (x1, y1)], fill=Color(color).rgb)

    def save(self, output_path: Union[str, Path]) -> Path:
        """
        Save the surface to an image file.

        Args:
            output_path: Destination; the format follows the extension

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(exist_ok=True, parents=True)
        self._image.save(output_path)
        logger.info(f"Surface saved to: {output_path}")
        return output_path


def to_viewport(point: Vec2, ratio: float, width: int, height: int) -> Tuple[float, float]:
    """Map a shape point to surface coordinates."""
    return (point.x * ratio + width / 2.0, point.y * ratio + height / 2.0)


def from_viewport(px: float, py: float, ratio: float, width: int, height: int) -> Vec2:
    """Map surface coordinates back to shape space (ratio must be non-zero)."""
    return Vec2((px - width / 2.0) / ratio, (py - height / 2.0) / ratio)


def fit_ratio(box: BoundingBox, width: int, height: int) -> float:
    """
    Compute the uniform ratio fitting a box into a surface-centred viewport.

    The ratio only ever shrinks: it never exceeds `max_fit_ratio`.

    Args:
        box: Bounding box in shape coordinates
        width: Surface width in pixels
        height: Surface height in pixels

    Returns:
        Display ratio
    """
    ratio = float(CONFIG["max_fit_ratio"])
    if box.is_empty:
        return ratio

    extent_x = max(abs(box.x_min), abs(box.x_max))
    extent_y = max(abs(box.y_min), abs(box.y_max))
    if extent_x > 0:
        ratio = min(ratio, (width / 2.0) / extent_x)
    if extent_y > 0:
        ratio = min(ratio, (height / 2.0) / extent_y)
    return ratio


def _pixel_range(a: float, b: float, size: int) -> range:
    low = max(0, math.floor(min(a, b)))
    high = min(size - 1, math.ceil(max(a, b)))
    return range(low, high + 1)


def rasterize(shape: Shape, surface: Surface, ratio: float = 1.0) -> int:
    """
    Draw a shape on a surface.

    Args:
        shape: Shape to draw (composites draw each component)
        surface: Target surface
        ratio: Display ratio about the surface centre

    Returns:
        Number of pixels set; a line segment counts as one
    """
    if shape.type is ShapeType.IMAGE:
        return shape.display(surface, ratio)

    width, height = surface.width, surface.height

    if shape.type is ShapeType.LINE:
        start, end = (to_viewport(p, ratio, width, height) for p in shape.endpoints())
        surface.draw_line(
            round(start[0]), round(start[1]), round(end[0]), round(end[1]), shape.color
        )
        return 1

    box = shape.bounding_box()
    if ratio == 0 or box.is_empty:
        return 0

    x0, y0 = to_viewport(Vec2(box.x_min, box.y_min), ratio, width, height)
    x1, y1 = to_viewport(Vec2(box.x_max, box.y_max), ratio, width, height)

    drawn = 0
    for py in _pixel_range(y0, y1, height):
        for px in _pixel_range(x0, x1, width):
            if shape.contains_point(from_viewport(px, py, ratio, width, height)):
                surface.set_pixel(px, py, shape.color)
                drawn += 1
    return drawn
