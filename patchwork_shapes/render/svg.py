"""
SVG export for shapes and composites.
"""

import io
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union
import xml.etree.ElementTree as ET

from PIL import Image as PILImage

from patchwork_shapes.core import CONFIG, Profiler
from patchwork_shapes.models.color import Color, ColorValue
from patchwork_shapes.models.shape import Shape
from patchwork_shapes.utils.logger import get_logger, log_exception

# Configure logger
logger = get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'


def shape_to_svg_element(shape: Shape) -> ET.Element:
    """SVG element for a single shape (a group for composites)."""
    return shape.to_svg_element()


def to_svg(
    shapes: Union[Shape, Iterable[Shape]],
    width: int,
    height: int,
    background: Optional[ColorValue] = None
) -> ET.Element:
    """
    Build an SVG document for one or more shapes.

    The view box is centred on the shape origin, matching the raster viewport.

    Args:
        shapes: Shape, composite or iterable of shapes
        width: Document width
        height: Document height
        background: Background fill (defaults to the configured background)

    Returns:
        Root <svg> element
    """
    if isinstance(shapes, Shape):
        shapes = [shapes]
    if background is None:
        background = CONFIG["background_color"]

    with Profiler("to_svg"):
        svg = ET.Element('svg')
        svg.set('width', str(width))
        svg.set('height', str(height))
        svg.set('viewBox', f"{-width / 2:g} {-height / 2:g} {width} {height}")
        svg.set('xmlns', "http://www.w3.org/2000/svg")

        bg = ET.SubElement(svg, 'rect')
        bg.set('x', f"{-width / 2:g}")
        bg.set('y', f"{-height / 2:g}")
        bg.set('width', str(width))
        bg.set('height', str(height))
        bg.set('fill', Color(background).to_svg_string())

        for shape in shapes:
            svg.append(shape_to_svg_element(shape))

        return svg


def image_to_svg_string(
    shapes: Union[Shape, Iterable[Shape]],
    width: int,
    height: int,
    background: Optional[ColorValue] = None
) -> str:
    """
    Serialize shapes to an SVG document string.

    Returns:
        SVG string with XML declaration
    """
    svg_element = to_svg(shapes, width, height, background)
    return XML_DECLARATION + ET.tostring(svg_element, encoding='unicode')


def save_svg(svg_code: str, output_path: Union[str, Path]) -> Path:
    """
    Write SVG code to a file.

    Args:
        svg_code: SVG document
        output_path: Destination path

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(exist_ok=True, parents=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(svg_code)
    logger.info(f"SVG saved to: {output_path}")
    return output_path


def svg_to_png(
    svg_code: str,
    output_path: Optional[Union[str, Path]] = None,
    size: Optional[Tuple[int, int]] = None
) -> PILImage.Image:
    """
    Render SVG code to a Pillow image with cairosvg.

    Args:
        svg_code: SVG document
        output_path: Optional path to save the rendered PNG
        size: Optional (width, height) of the output

    Returns:
        Rendered image
    """
    import cairosvg

    kwargs = {}
    if size is not None:
        kwargs['output_width'], kwargs['output_height'] = size

    try:
        png_data = cairosvg.svg2png(bytestring=svg_code.encode('utf-8'), **kwargs)
    except Exception as e:
        log_exception(logger, e, context={"size": size, "output_path": output_path})
        logger.debug(f"Problematic SVG code: {svg_code[:100]}...")
        raise

    image = PILImage.open(io.BytesIO(png_data))

    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(exist_ok=True, parents=True)
        image.save(output_path)

    return image
