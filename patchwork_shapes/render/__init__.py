"""
Rendering adapters: raster surfaces, the scan rasterizer and SVG export.
"""

from patchwork_shapes.render.rasterizer import (
    Surface,
    PillowSurface,
    to_viewport,
    from_viewport,
    fit_ratio,
    rasterize,
)
from patchwork_shapes.render.svg import (
    shape_to_svg_element,
    to_svg,
    image_to_svg_string,
    save_svg,
    svg_to_png,
)

__all__ = [
    "Surface",
    "PillowSurface",
    "to_viewport",
    "from_viewport",
    "fit_ratio",
    "rasterize",
    "shape_to_svg_element",
    "to_svg",
    "image_to_svg_string",
    "save_svg",
    "svg_to_png",
]
