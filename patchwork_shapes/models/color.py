"""
RGB color model for the shape library.
Provides an immutable 8-bit-per-channel color with parsing from
hex strings, CSS-like rgb() strings and common color names.
"""

import re
from typing import Dict, Tuple, Union, Iterator

from patchwork_shapes.utils.logger import get_logger

# Configure logger
logger = get_logger(__name__)

# Type definitions
RGB = Tuple[int, int, int]
ColorValue = Union[str, RGB, 'Color']

# Common color name mapping
_COMMON_COLORS: Dict[str, RGB] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "gray": (128, 128, 128),
    "orange": (255, 128, 50),
}

_HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')
_RGB_PATTERN = re.compile(r'^rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$', re.IGNORECASE)


class ColorError(Exception):
    """Custom exception for color-related errors."""
    pass


def _clamp_channel(value: Union[int, float]) -> int:
    return min(255, max(0, int(value)))


class Color:
    """
    Immutable RGB color.

    Channels are stored as integers clamped to 0-255.
    """

    __slots__ = ('_r', '_g', '_b')

    def __init__(self, value: ColorValue = (0, 0, 0)):
        """
        Initialize a color from various formats.

        Args:
            value: RGB tuple, Color, hex string ("#ff8000", "f80"),
                "rgb(r, g, b)" string or a common color name

        Raises:
            ColorError: If the color format is invalid or can't be parsed
        """
        if isinstance(value, Color):
            r, g, b = value.rgb
        elif isinstance(value, str):
            r, g, b = self._parse_color_string(value)
        elif isinstance(value, (tuple, list)) and len(value) == 3:
            if not all(isinstance(c, (int, float)) for c in value):
                raise ColorError(f"RGB values must be numbers, got {value}")
            r, g, b = value
        else:
            raise ColorError(f"Unsupported color format: {value!r}")

        self._r = _clamp_channel(r)
        self._g = _clamp_channel(g)
        self._b = _clamp_channel(b)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'Color':
        """Create a color from channel values."""
        return cls((r, g, b))

    @classmethod
    def from_hex(cls, hex_string: str) -> 'Color':
        """
        Create a color from a hex string.

        Args:
            hex_string: "#rrggbb", "rrggbb" or the 3-digit short form

        Returns:
            Color instance
        """
        return cls(cls._parse_hex(hex_string))

    @classmethod
    def from_name(cls, name: str) -> 'Color':
        """
        Create a color from a common color name.

        Raises:
            ColorError: If the name is unknown
        """
        rgb = _COMMON_COLORS.get(name.strip().lower())
        if rgb is None:
            raise ColorError(f"Unknown color name: {name}")
        return cls(rgb)

    @property
    def red(self) -> int:
        return self._r

    @property
    def green(self) -> int:
        return self._g

    @property
    def blue(self) -> int:
        return self._b

    @property
    def rgb(self) -> RGB:
        """Get (r, g, b) tuple."""
        return (self._r, self._g, self._b)

    @property
    def hex(self) -> str:
        """Get "#rrggbb" representation."""
        return f"#{self._r:02x}{self._g:02x}{self._b:02x}"

    def to_svg_string(self) -> str:
        """SVG paint value."""
        return self.hex

    def __iter__(self) -> Iterator[int]:
        return iter(self.rgb)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.rgb == other.rgb

    def __hash__(self) -> int:
        return hash(self.rgb)

    def __str__(self) -> str:
        return f"({self._r}, {self._g}, {self._b})"

    def __repr__(self) -> str:
        return f"Color({self._r}, {self._g}, {self._b})"

    @staticmethod
    def _parse_color_string(value: str) -> RGB:
        text = value.strip()

        if text.lower() in _COMMON_COLORS:
            return _COMMON_COLORS[text.lower()]

        match = _RGB_PATTERN.match(text)
        if match:
            return tuple(int(group) for group in match.groups())

        if _HEX_PATTERN.match(text):
            return Color._parse_hex(text)

        raise ColorError(f"Invalid color string: {value}")

    @staticmethod
    def _parse_hex(hex_string: str) -> RGB:
        match = _HEX_PATTERN.match(hex_string.strip())
        if not match:
            raise ColorError(f"Invalid hex color: {hex_string}")

        digits = match.group(1)
        if len(digits) == 3:
            digits = ''.join(c * 2 for c in digits)

        return (
            int(digits[0:2], 16),
            int(digits[2:4], 16),
            int(digits[4:6], 16)
        )


def parse_color(value: ColorValue) -> Color:
    """
    Parse a color value, logging and re-raising on failure.

    Args:
        value: Any value accepted by the Color constructor

    Returns:
        Color instance
    """
    try:
        return Color(value)
    except ColorError as e:
        logger.warning(f"Invalid color: {value!r} - {e}")
        raise
