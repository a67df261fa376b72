"""
Text codec for shapes and composites.

Records are whitespace-separated token sequences led by a keyword:

    circle <x> <y> <radius> <r> <g> <b>
    polygon <n> <x1> <y1> ... <xn> <yn> <r> <g> <b>
    line <x> <y> <dx> <dy> <r> <g> <b>
    ellipse <x> <y> <rx> <ry> <r> <g> <b>
    annotation <byte_length> <text>

Floats are written fixed-point with `float_precision` decimals and colors as
plain integers. A composite is the concatenation of its records followed by
its annotation clause. Decoding is tolerant: a malformed record is skipped
and reported, unknown words are dropped, and parsing resumes right after the
failed keyword.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from patchwork_shapes.models.color import Color
from patchwork_shapes.models.geometry import Vec2
from patchwork_shapes.models.shape import (
    Shape, ShapeType, ShapeError, Circle, Polygon, Line, Ellipse, format_float
)
from patchwork_shapes.utils.logger import get_logger

# Configure logger
logger = get_logger(__name__)

ANNOTATION_KEYWORD = "annotation"

_TOKEN_PATTERN = re.compile(rb'\S+')
# Plain ASCII decimals only, as written by the encoder
_FLOAT_PATTERN = re.compile(r'[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)')
_INT_PATTERN = re.compile(r'[+-]?[0-9]+')


class ParseError(ShapeError):
    """Exception raised for a malformed serialized record."""

    def __init__(self, keyword: str, position: int, token: Optional[str], reason: str):
        """
        Initialize a parse error.

        Args:
            keyword: Keyword of the record being parsed
            position: Index of the offending token in the stream
            token: Offending token, None at end of input
            reason: Human-readable description
        """
        self.keyword = keyword
        self.position = position
        self.token = token
        self.reason = reason
        super().__init__(
            f"Malformed '{keyword}' record at token {position} ({token!r}): {reason}"
        )


@dataclass
class DecodeResult:
    """Outcome of decoding a token stream."""
    shapes: List[Shape] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    annotation: Optional[str] = None  # None when no annotation clause was found

    @property
    def ok(self) -> bool:
        return not self.errors


class _TokenStream:
    """Cursor over the UTF-8 bytes of a serialized string."""

    def __init__(self, text: str):
        self._data = text.encode('utf-8')
        self._offset = 0
        self.index = 0

    def next_token(self) -> Optional[str]:
        match = _TOKEN_PATTERN.search(self._data, self._offset)
        if match is None:
            self._offset = len(self._data)
            return None
        self._offset = match.end()
        self.index += 1
        return match.group().decode('utf-8', errors='replace')

    def take_bytes(self, count: int) -> str:
        # A single separator follows the length token
        if self._data[self._offset:self._offset + 1].isspace():
            self._offset += 1
        chunk = self._data[self._offset:self._offset + count]
        self._offset += len(chunk)
        # Words of the text count as tokens for diagnostics
        self.index += len(_TOKEN_PATTERN.findall(chunk))
        return chunk.decode('utf-8', errors='ignore')

    def mark(self):
        return (self._offset, self.index)

    def reset(self, mark) -> None:
        self._offset, self.index = mark


# Encoding

def encode_shape(shape: Shape) -> str:
    """
    Serialize a primitive shape to a single record.

    Args:
        shape: Circle, Polygon, Line or Ellipse

    Returns:
        Record string
    """
    return shape.serialize()


def _flatten(shapes: Iterable[Shape]) -> Iterator[Shape]:
    for shape in shapes:
        if shape.type is ShapeType.IMAGE:
            yield from _flatten(shape.components())
        else:
            yield shape


def encode_annotation(text: str) -> str:
    """Annotation clause carrying the UTF-8 byte length of the text."""
    return f"{ANNOTATION_KEYWORD} {len(text.encode('utf-8'))} {text}"


def encode_image(image) -> str:
    """
    Serialize a composite: every primitive record, then the annotation clause.

    Nested composites are flattened and only the outer annotation is kept.

    Args:
        image: Image to serialize

    Returns:
        Serialized composite
    """
    records = [encode_shape(shape) for shape in _flatten(image.components())]
    records.append(encode_annotation(image.get_annotation()))
    return " ".join(records)


# Decoding

def _expect(stream: _TokenStream, keyword: str) -> str:
    token = stream.next_token()
    if token is None:
        raise ParseError(keyword, stream.index, None, "unexpected end of input")
    return token


def _read_float(stream: _TokenStream, keyword: str) -> float:
    token = _expect(stream, keyword)
    if not _FLOAT_PATTERN.fullmatch(token):
        raise ParseError(keyword, stream.index - 1, token, "expected a number")
    value = float(token)
    if not math.isfinite(value):
        raise ParseError(keyword, stream.index - 1, token, "number is not finite")
    return value


def _read_int(stream: _TokenStream, keyword: str) -> int:
    token = _expect(stream, keyword)
    if not _INT_PATTERN.fullmatch(token):
        raise ParseError(keyword, stream.index - 1, token, "expected an integer")
    return int(token)


def _read_vec(stream: _TokenStream, keyword: str) -> Vec2:
    x = _read_float(stream, keyword)
    y = _read_float(stream, keyword)
    return Vec2(x, y)


def _read_color(stream: _TokenStream, keyword: str) -> Color:
    # Out-of-range channels are clamped by Color
    return Color(tuple(_read_int(stream, keyword) for _ in range(3)))


def _parse_circle(stream: _TokenStream) -> Circle:
    origin = _read_vec(stream, "circle")
    radius = _read_float(stream, "circle")
    return Circle(origin, radius, _read_color(stream, "circle"))


def _parse_polygon(stream: _TokenStream) -> Polygon:
    count = _read_int(stream, "polygon")
    if count < 0:
        raise ParseError("polygon", stream.index - 1, str(count), "negative point count")
    points = [_read_vec(stream, "polygon") for _ in range(count)]
    return Polygon(points, _read_color(stream, "polygon"))


def _parse_line(stream: _TokenStream) -> Line:
    point = _read_vec(stream, "line")
    direction = _read_vec(stream, "line")
    return Line(point, direction, _read_color(stream, "line"))


def _parse_ellipse(stream: _TokenStream) -> Ellipse:
    origin = _read_vec(stream, "ellipse")
    radius = _read_vec(stream, "ellipse")
    return Ellipse(origin, radius, _read_color(stream, "ellipse"))


_RECORD_PARSERS: Dict[ShapeType, Callable[[_TokenStream], Shape]] = {
    ShapeType.CIRCLE: _parse_circle,
    ShapeType.POLYGON: _parse_polygon,
    ShapeType.LINE: _parse_line,
    ShapeType.ELLIPSE: _parse_ellipse,
}


def _parse_annotation(stream: _TokenStream) -> str:
    length = _read_int(stream, ANNOTATION_KEYWORD)
    if length < 0:
        raise ParseError(ANNOTATION_KEYWORD, stream.index - 1, str(length), "negative length")
    return stream.take_bytes(length)


def decode_shape(text: str) -> Shape:
    """
    Decode exactly one primitive record.

    Args:
        text: Serialized record

    Returns:
        Decoded shape

    Raises:
        ParseError: If the keyword is unknown, a field is malformed or
            tokens remain after the record
    """
    stream = _TokenStream(text)
    keyword = _expect(stream, "<record>")
    shape_type = ShapeType.from_keyword(keyword)
    if shape_type is None:
        raise ParseError(keyword, 0, keyword, "unknown shape keyword")

    shape = _RECORD_PARSERS[shape_type](stream)

    extra = stream.next_token()
    if extra is not None:
        raise ParseError(keyword, stream.index - 1, extra, "unexpected trailing token")
    return shape


def decode_records(text: str) -> DecodeResult:
    """
    Decode a token stream of records, skipping malformed ones.

    A failed record is logged, recorded in the result and abandoned; parsing
    restarts on the token right after its keyword, so a following valid
    record is still found. Words that are not keywords are dropped.

    Args:
        text: Serialized records, optionally with an annotation clause

    Returns:
        DecodeResult with the shapes in stream order, the parse errors and
        the last annotation found
    """
    result = DecodeResult()
    stream = _TokenStream(text)

    while True:
        word = stream.next_token()
        if word is None:
            break

        position = stream.index - 1
        shape_type = ShapeType.from_keyword(word)
        if shape_type is None and word != ANNOTATION_KEYWORD:
            logger.debug(f"Ignoring unknown word {word!r} at token {position}")
            continue

        resume = stream.mark()
        try:
            if shape_type is None:
                result.annotation = _parse_annotation(stream)
            else:
                result.shapes.append(_RECORD_PARSERS[shape_type](stream))
        except ParseError as e:
            logger.warning(
                f"Skipping '{e.keyword}' record at token {position}: "
                f"{e.reason} (token {e.position}: {e.token!r})"
            )
            result.errors.append(e)
            stream.reset(resume)

    logger.debug(
        f"Decoded {len(result.shapes)} shapes with {len(result.errors)} errors"
    )
    return result


__all__ = [
    "ParseError",
    "DecodeResult",
    "format_float",
    "encode_shape",
    "encode_annotation",
    "encode_image",
    "decode_shape",
    "decode_records",
]
