# src/gencad/parser/grammar.py
"""
The primitive value grammar of GenCAD parameters.

Every parser in this module takes the text at the head of a parameter and
returns a ``(value, remainder)`` tuple, or raises `GrammarError` naming the
token kind it expected and the input it stopped at. Parsers never substitute
defaults. Composite values are built with `spaced`, which separates its
parts with one or more spaces, and a whole parameter is decoded with
`parse_parameter`, which also insists that nothing but trailing spaces is left.
"""
import logging
import math
import re
from typing import Any, Callable, Optional, Tuple

from ..types import (
    Attribute,
    CircleRef,
    CircularArcRef,
    Dimension,
    DimensionUnit,
    EllipticalArcRef,
    InsertType,
    Layer,
    LayerName,
    LineRef,
    Mirror,
    NUMBERED_LAYERS,
    PadType,
    RectangleRef,
    Text,
    TextPar,
    XYRef,
    USER_UNITS,
)
from .exceptions import GrammarError

logger = logging.getLogger(__name__)

Parser = Callable[[str], Tuple[Any, str]]

# Digits are mandatory, so 'nan', 'inf' and 'infinity' never match.
NUMBER_REGEX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
POSITIVE_INTEGER_REGEX = re.compile(r"\+?\d+")
SPACES_REGEX = re.compile(r" +")
TOKEN_REGEX = re.compile(r"[\x21-\x7e]+")
UNQUOTED_STRING_REGEX = re.compile(r'(?!")[\x21-\x7e]*')
QUOTED_FRAGMENT_REGEX = re.compile(r'[\x20-\x21\x23-\x5b\x5d-\x7e]+')
REST_OF_LINE_REGEX = re.compile(r"[\x20-\x7e]*")
NUMBERED_LAYER_REGEX = re.compile(r"(POWER|GROUND|INNER|LAYERSET|LAYER)(\d+)")

MAX_POSITIVE_INTEGER = 0xFFFF


# --- Atoms ---

def spaces(text: str) -> Tuple[str, str]:
    m = SPACES_REGEX.match(text)
    if not m:
        raise GrammarError("space", text)
    return m.group(), text[m.end():]


def number(text: str) -> Tuple[float, str]:
    m = NUMBER_REGEX.match(text)
    if not m:
        raise GrammarError("number", text)
    result = float(m.group())
    if not math.isfinite(result):
        # e.g. '1e400' overflows to inf
        raise GrammarError("finite number", text)
    return result, text[m.end():]


def positive_integer(text: str) -> Tuple[int, str]:
    m = POSITIVE_INTEGER_REGEX.match(text)
    if not m:
        raise GrammarError("positive integer", text)
    value = int(m.group())
    if value > MAX_POSITIVE_INTEGER:
        raise GrammarError("positive integer in the range 0-65535", text)
    return value, text[m.end():]


def quoted_string(text: str) -> Tuple[str, str]:
    if not text.startswith('"'):
        raise GrammarError("quoted string", text)
    chunks = []
    pos = 1
    while True:
        m = QUOTED_FRAGMENT_REGEX.match(text, pos)
        if m:
            chunks.append(m.group())
            pos = m.end()
            continue
        if text.startswith('\\"', pos):
            chunks.append('"')
            pos += 2
        elif text.startswith("\\", pos):
            chunks.append("\\")
            pos += 1
        elif text.startswith('"', pos):
            return "".join(chunks), text[pos + 1:]
        else:
            # End of input or a character outside printable ASCII.
            raise GrammarError("closing double quote", text[pos:])


def unquoted_string(text: str) -> Tuple[str, str]:
    m = UNQUOTED_STRING_REGEX.match(text)
    if not m:
        raise GrammarError("unquoted string", text)
    return m.group(), text[m.end():]


def string(text: str) -> Tuple[str, str]:
    """A quoted string, or an unquoted string that stops at the first space."""
    if text.startswith('"'):
        return quoted_string(text)
    return unquoted_string(text)


def text_tail(text: str) -> Tuple[str, str]:
    """
    A free-text value: a quoted string, or else everything up to the end of the
    parameter. Real-world files write device names and part numbers with
    embedded spaces and no quotes.
    """
    if text.startswith('"'):
        return quoted_string(text)
    m = REST_OF_LINE_REGEX.match(text)
    return m.group(), text[m.end():]


# --- Enumerations ---

def _expect_token(text: str, expected: str) -> Tuple[str, str]:
    """A run of printable, non-space ASCII characters."""
    m = TOKEN_REGEX.match(text)
    if not m:
        raise GrammarError(expected, text)
    return m.group(), text[m.end():]


def _enum_token(enum_cls, expected: str) -> Parser:
    by_token = {member.value: member for member in enum_cls}

    def parse(text: str):
        value, remainder = _expect_token(text, expected)
        if value not in by_token:
            raise GrammarError(expected, text)
        return by_token[value], remainder

    parse.__name__ = f"parse_{enum_cls.__name__.lower()}"
    return parse


mirror = _enum_token(Mirror, "mirror (0, MIRRORX or MIRRORY)")
pad_type = _enum_token(PadType, "pad type")
insert_type = _enum_token(InsertType, "insertion style")


def _flag(true_token: str) -> Parser:
    def parse(text: str):
        value, remainder = _expect_token(text, f"0 or {true_token}")
        if value == "0":
            return False, remainder
        if value == true_token:
            return True, remainder
        raise GrammarError(f"0 or {true_token}", text)
    return parse


flip = _flag("FLIP")
filled = _flag("YES")


def layer(text: str) -> Tuple[Layer, str]:
    value, remainder = _expect_token(text, "layer")
    numbered = NUMBERED_LAYER_REGEX.fullmatch(value)
    if numbered:
        layer_number = int(numbered.group(2))
        if layer_number > MAX_POSITIVE_INTEGER:
            raise GrammarError("layer number in the range 0-65535", text)
        return Layer(LayerName(numbered.group(1)), layer_number), remainder
    try:
        name = LayerName(value)
    except ValueError:
        raise GrammarError("layer", text) from None
    if name in NUMBERED_LAYERS:
        raise GrammarError(f"layer number after {value}", remainder)
    return Layer(name), remainder


def dimension(text: str) -> Tuple[Dimension, str]:
    value, remainder = _expect_token(text, "dimension")
    try:
        unit = DimensionUnit(value)
    except ValueError:
        raise GrammarError("dimension", text) from None
    if unit not in USER_UNITS:
        return Dimension(unit), remainder
    _, remainder = spaces(remainder)
    units_per_reference, remainder = positive_integer(remainder)
    return Dimension(unit, units_per_reference), remainder


# --- Combinators ---

def spaced(*parsers: Parser) -> Parser:
    """Builds a parser for values separated by one or more spaces."""
    def parse(text: str):
        values = []
        for index, parser in enumerate(parsers):
            if index:
                _, text = spaces(text)
            value, text = parser(text)
            values.append(value)
        return tuple(values), text
    return parse


def parse_parameter(text: str, *parsers: Parser) -> tuple:
    """
    Decodes a complete parameter as space-separated values. Trailing spaces are
    allowed; any other leftover text is reported as a grammar error.
    """
    values, remainder = spaced(*parsers)(text)
    if remainder.strip(" "):
        raise GrammarError("end of parameter", remainder)
    return values


def value(parser: Parser) -> Callable[[str], Any]:
    """Returns a decoder for a parameter made of exactly one value."""
    def decode(text: str):
        return parse_parameter(text, parser)[0]
    return decode


def parameter(*parsers: Parser, into: Optional[Callable[..., Any]] = None) -> Callable[[str], Any]:
    """Returns a decoder for a whole parameter, optionally building `into` from its values."""
    def decode(text: str):
        values = parse_parameter(text, *parsers)
        return into(*values) if into is not None else values
    return decode


# --- Geometry ---

def xy_ref(text: str) -> Tuple[XYRef, str]:
    (x, y), text = spaced(number, number)(text)
    return XYRef(x, y), text


def line_ref(text: str) -> Tuple[LineRef, str]:
    (start, end), text = spaced(xy_ref, xy_ref)(text)
    return LineRef(start, end), text


def circle_ref(text: str) -> Tuple[CircleRef, str]:
    (center, radius), text = spaced(xy_ref, number)(text)
    return CircleRef(center, radius), text


def rectangle_ref(text: str) -> Tuple[RectangleRef, str]:
    (origin, x, y), text = spaced(xy_ref, number, number)(text)
    return RectangleRef(origin, x, y), text


def arc_ref(text: str):
    """
    An arc: start, end and center, optionally followed by the major and minor
    radius of an elliptical arc. The longer, elliptical form is tried first and
    only kept if the whole parameter is used up by it.
    """
    try:
        (start, end, center, major, minor), remainder = spaced(xy_ref, xy_ref, xy_ref, number, number)(text)
        if not remainder.strip(" "):
            return EllipticalArcRef(start, end, center, major, minor), remainder
    except GrammarError:
        pass
    (start, end, center), remainder = spaced(xy_ref, xy_ref, xy_ref)(text)
    return CircularArcRef(start, end, center), remainder


def attribute(text: str) -> Tuple[Attribute, str]:
    (category, name, data), text = spaced(string, string, string)(text)
    return Attribute(category, name, data), text


def text_par(text: str) -> Tuple[TextPar, str]:
    (text_size, rotation, mirrored, text_layer, content, area), text = spaced(
        number, number, mirror, layer, string, rectangle_ref
    )(text)
    return TextPar(text_size, rotation, mirrored, text_layer, content, area), text


def text_line(text: str) -> Tuple[Text, str]:
    (origin, par), text = spaced(xy_ref, text_par)(text)
    return Text(origin, par), text
