# src/gencad/formatting.py
"""Renderers for the primitive GenCAD value tokens."""
import logging
import math

from .errors import SerializationError

logger = logging.getLogger(__name__)

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E


def is_printable(text: str) -> bool:
    return all(PRINTABLE_MIN <= ord(c) <= PRINTABLE_MAX for c in text)


def format_number(value: float) -> str:
    """
    Renders a number so that the Number grammar reads back the same value.
    Integral values are written without a fraction.
    """
    value = float(value)
    if not math.isfinite(value):
        raise SerializationError(f"Cannot serialize non-finite number {value!r}.")
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def format_integer(value: int) -> str:
    if not 0 <= value <= 0xFFFF:
        raise SerializationError(f"Integer {value} is outside the range 0-65535.")
    return str(value)


def format_string(value: str) -> str:
    """
    Renders a string as an unquoted token when it has no spaces and does not
    start with a double quote, and as a quoted string otherwise.
    """
    if not is_printable(value):
        raise SerializationError(f"String {value!r} contains characters outside printable ASCII.")
    if value and " " not in value and not value.startswith('"'):
        return value
    return quote_string(value)


def format_text(value: str) -> str:
    """
    Renders a free-text value, which is read up to the end of the line when it
    is not quoted. Values are quoted like any string where that is possible; a
    value that ends in a backslash cannot be quoted and is written bare, which
    reads back exactly unless it starts with a double quote or a space.
    """
    if not is_printable(value):
        raise SerializationError(f"Text {value!r} contains characters outside printable ASCII.")
    if value.endswith("\\") and not value.startswith(('"', " ")):
        return value
    return format_string(value)


def quote_string(value: str) -> str:
    escaped = value.replace('"', '\\"')
    if escaped.endswith("\\"):
        # '\"' would decode as an escaped quote and leave the string unterminated
        raise SerializationError(f"String {value!r} cannot be quoted because it ends with a backslash.")
    return f'"{escaped}"'


def format_flag(value: bool, true_token: str) -> str:
    return true_token if value else "0"
