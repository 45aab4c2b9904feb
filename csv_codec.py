"""Line-oriented CSV encoding used by the ``users.csv`` and ``workouts.csv`` logs."""
from __future__ import annotations
import datetime
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List


QUOTE = '"'
SEPARATOR = ","
_NEEDS_QUOTING = (",", '"', "\n")
_FRACTION_RE = re.compile(r"\.(\d+)")


class ParseError(ValueError):
    """Raised when a stored row cannot be decoded into an entity."""


def encode_field(value: str | None) -> str:
    """Quote ``value`` if it contains a comma, a quote or a newline."""
    if value is None:
        return ""
    if any(ch in value for ch in _NEEDS_QUOTING):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def encode_row(fields: Iterable[str]) -> str:
    return SEPARATOR.join(encode_field(f) for f in fields)


def decode_row(line: str | None) -> List[str]:
    """Split ``line`` into fields.

    Every quote toggles the quoted region and is itself dropped, except that a
    quote immediately following a closing quote inside a field is kept as a
    literal character. Commas split fields only outside a quoted region.
    """
    if line is None:
        return []
    cols: list[str] = []
    current: list[str] = []
    in_quote = False
    i = 0
    length = len(line)
    while i < length:
        ch = line[i]
        if ch == QUOTE:
            if in_quote and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quote = not in_quote
        elif ch == SEPARATOR and not in_quote:
            cols.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    cols.append("".join(current))
    return cols


def require_columns(cols: List[str], minimum: int) -> None:
    if len(cols) < minimum:
        raise ParseError(f"expected at least {minimum} columns, got {len(cols)}")


def parse_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError as e:
        raise ParseError(f"invalid integer: {text!r}") from e


def parse_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError as e:
        raise ParseError(f"invalid number: {text!r}") from e


def format_float(value: float) -> str:
    return repr(float(value))


def format_decimal(value: float, places: int) -> str:
    """Format with ``places`` fraction digits, rounding ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def format_fixed(value: float) -> str:
    """Two fraction digits with a dot separator, independent of locale."""
    return format_decimal(value, 2)


def format_timestamp(value: datetime.datetime) -> str:
    return value.isoformat(timespec="microseconds")


def _six_digit_fraction(text: str) -> str:
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits
    return _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)


def parse_timestamp(text: str) -> datetime.datetime:
    try:
        value = datetime.datetime.fromisoformat(_six_digit_fraction(text.strip()))
    except ValueError as e:
        raise ParseError(f"invalid timestamp: {text!r}") from e
    if value.tzinfo is not None:
        raise ParseError(f"timestamp must not carry an offset: {text!r}")
    return value
