# File: coursejoin/scripts/autotype.py
"""Cell-level type inference and rendering for delimited text.

Every cell holds one of five kinds of value (see ``ScalarKind``):

    NUMBER   float (any ``numbers.Real`` is accepted on the way out)
    BOOLEAN  bool
    DATE     timezone-aware datetime in UTC
    NULL     None
    TEXT     str

``infer_scalar`` turns raw text into a value using the same rules as
d3-dsv's ``autoType``, ``format_scalar`` renders a value back to text, and
``kind_of`` is the one place that decides which kind a Python value is.
Parsing the output of ``format_scalar`` with ``infer_scalar`` gives back the
original value.
"""
from __future__ import annotations

import math
import numbers
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum

import numpy as np


class ScalarKind(Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"
    TEXT = "text"


DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
INFINITY_RE = re.compile(r"[+-]?Infinity")
RADIX_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)
DATE_RE = re.compile(
    r"([-+]\d{2})?(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?"
    r"(?:T(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{3}))?)?(Z|[-+]\d{2}:\d{2})?)?",
    re.ASCII,
)

RADIX_BASES = {"x": 16, "o": 8, "b": 2}


def _parse_number(text: str) -> float | None:
    if text == "NaN":
        return math.nan
    if DECIMAL_RE.fullmatch(text):
        return float(text)
    if INFINITY_RE.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    if RADIX_RE.fullmatch(text):
        try:
            return float(int(text[2:], RADIX_BASES[text[1].lower()]))
        except OverflowError:
            return math.inf
    return None


def _parse_date(text: str) -> datetime | None:
    match = DATE_RE.fullmatch(text)
    if not match:
        return None
    extended, year, month, day, hour, minute, second, millis, zone = match.groups()
    try:
        moment = datetime(
            int((extended or "") + year),
            int(month or 1),
            int(day or 1),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            int(millis or 0) * 1000,
            tzinfo=timezone.utc,
        )
        if zone and zone != "Z":
            offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
            moment = moment - offset if zone[0] == "+" else moment + offset
    except (ValueError, OverflowError):
        # Out-of-range components (month 13, year 0, ...) are not dates.
        return None
    return moment


def infer_scalar(raw: str | None):
    """Return the typed value for one raw cell."""
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    if text == "true":
        return True
    if text == "false":
        return False
    number = _parse_number(text)
    if number is not None:
        return number
    moment = _parse_date(text)
    if moment is not None:
        return moment
    return raw


def kind_of(value) -> ScalarKind:
    if value is None:
        return ScalarKind.NULL
    if isinstance(value, (bool, np.bool_)):
        return ScalarKind.BOOLEAN
    if isinstance(value, numbers.Real):
        return ScalarKind.NUMBER
    if isinstance(value, datetime):
        return ScalarKind.DATE
    if isinstance(value, str):
        return ScalarKind.TEXT
    raise TypeError(f"Unsupported cell value {value!r} ({type(value).__name__})")


def format_number(value) -> str:
    """Render a number the way JavaScript's ``Number#toString`` does."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, raw_digits, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in raw_digits)
    point = len(digits) + exponent
    digits = digits.rstrip("0")
    k = len(digits)

    if k <= point <= 21:
        body = digits + "0" * (point - k)
    elif 0 < point <= 21:
        body = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        body = "0." + "0" * -point + digits
    else:
        e = point - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        body = f"{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"
    return sign + body


def format_date(moment: datetime) -> str:
    """ISO-8601 in UTC, dropping time parts that are zero."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    text = f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
    millis = moment.microsecond // 1000
    if millis:
        return text + f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}.{millis:03d}Z"
    if moment.second:
        return text + f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}Z"
    if moment.hour or moment.minute:
        return text + f"T{moment.hour:02d}:{moment.minute:02d}Z"
    return text


def format_scalar(value) -> str:
    kind = kind_of(value)
    if kind is ScalarKind.NULL:
        return ""
    if kind is ScalarKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ScalarKind.NUMBER:
        return format_number(value)
    if kind is ScalarKind.DATE:
        return format_date(value)
    return value


def match_key(value) -> str:
    """Hashable join key that only equates values of the same kind.

    Numbers compare by value (0 equals -0, NaN equals NaN), dates by instant.
    """
    kind = kind_of(value)
    if kind is ScalarKind.NULL:
        return "null:"
    if kind is ScalarKind.DATE:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return f"date:{value.replace(tzinfo=None).isoformat()}"
    if kind is ScalarKind.TEXT:
        return f"text:{value}"
    return f"{kind.value}:{format_scalar(value)}"


__all__ = [
    "ScalarKind",
    "infer_scalar",
    "kind_of",
    "format_number",
    "format_date",
    "format_scalar",
    "match_key",
]
