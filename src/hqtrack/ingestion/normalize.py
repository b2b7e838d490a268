"""Normalization helpers.

Field-level parsing for the ``*HQ`` report grammar. Numeric tokens must be
plain ASCII: no surrounding whitespace, no ``_`` digit separators. Strict
helpers raise :class:`ValueError`; :func:`parse_battery` returns ``None``
instead.
"""

from __future__ import annotations

import math
from datetime import datetime

from hqtrack._constants import CENTURY, KNOTS_TO_KMH, MAX_BATTERY, NEGATIVE_HEMISPHERES, NULL_TOKEN


def parse_unsigned(value: str) -> int:
    """Parse a plain unsigned integer token, optionally prefixed with ``+``."""
    digits = value[1:] if value.startswith("+") else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"not an unsigned integer: {value!r}")
    return int(digits)


def parse_decimal(value: str) -> float:
    """Parse a finite decimal token."""
    if not value.isascii() or "_" in value or value != value.strip():
        raise ValueError(f"not a decimal number: {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"value must be finite, got {value!r}")
    return result


def _six_digits(value: str, name: str) -> tuple[int, int, int]:
    if len(value) != 6 or not (value.isascii() and value.isdigit()):
        raise ValueError(f"{name} must be six digits, got {value!r}")
    return int(value[0:2]), int(value[2:4]), int(value[4:6])


def parse_timestamp(date: str, time: str) -> datetime:
    """Combine ``DDMMYY`` and ``HHMMSS`` fields into a naive datetime.

    Raises :class:`ValueError` for malformed fields or impossible
    calendar values (month 13, 25 o'clock, ...).
    """
    day, month, year = _six_digits(date, "date")
    hours, minutes, seconds = _six_digits(time, "time")
    return datetime(year + CENTURY, month, day, hours, minutes, seconds)


def parse_coordinate(value: str, hemisphere: str) -> float:
    """Convert a ``DDDMM.MMMM`` field plus hemisphere letter to decimal degrees."""
    raw = parse_decimal(value)
    degrees = math.floor(math.floor(raw) / 100)
    minutes = (raw - degrees * 100) / 60
    decimal = degrees + minutes
    if hemisphere in NEGATIVE_HEMISPHERES:
        return -decimal
    return decimal


def parse_nullable_float(value: str) -> float:
    """Parse a numeric field where the literal ``null`` means zero."""
    if value == NULL_TOKEN:
        return 0.0
    return parse_decimal(value)


def parse_nullable_int(value: str) -> int:
    """Integer counterpart of :func:`parse_nullable_float`."""
    if value == NULL_TOKEN:
        return 0
    return parse_unsigned(value)


def knots_to_kmh(knots: float) -> float:
    return knots * KNOTS_TO_KMH


def parse_battery(value: str) -> int | None:
    """Battery percent, or ``None`` when unparsable or out of range.

    Terminals occasionally report garbage here; it is never worth
    rejecting an otherwise good position for.
    """
    try:
        parsed = parse_unsigned(value)
    except ValueError:
        return None
    if parsed > MAX_BATTERY:
        return None
    return parsed
