"""NMEA field encoding and decoding utilities.

This module provides the per-field building blocks of the codec: splitting
a sentence into fields, converting between signed decimal degrees and the
NMEA ``ddmm.mmmm`` / ``dddmm.mmmm`` angle representation, and tolerant
number parsing.

NMEA fields are comma-separated and may be empty (consecutive commas indicate
missing data). Empty fields are preserved by ``parse_line`` so that field
indices stay aligned with the sentence layout; the number parsers return None
for them, allowing callers to distinguish "no data" from "zero value".
"""

import logging
import math
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from tracksense.errors import DecodeError

__all__ = [
    "VALID_TALKER_IDS",
    "decode_coordinate",
    "decode_number",
    "dms_to_decimal",
    "field_at",
    "format_angle",
    "format_utc_date",
    "format_utc_time",
    "parse_float_field",
    "parse_int_field",
    "parse_line",
    "parse_string_field",
    "utc_now",
]

logger = logging.getLogger(__name__)

_Number = TypeVar("_Number", int, float)

# Supported NMEA talker IDs for multi-constellation GNSS receivers.
# Each 2-character prefix identifies the satellite system:
#   GP = GPS (USA)
#   GN = Multi-GNSS (combined solution)
#   GL = GLONASS (Russia)
#   GA = Galileo (Europe)
#   GB = BeiDou (China)
#   GQ = QZSS (Japan)
VALID_TALKER_IDS = ("GP", "GN", "GL", "GA", "GB", "GQ")

_MINUTES_PER_DEGREE = 60.0


# --- splitting ----------------------------------------------------------------


def parse_line(line: str) -> list[str]:
    """Split one NMEA line into its comma-separated fields.

    Surrounding whitespace (including the CRLF terminator), the leading '$'
    and the '*HH' checksum suffix are removed before splitting, so
    ``fields[0]`` is the address token (e.g. ``"GPGGA"``).

    Empty fields are kept. A receiver that leaves an interior field blank
    (``...,1,,0.9,...``) still yields correctly aligned indices for the
    fields that follow it.

    Example:
        >>> parse_line("$GPGGA,120000.00,,N*5B\\r\\n")
        ['GPGGA', '120000.00', '', 'N']
    """
    content = line.strip()
    if content.startswith("$"):
        content = content[1:]
    star = content.rfind("*")
    if star != -1:
        content = content[:star]
    return content.split(",")


def field_at(fields: list[str], index: int) -> str:
    """Return ``fields[index]``, raising ``DecodeError`` when it is missing.

    Truncated sentences are common on a noisy serial line; an absent field
    is a decode failure, not a programming error.
    """
    if index >= len(fields):
        raise DecodeError(
            f"Field {index} missing from {fields[0] if fields else '?'} "
            f"({len(fields)} fields)."
        )
    return fields[index]


# --- number parsing -------------------------------------------------------------


def parse_float_field(value: str) -> float | None:
    """Parse a string field to float, returning None if empty or invalid.

    NMEA fields may be empty (indicated by consecutive commas like ",,").
    This function treats empty strings as "no data" rather than an error.

    Example:
        >>> parse_float_field("545.4")
        545.4
        >>> parse_float_field("")  # empty field
        None
    """
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_int_field(value: str) -> int | None:
    """Parse a string field to int, returning None if empty or invalid.

    Similar to parse_float_field but for integer values like satellite count
    or fix quality indicators.

    Example:
        >>> parse_int_field("08")
        8
        >>> parse_int_field("")
        None
    """
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_string_field(value: str) -> str | None:
    """Parse a string field, returning None if empty."""
    if not value:
        return None
    return value


# --- angles ------------------------------------------------------------------------


def format_angle(value_degrees: float, is_latitude: bool) -> tuple[str, str]:
    """Format signed decimal degrees as an NMEA angle and hemisphere.

    The magnitude is split into whole degrees and decimal minutes. The
    degree field is 2 digits wide for latitude (``ddmm.mmmm``) and 3 digits
    wide for longitude (``dddmm.mmmm``); the minutes field is always
    zero-padded to 7 characters with 4 decimals. Receivers rely on this
    fixed layout, so the widths must not change.

    Args:
        value_degrees: Angle in decimal degrees, positive for North/East.
        is_latitude: Selects the N/S hemisphere and 2-digit degree field
            when True, E/W and a 3-digit field when False.

    Returns:
        Tuple of (angle_string, hemisphere_character).

    Example:
        >>> format_angle(-22.9559, is_latitude=True)
        ('2257.3540', 'S')
        >>> format_angle(-43.1659, is_latitude=False)
        ('04309.9540', 'W')
    """
    if is_latitude:
        hemisphere = "N" if value_degrees >= 0 else "S"
        degree_width = 2
    else:
        hemisphere = "E" if value_degrees >= 0 else "W"
        degree_width = 3

    magnitude = abs(value_degrees)
    degrees = math.floor(magnitude)
    minutes = (magnitude - degrees) * _MINUTES_PER_DEGREE

    # 59.99996 rounds to "60.0000"; carry it into the degree field instead.
    if round(minutes, 4) >= _MINUTES_PER_DEGREE:
        degrees += 1
        minutes = 0.0

    return f"{degrees:0{degree_width}d}{minutes:07.4f}", hemisphere


def dms_to_decimal(raw: str, hemisphere: str) -> float:
    """Convert an NMEA angle (``ddmm.mmmm`` or ``dddmm.mmmm``) to decimal degrees.

    The conversion is arithmetic rather than positional, so it accepts any
    number of degree digits:

        degrees = floor(raw / 100)
        minutes = raw - degrees * 100
        decimal = (degrees + minutes / 60) * (-1 if hemisphere in S/W else 1)

    Args:
        raw: Angle field, e.g. ``"4807.038"``.
        hemisphere: Hemisphere field, ``"N"``, ``"S"``, ``"E"`` or ``"W"``.

    Returns:
        Signed decimal degrees, positive for North/East.

    Raises:
        DecodeError: If ``raw`` is empty or not a finite number. Callers log
            the error and keep the previous value.

    Example:
        >>> dms_to_decimal("4807.038", "N")
        48.1173
        >>> dms_to_decimal("01131.000", "W")
        -11.516666...
    """
    try:
        value = float(raw)
    except ValueError as e:
        raise DecodeError(f"Invalid NMEA angle: {raw!r}") from e
    if not math.isfinite(value):
        raise DecodeError(f"Invalid NMEA angle: {raw!r}")

    degrees = math.floor(value / 100)
    minutes = value - degrees * 100
    decimal_degrees = degrees + minutes / _MINUTES_PER_DEGREE

    if hemisphere in ("S", "W"):
        return -decimal_degrees

    return decimal_degrees


def decode_coordinate(
    fields: list[str],
    value_index: int,
    hemisphere_index: int,
) -> float | None:
    """Decode one angle/hemisphere field pair, logging failures.

    Returns None when the angle field is empty (no fix) or undecodable; the
    failure is logged and the caller keeps whatever value it had.
    """
    raw = field_at(fields, value_index)
    hemisphere = field_at(fields, hemisphere_index)
    if not raw:
        return None
    try:
        return dms_to_decimal(raw, hemisphere)
    except DecodeError as e:
        logger.warning("%s field %d: %s", fields[0], value_index, e)
        return None


def decode_number(
    fields: list[str],
    index: int,
    parse: Callable[[str], _Number | None],
) -> _Number | None:
    """Decode a numeric field with ``parse``, logging non-empty failures."""
    raw = field_at(fields, index)
    value = parse(raw)
    if value is None and raw:
        logger.warning("%s field %d: not a number: %r", fields[0], index, raw)
    return value


# --- time ---------------------------------------------------------------------


def utc_now() -> datetime:
    """Return the current UTC wall-clock time."""
    return datetime.now(timezone.utc)


def format_utc_time(t_utc: datetime) -> str:
    """Format a UTC time as the NMEA ``hhmmss.ss`` field.

    Sentences are emitted on whole-second ticks, so the hundredths are
    always ``00``.
    """
    return f"{t_utc.hour:02d}{t_utc.minute:02d}{t_utc.second:02d}.00"


def format_utc_date(t_utc: datetime) -> str:
    """Format a UTC date as the NMEA ``ddmmyy`` field."""
    return f"{t_utc.day:02d}{t_utc.month:02d}{t_utc.year % 100:02d}"
