"""RMC sentence builder and decoder.

RMC (Recommended Minimum Specific GNSS Data) carries the receiver's UTC
time and date together with position and velocity over ground.

RMC Sentence Format:
    $GPRMC,120000.00,A,2257.3540,S,04309.9540,W,10.00,0.00,010125,,,A*62
           |         | |         | |          | |     |    |      ||| |
           |         | |         | |          | |     |    |      ||| +-- Mode (A/D/E/N)
           |         | |         | |          | |     |    |      +-+-- Magnetic variation (empty)
           |         | |         | |          | |     |    +-- Date (ddmmyy)
           |         | |         | |          | |     +-- Course over ground (degrees true)
           |         | |         | |          | +-- Speed over ground (knots)
           |         | |         | +----------+-- Longitude (dddmm.mmmm) + E/W
           |         | +---------+-- Latitude (ddmm.mmmm) + N/S
           |         +-- Status (A=active, V=void)
           +-- UTC time (hhmmss.ss)
"""

from datetime import datetime

from tracksense.errors import DecodeError
from tracksense.nmea.checksum import finalize
from tracksense.nmea.classify import classify
from tracksense.nmea.fields import (
    decode_coordinate,
    decode_number,
    field_at,
    format_angle,
    format_utc_date,
    format_utc_time,
    parse_float_field,
    parse_string_field,
    utc_now,
)
from tracksense.nmea.types import RMCData, SentenceType

__all__ = [
    "KNOTS_TO_METERS_PER_SECOND",
    "build_rmc",
    "decode_rmc",
]

# 1 knot = 1852 m / 3600 s = 0.5144 m/s; the relay uses the rounded factor
KNOTS_TO_METERS_PER_SECOND = 0.514

# Fields 0-7 (address through speed) must be present to decode a fix
_MINIMUM_FIELD_COUNT = 8

_TIME = 1
_STATUS = 2
_LATITUDE, _LATITUDE_HEMISPHERE = 3, 4
_LONGITUDE, _LONGITUDE_HEMISPHERE = 5, 6
_SPEED_KNOTS = 7
_COURSE = 8
_DATE = 9


def build_rmc(
    latitude: float,
    longitude: float,
    speed_knots: float,
    *,
    course_degrees: float = 0.0,
    talker: str = "GP",
    t_utc: datetime | None = None,
) -> str:
    """Build a complete RMC sentence, including checksum and CRLF.

    Simulated sentences always report an active fix (status ``A``, mode
    ``A``).

    Args:
        latitude: Decimal degrees, positive=North.
        longitude: Decimal degrees, positive=East.
        speed_knots: Speed over ground in knots, written with 2 decimals.
        course_degrees: Course over ground, degrees true.
        talker: Two-character talker ID.
        t_utc: Timestamp to encode. Defaults to the wall clock at call time.
    """
    now = t_utc or utc_now()
    latitude_field, ns = format_angle(latitude, is_latitude=True)
    longitude_field, ew = format_angle(longitude, is_latitude=False)

    body = (
        f"{talker}RMC,{format_utc_time(now)},A,{latitude_field},{ns},"
        f"{longitude_field},{ew},{speed_knots:.2f},{course_degrees:.2f},"
        f"{format_utc_date(now)},,,A"
    )
    return finalize(body)


def _compute_speed_meters_per_second(speed_knots: float | None) -> float | None:
    """Convert speed over ground from knots to m/s.

    Example:
        >>> _compute_speed_meters_per_second(10.0)
        5.14
    """
    if speed_knots is None:
        return None
    return speed_knots * KNOTS_TO_METERS_PER_SECOND


def _optional_field(fields: list[str], index: int) -> str | None:
    if index >= len(fields):
        return None
    return parse_string_field(fields[index])


def decode_rmc(fields: list[str]) -> RMCData:
    """Construct an RMCData object from split sentence fields.

    Maps NMEA field indices to RMCData attributes:
        fields[1] -> utc_time (hhmmss.ss format)
        fields[2] -> status (A/V)
        fields[3] -> latitude (ddmm.mmmm format)
        fields[4] -> latitude hemisphere (N/S)
        fields[5] -> longitude (dddmm.mmmm format)
        fields[6] -> longitude hemisphere (E/W)
        fields[7] -> speed over ground (knots)
        fields[8] -> course over ground (degrees, optional)
        fields[9] -> date (ddmmyy, optional)

    Raises:
        DecodeError: If the sentence is not RMC or is truncated before the
            speed field.
    """
    if classify(fields) is not SentenceType.RMC:
        raise DecodeError(f"Not an RMC sentence: {fields[0]!r}")
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise DecodeError(f"RMC sentence truncated at {len(fields)} fields.")

    status = parse_string_field(field_at(fields, _STATUS))
    speed_knots = decode_number(fields, _SPEED_KNOTS, parse_float_field)
    course = (
        decode_number(fields, _COURSE, parse_float_field)
        if len(fields) > _COURSE
        else None
    )

    return RMCData(
        utc_time=parse_string_field(field_at(fields, _TIME)),
        status=status,
        latitude_degrees=decode_coordinate(fields, _LATITUDE, _LATITUDE_HEMISPHERE),
        longitude_degrees=decode_coordinate(
            fields, _LONGITUDE, _LONGITUDE_HEMISPHERE
        ),
        speed_knots=speed_knots,
        speed_meters_per_second=_compute_speed_meters_per_second(speed_knots),
        course_degrees=course,
        date=_optional_field(fields, _DATE),
        valid=status == "A",
    )
