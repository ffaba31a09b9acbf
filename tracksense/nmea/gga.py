"""GGA sentence builder and decoder.

GGA (Global Positioning System Fix Data) provides position fix information
including coordinates, altitude, fix quality, and satellite/accuracy metrics.

GGA Sentence Format:
    $GPGGA,120000.00,2257.3540,S,04309.9540,W,1,10,0.8,760.0,M,0.0,M,,*5E
           |         |         | |          | | |  |   |     | |   | ||
           |         |         | |          | | |  |   |     | |   | |+-- DGPS station (empty)
           |         |         | |          | | |  |   |     | |   | +-- DGPS age (empty)
           |         |         | |          | | |  |   |     | +---+-- Geoid separation (M)
           |         |         | |          | | |  |   +-----+-- Altitude above MSL (M)
           |         |         | |          | | |  +-- HDOP
           |         |         | |          | | +-- Number of satellites
           |         |         | |          | +-- Fix quality (0-6)
           |         |         | +----------+-- Longitude (dddmm.mmmm) + E/W
           |         +---------+-- Latitude (ddmm.mmmm) + N/S
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
    format_utc_time,
    parse_float_field,
    parse_int_field,
    parse_string_field,
    utc_now,
)
from tracksense.nmea.types import GGAData, SentenceType

__all__ = ["build_gga", "decode_gga"]

# Fields 0-9 (address through altitude) must be present to decode a fix
_MINIMUM_FIELD_COUNT = 10

_TIME = 1
_LATITUDE, _LATITUDE_HEMISPHERE = 2, 3
_LONGITUDE, _LONGITUDE_HEMISPHERE = 4, 5
_FIX_QUALITY = 6
_SATELLITES = 7
_HDOP = 8
_ALTITUDE = 9
_GEOID_HEIGHT = 11


def build_gga(
    latitude: float,
    longitude: float,
    altitude: float,
    satellites: int = 8,
    hdop: float = 0.9,
    *,
    fix_quality: int = 1,
    geoid_separation: float = 0.0,
    talker: str = "GP",
    t_utc: datetime | None = None,
) -> str:
    """Build a complete GGA sentence, including checksum and CRLF.

    Args:
        latitude: Decimal degrees, positive=North.
        longitude: Decimal degrees, positive=East.
        altitude: Meters above mean sea level.
        satellites: Number of satellites used in the fix.
        hdop: Horizontal dilution of precision.
        fix_quality: Fix quality indicator; 1 (GPS fix) for simulated data.
        geoid_separation: Geoid height above the ellipsoid, meters.
        talker: Two-character talker ID.
        t_utc: Timestamp to encode. Defaults to the wall clock at call time.

    Returns:
        Sentence string such as
        ``"$GPGGA,120000.00,2257.3540,S,...,M,0.0,M,,*5E\\r\\n"``.
    """
    time_field = format_utc_time(t_utc or utc_now())
    latitude_field, ns = format_angle(latitude, is_latitude=True)
    longitude_field, ew = format_angle(longitude, is_latitude=False)

    body = (
        f"{talker}GGA,{time_field},{latitude_field},{ns},{longitude_field},{ew},"
        f"{fix_quality},{satellites},{hdop:.1f},{altitude:.1f},M,"
        f"{geoid_separation:.1f},M,,"
    )
    return finalize(body)


def decode_gga(fields: list[str]) -> GGAData:
    """Construct a GGAData object from split sentence fields.

    Maps NMEA field indices to GGAData attributes:
        fields[1]  -> utc_time (hhmmss.ss format)
        fields[2]  -> latitude (ddmm.mmmm format)
        fields[3]  -> latitude hemisphere (N/S)
        fields[4]  -> longitude (dddmm.mmmm format)
        fields[5]  -> longitude hemisphere (E/W)
        fields[6]  -> fix_quality (0-6)
        fields[7]  -> num_satellites
        fields[8]  -> HDOP
        fields[9]  -> altitude above MSL (meters)
        fields[11] -> geoid height (meters, optional)

    Individual fields that fail to decode are logged and left as None.

    Raises:
        DecodeError: If the sentence is not GGA or is truncated before the
            altitude field.
    """
    if classify(fields) is not SentenceType.GGA:
        raise DecodeError(f"Not a GGA sentence: {fields[0]!r}")
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise DecodeError(f"GGA sentence truncated at {len(fields)} fields.")

    fix_quality = decode_number(fields, _FIX_QUALITY, parse_int_field) or 0
    geoid_height = (
        decode_number(fields, _GEOID_HEIGHT, parse_float_field)
        if len(fields) > _GEOID_HEIGHT
        else None
    )

    return GGAData(
        utc_time=parse_string_field(field_at(fields, _TIME)),
        latitude_degrees=decode_coordinate(fields, _LATITUDE, _LATITUDE_HEMISPHERE),
        longitude_degrees=decode_coordinate(
            fields, _LONGITUDE, _LONGITUDE_HEMISPHERE
        ),
        fix_quality=fix_quality,
        num_satellites=decode_number(fields, _SATELLITES, parse_int_field),
        horizontal_dilution_of_precision=decode_number(
            fields, _HDOP, parse_float_field
        ),
        altitude_meters=decode_number(fields, _ALTITUDE, parse_float_field),
        geoid_height_meters=geoid_height,
        # Navigation validity: only valid if we have a fix
        valid=fix_quality > 0,
    )
