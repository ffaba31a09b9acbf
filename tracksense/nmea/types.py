"""NMEA data types for decoded sentences.

This module defines the sentence-type tag and the dataclasses produced by
the per-type decoders.

Design Decisions:
    1. Optional fields (float | None): NMEA fields may be empty, indicated by
       consecutive commas, and a field may fail to decode. Both cases yield
       None, which the consumer's rolling merge reads as "keep the previous
       value" rather than "measured zero".

    2. Separate valid flag: The valid field indicates navigation validity,
       NOT parse validity. A successfully decoded sentence may still be
       navigationally invalid (e.g., no GPS fix, RMC status 'V').

    3. Closed tag set: ``SentenceType`` enumerates the supported sentence
       types plus ``UNKNOWN``. The consumer dispatches on the tag, so adding
       a type means adding a member, a dataclass, and a registered decoder.
"""

import enum
from dataclasses import dataclass

__all__ = ["GGAData", "RMCData", "SentenceType"]


class SentenceType(enum.Enum):
    """Sentence type tag parsed from the address field (``<talker><type>``)."""

    GGA = "GGA"
    RMC = "RMC"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class GGAData:
    """Decoded GGA (Global Positioning System Fix Data) sentence.

    Attributes:
        utc_time: UTC timestamp as transmitted, ``hhmmss.ss``.
            None if the field was empty.

        latitude_degrees: Latitude in decimal degrees, positive=North.
            None if empty or undecodable.

        longitude_degrees: Longitude in decimal degrees, positive=East.
            None if empty or undecodable.

        fix_quality: GPS fix quality indicator (defaults to 0):
            0 = Invalid (no fix)
            1 = GPS fix (SPS)
            2 = DGPS fix
            4 = RTK Fixed
            5 = RTK Float
            6 = Dead reckoning mode

        num_satellites: Number of satellites used in the fix solution.

        horizontal_dilution_of_precision: HDOP value. Lower is better.

        altitude_meters: Altitude above mean sea level (MSL) in meters.

        geoid_height_meters: Height of geoid (MSL) above WGS84 ellipsoid.

        valid: Navigation validity flag. True only if fix_quality > 0.
    """

    utc_time: str | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    fix_quality: int
    num_satellites: int | None
    horizontal_dilution_of_precision: float | None
    altitude_meters: float | None
    geoid_height_meters: float | None
    valid: bool


@dataclass(frozen=True)
class RMCData:
    """Decoded RMC (Recommended Minimum Specific GNSS Data) sentence.

    RMC carries the receiver's UTC time and date, position, and velocity
    over ground. It has no altitude, satellite count, or HDOP.

    Attributes:
        utc_time: UTC timestamp as transmitted, ``hhmmss.ss``.

        status: ``'A'`` (active, data valid) or ``'V'`` (void).

        latitude_degrees: Latitude in decimal degrees, positive=North.

        longitude_degrees: Longitude in decimal degrees, positive=East.

        speed_knots: Speed over ground in knots.

        speed_meters_per_second: Speed over ground in m/s, derived from
            knots with the factor 0.514. None if knots was empty.

        course_degrees: Course over ground, true north, in degrees.

        date: UTC date as transmitted, ``ddmmyy``.

        valid: Navigation validity flag. True only if status is ``'A'``.
    """

    utc_time: str | None
    status: str | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    speed_knots: float | None
    speed_meters_per_second: float | None
    course_degrees: float | None
    date: str | None
    valid: bool
