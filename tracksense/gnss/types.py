"""The normalized fix record forwarded by the consumer."""

import dataclasses
from dataclasses import dataclass

from tracksense.nmea.types import GGAData, RMCData

__all__ = ["CSV_COLUMNS", "Fix"]

# CSV column -> (Fix attribute, format spec), in record order
_CSV_FIELDS: dict[str, tuple[str, str]] = {
    "time": ("time_utc", "s"),
    "lat": ("latitude_deg", ".6f"),
    "lon": ("longitude_deg", ".6f"),
    "speed": ("speed_mps", ".2f"),
    "alt": ("altitude_m", ".1f"),
    "sat": ("satellites", "d"),
    "hdop": ("hdop", ".1f"),
}

CSV_COLUMNS = tuple(_CSV_FIELDS)


def _hhmmss(utc_time: str | None) -> str | None:
    """Drop the fractional seconds of an ``hhmmss.ss`` field."""
    if utc_time is None:
        return None
    return utc_time.split(".", 1)[0] or None


def _format(value: str | float | int | None, spec: str) -> str:
    if value is None:
        return ""
    return format(value, spec)


@dataclass(frozen=True)
class Fix:
    """Latest known position, merged from GGA and RMC sentences.

    GGA and RMC each carry a different subset of the fields, so a ``Fix``
    is a rolling merge rather than a per-sentence record: merging a
    sentence overwrites only the fields that sentence carries and that
    decoded successfully, and every other field keeps its previous value.

        field          GGA  RMC
        time_utc        x    x
        latitude_deg    x    x
        longitude_deg   x    x
        altitude_m      x
        speed_mps            x
        satellites      x
        hdop            x

    Fields that no sentence has reported yet are None. Instances are
    immutable; ``merge_gga`` and ``merge_rmc`` return new snapshots, which
    lets the consumer publish the latest fix with a reference swap.

    Attributes:
        time_utc: Receiver UTC time, ``hhmmss``.
        latitude_deg: Decimal degrees, positive=North.
        longitude_deg: Decimal degrees, positive=East.
        altitude_m: Meters above mean sea level (GGA).
        speed_mps: Speed over ground in m/s (RMC).
        satellites: Satellites used in the fix (GGA).
        hdop: Horizontal dilution of precision (GGA).

    Example:
        >>> fix = Fix().merge_gga(gga).merge_rmc(rmc)
        >>> fix.to_csv()
        '120000,-22.955900,-43.165900,5.14,760.0,10,0.8\\n'
    """

    time_utc: str | None = None
    latitude_deg: float | None = None
    longitude_deg: float | None = None
    altitude_m: float | None = None
    speed_mps: float | None = None
    satellites: int | None = None
    hdop: float | None = None

    def _merge(self, **updates: object) -> "Fix":
        changes = {name: value for name, value in updates.items() if value is not None}
        return dataclasses.replace(self, **changes)

    def merge_gga(self, gga: GGAData) -> "Fix":
        """Return a copy updated with the fields a GGA sentence carries."""
        return self._merge(
            time_utc=_hhmmss(gga.utc_time),
            latitude_deg=gga.latitude_degrees,
            longitude_deg=gga.longitude_degrees,
            altitude_m=gga.altitude_meters,
            satellites=gga.num_satellites,
            hdop=gga.horizontal_dilution_of_precision,
        )

    def merge_rmc(self, rmc: RMCData) -> "Fix":
        """Return a copy updated with the fields an RMC sentence carries."""
        return self._merge(
            time_utc=_hhmmss(rmc.utc_time),
            latitude_deg=rmc.latitude_degrees,
            longitude_deg=rmc.longitude_degrees,
            speed_mps=rmc.speed_meters_per_second,
        )

    def to_csv(self) -> str:
        """Serialize as one line with the ``CSV_COLUMNS`` fields in order.

        Unreported fields are empty. The line is newline-terminated.
        """
        row = (
            _format(getattr(self, attribute), spec)
            for attribute, spec in _CSV_FIELDS.values()
        )
        return ",".join(row) + "\n"
