"""Simulated receiver motion around a base coordinate.

STATIC keeps the receiver at the base coordinate. CIRCULAR moves it on a
circle of ``radius_m`` around the base, one revolution per ``period_s``:

    angle = 2*pi * frac(t / period)
    dlat  = r * sin(angle) / 111320
    dlon  = r * cos(angle) / (111320 * cos(base_lat))

111320 m is the length of one degree of latitude (and of longitude at the
equator). Near the poles ``cos(base_lat)`` tends to zero; it is held at a
small floor there and the resulting longitude is wrapped into [-180, 180).
"""

import enum
import logging
import math
from dataclasses import dataclass

__all__ = [
    "METERS_PER_DEGREE",
    "Trajectory",
    "TrajectoryConfig",
    "TrajectoryMode",
]

logger = logging.getLogger(__name__)

METERS_PER_DEGREE = 111320.0

_MIN_COS_LATITUDE = 1e-6


class TrajectoryMode(enum.Enum):
    STATIC = "static"
    CIRCULAR = "circular"


@dataclass(frozen=True)
class TrajectoryConfig:
    """Circular trajectory parameters.

    Attributes:
        enabled: Move on the circle (CIRCULAR) instead of staying put.
        radius_m: Circle radius in meters, >= 0.
        period_s: Seconds per revolution, > 0.

    Raises:
        ValueError: On a negative radius or non-positive period.
    """

    enabled: bool = False
    radius_m: float = 20.0
    period_s: float = 120.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius_m) or self.radius_m < 0:
            raise ValueError(f"radius_m must be >= 0, got {self.radius_m}")
        if not math.isfinite(self.period_s) or self.period_s <= 0:
            raise ValueError(f"period_s must be > 0, got {self.period_s}")

    @property
    def mode(self) -> TrajectoryMode:
        return TrajectoryMode.CIRCULAR if self.enabled else TrajectoryMode.STATIC


def _wrap_longitude(longitude: float) -> float:
    """Wrap *longitude* into [-180, 180)."""
    return (longitude + 180.0) % 360.0 - 180.0


class Trajectory:
    """Position of the simulated receiver as a function of elapsed time.

    Example:
        >>> circle = TrajectoryConfig(enabled=True, radius_m=20.0, period_s=20.0)
        >>> trajectory = Trajectory(-22.9559, -43.1659, circle)
        >>> dlat, dlon = trajectory.offset(5.0)
        >>> round(dlat * METERS_PER_DEGREE, 6)
        20.0

    Args:
        base_latitude: Circle center, decimal degrees.
        base_longitude: Circle center, decimal degrees.
        config: Mode and circle parameters.
    """

    def __init__(
        self,
        base_latitude: float,
        base_longitude: float,
        config: TrajectoryConfig | None = None,
    ) -> None:
        self._base = (base_latitude, base_longitude)
        self._config = config or TrajectoryConfig()
        cos_latitude = math.cos(math.radians(base_latitude))
        if abs(cos_latitude) < _MIN_COS_LATITUDE:
            if self._config.enabled:
                logger.warning(
                    "Base latitude %.4f is too close to a pole; "
                    "longitude offsets are clamped.",
                    base_latitude,
                )
            cos_latitude = _MIN_COS_LATITUDE
        self._cos_base_latitude = cos_latitude

    @property
    def base(self) -> tuple[float, float]:
        return self._base

    @property
    def config(self) -> TrajectoryConfig:
        return self._config

    @property
    def mode(self) -> TrajectoryMode:
        return self._config.mode

    def offset(self, elapsed_s: float) -> tuple[float, float]:
        """Return ``(dlat, dlon)`` in degrees from the base after *elapsed_s*."""
        if self.mode is TrajectoryMode.STATIC:
            return 0.0, 0.0
        revolutions = max(elapsed_s, 0.0) / self._config.period_s
        angle = 2.0 * math.pi * (revolutions - math.floor(revolutions))
        radius = self._config.radius_m
        dlat = radius * math.sin(angle) / METERS_PER_DEGREE
        dlon = radius * math.cos(angle) / (METERS_PER_DEGREE * self._cos_base_latitude)
        return dlat, dlon

    def position(self, elapsed_s: float) -> tuple[float, float]:
        """Return ``(latitude, longitude)`` in decimal degrees after *elapsed_s*."""
        dlat, dlon = self.offset(elapsed_s)
        base_latitude, base_longitude = self._base
        return base_latitude + dlat, _wrap_longitude(base_longitude + dlon)
