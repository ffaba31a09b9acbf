"""SentenceProducer: emits simulated RMC and GGA sentences at a fixed rate.

Tick sequence (one per ``1000 / update_hz`` ms)::

    build_rmc() + build_gga()  ->  endpoint.write()  ->  wait  ->  advance

The first tick reports the base coordinate; later ticks follow the
configured trajectory. The wait is interruptible, so ``stop()`` does not
have to sit out the rest of a tick.
"""

import logging
import time
from collections.abc import Callable
from typing import Protocol

from tracksense.nmea import KNOTS_TO_METERS_PER_SECOND, build_gga, build_rmc
from tracksense.sim.trajectory import Trajectory, TrajectoryConfig
from tracksense.worker import Worker

__all__ = ["ByteEndpoint", "SentenceProducer"]

logger = logging.getLogger(__name__)

_DEFAULT_UPDATE_HZ = 1.0


class ByteEndpoint(Protocol):
    def write(self, data: bytes) -> int: ...


class SentenceProducer(Worker):
    """Background writer of simulated NMEA output.

    Example::

        with VirtualSerialLink() as link:
            with SentenceProducer(link, -22.9559, -43.1659, 760.0):
                time.sleep(10)

    Args:
        endpoint: Open byte endpoint the sentences are written to.
        base_latitude: Decimal degrees, positive=North.
        base_longitude: Decimal degrees, positive=East.
        base_altitude: Meters above mean sea level reported in GGA.
        update_hz: Sentence pairs per second. Non-positive rates fall back
            to 1 Hz.
        speed_mps: Speed over ground reported in RMC, m/s.
        satellites: Satellite count reported in GGA.
        hdop: Horizontal dilution of precision reported in GGA.
        trajectory: Motion around the base coordinate (static by default).
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        endpoint: ByteEndpoint,
        base_latitude: float,
        base_longitude: float,
        base_altitude: float = 10.0,
        update_hz: float = _DEFAULT_UPDATE_HZ,
        speed_mps: float = 5.14,
        *,
        satellites: int = 10,
        hdop: float = 0.8,
        trajectory: TrajectoryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__("nmea-producer")
        if update_hz <= 0:
            logger.warning(
                "Invalid update rate %s Hz, using %s Hz.", update_hz, _DEFAULT_UPDATE_HZ
            )
            update_hz = _DEFAULT_UPDATE_HZ
        self._endpoint = endpoint
        self._altitude = base_altitude
        self._speed_knots = speed_mps / KNOTS_TO_METERS_PER_SECOND
        self._satellites = satellites
        self._hdop = hdop
        self._clock = clock
        self.tick_interval_ms = round(1000.0 / update_hz)
        self._trajectory = Trajectory(base_latitude, base_longitude, trajectory)

    @property
    def trajectory(self) -> Trajectory:
        return self._trajectory

    def configure_trajectory(self, config: TrajectoryConfig) -> None:
        """Replace the trajectory around the same base coordinate.

        Raises:
            RuntimeError: If the producer is running.
        """
        with self._lifecycle_lock:
            if self.running:
                raise RuntimeError("Stop the producer before changing its trajectory.")
            base_latitude, base_longitude = self._trajectory.base
            self._trajectory = Trajectory(base_latitude, base_longitude, config)

    def sentences(self, latitude: float, longitude: float) -> bytes:
        """Return one tick's RMC and GGA sentences for the given position."""
        rmc = build_rmc(latitude, longitude, self._speed_knots)
        gga = build_gga(
            latitude, longitude, self._altitude, self._satellites, self._hdop
        )
        return (rmc + gga).encode("ascii")

    def _emit(self, latitude: float, longitude: float) -> None:
        payload = self.sentences(latitude, longitude)
        try:
            self._endpoint.write(payload)
        except OSError as e:
            logger.warning("Could not write sentences: %s", e)
            return
        logger.debug("Sent %r", payload)

    def _run(self) -> None:
        interval = self.tick_interval_ms / 1000.0
        trajectory = self._trajectory
        started = self._clock()
        next_tick = started
        latitude, longitude = trajectory.base
        logger.info(
            "Producer started at %.4f, %.4f (%s).",
            latitude,
            longitude,
            trajectory.mode.value,
        )
        while self.running:
            self._emit(latitude, longitude)
            next_tick += interval
            if not self._sleep(max(0.0, next_tick - self._clock())):
                break
            latitude, longitude = trajectory.position(self._clock() - started)
        logger.info("Producer stopped.")
