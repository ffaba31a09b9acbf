"""Run configuration for the simulator and the tracker.

The CLI builds these from its arguments; the monitor server builds a
``TrackerConfig`` from ``TRACKSENSE_*`` environment variables.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from tracksense.sim.trajectory import TrajectoryConfig

__all__ = ["SimulatorConfig", "TrackerConfig"]

# --- simulator defaults -------------------------------------------------------

DEFAULT_BASE_LATITUDE = -22.9559
DEFAULT_BASE_LONGITUDE = -43.1659
DEFAULT_BASE_ALTITUDE = 10.0
DEFAULT_UPDATE_HZ = 1.0
DEFAULT_SPEED_MPS = 5.14
DEFAULT_PTY_BAUDRATE = 115200

# --- tracker defaults ---------------------------------------------------------

DEFAULT_SERIAL_PORT = "/dev/ttySTM2"
DEFAULT_SERIAL_BAUDRATE = 9600
DEFAULT_DEST_HOST = "127.0.0.1"
DEFAULT_DEST_PORT = 9000

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class SimulatorConfig:
    """Parameters of the simulated receiver."""

    base_latitude: float = DEFAULT_BASE_LATITUDE
    base_longitude: float = DEFAULT_BASE_LONGITUDE
    base_altitude: float = DEFAULT_BASE_ALTITUDE
    update_hz: float = DEFAULT_UPDATE_HZ
    speed_mps: float = DEFAULT_SPEED_MPS
    satellites: int = 10
    hdop: float = 0.8
    pty_baudrate: int = DEFAULT_PTY_BAUDRATE
    trajectory: TrajectoryConfig = field(default_factory=TrajectoryConfig)


@dataclass(frozen=True)
class TrackerConfig:
    """Where the tracker reads sentences from and forwards records to."""

    serial_port: str = DEFAULT_SERIAL_PORT
    baudrate: int = DEFAULT_SERIAL_BAUDRATE
    dest_host: str = DEFAULT_DEST_HOST
    dest_port: int = DEFAULT_DEST_PORT
    strict_checksum: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TrackerConfig":
        """Build a config from ``TRACKSENSE_*`` variables, defaulting the rest.

        Recognized variables: ``TRACKSENSE_SERIAL_PORT``,
        ``TRACKSENSE_BAUDRATE``, ``TRACKSENSE_DEST_HOST``,
        ``TRACKSENSE_DEST_PORT`` and ``TRACKSENSE_STRICT_CHECKSUM``.

        Raises:
            ValueError: If a numeric variable is not an integer.
        """
        env = os.environ if environ is None else environ
        strict = env.get("TRACKSENSE_STRICT_CHECKSUM", "")
        return cls(
            serial_port=env.get("TRACKSENSE_SERIAL_PORT", DEFAULT_SERIAL_PORT),
            baudrate=int(env.get("TRACKSENSE_BAUDRATE", DEFAULT_SERIAL_BAUDRATE)),
            dest_host=env.get("TRACKSENSE_DEST_HOST", DEFAULT_DEST_HOST),
            dest_port=int(env.get("TRACKSENSE_DEST_PORT", DEFAULT_DEST_PORT)),
            strict_checksum=strict.strip().lower() in _TRUE_STRINGS,
        )
