"""Exception types shared by the relay pipelines.

The hierarchy separates the two failure classes callers must treat
differently:

    TrackSenseError
    ├── PortUnavailableError  (also an OSError)
    │       A pty, serial port, or socket could not be opened. Raised from
    │       ``__enter__`` of the owning context manager; the component is
    │       left closed.
    └── DecodeError           (also a ValueError)
            A field that should hold a number does not. Raised by the
            codec and caught by the sentence decoders, which log it and
            leave the affected field empty.

Hard read failures on an open source are reported with ``EOFError``, the
same convention the readers use for a closed stream.
"""

__all__ = ["DecodeError", "PortUnavailableError", "TrackSenseError"]


class TrackSenseError(Exception):
    """Base class for all relay errors."""


class PortUnavailableError(TrackSenseError, OSError):
    """A byte-stream endpoint, serial port, or socket could not be opened."""


class DecodeError(TrackSenseError, ValueError):
    """An NMEA field could not be decoded into the expected type."""
