"""SerialSource: line reader for a GNSS receiver on a serial port.

Opens the receiver's UART with pyserial and hands back one NMEA line per
call. The port is configured the way NMEA receivers expect it:

    8 data bits, no parity, 1 stop bit (8N1)
    no software (XON/XOFF) or hardware (RTS/CTS, DSR/DTR) flow control
    read timeout 0.1 s

Reading strategy:
    Each read returns whatever bytes are waiting (at least one, or nothing
    after the timeout). The bytes go through a ``LineAssembler`` so that a
    sentence split across reads, or several sentences arriving in one read,
    still come out as whole lines. A timeout with no complete line yields
    ``None``, which callers treat as "try again", never as an error.
"""

import contextlib
from collections import deque
from collections.abc import Iterator
from types import TracebackType

import serial

from tracksense.errors import PortUnavailableError
from tracksense.gnss.framing import LineAssembler

__all__ = ["SerialSource"]

# --- serial port defaults -----------------------------------------------------

_BAUDRATE = 9600
_TIMEOUT = 0.1  # read timeout; bounds how long a stop request can go unnoticed


class SerialSource:
    """Context manager for reading NMEA lines from a serial device.

    Two consumption patterns are supported:

    Polling (used by the consumer thread, which checks its running flag
    between reads)::

        with SerialSource("/dev/ttyUSB0") as source:
            line = source.read_line()  # None on timeout

    Continuous iteration::

        with SerialSource("/dev/ttyUSB0") as source:
            for line in source:
                process(line)

    Args:
        port: Device path, e.g. ``"/dev/ttySTM2"`` or a pseudo-terminal.
        baudrate: Line speed in baud (default: ``9600``).
        timeout: Read timeout in seconds (default: ``0.1``).
    """

    def __init__(
        self,
        port: str,
        baudrate: int = _BAUDRATE,
        timeout: float = _TIMEOUT,
    ) -> None:
        """Store port parameters; the device is opened in ``__enter__``."""
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._serial: serial.Serial | None = None
        self._assembler = LineAssembler()
        self._lines: deque[str] = deque()
        self._cancelled: bool = False

    @property
    def port(self) -> str:
        return self._port

    def __enter__(self) -> "SerialSource":
        """Open and configure the serial device.

        Raises:
            PortUnavailableError: If the device cannot be opened or rejects
                the requested settings.
        """
        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self._timeout,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
        except (serial.SerialException, ValueError) as e:
            raise PortUnavailableError(
                f"Could not open serial port {self._port}: {e}"
            ) from e
        self._assembler.reset()
        self._lines.clear()
        self._cancelled = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the serial device."""
        if self._serial is not None:
            self._serial.close()
            self._serial = None

    def cancel(self) -> None:
        """Cancel pending blocking reads gracefully.

        Sets the cancellation flag and interrupts an in-progress read so
        that ``read_line()`` raises ``EOFError`` without waiting for the
        next timeout.
        """
        self._cancelled = True
        if self._serial is not None:
            with contextlib.suppress(AttributeError, OSError):
                self._serial.cancel_read()

    def _recv_raw(self, port: serial.Serial) -> bytes:
        """Read the bytes currently available; empty on timeout.

        Raises:
            EOFError: If the device was disconnected or closed.
        """
        try:
            return port.read(port.in_waiting or 1)
        except (serial.SerialException, OSError) as e:
            raise EOFError(f"Serial port {self._port} closed.") from e

    def read_line(self) -> str | None:
        """Return the next complete line, or ``None`` if none arrived in time.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If cancelled, or the device was disconnected.
        """
        if self._serial is None:
            raise RuntimeError("SerialSource must be used as a context manager.")
        if self._lines:
            return self._lines.popleft()
        if self._cancelled:
            raise EOFError("Serial read cancelled.")
        raw = self._recv_raw(self._serial)
        if raw:
            self._lines.extend(self._assembler.feed(raw))
        if self._lines:
            return self._lines.popleft()
        return None

    def __iter__(self) -> Iterator[str]:
        """Yield received lines indefinitely, skipping read timeouts.

        Iteration ends only when an exception propagates out (``EOFError``
        on cancellation or disconnect).
        """
        while True:
            line = self.read_line()
            if line is not None:
                yield line
