"""VirtualSerialLink: a pseudo-terminal standing in for a receiver UART.

The simulator writes NMEA bytes to the master side of a pty; any program
that opens the slave device (``companion_path``, e.g. ``/dev/pts/5``) sees
them exactly as it would see a serial GNSS receiver.

Slave configuration:
    raw mode (no line editing, no echo, no signal characters)
    8 data bits, no parity, 1 stop bit, no flow control
    configurable baud rate (default 115200)

The master side is non-blocking. When nobody drains the slave and the
kernel buffer fills up, ``write`` waits at most ``write_timeout`` seconds
and then raises ``BlockingIOError`` instead of stalling the producer. A
sentence cut short that way is closed with ``\\r\\n`` ahead of the next
write, so the stream stays line-aligned.
"""

import contextlib
import errno
import os
import pty
import select
import termios
import time
import tty
from types import TracebackType

from tracksense.errors import PortUnavailableError

__all__ = ["VirtualSerialLink"]

# --- pty defaults -------------------------------------------------------------

_BAUDRATE = 115200
_WRITE_TIMEOUT = 0.5

_LINE_TERMINATOR = b"\r\n"

_BAUD_CONSTANTS: dict[int, int] = {
    4800: termios.B4800,
    9600: termios.B9600,
    19200: termios.B19200,
    38400: termios.B38400,
    57600: termios.B57600,
    115200: termios.B115200,
}

# termios.tcgetattr() list indices
_CFLAG, _ISPEED, _OSPEED, _CC = 2, 4, 5, 6


def _configure_raw(fd: int, speed: int) -> None:
    """Put the terminal *fd* into raw 8N1 mode at *speed*."""
    tty.setraw(fd, termios.TCSANOW)
    attributes = termios.tcgetattr(fd)
    attributes[_CFLAG] &= ~(termios.PARENB | termios.CSTOPB | termios.CSIZE)
    attributes[_CFLAG] |= termios.CS8 | termios.CLOCAL | termios.CREAD
    attributes[_ISPEED] = speed
    attributes[_OSPEED] = speed
    attributes[_CC][termios.VMIN] = 1
    attributes[_CC][termios.VTIME] = 0
    termios.tcsetattr(fd, termios.TCSANOW, attributes)


class VirtualSerialLink:
    """Context manager owning a configured pseudo-terminal pair.

    Example::

        with VirtualSerialLink() as link:
            print("Receiver at", link.companion_path)
            link.write(build_gga(-22.9559, -43.1659, 10.0).encode("ascii"))

    Both file descriptors stay open for the lifetime of the link; keeping
    the slave open means the device persists while readers come and go.

    Args:
        baudrate: Line speed reported by the slave terminal.
        write_timeout: Seconds ``write`` waits for room in a full pty.

    Raises:
        ValueError: If *baudrate* is not a supported standard rate or
            *write_timeout* is not positive.
    """

    def __init__(
        self, baudrate: int = _BAUDRATE, write_timeout: float = _WRITE_TIMEOUT
    ) -> None:
        if baudrate not in _BAUD_CONSTANTS:
            supported = ", ".join(str(rate) for rate in _BAUD_CONSTANTS)
            raise ValueError(f"Unsupported baud rate {baudrate}; use one of {supported}")
        if write_timeout <= 0:
            raise ValueError(f"write_timeout must be positive, got {write_timeout}")
        self._baudrate = baudrate
        self._write_timeout = write_timeout
        self._cut_line = False
        self._master_fd: int | None = None
        self._slave_fd: int | None = None
        self._companion_path: str | None = None

    def __enter__(self) -> "VirtualSerialLink":
        """Create and configure the pty pair.

        Raises:
            PortUnavailableError: If the pty cannot be created or configured.
                Nothing is left open in that case.
        """
        try:
            master_fd, slave_fd = pty.openpty()
        except OSError as e:
            raise PortUnavailableError(f"Could not create pseudo-terminal: {e}") from e
        try:
            _configure_raw(slave_fd, _BAUD_CONSTANTS[self._baudrate])
            os.set_blocking(master_fd, False)
            companion_path = os.ttyname(slave_fd)
        except (OSError, termios.error) as e:
            os.close(master_fd)
            os.close(slave_fd)
            raise PortUnavailableError(
                f"Could not configure pseudo-terminal: {e}"
            ) from e
        self._master_fd = master_fd
        self._slave_fd = slave_fd
        self._companion_path = companion_path
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close both ends of the pty."""
        for fd in (self._master_fd, self._slave_fd):
            if fd is not None:
                with contextlib.suppress(OSError):
                    os.close(fd)
        self._master_fd = None
        self._slave_fd = None
        self._companion_path = None
        self._cut_line = False

    @property
    def baudrate(self) -> int:
        return self._baudrate

    @property
    def companion_path(self) -> str:
        """Device path a serial reader opens to receive the written bytes.

        Raises:
            RuntimeError: If called outside a ``with`` block.
        """
        if self._companion_path is None:
            raise RuntimeError("VirtualSerialLink must be used as a context manager.")
        return self._companion_path

    def write(self, data: bytes) -> int:
        """Write all of *data* to the master side.

        Waits up to ``write_timeout`` seconds for the pty to accept the
        bytes. If the timeout cuts a payload short, the next ``write`` is
        prefixed with ``\\r\\n`` so the cut sentence ends on its own line.

        Returns:
            Number of bytes written, including any ``\\r\\n`` prefix.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            BlockingIOError: If the pty stays full for ``write_timeout``
                seconds; ``characters_written`` counts the bytes sent.
            OSError: If the write fails.
        """
        if self._master_fd is None:
            raise RuntimeError("VirtualSerialLink must be used as a context manager.")
        if self._cut_line:
            data = _LINE_TERMINATOR + data
        view = memoryview(data)
        written = 0
        deadline = time.monotonic() + self._write_timeout
        while written < len(view):
            remaining = deadline - time.monotonic()
            ready = []
            if remaining > 0:
                _, ready, _ = select.select([], [self._master_fd], [], remaining)
            if not ready:
                if written:
                    self._cut_line = True
                raise BlockingIOError(
                    errno.EAGAIN, "Pseudo-terminal buffer is full", written
                )
            with contextlib.suppress(BlockingIOError):
                written += os.write(self._master_fd, view[written:])
        self._cut_line = False
        return written
