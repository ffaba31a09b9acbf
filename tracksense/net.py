"""DatagramSink: forwards fix records as UDP datagrams.

Each record is sent as one datagram to a fixed destination. UDP is
connectionless, so a missing listener is not an error; failures that do
surface (unreachable network, oversized payload) are logged and the
record is dropped.
"""

import contextlib
import logging
import socket
from types import TracebackType

from tracksense.errors import PortUnavailableError

__all__ = ["DatagramSink"]

logger = logging.getLogger(__name__)

# --- destination defaults -----------------------------------------------------

_HOST = "127.0.0.1"
_PORT = 9000


class DatagramSink:
    """Context manager owning a UDP socket bound to one destination.

    Example::

        with DatagramSink("127.0.0.1", 9000) as sink:
            sink.send("120000,-22.955900,-43.165900,5.14,760.0,10,0.8\\n")

    Args:
        host: Destination host name or IPv4 address (default: ``127.0.0.1``).
        port: Destination UDP port (default: ``9000``).
    """

    def __init__(self, host: str = _HOST, port: int = _PORT) -> None:
        """Store the destination; the socket is created in ``__enter__``."""
        self._host = host
        self._port = port
        self._address: tuple[str, int] | None = None
        self._sock: socket.socket | None = None

    @property
    def destination(self) -> tuple[str, int]:
        return self._host, self._port

    def __enter__(self) -> "DatagramSink":
        """Resolve the destination and create the socket.

        Raises:
            PortUnavailableError: If the host does not resolve or the socket
                cannot be created.
        """
        try:
            infos = socket.getaddrinfo(
                self._host, self._port, socket.AF_INET, socket.SOCK_DGRAM
            )
        except (socket.gaierror, UnicodeError) as e:
            raise PortUnavailableError(
                f"Could not resolve {self._host}:{self._port}: {e}"
            ) from e
        if not infos:
            raise PortUnavailableError(f"No address for {self._host}:{self._port}.")
        self._address = infos[0][4][:2]
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise PortUnavailableError(f"Could not create UDP socket: {e}") from e
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the socket."""
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.close()
            self._sock = None

    def send(self, record: str) -> bool:
        """Send one record as a single datagram.

        Returns:
            True if the datagram was handed to the network stack.

        Raises:
            RuntimeError: If called outside a ``with`` block.
        """
        if self._sock is None or self._address is None:
            raise RuntimeError("DatagramSink must be used as a context manager.")
        try:
            self._sock.sendto(record.encode("ascii", errors="replace"), self._address)
        except OSError as e:
            logger.warning(
                "Could not send to %s:%d: %s", self._host, self._port, e
            )
            return False
        return True
