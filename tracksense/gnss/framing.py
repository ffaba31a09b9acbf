"""Line framing for a raw NMEA byte stream.

A serial read returns whatever bytes arrived before the timeout, which may
be half a sentence or several sentences at once. ``LineAssembler`` turns
those chunks back into lines: bytes accumulate until ``\\n``, every ``\\r``
is discarded, and an unterminated tail is kept for the next ``feed``.

Every ``$`` starts a new line. Bytes buffered before it belong to a
sentence that lost its terminator and are discarded, so a truncated
sentence never runs into the one after it.
"""

import logging

__all__ = ["LineAssembler"]

logger = logging.getLogger(__name__)

# NMEA 0183 caps a sentence at 82 characters; anything far beyond that
# without a newline is line noise
_MAX_LINE_LENGTH = 512

_LF, _CR, _START = 0x0A, 0x0D, 0x24


class LineAssembler:
    """Accumulates received bytes and splits them into text lines.

    Example:
        >>> assembler = LineAssembler()
        >>> assembler.feed(b"$GPGGA,1235")
        []
        >>> assembler.feed(b"19*77\\r\\n$GPRMC")
        ['$GPGGA,123519*77']
        >>> assembler.pending
        6

    Args:
        max_line_length: Buffered bytes allowed without a newline before the
            partial line is discarded.
    """

    def __init__(self, max_line_length: int = _MAX_LINE_LENGTH) -> None:
        self._max_line_length = max_line_length
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes belonging to an unterminated line."""
        return len(self._buffer)

    def reset(self) -> None:
        """Discard any partial line."""
        self._buffer.clear()

    def feed(self, data: bytes) -> list[str]:
        """Append *data* and return every line it completed, in order.

        Completed lines are decoded as ASCII with undecodable bytes dropped
        and carry no line terminator. Empty lines are returned as ``""``.
        """
        lines: list[str] = []
        for byte in data:
            if byte == _LF:
                lines.append(self._buffer.decode("ascii", errors="ignore"))
                self._buffer.clear()
            elif byte == _CR:
                continue
            else:
                if byte == _START and self._buffer:
                    logger.warning(
                        "Discarding unterminated sentence: %r",
                        self._buffer.decode("ascii", errors="ignore"),
                    )
                    self._buffer.clear()
                self._buffer.append(byte)
                if len(self._buffer) > self._max_line_length:
                    logger.warning(
                        "Discarding %d bytes without a line terminator.",
                        len(self._buffer),
                    )
                    self._buffer.clear()
        return lines
