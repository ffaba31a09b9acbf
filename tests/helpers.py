"""Controlled stand-ins for the serial source and datagram sink."""

import queue
import threading
import time
from collections.abc import Callable

from tracksense.nmea import GGAData, RMCData, SentenceType, decode_sentence

GGA = "$GPGGA,120000.00,2257.3540,S,04309.9540,W,1,10,0.8,760.0,M,0.0,M,,*5E"
RMC = "$GPRMC,120000.00,A,2257.3540,S,04309.9540,W,10.00,0.00,010125,,,A*62"


def _decode_as(sentence: str, sentence_type: SentenceType):
    decoded = decode_sentence(sentence, strict_checksum=True)
    if decoded is None or decoded.sentence_type is not sentence_type:
        return None
    return decoded.data


def decode_gga_line(sentence: str) -> GGAData | None:
    """Strictly decode *sentence*; None unless it is a valid GGA line."""
    return _decode_as(sentence, SentenceType.GGA)


def decode_rmc_line(sentence: str) -> RMCData | None:
    """Strictly decode *sentence*; None unless it is a valid RMC line."""
    return _decode_as(sentence, SentenceType.RMC)


class ControlledSource:
    """Line source fed from a queue.

    ``read_line`` returns None when the queue stays empty for ``timeout``
    seconds, like a serial read timeout. Putting an exception instance in
    the queue raises it from ``read_line``.
    """

    def __init__(self, timeout: float = 0.01) -> None:
        self.message_queue: queue.Queue[str | BaseException] = queue.Queue()
        self._timeout = timeout

    def __enter__(self) -> "ControlledSource":
        return self

    def __exit__(self, *_: object) -> None:
        pass

    def read_line(self) -> str | None:
        try:
            item = self.message_queue.get(timeout=self._timeout)
        except queue.Empty:
            return None
        if isinstance(item, BaseException):
            raise item
        return item


class RecordingSink:
    destination = ("127.0.0.1", 9000)

    def __init__(self, result: bool = True) -> None:
        self.records: list[str] = []
        self._result = result
        self._lock = threading.Lock()

    def __enter__(self) -> "RecordingSink":
        return self

    def __exit__(self, *_: object) -> None:
        pass

    def send(self, record: str) -> bool:
        with self._lock:
            self.records.append(record)
        return self._result


def wait_until(condition: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return condition()
