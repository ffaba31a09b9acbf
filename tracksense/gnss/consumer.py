"""SentenceConsumer: reads NMEA lines, merges fixes, forwards CSV records.

Pipeline, one iteration per received line::

    source.read_line() -> decode_sentence() -> Fix.merge_*() -> sink.send()
                                                              -> on_fix(fix)

The consumer owns a single background thread. Lines that do not decode
(unknown sentence types, bad fields, line noise) are skipped and the loop
keeps going, as do failures of the sink or the ``on_fix`` callback. An
exception from the source (``EOFError`` when the port is gone) ends the
thread and is kept in ``error``.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

from tracksense.gnss.types import Fix
from tracksense.nmea import SentenceType, decode_sentence
from tracksense.worker import Worker

__all__ = ["LineSource", "RecordSink", "SentenceConsumer"]

logger = logging.getLogger(__name__)


class LineSource(Protocol):
    def read_line(self) -> str | None: ...


class RecordSink(Protocol):
    def send(self, record: str) -> bool: ...


# Sentence type -> how it updates the rolling fix
_MERGERS: dict[SentenceType, Callable[[Fix, Any], Fix]] = {
    SentenceType.GGA: Fix.merge_gga,
    SentenceType.RMC: Fix.merge_rmc,
}


class SentenceConsumer(Worker):
    """Background reader that turns NMEA lines into forwarded fix records.

    Every decoded GGA or RMC sentence is merged into the latest ``Fix``,
    which is then serialized with ``Fix.to_csv()`` and handed to the sink.
    The latest fix can be read from any thread with ``latest_fix()``.

    Example::

        with SerialSource("/dev/ttySTM2") as source, DatagramSink() as sink:
            with SentenceConsumer(source, sink) as consumer:
                time.sleep(10)
            print(consumer.latest_fix())

    Args:
        source: Open line source; ``read_line()`` returns None on timeout
            and raises ``EOFError`` when the stream is gone.
        sink: Open record sink receiving one CSV line per merged sentence.
        on_fix: Called with each new ``Fix`` from the consumer thread.
        strict_checksum: Drop sentences whose checksum does not match
            instead of only logging the mismatch.
    """

    def __init__(
        self,
        source: LineSource,
        sink: RecordSink,
        *,
        on_fix: Callable[[Fix], None] | None = None,
        strict_checksum: bool = False,
    ) -> None:
        super().__init__("nmea-consumer")
        self._source = source
        self._sink = sink
        self._on_fix = on_fix
        self._strict_checksum = strict_checksum
        self._fix = Fix()
        self._fix_lock = threading.Lock()
        self._error: BaseException | None = None

    @property
    def error(self) -> BaseException | None:
        """The exception that ended the thread, if any."""
        return self._error

    def latest_fix(self) -> Fix:
        """Return the most recently merged fix snapshot."""
        with self._fix_lock:
            return self._fix

    def process_line(self, line: str) -> Fix | None:
        """Decode one line and, if it carries a fix, merge and forward it.

        Failures of the sink or of ``on_fix`` are logged; the fix is merged
        regardless.

        Returns:
            The new fix, or None if the line was ignored.
        """
        decoded = decode_sentence(line, strict_checksum=self._strict_checksum)
        if decoded is None:
            return None
        merge = _MERGERS.get(decoded.sentence_type)
        if merge is None:
            logger.debug("No merge rule for %s.", decoded.sentence_type.value)
            return None

        with self._fix_lock:
            self._fix = merge(self._fix, decoded.data)
            fix = self._fix

        record = fix.to_csv()
        logger.info("Forwarding %s", record.rstrip("\n"))
        try:
            self._sink.send(record)
        except Exception:
            logger.exception("Could not forward %s", record.rstrip("\n"))
        if self._on_fix is not None:
            try:
                self._on_fix(fix)
            except Exception:
                logger.exception("Fix callback failed.")
        return fix

    def _run(self) -> None:
        self._error = None
        logger.info("Consumer started.")
        try:
            while self.running:
                line = self._source.read_line()
                if not line:
                    continue
                logger.debug("Received %r", line)
                self.process_line(line)
        except EOFError as e:
            self._error = e
            logger.error("Serial read failed, consumer stopping: %s", e)
        except Exception as e:
            self._error = e
            logger.exception("Consumer stopping on unexpected error.")
        finally:
            logger.info("Consumer stopped.")
