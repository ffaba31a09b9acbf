"""Receiver pipeline wiring for the monitor server."""

import asyncio
import contextlib
import logging

from server.broadcaster import broadcast_message
from server.formatters import format_fix_message
from tracksense.config import TrackerConfig
from tracksense.gnss import Fix, SentenceConsumer, SerialSource
from tracksense.net import DatagramSink

__all__ = ["start_fix_relay"]

logger = logging.getLogger(__name__)


def start_fix_relay(
    stack: contextlib.ExitStack,
    loop: asyncio.AbstractEventLoop,
    tracker: TrackerConfig,
) -> SentenceConsumer:
    """Open the receiver and destination and start a broadcasting consumer.

    Every merged fix is forwarded as a CSV datagram, as in ``tracksense
    track``, and additionally broadcast to WebSocket subscribers on *loop*.
    All resources are registered on *stack*; closing it stops the consumer
    thread first, then closes the sink and the serial port.

    Args:
        stack: Exit stack owning the opened resources.
        loop: Running asyncio event loop to broadcast messages on.
        tracker: Serial port and destination settings.

    Raises:
        PortUnavailableError: If the serial port or destination cannot be
            opened.
    """
    source = stack.enter_context(SerialSource(tracker.serial_port, tracker.baudrate))
    sink = stack.enter_context(DatagramSink(tracker.dest_host, tracker.dest_port))

    def _publish(fix: Fix) -> None:
        broadcast_message(format_fix_message(fix), loop)

    consumer = SentenceConsumer(
        source,
        sink,
        on_fix=_publish,
        strict_checksum=tracker.strict_checksum,
    )
    stack.enter_context(consumer)
    logger.info(
        "Monitoring %s, forwarding to %s:%d.",
        tracker.serial_port,
        tracker.dest_host,
        tracker.dest_port,
    )
    return consumer
