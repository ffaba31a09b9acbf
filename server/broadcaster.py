"""Fan-out of JSON messages from the consumer thread to WebSocket clients.

Each connected client owns a bounded ``asyncio.Queue``. Messages are
produced on the consumer thread and handed to the event loop with
``call_soon_threadsafe``; a full queue drops its oldest message so one
slow client never holds back the others or the consumer.
"""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager

__all__ = [
    "add_subscriber",
    "broadcast_message",
    "remove_subscriber",
    "subscription",
]

_subscriber_queues: list[asyncio.Queue[str]] = []


def add_subscriber(queue: asyncio.Queue[str]) -> None:
    """Register *queue* to receive every broadcast message."""
    _subscriber_queues.append(queue)


def remove_subscriber(queue: asyncio.Queue[str]) -> None:
    """Unregister *queue*; unknown queues are ignored."""
    if queue in _subscriber_queues:
        _subscriber_queues.remove(queue)


@contextmanager
def subscription(max_size: int) -> Iterator[asyncio.Queue[str]]:
    """Yield a registered queue of at most *max_size* messages."""
    queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_size)
    add_subscriber(queue)
    try:
        yield queue
    finally:
        remove_subscriber(queue)


def _enqueue_message(queue: asyncio.Queue[str], message: str) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


def broadcast_message(message: str, loop: asyncio.AbstractEventLoop) -> None:
    """Queue *message* for every subscriber; safe to call from any thread."""
    if loop.is_closed():
        return
    for queue in list(_subscriber_queues):
        loop.call_soon_threadsafe(_enqueue_message, queue, message)
