"""FastAPI monitor for the NMEA relay.

Start with::

    TRACKSENSE_SERIAL_PORT=/dev/pts/5 uvicorn server.main:app --port 8000

The server runs the same consumer as ``tracksense track`` (serial port in,
CSV datagrams out, configured through ``TRACKSENSE_*`` variables) and
exposes what it sees:

* ``GET /fix`` returns the latest merged fix as JSON, with ``null`` for
  fields no sentence has reported yet.
* ``WS /ws`` streams one ``type="fix"`` JSON message per merged sentence.
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect

from server.broadcaster import subscription
from server.formatters import fix_to_dict
from server.sensors import start_fix_relay
from tracksense.config import TrackerConfig

_QUEUE_MAX_SIZE = 10
_TIMEOUT_SECONDS = 5.0


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=_TIMEOUT_SECONDS)
            await websocket.send_text(message)
    except TimeoutError:
        await websocket.close(code=1001)
    except WebSocketDisconnect:
        pass


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    loop = asyncio.get_running_loop()
    with contextlib.ExitStack() as stack:
        application.state.consumer = start_fix_relay(
            stack, loop, TrackerConfig.from_env()
        )
        yield


app = FastAPI(lifespan=_lifespan)


@app.get("/fix")
async def latest_fix(request: Request) -> dict[str, Any]:
    """Return the consumer's latest fix snapshot."""
    return fix_to_dict(request.app.state.consumer.latest_fix())


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream fix JSON messages to a connected WebSocket client.

    Each client gets its own bounded queue (max ``_QUEUE_MAX_SIZE`` messages).
    The oldest message is dropped when the queue is full so slow clients do
    not stall the consumer thread. The connection closes with code 1001, and
    the client should reconnect, if no message arrives within 5 seconds.

    Args:
        websocket: The incoming WebSocket connection.
    """
    await websocket.accept()
    with subscription(_QUEUE_MAX_SIZE) as queue:
        await _send_messages_until_disconnect(queue, websocket)
