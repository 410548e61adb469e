"""
Server-Sent Events: connected listeners and the stream each one reads.

Each SSE client gets its own bounded queue in the ConnectionRegistry.
Tool executions are broadcast to every queue; a listener whose queue is
full misses the event instead of stalling the request that produced it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable, Iterable

logger = logging.getLogger(__name__)

KEEPALIVE_INTERVAL = 30.0
QUEUE_SIZE = 100


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def format_sse(event: dict) -> str:
    return f"data: {json.dumps(event)}\n\n"


class ConnectionRegistry:
    def __init__(self, queue_size: int = QUEUE_SIZE):
        self.queue_size = queue_size
        self._queues: set[asyncio.Queue] = set()

    def __len__(self) -> int:
        return len(self._queues)

    def add(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._queues.add(queue)
        logger.info("SSE client connected. Active connections: %d", len(self._queues))
        return queue

    def remove(self, queue: asyncio.Queue) -> None:
        if queue in self._queues:
            self._queues.discard(queue)
            logger.info("SSE client disconnected. Active connections: %d", len(self._queues))

    def broadcast(self, event: dict) -> int:
        """Queue the event for every listener. Returns how many received it."""
        delivered = 0
        for queue in list(self._queues):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("SSE listener queue full, dropping %s event", event.get("type"))
        return delivered


async def event_stream(
    registry: ConnectionRegistry,
    is_disconnected: Callable[[], Awaitable[bool]],
    tool_names: Iterable[str] = (),
    keepalive_interval: float = KEEPALIVE_INTERVAL,
) -> AsyncIterator[str]:
    """Yield SSE frames for one listener until it disconnects."""
    queue = registry.add()
    try:
        yield format_sse({
            "type": "connection",
            "message": "Connected to kluster verify SSE server",
            "timestamp": now_iso(),
            "tools": list(tool_names),
        })
        while not await is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive_interval)
            except asyncio.TimeoutError:
                event = {"type": "ping", "timestamp": now_iso()}
            yield format_sse(event)
    finally:
        registry.remove(queue)
