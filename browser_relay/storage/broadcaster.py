# Browser Relay - Live Log Broadcaster
"""
Fan-out of newly stored records to live subscribers (the /logs/stream
endpoint). Lives on the event loop; publishers and subscribers must run
in the same loop.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, Set

logger = logging.getLogger(__name__)


class LogBroadcaster:
    """Publishes stored records to every subscribed queue."""

    def __init__(self, max_queue_size: int = 1000):
        self.max_queue_size = max_queue_size
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    def publish(self, records: Iterable[Dict[str, Any]]) -> None:
        """
        Push records to all subscribers.

        A subscriber whose queue is full misses the record rather than
        slowing down ingestion.
        """
        for record in records:
            for queue in list(self._subscribers):
                try:
                    queue.put_nowait(record)
                except asyncio.QueueFull:
                    logger.warning(f"Live log subscriber is lagging, dropped record {record.get('id')}")
