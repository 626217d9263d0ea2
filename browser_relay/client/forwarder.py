# Browser Relay Log Forwarder
"""
Buffers log records on the client and hands them to the dispatcher in
batches, either when the buffer fills up or on a periodic flush.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from browser_relay.client.dispatcher import RetryDispatcher

logger = logging.getLogger(__name__)


class LogForwarder:
    """
    Client-side log buffer in front of a RetryDispatcher.

    Usage:
        forwarder = LogForwarder(dispatcher, url="process://api-server")
        forwarder.start()
        forwarder.add("error", "connection refused")
        await forwarder.stop()
    """

    def __init__(
        self,
        dispatcher: RetryDispatcher,
        url: Optional[str] = None,
        user_agent: Optional[str] = None,
        max_buffer_size: int = 1000,
        flush_interval: float = 5.0,
    ):
        self.dispatcher = dispatcher
        self.url = url
        self.user_agent = user_agent
        self.max_buffer_size = max_buffer_size
        self.flush_interval = flush_interval
        self._buffer: List[Dict[str, Any]] = []
        self._flush_task: Optional[asyncio.Task] = None

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def add(
        self,
        level: str,
        message: Any,
        url: Optional[str] = None,
        stack_trace: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Buffer one record, flushing when the buffer is full."""
        record: Dict[str, Any] = {
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        page_url = url or self.url
        if page_url:
            record["url"] = page_url
        if self.user_agent:
            record["userAgent"] = self.user_agent
        if stack_trace:
            record["stackTrace"] = stack_trace
        if metadata:
            record["metadata"] = metadata

        self._buffer.append(record)
        if len(self._buffer) >= self.max_buffer_size:
            self.flush()

    def flush(self) -> Optional[asyncio.Task]:
        """Hand the buffered records to the dispatcher as one batch."""
        if not self._buffer:
            return None
        batch, self._buffer = self._buffer, []
        logger.debug(f"Flushing {len(batch)} buffered logs")
        return self.dispatcher.send(batch)

    def start(self) -> None:
        """Start periodic flushing."""
        if self._flush_task is None:
            self._flush_task = asyncio.create_task(self._flush_periodically())

    async def _flush_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            self.flush()

    async def stop(self) -> None:
        """Stop periodic flushing and send what is left."""
        if self._flush_task is not None:
            self._flush_task.cancel()
            try:
                await self._flush_task
            except asyncio.CancelledError:
                pass
            self._flush_task = None
        self.flush()
        await self.dispatcher.drain()
