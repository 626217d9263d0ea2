"""
Unit tests for the client-side LogForwarder
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from browser_relay.client import LogForwarder, RetryDispatcher


@pytest.fixture
def dispatcher():
    mock = MagicMock(spec=RetryDispatcher)
    mock.drain = AsyncMock()
    return mock


class TestLogForwarder:

    def test_add_buffers_record(self, dispatcher):
        forwarder = LogForwarder(dispatcher, url="process://api", user_agent="relay-cli")

        forwarder.add("warn", "disk almost full", metadata={"pid": 42})

        assert forwarder.buffered == 1
        dispatcher.send.assert_not_called()

    def test_full_buffer_flushes(self, dispatcher):
        forwarder = LogForwarder(dispatcher, max_buffer_size=3)

        for i in range(3):
            forwarder.add("log", f"line {i}")

        dispatcher.send.assert_called_once()
        batch = dispatcher.send.call_args.args[0]
        assert [r["message"] for r in batch] == ["line 0", "line 1", "line 2"]
        assert forwarder.buffered == 0

    def test_record_shape(self, dispatcher):
        forwarder = LogForwarder(dispatcher, url="process://api", user_agent="relay-cli")

        forwarder.add("error", "boom", stack_trace="at main", metadata={"pid": 42})
        forwarder.flush()

        record = dispatcher.send.call_args.args[0][0]
        assert record["level"] == "error"
        assert record["url"] == "process://api"
        assert record["userAgent"] == "relay-cli"
        assert record["stackTrace"] == "at main"
        assert record["metadata"] == {"pid": 42}
        assert record["timestamp"].endswith("Z")

    def test_flush_empty_buffer_is_noop(self, dispatcher):
        forwarder = LogForwarder(dispatcher)

        assert forwarder.flush() is None
        dispatcher.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_periodic_flush(self, dispatcher):
        forwarder = LogForwarder(dispatcher, flush_interval=0.01)
        forwarder.start()

        forwarder.add("info", "tick")
        await asyncio.sleep(0.05)
        await forwarder.stop()

        dispatcher.send.assert_called_once()

    @pytest.mark.asyncio
    async def test_stop_flushes_remaining(self, dispatcher):
        forwarder = LogForwarder(dispatcher, flush_interval=60)
        forwarder.start()
        forwarder.add("info", "last words")

        await forwarder.stop()

        dispatcher.send.assert_called_once()
        dispatcher.drain.assert_awaited_once()
