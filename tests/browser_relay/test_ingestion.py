"""
Unit tests for the ingestion service
"""

import json
import pytest
from unittest.mock import AsyncMock, MagicMock

from browser_relay.exceptions import StorageUnavailableError
from browser_relay.ingestion import IngestionService
from browser_relay.storage import LogBroadcaster


@pytest.fixture
def service(store):
    return IngestionService(store)


class TestPartialAcceptance:
    """Tests for per-entry validation."""

    @pytest.mark.asyncio
    async def test_unknown_level_dropped(self, service, store, raw_entry):
        """Test a bad entry does not fail the batch."""
        batch = [
            raw_entry(message="ok 1", level="info"),
            raw_entry(message="bad", level="verbose"),
            raw_entry(message="ok 2", level="error"),
        ]

        result = await service.ingest(batch, session_id="session_1")

        assert result.received == 3
        assert result.stored == 2
        assert result.rejected == 1
        assert result.is_partial
        logs = await store.query()
        assert [r["message"] for r in logs] == ["ok 1", "ok 2"]

    @pytest.mark.asyncio
    async def test_non_object_entry_dropped(self, service, raw_entry):
        result = await service.ingest(["just a string", raw_entry()])

        assert result.stored == 1
        assert "entry 0" in result.errors[0]

    @pytest.mark.asyncio
    async def test_missing_timestamp_dropped(self, service, raw_entry):
        entry = raw_entry()
        del entry["timestamp"]

        result = await service.ingest([entry])

        assert result.stored == 0
        assert result.rejected == 1

    @pytest.mark.asyncio
    async def test_null_message_dropped(self, service, raw_entry):
        result = await service.ingest([raw_entry(message=None)])

        assert result.stored == 0

    @pytest.mark.asyncio
    async def test_level_is_not_coerced(self, service, raw_entry):
        result = await service.ingest([raw_entry(level="ERROR")])

        assert result.stored == 0

    @pytest.mark.asyncio
    async def test_extended_level_set(self, store, raw_entry):
        service = IngestionService(store, allowed_levels=["log", "info", "warn", "error", "debug"])

        result = await service.ingest([raw_entry(level="debug")])

        assert result.stored == 1


class TestNormalization:
    """Tests for entry normalization."""

    @pytest.mark.asyncio
    async def test_structured_message_serialized(self, service, store, raw_entry):
        await service.ingest([raw_entry(message={"user": "ada", "ids": [1, 2]})])

        log = (await store.query())[0]
        assert json.loads(log["message"]) == {"user": "ada", "ids": [1, 2]}

    @pytest.mark.asyncio
    async def test_page_url_alias(self, service, store, raw_entry):
        await service.ingest([raw_entry(pageUrl="https://example.com/app")])

        log = (await store.query())[0]
        assert log["url"] == "https://example.com/app"

    @pytest.mark.asyncio
    async def test_batch_session_applied(self, service, store, raw_entry):
        await service.ingest([raw_entry()], session_id="session_batch")

        assert (await store.query())[0]["sessionId"] == "session_batch"

    @pytest.mark.asyncio
    async def test_entry_session_wins(self, service, store, raw_entry):
        await service.ingest([raw_entry(sessionId="session_entry")], session_id="session_batch")

        assert (await store.query())[0]["sessionId"] == "session_entry"


class TestStoreInteraction:
    """Tests for the write path."""

    @pytest.mark.asyncio
    async def test_storage_failure_fails_batch(self, raw_entry):
        store = MagicMock()
        store.insert_batch = AsyncMock(side_effect=StorageUnavailableError("disk gone"))
        service = IngestionService(store)

        with pytest.raises(StorageUnavailableError):
            await service.ingest([raw_entry()])

    @pytest.mark.asyncio
    async def test_single_write_per_batch(self, raw_entry):
        store = MagicMock()
        store.insert_batch = AsyncMock(return_value=[{"id": 1}, {"id": 2}])
        service = IngestionService(store)

        result = await service.ingest([raw_entry(), raw_entry()])

        store.insert_batch.assert_awaited_once()
        assert len(store.insert_batch.call_args.args[0]) == 2
        assert result.stored == 2

    @pytest.mark.asyncio
    async def test_stored_records_published(self, store, raw_entry):
        broadcaster = LogBroadcaster()
        queue = broadcaster.subscribe()
        service = IngestionService(store, broadcaster=broadcaster)

        await service.ingest([raw_entry(message="live")])

        assert queue.get_nowait()["message"] == "live"

    @pytest.mark.asyncio
    async def test_echo_logs(self, store, raw_entry, caplog):
        service = IngestionService(store, echo_logs=True)

        with caplog.at_level("INFO", logger="browser_relay.console"):
            await service.ingest([raw_entry(message="kaboom", level="error")])

        assert any("kaboom" in r.getMessage() and r.levelname == "ERROR" for r in caplog.records)
        assert any("[localhost:3000]" in r.getMessage() for r in caplog.records)
