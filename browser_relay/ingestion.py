# Browser Relay - Ingestion
"""
Validation and normalization of incoming log batches.

Entries are validated one at a time: a malformed entry is dropped and
counted, the rest of the batch is still stored. Storage failures fail
the whole batch so the client retries it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from pydantic import ValidationError

from browser_relay.config import DEFAULT_LOG_LEVELS
from browser_relay.models.requests import LogEntry
from browser_relay.storage import LogBroadcaster, LogStore

logger = logging.getLogger(__name__)

# Browser console lines echoed to the server log
relay_logger = logging.getLogger("browser_relay.console")


@dataclass
class IngestResult:
    """Outcome of ingesting one batch."""
    received: int
    stored: int
    rejected: int
    records: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return self.rejected > 0 and self.stored > 0


class IngestionService:
    """
    Turns raw batches from the extension into stored records.

    Args:
        store: LogStore the accepted entries are written to
        allowed_levels: recognized console levels
        broadcaster: optional live subscriber fan-out
        echo_logs: write accepted entries to the server log
    """

    def __init__(
        self,
        store: LogStore,
        allowed_levels: Optional[Iterable[str]] = None,
        broadcaster: Optional[LogBroadcaster] = None,
        echo_logs: bool = False,
    ):
        self.store = store
        self.allowed_levels = frozenset(allowed_levels or DEFAULT_LOG_LEVELS)
        self.broadcaster = broadcaster
        self.echo_logs = echo_logs

    def validate_entry(self, raw: Any, session_id: Optional[str] = None) -> LogEntry:
        """
        Validate and normalize one raw entry.

        Raises:
            ValueError: the entry is malformed or has an unknown level
        """
        if not isinstance(raw, dict):
            raise ValueError(f"entry must be an object, got {type(raw).__name__}")

        entry = LogEntry.model_validate(raw)
        if entry.level not in self.allowed_levels:
            raise ValueError(f"unrecognized level {entry.level!r}")

        if entry.session_id is None and session_id is not None:
            entry = entry.model_copy(update={"session_id": session_id})
        return entry

    async def ingest(self, raw_entries: Sequence[Any], session_id: Optional[str] = None) -> IngestResult:
        """
        Validate a batch and store the accepted entries in one write.

        Raises:
            StorageUnavailableError: the store failed; nothing is acknowledged
        """
        accepted: List[LogEntry] = []
        errors: List[str] = []

        for index, raw in enumerate(raw_entries):
            try:
                accepted.append(self.validate_entry(raw, session_id))
            except (ValidationError, ValueError) as e:
                errors.append(f"entry {index}: {e}")

        if errors:
            logger.warning(f"Dropped {len(errors)} of {len(raw_entries)} log entries: {errors[0]}")

        records = await self.store.insert_batch(accepted)

        if self.echo_logs:
            for entry in accepted:
                self._echo(entry)

        if self.broadcaster is not None:
            self.broadcaster.publish(records)

        return IngestResult(
            received=len(raw_entries),
            stored=len(records),
            rejected=len(errors),
            records=records,
            errors=errors,
        )

    def _echo(self, entry: LogEntry) -> None:
        host = urlparse(entry.url).netloc if entry.url else ""
        line = f"[{host or 'unknown'}] {entry.timestamp} - {entry.message}"
        if entry.level == "error":
            if entry.stack_trace:
                line += "\n" + entry.stack_trace
            relay_logger.error(line)
        elif entry.level == "warn":
            relay_logger.warning(line)
        else:
            relay_logger.info(line)
