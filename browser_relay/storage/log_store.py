# Browser Relay - Log Store
"""
Durable append-and-query store for console logs.

The store owns the schema, filtering, search and pagination. All public
methods are coroutines; the blocking SQLAlchemy work runs on a single
worker thread so a call never blocks the event loop and every call is a
self-contained transaction.

Known races (accepted for a local tool):
- offset pagination may skip or repeat rows when inserts land between pages
- clear_all racing insert_batch may run on either side of it
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, sessionmaker

from browser_relay.database import ConsoleLog, check_db_connection, create_db_engine, init_db
from browser_relay.exceptions import InvalidFilterError, StorageUnavailableError
from browser_relay.models.requests import LogEntry, LogFilter

logger = logging.getLogger(__name__)

SORT_ORDERS = ("asc", "desc")

TimeBounds = Tuple[Optional[datetime], Optional[datetime]]


def _to_utc(value: str) -> datetime:
    """Parse an ISO 8601 time, accepting a trailing 'Z', as naive UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed
    return parsed.replace(tzinfo=None) - parsed.utcoffset()


def _occurred_at(timestamp: str) -> Optional[datetime]:
    try:
        return _to_utc(timestamp)
    except ValueError:
        return None


def _parse_time(value: str, field_name: str) -> datetime:
    try:
        return _to_utc(value)
    except ValueError as e:
        raise InvalidFilterError(f"{field_name} is not an ISO 8601 timestamp: {value!r}") from e


def validate_filters(filters: LogFilter) -> TimeBounds:
    """
    Reject impossible filter combinations and return the time bounds as
    naive UTC datetimes.

    Raises:
        InvalidFilterError: unparseable bounds or start after end
    """
    start = _parse_time(filters.start_time, "startTime") if filters.start_time else None
    end = _parse_time(filters.end_time, "endTime") if filters.end_time else None
    if start is not None and end is not None and start > end:
        raise InvalidFilterError(
            f"startTime {filters.start_time} is after endTime {filters.end_time}"
        )
    return start, end


class LogStore:
    """
    Log storage backed by a SQLAlchemy engine.

    Usage:
        store = LogStore.from_url("sqlite:///./data/browserrelay.db")
        await store.insert_batch(entries)
        logs = await store.query(limit=50, filters=LogFilter(level="error"))
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=engine,
        )
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="log-store")

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "LogStore":
        """Create the engine, the tables and the store for a database URL."""
        try:
            engine = create_db_engine(database_url, echo=echo)
            init_db(engine)
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Cannot open log database: {e}") from e
        return cls(engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, functools.partial(func, *args))
        except SQLAlchemyError as e:
            logger.error(f"Log storage error: {e}")
            raise StorageUnavailableError(f"Log storage unavailable: {e}") from e

    # ============ Public API ============

    async def insert_batch(self, entries: Sequence[LogEntry]) -> List[Dict[str, Any]]:
        """
        Append entries in one transaction.

        Ids are assigned in the order of ``entries``. Existing rows are
        never touched. Returns the stored records; the stored count is
        their length.
        """
        if not entries:
            return []
        return await self._run(self._insert_batch, list(entries))

    async def query(
        self,
        limit: int = 100,
        offset: int = 0,
        filters: Optional[LogFilter] = None,
        order: str = "asc",
    ) -> List[Dict[str, Any]]:
        """
        Fetch records matching every present filter field.

        Results are ordered by id (ascending unless ``order="desc"``) and
        paginated by limit/offset.
        """
        filters = filters or LogFilter()
        if limit < 0:
            raise InvalidFilterError(f"limit must be non-negative, got {limit}")
        if offset < 0:
            raise InvalidFilterError(f"offset must be non-negative, got {offset}")
        if order not in SORT_ORDERS:
            raise InvalidFilterError(f"order must be one of {SORT_ORDERS}, got {order!r}")
        bounds = validate_filters(filters)
        return await self._run(self._query, limit, offset, filters, bounds, order)

    async def search(self, query_text: Optional[str], limit: int = 100) -> List[Dict[str, Any]]:
        """
        Case-insensitive substring search over messages, most recent first.

        Empty text browses all records.
        """
        if limit < 0:
            raise InvalidFilterError(f"limit must be non-negative, got {limit}")
        return await self._run(self._search, query_text or "", limit)

    async def clear_all(self) -> int:
        """Delete every record. Returns the number removed."""
        deleted = await self._run(self._clear_all)
        logger.info(f"Cleared {deleted} logs")
        return deleted

    async def count(self, filters: Optional[LogFilter] = None) -> int:
        """Count records matching the filters."""
        filters = filters or LogFilter()
        bounds = validate_filters(filters)
        return await self._run(self._count, filters, bounds)

    async def ping(self) -> bool:
        """Check if the database answers."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, check_db_connection, self.engine)

    def close(self) -> None:
        """Stop the worker and release database connections."""
        self._executor.shutdown(wait=True)
        self.engine.dispose()

    # ============ Worker-thread implementations ============

    def _insert_batch(self, entries: List[LogEntry]) -> List[Dict[str, Any]]:
        with self._session() as db:
            rows = [
                ConsoleLog(
                    level=entry.level,
                    message=entry.message,
                    url=entry.url,
                    timestamp=entry.timestamp,
                    occurred_at=_occurred_at(entry.timestamp),
                    session_id=entry.session_id,
                    stack_trace=entry.stack_trace,
                    user_agent=entry.user_agent,
                    log_metadata=entry.metadata,
                )
                for entry in entries
            ]
            try:
                db.add_all(rows)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            return [row.to_dict() for row in rows]

    def _apply_filters(self, query: Query, filters: LogFilter, bounds: TimeBounds) -> Query:
        start, end = bounds
        if filters.level:
            query = query.filter(ConsoleLog.level == filters.level)
        if filters.url:
            query = query.filter(ConsoleLog.url.contains(filters.url, autoescape=True))
        if start is not None:
            query = query.filter(ConsoleLog.occurred_at >= start)
        if end is not None:
            query = query.filter(ConsoleLog.occurred_at <= end)
        return query

    def _query(
        self, limit: int, offset: int, filters: LogFilter, bounds: TimeBounds, order: str
    ) -> List[Dict[str, Any]]:
        with self._session() as db:
            query = self._apply_filters(db.query(ConsoleLog), filters, bounds)
            ordering = ConsoleLog.id.asc() if order == "asc" else ConsoleLog.id.desc()
            rows = query.order_by(ordering).offset(offset).limit(limit).all()
            return [row.to_dict() for row in rows]

    def _search(self, query_text: str, limit: int) -> List[Dict[str, Any]]:
        with self._session() as db:
            query = db.query(ConsoleLog)
            if query_text:
                query = query.filter(ConsoleLog.message.icontains(query_text, autoescape=True))
            rows = query.order_by(ConsoleLog.id.desc()).limit(limit).all()
            return [row.to_dict() for row in rows]

    def _clear_all(self) -> int:
        with self._session() as db:
            try:
                result = db.execute(delete(ConsoleLog))
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            return result.rowcount or 0

    def _count(self, filters: LogFilter, bounds: TimeBounds) -> int:
        with self._session() as db:
            return self._apply_filters(db.query(ConsoleLog), filters, bounds).count()
