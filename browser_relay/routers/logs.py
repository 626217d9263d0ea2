# Browser Relay - Logs Router
"""
API endpoints for log ingestion, query, search and clearing.
"""

import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from browser_relay.config import Settings
from browser_relay.dependencies import (
    get_app_settings,
    get_broadcaster,
    get_ingestion_service,
    get_store,
)
from browser_relay.exceptions import InvalidFilterError, PayloadTooLargeError
from browser_relay.ingestion import IngestionService
from browser_relay.models.requests import LogBatch, LogFilter
from browser_relay.models.responses import ClearResponse, IngestResponse, LogListResponse
from browser_relay.storage import LogBroadcaster, LogStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])

STREAM_KEEPALIVE_SECONDS = 15.0


async def _read_limited_body(request: Request, limit: int) -> bytes:
    """Read the request body, refusing anything over ``limit`` bytes."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise PayloadTooLargeError(int(content_length), limit)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(len(body), limit)
    return bytes(body)


@router.post("", response_model=IngestResponse)
async def ingest_logs(
    request: Request,
    ingestion: IngestionService = Depends(get_ingestion_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Accept a batch of console logs from the extension.

    Entries with an unknown level or missing fields are dropped; the
    response reports how many were stored.
    """
    body = await _read_limited_body(request, settings.max_payload_bytes)

    try:
        batch = LogBatch.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Invalid log batch format: {e.error_count()} error(s)")
        raise HTTPException(status_code=400, detail="Invalid log batch format")

    result = await ingestion.ingest(batch.logs, session_id=batch.sessionId)

    return IngestResponse(success=True, received=result.received, stored=result.stored)


@router.get("", response_model=LogListResponse)
async def list_logs(
    limit: int = Query(100, ge=0, description="Max items to return"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    level: Optional[str] = Query(None, description="Filter by console level"),
    url: Optional[str] = Query(None, description="Filter by page URL (partial match)"),
    start_time: Optional[str] = Query(None, alias="startTime", description="ISO 8601 lower bound"),
    end_time: Optional[str] = Query(None, alias="endTime", description="ISO 8601 upper bound"),
    store: LogStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """List logs, oldest first, filtered by every given parameter."""
    if level is not None and level not in settings.allowed_levels:
        raise InvalidFilterError(f"Unknown level {level!r}, expected one of {settings.allowed_levels}")

    filters = LogFilter(level=level, url=url, start_time=start_time, end_time=end_time)
    logs = await store.query(
        limit=min(limit, settings.max_query_limit),
        offset=offset,
        filters=filters,
    )
    return LogListResponse(logs=logs)


@router.get("/search", response_model=LogListResponse)
async def search_logs(
    query: str = Query("", description="Text to find in messages"),
    limit: int = Query(100, ge=0, description="Max items to return"),
    store: LogStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Search log messages, most recent first."""
    logs = await store.search(query, limit=min(limit, settings.max_query_limit))
    return LogListResponse(logs=logs)


@router.delete("", response_model=ClearResponse)
async def clear_logs(store: LogStore = Depends(get_store)):
    """Delete all stored logs."""
    cleared = await store.clear_all()
    return ClearResponse(cleared=cleared)


@router.get("/stream")
async def stream_logs(
    request: Request,
    broadcaster: LogBroadcaster = Depends(get_broadcaster),
):
    """Server-sent events of newly stored logs."""
    queue = broadcaster.subscribe()

    async def event_stream():
        try:
            while not await request.is_disconnected():
                try:
                    record = await asyncio.wait_for(queue.get(), timeout=STREAM_KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield f"data: {json.dumps(record, default=str)}\n\n"
        finally:
            broadcaster.unsubscribe(queue)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
