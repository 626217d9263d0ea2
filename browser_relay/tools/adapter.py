"""
Tool Adapter

Maps tool calls 1:1 onto LogStore operations. The adapter only applies
argument defaults and turns errors into error-flagged results; it never
raises across the tool boundary.
"""

import copy
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from browser_relay.exceptions import UnsupportedToolError
from browser_relay.models.requests import LogFilter
from browser_relay.storage import LogStore
from browser_relay.tools.base import ToolResult
from browser_relay.tools.definitions import (
    CLEAR_CONSOLE_LOGS,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    GET_CONSOLE_LOGS,
    SEARCH_LOGS,
    TOOL_DEFINITIONS,
)

logger = logging.getLogger(__name__)

# Rough token budget for one tool response
MAX_RESPONSE_CHARS = 100000


def ensure_response_size(data: Dict[str, Any], max_chars: int = MAX_RESPONSE_CHARS) -> Dict[str, Any]:
    """Trim the ``logs`` list so the rendered response stays under max_chars."""
    logs = data.get("logs")
    if not logs:
        return data

    size = len(json.dumps(data, default=str))
    if size <= max_chars:
        return data

    logger.warning(f"Tool response too large ({size} chars), truncating")
    keep = max(1, int(max_chars / (size / len(logs))))
    return {
        **data,
        "logs": logs[:keep],
        "_truncated": True,
        "_originalCount": len(logs),
    }


def _int_arg(arguments: Dict[str, Any], name: str, default: int) -> int:
    value = arguments.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be an integer, got {value!r}")


class ToolAdapter:
    """
    Exposes LogStore operations as named tools.

    Usage:
        adapter = ToolAdapter(store)
        result = await adapter.call_tool("get_console_logs", {"level": "error"})
        print(result.to_text())
    """

    def __init__(self, store: LogStore, max_response_chars: int = MAX_RESPONSE_CHARS):
        self.store = store
        self.max_response_chars = max_response_chars
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[Any]]] = {
            GET_CONSOLE_LOGS: self._get_console_logs,
            CLEAR_CONSOLE_LOGS: self._clear_console_logs,
            SEARCH_LOGS: self._search_logs,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return the tool schemas."""
        return copy.deepcopy(TOOL_DEFINITIONS)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Run a tool and wrap its outcome."""
        arguments = arguments or {}
        handler = self._handlers.get(name)
        if handler is None:
            error = UnsupportedToolError(name)
            logger.error(f"Tool call rejected: {error}")
            return ToolResult.fail(str(error), tool=name, unsupported=True)

        try:
            data = await handler(arguments)
        except Exception as e:
            logger.error(f"Tool '{name}' failed: {e}")
            return ToolResult.fail(str(e), tool=name)
        return ToolResult.ok(data, tool=name)

    async def _get_console_logs(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        filters = LogFilter(
            level=arguments.get("level"),
            url=arguments.get("url"),
            start_time=arguments.get("startTime"),
            end_time=arguments.get("endTime"),
        )
        logs = await self.store.query(
            limit=_int_arg(arguments, "limit", DEFAULT_LIMIT),
            offset=_int_arg(arguments, "offset", DEFAULT_OFFSET),
            filters=filters,
        )
        return ensure_response_size({"logs": logs}, self.max_response_chars)

    async def _clear_console_logs(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        cleared = await self.store.clear_all()
        return {"cleared": cleared}

    async def _search_logs(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        logs = await self.store.search(
            arguments.get("query") or "",
            limit=_int_arg(arguments, "limit", DEFAULT_LIMIT),
        )
        return ensure_response_size({"logs": logs}, self.max_response_chars)
