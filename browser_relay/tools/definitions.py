"""
Tool schemas exposed to MCP clients.

Tool names and input schemas are part of the wire contract; bump
TOOLS_VERSION when changing them.
"""

from typing import Any, Dict, List

TOOLS_VERSION = "1"

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0

GET_CONSOLE_LOGS = "get_console_logs"
CLEAR_CONSOLE_LOGS = "clear_console_logs"
SEARCH_LOGS = "search_logs"

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": GET_CONSOLE_LOGS,
        "description": (
            "Retrieve console logs captured from web pages with optional filters. "
            "Returns logs with id, timestamp, level, message, page URL and session id, "
            "oldest first."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "default": DEFAULT_LIMIT,
                    "minimum": 0,
                    "description": "Maximum number of log entries to return",
                },
                "offset": {
                    "type": "integer",
                    "default": DEFAULT_OFFSET,
                    "minimum": 0,
                    "description": "Number of log entries to skip for pagination",
                },
                "level": {
                    "type": "string",
                    "enum": ["log", "info", "warn", "error"],
                    "description": "Filter logs by console level",
                },
                "url": {
                    "type": "string",
                    "description": "Filter logs by page URL (partial match, e.g. 'example.com')",
                },
                "startTime": {
                    "type": "string",
                    "description": "Only logs with timestamp >= startTime (ISO 8601)",
                },
                "endTime": {
                    "type": "string",
                    "description": "Only logs with timestamp <= endTime (ISO 8601)",
                },
            },
        },
    },
    {
        "name": CLEAR_CONSOLE_LOGS,
        "description": (
            "Delete all stored console logs. This is irreversible and returns "
            "the number of entries removed."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {},
        },
    },
    {
        "name": SEARCH_LOGS,
        "description": (
            "Search console log messages. Case-insensitive partial matching, "
            "most recent first."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to find in log messages",
                },
                "limit": {
                    "type": "integer",
                    "default": DEFAULT_LIMIT,
                    "minimum": 0,
                    "description": "Maximum number of matching entries to return",
                },
            },
            "required": ["query"],
        },
    },
]
