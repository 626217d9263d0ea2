"""
Log tools for AI assistants.

These tools expose the log store to MCP clients.
"""

from browser_relay.tools.adapter import ToolAdapter, ensure_response_size
from browser_relay.tools.base import ToolResult
from browser_relay.tools.definitions import TOOL_DEFINITIONS, TOOLS_VERSION

__all__ = [
    'ToolAdapter',
    'ToolResult',
    'TOOL_DEFINITIONS',
    'TOOLS_VERSION',
    'ensure_response_size',
]
