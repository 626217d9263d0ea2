"""
Browser Relay MCP Server

Exposes the log tools to AI assistants over stdio.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from browser_relay.config import Settings, get_settings
from browser_relay.storage import LogStore
from browser_relay.tools import TOOLS_VERSION, ToolAdapter

logger = logging.getLogger(__name__)


class RelayMCPServer:
    """
    MCP server for the console log tools.

    The store is injected so the server can share a database with the
    HTTP API or run standalone against the same file.
    """

    def __init__(self, store: LogStore, config: Optional[Settings] = None):
        self.config = config or get_settings()
        self.store = store
        self.adapter = ToolAdapter(store)
        self._server = Server("browser-relay", version=TOOLS_VERSION)
        self._register_handlers()

    @property
    def server(self) -> Server:
        return self._server

    def _register_handlers(self) -> None:
        """Register list_tools and call_tool with the MCP server"""

        @self._server.list_tools()
        async def list_tools() -> List[Tool]:
            return await self.handle_list_tools()

        @self._server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> CallToolResult:
            return await self.handle_call_tool(name, arguments)

    async def handle_list_tools(self) -> List[Tool]:
        """List available MCP tools."""
        return [
            Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in self.adapter.list_tools()
        ]

    async def handle_call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        """Execute MCP tool."""
        logger.info(f"Tool call: {name}")
        result = await self.adapter.call_tool(name, arguments or {})
        return CallToolResult(
            content=[TextContent(type="text", text=result.to_text())],
            isError=result.is_error,
        )

    async def run_stdio(self) -> None:
        """Run the server via stdio."""
        async with stdio_server() as (read_stream, write_stream):
            await self._server.run(
                read_stream,
                write_stream,
                self._server.create_initialization_options(),
            )


def run_server(config: Optional[Settings] = None) -> None:
    """
    Run the MCP server on stdio against the configured database.

    Entry point for `python -m browser_relay mcp`.
    """
    settings = config or get_settings()
    store = LogStore.from_url(settings.database_url)
    server = RelayMCPServer(store, settings)

    logger.info(f"Starting MCP server on stdio ({settings.database_url})")
    try:
        asyncio.run(server.run_stdio())
    finally:
        store.close()
