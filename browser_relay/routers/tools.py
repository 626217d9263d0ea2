# Browser Relay - Tools Router
"""
HTTP view of the log tools, for clients that do not speak MCP.
"""

import logging

from fastapi import APIRouter, Depends

from browser_relay.dependencies import get_tool_adapter
from browser_relay.models.requests import ToolCallRequest
from browser_relay.models.responses import ToolCallResponse
from browser_relay.tools import TOOLS_VERSION, ToolAdapter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("/list")
async def list_tools(adapter: ToolAdapter = Depends(get_tool_adapter)):
    """List all available tools"""
    return {"version": TOOLS_VERSION, "tools": adapter.list_tools()}


@router.post("/call", response_model=ToolCallResponse)
async def call_tool(request: ToolCallRequest, adapter: ToolAdapter = Depends(get_tool_adapter)):
    """Call a tool by name"""
    result = await adapter.call_tool(request.name, request.arguments)
    return ToolCallResponse(success=result.success, text=result.to_text(), error=result.error)
