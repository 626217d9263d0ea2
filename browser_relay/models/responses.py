# Browser Relay Response Models
"""
Pydantic models for API responses.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database_connected: bool


class IngestResponse(BaseModel):
    """Acknowledgement for one ingested batch."""
    success: bool
    received: int
    stored: int


class LogListResponse(BaseModel):
    """List of log records."""
    logs: List[Dict[str, Any]]


class ClearResponse(BaseModel):
    """Result of clearing the store."""
    cleared: int


class AllowedDomainsResponse(BaseModel):
    """Domains the extension should capture on."""
    enabled: bool
    domains: List[str]


class ToolCallResponse(BaseModel):
    """Response from tool calls over HTTP."""
    success: bool
    text: str
    error: Optional[str] = None
