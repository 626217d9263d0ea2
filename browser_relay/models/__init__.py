# Browser Relay Models

from .requests import LogBatch, LogEntry, LogFilter, ToolCallRequest
from .responses import (
    AllowedDomainsResponse,
    ClearResponse,
    HealthResponse,
    IngestResponse,
    LogListResponse,
    ToolCallResponse,
)

__all__ = [
    "LogBatch",
    "LogEntry",
    "LogFilter",
    "ToolCallRequest",
    "AllowedDomainsResponse",
    "ClearResponse",
    "HealthResponse",
    "IngestResponse",
    "LogListResponse",
    "ToolCallResponse",
]
