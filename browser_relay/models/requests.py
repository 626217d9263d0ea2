# Browser Relay Request Models
"""
Pydantic models for API request validation.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LogEntry(BaseModel):
    """
    A single console entry as sent by the extension.

    Entries are validated one by one so a malformed entry can be dropped
    without failing its batch. The level is checked against the
    configured set by the ingestion service.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    level: str
    message: Any
    timestamp: str = Field(..., min_length=1)
    url: Optional[str] = Field(default=None, validation_alias=AliasChoices("url", "pageUrl"))
    session_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("sessionId", "session_id")
    )
    stack_trace: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("stackTrace", "stack_trace")
    )
    user_agent: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("userAgent", "user_agent")
    )
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("message")
    @classmethod
    def serialize_message(cls, value: Any) -> str:
        """Structured payloads are stored as JSON text."""
        if value is None:
            raise ValueError("message is required")
        if isinstance(value, str):
            return value
        return json.dumps(value, default=str)


class LogBatch(BaseModel):
    """Request body for POST /logs."""
    logs: List[Any]
    sessionId: Optional[str] = None


class LogFilter(BaseModel):
    """
    Conjunctive filter for log queries.

    Omitted fields impose no constraint.
    """
    level: Optional[str] = None
    url: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class ToolCallRequest(BaseModel):
    """Request body for tool calls over HTTP."""
    name: str
    arguments: Dict[str, Any] = {}
