"""
Result envelope for tool calls.

Every tool call, successful or not, produces one ToolResult that renders
to a single text block for the MCP client.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ToolResult:
    """
    Standard result type for tool execution.

    Provides a consistent response format for all tools.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any, **metadata) -> "ToolResult":
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata) -> "ToolResult":
        """Create a failed result"""
        return cls(success=False, error=error, metadata=metadata)

    @property
    def is_error(self) -> bool:
        return not self.success

    def to_text(self) -> str:
        """Render the envelope text."""
        if self.success:
            if isinstance(self.data, (dict, list)):
                return json.dumps(self.data, indent=2, default=str)
            return str(self.data)
        return f"Error: {self.error}"
