"""
Tool result envelope contract.

Every tool handler answers with this shape. It is the only contract the
remote assistant relies on:

    {"success": bool, "message"?: str, "error"?: str, "data"?: any}
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, Field


class ToolResult(BaseModel):
    """Uniform success/error envelope returned by every tool."""

    success: bool = Field(description="Whether the tool completed its task")
    message: Optional[str] = Field(
        default=None, description="Human-readable summary on success"
    )
    error: Optional[str] = Field(
        default=None, description="Human-readable reason on failure"
    )
    data: Optional[Any] = Field(default=None, description="Structured payload")

    @classmethod
    def ok(cls, message: Optional[str] = None, data: Any = None) -> "ToolResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> "ToolResult":
        return cls(success=False, error=error, data=data)

    def to_json(self) -> str:
        """Serialize to the JSON string sent back to the run."""
        payload = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(payload, ensure_ascii=False)
