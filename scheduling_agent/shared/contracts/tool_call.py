"""
Tool call contracts at the boundary between a run and the tool registry.
"""

from pydantic import BaseModel, ConfigDict, Field


class ToolCall(BaseModel):
    """A function call requested by a run in the RequiresAction state."""

    model_config = ConfigDict(frozen=True)

    call_id: str = Field(description="Remote id the output must be keyed on")
    tool_name: str = Field(description="Registered tool name (case-sensitive)")
    arguments_json: str = Field(default="{}", description="Raw JSON arguments object")


class ToolOutput(BaseModel):
    """Serialized tool result submitted back to the run."""

    model_config = ConfigDict(frozen=True)

    call_id: str
    output: str
