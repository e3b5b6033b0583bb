"""
Base class for tool handlers.

One subclass per tool. A handler declares its OpenAI function schema
(``name``, ``description``, ``parameters``) and implements ``handle``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from scheduling_agent.shared.contracts import ToolResult
from scheduling_agent.tools.arguments import ToolArguments


def schema(properties: Dict[str, Any], required=()) -> Dict[str, Any]:
    """Build a JSON schema object for a tool's parameters."""
    return {"type": "object", "properties": properties, "required": list(required)}


def integer(description: str) -> Dict[str, str]:
    return {"type": "integer", "description": description}


def string(description: str) -> Dict[str, str]:
    return {"type": "string", "description": description}


def iso_date(description: str) -> Dict[str, str]:
    return {"type": "string", "format": "date", "description": description}


class ToolHandler(ABC):
    name: str = ""
    description: str = ""
    parameters: Dict[str, Any] = schema({})

    @abstractmethod
    async def handle(self, args: ToolArguments) -> ToolResult:
        """Execute the tool. Raise BusinessRuleViolation for rule breaks."""

    def spec(self) -> Dict[str, Any]:
        """OpenAI function-tool definition for this handler."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
