"""
Tool dispatch registry.

Maps tool names to handlers and gives every handled call the same
treatment: arguments parsed once, one JSON envelope out, and no exception
ever escapes to the run loop.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from scheduling_agent.shared.contracts import ToolCall, ToolOutput, ToolResult
from scheduling_agent.shared.exceptions import (
    BusinessRuleViolation,
    DuplicateToolError,
    MissingArgumentError,
)
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Immutable name -> handler map built once at startup.

    Args:
        handlers: One handler per tool name
        emit_unknown_tool_error: When True an unknown tool name gets a
            ``success: false`` envelope; otherwise the call is dropped.

    Raises:
        DuplicateToolError: If two handlers claim the same name.
    """

    def __init__(self, handlers: Iterable[ToolHandler], emit_unknown_tool_error: bool = False):
        self._handlers: Dict[str, ToolHandler] = {}
        for handler in handlers:
            if handler.name in self._handlers:
                raise DuplicateToolError(handler.name)
            self._handlers[handler.name] = handler
        self._emit_unknown_tool_error = emit_unknown_tool_error

    @property
    def names(self) -> List[str]:
        return list(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def tool_specs(self) -> List[Dict[str, Any]]:
        return [handler.spec() for handler in self._handlers.values()]

    async def handle(self, call: ToolCall) -> Optional[ToolOutput]:
        """
        Run one tool call.

        Returns:
            ToolOutput keyed on the call id, or None when the call is dropped
            (unknown tool with the error flag off, or unparseable arguments).
        """
        _log = f"[call={call.call_id}] [tool={call.tool_name}] "

        handler = self._handlers.get(call.tool_name)
        if handler is None:
            if self._emit_unknown_tool_error:
                logger.warning(f"{_log}Unknown tool, answering with an error envelope")
                return self._output(call, ToolResult.fail(f"Unknown tool `{call.tool_name}`."))
            logger.warning(f"{_log}Unknown tool, dropping call")
            return None

        args = self._parse_arguments(call, _log)
        if args is None:
            return None

        try:
            result = await handler.handle(args)
        except MissingArgumentError as e:
            logger.info(f"{_log}Invalid arguments: {e}")
            result = ToolResult.fail(str(e))
        except BusinessRuleViolation as e:
            logger.info(f"{_log}Business rule violation: {e.message}")
            result = ToolResult.fail(e.message)
        except Exception:
            logger.exception(f"{_log}Handler raised")
            result = ToolResult.fail(
                f"⚠️ An internal error occurred while running `{call.tool_name}`."
            )

        logger.info(f"{_log}Completed (success={result.success})")
        return self._output(call, result)

    @staticmethod
    def _parse_arguments(call: ToolCall, _log: str) -> Optional[ToolArguments]:
        raw = call.arguments_json
        if raw is None or not raw.strip():
            return ToolArguments()
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"{_log}Malformed arguments JSON, dropping call: {e}")
            return None
        if not isinstance(parsed, dict):
            logger.warning(f"{_log}Arguments are not a JSON object, dropping call")
            return None
        return ToolArguments(parsed)

    @staticmethod
    def _output(call: ToolCall, result: ToolResult) -> ToolOutput:
        return ToolOutput(call_id=call.call_id, output=result.to_json())
