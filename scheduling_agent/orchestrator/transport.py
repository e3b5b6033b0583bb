"""
Remote run transport.

RunTransport is the protocol the orchestrator drives. OpenAIRunTransport
implements it on the OpenAI Assistants threads/runs API and converts SDK
objects into the orchestrator's own Run and ThreadMessage models.
"""

import logging
from typing import Any, List, Protocol, Sequence

from openai import AsyncOpenAI
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from scheduling_agent.orchestrator.state import Run, RunError, RunStatus, ThreadMessage
from scheduling_agent.shared.contracts import ToolCall, ToolOutput
from scheduling_agent.shared.llm.client import TRANSIENT_ERRORS

logger = logging.getLogger(__name__)


class RunTransport(Protocol):
    async def create_thread(self) -> str: ...

    async def delete_thread(self, thread_id: str) -> None: ...

    async def post_message(self, thread_id: str, text: str) -> None: ...

    async def create_run(self, thread_id: str) -> Run: ...

    async def get_run(self, thread_id: str, run_id: str) -> Run: ...

    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, outputs: Sequence[ToolOutput]
    ) -> Run: ...

    async def cancel_run(self, thread_id: str, run_id: str) -> None: ...

    async def list_messages(self, thread_id: str, run_id: str) -> List[ThreadMessage]: ...


def to_run(remote: Any) -> Run:
    """Convert an SDK run object into a Run."""
    tool_calls = ()
    required_action = getattr(remote, "required_action", None)
    if required_action is not None and required_action.submit_tool_outputs is not None:
        tool_calls = tuple(
            ToolCall(
                call_id=call.id,
                tool_name=call.function.name,
                arguments_json=call.function.arguments or "",
            )
            for call in required_action.submit_tool_outputs.tool_calls
        )

    last_error = None
    if getattr(remote, "last_error", None) is not None:
        last_error = RunError(code=remote.last_error.code, message=remote.last_error.message)

    return Run(
        run_id=remote.id,
        thread_id=remote.thread_id,
        status=RunStatus.from_remote(remote.status),
        tool_calls=tool_calls,
        last_error=last_error,
    )


def to_message(remote: Any) -> ThreadMessage:
    """Join the text blocks of an SDK message."""
    texts = [
        block.text.value
        for block in remote.content
        if getattr(block, "type", None) == "text" and block.text is not None
    ]
    return ThreadMessage(
        role=remote.role,
        text="\n".join(texts),
        message_id=remote.id,
        run_id=getattr(remote, "run_id", None),
    )


class OpenAIRunTransport:
    """RunTransport backed by ``client.beta.threads``."""

    def __init__(self, client: AsyncOpenAI, assistant_id: str):
        self._client = client
        self._assistant_id = assistant_id

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def create_thread(self) -> str:
        thread = await self._client.beta.threads.create()
        return thread.id

    async def delete_thread(self, thread_id: str) -> None:
        await self._client.beta.threads.delete(thread_id)

    async def post_message(self, thread_id: str, text: str) -> None:
        await self._client.beta.threads.messages.create(
            thread_id=thread_id, role="user", content=text
        )

    async def create_run(self, thread_id: str) -> Run:
        remote = await self._client.beta.threads.runs.create(
            thread_id=thread_id, assistant_id=self._assistant_id
        )
        return to_run(remote)

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        remote = await self._client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
        return to_run(remote)

    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, outputs: Sequence[ToolOutput]
    ) -> Run:
        remote = await self._client.beta.threads.runs.submit_tool_outputs(
            run_id,
            thread_id=thread_id,
            tool_outputs=[
                {"tool_call_id": output.call_id, "output": output.output} for output in outputs
            ],
        )
        return to_run(remote)

    async def cancel_run(self, thread_id: str, run_id: str) -> None:
        await self._client.beta.threads.runs.cancel(run_id, thread_id=thread_id)

    async def list_messages(self, thread_id: str, run_id: str) -> List[ThreadMessage]:
        page = await self._client.beta.threads.messages.list(
            thread_id=thread_id, run_id=run_id, order="desc"
        )
        return [to_message(message) for message in page.data]
