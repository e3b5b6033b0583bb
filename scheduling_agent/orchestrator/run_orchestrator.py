"""
Run orchestrator.

Drives one chat turn against the remote assistant: resolve the owner's
thread, post the message, create a run and poll it to a terminal state,
executing tool calls locally whenever the run asks for them. Rate-limited
runs are recreated on the same thread with jittered backoff; every other
failure ends the turn. Errors raised by the remote API itself end the turn
as a RunFailedError with code "transport_error", after a best-effort cancel
of the run if it is still open.
"""

import logging
import random
from contextlib import contextmanager
from typing import Iterator, List, Optional

from scheduling_agent.config import AgentConfig
from scheduling_agent.orchestrator.retry import BackoffState, RetryPolicy, SleepFn
from scheduling_agent.orchestrator.sessions import ConversationStore
from scheduling_agent.orchestrator.state import TRANSPORT_ERROR_CODE, Run, RunStatus
from scheduling_agent.orchestrator.transport import RunTransport
from scheduling_agent.services.user_context import UserContext, user_scope
from scheduling_agent.shared.contracts import ToolOutput
from scheduling_agent.shared.exceptions import NoReplyError, RunFailedError, TurnFailure
from scheduling_agent.shared.logging import log_run_transition
from scheduling_agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class _RemoteCallError(Exception):
    """A remote call raised while ``run`` was the last state seen."""

    def __init__(self, run: Run, error: Exception):
        self.run = run
        self.error = error
        super().__init__(str(error))


@contextmanager
def _remote_call(run: Run) -> Iterator[None]:
    try:
        yield
    except TurnFailure:
        raise
    except Exception as e:
        raise _RemoteCallError(run, e) from e


class RunOrchestrator:
    """
    One orchestrator serves every owner; all per-turn state lives on the stack.

    Args:
        transport: Remote run API
        registry: Tool registry used on RequiresAction
        conversations: Owner -> thread id store
        policy: Poll and retry tuning
        sleep: Awaitable sleep, replaced in tests
        rng: Random source for retry jitter
    """

    def __init__(
        self,
        transport: RunTransport,
        registry: ToolRegistry,
        conversations: ConversationStore,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[SleepFn] = None,
        rng: Optional[random.Random] = None,
    ):
        self._transport = transport
        self._registry = registry
        self._conversations = conversations
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self._rng = rng

    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        transport: RunTransport,
        registry: ToolRegistry,
        conversations: ConversationStore,
    ) -> "RunOrchestrator":
        return cls(transport, registry, conversations, policy=RetryPolicy.from_config(config))

    # =========================================================================
    # Sessions
    # =========================================================================

    async def get_or_create_thread(self, owner_id: int) -> str:
        thread_id = await self._conversations.get_thread_id(owner_id)
        if thread_id:
            return thread_id

        thread_id = await self._transport.create_thread()
        await self._conversations.save(owner_id, thread_id)
        logger.info(f"[owner={owner_id}] [thread={thread_id}] Session created")
        return thread_id

    async def reset(self, owner_id: int) -> str:
        """Drop the owner's thread and start a fresh one. Returns the new thread id."""
        await self.end_session(owner_id)
        return await self.get_or_create_thread(owner_id)

    async def end_session(self, owner_id: int) -> None:
        """Delete the owner's remote thread (best-effort) and its record."""
        thread_id = await self._conversations.get_thread_id(owner_id)
        if not thread_id:
            return

        _log = f"[owner={owner_id}] [thread={thread_id}] "
        try:
            await self._transport.delete_thread(thread_id)
        except Exception as e:
            logger.warning(f"{_log}Could not delete remote thread: {e}")
        await self._conversations.delete(owner_id)
        logger.info(f"{_log}Session ended")

    # =========================================================================
    # Turns
    # =========================================================================

    async def send(self, owner_id: int, message: str, role: Optional[str] = None) -> str:
        """
        Run one chat turn and return the assistant's reply.

        Args:
            owner_id: Staff id of the caller, also the session key
            message: The user's message
            role: Caller's role name, used by permission checks in the tools

        Returns:
            The assistant's text reply.

        Raises:
            RunFailedError: The run failed with a non-retryable error, was
                cancelled, or a remote call raised
            RateLimitExhaustedError: Rate-limit retries ran out
            NoReplyError: The run completed without an assistant message
        """
        _log = f"[owner={owner_id}] "
        with user_scope(UserContext(staff_id=owner_id, role=role)):
            try:
                thread_id = await self.get_or_create_thread(owner_id)
                _log = f"[owner={owner_id}] [thread={thread_id}] "

                await self._transport.post_message(thread_id, message)
                run = await self._transport.create_run(thread_id)
                log_run_transition("run_created", run, logger=logger)
                logger.info(f"{_log}[run={run.run_id}] Turn started")

                reply = await self._drive(owner_id, thread_id, run)
            except TurnFailure as e:
                logger.error(f"{_log}Turn failed: {e}")
                raise
            except Exception as e:
                logger.error(f"{_log}Turn failed: {e}")
                raise self._transport_failure(e) from e

        logger.info(f"{_log}Turn completed ({len(reply)} chars)")
        return reply

    async def _drive(self, owner_id: int, thread_id: str, run: Run) -> str:
        try:
            return await self._poll(owner_id, thread_id, run)
        except _RemoteCallError as e:
            if not e.run.status.is_terminal:
                _log = f"[owner={owner_id}] [thread={thread_id}] [run={e.run.run_id}] "
                await self._cancel_quietly(e.run, _log)
            raise self._transport_failure(e.error, run_id=e.run.run_id) from e.error

    async def _poll(self, owner_id: int, thread_id: str, run: Run) -> str:
        backoff = BackoffState(self._policy, sleep=self._sleep, rng=self._rng)

        while True:
            await backoff.wait_poll()
            with _remote_call(run):
                run = await self._transport.get_run(thread_id, run.run_id)
            _log = f"[owner={owner_id}] [thread={thread_id}] [run={run.run_id}] "

            if run.status == RunStatus.REQUIRES_ACTION:
                log_run_transition("requires_action", run, {"tool_calls": len(run.tool_calls)}, logger)
                outputs = await self._dispatch(run)
                if outputs:
                    with _remote_call(run):
                        run = await self._transport.submit_tool_outputs(thread_id, run.run_id, outputs)
                    backoff.reset_poll()
                else:
                    logger.warning(f"{_log}No tool outputs to submit")
                    backoff.grow_poll()
                continue

            if run.status == RunStatus.FAILED:
                log_run_transition("failed", run, logger=logger)
                await self._cancel_quietly(run, _log)
                if run.last_error is not None and run.last_error.is_rate_limit:
                    delay = backoff.next_retry_delay(run_id=run.run_id)
                    logger.warning(
                        f"{_log}Rate limited, retry {backoff.attempt}/"
                        f"{self._policy.max_retries} in {delay:.2f}s"
                    )
                    await backoff.sleep(delay)
                    with _remote_call(run):
                        run = await self._transport.create_run(thread_id)
                    log_run_transition("run_recreated", run, {"attempt": backoff.attempt}, logger)
                    backoff.reset_poll()
                    continue

                code = run.last_error.code if run.last_error else None
                logger.error(f"{_log}Run failed with code {code}")
                raise RunFailedError(f"Run failed ({code or 'unknown error'})", code=code, run_id=run.run_id)

            if run.status == RunStatus.CANCELLED:
                log_run_transition("cancelled", run, logger=logger)
                raise RunFailedError("Run was cancelled", run_id=run.run_id)

            if run.status == RunStatus.COMPLETED:
                log_run_transition("completed", run, logger=logger)
                with _remote_call(run):
                    return await self._reply(run)

            backoff.grow_poll()

    @staticmethod
    def _transport_failure(error: BaseException, run_id: Optional[str] = None) -> RunFailedError:
        return RunFailedError(
            f"Remote call failed ({type(error).__name__}: {error})",
            code=TRANSPORT_ERROR_CODE,
            run_id=run_id,
        )

    async def _dispatch(self, run: Run) -> List[ToolOutput]:
        # Sequential; each handled call yields exactly one output
        outputs = []
        for call in run.tool_calls:
            output = await self._registry.handle(call)
            if output is not None:
                outputs.append(output)
        return outputs

    async def _cancel_quietly(self, run: Run, _log: str) -> None:
        try:
            await self._transport.cancel_run(run.thread_id, run.run_id)
        except Exception as e:
            logger.warning(f"{_log}Cancel failed: {e}")

    async def _reply(self, run: Run) -> str:
        messages = await self._transport.list_messages(run.thread_id, run.run_id)
        for message in messages:
            if message.role == "assistant" and message.text.strip():
                return message.text
        raise NoReplyError(run_id=run.run_id)
