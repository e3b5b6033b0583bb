"""
Tests for the run orchestrator and its backoff state.

The remote API is replaced by a scripted fake transport: each get_run call
pops the next scripted status. Sleeping is recorded instead of awaited, so
the tests run the full loop without waiting.
"""

import asyncio
import json
import random

import pytest

from scheduling_agent.orchestrator import (
    BackoffState,
    InMemoryConversationStore,
    RetryPolicy,
    Run,
    RunError,
    RunOrchestrator,
    RunStatus,
    ThreadMessage,
)
from scheduling_agent.orchestrator.state import TRANSPORT_ERROR_CODE
from scheduling_agent.services.user_context import ANONYMOUS, current_user
from scheduling_agent.shared.contracts import ToolCall, ToolResult
from scheduling_agent.shared.exceptions import (
    NoReplyError,
    RateLimitExhaustedError,
    RunFailedError,
)
from scheduling_agent.tools import ToolArguments, ToolHandler, ToolRegistry


# ============================================================================
# Test Fixtures
# ============================================================================


def _run(status, tool_calls=(), error_code=None):
    """Scripted run; ids are filled in by the fake transport."""
    return Run(
        run_id="scripted",
        thread_id="scripted",
        status=status,
        tool_calls=tuple(tool_calls),
        last_error=RunError(code=error_code, message=error_code) if error_code else None,
    )


def _rate_limited():
    return _run(RunStatus.FAILED, error_code="rate_limit_exceeded")


class FakeTransport:
    """In-memory RunTransport driven by a list of scripted runs."""

    def __init__(self, script, replies=None):
        self.script = list(script)
        self.replies = (
            replies
            if replies is not None
            else [ThreadMessage(role="assistant", text="Here is your schedule.")]
        )
        self.threads_created = 0
        self.deleted_threads = []
        self.posted = []
        self.runs_created = 0
        self.submitted = []
        self.cancelled = []
        self.fail_delete = False
        self.fail_get_run = False
        self.fail_submit = False

    async def create_thread(self):
        self.threads_created += 1
        return f"thread_{self.threads_created}"

    async def delete_thread(self, thread_id):
        if self.fail_delete:
            raise ConnectionError("remote unavailable")
        self.deleted_threads.append(thread_id)

    async def post_message(self, thread_id, text):
        self.posted.append((thread_id, text))

    async def create_run(self, thread_id):
        self.runs_created += 1
        return Run(run_id=f"run_{self.runs_created}", thread_id=thread_id, status=RunStatus.QUEUED)

    async def get_run(self, thread_id, run_id):
        if self.fail_get_run:
            raise ConnectionError("socket reset")
        scripted = self.script.pop(0)
        return scripted.model_copy(update={"run_id": run_id, "thread_id": thread_id})

    async def submit_tool_outputs(self, thread_id, run_id, outputs):
        if self.fail_submit:
            raise ConnectionError("socket reset")
        self.submitted.append(list(outputs))
        return Run(run_id=run_id, thread_id=thread_id, status=RunStatus.QUEUED)

    async def cancel_run(self, thread_id, run_id):
        self.cancelled.append(run_id)

    async def list_messages(self, thread_id, run_id):
        return list(self.replies)


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class _EchoHandler(ToolHandler):
    name = "echo"

    async def handle(self, args: ToolArguments) -> ToolResult:
        return ToolResult.ok(data=args.raw())


class _BoomHandler(ToolHandler):
    name = "boom"

    async def handle(self, args: ToolArguments) -> ToolResult:
        raise RuntimeError("boom")


class _WhoAmIHandler(ToolHandler):
    name = "whoami"

    async def handle(self, args: ToolArguments) -> ToolResult:
        user = current_user()
        return ToolResult.ok(data={"staffId": user.staff_id, "role": user.role})


def _make_orchestrator(transport, max_retries=5, retry_jitter=0.0):
    """Create an orchestrator over the fake transport. Returns (orchestrator, sleep)."""
    sleep = RecordingSleep()
    registry = ToolRegistry([_EchoHandler(), _BoomHandler(), _WhoAmIHandler()])
    policy = RetryPolicy(
        poll_base_delay=0.5,
        poll_max_delay=4.0,
        retry_max_delay=30.0,
        retry_jitter=retry_jitter,
        max_retries=max_retries,
    )
    orchestrator = RunOrchestrator(
        transport,
        registry,
        InMemoryConversationStore(),
        policy=policy,
        sleep=sleep,
        rng=random.Random(0),
    )
    return orchestrator, sleep


# ============================================================================
# Turns
# ============================================================================


class TestSend:
    """Tests for RunOrchestrator.send."""

    def test_completed_run_returns_reply(self):
        transport = FakeTransport([_run(RunStatus.COMPLETED)])
        orchestrator, _ = _make_orchestrator(transport)

        reply = asyncio.run(orchestrator.send(1, "What are my shifts?"))

        assert reply == "Here is your schedule."
        assert transport.posted == [("thread_1", "What are my shifts?")]
        assert transport.runs_created == 1

    def test_poll_delay_doubles_and_caps(self):
        transport = FakeTransport(
            [
                _run(RunStatus.QUEUED),
                _run(RunStatus.IN_PROGRESS),
                _run(RunStatus.IN_PROGRESS),
                _run(RunStatus.IN_PROGRESS),
                _run(RunStatus.COMPLETED),
            ]
        )
        orchestrator, sleep = _make_orchestrator(transport)

        asyncio.run(orchestrator.send(1, "hi"))

        assert sleep.delays == [0.5, 1.0, 2.0, 4.0, 4.0]

    def test_session_reused_across_turns(self):
        transport = FakeTransport([_run(RunStatus.COMPLETED), _run(RunStatus.COMPLETED)])
        orchestrator, _ = _make_orchestrator(transport)

        asyncio.run(orchestrator.send(1, "first"))
        asyncio.run(orchestrator.send(1, "second"))

        assert transport.threads_created == 1
        assert [thread for thread, _ in transport.posted] == ["thread_1", "thread_1"]

    def test_rate_limit_retries_recreate_run_only(self):
        """k rate-limit failures mean k+1 runs but a single posted message."""
        k = 3
        transport = FakeTransport([_rate_limited()] * k + [_run(RunStatus.COMPLETED)])
        orchestrator, _ = _make_orchestrator(transport)

        reply = asyncio.run(orchestrator.send(1, "Who is free tomorrow?"))

        assert reply == "Here is your schedule."
        assert transport.runs_created == k + 1
        assert len(transport.posted) == 1
        assert transport.cancelled == ["run_1", "run_2", "run_3"]

    def test_rate_limit_delays_grow_linearly(self):
        transport = FakeTransport([_rate_limited()] * 2 + [_run(RunStatus.COMPLETED)])
        orchestrator, sleep = _make_orchestrator(transport)

        asyncio.run(orchestrator.send(1, "hi"))

        # poll, retry 1, poll, retry 2, poll
        assert sleep.delays == [0.5, 0.5, 0.5, 1.0, 0.5]

    def test_rate_limit_exhaustion(self):
        transport = FakeTransport([_rate_limited()] * 3)
        orchestrator, _ = _make_orchestrator(transport, max_retries=2)

        with pytest.raises(RateLimitExhaustedError):
            asyncio.run(orchestrator.send(1, "hi"))

        assert transport.runs_created == 3
        assert len(transport.posted) == 1

    def test_non_rate_limit_failure(self):
        transport = FakeTransport([_run(RunStatus.FAILED, error_code="server_error")])
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(RunFailedError) as exc_info:
            asyncio.run(orchestrator.send(1, "hi"))

        assert exc_info.value.code == "server_error"
        assert transport.runs_created == 1

    def test_cancelled_run_fails_turn(self):
        transport = FakeTransport([_run(RunStatus.CANCELLED)])
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(RunFailedError):
            asyncio.run(orchestrator.send(1, "hi"))

    def test_completed_without_assistant_text(self):
        transport = FakeTransport(
            [_run(RunStatus.COMPLETED)],
            replies=[ThreadMessage(role="user", text="hi"), ThreadMessage(role="assistant", text="  ")],
        )
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(NoReplyError):
            asyncio.run(orchestrator.send(1, "hi"))

    def test_remote_error_while_polling_fails_turn(self):
        """A raising transport call ends the turn as RunFailedError and cancels the open run."""
        transport = FakeTransport([])
        transport.fail_get_run = True
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(RunFailedError) as exc_info:
            asyncio.run(orchestrator.send(1, "hi"))

        assert exc_info.value.code == TRANSPORT_ERROR_CODE
        assert exc_info.value.run_id == "run_1"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert transport.cancelled == ["run_1"]
        assert current_user() == ANONYMOUS

    def test_remote_error_before_run_exists(self):
        class _BrokenPostTransport(FakeTransport):
            async def post_message(self, thread_id, text):
                raise ConnectionError("socket reset")

        transport = _BrokenPostTransport([])
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(RunFailedError) as exc_info:
            asyncio.run(orchestrator.send(1, "hi"))

        assert exc_info.value.code == TRANSPORT_ERROR_CODE
        assert transport.runs_created == 0
        assert transport.cancelled == []

    def test_unknown_remote_status_fails_turn(self):
        transport = FakeTransport([_run(RunStatus.from_remote("some_new_status"))])
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(RunFailedError):
            asyncio.run(orchestrator.send(1, "hi"))

        assert transport.cancelled == ["run_1"]


# ============================================================================
# Tool calls
# ============================================================================


class TestToolCalls:
    """Tests for the RequiresAction branch of the run loop."""

    def test_one_batch_covers_handled_calls(self):
        """A throwing handler still yields its envelope in the single batch."""
        calls = [
            ToolCall(call_id="c1", tool_name="echo", arguments_json='{"x": 1}'),
            ToolCall(call_id="c2", tool_name="boom"),
            ToolCall(call_id="c3", tool_name="unknownTool"),
            ToolCall(call_id="c4", tool_name="echo", arguments_json="{not json"),
        ]
        transport = FakeTransport(
            [_run(RunStatus.REQUIRES_ACTION, tool_calls=calls), _run(RunStatus.COMPLETED)]
        )
        orchestrator, _ = _make_orchestrator(transport)

        asyncio.run(orchestrator.send(1, "hi"))

        assert len(transport.submitted) == 1
        (batch,) = transport.submitted
        assert [output.call_id for output in batch] == ["c1", "c2"]
        assert json.loads(batch[0].output) == {"success": True, "data": {"x": 1}}
        assert json.loads(batch[1].output)["success"] is False

    def test_no_submit_when_every_call_dropped(self):
        calls = [ToolCall(call_id="c1", tool_name="unknownTool")]
        transport = FakeTransport(
            [_run(RunStatus.REQUIRES_ACTION, tool_calls=calls), _run(RunStatus.COMPLETED)]
        )
        orchestrator, sleep = _make_orchestrator(transport)

        reply = asyncio.run(orchestrator.send(1, "hi"))

        assert transport.submitted == []
        assert reply == "Here is your schedule."
        # no progress was made, so the next poll backs off
        assert sleep.delays == [0.5, 1.0]

    def test_submit_error_cancels_run(self):
        calls = [ToolCall(call_id="c1", tool_name="echo")]
        transport = FakeTransport([_run(RunStatus.REQUIRES_ACTION, tool_calls=calls)])
        transport.fail_submit = True
        orchestrator, _ = _make_orchestrator(transport)

        with pytest.raises(RunFailedError) as exc_info:
            asyncio.run(orchestrator.send(1, "hi"))

        assert exc_info.value.code == TRANSPORT_ERROR_CODE
        assert transport.cancelled == ["run_1"]

    def test_poll_delay_resets_after_tool_outputs(self):
        calls = [ToolCall(call_id="c1", tool_name="echo")]
        transport = FakeTransport(
            [
                _run(RunStatus.IN_PROGRESS),
                _run(RunStatus.REQUIRES_ACTION, tool_calls=calls),
                _run(RunStatus.COMPLETED),
            ]
        )
        orchestrator, sleep = _make_orchestrator(transport)

        asyncio.run(orchestrator.send(1, "hi"))

        assert sleep.delays == [0.5, 1.0, 0.5]

    def test_handlers_see_caller_identity(self):
        calls = [ToolCall(call_id="c1", tool_name="whoami")]
        transport = FakeTransport(
            [_run(RunStatus.REQUIRES_ACTION, tool_calls=calls), _run(RunStatus.COMPLETED)]
        )
        orchestrator, _ = _make_orchestrator(transport)

        asyncio.run(orchestrator.send(5, "hi", role="Employee"))

        payload = json.loads(transport.submitted[0][0].output)
        assert payload["data"] == {"staffId": 5, "role": "Employee"}
        assert current_user() == ANONYMOUS


# ============================================================================
# Sessions
# ============================================================================


class TestSessions:
    """Tests for reset and end_session."""

    def test_end_session_deletes_thread(self):
        transport = FakeTransport([_run(RunStatus.COMPLETED)])
        orchestrator, _ = _make_orchestrator(transport)
        asyncio.run(orchestrator.send(1, "hi"))

        asyncio.run(orchestrator.end_session(1))

        assert transport.deleted_threads == ["thread_1"]

    def test_reset_starts_new_thread(self):
        transport = FakeTransport([_run(RunStatus.COMPLETED)])
        orchestrator, _ = _make_orchestrator(transport)
        asyncio.run(orchestrator.send(1, "hi"))

        new_thread = asyncio.run(orchestrator.reset(1))

        assert new_thread == "thread_2"
        assert transport.deleted_threads == ["thread_1"]

    def test_end_session_survives_remote_delete_failure(self):
        transport = FakeTransport([_run(RunStatus.COMPLETED), _run(RunStatus.COMPLETED)])
        transport.fail_delete = True
        orchestrator, _ = _make_orchestrator(transport)
        asyncio.run(orchestrator.send(1, "hi"))

        asyncio.run(orchestrator.end_session(1))
        asyncio.run(orchestrator.send(1, "again"))

        assert transport.threads_created == 2

    def test_end_session_without_thread_is_noop(self):
        transport = FakeTransport([])
        orchestrator, _ = _make_orchestrator(transport)

        asyncio.run(orchestrator.end_session(42))

        assert transport.deleted_threads == []


# ============================================================================
# Backoff
# ============================================================================


class TestBackoffState:
    """Tests for BackoffState."""

    def test_retry_delay_capped_plus_jitter(self):
        policy = RetryPolicy(poll_base_delay=10.0, retry_max_delay=25.0, retry_jitter=1.0)
        backoff = BackoffState(policy, rng=random.Random(1))

        first = backoff.next_retry_delay()
        second = backoff.next_retry_delay()
        third = backoff.next_retry_delay()

        assert 10.0 <= first <= 11.0
        assert 20.0 <= second <= 21.0
        assert 25.0 <= third <= 26.0

    def test_exhaustion_after_max_retries(self):
        backoff = BackoffState(RetryPolicy(max_retries=2))
        backoff.next_retry_delay()
        backoff.next_retry_delay()

        with pytest.raises(RateLimitExhaustedError) as exc_info:
            backoff.next_retry_delay(run_id="run_9")

        assert exc_info.value.attempts == 3
        assert exc_info.value.run_id == "run_9"

    def test_grow_and_reset(self):
        backoff = BackoffState(RetryPolicy(poll_base_delay=1.0, poll_max_delay=3.0))
        backoff.grow_poll()
        backoff.grow_poll()

        assert backoff.poll_delay == 3.0

        backoff.reset_poll()
        assert backoff.poll_delay == 1.0


class TestRunStatus:
    """Tests for RunStatus.from_remote and RunError.is_rate_limit."""

    @pytest.mark.parametrize(
        "remote,expected",
        [
            ("queued", RunStatus.QUEUED),
            ("in_progress", RunStatus.IN_PROGRESS),
            ("requires_action", RunStatus.REQUIRES_ACTION),
            ("cancelling", RunStatus.CANCELLED),
            ("expired", RunStatus.FAILED),
            ("incomplete", RunStatus.FAILED),
            ("some_new_status", RunStatus.FAILED),
        ],
    )
    def test_from_remote(self, remote, expected):
        assert RunStatus.from_remote(remote) == expected

    def test_rate_limit_detection(self):
        assert RunError(code="rate_limit_exceeded").is_rate_limit
        assert RunError(code="RATE_LIMIT_EXCEEDED").is_rate_limit
        assert not RunError(code="server_error").is_rate_limit
        assert not RunError().is_rate_limit
