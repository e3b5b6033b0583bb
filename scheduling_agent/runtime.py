"""
Runtime assembly.

Builds the data store, the lookup cache, the tool registry, the run
orchestrator and the insights service once at startup. The HTTP layer and tests share this wiring.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from scheduling_agent.config import AgentConfig, get_config
from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.seed import build_demo_store
from scheduling_agent.data.store import DataStore
from scheduling_agent.orchestrator.run_orchestrator import RunOrchestrator
from scheduling_agent.orchestrator.sessions import InMemoryConversationStore
from scheduling_agent.orchestrator.transport import OpenAIRunTransport, RunTransport
from scheduling_agent.services.insights import AgentInsightsService
from scheduling_agent.shared.llm.client import ensure_assistant, get_cached_client
from scheduling_agent.tools import build_registry
from scheduling_agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class AgentRuntime:
    config: AgentConfig
    store: DataStore
    lookup: LookupCache
    registry: ToolRegistry
    orchestrator: RunOrchestrator
    insights: AgentInsightsService


async def create_runtime(
    config: Optional[AgentConfig] = None,
    store: Optional[DataStore] = None,
    transport: Optional[RunTransport] = None,
) -> AgentRuntime:
    """
    Assemble everything a chat turn needs.

    Args:
        config: Agent configuration (defaults to the environment)
        store: Data store (defaults to the seeded demo store)
        transport: Remote run transport. When omitted the OpenAI assistant is
            created or updated with the registered tools.

    Returns:
        The assembled runtime.
    """
    config = config or get_config()
    store = store or build_demo_store()

    lookup = LookupCache()
    await lookup.refresh(store)

    registry = build_registry(
        store, lookup, emit_unknown_tool_error=config.emit_unknown_tool_error
    )

    if transport is None:
        client = get_cached_client()
        assistant_id = await ensure_assistant(registry.tool_specs(), config, client=client)
        transport = OpenAIRunTransport(client, assistant_id)

    orchestrator = RunOrchestrator.from_config(
        config, transport, registry, InMemoryConversationStore()
    )
    logger.info(f"Runtime ready with {len(registry.names)} tools")
    return AgentRuntime(
        config=config,
        store=store,
        lookup=lookup,
        registry=registry,
        orchestrator=orchestrator,
        insights=AgentInsightsService.from_store(store, lookup),
    )
