"""
Scheduling agent package: a chat assistant for hospital shift scheduling.

This package contains:
- shared/: Common infrastructure (LLM client, logging, contracts, schemas)
- data/: Repositories, lookup cache and demo seed data
- services/: Leave, shift, swap, staff and department business rules
- resolution/: Entity, staff-reference and date resolution
- availability/: Staff availability search and fatigue rules
- tools/: Tool handlers and the registry the assistant calls into
- orchestrator/: Remote run loop, sessions, retry and HTTP endpoints
"""

from scheduling_agent.runtime import AgentRuntime, create_runtime

__all__ = ["AgentRuntime", "create_runtime"]
