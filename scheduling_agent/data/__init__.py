"""Repositories, the lookup cache and demo seed data."""

from scheduling_agent.data.lookup_cache import LookupCache, LookupSnapshot, load_snapshot
from scheduling_agent.data.repository import InMemoryRepository, Repository
from scheduling_agent.data.store import DataStore, empty_store

__all__ = [
    "DataStore",
    "InMemoryRepository",
    "LookupCache",
    "LookupSnapshot",
    "Repository",
    "empty_store",
    "load_snapshot",
]
