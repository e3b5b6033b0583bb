"""
Conversation record store: owner id -> remote thread id.
"""

from typing import Dict, Optional, Protocol


class ConversationStore(Protocol):
    async def get_thread_id(self, owner_id: int) -> Optional[str]: ...

    async def save(self, owner_id: int, thread_id: str) -> None: ...

    async def delete(self, owner_id: int) -> None: ...


class InMemoryConversationStore:
    """Process-local store, one thread per owner."""

    def __init__(self):
        self._threads: Dict[int, str] = {}

    async def get_thread_id(self, owner_id: int) -> Optional[str]:
        return self._threads.get(owner_id)

    async def save(self, owner_id: int, thread_id: str) -> None:
        self._threads[owner_id] = thread_id

    async def delete(self, owner_id: int) -> None:
        self._threads.pop(owner_id, None)
