"""
Async repositories for the scheduling data.

Services only see the Repository protocol. InMemoryRepository backs the
demo app and the tests; a database-backed implementation would satisfy the
same protocol.
"""

from typing import Dict, Generic, List, Optional, Protocol, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class Repository(Protocol[T]):
    """Minimal async CRUD contract used by the services."""

    async def get_all(self) -> List[T]: ...

    async def get_by_id(self, entity_id: int) -> Optional[T]: ...

    async def add(self, entity: T) -> T: ...

    async def update(self, entity: T) -> T: ...

    async def delete(self, entity_id: int) -> bool: ...

    async def save(self) -> None: ...


class InMemoryRepository(Generic[T]):
    """
    Dict-backed repository keyed on one integer id field.

    Entities are copied on the way in and out so callers never hold a
    reference into the store. ``add`` assigns the next id when the entity's
    id is 0.
    """

    def __init__(self, id_field: str, items: Optional[List[T]] = None):
        self._id_field = id_field
        self._items: Dict[int, T] = {}
        self._next_id = 1
        for item in items or []:
            self._put(item)

    def _put(self, entity: T) -> T:
        entity_id = getattr(entity, self._id_field)
        if not entity_id:
            entity_id = self._next_id
            entity = entity.model_copy(update={self._id_field: entity_id})
        self._items[entity_id] = entity
        self._next_id = max(self._next_id, entity_id + 1)
        return entity

    async def get_all(self) -> List[T]:
        return [item.model_copy() for item in self._items.values()]

    async def get_by_id(self, entity_id: int) -> Optional[T]:
        item = self._items.get(entity_id)
        return item.model_copy() if item is not None else None

    async def add(self, entity: T) -> T:
        stored = self._put(entity.model_copy())
        return stored.model_copy()

    async def update(self, entity: T) -> T:
        entity_id = getattr(entity, self._id_field)
        if entity_id not in self._items:
            raise KeyError(f"{type(entity).__name__} {entity_id} does not exist")
        self._items[entity_id] = entity.model_copy()
        return entity

    async def delete(self, entity_id: int) -> bool:
        return self._items.pop(entity_id, None) is not None

    async def save(self) -> None:
        # Writes are applied immediately
        return None

    def __len__(self) -> int:
        return len(self._items)
