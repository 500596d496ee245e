"""
Base Repository Interface.
Defines the standard contract for data access operations.

Repositories only flush; the calling service owns the transaction and
decides when to commit or roll back.
"""

from typing import List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    async def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    async def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """List entities with pagination."""
        ...

    async def add(self, db_obj: T) -> T:
        """Stamp creation timestamps and stage a new entity."""
        ...

    async def save(self, db_obj: T) -> T:
        """Stamp the update timestamp and flush pending changes."""
        ...

    async def delete(self, db_obj: T) -> None:
        """Stage the removal of an entity."""
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
