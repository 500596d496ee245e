"""
Role and Privilege Repository Interfaces.
The role graph (parent links, hierarchy levels) and role-privilege assignments.
"""

from typing import Iterable, List, Optional

from portcullis.domain.models.role import Privilege, Role
from portcullis.domain.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Interface for Role-specific operations."""

    async def get_by_name(self, name: str) -> Optional[Role]:
        """Exact, case-sensitive lookup."""
        ...

    async def find_by_name_insensitive(self, name: str) -> Optional[Role]:
        ...

    async def count(self) -> int:
        ...

    async def has_children(self, role_id: int) -> bool:
        """True if any role names this one as its parent."""
        ...

    async def get_privileges(self, role_id: int) -> List[Privilege]:
        """Directly assigned privileges, ordered by id."""
        ...

    async def replace_privileges(self, role_id: int, privilege_ids: Iterable[int]) -> None:
        """Remove every assignment of the role, then insert the given set."""
        ...

    async def remove_privilege(self, role_id: int, privilege_id: int) -> bool:
        ...


class PrivilegeRepository(BaseRepository[Privilege]):
    """Interface for Privilege-specific operations."""

    async def find_by_name_insensitive(self, name: str) -> Optional[Privilege]:
        ...

    async def get_many(self, ids: Iterable[int]) -> List[Privilege]:
        ...
