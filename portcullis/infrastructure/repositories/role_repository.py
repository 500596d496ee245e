"""
SQLAlchemy Implementation of the Role and Privilege Repositories.
"""

from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select

from portcullis.core.timeutils import utcnow
from portcullis.domain.models.role import Privilege, Role, RolePrivilege
from portcullis.domain.repositories.role_repository import PrivilegeRepository, RoleRepository
from portcullis.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyRoleRepository(SQLAlchemyRepository[Role], RoleRepository):
    """Role repository implementation using SQLAlchemy."""

    async def get_by_name(self, name: str) -> Optional[Role]:
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalars().first()

    async def find_by_name_insensitive(self, name: str) -> Optional[Role]:
        result = await self.db.execute(
            select(Role).where(func.lower(Role.name) == name.strip().lower())
        )
        return result.scalars().first()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Role.id)))
        return result.scalar_one()

    async def has_children(self, role_id: int) -> bool:
        return await self._exists(select(Role.id).where(Role.parent_role_id == role_id))

    async def get_privileges(self, role_id: int) -> List[Privilege]:
        result = await self.db.execute(
            select(Privilege)
            .join(RolePrivilege, RolePrivilege.privilege_id == Privilege.id)
            .where(RolePrivilege.role_id == role_id)
            .order_by(Privilege.id)
        )
        return list(result.scalars().all())

    async def replace_privileges(self, role_id: int, privilege_ids: Iterable[int]) -> None:
        await self.db.execute(
            delete(RolePrivilege)
            .where(RolePrivilege.role_id == role_id)
            .execution_options(synchronize_session=False)
        )
        assigned_at = utcnow()
        self.db.add_all(
            RolePrivilege(role_id=role_id, privilege_id=privilege_id, assigned_at=assigned_at)
            for privilege_id in privilege_ids
        )
        await self.db.flush()

    async def remove_privilege(self, role_id: int, privilege_id: int) -> bool:
        result = await self.db.execute(
            delete(RolePrivilege)
            .where(RolePrivilege.role_id == role_id, RolePrivilege.privilege_id == privilege_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0


class SQLAlchemyPrivilegeRepository(SQLAlchemyRepository[Privilege], PrivilegeRepository):
    """Privilege repository implementation using SQLAlchemy."""

    async def find_by_name_insensitive(self, name: str) -> Optional[Privilege]:
        result = await self.db.execute(
            select(Privilege).where(func.lower(Privilege.name) == name.strip().lower())
        )
        return result.scalars().first()

    async def get_many(self, ids: Iterable[int]) -> List[Privilege]:
        result = await self.db.execute(
            select(Privilege).where(Privilege.id.in_(list(ids))).order_by(Privilege.id)
        )
        return list(result.scalars().all())
