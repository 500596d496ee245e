"""Privilege service: CRUD for atomic permission units."""

from typing import List

import structlog

from portcullis.core.exceptions import ConflictException, EntityNotFoundException
from portcullis.domain.models.role import Privilege
from portcullis.domain.repositories.role_repository import PrivilegeRepository
from portcullis.domain.schemas.role import PrivilegeCreate, PrivilegeUpdate

logger = structlog.get_logger(__name__)


async def list_privileges(repo: PrivilegeRepository, skip: int = 0, limit: int = 100) -> List[Privilege]:
    return await repo.list(skip=skip, limit=limit)


async def get_privilege(repo: PrivilegeRepository, privilege_id: int) -> Privilege:
    privilege = await repo.get_by_id(privilege_id)
    if privilege is None:
        raise EntityNotFoundException(f"Privilege {privilege_id} not found")
    return privilege


async def create_privilege(repo: PrivilegeRepository, data: PrivilegeCreate) -> Privilege:
    name = data.name.strip()
    if await repo.find_by_name_insensitive(name):
        raise ConflictException(f"Privilege '{name}' already exists")

    privilege = Privilege(name=name, description=data.description, category=data.category.strip())
    await repo.add(privilege)
    await repo.commit()
    logger.info("Privilege created", privilege_id=privilege.id, name=privilege.name)
    return privilege


async def update_privilege(repo: PrivilegeRepository, privilege_id: int, data: PrivilegeUpdate) -> Privilege:
    privilege = await get_privilege(repo, privilege_id)
    name = data.name.strip()
    existing = await repo.find_by_name_insensitive(name)
    if existing is not None and existing.id != privilege.id:
        raise ConflictException(f"Privilege '{name}' already exists")

    privilege.name = name
    privilege.description = data.description
    privilege.category = data.category.strip()
    await repo.save(privilege)
    await repo.commit()
    return privilege


async def delete_privilege(repo: PrivilegeRepository, privilege_id: int) -> None:
    """Delete a privilege; its role assignments go with it."""
    privilege = await get_privilege(repo, privilege_id)
    await repo.delete(privilege)
    await repo.commit()
    logger.info("Privilege deleted", privilege_id=privilege_id)
