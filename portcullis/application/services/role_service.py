"""Role service: the role graph and each role's privilege set.

Effective privileges are the role's direct assignments only. ``parent_role_id``
and ``hierarchy_level`` describe the organisation chart; they grant nothing.
"""

from typing import Iterable, List, Optional

import structlog

from portcullis.core.exceptions import ConflictException, EntityNotFoundException, ValidationFailedException
from portcullis.domain.models.role import Privilege, Role
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import PrivilegeRepository, RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.role import RoleCreate, RoleUpdate

logger = structlog.get_logger(__name__)


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationFailedException("Role name must not be blank")
    return cleaned


async def list_roles(repo: RoleRepository, skip: int = 0, limit: int = 100) -> List[Role]:
    return await repo.list(skip=skip, limit=limit)


async def get_role(repo: RoleRepository, role_id: int) -> Role:
    role = await repo.get_by_id(role_id)
    if role is None:
        raise EntityNotFoundException(f"Role {role_id} not found")
    return role


async def create_role(repo: RoleRepository, data: RoleCreate) -> Role:
    """Create a top-level role; names are unique regardless of case."""
    name = _clean_name(data.name)
    if await repo.find_by_name_insensitive(name):
        raise ConflictException(f"Role '{name}' already exists")

    role = Role(name=name, description=data.description, parent_role_id=None, hierarchy_level=0)
    await repo.add(role)
    await repo.commit()
    logger.info("Role created", role_id=role.id, name=role.name)
    return role


async def update_role(repo: RoleRepository, role_id: int, data: RoleUpdate) -> Role:
    role = await get_role(repo, role_id)
    name = _clean_name(data.name)
    existing = await repo.find_by_name_insensitive(name)
    if existing is not None and existing.id != role.id:
        raise ConflictException(f"Role '{name}' already exists")

    role.name = name
    role.description = data.description
    await repo.save(role)
    await repo.commit()
    logger.info("Role updated", role_id=role.id, name=role.name)
    return role


async def delete_role(
    repo: RoleRepository,
    user_repo: UserRepository,
    invitation_repo: InvitationRepository,
    role_id: int,
) -> None:
    """Remove a role nothing points at: no users, no sub-roles, no invitations."""
    role = await get_role(repo, role_id)
    if await user_repo.any_with_role(role_id):
        raise ConflictException("Cannot delete role while users are assigned to it")
    if await repo.has_children(role_id):
        raise ConflictException("Cannot delete role while other roles name it as parent")
    if await invitation_repo.any_with_role(role_id):
        raise ConflictException("Cannot delete role while invitations reference it")

    await repo.delete(role)
    await repo.commit()
    logger.info("Role deleted", role_id=role_id, name=role.name)


async def set_hierarchy(
    repo: RoleRepository,
    role_id: int,
    parent_role_id: Optional[int],
    hierarchy_level: int,
) -> Role:
    """Overwrite a role's parent and level, refusing any link that closes a cycle."""
    role = await get_role(repo, role_id)

    if parent_role_id is not None:
        if parent_role_id == role_id:
            raise ConflictException("A role cannot be its own parent")
        parent = await repo.get_by_id(parent_role_id)
        if parent is None:
            raise EntityNotFoundException(f"Parent role {parent_role_id} not found")
        await _ensure_not_ancestor(repo, role_id, parent)

    role.parent_role_id = parent_role_id
    role.hierarchy_level = hierarchy_level
    await repo.save(role)
    await repo.commit()
    logger.info("Role hierarchy set", role_id=role_id, parent_role_id=parent_role_id, level=hierarchy_level)
    return role


async def _ensure_not_ancestor(repo: RoleRepository, role_id: int, parent: Role) -> None:
    # walk up from the proposed parent; reaching role_id means a cycle
    remaining = await repo.count()
    current: Optional[Role] = parent
    while current is not None and remaining > 0:
        if current.id == role_id:
            raise ConflictException("Role hierarchy would contain a cycle")
        if current.parent_role_id is None:
            return
        current = await repo.get_by_id(current.parent_role_id)
        remaining -= 1
    if current is not None:
        # more hops than roles: the stored chain already loops
        raise ConflictException("Role hierarchy would contain a cycle")


async def assign_privileges(
    repo: RoleRepository,
    privilege_repo: PrivilegeRepository,
    role_id: int,
    privilege_ids: Iterable[int],
) -> List[Privilege]:
    """Replace the role's whole privilege set in a single transaction."""
    await get_role(repo, role_id)
    wanted = sorted(set(privilege_ids))
    found = await privilege_repo.get_many(wanted)
    missing = sorted(set(wanted) - {p.id for p in found})
    if missing:
        raise EntityNotFoundException("Unknown privilege ids", details={"privilege_ids": missing})

    try:
        await repo.replace_privileges(role_id, wanted)
        await repo.commit()
    except Exception:
        await repo.rollback()
        raise
    logger.info("Role privileges replaced", role_id=role_id, privilege_ids=wanted)
    return await repo.get_privileges(role_id)


async def remove_privilege(repo: RoleRepository, role_id: int, privilege_id: int) -> bool:
    await get_role(repo, role_id)
    removed = await repo.remove_privilege(role_id, privilege_id)
    if removed:
        await repo.commit()
        logger.info("Role privilege removed", role_id=role_id, privilege_id=privilege_id)
    return removed


async def get_effective_privileges(repo: RoleRepository, role_id: int) -> List[Privilege]:
    await get_role(repo, role_id)
    return await repo.get_privileges(role_id)
