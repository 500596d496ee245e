"""Role API routes: roles, hierarchy and privilege assignment. Super Admin only."""

from typing import List

from fastapi import APIRouter, Depends, status

from portcullis.application.services import role_service
from portcullis.core.exceptions import EntityNotFoundException
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import PrivilegeRepository, RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.auth import MessageResponse
from portcullis.domain.schemas.role import (
    AssignPrivilegesRequest,
    PrivilegeRead,
    RoleCreate,
    RoleHierarchyRequest,
    RoleRead,
    RoleUpdate,
)
from portcullis.interfaces.api.deps import require_super_admin
from portcullis.interfaces.deps import (
    get_invitation_repository,
    get_privilege_repository,
    get_role_repository,
    get_user_repository,
)

router = APIRouter(prefix="/api/roles", tags=["Roles"], dependencies=[Depends(require_super_admin)])


@router.get("", response_model=List[RoleRead])
async def list_roles(skip: int = 0, limit: int = 100, repo: RoleRepository = Depends(get_role_repository)):
    return await role_service.list_roles(repo, skip=skip, limit=limit)


@router.post("/hierarchy", response_model=RoleRead)
async def set_hierarchy(body: RoleHierarchyRequest, repo: RoleRepository = Depends(get_role_repository)):
    return await role_service.set_hierarchy(repo, body.role_id, body.parent_role_id, body.hierarchy_level)


@router.get("/{role_id}", response_model=RoleRead)
async def get_role(role_id: int, repo: RoleRepository = Depends(get_role_repository)):
    return await role_service.get_role(repo, role_id)


@router.post("", response_model=RoleRead, status_code=status.HTTP_201_CREATED)
async def create_role(body: RoleCreate, repo: RoleRepository = Depends(get_role_repository)):
    return await role_service.create_role(repo, body)


@router.put("/{role_id}", response_model=RoleRead)
async def update_role(role_id: int, body: RoleUpdate, repo: RoleRepository = Depends(get_role_repository)):
    return await role_service.update_role(repo, role_id, body)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    repo: RoleRepository = Depends(get_role_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    invitation_repo: InvitationRepository = Depends(get_invitation_repository),
):
    await role_service.delete_role(repo, user_repo, invitation_repo, role_id)


@router.post("/{role_id}/assign-privileges", response_model=List[PrivilegeRead])
async def assign_privileges(
    role_id: int,
    body: AssignPrivilegesRequest,
    repo: RoleRepository = Depends(get_role_repository),
    privilege_repo: PrivilegeRepository = Depends(get_privilege_repository),
):
    """Replace the role's privilege set with exactly the given ids."""
    return await role_service.assign_privileges(repo, privilege_repo, role_id, body.privilege_ids)


@router.get("/{role_id}/privileges", response_model=List[PrivilegeRead])
async def get_role_privileges(role_id: int, repo: RoleRepository = Depends(get_role_repository)):
    return await role_service.get_effective_privileges(repo, role_id)


@router.delete("/{role_id}/privileges/{privilege_id}", response_model=MessageResponse)
async def remove_role_privilege(
    role_id: int,
    privilege_id: int,
    repo: RoleRepository = Depends(get_role_repository),
):
    if not await role_service.remove_privilege(repo, role_id, privilege_id):
        raise EntityNotFoundException("Privilege is not assigned to this role")
    return MessageResponse(message="Privilege removed from role")
