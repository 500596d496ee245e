"""User API routes: administrative account management."""

from typing import List

from fastapi import APIRouter, Depends, status

from portcullis.application.services import user_service
from portcullis.application.services.token_service import Principal
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.user import (
    AssignRoleRequest,
    UpdateStatusRequest,
    UserCreate,
    UserListItem,
    UserRead,
    UserUpdate,
)
from portcullis.interfaces.api.deps import require_admin, require_super_admin
from portcullis.interfaces.deps import get_invitation_repository, get_role_repository, get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[UserListItem])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    principal: Principal = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    return await user_service.list_users(repo, skip=skip, limit=limit)


@router.get("/by-email/{email}", response_model=UserRead)
async def get_user_by_email(
    email: str,
    principal: Principal = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    return await user_service.get_user_by_email(repo, email)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    principal: Principal = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    return await user_service.get_user(repo, user_id)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    principal: Principal = Depends(require_super_admin),
    repo: UserRepository = Depends(get_user_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
):
    return await user_service.create_user(repo, role_repo, body)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    body: UserUpdate,
    principal: Principal = Depends(require_super_admin),
    repo: UserRepository = Depends(get_user_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
):
    return await user_service.update_user(repo, role_repo, user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    principal: Principal = Depends(require_super_admin),
    repo: UserRepository = Depends(get_user_repository),
    invitation_repo: InvitationRepository = Depends(get_invitation_repository),
):
    await user_service.delete_user(repo, invitation_repo, user_id)


@router.post("/{user_id}/update-status", response_model=UserRead)
async def update_status(
    user_id: int,
    body: UpdateStatusRequest,
    principal: Principal = Depends(require_super_admin),
    repo: UserRepository = Depends(get_user_repository),
):
    return await user_service.set_status(repo, user_id, body.is_active)


@router.post("/{user_id}/assign-role", response_model=UserRead)
async def assign_role(
    user_id: int,
    body: AssignRoleRequest,
    principal: Principal = Depends(require_super_admin),
    repo: UserRepository = Depends(get_user_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
):
    return await user_service.assign_role(repo, role_repo, user_id, body.role_id)


@router.delete("/{user_id}/remove-role", response_model=UserRead)
async def remove_role(
    user_id: int,
    principal: Principal = Depends(require_super_admin),
    repo: UserRepository = Depends(get_user_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
):
    return await user_service.remove_role(repo, role_repo, user_id)
