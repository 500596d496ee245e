"""Invitation API routes: issue, inspect and revoke signup invitations."""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from portcullis.application.services import invitation_service
from portcullis.application.services.token_service import Principal
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.invitation import InvitationCheck, InvitationCreate, InvitationRead
from portcullis.interfaces.api.deps import require_admin, require_super_admin
from portcullis.interfaces.deps import get_invitation_repository, get_role_repository, get_user_repository

router = APIRouter(prefix="/api/invitations", tags=["Invitations"])


@router.get("/check", response_model=InvitationCheck)
async def check_invitation(
    email: str = Query(min_length=3, max_length=255),
    repo: InvitationRepository = Depends(get_invitation_repository),
):
    """Public: tells an unauthenticated caller whether an email has been invited."""
    return await invitation_service.check_invitation(repo, email)


@router.post("", response_model=InvitationRead, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    body: InvitationCreate,
    principal: Principal = Depends(require_super_admin),
    repo: InvitationRepository = Depends(get_invitation_repository),
    role_repo: RoleRepository = Depends(get_role_repository),
    user_repo: UserRepository = Depends(get_user_repository),
):
    invitation = await invitation_service.create_invitation(repo, role_repo, user_repo, body, principal.user_id)
    return InvitationRead.from_invitation(invitation)


@router.get("", response_model=List[InvitationRead])
async def list_invitations(
    skip: int = 0,
    limit: int = 100,
    principal: Principal = Depends(require_admin),
    repo: InvitationRepository = Depends(get_invitation_repository),
):
    invitations = await invitation_service.list_invitations(repo, skip=skip, limit=limit)
    return [InvitationRead.from_invitation(invitation) for invitation in invitations]


@router.get("/{invitation_id}", response_model=InvitationRead)
async def get_invitation(
    invitation_id: int,
    principal: Principal = Depends(require_admin),
    repo: InvitationRepository = Depends(get_invitation_repository),
):
    invitation = await invitation_service.get_invitation(repo, invitation_id)
    return InvitationRead.from_invitation(invitation)


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invitation(
    invitation_id: int,
    principal: Principal = Depends(require_super_admin),
    repo: InvitationRepository = Depends(get_invitation_repository),
):
    await invitation_service.delete_invitation(repo, invitation_id)
