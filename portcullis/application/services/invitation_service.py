"""Invitation service: the ledger gating self-service signup."""

from datetime import timedelta
from typing import List, Optional

import structlog

from portcullis.config import get_settings
from portcullis.core.exceptions import ConflictException, EntityNotFoundException
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.invitation import Invitation
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.invitation import InvitationCheck, InvitationCreate

settings = get_settings()
logger = structlog.get_logger(__name__)


async def create_invitation(
    repo: InvitationRepository,
    role_repo: RoleRepository,
    user_repo: UserRepository,
    data: InvitationCreate,
    invited_by_user_id: int,
) -> Invitation:
    """Persist an invitation expiring ``expiry_days`` from now."""
    role = await role_repo.get_by_id(data.role_id)
    if role is None:
        raise EntityNotFoundException(f"Role {data.role_id} not found")
    if await user_repo.email_exists(data.email):
        raise ConflictException("A user with this email already exists")

    now = utcnow()
    if await repo.get_valid_for_email(data.email, now):
        raise ConflictException("A pending invitation already exists for this email")

    expiry_days = data.expiry_days or settings.INVITATION_EXPIRY_DAYS
    invitation = Invitation(
        email=data.email,
        phone_number=data.phone_number or None,
        role_id=role.id,
        invited_by_user_id=invited_by_user_id,
        is_used=False,
        expires_at=now + timedelta(days=expiry_days),
    )
    await repo.add(invitation)
    await repo.commit()
    logger.info(
        "Invitation created",
        invitation_id=invitation.id,
        role_id=role.id,
        invited_by=invited_by_user_id,
        expiry_days=expiry_days,
    )
    return await repo.get_by_id(invitation.id)


async def get_valid_invitation(repo: InvitationRepository, email: str) -> Optional[Invitation]:
    """Newest invitation for the email that is unused and not yet expired."""
    return await repo.get_valid_for_email(email, utcnow())


async def check_invitation(repo: InvitationRepository, email: str) -> InvitationCheck:
    """Report on the newest unused invitation without consuming it."""
    invitation = await repo.get_latest_unused_for_email(email)
    if invitation is None:
        return InvitationCheck(is_invited=False, is_expired=False)
    return InvitationCheck(
        is_invited=True,
        is_expired=invitation.is_expired(),
        role_name=invitation.role.name if invitation.role else None,
        expires_at=invitation.expires_at,
    )


async def mark_used(repo: InvitationRepository, invitation_id: int) -> bool:
    """True only for the call that actually consumed the invitation."""
    consumed = await repo.mark_used(invitation_id, utcnow())
    if consumed:
        await repo.commit()
        logger.info("Invitation consumed", invitation_id=invitation_id)
    return consumed


async def list_invitations(repo: InvitationRepository, skip: int = 0, limit: int = 100) -> List[Invitation]:
    return await repo.list(skip=skip, limit=limit)


async def get_invitation(repo: InvitationRepository, invitation_id: int) -> Invitation:
    invitation = await repo.get_by_id(invitation_id)
    if invitation is None:
        raise EntityNotFoundException(f"Invitation {invitation_id} not found")
    return invitation


async def delete_invitation(repo: InvitationRepository, invitation_id: int) -> None:
    invitation = await get_invitation(repo, invitation_id)
    await repo.delete(invitation)
    await repo.commit()
    logger.info("Invitation deleted", invitation_id=invitation_id)
