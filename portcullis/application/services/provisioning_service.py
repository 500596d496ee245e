"""Provisioning service: invitation-gated signup and external-identity sign-in.

The very first account in an empty deployment is granted the top-level role
through an in-memory ``BootstrapInvitation``. Every later account needs a
persisted, unused, unexpired ``Invitation`` for its email. Creating the user
and consuming the invitation commit together; a conditional UPDATE on the
invitation and a partial unique index on ``users.is_super_admin`` make sure
concurrent signups cannot both win.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

import structlog
from sqlalchemy.exc import IntegrityError

from portcullis.application.services.auth_service import authenticate, build_auth_response
from portcullis.config import get_settings
from portcullis.core.exceptions import (
    ConflictException,
    InternalInconsistencyException,
    NotInvitedException,
    UnauthorizedException,
    ValidationFailedException,
)
from portcullis.core.security import generate_unusable_password, hash_password
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.invitation import BootstrapInvitation, Invitation, SignupInvitation
from portcullis.domain.models.role import Role
from portcullis.domain.models.user import User
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.auth import AuthResponse, ExternalIdentity, SignupRequest

settings = get_settings()
logger = structlog.get_logger(__name__)


async def _bootstrap_invitation(
    role_repo: RoleRepository,
    now: datetime,
    email: Optional[str],
    phone_number: Optional[str],
) -> Tuple[BootstrapInvitation, Role]:
    role = await role_repo.get_by_name(settings.SUPER_ADMIN_ROLE_NAME)
    if role is None:
        logger.error("Top-level role is missing", role_name=settings.SUPER_ADMIN_ROLE_NAME)
        raise InternalInconsistencyException("Signup failed")
    invitation = BootstrapInvitation(
        role_id=role.id,
        expires_at=now + timedelta(days=settings.BOOTSTRAP_INVITATION_EXPIRY_DAYS),
        email=email,
        phone_number=phone_number,
    )
    return invitation, role


async def _resolve_invitation(
    user_repo: UserRepository,
    role_repo: RoleRepository,
    invitation_repo: InvitationRepository,
    email: Optional[str],
    phone_number: Optional[str],
    now: datetime,
) -> Tuple[SignupInvitation, Role, bool]:
    """Pick the invitation that authorizes this signup.

    Returns the invitation, the role it grants and whether this is the
    bootstrap account.
    """
    if await user_repo.count() == 0:
        invitation, role = await _bootstrap_invitation(role_repo, now, email, phone_number)
        return invitation, role, True

    if not email:
        raise ValidationFailedException("Email is required to sign up")

    invitation = await invitation_repo.get_valid_for_email(email, now)
    if invitation is None:
        latest = await invitation_repo.get_latest_unused_for_email(email)
        reason = "expired" if latest is not None else "absent_or_used"
        logger.info("Signup rejected", email=email, reason=reason)
        raise NotInvitedException(reason)

    role = await role_repo.get_by_id(invitation.role_id)
    if role is None:
        logger.error("Invitation references a missing role", invitation_id=invitation.id)
        raise InternalInconsistencyException("Signup failed")
    return invitation, role, False


async def _persist(
    user_repo: UserRepository,
    invitation_repo: InvitationRepository,
    user: User,
    invitation: SignupInvitation,
    now: datetime,
) -> None:
    """Insert the user and consume a persisted invitation as one transaction."""
    # rollback expires ORM state, keep what the logs need
    email, invitation_id = user.email, invitation.id
    try:
        await user_repo.add(user)
        consumed = True
        if isinstance(invitation, Invitation):
            consumed = await invitation_repo.mark_used(invitation_id, now)
    except IntegrityError as e:
        await user_repo.rollback()
        logger.warning("Signup lost a race on insert", email=email, error=str(e.orig))
        raise NotInvitedException("race_lost")

    if not consumed:
        await user_repo.rollback()
        logger.warning("Signup lost a race on the invitation", email=email, invitation_id=invitation_id)
        raise NotInvitedException("race_lost")

    await user_repo.commit()
    if isinstance(invitation, Invitation):
        logger.info("Invitation consumed", invitation_id=invitation_id, user_id=user.id)


async def signup(
    user_repo: UserRepository,
    role_repo: RoleRepository,
    invitation_repo: InvitationRepository,
    request: SignupRequest,
) -> AuthResponse:
    email = request.email or None
    phone_number = request.phone_number or None
    if not email and not phone_number:
        raise ValidationFailedException("Either email or phone number is required")
    if email and await user_repo.email_exists(email):
        raise ConflictException("User with this email already exists")
    if phone_number and await user_repo.phone_exists(phone_number):
        raise ConflictException("User with this phone number already exists")

    now = utcnow()
    invitation, role, is_first_user = await _resolve_invitation(
        user_repo, role_repo, invitation_repo, email, phone_number, now
    )

    user = User(
        first_name=request.first_name,
        last_name=request.last_name,
        email=email,
        phone_number=phone_number,
        password_hash=hash_password(request.password),
        is_super_admin=is_first_user,
        is_active=True,
        role_id=role.id,
    )
    user.role = role
    await _persist(user_repo, invitation_repo, user, invitation, now)

    authenticated = await authenticate(user_repo, email or phone_number, request.password)
    if authenticated is None:
        logger.error("Re-authentication after signup failed", user_id=user.id)
        raise InternalInconsistencyException("Signup failed")

    logger.info(
        "Signup succeeded",
        user_id=authenticated.id,
        role=role.name,
        bootstrap=is_first_user,
    )
    return build_auth_response(authenticated)


def _names_from_identity(identity: ExternalIdentity) -> Tuple[str, str]:
    first_name = (identity.first_name or "").strip()
    last_name = (identity.last_name or "").strip()
    if first_name or last_name:
        return first_name, last_name
    display_name = (identity.display_name or "").strip()
    if display_name:
        first, _, rest = display_name.partition(" ")
        return first, rest.strip()
    return identity.email.split("@", 1)[0], ""


async def external_signin(
    user_repo: UserRepository,
    role_repo: RoleRepository,
    invitation_repo: InvitationRepository,
    identity: ExternalIdentity,
) -> AuthResponse:
    """Sign in with an identity a provider has already verified.

    Known users go straight to token issuance. New users pass the same
    invitation gate as a password signup and get a random local password
    that is never shown to anyone.
    """
    email = identity.email
    existing = await user_repo.get_by_email(email)
    if existing is not None:
        if not existing.is_active:
            raise UnauthorizedException("Account is inactive")
        if identity.picture_url and identity.picture_url != existing.profile_picture:
            existing.profile_picture = identity.picture_url
            await user_repo.save(existing)
            await user_repo.commit()
        logger.info("External sign-in", user_id=existing.id, provider_id=identity.provider_id)
        return build_auth_response(existing)

    now = utcnow()
    invitation, role, is_first_user = await _resolve_invitation(
        user_repo, role_repo, invitation_repo, email, None, now
    )

    first_name, last_name = _names_from_identity(identity)
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone_number=None,
        password_hash=hash_password(generate_unusable_password()),
        profile_picture=identity.picture_url,
        is_super_admin=is_first_user,
        is_active=True,
        role_id=role.id,
    )
    user.role = role
    await _persist(user_repo, invitation_repo, user, invitation, now)

    created = await user_repo.get_by_id(user.id)
    if created is None:
        logger.error("User vanished after external signup", email=email)
        raise InternalInconsistencyException("Signup failed")

    logger.info("External signup succeeded", user_id=created.id, role=role.name, bootstrap=is_first_user)
    return build_auth_response(created)
