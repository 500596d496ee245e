"""Auth service: credential checks, token responses and self-service account changes."""

from typing import Optional

import structlog

from portcullis.application.services.token_service import create_access_token
from portcullis.core.exceptions import ConflictException, UnauthorizedException, ValidationFailedException
from portcullis.core.security import hash_password, verify_password
from portcullis.domain.models.user import User
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.auth import AuthResponse, ProfileUpdate
from portcullis.domain.schemas.user import UserRead

logger = structlog.get_logger(__name__)


async def authenticate(repo: UserRepository, identifier: str, password: str) -> Optional[User]:
    """Active user whose email or phone matches and whose password verifies."""
    user = await repo.get_by_email_or_phone(identifier, active_only=True)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def build_auth_response(user: User) -> AuthResponse:
    token, expiration = create_access_token(user)
    return AuthResponse(token=token, expiration=expiration, user=UserRead.model_validate(user))


async def login(repo: UserRepository, identifier: str, password: str) -> AuthResponse:
    user = await authenticate(repo, identifier, password)
    if user is None:
        logger.info("Login failed", identifier=identifier)
        raise UnauthorizedException("Invalid credentials")
    logger.info("Login succeeded", user_id=user.id)
    return build_auth_response(user)


async def get_active_user(repo: UserRepository, user_id: int) -> User:
    user = await repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise UnauthorizedException("User not found or inactive")
    return user


async def refresh(repo: UserRepository, user_id: int) -> AuthResponse:
    """Re-issue a token from the current user record, picking up role changes."""
    user = await get_active_user(repo, user_id)
    return build_auth_response(user)


async def change_password(repo: UserRepository, user_id: int, current_password: str, new_password: str) -> bool:
    user = await repo.get_by_id(user_id)
    if user is None or not verify_password(current_password, user.password_hash):
        return False
    user.password_hash = hash_password(new_password)
    await repo.save(user)
    await repo.commit()
    logger.info("Password changed", user_id=user_id)
    return True


async def reset_password(repo: UserRepository, email: str, new_password: str) -> bool:
    """Rehash and store; the caller verifies the reset code first."""
    user = await repo.get_by_email(email)
    if user is None:
        return False
    user.password_hash = hash_password(new_password)
    await repo.save(user)
    await repo.commit()
    logger.info("Password reset", user_id=user.id)
    return True


async def update_profile(repo: UserRepository, user: User, data: ProfileUpdate) -> User:
    updates = data.model_dump(exclude_unset=True)
    phone_number = updates.get("phone_number")
    if phone_number and await repo.phone_exists(phone_number, exclude_id=user.id):
        raise ConflictException("Phone number is already in use")
    if "phone_number" in updates and not phone_number and not user.email:
        raise ValidationFailedException("An account needs an email or a phone number")

    for field, value in updates.items():
        if field in ("first_name", "last_name"):
            if value is None:
                continue
        else:
            # empty strings clear optional fields
            value = value or None
        setattr(user, field, value)
    await repo.save(user)
    await repo.commit()
    return user
