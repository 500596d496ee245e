"""User service: administrative account management."""

from typing import List

import structlog

from portcullis.config import get_settings
from portcullis.core.exceptions import ConflictException, EntityNotFoundException, ValidationFailedException
from portcullis.core.security import hash_password
from portcullis.domain.models.role import Role
from portcullis.domain.models.user import User
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.role_repository import RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.domain.schemas.user import UserCreate, UserUpdate

settings = get_settings()
logger = structlog.get_logger(__name__)


async def list_users(repo: UserRepository, skip: int = 0, limit: int = 100) -> List[User]:
    return await repo.list(skip=skip, limit=limit)


async def get_user(repo: UserRepository, user_id: int) -> User:
    user = await repo.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundException(f"User {user_id} not found")
    return user


async def get_user_by_email(repo: UserRepository, email: str) -> User:
    user = await repo.get_by_email(email)
    if user is None:
        raise EntityNotFoundException("User not found")
    return user


async def _get_role(role_repo: RoleRepository, role_id: int) -> Role:
    role = await role_repo.get_by_id(role_id)
    if role is None:
        raise EntityNotFoundException(f"Role {role_id} not found")
    return role


async def create_user(repo: UserRepository, role_repo: RoleRepository, data: UserCreate) -> User:
    """Create an account directly, bypassing the invitation gate."""
    if await repo.email_exists(data.email):
        raise ConflictException("User with this email already exists")
    if data.phone_number and await repo.phone_exists(data.phone_number):
        raise ConflictException("User with this phone number already exists")
    role = await _get_role(role_repo, data.role_id)

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone_number=data.phone_number or None,
        password_hash=hash_password(data.password),
        is_super_admin=False,
        is_active=True,
        role_id=role.id,
    )
    user.role = role
    await repo.add(user)
    await repo.commit()
    logger.info("User created by administrator", user_id=user.id, role=role.name)
    return user


async def update_user(repo: UserRepository, role_repo: RoleRepository, user_id: int, data: UserUpdate) -> User:
    user = await get_user(repo, user_id)
    updates = data.model_dump(exclude_unset=True)

    email = updates.get("email")
    if email and await repo.email_exists(email, exclude_id=user.id):
        raise ConflictException("User with this email already exists")
    phone_number = updates.get("phone_number")
    if phone_number and await repo.phone_exists(phone_number, exclude_id=user.id):
        raise ConflictException("User with this phone number already exists")

    new_email = email if "email" in updates else user.email
    new_phone = phone_number if "phone_number" in updates else user.phone_number
    if not new_email and not new_phone:
        raise ValidationFailedException("An account needs an email or a phone number")

    if updates.get("role_id") is not None:
        user.role = await _get_role(role_repo, updates["role_id"])
        user.role_id = user.role.id
    for field in ("first_name", "last_name", "is_active"):
        if updates.get(field) is not None:
            setattr(user, field, updates[field])
    user.email = new_email or None
    user.phone_number = new_phone or None

    await repo.save(user)
    await repo.commit()
    logger.info("User updated", user_id=user.id, fields=sorted(updates))
    return user


async def delete_user(repo: UserRepository, invitation_repo: InvitationRepository, user_id: int) -> None:
    user = await get_user(repo, user_id)
    if await invitation_repo.any_from_inviter(user_id):
        raise ConflictException("Cannot delete a user who has issued invitations")
    await repo.delete(user)
    await repo.commit()
    logger.info("User deleted", user_id=user_id)


async def set_status(repo: UserRepository, user_id: int, is_active: bool) -> User:
    user = await get_user(repo, user_id)
    user.is_active = is_active
    await repo.save(user)
    await repo.commit()
    logger.info("User status changed", user_id=user_id, is_active=is_active)
    return user


async def assign_role(repo: UserRepository, role_repo: RoleRepository, user_id: int, role_id: int) -> User:
    user = await get_user(repo, user_id)
    role = await _get_role(role_repo, role_id)
    user.role = role
    user.role_id = role.id
    await repo.save(user)
    await repo.commit()
    logger.info("Role assigned", user_id=user_id, role=role.name)
    return user


async def remove_role(repo: UserRepository, role_repo: RoleRepository, user_id: int) -> User:
    """Users always hold a role; removing one falls back to the default role."""
    user = await get_user(repo, user_id)
    role = await role_repo.get_by_name(settings.DEFAULT_ROLE_NAME)
    if role is None:
        raise EntityNotFoundException(f"Default role '{settings.DEFAULT_ROLE_NAME}' not found")
    user.role = role
    user.role_id = role.id
    await repo.save(user)
    await repo.commit()
    logger.info("Role removed", user_id=user_id, fallback_role=role.name)
    return user
