"""
API Dependencies.
Repositories built on the request-scoped session; every repository in one
request shares the same session and therefore the same transaction.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portcullis.domain.models.invitation import Invitation
from portcullis.domain.models.password_reset_token import PasswordResetToken
from portcullis.domain.models.policy import Policy
from portcullis.domain.models.role import Privilege, Role
from portcullis.domain.models.user import User
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.domain.repositories.password_reset_repository import PasswordResetRepository
from portcullis.domain.repositories.policy_repository import PolicyRepository
from portcullis.domain.repositories.role_repository import PrivilegeRepository, RoleRepository
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.infrastructure.database import get_db
from portcullis.infrastructure.repositories.invitation_repository import SQLAlchemyInvitationRepository
from portcullis.infrastructure.repositories.password_reset_repository import SQLAlchemyPasswordResetRepository
from portcullis.infrastructure.repositories.policy_repository import SQLAlchemyPolicyRepository
from portcullis.infrastructure.repositories.role_repository import (
    SQLAlchemyPrivilegeRepository,
    SQLAlchemyRoleRepository,
)
from portcullis.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_role_repository(db: AsyncSession = Depends(get_db)) -> RoleRepository:
    """Get role repository instance."""
    return SQLAlchemyRoleRepository(db, Role)


def get_privilege_repository(db: AsyncSession = Depends(get_db)) -> PrivilegeRepository:
    """Get privilege repository instance."""
    return SQLAlchemyPrivilegeRepository(db, Privilege)


def get_invitation_repository(db: AsyncSession = Depends(get_db)) -> InvitationRepository:
    """Get invitation repository instance."""
    return SQLAlchemyInvitationRepository(db, Invitation)


def get_password_reset_repository(db: AsyncSession = Depends(get_db)) -> PasswordResetRepository:
    """Get password reset repository instance."""
    return SQLAlchemyPasswordResetRepository(db, PasswordResetToken)


def get_policy_repository(db: AsyncSession = Depends(get_db)) -> PolicyRepository:
    """Get policy repository instance."""
    return SQLAlchemyPolicyRepository(db, Policy)
