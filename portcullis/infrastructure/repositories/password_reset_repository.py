"""
SQLAlchemy Implementation of Password Reset Repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select, update

from portcullis.core.security import normalize_email
from portcullis.domain.models.password_reset_token import PasswordResetToken
from portcullis.domain.repositories.password_reset_repository import PasswordResetRepository
from portcullis.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyPasswordResetRepository(SQLAlchemyRepository[PasswordResetToken], PasswordResetRepository):
    """Reset-code repository implementation using SQLAlchemy."""

    async def delete_unused_for_email(self, email: str) -> int:
        result = await self.db.execute(
            delete(PasswordResetToken)
            .where(
                func.lower(PasswordResetToken.email) == normalize_email(email),
                PasswordResetToken.is_used.is_(False),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def find_unused(self, email: str, code: str) -> Optional[PasswordResetToken]:
        result = await self.db.execute(
            select(PasswordResetToken)
            .where(
                func.lower(PasswordResetToken.email) == normalize_email(email),
                PasswordResetToken.token == code,
                PasswordResetToken.is_used.is_(False),
            )
            .order_by(PasswordResetToken.id.desc())
        )
        return result.scalars().first()

    async def mark_used(self, email: str, code: str, now: datetime) -> bool:
        result = await self.db.execute(
            update(PasswordResetToken)
            .where(
                func.lower(PasswordResetToken.email) == normalize_email(email),
                PasswordResetToken.token == code,
                PasswordResetToken.is_used.is_(False),
            )
            .values(is_used=True, used_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete_expired(self, now: datetime) -> int:
        result = await self.db.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
