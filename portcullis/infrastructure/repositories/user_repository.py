"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import selectinload

from portcullis.core.security import normalize_email
from portcullis.domain.models.user import User
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def _select(self):
        return select(User).options(selectinload(User.role))

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            self._select().where(func.lower(User.email) == normalize_email(email))
        )
        return result.scalars().first()

    async def get_by_phone(self, phone_number: str) -> Optional[User]:
        result = await self.db.execute(self._select().where(User.phone_number == phone_number))
        return result.scalars().first()

    async def get_by_email_or_phone(self, identifier: str, active_only: bool = True) -> Optional[User]:
        email_match = func.lower(User.email) == normalize_email(identifier)
        stmt = self._select().where(or_(email_match, User.phone_number == identifier))
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        # an email match wins over a phone match
        stmt = stmt.order_by(case((email_match, 0), else_=1), User.id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(User.id).where(func.lower(User.email) == normalize_email(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return await self._exists(stmt)

    async def phone_exists(self, phone_number: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(User.id).where(User.phone_number == phone_number)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return await self._exists(stmt)

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(User.id)))
        return result.scalar_one()

    async def any_with_role(self, role_id: int) -> bool:
        return await self._exists(select(User.id).where(User.role_id == role_id))
