"""
SQLAlchemy Implementation of Invitation Repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update

from portcullis.core.security import normalize_email
from portcullis.domain.models.invitation import Invitation
from portcullis.domain.repositories.invitation_repository import InvitationRepository
from portcullis.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyInvitationRepository(SQLAlchemyRepository[Invitation], InvitationRepository):
    """Invitation repository implementation using SQLAlchemy."""

    def _newest_unused(self, email: str):
        return (
            self._select()
            .where(func.lower(Invitation.email) == normalize_email(email), Invitation.is_used.is_(False))
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        )

    async def list(self, skip: int = 0, limit: int = 100):
        result = await self.db.execute(
            self._select()
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_valid_for_email(self, email: str, now: datetime) -> Optional[Invitation]:
        result = await self.db.execute(self._newest_unused(email).where(Invitation.expires_at > now))
        return result.scalars().first()

    async def get_latest_unused_for_email(self, email: str) -> Optional[Invitation]:
        result = await self.db.execute(self._newest_unused(email))
        return result.scalars().first()

    async def mark_used(self, invitation_id: int, now: datetime) -> bool:
        result = await self.db.execute(
            update(Invitation)
            .where(Invitation.id == invitation_id, Invitation.is_used.is_(False))
            .values(is_used=True, used_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        # reload any copy already held by this session
        await self.db.get(Invitation, invitation_id, populate_existing=True)
        return True

    async def any_with_role(self, role_id: int) -> bool:
        return await self._exists(select(Invitation.id).where(Invitation.role_id == role_id))

    async def any_from_inviter(self, user_id: int) -> bool:
        return await self._exists(select(Invitation.id).where(Invitation.invited_by_user_id == user_id))
