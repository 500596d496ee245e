"""
SQLAlchemy Implementation of Policy Repository.
"""

from typing import Optional

from sqlalchemy import select

from portcullis.domain.models.policy import Policy
from portcullis.domain.repositories.policy_repository import PolicyRepository
from portcullis.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyPolicyRepository(SQLAlchemyRepository[Policy], PolicyRepository):
    """Policy repository implementation using SQLAlchemy."""

    async def get_active_by_type(self, policy_type: str) -> Optional[Policy]:
        result = await self.db.execute(
            select(Policy)
            .where(Policy.type == policy_type, Policy.is_active.is_(True))
            .order_by(Policy.created_at.desc(), Policy.id.desc())
        )
        return result.scalars().first()

    async def deactivate_type(self, policy_type: str) -> int:
        result = await self.db.execute(
            select(Policy).where(Policy.type == policy_type, Policy.is_active.is_(True))
        )
        policies = result.scalars().all()
        for policy in policies:
            policy.is_active = False
            policy.touch_updated()
        await self.db.flush()
        return len(policies)
