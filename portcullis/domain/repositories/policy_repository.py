"""
Policy Repository Interface.
"""

from typing import Optional

from portcullis.domain.models.policy import Policy
from portcullis.domain.repositories.base import BaseRepository


class PolicyRepository(BaseRepository[Policy]):
    """Interface for Policy-specific operations."""

    async def get_active_by_type(self, policy_type: str) -> Optional[Policy]:
        ...

    async def deactivate_type(self, policy_type: str) -> int:
        """Mark every policy of the type inactive; returns the number touched."""
        ...
