"""
Invitation Repository Interface.
"""

from datetime import datetime
from typing import Optional

from portcullis.domain.models.invitation import Invitation
from portcullis.domain.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    """Interface for Invitation-specific operations."""

    async def get_valid_for_email(self, email: str, now: datetime) -> Optional[Invitation]:
        """Most recent unused invitation for the email that expires after ``now``."""
        ...

    async def get_latest_unused_for_email(self, email: str) -> Optional[Invitation]:
        """Most recent unused invitation, expired or not."""
        ...

    async def mark_used(self, invitation_id: int, now: datetime) -> bool:
        """Flip is_used in one conditional UPDATE; False if already used or absent."""
        ...

    async def any_with_role(self, role_id: int) -> bool:
        ...

    async def any_from_inviter(self, user_id: int) -> bool:
        ...
