"""
Password Reset Repository Interface.
"""

from datetime import datetime
from typing import Optional

from portcullis.domain.models.password_reset_token import PasswordResetToken
from portcullis.domain.repositories.base import BaseRepository


class PasswordResetRepository(BaseRepository[PasswordResetToken]):
    """Interface for reset-code operations."""

    async def delete_unused_for_email(self, email: str) -> int:
        ...

    async def find_unused(self, email: str, code: str) -> Optional[PasswordResetToken]:
        ...

    async def mark_used(self, email: str, code: str, now: datetime) -> bool:
        ...

    async def delete_expired(self, now: datetime) -> int:
        ...
