"""
User Repository Interface.
Credential store lookups used by authentication and provisioning.
"""

from typing import Optional

from portcullis.domain.models.user import User
from portcullis.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    async def get_by_email(self, email: str) -> Optional[User]:
        ...

    async def get_by_phone(self, phone_number: str) -> Optional[User]:
        ...

    async def get_by_email_or_phone(self, identifier: str, active_only: bool = True) -> Optional[User]:
        """Match the identifier against email first, then phone number."""
        ...

    async def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        ...

    async def phone_exists(self, phone_number: str, exclude_id: Optional[int] = None) -> bool:
        ...

    async def count(self) -> int:
        ...

    async def any_with_role(self, role_id: int) -> bool:
        """True if at least one user currently holds the role."""
        ...
