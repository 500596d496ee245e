"""Authorization service: role-name checks.

Access is decided by literal role names. Parent roles and hierarchy levels are
never walked, so a Super Admin does not implicitly satisfy a check for
Property Admin.
"""

from typing import Iterable

from portcullis.application.services.token_service import Principal
from portcullis.domain.repositories.user_repository import UserRepository


async def has_role(repo: UserRepository, user_id: int, role_name: str) -> bool:
    """Exact, case-sensitive match against the user's current role."""
    user = await repo.get_by_id(user_id)
    if user is None:
        return False
    return user.role_name == role_name


def is_allowed(principal: Principal, allowed_roles: Iterable[str]) -> bool:
    return principal.role_name in set(allowed_roles)
