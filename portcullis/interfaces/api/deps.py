"""FastAPI dependency: bearer token authentication and role gates."""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portcullis.application.services.auth_service import get_active_user
from portcullis.application.services.authorization_service import is_allowed
from portcullis.application.services.token_service import Principal, decode_access_token
from portcullis.config import get_settings
from portcullis.core.exceptions import ForbiddenException, UnauthorizedException
from portcullis.domain.models.user import User
from portcullis.domain.repositories.user_repository import UserRepository
from portcullis.interfaces.deps import get_user_repository

settings = get_settings()
security = HTTPBearer(auto_error=False)

SUPER_ADMIN = settings.SUPER_ADMIN_ROLE_NAME
PROPERTY_ADMIN = "Property Admin"
SECURITY_ADMIN = "Security Admin"
ADMIN_ROLES = (SUPER_ADMIN, PROPERTY_ADMIN, SECURITY_ADMIN)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """Validate the bearer token; the principal comes from its claims alone."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Not authenticated")

    principal = decode_access_token(credentials.credentials)
    if principal is None:
        raise UnauthorizedException("Invalid or expired token")
    return principal


async def get_current_user(
    principal: Principal = Depends(get_current_principal),
    repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Load the account behind the token; inactive accounts are rejected."""
    return await get_active_user(repo, principal.user_id)


def require_roles(*role_names: str) -> Callable[..., Principal]:
    """Gate a route to an allow-list of role names, before any lookup happens."""
    allowed = frozenset(role_names)

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not is_allowed(principal, allowed):
            raise ForbiddenException("You do not have permission to perform this action")
        return principal

    return dependency


require_super_admin = require_roles(SUPER_ADMIN)
require_admin = require_roles(*ADMIN_ROLES)
