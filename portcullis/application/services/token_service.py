"""Token service: signed bearer tokens carrying identity and role claims."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple

import structlog
from jose import JWTError, jwt

from portcullis.config import get_settings
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.user import User

settings = get_settings()
logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated identity attached to a request, built from token claims only."""

    user_id: int
    role_id: int
    role_name: str
    name: str = ""
    email: str = ""


def token_expiration(issued_at: Optional[datetime] = None) -> datetime:
    return (issued_at or utcnow()) + timedelta(hours=settings.JWT_EXPIRATION_HOURS)


def create_access_token(user: User) -> Tuple[str, datetime]:
    """Mint a token for the user; returns the token and its expiry."""
    issued_at = utcnow()
    expires_at = token_expiration(issued_at)
    claims = {
        "sub": str(user.id),
        "name": user.full_name,
        "email": user.email or "",
        "role": user.role_name,
        "userId": user.id,
        "roleId": user.role_id,
        "iat": issued_at,
        "exp": expires_at,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def decode_access_token(token: str) -> Optional[Principal]:
    """Validate signature, expiry, issuer and audience; None on any failure."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        logger.debug("Rejected bearer token", error=str(e))
        return None

    try:
        return Principal(
            user_id=int(payload["userId"]),
            role_id=int(payload["roleId"]),
            role_name=str(payload["role"]),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("Bearer token is missing identity claims")
        return None
