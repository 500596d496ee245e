"""Password reset service: short-lived 6-digit codes keyed by email.

The reset flow is three separate calls: verify the code, reset the password
through ``auth_service.reset_password``, then mark the code used.
"""

from datetime import timedelta

import structlog

from portcullis.config import get_settings
from portcullis.core.security import generate_reset_code, normalize_email
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.password_reset_token import PasswordResetToken
from portcullis.domain.repositories.password_reset_repository import PasswordResetRepository

settings = get_settings()
logger = structlog.get_logger(__name__)


async def generate_code(repo: PasswordResetRepository, email: str) -> str:
    """Replace any unused codes for the email with a fresh one."""
    removed = await repo.delete_unused_for_email(email)
    now = utcnow()
    code = generate_reset_code()
    await repo.add(
        PasswordResetToken(
            email=normalize_email(email),
            token=code,
            is_used=False,
            expires_at=now + timedelta(minutes=settings.RESET_CODE_EXPIRY_MINUTES),
        )
    )
    await repo.commit()
    logger.info("Reset code generated", email=email, replaced=removed)
    return code


async def verify_code(repo: PasswordResetRepository, email: str, code: str) -> bool:
    """Non-destructive: a valid code stays valid until marked used or expired."""
    token = await repo.find_unused(email, code)
    return token is not None and not token.is_expired()


async def mark_used(repo: PasswordResetRepository, email: str, code: str) -> bool:
    consumed = await repo.mark_used(email, code, utcnow())
    if consumed:
        await repo.commit()
    return consumed


async def cleanup_expired(repo: PasswordResetRepository) -> int:
    """Delete every expired code, used or not."""
    deleted = await repo.delete_expired(utcnow())
    await repo.commit()
    if deleted:
        logger.info("Expired reset codes removed", count=deleted)
    return deleted
