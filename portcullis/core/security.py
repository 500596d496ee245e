"""Password hashing and secret generation."""

import secrets

from passlib.context import CryptContext

from portcullis.config import get_settings

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

RESET_CODE_MIN = 100000
RESET_CODE_MAX = 999999


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # malformed or foreign hash
        return False


def generate_unusable_password() -> str:
    """Random local password for accounts that sign in through an identity provider."""
    return secrets.token_urlsafe(32)


def generate_reset_code() -> str:
    """Uniform 6-digit code in [100000, 999999]."""
    return str(RESET_CODE_MIN + secrets.randbelow(RESET_CODE_MAX - RESET_CODE_MIN + 1))


def normalize_email(email: str) -> str:
    """Canonical form used for storage and every email comparison."""
    return email.strip().lower()
