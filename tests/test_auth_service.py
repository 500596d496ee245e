from datetime import timedelta

import pytest
from jose import jwt

from conftest import PASSWORD, PROPERTY_ADMIN_ROLE_ID, SUPER_ADMIN_ROLE_ID
from portcullis.application.services import auth_service
from portcullis.application.services.authorization_service import has_role, is_allowed
from portcullis.application.services.token_service import Principal, create_access_token, decode_access_token
from portcullis.config import get_settings
from portcullis.core.exceptions import ConflictException, UnauthorizedException
from portcullis.core.timeutils import utcnow
from portcullis.domain.schemas.auth import ProfileUpdate

settings = get_settings()


async def test_authenticate_by_email_or_phone(user_repo, make_user):
    await make_user("ada@example.com", phone_number="+15550100")

    assert (await auth_service.authenticate(user_repo, "ada@example.com", PASSWORD)).email == "ada@example.com"
    assert (await auth_service.authenticate(user_repo, "+15550100", PASSWORD)).email == "ada@example.com"
    assert await auth_service.authenticate(user_repo, "ada@example.com", "wrong-password") is None
    assert await auth_service.authenticate(user_repo, "nobody@example.com", PASSWORD) is None


async def test_inactive_user_cannot_authenticate(user_repo, make_user):
    await make_user("ada@example.com", is_active=False)

    assert await auth_service.authenticate(user_repo, "ada@example.com", PASSWORD) is None
    with pytest.raises(UnauthorizedException):
        await auth_service.login(user_repo, "ada@example.com", PASSWORD)


async def test_change_password(user_repo, make_user):
    user = await make_user("ada@example.com")

    assert await auth_service.change_password(user_repo, user.id, "wrong-password", "another-pass") is False
    assert await auth_service.change_password(user_repo, user.id, PASSWORD, "another-pass") is True
    assert await auth_service.authenticate(user_repo, "ada@example.com", "another-pass") is not None


async def test_update_profile_rejects_taken_phone(user_repo, make_user):
    await make_user("bob@example.com", phone_number="+15550100")
    ada = await make_user("ada@example.com")

    with pytest.raises(ConflictException):
        await auth_service.update_profile(user_repo, ada, ProfileUpdate(phone_number="+15550100"))

    updated = await auth_service.update_profile(user_repo, ada, ProfileUpdate(first_name="Augusta"))
    assert updated.first_name == "Augusta"
    assert updated.last_name == "User"


async def test_token_carries_identity_and_role_claims(make_user):
    user = await make_user("ada@example.com", role_id=PROPERTY_ADMIN_ROLE_ID, first_name="Ada", last_name="Lovelace")

    token, expiration = create_access_token(user)
    claims = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
    )

    assert claims["sub"] == str(user.id)
    assert claims["userId"] == user.id
    assert claims["roleId"] == PROPERTY_ADMIN_ROLE_ID
    assert claims["role"] == "Property Admin"
    assert claims["name"] == "Ada Lovelace"
    assert claims["email"] == "ada@example.com"
    assert timedelta(hours=23) < expiration - utcnow() <= timedelta(hours=24)

    principal = decode_access_token(token)
    assert principal == Principal(
        user_id=user.id,
        role_id=PROPERTY_ADMIN_ROLE_ID,
        role_name="Property Admin",
        name="Ada Lovelace",
        email="ada@example.com",
    )


def test_decode_rejects_tampered_and_expired_tokens():
    now = utcnow()
    base = {
        "sub": "1",
        "userId": 1,
        "roleId": 1,
        "role": "Super Admin",
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
    }
    expired = jwt.encode({**base, "exp": now - timedelta(minutes=1)}, settings.SECRET_KEY, algorithm="HS256")
    forged = jwt.encode({**base, "exp": now + timedelta(hours=1)}, "some-other-key", algorithm="HS256")
    wrong_audience = jwt.encode(
        {**base, "aud": "someone-else", "exp": now + timedelta(hours=1)}, settings.SECRET_KEY, algorithm="HS256"
    )

    assert decode_access_token(expired) is None
    assert decode_access_token(forged) is None
    assert decode_access_token(wrong_audience) is None
    assert decode_access_token("not-a-token") is None


async def test_has_role_is_exact_and_flat(user_repo, make_user):
    admin = await make_user("root@example.com", role_id=SUPER_ADMIN_ROLE_ID)

    assert await has_role(user_repo, admin.id, "Super Admin") is True
    assert await has_role(user_repo, admin.id, "super admin") is False
    # no hierarchy walk: the top role does not satisfy a lower role check
    assert await has_role(user_repo, admin.id, "Property Admin") is False
    assert await has_role(user_repo, 999, "Super Admin") is False


def test_is_allowed_uses_literal_membership():
    principal = Principal(user_id=1, role_id=3, role_name="Property Admin")

    assert is_allowed(principal, ["Super Admin", "Property Admin"]) is True
    assert is_allowed(principal, ["Super Admin"]) is False
    assert is_allowed(principal, ["property admin"]) is False
