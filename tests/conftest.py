import os

# Settings are read at import time; pin them before the app is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["EXPOSE_RESET_CODE"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from portcullis.application.services.token_service import create_access_token  # noqa: E402
from portcullis.core.security import hash_password  # noqa: E402
from portcullis.domain.models.invitation import Invitation  # noqa: E402
from portcullis.domain.models.password_reset_token import PasswordResetToken  # noqa: E402
from portcullis.domain.models.policy import Policy  # noqa: E402
from portcullis.domain.models.role import Privilege, Role  # noqa: E402
from portcullis.domain.models.user import User  # noqa: E402
from portcullis.infrastructure.database import build_engine, build_session_factory, create_tables, get_db  # noqa: E402
from portcullis.infrastructure.repositories.invitation_repository import SQLAlchemyInvitationRepository  # noqa: E402
from portcullis.infrastructure.repositories.password_reset_repository import (  # noqa: E402
    SQLAlchemyPasswordResetRepository,
)
from portcullis.infrastructure.repositories.policy_repository import SQLAlchemyPolicyRepository  # noqa: E402
from portcullis.infrastructure.repositories.role_repository import (  # noqa: E402
    SQLAlchemyPrivilegeRepository,
    SQLAlchemyRoleRepository,
)
from portcullis.infrastructure.repositories.user_repository import SQLAlchemyUserRepository  # noqa: E402
from portcullis.infrastructure.seed import seed_reference_data  # noqa: E402
from portcullis.main import app  # noqa: E402

SUPER_ADMIN_ROLE_ID = 1
NORMAL_USER_ROLE_ID = 2
PROPERTY_ADMIN_ROLE_ID = 3
SECURITY_ADMIN_ROLE_ID = 4
PASSWORD = "s3cret-pass"


@pytest.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    factory = build_session_factory(engine)
    async with factory() as session:
        await seed_reference_data(session)
    return factory


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_repo(session):
    return SQLAlchemyUserRepository(session, User)


@pytest.fixture
def role_repo(session):
    return SQLAlchemyRoleRepository(session, Role)


@pytest.fixture
def privilege_repo(session):
    return SQLAlchemyPrivilegeRepository(session, Privilege)


@pytest.fixture
def invitation_repo(session):
    return SQLAlchemyInvitationRepository(session, Invitation)


@pytest.fixture
def reset_repo(session):
    return SQLAlchemyPasswordResetRepository(session, PasswordResetToken)


@pytest.fixture
def policy_repo(session):
    return SQLAlchemyPolicyRepository(session, Policy)


@pytest.fixture
def make_user(user_repo, role_repo):
    """Insert an active user directly, bypassing the invitation gate."""

    async def _make_user(email, role_id=NORMAL_USER_ROLE_ID, password=PASSWORD, **fields):
        role = await role_repo.get_by_id(role_id)
        user = User(
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", "User"),
            email=email,
            password_hash=hash_password(password),
            is_super_admin=fields.pop("is_super_admin", False),
            is_active=fields.pop("is_active", True),
            role_id=role.id,
            **fields,
        )
        user.role = role
        await user_repo.add(user)
        await user_repo.commit()
        return user

    return _make_user


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def auth_headers(user: User) -> dict:
    token, _ = create_access_token(user)
    return bearer(token)


def signup_payload(email, **overrides) -> dict:
    payload = {
        "first_name": "Test",
        "last_name": "User",
        "email": email,
        "password": PASSWORD,
        "confirm_password": PASSWORD,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def admin_headers(client):
    """Bootstrap the first account over HTTP and return its bearer header."""
    response = await client.post("/api/auth/signup", json=signup_payload("root@example.com"))
    assert response.status_code == 200, response.text
    return bearer(response.json()["token"])


@pytest.fixture
def invite_and_signup(client, admin_headers):
    """Invite an email for a role, sign it up, and return the new account's bearer header."""

    async def _invite_and_signup(email, role_id):
        response = await client.post(
            "/api/invitations",
            json={"email": email, "role_id": role_id},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        response = await client.post("/api/auth/signup", json=signup_payload(email))
        assert response.status_code == 200, response.text
        return bearer(response.json()["token"])

    return _invite_and_signup
