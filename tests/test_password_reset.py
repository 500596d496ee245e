from datetime import timedelta

from conftest import PASSWORD
from portcullis.application.services import auth_service, password_reset_service
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.password_reset_token import PasswordResetToken

NEW_PASSWORD = "brand-new-pass"


async def test_reset_round_trip(reset_repo, user_repo, make_user):
    await make_user("ada@example.com")

    code = await password_reset_service.generate_code(reset_repo, "ada@example.com")
    assert len(code) == 6 and code.isdigit()
    assert 100000 <= int(code) <= 999999

    assert await password_reset_service.verify_code(reset_repo, "ada@example.com", code) is True
    # verification does not consume the code
    assert await password_reset_service.verify_code(reset_repo, "ada@example.com", code) is True

    assert await auth_service.reset_password(user_repo, "ada@example.com", NEW_PASSWORD) is True
    assert await auth_service.authenticate(user_repo, "ada@example.com", NEW_PASSWORD) is not None
    assert await auth_service.authenticate(user_repo, "ada@example.com", PASSWORD) is None

    assert await password_reset_service.mark_used(reset_repo, "ada@example.com", code) is True
    assert await password_reset_service.verify_code(reset_repo, "ada@example.com", code) is False
    assert await password_reset_service.mark_used(reset_repo, "ada@example.com", code) is False


async def test_new_code_replaces_unused_codes(reset_repo):
    first = await password_reset_service.generate_code(reset_repo, "ada@example.com")
    second = await password_reset_service.generate_code(reset_repo, "ada@example.com")

    assert await password_reset_service.verify_code(reset_repo, "ada@example.com", second) is True
    if first != second:
        assert await password_reset_service.verify_code(reset_repo, "ada@example.com", first) is False
    tokens = await reset_repo.list()
    assert len([t for t in tokens if not t.is_used]) == 1


async def test_wrong_code_or_email_does_not_verify(reset_repo):
    code = await password_reset_service.generate_code(reset_repo, "ada@example.com")
    wrong = "000000" if code != "000000" else "111111"

    assert await password_reset_service.verify_code(reset_repo, "ada@example.com", wrong) is False
    assert await password_reset_service.verify_code(reset_repo, "bob@example.com", code) is False


async def test_expired_code_does_not_verify_and_is_swept(reset_repo):
    await reset_repo.add(
        PasswordResetToken(
            email="ada@example.com",
            token="123456",
            is_used=False,
            expires_at=utcnow() - timedelta(minutes=1),
        )
    )
    await reset_repo.commit()
    live = await password_reset_service.generate_code(reset_repo, "bob@example.com")

    assert await password_reset_service.verify_code(reset_repo, "ada@example.com", "123456") is False

    assert await password_reset_service.cleanup_expired(reset_repo) == 1
    remaining = await reset_repo.list()
    assert [t.email for t in remaining] == ["bob@example.com"]
    assert await password_reset_service.verify_code(reset_repo, "bob@example.com", live) is True


async def test_reset_password_for_unknown_email(user_repo):
    assert await auth_service.reset_password(user_repo, "ghost@example.com", NEW_PASSWORD) is False
