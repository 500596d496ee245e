from datetime import timedelta

import pytest

from conftest import NORMAL_USER_ROLE_ID, PROPERTY_ADMIN_ROLE_ID, SECURITY_ADMIN_ROLE_ID, SUPER_ADMIN_ROLE_ID
from portcullis.application.services import policy_service, user_service
from portcullis.core.exceptions import ConflictException, EntityNotFoundException
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.invitation import Invitation
from portcullis.domain.schemas.policy import PolicyCreate, PolicyUpdate
from portcullis.domain.schemas.user import UserCreate, UserUpdate


def _user_create(email, role_id=NORMAL_USER_ROLE_ID):
    return UserCreate(first_name="Ada", last_name="Lovelace", email=email, password="s3cret-pass", role_id=role_id)


async def test_create_user_with_explicit_role(user_repo, role_repo):
    user = await user_service.create_user(user_repo, role_repo, _user_create("ada@example.com", SECURITY_ADMIN_ROLE_ID))

    assert user.role_name == "Security Admin"
    assert user.is_super_admin is False

    with pytest.raises(ConflictException):
        await user_service.create_user(user_repo, role_repo, _user_create("ada@example.com"))
    with pytest.raises(EntityNotFoundException):
        await user_service.create_user(user_repo, role_repo, _user_create("bob@example.com", role_id=999))


async def test_update_user_checks_email_collision(user_repo, role_repo, make_user):
    await make_user("taken@example.com")
    ada = await make_user("ada@example.com")

    with pytest.raises(ConflictException):
        await user_service.update_user(user_repo, role_repo, ada.id, UserUpdate(email="taken@example.com"))

    updated = await user_service.update_user(
        user_repo, role_repo, ada.id, UserUpdate(last_name="King", role_id=PROPERTY_ADMIN_ROLE_ID)
    )
    assert updated.last_name == "King"
    assert updated.role_name == "Property Admin"


async def test_assign_and_remove_role(user_repo, role_repo, make_user):
    ada = await make_user("ada@example.com")

    assigned = await user_service.assign_role(user_repo, role_repo, ada.id, PROPERTY_ADMIN_ROLE_ID)
    assert assigned.role_id == PROPERTY_ADMIN_ROLE_ID

    removed = await user_service.remove_role(user_repo, role_repo, ada.id)
    assert removed.role_id == NORMAL_USER_ROLE_ID
    assert removed.role_name == "Normal User"

    with pytest.raises(EntityNotFoundException):
        await user_service.assign_role(user_repo, role_repo, ada.id, 999)


async def test_set_status(user_repo, make_user):
    ada = await make_user("ada@example.com")

    deactivated = await user_service.set_status(user_repo, ada.id, False)

    assert deactivated.is_active is False
    with pytest.raises(EntityNotFoundException):
        await user_service.set_status(user_repo, 999, True)


async def test_delete_user_blocked_while_invitations_reference_them(user_repo, invitation_repo, make_user):
    admin = await make_user("root@example.com", role_id=SUPER_ADMIN_ROLE_ID)
    await invitation_repo.add(
        Invitation(
            email="bob@example.com",
            role_id=NORMAL_USER_ROLE_ID,
            invited_by_user_id=admin.id,
            is_used=False,
            expires_at=utcnow() + timedelta(days=1),
        )
    )
    await invitation_repo.commit()
    plain = await make_user("plain@example.com")

    with pytest.raises(ConflictException):
        await user_service.delete_user(user_repo, invitation_repo, admin.id)

    await user_service.delete_user(user_repo, invitation_repo, plain.id)
    assert await user_repo.get_by_id(plain.id) is None


async def test_seeded_policies_are_active(policy_repo):
    terms = await policy_service.get_active_policy(policy_repo, "terms")
    privacy = await policy_service.get_active_policy(policy_repo, "Privacy")

    assert terms.version == "1.0"
    assert privacy.type == "privacy"


async def test_new_policy_deactivates_previous_versions(policy_repo):
    original = await policy_service.get_active_policy(policy_repo, "terms")

    published = await policy_service.create_policy(
        policy_repo, PolicyCreate(type="terms", content="Version two of the terms.", version="2.0")
    )

    active = await policy_service.get_active_policy(policy_repo, "terms")
    assert active.id == published.id
    previous = await policy_repo.get_by_id(original.id)
    assert previous is not None
    assert previous.is_active is False
    assert [p.type for p in await policy_service.list_policies(policy_repo) if p.is_active].count("terms") == 1


async def test_update_and_delete_policy(policy_repo):
    terms = await policy_service.get_active_policy(policy_repo, "terms")

    updated = await policy_service.update_policy(policy_repo, terms.id, PolicyUpdate(content="Edited", version="1.1"))
    assert updated.content == "Edited"
    assert updated.version == "1.1"

    await policy_service.delete_policy(policy_repo, terms.id)
    assert await policy_service.get_active_policy(policy_repo, "terms") is None
    with pytest.raises(EntityNotFoundException):
        await policy_service.delete_policy(policy_repo, terms.id)
