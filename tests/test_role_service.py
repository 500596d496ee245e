from datetime import timedelta

import pytest

from conftest import SUPER_ADMIN_ROLE_ID
from portcullis.application.services import role_service
from portcullis.core.exceptions import ConflictException, EntityNotFoundException
from portcullis.core.timeutils import utcnow
from portcullis.domain.models.invitation import Invitation
from portcullis.domain.schemas.role import RoleCreate, RoleUpdate


async def _create(role_repo, name, description=""):
    return await role_service.create_role(role_repo, RoleCreate(name=name, description=description))


async def _privilege_ids(role_repo, role_id):
    return [p.id for p in await role_service.get_effective_privileges(role_repo, role_id)]


async def test_create_role_rejects_duplicate_name_ignoring_case(role_repo):
    await _create(role_repo, "Inspector")

    with pytest.raises(ConflictException):
        await _create(role_repo, "inspector")
    with pytest.raises(ConflictException):
        await _create(role_repo, "  INSPECTOR ")


async def test_update_role_rename_collision(role_repo):
    role = await _create(role_repo, "Inspector")

    with pytest.raises(ConflictException):
        await role_service.update_role(role_repo, role.id, RoleUpdate(name="super admin"))

    renamed = await role_service.update_role(role_repo, role.id, RoleUpdate(name="Auditor", description="Reads"))
    assert renamed.name == "Auditor"
    assert renamed.description == "Reads"


async def test_update_unknown_role_is_not_found(role_repo):
    with pytest.raises(EntityNotFoundException):
        await role_service.update_role(role_repo, 999, RoleUpdate(name="Ghost"))


async def test_delete_role_blocked_while_a_user_holds_it(role_repo, user_repo, invitation_repo, make_user):
    role = await _create(role_repo, "Temporary")
    await make_user("holder@example.com", role_id=role.id)

    with pytest.raises(ConflictException):
        await role_service.delete_role(role_repo, user_repo, invitation_repo, role.id)
    assert await role_repo.get_by_id(role.id) is not None


async def test_delete_unreferenced_role_removes_it(role_repo, user_repo, invitation_repo):
    role = await _create(role_repo, "Temporary")

    await role_service.delete_role(role_repo, user_repo, invitation_repo, role.id)

    assert await role_repo.get_by_id(role.id) is None
    with pytest.raises(EntityNotFoundException):
        await role_service.delete_role(role_repo, user_repo, invitation_repo, role.id)


async def test_delete_role_blocked_by_child_role(role_repo, user_repo, invitation_repo):
    parent = await _create(role_repo, "Parent")
    child = await _create(role_repo, "Child")
    await role_service.set_hierarchy(role_repo, child.id, parent.id, 1)

    with pytest.raises(ConflictException):
        await role_service.delete_role(role_repo, user_repo, invitation_repo, parent.id)


async def test_delete_role_blocked_by_invitation(role_repo, user_repo, invitation_repo, make_user):
    inviter = await make_user("admin@example.com", role_id=SUPER_ADMIN_ROLE_ID)
    role = await _create(role_repo, "Invited")
    await invitation_repo.add(
        Invitation(
            email="someone@example.com",
            role_id=role.id,
            invited_by_user_id=inviter.id,
            is_used=False,
            expires_at=utcnow() + timedelta(days=1),
        )
    )
    await invitation_repo.commit()

    with pytest.raises(ConflictException):
        await role_service.delete_role(role_repo, user_repo, invitation_repo, role.id)


async def test_inspector_privileges_are_replaced_not_merged(role_repo, privilege_repo):
    inspector = await _create(role_repo, "Inspector")
    await role_service.set_hierarchy(role_repo, inspector.id, None, 9)

    await role_service.assign_privileges(role_repo, privilege_repo, inspector.id, [1, 3])
    assert await _privilege_ids(role_repo, inspector.id) == [1, 3]

    await role_service.assign_privileges(role_repo, privilege_repo, inspector.id, [2])
    assert await _privilege_ids(role_repo, inspector.id) == [2]

    role = await role_repo.get_by_id(inspector.id)
    assert role.hierarchy_level == 9
    assert role.parent_role_id is None


async def test_assign_privileges_collapses_duplicates(role_repo, privilege_repo):
    role = await _create(role_repo, "Inspector")

    assigned = await role_service.assign_privileges(role_repo, privilege_repo, role.id, [4, 4, 2, 4])

    assert [p.id for p in assigned] == [2, 4]


async def test_assign_unknown_privilege_leaves_previous_set(role_repo, privilege_repo):
    role = await _create(role_repo, "Inspector")
    await role_service.assign_privileges(role_repo, privilege_repo, role.id, [1, 2])

    with pytest.raises(EntityNotFoundException) as exc_info:
        await role_service.assign_privileges(role_repo, privilege_repo, role.id, [3, 999])

    assert exc_info.value.details == {"privilege_ids": [999]}
    assert await _privilege_ids(role_repo, role.id) == [1, 2]


async def test_assign_privileges_to_unknown_role(role_repo, privilege_repo):
    with pytest.raises(EntityNotFoundException):
        await role_service.assign_privileges(role_repo, privilege_repo, 999, [1])


async def test_remove_privilege(role_repo, privilege_repo):
    role = await _create(role_repo, "Inspector")
    await role_service.assign_privileges(role_repo, privilege_repo, role.id, [1, 2])

    assert await role_service.remove_privilege(role_repo, role.id, 1) is True
    assert await role_service.remove_privilege(role_repo, role.id, 1) is False
    assert await _privilege_ids(role_repo, role.id) == [2]


async def test_effective_privileges_ignore_parent_role(role_repo, privilege_repo):
    await role_service.assign_privileges(role_repo, privilege_repo, SUPER_ADMIN_ROLE_ID, [1, 2, 3])
    child = await _create(role_repo, "Deputy")
    await role_service.set_hierarchy(role_repo, child.id, SUPER_ADMIN_ROLE_ID, 1)

    assert await _privilege_ids(role_repo, child.id) == []


async def test_set_hierarchy_rejects_self_parent(role_repo):
    role = await _create(role_repo, "Loop")

    with pytest.raises(ConflictException):
        await role_service.set_hierarchy(role_repo, role.id, role.id, 1)


async def test_set_hierarchy_rejects_cycle_through_descendant(role_repo):
    a = await _create(role_repo, "A")
    b = await _create(role_repo, "B")
    c = await _create(role_repo, "C")
    await role_service.set_hierarchy(role_repo, b.id, a.id, 1)
    await role_service.set_hierarchy(role_repo, c.id, b.id, 2)

    with pytest.raises(ConflictException):
        await role_service.set_hierarchy(role_repo, a.id, c.id, 3)

    unchanged = await role_repo.get_by_id(a.id)
    assert unchanged.parent_role_id is None


async def test_set_hierarchy_unknown_parent(role_repo):
    role = await _create(role_repo, "Orphan")

    with pytest.raises(EntityNotFoundException):
        await role_service.set_hierarchy(role_repo, role.id, 999, 1)


async def test_set_hierarchy_can_detach_parent(role_repo):
    parent = await _create(role_repo, "Parent")
    child = await _create(role_repo, "Child")
    await role_service.set_hierarchy(role_repo, child.id, parent.id, 1)

    detached = await role_service.set_hierarchy(role_repo, child.id, None, 0)

    assert detached.parent_role_id is None
    assert detached.hierarchy_level == 0
