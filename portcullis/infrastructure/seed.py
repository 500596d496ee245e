"""Reference data every deployment starts with: roles, privileges and policies."""

import structlog
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from portcullis.core.timeutils import utcnow
from portcullis.domain.models.policy import Policy
from portcullis.domain.models.role import Privilege, Role

logger = structlog.get_logger(__name__)

ROLES = [
    (1, "Super Admin", "Super Administrator with full system access", 0),
    (2, "Normal User", "Regular user with limited access", 3),
    (3, "Property Admin", "Property Administrator with property management privileges", 1),
    (4, "Security Admin", "Security Administrator with security management privileges", 2),
]

PRIVILEGES = [
    (1, "User Management", "Create, read, update, delete users", "User"),
    (2, "Role Management", "Create, read, update, delete roles", "Role"),
    (3, "Invitation Management", "Create and manage invitations", "Invitation"),
    (4, "System Configuration", "Configure system settings", "System"),
    (5, "Property Management", "Manage properties", "Property"),
    (6, "Security Management", "Manage security settings", "Security"),
    (7, "View Profile", "View own profile", "User"),
    (8, "Edit Profile", "Edit own profile", "User"),
]

POLICIES = [
    ("terms", "Terms and Conditions content will be added here."),
    ("privacy", "Privacy Policy content will be added here."),
]


async def _sync_sequence(session: AsyncSession, table: str) -> None:
    # explicit ids do not advance PostgreSQL serial sequences
    await session.execute(
        text(f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), (SELECT MAX(id) FROM {table}))")
    )


async def seed_reference_data(session: AsyncSession) -> None:
    """Insert whatever is missing; safe to run on every startup."""
    now = utcnow()
    added = 0

    existing_roles = set((await session.execute(select(Role.id))).scalars().all())
    for role_id, name, description, level in ROLES:
        if role_id not in existing_roles:
            session.add(Role(id=role_id, name=name, description=description, hierarchy_level=level, created_at=now))
            added += 1

    existing_privileges = set((await session.execute(select(Privilege.id))).scalars().all())
    for privilege_id, name, description, category in PRIVILEGES:
        if privilege_id not in existing_privileges:
            session.add(
                Privilege(id=privilege_id, name=name, description=description, category=category, created_at=now)
            )
            added += 1

    policy_count = (await session.execute(select(func.count(Policy.id)))).scalar_one()
    if policy_count == 0:
        for policy_type, content in POLICIES:
            session.add(
                Policy(type=policy_type, content=content, version="1.0", is_active=True, created_at=now, updated_at=now)
            )
            added += 1

    await session.flush()
    if session.bind.dialect.name == "postgresql":
        await _sync_sequence(session, "roles")
        await _sync_sequence(session, "privileges")
    await session.commit()
    if added:
        logger.info("Reference data seeded", rows=added)
