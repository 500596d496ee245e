"""Policy service: versioned legal documents, one active per type."""

from typing import List, Optional

import structlog

from portcullis.core.exceptions import EntityNotFoundException
from portcullis.domain.models.policy import Policy
from portcullis.domain.repositories.policy_repository import PolicyRepository
from portcullis.domain.schemas.policy import PolicyCreate, PolicyUpdate

logger = structlog.get_logger(__name__)


async def get_active_policy(repo: PolicyRepository, policy_type: str) -> Optional[Policy]:
    return await repo.get_active_by_type(policy_type.strip().lower())


async def list_policies(repo: PolicyRepository, skip: int = 0, limit: int = 100) -> List[Policy]:
    return await repo.list(skip=skip, limit=limit)


async def get_policy(repo: PolicyRepository, policy_id: int) -> Policy:
    policy = await repo.get_by_id(policy_id)
    if policy is None:
        raise EntityNotFoundException(f"Policy {policy_id} not found")
    return policy


async def create_policy(repo: PolicyRepository, data: PolicyCreate) -> Policy:
    """Publish a new version; earlier versions of the type are deactivated, not deleted."""
    policy_type = data.type.strip().lower()
    deactivated = await repo.deactivate_type(policy_type)
    policy = Policy(type=policy_type, content=data.content, version=data.version, is_active=True)
    await repo.add(policy)
    await repo.commit()
    logger.info("Policy published", policy_id=policy.id, type=policy_type, version=policy.version, replaced=deactivated)
    return policy


async def update_policy(repo: PolicyRepository, policy_id: int, data: PolicyUpdate) -> Policy:
    policy = await get_policy(repo, policy_id)
    policy.content = data.content
    policy.version = data.version
    await repo.save(policy)
    await repo.commit()
    return policy


async def delete_policy(repo: PolicyRepository, policy_id: int) -> None:
    policy = await get_policy(repo, policy_id)
    await repo.delete(policy)
    await repo.commit()
    logger.info("Policy deleted", policy_id=policy_id)
