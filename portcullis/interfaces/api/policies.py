"""Policy API routes: public reads of the active documents, Super Admin management."""

from typing import List

from fastapi import APIRouter, Depends, status

from portcullis.application.services import policy_service
from portcullis.application.services.token_service import Principal
from portcullis.core.exceptions import EntityNotFoundException
from portcullis.domain.repositories.policy_repository import PolicyRepository
from portcullis.domain.schemas.policy import PolicyCreate, PolicyRead, PolicyUpdate
from portcullis.interfaces.api.deps import require_super_admin
from portcullis.interfaces.deps import get_policy_repository

router = APIRouter(prefix="/api/policies", tags=["Policies"])


async def _active(repo: PolicyRepository, policy_type: str):
    policy = await policy_service.get_active_policy(repo, policy_type)
    if policy is None:
        raise EntityNotFoundException(f"No active '{policy_type}' policy")
    return policy


@router.get("/terms", response_model=PolicyRead)
async def get_terms(repo: PolicyRepository = Depends(get_policy_repository)):
    return await _active(repo, "terms")


@router.get("/privacy", response_model=PolicyRead)
async def get_privacy(repo: PolicyRepository = Depends(get_policy_repository)):
    return await _active(repo, "privacy")


@router.get("/type/{policy_type}", response_model=PolicyRead)
async def get_by_type(policy_type: str, repo: PolicyRepository = Depends(get_policy_repository)):
    return await _active(repo, policy_type)


@router.get("", response_model=List[PolicyRead])
async def list_policies(
    skip: int = 0,
    limit: int = 100,
    principal: Principal = Depends(require_super_admin),
    repo: PolicyRepository = Depends(get_policy_repository),
):
    return await policy_service.list_policies(repo, skip=skip, limit=limit)


@router.post("", response_model=PolicyRead, status_code=status.HTTP_201_CREATED)
async def create_policy(
    body: PolicyCreate,
    principal: Principal = Depends(require_super_admin),
    repo: PolicyRepository = Depends(get_policy_repository),
):
    return await policy_service.create_policy(repo, body)


@router.put("/{policy_id}", response_model=PolicyRead)
async def update_policy(
    policy_id: int,
    body: PolicyUpdate,
    principal: Principal = Depends(require_super_admin),
    repo: PolicyRepository = Depends(get_policy_repository),
):
    return await policy_service.update_policy(repo, policy_id, body)


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_policy(
    policy_id: int,
    principal: Principal = Depends(require_super_admin),
    repo: PolicyRepository = Depends(get_policy_repository),
):
    await policy_service.delete_policy(repo, policy_id)
