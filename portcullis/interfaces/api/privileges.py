"""Privilege API routes. Super Admin only."""

from typing import List

from fastapi import APIRouter, Depends, status

from portcullis.application.services import privilege_service
from portcullis.domain.repositories.role_repository import PrivilegeRepository
from portcullis.domain.schemas.role import PrivilegeCreate, PrivilegeRead, PrivilegeUpdate
from portcullis.interfaces.api.deps import require_super_admin
from portcullis.interfaces.deps import get_privilege_repository

router = APIRouter(prefix="/api/privileges", tags=["Privileges"], dependencies=[Depends(require_super_admin)])


@router.get("", response_model=List[PrivilegeRead])
async def list_privileges(
    skip: int = 0,
    limit: int = 100,
    repo: PrivilegeRepository = Depends(get_privilege_repository),
):
    return await privilege_service.list_privileges(repo, skip=skip, limit=limit)


@router.get("/{privilege_id}", response_model=PrivilegeRead)
async def get_privilege(privilege_id: int, repo: PrivilegeRepository = Depends(get_privilege_repository)):
    return await privilege_service.get_privilege(repo, privilege_id)


@router.post("", response_model=PrivilegeRead, status_code=status.HTTP_201_CREATED)
async def create_privilege(body: PrivilegeCreate, repo: PrivilegeRepository = Depends(get_privilege_repository)):
    return await privilege_service.create_privilege(repo, body)


@router.put("/{privilege_id}", response_model=PrivilegeRead)
async def update_privilege(
    privilege_id: int,
    body: PrivilegeUpdate,
    repo: PrivilegeRepository = Depends(get_privilege_repository),
):
    return await privilege_service.update_privilege(repo, privilege_id, body)


@router.delete("/{privilege_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_privilege(privilege_id: int, repo: PrivilegeRepository = Depends(get_privilege_repository)):
    await privilege_service.delete_privilege(repo, privilege_id)
