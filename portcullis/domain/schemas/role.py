"""Pydantic schemas for roles, privileges and their hierarchy."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(default="", max_length=200)


class RoleUpdate(RoleCreate):
    pass


class RoleRead(BaseModel):
    id: int
    name: str
    description: str
    parent_role_id: Optional[int] = None
    hierarchy_level: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RoleHierarchyRequest(BaseModel):
    role_id: int
    parent_role_id: Optional[int] = None
    hierarchy_level: int = Field(ge=0)


class PrivilegeCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    description: str = Field(default="", max_length=200)
    category: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class PrivilegeUpdate(PrivilegeCreate):
    pass


class PrivilegeRead(BaseModel):
    id: int
    name: str
    description: str
    category: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssignPrivilegesRequest(BaseModel):
    privilege_ids: list[int]
