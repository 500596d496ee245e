"""Pydantic schemas for policy documents."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PolicyCreate(BaseModel):
    type: str = Field(min_length=1, max_length=50)
    content: str = Field(min_length=1)
    version: str = Field(default="1.0", max_length=20)


class PolicyUpdate(BaseModel):
    content: str = Field(min_length=1)
    version: str = Field(min_length=1, max_length=20)


class PolicyRead(BaseModel):
    id: int
    type: str
    content: str
    version: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
