"""Pydantic schemas for User management."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field, StringConstraints

from portcullis.core.security import normalize_email

# stored and compared lowercase
EmailAddress = Annotated[EmailStr, AfterValidator(normalize_email)]
PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class RoleSummary(BaseModel):
    id: int
    name: str
    description: str = ""

    model_config = {"from_attributes": True}


class UserRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None
    is_active: bool
    is_super_admin: bool
    role: RoleSummary
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserListItem(BaseModel):
    id: int
    full_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    is_active: bool
    role_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    first_name: PersonName
    last_name: PersonName
    email: EmailAddress
    phone_number: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(min_length=6, max_length=100)
    role_id: int


class UserUpdate(BaseModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    email: Optional[EmailAddress] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    role_id: Optional[int] = None
    is_active: Optional[bool] = None


class AssignRoleRequest(BaseModel):
    role_id: int


class UpdateStatusRequest(BaseModel):
    is_active: bool
