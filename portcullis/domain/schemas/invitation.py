"""Pydantic schemas for invitations."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from portcullis.domain.models.invitation import Invitation
from portcullis.domain.schemas.user import EmailAddress


class InvitationCreate(BaseModel):
    email: EmailAddress
    phone_number: Optional[str] = Field(default=None, max_length=20)
    role_id: int
    expiry_days: Optional[int] = Field(default=None, ge=1, le=90)


class InvitationRead(BaseModel):
    id: int
    email: str
    phone_number: Optional[str] = None
    role_id: int
    role_name: Optional[str] = None
    invited_by_name: Optional[str] = None
    is_used: bool
    expires_at: datetime
    created_at: Optional[datetime] = None
    used_at: Optional[datetime] = None

    @classmethod
    def from_invitation(cls, invitation: Invitation) -> "InvitationRead":
        return cls(
            id=invitation.id,
            email=invitation.email,
            phone_number=invitation.phone_number,
            role_id=invitation.role_id,
            role_name=invitation.role.name if invitation.role else None,
            invited_by_name=invitation.invited_by.full_name if invitation.invited_by else None,
            is_used=invitation.is_used,
            expires_at=invitation.expires_at,
            created_at=invitation.created_at,
            used_at=invitation.used_at,
        )


class InvitationCheck(BaseModel):
    is_invited: bool
    is_expired: bool
    role_name: Optional[str] = None
    expires_at: Optional[datetime] = None
