"""Invitation ledger: persisted offers to join with a predetermined role."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from portcullis.core.timeutils import ensure_utc, utcnow
from portcullis.domain.models.base import CreatedRecord
from portcullis.infrastructure.database import Base


class Invitation(CreatedRecord, Base):
    __tablename__ = "invitations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(20), nullable=True)
    invited_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)

    role = relationship("Role", lazy="selectin")
    invited_by = relationship("User", lazy="selectin")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return ensure_utc(self.expires_at) <= (now or utcnow())

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return not self.is_used and not self.is_expired(now)

    def __repr__(self):
        return f"<Invitation {self.email} role={self.role_id} used={self.is_used}>"


@dataclass(frozen=True)
class BootstrapInvitation:
    """In-memory grant for the very first account; never persisted or marked used."""

    role_id: int
    expires_at: datetime
    email: Optional[str] = None
    phone_number: Optional[str] = None
    id: int = 0


SignupInvitation = Union[Invitation, BootstrapInvitation]
