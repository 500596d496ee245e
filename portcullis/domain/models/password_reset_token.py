"""One-time numeric password reset codes."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from portcullis.core.timeutils import ensure_utc, utcnow
from portcullis.domain.models.base import CreatedRecord
from portcullis.infrastructure.database import Base


class PasswordResetToken(CreatedRecord, Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    token = Column(String(6), nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    used_at = Column(DateTime(timezone=True), nullable=True)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return ensure_utc(self.expires_at) <= (now or utcnow())

    def __repr__(self):
        return f"<PasswordResetToken {self.email} used={self.is_used}>"
