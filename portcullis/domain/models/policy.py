"""Versioned legal documents (terms, privacy, ...)."""

from sqlalchemy import Boolean, Column, Integer, String, Text

from portcullis.domain.models.base import TimestampedRecord
from portcullis.infrastructure.database import Base


class Policy(TimestampedRecord, Base):
    __tablename__ = "policies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(50), nullable=False, index=True)
    content = Column(Text, nullable=False)
    version = Column(String(20), nullable=False, default="1.0")
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Policy {self.type} v{self.version}>"
