"""User domain model: maps to the 'users' table."""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from portcullis.domain.models.base import TimestampedRecord
from portcullis.infrastructure.database import Base


class User(TimestampedRecord, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone_number = Column(String(20), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=False)
    profile_picture = Column(String(500), nullable=True)
    is_super_admin = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False, index=True)

    role = relationship("Role", lazy="selectin")

    __table_args__ = (
        CheckConstraint("email IS NOT NULL OR phone_number IS NOT NULL", name="ck_users_contact"),
        # Only the bootstrap path sets is_super_admin; two racing first signups cannot both win
        Index(
            "uq_users_bootstrap_super_admin",
            "is_super_admin",
            unique=True,
            sqlite_where=text("is_super_admin = 1"),
            postgresql_where=text("is_super_admin"),
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None

    def __repr__(self):
        return f"<User {self.email or self.phone_number}>"
