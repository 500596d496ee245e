"""Role, Privilege and the role-privilege join: the authorization graph."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from portcullis.core.timeutils import utcnow
from portcullis.domain.models.base import CreatedRecord
from portcullis.infrastructure.database import Base


class Role(CreatedRecord, Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(200), nullable=False, default="")
    parent_role_id = Column(Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=True)
    hierarchy_level = Column(Integer, nullable=False, default=0)  # 0 = most privileged

    def __repr__(self):
        return f"<Role {self.name}>"


class Privilege(CreatedRecord, Base):
    __tablename__ = "privileges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(200), nullable=False, default="")
    category = Column(String(50), nullable=False)

    def __repr__(self):
        return f"<Privilege {self.name}>"


class RolePrivilege(Base):
    __tablename__ = "role_privileges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    privilege_id = Column(Integer, ForeignKey("privileges.id", ondelete="CASCADE"), nullable=False)
    assigned_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    privilege = relationship("Privilege", lazy="selectin")

    __table_args__ = (UniqueConstraint("role_id", "privilege_id", name="uq_role_privilege"),)
