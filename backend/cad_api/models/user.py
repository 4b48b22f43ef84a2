"""User model for authentication and permissions."""
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, Integer, JSON, String, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base


class UserRank(str, Enum):
    """Global rank of a user within the CAD."""
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Authorization
    rank = Column(SQLEnum(UserRank), default=UserRank.USER, nullable=False)
    permissions = Column(JSON, default=list, nullable=False)  # list of Permission values

    # Legacy role flags, consulted when no permissions are assigned
    is_leo = Column(Boolean, default=False, nullable=False)
    is_dispatch = Column(Boolean, default=False, nullable=False)
    is_ems_fd = Column(Boolean, default=False, nullable=False)
    is_supervisor = Column(Boolean, default=False, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    # Incremented on logout to invalidate issued tokens
    token_version = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    citizens = relationship("Citizen", back_populates="user", lazy="raise")
    officers = relationship("Officer", back_populates="user", lazy="raise")
    audit_logs = relationship("AuditLog", back_populates="user", lazy="raise")

    def __repr__(self) -> str:
        return f"<User {self.username}>"

    def invalidate_all_tokens(self):
        """Increment token version to invalidate all existing tokens."""
        self.token_version = (self.token_version or 0) + 1
