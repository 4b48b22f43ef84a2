"""Courthouse models: name-change requests and warrants."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base


class WhitelistStatus(str, Enum):
    """Review status of a request."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class WarrantStatus(str, Enum):
    """Whether a warrant is currently in force."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class NameChangeRequest(Base):
    """A citizen's request to change their legal name."""

    __tablename__ = "name_change_requests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    citizen_id = Column(Uuid(as_uuid=True), ForeignKey("citizens.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    new_name = Column(String(255), nullable=False)
    new_surname = Column(String(255), nullable=False)
    status = Column(SQLEnum(WhitelistStatus), default=WhitelistStatus.PENDING, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    citizen = relationship("Citizen", lazy="joined")

    def __repr__(self) -> str:
        return f"<NameChangeRequest {self.new_name} {self.new_surname} ({self.status})>"


class Warrant(Base):
    """An arrest warrant issued against a citizen."""

    __tablename__ = "warrants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    citizen_id = Column(Uuid(as_uuid=True), ForeignKey("citizens.id"), nullable=False, index=True)
    officer_id = Column(Uuid(as_uuid=True), ForeignKey("officers.id"), nullable=True)

    description = Column(Text, nullable=False)
    status = Column(SQLEnum(WarrantStatus), default=WarrantStatus.ACTIVE, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    citizen = relationship("Citizen", lazy="joined")
    officer = relationship("Officer", lazy="joined")

    def __repr__(self) -> str:
        return f"<Warrant {self.citizen_id} ({self.status})>"
