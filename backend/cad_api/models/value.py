"""Admin-managed lookup values (weapon models, license statuses, 10-codes)."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base


class ValueType(str, Enum):
    """Kinds of lookup values."""
    WEAPON = "WEAPON"
    LICENSE = "LICENSE"
    CODES_10 = "CODES_10"


class ShouldDoType(str, Enum):
    """What selecting a status does to the unit."""
    SET_ON_DUTY = "SET_ON_DUTY"
    SET_OFF_DUTY = "SET_OFF_DUTY"
    SET_STATUS = "SET_STATUS"
    PANIC_BUTTON = "PANIC_BUTTON"


class Value(Base):
    """A lookup value."""

    __tablename__ = "cad_values"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(SQLEnum(ValueType), nullable=False, index=True)
    value = Column(String(255), nullable=False)
    is_default = Column(Boolean, default=True, nullable=False)  # False for user-typed custom values
    position = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Value {self.type}:{self.value}>"


class StatusValue(Base):
    """A 10-code status a unit can be set to."""

    __tablename__ = "status_values"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    value_id = Column(Uuid(as_uuid=True), ForeignKey("cad_values.id"), nullable=False)
    should_do = Column(SQLEnum(ShouldDoType), default=ShouldDoType.SET_STATUS, nullable=False)
    color = Column(String(20), nullable=True)

    value = relationship("Value", lazy="joined")

    def __repr__(self) -> str:
        return f"<StatusValue {self.should_do}>"
