"""Audit logging model."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, JSON, String, Text, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base


class AuditAction(str, Enum):
    """Types of auditable actions."""
    REGISTER = "register"
    LOGIN = "login"
    LOGOUT = "logout"
    CITIZEN_CREATE = "citizen_create"
    OFFICER_CREATE = "officer_create"
    OFFICER_STATUS_UPDATE = "officer_status_update"
    VALUE_CREATE = "value_create"
    WEAPON_REGISTER = "weapon_register"
    WEAPON_UPDATE = "weapon_update"
    WEAPON_DELETE = "weapon_delete"
    NAME_CHANGE_REQUEST = "name_change_request"
    NAME_CHANGE_ACCEPT = "name_change_accept"
    NAME_CHANGE_DECLINE = "name_change_decline"
    WARRANT_CREATE = "warrant_create"
    WARRANT_UPDATE = "warrant_update"
    WARRANT_DELETE = "warrant_delete"
    CAD_SETTINGS_UPDATE = "cad_settings_update"


class AuditLog(Base):
    """Audit log for tracking user actions."""

    __tablename__ = "audit_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)

    # Action details
    action = Column(SQLEnum(AuditAction), nullable=False)
    resource_type = Column(String(100), nullable=True)  # "weapon", "warrant", etc.
    resource_id = Column(Uuid(as_uuid=True), nullable=True)

    # Request info
    ip_address = Column(String(50), nullable=True)
    endpoint = Column(String(255), nullable=True)
    method = Column(String(10), nullable=True)

    description = Column(Text, nullable=True)
    details = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="audit_logs")

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} by {self.user_id}>"
