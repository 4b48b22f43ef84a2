"""Audit trail recording."""
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from cad_api.models.audit import AuditAction, AuditLog
from cad_api.models.user import User


def record_audit(
    db: AsyncSession,
    request: Request,
    action: AuditAction,
    user: Optional[User] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[UUID] = None,
    description: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Add an audit log entry to the session; it is written with the request's commit."""
    audit_log = AuditLog(
        user_id=user.id if user else None,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        ip_address=request.client.host if request.client else None,
        endpoint=str(request.url.path),
        method=request.method,
        description=description,
        details=details,
    )
    db.add(audit_log)
    return audit_log
