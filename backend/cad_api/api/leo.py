"""LEO API routes: officers, status changes and the officer dashboard."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.api.deps import get_cad, get_current_active_user, require_permissions
from cad_api.config import settings
from cad_api.database import get_db
from cad_api.exceptions import ExtendedBadRequest
from cad_api.models.audit import AuditAction
from cad_api.models.cad import Cad
from cad_api.models.citizen import Citizen
from cad_api.models.leo import Officer
from cad_api.models.user import User
from cad_api.models.value import StatusValue
from cad_api.permissions import Permission
from cad_api.schemas.leo import (
    ActiveOfficersResponse,
    ActiveUnitResponse,
    MyOfficersResponse,
    OfficerCreate,
    OfficerDashboardResponse,
    OfficerResponse,
    OfficerStatusUpdate,
)
from cad_api.services.active_officer import get_active_officer, get_active_officers
from cad_api.services.audit import record_audit
from cad_api.services.dashboard import (
    build_officer_dashboard,
    get_user_officers,
    serialize_active_unit,
)

logger = structlog.get_logger()

router = APIRouter()

require_leo = require_permissions([Permission.LEO], fallback=lambda u: u.is_leo)
require_leo_or_dispatch = require_permissions(
    [Permission.LEO, Permission.DISPATCH],
    fallback=lambda u: u.is_leo or u.is_dispatch,
)


async def load_officer(db: AsyncSession, officer_id: UUID) -> Officer:
    result = await db.execute(
        select(Officer)
        .where(Officer.id == officer_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("", response_model=MyOfficersResponse)
async def get_my_officers(
    current_user: User = Depends(require_leo),
    db: AsyncSession = Depends(get_db),
):
    """List the officers owned by the user."""
    officers = await get_user_officers(db, current_user)
    return MyOfficersResponse(officers=[OfficerResponse.model_validate(o) for o in officers])


@router.post("", response_model=OfficerResponse, status_code=status.HTTP_201_CREATED)
async def create_officer(
    data: OfficerCreate,
    request: Request,
    current_user: User = Depends(require_leo),
    db: AsyncSession = Depends(get_db),
):
    """Create an officer played through one of the user's citizens."""
    citizen_result = await db.execute(
        select(Citizen)
        .where(Citizen.id == data.citizen_id)
        .where(Citizen.user_id == current_user.id)
    )
    if not citizen_result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="citizenNotFound",
        )

    officer = Officer(
        user_id=current_user.id,
        citizen_id=data.citizen_id,
        callsign=data.callsign,
        callsign2=data.callsign2,
        badge_number=data.badge_number,
    )
    db.add(officer)
    await db.flush()

    record_audit(
        db, request, AuditAction.OFFICER_CREATE,
        user=current_user,
        resource_type="officer",
        resource_id=officer.id,
    )
    logger.info("Officer created", officer_id=str(officer.id), user_id=str(current_user.id))

    return OfficerResponse.model_validate(await load_officer(db, officer.id))


@router.put("/{officer_id}/status", response_model=OfficerResponse)
async def update_officer_status(
    officer_id: UUID,
    data: OfficerStatusUpdate,
    request: Request,
    current_user: User = Depends(require_leo),
    db: AsyncSession = Depends(get_db),
):
    """Set an officer's status, e.g. going on or off duty."""
    officer = await db.get(Officer, officer_id)
    if not officer or officer.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="notFound",
        )

    status_value = await db.get(StatusValue, data.status_id)
    if not status_value:
        raise ExtendedBadRequest({"statusId": "invalidStatus"})

    officer.status_id = status_value.id
    officer.last_status_change_timestamp = datetime.utcnow()
    await db.flush()

    record_audit(
        db, request, AuditAction.OFFICER_STATUS_UPDATE,
        user=current_user,
        resource_type="officer",
        resource_id=officer.id,
        details={"shouldDo": status_value.should_do.value},
    )
    logger.info(
        "Officer status updated",
        officer_id=str(officer.id),
        should_do=status_value.should_do.value,
    )

    return OfficerResponse.model_validate(await load_officer(db, officer.id))


@router.get("/active-officer", response_model=Optional[ActiveUnitResponse])
async def get_my_active_officer(
    request: Request,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """The unit the user is on duty as; null for dispatchers."""
    unit = await get_active_officer(request.headers, current_user, db, cad)
    return serialize_active_unit(unit)


@router.get("/active-officers", response_model=ActiveOfficersResponse)
async def list_active_officers(
    skip: int = Query(0, ge=0),
    current_user: User = Depends(require_leo_or_dispatch),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Page through the officers currently on duty."""
    total_count, officers = await get_active_officers(
        db, cad, skip=skip, limit=settings.OFFICERS_PER_PAGE
    )
    return ActiveOfficersResponse(
        total_count=total_count,
        officers=[OfficerResponse.model_validate(o) for o in officers],
    )


@router.get("/dashboard", response_model=OfficerDashboardResponse)
async def get_officer_dashboard(
    request: Request,
    current_user: User = Depends(require_leo),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Initial data for the officer dashboard."""
    return await build_officer_dashboard(request.headers, current_user, db, cad)
