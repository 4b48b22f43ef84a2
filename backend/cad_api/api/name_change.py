"""Name change request API routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.api.deps import get_current_active_user
from cad_api.database import get_db
from cad_api.exceptions import ExtendedBadRequest
from cad_api.models.audit import AuditAction
from cad_api.models.citizen import Citizen
from cad_api.models.court import NameChangeRequest, WhitelistStatus
from cad_api.models.user import User
from cad_api.schemas.court import NameChangeRequestCreate, NameChangeRequestResponse
from cad_api.services.audit import record_audit

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=List[NameChangeRequestResponse])
async def get_user_requests(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List the user's name change requests, newest first."""
    result = await db.execute(
        select(NameChangeRequest)
        .where(NameChangeRequest.user_id == current_user.id)
        .order_by(NameChangeRequest.created_at.desc())
    )
    return [NameChangeRequestResponse.model_validate(r) for r in result.scalars().all()]


@router.post("", response_model=NameChangeRequestResponse, status_code=status.HTTP_201_CREATED)
async def request_name_change(
    data: NameChangeRequestCreate,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Request a new name for one of the user's citizens."""
    citizen_result = await db.execute(
        select(Citizen)
        .where(Citizen.id == data.citizen_id)
        .where(Citizen.user_id == current_user.id)
    )
    citizen = citizen_result.scalar_one_or_none()

    if not citizen:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="citizenNotFound",
        )

    new_full_name = f"{data.new_name} {data.new_surname}"
    if citizen.full_name == new_full_name:
        raise ExtendedBadRequest({"citizenId": "nameChangeRequestNotNew"})

    existing_result = await db.execute(
        select(NameChangeRequest.id)
        .where(NameChangeRequest.citizen_id == data.citizen_id)
        .where(NameChangeRequest.user_id == current_user.id)
        .where(NameChangeRequest.status == WhitelistStatus.PENDING)
        .limit(1)
    )
    if existing_result.first():
        raise ExtendedBadRequest({"citizenId": "alreadyPendingNameChange"})

    name_change = NameChangeRequest(
        citizen_id=citizen.id,
        user_id=current_user.id,
        new_name=data.new_name,
        new_surname=data.new_surname,
    )
    db.add(name_change)
    await db.flush()

    # Reload with the citizen attached
    result = await db.execute(
        select(NameChangeRequest)
        .where(NameChangeRequest.id == name_change.id)
        .execution_options(populate_existing=True)
    )
    name_change = result.scalar_one()

    record_audit(
        db, request, AuditAction.NAME_CHANGE_REQUEST,
        user=current_user,
        resource_type="name_change_request",
        resource_id=name_change.id,
        details={"newName": data.new_name, "newSurname": data.new_surname},
    )
    logger.info(
        "Name change requested",
        request_id=str(name_change.id),
        citizen_id=str(citizen.id),
    )

    return NameChangeRequestResponse.model_validate(name_change)
