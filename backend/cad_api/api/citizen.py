"""Citizen API routes."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.api.deps import get_cad, get_current_active_user, should_check_citizen_user_id
from cad_api.database import get_db
from cad_api.models.audit import AuditAction
from cad_api.models.cad import Cad
from cad_api.models.citizen import Citizen
from cad_api.models.user import User
from cad_api.schemas.citizen import CitizenCreate, CitizenResponse
from cad_api.services.audit import record_audit
from cad_api.utils.security import sanitize_string

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=List[CitizenResponse])
async def get_my_citizens(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Citizen)
        .where(Citizen.user_id == current_user.id)
        .order_by(Citizen.created_at.desc())
    )
    return [CitizenResponse.model_validate(c) for c in result.scalars().all()]


@router.post("", response_model=CitizenResponse, status_code=status.HTTP_201_CREATED)
async def create_citizen(
    data: CitizenCreate,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Create a citizen, honouring the per-user citizen limit."""
    max_citizens = cad.misc_settings.max_citizens_per_user if cad.misc_settings else None
    if max_citizens:
        count = await db.scalar(
            select(func.count(Citizen.id)).where(Citizen.user_id == current_user.id)
        )
        if (count or 0) >= max_citizens:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="maxCitizensReached",
            )

    citizen = Citizen(
        user_id=current_user.id,
        name=sanitize_string(data.name.strip(), max_length=255),
        surname=sanitize_string(data.surname.strip(), max_length=255),
        date_of_birth=data.date_of_birth,
    )
    db.add(citizen)
    await db.flush()

    record_audit(
        db, request, AuditAction.CITIZEN_CREATE,
        user=current_user,
        resource_type="citizen",
        resource_id=citizen.id,
    )
    logger.info("Citizen created", citizen_id=str(citizen.id), user_id=str(current_user.id))

    return CitizenResponse.model_validate(citizen)


@router.get("/{citizen_id}", response_model=CitizenResponse)
async def get_citizen(
    citizen_id: UUID,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Get a citizen. Other users' citizens are hidden unless cards are shared."""
    query = select(Citizen).where(Citizen.id == citizen_id)
    if should_check_citizen_user_id(cad, current_user):
        query = query.where(Citizen.user_id == current_user.id)

    result = await db.execute(query)
    citizen = result.scalar_one_or_none()
    if not citizen:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="citizenNotFound",
        )

    return CitizenResponse.model_validate(citizen)
