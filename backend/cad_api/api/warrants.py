"""Warrant API routes used by the courthouse and LEO pages."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.api.deps import get_cad, get_current_active_user, require_permissions
from cad_api.database import get_db
from cad_api.exceptions import ExtendedBadRequest
from cad_api.features import Feature, is_feature_enabled
from cad_api.models.audit import AuditAction
from cad_api.models.cad import Cad
from cad_api.models.citizen import Citizen
from cad_api.models.court import Warrant, WarrantStatus
from cad_api.models.leo import Officer
from cad_api.models.user import User
from cad_api.permissions import Permission
from cad_api.schemas.court import WarrantCreate, WarrantResponse
from cad_api.services.audit import record_audit
from cad_api.utils.security import clean_description

logger = structlog.get_logger()

router = APIRouter()

require_manage_warrants = require_permissions(
    [Permission.MANAGE_COURTHOUSE_WARRANTS, Permission.MANAGE_WARRANTS],
    fallback=lambda u: u.is_supervisor,
)
require_leo = require_permissions([Permission.LEO], fallback=lambda u: u.is_leo)


async def load_warrant(db: AsyncSession, warrant_id: UUID) -> Warrant:
    """Load a warrant with its citizen and officer."""
    result = await db.execute(
        select(Warrant)
        .where(Warrant.id == warrant_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def validate_warrant_refs(db: AsyncSession, data: WarrantCreate) -> None:
    """Ensure the citizen and optional officer referenced by a warrant exist."""
    if not await db.get(Citizen, data.citizen_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="citizenNotFound",
        )

    if data.officer_id and not await db.get(Officer, data.officer_id):
        raise ExtendedBadRequest({"officerId": "officerNotFound"})


@router.get("", response_model=List[WarrantResponse])
async def list_warrants(
    status_filter: Optional[WarrantStatus] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List warrants, newest first."""
    query = select(Warrant).order_by(Warrant.created_at.desc())
    if status_filter:
        query = query.where(Warrant.status == status_filter)

    result = await db.execute(query)
    return [WarrantResponse.model_validate(w) for w in result.scalars().all()]


@router.get("/active", response_model=List[WarrantResponse])
async def list_active_warrants(
    current_user: User = Depends(require_leo),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """List active warrants for LEO, when the feature is enabled."""
    if not is_feature_enabled(cad.features, Feature.ACTIVE_WARRANTS, default_return=True):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="featureNotEnabled",
        )

    result = await db.execute(
        select(Warrant)
        .where(Warrant.status == WarrantStatus.ACTIVE)
        .order_by(Warrant.created_at.desc())
    )
    return [WarrantResponse.model_validate(w) for w in result.scalars().all()]


@router.post("", response_model=WarrantResponse, status_code=status.HTTP_201_CREATED)
async def create_warrant(
    data: WarrantCreate,
    request: Request,
    current_user: User = Depends(require_manage_warrants),
    db: AsyncSession = Depends(get_db),
):
    """Create a warrant."""
    await validate_warrant_refs(db, data)

    warrant = Warrant(
        citizen_id=data.citizen_id,
        officer_id=data.officer_id,
        status=data.status,
        description=clean_description(data.description),
    )
    db.add(warrant)
    await db.flush()

    record_audit(
        db, request, AuditAction.WARRANT_CREATE,
        user=current_user,
        resource_type="warrant",
        resource_id=warrant.id,
    )
    logger.info("Warrant created", warrant_id=str(warrant.id), citizen_id=str(data.citizen_id))

    return WarrantResponse.model_validate(await load_warrant(db, warrant.id))


@router.put("/{warrant_id}", response_model=WarrantResponse)
async def update_warrant(
    warrant_id: UUID,
    data: WarrantCreate,
    request: Request,
    current_user: User = Depends(require_manage_warrants),
    db: AsyncSession = Depends(get_db),
):
    """Update a warrant."""
    warrant = await db.get(Warrant, warrant_id)
    if not warrant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="notFound",
        )

    await validate_warrant_refs(db, data)

    warrant.citizen_id = data.citizen_id
    warrant.officer_id = data.officer_id
    warrant.status = data.status
    warrant.description = clean_description(data.description)
    await db.flush()

    record_audit(
        db, request, AuditAction.WARRANT_UPDATE,
        user=current_user,
        resource_type="warrant",
        resource_id=warrant.id,
        details={"status": data.status.value},
    )

    return WarrantResponse.model_validate(await load_warrant(db, warrant.id))


@router.delete("/{warrant_id}")
async def delete_warrant(
    warrant_id: UUID,
    request: Request,
    current_user: User = Depends(require_manage_warrants),
    db: AsyncSession = Depends(get_db),
) -> bool:
    """Delete a warrant."""
    warrant = await db.get(Warrant, warrant_id)
    if not warrant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="notFound",
        )

    await db.delete(warrant)
    await db.flush()

    record_audit(
        db, request, AuditAction.WARRANT_DELETE,
        user=current_user,
        resource_type="warrant",
        resource_id=warrant_id,
    )
    logger.info("Warrant deleted", warrant_id=str(warrant_id), user_id=str(current_user.id))

    return True
