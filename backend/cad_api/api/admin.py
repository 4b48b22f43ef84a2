"""Admin API routes: lookup values, name change review and CAD settings."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.api.deps import get_cad, get_current_active_user, require_permissions
from cad_api.database import get_db
from cad_api.exceptions import ExtendedBadRequest
from cad_api.features import get_enabled_features
from cad_api.models.audit import AuditAction
from cad_api.models.cad import Cad
from cad_api.models.citizen import Citizen
from cad_api.models.court import NameChangeRequest, WhitelistStatus
from cad_api.models.user import User, UserRank
from cad_api.models.value import ShouldDoType, StatusValue, Value, ValueType
from cad_api.permissions import Permission, is_admin
from cad_api.schemas.court import NameChangeRequestResponse, NameChangeRequestReview
from cad_api.schemas.value import (
    CadFeatureUpdate,
    CadSettingsResponse,
    CreatedValueResponse,
    MiscSettingsResponse,
    MiscSettingsUpdate,
    StatusValueResponse,
    ValueCreate,
    ValueResponse,
)
from cad_api.services.audit import record_audit
from cad_api.services.cad import CadService

logger = structlog.get_logger()

router = APIRouter()

require_manage_values = require_permissions([Permission.MANAGE_VALUES], fallback=is_admin)
require_manage_name_changes = require_permissions(
    [Permission.MANAGE_NAME_CHANGE_REQUESTS],
    fallback=is_admin,
)
require_manage_cad_settings = require_permissions(
    [Permission.MANAGE_CAD_SETTINGS],
    fallback=lambda u: u.rank == UserRank.OWNER,
)


def cad_settings_response(cad: Cad) -> CadSettingsResponse:
    return CadSettingsResponse(
        id=cad.id,
        name=cad.name,
        features=get_enabled_features(cad.features),
        misc_settings=MiscSettingsResponse.model_validate(cad.misc_settings),
    )


# ==================== Values ====================

@router.get("/values/{value_type}", response_model=List[ValueResponse])
async def get_values(
    value_type: ValueType,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List default values of a type in display order."""
    result = await db.execute(
        select(Value)
        .where(Value.type == value_type)
        .where(Value.is_default.is_(True))
        .order_by(Value.position.asc(), Value.created_at.asc())
    )
    return [ValueResponse.model_validate(v) for v in result.scalars().all()]


@router.post("/values/{value_type}", response_model=CreatedValueResponse, status_code=status.HTTP_201_CREATED)
async def create_value(
    value_type: ValueType,
    data: ValueCreate,
    request: Request,
    current_user: User = Depends(require_manage_values),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a lookup value.

    10-codes also get a status value describing what selecting them does.
    """
    text = data.value.strip()
    if not text:
        raise ExtendedBadRequest({"value": "required"})

    position = await db.scalar(select(func.count(Value.id)).where(Value.type == value_type))

    value = Value(type=value_type, value=text, is_default=True, position=position or 0)
    db.add(value)
    await db.flush()

    status_value = None
    if value_type == ValueType.CODES_10:
        status_value = StatusValue(
            value_id=value.id,
            should_do=data.should_do or ShouldDoType.SET_STATUS,
            color=data.color,
        )
        db.add(status_value)
        await db.flush()

        result = await db.execute(
            select(StatusValue)
            .where(StatusValue.id == status_value.id)
            .execution_options(populate_existing=True)
        )
        status_value = result.scalar_one()

    record_audit(
        db, request, AuditAction.VALUE_CREATE,
        user=current_user,
        resource_type="value",
        resource_id=value.id,
        details={"type": value_type.value},
    )
    logger.info("Value created", value_id=str(value.id), type=value_type.value)

    return CreatedValueResponse(
        value=ValueResponse.model_validate(value),
        status=StatusValueResponse.model_validate(status_value) if status_value else None,
    )


@router.get("/status-values", response_model=List[StatusValueResponse])
async def get_status_values(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List the 10-code statuses units can be set to."""
    result = await db.execute(
        select(StatusValue)
        .join(Value, StatusValue.value_id == Value.id)
        .order_by(Value.position.asc(), Value.created_at.asc())
    )
    return [StatusValueResponse.model_validate(s) for s in result.scalars().all()]


# ==================== Name change review ====================

@router.get("/name-change-requests", response_model=List[NameChangeRequestResponse])
async def get_pending_name_changes(
    current_user: User = Depends(require_manage_name_changes),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(NameChangeRequest)
        .where(NameChangeRequest.status == WhitelistStatus.PENDING)
        .order_by(NameChangeRequest.created_at.asc())
    )
    return [NameChangeRequestResponse.model_validate(r) for r in result.scalars().all()]


@router.put("/name-change-requests/{request_id}", response_model=NameChangeRequestResponse)
async def review_name_change(
    request_id: UUID,
    data: NameChangeRequestReview,
    request: Request,
    current_user: User = Depends(require_manage_name_changes),
    db: AsyncSession = Depends(get_db),
):
    """Accept or decline a pending name change. Accepting renames the citizen."""
    name_change = await db.get(NameChangeRequest, request_id)
    if not name_change:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="notFound",
        )

    if name_change.status != WhitelistStatus.PENDING:
        raise ExtendedBadRequest({"type": "requestAlreadyHandled"})

    name_change.status = data.type

    if data.type == WhitelistStatus.ACCEPTED:
        citizen = await db.get(Citizen, name_change.citizen_id)
        citizen.name = name_change.new_name
        citizen.surname = name_change.new_surname

    await db.flush()

    result = await db.execute(
        select(NameChangeRequest)
        .where(NameChangeRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    name_change = result.scalar_one()

    action = (
        AuditAction.NAME_CHANGE_ACCEPT
        if data.type == WhitelistStatus.ACCEPTED
        else AuditAction.NAME_CHANGE_DECLINE
    )
    record_audit(
        db, request, action,
        user=current_user,
        resource_type="name_change_request",
        resource_id=name_change.id,
    )
    logger.info(
        "Name change reviewed",
        request_id=str(name_change.id),
        status=data.type.value,
        reviewer_id=str(current_user.id),
    )

    return NameChangeRequestResponse.model_validate(name_change)


# ==================== CAD settings ====================

@router.get("/cad-settings", response_model=CadSettingsResponse)
async def get_cad_settings(
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
):
    return cad_settings_response(cad)


@router.put("/cad-settings/features", response_model=CadSettingsResponse)
async def update_cad_feature(
    data: CadFeatureUpdate,
    request: Request,
    current_user: User = Depends(require_manage_cad_settings),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Enable or disable a feature."""
    cad = await CadService.set_feature(db, cad, data.feature, data.is_enabled)

    record_audit(
        db, request, AuditAction.CAD_SETTINGS_UPDATE,
        user=current_user,
        resource_type="cad",
        resource_id=cad.id,
        details={"feature": data.feature.value, "isEnabled": data.is_enabled},
    )

    return cad_settings_response(cad)


@router.put("/cad-settings/misc", response_model=CadSettingsResponse)
async def update_misc_settings(
    data: MiscSettingsUpdate,
    request: Request,
    current_user: User = Depends(require_manage_cad_settings),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    cad = await CadService.update_misc_settings(
        db,
        cad,
        unit_inactivity_timeout=data.unit_inactivity_timeout,
        max_citizens_per_user=data.max_citizens_per_user,
    )

    record_audit(
        db, request, AuditAction.CAD_SETTINGS_UPDATE,
        user=current_user,
        resource_type="cad",
        resource_id=cad.id,
        details=data.model_dump(by_alias=True),
    )

    return cad_settings_response(cad)
