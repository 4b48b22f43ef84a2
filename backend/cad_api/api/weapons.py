"""Weapon registry API routes."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
import structlog

from cad_api.api.deps import (
    can_manage_invariant,
    get_cad,
    get_current_active_user,
    should_check_citizen_user_id,
)
from cad_api.config import settings
from cad_api.database import get_db
from cad_api.exceptions import ExtendedBadRequest
from cad_api.features import Feature, is_feature_enabled
from cad_api.models.audit import AuditAction
from cad_api.models.cad import Cad
from cad_api.models.citizen import Citizen, Weapon
from cad_api.models.user import User
from cad_api.models.value import Value, ValueType
from cad_api.schemas.citizen import WeaponCreate, WeaponListResponse, WeaponResponse
from cad_api.services.audit import record_audit
from cad_api.services.serial_numbers import generate_or_validate_serial_number

logger = structlog.get_logger()

router = APIRouter()

INVALID_MODEL_MESSAGE = "Invalid weapon model. Please re-enter the weapon model."


async def get_value_by_id(db: AsyncSession, raw_id: str, value_type: ValueType) -> Optional[Value]:
    """Look up a value of the given type by its id, tolerating malformed ids."""
    try:
        value_id = UUID(str(raw_id))
    except ValueError:
        return None

    result = await db.execute(
        select(Value).where(Value.id == value_id).where(Value.type == value_type)
    )
    return result.scalar_one_or_none()


async def find_or_create_custom_model(db: AsyncSession, text: str) -> Value:
    """Reuse a weapon value with the same text, ignoring case, or create one."""
    result = await db.execute(
        select(Value)
        .where(Value.type == ValueType.WEAPON)
        .where(func.lower(Value.value) == text.lower())
        .limit(1)
    )
    existing = result.scalars().first()
    if existing:
        return existing
    return await create_custom_model(db, text)


async def create_custom_model(db: AsyncSession, text: str) -> Value:
    model = Value(type=ValueType.WEAPON, value=text, is_default=False)
    db.add(model)
    await db.flush()
    return model


async def load_weapon(db: AsyncSession, weapon_id: UUID) -> Weapon:
    """Load a weapon with its model, registration status and citizen."""
    result = await db.execute(
        select(Weapon)
        .where(Weapon.id == weapon_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("/{citizen_id}", response_model=WeaponListResponse)
async def get_citizen_weapons(
    citizen_id: UUID,
    skip: int = Query(0, ge=0),
    query: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """List a citizen's registered weapons, newest first."""
    citizen_query = select(Citizen).where(Citizen.id == citizen_id)
    if should_check_citizen_user_id(cad, current_user):
        citizen_query = citizen_query.where(Citizen.user_id == current_user.id)

    citizen_result = await db.execute(citizen_query)
    if not citizen_result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="citizenNotFound",
        )

    model_value = aliased(Value)
    status_value = aliased(Value)
    filters = [Weapon.citizen_id == citizen_id]

    if query:
        search_pattern = f"%{query}%"
        filters.append(
            or_(
                model_value.value.ilike(search_pattern),
                status_value.value.ilike(search_pattern),
                Weapon.serial_number.ilike(search_pattern),
            )
        )

    total_count = await db.scalar(
        select(func.count(Weapon.id))
        .select_from(Weapon)
        .join(model_value, Weapon.model_id == model_value.id)
        .join(status_value, Weapon.registration_status_id == status_value.id)
        .where(*filters)
    )

    result = await db.execute(
        select(Weapon)
        .join(model_value, Weapon.model_id == model_value.id)
        .join(status_value, Weapon.registration_status_id == status_value.id)
        .where(*filters)
        .order_by(Weapon.created_at.desc())
        .offset(skip)
        .limit(settings.WEAPONS_PER_PAGE)
    )
    weapons = result.scalars().all()

    return WeaponListResponse(
        total_count=total_count or 0,
        weapons=[WeaponResponse.model_validate(w) for w in weapons],
    )


@router.post("", response_model=WeaponResponse, status_code=status.HTTP_201_CREATED)
async def register_weapon(
    data: WeaponCreate,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Register a new weapon."""
    citizen = await db.get(Citizen, data.citizen_id)

    if should_check_citizen_user_id(cad, current_user):
        can_manage_invariant(
            citizen.user_id if citizen else None,
            current_user,
            HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notFound"),
        )
    elif not citizen:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notFound")

    is_custom_enabled = is_feature_enabled(
        cad.features,
        Feature.CUSTOM_TEXTFIELD_VALUES,
        default_return=False,
    )

    if is_custom_enabled:
        model = await create_custom_model(db, data.model)
    else:
        model = await get_value_by_id(db, data.model, ValueType.WEAPON)

    if not model:
        raise ExtendedBadRequest({"model": INVALID_MODEL_MESSAGE})

    registration_status = await get_value_by_id(db, data.registration_status, ValueType.LICENSE)
    if not registration_status:
        raise ExtendedBadRequest({"registrationStatus": "invalidRegistrationStatus"})

    weapon = Weapon(
        citizen_id=citizen.id,
        user_id=current_user.id,
        model_id=model.id,
        registration_status_id=registration_status.id,
        serial_number=await generate_or_validate_serial_number(db, data.serial_number or None),
    )
    db.add(weapon)
    await db.flush()

    record_audit(
        db, request, AuditAction.WEAPON_REGISTER,
        user=current_user,
        resource_type="weapon",
        resource_id=weapon.id,
        details={"serialNumber": weapon.serial_number},
    )
    logger.info(
        "Weapon registered",
        weapon_id=str(weapon.id),
        citizen_id=str(citizen.id),
        user_id=str(current_user.id),
    )

    return WeaponResponse.model_validate(await load_weapon(db, weapon.id))


@router.put("/{weapon_id}", response_model=WeaponResponse)
async def update_weapon(
    weapon_id: UUID,
    data: WeaponCreate,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
):
    """Update a registered weapon."""
    weapon = await db.get(Weapon, weapon_id)

    if should_check_citizen_user_id(cad, current_user):
        can_manage_invariant(
            weapon.user_id if weapon else None,
            current_user,
            HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notFound"),
        )
    elif not weapon:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notFound")

    is_custom_enabled = is_feature_enabled(
        cad.features,
        Feature.CUSTOM_TEXTFIELD_VALUES,
        default_return=False,
    )

    if is_custom_enabled:
        model = await find_or_create_custom_model(db, data.model)
    else:
        model = await get_value_by_id(db, data.model, ValueType.WEAPON)

    if not model:
        raise ExtendedBadRequest({"model": INVALID_MODEL_MESSAGE})

    registration_status = await get_value_by_id(db, data.registration_status, ValueType.LICENSE)
    if not registration_status:
        raise ExtendedBadRequest({"registrationStatus": "invalidRegistrationStatus"})

    # A blank serial number keeps the current one
    if data.serial_number:
        weapon.serial_number = await generate_or_validate_serial_number(
            db, data.serial_number, weapon_id=weapon.id
        )
    weapon.model_id = model.id
    weapon.registration_status_id = registration_status.id
    await db.flush()

    record_audit(
        db, request, AuditAction.WEAPON_UPDATE,
        user=current_user,
        resource_type="weapon",
        resource_id=weapon.id,
    )

    return WeaponResponse.model_validate(await load_weapon(db, weapon.id))


@router.delete("/{weapon_id}")
async def delete_weapon(
    weapon_id: UUID,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    cad: Cad = Depends(get_cad),
    db: AsyncSession = Depends(get_db),
) -> bool:
    """Delete a registered weapon."""
    weapon = await db.get(Weapon, weapon_id)

    if should_check_citizen_user_id(cad, current_user):
        can_manage_invariant(
            weapon.user_id if weapon else None,
            current_user,
            HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notFound"),
        )
    elif not weapon:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notFound")

    await db.delete(weapon)
    await db.flush()

    record_audit(
        db, request, AuditAction.WEAPON_DELETE,
        user=current_user,
        resource_type="weapon",
        resource_id=weapon_id,
    )
    logger.info("Weapon deleted", weapon_id=str(weapon_id), user_id=str(current_user.id))

    return True
