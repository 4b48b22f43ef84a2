"""Aggregated data for the officer dashboard."""
from typing import Mapping, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.config import settings
from cad_api.features import Feature, get_enabled_features
from cad_api.models.cad import Cad
from cad_api.models.court import Warrant, WarrantStatus
from cad_api.models.leo import CombinedLeoUnit, Officer
from cad_api.models.user import User
from cad_api.schemas.court import WarrantResponse
from cad_api.schemas.leo import (
    ActiveOfficersResponse,
    CombinedUnitResponse,
    OfficerDashboardResponse,
    OfficerResponse,
)
from cad_api.services.active_officer import ActiveUnit, get_active_officer, get_active_officers

logger = structlog.get_logger()

DASHBOARD_FEATURES = (Feature.ACTIVE_WARRANTS, Feature.LEO_TICKETS, Feature.CALLS_911)


def serialize_active_unit(unit: Optional[ActiveUnit]):
    """Convert an active unit into its response schema."""
    if unit is None:
        return None
    if isinstance(unit, CombinedLeoUnit):
        return CombinedUnitResponse.model_validate(unit)
    return OfficerResponse.model_validate(unit)


async def get_user_officers(db: AsyncSession, user: User) -> list:
    result = await db.execute(
        select(Officer)
        .where(Officer.user_id == user.id)
        .order_by(Officer.created_at.desc())
    )
    return list(result.scalars().all())


async def get_active_warrants(db: AsyncSession) -> list:
    result = await db.execute(
        select(Warrant)
        .where(Warrant.status == WarrantStatus.ACTIVE)
        .order_by(Warrant.created_at.desc())
    )
    return list(result.scalars().all())


async def build_officer_dashboard(
    headers: Mapping[str, str],
    user: User,
    db: AsyncSession,
    cad: Cad,
) -> OfficerDashboardResponse:
    """
    Collect everything the officer page renders initially.

    A missing active officer is not an error here: the dashboard renders
    with ``activeOfficer: null`` so the user can pick a unit.
    """
    try:
        active_unit = await get_active_officer(headers, user, db, cad)
    except HTTPException as exc:
        if exc.status_code != status.HTTP_400_BAD_REQUEST:
            raise
        active_unit = None

    user_officers = await get_user_officers(db, user)
    total_count, active_officers = await get_active_officers(
        db, cad, skip=0, limit=settings.OFFICERS_PER_PAGE
    )

    enabled = get_enabled_features(cad.features)
    active_warrants = None
    if enabled[Feature.ACTIVE_WARRANTS.value]:
        active_warrants = [
            WarrantResponse.model_validate(w) for w in await get_active_warrants(db)
        ]

    logger.debug(
        "Officer dashboard built",
        user_id=str(user.id),
        has_active_unit=active_unit is not None,
        active_officers=total_count,
    )

    return OfficerDashboardResponse(
        active_officer=serialize_active_unit(active_unit),
        user_officers=[OfficerResponse.model_validate(o) for o in user_officers],
        active_officers=ActiveOfficersResponse(
            total_count=total_count,
            officers=[OfficerResponse.model_validate(o) for o in active_officers],
        ),
        active_warrants=active_warrants,
        features={feature.value: enabled[feature.value] for feature in DASHBOARD_FEATURES},
    )
