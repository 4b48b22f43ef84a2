"""Resolution of the LEO unit a user is currently on duty as."""
from datetime import datetime, timedelta
from typing import Mapping, Optional, Tuple, Union

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.models.cad import Cad
from cad_api.models.leo import CombinedLeoUnit, Officer
from cad_api.models.user import User
from cad_api.models.value import ShouldDoType, StatusValue
from cad_api.permissions import DEFAULT_LEO_PERMISSIONS, Permission, has_permission

logger = structlog.get_logger()

DISPATCH_HEADER = "is-from-dispatch"

ActiveUnit = Union[Officer, CombinedLeoUnit]


def get_inactivity_filter(cad: Cad, setting: str = "unit_inactivity_timeout") -> Optional[datetime]:
    """
    Return the cut-off for units considered inactive.

    Units whose last status change is at or before the returned time are
    treated as inactive. ``None`` means the timeout is not configured.
    """
    timeout = getattr(cad.misc_settings, setting, None) if cad.misc_settings else None
    if not timeout:
        return None
    return datetime.utcnow() - timedelta(minutes=timeout)


def on_duty_officer_filters(cad: Cad) -> list:
    """
    WHERE clauses selecting on-duty officers.

    Requires a join on StatusValue. Officers without a status, with an
    off-duty status, or idle past the inactivity timeout are excluded.
    Once a timeout is configured, officers that never changed status count
    as idle.
    """
    filters = [StatusValue.should_do != ShouldDoType.SET_OFF_DUTY]

    cutoff = get_inactivity_filter(cad)
    if cutoff is not None:
        filters.append(Officer.last_status_change_timestamp > cutoff)
    return filters


async def get_active_officer(
    headers: Mapping[str, str],
    user: User,
    db: AsyncSession,
    cad: Cad,
) -> Optional[ActiveUnit]:
    """
    Resolve the unit the user is acting as.

    Dispatchers may call officer routes by sending ``is-from-dispatch: true``,
    in which case no unit is resolved and ``None`` is returned. Otherwise a
    combined unit the user is part of takes precedence over their solo
    officer.

    Raises:
        HTTPException: 401 if the dispatch header is sent without dispatch
            permissions, 403 without LEO permissions, 400 when the user has
            no unit on duty
    """
    if str(headers.get(DISPATCH_HEADER, "")).lower() == "true":
        has_dispatch_permissions = has_permission(
            user,
            [Permission.DISPATCH],
            fallback=lambda u: u.is_dispatch,
        )
        if not has_dispatch_permissions:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Must be dispatch to use this header.",
            )
        return None

    has_leo_permissions = has_permission(
        user,
        DEFAULT_LEO_PERMISSIONS,
        fallback=lambda u: u.is_leo,
    )
    if not has_leo_permissions:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid Permissions",
        )

    # A combined unit without a status is still on duty
    combined_result = await db.execute(
        select(CombinedLeoUnit)
        .outerjoin(StatusValue, CombinedLeoUnit.status_id == StatusValue.id)
        .where(
            or_(
                CombinedLeoUnit.status_id.is_(None),
                StatusValue.should_do != ShouldDoType.SET_OFF_DUTY,
            )
        )
        .where(CombinedLeoUnit.officers.any(Officer.user_id == user.id))
        .order_by(CombinedLeoUnit.created_at.desc())
        .limit(1)
    )
    combined_unit = combined_result.scalars().first()
    if combined_unit:
        return combined_unit

    officer_result = await db.execute(
        select(Officer)
        .join(StatusValue, Officer.status_id == StatusValue.id)
        .where(Officer.user_id == user.id)
        .where(*on_duty_officer_filters(cad))
        .order_by(Officer.last_status_change_timestamp.desc())
        .limit(1)
    )
    officer = officer_result.scalars().first()
    if officer:
        return officer

    logger.debug("No active officer for user", user_id=str(user.id))
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="noActiveOfficer",
    )


async def get_active_officers(
    db: AsyncSession,
    cad: Cad,
    skip: int = 0,
    limit: int = 35,
) -> Tuple[int, list]:
    """Page through every officer currently on duty."""
    filters = on_duty_officer_filters(cad)

    total_count = await db.scalar(
        select(func.count(Officer.id))
        .select_from(Officer)
        .join(StatusValue, Officer.status_id == StatusValue.id)
        .where(*filters)
    )

    result = await db.execute(
        select(Officer)
        .join(StatusValue, Officer.status_id == StatusValue.id)
        .where(*filters)
        .order_by(Officer.last_status_change_timestamp.desc())
        .offset(skip)
        .limit(limit)
    )
    return total_count or 0, list(result.scalars().all())
