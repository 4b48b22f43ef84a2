"""API dependencies for authentication and authorization."""
from typing import Iterable, Optional
from uuid import UUID
import structlog

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from cad_api.database import get_db
from cad_api.features import Feature, is_feature_enabled
from cad_api.models.cad import Cad
from cad_api.models.user import User
from cad_api.permissions import Fallback, Permission, has_permission, is_admin
from cad_api.services.auth import AuthService
from cad_api.services.cad import CadService

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get the current authenticated user from the JWT token.

    Validates token version to ensure tokens haven't been invalidated
    by logout.

    Raises:
        HTTPException: If authentication fails
    """
    if credentials:
        token_data = AuthService.decode_token(credentials.credentials)
        if token_data and token_data.user_id:
            user = await AuthService.get_user_by_id(db, token_data.user_id)
            if user:
                if token_data.token_version != (user.token_version or 0):
                    logger.warning(
                        "Token version mismatch - token invalidated",
                        user_id=str(user.id),
                        token_version=token_data.token_version,
                        user_token_version=user.token_version,
                    )
                    raise HTTPException(
                        status_code=status.HTTP_401_UNAUTHORIZED,
                        detail="Token has been invalidated. Please log in again.",
                        headers={"WWW-Authenticate": "Bearer"},
                    )
                return user

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Get the current active user.

    Raises:
        HTTPException: If user is not active
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )
    return current_user


async def get_cad(db: AsyncSession = Depends(get_db)) -> Cad:
    """The CAD instance with its features and misc settings loaded."""
    return await CadService.get_or_create_cad(db)


def require_permissions(permissions: Iterable[Permission], fallback: Fallback = False):
    """
    Build a dependency that only lets through users holding any of ``permissions``.

    Users without assigned permissions are judged by ``fallback``.
    """
    permissions = list(permissions)

    async def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if not has_permission(current_user, permissions, fallback=fallback):
            logger.warning(
                "Permission denied",
                user_id=str(current_user.id),
                required=[p.value for p in permissions],
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid Permissions",
            )
        return current_user

    return dependency


def should_check_citizen_user_id(cad: Cad, user: User) -> bool:
    """
    Whether citizen-owned resources must belong to the requesting user.

    Citizen managers and CADs with common citizen cards skip the ownership check.
    """
    if has_permission(user, [Permission.MANAGE_CITIZENS], fallback=is_admin):
        return False

    common_cards = is_feature_enabled(
        cad.features,
        Feature.COMMON_CITIZEN_CARDS,
        default_return=False,
    )
    return not common_cards


def can_manage_invariant(owner_id: Optional[UUID], user: User, error: Exception) -> None:
    """Raise ``error`` unless ``owner_id`` is set and belongs to ``user``."""
    if not owner_id:
        raise error
    if owner_id != user.id:
        raise error
