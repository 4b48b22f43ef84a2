"""Authentication API routes."""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.api.deps import get_current_active_user
from cad_api.config import settings
from cad_api.database import get_db
from cad_api.middleware.rate_limit import auth_limit
from cad_api.models.audit import AuditAction
from cad_api.models.user import User
from cad_api.schemas.user import Token, UserCreate, UserLogin, UserResponse
from cad_api.services.audit import record_audit
from cad_api.services.auth import AuthService

logger = structlog.get_logger()
router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@auth_limit
async def register(
    user_data: UserCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user. The first user becomes the CAD owner."""
    existing = await AuthService.get_user_by_username(db, user_data.username)
    if existing:
        logger.warning(
            "Registration attempt with existing username",
            ip=request.client.host if request.client else None,
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userAlreadyExists",
        )

    user = await AuthService.create_user(db, username=user_data.username, password=user_data.password)
    record_audit(db, request, AuditAction.REGISTER, user=user, description="User registered")

    return UserResponse.model_validate(user)


@router.post("/login", response_model=Token)
@auth_limit
async def login(
    login_data: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return a JWT access token."""
    user = await AuthService.authenticate_user(db, login_data.username, login_data.password)
    if not user:
        logger.warning(
            "Failed login attempt",
            username=login_data.username,
            ip=request.client.host if request.client else None,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    await AuthService.update_last_login(db, user)
    record_audit(db, request, AuditAction.LOGIN, user=user, description="User logged in")

    access_token = AuthService.create_access_token(user.id, user.username, user.token_version or 0)
    logger.info("User logged in", user_id=str(user.id))

    return Token(
        access_token=access_token,
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """Get the authenticated user."""
    return UserResponse.model_validate(current_user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Invalidate every token issued to the user."""
    await AuthService.logout_user(db, current_user)
    record_audit(db, request, AuditAction.LOGOUT, user=current_user, description="User logged out")
