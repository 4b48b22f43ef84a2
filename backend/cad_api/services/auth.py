"""Authentication service."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.config import settings
from cad_api.models.user import User, UserRank
from cad_api.schemas.user import TokenData

logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations."""

    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @classmethod
    def verify_password(cls, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        return cls.pwd_context.verify(plain_password, hashed_password)

    @classmethod
    def hash_password(cls, password: str) -> str:
        """Hash a password."""
        return cls.pwd_context.hash(password)

    @classmethod
    def create_access_token(cls, user_id: UUID, username: str, token_version: int = 0) -> str:
        """
        Create a JWT access token.

        The token includes a version number that must match the user's
        current token_version for the token to be valid.
        """
        expire = datetime.utcnow() + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode = {
            "sub": str(user_id),
            "username": username,
            "exp": expire,
            "type": "access",
            "ver": token_version,
        }
        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @classmethod
    def decode_token(cls, token: str) -> Optional[TokenData]:
        """Decode and validate a JWT token."""
        try:
            payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        except JWTError:
            return None

        user_id = payload.get("sub")
        if user_id is None or payload.get("type") != "access":
            return None

        try:
            return TokenData(
                user_id=UUID(user_id),
                username=payload.get("username"),
                token_version=payload.get("ver", 0),
            )
        except ValueError:
            return None

    @classmethod
    async def get_user_by_username(cls, db: AsyncSession, username: str) -> Optional[User]:
        """Get a user by username (case-insensitive)."""
        result = await db.execute(select(User).where(func.lower(User.username) == username.lower()))
        return result.scalar_one_or_none()

    @classmethod
    async def get_user_by_id(cls, db: AsyncSession, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @classmethod
    async def authenticate_user(cls, db: AsyncSession, username: str, password: str) -> Optional[User]:
        """Authenticate a user with username and password."""
        user = await cls.get_user_by_username(db, username)
        if not user:
            return None
        if not cls.verify_password(password, user.hashed_password):
            return None
        return user

    @classmethod
    async def create_user(cls, db: AsyncSession, username: str, password: str) -> User:
        """
        Create a new user.

        The first account on a fresh install becomes the CAD owner.
        """
        user_count = await db.scalar(select(func.count(User.id)))
        rank = UserRank.OWNER if not user_count else UserRank.USER

        user = User(
            username=username,
            hashed_password=cls.hash_password(password),
            rank=rank,
            permissions=[],
            token_version=0,
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info("User created", user_id=str(user.id), rank=rank.value)
        return user

    @classmethod
    async def update_last_login(cls, db: AsyncSession, user: User) -> User:
        """Update user's last login timestamp."""
        user.last_login_at = datetime.now(timezone.utc)
        await db.flush()
        return user

    @classmethod
    async def logout_user(cls, db: AsyncSession, user: User) -> None:
        """Logout user by invalidating all issued tokens."""
        user.invalidate_all_tokens()
        await db.flush()

        logger.info("User logged out - all tokens invalidated", user_id=str(user.id))
