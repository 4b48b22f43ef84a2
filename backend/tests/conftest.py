import os
from datetime import datetime, timedelta
from typing import AsyncGenerator, Iterable, Optional

# Must be set before cad_api is imported
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cad_api.database import Base, get_db
from cad_api.features import Feature
from cad_api.models.citizen import Citizen, Weapon
from cad_api.models.court import NameChangeRequest, Warrant, WarrantStatus
from cad_api.models.leo import CombinedLeoUnit, Officer
from cad_api.models.user import User, UserRank
from cad_api.models.value import ShouldDoType, StatusValue, Value, ValueType
from cad_api.services.auth import AuthService
from cad_api.services.cad import CadService


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    import cad_api.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the test database."""
    from cad_api.main import app

    async def get_db_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    app.dependency_overrides[get_db] = get_db_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class Factory:
    """Builds committed rows for tests."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.commit()
        return obj

    async def user(
        self,
        username: Optional[str] = None,
        rank: UserRank = UserRank.USER,
        permissions: Iterable[str] = (),
        **flags,
    ) -> User:
        user = User(
            username=username or f"user{self._next()}",
            hashed_password=AuthService.hash_password("password123"),
            rank=rank,
            permissions=[getattr(p, "value", p) for p in permissions],
            **flags,
        )
        return await self._save(user)

    def auth_headers(self, user: User, **extra) -> dict:
        token = AuthService.create_access_token(user.id, user.username, user.token_version or 0)
        return {"Authorization": f"Bearer {token}", **extra}

    async def citizen(self, user: Optional[User], name: str = "John", surname: str = "Doe") -> Citizen:
        return await self._save(Citizen(user_id=user.id if user else None, name=name, surname=surname))

    async def value(self, value_type: ValueType, text: str) -> Value:
        return await self._save(Value(type=value_type, value=text, is_default=True))

    async def status_value(self, text: str, should_do: ShouldDoType) -> StatusValue:
        value = await self.value(ValueType.CODES_10, text)
        return await self._save(StatusValue(value_id=value.id, should_do=should_do))

    async def weapon(self, citizen: Citizen, model: Value, registration_status: Value, serial_number: str) -> Weapon:
        return await self._save(
            Weapon(
                citizen_id=citizen.id,
                user_id=citizen.user_id,
                model_id=model.id,
                registration_status_id=registration_status.id,
                serial_number=serial_number,
            )
        )

    async def officer(
        self,
        user: User,
        citizen: Citizen,
        status: Optional[StatusValue] = None,
        last_status_change: Optional[datetime] = None,
        callsign: str = "1A",
    ) -> Officer:
        return await self._save(
            Officer(
                user_id=user.id,
                citizen_id=citizen.id,
                callsign=callsign,
                callsign2=str(self._next()),
                status_id=status.id if status else None,
                last_status_change_timestamp=last_status_change,
            )
        )

    async def combined_unit(self, officers, status: Optional[StatusValue] = None) -> CombinedLeoUnit:
        return await self._save(
            CombinedLeoUnit(
                callsign=f"C{self._next()}",
                status_id=status.id if status else None,
                last_status_change_timestamp=datetime.utcnow(),
                officers=list(officers),
            )
        )

    async def warrant(self, citizen: Citizen, status: WarrantStatus = WarrantStatus.ACTIVE) -> Warrant:
        return await self._save(Warrant(citizen_id=citizen.id, status=status, description="Armed robbery"))

    async def name_change(self, user: User, citizen: Citizen, new_name: str = "Jane") -> NameChangeRequest:
        return await self._save(
            NameChangeRequest(
                user_id=user.id,
                citizen_id=citizen.id,
                new_name=new_name,
                new_surname=citizen.surname,
            )
        )

    async def cad(self, features: Optional[dict] = None, **misc):
        cad = await CadService.get_or_create_cad(self.session)
        for feature, is_enabled in (features or {}).items():
            await CadService.set_feature(self.session, cad, Feature(feature), is_enabled)
        for key, value in misc.items():
            setattr(cad.misc_settings, key, value)
        await self.session.commit()
        return cad

    @staticmethod
    def minutes_ago(minutes: int) -> datetime:
        return datetime.utcnow() - timedelta(minutes=minutes)


@pytest_asyncio.fixture
async def factory(session: AsyncSession) -> Factory:
    return Factory(session)
