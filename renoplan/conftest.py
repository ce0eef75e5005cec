"""
Shared test fixtures: an in-memory database, fake auth and an API client
bound to the FastAPI app.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import renoplan.db.models  # noqa: F401
from renoplan.ai.gateway.client import get_gateway_client
from renoplan.ai.gateway.config import GatewaySettings
from renoplan.auth.constants import Role
from renoplan.auth.dependencies import get_auth_provider_dependency
from renoplan.auth.schemas import Session, User
from renoplan.auth.service import AuthProvider
from renoplan.db.database import Base, get_db
from renoplan.db.user_roles.model import UserRole

USER_ID = "user-123"
OTHER_USER_ID = "user-456"
ADMIN_ID = "admin-789"

TOKENS = {
    "user-token": USER_ID,
    "other-token": OTHER_USER_ID,
    "admin-token": ADMIN_ID,
}


def auth_headers(token: str = "user-token") -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class StaticTokenAuthProvider(AuthProvider):
    """Accepts the fixed test tokens."""

    async def get_session(self, access_token: str) -> Session | None:
        user_id = TOKENS.get(access_token)
        if not user_id:
            return None
        return Session(
            user=User(id=user_id, email=f"{user_id}@example.com"), access_token=access_token
        )


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """A session on a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_local = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    async with session_local() as session:
        session.add(UserRole(user_id=ADMIN_ID, role=Role.ADMIN.value))
        await session.commit()
        yield session

    await engine.dispose()


class FakeGateway:
    """Stands in for GatewayClient; tests set the AsyncMock return values."""

    def __init__(self):
        self.settings = GatewaySettings(api_key="test-key")
        self.call_function = AsyncMock()
        self.generate_image = AsyncMock()
        self.open_chat_stream = AsyncMock()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def app(db_session, gateway):
    """The FastAPI app wired to the test database and fake auth."""
    from renoplan.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_provider_dependency] = StaticTokenAuthProvider
    app.dependency_overrides[get_gateway_client] = lambda: gateway

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as test_client:
        yield test_client
