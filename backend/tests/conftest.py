from __future__ import annotations

import os
import uuid
from typing import Optional

# Settings are read at import time: configure the test environment first.
TEST_JWT_SECRET = "test-jwt-secret-for-ceahub-suite-0123456789"
os.environ.setdefault("DATABASE_URL_ASYNC", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite:///:memory:")
os.environ["ENVIRONMENT"] = "development"
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from ceahub.api.deps.services import get_gateway  # noqa: E402
from ceahub.core.errors import Unauthorized  # noqa: E402
from ceahub.core.security import AuthenticatedUser, create_access_token  # noqa: E402
from ceahub.db.session import get_db  # noqa: E402

# Ensure Base + models are registered before create_all
from ceahub.db.base import Base  # noqa: E402
import ceahub.models  # noqa: E402,F401
from ceahub.models.agent import Agent  # noqa: E402
from ceahub.models.sale import Sale  # noqa: E402


# ---------------------------------------------------------
# Fake Supabase gateway (auth admin + storage)
# ---------------------------------------------------------
class FakeGateway:
    bucket = "profile-pictures"

    def __init__(self) -> None:
        self.tokens: dict[str, AuthenticatedUser] = {}
        self.uploads: dict[str, tuple[bytes, str]] = {}
        self.password_updates: list[tuple[uuid.UUID, str]] = []

    async def get_user(self, token: str) -> AuthenticatedUser:
        user = self.tokens.get(token)
        if user is None:
            raise Unauthorized("Invalid or expired token.")
        return user

    async def update_user_password(self, user_id: uuid.UUID, new_password: str) -> None:
        self.password_updates.append((user_id, new_password))

    async def upload_public_file(self, path: str, content: bytes, content_type: str) -> str:
        self.uploads[path] = (content, content_type)
        return f"https://example.supabase.co/storage/v1/object/public/{self.bucket}/{path}"


# ---------------------------------------------------------
# Engine + schema lifecycle: one SQLite file per test
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ceahub_test.db'}",
        future=True,
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )


# ---------------------------------------------------------
# DB session for assertions / setup
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def db(sessionmaker):
    """
    Session for test setup & assertions ONLY.
    """
    async with sessionmaker() as session:
        yield session
        await session.rollback()


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker, gateway):
    from ceahub.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    fastapi_app.dependency_overrides[get_gateway] = lambda: gateway
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------
# HTTP client
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def auth_headers(user_id: uuid.UUID, email: Optional[str] = None) -> dict[str, str]:
    token = create_access_token(str(user_id), email=email, secret=TEST_JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


async def create_agent(
    db,
    *,
    name: str = "Thandi Mokoena",
    email: Optional[str] = None,
    role: str = "consultant",
    province: Optional[str] = "Gauteng",
    town: Optional[str] = "Soweto",
    contact_details: Optional[str] = "0821234567",
    agent_code: Optional[str] = None,
) -> Agent:
    agent_uuid = uuid.uuid4()
    agent = Agent(
        id=agent_uuid,
        name=name,
        email=email or f"{agent_uuid.hex[:8]}@example.com",
        role=role,
        agent_id=agent_code or f"CEA-{agent_uuid.int % 1_000_000:06d}",
        province=province,
        town=town,
        contact_details=contact_details,
        about_me="Field consultant",
    )
    db.add(agent)
    await db.flush()
    return agent


async def create_sale(db, agent: Agent, count: int, names: str = "Client", status: str = "pending") -> Sale:
    sale = Sale(agent_id=agent.id, sale_count=count, sale_names=names, status=status)
    db.add(sale)
    await db.flush()
    return sale
