"""
Pytest configuration and shared fixtures for the Agro Koi backend tests.

Provides test Settings, an in-memory SQLite session, an app built with
create_app() whose get_db is overridden, an httpx client, and account /
checkout fixtures.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from config import Settings
from database import Base, get_db
from main import create_app
from middleware.auth import issue_access_token
from middleware.rate_limit import get_limiter

# ── Test Configuration ───────────────────────────────────────────────

WEBHOOK_TOKEN = "test-xendit-callback-token"
JWT_SECRET = "test-jwt-secret-for-pytest-only"
ADMIN_SUFFIX = "@agrokoi.id"
USER_PASSWORD = "secret123"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        environment="test",
        jwt_secret=JWT_SECRET,
        xendit_webhook_token=WEBHOOK_TOKEN,
        admin_email=ADMIN_SUFFIX,
        cors_origins="http://localhost:3000",
    )


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """The limiter is process-global; start every test with an empty window."""
    get_limiter().reset()
    yield
    get_limiter().reset()


# ── Database Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    import db_models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


# ── App Fixtures ─────────────────────────────────────────────────────


class OutboxMailer:
    """Keeps the last code sent to each address so tests can use it."""

    def __init__(self):
        self.outbox: dict[str, str] = {}

    async def send_password_reset(self, email: str, code: str, ttl_minutes: int) -> None:
        self.outbox[email] = code

    async def send_delete_token(self, email: str, code: str, ttl_minutes: int) -> None:
        self.outbox[email] = code


@pytest.fixture
def mailer() -> OutboxMailer:
    return OutboxMailer()


@pytest.fixture
def app(test_settings, db_session, mailer):
    """App with its get_db dependency pointed at the test session."""
    application = create_app(test_settings, mailer=mailer)

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ── Test Data Fixtures ────────────────────────────────────────────────


async def make_user(db: AsyncSession, *, name: str, email: str, role: str = "USER", password: str = USER_PASSWORD):
    from db_models import User
    from utils.security import hash_password

    user = User(name=name, email=email, password=hash_password(password), role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def sample_user(db_session: AsyncSession):
    """A regular storefront account."""
    return await make_user(db_session, name="Budi", email="budi@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession):
    return await make_user(db_session, name="Siti", email="siti@example.com")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession):
    return await make_user(db_session, name="Admin", email=f"owner{ADMIN_SUFFIX}", role="ADMIN")


def bearer(user, settings: Settings) -> dict:
    token = issue_access_token(user_id=user.id, role=user.role, settings=settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(sample_user, test_settings) -> dict:
    return bearer(sample_user, test_settings)


@pytest.fixture
def admin_headers(admin_user, test_settings) -> dict:
    return bearer(admin_user, test_settings)


@pytest_asyncio.fixture
async def sample_checkout(db_session: AsyncSession, sample_user):
    """An UNPAID checkout owned by sample_user."""
    from db_models import Checkout

    checkout = Checkout(user_id=sample_user.id, total_amount=150_000, status="UNPAID")
    db_session.add(checkout)
    await db_session.commit()
    await db_session.refresh(checkout)
    return checkout


@pytest_asyncio.fixture
async def second_checkout(db_session: AsyncSession, sample_user):
    from db_models import Checkout

    checkout = Checkout(user_id=sample_user.id, total_amount=75_000, status="UNPAID")
    db_session.add(checkout)
    await db_session.commit()
    await db_session.refresh(checkout)
    return checkout
