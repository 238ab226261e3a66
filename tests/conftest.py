"""
Test infrastructure for the Blog API.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- SQLite ignores foreign keys unless asked; a connect hook turns them on so
  ON DELETE CASCADE removes comments and likes exactly as Postgres does.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state without needing transactions or truncation.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.middleware import install_query_counter
from app.models import User, UserRole
from app.security import create_access_token, hash_password

# ---------------------------------------------------------------------------
# Test database engine - SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine_test.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override - replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call services directly or
    seed rows before issuing HTTP requests.
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# User helpers
# ---------------------------------------------------------------------------

async def _insert_user(
    db: AsyncSession,
    username: str,
    role: UserRole = UserRole.USER,
    password: str = "password123",
) -> User:
    """Insert a user and commit so that HTTP requests can see it."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    await db.commit()
    return user


def auth_header(username: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(username)}"}


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Return an async factory: ``await make_user("name", role=UserRole.ADMIN)``."""

    async def _make(username: str, role: UserRole = UserRole.USER) -> User:
        return await _insert_user(db_session, username, role=role)

    return _make


@pytest_asyncio.fixture
async def alice(db_session: AsyncSession) -> User:
    return await _insert_user(db_session, "alice")


@pytest_asyncio.fixture
async def bob(db_session: AsyncSession) -> User:
    return await _insert_user(db_session, "bobby")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _insert_user(db_session, "admin", role=UserRole.ADMIN)


@pytest.fixture
def alice_headers(alice: User) -> dict[str, str]:
    return auth_header(alice.username)


@pytest.fixture
def bob_headers(bob: User) -> dict[str, str]:
    return auth_header(bob.username)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return auth_header(admin.username)
