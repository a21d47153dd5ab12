from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from unimus.api.dependencies.database import get_db_session
from unimus.config import Settings, get_settings
from unimus.main import app
from unimus.models.base import Base

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory database per test, shared by every session the test opens."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # sqlite leaves foreign keys (and so ON DELETE CASCADE) off by default
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    """Session for calling the service layer directly."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def mock_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        UPLOAD_DIR=str(tmp_path),
        REPOSITORY_NAME="Unimus Repository",
        RECENT_SUBMISSION_DAYS=30,
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture(autouse=True)
def fast_password_hashing(mocker, mock_settings):
    mocker.patch("unimus.services.passwords.get_settings", return_value=mock_settings)


@pytest.fixture
def override_get_settings_dependency(mock_settings):
    app.dependency_overrides[get_settings] = lambda: mock_settings
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def override_get_db_session_dependency(session_maker):
    async def _get_test_db_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_db_session
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(override_get_db_session_dependency, override_get_settings_dependency):
    """HTTP client against the app, backed by the test database.

    Route tests should seed data through the API rather than the `db` fixture
    so only one session touches the shared connection at a time.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def upload_dir(mock_settings) -> Path:
    return Path(mock_settings.UPLOAD_DIR)


@pytest.fixture
def sample_csv_path() -> Path:
    return FIXTURES_DIR / "products.csv"


@pytest.fixture
def sample_json_path() -> Path:
    return FIXTURES_DIR / "measurements.json"


@pytest.fixture
def sample_arff_path() -> Path:
    return FIXTURES_DIR / "weather.arff"
