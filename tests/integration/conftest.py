import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.depends import get_unit_of_work
from tests.fixtures.json_loader import TestDataLoader


class IntegrationConfig(ApplicationConfig):
    DB_URI = "sqlite+aiosqlite://"
    ENABLE_LOGGING_MIDDLEWARE = False
    JWT_ACCESS_SECRET = "integration-access-secret"
    JWT_REFRESH_SECRET = "integration-refresh-secret"
    TOKEN_HASH_ROUNDS = 4
    PASSWORD_HASH_ROUNDS = 4


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    app = create_app(IntegrationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def signed_up(client, test_data):
    """Sign up the default user; returns the response body"""
    response = await client.post(
        "/signup",
        json=test_data.get("signup_user"),
        headers={"User-Agent": test_data.get("user_agent")},
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def app_client(tmp_path):
    """Client for the app as deployed: lifespan, own engine, session per request"""

    class FileConfig(IntegrationConfig):
        DB_URI = f"sqlite+aiosqlite:///{tmp_path / 'app.db'}"

    app = create_app(FileConfig)

    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
