import pytest
import httpx
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from tinyapp.database import get_db
from tinyapp.models.models import Base
from main import app

DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
async def engine():
    test_engine = create_async_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture(scope="function")
def session_maker(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_maker) -> AsyncSession:
    async with session_maker() as session:
        yield session


@pytest.fixture(scope="function")
def override_db(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.fixture(scope="function")
async def client(override_db) -> httpx.AsyncClient:
    async with make_client() as ac:
        yield ac


@pytest.fixture(scope="function")
async def other_client(override_db) -> httpx.AsyncClient:
    async with make_client() as ac:
        yield ac


async def register(client: httpx.AsyncClient, email: str, password: str = "password123") -> httpx.Response:
    return await client.post("/register", data={"email": email, "password": password})


async def shorten(client: httpx.AsyncClient, long_url: str = "https://example.com") -> str:
    response = await client.post("/urls", data={"longURL": long_url})
    assert response.status_code == 201
    return response.json()["short_code"]
