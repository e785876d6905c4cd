from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tinyapp.config import DATABASE_URL
from tinyapp.models.models import Base

# Одно соединение на процесс: in-memory SQLite живет, пока живет соединение
engine = create_async_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
async_session = async_sessionmaker(bind=engine, expire_on_commit=False)


async def init_db() -> None:
    """Создает таблицы, если их еще нет."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session
