from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base

from config import settings


def make_engine(db_url: str) -> AsyncEngine:
    """Создать движок; настройки пула только для серверных БД"""
    if db_url.startswith("sqlite"):
        return create_async_engine(db_url, echo=False, future=True)

    return create_async_engine(
        db_url,
        echo=False,
        future=True,
        pool_size=5,  # Размер пула
        max_overflow=10,  # Максимальное количество дополнительных соединений
        pool_pre_ping=True,  # Проверять соединение перед использованием
        pool_recycle=3600  # Пересоздавать соединение через час
    )


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False
    )


engine = make_engine(settings.DB_URL)

AsyncSessionLocal = make_session_factory(engine)

Base = declarative_base()


async def init_models(bind: AsyncEngine = engine):
    """Создать таблицы, если их нет"""
    import database.models  # noqa: F401  регистрирует модели в Base.metadata

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
