"""Async SQLAlchemy engine and session factory.

The engine is built once in the application lifespan and handed to the
catalog service; nothing here holds module-level connection state.

    engine = build_engine(settings.DATABASE_URL)
    catalog = CatalogService(build_sessionmaker(engine))
    ...
    await engine.dispose()
"""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine. SQLite (tests, local runs) gets no pool."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=False, poolclass=NullPool)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
