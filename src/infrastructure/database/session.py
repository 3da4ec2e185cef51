"""Database engine and session factory."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings


def _connect_args(url: str) -> dict:
    # Supavisor transaction-mode pooling cannot share asyncpg's prepared
    # statement cache.
    if "supabase.com" in url:
        return {"statement_cache_size": 0}
    return {}


def build_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """Create an async engine for ``url`` (defaults to the configured database)."""
    url = url or settings.async_database_url
    return create_async_engine(
        url,
        echo=settings.debug if echo is None else echo,
        pool_pre_ping=True,
        connect_args=_connect_args(url),
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine()
async_session_factory = build_session_factory(engine)
