"""
Async SQLAlchemy engine / session helpers.

The engine is created by the composition root (``AppResources``), not at
import time, so tests can point the app at a throwaway database.
"""

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    connect_args: dict = {}
    if database_url.startswith("sqlite"):
        # Wait for concurrent writers instead of failing immediately.
        connect_args["timeout"] = 30
    return create_async_engine(database_url, echo=echo, future=True, connect_args=connect_args)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — one session per request.

    Services commit explicitly; anything left uncommitted when the
    request ends is rolled back.
    """
    session_factory = request.app.state.resources.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
