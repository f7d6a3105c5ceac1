"""
Process-level resources — the composition root.

``AppResources`` owns the database engine, the token cache and the
mailer.  ``create_app`` builds one (or receives one from tests) and
parks it on ``app.state``; request handlers reach it only through the
dependencies below.
"""

import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from typerone.core.cache import RedisTokenCache, TokenCache
from typerone.core.config import Settings
from typerone.core.database import build_engine, build_session_factory
from typerone.services.email_service import Mailer, build_mailer

logger = logging.getLogger(__name__)


class AppResources:
    def __init__(self, engine: AsyncEngine, token_cache: TokenCache, mailer: Mailer):
        self.engine = engine
        self.session_factory = build_session_factory(engine)
        self.token_cache = token_cache
        self.mailer = mailer
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppResources":
        return cls(
            engine=build_engine(settings.DATABASE_URL, echo=settings.DEBUG),
            token_cache=RedisTokenCache(
                settings.REDIS_URL, socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            ),
            mailer=build_mailer(settings),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Release the cache and DB handles.  Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.token_cache.aclose()
        finally:
            await self.engine.dispose()
            logger.info("Database engine disposed.")


def get_resources(request: Request) -> AppResources:
    return request.app.state.resources


def get_token_cache(request: Request) -> TokenCache:
    return request.app.state.resources.token_cache


def get_mailer(request: Request) -> Mailer:
    return request.app.state.resources.mailer
