"""
FastAPI application factory.

Assembles the app, registers all routers and the global error
translator, and wires up lifecycle events.  Database schema is managed
by Alembic — NOT create_all.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from typerone.controllers.auth_controller import router as auth_router
from typerone.controllers.health_controller import router as health_router
from typerone.controllers.leaderboard_controller import router as leaderboard_router
from typerone.controllers.race_controller import router as race_router
from typerone.controllers.stats_controller import router as stats_router
from typerone.controllers.test_controller import router as test_router
from typerone.controllers.user_controller import router as user_router
from typerone.core.config import Settings, settings
from typerone.core.exception_handlers import register_exception_handlers
from typerone.core.resources import AppResources
from typerone.models import Base  # noqa: F401  registers all models

logging.basicConfig(
    level=logging.DEBUG if settings.MODE == "development" else settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    config: Settings | None = None,
    resources: AppResources | None = None,
) -> FastAPI:
    """Build the app.  Tests pass their own ``resources`` (DB, cache, mailer)."""
    config = config or settings
    resources = resources or AppResources.from_settings(config)

    app = FastAPI(
        title=config.APP_NAME,
        version="0.1.0",
        docs_url=None if config.is_production else "/docs",
        redoc_url=None if config.is_production else "/redoc",
    )
    app.state.resources = resources

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    # ── Register routers ─────────────────────────────────────────────
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(test_router)
    app.include_router(race_router)
    app.include_router(leaderboard_router)
    app.include_router(stats_router)

    # ── Startup / Shutdown ───────────────────────────────────────────
    @app.on_event("startup")
    async def on_startup() -> None:
        """NOTE: Database schema is managed by Alembic migrations.
        Run `alembic upgrade head` before starting the app.
        """
        logger.info("%s started in %s mode.", config.APP_NAME, config.MODE)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await app.state.resources.aclose()
        logger.info("Shutdown complete.")

    return app


app = create_app()
