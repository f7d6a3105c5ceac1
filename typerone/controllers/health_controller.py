"""
Health probes.

/health and /ping are liveness checks with no I/O.  /ready touches the
database and the token cache and answers 503 if either is unreachable.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy import text

from typerone.core.config import settings
from typerone.core.resources import AppResources, get_resources
from typerone.core.responses import error_response, ok

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
async def health():
    return ok({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "environment": settings.MODE,
    })


@router.get("/ready")
async def ready(resources: AppResources = Depends(get_resources)):
    try:
        async with resources.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Readiness check failed: database")
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Service not ready - database disconnected")

    try:
        cache_ok = await resources.token_cache.ping()
    except Exception:
        logger.exception("Readiness check failed: token cache")
        cache_ok = False
    if not cache_ok:
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Service not ready - cache disconnected")

    return ok({
        "status": "ready",
        "database": "connected",
        "cache": "connected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@router.get("/ping")
async def ping():
    return {"pong": True}
