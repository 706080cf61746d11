# petpal/api/v1/health.py

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from petpal.config import settings
from petpal.core.calendar import get_calendar_provider
from petpal.db.base import engine

router = APIRouter(tags=["Health"])
log = logging.getLogger(__name__)


@router.get("/healthz", status_code=status.HTTP_200_OK)
async def healthz() -> dict[str, str]:
    out: dict[str, str] = {"environment": settings.ENVIRONMENT}

    # DB
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        out["db"] = "ok"
    except SQLAlchemyError as exc:
        log.exception("DB health check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error") from exc

    # Redis (брокер Celery)
    if settings.ENVIRONMENT != "test":
        redis = Redis.from_url(settings.CELERY_BROKER_URL, socket_connect_timeout=2)
        try:
            await redis.ping()
            out["broker"] = "ok"
        except RedisError as exc:
            log.exception("Redis health check failed")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="broker error") from exc
        finally:
            await redis.aclose()

    # Calendar (только если не noop)
    prov = get_calendar_provider()
    if prov.name != "noop":  # pragma: no cover
        if not await prov.request_access():
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="calendar error")
        out["calendar"] = "ok"
    else:
        out["calendar"] = "noop"

    return out
