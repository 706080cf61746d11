from __future__ import annotations
import logging

from fastapi import FastAPI

from petpal.api.v1.calendar import router as calendar_router
from petpal.api.v1.health import router as health_router
from petpal.api.v1.pets import router as pets_router
from petpal.api.v1.reminders import router as reminders_router
from petpal.config import settings

# Configure basic logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)

description = """
PetPal API: pet profiles, care reminders linked to the device calendar,
and a month calendar view.
"""
tags_metadata = [
    {"name": "Reminders", "description": "Care reminders: create, complete, delete, upcoming."},
    {"name": "calendar", "description": "Month grid with reminder markers."},
    {"name": "Pets", "description": "Pet profiles of the current user."},
    {"name": "Health", "description": "Infrastructure checks."},
]

app = FastAPI(
    title="PetPal API",
    description=description,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

app.include_router(reminders_router)
app.include_router(calendar_router)
app.include_router(pets_router)
app.include_router(health_router)

log.info("\U0001F331 FastAPI application configured. Environment: %s", settings.ENVIRONMENT)
