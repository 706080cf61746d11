# petpal/config.py

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Единый конфиг проекта. Читает переменные окружения.
    Pydantic v2 + pydantic-settings.
    """
    model_config = SettingsConfigDict(
        case_sensitive=False, # Имена переменных окружения не чувствительны к регистру
        extra="ignore", # Игнорировать лишние переменные окружения
    )

    # --- Основные настройки ---
    ENVIRONMENT: str = Field("dev", description="Application environment (dev, test, prod)")

    # --- База данных ---
    DATABASE_URL: str = Field(..., description="Async database connection URL (e.g., postgresql+asyncpg://...)")

    # --- Redis / Celery ---
    REDIS_URL: str = Field("redis://redis:6379/0", description="URL for Redis connection")
    CELERY_BROKER_URL: Optional[str] = Field(None, description="Celery broker URL (defaults to REDIS_URL)")
    CELERY_RESULT_BACKEND: Optional[str] = Field(None, description="Celery result backend URL (defaults to REDIS_URL)")

    # --- JWT ---
    JWT_SECRET_KEY: str = Field(..., description="Secret key for verifying JWT tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Algorithm for JWT signing")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7, description="JWT access token lifetime in minutes")

    # --- Календарь устройства ---
    CALENDAR_PROVIDER: str = Field("noop", description="Calendar provider ('noop', 'google')")
    GOOGLE_CALENDAR_CREDENTIALS_JSON: Optional[str] = Field(
        None, description="Path to the Google service account json"
    )
    GOOGLE_CALENDAR_ID: str = Field("primary", description="Target Google calendar id")

    # --- Напоминания ---
    DEFAULT_TIMEZONE: str = Field("UTC", description="IANA timezone for naive datetimes and day grouping")
    UPCOMING_WINDOW_DAYS: int = Field(7, ge=1, description="Forward window for the upcoming reminders list")
    REMINDER_TITLE_TEMPLATE: str = Field(
        "Pet Reminder: {pet_name}", description="Title of the calendar item created for a reminder"
    )
    CALENDAR_FIRST_WEEKDAY: int = Field(
        6, ge=0, le=6, description="First column of the month grid (0=Monday ... 6=Sunday)"
    )

    # --- Динамические значения по умолчанию для Celery ---
    @model_validator(mode='after')
    def set_celery_defaults(self) -> 'Settings':
        if self.CELERY_BROKER_URL is None:
            log.debug("Setting CELERY_BROKER_URL default from REDIS_URL")
            self.CELERY_BROKER_URL = self.REDIS_URL
        if self.CELERY_RESULT_BACKEND is None:
            log.debug("Setting CELERY_RESULT_BACKEND default from REDIS_URL")
            self.CELERY_RESULT_BACKEND = self.REDIS_URL
        return self


# --- Создание единственного экземпляра настроек ---
try:
    settings = Settings()
    log.info("Settings loaded successfully for ENVIRONMENT=%s", settings.ENVIRONMENT)
    log.debug("Loaded settings: DB URL=%s..., Redis URL=%s, Calendar Provider=%s",
              str(settings.DATABASE_URL)[:25],
              settings.REDIS_URL,
              settings.CALENDAR_PROVIDER)
except Exception:
    log.exception("Failed to instantiate Settings.")
    # Без настроек приложение не сможет работать
    raise
