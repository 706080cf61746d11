# petpal/core/reminders/schemas.py
"""
Pydantic-схемы напоминаний.

Используются в:
    * core.reminders.coordinator     ― состояние списка для UI
    * api/v1/reminders.py            ― тела запросов и ответы
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime) -> datetime:
    """SQLite отдает naive datetime; считаем такие значения UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ReminderRead(BaseModel):
    """Напоминание в том виде, в каком его видит клиент."""

    id: str = Field(..., description="Reminder id (UUID)")
    pet_name: str = Field(..., description="Pet the reminder is about")
    message: str = Field(..., description="What needs to be done")
    due_at: datetime = Field(..., description="Due date/time (UTC)")
    is_completed: bool = Field(False, description="Completion flag")
    external_calendar_ref: str | None = Field(None, description="Linked device calendar item id")

    model_config = {"from_attributes": True}

    @field_validator("due_at")
    @classmethod
    def _normalize_due_at(cls, value: datetime) -> datetime:
        return as_utc(value)


class ReminderListState(BaseModel):
    """Наблюдаемое состояние координатора: список, флаг загрузки, ошибка."""

    reminders: List[ReminderRead] = Field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None


class ReminderCreate(BaseModel):
    pet_name: str = Field(..., min_length=1, max_length=128)
    message: str = Field(..., min_length=1)
    due_at: datetime = Field(..., description="Due date/time; naive values use DEFAULT_TIMEZONE")


class ReminderCompletionUpdate(BaseModel):
    is_completed: bool = True


__all__: list[str] = [
    "as_utc",
    "ReminderRead",
    "ReminderListState",
    "ReminderCreate",
    "ReminderCompletionUpdate",
]
