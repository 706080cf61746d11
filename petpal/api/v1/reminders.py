# petpal/api/v1/reminders.py

from __future__ import annotations

import logging
from datetime import timedelta
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.config import settings
from petpal.core.auth.security import get_current_user
from petpal.core.calendar import BaseCalendarProvider, get_calendar_provider
from petpal.core.reminders.coordinator import ReminderCoordinator
from petpal.core.reminders.schemas import (
    ReminderCompletionUpdate,
    ReminderCreate,
    ReminderListState,
    ReminderRead,
)
from petpal.core.reminders.service import RemindersService
from petpal.core.users.models import User
from petpal.db.base import get_async_db_session

router = APIRouter(
    prefix="/v1/reminders",
    tags=["Reminders"],
    dependencies=[Depends(get_current_user)] # Все эндпоинты требуют аутентификации
)
log = logging.getLogger(__name__)


def get_calendar() -> BaseCalendarProvider:
    return get_calendar_provider()


async def get_reminder_coordinator(
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
    calendar: BaseCalendarProvider = Depends(get_calendar),
) -> ReminderCoordinator:
    return ReminderCoordinator(RemindersService(db), calendar, current_user.id)


def _raise_for_state(coordinator: ReminderCoordinator, status_code: int) -> None:
    detail = coordinator.state.error_message or "Reminder operation failed"
    raise HTTPException(status_code=status_code, detail=detail)


async def _load_existing(coordinator: ReminderCoordinator, reminder_id: str) -> ReminderRead:
    if not await coordinator.load_all():
        _raise_for_state(coordinator, status.HTTP_500_INTERNAL_SERVER_ERROR)
    reminder = coordinator.find(reminder_id)
    if reminder is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return reminder


@router.get(
    "",
    response_model=ReminderListState,
    summary="List my reminders",
    description="All reminders of the current user, sorted by due date ascending."
)
async def list_reminders(
    coordinator: ReminderCoordinator = Depends(get_reminder_coordinator),
) -> ReminderListState:
    if not await coordinator.load_all():
        _raise_for_state(coordinator, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return coordinator.state


@router.get(
    "/upcoming",
    response_model=List[ReminderRead],
    summary="Upcoming reminders",
    description="Not completed reminders due within the next `days` days."
)
async def list_upcoming_reminders(
    days: int = Query(settings.UPCOMING_WINDOW_DAYS, ge=1, le=366),
    coordinator: ReminderCoordinator = Depends(get_reminder_coordinator),
) -> List[ReminderRead]:
    reminders = await coordinator.upcoming(timedelta(days=days))
    if coordinator.state.error_message:
        _raise_for_state(coordinator, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return reminders


@router.post(
    "",
    response_model=ReminderListState,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reminder",
    description=(
        "Creates a device calendar item, schedules a notification and stores the reminder. "
        "If the calendar refuses, nothing is stored."
    )
)
async def create_reminder(
    payload: ReminderCreate = Body(...),
    coordinator: ReminderCoordinator = Depends(get_reminder_coordinator),
) -> ReminderListState:
    log.info("API: create reminder for pet '%s' due %s", payload.pet_name, payload.due_at.isoformat())
    if not await coordinator.create(payload.pet_name, payload.message, payload.due_at):
        _raise_for_state(coordinator, status.HTTP_400_BAD_REQUEST)
    return coordinator.state


@router.patch(
    "/{reminder_id}",
    response_model=ReminderListState,
    summary="Mark a reminder completed",
)
async def update_reminder_completion(
    reminder_id: str,
    payload: ReminderCompletionUpdate = Body(...),
    coordinator: ReminderCoordinator = Depends(get_reminder_coordinator),
) -> ReminderListState:
    reminder = await _load_existing(coordinator, reminder_id)
    if not await coordinator.set_completed(reminder, payload.is_completed):
        _raise_for_state(coordinator, status.HTTP_400_BAD_REQUEST)
    return coordinator.state


@router.delete(
    "/{reminder_id}",
    response_model=ReminderListState,
    summary="Delete a reminder",
    description="Removes the linked calendar item (best-effort) and the stored reminder."
)
async def delete_reminder(
    reminder_id: str,
    coordinator: ReminderCoordinator = Depends(get_reminder_coordinator),
) -> ReminderListState:
    reminder = await _load_existing(coordinator, reminder_id)
    if not await coordinator.delete(reminder):
        _raise_for_state(coordinator, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return coordinator.state
