# petpal/core/reminders/service.py

"""Service-layer for Reminders (remote reminder store)."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Reminder
from .schemas import as_utc

log = logging.getLogger(__name__)


class RemindersService:
    """
    Асинхронный сервис для работы с Напоминаниями.
    Все методы ограничены одним пользователем (``user_id``):
    чужие записи не читаются и не изменяются.
    """

    def __init__(self, db_session: AsyncSession) -> None:
        """
        Инициализирует сервис с асинхронной сессией БД.

        Args:
            db_session (AsyncSession): Активная асинхронная сессия SQLAlchemy.
        """
        self.db: AsyncSession = db_session

    # ------------------------------------------------------------------ #
    #                       Public business-methods                      #
    # ------------------------------------------------------------------ #

    async def create(
        self,
        user_id: str,
        *,
        pet_name: str,
        message: str,
        due_at: datetime,
        external_calendar_ref: str | None = None,
        reminder_id: str | None = None,
    ) -> Reminder:
        """
        Создает новое напоминание для пользователя.

        Args:
            user_id (str): Идентификатор пользователя.
            pet_name (str): Имя питомца.
            message (str): Текст напоминания.
            due_at (datetime): Время срабатывания.
            external_calendar_ref (str | None, optional): ID элемента календаря устройства.
            reminder_id (str | None, optional): Готовый ID; по умолчанию новый UUID.

        Returns:
            Reminder: Созданный объект напоминания (ORM модель).
        """
        new_reminder = Reminder(
            id=reminder_id or str(uuid.uuid4()),
            user_id=user_id,
            pet_name=pet_name,
            message=message,
            due_at=as_utc(due_at),
            is_completed=False,
            external_calendar_ref=external_calendar_ref,
        )
        log.info(
            "Creating reminder %s for user %s: pet='%s', due_at=%s",
            new_reminder.id, user_id, pet_name, new_reminder.due_at.isoformat()
        )
        self.db.add(new_reminder)
        await self.db.flush()
        await self.db.refresh(new_reminder)
        return new_reminder

    async def list_all(self, user_id: str) -> Sequence[Reminder]:
        """
        Возвращает все напоминания пользователя, упорядоченные по ``due_at``.
        """
        stmt = (
            select(Reminder)
            .where(Reminder.user_id == user_id)
            .order_by(Reminder.due_at, Reminder.id)
        )
        result = await self.db.scalars(stmt)
        reminders = result.all()
        log.debug("Found %d reminders for user %s", len(reminders), user_id)
        return reminders

    async def list_upcoming(
        self,
        user_id: str,
        within: timedelta,
        now: datetime | None = None,
    ) -> Sequence[Reminder]:
        """
        Возвращает незавершенные напоминания, срок которых наступит
        в окне ``(now, now + within]``.

        Args:
            user_id (str): Идентификатор пользователя.
            within (timedelta): Ширина окна вперед от ``now``.
            now (datetime | None, optional): Точка отсчета; по умолчанию текущее UTC время.

        Returns:
            Sequence[Reminder]: Напоминания, отсортированные по ``due_at``.
        """
        start = as_utc(now) if now else datetime.now(timezone.utc)
        end = start + within
        stmt = (
            select(Reminder)
            .where(Reminder.user_id == user_id)
            .where(Reminder.due_at > start)
            .where(Reminder.due_at <= end)
            .where(Reminder.is_completed.is_(False))
            .order_by(Reminder.due_at, Reminder.id)
        )
        result = await self.db.scalars(stmt)
        reminders = result.all()
        log.debug(
            "Found %d upcoming reminders for user %s (%s .. %s)",
            len(reminders), user_id, start.isoformat(), end.isoformat()
        )
        return reminders

    async def get(self, user_id: str, reminder_id: str) -> Reminder | None:
        """Получает напоминание пользователя по ID."""
        reminder = await self.db.get(Reminder, reminder_id)
        if reminder is None or reminder.user_id != user_id:
            return None
        return reminder

    async def delete(self, user_id: str, reminder_id: str) -> bool:
        """
        Удаляет напоминание по ID.

        Returns:
            bool: True, если напоминание было найдено и удалено, иначе False.
        """
        reminder = await self.get(user_id, reminder_id)
        if reminder is None:
            log.warning("Reminder id=%s not found for deletion (user %s).", reminder_id, user_id)
            return False
        await self.db.delete(reminder)
        await self.db.flush()
        log.info("Deleted reminder id=%s", reminder_id)
        return True

    async def update_completion(
        self, user_id: str, reminder_id: str, value: bool
    ) -> Reminder | None:
        """
        Меняет только флаг ``is_completed``.

        Returns:
            Reminder | None: Обновленный объект или None, если не найден.
        """
        reminder = await self.get(user_id, reminder_id)
        if reminder is None:
            log.warning("Reminder id=%s not found to update completion.", reminder_id)
            return None
        if reminder.is_completed == value:
            log.debug("Reminder id=%s already has is_completed=%s", reminder_id, value)
            return reminder
        reminder.is_completed = value
        await self.db.flush()
        await self.db.refresh(reminder)
        log.info("Reminder id=%s is_completed=%s", reminder_id, value)
        return reminder
