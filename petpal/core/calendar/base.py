# petpal/core/calendar/base.py
"""
Abstract base and errors for device calendar providers.
All provider methods are asynchronous.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime

log = logging.getLogger(__name__)


class CalendarError(Exception):
    """Базовая ошибка календаря устройства."""


class CalendarAccessDenied(CalendarError):
    """Пользователь не дал доступ к напоминаниям/календарю."""


class CalendarItemNotFound(CalendarError):
    """Идентификатор больше не указывает ни на один элемент календаря."""


class BaseCalendarProvider(ABC):
    """
    Абстрактный интерфейс календаря устройства (АСИНХРОННЫЙ).

    Провайдер создает и удаляет элементы-напоминания и планирует
    локальные уведомления. Доступ запрашивается лениво при первой записи
    и может запрашиваться повторно, если раньше был отклонен.
    """

    # Имя провайдера (например, 'noop', 'google')
    name: str

    def __init__(self) -> None:
        self.access_granted: bool = False

    @abstractmethod
    async def request_access(self) -> bool:
        """
        Запрашивает доступ к календарю.

        Returns:
            bool: True, если доступ предоставлен.
        """
        ...

    async def create_item(
        self,
        user_id: str,
        title: str,
        notes: str,
        due_at: datetime,
    ) -> str:
        """
        Создает элемент-напоминание и возвращает его ID у провайдера.

        Если доступ еще не получен, сначала запрашивает его.

        Raises:
            CalendarAccessDenied: Доступ не предоставлен.
            CalendarError: Ошибка хранилища провайдера.
        """
        if not self.access_granted:
            self.access_granted = await self.request_access()
            if not self.access_granted:
                log.warning("[%s] Calendar access denied for user %s", self.name, user_id)
                raise CalendarAccessDenied("Permission denied for reminders")
        return await self._create_item(user_id, title, notes, due_at)

    @abstractmethod
    async def _create_item(
        self,
        user_id: str,
        title: str,
        notes: str,
        due_at: datetime,
    ) -> str:
        ...

    @abstractmethod
    async def delete_item(self, user_id: str, external_id: str) -> None:
        """
        Удаляет элемент календаря по его ID у провайдера.

        Raises:
            CalendarItemNotFound: Элемент не найден.
            CalendarError: Прочие ошибки провайдера.
        """
        ...

    async def schedule_notification(
        self,
        user_id: str,
        title: str,
        body: str,
        at: datetime,
    ) -> None:
        """
        Планирует локальное уведомление на момент ``at``.

        По умолчанию ставит Celery-задачу с ``eta=at``. Результат
        никем не проверяется: уведомление некритично.
        """
        # Импорт здесь: tasks тянет Celery-конфиг
        from petpal.workers.tasks import send_reminder_notification

        send_reminder_notification.apply_async(
            kwargs={"user_id": user_id, "title": title, "body": body},
            eta=at,
        )
        log.debug("[%s] Notification for user %s scheduled at %s", self.name, user_id, at.isoformat())


__all__ = [
    "CalendarError",
    "CalendarAccessDenied",
    "CalendarItemNotFound",
    "BaseCalendarProvider",
]
