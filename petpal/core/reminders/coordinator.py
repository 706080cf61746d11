# petpal/core/reminders/coordinator.py

"""
Координатор жизненного цикла напоминаний.

Связывает удаленное хранилище (``RemindersService``) и календарь устройства
(``BaseCalendarProvider``) и держит для UI отсортированный список,
флаг загрузки и последнее сообщение об ошибке.

Ни одна операция не бросает исключений наружу: ошибки логируются и
превращаются в ``state.error_message``. После каждой записи список
целиком перечитывается из хранилища.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from petpal.config import settings
from petpal.core.calendar import (
    BaseCalendarProvider,
    CalendarAccessDenied,
    CalendarDayCell,
    CalendarItemNotFound,
    build_month_grid,
)
from .schemas import ReminderListState, ReminderRead
from .service import RemindersService

log = logging.getLogger(__name__)

StateListener = Callable[[ReminderListState], None]

NOT_LOGGED_IN = "User not logged in"


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ReminderCoordinator:
    """
    Оркестрирует create / load / complete / delete для одного пользователя.

    ``user_id=None`` означает, что пользователь не аутентифицирован:
    все операции сразу завершаются с ошибкой ``"User not logged in"``.
    """

    def __init__(
        self,
        store: RemindersService,
        calendar: BaseCalendarProvider,
        user_id: Optional[str],
        *,
        clock: Callable[[], dt.datetime] = _utc_now,
        title_template: Optional[str] = None,
    ) -> None:
        self.store = store
        self.calendar = calendar
        self.user_id = user_id
        self._clock = clock
        self._title_template = title_template or settings.REMINDER_TITLE_TEMPLATE
        self._state = ReminderListState()
        self._listeners: List[StateListener] = []

    # ------------------------------------------------------------------ #
    #                              state                                 #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> ReminderListState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Подписывает ``listener`` на изменения состояния.
        Возвращает функцию отписки.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _update(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                log.exception("Reminder state listener %r failed", listener)

    def _fail(self, message: str) -> bool:
        self._update(is_loading=False, error_message=message)
        return False

    # ------------------------------------------------------------------ #
    #                            operations                              #
    # ------------------------------------------------------------------ #

    async def load_all(self) -> bool:
        """
        Перечитывает все напоминания пользователя и заменяет список.
        При ошибке список остается прежним.
        """
        if self.user_id is None:
            return self._fail(NOT_LOGGED_IN)

        self._update(is_loading=True, error_message=None)
        try:
            records = await self.store.list_all(self.user_id)
            reminders = sorted(
                (ReminderRead.model_validate(r) for r in records),
                key=lambda r: r.due_at,
            )
        except Exception as exc:
            log.exception("Failed to load reminders for user %s", self.user_id)
            return self._fail(f"Failed to load reminders: {exc}")

        self._update(reminders=reminders, is_loading=False, error_message=None)
        log.debug("Loaded %d reminders for user %s", len(reminders), self.user_id)
        return True

    async def create(self, pet_name: str, message: str, due_at: dt.datetime) -> bool:
        """
        Создает напоминание: элемент календаря → уведомление → запись в БД → reload.

        Если календарь отказал (в том числе в доступе), в БД ничего
        не пишется. Ошибка планирования уведомления игнорируется.

        Returns:
            bool: True, если напоминание сохранено. Ошибка перечитывания
                списка остается в ``state.error_message``.
        """
        if self.user_id is None:
            return self._fail(NOT_LOGGED_IN)

        pet_name = (pet_name or "").strip()
        message = (message or "").strip()
        if not pet_name:
            return self._fail("Please enter a pet name")
        if not message:
            return self._fail("Please enter a reminder message")
        if due_at.tzinfo is None:
            due_at = due_at.replace(tzinfo=ZoneInfo(settings.DEFAULT_TIMEZONE))
        if due_at <= self._clock():
            return self._fail("Please select a future date/time")

        self._update(is_loading=True, error_message=None)
        title = self._title_template.format(pet_name=pet_name)

        # 1. Элемент в календаре устройства
        try:
            external_id = await self.calendar.create_item(self.user_id, title, message, due_at)
        except CalendarAccessDenied as exc:
            log.warning("Calendar access denied, reminder for user %s not created", self.user_id)
            return self._fail(f"Failed to create reminder: {exc}")
        except Exception as exc:
            log.exception("Calendar item creation failed for user %s", self.user_id)
            return self._fail(f"Failed to create reminder: {exc}")

        # 2. Локальное уведомление (best-effort)
        try:
            await self.calendar.schedule_notification(self.user_id, title, message, due_at)
        except Exception:
            log.warning("Failed to schedule notification for user %s", self.user_id, exc_info=True)

        # 3. Запись в хранилище
        try:
            await self.store.create(
                self.user_id,
                pet_name=pet_name,
                message=message,
                due_at=due_at,
                external_calendar_ref=external_id,
            )
        except Exception as exc:
            log.exception("Failed to persist reminder for user %s", self.user_id)
            await self._discard_calendar_item(external_id)
            return self._fail(f"Failed to create reminder: {exc}")

        # 4. Обновляем список; запись уже сделана, ошибка перечитывания
        # остается только в error_message
        if not await self.load_all():
            log.warning("Reminder for user %s stored, but the list reload failed", self.user_id)
        return True

    async def delete(self, reminder: ReminderRead) -> bool:
        """
        Удаляет элемент календаря (best-effort) и запись в БД, затем reload.
        Ошибка календаря попадает в ``error_message``, но удаление записи
        все равно выполняется.
        """
        if self.user_id is None:
            return self._fail(NOT_LOGGED_IN)
        if not reminder.id:
            return self._fail("Cannot delete reminder: missing ID")

        self._update(is_loading=True, error_message=None)

        # Ссылку на календарь берем из хранилища, а не из переданного объекта
        try:
            stored = await self.store.get(self.user_id, reminder.id)
        except Exception as exc:
            log.exception("Failed to fetch reminder %s", reminder.id)
            return self._fail(f"Failed to delete reminder: {exc}")
        if stored is None:
            return self._fail("Reminder not found")
        external_ref = stored.external_calendar_ref

        calendar_error: Optional[str] = None
        if external_ref:
            try:
                await self.calendar.delete_item(self.user_id, external_ref)
            except CalendarItemNotFound as exc:
                log.warning(
                    "Calendar item %s for reminder %s is already gone",
                    external_ref, reminder.id
                )
                calendar_error = str(exc)
            except Exception as exc:
                log.exception("Failed to delete calendar item %s", external_ref)
                calendar_error = str(exc)

        try:
            deleted = await self.store.delete(self.user_id, reminder.id)
        except Exception as exc:
            log.exception("Failed to delete reminder %s", reminder.id)
            return self._fail(f"Failed to delete reminder: {exc}")

        if not await self.load_all():
            return False
        if not deleted:
            return self._fail("Reminder not found")
        if calendar_error:
            self._update(error_message=f"Calendar item could not be removed: {calendar_error}")
        return True

    async def set_completed(self, reminder: ReminderRead, value: bool = True) -> bool:
        """
        Меняет только флаг выполнения, календарь не трогает.
        Выполненное напоминание обратно не открывается.
        """
        if self.user_id is None:
            return self._fail(NOT_LOGGED_IN)
        if not reminder.id:
            return self._fail("Cannot update reminder: missing ID")

        try:
            current = await self.store.get(self.user_id, reminder.id)
            if current is None:
                return self._fail("Reminder not found")
            if current.is_completed and not value:
                return self._fail("Completed reminders cannot be reopened")
            await self.store.update_completion(self.user_id, reminder.id, value)
        except Exception as exc:
            log.exception("Failed to update reminder %s", reminder.id)
            return self._fail(f"Failed to update reminder: {exc}")

        return await self.load_all()

    async def upcoming(self, window: Optional[dt.timedelta] = None) -> List[ReminderRead]:
        """
        Незавершенные напоминания на ближайшие ``window``
        (по умолчанию ``settings.UPCOMING_WINDOW_DAYS`` дней).
        """
        if self.user_id is None:
            self._fail(NOT_LOGGED_IN)
            return []
        if window is None:
            window = dt.timedelta(days=settings.UPCOMING_WINDOW_DAYS)
        try:
            records = await self.store.list_upcoming(self.user_id, window, now=self._clock())
        except Exception as exc:
            log.exception("Failed to load upcoming reminders for user %s", self.user_id)
            self._fail(f"Failed to load reminders: {exc}")
            return []
        return [ReminderRead.model_validate(r) for r in records]

    def month_grid(
        self,
        year: int,
        month: int,
        *,
        selected: Optional[dt.date] = None,
        today: Optional[dt.date] = None,
    ) -> List[CalendarDayCell]:
        """Сетка месяца по текущему списку напоминаний."""
        return build_month_grid(
            year,
            month,
            [r.due_at for r in self._state.reminders],
            selected=selected,
            today=today,
        )

    # ------------------------------------------------------------------ #

    async def _discard_calendar_item(self, external_id: str) -> None:
        try:
            await self.calendar.delete_item(self.user_id, external_id)
        except Exception:
            log.warning("Could not roll back calendar item %s", external_id, exc_info=True)

    def find(self, reminder_id: str) -> Optional[ReminderRead]:
        """Ищет напоминание в текущем списке."""
        return next((r for r in self._state.reminders if r.id == reminder_id), None)


__all__ = ["ReminderCoordinator", "StateListener", "NOT_LOGGED_IN"]
