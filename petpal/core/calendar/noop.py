# petpal/core/calendar/noop.py

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Dict, List, TypedDict

from .base import BaseCalendarProvider, CalendarItemNotFound

log = logging.getLogger(__name__)


class CalendarItem(TypedDict):
    id: str
    user_id: str
    title: str
    notes: str
    due_at: datetime


class ScheduledNotification(TypedDict):
    user_id: str
    title: str
    body: str
    at: datetime


class NoOpCalendarProvider(BaseCalendarProvider):
    """
    Асинхронная заглушка-календарь; хранит элементы в оперативной памяти.
    ``grant_access`` управляет ответом на запрос доступа (для тестов).
    """

    name: str = "noop"

    def __init__(self, grant_access: bool = True) -> None:
        super().__init__()
        self.grant_access = grant_access
        self.access_requests = 0
        # Внутреннее «хранилище» элементов
        self.items: Dict[str, CalendarItem] = {}
        self.notifications: List[ScheduledNotification] = []
        log.info("Initialized NoOpCalendarProvider (in-memory)")

    async def request_access(self) -> bool:
        self.access_requests += 1
        log.debug("NoOp: access requested (#%d), granted=%s", self.access_requests, self.grant_access)
        return self.grant_access

    async def _create_item(
        self,
        user_id: str,
        title: str,
        notes: str,
        due_at: datetime,
    ) -> str:
        item_id = str(uuid.uuid4())
        self.items[item_id] = CalendarItem(
            id=item_id, user_id=user_id, title=title, notes=notes, due_at=due_at
        )
        log.info("NoOp: Item '%s' added with id %s for user %s", title, item_id, user_id)
        return item_id

    async def delete_item(self, user_id: str, external_id: str) -> None:
        item = self.items.get(external_id)
        if item is None or item["user_id"] != user_id:
            log.warning("NoOp: Item id %s not found for deletion", external_id)
            raise CalendarItemNotFound("Reminder not found")
        del self.items[external_id]
        log.info("NoOp: Item id %s deleted", external_id)

    async def schedule_notification(
        self,
        user_id: str,
        title: str,
        body: str,
        at: datetime,
    ) -> None:
        self.notifications.append(
            ScheduledNotification(user_id=user_id, title=title, body=body, at=at)
        )
        await super().schedule_notification(user_id, title, body, at)


__all__ = ["NoOpCalendarProvider", "CalendarItem", "ScheduledNotification"]
