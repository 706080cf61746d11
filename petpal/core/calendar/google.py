# petpal/core/calendar/google.py

"""
Реализация календаря через Google Calendar API (v3).
Элемент-напоминание = событие нулевой длины с popup-уведомлением.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime
from typing import Any, Callable

from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from petpal.config import settings
from .base import BaseCalendarProvider, CalendarError, CalendarItemNotFound

log = logging.getLogger(__name__)

_SCOPES = ["https://www.googleapis.com/auth/calendar"]


class GoogleCalendarProvider(BaseCalendarProvider):
    """
    Провайдер для работы с Google Calendar.
    Требует путь к JSON с ключом сервисного аккаунта:
      settings.GOOGLE_CALENDAR_CREDENTIALS_JSON
    """

    name: str = "google"

    def __init__(self) -> None:
        super().__init__()
        self._svc: Any = None
        self._calendar_id = settings.GOOGLE_CALENDAR_ID

    async def _run(self, fn: Callable[[], Any]) -> Any:
        # googleapiclient синхронный, уводим вызов в пул потоков
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    async def request_access(self) -> bool:
        creds_path = settings.GOOGLE_CALENDAR_CREDENTIALS_JSON
        if not creds_path or not os.path.isfile(creds_path):
            log.error("[Calendar] Google credentials not found: %s", creds_path)
            return False
        try:
            creds = Credentials.from_service_account_file(creds_path, scopes=_SCOPES)
            self._svc = await self._run(
                lambda: build("calendar", "v3", credentials=creds, cache_discovery=False)
            )
        except (GoogleAuthError, ValueError) as exc:
            log.error("[Calendar] Google credentials rejected: %s", exc)
            return False
        return True

    async def _create_item(
        self,
        user_id: str,
        title: str,
        notes: str,
        due_at: datetime,
    ) -> str:
        body = {
            "summary": title,
            "description": notes,
            "start": {"dateTime": due_at.isoformat()},
            "end": {"dateTime": due_at.isoformat()},
            "reminders": {"useDefault": False, "overrides": [{"method": "popup", "minutes": 0}]},
            "extendedProperties": {"private": {"petpal_user_id": user_id}},
        }
        try:
            created = await self._run(
                lambda: self._svc.events()
                .insert(calendarId=self._calendar_id, body=body, sendUpdates="none")
                .execute()
            )
        except HttpError as exc:
            raise CalendarError(f"Google Calendar insert failed: {exc.reason}") from exc
        log.info("[Calendar] insert event for %s: %s @ %s", user_id, title, due_at.isoformat())
        return created["id"]

    async def delete_item(self, user_id: str, external_id: str) -> None:
        if self._svc is None and not await self.request_access():
            raise CalendarError("Google Calendar is not configured")
        try:
            await self._run(
                lambda: self._svc.events()
                .delete(calendarId=self._calendar_id, eventId=external_id, sendUpdates="none")
                .execute()
            )
        except HttpError as exc:
            if exc.resp.status in (404, 410):
                raise CalendarItemNotFound("Reminder not found") from exc
            raise CalendarError(f"Google Calendar delete failed: {exc.reason}") from exc
        log.info("[Calendar] deleted event %s for %s", external_id, user_id)


__all__ = ["GoogleCalendarProvider"]
