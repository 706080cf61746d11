# petpal/workers/tasks.py

from __future__ import annotations

from celery import Celery
from celery.utils.log import get_task_logger

from petpal.config import settings

log = get_task_logger(__name__)

celery_app = Celery(
    "petpal",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['petpal.workers.tasks'],
    task_serializer='json',
    result_serializer='json',
    accept_content=['json']
)
celery_app.conf.update(
    task_track_started=True,
    timezone='UTC',
    broker_connection_retry_on_startup=True,
)


@celery_app.task(
    name="petpal.workers.tasks.send_reminder_notification",
    bind=True,
    ignore_result=True,
)
def send_reminder_notification(self, user_id: str, title: str, body: str) -> str:
    """
    Доставляет локальное уведомление о напоминании.

    Ставится календарем устройства с ``eta`` = сроку напоминания.
    Канал доставки (push) подключается снаружи; здесь уведомление
    фиксируется в логе воркера.
    """
    log.info(
        "[notification %s] user=%s title=%r body=%r",
        self.request.id, user_id, title, body
    )
    return f"DELIVERED:{user_id}"


__all__ = ["celery_app", "send_reminder_notification"]
