# petpal/core/reminders/models.py

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    String,
    Text,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from petpal.db.base import Base


class Reminder(Base):
    """
    ORM модель напоминания о питомце.

    Запись принадлежит одному пользователю; ``external_calendar_ref``
    указывает на элемент календаря устройства, созданный вместе с ней.
    """
    __tablename__ = 'reminders'

    # UUID генерируется на клиенте при создании и дальше не меняется
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False
    )
    pet_name: Mapped[str] = mapped_column(String(128), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # Момент, к которому относится напоминание (UTC)
    due_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    is_completed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
    # ID элемента в календаре устройства; None, если интеграция не сработала
    external_calendar_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index('ix_reminders_user_due_at', 'user_id', 'due_at'),
    )

    def __repr__(self) -> str: # pragma: no cover
        due_str = self.due_at.strftime('%Y-%m-%dT%H:%M:%S')
        return (
            f"<Reminder id={self.id!r} user_id={self.user_id!r} pet={self.pet_name!r} "
            f"due='{due_str}' completed={self.is_completed}>"
        )
