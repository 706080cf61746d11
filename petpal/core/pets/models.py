# petpal/core/pets/models.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from petpal.db.base import Base


class Pet(Base):
    __tablename__ = 'pets'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    # Анкета питомца: свободный текст, как его вводит пользователь
    breed: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    age: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    height: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    weight: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    # URL уже загруженного фото (загрузка делается вне сервиса)
    image_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str: # pragma: no cover
        return f"<Pet id={self.id!r} user_id={self.user_id!r} name={self.name!r}>"
