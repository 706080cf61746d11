# petpal/core/users/models.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func # для server_default

from petpal.db.base import Base


class User(Base):
    __tablename__ = 'users'

    # ID приходит из токена внешнего identity-провайдера (sub)
    id: Mapped[str] = mapped_column(String(128), primary_key=True, index=True, comment="External subject id")
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True, comment="User email")
    name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, comment="User display name")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str: # pragma: no cover
        return f"<User id={self.id!r}>"
