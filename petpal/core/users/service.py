# petpal/core/users/service.py

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from petpal.core.users.models import User

log = logging.getLogger(__name__)


class UsersService:
    """
    Асинхронный сервис для работы с пользователями.
    Пользователи заводятся лениво: первый валидный токен создает запись.
    """

    def __init__(self, db_session: AsyncSession):
        """
        Инициализирует сервис с асинхронной сессией БД.

        Args:
            db_session (AsyncSession): Активная сессия SQLAlchemy.
        """
        self.db: AsyncSession = db_session

    async def get_or_create_user(
        self, user_id: str, email: str | None = None, name: str | None = None
    ) -> User:
        """
        Находит пользователя по ID или создает нового.
        Если передано имя или email и они отличаются, обновляет их.

        Args:
            user_id (str): Идентификатор пользователя (sub из токена).
            email (str | None, optional): Email пользователя.
            name (str | None, optional): Имя пользователя.

        Returns:
            User: Найденный или созданный объект пользователя (ORM модель).
        """
        log.debug("Ensuring user by id=%s", user_id)
        user = await self.db.get(User, user_id)
        if not user:
            log.info("User with id=%s not found, creating.", user_id)
            user = User(id=user_id, email=email, name=name)
            self.db.add(user)
            await self.db.flush()
            await self.db.refresh(user)
            log.info("Created new user: %r", user)
            return user

        changed = False
        if name and user.name != name:
            user.name = name
            changed = True
        if email and user.email != email:
            user.email = email
            changed = True
        if changed:
            log.debug("Updating profile for existing user %s", user.id)
            await self.db.flush()
            await self.db.refresh(user)
        return user
