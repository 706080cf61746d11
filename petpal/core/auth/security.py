# petpal/core/auth/security.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.config import settings
from petpal.db.base import get_async_db_session
from petpal.core.users.models import User
from petpal.core.users.service import UsersService

from .schemas import TokenData

log = logging.getLogger(__name__)

# Токены выпускает внешний identity-провайдер; мы только проверяем подпись.
bearer_scheme = HTTPBearer(auto_error=False)

# --- Функции для работы с JWT ---

def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Создает JWT токен доступа (скрипты и тесты).

    Args:
        data (dict): Данные для включения в payload токена.
                     Ключ 'user_id' будет использован как 'sub'.
        expires_delta (timedelta | None, optional): Время жизни токена.
                                                     Если None, используется значение из настроек.

    Returns:
        str: Сгенерированный JWT токен.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    if "user_id" in to_encode:
        to_encode["sub"] = str(to_encode.pop("user_id"))
    elif "sub" not in to_encode:
        raise ValueError("Missing 'user_id' or 'sub' in data for JWT")

    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    log.debug("Created JWT token for sub: %s", to_encode.get("sub"))
    return encoded_jwt

def verify_token(token: str, credentials_exception: HTTPException) -> TokenData:
    """
    Верифицирует JWT токен и возвращает данные из него.

    Args:
        token (str): JWT токен.
        credentials_exception (HTTPException): Исключение для выброса при ошибке.

    Returns:
        TokenData: Валидированные данные из токена.

    Raises:
        HTTPException: Если токен невалиден или истек.
    """
    try:
        # jwt.decode сам проверяет exp
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        user_id: str | None = payload.get("sub")
        if user_id is None:
            log.warning("Token verification failed: 'sub' (user_id) claim missing.")
            raise credentials_exception
        token_data = TokenData(user_id=user_id, email=payload.get("email"), name=payload.get("name"))
    except JWTError as e:
        log.warning("Token verification failed: JWTError - %s", e)
        raise credentials_exception from e
    except ValidationError as e:
        log.warning("Token verification failed: ValidationError - %s", e)
        raise credentials_exception from e

    log.debug("Token verified successfully for user_id: %s", user_id)
    return token_data

# --- FastAPI Dependency для получения текущего пользователя ---

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_db_session)
) -> User:
    """
    FastAPI зависимость для получения текущего аутентифицированного пользователя.

    Верифицирует токен и загружает пользователя из БД; при первом
    обращении пользователь создается.

    Raises:
        HTTPException: status_code 401, если аутентификация не удалась.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="User not logged in",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    token_data = verify_token(credentials.credentials, credentials_exception)

    user = await UsersService(db).get_or_create_user(
        token_data.user_id, email=token_data.email, name=token_data.name
    )
    log.debug("Authenticated user retrieved: %r", user)
    return user
