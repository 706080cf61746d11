# petpal/core/auth/schemas.py

from __future__ import annotations # Обязательно для type hints

from pydantic import BaseModel, Field

class TokenData(BaseModel):
    """
    Схема для данных, хранящихся внутри JWT токена.
    ``sub`` токена – идентификатор пользователя у identity-провайдера.
    """
    user_id: str | None = Field(None, description="User ID within our application")
    email: str | None = Field(None, description="Email claim, if present")
    name: str | None = Field(None, description="Display name claim, if present")
