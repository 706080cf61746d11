# petpal/core/pets/schemas.py

from __future__ import annotations

from pydantic import BaseModel, Field


class PetBase(BaseModel):
    """Общие поля анкеты питомца."""

    name: str = Field(..., min_length=1, max_length=128, description="Pet name")
    breed: str | None = Field(None, max_length=128)
    gender: str | None = Field(None, max_length=32)
    age: str | None = Field(None, max_length=32)
    color: str | None = Field(None, max_length=64)
    height: str | None = Field(None, max_length=32)
    weight: str | None = Field(None, max_length=32)
    image_url: str | None = Field(None, max_length=512, description="URL of an already uploaded photo")


class PetCreate(PetBase):
    """Питомец, приходящий от клиента (еще без ID)."""


class PetRead(PetBase):
    """Сохраненный питомец."""

    id: str = Field(..., description="Pet id (UUID)")

    model_config = {"from_attributes": True}


__all__: list[str] = ["PetCreate", "PetRead"]
