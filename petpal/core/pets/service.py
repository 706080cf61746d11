# petpal/core/pets/service.py

from __future__ import annotations

import logging
import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Pet
from .schemas import PetCreate

log = logging.getLogger(__name__)


class PetsService:
    """Асинхронный сервис анкет питомцев, ограниченный одним пользователем."""

    def __init__(self, db_session: AsyncSession) -> None:
        self.db: AsyncSession = db_session

    async def list_pets(self, user_id: str) -> Sequence[Pet]:
        stmt = select(Pet).where(Pet.user_id == user_id).order_by(Pet.created_at, Pet.name)
        result = await self.db.scalars(stmt)
        pets = result.all()
        log.debug("Found %d pets for user %s", len(pets), user_id)
        return pets

    async def get_pet(self, user_id: str, pet_id: str) -> Pet | None:
        """Возвращает питомца пользователя или None (в том числе для чужого ID)."""
        pet = await self.db.get(Pet, pet_id)
        if pet is None or pet.user_id != user_id:
            return None
        return pet

    async def create_pet(self, user_id: str, data: PetCreate) -> Pet:
        pet = Pet(id=str(uuid.uuid4()), user_id=user_id, **data.model_dump())
        self.db.add(pet)
        await self.db.flush()
        await self.db.refresh(pet)
        log.info("Created pet id=%s (%s) for user %s", pet.id, pet.name, user_id)
        return pet
