# petpal/api/v1/pets.py

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.core.auth.security import get_current_user
from petpal.core.pets.schemas import PetCreate, PetRead
from petpal.core.pets.service import PetsService
from petpal.core.users.models import User
from petpal.db.base import get_async_db_session

router = APIRouter(
    prefix="/v1/pets",
    tags=["Pets"],
    dependencies=[Depends(get_current_user)]
)
log = logging.getLogger(__name__)


@router.get("", response_model=List[PetRead], summary="List my pets")
async def list_pets(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db_session),
) -> List[PetRead]:
    pets = await PetsService(db).list_pets(current_user.id)
    return [PetRead.model_validate(p) for p in pets]


@router.get("/{pet_id}", response_model=PetRead, summary="Get pet profile")
async def get_pet(
    pet_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db_session),
) -> PetRead:
    pet = await PetsService(db).get_pet(current_user.id, pet_id)
    if pet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pet not found")
    return PetRead.model_validate(pet)


@router.post("", response_model=PetRead, status_code=status.HTTP_201_CREATED, summary="Add a pet")
async def create_pet(
    payload: PetCreate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db_session),
) -> PetRead:
    log.info("API: User '%s' adds pet '%s'", current_user.id, payload.name)
    pet = await PetsService(db).create_pet(current_user.id, payload)
    return PetRead.model_validate(pet)
