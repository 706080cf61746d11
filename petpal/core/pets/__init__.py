# petpal/core/pets/__init__.py

"""Pets package: анкеты питомцев пользователя."""

from .service import PetsService  # noqa: F401

__all__: list[str] = ["PetsService"]
