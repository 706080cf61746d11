# petpal/__init__.py
"""
PetPal backend: питомцы, напоминания о уходе, календарь устройства.
Точка входа ASGI – ``petpal.main:app``, воркер – ``petpal.workers.tasks``.
"""
__all__: list[str] = ["main"]
