"""
Device calendar subsystem package.

• ``BaseCalendarProvider`` – абстрактный интерфейс провайдера (см. base.py).
• ``get_calendar_provider()`` – фабрика, возвращающая ЕДИНСТВЕННЫЙ инстанс
  провайдера по имени или из ``settings.CALENDAR_PROVIDER``.
• ``build_month_grid()`` – сетка месяца 6×7 для виджета календаря.

Ленивая загрузка (``importlib.import_module``) исключает тяжёлые
зависимости (Google SDK и т. п.) в dev/CI, пока они реально не нужны.
"""
from __future__ import annotations

import importlib
import logging
from typing import Callable, Dict, Type

from petpal.config import settings
from .base import (
    BaseCalendarProvider,
    CalendarAccessDenied,
    CalendarError,
    CalendarItemNotFound,
)
from .month_grid import CalendarDayCell, build_month_grid, month_title, shift_month

log = logging.getLogger(__name__)


def _lazy_import(module_suffix: str, class_name: str) -> Type[BaseCalendarProvider]:
    """
    _lazy_import(".noop", "NoOpCalendarProvider")  →  <class NoOpCalendarProvider>
    Относительный путь (``.noop``) ищется внутри текущего пакета.
    """
    module_name = f"{__name__}{module_suffix}"
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        log.error("Failed to lazy-import calendar provider '%s': %s", module_name, exc)
        raise ImportError(f"Could not import provider {class_name} from {module_name}") from exc
    return getattr(module, class_name)


# --------------------------------------------------------------------------- #
#                       registry: name → provider-class                       #
# --------------------------------------------------------------------------- #
_PROVIDER_LOADERS: Dict[str, Callable[[], Type[BaseCalendarProvider]]] = {
    "noop": lambda: _lazy_import(".noop", "NoOpCalendarProvider"),
    "google": lambda: _lazy_import(".google", "GoogleCalendarProvider"),
}

_provider_instances: Dict[str, BaseCalendarProvider] = {}


def get_calendar_provider(name: str | None = None) -> BaseCalendarProvider:
    """
    Вернуть экземпляр календарного провайдера.

    • ``name`` – явное имя (case-insensitive).
    • Если не передано ― берём из ``settings.CALENDAR_PROVIDER``.

    Экземпляр кешируется: состояние доступа и in-memory элементы
    переживают отдельные запросы.
    """
    provider_key = (name or settings.CALENDAR_PROVIDER).lower()
    provider = _provider_instances.get(provider_key)
    if provider is None:
        loader = _PROVIDER_LOADERS.get(provider_key)
        if loader is None:
            raise ValueError(f"Unknown calendar provider: {provider_key}")
        provider = loader()()
        _provider_instances[provider_key] = provider
        log.info("Initialized calendar provider instance: %s", provider.name)
    return provider


def reset_calendar_providers() -> None:
    """Сбрасывает кеш провайдеров (тесты)."""
    _provider_instances.clear()


__all__: list[str] = [
    "BaseCalendarProvider",
    "CalendarError",
    "CalendarAccessDenied",
    "CalendarItemNotFound",
    "CalendarDayCell",
    "build_month_grid",
    "month_title",
    "shift_month",
    "get_calendar_provider",
    "reset_calendar_providers",
]
