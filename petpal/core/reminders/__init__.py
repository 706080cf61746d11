# petpal/core/reminders/__init__.py

"""
Reminders package.

Экспортируем основные элементы, чтобы внешние модули могли писать
`from petpal.core.reminders import ReminderCoordinator`.
"""

from .coordinator import ReminderCoordinator  # noqa: F401
from .schemas import ReminderListState, ReminderRead  # noqa: F401
from .service import RemindersService  # noqa: F401

__all__: list[str] = [
    "ReminderCoordinator",
    "ReminderListState",
    "ReminderRead",
    "RemindersService",
]
