# petpal/core/calendar/month_grid.py
"""
Сетка месяца для виджета календаря.

Чистая функция: (месяц, даты напоминаний, выбранный день, сегодня) →
ровно 42 ячейки (6 недель). Ячейки вне месяца – пустые (``date=None``).
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict

from petpal.config import settings

GRID_SIZE = 42  # 6 недель × 7 дней


class CalendarDayCell(BaseModel):
    """Ячейка сетки. Пересчитывается при каждом рендере, не хранится."""

    model_config = ConfigDict(frozen=True)

    date: Optional[dt.date] = None
    is_today: bool = False
    is_selected: bool = False
    has_reminder: bool = False


def _local_date(value: Union[dt.datetime, dt.date], tz: dt.tzinfo) -> dt.date:
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def build_month_grid(
    year: int,
    month: int,
    reminder_dates: Iterable[Union[dt.datetime, dt.date]] = (),
    *,
    selected: Optional[dt.date] = None,
    today: Optional[dt.date] = None,
    first_weekday: Optional[int] = None,
    tz: Optional[dt.tzinfo] = None,
) -> List[CalendarDayCell]:
    """
    Строит сетку месяца из 42 ячеек.

    Args:
        year (int): Год.
        month (int): Месяц 1..12.
        reminder_dates: Моменты напоминаний; сравнение по дню (год/месяц/число)
            в часовом поясе ``tz``, время игнорируется.
        selected (date | None): Выбранный пользователем день.
        today (date | None): «Сегодня»; по умолчанию текущая дата в ``tz``.
        first_weekday (int | None): Первый столбец (0=понедельник ... 6=воскресенье),
            по умолчанию ``settings.CALENDAR_FIRST_WEEKDAY``.
        tz (tzinfo | None): Часовой пояс, по умолчанию ``settings.DEFAULT_TIMEZONE``.

    Returns:
        List[CalendarDayCell]: Ровно ``GRID_SIZE`` ячеек.

    Raises:
        ValueError: Некорректный месяц.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    tz = tz or ZoneInfo(settings.DEFAULT_TIMEZONE)
    if first_weekday is None:
        first_weekday = settings.CALENDAR_FIRST_WEEKDAY
    if today is None:
        today = dt.datetime.now(tz).date()

    marked = {_local_date(value, tz) for value in reminder_dates}

    first_day = dt.date(year, month, 1)
    offset = (first_day.weekday() - first_weekday) % 7
    days_in_month = calendar.monthrange(year, month)[1]

    cells: List[CalendarDayCell] = [CalendarDayCell() for _ in range(offset)]
    for day_number in range(1, days_in_month + 1):
        day = dt.date(year, month, day_number)
        cells.append(
            CalendarDayCell(
                date=day,
                is_today=day == today,
                is_selected=day == selected,
                has_reminder=day in marked,
            )
        )

    # 31 день + 6 пустых в начале = 37, так что 42 всегда хватает
    cells.extend(CalendarDayCell() for _ in range(GRID_SIZE - len(cells)))
    return cells


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """shift_month(2025, 1, -1) → (2024, 12)"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_title(year: int, month: int) -> str:
    """month_title(2025, 1) → 'January 2025'"""
    return f"{calendar.month_name[month]} {year}"


__all__ = ["GRID_SIZE", "CalendarDayCell", "build_month_grid", "shift_month", "month_title"]
