# petpal/api/v1/calendar.py

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from petpal.api.v1.reminders import get_reminder_coordinator
from petpal.core.auth.security import get_current_user
from petpal.core.calendar import CalendarDayCell, month_title, shift_month
from petpal.core.reminders.coordinator import ReminderCoordinator

router = APIRouter(
    prefix="/v1/calendar",
    tags=["calendar"],
    dependencies=[Depends(get_current_user)]
)


class MonthRef(BaseModel):
    year: int
    month: int


class MonthView(BaseModel):
    title: str
    year: int
    month: int
    previous: MonthRef
    next: MonthRef
    cells: List[CalendarDayCell]


@router.get("/month", response_model=MonthView, summary="Month grid with reminder markers")
async def get_month(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    selected: Optional[dt.date] = Query(None, description="Selected day (YYYY-MM-DD)"),
    coordinator: ReminderCoordinator = Depends(get_reminder_coordinator),
) -> MonthView:
    if not await coordinator.load_all():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=coordinator.state.error_message,
        )
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return MonthView(
        title=month_title(year, month),
        year=year,
        month=month,
        previous=MonthRef(year=prev_year, month=prev_month),
        next=MonthRef(year=next_year, month=next_month),
        cells=coordinator.month_grid(year, month, selected=selected),
    )
