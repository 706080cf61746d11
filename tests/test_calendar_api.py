from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from petpal.main import app
from petpal.api.v1.reminders import get_calendar
from petpal.core.auth.security import create_access_token
from petpal.core.calendar.noop import NoOpCalendarProvider
from petpal.db.base import create_db_and_tables, drop_db_and_tables

AUTH = {"Authorization": f"Bearer {create_access_token({'user_id': 'u1'})}"}


@pytest.fixture
def client():
    calendar = NoOpCalendarProvider()
    app.dependency_overrides[get_calendar] = lambda: calendar
    with TestClient(app) as test_client:
        test_client.portal.call(create_db_and_tables)
        yield test_client
        test_client.portal.call(drop_db_and_tables)
    app.dependency_overrides.clear()


def test_month_view_requires_auth(client):
    response = client.get("/v1/calendar/month", params={"year": 2025, "month": 1})
    assert response.status_code == 401


def test_empty_month_view(client):
    response = client.get(
        "/v1/calendar/month",
        params={"year": 2025, "month": 1, "selected": "2025-01-10"},
        headers=AUTH,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "January 2025"
    assert data["previous"] == {"year": 2024, "month": 12}
    assert data["next"] == {"year": 2025, "month": 2}
    cells = data["cells"]
    assert len(cells) == 42
    assert cells[3]["date"] == "2025-01-01"
    assert [c["date"] for c in cells if c["is_selected"]] == ["2025-01-10"]
    assert not any(c["has_reminder"] for c in cells)


def test_month_view_marks_reminder_days(client):
    due = datetime.now(timezone.utc) + timedelta(days=1)
    created = client.post(
        "/v1/reminders",
        json={"pet_name": "Snowy", "message": "Vaccine", "due_at": due.isoformat()},
        headers=AUTH,
    )
    assert created.status_code == 201

    response = client.get("/v1/calendar/month", params={"year": due.year, "month": due.month}, headers=AUTH)
    assert response.status_code == 200
    cells = response.json()["cells"]
    assert [c["date"] for c in cells if c["has_reminder"]] == [due.date().isoformat()]
    today = datetime.now(timezone.utc).date()
    expected_today = [today.isoformat()] if (today.year, today.month) == (due.year, due.month) else []
    assert [c["date"] for c in cells if c["is_today"]] == expected_today


@pytest.mark.parametrize("month", [0, 13])
def test_invalid_month_is_rejected(client, month):
    response = client.get("/v1/calendar/month", params={"year": 2025, "month": month}, headers=AUTH)
    assert response.status_code == 422
