# tests/test_reminder_coordinator.py
import datetime as dt

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.core.calendar.noop import NoOpCalendarProvider
from petpal.core.reminders.coordinator import NOT_LOGGED_IN, ReminderCoordinator
from petpal.core.reminders.schemas import ReminderRead
from petpal.core.reminders.service import RemindersService
from petpal.core.users.models import User
from petpal.db.base import async_session_context, create_db_and_tables, drop_db_and_tables

USER_ID = "owner-1"


@pytest_asyncio.fixture(scope="function", autouse=True)
async def setup_db():
    await create_db_and_tables()
    yield
    await drop_db_and_tables()


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    async with async_session_context() as session:
        session.add(User(id=USER_ID))
        await session.flush()
        yield session


@pytest.fixture
def calendar() -> NoOpCalendarProvider:
    return NoOpCalendarProvider()


@pytest.fixture
def coordinator(db_session: AsyncSession, calendar: NoOpCalendarProvider) -> ReminderCoordinator:
    return ReminderCoordinator(RemindersService(db_session), calendar, USER_ID)


def _in(**delta) -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc) + dt.timedelta(**delta)


# --- create ---

@pytest.mark.asyncio
async def test_create_snowy_vaccine_end_to_end(coordinator, calendar):
    due = _in(days=1)

    assert await coordinator.create("Snowy", "Vaccine", due) is True

    state = coordinator.state
    assert state.error_message is None
    assert state.is_loading is False
    assert len(state.reminders) == 1
    reminder = state.reminders[0]
    assert reminder.pet_name == "Snowy"
    assert reminder.message == "Vaccine"
    assert reminder.is_completed is False
    assert reminder.due_at == due

    # Элемент календаря и уведомление созданы, ссылка сохранена
    assert reminder.external_calendar_ref in calendar.items
    item = calendar.items[reminder.external_calendar_ref]
    assert item["title"] == "Pet Reminder: Snowy"
    assert item["notes"] == "Vaccine"
    assert calendar.notifications[0]["title"] == "Pet Reminder: Snowy"
    assert calendar.notifications[0]["at"] == due


@pytest.mark.asyncio
async def test_reminder_lifecycle_create_complete_delete(coordinator):
    tomorrow = (dt.datetime.now(dt.timezone.utc) + dt.timedelta(days=1)).replace(
        hour=10, minute=0, second=0, microsecond=0
    )
    if tomorrow <= dt.datetime.now(dt.timezone.utc):
        tomorrow += dt.timedelta(days=1)

    assert await coordinator.create("Snowy", "Vaccine", tomorrow)
    assert await coordinator.load_all()
    assert len(coordinator.state.reminders) == 1
    created = coordinator.state.reminders[0]
    assert created.pet_name == "Snowy"
    assert created.is_completed is False

    assert await coordinator.set_completed(created, True)
    assert coordinator.find(created.id).is_completed is True

    assert await coordinator.delete(coordinator.find(created.id))
    assert coordinator.find(created.id) is None
    assert coordinator.state.error_message is None


@pytest.mark.asyncio
async def test_create_keeps_list_sorted(coordinator):
    assert await coordinator.create("Rex", "Checkup", _in(days=5))
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    assert await coordinator.create("Tom", "Brush", _in(days=3))

    due_dates = [r.due_at for r in coordinator.state.reminders]
    assert due_dates == sorted(due_dates)
    assert [r.pet_name for r in coordinator.state.reminders] == ["Snowy", "Tom", "Rex"]


@pytest.mark.asyncio
async def test_create_without_calendar_access_stores_nothing(db_session):
    calendar = NoOpCalendarProvider(grant_access=False)
    coordinator = ReminderCoordinator(RemindersService(db_session), calendar, USER_ID)

    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is False

    assert coordinator.state.error_message == "Failed to create reminder: Permission denied for reminders"
    assert coordinator.state.is_loading is False
    assert await RemindersService(db_session).list_all(USER_ID) == []
    assert calendar.items == {}
    assert calendar.notifications == []


@pytest.mark.asyncio
async def test_access_is_requested_again_after_denial(db_session):
    calendar = NoOpCalendarProvider(grant_access=False)
    coordinator = ReminderCoordinator(RemindersService(db_session), calendar, USER_ID)

    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is False
    calendar.grant_access = True
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is True

    assert calendar.access_requests == 2
    assert len(coordinator.state.reminders) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "pet_name, message, expected",
    [
        ("", "Vaccine", "Please enter a pet name"),
        ("   ", "Vaccine", "Please enter a pet name"),
        ("Snowy", "", "Please enter a reminder message"),
    ],
)
async def test_create_validates_input(coordinator, calendar, pet_name, message, expected):
    assert await coordinator.create(pet_name, message, _in(days=1)) is False
    assert coordinator.state.error_message == expected
    assert calendar.access_requests == 0


@pytest.mark.asyncio
async def test_create_rejects_past_due_date(coordinator, calendar):
    assert await coordinator.create("Snowy", "Vaccine", _in(minutes=-1)) is False
    assert coordinator.state.error_message == "Please select a future date/time"
    assert calendar.items == {}


@pytest.mark.asyncio
async def test_create_trims_input(coordinator):
    assert await coordinator.create("  Snowy ", " Vaccine\n", _in(days=1))
    reminder = coordinator.state.reminders[0]
    assert reminder.pet_name == "Snowy"
    assert reminder.message == "Vaccine"


@pytest.mark.asyncio
async def test_notification_failure_does_not_abort_create(coordinator, calendar, monkeypatch):
    async def broken_schedule(*args, **kwargs):
        raise RuntimeError("broker is down")

    monkeypatch.setattr(calendar, "schedule_notification", broken_schedule)

    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is True
    assert coordinator.state.error_message is None
    assert len(coordinator.state.reminders) == 1


@pytest.mark.asyncio
async def test_store_failure_rolls_back_calendar_item(db_session, calendar, monkeypatch):
    store = RemindersService(db_session)

    async def broken_create(*args, **kwargs):
        raise RuntimeError("db unavailable")

    monkeypatch.setattr(store, "create", broken_create)
    coordinator = ReminderCoordinator(store, calendar, USER_ID)

    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is False
    assert coordinator.state.error_message == "Failed to create reminder: db unavailable"
    assert calendar.items == {}


@pytest.mark.asyncio
async def test_reload_failure_after_store_write_still_succeeds(coordinator, calendar, monkeypatch):
    async def broken_list(user_id):
        raise RuntimeError("replica lag")

    monkeypatch.setattr(coordinator.store, "list_all", broken_list)

    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is True
    assert coordinator.state.error_message == "Failed to load reminders: replica lag"
    assert coordinator.state.is_loading is False

    monkeypatch.undo()
    stored = await coordinator.store.list_all(USER_ID)
    assert len(stored) == 1
    assert stored[0].external_calendar_ref in calendar.items


@pytest.mark.asyncio
async def test_naive_due_date_uses_default_timezone(coordinator):
    naive = (dt.datetime.now(dt.timezone.utc) + dt.timedelta(days=2)).replace(tzinfo=None)
    assert await coordinator.create("Snowy", "Vaccine", naive)
    assert coordinator.state.reminders[0].due_at.tzinfo is not None


# --- no user ---

@pytest.mark.asyncio
async def test_operations_without_user(db_session, calendar):
    coordinator = ReminderCoordinator(RemindersService(db_session), calendar, None)
    reminder = ReminderRead(id="r1", pet_name="Snowy", message="Vaccine", due_at=_in(days=1))

    assert await coordinator.load_all() is False
    assert coordinator.state.error_message == NOT_LOGGED_IN
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1)) is False
    assert coordinator.state.error_message == "User not logged in"
    assert await coordinator.delete(reminder) is False
    assert await coordinator.set_completed(reminder) is False
    assert await coordinator.upcoming() == []
    assert coordinator.state.error_message == "User not logged in"
    assert calendar.access_requests == 0


# --- load ---

@pytest.mark.asyncio
async def test_load_failure_keeps_previous_list(coordinator, monkeypatch):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    before = coordinator.state.reminders

    async def broken_list(user_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(coordinator.store, "list_all", broken_list)

    assert await coordinator.load_all() is False
    assert coordinator.state.error_message == "Failed to load reminders: connection reset"
    assert coordinator.state.reminders == before
    assert coordinator.state.is_loading is False


@pytest.mark.asyncio
async def test_subscribers_see_loading_then_result(coordinator):
    seen = []
    unsubscribe = coordinator.subscribe(lambda state: seen.append(state.is_loading))

    await coordinator.load_all()
    assert seen == [True, False]

    unsubscribe()
    await coordinator.load_all()
    assert seen == [True, False]


# --- completion ---

@pytest.mark.asyncio
async def test_set_completed_is_idempotent(coordinator):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    reminder = coordinator.state.reminders[0]

    assert await coordinator.set_completed(reminder) is True
    once = coordinator.state.reminders
    assert await coordinator.set_completed(reminder) is True

    assert coordinator.state.reminders == once
    assert once[0].is_completed is True
    assert once[0].message == "Vaccine"
    assert once[0].external_calendar_ref == reminder.external_calendar_ref


@pytest.mark.asyncio
async def test_completed_reminder_cannot_be_reopened(coordinator):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    reminder = coordinator.state.reminders[0]
    assert await coordinator.set_completed(reminder)

    assert await coordinator.set_completed(reminder, False) is False
    assert coordinator.state.error_message == "Completed reminders cannot be reopened"


@pytest.mark.asyncio
async def test_set_completed_missing_reminder(coordinator):
    ghost = ReminderRead(id="ghost", pet_name="Snowy", message="Vaccine", due_at=_in(days=1))
    assert await coordinator.set_completed(ghost) is False
    assert coordinator.state.error_message == "Reminder not found"

    blank = ghost.model_copy(update={"id": ""})
    assert await coordinator.set_completed(blank) is False
    assert coordinator.state.error_message == "Cannot update reminder: missing ID"


# --- delete ---

@pytest.mark.asyncio
async def test_delete_removes_calendar_item_and_record(coordinator, calendar):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    reminder = coordinator.state.reminders[0]

    assert await coordinator.delete(reminder) is True

    assert coordinator.state.reminders == []
    assert coordinator.state.error_message is None
    assert calendar.items == {}


@pytest.mark.asyncio
async def test_delete_proceeds_when_calendar_item_is_gone(coordinator, calendar):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    reminder = coordinator.state.reminders[0]
    # Пользователь удалил элемент в самом календаре
    calendar.items.clear()

    assert await coordinator.delete(reminder) is True

    assert coordinator.state.reminders == []
    assert coordinator.state.error_message == "Calendar item could not be removed: Reminder not found"


@pytest.mark.asyncio
async def test_delete_without_id(coordinator):
    blank = ReminderRead(id="", pet_name="Snowy", message="Vaccine", due_at=_in(days=1))
    assert await coordinator.delete(blank) is False
    assert coordinator.state.error_message == "Cannot delete reminder: missing ID"


@pytest.mark.asyncio
async def test_delete_unknown_reminder(coordinator):
    ghost = ReminderRead(id="ghost", pet_name="Snowy", message="Vaccine", due_at=_in(days=1))
    assert await coordinator.delete(ghost) is False
    assert coordinator.state.error_message == "Reminder not found"


@pytest.mark.asyncio
async def test_delete_unknown_reminder_keeps_calendar_item(coordinator, calendar):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    real_ref = coordinator.state.reminders[0].external_calendar_ref
    # Чужой/несуществующий id со ссылкой на реальный элемент календаря
    ghost = ReminderRead(
        id="ghost", pet_name="Snowy", message="Vaccine",
        due_at=_in(days=1), external_calendar_ref=real_ref,
    )

    assert await coordinator.delete(ghost) is False
    assert coordinator.state.error_message == "Reminder not found"
    assert real_ref in calendar.items


@pytest.mark.asyncio
async def test_delete_uses_stored_calendar_reference(coordinator, calendar):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    reminder = coordinator.state.reminders[0]
    stale = reminder.model_copy(update={"external_calendar_ref": None})

    assert await coordinator.delete(stale) is True
    assert calendar.items == {}
    assert coordinator.state.error_message is None


# --- upcoming / month grid ---

@pytest.mark.asyncio
async def test_upcoming_excludes_completed_and_far_reminders(coordinator):
    assert await coordinator.create("Snowy", "Vaccine", _in(days=1))
    assert await coordinator.create("Rex", "Checkup", _in(days=20))
    assert await coordinator.create("Tom", "Brush", _in(days=2))
    tom = next(r for r in coordinator.state.reminders if r.pet_name == "Tom")
    assert await coordinator.set_completed(tom)

    upcoming = await coordinator.upcoming()
    assert [r.pet_name for r in upcoming] == ["Snowy"]

    wide = await coordinator.upcoming(dt.timedelta(days=30))
    assert [r.pet_name for r in wide] == ["Snowy", "Rex"]


@pytest.mark.asyncio
async def test_upcoming_with_zero_window_is_empty(coordinator):
    assert await coordinator.create("Snowy", "Vaccine", _in(hours=1))

    assert await coordinator.upcoming(dt.timedelta(0)) == []
    assert [r.pet_name for r in await coordinator.upcoming()] == ["Snowy"]


@pytest.mark.asyncio
async def test_month_grid_marks_reminder_days(coordinator):
    due = _in(days=1)
    assert await coordinator.create("Snowy", "Vaccine", due)

    cells = coordinator.month_grid(due.year, due.month, selected=due.date())

    assert len(cells) == 42
    marked = [c.date for c in cells if c.has_reminder]
    assert marked == [due.date()]
    assert [c.date for c in cells if c.is_selected] == [due.date()]
