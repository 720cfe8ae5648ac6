# tests/test_task_store.py

from __future__ import annotations

import pytest

from timesheet_tracker.exceptions import NotFoundError, ValidationError
from timesheet_tracker.models.enums import TaskStatus
from timesheet_tracker.services.task_store import TaskStore

from .helpers import at, task_fields

DAY = "2024-01-15"


def test_create_task_assigns_owner_and_defaults(session, employee) -> None:
    task = TaskStore(session).create_task(employee.id, task_fields(DAY, "09:00", "10:30", name="  Standup  "))
    session.commit()

    assert task.id
    assert task.user_id == employee.id
    assert task.name == "Standup"
    assert task.status == TaskStatus.COMPLETED
    assert task.description is None


@pytest.mark.parametrize(
    "fields, field",
    [
        (task_fields(DAY, "09:00", "09:00"), "end_time"),
        (task_fields(DAY, "10:00", "09:00"), "end_time"),
        (task_fields(DAY, "09:00", "10:00", name="   "), "name"),
        ({"name": "x", "start_time": at(DAY, "09:00"), "date": DAY}, "end_time"),
        ({**task_fields(DAY, "09:00", "10:00"), "date": "2024-13-01"}, "date"),
        (task_fields(DAY, "09:00", "10:00", status="paused"), "status"),
    ],
)
def test_create_task_rejects_invalid_input(session, employee, fields, field) -> None:
    store = TaskStore(session)
    with pytest.raises(ValidationError) as exc_info:
        store.create_task(employee.id, fields)
    assert exc_info.value.details.get("field") == field
    assert store.get_tasks_by_user_and_date(employee.id, fields.get("date", DAY)) == []


def test_tasks_are_ordered_by_start_time(session, employee) -> None:
    store = TaskStore(session)
    for start, end in [("14:00", "15:00"), ("08:00", "09:00"), ("11:30", "12:00"), ("09:15", "10:00")]:
        store.create_task(employee.id, task_fields(DAY, start, end, name=start))
    session.commit()

    names = [t.name for t in store.get_tasks_by_user_and_date(employee.id, DAY)]
    assert names == ["08:00", "09:15", "11:30", "14:00"]


def test_tasks_are_scoped_to_user_and_date(session, employee, other_employee) -> None:
    store = TaskStore(session)
    store.create_task(employee.id, task_fields(DAY, "09:00", "10:00"))
    store.create_task(employee.id, task_fields("2024-01-16", "09:00", "10:00"))
    store.create_task(other_employee.id, task_fields(DAY, "09:00", "10:00"))
    session.commit()

    assert len(store.get_tasks_by_user_and_date(employee.id, DAY)) == 1


def test_update_task_changes_only_given_fields(session, employee) -> None:
    store = TaskStore(session)
    task = store.create_task(employee.id, task_fields(DAY, "09:00", "10:00", description="notes"))
    session.commit()
    created_updated_at = task.updated_at

    updated = store.update_task(task.id, {"name": "Review", "status": "on-hold"})
    session.commit()

    assert updated.name == "Review"
    assert updated.status == TaskStatus.ON_HOLD
    assert updated.description == "notes"
    assert updated.start_time == at(DAY, "09:00")
    assert updated.updated_at >= created_updated_at


def test_update_task_validates_merged_interval(session, employee) -> None:
    store = TaskStore(session)
    task = store.create_task(employee.id, task_fields(DAY, "09:00", "10:00"))
    session.commit()

    with pytest.raises(ValidationError):
        store.update_task(task.id, {"start_time": at(DAY, "10:00")})


def test_update_and_delete_unknown_task(session) -> None:
    store = TaskStore(session)
    with pytest.raises(NotFoundError):
        store.update_task("missing", {"name": "x"})
    with pytest.raises(NotFoundError):
        store.delete_task("missing")


def test_delete_task_removes_record(session, employee) -> None:
    store = TaskStore(session)
    task = store.create_task(employee.id, task_fields(DAY, "09:00", "10:00"))
    session.commit()

    store.delete_task(task.id)
    session.commit()

    assert store.get_task_by_id(task.id) is None
