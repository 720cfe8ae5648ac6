# tests/helpers.py

from __future__ import annotations

from datetime import datetime


def at(day: str, hhmm: str) -> datetime:
    """Naive UTC instant on `day` at `hhmm`."""
    return datetime.fromisoformat(f"{day}T{hhmm}:00")


def task_fields(day: str, start: str, end: str, name: str = "Work", **extra) -> dict:
    fields = {"name": name, "start_time": at(day, start), "end_time": at(day, end), "date": day}
    fields.update(extra)
    return fields


def task_payload(day: str, start: str, end: str, name: str = "Work", **extra) -> dict:
    """JSON body for POST /api/tasks."""
    payload = {
        "name": name,
        "startTime": f"{day}T{start}:00Z",
        "endTime": f"{day}T{end}:00Z",
        "date": day,
    }
    payload.update(extra)
    return payload


def auth(user) -> dict:
    return {"X-User-Id": user.id}
