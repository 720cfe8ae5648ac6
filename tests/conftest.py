# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from timesheet_tracker.config import Settings
from timesheet_tracker.database import Database
from timesheet_tracker.main import create_app
from timesheet_tracker.models.enums import Role
from timesheet_tracker.models.user import User
from timesheet_tracker.utils.day_lock import DayLockRegistry


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite://",
        logs_dir=str(tmp_path / "logs"),
        scheduler_enabled=False,
        app_timezone="UTC",
        app_env="test",
    )


@pytest.fixture()
def database(settings: Settings):
    """Fresh in-memory database per test."""
    db = Database(settings.database_url)
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture()
def session(database: Database):
    db = database.get_session()
    yield db
    db.close()


@pytest.fixture()
def locks() -> DayLockRegistry:
    return DayLockRegistry()


def _add_user(session, username: str, role: Role) -> User:
    user = User(username=username, role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture()
def employee(session) -> User:
    return _add_user(session, "alice", Role.EMPLOYEE)


@pytest.fixture()
def other_employee(session) -> User:
    return _add_user(session, "bob", Role.EMPLOYEE)


@pytest.fixture()
def admin(session) -> User:
    return _add_user(session, "root-admin", Role.ADMIN)


@pytest.fixture()
def app(settings: Settings, database: Database):
    return create_app(settings=settings, database=database, enable_scheduler=False)


@pytest.fixture()
def client(app) -> TestClient:
    # No context manager: lifespan (logging setup, create_all) is handled by fixtures
    return TestClient(app)
