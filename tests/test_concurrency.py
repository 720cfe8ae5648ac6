# tests/test_concurrency.py

from __future__ import annotations

import threading
from contextlib import contextmanager

import pytest

from timesheet_tracker.database import Database
from timesheet_tracker.exceptions import ConflictError
from timesheet_tracker.models.enums import Role
from timesheet_tracker.models.task import Task
from timesheet_tracker.models.user import User
from timesheet_tracker.services.submission import SubmissionService
from timesheet_tracker.services.task_workflow import TaskWorkflow
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.utils.day_lock import DayLockRegistry
from timesheet_tracker.utils.time_interval import minutes_between

from .helpers import at, task_fields

DAY = "2024-01-15"


class RecordingLocks(DayLockRegistry):
    """Registry that remembers which keys each mutation held and how many shared a key at once."""

    def __init__(self):
        super().__init__()
        self.held = []
        self.peak = 0
        self._inside = 0
        self._count_lock = threading.Lock()

    @contextmanager
    def hold(self, *keys):
        with super().hold(*keys):
            with self._count_lock:
                self.held.append(tuple(sorted(set(keys))))
                self._inside += 1
                self.peak = max(self.peak, self._inside)
            try:
                yield
            finally:
                with self._count_lock:
                    self._inside -= 1


@pytest.fixture()
def file_database(tmp_path):
    """On-disk SQLite so every thread gets its own connection."""
    db = Database(f"sqlite:///{tmp_path / 'race.db'}")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture()
def user_id(file_database) -> str:
    session = file_database.get_session()
    try:
        user = User(username="alice", role=Role.EMPLOYEE)
        session.add(user)
        session.commit()
        return user.id
    finally:
        session.close()


def _run_threads(database: Database, jobs: list) -> list:
    """Run each job(session) in its own thread and session; return unexpected errors."""
    errors = []
    barrier = threading.Barrier(len(jobs))

    def worker(job):
        session = database.get_session()
        try:
            barrier.wait()
            job(session)
        except ConflictError:
            pass
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(job,)) for job in jobs]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert not any(t.is_alive() for t in threads)
    return errors


def _day_state(database: Database, user_id: str):
    session = database.get_session()
    try:
        timesheet = TimesheetService(session).get_by_user_and_date(user_id, DAY)
        tasks = session.query(Task).filter(Task.user_id == user_id, Task.date == DAY).all()
        task_minutes = sum(minutes_between(t.start_time, t.end_time) for t in tasks)
        return timesheet, len(tasks), task_minutes
    finally:
        session.close()


def _seed_tasks(database: Database, locks: DayLockRegistry, user_id: str, count: int) -> list:
    session = database.get_session()
    try:
        workflow = TaskWorkflow(session, locks)
        return [
            workflow.create_task(user_id, task_fields(DAY, f"{8 + i:02d}:00", f"{8 + i:02d}:30")).id
            for i in range(count)
        ]
    finally:
        session.close()


def test_concurrent_creates_on_one_day_sum_every_task(file_database, user_id) -> None:
    locks = RecordingLocks()
    workers = 10

    def create(i):
        def job(session):
            TaskWorkflow(session, locks).create_task(
                user_id, task_fields(DAY, f"{8 + i:02d}:00", f"{8 + i:02d}:30", name=f"Task {i}")
            )
        return job

    errors = _run_threads(file_database, [create(i) for i in range(workers)])

    assert errors == []
    timesheet, task_count, task_minutes = _day_state(file_database, user_id)
    assert task_count == workers
    assert timesheet.total_hours == 30 * workers == task_minutes

    assert locks.held == [((user_id, DAY),)] * workers
    assert locks.peak == 1
    assert locks.active_keys() == []


def test_concurrent_updates_and_deletes_keep_total_exact(file_database, user_id) -> None:
    locks = RecordingLocks()
    ids = _seed_tasks(file_database, locks, user_id, 6)
    locks.held.clear()

    def extend(task_id, i):
        def job(session):
            TaskWorkflow(session, locks).update_task(user_id, task_id, {"end_time": at(DAY, f"{9 + i:02d}:00")})
        return job

    def remove(task_id):
        def job(session):
            TaskWorkflow(session, locks).delete_task(user_id, task_id)
        return job

    jobs = [extend(ids[i], i) for i in range(3)] + [remove(ids[i]) for i in range(3, 6)]
    errors = _run_threads(file_database, jobs)

    assert errors == []
    timesheet, task_count, task_minutes = _day_state(file_database, user_id)
    assert task_count == 3
    assert timesheet.total_hours == 180 == task_minutes
    assert len(locks.held) == len(jobs)
    assert set(locks.held) == {((user_id, DAY),)}
    assert locks.peak == 1


def test_submit_racing_with_mutations_freezes_a_consistent_total(file_database, user_id) -> None:
    locks = RecordingLocks()
    ids = _seed_tasks(file_database, locks, user_id, 6)
    locks.held.clear()
    submitted = []

    def extend(task_id, i):
        def job(session):
            TaskWorkflow(session, locks).update_task(user_id, task_id, {"end_time": at(DAY, f"{9 + i:02d}:00")})
        return job

    def remove(task_id):
        def job(session):
            TaskWorkflow(session, locks).delete_task(user_id, task_id)
        return job

    def create(session):
        TaskWorkflow(session, locks).create_task(user_id, task_fields(DAY, "18:00", "19:00"))

    def submit(session):
        submitted.append(SubmissionService(session, locks).submit(user_id, DAY).total_hours)

    jobs = [extend(ids[i], i) for i in range(3)] + [remove(ids[i]) for i in range(3, 6)] + [create, submit]
    errors = _run_threads(file_database, jobs)

    assert errors == []
    assert len(submitted) == 1
    timesheet, _, task_minutes = _day_state(file_database, user_id)
    assert timesheet.is_submitted is True
    # Whatever landed before the submit is counted, nothing after it is
    assert timesheet.total_hours == task_minutes == submitted[0]
    assert len(locks.held) == len(jobs)
    assert locks.peak == 1
