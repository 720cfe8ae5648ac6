from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from timesheet_tracker.database import get_db
from timesheet_tracker.dependencies import get_current_user, get_day_locks
from timesheet_tracker.exceptions import ValidationError
from timesheet_tracker.models.user import User
from timesheet_tracker.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from timesheet_tracker.services.task_workflow import TaskWorkflow
from timesheet_tracker.utils.day_lock import DayLockRegistry

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: DayLockRegistry = Depends(get_day_locks),
):
    return TaskWorkflow(db, locks).create_task(user.id, payload.model_dump())


@router.get("/{date}", response_model=List[TaskResponse])
def list_tasks(
    date: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: DayLockRegistry = Depends(get_day_locks),
):
    return TaskWorkflow(db, locks).list_tasks(user.id, date)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: DayLockRegistry = Depends(get_day_locks),
):
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No fields to update")
    return TaskWorkflow(db, locks).update_task(user.id, task_id, updates)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: DayLockRegistry = Depends(get_day_locks),
):
    TaskWorkflow(db, locks).delete_task(user.id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
