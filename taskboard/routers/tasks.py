from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..core.auth import CurrentUser, get_current_user
from ..core.database import get_db
from ..schemas.task import TaskCreate, TaskResponse, TaskUpdate
from ..services import tasks

router = APIRouter()


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    project_id: Optional[int] = Query(None, description="Filter by project"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Tasks visible to the caller, optionally filtered"""
    return tasks.list_tasks(db, current_user, project_id=project_id, status=status_filter)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a task for the user with the given login (admin only)"""
    attachments = None
    if task_data.attachments is not None:
        attachments = [attachment.model_dump() for attachment in task_data.attachments]

    return tasks.create_task(
        db,
        current_user,
        title=task_data.title,
        user=task_data.user,
        project_id=task_data.project_id,
        description=task_data.description,
        status=task_data.status,
        attachments=attachments,
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a specific task by ID"""
    return tasks.get_task(db, current_user, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a task"""
    return tasks.update_task(db, current_user, task_id, task_update.model_dump(exclude_unset=True))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a task (admin only)"""
    tasks.delete_task(db, current_user, task_id)
