"""
Task operations.

Ownership lives in ``tasks.user_id``; ``User.tasks`` reads the same column,
so reassigning a task moves it between owners in one write.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ..core.auth import CurrentUser
from ..core.config import get_settings
from ..core.exceptions import ValidationError
from ..models.task import Task, TaskAttachment, TaskStatus
from . import permissions, validators
from .common import commit, get_project_or_404, get_task_or_404, get_user_by_login, publish

logger = logging.getLogger(__name__)


def _task_event(task: Task) -> Dict[str, Any]:
    return {
        "task_id": task.id,
        "title": task.title,
        "status": task.status,
        "user_id": task.user_id,
        "project_id": task.project_id,
    }


def _build_attachments(attachments: List[Dict[str, Any]]) -> List[TaskAttachment]:
    return [TaskAttachment(**attachment) for attachment in attachments]


def list_tasks(
    db: Session,
    caller: Optional[CurrentUser],
    project_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[Task]:
    """Filter by project and status; users only ever see their own tasks."""
    caller = permissions.require_authenticated(caller)

    query = db.query(Task)
    if project_id is not None:
        query = query.filter(Task.project_id == project_id)
    if status is not None:
        query = query.filter(Task.status == validators.validate_status(status))
    if not caller.is_admin:
        query = query.filter(Task.user_id == caller.user_id)
    return query.order_by(Task.id).all()


def get_task(db: Session, caller: Optional[CurrentUser], task_id: int) -> Task:
    permissions.require_authenticated(caller)
    task = get_task_or_404(db, task_id)
    permissions.require_task_access(caller, task)
    return task


def create_task(
    db: Session,
    caller: Optional[CurrentUser],
    title: Optional[str],
    user: Optional[str],
    project_id: Optional[int],
    description: Optional[str] = None,
    status: Optional[str] = None,
    attachments: Optional[List[Dict[str, Any]]] = None,
) -> Task:
    """
    Create a task owned by the user with login ``user``.

    The project and the owner are resolved before anything is written.
    """
    caller = permissions.require_admin(caller, "create tasks")

    title = validators.require_text(title, "title")
    owner_login = validators.require_text(user, "user")
    if project_id is None:
        raise ValidationError("project_id is required", field="project_id")
    status = validators.validate_status(status, default=TaskStatus.TODO.value)
    attachments = validators.validate_attachments(attachments, get_settings().max_attachment_bytes)

    project = get_project_or_404(db, project_id)
    owner = get_user_by_login(db, owner_login)

    task = Task(
        title=title,
        description=description or "",
        status=status,
        user=owner,
        project=project,
        attachments=_build_attachments(attachments),
    )
    db.add(task)
    commit(db, "creating task")
    db.refresh(task)

    logger.info(f"{caller} created task {task.id} '{task.title}' for {owner.login} in project {project.id}")
    publish("task.created", _task_event(task))
    return task


def update_task(
    db: Session,
    caller: Optional[CurrentUser],
    task_id: int,
    changes: Dict[str, Any],
) -> Task:
    """
    Apply a partial update.

    Admins may change any field, and passing a different ``user`` login moves
    the task to that owner. An owner without the admin role may change only
    ``status`` and ``attachments``.
    """
    permissions.require_authenticated(caller)
    changes = {field: value for field, value in changes.items() if value is not None}

    task = get_task_or_404(db, task_id)
    caller = permissions.require_task_update(caller, task, changes.keys())

    title = validators.require_text(changes["title"], "title") if "title" in changes else None
    owner_login = validators.require_text(changes["user"], "user") if "user" in changes else None
    status = validators.validate_status(changes["status"]) if "status" in changes else None
    attachments = None
    if "attachments" in changes:
        attachments = validators.validate_attachments(
            changes["attachments"], get_settings().max_attachment_bytes
        )

    project = get_project_or_404(db, changes["project_id"]) if "project_id" in changes else None
    new_owner = get_user_by_login(db, owner_login) if owner_login is not None else None

    previous_owner_id = task.user_id
    if title is not None:
        task.title = title
    if "description" in changes:
        task.description = changes["description"]
    if status is not None:
        task.status = status
    if project is not None:
        task.project = project
    if new_owner is not None and new_owner.id != previous_owner_id:
        task.user = new_owner
    if attachments is not None:
        task.attachments = _build_attachments(attachments)
    if changes:
        # onupdate only fires when a tasks column changes
        task.updated_at = func.now()

    commit(db, "updating task")
    db.refresh(task)

    if task.user_id != previous_owner_id:
        logger.info(f"{caller} reassigned task {task.id} from user {previous_owner_id} to {task.user_id}")
    logger.info(f"{caller} updated task {task.id}: fields={sorted(changes)}")
    event = _task_event(task)
    event["previous_user_id"] = previous_owner_id
    publish("task.updated", event)
    return task


def delete_task(db: Session, caller: Optional[CurrentUser], task_id: int) -> None:
    caller = permissions.require_admin(caller, "delete tasks")
    task = get_task_or_404(db, task_id)

    event = _task_event(task)
    db.delete(task)
    commit(db, "deleting task")

    logger.info(f"{caller} deleted task {task_id} (owner {event['user_id']})")
    publish("task.deleted", event)
