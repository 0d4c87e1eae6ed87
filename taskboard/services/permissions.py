"""
Authorization gate.

Every service operation passes the caller through these checks before it
validates input or touches the database. Denials raise
``AuthorizationError`` so callers can tell "not permitted" from "not found".
"""
import logging
from typing import Iterable, Optional

from ..core.auth import CurrentUser
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..models.project import Project
from ..models.task import Task

logger = logging.getLogger(__name__)

# Fields a non-admin owner may change on their own task
OWNER_EDITABLE_TASK_FIELDS = frozenset({"status", "attachments"})


def require_authenticated(caller: Optional[CurrentUser]) -> CurrentUser:
    if caller is None:
        raise AuthenticationError("Not authenticated")
    return caller


def is_admin(caller: Optional[CurrentUser]) -> bool:
    return caller is not None and caller.is_admin


def require_admin(caller: Optional[CurrentUser], action: str) -> CurrentUser:
    caller = require_authenticated(caller)
    if not caller.is_admin:
        logger.warning(f"{caller} denied: only administrators can {action}")
        raise AuthorizationError(f"Only administrators can {action}")
    return caller


def can_view_project(caller: CurrentUser, project: Project) -> bool:
    return caller.is_admin or caller.user_id in project.member_ids


def require_project_access(caller: Optional[CurrentUser], project: Project) -> CurrentUser:
    caller = require_authenticated(caller)
    if not can_view_project(caller, project):
        logger.warning(f"{caller} denied access to project {project.id}")
        raise AuthorizationError("You are not a member of this project")
    return caller


def can_view_task(caller: CurrentUser, task: Task) -> bool:
    return caller.is_admin or task.user_id == caller.user_id


def require_task_access(caller: Optional[CurrentUser], task: Task) -> CurrentUser:
    caller = require_authenticated(caller)
    if not can_view_task(caller, task):
        logger.warning(f"{caller} denied access to task {task.id}")
        raise AuthorizationError("This task is not assigned to you")
    return caller


def require_task_update(caller: Optional[CurrentUser], task: Task, fields: Iterable[str]) -> CurrentUser:
    """Admins may change anything; an owner may change only status and attachments."""
    caller = require_task_access(caller, task)
    if caller.is_admin:
        return caller

    forbidden = sorted(set(fields) - OWNER_EDITABLE_TASK_FIELDS)
    if forbidden:
        logger.warning(f"{caller} denied update of {forbidden} on task {task.id}")
        raise AuthorizationError(
            f"Only administrators can change: {', '.join(forbidden)}"
        )
    return caller
