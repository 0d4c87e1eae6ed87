"""
Project operations.

Membership is stored once, in ``project_members``; assigning ``project.users``
updates both ``Project.users`` and every affected ``User.projects``. Each
mutation is a single commit, so a failed lookup leaves nothing behind.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ..core.auth import CurrentUser
from ..models.project import Project
from ..models.user import User
from . import permissions, validators
from .common import commit, get_project_or_404, publish, resolve_logins

logger = logging.getLogger(__name__)


def _project_event(project: Project) -> Dict[str, Any]:
    return {
        "project_id": project.id,
        "name": project.name,
        "user_ids": project.member_ids,
    }


def list_projects(db: Session, caller: Optional[CurrentUser]) -> List[Project]:
    """Admins see every project, users only the ones they belong to."""
    caller = permissions.require_authenticated(caller)
    query = db.query(Project)
    if not caller.is_admin:
        query = query.join(Project.users).filter(User.id == caller.user_id)
    return query.order_by(Project.id).all()


def get_project(db: Session, caller: Optional[CurrentUser], project_id: int) -> Project:
    permissions.require_authenticated(caller)
    project = get_project_or_404(db, project_id)
    permissions.require_project_access(caller, project)
    return project


def create_project(
    db: Session,
    caller: Optional[CurrentUser],
    name: Optional[str],
    description: Optional[str] = None,
    users: Optional[List[str]] = None,
) -> Project:
    caller = permissions.require_admin(caller, "create projects")

    name = validators.require_text(name, "name")
    logins = validators.validate_logins(users)

    members = resolve_logins(db, logins)

    project = Project(name=name, description=description or "", users=members)
    db.add(project)
    commit(db, "creating project")
    db.refresh(project)

    logger.info(f"{caller} created project {project.id} '{project.name}' with members {logins}")
    publish("project.created", _project_event(project))
    return project


def update_project(
    db: Session,
    caller: Optional[CurrentUser],
    project_id: int,
    changes: Dict[str, Any],
) -> Project:
    """
    Apply a partial update. ``users`` replaces the member list: users dropped
    from it lose the project, new logins gain it.
    """
    caller = permissions.require_admin(caller, "update projects")
    changes = {field: value for field, value in changes.items() if value is not None}

    name = validators.require_text(changes["name"], "name") if "name" in changes else None
    logins = validators.validate_logins(changes["users"]) if "users" in changes else None

    project = get_project_or_404(db, project_id)
    members = resolve_logins(db, logins) if logins is not None else None

    if name is not None:
        project.name = name
    if "description" in changes:
        project.description = changes["description"]

    added, removed = [], []
    if members is not None:
        old_ids = set(project.member_ids)
        new_ids = {member.id for member in members}
        added = sorted(new_ids - old_ids)
        removed = sorted(old_ids - new_ids)
        project.users = members
    if changes:
        # onupdate only fires when a projects column changes
        project.updated_at = func.now()

    commit(db, "updating project")
    db.refresh(project)

    logger.info(
        f"{caller} updated project {project.id}: fields={sorted(changes)} "
        f"members added={added} removed={removed}"
    )
    event = _project_event(project)
    event.update({"added_user_ids": added, "removed_user_ids": removed})
    publish("project.updated", event)
    return project


def delete_project(db: Session, caller: Optional[CurrentUser], project_id: int) -> None:
    """
    Delete a project together with its tasks.

    Former members lose the project and every owner loses the deleted tasks
    in the same commit.
    """
    caller = permissions.require_admin(caller, "delete projects")
    project = get_project_or_404(db, project_id)

    task_ids = [task.id for task in project.tasks]
    owner_ids = sorted({task.user_id for task in project.tasks})
    member_ids = project.member_ids

    db.delete(project)
    commit(db, "deleting project")

    logger.info(
        f"{caller} deleted project {project_id} with tasks {task_ids} "
        f"(members {member_ids}, task owners {owner_ids})"
    )
    publish("project.deleted", {
        "project_id": project_id,
        "task_ids": task_ids,
        "user_ids": member_ids,
        "task_owner_ids": owner_ids,
    })
