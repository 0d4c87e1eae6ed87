"""
Lookups and the commit step shared by the service modules.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core import events
from ..core.exceptions import ConflictError, InternalError, NotFoundError
from ..models.project import Project
from ..models.task import Task
from ..models.user import User

logger = logging.getLogger(__name__)


def commit(db: Session, action: str, conflict_message: Optional[str] = None) -> None:
    """
    Commit the unit of work, rolling everything back on failure.

    Raises:
        ConflictError: On an integrity violation when ``conflict_message`` is given.
        InternalError: On any other store failure.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if conflict_message:
            logger.warning(f"Conflict while {action}: {e.orig}")
            raise ConflictError(conflict_message)
        logger.error(f"Integrity error while {action}: {e}")
        raise InternalError(f"Error {action}", cause=e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while {action}: {e}")
        raise InternalError(f"Error {action}", cause=e)


def publish(event_type: str, data: dict) -> None:
    events.event_publisher.publish_event(event_type, data)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def get_user_by_login(db: Session, login: str) -> User:
    user = db.query(User).filter(User.login == login).first()
    if user is None:
        raise NotFoundError(f'User with login "{login}" not found', logins=[login])
    return user


def resolve_logins(db: Session, logins: Iterable[str]) -> List[User]:
    """
    Resolve logins to users, keeping the requested order.

    Raises:
        NotFoundError: Naming every login that does not exist.
    """
    logins = list(logins)
    if not logins:
        return []

    found = {user.login: user for user in db.query(User).filter(User.login.in_(logins)).all()}
    missing = [login for login in logins if login not in found]
    if missing:
        raise NotFoundError(f"Users not found: {', '.join(missing)}", logins=missing)
    return [found[login] for login in logins]


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")
    return project


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    return task
