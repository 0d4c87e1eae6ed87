"""
Account operations: registration, login, token refresh and user management.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.auth import CurrentUser
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from ..core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from ..models.user import User, UserRole
from . import permissions, validators
from .common import commit, get_user_or_404, publish

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login or password"


def register(
    db: Session,
    login: Optional[str],
    password: Optional[str],
    role: Optional[str] = None,
    caller: Optional[CurrentUser] = None,
) -> User:
    """
    Create an account. Anyone may sign up as a user; an admin account needs
    an admin caller, except for the first admin of an empty installation.
    """
    user_role = validators.validate_role(role)
    if user_role is UserRole.admin and not permissions.is_admin(caller):
        if db.query(User).filter(User.role == UserRole.admin).first() is not None:
            logger.warning(f"Refused admin registration for {login} by {caller or 'anonymous caller'}")
            raise AuthorizationError("Only administrators can create admin accounts")

    login = validators.validate_login(login)
    password = validators.validate_password(password)

    existing = db.query(User).filter(User.login == login).first()
    if existing:
        raise ConflictError(f'Login "{login}" is already registered')

    user = User(login=login, hashed_password=get_password_hash(password), role=user_role)
    db.add(user)
    commit(db, "registering user", conflict_message=f'Login "{login}" is already registered')
    db.refresh(user)

    logger.info(f"Registered user {user.login} (id={user.id}, role={user.role.value})")
    publish("user.registered", {"user_id": user.id, "login": user.login, "role": user.role.value})
    return user


def login(db: Session, login: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    """Check credentials and issue an access/refresh token pair."""
    login = validators.require_text(login, "login")
    if not password:
        raise ValidationError("password is required", field="password")

    user = db.query(User).filter(User.login == login).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for {login}")
        raise AuthenticationError(INVALID_CREDENTIALS)

    logger.info(f"User {user.login} logged in")
    return {
        "access_token": create_access_token(user.id, user.login, user.role.value),
        "refresh_token": create_refresh_token(user.id, user.login),
        "token_type": "bearer",
        "user": user,
    }


def refresh(db: Session, refresh_token: Optional[str]) -> Dict[str, Any]:
    """Exchange a refresh token for a new access token carrying the current role."""
    if not refresh_token:
        raise AuthenticationError("Refresh token not provided")

    payload = decode_token(refresh_token, REFRESH_TOKEN_TYPE)
    user = db.get(User, payload["sub"])
    if user is None:
        raise AuthenticationError("User not found")

    return {
        "access_token": create_access_token(user.id, user.login, user.role.value),
        "token_type": "bearer",
        "user": user,
    }


def get_me(db: Session, caller: Optional[CurrentUser]) -> User:
    caller = permissions.require_authenticated(caller)
    return get_user_or_404(db, caller.user_id)


def list_users(db: Session, caller: Optional[CurrentUser]) -> List[User]:
    permissions.require_authenticated(caller)
    return db.query(User).order_by(User.id).all()


def delete_user(db: Session, caller: Optional[CurrentUser], user_id: int) -> None:
    """
    Delete a user account.

    A user who still owns tasks cannot be deleted; their tasks must be
    reassigned or deleted first. Project memberships are removed with the user.
    """
    caller = permissions.require_admin(caller, "delete users")
    user = get_user_or_404(db, user_id)

    if user.id == caller.user_id:
        raise ConflictError("Administrators cannot delete their own account")
    if user.tasks:
        raise ConflictError(
            f'User "{user.login}" still owns {len(user.tasks)} task(s); reassign or delete them first',
            task_ids=user.task_ids,
        )

    project_ids = user.project_ids
    login = user.login
    db.delete(user)
    commit(db, "deleting user")

    logger.info(f"{caller} deleted user {login} (id={user_id}), left projects {project_ids}")
    publish("user.deleted", {"user_id": user_id, "login": login, "project_ids": project_ids})
