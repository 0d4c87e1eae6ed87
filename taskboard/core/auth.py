"""
Authentication module for Taskboard.
Resolves bearer access tokens into the calling user.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AuthenticationError
from .security import ACCESS_TOKEN_TYPE, decode_token
from ..models.user import User

# Configure logging
logger = logging.getLogger(__name__)

# Security scheme; missing credentials are reported by get_current_user
security = HTTPBearer(
    scheme_name="Bearer Token",
    description="JWT access token from /auth/login",
    auto_error=False,
)


class CurrentUser:
    """Represents the current authenticated user."""

    def __init__(self, user_id: int, login: str, role: str):
        self.user_id = user_id
        self.login = login
        self.role = role

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __str__(self):
        return f"User(id={self.user_id}, login={self.login}, role={self.role})"

    def __repr__(self):
        return self.__str__()

    def __eq__(self, other):
        if not isinstance(other, CurrentUser):
            return NotImplemented
        return (self.user_id, self.login, self.role) == (other.user_id, other.login, other.role)

    @classmethod
    def from_user(cls, user) -> "CurrentUser":
        """Create CurrentUser from a User row."""
        return cls(user_id=user.id, login=user.login, role=user.role.value)


def authenticate_token(token: str, db: Session) -> CurrentUser:
    """
    Verify an access token and load its user.

    The role is taken from the database so a demotion applies immediately.

    Raises:
        AuthenticationError: If the token is invalid, expired, or its user is gone.
    """
    payload = decode_token(token, ACCESS_TOKEN_TYPE)
    user = db.get(User, payload["sub"])
    if user is None:
        logger.warning(f"Token for missing user id {payload['sub']}")
        raise AuthenticationError("User not found")
    return CurrentUser.from_user(user)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Dependency to get current authenticated user.

    Raises:
        AuthenticationError: If no token is provided or it does not validate
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    current_user = authenticate_token(credentials.credentials, db)
    logger.debug(f"Authenticated user: {current_user}")
    return current_user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[CurrentUser]:
    """Like get_current_user, but anonymous requests resolve to None."""
    if credentials is None or not credentials.credentials:
        return None
    return authenticate_token(credentials.credentials, db)
