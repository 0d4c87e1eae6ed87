from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .config import get_settings
from .exceptions import AuthenticationError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _signing_key(token_type: str) -> str:
    settings = get_settings()
    key = settings.refresh_secret_key if token_type == REFRESH_TOKEN_TYPE else settings.secret_key
    if not key:
        raise RuntimeError("SECRET_KEY environment variable must be set")
    return key


def _encode(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"type": token_type, "iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, _signing_key(token_type), algorithm=get_settings().algorithm)


def create_access_token(user_id: int, login: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Short-lived token carrying the caller identity and role."""
    settings = get_settings()
    delta = expires_delta if expires_delta is not None else timedelta(minutes=settings.access_token_expire_minutes)
    return _encode({"sub": str(user_id), "login": login, "role": role}, ACCESS_TOKEN_TYPE, delta)


def create_refresh_token(user_id: int, login: str, expires_delta: Optional[timedelta] = None) -> str:
    """Long-lived token that can only be exchanged for a new access token."""
    settings = get_settings()
    delta = expires_delta if expires_delta is not None else timedelta(days=settings.refresh_token_expire_days)
    return _encode({"sub": str(user_id), "login": login}, REFRESH_TOKEN_TYPE, delta)


def decode_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Verify a token's signature, expiry and type.

    Raises:
        AuthenticationError: with ``expired=True`` if the token has expired,
            otherwise for any invalid token.
    """
    try:
        payload = jwt.decode(token, _signing_key(token_type), algorithms=[get_settings().algorithm])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired", expired=True)
    except JWTError:
        raise AuthenticationError("Invalid token")

    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    try:
        payload["sub"] = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token subject")
    return payload
