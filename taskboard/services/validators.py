"""
Entity validators. Each returns the cleaned value or raises ValidationError.
"""
import base64
import binascii
import re
from typing import Any, Dict, List, Mapping, Optional

from ..core.exceptions import ValidationError
from ..models.task import TaskStatus
from ..models.user import UserRole

VALID_STATUSES = tuple(status.value for status in TaskStatus)
VALID_ROLES = tuple(role.value for role in UserRole)

MAX_LOGIN_LENGTH = 64
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,")


def require_text(value: Optional[str], field: str) -> str:
    """Required free text: must be non-empty after trimming."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def validate_status(value: Optional[str], default: Optional[str] = None) -> str:
    if value is None:
        if default is None:
            raise ValidationError("status is required", field="status")
        return default
    if value not in VALID_STATUSES:
        raise ValidationError(
            f"Invalid status '{value}'. Expected one of: {', '.join(VALID_STATUSES)}",
            field="status",
        )
    return value


def validate_role(value: Optional[str]) -> UserRole:
    if value is None:
        return UserRole.user
    if value not in VALID_ROLES:
        raise ValidationError(
            f"Invalid role '{value}'. Expected one of: {', '.join(VALID_ROLES)}",
            field="role",
        )
    return UserRole(value)


def validate_login(value: Optional[str]) -> str:
    login = require_text(value, "login")
    if len(login) > MAX_LOGIN_LENGTH:
        raise ValidationError(f"login must be at most {MAX_LOGIN_LENGTH} characters", field="login")
    return login


def validate_password(value: Optional[str]) -> str:
    if not value:
        raise ValidationError("password is required", field="password")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes", field="password")
    return value


def validate_logins(values: Optional[List[str]]) -> List[str]:
    """Member login list: trimmed, de-duplicated, order preserved."""
    if values is None:
        return []
    logins = []
    for value in values:
        login = require_text(value, "users")
        if login not in logins:
            logins.append(login)
    return logins


def validate_attachment(attachment: Mapping[str, Any], max_bytes: int) -> Dict[str, Any]:
    file_name = require_text(attachment.get("file_name"), "attachments.file_name")
    mime_type = require_text(attachment.get("mime_type"), "attachments.mime_type")

    file_data = attachment.get("file_data")
    if not file_data or not isinstance(file_data, str):
        raise ValidationError(f"Attachment '{file_name}' has no data", field="attachments.file_data")
    payload = _DATA_URL_PREFIX.sub("", file_data.strip())
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError(
            f"Attachment '{file_name}' is not valid base64", field="attachments.file_data"
        )

    if len(decoded) > max_bytes:
        raise ValidationError(
            f"Attachment '{file_name}' exceeds the {max_bytes} byte limit", field="attachments.file_data"
        )

    file_size = attachment.get("file_size")
    if file_size is not None and file_size != len(decoded):
        raise ValidationError(
            f"Attachment '{file_name}' size {file_size} does not match its data ({len(decoded)} bytes)",
            field="attachments.file_size",
        )

    return {
        "file_name": file_name,
        "file_data": payload,
        "mime_type": mime_type,
        "file_size": len(decoded),
    }


def validate_attachments(attachments: Optional[List[Mapping[str, Any]]], max_bytes: int) -> List[Dict[str, Any]]:
    if not attachments:
        return []
    return [validate_attachment(attachment, max_bytes) for attachment in attachments]
