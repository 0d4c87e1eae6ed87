import base64

import pytest

from taskboard.core.exceptions import ValidationError
from taskboard.models.user import UserRole
from taskboard.services import validators


@pytest.mark.parametrize("value", [None, "", "   ", 42])
def test_require_text_rejects_blank(value):
    with pytest.raises(ValidationError):
        validators.require_text(value, "title")


def test_require_text_trims():
    assert validators.require_text("  Design  ", "title") == "Design"


def test_status_defaults_and_rejects_unknown():
    assert validators.validate_status(None, default="todo") == "todo"
    assert validators.validate_status("in_progress") == "in_progress"

    with pytest.raises(ValidationError) as exc_info:
        validators.validate_status("finished")
    assert exc_info.value.details["field"] == "status"

    # Not silently coerced
    with pytest.raises(ValidationError):
        validators.validate_status("DONE")


def test_role_defaults_to_user():
    assert validators.validate_role(None) is UserRole.user
    assert validators.validate_role("admin") is UserRole.admin
    with pytest.raises(ValidationError):
        validators.validate_role("superuser")


def test_login_length_limit():
    assert validators.validate_login(" ivan ") == "ivan"
    with pytest.raises(ValidationError):
        validators.validate_login("x" * (validators.MAX_LOGIN_LENGTH + 1))


def test_password_rules():
    assert validators.validate_password("pw") == "pw"
    with pytest.raises(ValidationError):
        validators.validate_password("")
    with pytest.raises(ValidationError):
        validators.validate_password("x" * 73)


def test_member_logins_are_deduplicated():
    assert validators.validate_logins(["ivan", " maria", "ivan"]) == ["ivan", "maria"]
    assert validators.validate_logins(None) == []
    with pytest.raises(ValidationError):
        validators.validate_logins(["ivan", ""])


def _attachment(data: bytes, **overrides):
    attachment = {
        "file_name": "notes.txt",
        "file_data": base64.b64encode(data).decode(),
        "mime_type": "text/plain",
        "file_size": len(data),
    }
    attachment.update(overrides)
    return attachment


def test_attachment_is_accepted_and_sized():
    cleaned = validators.validate_attachment(_attachment(b"hello"), max_bytes=1024)

    assert cleaned["file_size"] == 5
    assert cleaned["file_name"] == "notes.txt"


def test_attachment_data_url_prefix_is_stripped():
    payload = base64.b64encode(b"hello").decode()
    cleaned = validators.validate_attachment(
        _attachment(b"hello", file_data=f"data:text/plain;base64,{payload}"), max_bytes=1024
    )

    assert cleaned["file_data"] == payload


def test_attachment_size_is_computed_when_missing():
    cleaned = validators.validate_attachment(_attachment(b"abc", file_size=None), max_bytes=1024)
    assert cleaned["file_size"] == 3


@pytest.mark.parametrize("overrides", [
    {"file_data": "not base64!!"},
    {"file_data": ""},
    {"file_size": 99},
    {"file_name": " "},
    {"mime_type": None},
])
def test_attachment_rejections(overrides):
    with pytest.raises(ValidationError):
        validators.validate_attachment(_attachment(b"hello", **overrides), max_bytes=1024)


def test_attachment_size_limit():
    with pytest.raises(ValidationError):
        validators.validate_attachments([_attachment(b"x" * 11)], max_bytes=10)
