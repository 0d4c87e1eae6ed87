from types import SimpleNamespace

import pytest

from taskboard.core.auth import CurrentUser
from taskboard.core.exceptions import AuthenticationError, AuthorizationError
from taskboard.services import permissions

ADMIN = CurrentUser(user_id=1, login="admin", role="admin")
IVAN = CurrentUser(user_id=2, login="ivan", role="user")
MARIA = CurrentUser(user_id=3, login="maria", role="user")


def project_with_members(*user_ids):
    return SimpleNamespace(id=10, member_ids=list(user_ids))


def task_owned_by(user_id):
    return SimpleNamespace(id=20, user_id=user_id)


def test_unauthenticated_caller_is_rejected():
    with pytest.raises(AuthenticationError):
        permissions.require_authenticated(None)
    with pytest.raises(AuthenticationError):
        permissions.require_admin(None, "create projects")
    assert permissions.is_admin(None) is False


def test_require_admin():
    assert permissions.require_admin(ADMIN, "create projects") is ADMIN
    with pytest.raises(AuthorizationError) as exc_info:
        permissions.require_admin(IVAN, "create projects")
    assert "create projects" in exc_info.value.message


def test_project_access_requires_membership():
    project = project_with_members(IVAN.user_id)

    assert permissions.can_view_project(ADMIN, project)
    assert permissions.can_view_project(IVAN, project)
    assert not permissions.can_view_project(MARIA, project)
    with pytest.raises(AuthorizationError):
        permissions.require_project_access(MARIA, project)


def test_task_access_requires_ownership():
    task = task_owned_by(IVAN.user_id)

    assert permissions.can_view_task(ADMIN, task)
    assert permissions.can_view_task(IVAN, task)
    with pytest.raises(AuthorizationError):
        permissions.require_task_access(MARIA, task)


def test_owner_may_only_change_status_and_attachments():
    task = task_owned_by(IVAN.user_id)

    assert permissions.require_task_update(IVAN, task, ["status"]) is IVAN
    assert permissions.require_task_update(IVAN, task, ["status", "attachments"]) is IVAN

    with pytest.raises(AuthorizationError) as exc_info:
        permissions.require_task_update(IVAN, task, ["status", "title", "user"])
    assert "title" in exc_info.value.message
    assert "user" in exc_info.value.message


def test_admin_may_change_any_task_field():
    task = task_owned_by(IVAN.user_id)
    assert permissions.require_task_update(ADMIN, task, ["title", "user", "project_id"]) is ADMIN


def test_non_owner_cannot_update_even_status():
    with pytest.raises(AuthorizationError):
        permissions.require_task_update(MARIA, task_owned_by(IVAN.user_id), ["status"])
