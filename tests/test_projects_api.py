"""
Tests for project endpoints and membership upkeep.
"""
from conftest import API, auth_headers
from taskboard.models.project import Project
from taskboard.models.task import Task


def create_project(client, admin, **payload):
    return client.post(f"{API}/projects", json=payload, headers=auth_headers(admin))


def test_create_project_adds_project_to_members(client, db_session, admin, ivan, maria):
    response = create_project(client, admin, name="Website", users=["ivan", "maria"])

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Website"
    assert body["description"] == ""
    assert [user["login"] for user in body["users"]] == ["ivan", "maria"]

    db_session.expire_all()
    assert body["id"] in ivan.project_ids
    assert body["id"] in maria.project_ids
    assert body["id"] not in admin.project_ids


def test_create_project_names_every_missing_login(client, db_session, admin, ivan):
    response = create_project(client, admin, name="Website", users=["ivan", "ghost", "nobody"])

    assert response.status_code == 404
    error = response.json()["error"]
    assert "ghost" in error["message"] and "nobody" in error["message"]
    assert error["logins"] == ["ghost", "nobody"]

    db_session.expire_all()
    assert db_session.query(Project).count() == 0
    assert ivan.project_ids == []


def test_create_project_requires_name(client, db_session, admin):
    response = create_project(client, admin, name="   ")

    assert response.status_code == 400
    assert db_session.query(Project).count() == 0


def test_non_admin_cannot_create_project(client, db_session, ivan):
    response = create_project(client, ivan, name="Website", users=["ivan"])

    assert response.status_code == 403
    assert response.json()["error"]["type"] == "authorization_error"
    assert db_session.query(Project).count() == 0


def test_authorization_is_checked_before_validation(client, ivan):
    # An empty name from a non-admin is a permission problem first
    assert create_project(client, ivan, name="").status_code == 403


def test_unauthenticated_project_access(client):
    assert client.get(f"{API}/projects").status_code == 401
    assert client.post(f"{API}/projects", json={"name": "Website"}).status_code == 401


def test_users_only_see_their_projects(client, admin, ivan, maria):
    create_project(client, admin, name="Website", users=["ivan"])
    create_project(client, admin, name="Mobile", users=["maria"])
    create_project(client, admin, name="Shared", users=["ivan", "maria"])

    admin_view = client.get(f"{API}/projects", headers=auth_headers(admin)).json()
    ivan_view = client.get(f"{API}/projects", headers=auth_headers(ivan)).json()

    assert [project["name"] for project in admin_view] == ["Website", "Mobile", "Shared"]
    assert [project["name"] for project in ivan_view] == ["Website", "Shared"]


def test_get_project_forbidden_for_non_member(client, admin, ivan, maria):
    project_id = create_project(client, admin, name="Website", users=["ivan"]).json()["id"]

    assert client.get(f"{API}/projects/{project_id}", headers=auth_headers(ivan)).status_code == 200
    assert client.get(f"{API}/projects/{project_id}", headers=auth_headers(maria)).status_code == 403
    assert client.get(f"{API}/projects/9999", headers=auth_headers(maria)).status_code == 404


def test_update_project_membership_diff(client, db_session, admin, ivan, maria, make_user):
    petr = make_user("petr")
    project_id = create_project(client, admin, name="Website", users=["ivan", "maria"]).json()["id"]

    response = client.put(
        f"{API}/projects/{project_id}",
        json={"users": ["maria", "petr"], "description": "Public site"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Website"
    assert body["description"] == "Public site"
    assert [user["login"] for user in body["users"]] == ["maria", "petr"]

    db_session.expire_all()
    assert project_id not in ivan.project_ids
    assert project_id in maria.project_ids
    assert project_id in petr.project_ids


def test_update_project_with_unknown_member_changes_nothing(client, db_session, admin, ivan):
    project_id = create_project(client, admin, name="Website", users=["ivan"]).json()["id"]

    response = client.put(
        f"{API}/projects/{project_id}",
        json={"name": "Renamed", "users": ["ghost"]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    db_session.expire_all()
    project = db_session.get(Project, project_id)
    assert project.name == "Website"
    assert [user.login for user in project.users] == ["ivan"]


def test_update_project_rejects_blank_name_and_non_admin(client, admin, ivan):
    project_id = create_project(client, admin, name="Website", users=["ivan"]).json()["id"]

    blank = client.put(f"{API}/projects/{project_id}", json={"name": " "}, headers=auth_headers(admin))
    member = client.put(f"{API}/projects/{project_id}", json={"name": "Mine"}, headers=auth_headers(ivan))
    missing = client.put(f"{API}/projects/9999", json={"name": "X"}, headers=auth_headers(admin))

    assert blank.status_code == 400
    assert member.status_code == 403
    assert missing.status_code == 404


def test_update_project_can_clear_members(client, db_session, admin, ivan):
    project_id = create_project(client, admin, name="Website", users=["ivan"]).json()["id"]

    response = client.put(f"{API}/projects/{project_id}", json={"users": []}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["users"] == []
    db_session.expire_all()
    assert ivan.project_ids == []


def test_delete_project_cascades_tasks_and_references(client, db_session, admin, ivan, maria):
    project_id = create_project(client, admin, name="Website", users=["ivan", "maria"]).json()["id"]
    other_id = create_project(client, admin, name="Other", users=["ivan"]).json()["id"]
    headers = auth_headers(admin)
    first = client.post(
        f"{API}/tasks", json={"title": "Design", "user": "ivan", "project_id": project_id}, headers=headers
    ).json()
    second = client.post(
        f"{API}/tasks", json={"title": "Copy", "user": "maria", "project_id": project_id}, headers=headers
    ).json()
    kept = client.post(
        f"{API}/tasks", json={"title": "Keep", "user": "ivan", "project_id": other_id}, headers=headers
    ).json()

    response = client.delete(f"{API}/projects/{project_id}", headers=headers)

    assert response.status_code == 204
    listed = client.get(f"{API}/tasks", headers=headers).json()
    assert [task["id"] for task in listed] == [kept["id"]]

    db_session.expire_all()
    assert db_session.get(Project, project_id) is None
    assert db_session.query(Task).filter(Task.project_id == project_id).count() == 0
    assert ivan.project_ids == [other_id]
    assert ivan.task_ids == [kept["id"]]
    assert maria.project_ids == []
    assert first["id"] not in ivan.task_ids
    assert second["id"] not in maria.task_ids


def test_non_admin_cannot_delete_project(client, db_session, admin, ivan):
    project_id = create_project(client, admin, name="Website", users=["ivan"]).json()["id"]

    response = client.delete(f"{API}/projects/{project_id}", headers=auth_headers(ivan))

    assert response.status_code == 403
    db_session.expire_all()
    assert db_session.get(Project, project_id) is not None
    assert client.delete(f"{API}/projects/9999", headers=auth_headers(admin)).status_code == 404


def test_membership_only_update_sets_updated_at(client, admin, ivan, maria):
    project = create_project(client, admin, name="Website", users=["ivan"]).json()
    assert project["updated_at"] is None

    response = client.put(
        f"{API}/projects/{project['id']}", json={"users": ["ivan", "maria"]}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["updated_at"] is not None
