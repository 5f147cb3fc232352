"""
Task endpoint tests: creation, per-task permissions, filters and per-user listings.

Run: pytest test_task_api.py -v
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.models import Task, TaskPriority, TaskStatus, UserRole
from app.utils.dates import to_date


@pytest.fixture
def creator(make_user):
    return make_user("creator@example.com")


@pytest.fixture
def member(make_user):
    return make_user("member@example.com")


@pytest.fixture
def outsider(make_user):
    return make_user("outsider@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def project(make_project, creator, member):
    return make_project([creator, member], name="Launch")


class TestCreateTask:
    def test_member_creates_task(self, client, creator, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "Draft plan", "project_id": project.id},
            headers=auth_headers(creator),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Draft plan"
        assert body["status"] == "TODO"
        assert body["priority"] == "MEDIUM"
        assert body["creator_id"] == creator.id
        assert body["creator"]["email"] == "creator@example.com"
        assert body["assignee"] is None
        assert body["project"]["name"] == "Launch"
        assert body["comments"] == []

    def test_due_date_is_normalized_to_calendar_date(self, client, creator, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "Ship", "project_id": project.id, "due_date": "2025-03-01T10:00:00Z"},
            headers=auth_headers(creator),
        )
        assert response.status_code == 201
        assert response.json()["due_date"] == "2025-03-01"

    def test_due_date_with_offset_uses_utc_day(self, client, creator, project, auth_headers):
        # 23:30 at UTC-5 is already the next day in UTC
        response = client.post(
            "/tasks/",
            json={"title": "Late call", "project_id": project.id, "due_date": "2024-03-10T23:30:00-05:00"},
            headers=auth_headers(creator),
        )
        assert response.status_code == 201
        assert response.json()["due_date"] == "2024-03-11"

    def test_invalid_due_date(self, client, creator, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "Ship", "project_id": project.id, "due_date": "next tuesday"},
            headers=auth_headers(creator),
        )
        assert response.status_code == 400

    def test_outsider_cannot_create(self, client, outsider, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "Sneaky", "project_id": project.id},
            headers=auth_headers(outsider),
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "You do not have access to this project"

    def test_admin_creates_in_any_project(self, client, admin, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "Audit", "project_id": project.id},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201

    def test_missing_project(self, client, creator, auth_headers):
        response = client.post("/tasks/", json={"title": "X", "project_id": 9999}, headers=auth_headers(creator))
        assert response.status_code == 404

    def test_assignee_must_be_project_member(self, client, creator, outsider, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "X", "project_id": project.id, "assignee_id": outsider.id},
            headers=auth_headers(creator),
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "assignee not a member"

    def test_assignee_must_exist(self, client, creator, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "X", "project_id": project.id, "assignee_id": 9999},
            headers=auth_headers(creator),
        )
        assert response.status_code == 404

    def test_member_assignee(self, client, creator, member, project, auth_headers):
        response = client.post(
            "/tasks/",
            json={"title": "X", "project_id": project.id, "assignee_id": member.id, "priority": "URGENT"},
            headers=auth_headers(creator),
        )
        assert response.status_code == 201
        assert response.json()["assignee"]["id"] == member.id
        assert response.json()["priority"] == "URGENT"

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": ""},
            {"title": "X", "status": "BLOCKED"},
            {"title": "X", "priority": "CRITICAL"},
            {"title": "X", "creator_id": 1},
        ],
    )
    def test_rejects_invalid_payloads(self, client, creator, project, auth_headers, payload):
        payload = dict(payload, project_id=project.id)
        assert client.post("/tasks/", json=payload, headers=auth_headers(creator)).status_code == 400


class TestTaskPermissions:
    def test_member_reads_but_cannot_update_others_task(self, client, creator, member, project, make_task, auth_headers):
        task = make_task(project, creator)

        assert client.get(f"/tasks/{task.id}", headers=auth_headers(member)).status_code == 200

        response = client.patch(f"/tasks/{task.id}", json={"title": "Mine now"}, headers=auth_headers(member))
        assert response.status_code == 403
        assert response.json()["reason"] == "no task permission"

    def test_creator_updates(self, client, creator, project, make_task, auth_headers):
        task = make_task(project, creator)
        response = client.patch(
            f"/tasks/{task.id}",
            json={"status": "IN_PROGRESS", "due_date": "2025-06-15"},
            headers=auth_headers(creator),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "IN_PROGRESS"
        assert response.json()["due_date"] == "2025-06-15"
        assert response.json()["title"] == "Test Task"

    def test_assignee_updates(self, client, creator, member, project, make_task, auth_headers):
        task = make_task(project, creator, assignee=member)
        response = client.patch(f"/tasks/{task.id}", json={"status": "DONE"}, headers=auth_headers(member))
        assert response.status_code == 200

    def test_admin_updates_without_membership(self, client, creator, admin, project, make_task, auth_headers):
        task = make_task(project, creator)
        response = client.patch(f"/tasks/{task.id}", json={"priority": "LOW"}, headers=auth_headers(admin))
        assert response.status_code == 200

    def test_outsider_cannot_read(self, client, creator, outsider, project, make_task, auth_headers):
        task = make_task(project, creator)
        response = client.get(f"/tasks/{task.id}", headers=auth_headers(outsider))
        assert response.status_code == 403
        assert response.json()["detail"] == "You do not have access to this task"

    def test_project_cannot_be_changed(self, client, creator, project, make_project, make_task, auth_headers):
        other = make_project([creator], name="Other")
        task = make_task(project, creator)
        response = client.patch(f"/tasks/{task.id}", json={"project_id": other.id}, headers=auth_headers(creator))
        assert response.status_code == 400

    def test_reassign_to_non_member(self, client, creator, outsider, project, make_task, auth_headers):
        task = make_task(project, creator)
        response = client.patch(f"/tasks/{task.id}", json={"assignee_id": outsider.id}, headers=auth_headers(creator))
        assert response.status_code == 403

    def test_clearing_assignee(self, client, creator, member, project, make_task, auth_headers):
        task = make_task(project, creator, assignee=member)
        response = client.patch(f"/tasks/{task.id}", json={"assignee_id": None}, headers=auth_headers(creator))
        assert response.status_code == 200
        assert response.json()["assignee_id"] is None

    def test_missing_task(self, client, creator, auth_headers):
        assert client.get("/tasks/9999", headers=auth_headers(creator)).status_code == 404
        assert client.patch("/tasks/9999", json={"title": "X"}, headers=auth_headers(creator)).status_code == 404

    def test_read_model_includes_comments(self, client, creator, member, project, make_task, make_comment, auth_headers):
        task = make_task(project, creator)
        make_comment(task, member, "First!")
        body = client.get(f"/tasks/{task.id}", headers=auth_headers(creator)).json()
        assert [c["content"] for c in body["comments"]] == ["First!"]
        assert body["comments"][0]["user"]["id"] == member.id


class TestDeleteTask:
    def test_creator_deletes(self, client, db, creator, project, make_task, auth_headers):
        task = make_task(project, creator)
        task_id = task.id
        assert client.delete(f"/tasks/{task_id}", headers=auth_headers(creator)).status_code == 204
        db.expire_all()
        assert db.get(Task, task_id) is None

    def test_assignee_cannot_delete(self, client, creator, member, project, make_task, auth_headers):
        task = make_task(project, creator, assignee=member)
        response = client.delete(f"/tasks/{task.id}", headers=auth_headers(member))
        assert response.status_code == 403
        assert response.json()["detail"] == "Only task creator or admin can delete tasks"

    def test_admin_deletes(self, client, creator, admin, project, make_task, auth_headers):
        task = make_task(project, creator)
        assert client.delete(f"/tasks/{task.id}", headers=auth_headers(admin)).status_code == 204


class TestListTasks:
    def test_lists_created_or_assigned(self, client, creator, member, project, make_task, auth_headers):
        make_task(project, creator, title="mine")
        make_task(project, member, title="for me", assignee=creator)
        make_task(project, member, title="not mine")

        body = client.get("/tasks/", headers=auth_headers(creator)).json()
        assert sorted(t["title"] for t in body["items"]) == ["for me", "mine"]
        assert body["total"] == 2

    def test_filtered_second_page(self, client, creator, project, make_task, auth_headers):
        for i in range(12):
            make_task(project, creator, title=f"hot {i}", status=TaskStatus.TODO, priority=TaskPriority.HIGH)
        make_task(project, creator, title="cold", status=TaskStatus.TODO, priority=TaskPriority.LOW)

        headers = auth_headers(creator)
        everything = client.get("/tasks/?status=TODO&priority=HIGH&limit=100", headers=headers).json()
        body = client.get("/tasks/?status=TODO&priority=HIGH&page=2&limit=5", headers=headers).json()

        assert [t["id"] for t in body["items"]] == [t["id"] for t in everything["items"][5:10]]
        assert body["total"] == 12
        assert body["has_more"] is True
        assert body["total_pages"] == 3

    def test_filter_by_project(self, client, creator, project, make_project, make_task, auth_headers):
        other = make_project([creator], name="Other")
        make_task(project, creator, title="here")
        make_task(other, creator, title="there")
        body = client.get(f"/tasks/?project_id={other.id}", headers=auth_headers(creator)).json()
        assert [t["title"] for t in body["items"]] == ["there"]

    def test_invalid_filter_value(self, client, creator, auth_headers):
        assert client.get("/tasks/?status=SOMEDAY", headers=auth_headers(creator)).status_code == 400


class TestListingsByRelation:
    def test_by_project_for_member(self, client, creator, member, project, make_task, auth_headers):
        make_task(project, creator, title="a")
        make_task(project, creator, title="b")
        response = client.get(f"/tasks/project/{project.id}", headers=auth_headers(member))
        assert response.status_code == 200
        # newest first
        assert [t["title"] for t in response.json()] == ["b", "a"]

    def test_by_project_for_outsider(self, client, outsider, project, auth_headers):
        assert client.get(f"/tasks/project/{project.id}", headers=auth_headers(outsider)).status_code == 403

    def test_by_missing_project(self, client, creator, auth_headers):
        assert client.get("/tasks/project/9999", headers=auth_headers(creator)).status_code == 404

    def test_own_assigned_tasks(self, client, creator, member, project, make_task, auth_headers):
        make_task(project, creator, title="for member", assignee=member)
        make_task(project, creator, title="unassigned")
        response = client.get(f"/tasks/assignee/{member.id}", headers=auth_headers(member))
        assert [t["title"] for t in response.json()] == ["for member"]

    def test_someone_elses_assigned_tasks(self, client, creator, member, auth_headers):
        response = client.get(f"/tasks/assignee/{creator.id}", headers=auth_headers(member))
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only view your own assigned tasks"

    def test_someone_elses_created_tasks(self, client, creator, member, auth_headers):
        response = client.get(f"/tasks/creator/{creator.id}", headers=auth_headers(member))
        assert response.status_code == 403

    def test_admin_views_any_listing(self, client, creator, admin, project, make_task, auth_headers):
        make_task(project, creator)
        response = client.get(f"/tasks/creator/{creator.id}", headers=auth_headers(admin))
        assert response.status_code == 200
        assert len(response.json()) == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("2025-03-01", date(2025, 3, 1)),
        ("2025-03-01T10:00:00Z", date(2025, 3, 1)),
        ("2025-03-01T10:00:00", date(2025, 3, 1)),
        ("2024-03-10T23:30:00-05:00", date(2024, 3, 11)),
        ("2024-03-11T01:00:00+09:00", date(2024, 3, 10)),
        (datetime(2024, 3, 10, 23, 30, tzinfo=timezone(timedelta(hours=-5))), date(2024, 3, 11)),
        (date(2024, 1, 2), date(2024, 1, 2)),
    ],
)
def test_to_date(value, expected):
    assert to_date(value) == expected


@pytest.mark.parametrize("value", ["", "yesterday", "2024-13-01", 20240101])
def test_to_date_rejects(value):
    with pytest.raises(ValueError):
        to_date(value)
