"""Admin routes: login, overview, user stats and meeting management."""
import pytest

from conftest import insert_log, insert_meeting
from loggen import comments
from loggen.auth import create_admin
from loggen.errors import Conflict


def test_admin_login_bad_password(app, client):
    with app.app_context():
        create_admin("root", "hunter2")
    resp = client.post("/api/admin/login", json={"username": "root", "password": "x"})
    assert resp.status_code == 401


def test_duplicate_admin(ctx):
    create_admin("root", "hunter2")
    with pytest.raises(Conflict):
        create_admin("root", "other")


def test_admin_token_works_on_user_routes(client, admin_headers):
    assert client.get("/api/logs", headers=admin_headers).status_code == 200


def test_overview(app, client, admin_headers):
    insert_log(app)
    insert_log(app, pinned=True)
    insert_log(app, archived=True)
    body = client.get("/api/admin/overview", headers=admin_headers).get_json()
    assert body["logs"] == {"total": 3, "pinned": 1, "archived": 1, "active": 2}
    assert body["comments"] == 0
    assert body["images"] == 0


def test_user_stats(app, client, admin_headers):
    first = insert_log(app, author="Anna")
    insert_log(app, author="Ben")
    with app.app_context():
        comments.sign_as_read(first, "Ben")
        comments.add_comment(first, "Ben", "ok")

    body = client.get("/api/admin/user-stats", headers=admin_headers).get_json()
    assert body["totalLogs"] == 2
    by_name = {u["name"]: u for u in body["users"]}
    assert by_name["Ben"]["signaturesCount"] == 1
    assert by_name["Ben"]["signaturesPercentage"] == 50.0
    assert by_name["Ben"]["commentsCount"] == 1
    assert by_name["Anna"]["postsCreated"] == 1
    assert body["users"][0]["name"] == "Ben"


def test_admin_log_list_is_summary(app, client, admin_headers):
    insert_log(app)
    rows = client.get("/api/admin/logs", headers=admin_headers).get_json()
    assert "comments" not in rows[0]


class TestAdminMeetings:
    def test_create_update_delete(self, client, admin_headers):
        resp = client.post(
            "/api/admin/meetings",
            json={"title": "Planning", "scheduledAt": "2030-05-01T10:00:00Z"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        mid = resp.get_json()["id"]

        body = client.put(
            f"/api/admin/meetings/{mid}", json={"title": "Replanning"}, headers=admin_headers
        ).get_json()
        assert body["title"] == "Replanning"
        assert body["scheduledAt"] == "2030-05-01T10:00:00"

        body = client.put(
            f"/api/admin/meetings/{mid}", json={"archived": True}, headers=admin_headers
        ).get_json()
        assert body["archived"] is True

        body = client.post(
            f"/api/admin/meetings/{mid}/unarchive", headers=admin_headers
        ).get_json()
        assert body["archived"] is False

        resp = client.delete(f"/api/admin/meetings/{mid}", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get("/api/admin/meetings", headers=admin_headers).get_json() == []

    def test_create_requires_fields(self, client, admin_headers):
        resp = client.post(
            "/api/admin/meetings", json={"title": "No date"}, headers=admin_headers
        )
        assert resp.status_code == 400

    def test_admin_archive_before_meeting(self, app, client, admin_headers):
        mid = insert_meeting(app, hours_from_now=10)
        resp = client.post(f"/api/admin/meetings/{mid}/archive", headers=admin_headers)
        assert resp.get_json()["archived"] is True

    def test_user_token_rejected(self, client, auth_headers):
        resp = client.post(
            "/api/admin/meetings",
            json={"title": "x", "scheduledAt": "2030-05-01T10:00:00Z"},
            headers=auth_headers,
        )
        assert resp.status_code == 403
