"""HTTP surface for posts: auth, CRUD, comments and error shapes."""
from conftest import PASSWORD, insert_log


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class TestAuth:
    def test_wrong_password(self, client):
        resp = client.post("/api/auth/login", json={"password": "nope"})
        assert resp.status_code == 401
        assert "error" in resp.get_json()

    def test_missing_password(self, client):
        assert client.post("/api/auth/login", json={}).status_code == 400

    def test_login_returns_token(self, client):
        resp = client.post("/api/auth/login", json={"password": PASSWORD})
        assert resp.get_json()["token"]

    def test_routes_need_token(self, client):
        assert client.get("/api/logs").status_code == 401
        assert client.get("/api/meetings/upcoming").status_code == 401

    def test_garbage_token(self, client):
        headers = {"Authorization": "Bearer not-a-jwt"}
        assert client.get("/api/logs", headers=headers).status_code == 401

    def test_user_token_is_not_admin(self, client, auth_headers):
        assert client.get("/api/admin/overview", headers=auth_headers).status_code == 403

    def test_non_ascii_password(self, app, client):
        app.config["SHARED_PASSWORD"] = "hemlig-åäö"
        resp = client.post("/api/auth/login", json={"password": "hemlig-åäö"})
        assert resp.status_code == 200
        assert resp.get_json()["token"]

    def test_non_ascii_wrong_password(self, app, client):
        app.config["SHARED_PASSWORD"] = "hemlig-åäö"
        resp = client.post("/api/auth/login", json={"password": "fel-lösen"})
        assert resp.status_code == 401

    def test_non_ascii_guess_against_ascii_password(self, client):
        resp = client.post("/api/auth/login", json={"password": "lösenord"})
        assert resp.status_code == 401


class TestPublic:
    def test_version(self, client):
        body = client.get("/api/version").get_json()
        assert body["version"] == "1.0.0"
        assert body["theme"] in ("default", "christmas")

    def test_changelog(self, client):
        body = client.get("/api/changelog").get_json()
        assert body["changelog"].startswith("# Changelog")
        assert "<h1>" in body["html"]


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

class TestPosts:
    def test_create_and_list(self, client, auth_headers):
        resp = client.post(
            "/api/logs",
            json={"author": "Anna", "message": "<p>Shift notes</p>", "title": "Monday"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        created = resp.get_json()
        assert created["pinned"] is False
        assert created["archived"] is False
        assert created["version"] == "1.0.0"

        logs = client.get("/api/logs", headers=auth_headers).get_json()
        assert [m["id"] for m in logs] == [created["id"]]
        assert logs[0]["signatures"] == []
        assert logs[0]["comments"] == []

    def test_create_strips_script_from_html(self, client, auth_headers):
        resp = client.post(
            "/api/logs",
            json={"author": "Anna", "message": "<p>ok</p><script>x()</script>"},
            headers=auth_headers,
        )
        assert "<script>" not in resp.get_json()["html"]

    def test_create_blank_message(self, client, auth_headers):
        resp = client.post(
            "/api/logs", json={"author": "Anna", "message": "<p></p>"}, headers=auth_headers
        )
        assert resp.status_code == 400

    def test_edit(self, app, client, auth_headers):
        log_id = insert_log(app, image_url="/uploads/a.png")
        resp = client.put(
            f"/api/logs/{log_id}",
            json={"message": "<p>new</p>", "title": "T"},
            headers=auth_headers,
        )
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["message"] == "<p>new</p>"
        # omitted imageUrl is left alone
        assert body["imageUrl"] == "/uploads/a.png"

        body = client.put(
            f"/api/logs/{log_id}",
            json={"message": "<p>new</p>", "imageUrl": None},
            headers=auth_headers,
        ).get_json()
        assert body["imageUrl"] is None

    def test_pin_flag_in_response(self, app, client, auth_headers):
        log_id = insert_log(app, days_old=40, pinned=True)
        body = client.post(f"/api/logs/{log_id}/pin", headers=auth_headers).get_json()
        assert body["pinned"] is False
        assert body["_unpinningOldPost"] is True

    def test_archive_round_trip(self, app, client, auth_headers):
        log_id = insert_log(app, pinned=True)
        body = client.post(f"/api/logs/{log_id}/archive", headers=auth_headers).get_json()
        assert body["archived"] is True and body["pinned"] is False
        body = client.post(f"/api/logs/{log_id}/unarchive", headers=auth_headers).get_json()
        assert body["archived"] is False
        assert body["unpinnedAt"] is not None

    def test_delete(self, app, client, auth_headers):
        log_id = insert_log(app)
        resp = client.delete(f"/api/logs/{log_id}", headers=auth_headers)
        assert resp.get_json() == {"success": True, "id": log_id}
        assert client.delete(f"/api/logs/{log_id}", headers=auth_headers).status_code == 404

    def test_missing_post(self, client, auth_headers):
        resp = client.post("/api/logs/999/pin", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "not_found"


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

class TestCommentRoutes:
    def test_thread_shape(self, app, client, auth_headers):
        log_id = insert_log(app)
        url = f"/api/logs/{log_id}/comments"
        top = client.post(
            url, json={"author": "Anna", "message": "See **this**"}, headers=auth_headers
        ).get_json()
        assert "<strong>this</strong>" in top["html"]
        reply = client.post(
            url,
            json={"author": "Ben", "message": "Seen", "parentId": top["id"]},
            headers=auth_headers,
        )
        assert reply.status_code == 201

        nested = client.post(
            url,
            json={"author": "Cleo", "message": "Deep", "parentId": reply.get_json()["id"]},
            headers=auth_headers,
        )
        assert nested.status_code == 400

        post = client.get("/api/logs", headers=auth_headers).get_json()[0]
        assert len(post["comments"]) == 1
        assert [r["author"] for r in post["comments"][0]["replies"]] == ["Ben"]

    def test_delete_reports_replies(self, app, client, auth_headers):
        log_id = insert_log(app)
        url = f"/api/logs/{log_id}/comments"
        top = client.post(
            url, json={"author": "Anna", "message": "a"}, headers=auth_headers
        ).get_json()
        client.post(
            url,
            json={"author": "Ben", "message": "b", "parentId": top["id"]},
            headers=auth_headers,
        )
        body = client.delete(f"/api/comments/{top['id']}", headers=auth_headers).get_json()
        assert body == {"success": True, "id": top["id"], "removedReplies": 1}
        resp = client.delete(f"/api/comments/{top['id']}", headers=auth_headers)
        assert resp.status_code == 404
