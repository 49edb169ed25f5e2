"""Shared fixtures for Loggen tests."""
from datetime import timedelta

import pytest

from loggen import create_app
from loggen.auth import create_admin
from loggen.models import LogMessage, Meeting, db
from loggen.policy import utcnow_naive

PASSWORD = "secret"


@pytest.fixture
def app(tmp_path):
    """Fresh app on an in-memory database with uploads under tmp_path."""
    changelog = tmp_path / "CHANGELOG.md"
    changelog.write_text("# Changelog\n\n## 1.0.0\n\n- First release\n")
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "CACHE_TYPE": "NullCache",
            "SHARED_PASSWORD": PASSWORD,
            "UPLOAD_DIR": str(tmp_path / "uploads"),
            "APP_VERSION": "1.0.0",
            "CHANGELOG_PATH": str(changelog),
        }
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Push an app context for tests that call the engine directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/auth/login", json={"password": PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def admin_headers(app, client):
    with app.app_context():
        create_admin("root", "hunter2")
    resp = client.post(
        "/api/admin/login", json={"username": "root", "password": "hunter2"}
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------

def insert_log(app, days_old=0, **fields):
    """Insert a post directly with a backdated created_at. Returns its id."""
    with app.app_context():
        values = {
            "title": "",
            "message": "<p>hello</p>",
            "author": "Anna",
            "version": "1.0.0",
            "created_at": utcnow_naive() - timedelta(days=days_old),
            "pinned": False,
            "archived": False,
        }
        values.update(fields)
        m = LogMessage(**values)
        db.session.add(m)
        db.session.commit()
        return m.id


def insert_meeting(app, hours_from_now=24, **fields):
    """Insert a meeting scheduled relative to now. Returns its id."""
    with app.app_context():
        now = utcnow_naive()
        values = {
            "title": "Weekly sync",
            "scheduled_at": now + timedelta(hours=hours_from_now),
            "archived": False,
            "created_at": now,
            "updated_at": now,
        }
        values.update(fields)
        mt = Meeting(**values)
        db.session.add(mt)
        db.session.commit()
        return mt.id
