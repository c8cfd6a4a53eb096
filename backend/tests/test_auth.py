from lawhelper.core.config import settings
from lawhelper.db.models import UserSession

from conftest import PASSWORD, register


def test_register_logs_in_and_hides_password_hash(anon_client):
    resp = register(anon_client, "new@example.com", "Casey Doe")

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "new@example.com"
    assert body["name"] == "Casey Doe"
    assert "passwordHash" not in body and "password" not in body
    assert settings.SESSION_COOKIE_NAME in anon_client.cookies

    me = anon_client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["id"] == body["id"]


def test_register_duplicate_email_rejected(anon_client):
    assert register(anon_client, "dup@example.com").status_code == 201

    resp = register(anon_client, "dup@example.com")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already exists"


def test_register_validates_body(anon_client):
    resp = anon_client.post("/api/register", json={"name": "X", "email": "not-an-email", "password": PASSWORD})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "email"

    resp = anon_client.post("/api/register", json={"name": "X", "email": "x@example.com", "password": "short"})
    assert resp.status_code == 400


def test_login_wrong_password_and_unknown_email_look_identical(anon_client):
    register(anon_client, "login@example.com")
    anon_client.post("/api/logout")

    wrong = anon_client.post("/api/login", json={"email": "login@example.com", "password": "wrong-password"})
    unknown = anon_client.post("/api/login", json={"email": "nobody@example.com", "password": "wrong-password"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"detail": "Invalid email or password"}


def test_login_replaces_existing_session(anon_client, db):
    register(anon_client, "rotate@example.com")
    old_cookie = anon_client.cookies.get(settings.SESSION_COOKIE_NAME)

    resp = anon_client.post("/api/login", json={"email": "rotate@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    assert anon_client.cookies.get(settings.SESSION_COOKIE_NAME) != old_cookie
    assert db.query(UserSession).count() == 1


def test_logout_is_idempotent(anon_client):
    register(anon_client, "bye@example.com")

    first = anon_client.post("/api/logout")
    second = anon_client.post("/api/logout")

    assert first.status_code == second.status_code == 200
    assert first.json() == {"message": "Logged out successfully"}
    assert anon_client.get("/api/user").status_code == 401


def test_protected_routes_require_session(anon_client):
    for method, path in [
        ("get", "/api/user"),
        ("get", "/api/cases"),
        ("get", "/api/saved-documents"),
        ("get", "/api/search-history"),
        ("post", "/api/legal-search"),
    ]:
        resp = getattr(anon_client, method)(path)
        assert resp.status_code == 401, path
        assert resp.json()["detail"] == "Authentication required"


def test_forged_cookie_rejected(anon_client):
    anon_client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-real-token")
    assert anon_client.get("/api/user").status_code == 401


def test_login_after_registration(anon_client):
    register(anon_client, "roundtrip@example.com", "Round Trip")
    anon_client.post("/api/logout")

    resp = anon_client.post("/api/login", json={"email": "roundtrip@example.com", "password": PASSWORD})

    assert resp.status_code == 200
    assert resp.json()["name"] == "Round Trip"
    assert anon_client.get("/api/user").json()["email"] == "roundtrip@example.com"
