from datetime import datetime, timedelta, timezone

from jose import jwt

from storefront.core.config import get_settings
from storefront.core.security import issue_token, verify_token
from storefront.models.user import RevokedToken

from tests.conftest import bearer, register


def test_register_returns_user_and_token(client):
    body = register(client, "carol@example.com", name="  Carol  ")

    assert body["message"] == "User registered successfully!"
    assert body["user"]["name"] == "Carol"
    assert body["user"]["email"] == "carol@example.com"
    assert body["user"]["isAdmin"] is False
    assert "password" not in body["user"]
    assert "passwordHash" not in body["user"]
    assert verify_token(body["token"])["isAdmin"] is False


def test_register_duplicate_email_rejected(client):
    register(client, "dup@example.com")

    response = client.post(
        "/api/auth/register",
        json={"name": "Again", "email": "dup@example.com", "password": "x"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "User already exists!"


def test_register_missing_fields_is_400(client):
    response = client.post("/api/auth/register", json={"email": "nope@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


def test_login_success_and_failures(client):
    register(client, "dave@example.com", password="right-pass")

    ok = client.post(
        "/api/auth/login", json={"email": "dave@example.com", "password": "right-pass"}
    )
    assert ok.status_code == 200
    assert ok.json()["message"] == "Login successful!"
    assert ok.json()["user"]["email"] == "dave@example.com"

    wrong = client.post(
        "/api/auth/login", json={"email": "dave@example.com", "password": "nope"}
    )
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid credentials!"

    unknown = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "nope"}
    )
    assert unknown.status_code == 400
    assert unknown.json()["message"] == "User not found!"


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied!"


def test_profile_rejects_garbage_token(client):
    response = client.get("/api/auth/profile", headers=bearer("not-a-jwt"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token!"


def test_profile_rejects_expired_token(client):
    body = register(client, "old@example.com")
    settings = get_settings()
    expired = jwt.encode(
        {
            "id": body["user"]["id"],
            "isAdmin": False,
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )

    response = client.get("/api/auth/profile", headers=bearer(expired))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token!"


def test_profile_returns_current_user(client, user_headers):
    response = client.get("/api/auth/profile", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "alice@example.com"
    assert response.json()["name"] == "Alice"


def test_logout_revokes_token_until_new_login(client):
    body = register(client, "erin@example.com", password="pw")
    headers = bearer(body["token"])

    assert client.get("/api/auth/profile", headers=headers).status_code == 200

    logout = client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out successfully!"

    rejected = client.get("/api/auth/profile", headers=headers)
    assert rejected.status_code == 401
    assert rejected.json()["message"] == "Token is invalid. Please log in again!"

    login = client.post("/api/auth/login", json={"email": "erin@example.com", "password": "pw"})
    fresh = bearer(login.json()["token"])
    assert client.get("/api/auth/profile", headers=fresh).status_code == 200


def test_stale_revocation_entry_is_ignored(client, db_session):
    body = register(client, "frank@example.com")
    token = body["token"]
    db_session.add(
        RevokedToken(
            token=token,
            created_at=datetime.now(timezone.utc) - timedelta(hours=2),
        )
    )
    db_session.commit()

    response = client.get("/api/auth/profile", headers=bearer(token))

    assert response.status_code == 200


def test_tokens_issued_back_to_back_differ(client):
    body = register(client, "gina@example.com")
    user_id = verify_token(body["token"])["id"]

    assert issue_token(user_id, False) != issue_token(user_id, False)


def test_change_password(client):
    body = register(client, "hank@example.com", password="first")
    headers = bearer(body["token"])

    wrong = client.put(
        "/api/auth/change-password",
        json={"oldPassword": "nope", "newPassword": "second"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Old password is incorrect!"

    ok = client.put(
        "/api/auth/change-password",
        json={"oldPassword": "first", "newPassword": "second"},
        headers=headers,
    )
    assert ok.status_code == 200

    old_login = client.post(
        "/api/auth/login", json={"email": "hank@example.com", "password": "first"}
    )
    assert old_login.status_code == 401
    new_login = client.post(
        "/api/auth/login", json={"email": "hank@example.com", "password": "second"}
    )
    assert new_login.status_code == 200


def test_update_profile(client, user_headers, other_headers):
    ok = client.put(
        "/api/auth/profile",
        json={"name": "Alice Liddell", "email": "liddell@example.com"},
        headers=user_headers,
    )
    assert ok.status_code == 200
    assert ok.json()["user"]["name"] == "Alice Liddell"
    assert ok.json()["user"]["email"] == "liddell@example.com"

    taken = client.put(
        "/api/auth/profile",
        json={"email": "liddell@example.com"},
        headers=other_headers,
    )
    assert taken.status_code == 400


def test_admin_dashboard_requires_admin(client, user_headers, admin_headers):
    denied = client.get("/api/auth/admin-dashboard", headers=user_headers)
    assert denied.status_code == 403
    assert denied.json()["message"] == "Access denied! Admins only."

    allowed = client.get("/api/auth/admin-dashboard", headers=admin_headers)
    assert allowed.status_code == 200
