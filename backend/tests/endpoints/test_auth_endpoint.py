from kombu.exceptions import OperationalError

from tests.helpers.auth import auth_header, login, user_header
from tests.helpers.factories import refresh_entity


def test_register_and_me(client):
    """
    Validate registration returns a usable token.

    1. Register a publisher.
    2. Call /auth/me with the returned token.
    3. Validate profile data.
    4. Validate private fields are not exposed.
    """
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "New Publisher", "email": "new@example.com", "password": "secret1", "role": "publisher"},
    )
    assert response.status_code == 200
    token = response.json()["token"]

    response = client.get("/api/v1/auth/me", headers=auth_header(token))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "new@example.com"
    assert data["role"] == "publisher"
    assert "hashed_password" not in data


def test_register_rejects_duplicates_and_bad_payloads(client, seeded_users):
    """
    Validate registration failures.

    1. Register an existing email and receive 409.
    2. Register with the admin role and receive 400.
    3. Register with a short password and receive 400.
    """
    payload = {"name": "Dup", "email": "user@example.com", "password": "secret1"}
    response = client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "User already exists"}

    response = client.post("/api/v1/auth/register", json={**payload, "email": "x@example.com", "role": "admin"})
    assert response.status_code == 400

    response = client.post("/api/v1/auth/register", json={**payload, "email": "y@example.com", "password": "123"})
    assert response.status_code == 400


def test_login_and_token(client, seeded_users):
    """
    Validate login endpoints.

    1. Login with valid credentials.
    2. Login with a wrong password and receive 401.
    3. Request an OAuth2 token with form data.
    4. Validate bearer token type.
    """
    assert login(client, "user@example.com", "user123")

    response = client.post("/api/v1/auth/login", json={"email": "user@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"

    response = client.post("/api/v1/auth/token", data={"username": "admin@example.com", "password": "admin123"})
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_me_requires_valid_token(client):
    """
    Validate protected routes reject missing or invalid tokens.

    1. Call /auth/me without a token.
    2. Call /auth/me with a garbage token.
    3. Validate both return 401 with the same message.
    """
    for headers in ({}, auth_header("garbage")):
        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authorized to access this resource"}


def test_update_details_and_password(client, seeded_users):
    """
    Validate self-service profile updates.

    1. Update name and email.
    2. Update password with a wrong current password and receive 401.
    3. Update password with the right one.
    4. Login with the new password.
    """
    headers = user_header(seeded_users["user"])
    response = client.put(
        "/api/v1/auth/updatedetails", json={"name": "Renamed", "email": "renamed@example.com"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "renamed@example.com"

    response = client.put(
        "/api/v1/auth/updatepassword", json={"current_password": "nope", "new_password": "newpass1"}, headers=headers
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Password is incorrect"

    response = client.put(
        "/api/v1/auth/updatepassword", json={"current_password": "user123", "new_password": "newpass1"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["token"]
    assert login(client, "renamed@example.com", "newpass1")


def test_forgot_and_reset_password(client, seeded_users, monkeypatch):
    """
    Validate the password reset flow.

    1. Request a reset for an unknown email and receive 404.
    2. Request a reset for a known email with a captured enqueue.
    3. Reset the password through the emailed URL.
    4. Validate login with the new password and token reuse fails.
    """
    sent = {}

    def fake_enqueue(*, recipient, reset_url):
        sent["recipient"] = recipient
        sent["reset_url"] = reset_url
        return "task-123"

    monkeypatch.setattr("devcamper.interfaces.api.v1.routes.auth.enqueue_password_reset_email_task", fake_enqueue)

    response = client.post("/api/v1/auth/forgotpassword", json={"email": "ghost@example.com"})
    assert response.status_code == 404

    response = client.post("/api/v1/auth/forgotpassword", json={"email": "user@example.com"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": "Email sent"}
    assert sent["recipient"] == "user@example.com"
    assert "/api/v1/auth/resetpassword/" in sent["reset_url"]

    reset_path = sent["reset_url"].replace("http://testserver", "")
    response = client.put(reset_path, json={"password": "resetpass1"})
    assert response.status_code == 200
    assert response.json()["token"]
    assert login(client, "user@example.com", "resetpass1")

    response = client.put(reset_path, json={"password": "another1"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid token"


def test_forgot_password_clears_token_when_email_cannot_be_queued(client, db_session, seeded_users, monkeypatch):
    """
    Validate broker failures roll back the reset token.

    1. Monkeypatch enqueue to raise a broker error.
    2. Request a password reset.
    3. Validate 500 with the uniform error body.
    4. Validate the stored reset token is cleared.
    """

    def failing_enqueue(*, recipient, reset_url):
        raise OperationalError("broker down")

    monkeypatch.setattr("devcamper.interfaces.api.v1.routes.auth.enqueue_password_reset_email_task", failing_enqueue)
    response = client.post("/api/v1/auth/forgotpassword", json={"email": "user@example.com"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Email could not be sent"}

    user = refresh_entity(db_session, seeded_users["user"])
    assert user.reset_password_token is None
    assert user.reset_password_expire is None
