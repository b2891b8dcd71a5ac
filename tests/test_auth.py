"""Authentication flow tests."""

from __future__ import annotations

from reservation_portal.data_access import users_dao


def login(client, email: str, password: str = "Password123!"):
    return client.post(
        "/auth/login",
        data={"email": email, "password": password},
    )


def test_register_login_and_access_protected(client):
    """Register a new faculty user, login, and access a protected route."""

    response = client.post(
        "/auth/register",
        data={
            "full_name": "Test Dosen",
            "email": "dosen.baru@kampus.ac.id",
            "password": "Password123!",
            "confirm_password": "Password123!",
            "role": "faculty",
            "nim_nip": "199001012015041001",
        },
    )
    assert response.status_code == 201
    assert response.get_json()["user"]["role"] == "faculty"

    client.get("/auth/logout")
    assert client.get("/auth/me").status_code == 401

    login_resp = login(client, "dosen.baru@kampus.ac.id")
    assert login_resp.status_code == 200

    protected_resp = client.get("/auth/me")
    assert protected_resp.status_code == 200
    assert protected_resp.get_json()["email"] == "dosen.baru@kampus.ac.id"


def test_registration_cannot_grant_admin(client):
    response = client.post(
        "/auth/register",
        data={
            "full_name": "Sneaky",
            "email": "sneaky@kampus.ac.id",
            "password": "Password123!",
            "confirm_password": "Password123!",
            "role": "admin",
        },
    )
    assert response.status_code == 400
    assert "role" in response.get_json()["fields"]


def test_duplicate_email_is_rejected(client):
    response = client.post(
        "/auth/register",
        data={
            "full_name": "Budi Lagi",
            "email": "budi@mahasiswa.kampus.ac.id",
            "password": "Password123!",
            "confirm_password": "Password123!",
            "role": "student",
        },
    )
    assert response.status_code == 400
    assert "email" in response.get_json()["fields"]


def test_invalid_credentials_fail(client):
    response = login(client, "nonexistent@kampus.ac.id", "WrongPassword!")
    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"


def test_admin_routes_require_admin_privileges(client):
    """Ensure faculty cannot access admin-only endpoints."""

    login(client, "rina@dosen.kampus.ac.id")
    resp = client.get("/admin/reservations/pending")
    assert resp.status_code == 403

    client.get("/auth/logout")

    login(client, "admin@kampus.ac.id")
    admin_resp = client.get("/admin/reservations/pending")
    assert admin_resp.status_code == 200


def test_deactivated_user_cannot_login(client, app, student_user):
    """Inactive accounts should be prevented from signing in."""

    with app.app_context():
        users_dao.deactivate_user(student_user.user_id)

    response = login(client, student_user.email)
    assert response.status_code == 403
    assert "deactivated" in response.get_json()["message"]
