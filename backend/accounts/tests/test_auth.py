import pytest
from rest_framework.test import APIClient

from accounts.services import auth
from core.storage.relational import RelationalStorage
from employees.services.roster import create_employee


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def employee(db):
    return create_employee(
        RelationalStorage(),
        {
            "name": "Ravi Kumar",
            "mobile_number": "9000000001",
            "email": "ravi@example.com",
            "address": "Jaipur",
            "username": "ravi",
            "password": "drums123",
        },
    )


@pytest.fixture
def admin(db, client):
    response = client.post(
        "/api/admin",
        {
            "name": "Band Admin",
            "mobileNumber": "9000000000",
            "email": "admin@example.com",
            "username": "boss",
            "password": "secret123",
        },
        format="json",
    )
    assert response.status_code == 201, response.content
    return response.json()["admin"]


def test_employee_login_returns_profile(client, employee):
    response = client.post("/api/login", {"username": "ravi", "password": "drums123"}, format="json")

    assert response.status_code == 200
    body = response.json()["employee"]
    assert body["username"] == "ravi"
    assert body["isEmployee"] is True
    assert "password" not in body


@pytest.mark.parametrize(
    "username, password",
    [("ravi", "wrong"), ("ghost", "drums123")],
)
def test_employee_login_rejects_bad_credentials(client, employee, username, password):
    response = client.post("/api/login", {"username": username, "password": password}, format="json")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password"}


def test_login_requires_both_fields(db, client):
    response = client.post("/api/login", {"username": "ravi"}, format="json")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"


def test_unknown_user_still_hashes(monkeypatch, db):
    hashed = []
    monkeypatch.setattr(auth, "make_password", lambda password: hashed.append(password))

    assert auth.authenticate_employee(RelationalStorage(), "ghost", "guess") is None
    assert hashed == ["guess"]


def test_admin_signin(client, admin):
    response = client.post("/api/signin", {"username": "boss", "password": "secret123"}, format="json")

    assert response.status_code == 200
    body = response.json()["admin"]
    assert body["username"] == "boss"
    assert body["isAdmin"] is True
    assert "password" not in body


def test_employee_cannot_sign_in_as_admin(client, employee):
    response = client.post("/api/signin", {"username": "ravi", "password": "drums123"}, format="json")

    assert response.status_code == 401


def test_admin_username_must_be_unique(client, admin):
    response = client.post(
        "/api/admin",
        {
            "name": "Other",
            "mobileNumber": "1",
            "email": "other@example.com",
            "username": "boss",
            "password": "x",
        },
        format="json",
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Admin username already exists"}


def test_admin_username_cannot_shadow_employee(client, employee):
    response = client.post(
        "/api/admin",
        {
            "name": "Ravi",
            "mobileNumber": "1",
            "email": "ravi@example.com",
            "username": "ravi",
            "password": "x",
        },
        format="json",
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Username already exists as an employee"}


def test_list_admin_users(client, admin):
    response = client.get("/api/admin")

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["admins"][0]["isAdminUser"] is True


def test_update_admin_user_changes_password(client, admin):
    response = client.put(
        "/api/admin/boss",
        {"name": "Head Admin", "password": "newsecret"},
        format="json",
    )

    assert response.status_code == 200
    assert client.get("/api/admin").json()["admins"][0]["name"] == "Head Admin"
    assert client.post("/api/signin", {"username": "boss", "password": "secret123"}, format="json").status_code == 401
    assert client.post("/api/signin", {"username": "boss", "password": "newsecret"}, format="json").status_code == 200


def test_blank_password_keeps_existing_one(client, admin):
    client.put("/api/admin/boss", {"email": "new@example.com", "password": ""}, format="json")

    response = client.post("/api/signin", {"username": "boss", "password": "secret123"}, format="json")
    assert response.status_code == 200
    assert response.json()["admin"]["email"] == "new@example.com"


def test_update_unknown_admin_is_404(db, client):
    response = client.put("/api/admin/ghost", {"name": "X"}, format="json")

    assert response.status_code == 404
    assert response.json() == {"error": "Admin user not found"}


def test_delete_admin_user(client, admin):
    response = client.delete("/api/admin/boss")

    assert response.status_code == 200
    assert client.get("/api/admin").json()["count"] == 0
    assert client.delete("/api/admin/boss").status_code == 404
