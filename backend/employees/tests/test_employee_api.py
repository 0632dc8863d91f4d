import pytest
from rest_framework.test import APIClient

from core.storage import EMPLOYEES, PAYMENTS
from core.storage.relational import RelationalStorage


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def payload():
    return {
        "name": "Ravi Kumar",
        "mobileNumber": "9000000001",
        "email": "ravi@example.com",
        "address": "Main Bazaar, Jaipur",
        "totalAmountToBePaid": 30000,
        "totalAmountPaidInAdvance": 5000,
        "username": "ravi",
        "password": "drums123",
    }


@pytest.fixture
def employee(db, client, payload):
    response = client.post("/api/employees", payload, format="json")
    assert response.status_code == 201, response.content
    return response.json()["employee"]


def pay(client, username, amount, date):
    return client.post(
        f"/api/employees/{username}/payments",
        {"amountPaid": amount, "date": date},
        format="json",
    )


def test_create_employee_hides_password(employee):
    assert employee["username"] == "ravi"
    assert employee["isEmployee"] is True
    assert employee["totalAmountToBePaid"] == 30000
    assert "password" not in employee


def test_password_is_stored_hashed(employee):
    stored = RelationalStorage().find_one(EMPLOYEES, {"username": "ravi"})

    assert stored["password"] != "drums123"
    assert stored["password"].startswith(("pbkdf2_", "argon2", "bcrypt", "md5", "scrypt"))


def test_duplicate_username_is_rejected(employee, client, payload):
    response = client.post("/api/employees", payload, format="json")

    assert response.status_code == 400
    assert response.json() == {"error": "Username already exists"}


def test_list_employees(employee, client):
    response = client.get("/api/employees")

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["employees"][0]["username"] == "ravi"


def test_detail_includes_payments_newest_first(employee, client):
    pay(client, "ravi", 1000, "2024-01-05")
    pay(client, "ravi", 2000, "2024-03-01")

    response = client.get("/api/employees/ravi")

    assert response.status_code == 200
    amounts = [payment["amountPaid"] for payment in response.json()["payments"]]
    assert amounts == [2000, 1000]


def test_unknown_employee_is_404(db, client):
    response = client.get("/api/employees/ghost")

    assert response.status_code == 404
    assert response.json() == {"error": "Employee not found"}


def test_add_payment(employee, client):
    response = pay(client, "ravi", 1500.5, "2024-02-10")

    assert response.status_code == 201
    payment = response.json()["payment"]
    assert payment["amountPaid"] == 1500.5
    assert payment["date"].startswith("2024-02-10")
    assert payment["employeeId"] == employee["id"]


@pytest.mark.parametrize(
    "body, field",
    [
        ({"amountPaid": 0, "date": "2024-02-10"}, "amountPaid"),
        ({"amountPaid": -5, "date": "2024-02-10"}, "amountPaid"),
        ({"amountPaid": 10, "date": "10/02/2024"}, "date"),
    ],
)
def test_invalid_payment_is_rejected(employee, client, body, field):
    response = client.post("/api/employees/ravi/payments", body, format="json")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"
    assert field in response.json()["details"]


def test_bad_date_message(employee, client):
    response = pay(client, "ravi", 10, "2024-13-40")

    assert response.json()["details"]["date"] == ["Invalid date format. Use YYYY-MM-DD"]


def test_payment_for_unknown_employee_is_404(db, client):
    response = pay(client, "ghost", 10, "2024-02-10")

    assert response.status_code == 404
    assert RelationalStorage().count(PAYMENTS, {}) == 0


def test_delete_payment(employee, client):
    payment = pay(client, "ravi", 10, "2024-02-10").json()["payment"]

    response = client.delete(f"/api/employees/ravi/payments/{payment['id']}")

    assert response.status_code == 200
    assert client.get("/api/employees/ravi").json()["payments"] == []


def test_delete_payment_of_another_employee_is_404(employee, client, payload):
    client.post("/api/employees", {**payload, "username": "sunil"}, format="json")
    payment = pay(client, "ravi", 10, "2024-02-10").json()["payment"]

    response = client.delete(f"/api/employees/sunil/payments/{payment['id']}")

    assert response.status_code == 404
    assert response.json() == {"error": "Payment not found"}


def test_delete_payment_with_malformed_id_is_404(employee, client):
    response = client.delete("/api/employees/ravi/payments/not-an-id")

    assert response.status_code == 404


def test_delete_employee_removes_payments(employee, client):
    pay(client, "ravi", 10, "2024-02-10")
    pay(client, "ravi", 20, "2024-02-11")

    response = client.delete("/api/employees/ravi")

    assert response.status_code == 200
    assert response.json() == {"message": "Employee deleted successfully"}
    assert RelationalStorage().count(PAYMENTS, {}) == 0
    assert client.get("/api/employees/ravi").status_code == 404


def test_delete_unknown_employee_is_404(db, client):
    response = client.delete("/api/employees/ghost")

    assert response.status_code == 404
