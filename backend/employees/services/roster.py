from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from django.contrib.auth.hashers import make_password
from django.utils import timezone

from core.cascade import delete_with_dependents
from core.errors import Conflict, NotFound, UniqueConstraintViolation
from core.storage import EMPLOYEES, PAYMENTS, Storage

logger = logging.getLogger(__name__)

EMPLOYEE_NOT_FOUND = "Employee not found"


def create_employee(storage: Storage, data: Dict[str, Any]) -> Dict[str, Any]:
    """Persist a new employee with a hashed password; usernames are unique."""

    if storage.count(EMPLOYEES, {"username": data["username"]}):
        raise Conflict("Username already exists")

    now = timezone.now()
    record = {
        "name": data["name"],
        "mobile_number": data["mobile_number"],
        "email": data["email"],
        "address": data["address"],
        "is_employee": True,
        "total_amount_to_be_paid": data.get("total_amount_to_be_paid", 0),
        "total_amount_paid_in_advance": data.get("total_amount_paid_in_advance", 0),
        "username": data["username"],
        "password": make_password(data["password"]),
        "created_at": now,
        "updated_at": now,
    }
    try:
        employee_id = storage.insert(EMPLOYEES, record)
    except UniqueConstraintViolation:
        raise Conflict("Username already exists") from None

    logger.info("Created employee %s", record["username"])
    return {**record, "id": employee_id}


def list_employees(storage: Storage) -> List[Dict[str, Any]]:
    return storage.find_many(EMPLOYEES, {}, order_by=["-created_at"])


def get_employee(storage: Storage, username: str) -> Dict[str, Any]:
    employee = storage.find_one(EMPLOYEES, {"username": username})
    if employee is None:
        raise NotFound(EMPLOYEE_NOT_FOUND)
    return employee


def get_employee_details(storage: Storage, username: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    employee = get_employee(storage, username)
    payments = storage.find_many(PAYMENTS, {"employee_id": employee["id"]}, order_by=["-date"])
    return employee, payments


def delete_employee(storage: Storage, username: str) -> Dict[str, int]:
    """Remove the employee and every payment made to them, atomically."""

    _, removed = delete_with_dependents(
        storage,
        EMPLOYEES,
        {"username": username},
        [(PAYMENTS, "employee_id")],
        not_found_message=EMPLOYEE_NOT_FOUND,
    )
    return removed
