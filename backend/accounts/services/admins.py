from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.contrib.auth.hashers import make_password
from django.utils import timezone

from core.errors import Conflict, NotFound, UniqueConstraintViolation
from core.storage import ADMIN_USERS, EMPLOYEES, Storage

logger = logging.getLogger(__name__)

ADMIN_NOT_FOUND = "Admin user not found"


def create_admin_user(storage: Storage, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create an admin; the username may not be taken by another admin or an employee."""

    username = data["username"]
    if storage.count(ADMIN_USERS, {"username": username}):
        raise Conflict("Admin username already exists")
    if storage.count(EMPLOYEES, {"username": username}):
        raise Conflict("Username already exists as an employee")

    now = timezone.now()
    record = {
        "name": data["name"],
        "mobile_number": data["mobile_number"],
        "email": data["email"],
        "username": username,
        "password": make_password(data["password"]),
        "is_admin_user": True,
        "created_at": now,
        "updated_at": now,
    }
    try:
        admin_id = storage.insert(ADMIN_USERS, record)
    except UniqueConstraintViolation:
        raise Conflict("Admin username already exists") from None

    logger.info("Created admin user %s", username)
    return {**record, "id": admin_id}


def list_admin_users(storage: Storage) -> List[Dict[str, Any]]:
    return storage.find_many(ADMIN_USERS, {}, order_by=["-created_at"])


def update_admin_user(storage: Storage, username: str, changes: Dict[str, Any]) -> None:
    updates = {field: value for field, value in changes.items() if field != "password"}
    if changes.get("password"):
        updates["password"] = make_password(changes["password"])
    updates["updated_at"] = timezone.now()

    if not storage.update_one(ADMIN_USERS, {"username": username}, updates):
        raise NotFound(ADMIN_NOT_FOUND)
    logger.info("Updated admin user %s (%s)", username, ", ".join(sorted(updates)))


def delete_admin_user(storage: Storage, username: str) -> None:
    if not storage.delete_one(ADMIN_USERS, {"username": username}):
        raise NotFound(ADMIN_NOT_FOUND)
    logger.info("Deleted admin user %s", username)
