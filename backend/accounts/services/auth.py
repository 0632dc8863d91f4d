from __future__ import annotations

from typing import Any, Dict, Optional

from django.contrib.auth.hashers import check_password, make_password

from core.storage import ADMIN_USERS, EMPLOYEES, Storage


def _authenticate(storage: Storage, kind: str, username: str, password: str) -> Optional[Dict[str, Any]]:
    record = storage.find_one(kind, {"username": username})
    if record is None:
        # Same cost as a failed password check.
        make_password(password)
        return None
    if not check_password(password, record["password"]):
        return None
    return record


def authenticate_employee(storage: Storage, username: str, password: str) -> Optional[Dict[str, Any]]:
    return _authenticate(storage, EMPLOYEES, username, password)


def authenticate_admin(storage: Storage, username: str, password: str) -> Optional[Dict[str, Any]]:
    return _authenticate(storage, ADMIN_USERS, username, password)
