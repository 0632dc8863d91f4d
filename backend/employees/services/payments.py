from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Dict

from django.utils import timezone

from core.errors import NotFound
from core.storage import EMPLOYEES, PAYMENTS, Storage, Transaction

from .roster import EMPLOYEE_NOT_FOUND, get_employee

logger = logging.getLogger(__name__)


def add_payment(storage: Storage, username: str, *, amount_paid: float, paid_on: date) -> Dict[str, Any]:
    """
    Record a payment to an employee.

    The employee is locked inside the same transaction as the insert, so the
    payment either lands before a concurrent delete of that employee (and is
    removed with it) or finds the employee gone.
    """

    def insert_payment(tx: Transaction) -> Dict[str, Any]:
        employee = tx.lock_one(EMPLOYEES, {"username": username})
        if employee is None:
            raise NotFound(EMPLOYEE_NOT_FOUND)
        record = {
            "amount_paid": amount_paid,
            "date": timezone.make_aware(datetime.combine(paid_on, time.min)),
            "employee_id": employee["id"],
            "created_at": timezone.now(),
        }
        return {**record, "id": tx.insert(PAYMENTS, record)}

    payment = storage.run_in_transaction(insert_payment)

    logger.info("Recorded payment %s of %s to %s", payment["id"], amount_paid, username)
    return payment


def delete_payment(storage: Storage, username: str, payment_id: Any) -> None:
    employee = get_employee(storage, username)
    deleted = storage.delete_one(PAYMENTS, {"id": payment_id, "employee_id": employee["id"]})
    if not deleted:
        raise NotFound("Payment not found")
    logger.info("Deleted payment %s of %s", payment_id, username)
