"""
Storage capability shared by the relational and document adapters.

Records travel as plain dicts with snake_case keys. Every kind exposes its
primary key as ``id`` except bookings, which are keyed by ``booking_id``.
Filters map field names to values; a ``__lt``/``__lte``/``__gt``/``__gte``
suffix turns the entry into a range comparison, as in Django lookups.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Filter = Dict[str, Any]
T = TypeVar("T")

BOOKINGS = "bookings"
EMPLOYEES = "employees"
PAYMENTS = "payments"
ADMIN_USERS = "admin_users"
KINDS = (BOOKINGS, EMPLOYEES, PAYMENTS, ADMIN_USERS)

KEY_FIELDS = {BOOKINGS: "booking_id"}
RANGE_OPERATORS = ("lt", "lte", "gt", "gte")


def key_field(kind: str) -> str:
    return KEY_FIELDS.get(kind, "id")


def split_lookup(name: str) -> Tuple[str, Optional[str]]:
    """Split ``"event_date__lt"`` into ``("event_date", "lt")``."""
    field, sep, operator = name.rpartition("__")
    if sep and operator in RANGE_OPERATORS:
        return field, operator
    return name, None


class Transaction(ABC):
    """
    A unit of work against one store.

    Used as a context manager it commits when the block finishes and rolls
    back when the block raises; the exception is never suppressed.
    """

    def __init__(self):
        self._finished = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._finished:
            return False
        if exc_type is None:
            self.commit()
        else:
            logger.warning("Rolling back transaction after %s", exc_type.__name__)
            self.rollback()
        return False

    @property
    def finished(self) -> bool:
        return self._finished

    def commit(self) -> None:
        if self._finished:
            raise RuntimeError("Transaction already finished")
        self._finished = True
        self._commit()

    def rollback(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._rollback()

    @abstractmethod
    def find_one(self, kind: str, filter: Filter) -> Optional[Record]:
        pass

    @abstractmethod
    def lock_one(self, kind: str, filter: Filter) -> Optional[Record]:
        """Read one record and hold a write lock on it until the transaction ends."""

    @abstractmethod
    def insert(self, kind: str, record: Record) -> Any:
        pass

    @abstractmethod
    def delete_one(self, kind: str, filter: Filter) -> int:
        pass

    @abstractmethod
    def delete_many(self, kind: str, filter: Filter) -> int:
        pass

    @abstractmethod
    def _commit(self) -> None:
        pass

    @abstractmethod
    def _rollback(self) -> None:
        pass


class Storage(ABC):
    """Capability interface the services are written against."""

    @abstractmethod
    def exists_by_id(self, kind: str, identifier: Any) -> bool:
        pass

    @abstractmethod
    def insert(self, kind: str, record: Record) -> Any:
        """Insert ``record`` and return its key; raises ``UniqueConstraintViolation``."""

    @abstractmethod
    def find_one(self, kind: str, filter: Filter) -> Optional[Record]:
        pass

    @abstractmethod
    def find_many(self, kind: str, filter: Filter, order_by: Iterable[str] = ()) -> List[Record]:
        """Return matching records; ``"-field"`` in ``order_by`` sorts descending."""

    @abstractmethod
    def count(self, kind: str, filter: Filter) -> int:
        pass

    @abstractmethod
    def update_one(self, kind: str, filter: Filter, changes: Record) -> int:
        """Apply ``changes`` to the first match and return the number of matches (0 or 1)."""

    @abstractmethod
    def delete_one(self, kind: str, filter: Filter) -> int:
        pass

    @abstractmethod
    def delete_many(self, kind: str, filter: Filter) -> int:
        pass

    @abstractmethod
    def begin_transaction(self) -> Transaction:
        pass

    def run_in_transaction(self, callback: Callable[[Transaction], T]) -> T:
        """
        Run ``callback(tx)`` inside a transaction and return its result.

        Adapters whose engine reports transient transaction failures may call
        ``callback`` more than once, so it must not keep state between calls.
        """
        with self.begin_transaction() as tx:
            return callback(tx)

    def close(self) -> None:
        pass
