from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, List, Optional

from django.apps import apps
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from core.errors import StorageError, UniqueConstraintViolation

from .base import ADMIN_USERS, BOOKINGS, EMPLOYEES, PAYMENTS, Filter, Record, Storage, Transaction

logger = logging.getLogger(__name__)

MODELS = {
    BOOKINGS: "bookings.Booking",
    EMPLOYEES: "employees.Employee",
    PAYMENTS: "employees.Payment",
    ADMIN_USERS: "accounts.AdminUser",
}


@contextmanager
def _database_errors(action: str):
    try:
        yield
    except IntegrityError as exc:
        if "unique" in str(exc).lower():
            raise UniqueConstraintViolation(details=str(exc)) from exc
        raise StorageError(f"Failed to {action}", details=str(exc)) from exc
    except DatabaseError as exc:
        logger.exception("Database error while trying to %s", action)
        raise StorageError(f"Failed to {action}", details=str(exc)) from exc


class RelationalStorage(Storage):
    """Storage adapter over the Django ORM (SQLite or PostgreSQL)."""

    def __init__(self, using: str = "default"):
        self.using = using

    def _model(self, kind: str):
        try:
            label = MODELS[kind]
        except KeyError:
            raise ValueError(f"Unknown record kind: {kind}") from None
        return apps.get_model(label)

    def _queryset(self, kind: str, *, for_update: bool = False):
        queryset = self._model(kind)._default_manager.using(self.using)
        if for_update:
            queryset = queryset.select_for_update()
        return queryset

    def _filtered(self, kind: str, filter: Filter, *, for_update: bool = False):
        queryset = self._queryset(kind, for_update=for_update)
        lookups = {("pk" if name == "id" else name): value for name, value in filter.items()}
        try:
            return queryset.filter(**lookups)
        except (ValueError, TypeError, ValidationError):
            # A malformed key (e.g. "abc" for an integer id) cannot match anything.
            return queryset.none()

    def exists_by_id(self, kind: str, identifier: Any) -> bool:
        with _database_errors(f"look up {kind}"):
            return self._filtered(kind, {"id": identifier}).exists()

    def insert(self, kind: str, record: Record) -> Any:
        model = self._model(kind)
        with _database_errors(f"insert into {kind}"):
            with transaction.atomic(using=self.using):
                instance = model._default_manager.db_manager(self.using).create(**record)
        return instance.pk

    def find_one(self, kind: str, filter: Filter) -> Optional[Record]:
        with _database_errors(f"read {kind}"):
            return self._filtered(kind, filter).values().first()

    def find_many(self, kind: str, filter: Filter, order_by: Iterable[str] = ()) -> List[Record]:
        with _database_errors(f"read {kind}"):
            queryset = self._filtered(kind, filter)
            ordering = [("-pk" if field == "-id" else "pk" if field == "id" else field) for field in order_by]
            if ordering:
                queryset = queryset.order_by(*ordering)
            return list(queryset.values())

    def count(self, kind: str, filter: Filter) -> int:
        with _database_errors(f"count {kind}"):
            return self._filtered(kind, filter).count()

    def update_one(self, kind: str, filter: Filter, changes: Record) -> int:
        with _database_errors(f"update {kind}"):
            pk = self._filtered(kind, filter).values_list("pk", flat=True).first()
            if pk is None:
                return 0
            self._queryset(kind).filter(pk=pk).update(**changes)
            return 1

    def delete_one(self, kind: str, filter: Filter) -> int:
        with _database_errors(f"delete from {kind}"):
            with transaction.atomic(using=self.using):
                return self._delete_one(kind, filter)

    def delete_many(self, kind: str, filter: Filter) -> int:
        with _database_errors(f"delete from {kind}"):
            with transaction.atomic(using=self.using):
                return self._delete_many(kind, filter)

    def _delete_one(self, kind: str, filter: Filter) -> int:
        pk = self._filtered(kind, filter).values_list("pk", flat=True).first()
        if pk is None:
            return 0
        return self._delete_many(kind, {"id": pk})

    def _delete_many(self, kind: str, filter: Filter) -> int:
        model = self._model(kind)
        _, per_model = self._filtered(kind, filter).delete()
        return per_model.get(model._meta.label, 0)

    def begin_transaction(self) -> "RelationalTransaction":
        return RelationalTransaction(self)


class RelationalTransaction(Transaction):
    """Wraps ``transaction.atomic`` so the block can span several calls."""

    def __init__(self, storage: RelationalStorage):
        super().__init__()
        self._storage = storage
        self._atomic = transaction.atomic(using=storage.using)
        with _database_errors("start transaction"):
            self._atomic.__enter__()

    def find_one(self, kind: str, filter: Filter) -> Optional[Record]:
        return self._storage.find_one(kind, filter)

    def lock_one(self, kind: str, filter: Filter) -> Optional[Record]:
        with _database_errors(f"lock {kind}"):
            return self._storage._filtered(kind, filter, for_update=True).values().first()

    def insert(self, kind: str, record: Record) -> Any:
        return self._storage.insert(kind, record)

    def delete_one(self, kind: str, filter: Filter) -> int:
        with _database_errors(f"delete from {kind}"):
            return self._storage._delete_one(kind, filter)

    def delete_many(self, kind: str, filter: Filter) -> int:
        with _database_errors(f"delete from {kind}"):
            return self._storage._delete_many(kind, filter)

    def _commit(self) -> None:
        with _database_errors("commit transaction"):
            self._atomic.__exit__(None, None, None)

    def _rollback(self) -> None:
        with _database_errors("roll back transaction"):
            transaction.set_rollback(True, using=self._storage.using)
            self._atomic.__exit__(None, None, None)
