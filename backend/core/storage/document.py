from __future__ import annotations

import logging
from contextlib import contextmanager, nullcontext
from typing import Any, Callable, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from core.errors import StorageError, UniqueConstraintViolation

from .base import (
    ADMIN_USERS,
    BOOKINGS,
    EMPLOYEES,
    PAYMENTS,
    Filter,
    Record,
    Storage,
    T,
    Transaction,
    key_field,
    split_lookup,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    BOOKINGS: "bookings",
    EMPLOYEES: "employees",
    PAYMENTS: "payments",
    ADMIN_USERS: "admin_users",
}

# Fields holding ObjectIds; they are exposed to callers as hex strings.
OBJECT_ID_FIELDS = {
    BOOKINGS: set(),
    EMPLOYEES: {"id"},
    PAYMENTS: {"id", "employee_id"},
    ADMIN_USERS: {"id"},
}

INDEXES = {
    BOOKINGS: [("booking_id", True), ("phone", False), ("event_date", False)],
    EMPLOYEES: [("username", True)],
    ADMIN_USERS: [("username", True)],
    PAYMENTS: [("employee_id", False), ("date", False)],
}

# Counter bumped by lock_one; never returned to callers.
LOCK_FIELD = "_lock"

TRANSIENT_TRANSACTION_ERROR = "TransientTransactionError"


class _NoMatch(Exception):
    """A filter value can never match a stored document (e.g. a malformed ObjectId)."""


@contextmanager
def _driver_errors(action: str, session=None):
    try:
        yield
    except DuplicateKeyError as exc:
        raise UniqueConstraintViolation(details=str(exc)) from exc
    except PyMongoError as exc:
        if session is not None and exc.has_error_label(TRANSIENT_TRANSACTION_ERROR):
            # Left to the enclosing transaction, which may retry it.
            raise
        logger.exception("MongoDB error while trying to %s", action)
        raise StorageError(f"Failed to {action}", details=str(exc)) from exc


def _object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise _NoMatch(value) from None


def _mongo_field(name: str) -> str:
    return "_id" if name == "id" else name


class MongoStorage(Storage):
    """Storage adapter over a MongoDB replica set (transactions need one)."""

    def __init__(self, client: MongoClient, db_name: str):
        self.client = client
        self.db = client[db_name]

    @classmethod
    def from_uri(cls, uri: str, db_name: str, *, timeout_ms: int = 30000) -> "MongoStorage":
        logger.info("Connecting to MongoDB database %s", db_name)
        client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        return cls(client, db_name)

    def collection(self, kind: str):
        try:
            return self.db[COLLECTIONS[kind]]
        except KeyError:
            raise ValueError(f"Unknown record kind: {kind}") from None

    def ensure_indexes(self) -> None:
        """Create the lookup and uniqueness indexes; failures are logged, not raised."""
        for kind, indexes in INDEXES.items():
            collection = self.collection(kind)
            for field, unique in indexes:
                try:
                    collection.create_index([(field, ASCENDING)], unique=unique)
                except PyMongoError as exc:
                    logger.warning("Failed to create index %s.%s: %s", kind, field, exc)
        logger.info("MongoDB indexes ensured")

    def close(self) -> None:
        self.client.close()

    def build_query(self, kind: str, filter: Filter) -> dict:
        """Translate a storage filter into a Mongo query; raises ``_NoMatch``."""
        object_ids = OBJECT_ID_FIELDS[kind]
        query: dict = {}
        for name, value in filter.items():
            field, operator = split_lookup(name)
            if field in object_ids:
                value = _object_id(value)
            target = _mongo_field(field)
            if operator is None:
                query[target] = value
            else:
                query.setdefault(target, {})[f"${operator}"] = value
        return query

    def to_document(self, kind: str, record: Record) -> dict:
        object_ids = OBJECT_ID_FIELDS[kind]
        document = {}
        for field, value in record.items():
            if field in object_ids and value is not None:
                try:
                    value = _object_id(value)
                except _NoMatch:
                    raise StorageError(f"Invalid document id for {field}", details=str(value)) from None
            document[_mongo_field(field)] = value
        return document

    def to_record(self, kind: str, document: Optional[dict]) -> Optional[Record]:
        if document is None:
            return None
        record = dict(document)
        object_id = record.pop("_id", None)
        record.pop(LOCK_FIELD, None)
        if kind != BOOKINGS:
            record["id"] = str(object_id)
        for field in OBJECT_ID_FIELDS[kind] - {"id"}:
            if isinstance(record.get(field), ObjectId):
                record[field] = str(record[field])
        return record

    def _sort(self, order_by: Iterable[str]):
        sort = []
        for field in order_by:
            direction = DESCENDING if field.startswith("-") else ASCENDING
            sort.append((_mongo_field(field.lstrip("-")), direction))
        return sort

    def exists_by_id(self, kind: str, identifier: Any) -> bool:
        return self._count(kind, {key_field(kind): identifier}, limit=1) > 0

    def insert(self, kind: str, record: Record, *, session=None) -> Any:
        document = self.to_document(kind, record)
        with _driver_errors(f"insert into {kind}", session):
            result = self.collection(kind).insert_one(document, session=session)
        if kind == BOOKINGS:
            return document["booking_id"]
        return str(result.inserted_id)

    def find_one(self, kind: str, filter: Filter, *, session=None) -> Optional[Record]:
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return None
        with _driver_errors(f"read {kind}", session):
            document = self.collection(kind).find_one(query, session=session)
        return self.to_record(kind, document)

    def find_many(self, kind: str, filter: Filter, order_by: Iterable[str] = ()) -> List[Record]:
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return []
        with _driver_errors(f"read {kind}"):
            cursor = self.collection(kind).find(query)
            sort = self._sort(order_by)
            if sort:
                cursor = cursor.sort(sort)
            return [self.to_record(kind, document) for document in cursor]

    def count(self, kind: str, filter: Filter) -> int:
        return self._count(kind, filter)

    def _count(self, kind: str, filter: Filter, **kwargs) -> int:
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return 0
        with _driver_errors(f"count {kind}"):
            return self.collection(kind).count_documents(query, **kwargs)

    def update_one(self, kind: str, filter: Filter, changes: Record) -> int:
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return 0
        with _driver_errors(f"update {kind}"):
            result = self.collection(kind).update_one(query, {"$set": self.to_document(kind, changes)})
        return result.matched_count

    def delete_one(self, kind: str, filter: Filter, *, session=None) -> int:
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return 0
        with _driver_errors(f"delete from {kind}", session):
            return self.collection(kind).delete_one(query, session=session).deleted_count

    def delete_many(self, kind: str, filter: Filter, *, session=None) -> int:
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return 0
        with _driver_errors(f"delete from {kind}", session):
            return self.collection(kind).delete_many(query, session=session).deleted_count

    def lock_one(self, kind: str, filter: Filter, *, session) -> Optional[Record]:
        # Writing to the document makes a concurrent transaction that deletes
        # or locks it fail with a write conflict.
        try:
            query = self.build_query(kind, filter)
        except _NoMatch:
            return None
        with _driver_errors(f"lock {kind}", session):
            document = self.collection(kind).find_one_and_update(
                query,
                {"$inc": {LOCK_FIELD: 1}},
                session=session,
                return_document=ReturnDocument.AFTER,
            )
        return self.to_record(kind, document)

    def begin_transaction(self) -> "MongoTransaction":
        return MongoTransaction(self)

    def run_in_transaction(self, callback: Callable[[Transaction], T]) -> T:
        """
        Run ``callback`` through ``ClientSession.with_transaction``.

        The driver retries the whole callback on ``TransientTransactionError``
        (e.g. a write conflict with a concurrent ``lock_one``) and retries the
        commit on ``UnknownTransactionCommitResult``.
        """
        with _driver_errors("start session"):
            session = self.client.start_session()
        try:
            with _driver_errors("run transaction"):
                return session.with_transaction(
                    lambda s: callback(MongoTransaction(self, session=s)),
                    read_concern=ReadConcern("majority"),
                    write_concern=WriteConcern("majority"),
                )
        finally:
            session.end_session()


class MongoTransaction(Transaction):
    """
    Operations bound to one client session.

    Created by ``begin_transaction`` it owns the session and the commit or
    abort. Created with ``session=`` (inside ``run_in_transaction``) the
    driver owns both, and transient errors are left for the driver to retry.
    """

    def __init__(self, storage: MongoStorage, *, session=None):
        super().__init__()
        self._storage = storage
        self._managed = session is not None
        if self._managed:
            self._session = session
            return
        with _driver_errors("start session"):
            self._session = storage.client.start_session()
        try:
            with _driver_errors("start transaction"):
                self._session.start_transaction(
                    read_concern=ReadConcern("majority"),
                    write_concern=WriteConcern("majority"),
                )
        except StorageError:
            self._session.end_session()
            raise

    def _errors(self, action: str):
        return nullcontext() if self._managed else _driver_errors(action)

    def find_one(self, kind: str, filter: Filter) -> Optional[Record]:
        with self._errors(f"read {kind}"):
            return self._storage.find_one(kind, filter, session=self._session)

    def lock_one(self, kind: str, filter: Filter) -> Optional[Record]:
        with self._errors(f"lock {kind}"):
            return self._storage.lock_one(kind, filter, session=self._session)

    def insert(self, kind: str, record: Record) -> Any:
        with self._errors(f"insert into {kind}"):
            return self._storage.insert(kind, record, session=self._session)

    def delete_one(self, kind: str, filter: Filter) -> int:
        with self._errors(f"delete from {kind}"):
            return self._storage.delete_one(kind, filter, session=self._session)

    def delete_many(self, kind: str, filter: Filter) -> int:
        with self._errors(f"delete from {kind}"):
            return self._storage.delete_many(kind, filter, session=self._session)

    def _commit(self) -> None:
        if self._managed:
            raise RuntimeError("Commit is handled by the session's with_transaction")
        try:
            with _driver_errors("commit transaction"):
                self._session.commit_transaction()
        finally:
            self._session.end_session()

    def _rollback(self) -> None:
        if self._managed:
            raise RuntimeError("Abort is handled by the session's with_transaction")
        try:
            with _driver_errors("abort transaction"):
                self._session.abort_transaction()
        finally:
            self._session.end_session()
