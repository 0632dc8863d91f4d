from datetime import datetime, timezone as dt_timezone
from unittest import mock

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from core.errors import StorageError, UniqueConstraintViolation
from core.storage import BOOKINGS, EMPLOYEES, PAYMENTS
from core.storage.document import LOCK_FIELD, MongoStorage

from .mongo_sessions import follow_transaction_contract, labelled_failure


@pytest.fixture
def client():
    return mock.MagicMock(name="MongoClient")


@pytest.fixture
def storage(client):
    return MongoStorage(client, "booking")


@pytest.fixture
def collection(storage):
    return storage.collection(EMPLOYEES)


def test_id_filters_become_object_ids(storage):
    oid = ObjectId()

    query = storage.build_query(PAYMENTS, {"id": str(oid), "employee_id": str(oid)})

    assert query == {"_id": oid, "employee_id": oid}


def test_range_suffixes_become_operators(storage):
    cutoff = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)

    query = storage.build_query(BOOKINGS, {"event_date__lt": cutoff, "phone": "1"})

    assert query == {"event_date": {"$lt": cutoff}, "phone": "1"}


def test_malformed_object_id_never_reaches_the_driver(storage, collection):
    assert storage.find_one(EMPLOYEES, {"id": "not-an-id"}) is None
    assert storage.delete_one(EMPLOYEES, {"id": "not-an-id"}) == 0
    assert storage.find_many(EMPLOYEES, {"id": "nope"}) == []
    collection.find_one.assert_not_called()
    collection.delete_one.assert_not_called()


def test_documents_come_back_with_string_ids(storage, collection):
    oid = ObjectId()
    collection.find_one.return_value = {"_id": oid, "username": "ravi"}

    record = storage.find_one(EMPLOYEES, {"username": "ravi"})

    assert record == {"id": str(oid), "username": "ravi"}
    collection.find_one.assert_called_once_with({"username": "ravi"}, session=None)


def test_bookings_drop_the_internal_id(storage):
    record = storage.to_record(BOOKINGS, {"_id": ObjectId(), "booking_id": "AB12CD"})

    assert record == {"booking_id": "AB12CD"}


def test_insert_returns_hex_id(storage, collection):
    oid = ObjectId()
    collection.insert_one.return_value = mock.Mock(inserted_id=oid)

    assert storage.insert(EMPLOYEES, {"username": "ravi"}) == str(oid)


def test_insert_booking_returns_booking_id(storage):
    assert storage.insert(BOOKINGS, {"booking_id": "AB12CD"}) == "AB12CD"


def test_duplicate_key_is_a_unique_violation(storage, collection):
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key", code=11000)

    with pytest.raises(UniqueConstraintViolation):
        storage.insert(EMPLOYEES, {"username": "ravi"})


def test_driver_errors_become_storage_errors(storage, collection):
    collection.count_documents.side_effect = PyMongoError("connection refused")

    with pytest.raises(StorageError) as excinfo:
        storage.count(EMPLOYEES, {})

    assert "connection refused" in excinfo.value.details


def test_exists_by_id_uses_booking_key(storage):
    bookings = storage.collection(BOOKINGS)
    bookings.count_documents.return_value = 1

    assert storage.exists_by_id(BOOKINGS, "AB12CD")
    bookings.count_documents.assert_called_once_with({"booking_id": "AB12CD"}, limit=1)


def test_find_many_applies_sort(storage, collection):
    cursor = collection.find.return_value
    cursor.sort.return_value = [{"_id": ObjectId(), "username": "ravi"}]

    records = storage.find_many(EMPLOYEES, {}, order_by=["-created_at"])

    cursor.sort.assert_called_once_with([("created_at", DESCENDING)])
    assert records[0]["username"] == "ravi"


def test_lock_one_writes_to_the_document(storage, collection):
    session = mock.Mock()
    collection.find_one_and_update.return_value = {"_id": ObjectId(), "username": "ravi"}

    record = storage.lock_one(EMPLOYEES, {"username": "ravi"}, session=session)

    assert record["username"] == "ravi"
    collection.find_one_and_update.assert_called_once_with(
        {"username": "ravi"},
        {"$inc": {LOCK_FIELD: 1}},
        session=session,
        return_document=ReturnDocument.AFTER,
    )


def test_transaction_commits_and_ends_session(storage, client):
    session = client.start_session.return_value

    with storage.begin_transaction() as tx:
        tx.delete_many(PAYMENTS, {"employee_id": str(ObjectId())})

    session.start_transaction.assert_called_once()
    session.commit_transaction.assert_called_once_with()
    session.abort_transaction.assert_not_called()
    session.end_session.assert_called_once_with()


def test_transaction_aborts_when_block_raises(storage, client):
    session = client.start_session.return_value

    with pytest.raises(RuntimeError):
        with storage.begin_transaction():
            raise RuntimeError("boom")

    session.abort_transaction.assert_called_once_with()
    session.commit_transaction.assert_not_called()
    session.end_session.assert_called_once_with()


def test_failed_commit_still_ends_session(storage, client):
    session = client.start_session.return_value
    session.commit_transaction.side_effect = PyMongoError("write conflict")

    with pytest.raises(StorageError):
        with storage.begin_transaction():
            pass

    session.end_session.assert_called_once_with()


def test_lock_counter_is_hidden_from_callers(storage):
    record = storage.to_record(EMPLOYEES, {"_id": ObjectId(), "username": "ravi", LOCK_FIELD: 3})

    assert LOCK_FIELD not in record


def test_run_in_transaction_delegates_to_the_driver(storage, client):
    session = follow_transaction_contract(client.start_session.return_value)

    result = storage.run_in_transaction(lambda tx: tx.delete_many(PAYMENTS, {}))

    assert result == storage.collection(PAYMENTS).delete_many.return_value.deleted_count
    _, kwargs = session.with_transaction.call_args
    assert kwargs["read_concern"].level == "majority"
    assert kwargs["write_concern"].document == {"w": "majority"}
    session.commit_transaction.assert_called_once_with()
    session.end_session.assert_called_once_with()


def test_transient_write_conflict_reruns_the_callback(storage, client, collection):
    session = follow_transaction_contract(client.start_session.return_value)
    collection.delete_many.side_effect = [
        labelled_failure("WriteConflict", "TransientTransactionError"),
        mock.Mock(deleted_count=2),
    ]

    assert storage.run_in_transaction(lambda tx: tx.delete_many(PAYMENTS, {})) == 2

    assert collection.delete_many.call_count == 2
    session.abort_transaction.assert_called_once_with()
    session.commit_transaction.assert_called_once_with()


def test_transient_commit_failure_is_retried(storage, client):
    session = follow_transaction_contract(client.start_session.return_value)
    session.commit_transaction.side_effect = [
        labelled_failure("WriteConflict", "TransientTransactionError"),
        None,
    ]
    calls = []

    storage.run_in_transaction(calls.append)

    assert len(calls) == 2
    assert session.commit_transaction.call_count == 2


def test_non_transient_error_inside_callback_is_a_storage_error(storage, client, collection):
    session = follow_transaction_contract(client.start_session.return_value)
    collection.delete_many.side_effect = OperationFailure("not authorized", code=13)

    with pytest.raises(StorageError):
        storage.run_in_transaction(lambda tx: tx.delete_many(PAYMENTS, {}))

    session.abort_transaction.assert_called_once_with()
    session.end_session.assert_called_once_with()


def test_persistent_transient_error_surfaces_as_storage_error(storage, client):
    session = client.start_session.return_value
    session.with_transaction.side_effect = labelled_failure("WriteConflict", "TransientTransactionError")

    with pytest.raises(StorageError):
        storage.run_in_transaction(lambda tx: None)

    session.end_session.assert_called_once_with()


def test_operations_inside_transaction_carry_the_session(storage, client, collection):
    session = client.start_session.return_value

    with storage.begin_transaction() as tx:
        tx.insert(EMPLOYEES, {"username": "ravi"})

    assert collection.insert_one.call_args.kwargs["session"] is session


def test_close_releases_the_client(storage, client):
    storage.close()

    client.close.assert_called_once_with()


def test_ensure_indexes_logs_failures(storage, collection, caplog):
    collection.create_index.side_effect = PyMongoError("not authorized")

    storage.ensure_indexes()

    assert "Failed to create index" in caplog.text
