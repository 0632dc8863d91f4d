from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base import ADMIN_USERS, BOOKINGS, EMPLOYEES, KINDS, PAYMENTS, Storage, Transaction, key_field

__all__ = [
    "ADMIN_USERS",
    "BOOKINGS",
    "EMPLOYEES",
    "KINDS",
    "PAYMENTS",
    "Storage",
    "Transaction",
    "build_storage",
    "key_field",
]


def build_storage(backend: str | None = None) -> Storage:
    """Construct the storage adapter selected by ``STORAGE_BACKEND``."""

    backend = backend or settings.STORAGE_BACKEND
    if backend == "relational":
        from .relational import RelationalStorage

        return RelationalStorage()
    if backend == "document":
        from .document import MongoStorage

        storage = MongoStorage.from_uri(
            settings.MONGO_URI,
            settings.MONGO_DB_NAME,
            timeout_ms=settings.MONGO_TIMEOUT_MS,
        )
        storage.ensure_indexes()
        return storage
    raise ImproperlyConfigured(f"Unknown STORAGE_BACKEND {backend!r}; use 'relational' or 'document'.")
