"""Atomic removal of an owner record together with the records that reference it."""

from __future__ import annotations

import logging
from typing import Dict, Sequence, Tuple

from core.errors import NotFound
from core.storage import Storage
from core.storage.base import Filter, Record, Transaction

logger = logging.getLogger(__name__)


def delete_with_dependents(
    storage: Storage,
    owner_kind: str,
    owner_filter: Filter,
    dependents: Sequence[Tuple[str, str]],
    *,
    not_found_message: str = "Not found",
) -> Tuple[Record, Dict[str, int]]:
    """
    Delete the owner matched by ``owner_filter`` and every record whose
    back-reference field points at it, all in one transaction.

    ``dependents`` lists ``(kind, reference_field)`` pairs. Dependents are
    removed before the owner; if any step fails the transaction is rolled back
    and nothing is deleted. Returns the deleted owner and per-kind counts.
    """

    owner = storage.find_one(owner_kind, owner_filter)
    if owner is None:
        raise NotFound(not_found_message)

    def remove(tx: Transaction) -> Dict[str, int]:
        removed = {kind: tx.delete_many(kind, {reference_field: owner["id"]}) for kind, reference_field in dependents}
        if tx.delete_one(owner_kind, {"id": owner["id"]}) == 0:
            # Deleted by someone else between the lookup and the transaction.
            raise NotFound(not_found_message)
        return removed

    removed = storage.run_in_transaction(remove)

    logger.info("Deleted %s %s with dependents %s", owner_kind, owner["id"], removed)
    return owner, removed
