"""Short booking identifiers that customers can read aloud or type.

Identifiers are drawn from ``A-Z0-9`` using a cryptographically secure byte
source. Bytes at or above the largest multiple of the alphabet size that fits
in a byte (252 for 36 symbols) are rejected and redrawn, so every symbol is
exactly equally likely.
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Any, Dict, Optional, Protocol

from core.errors import IdentifierSpaceExhausted, RandomSourceUnavailable, UniqueConstraintViolation

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_LENGTH = 6
DEFAULT_ATTEMPTS = 5


class RandomSource(Protocol):
    def next_bytes(self, n: int) -> bytes: ...


class SecureRandomSource:
    """Byte source backed by the operating system CSPRNG."""

    def next_bytes(self, n: int) -> bytes:
        try:
            return secrets.token_bytes(n)
        except (OSError, NotImplementedError) as exc:
            raise RandomSourceUnavailable(details=str(exc)) from exc


def rejection_limit(alphabet_size: int) -> int:
    """Largest multiple of ``alphabet_size`` not exceeding 256."""
    if not 0 < alphabet_size <= 256:
        raise ValueError("Alphabet must contain between 1 and 256 symbols")
    return (256 // alphabet_size) * alphabet_size


def generate_identifier(
    length: int = DEFAULT_LENGTH,
    *,
    source: Optional[RandomSource] = None,
    alphabet: str = ALPHABET,
) -> str:
    if length < 1:
        raise ValueError("Identifier length must be positive")
    source = source or SecureRandomSource()
    size = len(alphabet)
    limit = rejection_limit(size)

    chars: list[str] = []
    while len(chars) < length:
        try:
            chunk = source.next_bytes(length - len(chars))
        except RandomSourceUnavailable:
            raise
        except Exception as exc:
            raise RandomSourceUnavailable(details=str(exc)) from exc
        if not chunk:
            raise RandomSourceUnavailable(details="Random source returned no bytes")

        for byte in chunk:
            if byte >= limit:
                continue
            chars.append(alphabet[byte % size])
            if len(chars) == length:
                break
    return "".join(chars)


def acquire_unique_identifier(
    storage,
    kind: str,
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    length: int = DEFAULT_LENGTH,
    source: Optional[RandomSource] = None,
) -> str:
    """
    Return an identifier that ``storage`` does not know for ``kind`` yet.

    The existence check and the later insert are separate round trips; callers
    that need a hard guarantee should use :func:`insert_with_unique_identifier`.
    """

    for attempt in range(1, attempts + 1):
        candidate = generate_identifier(length, source=source)
        if not storage.exists_by_id(kind, candidate):
            return candidate
        logger.info("Identifier %s already used for %s (attempt %d/%d)", candidate, kind, attempt, attempts)
    raise IdentifierSpaceExhausted(attempts=attempts)


def insert_with_unique_identifier(
    storage,
    kind: str,
    record: Dict[str, Any],
    *,
    field: str,
    attempts: int = DEFAULT_ATTEMPTS,
    length: int = DEFAULT_LENGTH,
    source: Optional[RandomSource] = None,
) -> Dict[str, Any]:
    """
    Allocate an identifier into ``record[field]`` and insert the record.

    A unique-constraint violation on insert counts as a collision, so a race
    between two requests drawing the same candidate costs one attempt instead
    of a duplicate. At most ``attempts`` candidates are generated in total.
    """

    for attempt in range(1, attempts + 1):
        candidate = generate_identifier(length, source=source)
        if storage.exists_by_id(kind, candidate):
            logger.info("Identifier %s already used for %s (attempt %d/%d)", candidate, kind, attempt, attempts)
            continue

        stored = {**record, field: candidate}
        try:
            storage.insert(kind, stored)
        except UniqueConstraintViolation:
            logger.warning("Identifier %s taken concurrently for %s (attempt %d/%d)", candidate, kind, attempt, attempts)
            continue
        return stored

    raise IdentifierSpaceExhausted(attempts=attempts)
