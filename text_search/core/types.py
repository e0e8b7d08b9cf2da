"""
Core Type Definitions: Posting Keys and Multiset Entries

Posting keys are signed 64-bit integers (document or posting identifiers).
Python ints are unbounded, so the key domain is enforced explicitly here.

Thread Safety:
    - Entry / RankedEntry are immutable (frozen=True) and safe to share
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, TypeAlias

import numpy as np

from text_search.core.errors import Err, KeyDomainError, Ok, Result


# =============================================================================
# KEY DOMAIN
# =============================================================================
PostingKey: TypeAlias = int

KEY_BITS: Final[int] = 64
INT64_MIN: Final[int] = -(1 << (KEY_BITS - 1))
INT64_MAX: Final[int] = (1 << (KEY_BITS - 1)) - 1

# numpy dtype used for array snapshots of keys
KEY_DTYPE: Final = np.int64


def key_bounds(bits: int = KEY_BITS) -> tuple[int, int]:
    """Inclusive (min, max) of a signed integer of ``bits`` width."""
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def coerce_key(key: Any) -> Result[int, KeyDomainError]:
    """
    Normalise ``key`` to a plain int without range checking.

    Accepts int and numpy integer scalars. bool is rejected even though it
    subclasses int: True is not a document id.
    """
    if isinstance(key, bool) or not isinstance(key, (int, np.integer)):
        return Err(KeyDomainError.invalid_type(key))
    return Ok(int(key))


def validate_key(key: Any, bits: int = KEY_BITS) -> Result[int, KeyDomainError]:
    """
    Coerce and range-check a posting key.

    Returns:
        Ok(int) inside the signed ``bits`` range, otherwise Err(KeyDomainError)
    """
    low, high = key_bounds(bits)

    def check_range(value: int) -> Result[int, KeyDomainError]:
        if value < low or value > high:
            return Err(KeyDomainError.out_of_range(value, low, high))
        return Ok(value)

    return coerce_key(key).flat_map(check_range)


# =============================================================================
# ENTRIES
# =============================================================================
@dataclass(frozen=True, slots=True)
class Entry:
    """
    One (key, count) pair of a counted multiset.

    Invariant: count >= 1. A key with count 0 is simply absent.
    """
    key: PostingKey
    count: int

    def to_tuple(self) -> tuple[PostingKey, int]:
        return (self.key, self.count)


@dataclass(frozen=True, slots=True)
class RankedEntry:
    """Entry plus its 0-based position in descending-count order."""
    key: PostingKey
    count: int
    rank: int

    def to_dict(self) -> dict[str, int]:
        return {"key": self.key, "count": self.count, "rank": self.rank}
