"""
Counted Multiset: Weighted Posting Aggregation

A mutable bag that tracks, per key, how many times it has been inserted.
It is the accumulator beneath query evaluation: one multiset per query term
(keys = document ids, counts = occurrence weight), combined with additive
set algebra and turned into a result ordering by ranked extraction.

Multiplicity semantics (deliberately NOT textbook multiset algebra):
    - union:     self[k] + other[k] for every key of other
    - intersect: self[k] + other[k] for keys in both; other self keys dropped
    - minus:     self[k] - other[k] for keys in both; dropped when <= 0

Invariants (hold after every public call):
    - every stored count is >= 1; an absent key means count 0
    - len() is the number of DISTINCT keys, not the total weight
    - clones share nothing with their source

Storage:
    - dict[K, int]; amortised O(1) per key
    - set algebra stages its changes before touching self, so a MemoryError
      part-way through never leaves a zero or negative count behind

Thread Safety:
    - None. Wrap an instance in a lock or clone() per thread.
"""

from __future__ import annotations

from typing import (
    Any,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    TypeVar,
)

import numpy as np

from text_search.core.config import DEFAULT_CONFIG, CountedSetConfig
from text_search.core.errors import (
    AllocationFault,
    Err,
    KeyDomainError,
    Ok,
    OperandError,
    ResourceError,
    Result,
    raise_for,
)
from text_search.core.types import (
    KEY_DTYPE,
    Entry,
    PostingKey,
    RankedEntry,
    coerce_key,
    validate_key,
)
from text_search.observability.logging import LogLevel, StructuredLogger


logger = StructuredLogger(__name__)

K = TypeVar("K", bound=Hashable)

# Largest count the numpy ranking path can hold
_MAX_ARRAY_COUNT = int(np.iinfo(np.int64).max)


# =============================================================================
# GENERIC COUNTED MULTISET
# =============================================================================
class CountedMultiset(Generic[K]):
    """
    Counted multiset over any hashable key type.

    CountedSet fixes the key type to int64 posting keys; this class holds
    the storage and the algebra so the key type stays a parameter.

    Example:
        >>> bag = CountedMultiset()
        >>> bag.insert("a"), bag.insert("a")
        (1, 2)
        >>> bag.get_count("b")
        0
    """

    __slots__ = ("_counts", "_config")

    def __init__(self, config: Optional[CountedSetConfig] = None) -> None:
        self._config = (config or DEFAULT_CONFIG).ensure_valid()
        self._counts: Dict[K, int] = {}

    @classmethod
    def new(cls, config: Optional[CountedSetConfig] = None):
        """Empty multiset."""
        return cls(config)

    @classmethod
    def from_keys(
        cls,
        keys: Iterable[K],
        config: Optional[CountedSetConfig] = None,
    ):
        """Multiset holding one occurrence per element of ``keys``."""
        result = cls(config)
        result.insert_many(keys)
        return result

    @classmethod
    def from_counts(
        cls,
        counts: Mapping[K, int],
        config: Optional[CountedSetConfig] = None,
    ):
        """
        Multiset with the given per-key counts.

        Counts <= 0 are skipped rather than stored.

        Raises:
            TypeError: If a count is not an integer
        """
        result = cls(config)
        for key, count in counts.items():
            if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
                raise TypeError(
                    f"Count for {key!r} must be an integer, got {type(count).__name__}"
                )
            if count > 0:
                result._counts[result._key(key)] = int(count)
        return result

    @property
    def config(self) -> CountedSetConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Key handling
    # -------------------------------------------------------------------------
    def _key(self, key: Any) -> K:
        """Normalise a caller-supplied key. Identity for generic keys."""
        return key

    def _admits(self, other: "CountedMultiset[Any]") -> bool:
        """True if every key of ``other`` is already valid for self."""
        return True

    def _operand(self, operation: str, other: Any) -> Dict[K, int]:
        """
        Read-only view of other's counts.

        A snapshot is taken when other is self so the algebra sees the
        pre-call state.
        """
        if not isinstance(other, CountedMultiset):
            raise_for(OperandError.invalid_type(operation, other))
        if other is self:
            return dict(self._counts)
        return other._counts

    def _out_of_memory(self, operation: str) -> AllocationFault:
        error = ResourceError.allocation_failed(operation, len(self._counts))
        logger.critical(
            error.message,
            error_code=error.code.name,
            **error.details,
        )
        return AllocationFault(error)

    def _log_operation(self, operation: str, before: int, operand: int) -> None:
        if self._config.log_operations and logger.is_enabled_for(LogLevel.DEBUG):
            logger.debug(
                f"{operation}: {before} -> {len(self._counts)} keys",
                operation=operation,
                keys_before=before,
                keys_after=len(self._counts),
                operand_keys=operand,
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._counts)

    def is_empty(self) -> bool:
        return not self._counts

    def contains(self, key: K) -> bool:
        return self.get_count(key) > 0

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def get_count(self, key: K) -> int:
        """Count for ``key``; 0 when absent."""
        return self._counts.get(self._key(key), 0)

    def total_count(self) -> int:
        """Sum of all counts (total weight)."""
        return sum(self._counts.values())

    def to_vec(self) -> Iterator[K]:
        """
        Snapshot iterator of every distinct key by descending count.

        Equal counts come out in no particular order. The iterator is not
        affected by later mutation and cannot be restarted.
        """
        counts = self._counts
        return iter(sorted(counts, key=counts.__getitem__, reverse=True))

    def ranked_entries(self) -> List[RankedEntry]:
        """to_vec() with counts and 0-based ranks attached."""
        counts = self._counts
        return [
            RankedEntry(key=key, count=counts[key], rank=rank)
            for rank, key in enumerate(self.to_vec())
        ]

    def check_invariants(self) -> Result[int, ResourceError]:
        """Ok(len) if every stored count is positive, else Err for the first bad key."""
        for key, count in self._counts.items():
            if count < 1:
                return Err(ResourceError.invariant_violated(key, count))
        return Ok(len(self._counts))

    def items(self) -> List[Entry]:
        """Unordered snapshot of all entries."""
        return [Entry(key=key, count=count) for key, count in self._counts.items()]

    def keys(self) -> List[K]:
        return list(self._counts)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._counts))

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------
    def insert(self, key: K) -> int:
        """Add one occurrence of ``key``; returns the new count."""
        key = self._key(key)
        count = self._counts.get(key, 0) + 1
        try:
            self._counts[key] = count
        except MemoryError as exc:
            raise self._out_of_memory("insert") from exc
        return count

    def insert_many(self, keys: Iterable[K]) -> int:
        """Insert every element of ``keys``; returns how many were inserted."""
        inserted = 0
        for key in keys:
            self.insert(key)
            inserted += 1
        return inserted

    def remove(self, key: K) -> int:
        """
        Remove one occurrence of ``key``.

        No-op for an absent key. The entry is deleted when its count
        reaches 0.

        Returns:
            The resulting count (0 if absent or just emptied)
        """
        key = self._key(key)
        count = self._counts.get(key, 0)
        if count <= 1:
            self._counts.pop(key, None)
            return 0
        self._counts[key] = count - 1
        return count - 1

    def remove_all(self, key: K) -> bool:
        """Delete ``key`` in one step whatever its count; True if it was present."""
        return self._counts.pop(self._key(key), None) is not None

    def clear(self) -> None:
        self._counts.clear()

    # -------------------------------------------------------------------------
    # Set algebra (self mutated, other read-only)
    # -------------------------------------------------------------------------
    def union(self, other: "CountedMultiset[K]") -> "CountedMultiset[K]":
        """
        Add other's count for each of its keys into self.

        Keys only in self are untouched; keys only in other are created.
        """
        other_counts = self._operand("union", other)
        before = len(self._counts)
        counts = self._counts
        check = not self._admits(other)
        try:
            staged = {}
            for key, count in other_counts.items():
                if check:
                    key = self._key(key)
                staged[key] = counts.get(key, 0) + count
            counts.update(staged)
        except MemoryError as exc:
            raise self._out_of_memory("union") from exc
        self._log_operation("union", before, len(other_counts))
        return self

    def intersect(self, other: "CountedMultiset[K]") -> "CountedMultiset[K]":
        """
        Keep only keys also in other, each with self + other counts.

        The counts are summed, not minimised: this accumulates weight from
        every query term a document matched.
        """
        other_counts = self._operand("intersect", other)
        before = len(self._counts)
        try:
            retained = {
                key: count + other_counts[key]
                for key, count in self._counts.items()
                if key in other_counts
            }
        except MemoryError as exc:
            raise self._out_of_memory("intersect") from exc
        self._counts = retained
        self._log_operation("intersect", before, len(other_counts))
        return self

    def minus(self, other: "CountedMultiset[K]") -> "CountedMultiset[K]":
        """
        Subtract other's count from each shared key.

        Keys whose count drops to 0 or below are deleted.
        """
        other_counts = self._operand("minus", other)
        before = len(self._counts)
        counts = self._counts
        try:
            changes = [
                (key, count - other_counts[key])
                for key, count in counts.items()
                if key in other_counts
            ]
        except MemoryError as exc:
            raise self._out_of_memory("minus") from exc
        for key, remaining in changes:
            if remaining > 0:
                counts[key] = remaining
            else:
                del counts[key]
        self._log_operation("minus", before, len(other_counts))
        return self

    # -------------------------------------------------------------------------
    # Copy & comparison
    # -------------------------------------------------------------------------
    def clone(self):
        """Independent copy; mutating either side never affects the other."""
        cls = type(self)
        copy = cls.__new__(cls)
        copy._config = self._config
        try:
            copy._counts = dict(self._counts)
        except MemoryError as exc:
            raise self._out_of_memory("clone") from exc
        return copy

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo: dict):
        return self.clone()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CountedMultiset):
            return NotImplemented
        return self._counts == other._counts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = ", ".join(f"{key!r}: {count}" for key, count in self._counts.items())
        return f"{type(self).__name__}({{{entries}}})"


# =============================================================================
# INT64 POSTING KEY SPECIALISATION
# =============================================================================
class CountedSet(CountedMultiset[PostingKey]):
    """
    Counted multiset of signed 64-bit posting keys.

    Keys are validated against the configured signed range (int64 by
    default); numpy integer scalars are accepted and stored as int.

    Example:
        >>> docs = CountedSet.from_keys([1, 1, 2, 2, 2, 4])
        >>> list(docs.to_vec())
        [2, 1, 4]
        >>> len(docs), docs.total_count()
        (3, 6)
    """

    __slots__ = ()

    def _key(self, key: Any) -> PostingKey:
        config = self._config
        if config.validate_keys:
            result = validate_key(key, config.key_bits)
        else:
            result = coerce_key(key)
        if result.is_err():
            raise_for(result.error)
        return result.unwrap()

    def _admits(self, other: CountedMultiset[Any]) -> bool:
        if not isinstance(other, CountedSet):
            return False
        if not self._config.validate_keys:
            return True
        return (
            other._config.validate_keys
            and other._config.key_bits <= self._config.key_bits
        )

    def insert_many(self, keys: Iterable[PostingKey]) -> int:
        """
        Insert every key; integer numpy arrays are counted in one pass.

        Object arrays are inserted element by element like any other
        iterable.

        Returns:
            Number of keys inserted (with multiplicity)
        """
        if not isinstance(keys, np.ndarray):
            return super().insert_many(keys)
        if keys.dtype == object:
            return super().insert_many(keys.ravel().tolist())
        if keys.dtype.kind not in "iu" and keys.size:
            raise_for(KeyDomainError.invalid_type(keys.flat[0]))
        flat = keys.ravel()
        if flat.size == 0:
            return 0
        unique, counts = np.unique(flat, return_counts=True)
        # unique is sorted, so checking the ends covers every key
        self._key(unique[0])
        self._key(unique[-1])
        stored = self._counts
        try:
            for key, count in zip(unique.tolist(), counts.tolist()):
                stored[key] = stored.get(key, 0) + count
        except MemoryError as exc:
            raise self._out_of_memory("insert_many") from exc
        return int(flat.size)

    def to_array(self) -> np.ndarray:
        """
        Keys in descending-count order.

        The array is int64, except with ``validate_keys=False``: keys are
        then unchecked Python ints and come back in an object array.
        """
        size = len(self._counts)
        if size == 0:
            return np.empty(0, dtype=KEY_DTYPE)
        if not self._config.validate_keys:
            return np.fromiter(self.to_vec(), dtype=object, count=size)
        if max(self._counts.values()) > _MAX_ARRAY_COUNT:
            # counts past int64 cannot be loaded into a numpy array
            return np.fromiter(super().to_vec(), dtype=KEY_DTYPE, count=size)
        keys = np.fromiter(self._counts.keys(), dtype=KEY_DTYPE, count=size)
        counts = np.fromiter(self._counts.values(), dtype=np.int64, count=size)
        return keys[np.argsort(-counts, kind="stable")]

    def to_vec(self) -> Iterator[PostingKey]:
        if not self._config.validate_keys:
            return super().to_vec()
        return iter(self.to_array().tolist())
