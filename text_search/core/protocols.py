"""
Protocol Definitions: Structural Interface for Counted Multisets

The ranking layer only depends on this protocol, so a differently backed
multiset (or one over another key type) can be dropped in later.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Hashable,
    Iterator,
    Protocol,
    TypeVar,
    runtime_checkable,
)

if TYPE_CHECKING:
    from text_search.core.types import Entry


K = TypeVar("K", bound=Hashable)


@runtime_checkable
class CountedSetProtocol(Protocol[K]):
    """
    Protocol for counted multiset implementations.

    Implementations:
        - CountedMultiset: dict-backed, any hashable key
        - CountedSet: CountedMultiset fixed to int64 posting keys
    """

    def __len__(self) -> int:
        """Number of distinct keys."""
        ...

    def is_empty(self) -> bool:
        ...

    def contains(self, key: K) -> bool:
        ...

    def get_count(self, key: K) -> int:
        """Count for key, 0 when absent."""
        ...

    def to_vec(self) -> Iterator[K]:
        """Distinct keys in descending-count order."""
        ...

    def items(self) -> list["Entry"]:
        ...

    def insert(self, key: K) -> int:
        ...

    def remove(self, key: K) -> int:
        ...

    def remove_all(self, key: K) -> bool:
        ...

    def clear(self) -> None:
        ...
