"""
text_search: Counted Multisets for Posting Aggregation

The aggregation primitive beneath a text-search pipeline. Integer keys are
document/posting identifiers, counts are occurrence weights; additive set
algebra combines per-term candidate sets and ranked extraction turns the
accumulated weights into a result ordering.

Usage:
    from text_search import CountedSet

    python_docs = CountedSet.from_keys([1, 1, 2, 4])
    search_docs = CountedSet.from_keys([1, 2, 2, 3])

    python_docs.intersect(search_docs)   # {1: 3, 2: 3}, weights summed
    ranked = list(python_docs.to_vec())  # keys by descending count
"""

from __future__ import annotations

__version__ = "0.1.0"

from text_search.core.types import Entry, PostingKey, RankedEntry, validate_key
from text_search.core.errors import (
    AllocationFault,
    Err,
    InvalidKeyFault,
    KeyTypeFault,
    Ok,
    Result,
    TextSearchError,
    TextSearchFault,
)
from text_search.core.config import CountedSetConfig
from text_search.collections.counted_set import CountedMultiset, CountedSet
from text_search.collections.aggregate import (
    combine_postings,
    intersect_all,
    subtract_all,
    top_k,
    union_all,
)

__all__ = [
    # Version
    "__version__",
    # Core types
    "Entry",
    "PostingKey",
    "RankedEntry",
    "validate_key",
    # Error handling
    "AllocationFault",
    "Err",
    "InvalidKeyFault",
    "KeyTypeFault",
    "Ok",
    "Result",
    "TextSearchError",
    "TextSearchFault",
    # Config
    "CountedSetConfig",
    # Collections
    "CountedMultiset",
    "CountedSet",
    "combine_postings",
    "intersect_all",
    "subtract_all",
    "top_k",
    "union_all",
]
