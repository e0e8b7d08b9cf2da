"""
Collections Module: Counted Multisets and Posting Aggregation

Provides:
    - CountedMultiset: generic counted multiset (any hashable key)
    - CountedSet: counted multiset of int64 posting keys
    - union_all / intersect_all / subtract_all / combine_postings / top_k
"""

from text_search.collections.counted_set import CountedMultiset, CountedSet
from text_search.collections.aggregate import (
    combine_postings,
    intersect_all,
    subtract_all,
    top_k,
    union_all,
)

__all__ = [
    "CountedMultiset",
    "CountedSet",
    "combine_postings",
    "intersect_all",
    "subtract_all",
    "top_k",
    "union_all",
]
