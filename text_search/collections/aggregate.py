"""
Posting Aggregation: Combining Per-Term Multisets into a Ranked Candidate Set

The query layer holds one CountedSet per query term. These helpers fold
them together without mutating any input:

    - union_all:        OR of terms, weights added
    - intersect_all:    AND of terms, weights added over matching terms
    - subtract_all:     weight subtraction
    - combine_postings: must / should / must_not boolean combination
    - top_k:            highest-weight candidates

Complexity:
    - union_all / intersect_all: O(total keys across operands)
    - top_k: O(n log k) via heapq.nsmallest
"""

from __future__ import annotations

import heapq
from typing import List, Optional, Sequence

from text_search.collections.counted_set import CountedMultiset, CountedSet
from text_search.core.types import RankedEntry
from text_search.observability.logging import StructuredLogger


logger = StructuredLogger(__name__)


def _seed(sets: Sequence[CountedMultiset]) -> Optional[CountedMultiset]:
    return sets[0].clone() if sets else None


def union_all(sets: Sequence[CountedMultiset]) -> CountedMultiset:
    """
    Additive union of every operand.

    Returns:
        New multiset (empty CountedSet for no operands)
    """
    result = _seed(sets)
    if result is None:
        return CountedSet()
    for other in sets[1:]:
        result.union(other)
    return result


def intersect_all(sets: Sequence[CountedMultiset]) -> CountedMultiset:
    """
    Keys present in every operand, with the sum of all their counts.

    Returns:
        New multiset (empty CountedSet for no operands)
    """
    result = _seed(sets)
    if result is None:
        return CountedSet()
    for other in sets[1:]:
        if result.is_empty():
            break
        result.intersect(other)
    return result


def subtract_all(
    base: CountedMultiset,
    sets: Sequence[CountedMultiset],
) -> CountedMultiset:
    """Clone of ``base`` with each operand's counts subtracted in turn."""
    result = base.clone()
    for other in sets:
        result.minus(other)
    return result


def combine_postings(
    must: Sequence[CountedMultiset] = (),
    should: Sequence[CountedMultiset] = (),
    must_not: Sequence[CountedMultiset] = (),
) -> CountedMultiset:
    """
    Boolean combination of per-term posting multisets.

    Algorithm:
        1. With ``must`` terms: candidates = intersect_all(must), and
           ``should`` terms only add weight to candidates already matched.
           Without them: candidates = union_all(should).
        2. Every key appearing in any ``must_not`` operand is removed
           outright, whatever its weight.

    Returns:
        New multiset of candidates; inputs are untouched
    """
    if must:
        result = intersect_all(must)
        if should and not result.is_empty():
            boost = union_all(should)
            result.union(type(result).from_counts(
                {key: boost.get_count(key) for key in result.keys()},
                config=result.config,
            ))
    else:
        result = union_all(should)

    # must_not keys outside the result's key domain match nothing
    excluded = 0
    if must_not:
        blocked = set()
        for other in must_not:
            blocked.update(other.keys())
        for key in result.keys():
            if key in blocked:
                result.remove_all(key)
                excluded += 1

    logger.debug(
        "Combined postings",
        must=len(must),
        should=len(should),
        must_not=len(must_not),
        candidates=len(result),
        excluded=excluded,
    )
    return result


def top_k(counted_set: CountedMultiset, k: int) -> List[RankedEntry]:
    """
    The ``k`` highest-count entries, best first.

    Unlike to_vec(), equal counts are ordered by ascending key so the
    result is deterministic.
    """
    if k <= 0:
        return []
    best = heapq.nsmallest(
        k,
        counted_set.items(),
        key=lambda entry: (-entry.count, entry.key),
    )
    return [
        RankedEntry(key=entry.key, count=entry.count, rank=rank)
        for rank, entry in enumerate(best)
    ]
