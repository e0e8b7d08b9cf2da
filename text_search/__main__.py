"""
text_search CLI Entrypoint

Commands:
    textsearch rank       Rank keys by how often they occur
    textsearch combine    Apply union / intersect / minus to two key lists
    textsearch benchmark  Time insertion and set algebra on random keys
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional, Sequence

import numpy as np


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entrypoint. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        prog="textsearch",
        description="Counted multisets for posting aggregation",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Minimum log level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # rank command
    rank_parser = subparsers.add_parser("rank", help="Rank keys by occurrence count")
    rank_parser.add_argument(
        "keys",
        type=int,
        nargs="+",
        help="Posting keys, repeated once per occurrence",
    )
    rank_parser.add_argument(
        "--top", "-k",
        type=int,
        default=None,
        help="Only print the K highest-count keys",
    )

    # combine command
    combine_parser = subparsers.add_parser("combine", help="Combine two key lists")
    combine_parser.add_argument(
        "--left",
        type=_parse_keys,
        required=True,
        help="Comma-separated keys of the left operand (mutated side)",
    )
    combine_parser.add_argument(
        "--right",
        type=_parse_keys,
        required=True,
        help="Comma-separated keys of the right operand",
    )
    combine_parser.add_argument(
        "--op",
        choices=["union", "intersect", "minus"],
        default="union",
        help="Set operation (default: union)",
    )

    # benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Run performance benchmarks")
    bench_parser.add_argument(
        "--keys",
        type=_positive_int,
        default=1_000_000,
        help="Number of key occurrences per operand",
    )
    bench_parser.add_argument(
        "--distinct",
        type=_positive_int,
        default=100_000,
        help="Size of the key universe",
    )
    bench_parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed",
    )

    args = parser.parse_args(argv)
    _configure_logging(args)

    if args.command == "rank":
        return _run_rank(args)
    if args.command == "combine":
        return _run_combine(args)
    if args.command == "benchmark":
        return _run_benchmark(args)

    parser.print_help()
    return 0


def _get_version() -> str:
    try:
        from text_search import __version__
        return __version__
    except ImportError:
        return "0.0.0-unknown"


def _parse_keys(raw: str) -> List[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid key list {raw!r}: {exc}") from exc


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _configure_logging(args: argparse.Namespace) -> None:
    from text_search.observability.logging import LogLevel, setup_logging
    setup_logging(LogLevel.parse(args.log_level), json_output=args.json_logs)


def _print_ranked(counted_set, top: Optional[int] = None) -> None:
    from text_search.collections.aggregate import top_k

    entries = counted_set.ranked_entries() if top is None else top_k(counted_set, top)
    for entry in entries:
        print(f"{entry.key}\t{entry.count}")


def _run_rank(args: argparse.Namespace) -> int:
    from text_search.collections.counted_set import CountedSet
    from text_search.core.errors import TextSearchFault

    try:
        counted = CountedSet.from_keys(args.keys)
    except TextSearchFault as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    _print_ranked(counted, args.top)
    return 0


def _run_combine(args: argparse.Namespace) -> int:
    from text_search.collections.counted_set import CountedSet
    from text_search.core.errors import TextSearchFault

    try:
        left = CountedSet.from_keys(args.left)
        right = CountedSet.from_keys(args.right)
    except TextSearchFault as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    getattr(left, args.op)(right)
    _print_ranked(left)
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from text_search.collections.counted_set import CountedSet

    print("Running text_search benchmarks...")
    print(f"  Keys:      {args.keys}")
    print(f"  Distinct:  {args.distinct}")
    print(f"  Seed:      {args.seed}")

    rng = np.random.default_rng(args.seed)
    left_keys = rng.integers(0, args.distinct, size=args.keys, dtype=np.int64)
    right_keys = rng.integers(0, args.distinct, size=args.keys, dtype=np.int64)

    timings = {}

    start = time.perf_counter()
    looped = CountedSet()
    for key in left_keys.tolist():
        looped.insert(key)
    timings["insert (loop)"] = time.perf_counter() - start

    start = time.perf_counter()
    left = CountedSet.from_keys(left_keys)
    right = CountedSet.from_keys(right_keys)
    timings["insert_many (numpy, x2)"] = time.perf_counter() - start

    for op in ("union", "intersect", "minus"):
        target = left.clone()
        start = time.perf_counter()
        getattr(target, op)(right)
        timings[op] = time.perf_counter() - start

    start = time.perf_counter()
    ranked = left.to_array()
    timings["to_array"] = time.perf_counter() - start

    print()
    for name, seconds in timings.items():
        print(f"  {name:<24} {seconds * 1000:10.2f} ms")
    print(f"\n  distinct keys: {len(left)}, top key: {ranked[0] if len(ranked) else '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
