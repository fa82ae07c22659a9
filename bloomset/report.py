"""Evaluation suite for both filters.

Generates unique synthetic items, performs a deterministic 80/20 split, sizes
each filter for the 80% training set at the target rate, and runs:

1. Membership test on training set (should be all present)
2. False positive rate on held-out items (never inserted)
3. Removal test (counting filter only)
4. Filter properties and memory usage
5. Insert and query throughput

Run with:

    python -m bloomset.report --items 100000 --rate 0.01
"""
from __future__ import annotations

import argparse
import logging
import random
import time
import uuid
from typing import Any, List, Optional, Sequence, Tuple

from bloomset.bloom_filter import BitSetFilter
from bloomset.counting_filter import CountingFilter
from bloomset.sizing import estimated_false_positive_rate

NUM_ITEMS = 100_000
TARGET_RATE = 0.01
QUERY_OPS = 200_000
SEED = 0


def generate_synthetic_data(n: int, seed: int = SEED) -> list[str]:
    """Generate ``n`` unique random strings, reproducible for a given seed."""
    rng = random.Random(seed)
    # UUIDs built from 128 random bits are virtually guaranteed to be unique
    return [str(uuid.UUID(int=rng.getrandbits(128), version=4)) for _ in range(n)]


def build_split(words: Sequence[str]) -> Tuple[list[str], list[str]]:
    """Deterministic 80/20 split into (training, held-out)."""
    split = int(len(words) * 0.8)
    return list(words[:split]), list(words[split:])


def test_membership(bloom: Any, train: list[str]) -> int:
    """Verify all training items are present in the filter."""
    print("TEST A: Membership on training set")
    missing = [w for w in train if w not in bloom]
    print(f"  Training items: {len(train)}")
    print(f"  Missing after insertion: {len(missing)} (expected 0)")
    if missing:
        print(f"  Example missing: {missing[:5]}")
    print()
    return len(missing)


def test_false_positive_on_heldout(bloom: Any, test: list[str], rate: float) -> float:
    """Measure empirical false positive rate on the held-out set."""
    print("TEST B: False positive rate on held-out items")
    if not test:
        print("  No held-out items available for testing.")
        print()
        return 0.0

    false_positives = sum(1 for w in test if w in bloom)
    fpr = false_positives / len(test)

    print(f"  Held-out items: {len(test)}")
    print(f"  False positives: {false_positives}")
    print(f"  Empirical FPR: {fpr:.6f} ({fpr*100:.4f}%)")
    print(f"  Target FPR:    {rate:.6f} ({rate*100:.4f}%)")
    print()
    return fpr


def test_removal(bloom: CountingFilter, train: list[str]) -> int:
    """Remove half of the training set and check the other half survives."""
    print("TEST C: Removal (counting filter)")
    removed, kept = train[::2], train[1::2]
    for w in removed:
        bloom.remove(w)
    still_present = sum(1 for w in removed if w in bloom)
    missing = sum(1 for w in kept if w not in bloom)
    print(f"  Removed items: {len(removed)}")
    print(f"  Removed items still reported present: {still_present}")
    print(f"  Kept items missing (false negatives): {missing}")
    print()
    return missing


def show_properties(bloom: Any, train: list[str]) -> None:
    """Display filter memory and configuration properties."""
    print("TEST D: Filter properties")
    if isinstance(bloom, CountingFilter):
        bytes_len = len(bloom.counters.raw)
    else:
        bytes_len = len(bloom.bit_array)
    mb = bytes_len / (1024 * 1024)

    print(f"  Filter size (slots): {bloom.num_bits}")
    print(f"  Filter size (bytes): {bytes_len}")
    print(f"  Filter size (MB): {mb:.2f}")
    print(f"  Number of hash functions: {bloom.num_hashes}")
    print(f"  Items inserted: {len(train)}")
    print(f"  Bytes per item: {bytes_len / max(1, len(train)):.4f}")
    print(f"  Fill ratio: {bloom.fill_ratio:.4f}")
    print(
        "  Theoretical FPR at this load: "
        f"{estimated_false_positive_rate(bloom.num_bits, bloom.num_hashes, len(train)):.6f}"
    )
    print()


def empty_like(bloom: Any) -> Any:
    """Fresh filter of the same concrete type, size, seeds and counter width."""
    seed1, seed2 = bloom.seeds
    if isinstance(bloom, CountingFilter):
        return CountingFilter(
            bloom.params, bits_per_counter=bloom.bits_per_counter, seed1=seed1, seed2=seed2
        )
    return type(bloom)(bloom.params, seed1=seed1, seed2=seed2)


def test_performance(bloom: Any, train: list[str], test: list[str], query_ops: int = QUERY_OPS) -> dict:
    """Measure insertion and query throughput (ops/sec)."""
    print("TEST E: Performance Benchmarking")

    bench_filter = empty_like(bloom)

    start_time = time.perf_counter()
    for word in train:
        bench_filter.insert(word)
    insert_time = time.perf_counter() - start_time
    insert_ops = len(train) / insert_time if insert_time > 0 else float("inf")
    print(f"    - Inserted {len(train)} items in {insert_time:.4f} sec")
    print(f"    - Insertion Throughput: {insert_ops:,.0f} ops/sec")

    queries = test or train
    repeats = query_ops // len(queries) + 1
    large_test_set = (queries * repeats)[:query_ops]

    start_time = time.perf_counter()
    for word in large_test_set:
        _ = word in bench_filter
    query_time = time.perf_counter() - start_time
    query_ops_per_sec = len(large_test_set) / query_time if query_time > 0 else float("inf")
    print(f"    - Performed {len(large_test_set)} queries in {query_time:.4f} sec")
    print(f"    - Query Throughput: {query_ops_per_sec:,.0f} ops/sec")
    print()

    return {
        "insert_count": len(train),
        "insert_time": insert_time,
        "insert_ops_per_sec": insert_ops,
        "query_count": len(large_test_set),
        "query_time": query_time,
        "query_ops_per_sec": query_ops_per_sec,
    }


def compare_performance(std_metrics: dict, counting_metrics: dict) -> None:
    """Print a compact side-by-side comparison of performance metrics."""
    def fmt(val):
        if isinstance(val, float):
            if val == float("inf"):
                return "inf"
            if abs(val) >= 1000:
                return f"{val:,.0f}"
            return f"{val:,.4f}"
        return str(val)

    print(f"{'Metric':<36}{'Standard':>18}{'Counting':>18}{'Diff (%)':>14}")
    print("-" * 86)

    rows = [
        ("Insertion Throughput (ops/sec)", "insert_ops_per_sec"),
        ("Insertion Time (s)", "insert_time"),
        ("Query Throughput (ops/sec)", "query_ops_per_sec"),
        ("Query Time (s)", "query_time"),
    ]
    for name, key in rows:
        std_val, cnt_val = std_metrics[key], counting_metrics[key]
        if std_val and std_val != float("inf") and cnt_val != float("inf"):
            diff_str = f"{(cnt_val - std_val) / std_val * 100:+.2f}%"
        else:
            diff_str = "N/A"
        print(f"{name:<36}{fmt(std_val):>18}{fmt(cnt_val):>18}{diff_str:>14}")
    print()


def run_all(
    num_items: int = NUM_ITEMS,
    rate: float = TARGET_RATE,
    seed: int = SEED,
    query_ops: int = QUERY_OPS,
) -> dict:
    """Run the suite against both filters and return a summary."""
    words = generate_synthetic_data(num_items, seed)
    train, test = build_split(words)
    rng = random.Random(seed)
    seed1, seed2 = rng.getrandbits(32), rng.getrandbits(64)
    print(f"Synthetic items: {len(words)}")

    print("=" * 60)
    print("Running STANDARD Bloom Filter Test Suite (80/20 split)")
    print("=" * 60)
    print()
    bloom = BitSetFilter.with_rate(rate, max(1, len(train)), seed1=seed1, seed2=seed2)
    bloom.update(train)
    std_missing = test_membership(bloom, train)
    std_fpr = test_false_positive_on_heldout(bloom, test, rate)
    show_properties(bloom, train)
    std_metrics = test_performance(bloom, train, test, query_ops)

    print("=" * 60)
    print("Running COUNTING Bloom Filter Test Suite (80/20 split)")
    print("=" * 60)
    print()
    counting = CountingFilter.with_rate(rate, max(1, len(train)), seed1=seed1, seed2=seed2)
    counting.update(train)
    cnt_missing = test_membership(counting, train)
    cnt_fpr = test_false_positive_on_heldout(counting, test, rate)
    show_properties(counting, train)
    counting_metrics = test_performance(counting, train, test, query_ops)
    removal_missing = test_removal(counting, train)

    print("=" * 60)
    print("COMPARISON: Performance Summary")
    print("=" * 60)
    compare_performance(std_metrics, counting_metrics)

    return {
        "standard": {"missing": std_missing, "fpr": std_fpr, **std_metrics},
        "counting": {
            "missing": cnt_missing,
            "fpr": cnt_fpr,
            "missing_after_removal": removal_missing,
            **counting_metrics,
        },
    }


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Evaluate the standard and counting Bloom filters.")
    parser.add_argument("--items", type=int, default=NUM_ITEMS, help="number of synthetic items")
    parser.add_argument("--rate", type=float, default=TARGET_RATE, help="target false positive rate")
    parser.add_argument("--seed", type=int, default=SEED, help="seed for data and hash seeds")
    parser.add_argument("--queries", type=int, default=QUERY_OPS, help="query operations to time")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    if args.items < 2:
        parser.error("--items must be at least 2")
    if not 0.0 < args.rate < 1.0:
        parser.error("--rate must be in the open interval (0, 1)")
    if args.queries < 1:
        parser.error("--queries must be positive")
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    run_all(args.items, args.rate, args.seed, args.queries)


if __name__ == "__main__":
    main()
