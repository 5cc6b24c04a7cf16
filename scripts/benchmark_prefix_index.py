"""
Measure ingestion and query throughput of the prefix index on synthetic names.
"""

import sys
import time
import argparse
from pathlib import Path
from typing import List

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from nameindex.prefix_index import PrefixIndex
from nameindex.records import NameRecord

SURNAME_STEMS = ["Ivan", "Petr", "Sidor", "Smirn", "Kuznets", "Sokol", "Popov", "Lebed", "Kozl", "Novik", "Moroz"]
SURNAME_ENDINGS = ["ov", "ova", "enko", "in", "ina", "sky", "skaya"]
GIVEN_NAMES = ["Ivan", "Petr", "Sergei", "Anna", "Maria", "Olga", "Pavel", "Dmitry", "Elena", "Nikolai"]
PATRONYMICS = ["Ivanovich", "Petrovna", "Sergeevich", "Olegovna", "Pavlovich", "Dmitrievna"]


def generate_records(count: int, rng: np.random.Generator) -> List[NameRecord]:
    """Generate names with a share of missing given names and patronymics."""
    stems = rng.choice(SURNAME_STEMS, size=count)
    endings = rng.choice(SURNAME_ENDINGS, size=count)
    givens = rng.choice(GIVEN_NAMES, size=count)
    patronymics = rng.choice(PATRONYMICS, size=count)
    has_given = rng.random(count) < 0.9
    has_patronymic = rng.random(count) < 0.6

    return [
        NameRecord(
            surname=f"{stem}{ending}",
            given=str(given) if with_given else None,
            patronymic=str(patronymic) if with_patronymic else None,
        )
        for stem, ending, given, patronymic, with_given, with_patronymic in zip(
            stems, endings, givens, patronymics, has_given, has_patronymic
        )
    ]


def sample_prefixes(records: List[NameRecord], count: int, rng: np.random.Generator) -> List[str]:
    """Cut random-length prefixes from random stored names."""
    picks = rng.integers(0, len(records), size=count)
    prefixes = []
    for pick in picks:
        name = records[pick].canonical()
        prefixes.append(name[: int(rng.integers(1, len(name) + 1))])
    return prefixes


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark the name prefix index.")
    parser.add_argument("--n_names", type=int, default=100_000, help="Number of synthetic names to ingest.")
    parser.add_argument("--n_batches", type=int, default=10, help="Number of ingest calls to split the names over.")
    parser.add_argument("--n_queries", type=int, default=10_000, help="Number of prefix queries to time.")
    parser.add_argument("--random_seed", type=int, default=42, help="Random seed for reproducibility.")
    args = parser.parse_args()

    rng = np.random.default_rng(args.random_seed)
    records = generate_records(args.n_names, rng)

    index = PrefixIndex()
    start = time.perf_counter()
    for batch in np.array_split(np.arange(len(records)), args.n_batches):
        index.ingest([records[i] for i in batch])
    ingest_time = time.perf_counter() - start

    info = index.get_index_info()
    print(f"Ingested {info.entry_count} names in {args.n_batches} batches in {ingest_time:.3f}s")
    print(f"Buckets: {info.bucket_count}, largest '{info.largest_bucket_key}' with {info.largest_bucket_size} names")

    prefixes = sample_prefixes(records, args.n_queries, rng)
    latencies = np.empty(len(prefixes))
    result_sizes = np.empty(len(prefixes), dtype=np.int64)
    for i, prefix in enumerate(prefixes):
        query_start = time.perf_counter()
        result_sizes[i] = len(index.query(prefix))
        latencies[i] = time.perf_counter() - query_start

    total = latencies.sum()
    p50, p95, p99 = np.percentile(latencies, [50, 95, 99]) * 1_000_000
    print(f"\n{len(prefixes)} queries in {total:.3f}s ({len(prefixes) / total:.0f} queries/second)")
    print(f"Latency: p50 {p50:.1f} μs, p95 {p95:.1f} μs, p99 {p99:.1f} μs")
    print(f"Results per query: mean {result_sizes.mean():.1f}, max {result_sizes.max()}")
