"""
Prefix Search Index for Personal Names

This module provides exact-prefix lookup over a collection of structured personal names
(surname, given name, patronymic).

## Overview

Names are stored in their canonical form (see `nameindex.records`) and partitioned into
buckets by leading character. Every bucket is kept in ascending ordinal order, so all
entries sharing a prefix form one contiguous run inside their bucket. A query:

1. **Validation**: rejects empty, whitespace-only and over-long prefixes
2. **Bucket Lookup**: picks the bucket for the prefix's first character
3. **Anchor Search**: binary-searches any entry whose leading substring equals the prefix
4. **Boundary Expansion**: walks left and right from the anchor to the ends of the run

## Usage Examples

```python
from nameindex.prefix_index import PrefixIndex

index = PrefixIndex()
index.ingest(
    [
        {"surname": "Ivanov", "given": "Ivan", "patronymic": "Ivanovich"},
        {"surname": "Ivanova", "given": "Maria"},
        {"surname": "Petrov", "given": "Petr"},
    ]
)

index.query("Ivanov")
# Returns: ["Ivanov Ivan Ivanovich", "Ivanova Maria"]

index.query("Sidorov")
# Returns: []
```

## Lifecycle and Thread Safety

The index is filled by one or more `ingest` calls and then queried. Ingestion merges new
entries into existing buckets, so the sort order survives any number of calls. There is no
internal locking: finish ingesting before sharing the index between threads. Once ingestion
is complete, queries are read-only and may run concurrently.

## Error Handling

The only error is `InvalidArgument`, raised before any lookup or mutation. A prefix whose
leading character was never ingested, or which matches nothing, returns an empty list.
"""

from __future__ import annotations
import heapq
import logging
from dataclasses import dataclass, replace
from itertools import groupby
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from nameindex.consts import DEFAULT_MAX_PREFIX_LENGTH
from nameindex.records import InvalidArgument, RecordLike, canonicalize


# ════════════════════════════════════════════════════════════════════════════════
# IMMUTABLE CONFIGURATION
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PrefixIndexConfig:
    """Immutable index configuration."""

    max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH
    # Upper-case stored names and query prefixes alike. The prefix length limit
    # applies to the upper-cased prefix, which can be longer than the input.
    fold_case: bool = False

    def __post_init__(self) -> None:
        if self.max_prefix_length < 1:
            raise InvalidArgument(f"max_prefix_length must be positive. Was: {self.max_prefix_length}")

    @classmethod
    def create_default(cls) -> "PrefixIndexConfig":
        return cls(max_prefix_length=DEFAULT_MAX_PREFIX_LENGTH, fold_case=False)

    def with_max_prefix_length(self, max_prefix_length: int) -> "PrefixIndexConfig":
        """Immutable update method."""
        return replace(self, max_prefix_length=max_prefix_length)

    def with_fold_case(self, fold_case: bool) -> "PrefixIndexConfig":
        """Immutable update method for the casing policy."""
        return replace(self, fold_case=fold_case)


@dataclass(frozen=True)
class IndexInfo:
    """Immutable index statistics."""

    bucket_count: int
    entry_count: int
    largest_bucket_key: Optional[str] = None
    largest_bucket_size: int = 0


# ════════════════════════════════════════════════════════════════════════════════
# PREFIX INDEX
# ════════════════════════════════════════════════════════════════════════════════


class PrefixIndex:
    """Leading-character buckets of sorted canonical names with prefix lookup."""

    def __init__(self, config: Optional[PrefixIndexConfig] = None):
        self._config = config or PrefixIndexConfig.create_default()
        self._buckets: Dict[str, List[str]] = {}

    @property
    def config(self) -> PrefixIndexConfig:
        return self._config

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def buckets(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only snapshot of every bucket, keyed by leading character."""
        return MappingProxyType({key: tuple(bucket) for key, bucket in self._buckets.items()})

    def get_index_info(self) -> IndexInfo:
        if not self._buckets:
            return IndexInfo(bucket_count=0, entry_count=0)

        largest_key = max(self._buckets, key=lambda key: len(self._buckets[key]))
        return IndexInfo(
            bucket_count=len(self._buckets),
            entry_count=len(self),
            largest_bucket_key=largest_key,
            largest_bucket_size=len(self._buckets[largest_key]),
        )

    # Ingestion
    def ingest(self, records: Iterable[RecordLike]) -> None:
        """
        Canonicalize a batch of names and merge them into their buckets.

        The whole batch is canonicalized first, so a record with no usable parts
        raises InvalidArgument and leaves the index untouched. Duplicates are kept.
        """
        fold_case = self._config.fold_case
        names = sorted(canonicalize(record, fold_case=fold_case) for record in records)
        if not names:
            return

        touched = 0
        for key, group in groupby(names, key=lambda name: name[0]):
            incoming = list(group)
            existing = self._buckets.get(key)
            if existing:
                self._buckets[key] = list(heapq.merge(existing, incoming))
            else:
                self._buckets[key] = incoming
            touched += 1

        logging.debug(f"Ingested {len(names)} names into {touched} buckets ({len(self._buckets)} total)")

    # Querying
    def query(self, prefix: str) -> List[str]:
        """
        Return every stored name starting with `prefix`, in ascending ordinal order.

        Raises InvalidArgument for an empty, whitespace-only or over-long prefix.
        """
        prefix = self._normalize_prefix(prefix)

        bucket = self._buckets.get(prefix[0])
        if bucket is None:
            return []

        anchor = self._binary_search(bucket, prefix)
        if anchor < 0:
            return []

        min_index = self._find_border_index(bucket, prefix, anchor, lambda index: index - 1)
        max_index = self._find_border_index(bucket, prefix, anchor, lambda index: index + 1)
        logging.debug(f"Prefix {prefix!r}: anchor {anchor}, range [{min_index}, {max_index}]")

        if min_index == max_index:
            return [bucket[min_index]]
        return bucket[min_index : max_index + 1]

    def _normalize_prefix(self, prefix: str) -> str:
        """Validate `prefix` and apply the casing policy."""
        if not isinstance(prefix, str):
            raise InvalidArgument(f"prefix must be a string, got {type(prefix).__name__}")

        if not prefix or prefix.isspace():
            raise InvalidArgument("prefix is empty.")

        if self._config.fold_case:
            prefix = prefix.upper()

        max_length = self._config.max_prefix_length
        if len(prefix) > max_length:
            raise InvalidArgument(f"Request length is too long. Was: {len(prefix)}. Max: {max_length}")
        return prefix

    @staticmethod
    def _compare_to_prefix(entry: str, prefix: str) -> int:
        # Only the entry's leading len(prefix) characters take part. A shorter entry
        # is compared whole; it can never equal the prefix.
        head = entry[: len(prefix)]
        if head < prefix:
            return -1
        if head > prefix:
            return 1
        return 0

    @classmethod
    def _binary_search(cls, bucket: List[str], prefix: str) -> int:
        """
        Index of any entry whose leading substring equals `prefix`.

        Returns the bitwise complement of the insertion point (always negative)
        when nothing matches.
        """
        lo, hi = 0, len(bucket) - 1
        while lo <= hi:
            mid = (lo + hi) // 2
            order = cls._compare_to_prefix(bucket[mid], prefix)
            if order == 0:
                return mid
            if order < 0:
                lo = mid + 1
            else:
                hi = mid - 1
        return ~lo

    @staticmethod
    def _find_border_index(bucket: List[str], prefix: str, start: int, move: Callable[[int], int]) -> int:
        """Walk from a matching `start` in the direction of `move`; return the last matching index."""
        prefix_length = len(prefix)
        prefix_hash = hash(prefix)
        result = start

        index = start
        while 0 <= index < len(bucket):
            head = bucket[index][:prefix_length]
            # Unequal hashes prove the strings differ; equal hashes prove nothing.
            if hash(head) != prefix_hash or head != prefix:
                break
            result = index
            index = move(index)

        return result


# ════════════════════════════════════════════════════════════════════════════════
# MODULE-LEVEL CONVENIENCE FUNCTIONS
# ════════════════════════════════════════════════════════════════════════════════


def build_index(records: Iterable[RecordLike], config: Optional[PrefixIndexConfig] = None) -> PrefixIndex:
    """
    Create an index and ingest `records` into it in one call.

    Args:
        records: NameRecord instances or mappings of name parts
        config: index configuration, defaults to PrefixIndexConfig.create_default()

    Returns:
        A filled PrefixIndex ready for querying
    """
    index = PrefixIndex(config)
    index.ingest(records)
    info = index.get_index_info()
    logging.info(f"Built prefix index with {info.entry_count} names in {info.bucket_count} buckets")
    return index
