"""
Grouping / shuffle: bring every intermediate pair to its key's bucket.

Two interchangeable implementations behind one interface:

  1. InMemoryShuffle     - a single dict of key -> values (one machine)
  2. PartitionedShuffle  - pairs routed to N reducer partitions by key hash,
                           then grouped within each partition (distributed
                           layout, simulated in-process)

Both guarantee completeness: every pair added appears in exactly one bucket,
with no loss and no duplication. Order within a bucket is unspecified.
"""

import zlib
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable, Iterator
from typing import Any


def partition_for(key: str, num_partitions: int) -> int:
    """
    Pick the reducer partition for a key.

    Uses CRC32 of the UTF-8 key rather than hash(), which is salted per
    process and would place keys differently on every run.
    """
    return zlib.crc32(str(key).encode("utf-8")) % num_partitions


def group_by_key(pairs: Iterable[tuple[Any, Any]]) -> dict[Any, list[Any]]:
    """Group (key, value) pairs into a dict of key -> list of values."""
    grouped: dict[Any, list[Any]] = defaultdict(list)
    for key, value in pairs:
        grouped[key].append(value)
    return dict(grouped)


class Shuffle(ABC):
    """Collects pairs from map partitions and exposes grouped buckets."""

    def __init__(self) -> None:
        self.pairs_added = 0

    @abstractmethod
    def _route(self, key: Any, value: Any) -> None:
        """Place one pair in its bucket."""

    @abstractmethod
    def buckets(self) -> Iterator[tuple[Any, list[Any]]]:
        """Yield (key, values) once for every key seen."""

    def add(self, pairs: Iterable[tuple[Any, Any]]) -> None:
        """Add the output of one map partition."""
        for key, value in pairs:
            self._route(key, value)
            self.pairs_added += 1


class InMemoryShuffle(Shuffle):
    """Single-machine shuffle: one dict of key -> values."""

    def __init__(self) -> None:
        super().__init__()
        self._buckets: dict[Any, list[Any]] = defaultdict(list)

    def _route(self, key: Any, value: Any) -> None:
        self._buckets[key].append(value)

    def buckets(self) -> Iterator[tuple[Any, list[Any]]]:
        yield from self._buckets.items()


class PartitionedShuffle(Shuffle):
    """Hash-partitioned shuffle: one bucket dict per reducer partition."""

    def __init__(self, num_reducers: int) -> None:
        super().__init__()
        if num_reducers < 1:
            raise ValueError("num_reducers must be at least 1")
        self.num_reducers = num_reducers
        self._partitions: list[dict[Any, list[Any]]] = [
            defaultdict(list) for _ in range(num_reducers)
        ]

    def _route(self, key: Any, value: Any) -> None:
        self._partitions[partition_for(key, self.num_reducers)][key].append(value)

    def reducer_partitions(self) -> list[dict[Any, list[Any]]]:
        """Per-reducer bucket dicts, indexed by partition id."""
        return [dict(partition) for partition in self._partitions]

    def buckets(self) -> Iterator[tuple[Any, list[Any]]]:
        for partition in self._partitions:
            yield from partition.items()
