"""
Local engine: run the whole map / combine / shuffle / reduce pipeline
in-process.

Algorithm:
    1. Split the input lines into num_partitions contiguous partitions
    2. Map each partition (optionally in a thread pool), then combine it
       locally when the combiner is enabled
    3. Barrier: wait for every map partition before reducing anything
    4. Route all partition output through the shuffle (PartitionedShuffle
       unless another Shuffle is given)
    5. Reduce each key's bucket with the same monoid the combiner used

Failure model:
    - Mapper and combiner are side-effect free, so a failed map partition is
      re-executed from scratch (up to max_attempts) and its earlier output is
      simply discarded.
    - Malformed records are deterministic; they are never retried.
    - The job either returns complete output or raises JobFailedError.
"""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple

from src.airport_counts.aggregation import (
    SUM,
    Monoid,
    combine_partition,
    make_combiner,
    make_reducer,
)
from src.airport_counts.config import JobConfig
from src.airport_counts.errors import AirportCountError, JobFailedError
from src.airport_counts.mapper import AirportTypeMapper
from src.airport_counts.shuffle import PartitionedShuffle, Shuffle

logger = logging.getLogger(__name__)


class PartitionOutput(NamedTuple):
    """Result of mapping (and combining) one input partition."""

    pairs: list[tuple[str, int]]
    records_read: int
    records_matched: int
    records_malformed: int
    attempts: int


class JobResult(NamedTuple):
    """Final output pairs (sorted by key) plus job counters."""

    pairs: list[tuple[str, int]]
    records_read: int = 0
    records_matched: int = 0
    records_malformed: int = 0
    pairs_shuffled: int = 0
    partition_attempts: int = 0

    def as_dict(self) -> dict[str, int]:
        return dict(self.pairs)


def split_partitions(lines: Sequence[str], num_partitions: int) -> list[Sequence[str]]:
    """
    Split lines into at most num_partitions contiguous, near-equal slices.

    Empty input yields a single empty partition.
    """
    if num_partitions < 1:
        raise ValueError("num_partitions must be at least 1")
    if not lines:
        return [lines]
    size, extra = divmod(len(lines), num_partitions)
    partitions = []
    start = 0
    for i in range(num_partitions):
        end = start + size + (1 if i < extra else 0)
        if end > start:
            partitions.append(lines[start:end])
        start = end
    return partitions


def _map_once(
    mapper: AirportTypeMapper,
    lines: Iterable[str],
    use_combiner: bool,
    monoid: Monoid,
) -> tuple[list[tuple[str, int]], int, int, int]:
    pairs: list[tuple[str, int]] = []
    read = matched = malformed = 0
    for line in lines:
        read += 1
        fields = mapper.parse(line)
        if fields is None:
            malformed += 1
            continue
        emitted = mapper.emit(fields)
        matched += len(emitted)
        pairs.extend(emitted)
    if use_combiner:
        pairs = combine_partition(pairs, monoid)
    return pairs, read, matched, malformed


def run_map_partition(
    partition_id: int,
    lines: Sequence[str],
    mapper: AirportTypeMapper,
    config: JobConfig,
    monoid: Monoid = SUM,
) -> PartitionOutput:
    """
    Map one partition, re-executing it on failure up to config.max_attempts.

    Raises:
        JobFailedError: If the partition fails on every attempt, or hits a
            deterministic error such as a malformed record
    """
    attempt = 0
    while True:
        attempt += 1
        logger.debug("Map partition %d: attempt %d, %d records", partition_id, attempt, len(lines))
        try:
            pairs, read, matched, malformed = _map_once(
                mapper, lines, config.use_combiner, monoid
            )
        except AirportCountError as exc:
            raise JobFailedError("map", str(exc), partition=partition_id) from exc
        except Exception as exc:
            if attempt == config.max_attempts:
                raise JobFailedError("map", str(exc), partition=partition_id) from exc
            logger.warning(
                "Map partition %d failed on attempt %d/%d, re-executing: %s",
                partition_id,
                attempt,
                config.max_attempts,
                exc,
            )
            continue
        return PartitionOutput(pairs, read, matched, malformed, attempt)


def run_local(
    lines: Iterable[str],
    config: JobConfig | None = None,
    mapper: AirportTypeMapper | None = None,
    monoid: Monoid = SUM,
    shuffle: Shuffle | None = None,
) -> JobResult:
    """
    Count airport types in the target country, entirely in-process.

    Args:
        lines: Raw airport records
        config: Job options (default: JobConfig())
        mapper: Mapper to use (default: AirportTypeMapper(config))
        monoid: Aggregation operator shared by combiner and reducer
        shuffle: Empty shuffle to group with
            (default: PartitionedShuffle(config.num_reducers))

    Returns:
        JobResult with one (type, total) pair per type, sorted by type

    Raises:
        JobFailedError: If a map partition or a reduction fails
    """
    config = (config or JobConfig()).validate()
    mapper = mapper or AirportTypeMapper(config)
    if config.use_combiner:
        make_combiner(monoid)
    partitions = split_partitions(list(lines), config.num_partitions)

    logger.info(
        "Running local job: %d partitions, %d reducers, combiner=%s",
        len(partitions),
        config.num_reducers,
        config.use_combiner,
    )

    def task(item: tuple[int, Sequence[str]]) -> PartitionOutput:
        partition_id, partition = item
        return run_map_partition(partition_id, partition, mapper, config, monoid)

    if config.max_workers > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            outputs = list(pool.map(task, enumerate(partitions)))
    else:
        outputs = [task(item) for item in enumerate(partitions)]

    # Every map partition has finished: safe to shuffle and reduce
    if shuffle is None:
        shuffle = PartitionedShuffle(config.num_reducers)
    for output in outputs:
        shuffle.add(output.pairs)

    reduce = make_reducer(monoid)
    results = []
    for key, values in shuffle.buckets():
        try:
            results.append(reduce(key, values))
        except Exception as exc:
            raise JobFailedError("reduce", f"key {key!r}: {exc}") from exc

    malformed = sum(o.records_malformed for o in outputs)
    if malformed:
        logger.warning("Skipped %d malformed records", malformed)

    result = JobResult(
        pairs=sorted(results),
        records_read=sum(o.records_read for o in outputs),
        records_matched=sum(o.records_matched for o in outputs),
        records_malformed=malformed,
        pairs_shuffled=shuffle.pairs_added,
        partition_attempts=sum(o.attempts for o in outputs),
    )
    logger.info(
        "Local job done: %d records read, %d matched, %d types",
        result.records_read,
        result.records_matched,
        len(result.pairs),
    )
    return result
