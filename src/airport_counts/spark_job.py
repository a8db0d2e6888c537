"""
Spark engine: the same mapper and monoid, executed over RDD partitions.

Algorithm:
    1. flatMap: each line emits [(airport_type, 1)] or []
    2a. with combiner: aggregateByKey folds values per partition before the
        shuffle (map-side combine), then merges partials across partitions
    2b. without combiner: groupByKey ships every single pair through the
        shuffle and the reducer folds each complete bucket

Both paths fold with the same Monoid, so their output is identical; only
the shuffle volume differs.

Counters (records read, matched, malformed) are Spark accumulators.
Shuffle volume and task attempts are left to the Spark UI and stay 0 in
JobResult. Spark may re-run a failed task, and accumulators updated inside
transformations can then over-count; the output pairs are unaffected.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from pyspark import Accumulator, SparkContext
from pyspark.rdd import RDD

from src.airport_counts.aggregation import SUM, Monoid, make_combiner, make_reducer
from src.airport_counts.config import JobConfig
from src.airport_counts.engine import JobResult
from src.airport_counts.errors import JobFailedError
from src.airport_counts.mapper import AirportTypeMapper

logger = logging.getLogger(__name__)


def counting_map(
    mapper: AirportTypeMapper,
    read: Accumulator,
    matched: Accumulator,
    malformed: Accumulator,
) -> Callable[[str], list[tuple[str, int]]]:
    """Wrap mapper.map so it also feeds the job counters."""

    def map_line(line: str) -> list[tuple[str, int]]:
        read.add(1)
        fields = mapper.parse(line)
        if fields is None:
            malformed.add(1)
            return []
        emitted = mapper.emit(fields)
        matched.add(len(emitted))
        return emitted

    return map_line


def count_airport_types(
    rdd: RDD,
    config: JobConfig | None = None,
    mapper: AirportTypeMapper | None = None,
    monoid: Monoid = SUM,
    map_fn: Callable[[str], list[tuple[str, int]]] | None = None,
) -> RDD:
    """
    Build the RDD of (airport_type, total) for the target country.

    Args:
        rdd: RDD of raw airport lines
        config: Job options (default: JobConfig())
        mapper: Mapper to use (default: AirportTypeMapper(config))
        monoid: Aggregation operator shared by combiner and reducer
        map_fn: Replacement for mapper.map (e.g. a counting wrapper)

    Returns:
        Lazy RDD of (key, total) pairs, one per key
    """
    config = (config or JobConfig()).validate()
    mapper = mapper or AirportTypeMapper(config)
    pairs = rdd.flatMap(map_fn or mapper.map)

    if config.use_combiner:
        make_combiner(monoid)
        return pairs.aggregateByKey(
            monoid.identity,
            monoid.combine,  # within a partition (combiner)
            monoid.combine,  # across partitions (reducer)
            numPartitions=config.num_reducers,
        )

    reduce = make_reducer(monoid)
    return pairs.groupByKey(numPartitions=config.num_reducers).map(
        lambda bucket: reduce(bucket[0], bucket[1])
    )


def run_spark_rdd(
    rdd: RDD,
    config: JobConfig | None = None,
    monoid: Monoid = SUM,
) -> JobResult:
    """
    Run the job over an existing RDD of lines and collect the result.

    Raises:
        JobFailedError: If any Spark task fails (malformed records included
            when the policy is to fail)
    """
    config = (config or JobConfig()).validate()
    mapper = AirportTypeMapper(config)
    sc = rdd.context
    read = sc.accumulator(0)
    matched = sc.accumulator(0)
    malformed = sc.accumulator(0)

    counts = count_airport_types(
        rdd,
        config,
        mapper,
        monoid,
        map_fn=counting_map(mapper, read, matched, malformed),
    )

    logger.info(
        "Running Spark job: %d input partitions, %d reducers, combiner=%s",
        rdd.getNumPartitions(),
        config.num_reducers,
        config.use_combiner,
    )
    try:
        pairs = sorted(counts.collect())
    except Exception as exc:
        raise JobFailedError("spark", str(exc)) from exc

    if malformed.value:
        logger.warning("Skipped %d malformed records", malformed.value)

    return JobResult(
        pairs=pairs,
        records_read=read.value,
        records_matched=matched.value,
        records_malformed=malformed.value,
    )


def run_spark(
    sc: SparkContext,
    input_path: str | Path,
    config: JobConfig | None = None,
    monoid: Monoid = SUM,
) -> JobResult:
    """Read input_path with textFile() and run the job over it."""
    config = (config or JobConfig()).validate()
    rdd = sc.textFile(str(input_path), minPartitions=config.num_partitions)
    return run_spark_rdd(rdd, config, monoid)
