"""
Smoke tests to verify PySpark is working correctly.

These tests ensure the Spark primitives the Spark engine is built on
(flatMap, aggregateByKey, groupByKey, accumulators, textFile) behave as
expected before running the engine tests.
"""

from operator import add
from pathlib import Path

from pyspark.sql import SparkSession


class TestSparkSmoke:
    """Basic smoke tests for Spark functionality."""

    def test_spark_session_created(self, spark: SparkSession) -> None:
        """Verify SparkSession is created and accessible."""
        assert spark is not None
        assert spark.version is not None

    def test_spark_context_available(self, spark: SparkSession) -> None:
        """Verify SparkContext is available."""
        sc = spark.sparkContext
        assert sc is not None
        assert sc.appName == "pytest-pyspark"

    def test_flatmap_drops_empty_lists(self, sc) -> None:
        """flatMap over zero-or-one element lists acts as filter + map."""
        rdd = sc.parallelize([1, 2, 3, 4, 5], 2)
        evens = rdd.flatMap(lambda x: [(x, 1)] if x % 2 == 0 else [])
        assert evens.collect() == [(2, 1), (4, 1)]

    def test_aggregate_by_key_and_group_by_key_agree(self, sc) -> None:
        """Map-side combine and full grouping produce the same sums."""
        pairs = sc.parallelize([("a", 1), ("b", 1), ("a", 1), ("a", 1)], 3)

        aggregated = dict(pairs.aggregateByKey(0, add, add).collect())
        grouped = dict(pairs.groupByKey().mapValues(sum).collect())

        assert aggregated == grouped == {"a": 3, "b": 1}

    def test_accumulator(self, sc) -> None:
        """Accumulators updated in an action are visible on the driver."""
        counter = sc.accumulator(0)
        sc.parallelize(range(10), 4).foreach(lambda _: counter.add(1))
        assert counter.value == 10

    def test_text_file(self, sc, tmp_path: Path) -> None:
        """textFile yields one element per line without terminators."""
        path = tmp_path / "lines.txt"
        path.write_text("a,b\nc,d\n", encoding="utf-8")

        assert sc.textFile(str(path), minPartitions=2).collect() == ["a,b", "c,d"]
