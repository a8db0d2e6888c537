"""
Pytest configuration and shared fixtures for the airport count tests.
"""

import os
from pathlib import Path

import pytest
from pyspark.sql import SparkSession

from tests.records import ES, HELIPORT, LARGE, MEDIUM, PT, SMALL, US, make_line

PROJECT_ROOT = Path(__file__).parent.parent

# Spark's Python workers import the job modules from the project root
os.environ["PYTHONPATH"] = os.pathsep.join(
    filter(None, [str(PROJECT_ROOT), os.environ.get("PYTHONPATH")])
)


@pytest.fixture
def mixed_lines() -> list[str]:
    """
    A small mixed-country dataset.

    Spain: 3 large, 2 small, 1 heliport. Other countries add noise.
    """
    return [
        make_line(1, LARGE, ES),
        make_line(2, SMALL, US),
        make_line(3, LARGE, ES),
        make_line(4, SMALL, ES),
        make_line(5, HELIPORT, PT),
        make_line(6, HELIPORT, ES),
        make_line(7, LARGE, ES),
        make_line(8, MEDIUM, US),
        make_line(9, SMALL, ES),
        make_line(10, LARGE, PT),
    ]


@pytest.fixture
def expected_spain() -> dict[str, int]:
    """Counts for Spain in mixed_lines."""
    return {LARGE: 3, SMALL: 2, HELIPORT: 1}


@pytest.fixture(scope="session")
def spark() -> SparkSession:
    """
    Create a SparkSession for testing.

    Uses session scope to reuse the same Spark context across all tests,
    which significantly speeds up test execution.
    """
    spark = (
        SparkSession.builder
        .appName("pytest-pyspark")
        .master("local[2]")  # Use 2 cores for testing
        .config("spark.sql.shuffle.partitions", "2")  # Reduce partitions for faster tests
        .config("spark.ui.enabled", "false")  # Disable Spark UI for tests
        .config("spark.driver.memory", "1g")
        .config("spark.task.maxFailures", "1")  # Fail fast on task errors
        .getOrCreate()
    )

    # Set log level to reduce noise during tests
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


@pytest.fixture(scope="session")
def sc(spark: SparkSession):
    """
    Get SparkContext from the SparkSession fixture.

    Useful for RDD-based tests.
    """
    return spark.sparkContext
