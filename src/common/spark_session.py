"""
Shared SparkSession utilities for the Spark engine.

This module provides a consistent way to create SparkSession instances
with sensible defaults for local development.

Logging is configured via conf/log4j2.properties to:
- Write INFO logs to .logs/spark.log
- Only show ERROR on console (keeping job output clean)
"""

import os
from pathlib import Path

from pyspark.sql import SparkSession

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Path to log4j2 config
LOG4J2_CONFIG = PROJECT_ROOT / "conf" / "log4j2.properties"

# Base application name prefix for all Spark sessions
# Final app name will be: APP_NAME_PREFIX-<script_name>
APP_NAME_PREFIX = "AirportCounts"


def _ensure_logs_dir() -> None:
    """Ensure .logs directory exists."""
    logs_dir = PROJECT_ROOT / ".logs"
    logs_dir.mkdir(exist_ok=True)


def _snake_to_title(snake_str: str) -> str:
    """
    Convert snake_case string to TitleCase.

    Examples:
        spanish_airports -> SpanishAirports
        spark_job -> SparkJob

    Args:
        snake_str: A snake_case string

    Returns:
        TitleCase version of the string
    """
    return "".join(word.capitalize() for word in snake_str.split("_"))


def _parse_script_identifier(script_id: str | None) -> str | None:
    """
    Parse a script identifier, which can be either a file path or a name.

    If it looks like a file path (contains / or ends with .py), extract
    the filename and convert from snake_case to TitleCase.

    Args:
        script_id: Either a file path (__file__) or a direct name

    Returns:
        Processed script name in TitleCase, or None
    """
    if script_id is None:
        return None

    if "/" in script_id or script_id.endswith(".py"):
        return _snake_to_title(Path(script_id).stem)

    return script_id


def _build_app_name(script_name: str | None = None) -> str:
    """
    Build the full application name.

    Args:
        script_name: Optional script identifier (e.g., "SpanishAirports")

    Returns:
        Full app name like "AirportCounts" or "AirportCounts-SpanishAirports"
    """
    if script_name:
        return f"{APP_NAME_PREFIX}-{script_name}"
    return APP_NAME_PREFIX


def create_spark_session(
    script_name: str | None = None,
    master: str = "local[*]",
    shuffle_partitions: int = 4,
) -> SparkSession:
    """
    Create a SparkSession with common configurations.

    Logging is configured to write detailed logs to .logs/spark.log
    while only showing errors on the console.

    Args:
        script_name: Identifier for this script. Can be either:
                     - A file path like __file__ (auto-converts snake_case to TitleCase)
                     - A direct name like "SpanishAirports"
        master: Spark master URL (default: local[*] for local development)
        shuffle_partitions: Default number of reduce-side partitions

    Returns:
        Configured SparkSession instance
    """
    _ensure_logs_dir()

    app_name = _build_app_name(_parse_script_identifier(script_name))

    # Change working directory context for log4j file output
    original_cwd = os.getcwd()
    os.chdir(PROJECT_ROOT)

    try:
        builder = SparkSession.builder.appName(app_name).master(master)

        if LOG4J2_CONFIG.exists():
            builder = builder.config(
                "spark.driver.extraJavaOptions",
                f"-Dlog4j.configurationFile=file:{LOG4J2_CONFIG}",
            )

        spark = (
            builder.config("spark.sql.shuffle.partitions", str(shuffle_partitions))
            .config("spark.default.parallelism", str(shuffle_partitions))
            .config("spark.driver.memory", "2g")
            .config("spark.ui.showConsoleProgress", "false")
            .getOrCreate()
        )

        spark.sparkContext.setLogLevel("ERROR")

        return spark
    finally:
        os.chdir(original_cwd)

