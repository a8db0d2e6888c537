"""
Spanish Airports: number of airports of each type in Spain

Counts airports per type (large_airport, heliport, ...) for one country,
Spain by default, as a map/reduce job.

Algorithm:
    1. map: each record in the target country emits (type, 1)
    2. combine: sum counts per type inside each partition
    3. reduce: sum partial counts per type across partitions

Usage:
    python -m src.airport_counts.spanish_airports [input] [output] [--engine local|spark]

    input   airports CSV (default: bundled sample)
    output  directory for part-00000 (default: print to stdout)

Options such as the target country come from AIRPORTS_* environment
variables, e.g. AIRPORTS_COUNTRY_CODE='"PT"'.
"""

import logging
import sys
from pathlib import Path

from src.airport_counts.config import JobConfig
from src.airport_counts.engine import JobResult, run_local
from src.airport_counts.output import check_output_dir, format_pairs, write_output
from src.common.data_loader import get_data_path, read_lines

logger = logging.getLogger(__name__)

ENGINES = ("local", "spark")

# Default input file
DEFAULT_INPUT = get_data_path("airports.csv")


def parse_args(argv: list[str]) -> tuple[str, str | None, str]:
    """
    Split argv into (input_path, output_path, engine).

    Positional arguments are the input and output paths; --engine may
    appear anywhere.
    """
    engine = "local"
    positional: list[str] = []
    args = iter(argv)
    for arg in args:
        if arg == "--engine":
            engine = next(args, "")
        elif arg.startswith("--engine="):
            engine = arg.split("=", 1)[1]
        else:
            positional.append(arg)

    if engine not in ENGINES:
        raise SystemExit(f"--engine must be one of {ENGINES}, got {engine!r}")
    if len(positional) > 2:
        raise SystemExit(__doc__)

    input_path = positional[0] if positional else str(DEFAULT_INPUT)
    output_path = positional[1] if len(positional) > 1 else None
    return input_path, output_path, engine


def run(input_path: str, config: JobConfig, engine: str = "local") -> JobResult:
    """Run the job on the chosen engine."""
    if engine == "spark":
        # Imported here so the local engine works without a JVM
        from src.airport_counts.spark_job import run_spark
        from src.common.spark_session import create_spark_session

        spark = create_spark_session(__file__, shuffle_partitions=config.num_reducers)
        try:
            return run_spark(spark.sparkContext, Path(input_path).resolve(), config)
        finally:
            spark.stop()

    return run_local(read_lines(input_path), config)


def print_results(result: JobResult, config: JobConfig) -> None:
    """Print the counts and job counters in a formatted way."""
    print("\n--- Results ---")
    for line in format_pairs(result.pairs, config.output_delimiter):
        print(f"  {line}")

    print(f"\nRecords read: {result.records_read}")
    print(f"Records in {config.country_code}: {result.records_matched}")
    if result.records_malformed:
        print(f"Malformed records skipped: {result.records_malformed}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the airport type count."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    input_path, output_path, engine = parse_args(sys.argv[1:] if argv is None else argv)
    config = JobConfig.from_env()
    if output_path:
        check_output_dir(output_path)

    print(f"=== Airport types in {config.country_code} ({engine} engine) ===\n")
    print(f"Input file: {input_path}")

    result = run(input_path, config, engine)

    if output_path:
        part = write_output(result.pairs, output_path, config.output_delimiter)
        print(f"Output written to: {part}")
    print_results(result, config)


if __name__ == "__main__":
    main()
