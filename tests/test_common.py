"""
Tests for src/common/ utilities.
"""

import inspect
from pathlib import Path

from pyspark.sql import SparkSession

from src.common.data_loader import (
    DATA_DIR,
    PROJECT_ROOT,
    get_data_path,
    iter_lines,
    read_lines,
    resolve_path,
)
from src.common.spark_session import (
    _build_app_name,
    _parse_script_identifier,
    create_spark_session,
)


class TestSparkSessionUtils:
    """Tests for spark_session.py utilities."""

    def test_create_spark_session_signature(self) -> None:
        """Verify create_spark_session has correct signature."""
        sig = inspect.signature(create_spark_session)
        params = list(sig.parameters.keys())

        assert "script_name" in params
        assert "master" in params
        assert "shuffle_partitions" in params

        # Check defaults
        assert sig.parameters["script_name"].default is None
        assert sig.parameters["master"].default == "local[*]"

    def test_app_name_from_file_path(self) -> None:
        """A __file__ path is turned into a TitleCase app name."""
        name = _parse_script_identifier("/x/src/airport_counts/spanish_airports.py")
        assert name == "SpanishAirports"
        assert _build_app_name(name) == "AirportCounts-SpanishAirports"

    def test_app_name_passthrough(self) -> None:
        assert _parse_script_identifier("Custom") == "Custom"
        assert _build_app_name(None) == "AirportCounts"

    def test_create_spark_session_returns_session(self, spark: SparkSession) -> None:
        """
        Verify create_spark_session returns a SparkSession.

        Note: We use the existing fixture session since only one SparkContext
        can be active per JVM. getOrCreate returns the existing session.
        """
        session = create_spark_session("TestApp")

        assert session is not None
        assert isinstance(session, SparkSession)


class TestDataLoader:
    """Tests for data_loader.py utilities."""

    def test_get_data_path_points_at_bundled_sample(self) -> None:
        path = get_data_path()

        assert path.is_absolute()
        assert path == DATA_DIR / "airports.csv"
        assert path.exists()

    def test_resolve_path_relative_to_project_root(self) -> None:
        assert resolve_path("src/x.txt") == PROJECT_ROOT / "src" / "x.txt"
        assert resolve_path("/abs/x.txt") == Path("/abs/x.txt")

    def test_read_lines_strips_terminators_only(self, tmp_path: Path) -> None:
        """Quotes, blank lines and whitespace inside lines are preserved."""
        path = tmp_path / "lines.csv"
        path.write_bytes(b'1,"a", b\r\n\n2,"c"\n')

        assert read_lines(path) == ['1,"a", b', "", '2,"c"']

    def test_iter_lines_is_lazy(self, tmp_path: Path) -> None:
        path = tmp_path / "lines.txt"
        path.write_text("x\ny\n", encoding="utf-8")

        lines = iter_lines(path)
        assert next(lines) == "x"
        assert list(lines) == ["y"]

    def test_bundled_sample_has_header(self) -> None:
        lines = read_lines(get_data_path())
        assert lines[0].split(",")[8] == '"iso_country"'
        assert len(lines) == 19
