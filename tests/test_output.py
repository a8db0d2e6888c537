"""
Tests for output rendering and the part-file writer.
"""

from pathlib import Path

import pytest

from src.airport_counts.errors import OutputExistsError
from src.airport_counts.output import (
    PART_FILE,
    SUCCESS_MARKER,
    check_output_dir,
    format_pairs,
    read_output,
    write_output,
)

PAIRS = [('"heliport"', 2), ('"large_airport"', 3)]


class TestFormatPairs:
    def test_tab_separated(self) -> None:
        assert list(format_pairs(PAIRS)) == ['"heliport"\t2', '"large_airport"\t3']

    def test_custom_delimiter(self) -> None:
        assert list(format_pairs([("a", 1)], ",")) == ["a,1"]

    def test_empty(self) -> None:
        assert list(format_pairs([])) == []


class TestWriteOutput:
    def test_writes_part_file_and_marker(self, tmp_path: Path) -> None:
        out = tmp_path / "result"
        part = write_output(PAIRS, out)

        assert part == out / PART_FILE
        assert part.read_text(encoding="utf-8") == '"heliport"\t2\n"large_airport"\t3\n'
        assert (out / SUCCESS_MARKER).exists()

    def test_round_trip(self, tmp_path: Path) -> None:
        out = tmp_path / "result"
        write_output(PAIRS, out)
        assert read_output(out) == dict(PAIRS)

    def test_empty_output_still_marked_complete(self, tmp_path: Path) -> None:
        out = tmp_path / "empty"
        part = write_output([], out)
        assert part.read_text(encoding="utf-8") == ""
        assert (out / SUCCESS_MARKER).exists()

    def test_refuses_existing_directory(self, tmp_path: Path) -> None:
        """A rerun never overwrites an earlier result."""
        with pytest.raises(OutputExistsError):
            write_output(PAIRS, tmp_path)


class TestCheckOutputDir:
    def test_missing_directory_is_accepted(self, tmp_path: Path) -> None:
        out = tmp_path / "new"
        assert check_output_dir(out) == out
        assert not out.exists()

    def test_existing_directory_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(FileExistsError):
            check_output_dir(str(tmp_path))
