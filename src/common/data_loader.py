"""
Common data loading utilities.

This module provides functions to locate the bundled sample data and to
read raw record lines for the local engine.
"""

from collections.abc import Iterator
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Bundled sample data
DATA_DIR = PROJECT_ROOT / "src" / "airport_counts" / "data"


def get_data_path(filename: str = "airports.csv") -> Path:
    """
    Get the full path to a bundled data file.

    Args:
        filename: Data file name (default: "airports.csv")

    Returns:
        Full path to the data file
    """
    return DATA_DIR / filename


def resolve_path(path: str | Path) -> Path:
    """Resolve a path relative to the project root if it is not absolute."""
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = PROJECT_ROOT / resolved
    return resolved


def iter_lines(path: str | Path) -> Iterator[str]:
    """
    Yield the lines of a text file without their line terminators.

    Lines are yielded verbatim otherwise: no quoting rules are applied and
    blank lines are kept, matching a line-oriented text input format.

    Args:
        path: Path to the file (absolute or relative to project root)
    """
    with resolve_path(path).open("r", encoding="utf-8") as f:
        for line in f:
            yield line.rstrip("\r\n")


def read_lines(path: str | Path) -> list[str]:
    """Read every line of a text file into a list (see iter_lines)."""
    return list(iter_lines(path))
