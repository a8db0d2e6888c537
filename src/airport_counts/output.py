"""
Text output for (airport_type, total) pairs.

Output directories follow the Hadoop text output layout: a part-00000 file
of key<TAB>value lines plus an empty _SUCCESS marker written last, so a
reader never mistakes a half-written directory for a finished job.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from src.airport_counts.errors import OutputExistsError

logger = logging.getLogger(__name__)

PART_FILE = "part-00000"
SUCCESS_MARKER = "_SUCCESS"


def format_pairs(pairs: Iterable[tuple[str, int]], delimiter: str = "\t") -> Iterator[str]:
    """Render each pair as a 'key<delimiter>total' line (no newline)."""
    for key, total in pairs:
        yield f"{key}{delimiter}{total}"


def check_output_dir(output_dir: str | Path) -> Path:
    """
    Fail before any work is done if output_dir is already there.

    Raises:
        OutputExistsError: If output_dir already exists
    """
    out = Path(output_dir)
    if out.exists():
        raise OutputExistsError(f"Output directory already exists: {out}")
    return out


def write_output(
    pairs: Iterable[tuple[str, int]],
    output_dir: str | Path,
    delimiter: str = "\t",
) -> Path:
    """
    Write pairs to output_dir/part-00000 and mark the directory complete.

    Args:
        pairs: Final (key, total) pairs
        output_dir: Directory to create; must not exist yet
        delimiter: Separator between key and total

    Returns:
        Path of the part file

    Raises:
        OutputExistsError: If output_dir already exists
    """
    out = check_output_dir(output_dir)
    out.mkdir(parents=True)

    part = out / PART_FILE
    with part.open("w", encoding="utf-8") as f:
        for line in format_pairs(pairs, delimiter):
            f.write(line + "\n")

    (out / SUCCESS_MARKER).touch()
    logger.info("Wrote output to %s", part)
    return part


def read_output(output_dir: str | Path, delimiter: str = "\t") -> dict[str, int]:
    """Read back a directory written by write_output()."""
    out = Path(output_dir)
    result: dict[str, int] = {}
    with (out / PART_FILE).open("r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                key, total = line.rstrip("\n").rsplit(delimiter, 1)
                result[key] = int(total)
    return result
