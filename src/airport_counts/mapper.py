"""
Record Mapper: filter airports by country and project their type.

Algorithm:
    1. Split the line on the configured field delimiter
    2. Reject records with too few fields (fail or skip, per config)
    3. Compare the country field literally with the target code
    4. Emit (airport_type, 1) for matching records, nothing otherwise

The comparison is plain string equality, quotes included: the airports CSV
stores codes as "ES", so the default target is the quoted string.
"""

from collections.abc import Iterable, Iterator

from src.airport_counts.config import SKIP, JobConfig
from src.airport_counts.errors import MalformedRecordError

ONE = 1


class AirportTypeMapper:
    """Maps one airport line to zero or one (type, 1) pair."""

    def __init__(self, config: JobConfig | None = None) -> None:
        self.config = (config or JobConfig()).validate()

    def parse(self, line: str) -> list[str] | None:
        """
        Split a line into fields.

        Args:
            line: A raw airport record

        Returns:
            The list of fields, or None if the record is malformed and the
            policy is to skip it

        Raises:
            MalformedRecordError: If the record is malformed and the policy
                is to fail
        """
        fields = line.rstrip("\r\n").split(self.config.field_delimiter)
        if len(fields) < self.config.required_fields:
            if self.config.on_malformed == SKIP:
                return None
            raise MalformedRecordError(line, len(fields), self.config.required_fields)
        return fields

    def matches(self, fields: list[str]) -> bool:
        """Whether the record belongs to the target country."""
        return fields[self.config.country_field_index] == self.config.country_code

    def emit(self, fields: list[str]) -> list[tuple[str, int]]:
        """Project an already parsed record to its (type, 1) pair, if it matches."""
        if not self.matches(fields):
            return []
        return [(fields[self.config.airport_type_field_index], ONE)]

    def map(self, line: str) -> list[tuple[str, int]]:
        """
        Emit (airport_type, 1) if the record is in the target country.

        Returns a list (empty or single pair) so it can be passed straight
        to flatMap().
        """
        fields = self.parse(line)
        if fields is None:
            return []
        return self.emit(fields)

    def map_partition(self, lines: Iterable[str]) -> Iterator[tuple[str, int]]:
        """Map every line of a partition, yielding the emitted pairs."""
        for line in lines:
            yield from self.map(line)

    def __call__(self, line: str) -> list[tuple[str, int]]:
        return self.map(line)
