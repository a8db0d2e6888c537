"""
Exception taxonomy for the airport type count job.

Every error raised by the mapper, the aggregation operators or the engines
derives from AirportCountError, and also from the builtin exception a caller
would naturally catch for that condition.
"""


class AirportCountError(Exception):
    """Base class for all airport count errors."""


class ConfigError(AirportCountError, ValueError):
    """A JobConfig value is out of range or inconsistent."""


class MalformedRecordError(AirportCountError, ValueError):
    """A record has too few fields to extract the type and country."""

    def __init__(self, line: str, field_count: int, required: int) -> None:
        self.line = line
        self.field_count = field_count
        self.required = required
        super().__init__(
            f"Malformed record: expected at least {required} fields, "
            f"got {field_count}: {line!r}"
        )


class NonAssociativeOperatorError(AirportCountError, TypeError):
    """A combiner was requested for an operator that is not safe to pre-aggregate."""


class JobFailedError(AirportCountError, RuntimeError):
    """A stage of the job failed; no output was produced."""

    def __init__(self, stage: str, message: str, partition: int | None = None) -> None:
        self.stage = stage
        self.partition = partition
        where = f"{stage} stage" if partition is None else f"{stage} stage, partition {partition}"
        super().__init__(f"Job failed in {where}: {message}")


class OutputExistsError(AirportCountError, FileExistsError):
    """The output directory already exists."""
