"""
Job configuration for the airport type count.

The reference job compiled the country code and field positions in as
constants. Here they live in a JobConfig that is handed to the mapper and
the engines, so the same code runs against any country or schema.
"""

import os
from collections.abc import Mapping
from typing import NamedTuple

from src.airport_counts.errors import ConfigError

# ISO code of Spain, quoted as it appears in the source CSV
SPAIN_CODE = '"ES"'

# Positions (0-indexed) in the airports CSV
AIRPORT_TYPE_POS = 2
COUNTRY_POS = 8

FAIL = "fail"
SKIP = "skip"
MALFORMED_POLICIES = (FAIL, SKIP)

ENV_PREFIX = "AIRPORTS_"
TRUE_WORDS = ("1", "true", "yes", "on")
FALSE_WORDS = ("0", "false", "no", "off")


class JobConfig(NamedTuple):
    """Options recognized by the mapper and both engines."""

    country_code: str = SPAIN_CODE
    field_delimiter: str = ","
    airport_type_field_index: int = AIRPORT_TYPE_POS
    country_field_index: int = COUNTRY_POS
    on_malformed: str = FAIL
    use_combiner: bool = True
    num_partitions: int = 4
    num_reducers: int = 2
    max_attempts: int = 1
    max_workers: int = 1
    output_delimiter: str = "\t"

    @property
    def required_fields(self) -> int:
        """Minimum number of fields a record needs to be mapped."""
        return max(self.airport_type_field_index, self.country_field_index) + 1

    def validate(self) -> "JobConfig":
        """
        Check every option, returning self so calls can be chained.

        Raises:
            ConfigError: If any option is out of range
        """
        if not self.field_delimiter:
            raise ConfigError("field_delimiter must not be empty")
        if self.airport_type_field_index < 0 or self.country_field_index < 0:
            raise ConfigError("field indices must be non-negative")
        if self.on_malformed not in MALFORMED_POLICIES:
            raise ConfigError(
                f"on_malformed must be one of {MALFORMED_POLICIES}, got {self.on_malformed!r}"
            )
        for name in ("num_partitions", "num_reducers", "max_attempts", "max_workers"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1")
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "JobConfig":
        """
        Build a JobConfig from AIRPORTS_* environment variables.

        Unset variables keep their defaults. For example AIRPORTS_COUNTRY_CODE
        overrides country_code and AIRPORTS_USE_COMBINER=false disables the
        combiner.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            A validated JobConfig

        Raises:
            ConfigError: If a value cannot be converted or is out of range
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        for name, default in cls._field_defaults.items():
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            if isinstance(default, bool):
                word = raw.strip().lower()
                if word not in TRUE_WORDS + FALSE_WORDS:
                    raise ConfigError(
                        f"{ENV_PREFIX + name.upper()} must be one of {TRUE_WORDS + FALSE_WORDS}"
                    )
                overrides[name] = word in TRUE_WORDS
            elif isinstance(default, int):
                try:
                    overrides[name] = int(raw)
                except ValueError as exc:
                    raise ConfigError(f"{ENV_PREFIX + name.upper()} must be an integer") from exc
            else:
                overrides[name] = raw

        return cls(**overrides).validate()
