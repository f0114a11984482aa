"""Settings loaded from REPODRIFT_* environment variables."""

import json
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from repodrift.scorers.score import VALID_WEIGHTINGS

ENV_PREFIX = "REPODRIFT_"


class ConfigError(RuntimeError):
    """Raised when the environment holds an unusable setting."""


class Settings(BaseModel):
    """Tuning for the default scorers and taggers."""

    score_weightings: dict[str, int] = Field(default_factory=lambda: {"anchor": 3})
    dead_days: int = Field(default=365, gt=0)
    max_branches: int = Field(default=20, gt=0)
    hot_days: int = Field(default=3, gt=0)
    hot_contributors: int = Field(default=3, gt=0)
    min_average_aspect_fraction: float = Field(default=0.75, ge=0, le=1)
    drift_percentile: float = Field(default=0, ge=0, le=100)
    lines_of_code_limit: int = Field(default=30000, gt=0)
    branch_limit: int = Field(default=5, gt=0)

    @field_validator("score_weightings")
    @classmethod
    def _check_weightings(cls, value: dict[str, int]) -> dict[str, int]:
        bad = {name: w for name, w in value.items() if w not in VALID_WEIGHTINGS}
        if bad:
            raise ValueError(f"Weightings must be one of {VALID_WEIGHTINGS}, got {bad}")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from the environment.

        Each field is read from ``REPODRIFT_<FIELD>``; score weightings are
        JSON, e.g. ``REPODRIFT_SCORE_WEIGHTINGS='{"anchor": 3}'``.

        Args:
            environ: Variables to read, ``os.environ`` by default.

        Returns:
            The settings, defaulted where a variable is unset.

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for field in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{field.upper()}")
            if raw is None or raw == "":
                continue
            if field == "score_weightings":
                try:
                    values[field] = json.loads(raw)
                except json.JSONDecodeError as e:
                    raise ConfigError(f"{ENV_PREFIX}SCORE_WEIGHTINGS is not valid JSON: {e}") from e
            else:
                values[field] = raw
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid repodrift settings: {e}") from e
