"""Tests for settings loaded from the environment."""

from __future__ import annotations

import pytest

from repodrift.config import ConfigError, Settings


def test_defaults_without_environment() -> None:
    settings = Settings.from_env({})
    assert settings.score_weightings == {"anchor": 3}
    assert settings.dead_days == 365
    assert settings.branch_limit == 5
    assert settings.drift_percentile == 0


def test_values_read_from_environment() -> None:
    settings = Settings.from_env(
        {
            "REPODRIFT_DEAD_DAYS": "90",
            "REPODRIFT_DRIFT_PERCENTILE": "75.5",
            "REPODRIFT_SCORE_WEIGHTINGS": '{"anchor": 2, "has-license": 3}',
            "REPODRIFT_MAX_BRANCHES": "",
            "UNRELATED": "1",
        }
    )
    assert settings.dead_days == 90
    assert settings.drift_percentile == 75.5
    assert settings.score_weightings == {"anchor": 2, "has-license": 3}
    assert settings.max_branches == 20


def test_bad_json_is_a_config_error() -> None:
    with pytest.raises(ConfigError, match="not valid JSON"):
        Settings.from_env({"REPODRIFT_SCORE_WEIGHTINGS": "{anchor"})


@pytest.mark.parametrize(
    "environ",
    [
        {"REPODRIFT_SCORE_WEIGHTINGS": '{"anchor": 4}'},
        {"REPODRIFT_DEAD_DAYS": "soon"},
        {"REPODRIFT_DRIFT_PERCENTILE": "101"},
    ],
)
def test_out_of_range_values_are_config_errors(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        Settings.from_env(environ)


def test_os_environment_used_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPODRIFT_HOT_DAYS", "7")
    assert Settings.from_env().hot_days == 7
