"""Tests for the command line interface."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from repodrift.cli import app
from repodrift.models.schemas import Analyzed, ProblemUsage, Severity
from tests._fixtures.builders import fp

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("REPODRIFT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def analyses_file(tmp_path: Path, workspace_analyses: list[Analyzed]) -> Path:
    path = tmp_path / "analyses.json"
    path.write_text(json.dumps([a.model_dump(mode="json") for a in workspace_analyses]))
    return path


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "repodrift v0.1.0" in result.stdout


def test_score_prints_and_saves(analyses_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "scores.json"

    result = runner.invoke(app, ["score", str(analyses_file), "--workspace", "ws1", "--output", str(output)])

    assert result.exit_code == 0, result.stdout
    assert "Scores for 4 repositories in ws1" in result.stdout
    assert "alpha" in result.stdout
    saved = json.loads(output.read_text())
    assert [r["analysis"]["id"]["name"] for r in saved] == ["alpha", "beta", "gamma", "delta"]
    assert all(1 <= r["weighted_score"]["weighted_score"] <= 5 for r in saved)


def test_score_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["score", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "Cannot read" in result.stdout


def test_score_malformed_file(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('[{"fingerprints": []}]')
    result = runner.invoke(app, ["score", str(path)])
    assert result.exit_code == 1
    assert "Invalid analyses" in result.stdout


def test_score_rejects_bad_settings(analyses_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPODRIFT_SCORE_WEIGHTINGS", '{"anchor": 9}')
    result = runner.invoke(app, ["score", str(analyses_file)])
    assert result.exit_code == 1


def test_drift(analyses_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "drift.json"

    result = runner.invoke(app, ["drift", str(analyses_file), "--percentile", "50", "--output", str(output)])

    assert result.exit_code == 0, result.stdout
    assert "License" in result.stdout
    assert "docker-base" in result.stdout
    assert "exposed-secret" not in result.stdout
    saved = json.loads(output.read_text())
    assert saved["tree"]["name"] == "drift"


def test_drift_rejects_bad_percentile(analyses_file: Path) -> None:
    result = runner.invoke(app, ["drift", str(analyses_file), "--percentile", "150"])
    assert result.exit_code == 1
    assert "Percentile" in result.stdout


def test_tags_with_selection(analyses_file: Path) -> None:
    result = runner.invoke(app, ["tags", str(analyses_file), "--tag", "vulnerable", "--tag", "!code-of-conduct"])

    assert result.exit_code == 0, result.stdout
    assert "vulnerable and not code-of-conduct: 1 of 4 repositories" in result.stdout
    assert "license" in result.stdout


def test_tags_with_problems(analyses_file: Path, tmp_path: Path) -> None:
    problem = ProblemUsage(
        severity=Severity.WARN,
        authority="platform team",
        fingerprint=fp("docker-base", "node:12", name="node"),
    )
    problems_file = tmp_path / "problems.json"
    problems_file.write_text(json.dumps([problem.model_dump(mode="json")]))

    result = runner.invoke(
        app,
        ["tags", str(analyses_file), "--workspace", "ws1", "--problems", str(problems_file), "--tag", "problems"],
    )

    assert result.exit_code == 0, result.stdout
    assert "problems: 2 of 4 repositories" in result.stdout
