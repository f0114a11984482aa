"""Tests for the weighted composite score."""

from __future__ import annotations

import logging
import math

import pytest

from repodrift.models.schemas import Score
from repodrift.scorers.score import (
    ALWAYS_INCLUDE_CATEGORY,
    adjust_by,
    passes_category_filter,
    weighted_composite_score,
)


def _score(name: str, value: float, category: str | None = None) -> Score:
    return Score(name=name, score=value, category=category)


def test_composite_is_weighted_mean() -> None:
    result = weighted_composite_score([_score("a", 5), _score("b", 2)], {"a": 3})
    assert result.weighted_score == pytest.approx(17 / 4)
    assert result.weighted_scores["a"].weighting == 3
    assert result.weighted_scores["b"].weighting == 1


def test_unweighted_composite_is_plain_mean() -> None:
    result = weighted_composite_score({"a": _score("a", 5), "b": _score("b", 2)})
    assert result.weighted_score == pytest.approx(3.5)


def test_no_scores_is_neutral() -> None:
    result = weighted_composite_score([])
    assert result.weighted_score == 3
    assert result.weighted_scores == {}


def test_invalid_scores_are_skipped_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        result = weighted_composite_score([_score("nan", math.nan), _score("big", 7), _score("ok", 4)])
    assert result.weighted_score == 4
    assert list(result.weighted_scores) == ["ok"]
    assert "nan" in caplog.text


def test_only_invalid_scores_is_neutral() -> None:
    assert weighted_composite_score([_score("nan", math.nan)]).weighted_score == 3


def test_adjust_by_clamps() -> None:
    assert adjust_by(-10) == 1
    assert adjust_by(2) == 5
    assert adjust_by(-1.5) == 3.5
    assert adjust_by(1, start_at=2) == 3


def test_category_filter() -> None:
    code = _score("loc", 3, category="code")
    anchor = _score("anchor", 2, category=ALWAYS_INCLUDE_CATEGORY)
    uncategorized = _score("other", 1)

    assert passes_category_filter(code, "code")
    assert passes_category_filter(anchor, "code")
    assert not passes_category_filter(uncategorized, "code")
    assert not passes_category_filter(code, "community")
    assert passes_category_filter(uncategorized, None)
    assert passes_category_filter(uncategorized, ALWAYS_INCLUDE_CATEGORY)
