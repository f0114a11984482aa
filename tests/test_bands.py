"""Tests for banding values into named buckets."""

from __future__ import annotations

import pytest

from repodrift.util.bands import (
    DEFAULT,
    ENTROPY_SIZE_BANDS,
    BandCasing,
    Exactly,
    UpTo,
    band_for,
    entropy_band,
    star_band,
)


def test_bands_are_checked_in_declaration_order() -> None:
    bands = {"tiny": UpTo(10), "small": UpTo(100), "big": DEFAULT}
    assert band_for(bands, 5) == "tiny"
    assert band_for(bands, 10) == "small"
    assert band_for(bands, 1000) == "big"


def test_exactly_matches_only_its_value() -> None:
    assert band_for(ENTROPY_SIZE_BANDS, 0) == "zero"
    assert band_for(ENTROPY_SIZE_BANDS, 0.01) == "low"


def test_sentence_casing_and_number() -> None:
    assert band_for(ENTROPY_SIZE_BANDS, 1.5, casing=BandCasing.SENTENCE) == "Medium"
    assert band_for(ENTROPY_SIZE_BANDS, 1.5, include_number=True) == "medium (1.5)"


def test_no_matching_band_raises() -> None:
    with pytest.raises(ValueError):
        band_for({"one": Exactly(1)}, 2)


def test_entropy_band_names() -> None:
    assert entropy_band(0) == "Zero"
    assert entropy_band(0.9) == "Low"
    assert entropy_band(2) == "High"


def test_star_band_rounds_half_up_to_half_stars() -> None:
    assert star_band(3.24) == "⭐⭐⭐"
    assert star_band(3.25) == "⭐⭐⭐½"
    assert star_band(4.8) == "⭐⭐⭐⭐⭐"
    assert star_band(0.5) == "½"
    assert star_band(0.1) == "-"
