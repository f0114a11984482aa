"""Map continuous values to named, human-readable bands."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Exactly:
    """Matches a single value."""

    value: float


@dataclass(frozen=True)
class UpTo:
    """Matches values strictly below the limit."""

    limit: float


@dataclass(frozen=True)
class Default:
    """Matches anything. Should be the last band."""


Band = Exactly | UpTo | Default

DEFAULT = Default()


class BandCasing(str, Enum):
    """Casing applied to a band name."""

    NO_CHANGE = "no_change"
    SENTENCE = "sentence"


def _matches(band: Band, value: float) -> bool:
    if isinstance(band, Exactly):
        return value == band.value
    if isinstance(band, UpTo):
        return value < band.limit
    return True


def band_for(
    bands: Mapping[str, Band],
    value: float,
    casing: BandCasing = BandCasing.NO_CHANGE,
    include_number: bool = False,
) -> str:
    """Find the first band, in declaration order, that a value falls into.

    Args:
        bands: Band names to band definitions.
        value: Value to classify.
        casing: Casing to apply to the band name.
        include_number: Whether to append the value in parentheses.

    Returns:
        Band name.

    Raises:
        ValueError: If no band matches and no default band is declared.
    """
    for name, band in bands.items():
        if _matches(band, value):
            label = name[:1].upper() + name[1:] if casing == BandCasing.SENTENCE else name
            return f"{label} ({value})" if include_number else label
    raise ValueError(f"No band matches {value} and no default band is declared")


ENTROPY_SIZE_BANDS: dict[str, Band] = {
    "zero": Exactly(0),
    "low": UpTo(1),
    "medium": UpTo(2),
    "high": DEFAULT,
}

STAR_BANDS: dict[str, Band] = {
    "½": Exactly(0.5),
    "⭐": Exactly(1),
    "⭐½": Exactly(1.5),
    "⭐⭐": Exactly(2),
    "⭐⭐½": Exactly(2.5),
    "⭐⭐⭐": Exactly(3),
    "⭐⭐⭐½": Exactly(3.5),
    "⭐⭐⭐⭐": Exactly(4),
    "⭐⭐⭐⭐½": Exactly(4.5),
    "⭐⭐⭐⭐⭐": DEFAULT,
}


def entropy_band(entropy: float) -> str:
    """Name the band an entropy value falls into, e.g. "Medium"."""
    return band_for(ENTROPY_SIZE_BANDS, entropy, casing=BandCasing.SENTENCE)


def star_band(score: float) -> str:
    """Render a 0-5 score as stars, rounded half up to the nearest half star."""
    rounded = math.floor(score * 2 + 0.5) / 2
    if rounded <= 0:
        return "-"
    return band_for(STAR_BANDS, rounded)
