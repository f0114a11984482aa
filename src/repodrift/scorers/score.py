"""Weighted composite scoring."""

import logging
import math
from collections.abc import Iterable, Mapping

from repodrift.models.schemas import Score, WeightedScore, WeightedScoreEntry

logger = logging.getLogger(__name__)

# Scores in this category survive any category filter
ALWAYS_INCLUDE_CATEGORY = "*"

COMMUNITY_CATEGORY = "community"
CODE_CATEGORY = "code"

NEUTRAL_SCORE = 3.0
MIN_SCORE = 0.0
MAX_SCORE = 5.0

VALID_WEIGHTINGS = (1, 2, 3)


def is_valid_score(value: float) -> bool:
    """Check a score is a finite number in the 0-5 range."""
    return isinstance(value, (int, float)) and math.isfinite(value) and MIN_SCORE <= value <= MAX_SCORE


def weighted_composite_score(
    scores: Iterable[Score] | Mapping[str, Score],
    weightings: Mapping[str, int] | None = None,
) -> WeightedScore:
    """Combine named scores into one weighted 0-5 score.

    The composite is sum(score * weighting) / sum(weighting). Weightings
    default to 1 for scorers not named in ``weightings``. Invalid scores
    (NaN, infinite or out of range) are logged and skipped, as if the
    scorer had abstained. With nothing to combine the result is a neutral 3.

    Args:
        scores: Scores to combine, or a mapping of name to score.
        weightings: Weighting per scorer name.

    Returns:
        WeightedScore with the composite and each contributing score.
    """
    weightings = weightings or {}
    if isinstance(scores, Mapping):
        scores = scores.values()

    weighted_scores: dict[str, WeightedScoreEntry] = {}
    composite = 0.0
    divide_by = 0
    for score in scores:
        if not is_valid_score(score.score):
            logger.error(f"Invalid score {score.score!r} from scorer '{score.name}', ignoring it")
            continue
        weighting = weightings.get(score.name) or 1
        weighted_scores[score.name] = WeightedScoreEntry(**score.model_dump(), weighting=weighting)
        composite += score.score * weighting
        divide_by += weighting

    if divide_by == 0:
        return WeightedScore(weighted_score=NEUTRAL_SCORE, weighted_scores={})
    return WeightedScore(weighted_score=composite / divide_by, weighted_scores=weighted_scores)


def adjust_by(merits: float, start_at: float = 5) -> float:
    """Adjust a starting score by merits (negative to penalize), clamped to 1-5."""
    return min(max(start_at + merits, 1), 5)


def passes_category_filter(score: Score, category: str | None) -> bool:
    """Whether a score survives filtering to the requested category."""
    if not category or category == ALWAYS_INCLUDE_CATEGORY:
        return True
    return score.category in (category, ALWAYS_INCLUDE_CATEGORY)
