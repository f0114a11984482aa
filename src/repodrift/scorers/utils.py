"""Combinators for building repository scorers."""

from collections.abc import Callable
from dataclasses import replace

from repodrift.models.schemas import Fingerprint, ScorerResult, TaggedRepo
from repodrift.scorers.base import RepositoryScorer, ScoreOutcome, resolve_outcome


def make_conditional(scorer: RepositoryScorer, test: Callable[[TaggedRepo], bool]) -> RepositoryScorer:
    """Reuse a scorer, abstaining for repositories that fail the test."""

    async def score_fingerprints(repo: TaggedRepo) -> ScoreOutcome:
        if not test(repo):
            return None
        return await resolve_outcome(scorer.score_fingerprints, repo)

    return replace(scorer, score_fingerprints=score_fingerprints)


def score_on_fingerprint_presence(
    name: str,
    reason: str,
    test: Callable[[Fingerprint], bool],
    score_when_present: float | None = None,
    score_when_absent: float | None = None,
) -> RepositoryScorer:
    """Score by whether any fingerprint passes the test.

    Abstains when no score is configured for the observed case.
    """

    def score_fingerprints(repo: TaggedRepo) -> ScoreOutcome:
        found = any(test(fp) for fp in repo.fingerprints)
        if found and score_when_present is not None:
            return ScorerResult(score=score_when_present, reason=f"{reason} - present")
        if not found and score_when_absent is not None:
            return ScorerResult(score=score_when_absent, reason=f"{reason} - absent")
        return None

    return RepositoryScorer(name=name, score_fingerprints=score_fingerprints)


def is_scored_fingerprint(fp: Fingerprint) -> bool:
    return isinstance(fp.data, dict) and fp.data.get("weighted_score") is not None


def expose_fingerprint_score(name: str) -> RepositoryScorer:
    """Expose a previously computed score fingerprint of type ``name`` as a score."""

    def score_fingerprints(repo: TaggedRepo) -> ScoreOutcome:
        found = next(
            (fp for fp in repo.fingerprints if fp.type == name and is_scored_fingerprint(fp)),
            None,
        )
        if found is None:
            return None
        parts = ", ".join(f"{k}={v['score']}" for k, v in found.data.get("weighted_scores", {}).items())
        return ScorerResult(score=found.data["weighted_score"], reason=parts or None)

    return RepositoryScorer(name=name, score_fingerprints=score_fingerprints)
