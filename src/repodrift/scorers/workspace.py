"""Stock workspace scorers."""

from statistics import mean

from repodrift.models.schemas import ScorerResult, WorkspaceToScore
from repodrift.scorers.base import WorkspaceScorer


def _repo_scores(workspace: WorkspaceToScore) -> list[float]:
    return [r.weighted_score.weighted_score for r in workspace.repos]


def _average(workspace: WorkspaceToScore) -> ScorerResult | None:
    scores = _repo_scores(workspace)
    if not scores:
        return None
    return ScorerResult(score=mean(scores), reason="mean of all scores")


def _worst(workspace: WorkspaceToScore) -> ScorerResult | None:
    scores = _repo_scores(workspace)
    if not scores:
        return None
    return ScorerResult(score=min(scores), reason="score of lowest scored repository")


def entropy_to_score(entropy: float) -> int:
    """Map an entropy value to stars: the more drift, the fewer stars."""
    if entropy > 3:
        return 1
    if entropy > 2:
        return 2
    if entropy > 1:
        return 3
    if entropy > 0.5:
        return 4
    return 5


def _entropy(workspace: WorkspaceToScore) -> ScorerResult | None:
    if not workspace.fingerprint_usage:
        return None
    return ScorerResult(
        score=mean(entropy_to_score(f.entropy) for f in workspace.fingerprint_usage),
        reason="variance among aspects identified in this workspace",
    )


AVERAGE_REPO_SCORE = WorkspaceScorer(name="average", description="Average score for repositories", score=_average)

WORST_REPO_SCORE = WorkspaceScorer(name="worst", description="Worst repository", score=_worst)

ENTROPY_SCORE = WorkspaceScorer(name="entropy", description="Entropy across workspace", score=_entropy)
