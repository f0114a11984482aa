"""Scoring engine: run scorers over repositories and workspaces."""

import asyncio
import logging
from collections.abc import Mapping, Sequence

from repodrift.aspects.fingerprints import distinct_non_root_paths, fingerprint_sha
from repodrift.models.schemas import (
    Analyzed,
    Fingerprint,
    Score,
    ScoredRepo,
    TagAndScoreOptions,
    TaggedRepo,
    WeightedScore,
    WorkspaceToScore,
)
from repodrift.scorers.base import RepositoryScorer, WorkspaceScorer, resolve_outcome
from repodrift.scorers.score import passes_category_filter, weighted_composite_score

logger = logging.getLogger(__name__)


async def fingerprint_scores_for(scorers: Sequence[RepositoryScorer], repo: TaggedRepo) -> dict[str, Score]:
    """Run every scorer against a repository, concurrently where scorers are async.

    Args:
        scorers: Scorers to run.
        repo: Repository to score.

    Returns:
        Scores keyed by scorer name, in scorer order. Abstaining scorers
        are left out.
    """
    results = await asyncio.gather(*(resolve_outcome(s.score_fingerprints, repo) for s in scorers))
    scores: dict[str, Score] = {}
    for scorer, result in zip(scorers, results):
        if result is None:
            continue
        scores[scorer.name] = Score(
            name=scorer.name,
            category=scorer.category,
            reason=result.reason,
            score=result.score,
        )
    return scores


async def score_repository(
    scorers: Sequence[RepositoryScorer],
    repo: TaggedRepo,
    weightings: Mapping[str, int] | None = None,
    options: TagAndScoreOptions | None = None,
) -> ScoredRepo:
    """Score one repository, keeping only scores in the requested category."""
    category = options.category if options else None
    scores = await fingerprint_scores_for(scorers, repo)
    kept = [s for s in scores.values() if passes_category_filter(s, category)]
    return ScoredRepo(
        analysis=repo.analysis,
        tags=repo.tags,
        weighted_score=weighted_composite_score(kept, weightings),
    )


async def score_repositories(
    scorers: Sequence[RepositoryScorer],
    repos: Sequence[TaggedRepo],
    weightings: Mapping[str, int] | None = None,
    options: TagAndScoreOptions | None = None,
) -> list[ScoredRepo]:
    """Score repositories independently. Output order matches input order."""
    return list(
        await asyncio.gather(*(score_repository(scorers, repo, weightings, options) for repo in repos))
    )


async def score_workspace(
    scorers: Sequence[WorkspaceScorer],
    workspace: WorkspaceToScore,
    weightings: Mapping[str, int] | None = None,
) -> WeightedScore:
    """Score a workspace with the same weighting formula used for repositories."""
    results = await asyncio.gather(*(resolve_outcome(s.score, workspace) for s in scorers))
    scores = [
        Score(name=scorer.name, category=scorer.category, reason=result.reason, score=result.score)
        for scorer, result in zip(scorers, results)
        if result is not None
    ]
    return weighted_composite_score(scores, weightings)


def _only_under_path(analyzed: Analyzed, paths: Sequence[str | None]) -> TaggedRepo:
    return TaggedRepo(
        analysis=Analyzed(
            id=analyzed.id.model_copy(update={"path": paths[0]}),
            fingerprints=[fp for fp in analyzed.fingerprints if fp.path in paths],
        )
    )


def _score_fingerprint(type: str, weighted_score: WeightedScore, path: str | None = None) -> Fingerprint:
    return Fingerprint(
        type=type,
        name=type,
        sha=fingerprint_sha(weighted_score.weighted_score),
        data=weighted_score.model_dump(),
        path=path,
    )


async def score_base_and_virtual_projects(
    type: str,
    scorers: Sequence[RepositoryScorer],
    analyzed: Analyzed,
    weightings: Mapping[str, int] | None = None,
) -> list[Fingerprint]:
    """Score each virtual project of a repository, then the repository itself.

    Each virtual project is scored over its own fingerprints by scorers that
    are neither ``base_only`` nor ``score_all``. The root is scored by
    ``base_only`` scorers when virtual projects exist (otherwise by every
    scorer), ``score_all`` scorers see every fingerprint, and each virtual
    project's composite is rolled up into the root score.

    Args:
        type: Fingerprint type to emit the scores as.
        scorers: Repository scorers.
        analyzed: Repository to score.
        weightings: Weighting per scorer name.

    Returns:
        One score fingerprint per virtual project followed by the root one.
    """
    paths = distinct_non_root_paths(analyzed.fingerprints)
    logger.info(f"Distinct non root paths for {analyzed.id.full_name} are {paths}")

    emitted: list[Fingerprint] = []
    path_scorers = [s for s in scorers if not (s.base_only or s.score_all)]
    for path in paths:
        scores = await fingerprint_scores_for(path_scorers, _only_under_path(analyzed, [path]))
        emitted.append(_score_fingerprint(type, weighted_composite_score(scores, weightings), path))

    base_scorers = [s for s in scorers if s.base_only] if paths else [s for s in scorers if not s.score_all]
    scores = await fingerprint_scores_for(base_scorers, _only_under_path(analyzed, [None, "", "."]))
    scores.update(
        await fingerprint_scores_for([s for s in scorers if s.score_all], TaggedRepo(analysis=analyzed))
    )
    for fp in emitted:
        rollup = f"{fp.path}_{fp.name}"
        scores[rollup] = Score(name=rollup, score=fp.data["weighted_score"])
    emitted.append(_score_fingerprint(type, weighted_composite_score(scores, weightings)))
    return emitted
