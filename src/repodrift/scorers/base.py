"""Scorer definitions."""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from repodrift.models.schemas import ScorerResult, TaggedRepo, WorkspaceToScore

ScoreOutcome = ScorerResult | None
RepositoryScoreFn = Callable[[TaggedRepo], ScoreOutcome | Awaitable[ScoreOutcome]]
WorkspaceScoreFn = Callable[[WorkspaceToScore], ScoreOutcome | Awaitable[ScoreOutcome]]


async def resolve_outcome(score: Callable[..., Any], *args: Any) -> ScoreOutcome:
    """Call a sync or async score function and return its outcome."""
    outcome = score(*args)
    if inspect.isawaitable(outcome):
        return await outcome
    return outcome


@dataclass
class RepositoryScorer:
    """Scores one repository from its fingerprints.

    The score function returns None to abstain. Abstentions do not count
    towards the composite. Score functions may be sync or async and must
    not raise.
    """

    name: str
    score_fingerprints: RepositoryScoreFn
    category: str | None = None
    description: str | None = None
    base_only: bool = False  # Score only root fingerprints when there are virtual projects
    score_all: bool = False  # Always score the whole repository


@dataclass
class WorkspaceScorer:
    """Scores a whole workspace from its scored repositories and usage stats."""

    name: str
    score: WorkspaceScoreFn
    category: str | None = None
    description: str | None = None
