"""Data models for repodrift."""

from repodrift.models.schemas import (
    Analyzed,
    Fingerprint,
    FingerprintUsage,
    Ideal,
    ProblemUsage,
    RepoId,
    Score,
    ScoredRepo,
    ScorerResult,
    Severity,
    Tag,
    TagAndScoreOptions,
    TaggedRepo,
    WeightedScore,
    WeightedScoreEntry,
    WorkspaceToScore,
)

__all__ = [
    "Analyzed",
    "Fingerprint",
    "FingerprintUsage",
    "Ideal",
    "ProblemUsage",
    "RepoId",
    "Score",
    "ScoredRepo",
    "ScorerResult",
    "Severity",
    "Tag",
    "TagAndScoreOptions",
    "TaggedRepo",
    "WeightedScore",
    "WeightedScoreEntry",
    "WorkspaceToScore",
]
