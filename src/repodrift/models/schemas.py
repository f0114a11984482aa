"""Pydantic models for fingerprints, tags and scores."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from repodrift.util.bands import entropy_band


class Severity(str, Enum):
    """How much attention a tag or problem deserves."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class Fingerprint(BaseModel):
    """An immutable, content-hashed fact about a repository or virtual project.

    ``type`` names the aspect that produced the fingerprint, ``name``
    distinguishes several fingerprints of one type (e.g. one per dependency)
    and ``sha`` is the content hash used for equality and ideal comparison.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    sha: str
    data: Any = None
    path: str | None = None  # Set only for fingerprints of a virtual project


class RepoId(BaseModel):
    """Identity of an analyzed repository."""

    owner: str
    name: str
    url: str | None = None
    sha: str | None = None
    path: str | None = None

    @property
    def full_name(self) -> str:
        """Get owner/name."""
        return f"{self.owner}/{self.name}"


class Analyzed(BaseModel):
    """A repository identity plus every fingerprint extracted from it."""

    id: RepoId
    fingerprints: list[Fingerprint] = Field(default_factory=list)


class Tag(BaseModel):
    """A derived label attached to a repository."""

    name: str
    description: str | None = None
    severity: Severity | None = None
    parent: str | None = None


class ScorerResult(BaseModel):
    """What a scorer returns when it has an opinion."""

    score: float
    reason: str | None = None


class Score(BaseModel):
    """A named score, usually 1-5."""

    name: str
    category: str | None = None
    reason: str | None = None
    score: float


class WeightedScoreEntry(Score):
    """A score with the weighting it contributed with."""

    weighting: int = 1


class WeightedScore(BaseModel):
    """Composite of several weighted scores."""

    weighted_score: float
    weighted_scores: dict[str, WeightedScoreEntry] = Field(default_factory=dict)


class TaggedRepo(BaseModel):
    """A repository analysis with the tags derived from it."""

    analysis: Analyzed
    tags: list[Tag] = Field(default_factory=list)

    @property
    def id(self) -> RepoId:
        return self.analysis.id

    @property
    def fingerprints(self) -> list[Fingerprint]:
        return self.analysis.fingerprints


class ScoredRepo(TaggedRepo):
    """A tagged repository with its composite score."""

    weighted_score: WeightedScore


class TagAndScoreOptions(BaseModel):
    """Options for a tag and score run."""

    category: str | None = None


class FingerprintUsage(BaseModel):
    """Workspace-wide statistics for one fingerprint kind."""

    type: str
    name: str
    variants: int = Field(ge=0)
    count: int = Field(ge=0)
    entropy: float = Field(ge=0)

    @property
    def entropy_band(self) -> str:
        return entropy_band(self.entropy)


class WorkspaceToScore(BaseModel):
    """Everything a workspace scorer can look at."""

    repos: list[ScoredRepo] = Field(default_factory=list)
    fingerprint_usage: list[FingerprintUsage] = Field(default_factory=list)


class ProblemUsage(BaseModel):
    """A fingerprint value flagged as undesirable by some authority."""

    severity: Severity
    authority: str
    description: str | None = None
    url: str | None = None
    fingerprint: Fingerprint


class Ideal(BaseModel):
    """The desired state for a fingerprint kind within a workspace.

    A missing ``fingerprint`` means the ideal is to eliminate the kind.
    """

    type: str
    name: str
    fingerprint: Fingerprint | None = None
    reason: str | None = None
