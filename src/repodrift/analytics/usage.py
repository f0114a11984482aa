"""Fingerprint usage statistics: variants, counts and entropy per fingerprint kind."""

import logging
import math
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Iterable, Sequence

from repodrift.models.schemas import Analyzed, FingerprintUsage, RepoId

logger = logging.getLogger(__name__)

ALL_WORKSPACES = "*"

KindKey = tuple[str, str]


def shannon_entropy(counts: Iterable[int]) -> float:
    """Base-2 Shannon entropy of a distribution given as occurrence counts."""
    counts = [c for c in counts if c > 0]
    total = sum(counts)
    if total == 0:
        return 0.0
    entropy = -sum((c / total) * math.log2(c / total) for c in counts)
    return entropy + 0.0  # Normalize -0.0


def percentile_disc(values: Iterable[float], fraction: float) -> float:
    """Discrete percentile, as SQL ``percentile_disc``.

    Returns the first value in sorted order whose cumulative position is at
    least ``fraction`` of the population.

    Raises:
        ValueError: If there are no values or the fraction is outside 0-1.
    """
    ordered = sorted(values)
    if not ordered:
        raise ValueError("Cannot take a percentile of no values")
    if not 0 <= fraction <= 1:
        raise ValueError(f"Percentile fraction must be between 0 and 1, got {fraction}")
    index = max(math.ceil(fraction * len(ordered)) - 1, 0)
    return ordered[index]


def compute_fingerprint_usage(analyses: Sequence[Analyzed]) -> list[FingerprintUsage]:
    """Compute usage statistics for every fingerprint kind in a set of analyses.

    ``variants`` is the number of distinct shas, ``count`` the number of
    repositories carrying the kind and ``entropy`` the Shannon entropy of
    the sha distribution across fingerprint occurrences.

    Args:
        analyses: Repository analyses.

    Returns:
        One entry per (type, name), in first-seen order.
    """
    shas: dict[KindKey, Counter] = {}
    repos: dict[KindKey, set[str]] = {}
    for analysis in analyses:
        for fp in analysis.fingerprints:
            key = (fp.type, fp.name)
            shas.setdefault(key, Counter())[fp.sha] += 1
            repos.setdefault(key, set()).add(analysis.id.full_name)
    return [
        FingerprintUsage(
            type=type,
            name=name,
            variants=len(counter),
            count=len(repos[(type, name)]),
            entropy=shannon_entropy(counter.values()),
        )
        for (type, name), counter in shas.items()
    ]


class FingerprintUsageAggregator(ABC):
    """Supplies workspace fingerprint statistics to drift reporting."""

    @abstractmethod
    async def fingerprint_usage(self, workspace_id: str, type: str | None = None) -> list[FingerprintUsage]:
        """Usage statistics for a workspace, optionally for one fingerprint type."""
        ...

    @abstractmethod
    async def entropy_at_percentile(self, workspace_id: str, percentile: float) -> float:
        """Entropy value at a percentile (0-100) of the workspace's statistics."""
        ...

    @abstractmethod
    async def repos_by_kind(self, workspace_id: str) -> dict[KindKey, list[RepoId]]:
        """Repositories carrying each fingerprint kind."""
        ...


class InMemoryFingerprintUsageAggregator(FingerprintUsageAggregator):
    """Aggregator computing statistics from analyses held in memory.

    The workspace id "*" selects every workspace.
    """

    def __init__(self, analyses: dict[str, list[Analyzed]] | None = None):
        self._analyses: dict[str, list[Analyzed]] = {k: list(v) for k, v in (analyses or {}).items()}

    def add(self, workspace_id: str, analyses: Iterable[Analyzed]) -> None:
        self._analyses.setdefault(workspace_id, []).extend(analyses)

    def analyses_in(self, workspace_id: str) -> list[Analyzed]:
        if workspace_id == ALL_WORKSPACES:
            return [a for analyses in self._analyses.values() for a in analyses]
        return list(self._analyses.get(workspace_id, []))

    async def fingerprint_usage(self, workspace_id: str, type: str | None = None) -> list[FingerprintUsage]:
        usage = compute_fingerprint_usage(self.analyses_in(workspace_id))
        return [u for u in usage if type is None or u.type == type]

    async def entropy_at_percentile(self, workspace_id: str, percentile: float) -> float:
        usage = await self.fingerprint_usage(workspace_id)
        if not usage:
            return 0.0
        return percentile_disc([u.entropy for u in usage], percentile / 100)

    async def repos_by_kind(self, workspace_id: str) -> dict[KindKey, list[RepoId]]:
        result: dict[KindKey, list[RepoId]] = {}
        for analysis in self.analyses_in(workspace_id):
            for key in dict.fromkeys((fp.type, fp.name) for fp in analysis.fingerprints):
                result.setdefault(key, []).append(analysis.id)
        return result
