"""Taggers that correlate several fingerprints of one repository."""

from collections.abc import Sequence
from dataclasses import dataclass

from repodrift.aspects.fingerprints import (
    GIT_ACTIVES_TYPE,
    GIT_RECENCY_TYPE,
    count_of,
    days_since,
    find_fingerprint,
    last_commit_time,
)
from repodrift.models.schemas import Fingerprint, RepoId, Severity
from repodrift.taggers.base import CombinationTagger, TagContext


@dataclass
class CombinationTaggerParams:
    """Thresholds for the stock combination taggers."""

    min_average_aspect_count_fraction_to_expect: float = 0.75
    hot_days: int = 3
    hot_contributors: int = 3


def git_hot(hot_days: int, hot_contributors: int, name: str = "hot") -> CombinationTagger:
    """Tag repositories with recent commits by many contributors."""

    def test(fingerprints: Sequence[Fingerprint], repo_id: RepoId, context: TagContext) -> bool:
        grt = find_fingerprint(fingerprints, GIT_RECENCY_TYPE)
        actives = find_fingerprint(fingerprints, GIT_ACTIVES_TYPE)
        if grt is None or actives is None:
            return False
        when = last_commit_time(grt)
        return when is not None and days_since(when) < hot_days and count_of(actives) > hot_contributors

    return CombinationTagger(name=name, description="How hot is git", test=test)


def not_understood(min_fraction: float) -> CombinationTagger:
    """Tag repositories showing noticeably fewer aspects than the batch average."""

    def test(fingerprints: Sequence[Fingerprint], repo_id: RepoId, context: TagContext) -> bool:
        distinct_types = len({fp.type for fp in fingerprints})
        return distinct_types < context.average_fingerprint_count * min_fraction

    return CombinationTagger(
        name="not understood",
        description="You may want to write aspects for these outlier projects",
        severity=Severity.WARN,
        test=test,
    )


def combination_taggers(params: CombinationTaggerParams | None = None) -> list[CombinationTagger]:
    params = params or CombinationTaggerParams()
    return [
        not_understood(params.min_average_aspect_count_fraction_to_expect),
        git_hot(hot_days=params.hot_days, hot_contributors=params.hot_contributors),
    ]
