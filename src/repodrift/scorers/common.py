"""Stock repository scorers."""

from typing import Any

from repodrift.aspects.fingerprints import (
    BRANCH_COUNT_TYPE,
    CODE_OF_CONDUCT_TYPE,
    GIT_RECENCY_TYPE,
    count_glob_matches,
    count_of,
    days_since,
    distinct_non_root_paths,
    find_fingerprint,
    find_review_comment_count_fingerprint,
    fingerprint_sha,
    glob_matches,
    has_no_license,
    is_code_metrics_fingerprint,
    is_glob_match_fingerprint,
    is_license_fingerprint,
    language_names,
    last_commit_time,
    lines_in_language,
)
from repodrift.models.schemas import ScorerResult, Severity, TaggedRepo
from repodrift.scorers.base import RepositoryScorer
from repodrift.scorers.score import (
    ALWAYS_INCLUDE_CATEGORY,
    CODE_CATEGORY,
    COMMUNITY_CATEGORY,
    adjust_by,
)


def anchor_score_at(score: float) -> RepositoryScorer:
    """Anchor scores so that repositories we know little about are penalized.

    Typically weighted above the default.
    """
    return RepositoryScorer(
        name="anchor",
        category=ALWAYS_INCLUDE_CATEGORY,
        score_fingerprints=lambda repo: ScorerResult(
            score=score,
            reason=f"Weight to {score} stars to penalize repositories about which we know little",
        ),
    )


def require_recent_commit(days: int) -> RepositoryScorer:
    """Lose one star for each ``days`` days since the last commit."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult | None:
        grt = find_fingerprint(repo.fingerprints, GIT_RECENCY_TYPE)
        when = last_commit_time(grt) if grt else None
        if when is None:
            return None
        since = days_since(when)
        return ScorerResult(score=adjust_by((1 - since) / (days or 1)), reason=f"Last commit {since} days ago")

    return RepositoryScorer(name="recency", score_fingerprints=score_fingerprints, base_only=True)


def _code_metrics(repo: TaggedRepo):
    return next((fp for fp in repo.fingerprints if is_code_metrics_fingerprint(fp)), None)


def limit_languages(limit: int, base_only: bool = False) -> RepositoryScorer:
    """Lose a star for each language beyond the limit."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult | None:
        cm = _code_metrics(repo)
        if cm is None:
            return None
        languages = language_names(cm)
        return ScorerResult(
            score=adjust_by(limit - len(languages)),
            reason=f"Found {len(languages)} languages: {','.join(languages)}",
        )

    return RepositoryScorer(name="multi-language", score_fingerprints=score_fingerprints, base_only=base_only)


def limit_lines_of_code(limit: int, base_only: bool = False) -> RepositoryScorer:
    """Lose a star for every ``limit`` lines of code."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult | None:
        cm = _code_metrics(repo)
        if cm is None:
            return None
        lines = cm.data.get("lines", 0)
        return ScorerResult(score=adjust_by(-lines / limit), reason=f"Found {lines} total lines of code")

    return RepositoryScorer(
        name="total-loc",
        category=CODE_CATEGORY,
        score_fingerprints=score_fingerprints,
        base_only=base_only,
    )


def limit_lines_of_code_in(language: str, limit: int, free_amount: int = 0) -> RepositoryScorer:
    """Lose a star for every ``limit`` lines in one language beyond a free amount."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult | None:
        cm = _code_metrics(repo)
        if cm is None:
            return None
        target = lines_in_language(cm, language)
        return ScorerResult(
            score=adjust_by((free_amount - target) / limit),
            reason=f"Found {target} lines of {language}",
        )

    return RepositoryScorer(name=f"limit-{language} ({limit})", score_fingerprints=score_fingerprints)


def penalize_for_excessive_branches(branch_limit: int) -> RepositoryScorer:
    """Penalize git branches beyond the first two."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult | None:
        fp = find_fingerprint(repo.fingerprints, BRANCH_COUNT_TYPE)
        if fp is None:
            return None
        count = count_of(fp)
        return ScorerResult(
            score=adjust_by(-(count - 2) / branch_limit),
            reason=f"{count} branches: Should not have more than {branch_limit}",
        )

    return RepositoryScorer(name=BRANCH_COUNT_TYPE, score_fingerprints=score_fingerprints, base_only=True)


def _score_monorepo(repo: TaggedRepo) -> ScorerResult:
    distinct = 1 + len(distinct_non_root_paths(repo.fingerprints))
    return ScorerResult(
        score=adjust_by(1 - distinct / 2),
        reason=(
            f"{distinct} virtual projects: Prefer one project per repository"
            if distinct > 1
            else "Single project in repository"
        ),
    )


PENALIZE_MONOREPOS = RepositoryScorer(name="monorepo", score_fingerprints=_score_monorepo, score_all=True)


def _score_license(repo: TaggedRepo) -> ScorerResult:
    found = next((fp for fp in repo.fingerprints if is_license_fingerprint(fp)), None)
    bad = found is None or has_no_license(found.data)
    return ScorerResult(
        score=1 if bad else 5,
        reason="Repositories should have a license" if bad else "Repository has a license",
    )


PENALIZE_NO_LICENSE = RepositoryScorer(
    name="require-license",
    category=COMMUNITY_CATEGORY,
    base_only=True,
    score_fingerprints=_score_license,
)


def _score_tags(repo: TaggedRepo) -> ScorerResult:
    errors = [t.name for t in repo.tags if t.severity == Severity.ERROR]
    warnings = [t.name for t in repo.tags if t.severity == Severity.WARN]
    return ScorerResult(
        score=adjust_by(-3 * len(errors) - 2 * len(warnings)),
        reason=(
            f"Errors: [{','.join(errors)}], warnings: [{','.join(warnings)}]"
            if errors or warnings
            else "No errors or warnings"
        ),
    )


PENALIZE_WARNING_AND_ERROR_TAGS = RepositoryScorer(name="tag-penalty", score_fingerprints=_score_tags)


def require_aspect_of_type(
    type: str,
    reason: str,
    data: Any = None,
    category: str | None = None,
    base_only: bool = False,
) -> RepositoryScorer:
    """Score 5 when a fingerprint of the type is present, otherwise 1.

    If ``data`` is given, the fingerprint sha must also match the hash of it.
    """
    wanted_sha = fingerprint_sha(data) if data is not None else None

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult:
        found = any(
            fp.type == type and (wanted_sha is None or fp.sha == wanted_sha) for fp in repo.fingerprints
        )
        return ScorerResult(score=5 if found else 1, reason="Satisfactory" if found else reason)

    return RepositoryScorer(
        name=f"{type}-required",
        category=category,
        score_fingerprints=score_fingerprints,
        base_only=base_only,
    )


PENALIZE_NO_CODE_OF_CONDUCT = require_aspect_of_type(
    type=CODE_OF_CONDUCT_TYPE,
    category=COMMUNITY_CATEGORY,
    reason="Repos should have a code of conduct",
    base_only=True,
)


def require_glob_aspect(glob: str, category: str | None = None, base_only: bool = False) -> RepositoryScorer:
    """Score 5 when some glob fingerprint for the pattern has matches, otherwise 1."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult:
        found = any(
            is_glob_match_fingerprint(fp) and fp.data["glob"] == glob and glob_matches(fp)
            for fp in repo.fingerprints
        )
        return ScorerResult(
            score=5 if found else 1,
            reason="Satisfactory" if found else f"Should have file for {glob}",
        )

    return RepositoryScorer(
        name=f"{glob}-required",
        category=category,
        score_fingerprints=score_fingerprints,
        base_only=base_only,
    )


def penalize_for_review_violations(reviewer_name: str, violations_per_point_lost: int) -> RepositoryScorer:
    """Lose a star for every ``violations_per_point_lost`` review comments."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult:
        found = find_review_comment_count_fingerprint(reviewer_name, repo.fingerprints)
        count = count_of(found) if found else 0
        return ScorerResult(
            score=adjust_by(-count / violations_per_point_lost),
            reason=f"{count} review comments found for {reviewer_name}",
        )

    return RepositoryScorer(name=reviewer_name, score_fingerprints=score_fingerprints)


def penalize_glob_matches(type: str, points_lost_per_match: float, name: str | None = None) -> RepositoryScorer:
    """Penalize matches of a glob we don't want to see."""

    def score_fingerprints(repo: TaggedRepo) -> ScorerResult:
        count = count_glob_matches(repo.fingerprints, type)
        return ScorerResult(
            score=adjust_by(-count * points_lost_per_match),
            reason=f"{count} matches for glob typed {type}: Should have none",
        )

    return RepositoryScorer(name=name or type, score_fingerprints=score_fingerprints)
