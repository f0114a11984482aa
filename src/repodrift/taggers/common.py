"""Stock taggers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from repodrift.aspects.fingerprints import (
    BRANCH_COUNT_TYPE,
    CODE_OF_CONDUCT_TYPE,
    EXPOSED_SECRETS_TYPE,
    GIT_ACTIVES_TYPE,
    GIT_RECENCY_TYPE,
    count_of,
    days_since,
    glob_matches,
    has_no_license,
    is_classification_data_fingerprint,
    is_code_metrics_fingerprint,
    is_glob_match_fingerprint,
    is_license_fingerprint,
    last_commit_time,
)
from repodrift.models.schemas import Fingerprint, Severity
from repodrift.taggers.base import FingerprintTest, Tagger, WorkspaceSpecificTagger

if TYPE_CHECKING:
    from repodrift.aspects.registry import AspectRegistry

logger = logging.getLogger(__name__)

MONOREPO = Tagger(
    name="monorepo",
    description="Contains multiple virtual projects",
    severity=Severity.WARN,
    test=lambda fp: bool(fp.path) and fp.path != ".",
)

VULNERABLE = Tagger(
    name="vulnerable",
    description="Has exposed secrets",
    severity=Severity.ERROR,
    test=lambda fp: fp.type == EXPOSED_SECRETS_TYPE,
)

HAS_LICENSE = Tagger(
    name="license",
    description="Repositories should have a license",
    test=lambda fp: is_license_fingerprint(fp) and not has_no_license(fp.data),
)

HAS_CODE_OF_CONDUCT = Tagger(
    name="code-of-conduct",
    description="Repositories should have a code of conduct",
    test=lambda fp: fp.type == CODE_OF_CONDUCT_TYPE,
)

SOLE_COMMITTER = Tagger(
    name="sole-committer",
    description="Projects with one committer",
    test=lambda fp: fp.type == GIT_ACTIVES_TYPE and count_of(fp) == 1,
)


def glob_required(name: str, description: str, glob: str) -> Tagger:
    """Tag repositories where the glob pattern matched at least one file."""
    return Tagger(
        name=name,
        description=description,
        test=lambda fp: is_glob_match_fingerprint(fp) and fp.data["glob"] == glob and bool(glob_matches(fp)),
    )


HAS_CHANGELOG = glob_required(name="changelog", description="Repositories should have a changelog", glob="CHANGELOG.md")

HAS_CONTRIBUTING_FILE = glob_required(
    name="contributing",
    description="Repositories should have a contributing",
    glob="CONTRIBUTING.md",
)


def dead(dead_days: int) -> Tagger:
    """Tag repositories with no commits in the last ``dead_days`` days."""

    def test(fp: Fingerprint) -> bool:
        if fp.type != GIT_RECENCY_TYPE:
            return False
        when = last_commit_time(fp)
        return when is not None and days_since(when) > dead_days

    return Tagger(
        name="dead?",
        description=f"No git activity in last {dead_days} days",
        severity=Severity.ERROR,
        test=test,
    )


def excessive_branch_count(max_branches: int) -> Tagger:
    return Tagger(
        name=f">{max_branches} branches",
        description="git branch count",
        severity=Severity.WARN,
        test=lambda fp: fp.type == BRANCH_COUNT_TYPE and count_of(fp) > max_branches,
    )


def line_count_test(name: str, test: Callable[[int], bool]) -> Tagger:
    """Tag repositories whose total line count satisfies the test."""
    return Tagger(
        name=name,
        description="Repo size",
        test=lambda fp: is_code_metrics_fingerprint(fp) and test(fp.data.get("lines", 0)),
    )


def inadequate_readme(min_length: int) -> Tagger:
    """Tag repositories whose README.md is missing or shorter than ``min_length``."""

    def test(fp: Fingerprint) -> bool:
        if not is_glob_match_fingerprint(fp) or fp.data["glob"] != "README.md":
            return False
        matches = glob_matches(fp)
        return not matches or matches[0].get("size", 0) < min_length

    return Tagger(name="poor-readme", description="README is inadequate", severity=Severity.WARN, test=test)


def tags_from_classification_fingerprints(*classifiers: tuple[str, list[str] | str]) -> list[Tagger]:
    """Emit one tagger per tag a classifier can assign.

    Args:
        classifiers: (reason, tags) pairs. A classification fingerprint earns
            a tag when its data lists both the tag and the reason.
    """
    taggers = []
    for reason, tags in classifiers:
        for name in [tags] if isinstance(tags, str) else tags:
            taggers.append(
                Tagger(
                    name=name,
                    description=reason,
                    test=lambda fp, name=name, reason=reason: (
                        is_classification_data_fingerprint(fp)
                        and name in fp.data["tags"]
                        and reason in fp.data["reasons"]
                    ),
                )
            )
    return taggers


async def _problem_test(workspace_id: str, registry: AspectRegistry) -> FingerprintTest:
    logger.info(f"Creating problem tagger for workspace {workspace_id}")
    checker = await registry.undesirable_usage_checker_for(workspace_id)
    return lambda fp: len(checker.check(fp, workspace_id)) > 0


IS_PROBLEMATIC = WorkspaceSpecificTagger(
    name="problems",
    description="Undesirable usage",
    severity=Severity.ERROR,
    create_test=_problem_test,
)
