"""Default aspects, scorers and taggers, and a registry wired with them."""

from repodrift.aspects.aspect import Aspect
from repodrift.aspects.fingerprints import (
    BRANCH_COUNT_TYPE,
    CODE_METRICS_TYPE,
    CODE_OF_CONDUCT_TYPE,
    EXPOSED_SECRETS_TYPE,
    GIT_ACTIVES_TYPE,
    GIT_RECENCY_TYPE,
    LICENSE_TYPE,
    REVIEW_COMMENT_COUNT_TYPE,
)
from repodrift.aspects.ideals import IdealStore, InMemoryIdealStore
from repodrift.aspects.problems import InMemoryProblemStore, ProblemStore, UndesirableUsageChecker
from repodrift.aspects.registry import AspectRegistry
from repodrift.config import Settings
from repodrift.models.schemas import Fingerprint
from repodrift.scorers import common as common_scorers
from repodrift.scorers.base import RepositoryScorer, WorkspaceScorer
from repodrift.scorers.workspace import AVERAGE_REPO_SCORE, ENTROPY_SCORE, WORST_REPO_SCORE
from repodrift.taggers import common as common_taggers
from repodrift.taggers.base import TaggerDefinition
from repodrift.taggers.combinations import CombinationTaggerParams, combination_taggers


def _license_name(fp: Fingerprint) -> str:
    data = fp.data if isinstance(fp.data, dict) else {}
    return data.get("classification") or "None"


def _glob_aspect(name: str, display_name: str, glob: str) -> Aspect:
    return Aspect(
        name=name,
        display_name=display_name,
        to_displayable_fingerprint_name=lambda n: glob,
        to_displayable_fingerprint=lambda fp: "Present" if fp.data.get("matches") else "Absent",
    )


def default_aspects() -> list[Aspect]:
    return [
        Aspect(
            name=LICENSE_TYPE,
            display_name="License",
            base_only=True,
            to_displayable_fingerprint_name=lambda name: "License",
            to_displayable_fingerprint=_license_name,
        ),
        Aspect(name=CODE_OF_CONDUCT_TYPE, display_name="Code of conduct", base_only=True),
        Aspect(name=EXPOSED_SECRETS_TYPE, display_name="Exposed secrets", entropy=False),
        Aspect(name=BRANCH_COUNT_TYPE, display_name="Branch count", base_only=True, entropy=False, basic_stats_path="count"),
        Aspect(name=GIT_RECENCY_TYPE, display_name="Recency of git activity", base_only=True, entropy=False),
        Aspect(name=GIT_ACTIVES_TYPE, display_name="Active committers", base_only=True, entropy=False, basic_stats_path="count"),
        Aspect(name=CODE_METRICS_TYPE, display_name="Code metrics", entropy=False, basic_stats_path="lines"),
        Aspect(name=REVIEW_COMMENT_COUNT_TYPE, display_name="Review comments", entropy=False, basic_stats_path="count"),
        _glob_aspect("changelog", "Changelog", "CHANGELOG.md"),
        _glob_aspect("contributing", "Contributing file", "CONTRIBUTING.md"),
        _glob_aspect("readme", "Readme file", "README.md"),
    ]


def default_scorers(settings: Settings) -> list[RepositoryScorer]:
    return [
        common_scorers.anchor_score_at(2),
        common_scorers.penalize_for_excessive_branches(settings.branch_limit),
        common_scorers.PENALIZE_WARNING_AND_ERROR_TAGS,
        common_scorers.PENALIZE_MONOREPOS,
        common_scorers.limit_languages(4),
        common_scorers.limit_lines_of_code(settings.lines_of_code_limit),
        common_scorers.limit_lines_of_code_in("YAML", 500, free_amount=200),
        common_scorers.limit_lines_of_code_in("PowerShell", 200, free_amount=100),
        common_scorers.limit_lines_of_code_in("Shell", 200, free_amount=100),
        common_scorers.require_recent_commit(30),
        common_scorers.PENALIZE_NO_LICENSE,
        common_scorers.PENALIZE_NO_CODE_OF_CONDUCT,
        common_scorers.require_glob_aspect("CHANGELOG.md"),
        common_scorers.require_glob_aspect("CONTRIBUTING.md"),
    ]


def default_workspace_scorers() -> list[WorkspaceScorer]:
    return [AVERAGE_REPO_SCORE, WORST_REPO_SCORE, ENTROPY_SCORE]


def default_taggers(settings: Settings) -> list[TaggerDefinition]:
    return [
        common_taggers.MONOREPO,
        common_taggers.VULNERABLE,
        common_taggers.HAS_LICENSE,
        common_taggers.dead(settings.dead_days),
        common_taggers.excessive_branch_count(settings.max_branches),
        common_taggers.line_count_test("big", lambda lines: lines > 10000),
        common_taggers.line_count_test("tiny", lambda lines: lines < 200),
        common_taggers.HAS_CODE_OF_CONDUCT,
        common_taggers.HAS_CHANGELOG,
        common_taggers.HAS_CONTRIBUTING_FILE,
        common_taggers.SOLE_COMMITTER,
        common_taggers.inadequate_readme(200),
        common_taggers.IS_PROBLEMATIC,
    ]


def create_default_registry(
    settings: Settings | None = None,
    problem_store: ProblemStore | None = None,
    ideal_store: IdealStore | None = None,
    undesirable_usage_checker: UndesirableUsageChecker | None = None,
) -> AspectRegistry:
    """Create a registry with the stock aspects, scorers and taggers.

    Args:
        settings: Thresholds and weightings. Read from the environment when omitted.
        problem_store: Store of flagged fingerprints. In-memory when omitted.
        ideal_store: Store of ideals. In-memory when omitted.
        undesirable_usage_checker: Optional static checker.

    Returns:
        The configured registry.
    """
    settings = settings or Settings.from_env()
    params = CombinationTaggerParams(
        min_average_aspect_count_fraction_to_expect=settings.min_average_aspect_fraction,
        hot_days=settings.hot_days,
        hot_contributors=settings.hot_contributors,
    )
    return (
        AspectRegistry(
            aspects=default_aspects(),
            ideal_store=ideal_store or InMemoryIdealStore(),
            problem_store=problem_store or InMemoryProblemStore(),
            undesirable_usage_checker=undesirable_usage_checker,
            scorers=default_scorers(settings),
            workspace_scorers=default_workspace_scorers(),
            score_weightings=settings.score_weightings,
        )
        .with_taggers(*default_taggers(settings))
        .with_combination_taggers(*combination_taggers(params))
    )
