"""Aspect registry: the single entry point for tagging and scoring a workspace."""

import logging
import time
from collections.abc import Mapping, Sequence

from repodrift.aspects.aspect import Aspect
from repodrift.aspects.ideals import IdealStore
from repodrift.aspects.problems import (
    ProblemStore,
    UndesirableUsageChecker,
    chain_undesirable_usage_checkers,
    problem_store_backed_checker_for,
)
from repodrift.models.schemas import (
    Analyzed,
    ScoredRepo,
    Tag,
    TagAndScoreOptions,
    WeightedScore,
    WorkspaceToScore,
)
from repodrift.scorers.base import RepositoryScorer, WorkspaceScorer
from repodrift.scorers.scoring import score_repositories
from repodrift.scorers.scoring import score_workspace as score_workspace_with
from repodrift.taggers.base import CombinationTagger, TaggerDefinition
from repodrift.taggers.tagging import tag_context_for, tag_repositories

logger = logging.getLogger(__name__)


class AspectRegistry:
    """Holds the aspects, taggers, scorers and stores for a deployment.

    Taggers are added with the fluent ``with_taggers`` and
    ``with_combination_taggers`` methods.
    """

    def __init__(
        self,
        aspects: Sequence[Aspect],
        ideal_store: IdealStore,
        problem_store: ProblemStore,
        undesirable_usage_checker: UndesirableUsageChecker | None = None,
        scorers: Sequence[RepositoryScorer] | None = None,
        workspace_scorers: Sequence[WorkspaceScorer] | None = None,
        score_weightings: Mapping[str, int] | None = None,
    ):
        """Initialize the registry.

        Args:
            aspects: Known aspects.
            ideal_store: Store of ideal fingerprint values.
            problem_store: Store of fingerprint values flagged as problems.
            undesirable_usage_checker: Optional static checker consulted in
                addition to the problem store.
            scorers: Repository scorers.
            workspace_scorers: Workspace scorers.
            score_weightings: Weighting per scorer name, 1 when absent.

        Raises:
            ValueError: If any aspect is None.
        """
        if any(a is None for a in aspects):
            raise ValueError("Aspects may not be None")
        self._aspects = list(aspects)
        self._ideal_store = ideal_store
        self._problem_store = problem_store
        self._undesirable_usage_checker = undesirable_usage_checker
        self._scorers = list(scorers or [])
        self._workspace_scorers = list(workspace_scorers or [])
        self._score_weightings = dict(score_weightings or {})
        self._taggers: list[TaggerDefinition] = []
        self._combination_taggers: list[CombinationTagger] = []

    def with_taggers(self, *taggers: TaggerDefinition) -> "AspectRegistry":
        self._taggers.extend(taggers)
        return self

    def with_combination_taggers(self, *taggers: CombinationTagger) -> "AspectRegistry":
        self._combination_taggers.extend(taggers)
        return self

    @property
    def aspects(self) -> list[Aspect]:
        return list(self._aspects)

    @property
    def ideal_store(self) -> IdealStore:
        return self._ideal_store

    @property
    def problem_store(self) -> ProblemStore:
        return self._problem_store

    @property
    def scorers(self) -> list[RepositoryScorer]:
        return list(self._scorers)

    @property
    def workspace_scorers(self) -> list[WorkspaceScorer]:
        return list(self._workspace_scorers)

    @property
    def score_weightings(self) -> dict[str, int]:
        return dict(self._score_weightings)

    @property
    def available_tags(self) -> list[Tag]:
        """Every tag a tagger can emit, one per name, in registration order."""
        tags: dict[str, Tag] = {}
        for tagger in [*self._taggers, *self._combination_taggers]:
            tags.setdefault(tagger.name, tagger.to_tag())
        return list(tags.values())

    def aspect_of(self, type: str | None) -> Aspect | None:
        """Find the aspect managing a fingerprint type."""
        if not type:
            return None
        return next((a for a in self._aspects if a.name == type), None)

    async def undesirable_usage_checker_for(self, workspace_id: str) -> UndesirableUsageChecker:
        """Build the checker for a workspace: stored problems, then any static checker."""
        store_checker = await problem_store_backed_checker_for(self._problem_store, workspace_id)
        if self._undesirable_usage_checker is None:
            return store_checker
        return chain_undesirable_usage_checkers(store_checker.check, self._undesirable_usage_checker.check)

    async def tag_and_score_repos(
        self,
        workspace_id: str,
        repos: Sequence[Analyzed],
        options: TagAndScoreOptions | None = None,
    ) -> list[ScoredRepo]:
        """Tag then score a batch of repositories.

        Args:
            workspace_id: Workspace the repositories belong to.
            repos: Analyzed repositories.
            options: Scoring options, e.g. a category filter.

        Returns:
            Scored repositories in input order.
        """
        start = time.perf_counter()
        context = tag_context_for(workspace_id, self, repos)
        tagged = await tag_repositories(context, repos, self._taggers, self._combination_taggers)
        tagged_at = time.perf_counter()
        logger.info(f"Tagging {len(repos)} repos took {tagged_at - start:.3f}s")

        scored = await score_repositories(self._scorers, tagged, self._score_weightings, options)
        logger.info(f"Scoring {len(repos)} repos took {time.perf_counter() - tagged_at:.3f}s")
        return scored

    async def score_workspace(self, workspace_id: str, workspace: WorkspaceToScore) -> WeightedScore:
        logger.info(f"Scoring workspace {workspace_id} with {len(self._workspace_scorers)} scorers")
        return await score_workspace_with(self._workspace_scorers, workspace, self._score_weightings)
