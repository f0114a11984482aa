"""Problem fingerprints: values a workspace has flagged as undesirable."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from repodrift.models.schemas import Fingerprint, ProblemUsage

logger = logging.getLogger(__name__)

ProblemCheck = Callable[[Fingerprint, str], ProblemUsage | Sequence[ProblemUsage] | None]


class ProblemStore(ABC):
    """Persistent store of problem fingerprints, keyed by workspace."""

    @abstractmethod
    async def note_problem(self, workspace_id: str, fingerprint_id: str) -> None:
        """Record that a stored fingerprint is a problem.

        Args:
            workspace_id: Workspace the problem applies to.
            fingerprint_id: Identifier of the fingerprint, usually its sha.
        """
        ...

    @abstractmethod
    async def store_problem_fingerprint(self, workspace_id: str, problem: ProblemUsage) -> None:
        """Store a problem usage for a workspace."""
        ...

    @abstractmethod
    async def load_problems(self, workspace_id: str) -> list[ProblemUsage]:
        """Load every problem usage recorded for a workspace.

        Args:
            workspace_id: Workspace to load problems for.

        Returns:
            Problem usages, empty if none are recorded.
        """
        ...


class InMemoryProblemStore(ProblemStore):
    """Problem store held in process memory."""

    def __init__(self, problems: dict[str, list[ProblemUsage]] | None = None):
        self._problems: dict[str, list[ProblemUsage]] = {k: list(v) for k, v in (problems or {}).items()}
        self._noted: dict[str, set[str]] = {}

    async def note_problem(self, workspace_id: str, fingerprint_id: str) -> None:
        self._noted.setdefault(workspace_id, set()).add(fingerprint_id)

    async def store_problem_fingerprint(self, workspace_id: str, problem: ProblemUsage) -> None:
        self._problems.setdefault(workspace_id, []).append(problem)

    async def load_problems(self, workspace_id: str) -> list[ProblemUsage]:
        return list(self._problems.get(workspace_id, []))

    def noted(self, workspace_id: str) -> set[str]:
        return set(self._noted.get(workspace_id, set()))


class UndesirableUsageChecker:
    """Flags fingerprints whose values are undesirable in a workspace."""

    def __init__(self, check: ProblemCheck):
        self._check = check

    def check(self, fp: Fingerprint, workspace_id: str) -> list[ProblemUsage]:
        """Return the problems with a fingerprint, empty if it is acceptable."""
        return _as_list(self._check(fp, workspace_id))


def _as_list(flagged: ProblemUsage | Sequence[ProblemUsage] | None) -> list[ProblemUsage]:
    if not flagged:
        return []
    if isinstance(flagged, ProblemUsage):
        return [flagged]
    return list(flagged)


ACCEPT_EVERYTHING = UndesirableUsageChecker(lambda fp, workspace_id: None)


def chain_undesirable_usage_checkers(*checks: ProblemCheck) -> UndesirableUsageChecker:
    """Combine checks so that their flagged problems are concatenated in order."""

    def check(fp: Fingerprint, workspace_id: str) -> list[ProblemUsage]:
        problems: list[ProblemUsage] = []
        for c in checks:
            problems.extend(_as_list(c(fp, workspace_id)))
        return problems

    return UndesirableUsageChecker(check)


async def problem_store_backed_checker_for(store: ProblemStore, workspace_id: str) -> UndesirableUsageChecker:
    """Build a checker matching fingerprints by sha against a workspace's stored problems.

    Problems are loaded once; the returned checker is synchronous.
    """
    problems = await store.load_problems(workspace_id)
    logger.debug(f"Loaded {len(problems)} problem fingerprints for workspace {workspace_id}")
    return UndesirableUsageChecker(
        lambda fp, _workspace_id: [p for p in problems if p.fingerprint.sha == fp.sha]
    )
