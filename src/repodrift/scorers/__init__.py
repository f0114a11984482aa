"""Repository and workspace scorers."""

from repodrift.scorers.base import RepositoryScorer, WorkspaceScorer
from repodrift.scorers.score import weighted_composite_score
from repodrift.scorers.scoring import score_base_and_virtual_projects, score_repositories, score_workspace

__all__ = [
    "RepositoryScorer",
    "WorkspaceScorer",
    "score_base_and_virtual_projects",
    "score_repositories",
    "score_workspace",
    "weighted_composite_score",
]
