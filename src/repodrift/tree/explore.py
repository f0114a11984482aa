"""Explore a workspace's repositories by tag."""

import logging
from collections.abc import Sequence

from pydantic import Field

from repodrift.models.schemas import ScoredRepo
from repodrift.taggers.usage import TagUsage, describe_selected_tags, relevant, tag_usage_in
from repodrift.tree.munging import split_by_org
from repodrift.tree.sunburst import Circle, PlantedTree, SunburstLeaf, SunburstTree

logger = logging.getLogger(__name__)


class TagTree(PlantedTree):
    """A planted tree of repositories matching a tag selection, with tag counts."""

    workspace_id: str
    tags: list[TagUsage] = Field(default_factory=list)
    selected_tags: list[str] = Field(default_factory=list)
    repo_count: int = 0
    matching_repo_count: int = 0


def explore_tree(
    workspace_id: str,
    repos: Sequence[ScoredRepo],
    selected_tags: Sequence[str] = (),
    by_org: bool = True,
) -> TagTree:
    """Build the tree of repositories matching every selected tag.

    Args:
        workspace_id: Workspace the repositories belong to.
        repos: Tagged and scored repositories.
        selected_tags: Tag names to require; "!name" excludes a tag.
        by_org: Introduce an owner level.

    Returns:
        The tag tree. Repository leaves are sized by fingerprint count.
    """
    matching = [r for r in repos if all(relevant(tag, r) for tag in selected_tags)]
    logger.info(f"Found {len(matching)} relevant repos of {len(repos)}")

    planted = PlantedTree(
        tree=SunburstTree(
            name=describe_selected_tags(selected_tags),
            children=[
                SunburstLeaf(
                    name=r.id.name,
                    size=len(r.fingerprints),
                    owner=r.id.owner,
                    url=r.id.url,
                    tags=[t.name for t in r.tags],
                    weighted_score=r.weighted_score.weighted_score,
                )
                for r in matching
            ],
        ),
        circles=[Circle(meaning="tag filter"), Circle(meaning="repo")],
    )
    if by_org:
        planted = split_by_org(planted)

    return TagTree(
        tree=planted.tree,
        circles=planted.circles,
        workspace_id=workspace_id,
        tags=tag_usage_in(matching),
        selected_tags=list(selected_tags),
        repo_count=len(repos),
        matching_repo_count=len(matching),
    )
