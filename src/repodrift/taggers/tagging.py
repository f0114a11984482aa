"""Tagging engine: evaluate taggers against repositories."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from statistics import mean
from typing import TYPE_CHECKING, Any

from repodrift.models.schemas import Analyzed, Fingerprint, RepoId, Tag, TaggedRepo
from repodrift.taggers.base import (
    CombinationTagger,
    TagContext,
    Tagger,
    TaggerDefinition,
    is_tagger,
    is_workspace_specific,
)

if TYPE_CHECKING:
    from repodrift.aspects.registry import AspectRegistry

logger = logging.getLogger(__name__)


def tag_context_for(workspace_id: str, registry: AspectRegistry | None, repos: Sequence[Analyzed]) -> TagContext:
    """Summarize a batch of repositories for combination taggers."""
    type_counts = [len({fp.type for fp in repo.fingerprints}) for repo in repos]
    return TagContext(
        workspace_id=workspace_id,
        registry=registry,
        repo_count=len(repos),
        average_fingerprint_count=mean(type_counts) if type_counts else 0.0,
    )


async def prepare_taggers(
    taggers: Sequence[TaggerDefinition], workspace_id: str, registry: AspectRegistry | None
) -> list[Tagger]:
    """Compile workspace-specific taggers once, keeping fingerprint taggers as they are."""
    simple = [t for t in taggers if is_tagger(t)]
    prepared = await asyncio.gather(*(t.prepare(workspace_id, registry) for t in taggers if is_workspace_specific(t)))
    return simple + list(prepared)


def _passes(name: str, test: Callable[..., Any], *args: Any) -> bool:
    try:
        return bool(test(*args))
    except Exception as e:
        logger.warning(f"Tagger '{name}' failed, treating as no match: {e}")
        return False


def tags_for(
    fingerprints: Sequence[Fingerprint],
    repo_id: RepoId,
    context: TagContext,
    taggers: Sequence[Tagger],
    combination_taggers: Sequence[CombinationTagger] = (),
) -> list[Tag]:
    """Compute the tags for one repository.

    Per-fingerprint and combination tags are unioned, deduplicated by name
    (the last tagger seen supplies the metadata) and sorted by name.
    """
    found: dict[str, Tag] = {}
    for fp in fingerprints:
        for tagger in taggers:
            if _passes(tagger.name, tagger.test, fp):
                found[tagger.name] = tagger.to_tag()
    for tagger in combination_taggers:
        if _passes(tagger.name, tagger.test, fingerprints, repo_id, context):
            found[tagger.name] = tagger.to_tag()
    return sorted(found.values(), key=lambda tag: tag.name)


async def tag_repositories(
    context: TagContext,
    repos: Sequence[Analyzed],
    taggers: Sequence[TaggerDefinition],
    combination_taggers: Sequence[CombinationTagger] = (),
) -> list[TaggedRepo]:
    """Tag a batch of repositories.

    Workspace-specific taggers are prepared exactly once for the batch and
    the compiled tests are reused for every repository.

    Args:
        context: Workspace and batch summary.
        repos: Repositories to tag.
        taggers: Fingerprint and workspace-specific taggers.
        combination_taggers: Taggers that see all fingerprints at once.

    Returns:
        Tagged repositories, in input order.
    """
    compiled = await prepare_taggers(taggers, context.workspace_id, context.registry)
    return [
        TaggedRepo(
            analysis=repo,
            tags=tags_for(repo.fingerprints, repo.id, context, compiled, combination_taggers),
        )
        for repo in repos
    ]
