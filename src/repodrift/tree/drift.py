"""Drift reporting: rank fingerprint kinds by entropy and shape them into trees."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from repodrift.analytics.usage import FingerprintUsageAggregator, KindKey
from repodrift.aspects.aspect import aspect_specifies_no_entropy
from repodrift.models.schemas import FingerprintUsage, RepoId
from repodrift.tree.munging import introduce_classification_layer
from repodrift.tree.sunburst import (
    Circle,
    PlantedTree,
    SunburstLeaf,
    SunburstLevel,
    SunburstTree,
    descendants,
    kill_children,
    transform,
)
from repodrift.util.bands import entropy_band

if TYPE_CHECKING:
    from repodrift.aspects.registry import AspectRegistry

logger = logging.getLogger(__name__)

DRIFT_ROOT_NAME = "drift"


def select_drifting_kinds(
    usage: Sequence[FingerprintUsage], min_entropy: float, type: str | None = None
) -> list[FingerprintUsage]:
    """Fingerprint kinds at or above an entropy, most drift first.

    Ties on entropy are broken by name, ascending.
    """
    selected = [u for u in usage if u.entropy >= min_entropy and (type is None or u.type == type)]
    return sorted(selected, key=lambda u: (-u.entropy, u.name))


def _kind_node(usage: FingerprintUsage, repos: list[RepoId] | None) -> SunburstLevel:
    attributes = {
        "type": usage.type,
        "fingerprint_name": usage.name,
        "variants": usage.variants,
        "count": usage.count,
        "entropy": usage.entropy,
    }
    if repos is None:
        return SunburstLeaf(name=usage.name, size=usage.variants, **attributes)
    return SunburstTree(
        name=usage.name,
        size=usage.variants,
        children=[SunburstLeaf(name=r.name, size=1, owner=r.owner, url=r.url) for r in repos],
        **attributes,
    )


def drift_tree(
    usage: Sequence[FingerprintUsage],
    min_entropy: float,
    type: str | None = None,
    repos_by_kind: Mapping[KindKey, list[RepoId]] | None = None,
) -> PlantedTree:
    """Tree the fingerprint kinds drifting at or above an entropy threshold.

    Without a type the tree runs drift -> aspect type -> fingerprint kind;
    with a type it runs type -> fingerprint kind. Kinds are sized by their
    variant count. When ``repos_by_kind`` is given, each kind gets the
    repositories carrying it as children.

    Args:
        usage: Statistics for every fingerprint kind in the workspace.
        min_entropy: Entropy a kind needs to be included.
        type: Restrict to one aspect type.
        repos_by_kind: Repositories per (type, name).

    Returns:
        The drift tree.
    """
    selected = select_drifting_kinds(usage, min_entropy, type)

    def node(u: FingerprintUsage) -> SunburstLevel:
        repos = None if repos_by_kind is None else list(repos_by_kind.get((u.type, u.name), []))
        return _kind_node(u, repos)

    if type:
        circles = [Circle(meaning="type"), Circle(meaning="fingerprint entropy")]
        tree = SunburstTree(name=type, type=type, children=[node(u) for u in selected])
    else:
        circles = [Circle(meaning="report"), Circle(meaning="aspect name"), Circle(meaning="fingerprint name")]
        grouped: dict[str, list[SunburstLevel]] = {}
        for u in selected:
            grouped.setdefault(u.type, []).append(node(u))
        tree = SunburstTree(
            name=DRIFT_ROOT_NAME,
            children=[SunburstTree(name=t, type=t, children=kids) for t, kids in grouped.items()],
        )
    if repos_by_kind is not None:
        circles.append(Circle(meaning="repos"))
    logger.debug(f"Drift tree has {len(selected)} of {len(usage)} fingerprint kinds at entropy >= {min_entropy}")
    return PlantedTree(tree=tree, circles=circles)


def remove_aspects_without_meaningful_entropy(registry: AspectRegistry, planted: PlantedTree) -> PlantedTree:
    """Drop aspect branches whose aspect says entropy is not significant."""
    tree = kill_children(
        planted.tree,
        lambda node, depth: aspect_specifies_no_entropy(registry.aspect_of(getattr(node, "type", None))),
    )
    return planted.model_copy(update={"tree": tree})


def _kinds_under(level: SunburstLevel) -> list[SunburstLevel]:
    return [d for d in descendants(level) if getattr(d, "entropy", None) is not None]


def introduce_entropy_band_layer(planted: PlantedTree) -> PlantedTree:
    """Insert a level grouping by entropy band beneath the root."""
    return introduce_classification_layer(
        planted,
        descendant_classifier=lambda kind: entropy_band(kind.entropy),
        new_layer_depth=1,
        new_layer_meaning="entropy band",
        descendant_picker=_kinds_under,
    )


def fill_in_aspect_names(registry: AspectRegistry, planted: PlantedTree) -> PlantedTree:
    """Give aspect and fingerprint kind nodes their display names."""

    def rename(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        type = getattr(level, "type", None)
        aspect = registry.aspect_of(type) if type else None
        if aspect is None:
            return level, True
        fingerprint_name = getattr(level, "fingerprint_name", None)
        if fingerprint_name is not None:
            if aspect.to_displayable_fingerprint_name:
                return level.model_copy(update={"name": aspect.to_displayable_fingerprint_name(fingerprint_name)}), True
        elif aspect.display_name:
            return level.model_copy(update={"name": aspect.display_name}), True
        return level, True

    return planted.model_copy(update={"tree": transform(planted.tree, rename)})


async def drift_report(
    registry: AspectRegistry,
    aggregator: FingerprintUsageAggregator,
    workspace_id: str,
    percentile: float = 0,
    type: str | None = None,
    repos: bool = False,
    band: bool = False,
) -> PlantedTree:
    """Build the drift report for a workspace.

    Args:
        registry: Registry supplying aspect display names and entropy significance.
        aggregator: Source of usage statistics and the percentile threshold.
        workspace_id: Workspace to report on.
        percentile: Only kinds at or above this entropy percentile (0-100) are shown.
        type: Restrict to one aspect type.
        repos: Whether to include the repositories carrying each kind.
        band: Whether to group by entropy band.

    Returns:
        The drift tree.
    """
    logger.info(f"Drift report for workspace {workspace_id}: percentile={percentile}, type={type}")
    usage = await aggregator.fingerprint_usage(workspace_id)
    threshold = await aggregator.entropy_at_percentile(workspace_id, percentile)
    repos_by_kind = await aggregator.repos_by_kind(workspace_id) if repos else None

    planted = drift_tree(usage, threshold, type=type, repos_by_kind=repos_by_kind)
    if not type:
        planted = remove_aspects_without_meaningful_entropy(registry, planted)
    if band:
        planted = introduce_entropy_band_layer(planted)
    return fill_in_aspect_names(registry, planted)
