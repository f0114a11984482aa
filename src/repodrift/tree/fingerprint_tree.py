"""Trees from fingerprint kind to fingerprint values to repositories."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from repodrift.aspects.aspect import Aspect, defaulted_to_displayable_fingerprint
from repodrift.aspects.ideals import IdealStore
from repodrift.models.schemas import Analyzed, Fingerprint, RepoId
from repodrift.tree.munging import introduce_classification_layer, split_by_org, validate_planted_tree
from repodrift.tree.sunburst import (
    Circle,
    PlantedTree,
    SunburstLeaf,
    SunburstLevel,
    SunburstTree,
    descendants,
    group_siblings,
    is_sunburst_tree,
    transform,
    trim_outer_rim,
)

if TYPE_CHECKING:
    from repodrift.aspects.registry import AspectRegistry

logger = logging.getLogger(__name__)


def _repo_leaf(repo_id: RepoId, path: str | None = None) -> SunburstLeaf:
    return SunburstLeaf(name=repo_id.name, size=1, owner=repo_id.owner, url=repo_id.url, path=path)


def fingerprints_to_repos_tree(
    analyses: Sequence[Analyzed],
    fingerprint_type: str,
    fingerprint_name: str,
    by_name: bool = True,
    other_label: str | None = None,
) -> PlantedTree:
    """Group repositories by the value of a fingerprint kind.

    Args:
        analyses: Repository analyses.
        fingerprint_type: Aspect type to look at.
        fingerprint_name: Fingerprint name, also used as the root name.
        by_name: Only fingerprints with this name; otherwise every name of the type.
        other_label: If given, add a node with this name holding the
            repositories that lack the fingerprint.

    Returns:
        Tree of root -> fingerprint value -> repo.
    """
    values: dict[tuple[str, str], SunburstTree] = {}
    without: list[SunburstLevel] = []
    for analysis in analyses:
        matching = [
            fp
            for fp in analysis.fingerprints
            if fp.type == fingerprint_type and (not by_name or fp.name == fingerprint_name)
        ]
        if not matching:
            without.append(_repo_leaf(analysis.id))
        for fp in matching:
            node = values.get((fp.name, fp.sha))
            if node is None:
                node = SunburstTree(
                    name=fp.name,
                    type=fp.type,
                    fingerprint_name=fp.name,
                    sha=fp.sha,
                    data=fp.data,
                    children=[],
                )
                values[(fp.name, fp.sha)] = node
            node.children.append(_repo_leaf(analysis.id, fp.path))

    children: list[SunburstLevel] = list(values.values())
    if other_label and without:
        children.append(SunburstTree(name=other_label, type=fingerprint_type, children=without))
    planted = PlantedTree(
        tree=SunburstTree(name=fingerprint_name, children=children),
        circles=[
            Circle(meaning="fingerprint name" if by_name else "aspect"),
            Circle(meaning="fingerprint value"),
            Circle(meaning="repo"),
        ],
    )
    validate_planted_tree(planted)
    return planted


def _has_sha(level: SunburstLevel) -> bool:
    return bool(getattr(level, "sha", None))


def _fingerprint_nodes(level: SunburstLevel) -> list[SunburstLevel]:
    return [d for d in descendants(level) if _has_sha(d)]


def _as_fingerprint(level: SunburstLevel) -> Fingerprint:
    return Fingerprint(
        type=level.type,
        name=getattr(level, "fingerprint_name", level.name),
        sha=level.sha,
        data=getattr(level, "data", None),
    )


def _display_value(registry: AspectRegistry, level: SunburstLevel) -> str:
    aspect = registry.aspect_of(level.type)
    data = getattr(level, "data", None)
    if (aspect is None or aspect.to_displayable_fingerprint is None) and isinstance(data, dict):
        if data.get("displayValue"):
            return str(data["displayValue"])
    value = defaulted_to_displayable_fingerprint(aspect)(_as_fingerprint(level))
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def resolve_aspect_names(registry: AspectRegistry, tree: SunburstTree) -> SunburstTree:
    """Name fingerprint value nodes by their displayable value."""

    def rename(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        if _has_sha(level):
            return level.model_copy(update={"name": _display_value(registry, level)}), True
        return level, True

    return transform(tree, rename)


def _get_path(data: Any, path: str) -> Any:
    for part in path.split("."):
        if not isinstance(data, dict) or part not in data:
            return None
        data = data[part]
    return data


def apply_terminal_sizing(aspect: Aspect | None, tree: SunburstTree) -> SunburstTree:
    """Size repo leaves by the aspect's basic statistic, where it declares one."""
    if aspect is None or not aspect.basic_stats_path:
        return tree

    def size(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        if not (
            is_sunburst_tree(level)
            and level.children
            and all(not is_sunburst_tree(c) and getattr(c, "owner", None) for c in level.children)
        ):
            return level, True
        value = _get_path(getattr(level, "data", None), aspect.basic_stats_path)
        leaf_size = value if isinstance(value, (int, float)) else 1
        return level.model_copy(update={"children": [c.model_copy(update={"size": leaf_size}) for c in level.children]}), False

    return transform(tree, size)


def put_repo_path_in_name_of_repo_leaves(tree: SunburstTree) -> SunburstTree:
    """Show the virtual project path in the name of repo leaves."""

    def rename(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        if not is_sunburst_tree(level) and getattr(level, "url", None) and getattr(level, "path", None):
            return level.model_copy(update={"name": f"{level.name}/{level.path}"}), False
        return level, True

    return transform(tree, rename)


def build_fingerprint_tree(
    registry: AspectRegistry,
    analyses: Sequence[Analyzed],
    fingerprint_type: str,
    fingerprint_name: str,
    by_name: bool = True,
    other_label: str | None = None,
    by_org: bool = False,
    trim: bool = False,
) -> PlantedTree:
    """Build the drill-down tree for a fingerprint kind, or for a whole aspect.

    Args:
        registry: Registry supplying display names and statistics paths.
        analyses: Repository analyses.
        fingerprint_type: Aspect type.
        fingerprint_name: Fingerprint name when ``by_name``.
        by_name: Show one fingerprint kind rather than every kind of the aspect.
        other_label: Label for repositories lacking the fingerprint. When
            given, values are grouped into "Present" and "Absent".
        by_org: Introduce an owner level.
        trim: Collapse repo leaves into sized value nodes.

    Returns:
        The planted tree.
    """
    show_presence = bool(other_label)
    planted = fingerprints_to_repos_tree(analyses, fingerprint_type, fingerprint_name, by_name, other_label)
    aspect = registry.aspect_of(fingerprint_type)

    if not by_name:

        def fingerprint_name_of(level: SunburstLevel) -> str | None:
            if not _has_sha(level):
                return None
            kind_aspect = registry.aspect_of(level.type)
            name = getattr(level, "fingerprint_name", level.name)
            if kind_aspect is not None and kind_aspect.to_displayable_fingerprint_name:
                return kind_aspect.to_displayable_fingerprint_name(name)
            return name

        planted = introduce_classification_layer(
            planted,
            descendant_classifier=fingerprint_name_of,
            new_layer_depth=1,
            new_layer_meaning="fingerprint name",
            descendant_picker=_fingerprint_nodes,
        )
        if aspect is not None and aspect.display_name:
            planted.tree.name = aspect.display_name
    elif aspect is not None and aspect.to_displayable_fingerprint_name:
        planted.tree.name = aspect.to_displayable_fingerprint_name(fingerprint_name)

    tree = resolve_aspect_names(registry, planted.tree)
    planted = planted.model_copy(update={"tree": tree})

    if by_org:
        planted = split_by_org(planted)

    tree = planted.tree
    if show_presence:
        tree = group_siblings(
            tree,
            parent_selector=lambda parent: any(_has_sha(c) for c in parent.children),
            child_classifier=lambda kid: "Present" if _has_sha(kid) and kid.name != "None" else "Absent",
            collapse_under_name=lambda name: name == "Absent",
        )
    else:
        # Sized leaves would swamp the default-sized absent ones
        tree = apply_terminal_sizing(aspect, tree)

    tree = group_siblings(
        tree,
        parent_selector=lambda parent: any(_has_sha(c) for c in parent.children),
        child_classifier=lambda level: level.name,
        collapse_under_name=lambda name: True,
    )
    tree = trim_outer_rim(tree) if trim else put_repo_path_in_name_of_repo_leaves(tree)
    return planted.model_copy(update={"tree": tree})


async def ideal_progress_tree(
    registry: AspectRegistry,
    ideal_store: IdealStore,
    analyses: Sequence[Analyzed],
    workspace_id: str,
    fingerprint_type: str,
    fingerprint_name: str,
) -> PlantedTree:
    """Group repositories by whether they have reached the ideal for a fingerprint kind.

    Raises:
        MissingIdealError: If no ideal is recorded for the kind.
    """
    ideal = await ideal_store.require_ideal(workspace_id, fingerprint_type, fingerprint_name)
    groups: dict[str, list[SunburstLevel]] = {"Ideal": [], "Not ideal": [], "Absent": []}
    for analysis in analyses:
        fp = next(
            (f for f in analysis.fingerprints if f.type == fingerprint_type and f.name == fingerprint_name),
            None,
        )
        if ideal.fingerprint is None:
            group = "Ideal" if fp is None else "Not ideal"
        elif fp is None:
            group = "Absent"
        else:
            group = "Ideal" if fp.sha == ideal.fingerprint.sha else "Not ideal"
        groups[group].append(_repo_leaf(analysis.id, fp.path if fp else None))

    aspect = registry.aspect_of(fingerprint_type)
    name = fingerprint_name
    if aspect is not None and aspect.to_displayable_fingerprint_name:
        name = aspect.to_displayable_fingerprint_name(fingerprint_name)
    logger.debug(f"Ideal progress for {fingerprint_type}/{fingerprint_name}: {len(groups['Ideal'])} ideal")
    return PlantedTree(
        tree=SunburstTree(
            name=name,
            type=fingerprint_type,
            children=[SunburstTree(name=g, children=kids) for g, kids in groups.items() if kids],
        ),
        circles=[Circle(meaning="fingerprint name"), Circle(meaning="progress"), Circle(meaning="repo")],
    )
