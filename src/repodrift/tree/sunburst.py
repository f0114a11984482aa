"""Sunburst trees: labeled N-ary trees with sized leaves, and transforms over them.

Every transform returns a new tree and leaves its argument untouched.
Nodes may carry extra attributes (``type``, ``sha``, ``owner``...) which
travel with them through every transform.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import reduce
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field
from pydantic import Tag as Variant

logger = logging.getLogger(__name__)


class IncompatibleMergeError(ValueError):
    """Raised when trees cannot be merged."""


class SunburstLeaf(BaseModel):
    """A terminal node with a size."""

    model_config = ConfigDict(extra="allow")

    name: str
    size: int | float = 1


class SunburstTree(BaseModel):
    """An internal node."""

    model_config = ConfigDict(extra="allow")

    name: str
    children: list[SunburstLevel] = Field(default_factory=list)


def _level_kind(value: Any) -> str:
    children = value.get("children") if isinstance(value, dict) else getattr(value, "children", None)
    return "tree" if children is not None else "leaf"


SunburstLevel = Annotated[
    Union[Annotated[SunburstTree, Variant("tree")], Annotated[SunburstLeaf, Variant("leaf")]],
    Discriminator(_level_kind),
]

SunburstTree.model_rebuild()


class Circle(BaseModel):
    """What one depth of a tree represents."""

    meaning: str


class PlantedTree(BaseModel):
    """A tree plus the meaning of each of its levels, for legends."""

    tree: SunburstTree
    circles: list[Circle] = Field(default_factory=list)


Visitor = Callable[[SunburstLevel, int], bool]
Transformer = Callable[[SunburstLevel, int], tuple[SunburstLevel, bool]]


def is_sunburst_tree(level: SunburstLevel) -> bool:
    return isinstance(level, SunburstTree)


def extras(level: SunburstLevel) -> dict[str, Any]:
    """Extra attributes carried by a node."""
    return dict(level.model_extra or {})


def child_count(level: SunburstLevel) -> int:
    return len(level.children) if is_sunburst_tree(level) else 0


def children_of(level: SunburstLevel) -> list[SunburstLevel]:
    return list(level.children) if is_sunburst_tree(level) else []


def visit(level: SunburstLevel, visitor: Visitor, depth: int = 0) -> None:
    """Walk a tree depth first.

    The visitor is called with each node and its depth, and returns whether
    to descend into that node's children.
    """
    if visitor(level, depth) and is_sunburst_tree(level):
        for child in level.children:
            visit(child, visitor, depth + 1)


def transform(level: SunburstLevel, transformer: Transformer, depth: int = 0) -> SunburstLevel:
    """Rebuild a tree depth first.

    The transformer returns the replacement for each node and whether to
    descend into the replacement's children.
    """
    replacement, descend = transformer(level, depth)
    if descend and is_sunburst_tree(replacement):
        return replacement.model_copy(
            update={"children": [transform(c, transformer, depth + 1) for c in replacement.children]}
        )
    return replacement


def leaves_under(level: SunburstLevel) -> list[SunburstLeaf]:
    """Every leaf under a node. A leaf is under itself."""
    if not is_sunburst_tree(level):
        return [level]
    return [leaf for child in level.children for leaf in leaves_under(child)]


def descendants(level: SunburstLevel) -> list[SunburstLevel]:
    """A node and everything beneath it, in pre-order."""
    result: list[SunburstLevel] = []
    visit(level, lambda node, depth: result.append(node) or True)
    return result


def kill_children(tree: SunburstTree, to_terminate: Callable[[SunburstTree, int], bool]) -> SunburstTree:
    """Remove the root's children that match a predicate.

    Only internal-node children survive; leaf children of the root are
    dropped. The predicate receives each child and its depth (1). Deeper
    levels are left untouched.
    """
    kept = [c for c in tree.children if is_sunburst_tree(c) and not to_terminate(c, 1)]
    if len(kept) != len(tree.children):
        logger.debug(f"Removed {len(tree.children) - len(kept)} children of '{tree.name}'")
    return tree.model_copy(update={"children": kept})


def group_siblings(
    tree: SunburstTree,
    parent_selector: Callable[[SunburstTree], bool],
    child_classifier: Callable[[SunburstLevel], str],
    collapse_under_name: Callable[[str], bool] = lambda name: False,
) -> SunburstTree:
    """Regroup the children of selected nodes under one new node per group.

    Groups appear in first-seen order. Where ``collapse_under_name`` is true
    for a group, the group holds its members' children rather than the
    members themselves. Grouped nodes are not descended into.
    """

    def regroup(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        if not (is_sunburst_tree(level) and parent_selector(level)):
            return level, True
        grouped: dict[str, list[SunburstLevel]] = {}
        for child in level.children:
            grouped.setdefault(child_classifier(child), []).append(child)
        children: list[SunburstLevel] = []
        for name, members in grouped.items():
            if collapse_under_name(name):
                members = [grandchild for m in members for grandchild in children_of(m)]
            children.append(SunburstTree(name=name, children=members))
        return level.model_copy(update={"children": children}), False

    return transform(tree, regroup)


def merge_siblings(
    tree: SunburstTree,
    selector: Callable[[SunburstTree], bool],
    grouper: Callable[[SunburstLevel], str],
) -> SunburstTree:
    """Group the children of selected nodes, collapsing the group named "No"."""
    return group_siblings(tree, selector, grouper, collapse_under_name=lambda name: name == "No")


def _leaf_count(level: SunburstLevel) -> int:
    # A trimmed leaf stands for the leaves it replaced
    if not is_sunburst_tree(level):
        return int(level.size) if getattr(level, "trimmed", False) else 1
    return sum(_leaf_count(c) for c in level.children)


def trim_outer_rim(
    tree: SunburstTree,
    threshold: int = 1,
    selector: Callable[[SunburstTree], bool] | None = None,
) -> SunburstTree:
    """Collapse nodes whose children do not branch further into sized leaves.

    A non-root node collapses into a leaf sized by its child count when none
    of its children has more than ``threshold`` leaves beneath it. Leaf
    sizes play no part. Collapsed nodes are marked ``trimmed`` and count as
    the leaves they replaced, so applying the transform twice changes
    nothing further.

    Args:
        tree: Tree to trim.
        threshold: Leaves a child may have without blocking the collapse.
        selector: Optional further condition a node must meet to collapse.

    Returns:
        The trimmed tree.
    """

    def trim(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        if (
            depth > 0
            and is_sunburst_tree(level)
            and (selector is None or selector(level))
            and not any(_leaf_count(c) > threshold for c in level.children)
        ):
            collapsed = {**extras(level), "name": level.name, "size": len(level.children), "trimmed": True}
            return SunburstLeaf(**collapsed), False
        return level, True

    return transform(tree, trim)


def split_by(
    tree: SunburstTree,
    classifier: Callable[[SunburstLeaf], str | None],
    target_depth: int,
    descendant_picker: Callable[[SunburstLevel], list[SunburstLeaf]] = leaves_under,
) -> SunburstTree:
    """Introduce a classification level beneath nodes at the target depth.

    Each node at ``target_depth`` gets one child per distinct classification
    of its descendants (first-seen order). Each such child holds the original
    children having at least one descendant of that classification, so one
    original child may appear under several classifications. Descendants
    classified as None are ignored.
    """

    def split(level: SunburstLevel, depth: int) -> tuple[SunburstLevel, bool]:
        if depth != target_depth or not is_sunburst_tree(level):
            return level, True
        names: list[str] = []
        for leaf in descendant_picker(level):
            name = classifier(leaf)
            if name is not None and name not in names:
                names.append(name)
        children: list[SunburstLevel] = []
        for name in names:
            members = [k for k in level.children if any(classifier(d) == name for d in descendant_picker(k))]
            if members:
                children.append(SunburstTree(name=name, children=members))
        return level.model_copy(update={"children": children}), False

    return transform(tree, split)


def _merge_two(t1: SunburstTree, t2: SunburstTree) -> SunburstTree:
    if t1.name != t2.name:
        raise IncompatibleMergeError(f"Trees with different names cannot be merged. Had '{t1.name}' and '{t2.name}'")
    merged: dict[str, SunburstLevel] = {}
    for child in [*t1.children, *t2.children]:
        existing = merged.get(child.name)
        if existing is None:
            merged[child.name] = child
        elif is_sunburst_tree(existing) and is_sunburst_tree(child):
            merged[child.name] = _merge_two(existing, child)
        elif not is_sunburst_tree(existing) and not is_sunburst_tree(child):
            merged[child.name] = existing.model_copy(update={"size": existing.size + child.size})
        else:
            raise IncompatibleMergeError(f"Cannot merge a leaf and a tree both named '{child.name}'")
    return t1.model_copy(update={"children": list(merged.values())})


def merge_trees(*trees: SunburstTree) -> SunburstTree:
    """Merge trees sharing a root name.

    Children are unioned by name: same-named leaves have their sizes summed
    and same-named trees are merged recursively.

    Raises:
        IncompatibleMergeError: If root names differ, or a leaf and a tree
            share a name.
    """
    if not trees:
        raise ValueError("At least one tree is required")
    return reduce(_merge_two, trees)
