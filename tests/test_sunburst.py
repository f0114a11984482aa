"""Tests for sunburst trees and their transforms."""

from __future__ import annotations

import pytest

from repodrift.tree.sunburst import (
    IncompatibleMergeError,
    SunburstLeaf,
    SunburstTree,
    descendants,
    is_sunburst_tree,
    kill_children,
    leaves_under,
    merge_siblings,
    merge_trees,
    split_by,
    transform,
    trim_outer_rim,
    visit,
)


def leaf(name: str, size: float = 1, **extra) -> SunburstLeaf:
    return SunburstLeaf(name=name, size=size, **extra)


def node(name: str, *children, **extra) -> SunburstTree:
    return SunburstTree(name=name, children=list(children), **extra)


def _shape(level) -> object:
    if is_sunburst_tree(level):
        return {level.name: [_shape(c) for c in level.children]}
    return (level.name, level.size)


def test_discriminated_by_children_when_parsed() -> None:
    tree = SunburstTree.model_validate(
        {"name": "root", "children": [{"name": "a", "size": 2}, {"name": "b", "children": [], "type": "x"}]}
    )
    assert isinstance(tree.children[0], SunburstLeaf)
    assert isinstance(tree.children[1], SunburstTree)
    assert tree.children[1].type == "x"


def test_merge_sums_same_named_leaves() -> None:
    tree = node("root", leaf("a", 2), node("sub", leaf("b", 1)))
    merged = merge_trees(tree, tree)
    assert _shape(merged) == {"root": [("a", 4), {"sub": [("b", 2)]}]}
    assert _shape(tree) == {"root": [("a", 2), {"sub": [("b", 1)]}]}


def test_merge_unions_children() -> None:
    merged = merge_trees(node("root", leaf("a")), node("root", leaf("b")))
    assert _shape(merged) == {"root": [("a", 1), ("b", 1)]}


def test_merge_is_associative() -> None:
    t1 = node("root", leaf("a", 1), node("x", leaf("p", 1)))
    t2 = node("root", leaf("b", 2), node("x", leaf("p", 3)))
    t3 = node("root", leaf("a", 5), node("x", leaf("q", 1)))
    left = merge_trees(merge_trees(t1, t2), t3)
    right = merge_trees(t1, merge_trees(t2, t3))
    assert _shape(left) == _shape(right) == _shape(merge_trees(t1, t2, t3))


def test_merge_rejects_different_roots() -> None:
    with pytest.raises(IncompatibleMergeError):
        merge_trees(node("one"), node("two"))


def test_merge_rejects_leaf_and_tree_of_same_name() -> None:
    with pytest.raises(IncompatibleMergeError):
        merge_trees(node("root", leaf("a")), node("root", node("a")))


def test_merge_needs_a_tree() -> None:
    with pytest.raises(ValueError):
        merge_trees()


def test_visit_stops_descending_when_told() -> None:
    tree = node("root", node("skip", leaf("hidden")), leaf("shown"))
    seen: list[str] = []
    visit(tree, lambda level, depth: seen.append(level.name) or level.name != "skip")
    assert seen == ["root", "skip", "shown"]


def test_transform_leaves_original_untouched() -> None:
    tree = node("root", leaf("a"))
    renamed = transform(tree, lambda level, depth: (level.model_copy(update={"name": level.name.upper()}), True))
    assert _shape(renamed) == {"ROOT": [("A", 1)]}
    assert _shape(tree) == {"root": [("a", 1)]}


def test_leaves_and_descendants() -> None:
    tree = node("root", node("x", leaf("a"), leaf("b")), leaf("c"))
    assert [l.name for l in leaves_under(tree)] == ["a", "b", "c"]
    assert [d.name for d in descendants(tree)] == ["root", "x", "a", "b", "c"]
    assert leaves_under(leaf("solo"))[0].name == "solo"


def test_kill_children_prunes_root_children_only() -> None:
    tree = node("root", node("keep", node("drop", leaf("x")), leaf("drop")), node("drop", leaf("y")))
    pruned = kill_children(tree, lambda n, depth: n.name == "drop")
    assert _shape(pruned) == {"root": [{"keep": [{"drop": [("x", 1)]}, ("drop", 1)]}]}


def test_kill_children_drops_leaves_at_root() -> None:
    tree = node("root", leaf("solo"), node("None", leaf("x")), node("MIT", leaf("y")))
    pruned = kill_children(tree, lambda n, depth: n.name == "None")
    assert _shape(pruned) == {"root": [{"MIT": [("y", 1)]}]}
    assert _shape(kill_children(node("root", leaf("solo"), node("None")), lambda n, depth: n.name == "None")) == {
        "root": []
    }


def test_kill_children_sees_depth_one() -> None:
    tree = node("root", node("a", node("b", leaf("x"))))
    seen: list[int] = []
    kill_children(tree, lambda n, depth: seen.append(depth) or False)
    assert seen == [1]


def test_merge_siblings_collapses_no_group() -> None:
    tree = node(
        "root",
        node("spring", leaf("r1"), type="stack"),
        node("none", leaf("r2"), leaf("r3")),
    )
    grouped = merge_siblings(
        tree,
        selector=lambda parent: parent.name == "root",
        grouper=lambda kid: "Yes" if getattr(kid, "type", None) else "No",
    )
    assert _shape(grouped) == {"root": [{"Yes": [{"spring": [("r1", 1)]}]}, {"No": [("r2", 1), ("r3", 1)]}]}


def test_trim_collapses_outer_rim() -> None:
    tree = node("root", node("mit", leaf("r1"), leaf("r2"), type="license"), node("apache", leaf("r3")))
    trimmed = trim_outer_rim(tree)
    assert _shape(trimmed) == {"root": [("mit", 2), ("apache", 1)]}
    assert trimmed.children[0].type == "license"


def test_trim_is_idempotent() -> None:
    tree = node(
        "root",
        node("org", node("mit", leaf("r1"), leaf("r2")), node("apache", leaf("r3"))),
        node("gpl", leaf("r4")),
    )
    once = trim_outer_rim(tree)
    assert _shape(trim_outer_rim(once)) == _shape(once)


def test_trim_counts_leaves_not_sizes() -> None:
    tree = node("root", node("x", leaf("a", 2), leaf("b", 1)))
    assert _shape(trim_outer_rim(tree)) == {"root": [("x", 2)]}


def test_trim_keeps_nodes_with_branching_children() -> None:
    tree = node("root", node("org", node("x", leaf("a"), leaf("b")), leaf("c")))
    assert _shape(trim_outer_rim(tree)) == {"root": [{"org": [("x", 2), ("c", 1)]}]}
    assert _shape(trim_outer_rim(tree, threshold=2)) == {"root": [("org", 2)]}


def test_trim_respects_selector() -> None:
    tree = node("root", node("a", leaf("r1")), node("b", leaf("r2")))
    trimmed = trim_outer_rim(tree, selector=lambda n: n.name == "a")
    assert _shape(trimmed) == {"root": [("a", 1), {"b": [("r2", 1)]}]}


def test_split_by_classifies_under_target_depth() -> None:
    tree = node(
        "root",
        node("node", leaf("r1", owner="acme"), leaf("r2", owner="other")),
        node("java", leaf("r3", owner="acme")),
    )
    split = split_by(tree, lambda l: l.owner, target_depth=0)
    assert _shape(split) == {
        "root": [
            {"acme": [{"node": [("r1", 1), ("r2", 1)]}, {"java": [("r3", 1)]}]},
            {"other": [{"node": [("r1", 1), ("r2", 1)]}]},
        ]
    }


def test_split_by_ignores_unclassified() -> None:
    tree = node("root", leaf("r1", owner="acme"), leaf("r2"))
    split = split_by(tree, lambda l: getattr(l, "owner", None), target_depth=0)
    assert _shape(split) == {"root": [{"acme": [("r1", 1)]}]}


def test_split_by_mixes_leaf_and_tree_children() -> None:
    tree = node("root", leaf("r0", owner="acme"), node("node", leaf("r1", owner="other"), leaf("r2", owner="acme")))
    split = split_by(tree, lambda l: l.owner, target_depth=0)
    assert _shape(split) == {
        "root": [
            {"acme": [("r0", 1), {"node": [("r1", 1), ("r2", 1)]}]},
            {"other": [{"node": [("r1", 1), ("r2", 1)]}]},
        ]
    }


def test_split_by_grouping_rederived_from_result() -> None:
    tree = node(
        "root",
        node("node", leaf("r1", owner="acme"), leaf("r2", owner="acme")),
        node("java", leaf("r3", owner="other")),
        leaf("r4", owner="acme"),
    )
    split = split_by(tree, lambda l: l.owner, target_depth=0)

    grouping = {g.name: [l.name for l in leaves_under(g)] for g in split.children}
    rederived: dict[str, list[str]] = {}
    for l in leaves_under(split):
        rederived.setdefault(l.owner, []).append(l.name)
    assert grouping == rederived == {"acme": ["r1", "r2", "r4"], "other": ["r3"]}
    for group in split.children:
        assert {l.owner for l in leaves_under(group)} == {group.name}
