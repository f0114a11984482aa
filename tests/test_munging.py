"""Tests for planted tree reshaping."""

from __future__ import annotations

import pytest

from repodrift.tree.munging import introduce_classification_layer, split_by_org, validate_planted_tree
from repodrift.tree.sunburst import Circle, PlantedTree, SunburstLeaf, SunburstTree


def _planted() -> PlantedTree:
    return PlantedTree(
        tree=SunburstTree(
            name="license",
            children=[
                SunburstTree(
                    name="MIT",
                    children=[
                        SunburstLeaf(name="alpha", owner="acme"),
                        SunburstLeaf(name="gamma", owner="other"),
                    ],
                ),
                SunburstTree(name="GPL", children=[SunburstLeaf(name="delta", owner="acme")]),
            ],
        ),
        circles=[Circle(meaning="fingerprint name"), Circle(meaning="fingerprint value"), Circle(meaning="repo")],
    )


def test_split_by_org_adds_owner_level() -> None:
    planted = split_by_org(_planted())
    assert [c.meaning for c in planted.circles] == ["fingerprint name", "owner", "fingerprint value", "repo"]
    assert [c.name for c in planted.tree.children] == ["acme", "other"]
    assert [c.name for c in planted.tree.children[0].children] == ["MIT", "GPL"]
    assert [c.name for c in planted.tree.children[1].children] == ["MIT"]


def test_layer_introduced_below_nodes_at_depth() -> None:
    planted = introduce_classification_layer(
        _planted(),
        descendant_classifier=lambda leaf: leaf.owner,
        new_layer_depth=2,
        new_layer_meaning="owner",
    )
    mit = planted.tree.children[0]
    assert [c.name for c in mit.children] == ["acme", "other"]
    assert [c.meaning for c in planted.circles][2] == "owner"


def test_root_cannot_be_replaced() -> None:
    with pytest.raises(ValueError):
        introduce_classification_layer(_planted(), lambda leaf: "x", new_layer_depth=0, new_layer_meaning="x")


def test_validation_rejects_malformed_trees() -> None:
    validate_planted_tree(_planted())
    with pytest.raises(ValueError):
        validate_planted_tree(PlantedTree(tree=SunburstTree(name="root", children=[SunburstLeaf(name="")])))
    with pytest.raises(ValueError):
        validate_planted_tree(PlantedTree(tree=SunburstTree(name="root", children=[SunburstLeaf(name="a", size=-1)])))
