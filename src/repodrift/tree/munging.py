"""Higher-level reshaping of planted trees."""

import logging
from collections.abc import Callable

from repodrift.tree.sunburst import (
    Circle,
    PlantedTree,
    SunburstLeaf,
    SunburstLevel,
    is_sunburst_tree,
    leaves_under,
    split_by,
    visit,
)

logger = logging.getLogger(__name__)


def introduce_classification_layer(
    planted: PlantedTree,
    descendant_classifier: Callable[[SunburstLeaf], str | None],
    new_layer_depth: int,
    new_layer_meaning: str,
    descendant_picker: Callable[[SunburstLevel], list[SunburstLeaf]] = leaves_under,
) -> PlantedTree:
    """Insert a level classifying descendants at the given depth.

    Args:
        planted: Tree to reshape.
        descendant_classifier: Classification for each descendant leaf.
        new_layer_depth: Depth of the new level; must be at least 1.
        new_layer_meaning: Legend for the new level.
        descendant_picker: Descendants to classify under each node.

    Returns:
        A new planted tree with the extra level and circle.

    Raises:
        ValueError: If ``new_layer_depth`` is below 1.
    """
    if new_layer_depth < 1:
        raise ValueError(f"Cannot introduce a layer at depth {new_layer_depth}: the root must stay")
    tree = split_by(planted.tree, descendant_classifier, new_layer_depth - 1, descendant_picker)
    circles = list(planted.circles)
    circles.insert(new_layer_depth, Circle(meaning=new_layer_meaning))
    return PlantedTree(tree=tree, circles=circles)


def split_by_org(planted: PlantedTree) -> PlantedTree:
    """Introduce an owner level beneath the root, from the ``owner`` of repo leaves."""
    return introduce_classification_layer(
        planted,
        descendant_classifier=lambda leaf: getattr(leaf, "owner", None),
        new_layer_depth=1,
        new_layer_meaning="owner",
    )


def validate_planted_tree(planted: PlantedTree) -> None:
    """Check a planted tree is well formed.

    Raises:
        ValueError: If a node has no name or a leaf has a negative size.
    """

    def check(level: SunburstLevel, depth: int) -> bool:
        if not level.name:
            raise ValueError(f"Unnamed node at depth {depth} of tree '{planted.tree.name}'")
        if not is_sunburst_tree(level) and level.size < 0:
            raise ValueError(f"Leaf '{level.name}' has negative size {level.size}")
        return True

    visit(planted.tree, check)
