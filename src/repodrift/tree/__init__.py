"""Sunburst trees and the reports built from them."""

from .drift import drift_report
from .explore import explore_tree
from .fingerprint_tree import build_fingerprint_tree, ideal_progress_tree
from .sunburst import PlantedTree, SunburstLeaf, SunburstTree, merge_trees

__all__ = [
    "PlantedTree",
    "SunburstLeaf",
    "SunburstTree",
    "build_fingerprint_tree",
    "drift_report",
    "explore_tree",
    "ideal_progress_tree",
    "merge_trees",
]
