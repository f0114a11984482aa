"""Tests for tag usage, tag selection and the tag explorer tree."""

from __future__ import annotations

from repodrift.models.schemas import ScoredRepo, Severity, WeightedScore
from repodrift.taggers.usage import TagGroup, TagUsage, describe_selected_tags, relevant, tag_usage_in
from repodrift.tree.explore import explore_tree
from tests._fixtures.builders import analyzed, fp, tag, tagged


def _scored(name: str, *tag_names: str, owner: str = "acme", score: float = 3.0) -> ScoredRepo:
    return ScoredRepo(
        analysis=analyzed(name, fp("license", {"classification": "MIT"}), owner=owner),
        tags=[tag(t) for t in tag_names],
        weighted_score=WeightedScore(weighted_score=score),
    )


def test_tag_usage_counts_repos() -> None:
    repos = [
        tagged("alpha", tags=[tag("node"), tag("dead", Severity.WARN)]),
        tagged("beta", tags=[tag("node")]),
    ]

    usage = tag_usage_in(repos)

    assert [(u.name, u.count) for u in usage] == [("dead", 1), ("node", 2)]
    assert usage[0].severity == Severity.WARN


def test_relevant_supports_exclusion() -> None:
    repo = tagged("alpha", tags=[tag("node")])
    assert relevant("node", repo)
    assert not relevant("!node", repo)
    assert relevant("!dead", repo)
    assert not relevant("dead", repo)


def test_describe_selected_tags() -> None:
    assert describe_selected_tags([]) == "All"
    assert describe_selected_tags(["node", "!dead"]) == "node and not dead"


def _group() -> TagGroup:
    tags = [
        TagUsage(name="node", count=3),
        TagUsage(name="dead", severity=Severity.WARN, description="No recent commits", count=1),
        TagUsage(name="vulnerable", severity=Severity.ERROR, count=2),
    ]
    return TagGroup(["java", "!docker"], tags, matching_repo_count=4)


def test_tag_group_names_and_severity() -> None:
    group = _group()
    assert group.all_tag_names() == ["java", "docker", "node", "dead", "vulnerable"]
    assert group.is_required("java") and not group.is_required("node")
    assert group.is_excluded("docker")
    assert group.is_warning("dead") and not group.is_error("dead")
    assert group.is_error("vulnerable")
    assert group.description_of("dead") == "No recent commits"
    assert group.description_of("unknown") == ""


def test_tag_group_percentages() -> None:
    group = _group()
    assert group.percentage_of_projects("node") == 75
    assert group.percentage_of_projects("dead") == 25
    assert group.percentage_of_projects("java") == 100
    assert group.percentage_of_projects("docker") == 0
    assert TagGroup([], [TagUsage(name="node", count=1)]).percentage_of_projects("node") == 0


def test_tag_group_toggles_selection() -> None:
    group = _group()
    assert group.tag_selection_for_require("node") == ["java", "!docker", "node"]
    assert group.tag_selection_for_require("java") == ["!docker"]
    assert group.tag_selection_for_require("docker") == ["java", "docker"]
    assert group.tag_selection_for_exclude("java") == ["!docker", "!java"]
    assert group.tag_selection_for_exclude("docker") == ["java"]


def test_tag_group_descriptions() -> None:
    group = _group()
    assert group.describe_require("java") == "Currently showing only java projects"
    assert group.describe_require("node") == "Show only node projects (3)"
    assert group.describe_exclude("docker") == "Currently excluding docker projects"
    assert group.describe_exclude("java") == "Switch to excluding java projects"
    assert group.describe_exclude("node") == "Exclude node projects"


def test_explore_tree_filters_by_tags() -> None:
    repos = [
        _scored("alpha", "node"),
        _scored("beta", "node", "dead", owner="other", score=2.5),
        _scored("gamma", "java"),
    ]

    explored = explore_tree("ws1", repos, selected_tags=["node", "!dead"], by_org=False)

    assert explored.tree.name == "node and not dead"
    assert [c.meaning for c in explored.circles] == ["tag filter", "repo"]
    assert [r.name for r in explored.tree.children] == ["alpha"]
    leaf = explored.tree.children[0]
    assert (leaf.size, leaf.owner, leaf.tags, leaf.weighted_score) == (1, "acme", ["node"], 3.0)
    assert (explored.repo_count, explored.matching_repo_count) == (3, 1)
    assert [(t.name, t.count) for t in explored.tags] == [("node", 1)]


def test_explore_tree_by_org() -> None:
    repos = [_scored("alpha", "node"), _scored("beta", "node", owner="other")]

    explored = explore_tree("ws1", repos)

    assert explored.tree.name == "All"
    assert [o.name for o in explored.tree.children] == ["acme", "other"]
    assert [c.meaning for c in explored.circles] == ["tag filter", "owner", "repo"]
