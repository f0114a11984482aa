"""Tag usage counts and tag selection for exploring a workspace by tag."""

from collections.abc import Sequence

from repodrift.models.schemas import Severity, Tag, TaggedRepo

EXCLUDE_PREFIX = "!"


class TagUsage(Tag):
    """A tag and the number of repositories carrying it."""

    count: int = 0


def tag_usage_in(repos: Sequence[TaggedRepo]) -> list[TagUsage]:
    """Count how many repositories carry each tag, sorted by tag name."""
    usage: dict[str, TagUsage] = {}
    for repo in repos:
        for tag in repo.tags:
            if tag.name in usage:
                usage[tag.name].count += 1
            else:
                usage[tag.name] = TagUsage(**tag.model_dump(), count=1)
    return sorted(usage.values(), key=lambda u: u.name)


def relevant(selected_tag: str, repo: TaggedRepo) -> bool:
    """Whether a repository matches one tag selection.

    A selection starting with "!" matches repositories without the tag.
    """
    names = {tag.name for tag in repo.tags}
    if selected_tag.startswith(EXCLUDE_PREFIX):
        return selected_tag[len(EXCLUDE_PREFIX):] not in names
    return selected_tag in names


def describe_selected_tags(selected_tags: Sequence[str]) -> str:
    """Describe a tag selection for humans, e.g. "node and not dead"."""
    return " and ".join(t.replace(EXCLUDE_PREFIX, "not ", 1) for t in selected_tags) or "All"


class TagGroup:
    """A tag selection alongside the tags present in the matching repositories.

    Backs tag filter controls: which tags are required or excluded, how
    common each is, and what the selection becomes when one is toggled.
    """

    def __init__(self, tag_selection: Sequence[str], tags: Sequence[TagUsage] = (), matching_repo_count: int = 0):
        self.tag_selection = list(tag_selection)
        self._tags = {t.name: t for t in tags}
        self._matching_repo_count = matching_repo_count

    def all_tag_names(self) -> list[str]:
        names = [t.replace(EXCLUDE_PREFIX, "", 1) for t in self.tag_selection] + list(self._tags)
        return list(dict.fromkeys(names))

    def is_required(self, tag_name: str) -> bool:
        return tag_name in self.tag_selection

    def is_excluded(self, tag_name: str) -> bool:
        return EXCLUDE_PREFIX + tag_name in self.tag_selection

    def is_warning(self, tag_name: str) -> bool:
        usage = self._tags.get(tag_name)
        return usage is not None and usage.severity == Severity.WARN

    def is_error(self, tag_name: str) -> bool:
        usage = self._tags.get(tag_name)
        return usage is not None and usage.severity == Severity.ERROR

    def description_of(self, tag_name: str) -> str:
        usage = self._tags.get(tag_name)
        return (usage.description or "") if usage else ""

    def percentage_of_projects(self, tag_name: str) -> int:
        """Share of matching repositories carrying a tag, 0-100."""
        if self.is_excluded(tag_name):
            return 0
        if self.is_required(tag_name):
            return 100
        usage = self._tags.get(tag_name)
        if usage is None or not self._matching_repo_count:
            return 0
        return round(usage.count * 100 / self._matching_repo_count)

    def describe_exclude(self, tag_name: str) -> str:
        if self.is_required(tag_name):
            return f"Switch to excluding {tag_name} projects"
        if self.is_excluded(tag_name):
            return f"Currently excluding {tag_name} projects"
        return f"Exclude {tag_name} projects"

    def describe_require(self, tag_name: str) -> str:
        if self.is_required(tag_name):
            return f"Currently showing only {tag_name} projects"
        usage = self._tags.get(tag_name)
        if usage is not None:
            return f"Show only {tag_name} projects ({usage.count})"
        return f"Show only {tag_name} projects"

    def tag_selection_for_require(self, tag_name: str) -> list[str]:
        """The selection after clicking "require" on a tag. Clicking again toggles it off."""
        if self.is_required(tag_name):
            return [t for t in self.tag_selection if t != tag_name]
        return [t for t in self.tag_selection if t != EXCLUDE_PREFIX + tag_name] + [tag_name]

    def tag_selection_for_exclude(self, tag_name: str) -> list[str]:
        """The selection after clicking "exclude" on a tag. Clicking again toggles it off."""
        excluded = EXCLUDE_PREFIX + tag_name
        if self.is_excluded(tag_name):
            return [t for t in self.tag_selection if t != excluded]
        return [t for t in self.tag_selection if t != tag_name] + [excluded]
