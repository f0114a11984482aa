"""Taggers and the tagging engine."""

from repodrift.taggers.base import CombinationTagger, TagContext, Tagger, WorkspaceSpecificTagger
from repodrift.taggers.tagging import tag_repositories, tags_for

__all__ = ["CombinationTagger", "TagContext", "Tagger", "WorkspaceSpecificTagger", "tag_repositories", "tags_for"]
