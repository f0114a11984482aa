"""Tagger definitions.

Three kinds of tagger exist, told apart by their ``kind``:

- ``Tagger`` tests one fingerprint at a time.
- ``WorkspaceSpecificTagger`` must first be prepared for a workspace,
  which compiles it into a ``Tagger``. Preparation may be async and
  happens once per batch.
- ``CombinationTagger`` sees all of a repository's fingerprints at once.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from repodrift.models.schemas import Fingerprint, RepoId, Severity, Tag

if TYPE_CHECKING:
    from repodrift.aspects.registry import AspectRegistry


class TaggerKind(str, Enum):
    """Discriminant for tagger variants."""

    FINGERPRINT = "fingerprint"
    WORKSPACE_SPECIFIC = "workspace_specific"
    COMBINATION = "combination"


FingerprintTest = Callable[[Fingerprint], bool]


@dataclass
class TagContext:
    """What a tagging run knows about the batch being tagged."""

    workspace_id: str
    registry: AspectRegistry | None = None
    repo_count: int = 0
    average_fingerprint_count: float = 0.0  # Mean distinct fingerprint types per repository


class _TagMetadata:
    name: str
    description: str | None
    severity: Severity | None
    parent: str | None

    def to_tag(self) -> Tag:
        return Tag(name=self.name, description=self.description, severity=self.severity, parent=self.parent)


@dataclass
class Tagger(_TagMetadata):
    """Tags a repository when any of its fingerprints passes the test."""

    name: str
    test: FingerprintTest
    description: str | None = None
    severity: Severity | None = None
    parent: str | None = None

    kind: ClassVar[TaggerKind] = TaggerKind.FINGERPRINT


@dataclass
class WorkspaceSpecificTagger(_TagMetadata):
    """A tagger whose test depends on the workspace, e.g. on stored problems."""

    name: str
    create_test: Callable[[str, AspectRegistry], Awaitable[FingerprintTest]]
    description: str | None = None
    severity: Severity | None = None
    parent: str | None = None

    kind: ClassVar[TaggerKind] = TaggerKind.WORKSPACE_SPECIFIC

    async def prepare(self, workspace_id: str, registry: AspectRegistry) -> Tagger:
        """Compile this tagger for one workspace.

        Args:
            workspace_id: Workspace being tagged.
            registry: Registry the test may consult.

        Returns:
            A fingerprint tagger reusable for every repository in the batch.
        """
        test = await self.create_test(workspace_id, registry)
        return Tagger(
            name=self.name,
            test=test,
            description=self.description,
            severity=self.severity,
            parent=self.parent,
        )


@dataclass
class CombinationTagger(_TagMetadata):
    """Tags a repository by correlating several of its fingerprints."""

    name: str
    test: Callable[[Sequence[Fingerprint], RepoId, TagContext], bool]
    description: str | None = None
    severity: Severity | None = None
    parent: str | None = None

    kind: ClassVar[TaggerKind] = TaggerKind.COMBINATION


TaggerDefinition = Tagger | WorkspaceSpecificTagger


def is_tagger(definition: TaggerDefinition | CombinationTagger) -> bool:
    return definition.kind == TaggerKind.FINGERPRINT


def is_workspace_specific(definition: TaggerDefinition | CombinationTagger) -> bool:
    return definition.kind == TaggerKind.WORKSPACE_SPECIFIC


def is_combination_tagger(definition: TaggerDefinition | CombinationTagger) -> bool:
    return definition.kind == TaggerKind.COMBINATION
