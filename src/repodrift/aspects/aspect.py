"""Aspect definitions: what the registry knows about each fingerprint type."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from repodrift.models.schemas import Fingerprint


@dataclass
class Aspect:
    """A category of fact extractable from a project.

    Fingerprints produced by an aspect have ``type`` equal to the aspect name.
    Extraction happens outside this package; here an aspect only describes
    how its fingerprints are displayed and summarized.
    """

    name: str
    display_name: str | None = None
    base_only: bool = False  # Only meaningful at the repository root
    entropy: bool = True  # Whether entropy is a meaningful statistic
    basic_stats_path: str | None = None
    documentation_url: str | None = None
    to_displayable_fingerprint_name: Callable[[str], str] | None = None
    to_displayable_fingerprint: Callable[[Fingerprint], str] | None = None


def defaulted_to_displayable_fingerprint_name(aspect: Aspect | None) -> Callable[[str], str]:
    """Name renderer for an aspect's fingerprints, falling back to the raw name."""
    if aspect and aspect.to_displayable_fingerprint_name:
        return aspect.to_displayable_fingerprint_name
    return lambda name: name


def defaulted_to_displayable_fingerprint(aspect: Aspect | None) -> Callable[[Fingerprint], Any]:
    """Value renderer for an aspect's fingerprints, falling back to the raw data."""
    if aspect and aspect.to_displayable_fingerprint:
        return aspect.to_displayable_fingerprint
    return lambda fp: fp.data if fp else None


def aspect_specifies_no_entropy(aspect: Aspect | None) -> bool:
    return aspect is not None and not aspect.entropy
