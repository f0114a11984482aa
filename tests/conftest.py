from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from repodrift.aspects.ideals import InMemoryIdealStore
from repodrift.aspects.problems import InMemoryProblemStore
from repodrift.aspects.registry import AspectRegistry
from repodrift.config import Settings
from repodrift.defaults import create_default_registry
from repodrift.models.schemas import Analyzed
from tests._fixtures.builders import analyzed, fp

WORKSPACE = "ws1"


@pytest.fixture(autouse=True)
def _reset_repodrift_logger() -> Iterator[None]:
    """Undo CLI logging setup so caplog sees repodrift records."""
    yield
    logger = logging.getLogger("repodrift")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def problem_store() -> InMemoryProblemStore:
    return InMemoryProblemStore()


@pytest.fixture
def ideal_store() -> InMemoryIdealStore:
    return InMemoryIdealStore()


@pytest.fixture
def registry(problem_store: InMemoryProblemStore, ideal_store: InMemoryIdealStore) -> AspectRegistry:
    """Default registry with default settings, independent of the environment."""
    return create_default_registry(Settings(), problem_store=problem_store, ideal_store=ideal_store)


@pytest.fixture
def workspace_analyses() -> list[Analyzed]:
    """Four repositories whose licenses vary most, base images less, and conduct not at all.

    Entropies by fingerprint occurrence: license 1.5, docker-base ~0.918,
    code-of-conduct 0, exposed-secret 1.0 (an aspect without meaningful entropy).
    """
    return [
        analyzed(
            "alpha",
            fp("license", {"classification": "MIT"}),
            fp("docker-base", "node:12", name="node"),
            fp("code-of-conduct", {"title": "Contributor Covenant"}),
            fp("exposed-secret", {"secret": "aws"}),
        ),
        analyzed(
            "beta",
            fp("license", {"classification": "Apache-2.0"}),
            fp("docker-base", "node:12", name="node"),
            fp("exposed-secret", {"secret": "github"}),
        ),
        analyzed(
            "gamma",
            fp("license", {"classification": "MIT"}),
            fp("docker-base", "node:14", name="node"),
            owner="other",
        ),
        analyzed("delta", fp("license", {"classification": "GPL-3.0"})),
    ]
