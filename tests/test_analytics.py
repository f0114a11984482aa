"""Tests for fingerprint usage statistics."""

from __future__ import annotations

import asyncio

import pytest

from repodrift.analytics.usage import (
    InMemoryFingerprintUsageAggregator,
    compute_fingerprint_usage,
    percentile_disc,
    shannon_entropy,
)
from tests._fixtures.builders import analyzed, fp


def test_shannon_entropy() -> None:
    assert shannon_entropy([5]) == 0
    assert shannon_entropy([1, 1]) == pytest.approx(1.0)
    assert shannon_entropy([1, 1, 1, 1]) == pytest.approx(2.0)
    assert shannon_entropy([2, 1, 1]) == pytest.approx(1.5)
    assert shannon_entropy([]) == 0


@pytest.mark.parametrize(
    ("fraction", "expected"),
    [(0, 1), (0.25, 1), (0.5, 2), (0.51, 3), (1, 4)],
)
def test_percentile_disc(fraction: float, expected: float) -> None:
    assert percentile_disc([4, 2, 3, 1], fraction) == expected


def test_percentile_disc_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        percentile_disc([], 0.5)
    with pytest.raises(ValueError):
        percentile_disc([1], 1.5)


def test_usage_per_fingerprint_kind(workspace_analyses) -> None:
    usage = {(u.type, u.name): u for u in compute_fingerprint_usage(workspace_analyses)}

    license = usage[("license", "license")]
    assert (license.variants, license.count) == (3, 4)
    assert license.entropy == pytest.approx(1.5)
    assert license.entropy_band == "Medium"

    node = usage[("docker-base", "node")]
    assert (node.variants, node.count) == (2, 3)
    assert node.entropy == pytest.approx(0.918, abs=1e-3)

    assert usage[("code-of-conduct", "code-of-conduct")].entropy == 0


def test_in_memory_aggregator(workspace_analyses) -> None:
    aggregator = InMemoryFingerprintUsageAggregator({"ws1": workspace_analyses})
    aggregator.add("ws2", [analyzed("other", fp("license", {"classification": "MIT"}))])

    assert [u.type for u in asyncio.run(aggregator.fingerprint_usage("ws1", type="license"))] == ["license"]
    assert asyncio.run(aggregator.entropy_at_percentile("ws1", 50)) == pytest.approx(0.918, abs=1e-3)
    assert asyncio.run(aggregator.entropy_at_percentile("empty", 50)) == 0

    everywhere = asyncio.run(aggregator.fingerprint_usage("*", type="license"))
    assert everywhere[0].count == 5

    repos = asyncio.run(aggregator.repos_by_kind("ws1"))
    assert [r.name for r in repos[("docker-base", "node")]] == ["alpha", "beta", "gamma"]
