"""Workspace-wide fingerprint statistics."""

from repodrift.analytics.usage import (
    FingerprintUsageAggregator,
    InMemoryFingerprintUsageAggregator,
    compute_fingerprint_usage,
    percentile_disc,
    shannon_entropy,
)

__all__ = [
    "FingerprintUsageAggregator",
    "InMemoryFingerprintUsageAggregator",
    "compute_fingerprint_usage",
    "percentile_disc",
    "shannon_entropy",
]
