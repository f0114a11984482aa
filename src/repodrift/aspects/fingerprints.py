"""Well-known fingerprint types and accessors for their data."""

import hashlib
import json
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from repodrift.models.schemas import Fingerprint

LICENSE_TYPE = "license"
CODE_OF_CONDUCT_TYPE = "code-of-conduct"
BRANCH_COUNT_TYPE = "branch-count"
GIT_RECENCY_TYPE = "git-recency"
GIT_ACTIVES_TYPE = "git-actives"
EXPOSED_SECRETS_TYPE = "exposed-secret"
CODE_METRICS_TYPE = "code-metrics"
REVIEW_COMMENT_COUNT_TYPE = "review-comment-count"

NO_LICENSE = "None"


def fingerprint_sha(data: Any) -> str:
    """Compute the content hash for a fingerprint data payload."""
    payload = json.dumps(data, separators=(",", ":"), sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def fingerprint_of(type: str, data: Any, name: str | None = None, path: str | None = None) -> Fingerprint:
    """Build a fingerprint, hashing its data."""
    return Fingerprint(type=type, name=name or type, sha=fingerprint_sha(data), data=data, path=path)


def distinct_non_root_paths(fingerprints: Iterable[Fingerprint]) -> list[str]:
    """Distinct virtual project paths, in first-seen order.

    The root is represented by a missing path, "" or ".".
    """
    paths: list[str] = []
    for fp in fingerprints:
        if fp.path not in (None, "", ".") and fp.path not in paths:
            paths.append(fp.path)
    return paths


def find_fingerprint(fingerprints: Iterable[Fingerprint], type: str) -> Fingerprint | None:
    return next((fp for fp in fingerprints if fp.type == type), None)


def days_since(date: datetime, now: datetime | None = None) -> int:
    """Whole days between a date and now, rounded."""
    now = now or datetime.now(timezone.utc)
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return round(abs((now - date).total_seconds()) / 86400)


# License

def is_license_fingerprint(fp: Fingerprint) -> bool:
    return fp.type == LICENSE_TYPE


def has_no_license(data: Any) -> bool:
    if not isinstance(data, dict):
        return True
    classification = data.get("classification")
    return not classification or classification == NO_LICENSE


# Glob matches

def is_glob_match_fingerprint(fp: Fingerprint) -> bool:
    data = fp.data
    return (
        isinstance(data, dict)
        and data.get("kind") == "glob"
        and bool(data.get("glob"))
        and data.get("matches") is not None
    )


def glob_matches(fp: Fingerprint) -> list[dict[str, Any]]:
    return list(fp.data.get("matches") or [])


def count_glob_matches(fingerprints: Iterable[Fingerprint], type: str | None = None) -> int:
    """Count glob matches across fingerprints, optionally of one type only."""
    return sum(
        len(glob_matches(fp))
        for fp in fingerprints
        if is_glob_match_fingerprint(fp) and (type is None or fp.type == type)
    )


# Code metrics

def is_code_metrics_fingerprint(fp: Fingerprint) -> bool:
    return fp.type == CODE_METRICS_TYPE and isinstance(fp.data, dict)


def language_names(fp: Fingerprint) -> list[str]:
    return [lang["language"]["name"] for lang in fp.data.get("languages", [])]


def lines_in_language(fp: Fingerprint, language: str) -> int:
    for lang in fp.data.get("languages", []):
        if lang["language"]["name"] == language:
            return lang.get("total", 0)
    return 0


# Git

def last_commit_time(fp: Fingerprint) -> datetime | None:
    """Read the last commit time from a git recency fingerprint.

    The data may be the time itself or an object with ``lastCommitTime``,
    given as an ISO timestamp or as epoch milliseconds. Unreadable times
    give None.
    """
    raw = fp.data.get("lastCommitTime") if isinstance(fp.data, dict) else fp.data
    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        if isinstance(raw, (int, float)):
            return datetime.fromtimestamp(raw / 1000, timezone.utc)
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return None


def count_of(fp: Fingerprint) -> int:
    """Read the count from a count-valued fingerprint such as branch count."""
    if isinstance(fp.data, dict):
        return int(fp.data.get("count", 0))
    return int(fp.data or 0)


# Classification

def is_classification_data_fingerprint(fp: Fingerprint) -> bool:
    data = fp.data
    return isinstance(data, dict) and isinstance(data.get("tags"), list) and isinstance(data.get("reasons"), list)


def find_review_comment_count_fingerprint(reviewer: str, fingerprints: Iterable[Fingerprint]) -> Fingerprint | None:
    return next(
        (fp for fp in fingerprints if fp.type == REVIEW_COMMENT_COUNT_TYPE and fp.name == reviewer),
        None,
    )
