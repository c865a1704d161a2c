"""Semantic version parsing and comparison.

Only the numeric ``major.minor.patch`` core takes part in ordering;
pre-release and build suffixes are accepted but ignored.
"""

from __future__ import annotations

import re

_SEMVER_RE = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)"
    r"(?:-[0-9A-Za-z.-]+)?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)


def parse_version(value: object) -> tuple[int, int, int] | None:
    """Return ``(major, minor, patch)`` for *value*, or ``None`` if malformed."""
    if not isinstance(value, str):
        return None
    match = _SEMVER_RE.match(value.strip())
    if match is None:
        return None
    return (int(match.group(1)), int(match.group(2)), int(match.group(3)))


def compare_versions(a: object, b: object) -> int | None:
    """Compare two version strings.

    Returns ``-1``, ``0`` or ``1`` like a classic ``cmp``, or ``None`` when
    either side cannot be parsed.
    """
    left = parse_version(a)
    right = parse_version(b)
    if left is None or right is None:
        return None
    return (left > right) - (left < right)


def is_newer(candidate: object, current: object) -> bool:
    """True when *candidate* is strictly newer than *current*."""
    return compare_versions(candidate, current) == 1
