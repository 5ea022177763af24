"""Semantic version helpers for version coloring and timeline ordering."""

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional, Tuple

# SemVer 2.0.0, build metadata allowed (it is ignored for precedence)
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

SemverKey = Tuple[int, int, int, Tuple[str, ...]]


def clean_semver_version(version: str) -> str:
    """Drop build metadata (everything after '+').

    Example:
        >>> clean_semver_version("3510.2.0+build.7")
        '3510.2.0'
    """
    if "+" in version:
        return version.split("+", 1)[0]
    return version


def parse_semver(version: str) -> Optional[SemverKey]:
    """Parse a version string into (major, minor, patch, prerelease).

    Returns:
        Parsed tuple, or None if the string is not a valid semantic version
    """
    match = SEMVER_PATTERN.match(version.strip()) if isinstance(version, str) else None
    if match is None:
        return None
    major, minor, patch, prerelease, _build = match.groups()
    identifiers = tuple(prerelease.split(".")) if prerelease else ()
    return int(major), int(minor), int(patch), identifiers


def is_semver(version: str) -> bool:
    return parse_semver(version) is not None


def _compare_prerelease(left: Tuple[str, ...], right: Tuple[str, ...]) -> int:
    # A version without prerelease has higher precedence
    if not left and not right:
        return 0
    if not left:
        return 1
    if not right:
        return -1

    for a, b in zip(left, right):
        if a == b:
            continue
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            return -1 if int(a) < int(b) else 1
        # Numeric identifiers sort before alphanumeric ones
        if a_num:
            return -1
        if b_num:
            return 1
        return -1 if a < b else 1

    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


def compare_versions(version1: str, version2: str) -> int:
    """Compare two semantic versions by precedence.

    Returns:
        -1, 0 or 1 like a classic cmp()

    Raises:
        ValueError: If either version is not a valid semantic version
    """
    left = parse_semver(version1)
    right = parse_semver(version2)
    if left is None or right is None:
        invalid = version1 if left is None else version2
        raise ValueError(f"Not a semantic version: {invalid!r}")

    if left[:3] != right[:3]:
        return -1 if left[:3] < right[:3] else 1
    return _compare_prerelease(left[3], right[3])


def sort_versions(versions: Iterable[str], descending: bool = False) -> List[str]:
    """Sort semantic versions by precedence (earliest first by default)."""
    return sorted(versions, key=cmp_to_key(compare_versions), reverse=descending)
