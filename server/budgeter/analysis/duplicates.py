"""
Duplicate library detection and old-version removal candidates.
"""

from __future__ import annotations

import re

from budgeter.models.resources import LibraryItem
from budgeter.models.summary import DuplicateReport, RemovalCandidate

UNKNOWN_VERSION = "unknown"

_SEMVER_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")

Semver = tuple[int, int, int]


def parse_semver(version: str | None) -> Semver | None:
    """Return the first ``major.minor.patch`` found in *version*, or ``None``.

    The match is unanchored: ``"1.2.3-beta"`` and ``"1.2.3.4"`` both
    parse as ``(1, 2, 3)``.
    """
    if not version:
        return None
    m = _SEMVER_RE.search(version)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def group_by_name(libraries: list[LibraryItem]) -> dict[str, list[LibraryItem]]:
    """Group library items by name, preserving first-seen order."""
    groups: dict[str, list[LibraryItem]] = {}
    for lib in libraries:
        groups.setdefault(lib.name, []).append(lib)
    return groups


def find_duplicates(libraries: list[LibraryItem]) -> list[DuplicateReport]:
    """Report every library name seen with more than one distinct version.

    A missing version counts as the distinct value ``"unknown"``.
    """
    reports: list[DuplicateReport] = []
    for name, group in group_by_name(libraries).items():
        versions = list(dict.fromkeys(lib.version or UNKNOWN_VERSION for lib in group))
        if len(versions) > 1:
            reports.append(DuplicateReport(name=name, versions=versions, count=len(versions)))
    return reports


def old_version_candidates(libraries: list[LibraryItem]) -> list[RemovalCandidate]:
    """Flag older copies of libraries loaded in several semver versions.

    Within each name group only versions that parse as
    ``major.minor.patch`` take part. With at least two of them, the
    highest version is kept (every copy of it) and each lower one
    becomes a ``duplicate-library-old-version`` candidate.
    """
    candidates: list[RemovalCandidate] = []
    for group in group_by_name(libraries).values():
        parsed = [(lib, sem) for lib in group if (sem := parse_semver(lib.version)) is not None]
        if len(parsed) < 2:
            continue
        newest = max(sem for _, sem in parsed)
        candidates.extend(
            RemovalCandidate(
                url=lib.url,
                reason="duplicate-library-old-version",
                details=f"{lib.name}@{lib.version}",
            )
            for lib, sem in parsed
            if sem < newest
        )
    return candidates
