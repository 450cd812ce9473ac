"""
Assemble the list of resources worth removing or deferring.
"""

from __future__ import annotations

from budgeter.analysis import duplicates
from budgeter.models.resources import LibraryItem, ResourceItem
from budgeter.models.summary import RemovalCandidate
from budgeter.utils import url as url_mod


def _normalize_patterns(patterns: list[str]) -> list[str]:
    return [p.strip().lower() for p in patterns if p.strip()]


def _matches_any(host: str, patterns: list[str]) -> bool:
    return any(p in host for p in patterns)


def assemble_removal_candidates(
    resources: list[ResourceItem],
    libraries: list[LibraryItem],
    *,
    allow: list[str],
    deny: list[str],
) -> list[RemovalCandidate]:
    """Build removal candidates for the page.

    Per resource, a denylisted host wins outright; otherwise a
    blocking third-party script whose host is not allowlisted is
    flagged. Old duplicate library versions are appended last and
    ignore both lists.

    Args:
        resources: Extracted (and sized) resources.
        libraries: Libraries detected on those resources.
        allow: Host substrings exempt from the blocking check.
        deny: Host substrings that are always flagged.
    """
    allow_patterns = _normalize_patterns(allow)
    deny_patterns = _normalize_patterns(deny)
    candidates: list[RemovalCandidate] = []

    for r in resources:
        host = url_mod.extract_domain(r.url).lower()
        if _matches_any(host, deny_patterns):
            candidates.append(RemovalCandidate(url=r.url, reason="denied-domain", details=host))
            continue
        if r.is_third_party and r.is_blocking_script and not _matches_any(host, allow_patterns):
            candidates.append(RemovalCandidate(url=r.url, reason="blocking-third-party"))

    candidates.extend(duplicates.old_version_candidates(libraries))
    return candidates
