"""
URL and domain utility functions for resource classification.
"""

from __future__ import annotations

import ipaddress
import re
from urllib import parse

from budgeter.utils import errors

_IPV4_RE = re.compile(r"^(\d+\.){3}\d+$")

# Hostname prefixes that point at private or loopback networks.
_PRIVATE_HOST_RE = re.compile(
    r"^(localhost|127\.|10\.|192\.168\.|172\.(1[6-9]|2\d|3[0-1])\.)",
    re.IGNORECASE,
)

_FETCHABLE_SCHEMES = frozenset(["http", "https"])


def extract_domain(url: str) -> str:
    """Extract the hostname from a URL string."""
    try:
        parsed = parse.urlparse(url)
        return parsed.hostname or "unknown"
    except ValueError:
        return "unknown"


def registrable_domain(host: str) -> str:
    """Approximate the registrable domain (eTLD+1) of *host*.

    Uses the last two dot-separated labels. IPv4 literals and
    ``localhost`` are their own registrable domain. No public
    suffix list is consulted, so hosts under multi-label suffixes
    such as ``co.uk`` collapse onto the suffix.

    Args:
        host: A hostname like ``"cdn.example.com"``.

    Returns:
        The approximated registrable domain, e.g. ``"example.com"``.
    """
    if not host or host == "localhost" or _IPV4_RE.match(host):
        return host
    parts = host.split(".")
    if len(parts) < 2:
        return host
    return ".".join(parts[-2:])


def resolve_resource_url(reference: str, base_url: str) -> parse.SplitResult | None:
    """Resolve a ``src``/``href`` value against the page URL.

    Returns ``None`` when the reference cannot name a retrievable
    resource: malformed URLs, bad ports, non-HTTP schemes, or
    URLs without a hostname.
    """
    reference = reference.strip()
    if not reference:
        return None
    try:
        parsed = parse.urlsplit(parse.urljoin(base_url, reference))
        # Accessing .port validates it.
        parsed.port  # noqa: B018
    except ValueError:
        return None
    if parsed.scheme.lower() not in _FETCHABLE_SCHEMES or not parsed.hostname:
        return None
    return parsed


def _is_private_ip(host: str) -> bool:
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified


def validate_target_url(url: str) -> str:
    """Check that *url* is a public HTTPS URL we are willing to fetch.

    Returns:
        The hostname of *url*.

    Raises:
        errors.InputValidationError: ``INVALID_URL``, ``NOT_HTTPS``
            or ``PRIVATE_HOST``.
    """
    try:
        parsed = parse.urlsplit(url.strip())
        host = parsed.hostname
        parsed.port  # noqa: B018
    except ValueError as exc:
        raise errors.InputValidationError("INVALID_URL", "Provide a valid https URL (public).") from exc
    if not host:
        raise errors.InputValidationError("INVALID_URL", "Provide a valid https URL (public).")
    if parsed.scheme.lower() != "https":
        raise errors.InputValidationError("NOT_HTTPS", "Only https URLs can be analysed.")
    if _PRIVATE_HOST_RE.match(host) or _is_private_ip(host):
        raise errors.InputValidationError("PRIVATE_HOST", "Private and loopback hosts cannot be analysed.")
    return host
