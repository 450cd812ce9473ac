"""
First- / third-party classification of resource hosts.
"""

from __future__ import annotations

from budgeter.models.resources import OriginType
from budgeter.utils import url as url_mod


def is_first_party(host: str, first_party_host: str, *, treat_subdomains: bool = False) -> bool:
    """Return True when *host* belongs to the page's own site.

    An exact hostname match is always first-party. With
    *treat_subdomains*, hosts sharing the page's registrable
    domain (last two labels) also count, so ``cdn.example.com``
    is first-party for ``www.example.com``.
    """
    host = host.lower()
    first_party_host = first_party_host.lower()
    if host == first_party_host:
        return True
    if treat_subdomains:
        a = url_mod.registrable_domain(first_party_host)
        b = url_mod.registrable_domain(host)
        return bool(a) and a == b
    return False


def classify_origin(url: str, first_party_host: str, *, treat_subdomains: bool = False) -> OriginType:
    """Classify an absolute resource URL as ``"first"`` or ``"third"`` party."""
    host = url_mod.extract_domain(url)
    if is_first_party(host, first_party_host, treat_subdomains=treat_subdomains):
        return "first"
    return "third"
