"""
Static extraction of script and stylesheet references from HTML.

Only markup is inspected; nothing is executed, so resources
injected at runtime are out of reach by construction.
"""

from __future__ import annotations

import bs4

from budgeter.analysis import classifier
from budgeter.models.resources import ResourceItem, ResourceType
from budgeter.utils import logger
from budgeter.utils import url as url_mod

log = logger.create_logger("Extractor")


def _attr_text(tag: bs4.Tag, name: str) -> str:
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _is_stylesheet_link(tag: bs4.Tag) -> bool:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return "stylesheet" in (token.lower() for token in rel)


def _is_blocking_script(tag: bs4.Tag) -> bool:
    if tag.has_attr("async") or tag.has_attr("defer"):
        return False
    return _attr_text(tag, "type").lower() != "module"


def extract_resources(
    html: str,
    base_url: str,
    first_party_host: str,
    *,
    treat_subdomains: bool = False,
) -> list[ResourceItem]:
    """List the external scripts and stylesheets in *html*, in document order.

    References are resolved against *base_url*. Anything that does
    not resolve to an absolute http(s) URL with a host is dropped
    without comment.

    Args:
        html: Raw page markup. Malformed markup is tolerated.
        base_url: URL the page was served from (after redirects).
        first_party_host: Hostname the page belongs to.
        treat_subdomains: Count sibling subdomains as first-party.

    Returns:
        One ``ResourceItem`` per matched tag with ``size_bytes`` unset.
    """
    soup = bs4.BeautifulSoup(html or "", "html.parser")
    resources: list[ResourceItem] = []
    skipped = 0

    for tag in soup.find_all(["script", "link"]):
        kind: ResourceType
        if tag.name == "script" and tag.has_attr("src"):
            kind, reference, blocking = "script", _attr_text(tag, "src"), _is_blocking_script(tag)
        elif tag.name == "link" and tag.has_attr("href") and _is_stylesheet_link(tag):
            kind, reference, blocking = "style", _attr_text(tag, "href"), False
        else:
            continue

        resolved = url_mod.resolve_resource_url(reference, base_url)
        if resolved is None:
            skipped += 1
            continue

        absolute = resolved.geturl()
        resources.append(ResourceItem(
            url=absolute,
            type=kind,
            origin=classifier.classify_origin(absolute, first_party_host, treat_subdomains=treat_subdomains),
            blocking=blocking,
        ))

    log.info("Resources extracted", {
        "scripts": sum(1 for r in resources if r.type == "script"),
        "styles": sum(1 for r in resources if r.type == "style"),
        "skipped": skipped,
    })
    return resources
