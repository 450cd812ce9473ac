"""
Roll resources up into page totals and per-domain aggregates.

Byte sums are ``ByteTotal`` values folded with ``+``: a single
resource of unknown size turns every sum it contributes to
(page-wide, per type, third-party, its domain, and its
domain/type bucket) into ``Unknown`` for good.
"""

from __future__ import annotations

from budgeter.models import sizes
from budgeter.models.resources import ResourceItem
from budgeter.models.summary import DomainAggregate, Totals
from budgeter.utils import logger
from budgeter.utils import url as url_mod

log = logger.create_logger("Aggregator")


def build_totals(resources: list[ResourceItem]) -> Totals:
    """Compute page-wide request counts and byte sums."""
    totals = Totals()
    for r in resources:
        size = sizes.of_size(r.size_bytes)
        totals.requests += 1
        totals.total_bytes += size
        if r.type == "script":
            totals.js_requests += 1
            totals.js_bytes += size
            if r.blocking:
                totals.blocking_scripts += 1
        else:
            totals.css_requests += 1
            totals.css_bytes += size
        if r.is_third_party:
            totals.third_party_requests += 1
            totals.third_party_bytes += size
    return totals


def build_domain_aggregates(resources: list[ResourceItem]) -> list[DomainAggregate]:
    """Group resources by hostname, heaviest domain first.

    Unknown byte sums sort as zero but keep their unknown value.
    Domains with equal weight stay in first-seen order.
    """
    by_domain: dict[str, DomainAggregate] = {}
    for r in resources:
        domain = url_mod.extract_domain(r.url)
        agg = by_domain.get(domain)
        if agg is None:
            agg = by_domain[domain] = DomainAggregate(domain=domain)
        size = sizes.of_size(r.size_bytes)
        agg.requests += 1
        agg.bytes += size
        bucket = agg.by_type[r.type]
        bucket.requests += 1
        bucket.bytes += size

    domains = sorted(by_domain.values(), key=lambda d: sizes.sort_key(d.bytes), reverse=True)
    log.debug("Domain aggregates built", {"domains": len(domains)})
    return domains
