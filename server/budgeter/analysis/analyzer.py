"""
Page analysis: HTML in, ``BudgetSummary`` out.

``summarize`` is a pure function of already-extracted, already-sized
resources. ``analyze`` adds extraction and size lookup in front of
it. Neither touches shared state, so concurrent analyses cannot
interfere.
"""

from __future__ import annotations

from urllib import parse

from budgeter.analysis import aggregator, budget, duplicates, extractor, libraries, removal, size_fetcher
from budgeter.models.resources import ResourceItem
from budgeter.models.summary import AnalyzeOptions, BudgetActuals, BudgetSummary
from budgeter.utils import logger

log = logger.create_logger("Analyzer")


def first_party_host(input_url: str, final_url: str) -> str:
    """Hostname the page belongs to: the final URL's, else the input URL's."""
    for candidate in (final_url, input_url):
        if not candidate:
            continue
        try:
            host = parse.urlsplit(candidate).hostname
        except ValueError:
            continue
        if host:
            return host
    return ""


def summarize(
    input_url: str,
    final_url: str,
    resources: list[ResourceItem],
    options: AnalyzeOptions,
) -> BudgetSummary:
    """Build the budget summary for a sized resource list."""
    totals = aggregator.build_totals(resources)
    detected = libraries.detect_libraries(resources)
    report = budget.evaluate_budget(
        options.budget,
        BudgetActuals(
            third_party_requests=totals.third_party_requests,
            third_party_bytes=totals.third_party_bytes,
        ),
    )
    return BudgetSummary(
        input_url=input_url,
        final_url=final_url,
        first_party_domain=first_party_host(input_url, final_url),
        resources=resources,
        totals=totals,
        domains=aggregator.build_domain_aggregates(resources),
        libraries=detected,
        duplicates=duplicates.find_duplicates(detected),
        removal_candidates=removal.assemble_removal_candidates(
            resources, detected, allow=options.allow, deny=options.deny
        ),
        budget_report=report,
    )


async def analyze(
    input_url: str,
    html: str,
    final_url: str,
    options: AnalyzeOptions | None = None,
    *,
    fetcher: size_fetcher.ResourceSizer | None = None,
) -> BudgetSummary:
    """Analyse fetched page HTML.

    Args:
        input_url: URL the caller asked for.
        html: Page body.
        final_url: URL after redirects; relative references resolve
            against it and its host is the first party.
        options: Budget thresholds, allow/deny lists, subdomain mode.
        fetcher: Resource sizer; defaults to HEAD requests via aiohttp.

    Returns:
        The complete summary. Never raises for malformed HTML.
    """
    options = options or AnalyzeOptions()
    base_url = final_url or input_url
    host = first_party_host(input_url, final_url)

    resources = extractor.extract_resources(
        html,
        base_url,
        host,
        treat_subdomains=options.treat_subdomains_as_first_party,
    )
    sizer = fetcher or size_fetcher.SizeFetcher()
    resources = await sizer.fetch_sizes(resources)

    summary = summarize(input_url, final_url, resources, options)
    log.info("Analysis summarised", {
        "firstParty": host,
        "requests": summary.totals.requests,
        "thirdParty": summary.totals.third_party_requests,
        "duplicates": len(summary.duplicates),
        "removalCandidates": len(summary.removal_candidates),
        "budgetStatus": summary.budget_report.status,
    })
    return summary
