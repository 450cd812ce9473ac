"""
End-to-end budget run for one URL.

Validation, page retrieval, and analysis in sequence. Input
problems and page retrieval failures propagate as
``BudgetError`` subclasses; nothing partial is returned.
"""

from __future__ import annotations

from budgeter import config
from budgeter.analysis import analyzer, report, size_fetcher
from budgeter.models.summary import AnalyzeOptions, BudgetSummary
from budgeter.pipeline import page_fetch
from budgeter.utils import errors, logger
from budgeter.utils import url as url_mod

log = logger.create_logger("Budget")


async def run_budget_analysis(
    url: str,
    options: AnalyzeOptions,
    settings: config.Settings | None = None,
) -> BudgetSummary:
    """Validate *url*, fetch it, and analyse its third-party footprint.

    Raises:
        errors.InputValidationError: The URL or its response is rejected.
        errors.PageFetchError: The page could not be retrieved in time.
    """
    settings = settings or config.get_settings()
    try:
        host = url_mod.validate_target_url(url)
    except errors.InputValidationError as exc:
        log.warn("Rejected URL", {"url": url, "code": exc.code})
        raise

    logger.start_log_file(host)
    log.section(f"Budgeting: {url}")
    log.info("Options", {
        "requestCeiling": options.budget.third_party_requests,
        "byteCeiling": options.budget.third_party_bytes,
        "allow": options.allow,
        "deny": options.deny,
        "subdomainsFirstParty": options.treat_subdomains_as_first_party,
    })
    log.start_timer("total-analysis")
    try:
        page = await page_fetch.fetch_page(
            url,
            timeout=settings.page_fetch_timeout_seconds,
            user_agent=settings.user_agent,
        )
        summary = await analyzer.analyze(
            url,
            page.html,
            page.final_url,
            options,
            fetcher=size_fetcher.SizeFetcher(settings),
        )
        log.end_timer("total-analysis", "Budget analysis complete")

        status = summary.budget_report.status
        if status == "fail":
            log.warn("Budget exceeded", {"violations": summary.budget_report.violations})
        else:
            log.success("Budget evaluated", {"status": status})

        saved = logger.save_report_file(host, report.build_remediation_plan(summary))
        if saved:
            log.info("Remediation plan saved", {"path": saved})
        return summary
    finally:
        logger.end_log_file()
