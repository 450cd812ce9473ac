"""
Human-readable renderings of a ``BudgetSummary``.

The remediation plan is plain text meant to be pasted into a
ticket; the CSV exports mirror the domain and resource tables.
"""

from __future__ import annotations

import csv
import io

from budgeter.models import sizes
from budgeter.models.summary import BudgetSummary

PLAN_TITLE = "Third-Party Script Budgeter - Remediation Plan"
TOP_DOMAINS = 5
MAX_BLOCKERS = 20


def format_bytes(n: int | None) -> str:
    """Format a byte count for display; ``None`` means unknown."""
    if n is None:
        return "unknown"
    if n < 1024:
        return f"{n} B"
    kb = n / 1024
    if kb < 1024:
        return f"{kb:.1f} kB"
    return f"{kb / 1024:.2f} MB"


def build_remediation_plan(summary: BudgetSummary) -> str:
    """Render a text plan listing what to fix first."""
    lines = [PLAN_TITLE, f"URL: {summary.final_url or summary.input_url}"]

    report = summary.budget_report
    lines.append(f"Budget status: {report.status}")
    if report.thresholds.third_party_requests:
        lines.append(
            f"  3P Requests: {report.actuals.third_party_requests}/{report.thresholds.third_party_requests}"
        )
    if report.thresholds.third_party_bytes:
        lines.append(
            f"  3P Bytes: {format_bytes(sizes.as_int(report.actuals.third_party_bytes))}"
            f" / {format_bytes(report.thresholds.third_party_bytes)}"
        )
    if report.violations:
        lines.append("  Violations:")
        lines.extend(f"   - {v}" for v in report.violations)

    domains = sorted(summary.domains, key=lambda d: sizes.sort_key(d.bytes), reverse=True)[:TOP_DOMAINS]
    if domains:
        lines.append("Top domains by bytes:")
        lines.extend(f" - {d.domain}: {format_bytes(sizes.as_int(d.bytes))} ({d.requests} req)" for d in domains)

    blockers = [r for r in summary.resources if r.is_third_party and r.is_blocking_script][:MAX_BLOCKERS]
    if blockers:
        lines.append("Blocking third-party scripts (convert to async/defer/module or lazy-load):")
        lines.extend(f" - {r.url}" for r in blockers)

    if summary.duplicates:
        lines.append("Duplicate libraries (consolidate to a single version):")
        lines.extend(f" - {d.name}: {', '.join(d.versions)}" for d in summary.duplicates)

    if summary.removal_candidates:
        lines.append("Removal candidates:")
        for c in summary.removal_candidates:
            suffix = f" ({c.details})" if c.details else ""
            lines.append(f" - [{c.reason}] {c.url}{suffix}")

    return "\n".join(lines)


def _to_csv(header: list[str], rows: list[list[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def _cell(value: int | None) -> object:
    return "" if value is None else value


def domains_csv(summary: BudgetSummary) -> str:
    """CSV of domain aggregates: ``domain,requests,bytes``."""
    return _to_csv(
        ["domain", "requests", "bytes"],
        [[d.domain, d.requests, _cell(sizes.as_int(d.bytes))] for d in summary.domains],
    )


def resources_csv(summary: BudgetSummary) -> str:
    """CSV of resources: ``type,origin,blocking,sizeBytes,url``."""
    return _to_csv(
        ["type", "origin", "blocking", "sizeBytes", "url"],
        [
            [r.type, r.origin, "true" if r.blocking else "false", _cell(r.size_bytes), r.url]
            for r in summary.resources
        ],
    )
