"""
Query-string parsing for the budget endpoints.

The web form sends ceilings as loosely-typed strings: anything
non-numeric or non-positive simply means "no ceiling". The byte
ceiling arrives in kB.
"""

from __future__ import annotations

import math
from typing import Any

from budgeter.models.summary import AnalyzeOptions, BudgetSummary, BudgetThresholds


def parse_positive_number(raw: str | None) -> float | None:
    """Parse *raw* as a finite positive number, else ``None``."""
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def parse_csv_list(raw: str | None) -> list[str]:
    """Split a comma-separated list, trimming entries and dropping blanks."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_options(
    budget_req: str | None = None,
    budget_bytes_kb: str | None = None,
    allow: str | None = None,
    deny: str | None = None,
    subs_first: str | None = None,
) -> AnalyzeOptions:
    """Turn raw query parameters into ``AnalyzeOptions``."""
    requests = parse_positive_number(budget_req)
    kilobytes = parse_positive_number(budget_bytes_kb)
    request_ceiling = int(requests) if requests is not None else None
    byte_ceiling = round(kilobytes * 1024) if kilobytes is not None else None
    return AnalyzeOptions(
        budget=BudgetThresholds(
            third_party_requests=request_ceiling or None,
            third_party_bytes=byte_ceiling or None,
        ),
        allow=parse_csv_list(allow),
        deny=parse_csv_list(deny),
        treat_subdomains_as_first_party=(subs_first or "").strip() == "1",
    )


def serialize_summary(summary: BudgetSummary) -> dict[str, Any]:
    """Serialize a summary to the camelCase JSON contract."""
    return summary.model_dump(mode="json", by_alias=True)
