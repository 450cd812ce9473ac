"""Pydantic models for aggregates, budget evaluation, and the final summary."""

from __future__ import annotations

from typing import Literal

import pydantic

from budgeter.models import sizes
from budgeter.models.resources import CamelModel, LibraryItem, ResourceItem

BudgetStatus = Literal["pass", "warn", "fail", "unknown"]

RemovalReason = Literal[
    "denied-domain",
    "blocking-third-party",
    "duplicate-library-old-version",
]


# ============================================================================
# Aggregates
# ============================================================================


class TypeBucket(CamelModel):
    """Request and byte totals for one resource type within a domain."""

    requests: int = 0
    bytes: sizes.Bytes = sizes.ZERO


class DomainAggregate(CamelModel):
    """Resources served from a single hostname."""

    domain: str
    requests: int = 0
    bytes: sizes.Bytes = sizes.ZERO
    by_type: dict[str, TypeBucket] = pydantic.Field(
        default_factory=lambda: {"script": TypeBucket(), "style": TypeBucket()}
    )


class Totals(CamelModel):
    """Page-wide request counts and byte sums."""

    requests: int = 0
    js_requests: int = 0
    css_requests: int = 0
    third_party_requests: int = 0
    total_bytes: sizes.Bytes = sizes.ZERO
    js_bytes: sizes.Bytes = sizes.ZERO
    css_bytes: sizes.Bytes = sizes.ZERO
    third_party_bytes: sizes.Bytes = sizes.ZERO
    blocking_scripts: int = 0


# ============================================================================
# Libraries and removal
# ============================================================================


class DuplicateReport(CamelModel):
    """A library seen with more than one distinct version."""

    name: str
    versions: list[str]
    count: int


class RemovalCandidate(CamelModel):
    """A resource worth removing or deferring, with the reason why."""

    url: str
    reason: RemovalReason
    details: str | None = None


# ============================================================================
# Budget
# ============================================================================


class BudgetThresholds(CamelModel):
    """Optional third-party ceilings; unset means "not checked"."""

    third_party_requests: int | None = pydantic.Field(default=None, gt=0)
    third_party_bytes: int | None = pydantic.Field(default=None, gt=0)


class BudgetActuals(CamelModel):
    """Observed third-party request count and byte sum."""

    third_party_requests: int
    third_party_bytes: sizes.Bytes


class BudgetReport(CamelModel):
    """Outcome of comparing actuals against thresholds."""

    thresholds: BudgetThresholds
    actuals: BudgetActuals
    status: BudgetStatus = "pass"
    violations: list[str] = pydantic.Field(default_factory=list)


class AnalyzeOptions(CamelModel):
    """Caller-supplied knobs for a single analysis."""

    budget: BudgetThresholds = pydantic.Field(default_factory=BudgetThresholds)
    allow: list[str] = pydantic.Field(default_factory=list)
    deny: list[str] = pydantic.Field(default_factory=list)
    treat_subdomains_as_first_party: bool = False


# ============================================================================
# Summary
# ============================================================================


class BudgetSummary(CamelModel):
    """Everything one analysis produces. Recomputed on every run."""

    input_url: str
    final_url: str
    first_party_domain: str
    resources: list[ResourceItem] = pydantic.Field(default_factory=list)
    totals: Totals = pydantic.Field(default_factory=Totals)
    domains: list[DomainAggregate] = pydantic.Field(default_factory=list)
    libraries: list[LibraryItem] = pydantic.Field(default_factory=list)
    duplicates: list[DuplicateReport] = pydantic.Field(default_factory=list)
    removal_candidates: list[RemovalCandidate] = pydantic.Field(default_factory=list)
    budget_report: BudgetReport
