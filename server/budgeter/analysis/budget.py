"""
Third-party budget evaluation.

Status only ever escalates within one evaluation: ``pass`` may
become ``warn`` or ``unknown``, and anything may become ``fail``.
The byte ceiling produces at most one of warn / unknown / fail.
"""

from __future__ import annotations

from budgeter.models import sizes
from budgeter.models.summary import BudgetActuals, BudgetReport, BudgetStatus, BudgetThresholds

# Known third-party bytes at or above this share of the ceiling warn.
WARN_RATIO_PERCENT = 90


def evaluate_budget(thresholds: BudgetThresholds, actuals: BudgetActuals) -> BudgetReport:
    """Compare *actuals* against *thresholds*.

    Checks run in a fixed order (requests, then bytes) so the
    violation list is deterministic for the same inputs.
    """
    status: BudgetStatus = "pass"
    violations: list[str] = []

    request_ceiling = thresholds.third_party_requests
    if request_ceiling and actuals.third_party_requests > request_ceiling:
        status = "fail"
        violations.append(f"Third-party requests {actuals.third_party_requests} > {request_ceiling}")

    byte_ceiling = thresholds.third_party_bytes
    if byte_ceiling:
        actual_bytes = sizes.as_int(actuals.third_party_bytes)
        if actual_bytes is None:
            if status != "fail":
                status = "unknown"
            violations.append("Third-party bytes unknown (no content-length)")
        elif actual_bytes > byte_ceiling:
            status = "fail"
            violations.append(f"Third-party bytes {actual_bytes} > {byte_ceiling}")
        elif status != "fail" and actual_bytes * 100 >= byte_ceiling * WARN_RATIO_PERCENT:
            status = "warn"

    return BudgetReport(
        thresholds=thresholds,
        actuals=actuals,
        status=status,
        violations=violations,
    )
