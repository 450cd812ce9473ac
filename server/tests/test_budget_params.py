"""Tests for budgeter.routes.budget_params — query-string parsing."""

from __future__ import annotations

import pytest

from budgeter.analysis.analyzer import summarize
from budgeter.models.summary import AnalyzeOptions
from budgeter.routes import budget_params


class TestParsePositiveNumber:
    """Tests for parse_positive_number()."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("10", 10.0),
            (" 2.5 ", 2.5),
            ("1e3", 1000.0),
            ("0", None),
            ("-1", None),
            ("abc", None),
            ("", None),
            ("nan", None),
            ("inf", None),
            (None, None),
        ],
    )
    def test_parse(self, raw: str | None, expected: float | None) -> None:
        assert budget_params.parse_positive_number(raw) == expected


class TestParseCsvList:
    """Tests for parse_csv_list()."""

    def test_trims_and_drops_blanks(self) -> None:
        assert budget_params.parse_csv_list(" a.com, ,b.com,, ") == ["a.com", "b.com"]

    @pytest.mark.parametrize("raw", [None, "", " , "])
    def test_empty(self, raw: str | None) -> None:
        assert budget_params.parse_csv_list(raw) == []


class TestBuildOptions:
    """Tests for build_options()."""

    def test_all_parameters(self) -> None:
        options = budget_params.build_options("5", "100", "googletagmanager.com, cdn.net", "tracker", "1")
        assert options.budget.third_party_requests == 5
        assert options.budget.third_party_bytes == 102_400
        assert options.allow == ["googletagmanager.com", "cdn.net"]
        assert options.deny == ["tracker"]
        assert options.treat_subdomains_as_first_party is True

    def test_defaults(self) -> None:
        assert budget_params.build_options() == AnalyzeOptions()

    def test_fractional_values(self) -> None:
        options = budget_params.build_options("2.9", "1.5")
        assert options.budget.third_party_requests == 2
        assert options.budget.third_party_bytes == 1536

    def test_values_that_round_to_zero_mean_unset(self) -> None:
        options = budget_params.build_options("0.5", "0.0001")
        assert options.budget.third_party_requests is None
        assert options.budget.third_party_bytes is None

    def test_invalid_ceilings_mean_unset(self) -> None:
        options = budget_params.build_options("lots", "-20")
        assert options.budget.third_party_requests is None
        assert options.budget.third_party_bytes is None

    @pytest.mark.parametrize("raw", [None, "", "0", "true", "yes"])
    def test_subdomain_flag_requires_one(self, raw: str | None) -> None:
        assert budget_params.build_options(subs_first=raw).treat_subdomains_as_first_party is False


class TestSerializeSummary:
    """Tests for serialize_summary()."""

    def test_camel_case_keys(self, make_resource) -> None:
        summary = summarize(
            "https://www.example.com/",
            "https://www.example.com/",
            [make_resource(size_bytes=None)],
            AnalyzeOptions(),
        )
        data = budget_params.serialize_summary(summary)
        assert data["inputUrl"] == "https://www.example.com/"
        assert data["firstPartyDomain"] == "www.example.com"
        assert data["resources"][0]["sizeBytes"] is None
        assert data["totals"]["totalBytes"] is None
        assert data["budgetReport"]["status"] == "pass"
        assert data["removalCandidates"] == []
