"""Tests for budgeter.analysis.extractor — static HTML resource extraction."""

from __future__ import annotations

import pytest

from budgeter.analysis.extractor import extract_resources

BASE = "https://www.example.com/index.html"
HOST = "www.example.com"


def _extract(html: str, *, subdomains: bool = False):
    return extract_resources(html, BASE, HOST, treat_subdomains=subdomains)


class TestExtractResources:
    """Tests for extract_resources()."""

    def test_document_order_and_types(self, sample_html: str) -> None:
        resources = _extract(sample_html)
        assert [(r.type, r.url) for r in resources] == [
            ("style", "https://www.example.com/css/site.css"),
            ("script", "https://cdn.jsdelivr.net/npm/lodash@4.17.21/lodash.min.js"),
            ("script", "https://www.googletagmanager.com/gtag/js?id=G-123"),
            ("style", "https://fonts.example-cdn.com/inter.css"),
            ("script", "https://www.example.com/js/app.js"),
            ("script", "https://static.example.com/widget.js"),
            ("script", "https://code.jquery.com/jquery-3.6.0.min.js"),
        ]

    def test_sizes_start_unknown(self, sample_html: str) -> None:
        assert all(r.size_bytes is None for r in _extract(sample_html))

    def test_blocking_flags(self, sample_html: str) -> None:
        blocking = {r.url: r.blocking for r in _extract(sample_html)}
        assert blocking["https://cdn.jsdelivr.net/npm/lodash@4.17.21/lodash.min.js"] is True
        assert blocking["https://www.googletagmanager.com/gtag/js?id=G-123"] is False  # async
        assert blocking["https://www.example.com/js/app.js"] is False  # defer
        assert blocking["https://static.example.com/widget.js"] is False  # module
        assert blocking["https://code.jquery.com/jquery-3.6.0.min.js"] is True

    def test_stylesheets_never_blocking(self, sample_html: str) -> None:
        assert all(not r.blocking for r in _extract(sample_html) if r.type == "style")

    def test_origins(self, sample_html: str) -> None:
        origins = {r.url: r.origin for r in _extract(sample_html)}
        assert origins["https://www.example.com/css/site.css"] == "first"
        assert origins["https://www.example.com/js/app.js"] == "first"
        assert origins["https://static.example.com/widget.js"] == "third"
        assert origins["https://code.jquery.com/jquery-3.6.0.min.js"] == "third"

    def test_subdomain_option(self, sample_html: str) -> None:
        origins = {r.url: r.origin for r in _extract(sample_html, subdomains=True)}
        assert origins["https://static.example.com/widget.js"] == "first"

    @pytest.mark.parametrize("type_attr", ["module", "MODULE", "Module"])
    def test_module_type_case_insensitive(self, type_attr: str) -> None:
        html = f'<script type="{type_attr}" src="/m.js"></script>'
        assert _extract(html)[0].blocking is False

    def test_non_module_type_blocks(self) -> None:
        html = '<script type="text/javascript" src="/m.js"></script>'
        assert _extract(html)[0].blocking is True

    def test_valueless_async_and_defer(self) -> None:
        html = '<script src="/a.js" async></script><script defer src="/b.js"></script>'
        assert [r.blocking for r in _extract(html)] == [False, False]

    def test_inline_scripts_ignored(self) -> None:
        assert _extract("<script>var x = 1;</script>") == []

    def test_non_stylesheet_links_ignored(self) -> None:
        html = '<link rel="preload" href="/a.css"><link rel="icon" href="/i.png"><link href="/b.css">'
        assert _extract(html) == []

    def test_stylesheet_rel_is_case_insensitive_token(self) -> None:
        html = '<link rel="Stylesheet" href="/a.css"><link rel="alternate stylesheet" href="/b.css">'
        assert [r.url for r in _extract(html)] == [
            "https://www.example.com/a.css",
            "https://www.example.com/b.css",
        ]

    def test_malformed_urls_silently_skipped(self) -> None:
        html = (
            '<script src="https://[::1/bad.js"></script>'
            '<script src=""></script>'
            '<script src="data:text/javascript,1"></script>'
            '<link rel="stylesheet" href="https://cdn.example.net:99999/x.css">'
            '<script src="/ok.js"></script>'
        )
        assert [r.url for r in _extract(html)] == ["https://www.example.com/ok.js"]

    @pytest.mark.parametrize("html", ["", "<<<>>>", "<html><head><script src=", "plain text"])
    def test_garbage_html_yields_nothing(self, html: str) -> None:
        assert _extract(html) == []

    def test_relative_resolution_uses_base_path(self) -> None:
        resources = extract_resources('<script src="app.js"></script>', "https://www.example.com/blog/post", HOST)
        assert resources[0].url == "https://www.example.com/blog/app.js"
