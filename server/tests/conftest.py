"""Shared fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from budgeter.models.resources import LibraryItem, ResourceItem, ResourceType


class FakeSizer:
    """Resource sizer that answers from a URL → size mapping."""

    def __init__(self, sizes: dict[str, int | None] | None = None) -> None:
        self.sizes = sizes or {}
        self.calls: list[list[str]] = []

    async def fetch_sizes(self, resources: list[ResourceItem]) -> list[ResourceItem]:
        self.calls.append([r.url for r in resources])
        return [r.model_copy(update={"size_bytes": self.sizes.get(r.url)}) for r in resources]


# ── Resource Factories ──────────────────────────────────────────


@pytest.fixture()
def make_resource() -> Callable[..., ResourceItem]:
    """Build a ResourceItem with sensible defaults."""

    def _make(
        url: str = "https://example.com/app.js",
        type: ResourceType = "script",
        origin: str = "first",
        blocking: bool = False,
        size_bytes: int | None = None,
    ) -> ResourceItem:
        return ResourceItem(url=url, type=type, origin=origin, blocking=blocking, size_bytes=size_bytes)

    return _make


@pytest.fixture()
def make_library() -> Callable[..., LibraryItem]:
    """Build a LibraryItem for duplicate / removal tests."""

    def _make(name: str, version: str | None, url: str | None = None) -> LibraryItem:
        return LibraryItem(
            name=name,
            version=version,
            url=url or f"https://cdn.example.net/{name}/{version or 'latest'}/{name}.js",
            domain="cdn.example.net",
            type="script",
        )

    return _make


@pytest.fixture()
def fake_sizer() -> type[FakeSizer]:
    return FakeSizer


# ── Page Fixtures ───────────────────────────────────────────────


@pytest.fixture()
def sample_html() -> str:
    """A page mixing first/third-party, blocking/non-blocking resources."""
    return """
<!doctype html>
<html>
<head>
  <link rel="stylesheet" href="/css/site.css">
  <script src="https://cdn.jsdelivr.net/npm/lodash@4.17.21/lodash.min.js"></script>
  <script async src="https://www.googletagmanager.com/gtag/js?id=G-123"></script>
  <link rel="icon" href="/favicon.ico">
  <link rel="stylesheet" href="https://fonts.example-cdn.com/inter.css">
</head>
<body>
  <script src="/js/app.js" defer></script>
  <script>console.log("inline");</script>
  <script type="module" src="https://static.example.com/widget.js"></script>
  <script src="https://code.jquery.com/jquery-3.6.0.min.js"></script>
</body>
</html>
"""
