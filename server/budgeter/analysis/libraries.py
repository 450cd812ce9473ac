"""
Heuristic library name/version detection from resource URLs.

Detection is an ordered cascade of independent matchers. Each one
looks at the parsed URL and either returns a ``DetectedLibrary``
or ``None``; the first match wins and later matchers are never
consulted. Matchers are ordered from most to least specific:
package-manager CDN paths, then filename and folder conventions,
then cache-busting query parameters, then bare name hints.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable
from urllib import parse

from budgeter.data import loader
from budgeter.models.resources import LibraryItem, ResourceItem
from budgeter.utils import logger

log = logger.create_logger("Library-Detector")

_VERSION_UNSAFE_RE = re.compile(r"[^0-9A-Za-z.+-]")

_NPM_PATH_RE = re.compile(r"/npm/([^@/]+)@([^/]+)")
_AT_SEGMENT_RE = re.compile(r"/([^/]+)@([0-9][^/]+)/")
_VERSIONED_FILE_RE = re.compile(r"^([A-Za-z0-9_.-]+?)[-_.]v?(\d+\.\d+\.\d+)(?:[^/]*?)\.(?:js|css)$")
_VERSION_FOLDER_RE = re.compile(r"/([A-Za-z0-9_.-]+)/(\d+\.\d+\.\d+)/")
_EXTENSION_RE = re.compile(r"\.(min\.)?(js|css)$", re.IGNORECASE)


@dataclasses.dataclass(frozen=True)
class DetectedLibrary:
    """Name (lowercase) and optional version guessed for one URL."""

    name: str
    version: str | None


@dataclasses.dataclass(frozen=True)
class _UrlParts:
    path: str
    filename: str
    host: str
    query: dict[str, list[str]]


def sanitize_version(raw: str) -> str | None:
    """Strip characters outside ``[0-9A-Za-z.+-]``; empty results become ``None``."""
    cleaned = _VERSION_UNSAFE_RE.sub("", raw)
    return cleaned or None


def _named(name: str, version: str | None) -> DetectedLibrary:
    return DetectedLibrary(
        name=name.lower(),
        version=sanitize_version(version) if version is not None else None,
    )


# ============================================================================
# Matchers, in priority order
# ============================================================================


def _match_npm_path(parts: _UrlParts) -> DetectedLibrary | None:
    """``/npm/<name>@<version>/...`` as served by jsDelivr."""
    m = _NPM_PATH_RE.search(parts.path)
    return _named(m.group(1), m.group(2)) if m else None


def _match_at_segment(parts: _UrlParts) -> DetectedLibrary | None:
    """``/<name>@<version>/...`` as served by unpkg and friends."""
    m = _AT_SEGMENT_RE.search(parts.path)
    return _named(m.group(1), m.group(2)) if m else None


def _match_versioned_filename(parts: _UrlParts) -> DetectedLibrary | None:
    """``name-1.2.3.min.js`` and similar.

    Anything between the version and the extension is tolerated, so
    ``jquery-v3.6.0-rc.min.js`` is jquery 3.6.0.
    """
    m = _VERSIONED_FILE_RE.match(parts.filename)
    return _named(m.group(1), m.group(2)) if m else None


def _match_version_folder(parts: _UrlParts) -> DetectedLibrary | None:
    """``/<name>/1.2.3/...`` as served by cdnjs."""
    m = _VERSION_FOLDER_RE.search(parts.path)
    return _named(m.group(1), m.group(2)) if m else None


def _match_version_query(parts: _UrlParts) -> DetectedLibrary | None:
    """``app.min.js?v=1.4`` — the filename stem names the library."""
    version = ""
    for key in ("v", "version"):
        version = (parts.query.get(key) or [""])[0]
        if version:
            break
    if not version:
        return None
    stem = _EXTENSION_RE.sub("", parts.filename).lower()
    return _named(stem, version) if stem else None


def _match_known_library(parts: _UrlParts) -> DetectedLibrary | None:
    filename = parts.filename.lower()
    for name in loader.get_known_libraries():
        if name in filename:
            return DetectedLibrary(name=name, version=None)
    return None


def _match_analytics_host(parts: _UrlParts) -> DetectedLibrary | None:
    for hint in loader.get_analytics_hosts():
        if hint in parts.host:
            return DetectedLibrary(name=hint, version=None)
    return None


MATCHERS: tuple[Callable[[_UrlParts], DetectedLibrary | None], ...] = (
    _match_npm_path,
    _match_at_segment,
    _match_versioned_filename,
    _match_version_folder,
    _match_version_query,
    _match_known_library,
    _match_analytics_host,
)


# ============================================================================
# Public API
# ============================================================================


def _split(url: str) -> _UrlParts | None:
    try:
        parsed = parse.urlsplit(url)
        host = parsed.hostname or ""
    except ValueError:
        return None
    return _UrlParts(
        path=parsed.path,
        filename=parsed.path.rsplit("/", 1)[-1],
        host=host,
        query=parse.parse_qs(parsed.query, keep_blank_values=True),
    )


def detect_library(url: str) -> DetectedLibrary | None:
    """Guess which library *url* serves, if any.

    Example:
        >>> detect_library("https://cdn.example.com/npm/lodash@4.17.21/lodash.min.js")
        DetectedLibrary(name='lodash', version='4.17.21')
    """
    parts = _split(url)
    if parts is None:
        return None
    for matcher in MATCHERS:
        found = matcher(parts)
        if found is not None:
            return found
    return None


def detect_libraries(resources: list[ResourceItem]) -> list[LibraryItem]:
    """Run detection over every resource, keeping resource order."""
    libraries: list[LibraryItem] = []
    for r in resources:
        found = detect_library(r.url)
        if found is None:
            continue
        parts = _split(r.url)
        libraries.append(LibraryItem(
            name=found.name,
            version=found.version,
            url=r.url,
            domain=parts.host if parts else "",
            type=r.type,
        ))
    log.info("Libraries detected", {
        "libraries": len(libraries),
        "versioned": sum(1 for lib in libraries if lib.version),
    })
    return libraries
