"""
Data loader for the static library-detection reference lists.

The JSON files live alongside this module. They are read once on
first use and cached for the life of the process; callers get
immutable tuples so the lists cannot drift at runtime.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

# Resolve path to the data directory (same directory as this module)
_DATA_DIR = pathlib.Path(__file__).resolve().parent

# ============================================================================
# JSON File Loading
# ============================================================================


def _load_json(relative_path: str) -> Any:
    """Load and parse a JSON file relative to the data directory.

    Raises:
        FileNotFoundError: If the JSON file does not exist.
        json.JSONDecodeError: If the file contains invalid JSON.
    """
    full_path = _DATA_DIR / relative_path
    if not full_path.exists():
        raise FileNotFoundError(f"Data file not found: {relative_path}")
    with open(full_path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise json.JSONDecodeError(
                f"Invalid JSON in {relative_path}: {exc.msg}",
                exc.doc,
                exc.pos,
            ) from exc


# ============================================================================
# Library Detection Lists
# ============================================================================

_libraries_cache: dict[str, tuple[str, ...]] | None = None


def _get_library_lists() -> dict[str, tuple[str, ...]]:
    global _libraries_cache
    if _libraries_cache is None:
        raw: dict[str, list[str]] = _load_json("libraries.json")
        _libraries_cache = {
            key: tuple(entry.lower() for entry in values)
            for key, values in raw.items()
        }
    return _libraries_cache


def get_known_libraries() -> tuple[str, ...]:
    """Library names recognised by filename substring (lazy loaded and cached).

    Order matters: the first name found in a filename wins.
    """
    return _get_library_lists()["knownLibraries"]


def get_analytics_hosts() -> tuple[str, ...]:
    """Analytics / tag-manager host hints (lazy loaded and cached)."""
    return _get_library_lists()["analyticsHosts"]
