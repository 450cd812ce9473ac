"""
Structured console logger with timers and optional file output.

Lines go to stderr with a timestamp, a level symbol, and the
logger's context tag, followed by ``key=value`` data. When
``WRITE_TO_FILE=true`` each analysis also gets its own log file
under ``.logs/`` and its remediation plan is saved under
``.reports/``.

Timers and the open log file live in ``contextvars.ContextVar`` so
concurrent requests handled by the same process keep separate
state.
"""

from __future__ import annotations

import contextvars
import io
import os
import pathlib
import re
import sys
import time
from datetime import UTC, datetime

_timers_var: contextvars.ContextVar[dict[str, tuple[float, str]] | None] = contextvars.ContextVar(
    "_timers_var", default=None
)
_log_file_var: contextvars.ContextVar[io.TextIOWrapper | None] = contextvars.ContextVar(
    "_log_file_var", default=None
)

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")

_write_to_file = os.environ.get("WRITE_TO_FILE", "").lower() == "true"
_show_debug = os.environ.get("LOG_LEVEL", "info").lower() == "debug"

# ============================================================================
# ANSI Colours
# ============================================================================

_C = {
    "reset": "\033[0m",
    "bright": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "magenta": "\033[35m",
    "blue": "\033[34m",
    "gray": "\033[90m",
}

# level -> (colour, symbol)
_LEVELS = {
    "info": (_C["cyan"], "ℹ"),
    "success": (_C["green"], "✓"),
    "warn": (_C["yellow"], "⚠"),
    "error": (_C["red"], "✗"),
    "debug": (_C["gray"], "•"),
    "timing": (_C["magenta"], "⏱"),
}


def _timers() -> dict[str, tuple[float, str]]:
    timers = _timers_var.get()
    if timers is None:
        timers = {}
        _timers_var.set(timers)
    return timers


def _timestamp() -> str:
    now = datetime.now(UTC)
    return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def _safe_name(domain: str) -> str:
    name = domain.removeprefix("www.")
    return "".join(c if c.isalnum() or c in ".-" else "_" for c in name)[:50]


def _emit(line: str) -> None:
    print(line, file=sys.stderr)
    stream = _log_file_var.get()
    if stream is not None:
        stream.write(_ANSI_RE.sub("", line) + "\n")
        stream.flush()


def format_duration(ms: float) -> str:
    """Format a duration in milliseconds for display."""
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes = int(ms // 60000)
    seconds = (ms % 60000) / 1000
    return f"{minutes}m {seconds:.1f}s"


def _format_value(value: object) -> str:
    if value is None:
        return f"{_C['dim']}None{_C['reset']}"
    if isinstance(value, bool):
        colour = _C["green"] if value else _C["red"]
        return f"{colour}{value}{_C['reset']}"
    if isinstance(value, (int, float)):
        return f"{_C['yellow']}{value}{_C['reset']}"
    if isinstance(value, str):
        display = value[:197] + "..." if len(value) > 200 else value
        return f'{_C["green"]}"{display}"{_C["reset"]}'
    if isinstance(value, (list, tuple)):
        return f"{_C['cyan']}[{len(value)} items]{_C['reset']}"
    return str(value)


# ============================================================================
# File output
# ============================================================================


def start_log_file(domain: str) -> None:
    """Open a log file for the analysis of *domain* (``WRITE_TO_FILE`` only)."""
    if not _write_to_file:
        return
    end_log_file()

    logs_dir = pathlib.Path.cwd() / ".logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    now = datetime.now(UTC)
    path = logs_dir / f"{_safe_name(domain)}_{now.strftime('%Y-%m-%d_%H-%M-%S')}.log"
    try:
        stream = open(path, "a", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        print(f"{_C['red']}✗ [Logger] Failed to open log file: {exc}{_C['reset']}", file=sys.stderr)
        return
    _log_file_var.set(stream)
    stream.write(f"\n{'=' * 80}\n  Budget Log - {domain}\n  Started: {now.isoformat()}\n{'=' * 80}\n")


def end_log_file() -> None:
    """Flush and close the current log file, if any."""
    stream = _log_file_var.get()
    if stream is None:
        return
    try:
        stream.close()
    except OSError:
        print(f"{_C['yellow']}⚠ [Logger] Failed to close log file{_C['reset']}", file=sys.stderr)
    _log_file_var.set(None)


def save_report_file(domain: str, report_text: str) -> str | None:
    """Save a rendered report under ``.reports/`` (``WRITE_TO_FILE`` only).

    Returns:
        The file path written, or ``None`` if skipped or failed.
    """
    if not _write_to_file:
        return None
    reports_dir = pathlib.Path.cwd() / ".reports"
    reports_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(UTC).strftime("%Y-%m-%d_%H-%M-%S")
    path = reports_dir / f"{_safe_name(domain)}_{stamp}.txt"
    try:
        path.write_text(report_text, encoding="utf-8")
    except OSError as err:
        print(f"{_C['red']}✗ [Logger] Failed to save report: {err}{_C['reset']}", file=sys.stderr)
        return None
    return str(path)


# ============================================================================
# Logger Class
# ============================================================================


class Logger:
    """Structured logger with context prefix and timing support."""

    def __init__(self, context: str) -> None:
        self._context = context

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        if level == "debug" and not _show_debug:
            return
        colour, symbol = _LEVELS[level]
        line = (
            f"{_C['gray']}[{_timestamp()}]{_C['reset']} {colour}{symbol}{_C['reset']} "
            f"{_C['bright']}[{self._context}]{_C['reset']} {message}"
        )
        if data:
            line += " " + " ".join(f"{_C['dim']}{k}={_C['reset']}{_format_value(v)}" for k, v in data.items())
        _emit(line)

    def info(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("info", message, data)

    def success(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("success", message, data)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("warn", message, data)

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("error", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        """Start a named timer for this context."""
        _timers()[f"{self._context}:{label}"] = (time.monotonic() * 1000, _timestamp())
        self._log("timing", f"Starting: {label}")

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop a named timer, log the elapsed time, and return it in ms."""
        entry = _timers().pop(f"{self._context}:{label}", None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0
        start_ms, start_ts = entry
        duration = time.monotonic() * 1000 - start_ms
        self._log(
            "timing",
            f"{message or f'Completed: {label}'} {_C['dim']}took{_C['reset']} "
            f"{_C['magenta']}{format_duration(duration)}{_C['reset']} "
            f"{_C['dim']}(started {start_ts}){_C['reset']}",
        )
        return duration

    def section(self, title: str) -> None:
        """Print a prominent section divider with *title*."""
        rule = f"{_C['blue']}{'─' * 60}{_C['reset']}"
        for line in ("", rule, f"{_C['blue']}{_C['bright']}  {title}{_C['reset']}", rule, ""):
            _emit(line)


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
