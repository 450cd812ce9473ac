"""
Best-effort transfer size lookup via HEAD requests.

Each resource gets one metadata-only request. A usable
``Content-Length`` becomes the resource size; every other outcome
(missing or malformed header, error status, timeout, connection
failure, overall deadline) leaves the size unknown. Nothing here
raises and nothing is retried.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import aiohttp

from budgeter import config
from budgeter.models.resources import ResourceItem
from budgeter.utils import errors, logger

log = logger.create_logger("Size-Fetcher")


class ResourceSizer(Protocol):
    """Anything that can fill in ``size_bytes`` for a list of resources."""

    async def fetch_sizes(self, resources: list[ResourceItem]) -> list[ResourceItem]: ...


def parse_content_length(value: str | None) -> int | None:
    """Return a non-negative integer Content-Length, or ``None``."""
    if value is None:
        return None
    value = value.strip()
    if not value.isascii() or not value.isdigit():
        return None
    return int(value)


async def head_content_length(session: aiohttp.ClientSession, url: str) -> int | None:
    """Issue a HEAD request for *url* and return its declared size.

    The body is never read. Any failure yields ``None``.
    """
    try:
        async with session.head(url, allow_redirects=True) as response:
            if response.status >= 400:
                log.debug("HEAD returned error status", {"url": url, "status": response.status})
                return None
            return parse_content_length(response.headers.get("Content-Length"))
    except (aiohttp.ClientError, TimeoutError, ValueError) as exc:
        log.debug("HEAD failed", {"url": url, "error": errors.get_error_message(exc)})
        return None


def _result_or_none(task: asyncio.Task[int | None], done: set[asyncio.Task[int | None]]) -> int | None:
    if task not in done or task.cancelled() or task.exception() is not None:
        return None
    return task.result()


class SizeFetcher:
    """Concurrent HEAD-based sizer backed by a shared ``aiohttp`` session.

    Concurrency is capped by a semaphore; the batch as a whole is
    capped by a wall-clock deadline after which pending requests
    are cancelled and their resources keep an unknown size.
    """

    def __init__(self, settings: config.Settings | None = None) -> None:
        self._settings = settings or config.get_settings()

    async def fetch_sizes(self, resources: list[ResourceItem]) -> list[ResourceItem]:
        """Return copies of *resources* with ``size_bytes`` filled where known."""
        if not resources:
            return []
        timeout = aiohttp.ClientTimeout(total=self._settings.head_timeout_seconds)
        headers = {"User-Agent": self._settings.user_agent}
        async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
            return await self.fetch_sizes_with(session, resources)

    async def fetch_sizes_with(
        self,
        session: aiohttp.ClientSession,
        resources: list[ResourceItem],
    ) -> list[ResourceItem]:
        """Size *resources* using an already-open *session*.

        Results are matched back to resources by position, so
        completion order does not matter.
        """
        if not resources:
            return []

        settings = self._settings
        semaphore = asyncio.Semaphore(settings.size_fetch_concurrency)

        async def sized(url: str) -> int | None:
            async with semaphore:
                return await head_content_length(session, url)

        log.start_timer("head-requests")
        tasks = [asyncio.create_task(sized(r.url)) for r in resources]
        done, pending = await asyncio.wait(tasks, timeout=settings.size_fetch_deadline_seconds)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            log.warn("Size lookup deadline reached", {
                "pending": len(pending),
                "deadlineSeconds": settings.size_fetch_deadline_seconds,
            })

        sized_resources = [
            r.model_copy(update={"size_bytes": _result_or_none(task, done)})
            for r, task in zip(resources, tasks, strict=True)
        ]
        log.end_timer("head-requests", "Size lookup complete")
        log.info("Resource sizes resolved", {
            "total": len(resources),
            "known": sum(1 for r in sized_resources if r.size_bytes is not None),
        })
        return sized_resources
