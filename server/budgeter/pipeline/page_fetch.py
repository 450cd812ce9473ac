"""
Retrieval of the page being analysed.
"""

from __future__ import annotations

import asyncio
import dataclasses

import aiohttp

from budgeter.utils import errors, logger

log = logger.create_logger("Page-Fetch")


@dataclasses.dataclass(frozen=True)
class FetchedPage:
    """The page body plus where it was actually served from."""

    final_url: str
    content_type: str
    html: str


async def fetch_page(
    url: str,
    *,
    timeout: float,
    user_agent: str,
    session: aiohttp.ClientSession | None = None,
) -> FetchedPage:
    """GET *url*, following redirects, and return its HTML.

    The whole exchange, body included, must finish within
    *timeout* seconds.

    Raises:
        errors.InputValidationError: ``NON_HTML`` when the response
            is not ``text/html``.
        errors.PageFetchError: ``TIMEOUT`` or ``FETCH_ERROR``.
    """
    owns_session = session is None
    if session is None:
        session = aiohttp.ClientSession(headers={"User-Agent": user_agent})

    log.start_timer("page-fetch")
    try:
        async with asyncio.timeout(timeout):
            async with session.get(url, allow_redirects=True) as response:
                final_url = str(response.url) or url
                content_type = response.headers.get("Content-Type", "")
                if "text/html" not in content_type.lower():
                    raise errors.InputValidationError("NON_HTML", "URL did not return HTML.")
                html = await response.text(errors="replace")
    except TimeoutError as exc:
        log.error("Page fetch timed out", {"url": url, "timeoutSeconds": timeout})
        raise errors.PageFetchError("TIMEOUT", f"Page did not load within {timeout:g}s") from exc
    except aiohttp.ClientError as exc:
        log.error("Page fetch failed", {"url": url, "error": errors.get_error_message(exc)})
        raise errors.PageFetchError("FETCH_ERROR", errors.get_error_message(exc)) from exc
    finally:
        if owns_session:
            await session.close()

    log.end_timer("page-fetch", "Page fetched")
    log.info("Page fetched", {
        "finalUrl": final_url,
        "status": response.status,
        "bytes": len(html),
    })
    return FetchedPage(final_url=final_url, content_type=content_type, html=html)
