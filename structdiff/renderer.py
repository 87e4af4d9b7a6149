"""
Fetch the inner markup of a selected element from live pages with Playwright.

Both pages are loaded concurrently in one browser; the comparison only starts
once both fragments are available.
"""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import BrowserContext
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .exceptions import RetrievalError, SelectorNotFound

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000


async def fetch_fragment(
    context: BrowserContext,
    url: str,
    selector: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> str:
    """Load ``url``, wait for the network to go idle and return the selector's inner HTML."""
    page = await context.new_page()
    try:
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightError as e:
            raise RetrievalError(url, str(e)) from e
        logger.debug("Loaded %s", url)

        try:
            return await page.inner_html(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise SelectorNotFound(selector, url) from e
        except PlaywrightError as e:
            raise RetrievalError(url, str(e)) from e
    finally:
        await page.close()


async def fetch_fragments(
    url_a: str,
    url_b: str,
    selector: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    headless: bool = True,
) -> tuple[str, str]:
    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch(headless=headless)
        except PlaywrightError as e:
            raise RetrievalError("chromium", str(e)) from e
        try:
            context = await browser.new_context()
            html_a, html_b = await asyncio.gather(
                fetch_fragment(context, url_a, selector, timeout_ms),
                fetch_fragment(context, url_b, selector, timeout_ms),
            )
        finally:
            await browser.close()

    logger.debug("Fetched fragments: %d and %d characters", len(html_a), len(html_b))
    return html_a, html_b
