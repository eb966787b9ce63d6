"""Load the trends page in a headless browser and return its HTML."""

from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ScrapeError(RuntimeError):
    """Raised when the trends page cannot be loaded."""


async def _load(url: str, cfg: Settings) -> str:
    timeout_ms = cfg.PAGE_TIMEOUT_S * 1000
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=cfg.HEADLESS)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            logger.info("Visiting %s", url)
            await page.goto(url, timeout=timeout_ms)
            await page.wait_for_load_state("load", timeout=timeout_ms)
            html = await page.content()
            await context.close()
        finally:
            await browser.close()
    logger.debug("Fetched %s characters from %s", len(html), url)
    return html


async def fetch_page_html(url: str | None = None, cfg: Settings | None = None) -> str:
    """Return the rendered HTML of ``url``, retrying on browser errors."""
    cfg = cfg or default_settings
    url = url or cfg.TRENDS_URL

    fetch = retry(
        retry=retry_if_exception_type(PlaywrightError),
        wait=wait_random_exponential(multiplier=1, max=cfg.RETRY_WAIT_MAX_S),
        stop=stop_after_attempt(cfg.RETRY_MAX),
    )(_load)
    try:
        return await fetch(url, cfg)
    except RetryError as exc:
        raise ScrapeError(f"Failed to load {url}") from exc.last_attempt.exception()


__all__ = ["ScrapeError", "fetch_page_html"]
