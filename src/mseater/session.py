"""Playwright browser session management.

BrowserSession owns the Playwright driver and one Chromium browser for the
whole crawl. Each page gets its own browser context so cookies from one
seat page never leak into the next. Closing the session tears down every
in-flight page, which is how a crawl deadline interrupts blocked calls.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from mseater.config import CrawlerConfig
from mseater.errors import PermanentError
from mseater.logging import get_logger
from mseater.utils import configure_page_for_scraping

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page, Playwright

logger = get_logger(__name__)


class BrowserSession:
    """Manages the Playwright driver and browser lifecycle.

    Use as an async context manager:

        async with BrowserSession(config) as session:
            async with session.new_page() as page:
                ...
    """

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config
        self._playwright: "Playwright | None" = None
        self._browser: "Browser | None" = None

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch Chromium.

        Raises:
            PermanentError: If the browser cannot be launched (usually the
                Chromium build is missing: run `playwright install chromium`).
        """
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless
            )
        except PlaywrightError as e:
            await self._playwright.stop()
            self._playwright = None
            raise PermanentError(f"Failed to launch browser: {e}") from e

        logger.info("browser_started", headless=self.config.headless)

    @property
    def browser(self) -> "Browser":
        if self._browser is None:
            raise RuntimeError("BrowserSession is not started")
        return self._browser

    @asynccontextmanager
    async def new_page(self) -> AsyncIterator["Page"]:
        """Open a page in a fresh browser context, closing both on exit."""
        context = await self.browser.new_context(user_agent=self.config.user_agent)
        try:
            page = await context.new_page()
            await configure_page_for_scraping(
                page, timeout_ms=self.config.navigation_timeout_ms
            )
            yield page
        finally:
            await context.close()

    async def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call twice."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.info("browser_close_failed", error=str(e))
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as e:
                logger.info("playwright_stop_failed", error=str(e))
            self._playwright = None

        logger.debug("browser_stopped")
