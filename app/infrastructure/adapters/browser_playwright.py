from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from app.application.interfaces import IBrowserPage, IBrowserSession
from app.core.config import settings

logger = logging.getLogger(__name__)


def _to_ms(timeout: Optional[float]) -> Optional[float]:
    return None if timeout is None else float(timeout) * 1000


class PlaywrightPage(IBrowserPage):
    """IBrowserPage over a Playwright async Page (seconds in, milliseconds out)."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def raw(self) -> Page:
        return self._page

    async def goto(
        self, url: str, *, wait_until: str = "networkidle", timeout: float | None = None
    ) -> None:
        await self._page.goto(url, wait_until=wait_until, timeout=_to_ms(timeout))

    async def wait_for_selector(
        self, selector: str, *, visible: bool = False, timeout: float | None = None
    ) -> None:
        # Playwright defaults to "visible"; a plain wait only needs the node in the DOM.
        state = "visible" if visible else "attached"
        await self._page.wait_for_selector(selector, state=state, timeout=_to_ms(timeout))

    async def click(self, selector: str) -> None:
        await self._page.click(selector)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        return await self._page.evaluate(expression, arg)


class PlaywrightBrowserSession(IBrowserSession):
    """One Chromium instance and one page for the lifetime of the process.

    ``lock`` serializes every navigation-to-response sequence on the page.
    """

    def __init__(self, playwright: Playwright, browser: Browser, page: Page) -> None:
        self._playwright = playwright
        self._browser = browser
        self.page = PlaywrightPage(page)
        self.lock = asyncio.Lock()

    @classmethod
    async def launch(cls) -> "PlaywrightBrowserSession":
        logger.info("Launching browser...")
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=settings.browser_headless,
                args=list(settings.browser_args),
                executable_path=settings.browser_executable_path or None,
            )
            logger.info("Creating new page...")
            page = await browser.new_page(viewport=settings.viewport)

            if settings.browser_warmup_url:
                logger.info("Navigating to %s", settings.browser_warmup_url)
                await page.goto(
                    settings.browser_warmup_url,
                    wait_until="networkidle",
                    timeout=_to_ms(settings.navigation_timeout),
                )
        except Exception:
            await playwright.stop()
            raise

        logger.info("Browser successfully initialized and ready")
        return cls(playwright, browser, page)

    async def close(self) -> None:
        logger.info("Closing browser...")
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
        logger.info("Browser closed successfully")
