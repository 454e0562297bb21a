"""Browser session handling — shared page navigation and isolated contexts."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from playwright.sync_api import Browser, Page, sync_playwright
from playwright.sync_api import Error as PlaywrightError

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000


class BrowserSession:
    """Wraps a Playwright Browser; hands out fresh cookie-free pages on demand."""

    def __init__(
        self,
        browser: Browser,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
    ) -> None:
        self._browser = browser
        self._timeout = navigation_timeout_ms

    @property
    def navigation_timeout_ms(self) -> int:
        return self._timeout

    def navigate(self, page: Page, url: str) -> None:
        """Navigate and wait for DOMContentLoaded. Raises PlaywrightError."""
        logger.debug("Navigating to %s", url)
        page.goto(url, wait_until="domcontentloaded", timeout=self._timeout)

    @contextmanager
    def isolated_page(self, **context_options) -> Iterator[Page]:
        """Yield a page in a brand-new context; the context is always closed.

        New contexts start with empty cookies and storage, so first-visit
        behavior (consent banners, pre-consent requests) is observable.
        """
        context = self._browser.new_context(**context_options)
        try:
            yield context.new_page()
        finally:
            try:
                context.close()
            except PlaywrightError as e:
                logger.debug("Ignoring isolated context close error: %s", e)


@contextmanager
def open_browser(
    headless: bool = True,
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
) -> Iterator[tuple[BrowserSession, Page]]:
    """Launch Chromium and yield (session, shared page). Closes everything on exit."""
    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=headless)
        try:
            context = browser.new_context()
            page = context.new_page()
            yield BrowserSession(browser, navigation_timeout_ms), page
        finally:
            browser.close()
