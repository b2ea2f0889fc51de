"""Browser capture session: screenshots a document sized to its own content."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, Error as PlaywrightError, Page, Playwright, async_playwright

from ssr_screenshot.errors import CaptureError, LaunchError, NavigationError
from ssr_screenshot.imaging import codec
from ssr_screenshot.models.config import RunConfiguration
from ssr_screenshot.models.pixel_buffer import CaptureResult

from .browser import launch_headless_browser, open_capture_page

logger = logging.getLogger(__name__)

CONTENT_HEIGHT_SCRIPT = "() => document.body.scrollHeight"


class CaptureSession:
    """Owns one headless browser for the duration of a capture.

    The viewport width is fixed by the caller and the height is taken from
    the rendered content, so the screenshot has no scrollbars and nothing is
    clipped vertically.
    """

    def __init__(
        self,
        executable_path: Optional[Path] = None,
        headless: bool = True,
        initial_viewport_height: int = 1080,
        launch_timeout_ms: int = 30000,
        navigation_timeout_ms: int = 30000,
        capture_timeout_ms: int = 30000,
    ):
        self.executable_path = executable_path
        self.headless = headless
        self.initial_viewport_height = initial_viewport_height
        self.launch_timeout_ms = launch_timeout_ms
        self.navigation_timeout_ms = navigation_timeout_ms
        self.capture_timeout_ms = capture_timeout_ms

    @classmethod
    def from_config(cls, config: RunConfiguration) -> "CaptureSession":
        return cls(
            executable_path=config.browser_executable,
            headless=config.headless,
            initial_viewport_height=config.initial_viewport_height,
            launch_timeout_ms=config.launch_timeout_ms,
            navigation_timeout_ms=config.navigation_timeout_ms,
            capture_timeout_ms=config.capture_timeout_ms,
        )

    async def capture(self, document_uri: str, viewport_width: int) -> CaptureResult:
        """Screenshot ``document_uri`` at ``viewport_width`` CSS pixels wide."""
        async with async_playwright() as playwright:
            browser = await self._launch(playwright)
            try:
                png = await self._capture_page(browser, document_uri, viewport_width)
            finally:
                await browser.close()
                logger.debug("Browser closed")

        buffer = codec.decode(png)
        logger.info("Captured %dx%d screenshot of %s", buffer.width, buffer.height, document_uri)
        return CaptureResult(buffer=buffer, document_uri=document_uri)

    async def _launch(self, playwright: Playwright) -> Browser:
        logger.debug(
            "Launching headless Chromium (executable=%s)",
            self.executable_path or "bundled",
        )
        try:
            return await launch_headless_browser(
                playwright,
                executable_path=self.executable_path,
                headless=self.headless,
                timeout_ms=self.launch_timeout_ms,
            )
        except PlaywrightError as e:
            raise LaunchError(f"Could not launch browser: {e}") from e

    async def _capture_page(self, browser: Browser, document_uri: str, viewport_width: int) -> bytes:
        page = await self._navigate(browser, document_uri, viewport_width)
        await self._fit_viewport_to_content(page, viewport_width)
        try:
            return await page.screenshot(type="png", timeout=self.capture_timeout_ms)
        except PlaywrightError as e:
            raise CaptureError(f"Screenshot failed: {e}") from e

    async def _navigate(self, browser: Browser, document_uri: str, viewport_width: int) -> Page:
        try:
            page = await open_capture_page(
                browser,
                viewport={"width": viewport_width, "height": self.initial_viewport_height},
            )
            await page.goto(document_uri, wait_until="load", timeout=self.navigation_timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(f"Could not load {document_uri}: {e}") from e
        logger.debug("Loaded %s", document_uri)
        return page

    async def _fit_viewport_to_content(self, page: Page, viewport_width: int) -> None:
        """Resize the viewport to the body's scroll height at the fixed width."""
        try:
            content_height = await page.evaluate(CONTENT_HEIGHT_SCRIPT)
            height = max(1, int(content_height or 0))
            await page.set_viewport_size({"width": viewport_width, "height": height})
        except PlaywrightError as e:
            raise CaptureError(f"Could not size viewport to content: {e}") from e
        logger.debug("Viewport set to %dx%d", viewport_width, height)
