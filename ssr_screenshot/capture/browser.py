"""Browser helpers: launch headless Chromium and open a capture page."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, Page, Playwright

# Flags that keep screenshots stable between machines
CAPTURE_ARGS = [
    "--hide-scrollbars",
    "--force-color-profile=srgb",
    "--font-render-hinting=none",
    "--disable-gpu",
]


async def launch_headless_browser(
    playwright: Playwright,
    executable_path: Optional[Path] = None,
    headless: bool = True,
    timeout_ms: int = 30000,
) -> Browser:
    """Launch Chromium, from ``executable_path`` when given."""
    launch_kwargs: dict = {
        "headless": headless,
        "args": CAPTURE_ARGS,
        "timeout": timeout_ms,
    }
    if executable_path:
        launch_kwargs["executable_path"] = str(executable_path)
    return await playwright.chromium.launch(**launch_kwargs)


async def open_capture_page(browser: Browser, viewport: dict) -> Page:
    """Open a page with a fixed device scale factor, locale and timezone.

    Pixel output must not depend on the host's display or locale settings.
    """
    context = await browser.new_context(
        viewport=viewport,
        device_scale_factor=1,
        locale="en-US",
        timezone_id="UTC",
        color_scheme="light",
        reduced_motion="reduce",
    )
    return await context.new_page()
