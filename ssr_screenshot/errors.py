"""Exceptions raised by the screenshot test runner.

Every fatal condition derives from ScreenshotTestError so the CLI can map it to
exit code 1 with a one-line message. Golden mismatches are not exceptions; they
are comparison outcomes.
"""

from __future__ import annotations


class ScreenshotTestError(Exception):
    """Base class for fatal screenshot test failures."""


class RunEnvironmentError(ScreenshotTestError):
    """Required environment variables or test metadata are missing."""


class RenderError(ScreenshotTestError):
    """The renderer could not produce a document."""


class LaunchError(ScreenshotTestError):
    """The browser process could not be started."""


class NavigationError(ScreenshotTestError):
    """The rendered document could not be loaded in the browser."""


class CaptureError(ScreenshotTestError):
    """Measuring the page or taking the screenshot failed."""


class GoldenNotFoundError(ScreenshotTestError):
    """No golden image exists at the configured path."""

    def __init__(self, golden_path):
        self.golden_path = golden_path
        super().__init__(
            f"Golden image not found: {golden_path}. "
            "Run the test in approve mode to create it."
        )


class ImageDecodeError(ScreenshotTestError):
    """Bytes could not be decoded as an image."""


class ConfigFileError(ScreenshotTestError):
    """A configuration file exists but is not a JSON object."""
