"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from playwright.async_api import Browser, Page

from ssr_screenshot.imaging import codec
from ssr_screenshot.models.config import RunConfiguration
from ssr_screenshot.models.pixel_buffer import CaptureResult, PixelBuffer

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


# ============================================================================
# Pixel Buffer Fixtures
# ============================================================================


def solid_buffer(width: int = 10, height: int = 10, rgba=RED) -> PixelBuffer:
    """Create a buffer filled with one colour."""
    return PixelBuffer.solid(width, height, rgba)


def with_pixel(buffer: PixelBuffer, x: int, y: int, rgba) -> PixelBuffer:
    """Return a copy of ``buffer`` with one pixel replaced."""
    data = bytearray(buffer.data)
    offset = (y * buffer.width + x) * 4
    data[offset:offset + 4] = bytes(rgba)
    return PixelBuffer(width=buffer.width, height=buffer.height, data=bytes(data))


@pytest.fixture
def red_buffer() -> PixelBuffer:
    """A solid 10x10 red image."""
    return solid_buffer()


@pytest.fixture
def red_png(red_buffer: PixelBuffer) -> bytes:
    """The solid 10x10 red image encoded as PNG."""
    return codec.encode(red_buffer)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def golden_path(tmp_path: Path) -> Path:
    return tmp_path / "goldens" / "kitchen-sink-prerendered.png"


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "outputs"
    out.mkdir()
    return out


@pytest.fixture
def run_config(golden_path: Path, output_dir: Path) -> RunConfiguration:
    """Verify-mode configuration with a diff output directory."""
    return RunConfiguration(
        golden_path=golden_path,
        output_dir=output_dir,
        browser_executable=Path("/opt/chromium/chrome"),
        test_target="//src/universal-app:server_test",
    )


@pytest.fixture
def document_path(tmp_path: Path) -> Path:
    """A pre-rendered HTML document."""
    doc = tmp_path / "dist" / "index.html"
    doc.parent.mkdir(parents=True)
    doc.write_text("<html><body><h1>Kitchen sink</h1></body></html>")
    return doc


# ============================================================================
# Mock Fixtures
# ============================================================================


class FakeRenderer:
    """Renderer that returns a fixed path and counts calls."""

    def __init__(self, path: Path):
        self.path = path
        self.calls = 0

    def render(self) -> Path:
        self.calls += 1
        return self.path


class FakeCaptureSession:
    """Capture session that returns a fixed buffer without a browser."""

    def __init__(self, buffer: PixelBuffer):
        self.buffer = buffer
        self.calls: list[tuple[str, int]] = []

    async def capture(self, document_uri: str, viewport_width: int) -> CaptureResult:
        self.calls.append((document_uri, viewport_width))
        return CaptureResult(buffer=self.buffer, document_uri=document_uri)


@pytest.fixture
def fake_renderer(document_path: Path) -> FakeRenderer:
    return FakeRenderer(document_path)


@pytest.fixture
def mock_page(red_png: bytes) -> AsyncMock:
    """Create a mock Playwright page whose screenshot is the red PNG."""
    page = AsyncMock(spec=Page)
    page.goto = AsyncMock()
    page.evaluate = AsyncMock(return_value=10)
    page.set_viewport_size = AsyncMock()
    page.screenshot = AsyncMock(return_value=red_png)
    return page


@pytest.fixture
def mock_browser() -> AsyncMock:
    """Create a mock Playwright browser."""
    browser = AsyncMock(spec=Browser)
    browser.new_context = AsyncMock()
    browser.close = AsyncMock()
    return browser
