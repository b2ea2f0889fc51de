"""PNG codec: image bytes to and from RGBA pixel buffers."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from ssr_screenshot.errors import ImageDecodeError
from ssr_screenshot.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def decode(data: bytes) -> PixelBuffer:
    """Decode image bytes (any format Pillow reads) into an RGBA buffer."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Could not decode image ({len(data)} bytes): {e}") from e
    return to_buffer(rgba)


def encode(buffer: PixelBuffer) -> bytes:
    """Encode an RGBA buffer as PNG."""
    out = io.BytesIO()
    to_image(buffer).save(out, format="PNG")
    return out.getvalue()


def to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.frombytes("RGBA", buffer.size, buffer.data)


def to_buffer(img: Image.Image) -> PixelBuffer:
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    width, height = img.size
    return PixelBuffer(width=width, height=height, data=img.tobytes())
