"""Pixel diff primitive.

Counts pixels whose RGBA channels differ between two equally sized buffers and
renders a diff image: the first image as faded greyscale, with every differing
pixel painted opaque red.
"""

from __future__ import annotations

from PIL import Image, ImageChops

DIFF_COLOR = (255, 0, 0, 255)
# Fraction of the original luminance kept in the faded background
FADE = 0.1


def compute_pixel_diff(
    img1: bytes,
    img2: bytes,
    width: int,
    height: int,
    threshold: int = 0,
) -> tuple[int, bytes]:
    """Return (differing pixel count, RGBA diff image bytes).

    A pixel differs when any channel differs by more than ``threshold``.
    Both buffers must be ``width * height`` RGBA pixels.
    """
    expected = width * height * 4
    if len(img1) != expected or len(img2) != expected:
        raise ValueError("Image sizes do not match")

    size = (width, height)
    first = Image.frombytes("RGBA", size, img1)
    second = Image.frombytes("RGBA", size, img2)

    # Largest per-channel delta of each pixel
    r, g, b, a = ImageChops.difference(first, second).split()
    peak = ImageChops.lighter(ImageChops.lighter(r, g), ImageChops.lighter(b, a))
    mask = peak.point(lambda v: 255 if v > threshold else 0)
    count = mask.histogram()[255]

    background = first.convert("L").point(lambda v: int(255 + (v - 255) * FADE))
    diff = Image.composite(
        Image.new("RGBA", size, DIFF_COLOR),
        background.convert("RGBA"),
        mask,
    )
    return count, diff.tobytes()
