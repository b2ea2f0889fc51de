"""Golden comparator: classifies a candidate screenshot against the golden."""

from __future__ import annotations

import logging
from typing import Callable

from ssr_screenshot.imaging.pixel_diff import compute_pixel_diff
from ssr_screenshot.models.outcome import (
    ComparisonOutcome,
    DimensionMismatch,
    Match,
    PixelMismatch,
)
from ssr_screenshot.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

DiffFn = Callable[..., tuple[int, bytes]]


class GoldenComparator:
    """Compares pixel buffers with zero tolerance unless configured otherwise.

    ``max_diff_pixels`` lets a small number of differing pixels pass;
    ``pixel_threshold`` is forwarded to the diff primitive as the per-channel
    delta below which pixels count as equal.
    """

    def __init__(
        self,
        diff_fn: DiffFn = compute_pixel_diff,
        max_diff_pixels: int = 0,
        pixel_threshold: int = 0,
    ):
        self.diff_fn = diff_fn
        self.max_diff_pixels = max_diff_pixels
        self.pixel_threshold = pixel_threshold

    def compare(self, golden: PixelBuffer, candidate: PixelBuffer) -> ComparisonOutcome:
        if golden.size != candidate.size:
            logger.info(
                "Screenshot size %dx%d differs from golden %dx%d",
                candidate.width, candidate.height, golden.width, golden.height,
            )
            return DimensionMismatch(expected=golden.size, actual=candidate.size)

        diff_pixels, diff_data = self.diff_fn(
            golden.data,
            candidate.data,
            candidate.width,
            candidate.height,
            threshold=self.pixel_threshold,
        )
        diff_ratio = diff_pixels / candidate.pixel_count
        logger.info("Pixel diff: %d pixels (%.4f%%)", diff_pixels, diff_ratio * 100)

        if diff_pixels <= self.max_diff_pixels:
            return Match(diff_pixels=diff_pixels, diff_ratio=diff_ratio)

        return PixelMismatch(
            diff_pixels=diff_pixels,
            diff_ratio=diff_ratio,
            diff_image=PixelBuffer(
                width=candidate.width, height=candidate.height, data=diff_data
            ),
        )
