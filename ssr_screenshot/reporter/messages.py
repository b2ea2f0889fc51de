"""Diagnostic messages for each run outcome."""

from __future__ import annotations

from pathlib import Path

from ssr_screenshot.models.outcome import DimensionMismatch, PixelMismatch


def approved_message() -> list[str]:
    return ["Golden screenshot updated."]


def match_message() -> list[str]:
    return ["Screenshot golden matches."]


def pixel_mismatch_message(
    outcome: PixelMismatch, approve_command: str, diff_path: Path | None
) -> list[str]:
    lines = [
        f"Expected golden image to match. {outcome.diff_pixels} pixels do not match.",
        f"Command to update the golden: {approve_command}",
    ]
    if diff_path is not None:
        lines.append(f"See diff: {diff_path.resolve().as_uri()}")
    return lines


def dimension_mismatch_message(outcome: DimensionMismatch, approve_command: str) -> list[str]:
    ew, eh = outcome.expected
    aw, ah = outcome.actual
    return [
        f"Expected golden image to be {ew}x{eh} pixels, but the screenshot is {aw}x{ah}.",
        f"Command to update the golden: {approve_command}",
    ]
