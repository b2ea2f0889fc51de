"""Comparison outcomes produced by the golden comparator."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ssr_screenshot.models.pixel_buffer import PixelBuffer


class Match(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["match"] = "match"
    # Non-zero only when a tolerance was configured
    diff_pixels: int = 0
    diff_ratio: float = 0.0

    @property
    def passed(self) -> bool:
        return True


class PixelMismatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pixel_mismatch"] = "pixel_mismatch"
    diff_pixels: int = Field(ge=1)
    diff_ratio: float
    diff_image: PixelBuffer

    @property
    def passed(self) -> bool:
        return False


class DimensionMismatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["dimension_mismatch"] = "dimension_mismatch"
    expected: tuple[int, int]  # golden (width, height)
    actual: tuple[int, int]  # candidate (width, height)

    @property
    def passed(self) -> bool:
        return False


ComparisonOutcome = Union[Match, PixelMismatch, DimensionMismatch]
