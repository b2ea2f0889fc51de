"""Result of one screenshot test run."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RunReport(BaseModel):
    run_id: str
    started_at: str
    completed_at: str = ""
    duration_seconds: float = 0.0
    golden_path: str
    document_uri: str = ""
    mode: str  # approve, verify
    outcome: str = ""  # approved, match, pixel_mismatch, dimension_mismatch
    diff_pixels: int = 0
    diff_ratio: float = 0.0
    diff_path: Optional[str] = None
    expected_size: Optional[tuple[int, int]] = None
    actual_size: Optional[tuple[int, int]] = None
    states: list[str] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    exit_code: int = 0

    @property
    def passed(self) -> bool:
        return self.exit_code == 0
