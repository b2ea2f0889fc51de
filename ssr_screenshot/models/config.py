"""Run configuration for a screenshot golden test."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ssr_screenshot.errors import ConfigFileError

DEFAULT_VIEWPORT_WIDTH = 1920
DEFAULT_DIFF_FILENAME = "image-diff.png"
DEFAULT_REPORT_FILENAME = "screenshot-report.json"


class RunConfiguration(BaseModel):
    """Inputs resolved once at startup. Never mutated during a run."""

    model_config = ConfigDict(frozen=True)

    # Golden
    golden_path: Path
    approve: bool = False

    # Browser
    browser_executable: Optional[Path] = None
    headless: bool = True
    # Width is fixed; height always follows the rendered content
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH
    initial_viewport_height: int = 1080
    launch_timeout_ms: int = 30000
    navigation_timeout_ms: int = 30000
    capture_timeout_ms: int = 30000

    # Comparison
    max_diff_pixels: int = 0
    pixel_threshold: int = 0

    # Output
    output_dir: Optional[Path] = None
    diff_filename: str = DEFAULT_DIFF_FILENAME
    report_filename: str = DEFAULT_REPORT_FILENAME

    # Identifier of the invoking test target, used in the approval hint
    test_target: Optional[str] = None

    @field_validator("viewport_width", "initial_viewport_height")
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("viewport dimensions must be positive")
        return v

    @field_validator("max_diff_pixels")
    @classmethod
    def check_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_diff_pixels must not be negative")
        return v

    @field_validator("pixel_threshold")
    @classmethod
    def check_channel_range(cls, v: int) -> int:
        if not 0 <= v <= 255:
            raise ValueError("pixel_threshold must be between 0 and 255")
        return v

    @property
    def diff_path(self) -> Path | None:
        if self.output_dir is None:
            return None
        return self.output_dir / self.diff_filename

    @property
    def report_path(self) -> Path | None:
        if self.output_dir is None:
            return None
        return self.output_dir / self.report_filename

    @property
    def approve_command(self) -> str:
        """Command that re-runs this test in approve mode."""
        if self.test_target:
            return f"bazel run {self.test_target}.accept"
        return f"ssr-screenshot run {self.golden_path} true"

    @staticmethod
    def read_file(path: str | Path) -> dict:
        """Read the raw field values stored in a JSON config file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigFileError(f"Config file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigFileError(f"Config file {path} must contain a JSON object")
        return data

    @classmethod
    def load(cls, path: str | Path, **overrides) -> "RunConfiguration":
        """Load config from a JSON file. Keyword overrides win over file values."""
        data = cls.read_file(path)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)
