"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from ssr_screenshot.models.run_report import RunReport


def generate_json_report(report: RunReport, output_path: Path) -> None:
    """Write a machine-readable JSON report."""
    data = report.model_dump()
    data["passed"] = report.passed
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)
