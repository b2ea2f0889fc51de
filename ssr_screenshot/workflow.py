"""Approval workflow: render, capture, then approve or compare.

The run is an explicit state machine:

    START -> RENDERED -> CAPTURED -> APPROVED -> REPORTED
                                  -> COMPARED -> REPORTED

Each state has one transition method. Fatal errors propagate out of ``run``;
nothing is retried. Approve mode never reaches COMPARED.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ssr_screenshot.capture.session import CaptureSession
from ssr_screenshot.comparator.golden_comparator import GoldenComparator
from ssr_screenshot.comparator.golden_store import GoldenStore
from ssr_screenshot.imaging import codec
from ssr_screenshot.models.config import RunConfiguration
from ssr_screenshot.models.outcome import ComparisonOutcome, DimensionMismatch, PixelMismatch
from ssr_screenshot.models.pixel_buffer import CaptureResult
from ssr_screenshot.models.run_report import RunReport
from ssr_screenshot.renderer import Renderer
from ssr_screenshot.reporter import messages
from ssr_screenshot.reporter.json_report import generate_json_report

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    START = "start"
    RENDERED = "rendered"
    CAPTURED = "captured"
    APPROVED = "approved"
    COMPARED = "compared"
    REPORTED = "reported"


@dataclass
class _RunContext:
    document_path: Optional[Path] = None
    capture: Optional[CaptureResult] = None
    outcome: Optional[ComparisonOutcome] = None
    history: list[WorkflowState] = field(default_factory=list)


class ApprovalWorkflow:
    """Runs one screenshot golden test."""

    def __init__(
        self,
        config: RunConfiguration,
        renderer: Renderer,
        capture_session: CaptureSession | None = None,
        comparator: GoldenComparator | None = None,
        golden_store: GoldenStore | None = None,
    ):
        self.config = config
        self.renderer = renderer
        self.capture_session = capture_session or CaptureSession.from_config(config)
        self.comparator = comparator or GoldenComparator(
            max_diff_pixels=config.max_diff_pixels,
            pixel_threshold=config.pixel_threshold,
        )
        self.golden_store = golden_store or GoldenStore(config.golden_path)

    def run(self) -> RunReport:
        """Execute the workflow to completion."""
        return asyncio.run(self.execute())

    async def execute(self) -> RunReport:
        start = time.time()
        report = RunReport(
            run_id=f"run_{uuid.uuid4().hex[:8]}",
            started_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            golden_path=str(self.config.golden_path),
            mode="approve" if self.config.approve else "verify",
        )
        ctx = _RunContext()
        state = WorkflowState.START
        ctx.history.append(state)
        logger.info("=== Screenshot test %s (%s mode) ===", report.golden_path, report.mode)

        while state is not WorkflowState.REPORTED:
            state = await self._transition(state, ctx, report)
            ctx.history.append(state)
            logger.debug("Workflow state: %s", state.value)

        report.states = [s.value for s in ctx.history]
        report.completed_at = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        report.duration_seconds = round(time.time() - start, 2)
        if self.config.report_path is not None:
            generate_json_report(report, self.config.report_path)
            logger.debug("Wrote run report to %s", self.config.report_path)
        return report

    async def _transition(
        self, state: WorkflowState, ctx: _RunContext, report: RunReport
    ) -> WorkflowState:
        if state is WorkflowState.START:
            return self._render(ctx)
        if state is WorkflowState.RENDERED:
            return await self._capture(ctx, report)
        if state is WorkflowState.CAPTURED:
            if self.config.approve:
                return self._approve(ctx, report)
            return self._compare(ctx)
        if state is WorkflowState.APPROVED:
            return WorkflowState.REPORTED
        if state is WorkflowState.COMPARED:
            return self._report_outcome(ctx, report)
        raise RuntimeError(f"No transition from state {state.value}")

    def _render(self, ctx: _RunContext) -> WorkflowState:
        ctx.document_path = self.renderer.render()
        logger.info("Rendered document: %s", ctx.document_path)
        return WorkflowState.RENDERED

    async def _capture(self, ctx: _RunContext, report: RunReport) -> WorkflowState:
        document_uri = Path(ctx.document_path).resolve().as_uri()
        ctx.capture = await self.capture_session.capture(document_uri, self.config.viewport_width)
        report.document_uri = document_uri
        report.actual_size = ctx.capture.buffer.size
        return WorkflowState.CAPTURED

    def _approve(self, ctx: _RunContext, report: RunReport) -> WorkflowState:
        self.golden_store.approve(ctx.capture.buffer)
        report.outcome = "approved"
        report.exit_code = 0
        self._emit(report, messages.approved_message())
        return WorkflowState.APPROVED

    def _compare(self, ctx: _RunContext) -> WorkflowState:
        golden = self.golden_store.load()
        ctx.outcome = self.comparator.compare(golden, ctx.capture.buffer)
        return WorkflowState.COMPARED

    def _report_outcome(self, ctx: _RunContext, report: RunReport) -> WorkflowState:
        outcome = ctx.outcome
        report.outcome = outcome.kind

        if isinstance(outcome, DimensionMismatch):
            report.expected_size = outcome.expected
            report.exit_code = 1
            lines = messages.dimension_mismatch_message(outcome, self.config.approve_command)
            self._emit(report, lines)
            return WorkflowState.REPORTED

        report.expected_size = ctx.capture.buffer.size
        report.diff_pixels = outcome.diff_pixels
        report.diff_ratio = outcome.diff_ratio

        if isinstance(outcome, PixelMismatch):
            diff_path = self._write_diff(outcome)
            report.diff_path = str(diff_path) if diff_path else None
            report.exit_code = 1
            lines = messages.pixel_mismatch_message(
                outcome, self.config.approve_command, diff_path
            )
            self._emit(report, lines)
            return WorkflowState.REPORTED

        report.exit_code = 0
        self._emit(report, messages.match_message())
        return WorkflowState.REPORTED

    def _write_diff(self, outcome: PixelMismatch) -> Path | None:
        diff_path = self.config.diff_path
        if diff_path is None:
            logger.warning("No output directory configured; diff image not written")
            return None
        diff_path.parent.mkdir(parents=True, exist_ok=True)
        diff_path.write_bytes(codec.encode(outcome.diff_image))
        logger.debug("Wrote diff image to %s", diff_path)
        return diff_path

    def _emit(self, report: RunReport, lines: list[str]) -> None:
        report.messages.extend(lines)
        level = logging.INFO if report.exit_code == 0 else logging.WARNING
        for line in lines:
            logger.log(level, line)
