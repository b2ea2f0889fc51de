"""CLI entry point for the screenshot test runner."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from ssr_screenshot.environment import build_run_configuration
from ssr_screenshot.errors import ScreenshotTestError
from ssr_screenshot.renderer import ModuleRenderer, StaticDocumentRenderer
from ssr_screenshot.workflow import ApprovalWorkflow

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Screenshot golden tests for server-side rendered documents."""
    setup_logging(verbose)


@cli.command()
@click.argument("golden_path")
@click.argument(
    "approve",
    required=False,
    default="false",
    type=click.Choice(["true", "false"], case_sensitive=False),
)
@click.option("--document", "-d", help="Path to an already rendered document")
@click.option("--renderer", "-r", help="Prerender module, as package.module[:attribute]")
@click.option("--browser", "-b", help="Chromium executable (default: web test metadata)")
@click.option("--output-dir", "-o", help="Directory for the diff image and run report")
@click.option("--viewport-width", type=int, default=None, help="Screenshot width in CSS pixels")
@click.option("--max-diff-pixels", type=int, default=None, help="Differing pixels allowed to pass")
@click.option("--pixel-threshold", type=int, default=None, help="Per-channel delta treated as equal")
@click.option("--config", "-c", "config_file", default=None, help="JSON config file")
def run(
    golden_path: str,
    approve: str,
    document: str | None,
    renderer: str | None,
    browser: str | None,
    output_dir: str | None,
    viewport_width: int | None,
    max_diff_pixels: int | None,
    pixel_threshold: int | None,
    config_file: str | None,
) -> None:
    """Screenshot the rendered document and compare it with GOLDEN_PATH.

    Pass APPROVE as "true" to overwrite the golden with the new screenshot.
    """
    if bool(document) == bool(renderer):
        raise click.UsageError("Pass exactly one of --document or --renderer.")

    try:
        config = build_run_configuration(
            golden_path,
            approve=approve.lower() == "true",
            browser_executable=browser,
            output_dir=output_dir,
            config_file=config_file,
            viewport_width=viewport_width,
            max_diff_pixels=max_diff_pixels,
            pixel_threshold=pixel_threshold,
        )
        doc_renderer = ModuleRenderer(renderer) if renderer else StaticDocumentRenderer(document)
        report = ApprovalWorkflow(config, doc_renderer).run()
    except (ScreenshotTestError, FileNotFoundError, ValueError) as e:
        console.print(str(e), style="red", markup=False, highlight=False, soft_wrap=True)
        sys.exit(1)

    style = "green" if report.passed else "red"
    for line in report.messages:
        console.print(line, style=style, markup=False, highlight=False, soft_wrap=True)
    sys.exit(report.exit_code)


if __name__ == "__main__":
    cli()
