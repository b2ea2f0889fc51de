"""Renderers produce the static document the browser screenshots."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Protocol

from ssr_screenshot.errors import RenderError

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self) -> Path:
        """Return the path of a document ready for browser navigation."""
        ...


class StaticDocumentRenderer:
    """A document that was rendered ahead of time, e.g. by a build step."""

    def __init__(self, document_path: str | Path):
        self.document_path = Path(document_path)

    def render(self) -> Path:
        if not self.document_path.is_file():
            raise RenderError(f"Rendered document not found: {self.document_path}")
        return self.document_path


class ModuleRenderer:
    """Renders by importing a prerender module.

    ``target`` has the form ``package.module:attribute``. Importing the module
    performs the render; the attribute is the output path, or a callable that
    returns it. The attribute defaults to ``output_path``.
    """

    def __init__(self, target: str):
        module_name, _, attribute = target.partition(":")
        if not module_name:
            raise ValueError(f"Invalid renderer target: {target!r}")
        self.module_name = module_name
        self.attribute = attribute or "output_path"

    def render(self) -> Path:
        logger.info("Rendering document via %s:%s", self.module_name, self.attribute)
        try:
            module = importlib.import_module(self.module_name)
        except ImportError as e:
            raise RenderError(f"Could not import renderer module {self.module_name}: {e}") from e
        except Exception as e:
            raise RenderError(f"Renderer module {self.module_name} failed: {e}") from e

        try:
            output = getattr(module, self.attribute)
        except AttributeError as e:
            raise RenderError(
                f"Renderer module {self.module_name} has no attribute {self.attribute!r}"
            ) from e

        if callable(output):
            try:
                output = output()
            except Exception as e:
                raise RenderError(
                    f"Renderer {self.module_name}:{self.attribute} failed: {e}"
                ) from e

        try:
            path = Path(output)
        except TypeError as e:
            raise RenderError(f"Renderer returned {output!r}, not a path") from e
        if not path.is_file():
            raise RenderError(f"Renderer did not produce a document at {path}")
        logger.debug("Rendered document: %s", path)
        return path
