"""Environment discovery for runs inside (or outside) a Bazel test.

Everything here is read once at startup and folded into a RunConfiguration.
Explicit arguments win over a config file, which wins over the environment.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from runfiles import runfiles as bazel_runfiles

from ssr_screenshot.errors import RunEnvironmentError
from ssr_screenshot.models.config import RunConfiguration

logger = logging.getLogger(__name__)

WEB_TEST_METADATA = "WEB_TEST_METADATA"
TEST_UNDECLARED_OUTPUTS_DIR = "TEST_UNDECLARED_OUTPUTS_DIR"
TEST_TARGET = "TEST_TARGET"


class WebTestFiles(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    named_files: dict[str, str] = Field(default_factory=dict, alias="namedFiles")


class WebTestMetadata(BaseModel):
    """Subset of the metadata file rules_webtesting writes for browser tests."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    web_test_files: list[WebTestFiles] = Field(default_factory=list, alias="webTestFiles")

    @property
    def chromium(self) -> Optional[str]:
        if not self.web_test_files:
            return None
        return self.web_test_files[0].named_files.get("CHROMIUM")


class Runfiles:
    """Resolves runfiles-relative paths through the Bazel runfiles library.

    Outside a Bazel test (no runfiles environment) paths are returned as given.
    """

    def __init__(self, env: Mapping[str, str]):
        self.env = env
        self._runfiles = _create_runfiles(env)

    def resolve(self, path: str) -> Path:
        if os.path.isabs(path) or self._runfiles is None:
            return Path(path)
        try:
            located = self._runfiles.Rlocation(path, source_repo="")
        except ValueError as e:
            raise RunEnvironmentError(f"Invalid runfiles path {path!r}: {e}") from e
        return Path(located) if located else Path(path)

    def resolve_workspace_relative(self, path: str) -> Path:
        """Resolve a path given relative to the workspace root.

        Under ``bazel run`` the source tree is used so approvals update the
        checked-in file rather than a copy in the output base.
        """
        if os.path.isabs(path):
            return Path(path)
        build_workspace = self.env.get("BUILD_WORKSPACE_DIRECTORY")
        if build_workspace:
            return Path(build_workspace) / path
        workspace = self.env.get("TEST_WORKSPACE")
        if workspace and self._runfiles is not None:
            return self.resolve(f"{workspace}/{path}")
        return Path(path)


def _create_runfiles(env: Mapping[str, str]) -> Optional[bazel_runfiles.Runfiles]:
    env = dict(env)
    # Older test runners only export TEST_SRCDIR
    if not env.get("RUNFILES_MANIFEST_FILE") and not env.get("RUNFILES_DIR") and env.get("TEST_SRCDIR"):
        env["RUNFILES_DIR"] = env["TEST_SRCDIR"]
    try:
        return bazel_runfiles.Create(env)
    except (OSError, ValueError) as e:
        raise RunEnvironmentError(f"Could not load runfiles: {e}") from e


def load_web_test_metadata(env: Mapping[str, str], runfiles: Runfiles) -> WebTestMetadata:
    metadata_path = env.get(WEB_TEST_METADATA)
    if not metadata_path:
        raise RunEnvironmentError(
            'Test running outside of a "web_test" target. No browser found.'
        )
    resolved = runfiles.resolve(metadata_path)
    try:
        with open(resolved) as f:
            data = json.load(f)
        return WebTestMetadata.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        raise RunEnvironmentError(f"Could not read web test metadata {resolved}: {e}") from e


def discover_browser_executable(env: Mapping[str, str], runfiles: Runfiles) -> Path:
    """Return the Chromium binary registered in the web test metadata."""
    metadata = load_web_test_metadata(env, runfiles)
    chromium = metadata.chromium
    if not chromium:
        raise RunEnvironmentError("Web test metadata does not list a CHROMIUM executable.")
    return runfiles.resolve(chromium)


def build_run_configuration(
    golden_path: str,
    approve: bool = False,
    env: Mapping[str, str] | None = None,
    browser_executable: str | Path | None = None,
    output_dir: str | Path | None = None,
    config_file: str | Path | None = None,
    **overrides,
) -> RunConfiguration:
    """Resolve environment and arguments into an immutable RunConfiguration.

    Explicit arguments win over the config file, which wins over the
    environment. Raises RunEnvironmentError before any work is attempted when
    something required is missing: a browser, or an output directory in
    verify mode.
    """
    env = os.environ if env is None else env
    runfiles = Runfiles(env)

    settings = RunConfiguration.read_file(config_file) if config_file else {}
    explicit = {"browser_executable": browser_executable, "output_dir": output_dir, **overrides}
    settings.update({k: v for k, v in explicit.items() if v is not None and v != ""})

    if not settings.get("browser_executable"):
        settings["browser_executable"] = discover_browser_executable(env, runfiles)
    logger.debug("Browser executable: %s", settings["browser_executable"])

    if not settings.get("output_dir"):
        settings["output_dir"] = env.get(TEST_UNDECLARED_OUTPUTS_DIR) or None
    if settings["output_dir"] is None and not approve:
        raise RunEnvironmentError(
            f"{TEST_UNDECLARED_OUTPUTS_DIR} is not set and no output directory was given. "
            "A directory is required to store the screenshot diff."
        )

    if not settings.get("test_target"):
        settings["test_target"] = env.get(TEST_TARGET) or None
    settings["golden_path"] = runfiles.resolve_workspace_relative(golden_path)
    settings["approve"] = approve
    return RunConfiguration(**settings)
