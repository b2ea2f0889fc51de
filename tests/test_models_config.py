"""Tests for the run configuration model."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ssr_screenshot.errors import ConfigFileError
from ssr_screenshot.models.config import RunConfiguration


class TestRunConfigurationDefaults:
    """Tests for RunConfiguration default values."""

    def test_default_values(self, tmp_path: Path):
        config = RunConfiguration(golden_path=tmp_path / "golden.png")
        assert config.approve is False
        assert config.viewport_width == 1920
        assert config.headless is True
        assert config.max_diff_pixels == 0
        assert config.pixel_threshold == 0
        assert config.output_dir is None
        assert config.browser_executable is None
        assert config.test_target is None
        assert config.diff_filename == "image-diff.png"

    def test_is_immutable(self, run_config: RunConfiguration):
        with pytest.raises(ValidationError):
            run_config.approve = True


class TestRunConfigurationValidation:
    """Tests for field validators."""

    @pytest.mark.parametrize("width", [0, -1])
    def test_rejects_non_positive_width(self, tmp_path: Path, width: int):
        with pytest.raises(ValidationError, match="positive"):
            RunConfiguration(golden_path=tmp_path / "g.png", viewport_width=width)

    def test_rejects_negative_tolerance(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            RunConfiguration(golden_path=tmp_path / "g.png", max_diff_pixels=-1)

    @pytest.mark.parametrize("threshold", [-1, 256])
    def test_rejects_out_of_range_threshold(self, tmp_path: Path, threshold: int):
        with pytest.raises(ValidationError):
            RunConfiguration(golden_path=tmp_path / "g.png", pixel_threshold=threshold)


class TestRunConfigurationPaths:
    """Tests for derived paths and the approval hint."""

    def test_diff_path_in_output_dir(self, run_config: RunConfiguration, output_dir: Path):
        assert run_config.diff_path == output_dir / "image-diff.png"
        assert run_config.report_path == output_dir / "screenshot-report.json"

    def test_no_output_dir_means_no_diff_path(self, tmp_path: Path):
        config = RunConfiguration(golden_path=tmp_path / "g.png")
        assert config.diff_path is None
        assert config.report_path is None

    def test_approve_command_uses_test_target(self, run_config: RunConfiguration):
        assert run_config.approve_command == "bazel run //src/universal-app:server_test.accept"

    def test_approve_command_without_target(self, tmp_path: Path):
        golden = tmp_path / "g.png"
        config = RunConfiguration(golden_path=golden)
        assert config.approve_command == f"ssr-screenshot run {golden} true"


class TestRunConfigurationPersistence:
    """Tests for JSON load/save."""

    def test_save_and_load(self, run_config: RunConfiguration, tmp_path: Path):
        path = tmp_path / "config" / "screenshot.json"
        run_config.save(path)

        loaded = RunConfiguration.load(path)
        assert loaded == run_config

    def test_load_applies_overrides(self, tmp_path: Path):
        path = tmp_path / "screenshot.json"
        path.write_text(json.dumps({"golden_path": "a.png", "viewport_width": 1280}))

        loaded = RunConfiguration.load(path, golden_path="b.png", viewport_width=None)
        assert loaded.golden_path == Path("b.png")
        assert loaded.viewport_width == 1280

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            RunConfiguration.load(tmp_path / "missing.json")

    def test_load_malformed_file(self, tmp_path: Path):
        path = tmp_path / "screenshot.json"
        path.write_text("{not json")
        with pytest.raises(ConfigFileError, match="not valid JSON"):
            RunConfiguration.load(path)

    def test_load_non_object(self, tmp_path: Path):
        path = tmp_path / "screenshot.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigFileError, match="JSON object"):
            RunConfiguration.read_file(path)
