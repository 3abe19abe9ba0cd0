"""Tests for configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from convert_everything.config import ToolkitConfig, config


class TestToolkitConfig:
    """Tests for ToolkitConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        cfg = ToolkitConfig()

        assert cfg.artifact_mode == "data"
        assert cfg.artifact_dir is None
        assert cfg.max_input_chars == 1_000_000
        assert cfg.regex_max_pattern == 500
        assert cfg.regex_max_input == 200_000
        assert cfg.media_timeout == 1800
        assert cfg.image_quality == 92
        assert cfg.log_level == "INFO"

    def test_max_concurrent_defaults_to_cpu_count(self):
        """Test max_concurrent defaults based on CPU count."""
        cfg = ToolkitConfig()

        expected = min(4, os.cpu_count() or 4)
        assert cfg.max_concurrent == expected

    def test_from_env(self):
        """Test loading configuration from environment variables."""
        with patch.dict(
            os.environ,
            {
                "CONVERT_EVERYTHING_MAX_CONCURRENT": "8",
                "CONVERT_EVERYTHING_ARTIFACT_MODE": "file",
                "CONVERT_EVERYTHING_ARTIFACT_DIR": "/tmp/artifacts",
                "CONVERT_EVERYTHING_MAX_INPUT_CHARS": "5000",
                "CONVERT_EVERYTHING_MEDIA_TIMEOUT": "60",
                "CONVERT_EVERYTHING_LOG_LEVEL": "DEBUG",
            },
        ):
            cfg = ToolkitConfig.from_env()

            assert cfg.max_concurrent == 8
            assert cfg.artifact_mode == "file"
            assert cfg.artifact_dir == Path("/tmp/artifacts")
            assert cfg.max_input_chars == 5000
            assert cfg.media_timeout == 60
            assert cfg.log_level == "DEBUG"

    def test_invalid_artifact_mode(self):
        """Test that an unknown artifact mode is rejected."""
        with pytest.raises(ValueError, match="Invalid artifact mode"):
            ToolkitConfig(artifact_mode="s3")

    def test_image_quality_clamped(self):
        assert ToolkitConfig(image_quality=0).image_quality == 1
        assert ToolkitConfig(image_quality=150).image_quality == 100

    def test_global_config_instance(self):
        """Test global config instance exists."""
        assert config is not None
        assert isinstance(config, ToolkitConfig)

    def test_path_conversion(self, tmp_path):
        """Test path string conversion."""
        artifact_dir = str(tmp_path / "artifacts")
        log_file = str(tmp_path / "convert.log")

        cfg = ToolkitConfig(artifact_dir=artifact_dir, log_file=log_file)

        assert cfg.artifact_dir == Path(artifact_dir)
        assert cfg.log_file == Path(log_file)
