"""Configuration management for the converter toolkit."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

ARTIFACT_MODES = ("data", "file")


@dataclass
class ToolkitConfig:
    """Configuration settings for the toolkit."""

    max_concurrent: int = field(default_factory=lambda: min(4, os.cpu_count() or 4))
    artifact_mode: str = "data"
    artifact_dir: Optional[Path] = None
    max_input_chars: int = 1_000_000
    regex_max_pattern: int = 500
    regex_max_input: int = 200_000
    media_timeout: int = 1800
    image_quality: int = 92

    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.artifact_dir, str):
            self.artifact_dir = Path(self.artifact_dir)

        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

        if self.artifact_mode not in ARTIFACT_MODES:
            raise ValueError(
                f"Invalid artifact mode '{self.artifact_mode}'. "
                f"Must be one of: {', '.join(ARTIFACT_MODES)}"
            )

        self.image_quality = max(1, min(100, self.image_quality))

    @classmethod
    def from_env(cls) -> "ToolkitConfig":
        """Load configuration from environment variables."""
        return cls(
            max_concurrent=int(
                os.environ.get(
                    "CONVERT_EVERYTHING_MAX_CONCURRENT", min(4, os.cpu_count() or 4)
                )
            ),
            artifact_mode=os.environ.get("CONVERT_EVERYTHING_ARTIFACT_MODE", "data"),
            artifact_dir=Path(p) if (p := os.environ.get("CONVERT_EVERYTHING_ARTIFACT_DIR")) else None,
            max_input_chars=int(os.environ.get("CONVERT_EVERYTHING_MAX_INPUT_CHARS", 1_000_000)),
            regex_max_pattern=int(os.environ.get("CONVERT_EVERYTHING_REGEX_MAX_PATTERN", 500)),
            regex_max_input=int(os.environ.get("CONVERT_EVERYTHING_REGEX_MAX_INPUT", 200_000)),
            media_timeout=int(os.environ.get("CONVERT_EVERYTHING_MEDIA_TIMEOUT", 1800)),
            image_quality=int(os.environ.get("CONVERT_EVERYTHING_IMAGE_QUALITY", 92)),
            log_level=os.environ.get("CONVERT_EVERYTHING_LOG_LEVEL", "INFO"),
            log_file=Path(p) if (p := os.environ.get("CONVERT_EVERYTHING_LOG_FILE")) else None,
        )


config = ToolkitConfig.from_env()
