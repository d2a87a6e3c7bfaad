"""Configuration management with environment variable overrides."""
from dataclasses import dataclass
from pathlib import Path
import logging
import os

from quiz_diagnostic import __version__

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Configuration for the quiz diagnostic checkers."""

    # Validator defaults (strict can still be overridden per call)
    strict: bool = False

    # Parent directory for temporary extraction areas (None = system temp)
    work_dir: Path | None = None
    workspace_prefix: str = "qti-validate-"

    # Manifest dialect entry point
    manifest_name: str = "imsmanifest.xml"

    # Linter context excerpt width
    context_width: int = 50

    # Logging
    log_level: str = "INFO"

    # Versioning
    version: str = __version__

    @classmethod
    def load(cls) -> "Config":
        """Load config with environment variable overrides."""
        config = cls()

        if val := os.environ.get("QUIZ_DIAGNOSTIC_STRICT"):
            config.strict = val.lower() in ("true", "1", "yes")

        if val := os.environ.get("QUIZ_DIAGNOSTIC_WORK_DIR"):
            config.work_dir = Path(val).expanduser()

        if val := os.environ.get("QUIZ_DIAGNOSTIC_LOG_LEVEL"):
            config.log_level = val.upper()

        if val := os.environ.get("QUIZ_DIAGNOSTIC_CONTEXT_WIDTH"):
            try:
                config.context_width = int(val)
            except ValueError:
                logger.warning(f"Ignoring non-integer QUIZ_DIAGNOSTIC_CONTEXT_WIDTH: {val}")

        # Extraction areas are created inside work_dir, so it must exist
        if config.work_dir is not None:
            config.work_dir.mkdir(parents=True, exist_ok=True)

        return config
