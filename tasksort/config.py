"""Configuration for tasksort.

Environment (or a local ``.env`` file) provides:
- TASKSORT_SETTINGS_FILE: optional path to a JSON settings file
- LOG_LEVEL: logging level name (default INFO)
- DEBUG: "true" forces DEBUG logging
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from tasksort.models.settings import SortSettings

load_dotenv()

SETTINGS_FILE = os.getenv("TASKSORT_SETTINGS_FILE")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    """Settings file is missing, unreadable or does not validate."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


def load_settings(path: Optional[Union[str, Path]] = None) -> SortSettings:
    """Load a settings snapshot.

    Args:
        path: JSON settings file; defaults to TASKSORT_SETTINGS_FILE

    Returns:
        Validated settings, or defaults when no file is configured

    Raises:
        SettingsError: If the file cannot be read or validated
    """
    path = path or SETTINGS_FILE
    if not path:
        return SortSettings()

    settings_path = Path(path)
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(str(settings_path), f"Cannot read file: {e}") from e

    try:
        settings = SortSettings.model_validate_json(raw)
    except ValidationError as e:
        raise SettingsError(str(settings_path), f"Invalid settings: {e}") from e

    logger.debug(f"Loaded settings from {settings_path}")
    return settings


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from LOG_LEVEL/DEBUG (or an explicit level)."""
    level_name = "DEBUG" if DEBUG else (level or LOG_LEVEL)
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
