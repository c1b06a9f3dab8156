"""Global configuration storage for taskforest.

Stores user preferences in ~/.taskforest/config.json (or under
$TASKFOREST_HOME when set) and sets up logging for the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from taskforest.domain.task import Priority

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_config_dir() -> Path:
    """Get the taskforest config directory."""
    home = os.environ.get("TASKFOREST_HOME")
    config_dir = Path(home) if home else Path.home() / ".taskforest"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


class Settings(BaseModel):
    """User preferences."""

    data_file: Path = Field(default_factory=lambda: get_config_dir() / "tasks.json")
    log_level: LogLevel = "WARNING"
    default_priority: Priority = Priority.MEDIUM

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def get_global_config() -> Settings:
    """Load global settings, falling back to defaults."""
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return Settings(**data)
        except (json.JSONDecodeError, PydanticValidationError, TypeError) as e:
            logging.getLogger(__name__).warning("Ignoring invalid %s: %s", config_file, e)
    return Settings()  # defaults


def save_global_config(settings: Settings) -> None:
    """Save global settings."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )


def configure_logging(level: LogLevel = "WARNING") -> logging.Logger:
    """Attach a single stream handler to the ``taskforest`` logger.

    Safe to call repeatedly; the level is updated and no handler is
    added twice.
    """
    logger = logging.getLogger("taskforest")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
