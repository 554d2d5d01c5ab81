"""
Configuration loader for epictrack.

Settings come from an optional tracker.env file next to where `et` runs.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from . import envparse

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tracker.env"
DEFAULT_DB_PATH = "data/db.json"
DEFAULT_LOG_LEVEL = "WARNING"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TrackerConfig:
    """Tracker settings from tracker.env"""
    db_path: Path
    log_level: str


def _parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in VALID_LOG_LEVELS:
        logger.warning(
            f"Unknown LOG_LEVEL '{value}', using {DEFAULT_LOG_LEVEL}. "
            f"Valid levels: {', '.join(VALID_LOG_LEVELS)}"
        )
        return DEFAULT_LOG_LEVEL
    return level


def load_config(config_path: Path | None = None) -> TrackerConfig:
    """Load tracker.env and return TrackerConfig.

    A missing file yields the defaults. Relative DB_PATH values are
    resolved against the directory holding the config file.

    Raises:
        ValueError: if the file exists but is malformed
    """
    path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_FILE)

    if path.exists():
        env = envparse.load_env(path)
        base_dir = path.parent
    else:
        if config_path:
            logger.warning(f"Config file {path} not found, using defaults")
        env = {}
        base_dir = Path(".")

    db_path = Path(env.get("DB_PATH", DEFAULT_DB_PATH))
    if not db_path.is_absolute():
        db_path = base_dir / db_path

    return TrackerConfig(
        db_path=db_path,
        log_level=_parse_log_level(env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL)),
    )
