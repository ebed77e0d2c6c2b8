"""
Configuration for the ESE Study Tracker.

Values come from environment variables, optionally seeded from a .env file:
  ESE_CATALOG_SOURCE  subjects.json path or http(s) URL (default: data/subjects.json)
  ESE_PROGRESS_FILE   read-only progress.json tried first on startup (default: data/progress.json)
  ESE_STATE_DB        local SQLite state (default: ~/.esetracker/state.db)
  ESE_EXPORT_PATH     downloadable snapshot (default: next to the state database)
  ESE_LOG_LEVEL       logging level (default: INFO)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_CATALOG_SOURCE = "data/subjects.json"
DEFAULT_PROGRESS_FILE = "data/progress.json"
DEFAULT_STATE_DIR = Path.home() / ".esetracker"
DEFAULT_STATE_DB = DEFAULT_STATE_DIR / "state.db"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class TrackerConfig:
    catalog_source: str = DEFAULT_CATALOG_SOURCE
    progress_file: Optional[Path] = Path(DEFAULT_PROGRESS_FILE)
    state_db: Path = DEFAULT_STATE_DB
    export_path: Optional[Path] = None
    log_level: str = "INFO"


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if value is None or not value.strip():
        return None
    return Path(value).expanduser()


def load_config(env_file: Optional[Path] = None) -> TrackerConfig:
    """
    Build configuration from the environment.

    Args:
        env_file: Optional .env file (default: .env in the project root)

    Returns:
        TrackerConfig
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env")

    progress_file = os.environ.get("ESE_PROGRESS_FILE", DEFAULT_PROGRESS_FILE)
    return TrackerConfig(
        catalog_source=os.environ.get("ESE_CATALOG_SOURCE", DEFAULT_CATALOG_SOURCE),
        progress_file=_optional_path(progress_file),
        state_db=_optional_path(os.environ.get("ESE_STATE_DB")) or DEFAULT_STATE_DB,
        export_path=_optional_path(os.environ.get("ESE_EXPORT_PATH")),
        log_level=os.environ.get("ESE_LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(config: TrackerConfig):
    """Configure root logging for entry points (app, scripts)."""
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
