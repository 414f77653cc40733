"""Application-wide settings and configuration."""

import logging
import os
from pathlib import Path
from typing import Optional


class Settings:
    """Centralized application settings."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    LOGS_DIR = Path(os.getenv("FILEHUB_LOG_DIR", PROJECT_ROOT / "logs"))

    # Logging
    LOG_LEVEL = os.getenv("FILEHUB_LOG_LEVEL", "INFO")

    # Filter panel settings
    FILTER_DEBOUNCE_MS = 500
    TIMER_PUMP_INTERVAL_SECONDS = 0.25

    # Dashboard settings
    STATS_REFRESH_SECONDS = 30
    MAX_UPLOAD_SIZE_MB = 200

    @classmethod
    def ensure_directories(cls) -> None:
        """Ensure all required directories exist."""
        cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_log_level(cls, override: Optional[str] = None) -> int:
        """Resolve a level name such as "DEBUG" to its logging constant."""
        name = (override or cls.LOG_LEVEL).upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO
