"""
Logging settings for the azdo CLI.

Logs live in ``<state dir>/logs``. The file level follows the
``log_level`` setting of config.yml; stderr only shows warnings.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from azdo.constants import LOG_FILE_NAME, LOG_RETENTION_DAYS, SENSITIVE_KEYS


class LogLevel(Enum):
    """Levels accepted by the ``log_level`` setting"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.value)

    @classmethod
    def parse(cls, value: str) -> Optional["LogLevel"]:
        """Level named by ``value`` in any case, or None"""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


@dataclass
class LogConfig:
    """Where and how much azdo logs"""

    filename: str = f"{LOG_FILE_NAME}.log"
    retention_days: int = LOG_RETENTION_DAYS

    file_level: LogLevel = LogLevel.INFO
    console_level: LogLevel = LogLevel.WARNING

    timestamps: bool = True
    sanitize: bool = True
    sensitive_keys: Tuple[str, ...] = SENSITIVE_KEYS


def get_log_directory() -> Path:
    """
    Return the log directory, creating it when missing.

    Falls back to ``./logs`` when the state directory is not writable.
    """
    from azdo.config.paths import state_dir

    log_dir = state_dir() / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        log_dir = Path.cwd() / "logs"
        log_dir.mkdir(exist_ok=True)
    return log_dir


def get_log_file_path(config: Optional[LogConfig] = None) -> Path:
    return get_log_directory() / (config or LogConfig()).filename
