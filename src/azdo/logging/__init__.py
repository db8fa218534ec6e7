"""
Logging for the azdo CLI.

A daily rotated log file in the platform state directory, warnings
mirrored to stderr, and masking of tokens and other secrets.
"""

from .config import LogConfig, LogLevel, get_log_directory
from .logger import (
    get_logger,
    log_authentication_event,
    log_config_event,
    setup_logging,
)
from .utils import sanitize_data

__all__ = [
    "get_logger",
    "setup_logging",
    "log_config_event",
    "log_authentication_event",
    "LogConfig",
    "LogLevel",
    "get_log_directory",
    "sanitize_data",
]
