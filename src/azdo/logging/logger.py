"""
Logger setup for the azdo CLI.

All azdo loggers hang below the ``azdo`` logger, which writes to a file
rotated at midnight and mirrors warnings to stderr. Setup happens on the
first ``get_logger`` call unless ``setup_logging`` ran before.
"""

import logging
import logging.handlers
import sys
from typing import Any, Dict, Optional, Sequence

from azdo.constants import LOG_APP_NAME
from .config import LogConfig, LogLevel, get_log_file_path
from .formatters import AzdoFormatter
from .utils import cleanup_old_logs, sanitize_data

_logging_configured = False
_log_config: Optional[LogConfig] = None


def _level_from_settings() -> Optional[LogLevel]:
    from azdo.config.config_data import read

    return LogLevel.parse(read().get_or_default(["log_level"]))


def _file_handler(config: LogConfig) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=get_log_file_path(config),
        when="midnight",
        backupCount=config.retention_days,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(config.file_level.numeric)
    handler.setFormatter(AzdoFormatter(config.timestamps, config.sanitize, config.sensitive_keys))
    return handler


def _console_handler(config: LogConfig) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.console_level.numeric)
    handler.setFormatter(AzdoFormatter(False, config.sanitize, config.sensitive_keys))
    return handler


def setup_logging(config: Optional[LogConfig] = None, force_reconfigure: bool = False) -> None:
    """
    Configure the ``azdo`` logger.

    Args:
        config: Logging settings; by default built from the ``log_level``
            setting of config.yml
        force_reconfigure: Replace handlers installed by an earlier call
    """
    global _logging_configured, _log_config

    if _logging_configured and not force_reconfigure:
        return

    if config is None:
        config = LogConfig()
        try:
            level = _level_from_settings()
        except Exception:
            # Commands report unreadable config files themselves
            level = None
        if level is not None:
            config.file_level = level

    app_logger = logging.getLogger(LOG_APP_NAME)
    app_logger.setLevel(config.file_level.numeric)
    app_logger.handlers.clear()
    app_logger.addHandler(_file_handler(config))
    app_logger.addHandler(_console_handler(config))
    app_logger.propagate = False

    log_path = get_log_file_path(config)
    try:
        cleanup_old_logs(log_path.parent, config.retention_days)
    except OSError:
        pass

    _log_config = config
    _logging_configured = True
    app_logger.debug(f"logging to {log_path} at {config.file_level.value}")


def get_logger(name: str) -> logging.Logger:
    """Logger ``name`` (e.g. ``azdo.config.auth``), setting up logging on first use"""
    if not _logging_configured:
        setup_logging()
    return logging.getLogger(name)


def log_config_event(
    operation: str,
    keys: Sequence[str],
    details: Optional[Dict[str, Any]] = None,
    logger_name: str = "azdo.config.change",
) -> None:
    """
    Record a configuration change at DEBUG level.

    Args:
        operation: What happened, e.g. ``set`` or ``remove``
        keys: Key path that changed
        details: Extra context; sensitive values are masked
        logger_name: Logger to use
    """
    path = ".".join(keys)
    extra: Dict[str, Any] = {"change_operation": operation, "change_keys": path}
    if details:
        extra["change_details"] = sanitize_data(details, (_log_config or LogConfig()).sensitive_keys)

    get_logger(logger_name).debug(f"config {operation}: {path}", extra=extra)


def log_authentication_event(
    operation: str,
    organization: str,
    success: bool,
    details: Optional[Dict[str, Any]] = None,
    logger_name: str = "azdo.auth",
) -> None:
    """
    Record a login or logout; failures are logged as errors.

    Args:
        operation: ``login`` or ``logout``
        organization: Organization the operation applies to
        success: Whether the operation succeeded
        details: Extra context; sensitive values are masked
        logger_name: Logger to use
    """
    extra: Dict[str, Any] = {
        "auth_operation": operation,
        "auth_organization": organization,
        "auth_success": success,
    }
    if details:
        extra["auth_details"] = sanitize_data(details, (_log_config or LogConfig()).sensitive_keys)

    logger = get_logger(logger_name)
    if success:
        logger.info(f"{operation} succeeded for {organization}", extra=extra)
    else:
        logger.error(f"{operation} failed for {organization}", extra=extra)
