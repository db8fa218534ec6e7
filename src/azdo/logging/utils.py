"""
Helpers for azdo logging: masking secrets and pruning rotated log files.
"""

import re
import time
from pathlib import Path
from typing import Any, Mapping, Sequence, Tuple

from azdo.constants import LOG_FILE_NAME

# Order matters: headers first so a URL inside a header is still matched
_SECRET_PATTERNS = (
    (re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), r"\1 ***"),
    (re.compile(r"(https?://)[^/\s:@]+:[^/\s@]+@", re.IGNORECASE), r"\1***@"),
    (re.compile(r"([?&](?:token|pat|secret|password)=)[^&\s]+", re.IGNORECASE), r"\1***"),
)


def _mask(value: Any) -> str:
    # Long tokens keep their ends so they can still be told apart
    if isinstance(value, str) and len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return "***"


def _is_sensitive(key: Any, sensitive_keys: Tuple[str, ...]) -> bool:
    name = str(key).lower()
    return any(sensitive.lower() in name for sensitive in sensitive_keys)


def sanitize_data(data: Any, sensitive_keys: Tuple[str, ...]) -> Any:
    """
    Return a copy of ``data`` with secrets masked.

    Mappings have the values of sensitive keys masked, sequences are
    sanitized item by item and strings have credentials in URLs and
    authorization headers replaced. Anything else is returned as is.
    """
    if isinstance(data, Mapping):
        return sanitize_dict(data, sensitive_keys)
    if isinstance(data, list):
        return sanitize_list(data, sensitive_keys)
    if isinstance(data, str):
        return sanitize_string(data)
    return data


def sanitize_dict(data: Mapping, sensitive_keys: Tuple[str, ...]) -> dict:
    return {
        key: _mask(value) if _is_sensitive(key, sensitive_keys)
        else sanitize_data(value, sensitive_keys)
        for key, value in data.items()
    }


def sanitize_list(data: Sequence, sensitive_keys: Tuple[str, ...]) -> list:
    return [sanitize_data(item, sensitive_keys) for item in data]


def sanitize_string(data: str) -> str:
    for pattern, replacement in _SECRET_PATTERNS:
        data = pattern.sub(replacement, data)
    return data


def cleanup_old_logs(log_directory: Path, retention_days: int) -> int:
    """
    Delete rotated ``azdo.log.*`` files older than ``retention_days``.

    Returns:
        int: Number of files deleted
    """
    if not log_directory.is_dir():
        return 0

    cutoff = time.time() - retention_days * 86400
    removed = 0
    for rotated in log_directory.glob(f"{LOG_FILE_NAME}.log.*"):
        try:
            if rotated.stat().st_mtime < cutoff:
                rotated.unlink()
                removed += 1
        except OSError:
            continue
    return removed
