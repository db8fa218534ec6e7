"""
Log record formatting for azdo.
"""

import logging
from typing import Optional, Tuple

from azdo.constants import SENSITIVE_KEYS
from .utils import sanitize_data

# Extra attributes that may carry secrets
_SANITIZED_EXTRAS = ("auth_details", "change_details")


class AzdoFormatter(logging.Formatter):
    """
    ``[time] LEVEL [logger] message`` with secrets masked.

    Structured message arguments and the structured extras attached by
    ``log_authentication_event`` and ``log_config_event`` are passed
    through ``sanitize_data`` before formatting.
    """

    def __init__(
        self,
        timestamps: bool = True,
        sanitize: bool = True,
        sensitive_keys: Optional[Tuple[str, ...]] = None,
    ):
        fmt = "%(levelname)s [%(name)s] %(message)s"
        if timestamps:
            fmt = "%(asctime)s " + fmt
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")
        self.sanitize = sanitize
        self.sensitive_keys = sensitive_keys or SENSITIVE_KEYS

    def _clean(self, value):
        if isinstance(value, (dict, list)):
            return sanitize_data(value, self.sensitive_keys)
        return value

    def format(self, record: logging.LogRecord) -> str:
        if self.sanitize:
            record.msg = self._clean(record.msg)
            if isinstance(record.args, dict):
                # LogRecord unpacks a single mapping argument
                record.args = self._clean(record.args)
            elif isinstance(record.args, tuple):
                record.args = tuple(self._clean(arg) for arg in record.args)
            for name in _SANITIZED_EXTRAS:
                if isinstance(getattr(record, name, None), dict):
                    setattr(record, name, self._clean(getattr(record, name)))
        return super().format(record)
