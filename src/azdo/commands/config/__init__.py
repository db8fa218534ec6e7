"""
Configuration management module.

- config_manager: typer commands get, set and list
- validation: key and value validation against the known options

Usage:
    from azdo.commands.config import app
"""

from .config_manager import app
from .validation import InvalidValueError, is_known_key, validate_value

__all__ = [
    'app',
    'InvalidValueError',
    'is_known_key',
    'validate_value',
]
