"""
Validation of configuration keys and values.
"""

from typing import List

from azdo.config.options import find_option


class InvalidValueError(ValueError):
    """The value is not one of the allowed values of a key."""

    def __init__(self, key: str, value: str, valid_values: List[str]):
        self.key = key
        self.value = value
        self.valid_values = valid_values
        quoted = ", ".join(f"'{v}'" for v in valid_values)
        super().__init__(
            f'failed to set "{key}" to "{value}": valid values are {quoted}'
        )


def is_known_key(key: str) -> bool:
    return find_option(key) is not None


def validate_value(key: str, value: str) -> None:
    """
    Check ``value`` against the allowed values of ``key``.

    Unknown keys and keys without a restricted value set accept anything.

    Raises:
        InvalidValueError: If the value is not allowed
    """
    option = find_option(key)
    if option is None or not option.allowed_values:
        return
    if value not in option.allowed_values:
        raise InvalidValueError(key, value, option.allowed_values)
