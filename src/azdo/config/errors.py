"""
Typed errors raised by the configuration layer.

Every error carries an ``ErrorKind`` so callers can test for a category
with a plain comparison (``err.kind is ErrorKind.NOT_FOUND``) instead of
relying on the concrete exception class.
"""

from enum import Enum


class ErrorKind(Enum):
    """Categories of configuration errors"""

    NOT_FOUND = "not_found"
    INVALID_FORMAT = "invalid_format"
    NO_DEFAULT_ORGANIZATION = "no_default_organization"
    ORGANIZATION_NOT_FOUND = "organization_not_found"
    SECRET_STORE = "secret_store"


class ConfigError(Exception):
    """Base class for all configuration errors"""

    kind: ErrorKind = ErrorKind.NOT_FOUND


class KeyNotFoundError(ConfigError):
    """A requested key does not exist in the configuration tree."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, key: str, message: str = ""):
        self.key = key
        super().__init__(message or f'could not find key "{key}"')


class TokenNotFoundError(KeyNotFoundError):
    """No source yielded an authentication token for an organization."""

    def __init__(self, organization: str):
        self.organization = organization
        super().__init__(
            "pat", f'could not find key "pat" for organization "{organization}"'
        )


class InvalidConfigFileError(ConfigError):
    """A configuration file exists but could not be parsed."""

    kind = ErrorKind.INVALID_FORMAT

    def __init__(self, path, err: Exception):
        self.path = path
        self.err = err
        super().__init__(f"invalid config file {path}: {err}")


class NoDefaultOrganizationError(ConfigError):
    """No precedence rule produced a default organization."""

    kind = ErrorKind.NO_DEFAULT_ORGANIZATION

    def __init__(self):
        super().__init__("no default organization defined")


class OrganizationNotFoundError(ConfigError):
    """The organization is not among the configured organizations."""

    kind = ErrorKind.ORGANIZATION_NOT_FOUND

    def __init__(self, organization: str):
        self.organization = organization
        super().__init__(f"organization not found {organization}")


class SecretStoreError(ConfigError):
    """The OS secret store failed or is not available."""

    kind = ErrorKind.SECRET_STORE
