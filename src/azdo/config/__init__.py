"""
Persistent configuration and credential resolution.

Modules:
    yamlmap: Comment-preserving YAML mapping with modification tracking
    config_data: Two-file configuration store and the per-process loader
    auth_config: Organization tokens, URLs and default organization
    alias_config: Command aliases
    secret_store: OS secret store access through keyring
    options: Known configuration keys and their defaults
    paths: Platform-specific directories
"""

from azdo.config.auth_config import AuthConfig
from azdo.config.alias_config import AliasConfig
from azdo.config.config import Config, determine_editor, new_config
from azdo.config.config_data import ConfigData, load, read, reset
from azdo.config.errors import (
    ConfigError,
    ErrorKind,
    InvalidConfigFileError,
    KeyNotFoundError,
    NoDefaultOrganizationError,
    OrganizationNotFoundError,
    SecretStoreError,
    TokenNotFoundError,
)
from azdo.config.options import CONFIG_OPTIONS, ConfigOption, default_for
from azdo.config.secret_store import KeyringSecretStore, SecretStore

__all__ = [
    # Stores
    "Config",
    "ConfigData",
    "AuthConfig",
    "AliasConfig",
    "new_config",
    "determine_editor",
    "load",
    "read",
    "reset",
    # Secret store
    "SecretStore",
    "KeyringSecretStore",
    # Options
    "CONFIG_OPTIONS",
    "ConfigOption",
    "default_for",
    # Errors
    "ConfigError",
    "ErrorKind",
    "InvalidConfigFileError",
    "KeyNotFoundError",
    "NoDefaultOrganizationError",
    "OrganizationNotFoundError",
    "SecretStoreError",
    "TokenNotFoundError",
]
