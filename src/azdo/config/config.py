"""
Facade over ConfigData with authentication and alias views.
"""

import os
from typing import List, Optional, Sequence

from azdo.config.alias_config import AliasConfig
from azdo.config.auth_config import AuthConfig
from azdo.config.config_data import ConfigData, read
from azdo.config.secret_store import KeyringSecretStore, SecretStore
from azdo.constants import ENV_EDITOR


class Config:
    """Persistent azdo configuration"""

    def __init__(self, data: ConfigData, secret_store: Optional[SecretStore] = None):
        self.data = data
        self._auth = AuthConfig(self, secret_store)
        self._aliases = AliasConfig(self)

    def keys(self, keys: Sequence[str]) -> List[str]:
        return self.data.keys(keys)

    def get(self, keys: Sequence[str]) -> str:
        return self.data.get(keys)

    def get_or_default(self, keys: Sequence[str]) -> str:
        return self.data.get_or_default(keys)

    def set(self, keys: Sequence[str], value: str) -> None:
        self.data.set(keys, value)

    def remove(self, keys: Sequence[str]) -> None:
        self.data.remove(keys)

    def write(self) -> None:
        self.data.write()

    def authentication(self) -> AuthConfig:
        return self._auth

    def aliases(self) -> AliasConfig:
        return self._aliases


def new_config(secret_store: Optional[SecretStore] = None) -> Config:
    """
    Create a Config over the process-wide configuration data.

    Args:
        secret_store: Secret store to use; defaults to the OS keyring

    Raises:
        InvalidConfigFileError: If a configuration file cannot be parsed
    """
    if secret_store is None:
        secret_store = KeyringSecretStore()
    return Config(read(), secret_store)


def determine_editor(cfg: Config) -> str:
    """Editor command from AZDO_EDITOR, else the ``editor`` setting"""
    editor = os.environ.get(ENV_EDITOR, "")
    if not editor:
        editor = cfg.get_or_default(["editor"])
    return editor
