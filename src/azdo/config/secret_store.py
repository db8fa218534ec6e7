"""
Access to the OS secret store through keyring.

Secrets are addressed by a service name and a user name. azdo stores one
secret per organization under ``azdo:<organization>`` with an empty user.
"""

import platform
import sys
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from azdo.config.errors import SecretStoreError
from azdo.constants import KEYRING_SERVICE_PREFIX


def keyring_service_name(organization_name: str) -> str:
    return KEYRING_SERVICE_PREFIX + organization_name.lower()


class SecretStore:
    """Interface of a secret store; subclasses raise SecretStoreError on failure"""

    def get(self, service: str, user: str) -> Optional[str]:
        """Return the secret, or None if there is no entry"""
        raise NotImplementedError

    def set(self, service: str, user: str, secret: str) -> None:
        raise NotImplementedError

    def delete(self, service: str, user: str) -> None:
        raise NotImplementedError


class KeyringSecretStore(SecretStore):
    """SecretStore backed by the keyring library"""

    def get(self, service: str, user: str) -> Optional[str]:
        try:
            return keyring.get_password(service, user)
        except KeyringError as e:
            raise SecretStoreError(f"failed to read secret {service}: {e}") from e

    def set(self, service: str, user: str, secret: str) -> None:
        try:
            keyring.set_password(service, user, secret)
        except KeyringError as e:
            raise SecretStoreError(f"failed to store secret {service}: {e}") from e

    def delete(self, service: str, user: str) -> None:
        try:
            keyring.delete_password(service, user)
        except PasswordDeleteError as e:
            raise SecretStoreError(f"secret {service} not found: {e}") from e
        except KeyringError as e:
            raise SecretStoreError(f"failed to delete secret {service}: {e}") from e


def decode_windows_secret(raw: str) -> str:
    """
    Transcode a secret read from the Windows credential manager.

    Secrets written by other azdo builds are stored as native-endian UTF-16
    bytes, which arrive here as one character per byte. Values without
    embedded NUL characters are already decoded text and are returned as is.

    Raises:
        SecretStoreError: If the bytes are not valid UTF-16
    """
    if "\x00" not in raw:
        return raw

    codec = "utf-16-le" if sys.byteorder == "little" else "utf-16-be"
    try:
        return raw.encode("latin-1").decode(codec)
    except UnicodeError as e:
        raise SecretStoreError(f"failed to decode secret: {e}") from e


def is_windows() -> bool:
    return platform.system() == "Windows"
