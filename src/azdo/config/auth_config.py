"""
Organization-scoped authentication settings.

AuthConfig resolves tokens, URLs and the default organization on top of
the general configuration, and knows how to use the OS secret store when
one is available. Organization names are always compared in lower case.
"""

import os
from typing import TYPE_CHECKING, List, Optional

from azdo.config.errors import (
    KeyNotFoundError,
    NoDefaultOrganizationError,
    OrganizationNotFoundError,
    SecretStoreError,
    TokenNotFoundError,
)
from azdo.config.options import default_for
from azdo.config.secret_store import (
    SecretStore,
    decode_windows_secret,
    is_windows,
    keyring_service_name,
)
from azdo.constants import (
    DEFAULT_ORGANIZATION_KEY,
    ENV_ORGANIZATION,
    ENV_TOKEN,
    GIT_PROTOCOL_KEY,
    KEYRING_USER,
    ORGANIZATIONS_KEY,
    PAT_KEY,
    URL_KEY,
)
from azdo.logging import get_logger, log_authentication_event

if TYPE_CHECKING:
    from azdo.config.config import Config


class AuthConfig:
    """Authentication-specific view of the configuration"""

    def __init__(self, cfg: "Config", secret_store: Optional[SecretStore] = None):
        self.cfg = cfg
        self.secret_store = secret_store
        self.logger = get_logger("azdo.config.auth")

    def get_token(self, organization_name: str) -> str:
        """
        Get the token for an organization.

        Sources are searched in order: the AZDO_TOKEN environment variable,
        the plain text ``pat`` entry, then the secret store.

        Raises:
            TokenNotFoundError: If no source yields a token
        """
        organization_name = organization_name.lower()
        self.logger.debug(f"getting token for organization {organization_name}")

        try:
            return self.get_token_from_env_or_config(organization_name)
        except KeyNotFoundError:
            self.logger.debug("token not in environment or config, trying secret store")
        return self.get_token_from_keyring(organization_name)

    def get_token_from_env_or_config(self, organization_name: str) -> str:
        """
        Get the token from AZDO_TOKEN or the plain text config.

        Raises:
            KeyNotFoundError: If neither source has a token
        """
        token = os.environ.get(ENV_TOKEN)
        if token is not None:
            return token

        key = self.organization_key(organization_name)
        token = self.cfg.get([ORGANIZATIONS_KEY, key, PAT_KEY])
        if not token:
            raise KeyNotFoundError(PAT_KEY)
        return token

    def get_token_from_keyring(self, organization_name: str) -> str:
        """
        Get the token from the secret store only.

        Raises:
            TokenNotFoundError: If the store is unavailable or has no entry
        """
        organization_name = organization_name.lower()

        if self.secret_store is None:
            raise TokenNotFoundError(organization_name)

        try:
            token = self.secret_store.get(keyring_service_name(organization_name), KEYRING_USER)
            if token and is_windows():
                token = decode_windows_secret(token)
        except SecretStoreError as e:
            self.logger.debug(f"secret store lookup failed: {e}")
            raise TokenNotFoundError(organization_name) from e

        if not token:
            raise TokenNotFoundError(organization_name)
        return token

    def get_url(self, organization_name: str) -> str:
        """
        Get the URL of an organization.

        Raises:
            KeyNotFoundError: If the organization has no URL
        """
        key = self.organization_key(organization_name)
        return self.cfg.get([ORGANIZATIONS_KEY, key, URL_KEY])

    def get_git_protocol(self, organization_name: str) -> str:
        """Get the git protocol of an organization, or the default"""
        key = self.organization_key(organization_name)
        try:
            return self.cfg.get([ORGANIZATIONS_KEY, key, GIT_PROTOCOL_KEY])
        except KeyNotFoundError:
            return default_for(GIT_PROTOCOL_KEY)

    def get_default_organization(self) -> str:
        """
        Get the organization used when a command does not name one.

        AZDO_ORGANIZATION always wins; otherwise a single configured
        organization is selected; otherwise ``default_organization``.

        Raises:
            NoDefaultOrganizationError: If none of the rules applies
        """
        organization_name = os.environ.get(ENV_ORGANIZATION)
        if organization_name is None:
            organizations = self.get_organizations()
            if len(organizations) == 1:
                organization_name = organizations[0]
            else:
                try:
                    organization_name = self.cfg.get([DEFAULT_ORGANIZATION_KEY])
                except KeyNotFoundError:
                    organization_name = ""

        organization_name = organization_name.strip().lower()
        if not organization_name:
            raise NoDefaultOrganizationError()
        return organization_name

    def set_default_organization(self, organization_name: str) -> None:
        """
        Set the default organization, or clear it when given an empty name.

        Raises:
            OrganizationNotFoundError: If the organization is not configured
        """
        if not organization_name:
            try:
                self.cfg.remove([DEFAULT_ORGANIZATION_KEY])
            except KeyNotFoundError:
                pass
            return

        organization_name = organization_name.lower()
        if organization_name not in self.get_organizations():
            raise OrganizationNotFoundError(organization_name)
        self.cfg.set([DEFAULT_ORGANIZATION_KEY], organization_name)

    def get_organizations(self) -> List[str]:
        """Names of all configured organizations; never raises"""
        try:
            keys = self.cfg.keys([ORGANIZATIONS_KEY])
        except KeyNotFoundError:
            return []
        return sorted({key.lower() for key in keys})

    def _stored_keys(self, organization_name: str) -> List[str]:
        """Keys under ``organizations`` that name this organization in any case"""
        organization_name = organization_name.lower()
        try:
            keys = self.cfg.keys([ORGANIZATIONS_KEY])
        except KeyNotFoundError:
            return []
        return [key for key in keys if key.lower() == organization_name]

    def organization_key(self, organization_name: str) -> str:
        """Key to address an organization with; lower case unless stored otherwise"""
        organization_name = organization_name.lower()
        stored = self._stored_keys(organization_name)
        if not stored or organization_name in stored:
            return organization_name
        return stored[0]

    def login(
        self,
        organization_name: str,
        organization_url: str,
        token: str,
        git_protocol: str = "",
        secure_storage: bool = True,
    ) -> None:
        """
        Store the URL, git protocol and token of an organization and persist.

        With ``secure_storage`` the token goes to the secret store first; if
        that fails for any reason it is written to the plain text config.
        """
        if not organization_name:
            raise ValueError("organization name must not be empty")
        organization_name = organization_name.lower()
        key = self.organization_key(organization_name)

        stored_securely = False
        if secure_storage and self.secret_store is not None:
            try:
                self.secret_store.set(keyring_service_name(organization_name), KEYRING_USER, token)
                stored_securely = True
            except SecretStoreError as e:
                self.logger.debug(f"secure storage failed, using plain text: {e}")

        if stored_securely:
            try:
                self.cfg.remove([ORGANIZATIONS_KEY, key, PAT_KEY])
            except KeyNotFoundError:
                pass

        self.cfg.set([ORGANIZATIONS_KEY, key, URL_KEY], organization_url)
        if not stored_securely:
            self.cfg.set([ORGANIZATIONS_KEY, key, PAT_KEY], token)
        if git_protocol:
            self.cfg.set([ORGANIZATIONS_KEY, key, GIT_PROTOCOL_KEY], git_protocol)

        self.cfg.write()
        log_authentication_event(
            "login",
            organization_name,
            True,
            {"url": organization_url, "secure_storage": stored_securely},
        )

    def logout(self, organization_name: str) -> None:
        """
        Remove all settings of an organization and its stored secret.

        Logging out of an unknown organization succeeds without changes.
        """
        if not organization_name:
            return
        organization_name = organization_name.lower()

        stored = self._stored_keys(organization_name)
        if not stored:
            self.logger.debug(f"organization {organization_name} not configured")
        for key in stored:
            self.cfg.remove([ORGANIZATIONS_KEY, key])

        if self.secret_store is not None:
            try:
                self.secret_store.delete(keyring_service_name(organization_name), KEYRING_USER)
            except SecretStoreError as e:
                self.logger.debug(f"no secret removed for {organization_name}: {e}")

        self.cfg.write()
        log_authentication_event("logout", organization_name, True)
