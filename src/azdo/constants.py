"""
Global constants for the azdo CLI.
"""

# Configuration files
GENERAL_CONFIG_FILE = "config.yml"
ORGANIZATIONS_CONFIG_FILE = "organizations.yml"
CONFIG_DIR_MODE = 0o771
CONFIG_FILE_MODE = 0o600

# Reserved configuration keys
ALIASES_KEY = "aliases"
ORGANIZATIONS_KEY = "organizations"
PAT_KEY = "pat"
URL_KEY = "url"
GIT_PROTOCOL_KEY = "git_protocol"
DEFAULT_ORGANIZATION_KEY = "default_organization"

# Environment variables
ENV_ORGANIZATION = "AZDO_ORGANIZATION"
ENV_TOKEN = "AZDO_TOKEN"
ENV_CONFIG_DIR = "AZDO_CONFIG_DIR"
ENV_EDITOR = "AZDO_EDITOR"

# Directory names
APP_DIR_NAME = "azdo"
WINDOWS_APP_DIR_NAME = "AzDO CLI"

# Secret store
KEYRING_SERVICE_PREFIX = "azdo:"
KEYRING_USER = ""

# Logging constants
LOG_APP_NAME = "azdo"
LOG_FILE_NAME = "azdo"
LOG_RETENTION_DAYS = 7

# Sensitive data keys for sanitization
SENSITIVE_KEYS = (
    "pat", "token", "password", "secret", "authorization", "bearer", "cookie"
)
