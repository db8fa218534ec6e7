"""
Known configuration options, their defaults and allowed values.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ConfigOption:
    """Describes a recognized configuration key"""

    key: str
    description: str
    default_value: str = ""
    allowed_values: List[str] = field(default_factory=list)


CONFIG_OPTIONS = (
    ConfigOption(
        key="git_protocol",
        description="What protocol to use when performing git operations.",
        default_value="https",
        allowed_values=["https", "ssh"],
    ),
    ConfigOption(
        key="editor",
        description="What editor azdo should run when creating issues, "
        "pull requests, etc. If blank, will refer to environment.",
    ),
    ConfigOption(
        key="prompt",
        description="Toggle interactive prompting in the terminal.",
        default_value="enabled",
        allowed_values=["enabled", "disabled"],
    ),
    ConfigOption(
        key="pager",
        description="The terminal pager program to send standard output to.",
    ),
    ConfigOption(
        key="http_unix_socket",
        description="The path to a Unix socket through which to make an HTTP connection.",
    ),
    ConfigOption(
        key="browser",
        description="The web browser to use for opening URLs.",
    ),
    ConfigOption(
        key="log_level",
        description="The level of detail written to the azdo log file.",
        default_value="INFO",
        allowed_values=["DEBUG", "INFO", "WARNING", "ERROR"],
    ),
)


def find_option(key: str) -> Optional[ConfigOption]:
    for option in CONFIG_OPTIONS:
        if option.key == key:
            return option
    return None


def default_for(key: str) -> str:
    """Hard-coded default for a leaf key, or an empty string"""
    option = find_option(key)
    return option.default_value if option else ""


DEFAULT_GENERAL_ENTRIES = """
# What protocol to use when performing git operations. Supported values: ssh, https
git_protocol: https
# What editor azdo should run when creating issues, pull requests, etc. If blank, will refer to environment.
editor:
# When to interactively prompt. This is a global config that cannot be overridden by organization. Supported values: enabled, disabled
prompt: enabled
# A pager program to send command output to, e.g. "less". Set the value to "cat" to disable the pager.
pager:
# Aliases allow you to create nicknames for azdo commands
aliases:
  co: pr checkout
# The path to a unix socket through which send HTTP connections. If blank, HTTP traffic will be handled by the default transport.
http_unix_socket:
# What web browser azdo should use when opening URLs. If blank, will refer to environment.
browser:
"""
