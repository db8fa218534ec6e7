"""
Command context shared by all commands of one invocation.

The context is created once by the top-level callback and passed to
commands through ``typer.Context.obj``. It loads the configuration on
first use and hands the same Config to every caller afterwards.
"""

from typing import Optional

import typer

from azdo.config import Config, InvalidConfigFileError, SecretStore, new_config
from azdo.logging import get_logger
from azdo.utils.console import error


class CmdContext:
    def __init__(
        self,
        config: Optional[Config] = None,
        secret_store: Optional[SecretStore] = None,
    ):
        self._config = config
        self._secret_store = secret_store

    def config(self) -> Config:
        """
        Get the configuration, loading it on first use.

        Raises:
            InvalidConfigFileError: If a configuration file cannot be parsed
        """
        if self._config is None:
            self._config = new_config(self._secret_store)
        return self._config


def get_context(ctx: typer.Context) -> CmdContext:
    """Return the CmdContext of this invocation, creating it if needed"""
    root = ctx.find_root()
    if not isinstance(root.obj, CmdContext):
        root.obj = CmdContext()
    return root.obj


def load_config(ctx: typer.Context) -> Config:
    """Get the configuration for a command, exiting on unreadable files"""
    try:
        return get_context(ctx).config()
    except InvalidConfigFileError as e:
        get_logger("azdo.commands").error(str(e))
        error(str(e))
        raise typer.Exit(1)
