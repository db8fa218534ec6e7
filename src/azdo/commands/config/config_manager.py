"""
Configuration management commands.

This module contains the typer commands that read and change settings,
either globally or for a single organization.
"""

from typing import List, Optional

import typer

from azdo.commands.shared import load_config
from azdo.config import Config, KeyNotFoundError, TokenNotFoundError
from azdo.config.options import CONFIG_OPTIONS
from azdo.constants import ORGANIZATIONS_KEY, PAT_KEY
from azdo.logging import get_logger, log_config_event
from azdo.utils.console import error, output, warning
from .validation import InvalidValueError, is_known_key, validate_value

app = typer.Typer(help="Manage configuration for azdo")

ORGANIZATION_OPTION_HELP = "Per-organization setting"


def _setting_keys(cfg: Config, organization: Optional[str], key: str) -> List[str]:
    if organization:
        return [ORGANIZATIONS_KEY, cfg.authentication().organization_key(organization), key]
    return [key]


def _require_organization(cfg: Config, organization: str) -> None:
    if organization.lower() not in cfg.authentication().get_organizations():
        error(
            f'You are not logged in to the Azure DevOps organization "{organization}". '
            "Run 'azdo auth login' to authenticate."
        )
        raise typer.Exit(1)


def _write(cfg: Config, logger) -> None:
    try:
        cfg.write()
    except OSError as e:
        logger.error(f"Failed to write config: {e}")
        error(f"failed to write config to disk: {e}")
        raise typer.Exit(1)


@app.command("get")
def get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Configuration key"),
    organization: Optional[str] = typer.Option(
        None, "--organization", "-o", help=ORGANIZATION_OPTION_HELP
    ),
):
    """Print the value of a given configuration key"""
    cfg = load_config(ctx)

    if organization:
        _require_organization(cfg, organization)

        # The token may live in the secret store rather than the file
        if key == PAT_KEY:
            try:
                output(cfg.authentication().get_token(organization))
            except TokenNotFoundError as e:
                error(f"failed to get token for organization {organization}: {e}")
                raise typer.Exit(1)
            return

    value = cfg.get_or_default(_setting_keys(cfg, organization, key))
    if value:
        output(value)


@app.command("set")
def set_(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Configuration key"),
    value: Optional[str] = typer.Argument(None, help="New value"),
    organization: Optional[str] = typer.Option(
        None, "--organization", "-o", help=ORGANIZATION_OPTION_HELP
    ),
    remove: bool = typer.Option(
        False,
        "--remove",
        "-r",
        help="Remove a setting of an organization so that the default applies again",
    ),
):
    """Update configuration with a value for the given key"""
    logger = get_logger("azdo.commands.config")

    if remove:
        if not organization:
            error(
                "configuration values can only be removed for organizations. "
                "Please specify the organization via -o"
            )
            raise typer.Exit(1)
        if value is not None:
            error("--remove does not take a value")
            raise typer.Exit(1)
    elif value is None:
        error("a value is required")
        raise typer.Exit(1)

    cfg = load_config(ctx)

    if not is_known_key(key):
        warning(f'"{key}" is not a known configuration key')

    if organization:
        _require_organization(cfg, organization)

    keys = _setting_keys(cfg, organization, key)
    if remove:
        try:
            cfg.remove(keys)
        except KeyNotFoundError:
            # Nothing changed, nothing to write
            return
        log_config_event("remove", keys)
    else:
        try:
            validate_value(key, value)
        except InvalidValueError as e:
            error(str(e))
            raise typer.Exit(1)
        cfg.set(keys, value)
        log_config_event("set", keys, {key: value})

    _write(cfg, logger)


@app.command("list")
def list_(
    ctx: typer.Context,
    organization: Optional[str] = typer.Option(
        None, "--organization", "-o", help="Per-organization configuration"
    ),
    show_all: bool = typer.Option(
        False, "--all", help="Show config options which are not configured"
    ),
):
    """Print a list of configuration keys and values"""
    cfg = load_config(ctx)

    if organization:
        _require_organization(cfg, organization)

    for option in CONFIG_OPTIONS:
        value = cfg.get_or_default(_setting_keys(cfg, organization, option.key))
        if value or show_all:
            output(f"{option.key}={value}")


app.command("ls", hidden=True)(list_)
