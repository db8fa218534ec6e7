"""
Authentication commands.

login, logout and status operate on the organizations known to the
configuration; default shows or changes the default organization.
"""

import os
import sys
from typing import Optional

import typer
from rich.prompt import Prompt

from azdo.commands.shared import load_config
from azdo.config import (
    Config,
    KeyNotFoundError,
    NoDefaultOrganizationError,
    OrganizationNotFoundError,
    TokenNotFoundError,
)
from azdo.constants import ENV_TOKEN
from azdo.logging import get_logger
from azdo.utils.console import console, create_table, error, info, output, success
from azdo.utils.url import normalize_organization_url, organization_from_url

app = typer.Typer(help="Authenticate azdo with Azure DevOps organizations")

GIT_PROTOCOLS = ("https", "ssh")


def _write(cfg: Config) -> None:
    try:
        cfg.write()
    except OSError as e:
        get_logger("azdo.commands.auth").error(f"Failed to write config: {e}")
        error(f"failed to write config to disk: {e}")
        raise typer.Exit(1)


@app.command("login")
def login(
    ctx: typer.Context,
    organization_url: str = typer.Option(
        ...,
        "--organization-url",
        "-o",
        help="The URL to the Azure DevOps organization to authenticate with",
    ),
    with_token: bool = typer.Option(
        False, "--with-token", help="Read token from standard input"
    ),
    git_protocol: Optional[str] = typer.Option(
        None, "--git-protocol", "-p", help="The protocol to use for git operations (https, ssh)"
    ),
    insecure_storage: bool = typer.Option(
        False,
        "--insecure-storage",
        help="Save authentication credentials in plain text instead of credential store",
    ),
):
    """Authenticate with an Azure DevOps organization"""
    logger = get_logger("azdo.commands.auth")

    organization_url = normalize_organization_url(organization_url)
    try:
        organization_name = organization_from_url(organization_url)
    except ValueError as e:
        error(str(e))
        raise typer.Exit(1)

    protocol = (git_protocol or "").lower()
    if protocol and protocol not in GIT_PROTOCOLS:
        error(f"invalid git protocol {git_protocol!r}; use one of: {', '.join(GIT_PROTOCOLS)}")
        raise typer.Exit(1)

    if with_token:
        token = sys.stdin.read().strip()
    else:
        token = Prompt.ask("Paste your personal access token", password=True).strip()
    if not token:
        error("no token provided")
        raise typer.Exit(1)

    cfg = load_config(ctx)
    try:
        cfg.authentication().login(
            organization_name,
            organization_url,
            token,
            protocol,
            not insecure_storage,
        )
    except OSError as e:
        logger.error(f"Login failed for {organization_name}: {e}")
        error(f"failed to write config to disk: {e}")
        raise typer.Exit(1)

    success(f"Logged in to {organization_name}")


@app.command("logout")
def logout(
    ctx: typer.Context,
    organization: Optional[str] = typer.Option(
        None, "--organization", "-o", help="The Azure DevOps organization to log out of"
    ),
):
    """Log out of an Azure DevOps organization"""
    cfg = load_config(ctx)
    auth = cfg.authentication()
    organizations = auth.get_organizations()

    if not organizations:
        error("You are not logged into any Azure DevOps organizations.")
        raise typer.Exit(1)

    if organization:
        organization = organization.lower()
        if organization not in organizations:
            error(f'You are not logged in to the Azure DevOps organization "{organization}".')
            raise typer.Exit(1)
    elif len(organizations) == 1:
        organization = organizations[0]
    else:
        error("--organization required when more than one organization is configured")
        raise typer.Exit(1)

    try:
        is_default = auth.get_default_organization() == organization
    except NoDefaultOrganizationError:
        is_default = False
    if is_default:
        auth.set_default_organization("")
        info(f'"{organization}" was the default organization; default cleared')

    try:
        auth.logout(organization)
    except OSError as e:
        error(f"failed to write config to disk: {e}")
        raise typer.Exit(1)

    success(f"Logged out of {organization}")


def _token_source(cfg: Config, organization: str) -> str:
    if os.environ.get(ENV_TOKEN) is not None:
        return ENV_TOKEN
    try:
        cfg.authentication().get_token_from_env_or_config(organization)
        return "config file"
    except KeyNotFoundError:
        pass
    try:
        cfg.authentication().get_token_from_keyring(organization)
        return "keyring"
    except TokenNotFoundError:
        return "none"


@app.command("status")
def status(
    ctx: typer.Context,
    organization: Optional[str] = typer.Argument(None, help="Organization to check"),
):
    """View authentication status"""
    cfg = load_config(ctx)
    auth = cfg.authentication()
    organizations = auth.get_organizations()

    if not organizations:
        error("You are not logged into any Azure DevOps organizations. "
              "Run 'azdo auth login' to authenticate.")
        raise typer.Exit(1)

    if organization:
        organization = organization.lower()
        if organization not in organizations:
            error(f'You are not logged in to the Azure DevOps organization "{organization}".')
            raise typer.Exit(1)
        organizations = [organization]

    try:
        default_organization = auth.get_default_organization()
    except NoDefaultOrganizationError:
        default_organization = ""

    table = create_table("Authentication status", ["Organization", "URL", "Git protocol", "Token", "Default"])
    for name in organizations:
        try:
            url = auth.get_url(name)
        except KeyNotFoundError:
            url = "-"
        table.add_row(
            name,
            url,
            auth.get_git_protocol(name),
            _token_source(cfg, name),
            "yes" if name == default_organization else "",
        )
    console.print(table)


@app.command("default")
def default(
    ctx: typer.Context,
    organization: Optional[str] = typer.Argument(None, help="Organization to make the default"),
    clear: bool = typer.Option(False, "--clear", help="Clear the default organization"),
):
    """Show or change the default organization"""
    cfg = load_config(ctx)
    auth = cfg.authentication()

    if clear:
        auth.set_default_organization("")
        _write(cfg)
        success("Default organization cleared")
        return

    if not organization:
        try:
            output(auth.get_default_organization())
        except NoDefaultOrganizationError as e:
            error(str(e))
            raise typer.Exit(1)
        return

    try:
        auth.set_default_organization(organization)
    except OrganizationNotFoundError as e:
        error(str(e))
        raise typer.Exit(1)
    _write(cfg)
    success(f"Default organization set to {organization.lower()}")
