import typer

from azdo.commands.shared import load_config
from azdo.config import Config, KeyNotFoundError
from azdo.utils.console import console, create_table, error, info, success

app = typer.Typer(help="Create command shortcuts")


def _write(cfg: Config) -> None:
    try:
        cfg.write()
    except OSError as e:
        error(f"failed to write config to disk: {e}")
        raise typer.Exit(1)


@app.command("list")
def list_aliases(ctx: typer.Context):
    """List all aliases"""
    aliases = load_config(ctx).aliases().all()

    if not aliases:
        info("No aliases configured")
        return

    table = create_table("Aliases", ["Alias", "Expansion"])
    for name, expansion in aliases.items():
        table.add_row(name, expansion)
    console.print(table)


@app.command("set")
def set_alias(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Alias name"),
    expansion: str = typer.Argument(..., help="Command the alias expands to"),
):
    """Create or replace an alias"""
    cfg = load_config(ctx)
    cfg.aliases().add(name, expansion)
    _write(cfg)
    success(f"Added alias {name}")


@app.command("delete")
def delete_alias(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Alias name"),
):
    """Delete an alias"""
    cfg = load_config(ctx)
    try:
        cfg.aliases().delete(name)
    except KeyNotFoundError:
        error(f"no such alias {name}")
        raise typer.Exit(1)
    _write(cfg)
    success(f"Deleted alias {name}")
