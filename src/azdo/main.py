import typer
from azdo.commands import alias, auth, config
from azdo.commands.shared import get_context
from azdo.logging import setup_logging, get_logger

app = typer.Typer(
    help="[bold blue]azdo[/bold blue] - Work with Azure DevOps from the command line",
    rich_markup_mode="rich",
)

# Add command groups
app.add_typer(config.app, name="config")
app.add_typer(auth.app, name="auth")
app.add_typer(alias.app, name="alias")


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """
    [bold blue]azdo[/bold blue] - Work with Azure DevOps from the command line
    """
    get_context(ctx)
    if not ctx.invoked_subcommand:
        print("Welcome to azdo! To proceed type azdo --help")


def main():
    setup_logging()
    logger = get_logger("azdo.main")
    logger.debug("azdo CLI started")

    try:
        app()
    except Exception as e:
        logger.error(f"Unhandled exception in main: {str(e)}")
        raise
    finally:
        logger.debug("azdo CLI finished")


if __name__ == "__main__":
    main()
