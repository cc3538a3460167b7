"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from ..config import Config
from ..db import close_connection_pool
from ..logging_config import setup_logging

# Load .env file if it exists
load_dotenv()

from .articles import articles_app
from .ingest import ingest_command, runs_command
from .init import init_command
from .sources import sources_app

app = typer.Typer(
    name="uutisvahti",
    help="AI-Uutisvahti - AI news feed ingestion and significance scoring",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: $UUTISVAHTI_CONFIG or ~/.config/uutisvahti/config.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Load configuration and set up logging for every command."""
    config = Config(config_path)
    try:
        settings = config.config
    except ValueError as e:
        Console().print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    log_dir = settings.logging.log_dir
    setup_logging(
        level=settings.logging.level,
        log_dir=Path(log_dir) if log_dir else None,
        verbose=verbose,
    )
    ctx.obj = config
    ctx.call_on_close(close_connection_pool)


# Register commands
app.command("init")(init_command)
app.command("ingest")(ingest_command)
app.command("runs")(runs_command)
app.add_typer(sources_app, name="sources", help="Manage feed sources")
app.add_typer(articles_app, name="articles", help="Inspect ingested articles")


if __name__ == "__main__":
    app()
