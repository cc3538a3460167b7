"""Init command implementation."""

from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, SourceConfig, load_sources, save_config, save_sources
from ..db import SourceManager, get_connection, init_database, validate_connection
from ..models import SourceCategory

console = Console()


def create_default_sources() -> List[SourceConfig]:
    """Create default AI news sources."""
    return [
        SourceConfig(
            name="OpenAI News",
            feed_url="https://openai.com/news/rss.xml",
            category=SourceCategory.INDUSTRY,
            weight=8,
        ),
        SourceConfig(
            name="Google DeepMind Blog",
            feed_url="https://deepmind.google/blog/rss.xml",
            category=SourceCategory.RESEARCH,
            weight=8,
        ),
        SourceConfig(
            name="Hugging Face Blog",
            feed_url="https://huggingface.co/blog/feed.xml",
            category=SourceCategory.TOOLS,
            weight=7,
        ),
        SourceConfig(
            name="arXiv cs.AI",
            feed_url="https://rss.arxiv.org/rss/cs.AI",
            category=SourceCategory.RESEARCH,
            weight=6,
        ),
        SourceConfig(
            name="MIT News - AI",
            feed_url="https://news.mit.edu/rss/topic/artificial-intelligence2",
            category=SourceCategory.RESEARCH,
            weight=6,
        ),
        SourceConfig(
            name="The Verge - AI",
            feed_url="https://www.theverge.com/rss/ai-artificial-intelligence/index.xml",
            category=SourceCategory.INDUSTRY,
            weight=5,
        ),
        SourceConfig(
            name="EU AI Act Newsletter",
            feed_url="https://artificialintelligenceact.substack.com/feed",
            category=SourceCategory.REGULATION,
            weight=7,
        ),
        SourceConfig(
            name="fast.ai",
            feed_url="https://www.fast.ai/index.xml",
            category=SourceCategory.EDUCATION,
            weight=4,
        ),
    ]


def init_command(
    ctx: typer.Context,
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("uutisvahti", "--db-name", help="Database name"),
    db_user: str = typer.Option("uutisvahti", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default AI news sources",
    ),
) -> None:
    """Create configuration, database schema and default sources."""
    console.print(Panel.fit("📰 AI-Uutisvahti - Initialization", style="bold blue"))

    config_path = ctx.obj.config_path
    sources_path = ctx.obj.sources_path

    # Keep an existing configuration untouched
    if config_path.exists():
        config = ctx.obj.config
        console.print(f"✅ Using existing config: {config_path}")
    else:
        config = ConfigModel(
            postgres={
                "host": db_host,
                "port": db_port,
                "database": db_name,
                "user": db_user,
                "password_env": "UUTISVAHTI_DB_PASSWORD",
            },
        )
        save_config(config, config_path)
        console.print(f"✅ Created config: {config_path}")

    if sources_path.exists():
        sources = load_sources(sources_path)
        console.print(f"✅ Using existing sources: {sources_path} ({len(sources)} sources)")
    elif seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(sources)} sources)")
    else:
        sources = []
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    # Validate database connection
    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: "
            "[bold]export UUTISVAHTI_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    # Initialize database schema and seed sources
    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        with get_connection(db_config) as conn:
            source_map = SourceManager().sync_sources(conn, sources)
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"✅ Database schema initialized, {len(source_map)} sources in database")

    console.print(
        Panel(
            f"[green]✅ AI-Uutisvahti initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Review sources: [bold]uutisvahti sources list[/bold]\n"
            f"2. Run: [bold]uutisvahti ingest[/bold]",
            style="green",
        )
    )
