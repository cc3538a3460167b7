"""Article inspection commands."""

import typer
from rich.console import Console
from rich.table import Table

from ..db import ArticleStorage, get_connection

console = Console()
articles_app = typer.Typer(help="Inspect ingested articles")


@articles_app.command("recent")
def articles_recent(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", help="Number of articles", min=1),
    significant: bool = typer.Option(False, "--significant", "-s", help="Only significant articles"),
) -> None:
    """Show the most recently published articles with their scores."""
    with get_connection(ctx.obj.get_db_config()) as conn:
        articles = ArticleStorage().get_recent_articles(conn, limit=limit, significant_only=significant)

    if not articles:
        console.print("[yellow]No articles found.[/yellow]")
        return

    table = Table(title="Recent Articles")
    table.add_column("Published", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    table.add_column("URL", style="blue")

    for article in articles:
        score = f"[bold green]{article.score}[/bold green]" if article.is_significant else str(article.score)
        published = article.published_at.strftime("%Y-%m-%d %H:%M") if article.published_at else "-"
        table.add_row(published, score, article.title, article.url)

    console.print(table)


@articles_app.command("pending")
def articles_pending(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", help="Number of articles", min=1),
) -> None:
    """Show articles still waiting for a Finnish summary or title."""
    with get_connection(ctx.obj.get_db_config()) as conn:
        articles = ArticleStorage().get_pending_enrichment(conn, limit=limit)

    if not articles:
        console.print("[green]No articles waiting for enrichment.[/green]")
        return

    table = Table(title="Waiting for Enrichment")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Missing", style="yellow")

    for article in articles:
        missing = [
            field
            for field, value in (("summary_fi", article.summary_fi), ("title_fi", article.title_fi))
            if value is None
        ]
        table.add_row(str(article.id), article.title, ", ".join(missing))

    console.print(table)
