"""Source management commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..db import SourceManager, get_connection
from ..errors import StorageError
from ..ingestion import FeedFetcher, parse_feed
from ..models import SourceCategory

console = Console()
sources_app = typer.Typer(help="Manage feed sources")


@sources_app.command("list")
def sources_list(ctx: typer.Context) -> None:
    """List all configured sources."""
    with get_connection(ctx.obj.get_db_config()) as conn:
        sources = SourceManager().get_sources(conn)

    if not sources:
        console.print("[yellow]No sources configured. Run 'uutisvahti init' or 'sources add'.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Weight", style="green", justify="right")
    table.add_column("Active", style="yellow")
    table.add_column("Feed URL", style="blue")

    for source in sources:
        table.add_row(
            source.name,
            source.category.value,
            str(source.weight),
            "✓" if source.is_active else "✗",
            source.feed_url,
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS or Atom feed URL"),
    category: SourceCategory = typer.Option(
        SourceCategory.INDUSTRY,
        "--category",
        "-c",
        help="Source category",
    ),
    weight: int = typer.Option(5, "--weight", "-w", help="Source weight (1-10)", min=1, max=10),
    inactive: bool = typer.Option(False, "--inactive", help="Add without polling it yet"),
) -> None:
    """Add a new feed source."""
    try:
        with get_connection(ctx.obj.get_db_config()) as conn:
            SourceManager().add_source(
                conn, name, url, category, weight=weight, is_active=not inactive
            )
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Added source: {name}[/green]")


def _set_active(ctx: typer.Context, name: str, is_active: bool) -> None:
    try:
        with get_connection(ctx.obj.get_db_config()) as conn:
            found = SourceManager().set_active(conn, name, is_active)
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not found:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    state = "Activated" if is_active else "Deactivated"
    console.print(f"[green]✅ {state} source: {name}[/green]")


@sources_app.command("enable")
def sources_enable(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name"),
) -> None:
    """Start polling a source."""
    _set_active(ctx, name, True)


@sources_app.command("disable")
def sources_disable(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name"),
) -> None:
    """Stop polling a source without deleting it."""
    _set_active(ctx, name, False)


@sources_app.command("update")
def sources_update(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name"),
    weight: Optional[int] = typer.Option(None, "--weight", "-w", help="New weight (1-10)", min=1, max=10),
    category: Optional[SourceCategory] = typer.Option(None, "--category", "-c", help="New category"),
) -> None:
    """Change a source's weight or category."""
    if weight is None and category is None:
        console.print("[yellow]Nothing to update. Pass --weight and/or --category.[/yellow]")
        raise typer.Exit(1)

    with get_connection(ctx.obj.get_db_config()) as conn:
        found = SourceManager().update_source(conn, name, weight=weight, category=category)

    if not found:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Updated source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Source name to remove"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a source together with its articles."""
    if not yes:
        typer.confirm(f"Delete '{name}' and all of its articles?", abort=True)

    with get_connection(ctx.obj.get_db_config()) as conn:
        found = SourceManager().remove_source(conn, name)

    if not found:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
) -> None:
    """Fetch and parse feeds without storing anything."""
    config = ctx.obj
    with get_connection(config.get_db_config()) as conn:
        sources = SourceManager().get_sources(conn)

    # Filter sources if name provided
    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    settings = config.config.ingestion
    fetcher = FeedFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent)

    for source in sources:
        if not source.is_active:
            console.print(f"[yellow]⚠️  {source.name}: Inactive[/yellow]")
            continue

        result = fetcher.fetch(source)
        if not result.success:
            console.print(f"[red]❌ {source.name}: Failed - {result.error}[/red]")
            continue

        count = sum(1 for _ in parse_feed(result.text or ""))
        console.print(f"[green]✅ {source.name}: OK ({result.status_code}), {count} entries[/green]")
