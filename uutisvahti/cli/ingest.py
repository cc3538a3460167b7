"""Ingest and run history commands."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..db import RunManager, get_connection
from ..pipeline import run_ingestion

console = Console()


def ingest_command(
    ctx: typer.Context,
    deadline: Optional[float] = typer.Option(
        None,
        "--deadline",
        "-d",
        help="Stop the run after this many seconds and keep what was stored",
        min=1.0,
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Fetch all active feeds and store new, scored articles."""
    config = ctx.obj

    try:
        result = run_ingestion(config, deadline=deadline)
    except KeyboardInterrupt:
        console.print("\n[yellow]Ingestion interrupted by user[/yellow]")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(result.to_response()))
    elif result.success:
        console.print(
            f"[green]✅ Ingestion complete[/green]: "
            f"{result.inserted} inserted, {result.skipped} skipped"
        )
        if result.failed_inserts or result.sources_failed:
            console.print(
                f"[yellow]{result.sources_failed}/{result.sources_total} sources failed, "
                f"{result.failed_inserts} inserts rejected[/yellow]"
            )
        if result.timed_out:
            console.print("[yellow]Run deadline reached before all sources were processed[/yellow]")
    else:
        console.print(f"[red]❌ Ingestion failed: {result.error}[/red]")

    if not result.success:
        raise typer.Exit(1)


def runs_command(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", help="Number of runs to show", min=1),
) -> None:
    """Show recent ingestion runs."""
    config = ctx.obj

    try:
        with get_connection(config.get_db_config()) as conn:
            runs = RunManager().get_recent_runs(conn, limit=limit)
    except Exception as e:
        console.print(f"[red]Could not load runs: {e}[/red]")
        raise typer.Exit(1)

    if not runs:
        console.print("[yellow]No ingestion runs recorded.[/yellow]")
        return

    table = Table(title="Recent Ingestion Runs")
    table.add_column("Started", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Inserted", style="green", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Failed sources", style="red", justify="right")
    table.add_column("Notes", style="dim")

    for run in runs:
        status = "[green]success[/green]" if run.status == "success" else "[red]failed[/red]"
        notes = run.error or ("deadline reached" if run.timed_out else "")
        table.add_row(
            run.started_at.strftime("%Y-%m-%d %H:%M"),
            status,
            str(run.inserted),
            str(run.skipped),
            f"{run.sources_failed}/{run.sources_total}",
            notes,
        )

    console.print(table)
