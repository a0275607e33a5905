# src/chronologicon/cli.py
"""
Chronologicon Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.
It is a thin layer: every command resolves the configured event store, calls
one service, and renders the result either as Rich tables or, with
``--json``, as the raw JSON payload.

Features
--------
- **Background Ingestion**: `ingest` submits a job and polls it with a spinner,
  exactly as any other observer of the job store would.
- **Analytics**: overlaps, largest gap and influence path queries.
- **Browsing**: nested timelines and paginated search.

Usage
-----
    $ chronologicon init-db
    $ chronologicon ingest data/events.txt
    $ chronologicon gaps 2023-01-01T00:00:00Z 2023-01-15T00:00:00Z
    $ chronologicon path <source-id> <target-id> --json
"""

from __future__ import annotations

import json
import time
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from chronologicon.core.contracts.job import IngestionJob, JobStatus
from chronologicon.core.contracts.timeline import TimelineNode
from chronologicon.core.settings import load_settings
from chronologicon.core.timeutil import isoformat_ms, parse_timestamp
from chronologicon.jobs.background import submit_ingestion
from chronologicon.jobs.job_store import get_job_store
from chronologicon.services.insights import InsightService
from chronologicon.services.search import search_events
from chronologicon.services.timeline import get_timeline
from chronologicon.storage.repository import EventRepository

# Ensure env vars (like CHRONOLOGICON_DATABASE_URL) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="Chronologicon: ingest historical events and explore them in time.",
    rich_markup_mode="markdown",
)
console = Console()

JsonFlag = Annotated[bool, typer.Option("--json", help="Print the raw JSON payload.")]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _repository() -> EventRepository:
    """Open the event store named by the current settings."""
    return EventRepository.from_url(load_settings().database_url)


def _parse_bound(value: str) -> datetime:
    """Parse a query bound; date-only values mean midnight UTC."""
    parsed = parse_timestamp(value)
    if parsed is not None:
        return parsed
    try:
        day = date.fromisoformat(value.strip())
    except ValueError as exc:
        raise typer.BadParameter(f"not an ISO-8601 date or date-time: '{value}'") from exc
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _render_job(job: IngestionJob) -> None:
    """Summarize a finished ingestion job."""
    ok = job.status == JobStatus.COMPLETED
    table = Table(show_header=False, box=None)
    table.add_row("Job", job.job_id)
    table.add_row("Status", f"[{'green' if ok else 'red'}]{job.status.value}[/]")
    table.add_row("Processed", str(job.processed_count))
    table.add_row("Errors", str(job.error_count))
    table.add_row("Lines", str(job.total_lines))
    console.print(Panel(table, title="Ingestion", border_style="green" if ok else "red"))

    if job.errors:
        console.print(f"[bold yellow]First {len(job.errors)} diagnostics:[/bold yellow]")
        for line in job.errors:
            console.print(f" • {line}", markup=False)


def _render_tree(node: TimelineNode, branch: Tree | None = None) -> Tree:
    label = (
        f"[bold]{node.event_name}[/bold] "
        f"[dim]{isoformat_ms(node.start_date)} → {isoformat_ms(node.end_date)} "
        f"({node.duration_minutes} min)[/dim]"
    )
    child_branch = Tree(label) if branch is None else branch.add(label)
    for child in node.children:
        _render_tree(child, child_branch)
    return child_branch


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


# Fixed (MyPy): Untyped decorator workaround
@app.command("init-db")  # type: ignore[misc]
def init_db_command() -> None:
    """Create the event table in the configured database."""
    url = load_settings().database_url
    EventRepository.from_url(url)
    console.print(f"[green]Schema ready[/green] at {url}")


@app.command()  # type: ignore[misc]
def ingest(
    file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Pipe-delimited event file (UTF-8).",
        ),
    ],
    poll_interval: Annotated[
        float,
        typer.Option("--poll-interval", min=0.01, help="Seconds between status polls."),
    ] = 0.2,
    as_json: JsonFlag = False,
) -> None:
    """
    Ingest a file in the background and follow the job until it finishes.

    Row-level problems are counted and listed; only an unreadable source
    fails the job (exit code 1).
    """
    store = get_job_store()
    job, _ = submit_ingestion(file, sink=_repository(), store=store)

    current: IngestionJob | None = job
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
        disable=as_json,
    ) as progress:
        task = progress.add_task(f"[cyan]Ingesting {file.name}...", total=None)
        while True:
            current = store.get(job.job_id)
            if current is None or current.status.is_terminal:
                break
            progress.update(
                task,
                description=(
                    f"[yellow]{current.status.value}[/yellow] "
                    f"{current.processed_count} processed, {current.error_count} errors"
                ),
            )
            time.sleep(poll_interval)

    if current is None:
        console.print(f"[bold red]Job {job.job_id} vanished from the job store[/bold red]")
        raise typer.Exit(code=1)

    if as_json:
        _echo_json(current.model_dump(mode="json"))
    else:
        _render_job(current)

    if current.status == JobStatus.FAILED:
        raise typer.Exit(code=1)


@app.command()  # type: ignore[misc]
def overlaps(
    start: Annotated[str, typer.Argument(help="Window start (ISO-8601).")],
    end: Annotated[str, typer.Argument(help="Window end (ISO-8601).")],
    as_json: JsonFlag = False,
) -> None:
    """List overlapping event pairs fully inside the window, largest overlap first."""
    pairs = InsightService(_repository()).overlapping_events(_parse_bound(start), _parse_bound(end))

    if as_json:
        _echo_json([p.model_dump(mode="json") for p in pairs])
        return
    if not pairs:
        console.print("[dim]No overlapping events in this window.[/dim]")
        return

    table = Table(title="Overlapping events")
    table.add_column("Event A")
    table.add_column("Event B")
    table.add_column("Overlap (min)", justify="right")
    for pair in pairs:
        a, b = pair.overlapping_event_pairs
        table.add_row(a.event_name, b.event_name, str(pair.overlap_duration_minutes))
    console.print(table)


@app.command()  # type: ignore[misc]
def gaps(
    start: Annotated[str, typer.Argument(help="Window start (ISO-8601).")],
    end: Annotated[str, typer.Argument(help="Window end (ISO-8601).")],
    as_json: JsonFlag = False,
) -> None:
    """Find the largest stretch of the window that no event covers."""
    report = InsightService(_repository()).temporal_gaps(_parse_bound(start), _parse_bound(end))

    if as_json:
        _echo_json(report.model_dump(mode="json"))
        return

    gap = report.largest_gap
    if gap is None:
        console.print(f"[dim]{report.message}[/dim]")
        return

    before = gap.preceding_event.event_name if gap.preceding_event else "(window start)"
    after = gap.succeeding_event.event_name if gap.succeeding_event else "(window end)"
    console.print(
        Panel.fit(
            f"{isoformat_ms(gap.start_of_gap)} → {isoformat_ms(gap.end_of_gap)}\n"
            f"[bold]{gap.duration_minutes}[/bold] minutes between "
            f"[cyan]{before}[/cyan] and [cyan]{after}[/cyan]",
            title=report.message,
            border_style="cyan",
        )
    )


@app.command()  # type: ignore[misc]
def path(
    source: Annotated[str, typer.Argument(help="Source event id.")],
    target: Annotated[str, typer.Argument(help="Target event id.")],
    as_json: JsonFlag = False,
) -> None:
    """Cheapest influence path between two events (cost = sum of durations)."""
    result = InsightService(_repository()).event_influence(source, target)

    if as_json:
        _echo_json(result.model_dump(mode="json"))
        return
    if not result.found:
        console.print(f"[yellow]{result.message}[/yellow]")
        return

    table = Table(title=result.message)
    table.add_column("#", justify="right")
    table.add_column("Event")
    table.add_column("Duration (min)", justify="right")
    for i, node in enumerate(result.shortest_path, start=1):
        table.add_row(str(i), node.event_name, str(node.duration_minutes))
    console.print(table)
    console.print(f"Total: [bold]{result.total_duration_minutes}[/bold] minutes")


@app.command()  # type: ignore[misc]
def timeline(
    event_id: Annotated[str, typer.Argument(help="Any event of the family to show.")],
    as_json: JsonFlag = False,
) -> None:
    """Show the nested timeline an event belongs to."""
    root = get_timeline(_repository(), event_id)
    if root is None:
        console.print(f"[bold red]Event '{event_id}' not found.[/bold red]")
        raise typer.Exit(code=1)

    if as_json:
        _echo_json(root.model_dump(mode="json"))
    else:
        console.print(_render_tree(root))


@app.command()  # type: ignore[misc]
def search(
    name: Annotated[str | None, typer.Option("--name", "-n", help="Partial name.")] = None,
    after: Annotated[
        str | None, typer.Option("--after", help="Only events starting after this.")
    ] = None,
    before: Annotated[
        str | None, typer.Option("--before", help="Only events ending before this.")
    ] = None,
    sort_by: Annotated[str, typer.Option("--sort-by")] = "start_date",
    order: Annotated[str, typer.Option("--order", help="asc or desc")] = "asc",
    page: Annotated[int, typer.Option("--page", min=1)] = 1,
    limit: Annotated[int, typer.Option("--limit", min=1)] = 10,
    as_json: JsonFlag = False,
) -> None:
    """Search events by name and date, one page at a time."""
    result = search_events(
        _repository(),
        name=name,
        start_date_after=_parse_bound(after) if after else None,
        end_date_before=_parse_bound(before) if before else None,
        sort_by=sort_by,
        sort_order=order,
        page=page,
        limit=limit,
    )

    if as_json:
        _echo_json(result.model_dump(mode="json"))
        return

    table = Table(title=f"{result.total_events} events (page {result.page})")
    table.add_column("Name")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right")
    for event in result.events:
        table.add_row(
            event.event_name,
            isoformat_ms(event.start_date),
            isoformat_ms(event.end_date),
            str(event.duration_minutes),
        )
    console.print(table)


if __name__ == "__main__":
    app()
