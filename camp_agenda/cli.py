"""CLI for the camp agenda builder.

Runs the agenda service and works against a running one: print a day of a
camp's agenda as a timeline or list, and export the agenda to CSV.
"""

import asyncio
import os

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from sqlalchemy import text

from camp_agenda.agenda.errors import AgendaNotLoadedError, GatewayError
from camp_agenda.agenda.filters import AgendaView, SessionFilter, ViewMode, project_view
from camp_agenda.agenda.gateway import AgendaGateway
from camp_agenda.agenda.notices import MutationOutcome, NoticeLog
from camp_agenda.agenda.store import SessionStore
from camp_agenda.config.settings import settings
from camp_agenda.core.logger import setup_logger
from camp_agenda.db.session import get_session

console = Console()

app = typer.Typer(
    name="camp-agenda",
    help="Camp Agenda CLI - run the agenda service and inspect or export camp agendas",
    add_completion=False,
)

DEFAULT_HOST = os.getenv("SERVER_HOST", "127.0.0.1")


def _make_gateway(base_url: str | None) -> AgendaGateway:
    return AgendaGateway(base_url=base_url)


def _render_view(view: AgendaView, title: str) -> Table:
    table = Table(title=title, show_lines=view.mode == ViewMode.TIMELINE)
    for column in view.columns:
        table.add_column(column)
    for row in view.rows:
        cells = [
            row.time_range,
            row.title,
            row.type_label,
            row.location or "-",
            row.clinician or "-",
            ", ".join(row.staff) or "-",
        ]
        if view.mode == ViewMode.LIST:
            cells.append(row.status or "-")
        table.add_row(*cells)
    return table


def _print_outcome(outcome: MutationOutcome) -> None:
    if outcome.notice is None:
        return
    style = "red" if outcome.notice.variant == "destructive" else ("green" if outcome.ok else "yellow")
    console.print(Panel(Text(outcome.notice.description), title=outcome.notice.title, border_style=style))


@app.command()
def server(
    host: str = typer.Option(DEFAULT_HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the agenda service with uvicorn."""
    logger.info(f"Starting agenda service on {host}:{port} (reload={reload})")
    uvicorn.run("camp_agenda.main:app", host=host, port=port, reload=reload)


@app.command()
def check_db() -> None:
    """Verify the database configured by DATABASE_URL is reachable."""
    try:
        with get_session() as db:
            db.execute(text("SELECT 1"))
    except Exception as e:
        console.print(Panel(Text("Database connection failed", style="bold red"), subtitle=str(e), border_style="red"))
        raise typer.Exit(1) from e
    console.print(Panel(Text("Database connection OK", style="bold green"), border_style="green"))


@app.command()
def show(
    camp_id: int = typer.Argument(..., help="Camp ID"),
    day: int = typer.Option(1, "--day", "-d", min=1, help="Camp day (1-based)"),
    view: ViewMode = typer.Option(ViewMode.TIMELINE, "--view", help="timeline or list"),
    session_type: str = typer.Option("all", "--type", help="Session type filter"),
    clinician_id: int | None = typer.Option(None, "--clinician", help="Clinician ID filter"),
    location_id: int | None = typer.Option(None, "--location", help="Location ID filter"),
    base_url: str | None = typer.Option(None, "--api", help="Agenda service base URL"),
) -> None:
    """Print one day of a camp's agenda."""

    async def run() -> tuple[str, AgendaView]:
        async with _make_gateway(base_url) as gateway:
            store = SessionStore(camp_id, gateway)
            await store.load()
            agenda_day = store.day(day)
            if agenda_day is None:
                raise typer.BadParameter(f"Camp {camp_id} has no day {day}", param_hint="--day")
            agenda_view = project_view(
                agenda_day.items,
                SessionFilter(session_type=session_type, clinician_id=clinician_id, location_id=location_id),
                view,
                clinicians=await store.clinicians(),
                locations=await store.locations(),
            )
            camp = await store.camp()
            return f"{camp.name}: {agenda_day.title} ({agenda_day.date.isoformat()})", agenda_view

    try:
        title, agenda_view = asyncio.run(run())
    except (GatewayError, AgendaNotLoadedError) as e:
        console.print(f"[bold red]✗ Failed to load agenda:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    if agenda_view.is_empty:
        console.print(f"[yellow]{title}: no sessions match[/yellow]")
        return
    console.print(_render_view(agenda_view, title))


@app.command()
def export(
    camp_id: int = typer.Argument(..., help="Camp ID"),
    output_dir: str | None = typer.Option(None, "--output-dir", "-o", help="Directory for the CSV file"),
    base_url: str | None = typer.Option(None, "--api", help="Agenda service base URL"),
) -> None:
    """Export a camp's agenda to agenda_camp_<id>.csv."""

    async def run() -> MutationOutcome:
        async with _make_gateway(base_url) as gateway:
            store = SessionStore(camp_id, gateway, notifier=NoticeLog(), export_dir=output_dir or settings.export_dir)
            await store.load()
            return await store.export_agenda()

    try:
        outcome = asyncio.run(run())
    except GatewayError as e:
        console.print(f"[bold red]✗ Failed to load agenda:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    _print_outcome(outcome)
    if outcome.ok:
        console.print(f"[green]✓ {outcome.data.path}[/green]")
    elif outcome.notice is not None and outcome.notice.variant == "destructive":
        raise typer.Exit(code=1)


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=settings.log_file)


if __name__ == "__main__":
    app()
