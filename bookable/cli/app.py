"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.booking_store import InMemoryBookingStore, JsonBookingStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookableError
from ..domain.models import parse_instant
from ..domain.slot_calculator import SlotCalculator
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="bookable",
    help="Compute bookable time slots from weekly working hours",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
BookingsOption = Annotated[Optional[Path], typer.Option("--bookings", "-b", help="JSON file with existing bookings (overrides config)")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Debug-Logging aktivieren.")]


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich; debug output only with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_service(config: AppConfig, bookings_file: Optional[Path]) -> AvailabilityService:
    """Wire the booking store and the calculator for the configured owner."""
    path = bookings_file or config.bookings_file

    if path is not None:
        store = JsonBookingStore(path)
    else:
        store = InMemoryBookingStore()

    calculator = SlotCalculator(
        weekly_rules=config.weekly_rules(),
        owner_timezone=config.timezone
    )

    return AvailabilityService(
        booking_store=store,
        slot_calculator=calculator,
        owner=config.owner
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Datum (YYYY-MM-DD)")],
    event_type: Annotated[str, typer.Option("--event-type", "-e", help="Slug des Termintyps")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="Anzeige-Zeitzone (IANA)")] = None,
    show_all: Annotated[bool, typer.Option("--all", "-a", help="Auch belegte Slots anzeigen.")] = False,
    now: Annotated[Optional[str], typer.Option("--now", help="Referenzzeitpunkt (ISO 8601) statt der aktuellen Uhrzeit")] = None,
    config_file: ConfigOption = None,
    bookings_file: BookingsOption = None,
    verbose: VerboseOption = False,
):
    """
    Show bookable slots for a date.

    Examples:

        bookable slots 2024-11-25 --event-type intro-call

        bookable slots 2024-11-25 -e intro-call --timezone America/New_York --all
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        event_settings = config.find_event_type(event_type)
        service = _build_service(config, bookings_file)

        try:
            target_date = pendulum.from_format(date, "YYYY-MM-DD").date()
        except ValueError as e:
            console.print(f"[red]Fehler beim Parsen des Datums: {escape(str(e))}[/red]")
            raise typer.Exit(1)

        reference = parse_instant(now, config.timezone) if now else None
        display_tz = timezone or config.timezone

        result = asyncio.run(
            service.find_slots(
                target_date=target_date,
                event_type=event_settings.to_domain(),
                target_timezone=display_tz,
                now=reference
            )
        )

        shown = result if show_all else [slot for slot in result if slot.available]

        console.print()
        console.print(
            f"[bold cyan]🗓️  {event_settings.display_name()}[/bold cyan] "
            f"am {target_date.format('DD.MM.YYYY')} ({display_tz})\n"
        )

        if not shown:
            console.print(
                "[yellow]⚠ Keine verfügbaren Zeitslots gefunden.[/yellow]\n"
                "Versuchen Sie ein anderes Datum oder einen anderen Termintyp."
            )
            console.print()
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Zeit", style="bold")
        table.add_column("Status")

        for slot in shown:
            status = "[green]frei[/green]" if slot.available else "[red]belegt[/red]"
            table.add_row(slot.format_display(display_tz, clock=config.clock), status)

        console.print(table)
        console.print()

    except (FileNotFoundError, BookableError, ValueError) as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def dates(
    year: Annotated[int, typer.Argument(help="Jahr")],
    month: Annotated[int, typer.Argument(help="Monat (1-12)")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List the dates of a month that have working hours.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        calculator = SlotCalculator(
            weekly_rules=config.weekly_rules(),
            owner_timezone=config.timezone
        )

        available = calculator.dates_with_availability(year, month)

        if not available:
            console.print("[yellow]Keine Arbeitstage in diesem Monat.[/yellow]")
            return

        console.print()
        for day in available:
            console.print(f"  {day.format('dddd, DD.MM.YYYY')}")
        console.print()

    except (FileNotFoundError, BookableError, ValueError) as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def check(
    start: Annotated[str, typer.Argument(help="Gewünschter Beginn (ISO 8601)")],
    event_type: Annotated[str, typer.Option("--event-type", "-e", help="Slug des Termintyps")],
    config_file: ConfigOption = None,
    bookings_file: BookingsOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a booking starting at START can still be committed.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        event_settings = config.find_event_type(event_type)
        service = _build_service(config, bookings_file)

        candidate = parse_instant(start, config.timezone)

        available = asyncio.run(
            service.check_slot(
                candidate_start=candidate,
                event_type=event_settings.to_domain()
            )
        )

        when = candidate.in_timezone(config.timezone).format("DD.MM.YYYY HH:mm")
        if available:
            console.print(f"[green]✓ {when} ist frei.[/green]")
        else:
            console.print(f"[red]✗ {when} kollidiert mit einer bestehenden Buchung.[/red]")
            raise typer.Exit(2)

    except (FileNotFoundError, BookableError, ValueError) as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def event_types(
    config_file: ConfigOption = None,
):
    """
    List all configured event types.
    """
    try:
        config = _load_config(config_file)

        if not config.event_types:
            console.print("[yellow]Keine Termintypen in der Config-Datei definiert.[/yellow]")
            return

        table = Table(
            title="Konfigurierte Termintypen",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Slug", style="bold yellow")
        table.add_column("Titel")
        table.add_column("Dauer", justify="right")
        table.add_column("Puffer vor/nach", justify="right", style="dim")
        table.add_column("Vorlauf", justify="right", style="dim")

        for settings in config.event_types:
            table.add_row(
                settings.slug,
                settings.display_name(),
                f"{settings.length} Min.",
                f"{settings.before_buffer}/{settings.after_buffer} Min.",
                f"{settings.minimum_booking_notice} Min."
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Fehler:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookable[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
