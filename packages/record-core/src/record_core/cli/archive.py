"""Archive CLI commands.

This module provides the archive commands that run on the server:
- search: Multi-field ticket search
- stats: Aggregate statistics for a year
- year-in-review: Year-in-review summary for a year

Statistics payloads are printed as JSON as received.
"""

import asyncio
import json
from datetime import datetime

import typer
from rich.console import Console
from rich.table import Table

from record_core.cli.runtime import load_settings, open_archive, print_notice
from record_core.exceptions import ValidationError
from record_core.query import SearchCriteria
from record_core.types import TICKET_STATUS_LABELS


def search(
    title: str = typer.Option(None, "--title", "-t", help="Performance title"),
    start: datetime = typer.Option(
        None, "--from", formats=["%Y-%m-%d"], help="Earliest performance date"
    ),
    end: datetime = typer.Option(
        None, "--to", formats=["%Y-%m-%d"], help="Latest performance date"
    ),
    genre: str = typer.Option(None, "--genre", "-g", help="Genre code (BAND, MUSICAL, PLAY)"),
    venue: str = typer.Option(None, "--venue", help="Venue"),
    artist: str = typer.Option(None, "--artist", help="Artist"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search your tickets, newest performance first."""
    settings = load_settings()
    try:
        criteria = SearchCriteria(
            title=title,
            start_date=start.date() if start else None,
            end_date=end.date() if end else None,
            genre=genre,
            venue=venue,
            artist=artist,
        )
    except ValidationError as e:
        print(e.message)
        raise typer.Exit(1)

    async def _search() -> None:
        async with open_archive(settings, load=False) as archive:
            results = await archive.search(criteria)
            notice = archive.notice

        if notice is not None:
            print_notice(notice)
            raise typer.Exit(1)

        if json_output:
            data = [t.to_dict() for t in results]
            print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
            return

        if not results:
            print("No matching tickets")
            return

        table = Table(title="Search results")
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Artist")
        table.add_column("Venue")
        table.add_column("Date")
        table.add_column("Genre")
        table.add_column("Status", style="green")

        for t in results:
            table.add_row(
                t.id,
                t.title,
                t.artist or "-",
                t.venue or "-",
                t.performed_at.strftime("%Y-%m-%d") if t.performed_at else "-",
                t.genre or "-",
                TICKET_STATUS_LABELS[t.status],
            )

        Console().print(table)

    asyncio.run(_search())


def stats(
    year: int = typer.Option(None, "--year", "-y", help="Year (defaults to this year)"),
) -> None:
    """Show aggregate statistics for a year."""
    settings = load_settings()

    async def _stats() -> None:
        async with open_archive(settings, load=False) as archive:
            if year is not None:
                archive.selected_year = year
            data = await archive.load_statistics()

        if data is None:
            print(f"Statistics for {year or datetime.now().year} are unavailable")
            raise typer.Exit(1)
        Console().print_json(data=data)

    asyncio.run(_stats())


def year_in_review(
    year: int = typer.Option(None, "--year", "-y", help="Year (defaults to this year)"),
) -> None:
    """Show the year-in-review summary."""
    settings = load_settings()

    async def _review() -> None:
        async with open_archive(settings, load=False) as archive:
            if year is not None:
                archive.selected_year = year
            data = await archive.load_year_in_review()

        if data is None:
            print(f"Year in review for {year or datetime.now().year} is unavailable")
            raise typer.Exit(1)
        Console().print_json(data=data)

    asyncio.run(_review())
