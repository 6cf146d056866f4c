"""Ticket CLI commands.

This module provides CLI commands for the signed-in user's tickets:
- list: Display tickets for a time window, in table or JSON format
- show: Show one ticket with its visit number and review
- like: Toggle the user's like on a ticket
- edit: Change ticket fields and save them
- delete: Delete a ticket after confirmation
- privacy: Change a ticket's visibility

Every command loads the user's tickets from the API first, then works
through the archive's detail session so that edits, likes and deletes
follow the same rules as the interactive views.
"""

import asyncio
import json
from datetime import datetime, time

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from record_core.cli.runtime import load_settings, open_archive, print_notice, require_ticket
from record_core.query import SearchCriteria, TimeWindow, filter_tickets
from record_core.types import TICKET_STATUS_LABELS, Ticket, TicketStatus
from record_core.visits import resolve_ordinal

tickets_app = typer.Typer(help="Manage your tickets")


def _format_when(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


@tickets_app.command("list")
def list_tickets(
    window: TimeWindow = typer.Option(
        TimeWindow.ALL, "--window", "-w", help="Time window (all, recent, thisMonth, thisYear)"
    ),
    title: str = typer.Option(None, "--title", help="Title contains"),
    genre: str = typer.Option(None, "--genre", help="Genre code or label"),
    venue: str = typer.Option(None, "--venue", help="Venue contains"),
    artist: str = typer.Option(None, "--artist", help="Artist contains"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List tickets in a time window, newest first."""
    settings = load_settings()
    criteria = SearchCriteria(title=title, genre=genre, venue=venue, artist=artist)

    async def _list() -> None:
        async with open_archive(settings) as archive:
            archive.select_window(window)
            history = archive.history()
            collection = archive.collection.snapshot()

        tickets = filter_tickets(history.tickets, criteria)

        if json_output:
            data = [t.to_dict() for t in tickets]
            print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
            return

        console = Console()
        tabs = "  ".join(
            f"[bold]{o.label} {o.count}[/bold]" if o.active else f"{o.label} {o.count}"
            for o in history.options
        )
        console.print(tabs)

        table = Table(title="Tickets")
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Visit", justify="right")
        table.add_column("Artist")
        table.add_column("Venue")
        table.add_column("Performed")
        table.add_column("Genre")
        table.add_column("Status", style="green")
        table.add_column("Likes", justify="right")

        for t in tickets:
            ordinal = resolve_ordinal(t, collection)
            liked_mark = " [red]♥[/red]" if t.is_liked else ""
            table.add_row(
                t.id,
                t.title,
                str(ordinal) if ordinal else "-",
                t.artist or "-",
                t.venue or "-",
                _format_when(t.performed_at),
                t.genre or "-",
                TICKET_STATUS_LABELS[t.status],
                f"{t.like_count}{liked_mark}",
            )

        console.print(table)

    asyncio.run(_list())


def _render_ticket(console: Console, ticket: Ticket, ordinal: int | None) -> None:
    metadata = f"""[bold]ID:[/bold] {ticket.id}
[bold]Title:[/bold] {ticket.title}
[bold]Visit:[/bold] {ordinal or '-'}
[bold]Artist:[/bold] {ticket.artist or 'N/A'}
[bold]Venue:[/bold] {ticket.venue or 'N/A'}
[bold]Seat:[/bold] {ticket.seat or 'N/A'}
[bold]Performed:[/bold] {_format_when(ticket.performed_at)}
[bold]Genre:[/bold] {ticket.genre or 'N/A'}
[bold]Status:[/bold] {TICKET_STATUS_LABELS[ticket.status]}
[bold]Likes:[/bold] {ticket.like_count}{' (liked)' if ticket.is_liked else ''}"""

    console.print(Panel(metadata, title=f"Ticket {ticket.id}", border_style="cyan"))

    if ticket.images:
        console.print("[bold]Images:[/bold]")
        for url in ticket.images:
            console.print(f"  {url}")

    console.print()
    if ticket.review:
        console.print(Panel(ticket.review.review_text, title="Review", border_style="green"))
    else:
        console.print("[yellow]No review yet[/yellow]")


@tickets_app.command("show")
def show_ticket(
    ticket_id: str = typer.Argument(..., help="Ticket ID to show"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show ticket details including the visit number."""
    settings = load_settings()

    async def _show() -> None:
        async with open_archive(settings) as archive:
            session = archive.open_detail(require_ticket(archive, ticket_id))
            ticket = session.ticket
            ordinal = session.visit_ordinal

        if json_output:
            data = ticket.to_dict()
            data["visit"] = ordinal
            print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
            return

        _render_ticket(Console(), ticket, ordinal)

    asyncio.run(_show())


@tickets_app.command("like")
def like_ticket(
    ticket_id: str = typer.Argument(..., help="Ticket ID to like or unlike"),
) -> None:
    """Toggle your like on a ticket."""
    settings = load_settings()

    async def _like() -> None:
        async with open_archive(settings) as archive:
            session = archive.open_detail(require_ticket(archive, ticket_id))
            state = await session.toggle_like()

        if state is None:
            print(f"Could not update like on ticket {ticket_id}")
            raise typer.Exit(1)
        verb = "Liked" if state.is_liked else "Unliked"
        print(f"{verb} ticket {ticket_id} ({state.like_count} likes)")

    asyncio.run(_like())


@tickets_app.command("likes")
def liked_users(
    ticket_id: str = typer.Argument(..., help="Ticket ID"),
) -> None:
    """List the users who liked a ticket."""
    settings = load_settings()

    async def _likes() -> None:
        async with open_archive(settings) as archive:
            session = archive.open_detail(require_ticket(archive, ticket_id))
            user_ids = await session.show_liked_users()
            notice = session.notice

        if notice is not None:
            print_notice(notice)
            raise typer.Exit(1)
        if not user_ids:
            print("No likes yet")
            return
        for user_id in user_ids:
            print(user_id)

    asyncio.run(_likes())


def _parse_time(value: str) -> time:
    try:
        return time.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not a time (HH:MM)", param_hint="--time")


@tickets_app.command("edit")
def edit_ticket(
    ticket_id: str = typer.Argument(..., help="Ticket ID to edit"),
    title: str = typer.Option(None, "--title", help="New title"),
    artist: str = typer.Option(None, "--artist", help="New artist"),
    venue: str = typer.Option(None, "--venue", help="New venue"),
    seat: str = typer.Option(None, "--seat", help="New seat"),
    genre: str = typer.Option(None, "--genre", help="New genre label"),
    performed_date: datetime = typer.Option(
        None, "--date", formats=["%Y-%m-%d"], help="New performance date (YYYY-MM-DD)"
    ),
    performed_time: str = typer.Option(None, "--time", help="New performance time (HH:MM)"),
    review: str = typer.Option(None, "--review", help="New review text (may be empty)"),
) -> None:
    """Edit ticket fields. Only the given options are changed."""
    settings = load_settings()
    changes = {
        "title": title,
        "artist": artist,
        "venue": venue,
        "seat": seat,
        "genre": genre,
        "review": review,
    }
    new_time = _parse_time(performed_time) if performed_time else None

    async def _edit() -> None:
        async with open_archive(settings) as archive:
            session = archive.open_detail(require_ticket(archive, ticket_id))
            session.begin_edit()
            for field, value in changes.items():
                if value is not None:
                    session.set_field(field, value)
            if performed_date is not None:
                session.set_performed_date(performed_date.date())
            if new_time is not None:
                session.set_performed_time(new_time)
            saved = await session.save()
            notice = session.notice

        print_notice(notice)
        if not saved:
            raise typer.Exit(1)

    asyncio.run(_edit())


@tickets_app.command("delete")
def delete_ticket(
    ticket_id: str = typer.Argument(..., help="Ticket ID to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a ticket."""
    settings = load_settings()

    async def _delete() -> None:
        async with open_archive(settings) as archive:
            ticket = require_ticket(archive, ticket_id)
            session = archive.open_detail(ticket)
            session.request_delete()
            if not yes and not typer.confirm(f'Delete "{ticket.title}"?'):
                session.cancel_delete()
                print("Cancelled")
                return
            deleted = await session.confirm_delete()
            notice = session.notice

        print_notice(notice)
        if not deleted:
            raise typer.Exit(1)

    asyncio.run(_delete())


@tickets_app.command("privacy")
def change_privacy(
    ticket_id: str = typer.Argument(..., help="Ticket ID"),
    status: TicketStatus = typer.Argument(..., help="PUBLIC or PRIVATE"),
) -> None:
    """Change who can see a ticket."""
    settings = load_settings()

    async def _privacy() -> None:
        async with open_archive(settings) as archive:
            session = archive.open_detail(require_ticket(archive, ticket_id))
            changed = await session.change_visibility(status)
            notice = session.notice

        print_notice(notice)
        if not changed:
            raise typer.Exit(1)

    asyncio.run(_privacy())
