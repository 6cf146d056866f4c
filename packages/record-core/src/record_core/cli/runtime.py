"""
Shared plumbing for CLI commands.

Commands are synchronous typer callbacks that run one coroutine with
asyncio.run(). Inside it they open an archive with open_archive(), which
builds the API client from Settings, loads the user's tickets and closes
the HTTP client on exit.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import typer

from record_core.client.factory import create_api_client, create_archive
from record_core.config import Settings
from record_core.coordinator import ArchiveView, Notice
from record_core.types import Ticket


def load_settings() -> Settings:
    """Read settings from the environment, requiring a user id."""
    settings = Settings()
    if not settings.user_id:
        print("RECORD_USER_ID is not set")
        raise typer.Exit(1)
    return settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def open_archive(settings: Settings, load: bool = True) -> AsyncIterator[ArchiveView]:
    """
    Build an archive for the configured user.

    Args:
        settings: Loaded settings
        load: Load the user's tickets before yielding

    Raises:
        typer.Exit: If loading the tickets failed
    """
    client = create_api_client(settings)
    try:
        archive = create_archive(settings, client)
        if load and not await archive.refresh():
            print_notice(archive.notice)
            raise typer.Exit(1)
        yield archive
    finally:
        await client.http.aclose()


def require_ticket(archive: ArchiveView, ticket_id: str) -> Ticket:
    """Look up a loaded ticket or exit."""
    ticket = archive.collection.get(ticket_id)
    if ticket is None:
        print(f"Ticket {ticket_id} not found")
        raise typer.Exit(1)
    return ticket


def print_notice(notice: Notice | None) -> None:
    if notice is not None:
        print(notice.message)
