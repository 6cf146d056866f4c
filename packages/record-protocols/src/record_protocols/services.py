"""
Collaborator protocol definitions.

The ticket engine never talks to a backend directly. Every remote
dependency is expressed as a Protocol here so that the engine can be driven
by the HTTP client in production and by simple fakes in tests.

Payload conventions (the `data` field of each ServiceResult):
- list_tickets: list of Ticket
- get_ticket: Ticket or None
- update_ticket: the updated Ticket, or None if the server echoes nothing
- delete_ticket / set_visibility: None
- toggle_like: LikeSnapshot
- get_liked_users: LikedUsers
- search_tickets: list of raw search result mappings (server field names)
- get_statistics / get_year_in_review: opaque dict rendered as-is
"""

from typing import Any, Protocol, runtime_checkable

from record_protocols.types import ServiceResult


@runtime_checkable
class TicketSourceProtocol(Protocol):
    """Read access to a user's canonical tickets."""

    async def list_tickets(self, owner_id: str) -> ServiceResult:
        """
        List every ticket owned by a user.

        Args:
            owner_id: The owning user's identifier.

        Returns:
            ServiceResult whose data is a list of Ticket objects.
        """
        ...

    async def get_ticket(self, ticket_id: str) -> ServiceResult:
        """
        Fetch a single ticket.

        Args:
            ticket_id: The ticket identifier.

        Returns:
            ServiceResult whose data is a Ticket, or None if not found.
        """
        ...


@runtime_checkable
class TicketMutationProtocol(Protocol):
    """Write access to canonical tickets."""

    async def update_ticket(
        self, ticket_id: str, fields: dict[str, Any]
    ) -> ServiceResult:
        """
        Apply a partial update to a ticket.

        Args:
            ticket_id: The ticket identifier.
            fields: Wire-format (camelCase) fields to change.

        Returns:
            ServiceResult whose data is the updated Ticket when the server
            echoes it back.
        """
        ...

    async def delete_ticket(self, ticket_id: str) -> ServiceResult:
        """Delete a ticket permanently."""
        ...

    async def set_visibility(self, ticket_id: str, status: str) -> ServiceResult:
        """
        Change a ticket's visibility.

        Args:
            ticket_id: The ticket identifier.
            status: "PUBLIC" or "PRIVATE".
        """
        ...


@runtime_checkable
class EngagementProtocol(Protocol):
    """Like/unlike operations."""

    async def toggle_like(self, ticket_id: str, user_id: str) -> ServiceResult:
        """
        Flip the user's like on a ticket.

        Returns:
            ServiceResult whose data is a LikeSnapshot computed by the server.
        """
        ...

    async def get_liked_users(self, ticket_id: str, user_id: str) -> ServiceResult:
        """
        List users who liked a ticket.

        Returns:
            ServiceResult whose data is a LikedUsers instance.
        """
        ...


@runtime_checkable
class SearchProtocol(Protocol):
    """Server-side ticket search."""

    async def search_tickets(
        self, user_id: str, query: dict[str, str]
    ) -> ServiceResult:
        """
        Search a user's tickets.

        Args:
            user_id: The searching user.
            query: Query parameters with only populated criteria present.

        Returns:
            ServiceResult whose data is a list of raw result mappings using
            the search API's own field names.
        """
        ...


@runtime_checkable
class StatisticsProtocol(Protocol):
    """Pre-aggregated statistics, computed server-side."""

    async def get_statistics(self, user_id: str, year: int) -> ServiceResult:
        """Return aggregate statistics for a year as an opaque dict."""
        ...

    async def get_year_in_review(self, user_id: str, year: int) -> ServiceResult:
        """Return the year-in-review summary as an opaque dict."""
        ...


@runtime_checkable
class ImageResolverProtocol(Protocol):
    """Turns a raw image reference into a display-ready URL."""

    def resolve(self, raw_url: str) -> str | None:
        """
        Resolve an image reference.

        Args:
            raw_url: URL or path as stored by the backend.

        Returns:
            Display-ready URL, or None if the reference cannot be resolved.
        """
        ...
