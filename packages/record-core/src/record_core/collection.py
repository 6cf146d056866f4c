"""
In-memory canonical ticket collection.

TicketCollection holds the server-confirmed tickets of one owner. Derived
views (visit ordinals, time windows, local search) read a tuple snapshot,
so no locking is needed. The only writers are the commit paths of the
detail session, and each write swaps the whole tuple so that readers never
observe a partially updated record.
"""

import logging

from record_protocols import TicketSourceProtocol

from record_core.remote import call_remote
from record_core.types import Ticket, TicketId, UserId

logger = logging.getLogger(__name__)


class TicketCollection:
    """
    Canonical tickets for one owner.

    Example:
        collection = TicketCollection()
        await collection.load(source, owner_id="u1")
        ticket = collection.get("t1")
    """

    def __init__(self, tickets: list[Ticket] | tuple[Ticket, ...] = ()) -> None:
        self._tickets: tuple[Ticket, ...] = tuple(tickets)

    async def load(self, source: TicketSourceProtocol, owner_id: UserId) -> None:
        """
        Replace the collection with the owner's tickets from the source.

        Args:
            source: Ticket source collaborator
            owner_id: Owner whose tickets to load

        Raises:
            RemoteFailure: If the source call fails. The previous contents
                are kept in that case.
        """
        tickets = await call_remote("list_tickets", source.list_tickets(owner_id))
        self._tickets = tuple(tickets or ())
        logger.debug(f"Loaded {len(self._tickets)} tickets for {owner_id}")

    def snapshot(self) -> tuple[Ticket, ...]:
        """Current tickets, in source order."""
        return self._tickets

    def get(self, ticket_id: TicketId) -> Ticket | None:
        """Return the ticket with the given id, or None."""
        for ticket in self._tickets:
            if ticket.id == ticket_id:
                return ticket
        return None

    def replace(self, ticket: Ticket) -> bool:
        """
        Swap in a new version of an existing ticket.

        Position in the collection is preserved.

        Returns:
            True if a ticket with the same id was replaced
        """
        replaced = False
        updated = []
        for current in self._tickets:
            if current.id == ticket.id:
                updated.append(ticket)
                replaced = True
            else:
                updated.append(current)
        if replaced:
            self._tickets = tuple(updated)
        return replaced

    def remove(self, ticket_id: TicketId) -> bool:
        """
        Drop a ticket from the collection.

        Returns:
            True if a ticket was removed
        """
        remaining = tuple(t for t in self._tickets if t.id != ticket_id)
        removed = len(remaining) != len(self._tickets)
        self._tickets = remaining
        return removed

    def __len__(self) -> int:
        return len(self._tickets)

    def __iter__(self):
        return iter(self._tickets)
