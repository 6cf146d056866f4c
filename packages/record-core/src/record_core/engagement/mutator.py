"""
Engagement mutator for like/unlike.

The local ticket's engagement state is a cache of server truth with exactly
two states: trusting the last server snapshot, or awaiting the next one.
The client never computes a like delta itself:

- Nothing changes locally before the toggle call returns.
- On success, is_liked and like_count are copied verbatim from the response.
- On failure the local ticket is left exactly as it was and the failure is
  logged, not raised.

Concurrent toggles on the same ticket race and the last response to arrive
wins. Setting serialize=True queues toggles per ticket id instead.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, replace

from record_protocols import EngagementProtocol, LikedUsers, LikeSnapshot

from record_core.exceptions import RemoteFailure
from record_core.remote import call_remote
from record_core.types import Ticket, TicketId, UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngagementState:
    """Like state of a locally held ticket."""

    is_liked: bool
    like_count: int

    @classmethod
    def of(cls, ticket: Ticket) -> "EngagementState":
        return cls(is_liked=ticket.is_liked, like_count=ticket.like_count)


class TicketHolder:
    """
    Mutable slot for the locally held ticket snapshot.

    The detail session shares one holder with the mutator so that a
    response can be checked against whatever the slot holds when it lands.
    """

    def __init__(self, ticket: Ticket | None = None) -> None:
        self.ticket = ticket


class EngagementMutator:
    """
    Applies server-confirmed like toggles to a local ticket.

    Example:
        mutator = EngagementMutator(service=api_client)
        holder = TicketHolder(ticket)
        state = await mutator.toggle_like(holder, user_id="u1")
        if state is None:
            ...  # toggle failed, holder.ticket unchanged
    """

    def __init__(self, service: EngagementProtocol, serialize: bool = False) -> None:
        """
        Initialize the mutator.

        Args:
            service: Engagement collaborator
            serialize: If True, toggles on the same ticket run one at a time
        """
        self.service = service
        self.serialize = serialize
        self._locks: dict[TicketId, asyncio.Lock] = {}

    def _guard(self, ticket_id: TicketId):
        if not self.serialize:
            return contextlib.nullcontext()
        lock = self._locks.get(ticket_id)
        if lock is None:
            lock = self._locks[ticket_id] = asyncio.Lock()
        return lock

    async def toggle_like(
        self, holder: TicketHolder, user_id: UserId
    ) -> EngagementState | None:
        """
        Toggle the user's like on the held ticket.

        Args:
            holder: Slot holding the local ticket
            user_id: The liking user

        Returns:
            New EngagementState, or None if nothing was applied (missing
            identifiers, failed call, or the holder moved on to another
            ticket while the call was in flight)
        """
        ticket = holder.ticket
        if ticket is None or not user_id:
            return None

        async with self._guard(ticket.id):
            try:
                snapshot = await call_remote(
                    "toggle_like", self.service.toggle_like(ticket.id, user_id)
                )
            except RemoteFailure as e:
                logger.warning(f"Like toggle for ticket {ticket.id} not applied: {e}")
                return None

            if not isinstance(snapshot, LikeSnapshot):
                logger.warning(f"Like toggle for ticket {ticket.id} returned no snapshot")
                return None

            current = holder.ticket
            if current is None or current.id != ticket.id:
                logger.debug(f"Discarding stale like response for ticket {ticket.id}")
                return None

            holder.ticket = replace(
                current,
                is_liked=snapshot.is_liked,
                like_count=snapshot.like_count,
            )
            return EngagementState.of(holder.ticket)

    async def liked_users(
        self, ticket_id: TicketId | None, user_id: UserId | None
    ) -> list[str]:
        """
        List the users who liked a ticket.

        Missing identifiers resolve to an empty list without a remote call.

        Raises:
            RemoteFailure: If the lookup call fails
        """
        if not ticket_id or not user_id:
            return []

        data = await call_remote(
            "get_liked_users", self.service.get_liked_users(ticket_id, user_id)
        )
        if isinstance(data, LikedUsers):
            return list(data.liked_user_ids)
        return []
