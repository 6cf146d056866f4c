"""
HTTP client for the ticket API.

RecordApiClient receives an injected httpx.AsyncClient with base_url set to
the API server and implements every collaborator protocol the engine uses:
ticket source, mutations, engagement, search and statistics.

Calls fail loudly on transport and HTTP errors (raise_for_status) and on
malformed bodies (pydantic.ValidationError). A well-formed envelope with
success=false becomes a failed ServiceResult. The engine's call_remote()
boundary turns both into RemoteFailure.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from record_protocols import LikedUsers, LikeSnapshot, ServiceResult

from record_core.client.api_types import (
    ApiEnvelope,
    LikedUsersPayload,
    LikePayload,
    TicketPayload,
)


@dataclass
class RecordApiClient:
    """
    Ticket API client with injected httpx client.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url set to the API.

    Example:
        async with httpx.AsyncClient(base_url="https://api.example.com") as http:
            client = RecordApiClient(http=http)
            result = await client.list_tickets("u1")
            for ticket in result.data:
                print(f"{ticket.title} @ {ticket.venue}")
    """

    http: httpx.AsyncClient

    @staticmethod
    def _envelope(response: httpx.Response) -> ApiEnvelope:
        response.raise_for_status()
        return ApiEnvelope.model_validate(response.json())

    @staticmethod
    def _failed(envelope: ApiEnvelope) -> ServiceResult:
        if envelope.error is not None:
            return ServiceResult.fail(envelope.error.message, envelope.error.code)
        return ServiceResult.fail("")

    # -------------------------------------------------------------------------
    # TicketSourceProtocol
    # -------------------------------------------------------------------------

    async def list_tickets(self, owner_id: str) -> ServiceResult:
        """
        List a user's tickets.

        Calls GET /api/tickets?userId={owner_id}.

        Returns:
            ServiceResult with a list of Ticket objects.

        Raises:
            httpx.HTTPStatusError: On HTTP errors (4xx, 5xx responses).
            pydantic.ValidationError: On malformed response data.
        """
        response = await self.http.get("/api/tickets", params={"userId": owner_id})
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)

        tickets = [
            TicketPayload.model_validate(item).to_ticket()
            for item in envelope.data or []
        ]
        return ServiceResult.ok(tickets)

    async def get_ticket(self, ticket_id: str) -> ServiceResult:
        """
        Fetch one ticket.

        Calls GET /api/tickets/{ticket_id}. A 404 is a successful lookup
        with no ticket.

        Returns:
            ServiceResult with a Ticket, or None if it does not exist.
        """
        response = await self.http.get(f"/api/tickets/{ticket_id}")
        if response.status_code == 404:
            return ServiceResult.ok(None)
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)

        if envelope.data is None:
            return ServiceResult.ok(None)
        return ServiceResult.ok(TicketPayload.model_validate(envelope.data).to_ticket())

    # -------------------------------------------------------------------------
    # TicketMutationProtocol
    # -------------------------------------------------------------------------

    async def update_ticket(
        self, ticket_id: str, fields: dict[str, Any]
    ) -> ServiceResult:
        """
        Apply a partial update.

        Calls PATCH /api/tickets/{ticket_id} with the wire-format fields.

        Returns:
            ServiceResult with the updated Ticket if the server echoes it.
        """
        response = await self.http.patch(f"/api/tickets/{ticket_id}", json=fields)
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)

        if envelope.data is None:
            return ServiceResult.ok(None)
        return ServiceResult.ok(TicketPayload.model_validate(envelope.data).to_ticket())

    async def delete_ticket(self, ticket_id: str) -> ServiceResult:
        """Delete a ticket. Calls DELETE /api/tickets/{ticket_id}."""
        response = await self.http.delete(f"/api/tickets/{ticket_id}")
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)
        return ServiceResult.ok()

    async def set_visibility(self, ticket_id: str, status: str) -> ServiceResult:
        """Change visibility. Calls PATCH /api/tickets/{ticket_id}/visibility."""
        response = await self.http.patch(
            f"/api/tickets/{ticket_id}/visibility", json={"status": status}
        )
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)
        return ServiceResult.ok()

    # -------------------------------------------------------------------------
    # EngagementProtocol
    # -------------------------------------------------------------------------

    async def toggle_like(self, ticket_id: str, user_id: str) -> ServiceResult:
        """
        Toggle a like.

        Calls POST /api/tickets/{ticket_id}/like.

        Returns:
            ServiceResult with the server's LikeSnapshot.
        """
        response = await self.http.post(
            f"/api/tickets/{ticket_id}/like", json={"userId": user_id}
        )
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)

        data = LikePayload.model_validate(envelope.data)
        return ServiceResult.ok(
            LikeSnapshot(is_liked=data.isLiked, like_count=data.likeCount)
        )

    async def get_liked_users(self, ticket_id: str, user_id: str) -> ServiceResult:
        """
        List users who liked a ticket.

        Calls GET /api/tickets/{ticket_id}/likes?userId={user_id}.
        """
        response = await self.http.get(
            f"/api/tickets/{ticket_id}/likes", params={"userId": user_id}
        )
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)

        data = LikedUsersPayload.model_validate(envelope.data or {})
        return ServiceResult.ok(LikedUsers(liked_user_ids=data.likedUserIds))

    # -------------------------------------------------------------------------
    # SearchProtocol
    # -------------------------------------------------------------------------

    async def search_tickets(
        self, user_id: str, query: dict[str, str]
    ) -> ServiceResult:
        """
        Search a user's tickets.

        Calls GET /api/tickets/search with userId plus the query params.

        Returns:
            ServiceResult with raw result dicts (search API field names).
        """
        response = await self.http.get(
            "/api/tickets/search", params={"userId": user_id, **query}
        )
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)
        return ServiceResult.ok(list(envelope.data or []))

    # -------------------------------------------------------------------------
    # StatisticsProtocol
    # -------------------------------------------------------------------------

    async def get_statistics(self, user_id: str, year: int) -> ServiceResult:
        """Fetch aggregate statistics. Calls GET /api/tickets/statistics."""
        response = await self.http.get(
            "/api/tickets/statistics", params={"userId": user_id, "year": year}
        )
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)
        return ServiceResult.ok(envelope.data)

    async def get_year_in_review(self, user_id: str, year: int) -> ServiceResult:
        """Fetch the year-in-review summary. Calls GET /api/tickets/year-in-review."""
        response = await self.http.get(
            "/api/tickets/year-in-review", params={"userId": user_id, "year": year}
        )
        envelope = self._envelope(response)
        if not envelope.success:
            return self._failed(envelope)
        return ServiceResult.ok(envelope.data)
