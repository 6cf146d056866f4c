"""
Ticket entity types for the archive engine.

This module defines the canonical, server-owned records:
- TicketStatus: Visibility of a ticket (public/private)
- Review: Optional review attached to a ticket
- Ticket: A user's record of attending one performance
- Genre labels and the search API's genre code table

Tickets are frozen dataclasses. A canonical record is never mutated in
place; a changed record is a new instance built with dataclasses.replace(),
which lets the collection swap records atomically.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

TicketId = str
"""Opaque, stable ticket identifier."""

UserId = str
"""Opaque user identifier."""


class TicketStatus(str, Enum):
    """Visibility of a ticket."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


TICKET_STATUS_LABELS: dict[TicketStatus, str] = {
    TicketStatus.PUBLIC: "전체 공개",
    TicketStatus.PRIVATE: "나만 보기",
}

GENRE_BAND = "밴드"
GENRE_THEATER = "연극/뮤지컬"

GENRE_OPTIONS: tuple[str, ...] = (GENRE_BAND, GENRE_THEATER)
"""Display genre labels offered when editing a ticket."""

GENRE_CODE_LABELS: dict[str, str] = {
    "BAND": GENRE_BAND,
    "MUSICAL": GENRE_THEATER,
    "PLAY": GENRE_THEATER,
}
"""Search API genre codes mapped to display labels."""

SEARCH_GENRE_CODES: tuple[str, ...] = ("BAND", "MUSICAL", "PLAY")


@dataclass(frozen=True)
class Review:
    """
    A user's review of a performance.

    Attributes:
        review_text: The review body.
        created_at: When the review was first written.
        updated_at: When the review was last changed.
    """

    review_text: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Ticket:
    """
    Canonical record of a user attending a performance.

    Attributes:
        id: Stable identifier, immutable once assigned
        user_id: Owner of the ticket
        title: Performance title, never empty after a successful save
        artist: Performing artist
        venue: Where the performance took place
        seat: Seat description
        performed_at: Performance date and time (None if unknown)
        genre: Display genre label (see GENRE_OPTIONS)
        status: Visibility of the ticket
        images: Ordered image URLs
        review: Optional review
        like_count: Number of likes, as reported by the server
        is_liked: Whether the current user likes this ticket
        created_at: Record creation time
        updated_at: Record last update time
    """

    id: TicketId
    user_id: UserId
    title: str
    artist: str = ""
    venue: str | None = None
    seat: str = ""
    performed_at: datetime | None = None
    genre: str | None = None
    status: TicketStatus = TicketStatus.PUBLIC
    images: tuple[str, ...] = field(default_factory=tuple)
    review: Review | None = None
    like_count: int = 0
    is_liked: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Ticket id is required")
        if self.like_count < 0:
            raise ValueError("Ticket like_count cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        d = asdict(self)
        d["status"] = self.status.value
        d["images"] = list(self.images)
        return d


EDITABLE_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "artist",
        "venue",
        "seat",
        "performed_at",
        "genre",
        "status",
        "images",
        "review",
    }
)
"""Ticket fields an edit session may stage changes for."""
