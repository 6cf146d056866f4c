"""
Multi-field ticket search.

Search runs on the server. This module only:
- Assembles the query from SearchCriteria (populated criteria only, sorted
  by performance date descending)
- Maps the search API's own result schema (RawSearchResult) into canonical
  Tickets: genre code to display label, isPublic to TicketStatus, viewDate
  to performed_at, image references through an ImageResolver
- Offers SearchCriteria.matches(), the same criteria as a pure local
  predicate over already loaded tickets

Results are never re-sorted locally; server order is kept.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import pydantic

from record_protocols import ImageResolverProtocol

from record_core.client.api_types import RawSearchResult
from record_core.exceptions import ValidationError
from record_core.types import GENRE_CODE_LABELS, Review, Ticket, TicketStatus, UserId

logger = logging.getLogger(__name__)

SORT_BY = "viewDate"
SORT_DIRECTION = "DESC"


@dataclass(frozen=True)
class SearchCriteria:
    """
    Immutable search criteria. Empty strings and None mean "not set".

    Attributes:
        title: Free-text performance title query
        start_date: Inclusive lower bound on performance date
        end_date: Inclusive upper bound on performance date
        genre: Genre code (e.g. "BAND") or display label
        venue: Venue substring
        artist: Artist substring
    """

    title: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    genre: str | None = None
    venue: str | None = None
    artist: str | None = None

    def __post_init__(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("start_date", "Start date is after end date")

    def is_empty(self) -> bool:
        """True when no criterion is set."""
        return not any(
            (self.title, self.start_date, self.end_date, self.genre, self.venue, self.artist)
        )

    def to_query(self) -> dict[str, str]:
        """
        Query parameters for the search service.

        Only populated criteria are included.
        """
        query: dict[str, str] = {}
        if self.start_date:
            query["startDate"] = self.start_date.isoformat()
        if self.end_date:
            query["endDate"] = self.end_date.isoformat()
        if self.genre:
            query["genre"] = self.genre
        if self.venue:
            query["venue"] = self.venue
        if self.artist:
            query["artist"] = self.artist
        if self.title:
            query["performanceTitle"] = self.title
        query["sortBy"] = SORT_BY
        query["sortDirection"] = SORT_DIRECTION
        return query

    def matches(self, ticket: Ticket) -> bool:
        """
        Test a ticket against every populated criterion (AND).

        String criteria are case-sensitive substring matches, except genre
        which must equal the ticket's label. A date bound excludes tickets
        with no performance time.
        """
        if self.title and self.title not in ticket.title:
            return False
        if self.start_date or self.end_date:
            if ticket.performed_at is None:
                return False
            performed = ticket.performed_at.date()
            if self.start_date and performed < self.start_date:
                return False
            if self.end_date and performed > self.end_date:
                return False
        if self.genre and genre_label(self.genre) != ticket.genre:
            return False
        if self.venue and self.venue not in (ticket.venue or ""):
            return False
        if self.artist and self.artist not in ticket.artist:
            return False
        return True


def filter_tickets(tickets: Iterable[Ticket], criteria: SearchCriteria) -> list[Ticket]:
    """Tickets matching criteria, in input order."""
    return [t for t in tickets if criteria.matches(t)]


def genre_label(code: str | None) -> str | None:
    """Display label for a search genre code. Unknown codes pass through."""
    if not code:
        return None
    return GENRE_CODE_LABELS.get(code, code)


def resolve_images(
    resolver: ImageResolverProtocol, raw_urls: Iterable[str | None]
) -> tuple[str, ...]:
    """
    Resolve image references, skipping any that do not resolve.

    Never yields None or empty entries.
    """
    images = []
    for raw_url in raw_urls:
        if not raw_url:
            continue
        try:
            resolved = resolver.resolve(raw_url)
        except Exception as e:
            logger.warning(f"Skipping image {raw_url!r}: {e}")
            continue
        if resolved:
            images.append(resolved)
    return tuple(images)


def map_search_result(
    raw: RawSearchResult,
    user_id: UserId,
    resolver: ImageResolverProtocol,
    now: datetime | None = None,
) -> Ticket:
    """
    Convert one search API item into a canonical Ticket.

    Args:
        raw: Parsed search item
        user_id: Searching user, used when the item has no owner
        resolver: Image reference resolver
        now: Fallback for missing timestamps (defaults to datetime.now())

    Raises:
        ValueError: If the item has no identifier
    """
    now = now or datetime.now()
    review = None
    if raw.reviewText:
        review = Review(review_text=raw.reviewText, created_at=raw.createdAt or now)

    return Ticket(
        id=str(raw.id if raw.id is not None else ""),
        user_id=raw.userId or user_id,
        title=raw.performanceTitle or raw.title or "",
        artist=raw.artist or "",
        venue=raw.venue or "",
        seat=raw.seat or "",
        performed_at=raw.viewDate or now,
        genre=genre_label(raw.genre),
        status=TicketStatus.PUBLIC if raw.isPublic else TicketStatus.PRIVATE,
        images=resolve_images(resolver, (raw.imageUrl, raw.posterUrl)),
        review=review,
        like_count=max(raw.likeCount, 0),
        is_liked=raw.isLiked,
        created_at=raw.createdAt or now,
        updated_at=raw.updatedAt or now,
    )


def map_search_results(
    items: Iterable[Mapping[str, Any] | RawSearchResult],
    user_id: UserId,
    resolver: ImageResolverProtocol,
    now: datetime | None = None,
) -> list[Ticket]:
    """
    Convert search API items into Tickets, keeping server order.

    Items that fail to parse or lack an identifier are skipped and logged.
    """
    now = now or datetime.now()
    tickets = []
    for item in items:
        try:
            raw = item if isinstance(item, RawSearchResult) else RawSearchResult.model_validate(item)
            tickets.append(map_search_result(raw, user_id, resolver, now))
        except (pydantic.ValidationError, ValueError) as e:
            logger.warning(f"Skipping malformed search result: {e}")
    return tickets
