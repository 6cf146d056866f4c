"""
Pydantic response types for the ticket API.

Every endpoint answers with the same envelope:
    {"success": true, "data": ..., "error": null}
    {"success": false, "error": {"message": "...", "code": "..."}}

These are API response types for external data validation. Internal types
(Ticket, Review) are dataclasses in record_core.types.

Notes:
- Ticket ids may arrive as int; they are converted to str
- Timestamps are ISO 8601 strings, with or without a time part
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from record_core.types import Review, Ticket, TicketStatus


def _parse_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        if not value:
            return None
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    return value


class ApiErrorBody(BaseModel):
    """Error detail inside a failed envelope."""

    message: str = ""
    code: str | None = None


class ApiEnvelope(BaseModel):
    """
    Common response wrapper.

    data is left untyped here and validated per endpoint.
    """

    success: bool
    data: Any = None
    error: ApiErrorBody | None = None


class ReviewPayload(BaseModel):
    """Review sub-object of a ticket."""

    model_config = ConfigDict(extra="ignore")

    reviewText: str
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @field_validator("createdAt", "updatedAt", mode="before")
    @classmethod
    def parse_timestamps(cls, value: Any) -> Any:
        return _parse_timestamp(value)


class TicketPayload(BaseModel):
    """
    Canonical ticket as returned by /api/tickets endpoints.

    Example:
    {
        "id": "t1",
        "userId": "u1",
        "title": "Hamlet",
        "performedAt": "2024-05-01T19:30:00",
        "status": "PUBLIC",
        "images": ["https://cdn.example.com/t1.jpg"],
        "review": {"reviewText": "Great", "createdAt": "2024-05-02T10:00:00"},
        "likeCount": 3,
        "isLiked": false
    }
    """

    model_config = ConfigDict(extra="ignore")

    id: str | int
    userId: str
    title: str = ""
    artist: str | None = None
    venue: str | None = None
    seat: str | None = None
    performedAt: datetime | None = None
    genre: str | None = None
    status: TicketStatus = TicketStatus.PUBLIC
    images: list[str] = Field(default_factory=list)
    review: ReviewPayload | None = None
    likeCount: int = 0
    isLiked: bool = False
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @field_validator("performedAt", "createdAt", "updatedAt", mode="before")
    @classmethod
    def parse_timestamps(cls, value: Any) -> Any:
        return _parse_timestamp(value)

    def to_ticket(self) -> Ticket:
        """Convert to the canonical Ticket dataclass."""
        review = None
        if self.review is not None:
            review = Review(
                review_text=self.review.reviewText,
                created_at=self.review.createdAt,
                updated_at=self.review.updatedAt,
            )
        return Ticket(
            id=str(self.id),
            user_id=self.userId,
            title=self.title,
            artist=self.artist or "",
            venue=self.venue,
            seat=self.seat or "",
            performed_at=self.performedAt,
            genre=self.genre,
            status=self.status,
            images=tuple(url for url in self.images if url),
            review=review,
            like_count=max(self.likeCount, 0),
            is_liked=self.isLiked,
            created_at=self.createdAt,
            updated_at=self.updatedAt,
        )


class LikePayload(BaseModel):
    """Response data of POST /api/tickets/{id}/like."""

    isLiked: bool
    likeCount: int


class LikedUsersPayload(BaseModel):
    """Response data of GET /api/tickets/{id}/likes."""

    likedUserIds: list[str] = Field(default_factory=list)


class RawSearchResult(BaseModel):
    """
    One item from the search API, using the API's own field names.

    Example item:
    {
        "id": 42,
        "userId": "u1",
        "performanceTitle": "Hamlet",
        "viewDate": "2024-05-01",
        "genre": "BAND",
        "isPublic": true,
        "imageUrl": "/uploads/42.jpg"
    }
    """

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    userId: str | None = None
    performanceTitle: str | None = None
    title: str | None = None
    artist: str | None = None
    venue: str | None = None
    seat: str | None = None
    viewDate: datetime | None = None
    genre: str | None = None
    isPublic: bool = False
    imageUrl: str | None = None
    posterUrl: str | None = None
    reviewText: str | None = None
    likeCount: int = 0
    isLiked: bool = False
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @field_validator("viewDate", "createdAt", "updatedAt", mode="before")
    @classmethod
    def parse_timestamps(cls, value: Any) -> Any:
        """Accept ISO dates, ISO datetimes and a trailing Z."""
        return _parse_timestamp(value)
