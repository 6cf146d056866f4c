"""
Edit staging buffer.

An EditOverlay holds only the fields a user has touched during the current
edit session. It is laid over a canonical Ticket:

- A field absent from the overlay defers to the canonical value.
- A field present in the overlay wins, even when its value is None.

All functions here are pure: they return new overlays or candidate tickets
and never modify the canonical record. flatten() is the only place where a
full candidate record is produced, and it is also where the single
hard-blocking validation (non-empty title) runs.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Any

from record_core.exceptions import ValidationError
from record_core.types import EDITABLE_FIELDS, Review, Ticket, TicketStatus


@dataclass(frozen=True)
class ReviewDraft:
    """
    Staged review change.

    Attributes:
        review_text: New review text. None stages nothing and keeps the
            canonical text; an empty string is kept as an empty review.
        created_at: Creation time to keep. None falls back to the canonical
            review's creation time, then to the flatten time.
    """

    review_text: str | None
    created_at: datetime | None = None


class EditOverlay(Mapping):
    """
    Immutable partial mapping of staged ticket fields.

    Example:
        overlay = begin_edit(ticket)
        overlay = set_field(overlay, "title", "Hamlet")
        effective_value("title", overlay, ticket)  # "Hamlet"
        effective_value("venue", overlay, ticket)  # ticket.venue
    """

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._fields: dict[str, Any] = dict(fields or {})

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"EditOverlay({self._fields!r})"


def begin_edit(base: Ticket) -> EditOverlay:
    """Start an edit session over base with nothing staged."""
    return EditOverlay()


def discard() -> EditOverlay:
    """Drop every staged change."""
    return EditOverlay()


def set_field(overlay: EditOverlay, field: str, value: Any) -> EditOverlay:
    """
    Stage a value for a field.

    Args:
        overlay: Current overlay (left untouched)
        field: Ticket field name, one of EDITABLE_FIELDS
        value: New value. For "review", a ReviewDraft, a plain string
            (treated as new review text) or None (keep the canonical review).

    Returns:
        New overlay with the field staged

    Raises:
        ValueError: If field is not editable
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Field '{field}' is not editable")

    if field == "status" and value is not None:
        value = TicketStatus(value)
    elif field == "images" and value is not None:
        value = tuple(value)
    elif field == "review" and isinstance(value, str):
        value = ReviewDraft(review_text=value)

    fields = dict(overlay)
    fields[field] = value
    return EditOverlay(fields)


def effective_value(field: str, overlay: EditOverlay, base: Ticket) -> Any:
    """
    Resolve the value a field has for this edit session.

    Returns:
        overlay[field] if the overlay holds the key, else the base value
    """
    if field in overlay:
        return overlay[field]
    return getattr(base, field)


def resolve_review_text(overlay: EditOverlay, base: Ticket) -> str | None:
    """
    Resolve the review text for this edit session.

    Staged text wins whenever it is not None, including an empty string.
    Otherwise the canonical text is used.
    """
    draft = overlay.get("review")
    if draft is not None and draft.review_text is not None:
        return draft.review_text
    if base.review is not None:
        return base.review.review_text
    return None


def _resolve_review(
    overlay: EditOverlay, base: Ticket, now: datetime
) -> Review | None:
    text = resolve_review_text(overlay, base)
    if text is None:
        return None

    draft = overlay.get("review")
    created_at = (
        (draft.created_at if draft is not None else None)
        or (base.review.created_at if base.review is not None else None)
        or now
    )
    return Review(review_text=text, created_at=created_at, updated_at=now)


def flatten(
    overlay: EditOverlay, base: Ticket, now: datetime | None = None
) -> Ticket:
    """
    Build the full candidate record for a commit.

    Args:
        overlay: Staged changes
        base: Canonical ticket the overlay applies to
        now: Timestamp for review bookkeeping (defaults to datetime.now())

    Returns:
        Candidate Ticket. The review is rebuilt with updated_at=now, or
        dropped when no review text resolves.

    Raises:
        ValidationError: If the resolved title is empty after trimming
    """
    now = now or datetime.now()

    title = effective_value("title", overlay, base)
    if title is None or not title.strip():
        raise ValidationError("title", "Title is required")

    changes = {name: value for name, value in overlay.items() if name != "review"}
    changes["review"] = _resolve_review(overlay, base, now)
    return replace(base, **changes)


# Ticket attribute -> wire (camelCase) field name
WIRE_FIELD_NAMES: dict[str, str] = {
    "title": "title",
    "artist": "artist",
    "venue": "venue",
    "seat": "seat",
    "performed_at": "performedAt",
    "genre": "genre",
    "status": "status",
    "images": "images",
}

ALWAYS_SENT_FIELDS = ("title", "genre", "images")


def _wire_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, TicketStatus):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value


def to_update_payload(overlay: EditOverlay, candidate: Ticket) -> dict[str, Any]:
    """
    Build the partial-update body for the mutation service.

    Sends every staged field plus title, genre and images. The review is
    sent whole when one resolves and omitted otherwise, so the server keeps
    its review when nothing was staged for it.

    Args:
        overlay: Staged changes
        candidate: Result of flatten(overlay, base)

    Returns:
        Dict keyed by wire field names
    """
    names = [n for n in WIRE_FIELD_NAMES if n in overlay or n in ALWAYS_SENT_FIELDS]
    payload = {
        WIRE_FIELD_NAMES[name]: _wire_value(getattr(candidate, name))
        for name in names
    }

    if candidate.review is not None:
        payload["review"] = {
            "reviewText": candidate.review.review_text,
            "createdAt": _wire_value(candidate.review.created_at),
            "updatedAt": _wire_value(candidate.review.updated_at),
        }
    return payload


def with_performed_date(
    overlay: EditOverlay, base: Ticket, new_date: date
) -> EditOverlay:
    """
    Stage a new performance date, keeping the effective time of day.

    An unknown performance time keeps midnight.
    """
    current = effective_value("performed_at", overlay, base)
    if current is None:
        performed_at = datetime.combine(new_date, time())
    else:
        performed_at = datetime.combine(new_date, current.timetz())
    return set_field(overlay, "performed_at", performed_at)


def with_performed_time(
    overlay: EditOverlay, base: Ticket, new_time: time
) -> EditOverlay:
    """
    Stage a new performance time, keeping the effective date.

    Only hours and minutes are taken from new_time. An unknown performance
    date uses today.
    """
    current = effective_value("performed_at", overlay, base)
    if current is None:
        current = datetime.combine(date.today(), time())
    performed_at = current.replace(
        hour=new_time.hour, minute=new_time.minute, second=0, microsecond=0
    )
    return set_field(overlay, "performed_at", performed_at)
