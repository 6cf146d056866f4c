"""
Ticket detail session state machine.

This module coordinates one open ticket-detail view:

    VIEWING -> EDITING -> SAVING -> VIEWING             (save succeeded)
                              +-> EDITING + notice    (save failed)

and, independently, the card face FRONT <-> BACK. Entering EDITING turns
the card to its BACK face and suspends flipping; leaving EDITING returns to
VIEWING on the FRONT face.

Every transient piece of UI state (dropdown, pickers, likes panel, pending
delete confirmation) lives in TransientUI and is reset by open(), so nothing
leaks from one open/close cycle into the next.

Remote calls are awaited without cancellation. A response that lands after
the session was closed or reopened is still allowed to update the canonical
collection (if the ticket is still there) but never touches session state.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, time
from enum import Enum
from typing import Any

from record_protocols import TicketMutationProtocol

from record_core.collection import TicketCollection
from record_core.edit import (
    EditOverlay,
    begin_edit,
    discard,
    effective_value,
    flatten,
    resolve_review_text,
    set_field,
    to_update_payload,
    with_performed_date,
    with_performed_time,
)
from record_core.engagement import EngagementMutator, EngagementState, TicketHolder
from record_core.exceptions import RemoteFailure, ValidationError
from record_core.remote import call_remote
from record_core.types import TICKET_STATUS_LABELS, Ticket, TicketStatus, UserId
from record_core.visits import resolve_ordinal

logger = logging.getLogger(__name__)


class SessionMode(str, Enum):
    """Edit lifecycle of a detail session."""

    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class CardFace(str, Enum):
    """Which side of the ticket card is shown."""

    FRONT = "front"
    BACK = "back"


class NoticeLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """User-visible message produced by a transition."""

    level: NoticeLevel
    message: str

    @classmethod
    def info(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.INFO, message=message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.ERROR, message=message)


@dataclass
class TransientUI:
    """
    Short-lived UI state owned by the session.

    Attributes:
        dropdown_open: Actions menu is showing
        date_picker_open: Performance date picker is showing
        time_picker_open: Performance time picker is showing
        genre_picker_open: Genre chooser is showing
        privacy_picker_open: Visibility chooser is showing
        likes_panel_open: Liked-users list is showing
        delete_pending: Delete was requested and awaits confirmation
        details_expanded: Details accordion is expanded
    """

    dropdown_open: bool = False
    date_picker_open: bool = False
    time_picker_open: bool = False
    genre_picker_open: bool = False
    privacy_picker_open: bool = False
    likes_panel_open: bool = False
    delete_pending: bool = False
    details_expanded: bool = True

    def close_pickers(self) -> None:
        """Collapse the menu and every picker used while editing."""
        self.dropdown_open = False
        self.date_picker_open = False
        self.time_picker_open = False
        self.genre_picker_open = False


class TicketDetailSession:
    """
    Coordinates viewing, editing, liking and deleting one ticket.

    Example:
        session = TicketDetailSession(
            mutations=api_client,
            engagement=EngagementMutator(service=api_client),
            collection=collection,
            user_id="u1",
        )
        session.open(ticket)
        session.begin_edit()
        session.set_field("title", "Hamlet")
        if not await session.save():
            print(session.notice.message)
    """

    def __init__(
        self,
        mutations: TicketMutationProtocol,
        engagement: EngagementMutator,
        collection: TicketCollection,
        user_id: UserId | None = None,
        is_mine: bool = True,
    ) -> None:
        """
        Initialize a closed session.

        Args:
            mutations: Ticket mutation collaborator
            engagement: Like toggling for the local ticket
            collection: Canonical tickets of the owner
            user_id: Signed-in user
            is_mine: Whether the viewer owns the tickets (enables editing)
        """
        self.mutations = mutations
        self.engagement = engagement
        self.collection = collection
        self.user_id = user_id
        self.is_mine = is_mine

        self.mode = SessionMode.VIEWING
        self.face = CardFace.FRONT
        self.ui = TransientUI()
        self.notice: Notice | None = None
        self.liked_user_ids: list[str] = []
        self.is_open = False

        self._opened: Ticket | None = None
        self._local = TicketHolder()
        self._overlay = EditOverlay()
        self._generation = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self, ticket: Ticket) -> None:
        """Show a ticket, resetting every piece of session state."""
        self._generation += 1
        self._opened = ticket
        self._local.ticket = self.collection.get(ticket.id) or ticket
        self._overlay = EditOverlay()
        self.mode = SessionMode.VIEWING
        self.face = CardFace.FRONT
        self.ui = TransientUI()
        self.notice = None
        self.liked_user_ids = []
        self.is_open = True

    def close(self) -> None:
        """Dismiss the view, dropping any staged edit."""
        self._generation += 1
        self._overlay = discard()
        self.mode = SessionMode.VIEWING
        self.face = CardFace.FRONT
        self.is_open = False

    @property
    def ticket(self) -> Ticket | None:
        """Canonical record: the collection's version, else the one opened."""
        if self._opened is None:
            return None
        return self.collection.get(self._opened.id) or self._opened

    @property
    def local_ticket(self) -> Ticket | None:
        """Locally held snapshot carrying the latest engagement state."""
        return self._local.ticket

    @property
    def overlay(self) -> EditOverlay:
        return self._overlay

    @property
    def visit_ordinal(self) -> int | None:
        """Nth visit of this ticket among the owner's tickets with its title."""
        ticket = self.ticket
        if ticket is None:
            return None
        return resolve_ordinal(ticket, self.collection.snapshot())

    def _is_current(self, generation: int) -> bool:
        return self.is_open and generation == self._generation

    def _with_current_engagement(self, candidate: Ticket) -> Ticket:
        """Carry over like state confirmed while a commit was in flight."""
        current = self.collection.get(candidate.id)
        if current is None:
            local = self._local.ticket
            current = local if local is not None and local.id == candidate.id else None
        if current is None:
            return candidate
        return replace(
            candidate, is_liked=current.is_liked, like_count=current.like_count
        )

    # -------------------------------------------------------------------------
    # Viewing
    # -------------------------------------------------------------------------

    def flip(self) -> bool:
        """
        Turn the card over.

        Returns:
            False while editing or saving, when flipping is suspended
        """
        if not self.is_open or self.mode != SessionMode.VIEWING:
            return False
        self.face = CardFace.BACK if self.face == CardFace.FRONT else CardFace.FRONT
        return True

    def toggle_dropdown(self) -> None:
        self.ui.dropdown_open = not self.ui.dropdown_open

    def toggle_details(self) -> None:
        self.ui.details_expanded = not self.ui.details_expanded

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def begin_edit(self) -> bool:
        """
        Enter edit mode on the back face with nothing staged.

        Returns:
            False if the session is closed, busy, or the ticket is not ours
        """
        ticket = self.ticket
        if not self.is_open or not self.is_mine or ticket is None:
            return False
        if self.mode != SessionMode.VIEWING:
            return False
        self._overlay = begin_edit(ticket)
        self.mode = SessionMode.EDITING
        self.face = CardFace.BACK
        self.ui.dropdown_open = False
        self.ui.delete_pending = False
        self.notice = None
        return True

    def _require_editing(self) -> Ticket:
        if self.mode != SessionMode.EDITING or self.ticket is None:
            raise RuntimeError("Ticket is not being edited")
        return self.ticket

    def set_field(self, field: str, value: Any) -> None:
        """Stage a field change. Only valid while editing."""
        self._require_editing()
        self._overlay = set_field(self._overlay, field, value)

    def effective(self, field: str) -> Any:
        """Value of a field as the edit form should show it."""
        ticket = self.ticket
        if ticket is None:
            return None
        return effective_value(field, self._overlay, ticket)

    def review_text(self) -> str | None:
        ticket = self.ticket
        if ticket is None:
            return None
        return resolve_review_text(self._overlay, ticket)

    def open_date_picker(self) -> None:
        self._require_editing()
        self.ui.date_picker_open = True

    def open_time_picker(self) -> None:
        self._require_editing()
        self.ui.time_picker_open = True

    def open_genre_picker(self) -> None:
        self._require_editing()
        self.ui.genre_picker_open = True

    def set_performed_date(self, new_date: date | None) -> None:
        """Apply the date picker result (None means dismissed)."""
        ticket = self._require_editing()
        self.ui.date_picker_open = False
        if new_date is not None:
            self._overlay = with_performed_date(self._overlay, ticket, new_date)

    def set_performed_time(self, new_time: time | None) -> None:
        """Apply the time picker result (None means dismissed)."""
        ticket = self._require_editing()
        self.ui.time_picker_open = False
        if new_time is not None:
            self._overlay = with_performed_time(self._overlay, ticket, new_time)

    def select_genre(self, genre: str) -> None:
        self._require_editing()
        self._overlay = set_field(self._overlay, "genre", genre)
        self.ui.genre_picker_open = False

    def cancel_edit(self) -> None:
        """Drop staged changes and return to the front face."""
        if self.mode != SessionMode.EDITING:
            return
        self._overlay = discard()
        self.mode = SessionMode.VIEWING
        self.face = CardFace.FRONT
        self.ui.close_pickers()

    async def save(self) -> bool:
        """
        Validate and commit staged changes.

        On success the canonical record is replaced, the overlay cleared
        and the session closed. On failure the session stays in EDITING
        with the overlay intact and a notice set.

        Returns:
            True if the update was accepted by the server
        """
        if not self.is_open or self.mode != SessionMode.EDITING:
            return False
        base = self._require_editing()

        try:
            candidate = flatten(self._overlay, base)
        except ValidationError as e:
            self.notice = Notice.error(e.message)
            return False

        payload = to_update_payload(self._overlay, candidate)
        generation = self._generation
        self.mode = SessionMode.SAVING
        self.notice = None

        try:
            data = await call_remote(
                "update_ticket", self.mutations.update_ticket(base.id, payload)
            )
        except RemoteFailure as e:
            if generation == self._generation:
                self.mode = SessionMode.EDITING
                self.notice = Notice.error(e.message)
            return False

        if isinstance(data, Ticket) and data.id == base.id:
            updated = data
        else:
            updated = self._with_current_engagement(candidate)
        self.collection.replace(updated)

        if generation != self._generation:
            logger.debug(f"Save of ticket {base.id} finished after session moved on")
            return True

        self._local.ticket = updated
        self.notice = Notice.info("티켓이 수정되었습니다.")
        self.ui.close_pickers()
        self.close()
        return True

    # -------------------------------------------------------------------------
    # Delete (two-step)
    # -------------------------------------------------------------------------

    def request_delete(self) -> bool:
        """First step of delete: record the intent."""
        self.ui.dropdown_open = False
        if not self.is_open or not self.is_mine or self.mode != SessionMode.VIEWING:
            return False
        self.ui.delete_pending = True
        return True

    def cancel_delete(self) -> None:
        self.ui.delete_pending = False

    async def confirm_delete(self) -> bool:
        """
        Second step of delete: call the mutation service.

        Refused unless request_delete() came first. Success removes the
        ticket from the collection and closes the session; failure keeps
        the session open with a notice.

        Returns:
            True if the ticket was deleted
        """
        ticket = self.ticket
        if not self.ui.delete_pending or not self.is_open or ticket is None:
            return False
        self.ui.delete_pending = False
        generation = self._generation

        try:
            await call_remote("delete_ticket", self.mutations.delete_ticket(ticket.id))
        except RemoteFailure as e:
            if self._is_current(generation):
                self.notice = Notice.error(e.message)
            return False

        self.collection.remove(ticket.id)
        if self._is_current(generation):
            self.notice = Notice.info("티켓이 삭제되었습니다.")
            self.close()
        return True

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    def open_privacy_picker(self) -> None:
        self.ui.dropdown_open = False
        self.ui.privacy_picker_open = True

    async def change_visibility(self, status: TicketStatus | str) -> bool:
        """
        Set the ticket's visibility.

        Returns:
            True if the server accepted the change
        """
        status = TicketStatus(status)
        ticket = self.ticket
        if not self.is_open or ticket is None:
            self.ui.privacy_picker_open = False
            return False
        generation = self._generation

        try:
            await call_remote(
                "set_visibility", self.mutations.set_visibility(ticket.id, status.value)
            )
        except RemoteFailure as e:
            if self._is_current(generation):
                self.notice = Notice.error(e.message)
                self.ui.privacy_picker_open = False
            return False

        current = self.collection.get(ticket.id)
        if current is not None:
            self.collection.replace(replace(current, status=status))

        if self._is_current(generation):
            if self._opened is not None and self._opened.id == ticket.id:
                self._opened = replace(self._opened, status=status)
            local = self._local.ticket
            if local is not None and local.id == ticket.id:
                self._local.ticket = replace(local, status=status)
            self.notice = Notice.info(
                f'공개 범위가 "{TICKET_STATUS_LABELS[status]}"로 변경되었습니다.'
            )
            self.ui.privacy_picker_open = False
        return True

    # -------------------------------------------------------------------------
    # Engagement
    # -------------------------------------------------------------------------

    async def toggle_like(self) -> EngagementState | None:
        """
        Toggle the signed-in user's like on the shown ticket.

        Failures leave the local ticket untouched and set no notice.
        """
        if not self.is_open or not self.user_id:
            return None

        state = await self.engagement.toggle_like(self._local, self.user_id)
        if state is None:
            return None

        local = self._local.ticket
        canonical = self.collection.get(local.id) if local is not None else None
        if canonical is not None:
            self.collection.replace(
                replace(canonical, is_liked=state.is_liked, like_count=state.like_count)
            )
        return state

    async def show_liked_users(self) -> list[str]:
        """Load and show the users who liked the ticket."""
        ticket = self.ticket
        self.ui.dropdown_open = False
        if not self.is_open or ticket is None or not self.user_id:
            return []
        generation = self._generation

        try:
            user_ids = await self.engagement.liked_users(ticket.id, self.user_id)
        except RemoteFailure as e:
            if self._is_current(generation):
                self.notice = Notice.error(e.message)
            return []

        if self._is_current(generation):
            self.liked_user_ids = user_ids
            self.ui.likes_panel_open = True
        return user_ids

    def hide_liked_users(self) -> None:
        self.ui.likes_panel_open = False
