"""
Archive page coordinator.

ArchiveView drives the four archive tabs over one TicketCollection:
- history: time-window filtered list with live tab counts
- search: server-side search mapped into Tickets
- analytics / year in review: opaque server payloads for a selected year

It also owns the ticket-detail session opened from either list.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from record_protocols import (
    ImageResolverProtocol,
    SearchProtocol,
    StatisticsProtocol,
    TicketSourceProtocol,
)

from record_core.collection import TicketCollection
from record_core.coordinator.session import Notice, TicketDetailSession
from record_core.exceptions import RemoteFailure
from record_core.query import (
    FilterOption,
    HistoryView,
    SearchCriteria,
    TimeWindow,
    build_history,
    map_search_results,
)
from record_core.query.windows import DEFAULT_RECENT_DAYS
from record_core.remote import call_remote
from record_core.types import Ticket, UserId

logger = logging.getLogger(__name__)


class ArchiveTab(str, Enum):
    """Archive page tabs."""

    HISTORY = "history"
    SEARCH = "search"
    ANALYTICS = "analytics"
    YEAR_IN_REVIEW = "yearInReview"


class ArchiveView:
    """
    Coordinates the archive tabs for one user.

    Example:
        view = ArchiveView(
            source=api_client,
            search_service=api_client,
            statistics=api_client,
            resolver=BaseUrlImageResolver("https://cdn.example.com"),
            user_id="u1",
        )
        await view.refresh()
        view.select_window(TimeWindow.THIS_MONTH)
        history = view.history()
    """

    def __init__(
        self,
        source: TicketSourceProtocol,
        search_service: SearchProtocol,
        statistics: StatisticsProtocol,
        resolver: ImageResolverProtocol,
        user_id: UserId | None,
        collection: TicketCollection | None = None,
        detail: TicketDetailSession | None = None,
        recent_days: int = DEFAULT_RECENT_DAYS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the archive view.

        Args:
            source: Ticket source collaborator
            search_service: Search collaborator
            statistics: Statistics collaborator
            resolver: Image resolver for search results
            user_id: Signed-in user (nothing loads without one)
            collection: Canonical tickets (a new empty one if None)
            detail: Detail session shared by the lists
            recent_days: Length of the recent window
            clock: Source of "now"
        """
        self.source = source
        self.search_service = search_service
        self.statistics = statistics
        self.resolver = resolver
        self.user_id = user_id
        self.collection = collection if collection is not None else TicketCollection()
        self.detail = detail
        self.recent_days = recent_days
        self.clock = clock

        self.active_tab = ArchiveTab.HISTORY
        self.window = TimeWindow.ALL
        self.notice: Notice | None = None

        self.criteria = SearchCriteria()
        self.search_results: list[Ticket] = []
        self.is_searching = False
        self.has_searched = False
        self._search_seq = 0

        self.selected_year = clock().year
        self.statistics_data: dict[str, Any] | None = None
        self.year_in_review: dict[str, Any] | None = None

    def select_tab(self, tab: ArchiveTab | str) -> None:
        self.active_tab = ArchiveTab(tab)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    async def refresh(self) -> bool:
        """
        Reload the user's tickets into the collection.

        Returns:
            False if there is no user or the load failed (previous tickets
            are kept)
        """
        if not self.user_id:
            return False
        try:
            await self.collection.load(self.source, self.user_id)
        except RemoteFailure as e:
            self.notice = Notice.error(e.message)
            return False
        return True

    def select_window(self, window: TimeWindow | str) -> None:
        self.window = TimeWindow(window)

    def history(self, now: datetime | None = None) -> HistoryView:
        """Filtered history list and tab counts for the selected window."""
        return build_history(
            self.collection.snapshot(),
            self.window,
            now or self.clock(),
            self.recent_days,
        )

    def filter_options(self, now: datetime | None = None) -> list[FilterOption]:
        return self.history(now).options

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(self, criteria: SearchCriteria) -> list[Ticket]:
        """
        Run a server-side search.

        Failures clear the results and set a notice. Results keep server
        order (performance date, newest first). Only the most recent search
        updates the view; an older one finishing later is discarded.
        """
        if not self.user_id:
            return []

        self._search_seq += 1
        seq = self._search_seq
        self.criteria = criteria
        self.is_searching = True
        self.has_searched = True
        try:
            items = await call_remote(
                "search_tickets",
                self.search_service.search_tickets(self.user_id, criteria.to_query()),
            )
        except RemoteFailure as e:
            if seq == self._search_seq:
                self.notice = Notice.error(e.message)
                self.search_results = []
                self.is_searching = False
            return []

        results = map_search_results(
            items or [], self.user_id, self.resolver, now=self.clock()
        )
        if seq != self._search_seq:
            logger.debug(f"Discarding results of superseded search #{seq}")
            return results
        self.search_results = results
        self.is_searching = False
        return results

    # -------------------------------------------------------------------------
    # Analytics / year in review
    # -------------------------------------------------------------------------

    def previous_year(self) -> int:
        self.selected_year -= 1
        return self.selected_year

    def next_year(self) -> int:
        self.selected_year += 1
        return self.selected_year

    async def _load_year_payload(self, operation: str, call: Any) -> dict[str, Any] | None:
        try:
            data = await call_remote(operation, call)
        except RemoteFailure as e:
            logger.warning(f"{operation} unavailable: {e}")
            return None
        return data if isinstance(data, dict) else None

    async def load_statistics(self) -> dict[str, Any] | None:
        """Fetch aggregate statistics for the selected year."""
        if not self.user_id:
            return None
        year = self.selected_year
        data = await self._load_year_payload(
            "get_statistics", self.statistics.get_statistics(self.user_id, year)
        )
        if year == self.selected_year:
            self.statistics_data = data
        return data

    async def load_year_in_review(self) -> dict[str, Any] | None:
        """Fetch the year-in-review summary for the selected year."""
        if not self.user_id:
            return None
        year = self.selected_year
        data = await self._load_year_payload(
            "get_year_in_review", self.statistics.get_year_in_review(self.user_id, year)
        )
        if year == self.selected_year:
            self.year_in_review = data
        return data

    # -------------------------------------------------------------------------
    # Detail
    # -------------------------------------------------------------------------

    def open_detail(self, ticket: Ticket) -> TicketDetailSession | None:
        """Open the shared detail session on a ticket from either list."""
        if self.detail is None:
            return None
        self.detail.open(ticket)
        return self.detail
