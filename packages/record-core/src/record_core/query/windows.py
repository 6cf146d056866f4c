"""
Time-window filters for the history view.

Windows are evaluated against a `now` supplied at call time:
- recent: performed within the last N days (default 7)
- thisMonth: same calendar month and year as now
- thisYear: same calendar year as now
- all: no constraint

A ticket without a performance time is treated as performed `now`, so it
appears in every window.

build_history() returns the filtered list together with the tab badges.
The active tab's count is the length of that returned list, so the badge
and the list can never disagree.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from record_core.types import Ticket
from record_core.visits import performance_sort_key

DEFAULT_RECENT_DAYS = 7


class TimeWindow(str, Enum):
    """History filter tabs."""

    ALL = "all"
    RECENT = "recent"
    THIS_MONTH = "thisMonth"
    THIS_YEAR = "thisYear"


WINDOW_LABELS: dict[TimeWindow, str] = {
    TimeWindow.ALL: "전체",
    TimeWindow.RECENT: "최근 7일",
    TimeWindow.THIS_MONTH: "이번 달",
    TimeWindow.THIS_YEAR: "올해",
}


@dataclass(frozen=True)
class FilterOption:
    """
    One history filter tab.

    Attributes:
        window: The time window
        label: Display label
        count: Number of tickets in the window
        active: True for the selected tab
    """

    window: TimeWindow
    label: str
    count: int
    active: bool = False


@dataclass(frozen=True)
class HistoryView:
    """Filtered history list and its filter tabs."""

    tickets: list[Ticket]
    options: list[FilterOption]


def _align(value: datetime, now: datetime) -> datetime:
    """Bring value into the same timezone awareness as now."""
    if value.tzinfo is None and now.tzinfo is not None:
        return value.replace(tzinfo=now.tzinfo)
    if value.tzinfo is not None and now.tzinfo is None:
        return value.astimezone().replace(tzinfo=None)
    if value.tzinfo is not None and now.tzinfo is not None:
        return value.astimezone(now.tzinfo)
    return value


def window_predicate(
    window: TimeWindow,
    now: datetime,
    recent_days: int = DEFAULT_RECENT_DAYS,
) -> Callable[[Ticket], bool]:
    """
    Build the membership test for a window.

    Args:
        window: Window to test against
        now: Reference time
        recent_days: Length of the recent window in days

    Returns:
        Pure predicate over tickets
    """
    window = TimeWindow(window)
    cutoff = now - timedelta(days=recent_days)

    def performed(ticket: Ticket) -> datetime:
        if ticket.performed_at is None:
            return now
        return _align(ticket.performed_at, now)

    if window == TimeWindow.RECENT:
        return lambda t: performed(t) >= cutoff
    if window == TimeWindow.THIS_MONTH:
        return lambda t: (
            performed(t).month == now.month and performed(t).year == now.year
        )
    if window == TimeWindow.THIS_YEAR:
        return lambda t: performed(t).year == now.year
    return lambda t: True


def apply_window(
    tickets: Iterable[Ticket],
    window: TimeWindow,
    now: datetime | None = None,
    recent_days: int = DEFAULT_RECENT_DAYS,
) -> list[Ticket]:
    """
    Filter tickets to a window, newest performance first.

    Tickets without a performance time sort last.
    """
    now = now or datetime.now()
    predicate = window_predicate(window, now, recent_days)
    matching = [t for t in tickets if predicate(t)]
    return sorted(matching, key=performance_sort_key, reverse=True)


def build_history(
    tickets: Iterable[Ticket],
    active: TimeWindow = TimeWindow.ALL,
    now: datetime | None = None,
    recent_days: int = DEFAULT_RECENT_DAYS,
) -> HistoryView:
    """
    Build the history list for the active window plus all filter tabs.

    Args:
        tickets: Canonical tickets
        active: Selected window
        now: Reference time (defaults to datetime.now())
        recent_days: Length of the recent window in days

    Returns:
        HistoryView whose active option count equals len(tickets)
    """
    now = now or datetime.now()
    active = TimeWindow(active)
    tickets = list(tickets)
    shown = apply_window(tickets, active, now, recent_days)

    options = []
    for window in TimeWindow:
        if window == active:
            count = len(shown)
        else:
            predicate = window_predicate(window, now, recent_days)
            count = sum(1 for t in tickets if predicate(t))
        label = WINDOW_LABELS[window]
        if window == TimeWindow.RECENT and recent_days != DEFAULT_RECENT_DAYS:
            label = f"최근 {recent_days}일"
        options.append(
            FilterOption(window=window, label=label, count=count, active=window == active)
        )

    return HistoryView(tickets=shown, options=options)


def filter_options(
    tickets: Iterable[Ticket],
    active: TimeWindow | str,
    now: datetime | None = None,
    recent_days: int = DEFAULT_RECENT_DAYS,
) -> list[FilterOption]:
    """Tab badges only. See build_history()."""
    return build_history(tickets, active, now, recent_days).options
