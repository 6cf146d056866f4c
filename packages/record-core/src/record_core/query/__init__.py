"""
Filter and query engine for the archive views.

Exports:
    TimeWindow / FilterOption / HistoryView: History tab filters
    window_predicate / apply_window / build_history / filter_options:
        Window evaluation
    SearchCriteria: Immutable search criteria and local predicate
    RawSearchResult: Search API item schema
    map_search_result(s): Search item to Ticket conversion
"""

from record_core.query.search import (
    RawSearchResult,
    SearchCriteria,
    filter_tickets,
    genre_label,
    map_search_result,
    map_search_results,
    resolve_images,
)
from record_core.query.windows import (
    FilterOption,
    HistoryView,
    TimeWindow,
    apply_window,
    build_history,
    filter_options,
    window_predicate,
)

__all__ = [
    "FilterOption",
    "HistoryView",
    "RawSearchResult",
    "SearchCriteria",
    "TimeWindow",
    "apply_window",
    "build_history",
    "filter_options",
    "filter_tickets",
    "genre_label",
    "map_search_result",
    "map_search_results",
    "resolve_images",
    "window_predicate",
]
