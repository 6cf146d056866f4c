"""
Tests for multi-field search.

These tests verify that:
- Queries only carry populated criteria plus the fixed sort
- Search API items map to canonical tickets (genre labels, visibility,
  performance date, images, reviews)
- Unresolvable images and malformed items are skipped, not fatal
- The local predicate applies every criterion with AND semantics
"""

from datetime import date, datetime

import pytest

from record_core.client import BaseUrlImageResolver
from record_core.exceptions import ValidationError
from record_core.query import (
    RawSearchResult,
    SearchCriteria,
    filter_tickets,
    genre_label,
    map_search_result,
    map_search_results,
    resolve_images,
)
from record_core.types import Ticket, TicketStatus

NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def resolver():
    return BaseUrlImageResolver("https://cdn.example.com")


@pytest.fixture
def band_item():
    """Search API item for a band performance."""
    return {
        "id": 42,
        "userId": "u1",
        "performanceTitle": "Summer Live",
        "title": "ignored",
        "artist": "The Band",
        "venue": "Rolling Hall",
        "viewDate": "2024-05-01",
        "genre": "BAND",
        "isPublic": True,
        "imageUrl": "/uploads/42.jpg",
        "reviewText": "Loud",
        "likeCount": 2,
    }


class TestSearchCriteria:
    """Tests for query assembly and validation."""

    def test_empty_criteria_only_sort(self):
        assert SearchCriteria().to_query() == {"sortBy": "viewDate", "sortDirection": "DESC"}
        assert SearchCriteria().is_empty()

    def test_populated_criteria(self):
        criteria = SearchCriteria(
            title="Hamlet",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
            genre="MUSICAL",
            venue="Arts Center",
            artist="Company",
        )
        assert criteria.to_query() == {
            "performanceTitle": "Hamlet",
            "startDate": "2024-01-01",
            "endDate": "2024-12-31",
            "genre": "MUSICAL",
            "venue": "Arts Center",
            "artist": "Company",
            "sortBy": "viewDate",
            "sortDirection": "DESC",
        }

    def test_blank_strings_are_unset(self):
        query = SearchCriteria(title="", venue="").to_query()
        assert "performanceTitle" not in query
        assert "venue" not in query

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError):
            SearchCriteria(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

    def test_same_day_range_allowed(self):
        day = date(2024, 2, 1)
        assert SearchCriteria(start_date=day, end_date=day).to_query()["startDate"] == "2024-02-01"


class TestMatches:
    """Tests for the local predicate."""

    @pytest.fixture
    def ticket(self):
        return Ticket(
            id="t1",
            user_id="u1",
            title="Hamlet",
            artist="Royal Company",
            venue="Seoul Arts Center",
            performed_at=datetime(2024, 5, 1, 19, 30),
            genre="연극/뮤지컬",
        )

    def test_empty_criteria_match_all(self, ticket):
        assert SearchCriteria().matches(ticket)

    def test_all_criteria_and(self, ticket):
        criteria = SearchCriteria(title="Ham", venue="Arts", artist="Royal", genre="PLAY")
        assert criteria.matches(ticket)
        assert not SearchCriteria(title="Ham", venue="Blue").matches(ticket)

    def test_case_sensitive(self, ticket):
        assert not SearchCriteria(title="hamlet").matches(ticket)

    def test_inclusive_date_bounds(self, ticket):
        day = date(2024, 5, 1)
        assert SearchCriteria(start_date=day, end_date=day).matches(ticket)
        assert not SearchCriteria(start_date=date(2024, 5, 2)).matches(ticket)

    def test_date_bound_excludes_undated(self):
        undated = Ticket(id="u", user_id="u1", title="Hamlet")
        assert not SearchCriteria(end_date=date(2024, 5, 1)).matches(undated)

    def test_genre_label_or_code(self, ticket):
        assert SearchCriteria(genre="연극/뮤지컬").matches(ticket)
        assert not SearchCriteria(genre="BAND").matches(ticket)

    def test_filter_tickets_keeps_order(self, ticket):
        other = Ticket(id="t2", user_id="u1", title="Hamlet II")
        result = filter_tickets([other, ticket], SearchCriteria(title="Hamlet"))
        assert [t.id for t in result] == ["t2", "t1"]


class TestGenreLabel:

    @pytest.mark.parametrize(
        "code,label",
        [("BAND", "밴드"), ("MUSICAL", "연극/뮤지컬"), ("PLAY", "연극/뮤지컬"), ("JAZZ", "JAZZ")],
    )
    def test_codes(self, code, label):
        assert genre_label(code) == label

    def test_empty(self):
        assert genre_label(None) is None
        assert genre_label("") is None


class TestMapSearchResult:
    """Tests for search item to ticket conversion."""

    def test_band_item(self, band_item, resolver):
        ticket = map_search_result(RawSearchResult.model_validate(band_item), "u1", resolver, NOW)

        assert ticket.id == "42"
        assert ticket.title == "Summer Live"
        assert ticket.genre == "밴드"
        assert ticket.status == TicketStatus.PUBLIC
        assert ticket.performed_at.date() == date(2024, 5, 1)
        assert ticket.images == ("https://cdn.example.com/uploads/42.jpg",)
        assert ticket.review.review_text == "Loud"
        assert ticket.like_count == 2

    def test_private_and_fallbacks(self, resolver):
        raw = RawSearchResult.model_validate(
            {"id": "7", "title": "Hamlet", "isPublic": False, "genre": "PLAY"}
        )
        ticket = map_search_result(raw, "searcher", resolver, NOW)

        assert ticket.title == "Hamlet"
        assert ticket.user_id == "searcher"
        assert ticket.status == TicketStatus.PRIVATE
        assert ticket.genre == "연극/뮤지컬"
        assert ticket.performed_at == NOW
        assert ticket.images == ()
        assert ticket.review is None

    def test_poster_after_image(self, resolver):
        raw = RawSearchResult.model_validate(
            {"id": 1, "imageUrl": "https://img.example.com/a.jpg", "posterUrl": "p.jpg"}
        )
        ticket = map_search_result(raw, "u1", resolver, NOW)
        assert ticket.images == (
            "https://img.example.com/a.jpg",
            "https://cdn.example.com/p.jpg",
        )

    def test_timestamp_with_zulu(self):
        raw = RawSearchResult.model_validate({"id": 1, "viewDate": "2024-05-01T19:30:00Z"})
        assert raw.viewDate.hour == 19
        assert raw.viewDate.utcoffset().total_seconds() == 0


class TestResolveImages:
    """Tests for image resolution during mapping."""

    def test_skips_blank_and_unresolved(self):
        class PickyResolver:
            def resolve(self, raw_url):
                return None if raw_url == "bad" else f"https://x/{raw_url}"

        assert resolve_images(PickyResolver(), ["a", None, "", "bad", "b"]) == (
            "https://x/a",
            "https://x/b",
        )

    def test_skips_raising_resolver(self):
        class BrokenResolver:
            def resolve(self, raw_url):
                if raw_url == "boom":
                    raise RuntimeError("storage unavailable")
                return raw_url

        assert resolve_images(BrokenResolver(), ["boom", "ok"]) == ("ok",)


class TestMapSearchResults:
    """Tests for batch mapping."""

    def test_keeps_server_order(self, resolver):
        items = [
            {"id": 1, "title": "Old", "viewDate": "2020-01-01"},
            {"id": 2, "title": "New", "viewDate": "2024-01-01"},
        ]
        tickets = map_search_results(items, "u1", resolver, NOW)
        assert [t.id for t in tickets] == ["1", "2"]

    def test_skips_malformed_items(self, band_item, resolver):
        items = [band_item, {"title": "no id"}, {"id": 3, "likeCount": "many"}]
        tickets = map_search_results(items, "u1", resolver, NOW)
        assert [t.id for t in tickets] == ["42"]
