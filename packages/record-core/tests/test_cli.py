"""
Tests for the record CLI.

Commands run against a RecordApiClient backed by a mock transport, so no
server is needed. The mock keeps a list of the requests it received.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner

from record_core.cli import main as cli_main
from record_core.cli import runtime
from record_core.cli.main import app
from record_core.client import RecordApiClient

from test_api_client import MockTransport

runner = CliRunner()


@pytest.fixture
def tickets_json():
    return [
        {
            "id": "t1",
            "userId": "u1",
            "title": "Hamlet",
            "venue": "Arts Center",
            "performedAt": "2024-01-01T19:00:00",
            "genre": "연극/뮤지컬",
            "status": "PUBLIC",
            "likeCount": 1,
        },
        {
            "id": "t2",
            "userId": "u1",
            "title": "Hamlet",
            "performedAt": "2024-03-01T19:00:00",
            "status": "PRIVATE",
        },
        {
            "id": "t3",
            "userId": "u1",
            "title": "Summer Live",
            "performedAt": "2024-02-01T19:00:00",
            "genre": "밴드",
        },
    ]


@pytest.fixture
def transport(tickets_json):
    """Mock API shared by every client the CLI creates."""
    return MockTransport(
        {
            ("GET", "/api/tickets"): {"json": {"success": True, "data": tickets_json}},
            ("PATCH", "/api/tickets/t1"): {"json": {"success": True}},
            ("DELETE", "/api/tickets/t1"): {"json": {"success": True}},
            ("PATCH", "/api/tickets/t1/visibility"): {"json": {"success": True}},
            ("POST", "/api/tickets/t1/like"): {
                "json": {"success": True, "data": {"isLiked": True, "likeCount": 2}}
            },
            ("GET", "/api/tickets/t1/likes"): {
                "json": {"success": True, "data": {"likedUserIds": ["u7"]}}
            },
            ("GET", "/api/tickets/search"): {
                "json": {
                    "success": True,
                    "data": [{"id": 5, "performanceTitle": "Summer Live", "genre": "BAND"}],
                }
            },
            ("GET", "/api/tickets/statistics"): {
                "json": {"success": True, "data": {"total": 3}}
            },
            ("GET", "/api/tickets/year-in-review"): {"json": {"success": False}},
        }
    )


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, transport):
    """Point the CLI at the mock API as user u1."""
    monkeypatch.setenv("RECORD_USER_ID", "u1")
    monkeypatch.setattr(cli_main, "configure_logging", lambda level: None)
    monkeypatch.setattr(
        runtime,
        "create_api_client",
        lambda settings: RecordApiClient(
            http=httpx.AsyncClient(transport=transport, base_url="http://test")
        ),
    )


def _requests(transport, method, path):
    return [r for r in transport.requests if r.method == method and r.url.path == path]


class TestTicketsCommands:
    """Tests for the tickets command group."""

    def test_list_json(self):
        result = runner.invoke(app, ["tickets", "list", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [t["id"] for t in data] == ["t2", "t3", "t1"]

    def test_list_filters_locally(self):
        result = runner.invoke(app, ["tickets", "list", "--json", "--genre", "BAND"])
        assert result.exit_code == 0
        assert [t["id"] for t in json.loads(result.stdout)] == ["t3"]

    def test_list_table(self, monkeypatch):
        monkeypatch.setenv("COLUMNS", "200")
        result = runner.invoke(app, ["tickets", "list"])
        assert result.exit_code == 0
        assert "Hamlet" in result.stdout
        assert "전체 3" in result.stdout

    def test_show_includes_visit(self):
        result = runner.invoke(app, ["tickets", "show", "t2", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["title"] == "Hamlet"
        assert data["visit"] == 2

    def test_show_unknown(self):
        result = runner.invoke(app, ["tickets", "show", "nope"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_like(self, transport):
        result = runner.invoke(app, ["tickets", "like", "t1"])
        assert result.exit_code == 0
        assert "Liked ticket t1 (2 likes)" in result.stdout
        assert len(_requests(transport, "POST", "/api/tickets/t1/like")) == 1

    def test_likes(self):
        result = runner.invoke(app, ["tickets", "likes", "t1"])
        assert result.exit_code == 0
        assert "u7" in result.stdout

    def test_edit(self, transport):
        result = runner.invoke(
            app, ["tickets", "edit", "t1", "--seat", "B-2", "--date", "2024-02-02"]
        )
        assert result.exit_code == 0
        assert "티켓이 수정되었습니다." in result.stdout

        (request,) = _requests(transport, "PATCH", "/api/tickets/t1")
        body = json.loads(request.content)
        assert body["seat"] == "B-2"
        assert body["performedAt"] == "2024-02-02T19:00:00"
        assert body["title"] == "Hamlet"

    def test_edit_blank_title_rejected(self, transport):
        result = runner.invoke(app, ["tickets", "edit", "t1", "--title", "  "])
        assert result.exit_code == 1
        assert "Title is required" in result.stdout
        assert _requests(transport, "PATCH", "/api/tickets/t1") == []

    def test_edit_bad_time_is_usage_error(self, transport):
        result = runner.invoke(app, ["tickets", "edit", "t1", "--time", "25:99"])
        assert result.exit_code == 2
        assert not isinstance(result.exception, ValueError)
        assert _requests(transport, "PATCH", "/api/tickets/t1") == []

    def test_edit_empty_review_is_kept(self, transport):
        result = runner.invoke(app, ["tickets", "edit", "t1", "--review", ""])
        assert result.exit_code == 0

        (request,) = _requests(transport, "PATCH", "/api/tickets/t1")
        body = json.loads(request.content)
        assert body["review"]["reviewText"] == ""

    def test_delete_requires_confirmation(self, transport):
        result = runner.invoke(app, ["tickets", "delete", "t1"], input="n\n")
        assert "Cancelled" in result.stdout
        assert _requests(transport, "DELETE", "/api/tickets/t1") == []

    def test_delete_yes(self, transport):
        result = runner.invoke(app, ["tickets", "delete", "t1", "--yes"])
        assert result.exit_code == 0
        assert "티켓이 삭제되었습니다." in result.stdout
        assert len(_requests(transport, "DELETE", "/api/tickets/t1")) == 1

    def test_privacy(self, transport):
        result = runner.invoke(app, ["tickets", "privacy", "t1", "PRIVATE"])
        assert result.exit_code == 0
        (request,) = _requests(transport, "PATCH", "/api/tickets/t1/visibility")
        assert json.loads(request.content) == {"status": "PRIVATE"}

    def test_missing_user(self, monkeypatch):
        monkeypatch.delenv("RECORD_USER_ID")
        result = runner.invoke(app, ["tickets", "list"])
        assert result.exit_code == 1
        assert "RECORD_USER_ID" in result.stdout


class TestArchiveCommands:
    """Tests for search and statistics commands."""

    def test_search_json(self, transport):
        result = runner.invoke(app, ["search", "--genre", "BAND", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data[0]["title"] == "Summer Live"
        assert data[0]["genre"] == "밴드"
        (request,) = _requests(transport, "GET", "/api/tickets/search")
        assert request.url.params["genre"] == "BAND"
        assert _requests(transport, "GET", "/api/tickets") == []

    def test_search_bad_range(self):
        result = runner.invoke(app, ["search", "--from", "2024-02-01", "--to", "2024-01-01"])
        assert result.exit_code == 1

    def test_stats(self, transport):
        result = runner.invoke(app, ["stats", "--year", "2023"])
        assert result.exit_code == 0
        assert "total" in result.stdout
        (request,) = _requests(transport, "GET", "/api/tickets/statistics")
        assert request.url.params["year"] == "2023"

    def test_year_in_review_unavailable(self):
        result = runner.invoke(app, ["year-in-review", "--year", "2023"])
        assert result.exit_code == 1
        assert "unavailable" in result.stdout
