"""Tests for the canonical collection and the remote-call boundary."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from record_protocols import ServiceResult, TicketSourceProtocol

from record_core.collection import TicketCollection
from record_core.exceptions import RemoteFailure
from record_core.remote import call_remote
from record_core.types import Ticket


def _ticket(ticket_id, title="Hamlet"):
    return Ticket(id=ticket_id, user_id="u1", title=title)


@pytest.fixture
def source():
    """Create mock ticket source."""
    source = MagicMock(spec=TicketSourceProtocol)
    source.list_tickets = AsyncMock(
        return_value=ServiceResult.ok([_ticket("a"), _ticket("b")])
    )
    return source


class TestCallRemote:
    """Tests for call_remote()."""

    @pytest.mark.asyncio
    async def test_returns_data(self):
        async def call():
            return ServiceResult.ok({"x": 1})

        assert await call_remote("op", call()) == {"x": 1}

    @pytest.mark.asyncio
    async def test_reported_failure(self):
        async def call():
            return ServiceResult.fail("Not allowed", code="FORBIDDEN")

        with pytest.raises(RemoteFailure) as exc_info:
            await call_remote("update_ticket", call())
        assert exc_info.value.operation == "update_ticket"
        assert exc_info.value.message == "Not allowed"

    @pytest.mark.asyncio
    async def test_failure_without_message(self):
        async def call():
            return ServiceResult(success=False)

        with pytest.raises(RemoteFailure) as exc_info:
            await call_remote("op", call())
        assert exc_info.value.message == "Request failed"

    @pytest.mark.asyncio
    async def test_raised_exception_wrapped(self):
        async def call():
            raise ConnectionError("reset by peer")

        with pytest.raises(RemoteFailure) as exc_info:
            await call_remote("op", call())
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert "reset by peer" not in exc_info.value.message


class TestTicketCollection:
    """Tests for TicketCollection."""

    @pytest.mark.asyncio
    async def test_load(self, source):
        collection = TicketCollection()
        await collection.load(source, "u1")

        assert [t.id for t in collection] == ["a", "b"]
        source.list_tickets.assert_awaited_once_with("u1")

    @pytest.mark.asyncio
    async def test_failed_load_keeps_contents(self, source):
        collection = TicketCollection([_ticket("old")])
        source.list_tickets = AsyncMock(return_value=ServiceResult.fail("down"))

        with pytest.raises(RemoteFailure):
            await collection.load(source, "u1")
        assert [t.id for t in collection] == ["old"]

    def test_replace_keeps_position(self):
        collection = TicketCollection([_ticket("a"), _ticket("b"), _ticket("c")])
        assert collection.replace(_ticket("b", title="Changed")) is True
        assert [t.id for t in collection] == ["a", "b", "c"]
        assert collection.get("b").title == "Changed"

    def test_replace_unknown_is_noop(self):
        collection = TicketCollection([_ticket("a")])
        assert collection.replace(_ticket("z")) is False
        assert len(collection) == 1

    def test_snapshot_is_stable(self):
        collection = TicketCollection([_ticket("a"), _ticket("b")])
        snapshot = collection.snapshot()
        collection.remove("a")
        assert [t.id for t in snapshot] == ["a", "b"]
        assert [t.id for t in collection.snapshot()] == ["b"]

    def test_remove(self):
        collection = TicketCollection([_ticket("a")])
        assert collection.remove("a") is True
        assert collection.remove("a") is False
        assert collection.get("a") is None
