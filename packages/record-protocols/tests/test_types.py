"""Tests for the shared result types and protocol checks."""

import dataclasses

import pytest

from record_protocols import (
    EngagementProtocol,
    ImageResolverProtocol,
    LikedUsers,
    LikeSnapshot,
    ServiceError,
    ServiceResult,
)


class TestServiceResult:
    """Tests for ServiceResult."""

    def test_ok(self):
        result = ServiceResult.ok([1, 2])
        assert result.success is True
        assert result.data == [1, 2]
        assert result.error is None
        assert result.error_message is None

    def test_fail(self):
        result = ServiceResult.fail("Denied", code="FORBIDDEN")
        assert result.success is False
        assert result.data is None
        assert result.error == ServiceError(message="Denied", code="FORBIDDEN")
        assert result.error_message == "Denied"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ServiceResult.ok().success = False


class TestPayloadTypes:

    def test_like_snapshot_equality(self):
        assert LikeSnapshot(True, 4) == LikeSnapshot(is_liked=True, like_count=4)

    def test_liked_users_default_empty(self):
        assert LikedUsers().liked_user_ids == []


class TestRuntimeCheckable:
    """Protocols are usable with isinstance() for structural checks."""

    def test_resolver_structural_match(self):
        class Resolver:
            def resolve(self, raw_url):
                return raw_url

        assert isinstance(Resolver(), ImageResolverProtocol)

    def test_missing_method_fails(self):
        class HalfEngagement:
            async def toggle_like(self, ticket_id, user_id):
                return ServiceResult.ok()

        assert not isinstance(HalfEngagement(), EngagementProtocol)
