"""
Result envelopes shared by every remote collaborator.

Each collaborator call answers with a ServiceResult rather than a bare
payload, mirroring the {success, data, error} envelope the ticket API
returns. Payload types that are specific to one call (like snapshots,
liked-user lists) are defined here as well so that implementations and
consumers agree on a single shape.

All types use @dataclass; Pydantic models are reserved for parsing wire
responses inside the HTTP client.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ServiceError:
    """
    Error detail attached to a failed ServiceResult.

    Attributes:
        message: Human-readable, user-safe description of the failure.
        code: Optional machine-readable error code from the server.
    """

    message: str
    code: str | None = None


@dataclass(frozen=True)
class ServiceResult:
    """
    Outcome of a single collaborator call.

    Attributes:
        success: True if the collaborator reported success.
        data: Call-specific payload. Only meaningful when success is True.
        error: Error detail. Usually set when success is False.
    """

    success: bool
    data: Any = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "ServiceResult":
        """Build a successful result carrying data."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, code: str | None = None) -> "ServiceResult":
        """Build a failed result with an error message."""
        return cls(success=False, error=ServiceError(message=message, code=code))

    @property
    def error_message(self) -> str | None:
        """Error message if one was reported."""
        return self.error.message if self.error else None


@dataclass(frozen=True)
class LikeSnapshot:
    """
    Server-confirmed engagement state for one ticket.

    Attributes:
        is_liked: Whether the requesting user now likes the ticket.
        like_count: Total like count as computed by the server.
    """

    is_liked: bool
    like_count: int


@dataclass(frozen=True)
class LikedUsers:
    """
    Users who liked a ticket.

    Attributes:
        liked_user_ids: Identifiers of the users, in server order.
    """

    liked_user_ids: list[str] = field(default_factory=list)
