"""
Protocol definitions for the ticket archive engine.

This package provides the collaborator interfaces the engine depends on.
It has zero dependencies on other record-* packages.

Key protocols:
- TicketSourceProtocol: Read a user's canonical tickets
- TicketMutationProtocol: Update, delete and change visibility
- EngagementProtocol: Like toggling and liked-user lookup
- SearchProtocol: Server-side multi-field search
- StatisticsProtocol: Pre-aggregated statistics and year-in-review
- ImageResolverProtocol: Raw image reference to display URL

Key types:
- ServiceResult / ServiceError: The {success, data, error} envelope
- LikeSnapshot: Server-confirmed like state
- LikedUsers: Users who liked a ticket
"""

from record_protocols.services import (
    EngagementProtocol,
    ImageResolverProtocol,
    SearchProtocol,
    StatisticsProtocol,
    TicketMutationProtocol,
    TicketSourceProtocol,
)
from record_protocols.types import LikedUsers, LikeSnapshot, ServiceError, ServiceResult

__all__ = [
    # Protocols
    "TicketSourceProtocol",
    "TicketMutationProtocol",
    "EngagementProtocol",
    "SearchProtocol",
    "StatisticsProtocol",
    "ImageResolverProtocol",
    # Data types
    "ServiceResult",
    "ServiceError",
    "LikeSnapshot",
    "LikedUsers",
]
