"""
Record Core Library

Client-side state engine for a personal ticket archive. This package
reconciles the server's canonical tickets with local edits and engagement:

- Data Types: Ticket, Review, TicketStatus
- Collection: In-memory canonical tickets of one owner
- Edit overlay: Staged field edits, validation and commit payloads
- Engagement: Server-confirmed like toggling
- Query: Time windows, search criteria and search result mapping
- Coordinators: Ticket detail session and archive view
- CLI infrastructure: Typer-based command structure
"""

__version__ = "0.1.0"

from record_core.collection import TicketCollection
from record_core.config import Settings
from record_core.exceptions import RemoteFailure, ValidationError
from record_core.types import (
    EDITABLE_FIELDS,
    Review,
    Ticket,
    TicketId,
    TicketStatus,
    UserId,
)

__all__ = [
    "__version__",
    # Data Types
    "Ticket",
    "TicketId",
    "TicketStatus",
    "Review",
    "UserId",
    "EDITABLE_FIELDS",
    # Collection
    "TicketCollection",
    # Errors
    "RemoteFailure",
    "ValidationError",
    # Configuration
    "Settings",
]
