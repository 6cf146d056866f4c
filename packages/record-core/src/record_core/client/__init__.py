"""
Ticket API client.

Exports:
    RecordApiClient: httpx-based implementation of the collaborator protocols
    BaseUrlImageResolver: Relative image path resolution

Wiring helpers live in record_core.client.factory.
"""

from record_core.client.api_client import RecordApiClient
from record_core.client.images import BaseUrlImageResolver

__all__ = ["BaseUrlImageResolver", "RecordApiClient"]
