"""
Factory functions for wiring the archive engine.

The CLI builds everything through these functions so that commands never
construct HTTP clients or coordinators directly.
"""

import httpx

from record_core.client.api_client import RecordApiClient
from record_core.client.images import BaseUrlImageResolver
from record_core.collection import TicketCollection
from record_core.config import Settings
from record_core.coordinator import ArchiveView, TicketDetailSession
from record_core.engagement import EngagementMutator


def create_api_client(
    settings: Settings,
    http: httpx.AsyncClient | None = None,
) -> RecordApiClient:
    """
    Create a ticket API client.

    Args:
        settings: Connection settings
        http: Optional pre-configured httpx client. If None, a new client
            is created from settings.api_url and settings.timeout_seconds.

    Returns:
        RecordApiClient ready for use. The caller owns the httpx client and
        must close it (await client.http.aclose()).
    """
    if http is None:
        http = httpx.AsyncClient(
            base_url=settings.api_url, timeout=settings.timeout_seconds
        )
    return RecordApiClient(http=http)


def create_archive(settings: Settings, client: RecordApiClient) -> ArchiveView:
    """
    Create an archive view with its shared detail session.

    The archive, the detail session and the engagement mutator all share
    one TicketCollection.

    Example:
        settings = Settings()
        client = create_api_client(settings)
        archive = create_archive(settings, client)
        await archive.refresh()
        session = archive.open_detail(archive.collection.snapshot()[0])
    """
    user_id = settings.user_id or None
    collection = TicketCollection()
    engagement = EngagementMutator(
        service=client, serialize=settings.serialize_like_toggles
    )
    detail = TicketDetailSession(
        mutations=client,
        engagement=engagement,
        collection=collection,
        user_id=user_id,
    )
    return ArchiveView(
        source=client,
        search_service=client,
        statistics=client,
        resolver=BaseUrlImageResolver(settings.image_base_url),
        user_id=user_id,
        collection=collection,
        detail=detail,
        recent_days=settings.recent_window_days,
    )
