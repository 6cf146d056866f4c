"""
View coordinators.

Exports:
    TicketDetailSession: Detail view state machine
    SessionMode / CardFace / TransientUI: Session substates
    Notice / NoticeLevel: User-visible transition results
    ArchiveView / ArchiveTab: Archive page coordinator
"""

from record_core.coordinator.archive import ArchiveTab, ArchiveView
from record_core.coordinator.session import (
    CardFace,
    Notice,
    NoticeLevel,
    SessionMode,
    TicketDetailSession,
    TransientUI,
)

__all__ = [
    "ArchiveTab",
    "ArchiveView",
    "CardFace",
    "Notice",
    "NoticeLevel",
    "SessionMode",
    "TicketDetailSession",
    "TransientUI",
]
