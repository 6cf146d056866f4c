"""
Engagement (like/unlike) handling.

Exports:
    EngagementMutator: Server-confirmed like toggling with stale guards
    EngagementState: Like state of a local ticket
    TicketHolder: Slot for the locally held ticket snapshot
"""

from record_core.engagement.mutator import EngagementMutator, EngagementState, TicketHolder

__all__ = ["EngagementMutator", "EngagementState", "TicketHolder"]
