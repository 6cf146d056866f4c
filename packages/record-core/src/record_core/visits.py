"""
Visit ordinal ("Nth visit") resolution.

A visit group is every ticket with the same title and owner as a given
ticket. Matching is strict equality: case-sensitive and untrimmed. The
group is ordered ascending by performance time with Python's stable sort,
so tickets sharing a timestamp keep their collection order and the ordinal
never changes between reads of an unchanged collection.

Tickets without a performance time sort as the Unix epoch, i.e. first.
"""

from collections.abc import Iterable

from record_core.types import Ticket


def performance_sort_key(ticket: Ticket) -> float:
    """Performance time as a POSIX timestamp, 0.0 when unknown."""
    if ticket.performed_at is None:
        return 0.0
    return ticket.performed_at.timestamp()


def visit_group(ticket: Ticket, collection: Iterable[Ticket]) -> list[Ticket]:
    """
    Tickets sharing ticket's title and owner, oldest performance first.

    Args:
        ticket: Ticket whose group to build
        collection: Tickets to search

    Returns:
        Sorted group (may not contain ticket itself)
    """
    matching = [
        t
        for t in collection
        if t.title == ticket.title and t.user_id == ticket.user_id
    ]
    return sorted(matching, key=performance_sort_key)


def resolve_ordinal(ticket: Ticket, collection: Iterable[Ticket]) -> int | None:
    """
    1-based visit number of ticket within its group.

    Returns:
        The ordinal, or None if ticket is not in the collection
    """
    for position, member in enumerate(visit_group(ticket, collection)):
        if member.id == ticket.id:
            return position + 1
    return None
