"""
Error taxonomy for the ticket engine.

- ValidationError: A local check failed (e.g. empty title). Blocks a commit
  and never reaches a remote collaborator.
- RemoteFailure: A collaborator reported success=False or raised. Always
  non-fatal; callers surface it as a notice and keep state for retry.

Lookups that find nothing (no visit ordinal, no liked users) are not
errors: they resolve to None or an empty list and are never raised.
"""


class ValidationError(Exception):
    """
    Raised when a staged edit fails local validation.

    Attributes:
        field: Name of the offending field
        message: User-facing description
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class RemoteFailure(Exception):
    """
    Raised when a remote collaborator call fails.

    Covers both reported failures (success=False) and transport errors,
    which are wrapped so that no raw transport exception crosses into the
    coordinators.

    Attributes:
        operation: Name of the collaborator operation (e.g. "update_ticket")
        message: User-safe description of the failure
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")
