"""
Edit staging buffer.

Exports:
    EditOverlay: Immutable partial mapping of staged ticket fields
    ReviewDraft: Staged review change
    begin_edit / set_field / discard: Overlay lifecycle
    effective_value: Overlay-else-canonical field resolution
    flatten: Candidate record for a commit, with title validation
    to_update_payload: Wire body for the mutation service
    with_performed_date / with_performed_time: Date and time pickers
"""

from record_core.edit.overlay import (
    EditOverlay,
    ReviewDraft,
    begin_edit,
    discard,
    effective_value,
    flatten,
    resolve_review_text,
    set_field,
    to_update_payload,
    with_performed_date,
    with_performed_time,
)

__all__ = [
    "EditOverlay",
    "ReviewDraft",
    "begin_edit",
    "discard",
    "effective_value",
    "flatten",
    "resolve_review_text",
    "set_field",
    "to_update_payload",
    "with_performed_date",
    "with_performed_time",
]
