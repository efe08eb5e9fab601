"""Record workflow rules."""

from asoniped_backend.workflow.phases import (
    ADMIN_ACTIONS,
    MODIFICATION_ACTIONS,
    TRANSITIONS,
    RecordAction,
    Transition,
    get_transition,
    is_allowed,
    phase3_action_for,
)

__all__ = [
    "ADMIN_ACTIONS",
    "MODIFICATION_ACTIONS",
    "RecordAction",
    "TRANSITIONS",
    "Transition",
    "get_transition",
    "is_allowed",
    "phase3_action_for",
]
