"""Record phase workflow.

Each administrative action moves a record from one of its allowed
``(phase, status)`` pairs to a single target pair. The table is applied by
the record repository as a conditional update, so the checks here and the
``WHERE`` clause issued to the database always agree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from asoniped_backend.shared import RecordPhase, RecordStatus


class RecordAction(StrEnum):
    """Workflow actions that change the phase or status of a record."""

    SUBMIT = "submit"
    APPROVE_PHASE1 = "approve-phase1"
    REJECT_PHASE1 = "reject-phase1"
    REQUEST_PHASE1_MODIFICATION = "request-phase1-modification"
    PHASE1_RESUBMIT = "phase1-resubmit"
    COMPLETE_PHASE3 = "complete-phase3"
    REQUEST_PHASE3_MODIFICATION = "request-phase3-modification"
    PHASE3_RESUBMIT = "phase3-resubmit"
    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class Transition:
    """Allowed source state and resulting state of an action."""

    action: RecordAction
    phase: RecordPhase
    from_statuses: frozenset[RecordStatus]
    to_phase: RecordPhase
    to_status: RecordStatus

    def allows(self, phase: RecordPhase, status: RecordStatus) -> bool:
        """Return whether a record in ``(phase, status)`` may take this action."""
        return phase == self.phase and status in self.from_statuses


def _transition(
    action: RecordAction,
    phase: RecordPhase,
    from_statuses: set[RecordStatus],
    to_phase: RecordPhase,
    to_status: RecordStatus,
) -> Transition:
    return Transition(action, phase, frozenset(from_statuses), to_phase, to_status)


TRANSITIONS: dict[RecordAction, Transition] = {
    RecordAction.SUBMIT: _transition(
        RecordAction.SUBMIT,
        RecordPhase.PHASE1,
        {RecordStatus.DRAFT},
        RecordPhase.PHASE1,
        RecordStatus.PENDING,
    ),
    RecordAction.APPROVE_PHASE1: _transition(
        RecordAction.APPROVE_PHASE1,
        RecordPhase.PHASE1,
        {RecordStatus.PENDING},
        RecordPhase.PHASE2,
        RecordStatus.APPROVED,
    ),
    RecordAction.REJECT_PHASE1: _transition(
        RecordAction.REJECT_PHASE1,
        RecordPhase.PHASE1,
        {RecordStatus.PENDING},
        RecordPhase.PHASE1,
        RecordStatus.REJECTED,
    ),
    RecordAction.REQUEST_PHASE1_MODIFICATION: _transition(
        RecordAction.REQUEST_PHASE1_MODIFICATION,
        RecordPhase.PHASE1,
        {RecordStatus.PENDING},
        RecordPhase.PHASE1,
        RecordStatus.NEEDS_MODIFICATION,
    ),
    RecordAction.PHASE1_RESUBMIT: _transition(
        RecordAction.PHASE1_RESUBMIT,
        RecordPhase.PHASE1,
        {RecordStatus.NEEDS_MODIFICATION},
        RecordPhase.PHASE1,
        RecordStatus.PENDING,
    ),
    RecordAction.COMPLETE_PHASE3: _transition(
        RecordAction.COMPLETE_PHASE3,
        RecordPhase.PHASE2,
        {RecordStatus.APPROVED},
        RecordPhase.PHASE3,
        RecordStatus.PENDING,
    ),
    RecordAction.REQUEST_PHASE3_MODIFICATION: _transition(
        RecordAction.REQUEST_PHASE3_MODIFICATION,
        RecordPhase.PHASE3,
        {RecordStatus.PENDING},
        RecordPhase.PHASE3,
        RecordStatus.NEEDS_MODIFICATION,
    ),
    RecordAction.PHASE3_RESUBMIT: _transition(
        RecordAction.PHASE3_RESUBMIT,
        RecordPhase.PHASE3,
        {RecordStatus.NEEDS_MODIFICATION},
        RecordPhase.PHASE3,
        RecordStatus.PENDING,
    ),
    RecordAction.APPROVE: _transition(
        RecordAction.APPROVE,
        RecordPhase.PHASE3,
        {RecordStatus.PENDING},
        RecordPhase.COMPLETED,
        RecordStatus.ACTIVE,
    ),
    RecordAction.REJECT: _transition(
        RecordAction.REJECT,
        RecordPhase.PHASE3,
        {RecordStatus.PENDING},
        RecordPhase.PHASE3,
        RecordStatus.REJECTED,
    ),
}

# Actions an administrator triggers through ``POST /records/{id}/{action}``.
ADMIN_ACTIONS: frozenset[RecordAction] = frozenset(
    {
        RecordAction.APPROVE_PHASE1,
        RecordAction.REJECT_PHASE1,
        RecordAction.REQUEST_PHASE1_MODIFICATION,
        RecordAction.REQUEST_PHASE3_MODIFICATION,
        RecordAction.APPROVE,
        RecordAction.REJECT,
    }
)

MODIFICATION_ACTIONS: frozenset[RecordAction] = frozenset(
    {
        RecordAction.REQUEST_PHASE1_MODIFICATION,
        RecordAction.REQUEST_PHASE3_MODIFICATION,
    }
)


def get_transition(action: RecordAction) -> Transition:
    """Return the transition rule for ``action``."""
    return TRANSITIONS[action]


def phase3_action_for(phase: RecordPhase, status: RecordStatus) -> RecordAction:
    """Pick the phase 3 submission action matching the current state.

    First submissions start from phase 2; later ones answer a modification
    request. Any other state falls back to the first submission so the
    conditional update reports the conflict.
    """
    if phase == RecordPhase.PHASE3 and status == RecordStatus.NEEDS_MODIFICATION:
        return RecordAction.PHASE3_RESUBMIT
    return RecordAction.COMPLETE_PHASE3


def is_allowed(action: RecordAction, phase: RecordPhase, status: RecordStatus) -> bool:
    """Return whether ``action`` applies to a record in ``(phase, status)``."""
    return TRANSITIONS[action].allows(phase, status)


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
