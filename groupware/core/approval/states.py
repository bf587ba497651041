"""Approval workflow states and transitions.

State Machine Diagram:

                 ┌──────────┐
                 │ PENDING  │ ← Initial state (steps being decided in order)
                 └────┬─────┘
                      │
        ┌─────────────┼──────────────┐
        │             │              │
   ┌────▼─────┐  ┌────▼─────┐  ┌─────▼─────┐
   │ APPROVED │  │ REJECTED │  │ CANCELLED │
   └──────────┘  └──────────┘  └───────────┘
   last step      any step       requester
   approved       rejected       cancels

Steps move once, from PENDING to APPROVED or REJECTED. Approving a step that
is not the last pending one leaves the approval PENDING.
"""

from enum import Enum
from typing import Set, Dict, Optional, NamedTuple


class ApprovalStatus(str, Enum):
    """Status of an approval request."""
    
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class StepStatus(str, Enum):
    """Status of a single approval step."""
    
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Decision(str, Enum):
    """Decisions an approver can record on the current step."""
    
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalTransition(str, Enum):
    """Events that move an approval between statuses."""
    
    APPROVE_FINAL_STEP = "approve_final_step"  # PENDING → APPROVED
    REJECT_STEP = "reject_step"                # PENDING → REJECTED
    CANCEL = "cancel"                          # PENDING → CANCELLED (requester only)


class TransitionRule(NamedTuple):
    """Defines a valid status transition."""
    from_state: ApprovalStatus
    to_state: ApprovalStatus
    transition: ApprovalTransition


TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.APPROVED, ApprovalTransition.APPROVE_FINAL_STEP),
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.REJECTED, ApprovalTransition.REJECT_STEP),
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.CANCELLED, ApprovalTransition.CANCEL),
]

VALID_TRANSITIONS: Dict[ApprovalStatus, Set[ApprovalTransition]] = {}
TRANSITION_TARGETS: Dict[tuple[ApprovalStatus, ApprovalTransition], TransitionRule] = {}

for rule in TRANSITION_RULES:
    if rule.from_state not in VALID_TRANSITIONS:
        VALID_TRANSITIONS[rule.from_state] = set()
    VALID_TRANSITIONS[rule.from_state].add(rule.transition)
    
    TRANSITION_TARGETS[(rule.from_state, rule.transition)] = rule


# No outgoing transitions from these
TERMINAL_STATES: Set[ApprovalStatus] = {
    ApprovalStatus.APPROVED,
    ApprovalStatus.REJECTED,
    ApprovalStatus.CANCELLED,
}

# Statuses in which title/content/type may still be edited
EDITABLE_STATES: Set[ApprovalStatus] = {
    ApprovalStatus.PENDING,
}


def can_transition(from_state: ApprovalStatus, transition: ApprovalTransition) -> bool:
    """Check if a transition is valid from the given status."""
    valid = VALID_TRANSITIONS.get(from_state, set())
    return transition in valid


def get_transition_rule(from_state: ApprovalStatus, transition: ApprovalTransition) -> Optional[TransitionRule]:
    """Get the transition rule for a status/event combination."""
    return TRANSITION_TARGETS.get((from_state, transition))


def get_target_state(from_state: ApprovalStatus, transition: ApprovalTransition) -> Optional[ApprovalStatus]:
    """Get the target status for a transition."""
    rule = get_transition_rule(from_state, transition)
    return rule.to_state if rule else None
