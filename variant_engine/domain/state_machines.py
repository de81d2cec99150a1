"""State machines for the edit session.

An options change that would affect existing variants puts the session
into a guarded state until the user picks a merge strategy or cancels.
"""

from enum import Enum

from variant_engine.domain.exceptions import InvalidStateTransitionError


# ============================================================================
# Options Change State Machine
# ============================================================================


class OptionsChangeStatus(str, Enum):
    """Lifecycle of an options change.

    State diagram:
        IDLE ───── propose ─────► PENDING_IMPACT
          ▲                          │
          └──── resolve / cancel ────┘
    """

    IDLE = "idle"
    PENDING_IMPACT = "pending_impact"

    def can_transition_to(self, target: "OptionsChangeStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _OPTIONS_CHANGE_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["OptionsChangeStatus"]:
        """Get list of valid target states."""
        return list(_OPTIONS_CHANGE_TRANSITIONS.get(self, set()))

    def is_editable(self) -> bool:
        """Check if the variant list may be edited.

        Returns:
            True unless an options change awaits resolution.
        """
        return self is OptionsChangeStatus.IDLE


_OPTIONS_CHANGE_TRANSITIONS: dict[OptionsChangeStatus, set[OptionsChangeStatus]] = {
    OptionsChangeStatus.IDLE: {OptionsChangeStatus.PENDING_IMPACT},
    OptionsChangeStatus.PENDING_IMPACT: {OptionsChangeStatus.IDLE},
}


def validate_options_change_transition(
    session_id: str,
    current_status: OptionsChangeStatus,
    target_status: OptionsChangeStatus,
) -> None:
    """Validate and raise if an options-change transition is invalid.

    Args:
        session_id: Edit session identifier for error message.
        current_status: Current status.
        target_status: Target status.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_status.can_transition_to(target_status):
        raise InvalidStateTransitionError(
            entity_type="EditSession",
            entity_id=session_id,
            current_state=current_status.value,
            target_state=target_status.value,
            allowed_transitions=[s.value for s in current_status.allowed_transitions()],
        )
