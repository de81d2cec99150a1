"""Tests for the options-change state machine."""

import pytest

from variant_engine.domain.exceptions import InvalidStateTransitionError
from variant_engine.domain.state_machines import (
    OptionsChangeStatus,
    validate_options_change_transition,
)


class TestOptionsChangeStatus:
    """Tests for OptionsChangeStatus."""

    def test_idle_can_enter_pending(self) -> None:
        """IDLE can transition to PENDING_IMPACT."""
        assert OptionsChangeStatus.IDLE.can_transition_to(OptionsChangeStatus.PENDING_IMPACT)

    def test_pending_can_return_to_idle(self) -> None:
        """PENDING_IMPACT resolves back to IDLE."""
        assert OptionsChangeStatus.PENDING_IMPACT.can_transition_to(OptionsChangeStatus.IDLE)

    def test_no_self_transitions(self) -> None:
        """Neither state transitions to itself."""
        assert not OptionsChangeStatus.IDLE.can_transition_to(OptionsChangeStatus.IDLE)
        assert not OptionsChangeStatus.PENDING_IMPACT.can_transition_to(
            OptionsChangeStatus.PENDING_IMPACT
        )

    def test_only_idle_is_editable(self) -> None:
        """Variants are locked while a change is pending."""
        assert OptionsChangeStatus.IDLE.is_editable()
        assert not OptionsChangeStatus.PENDING_IMPACT.is_editable()

    def test_allowed_transitions(self) -> None:
        """Allowed transitions are listed."""
        assert OptionsChangeStatus.IDLE.allowed_transitions() == [
            OptionsChangeStatus.PENDING_IMPACT
        ]


class TestValidateTransition:
    """Tests for transition validation."""

    def test_valid_transition_passes(self) -> None:
        """Valid transitions do not raise."""
        validate_options_change_transition(
            "s1", OptionsChangeStatus.IDLE, OptionsChangeStatus.PENDING_IMPACT
        )

    def test_invalid_transition_raises(self) -> None:
        """Resolving with nothing pending raises."""
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            validate_options_change_transition(
                "s1", OptionsChangeStatus.IDLE, OptionsChangeStatus.IDLE
            )
        assert exc_info.value.details["entity_type"] == "EditSession"
        assert exc_info.value.details["current_state"] == "idle"
        assert exc_info.value.details["allowed_transitions"] == ["pending_impact"]
