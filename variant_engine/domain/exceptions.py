"""Domain exceptions.

Errors raised when a caller asks the edit session for something its
current state does not allow. The combinatorial functions themselves
never raise on well-typed input; these cover command-level guards and
caller-level validation.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "EditSession").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Edit Session Errors
# ============================================================================


class EditSessionError(DomainError):
    """Base class for edit-session errors."""

    pass


class OptionsChangePendingError(EditSessionError):
    """Raised when the variant list is edited while an options change is unresolved."""

    def __init__(self, session_id: str, command: str) -> None:
        """Initialize options change pending error.

        Args:
            session_id: ID of the edit session.
            command: Name of the rejected command.
        """
        super().__init__(
            f"Cannot run {command} on session {session_id}: "
            "resolve the pending options change first",
            details={"session_id": session_id, "command": command},
        )


class VariantNotFoundError(EditSessionError):
    """Raised when a command references a variant that is not in the session."""

    def __init__(self, session_id: str, variant_id: str) -> None:
        """Initialize variant not found error.

        Args:
            session_id: ID of the edit session.
            variant_id: ID of the missing variant.
        """
        super().__init__(
            f"Variant {variant_id} not found in session {session_id}",
            details={"session_id": session_id, "variant_id": variant_id},
        )


# ============================================================================
# Pack Errors
# ============================================================================


class InvalidPackQuantityError(DomainError):
    """Raised when a pack quantity below one is requested."""

    def __init__(self, quantity: Any, reason: str = "Pack quantity must be at least 1") -> None:
        """Initialize invalid pack quantity error.

        Args:
            quantity: The invalid quantity value.
            reason: Explanation of why the quantity is invalid.
        """
        super().__init__(
            f"Invalid pack quantity {quantity}: {reason}",
            details={"quantity": quantity, "reason": reason},
        )
