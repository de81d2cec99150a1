"""Domain layer - Entities, value objects, state machines, domain events.

This module exports the core domain building blocks:

- **Entities**: Variant
- **Value Objects**: typed ids, attribute definitions, Combination, tagged enums
- **State Machines**: OptionsChangeStatus (edit guard)
- **Domain Events**: what each edit-session command did
- **Exceptions**: command guards and caller-level validation errors

Example usage:
    from variant_engine.domain import Combination, Variant, VariantId

    variant = Variant(
        id=VariantId.generate(),
        option_value_ids=("red", "s"),
        name="Red - S",
    )
    variant.combination.canonical_key  # "red,s"
"""

# Base classes
from variant_engine.domain.base import DomainEvent, Entity, ValueObject

# Entities
from variant_engine.domain.entities import UNNAMED_VARIANT, Variant, to_decimal

# Domain Events
from variant_engine.domain.events import (
    EVENT_REGISTRY,
    CombinationsGenerated,
    OptionsChangeCancelled,
    OptionsChangeProposed,
    OptionsChangeResolved,
    PackVariantCreated,
    VariantTitlesRecomputed,
    get_event_class,
)

# Exceptions
from variant_engine.domain.exceptions import (
    DomainError,
    EditSessionError,
    InvalidPackQuantityError,
    InvalidStateTransitionError,
    OptionsChangePendingError,
    VariantNotFoundError,
)

# State Machines
from variant_engine.domain.state_machines import (
    OptionsChangeStatus,
    validate_options_change_transition,
)

# Value Objects
from variant_engine.domain.value_objects import (
    AttributeDefinition,
    AttributeValueDefinition,
    ChangeType,
    Combination,
    Gs1Status,
    LinkId,
    MergeStrategy,
    SessionId,
    VariantId,
    canonical_key,
)

__all__ = [
    # Base
    "DomainEvent",
    "Entity",
    "ValueObject",
    # Entities
    "UNNAMED_VARIANT",
    "Variant",
    "to_decimal",
    # Events
    "EVENT_REGISTRY",
    "CombinationsGenerated",
    "OptionsChangeCancelled",
    "OptionsChangeProposed",
    "OptionsChangeResolved",
    "PackVariantCreated",
    "VariantTitlesRecomputed",
    "get_event_class",
    # Exceptions
    "DomainError",
    "EditSessionError",
    "InvalidPackQuantityError",
    "InvalidStateTransitionError",
    "OptionsChangePendingError",
    "VariantNotFoundError",
    # State Machines
    "OptionsChangeStatus",
    "validate_options_change_transition",
    # Value Objects
    "AttributeDefinition",
    "AttributeValueDefinition",
    "ChangeType",
    "Combination",
    "Gs1Status",
    "LinkId",
    "MergeStrategy",
    "SessionId",
    "VariantId",
    "canonical_key",
]
