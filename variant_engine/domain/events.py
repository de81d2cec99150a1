"""Domain events for the variant engine.

Each edit-session command records what it did as an event. Events feed
audit logging and let the UI render toasts such as "Added 2 new
variants, marked 1 orphaned variant" without re-deriving counts.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from variant_engine.domain.base import DomainEvent


# ============================================================================
# Combination Events
# ============================================================================


@dataclass(frozen=True)
class CombinationsGenerated(DomainEvent):
    """Event raised when variants are generated for a fresh selection."""

    event_type: ClassVar[str] = "combinations.generated"

    combination_count: int = 0
    exceeds_threshold: bool = False

    def _payload(self) -> dict[str, Any]:
        return {
            "combination_count": self.combination_count,
            "exceeds_threshold": self.exceeds_threshold,
        }


# ============================================================================
# Options Change Events
# ============================================================================


@dataclass(frozen=True)
class OptionsChangeProposed(DomainEvent):
    """Event raised when a selection change affects existing variants."""

    event_type: ClassVar[str] = "options.change_proposed"

    change_type: str = ""
    new_combo_count: int = 0
    orphaned_count: int = 0
    title_updates_needed: int = 0

    def _payload(self) -> dict[str, Any]:
        return {
            "change_type": self.change_type,
            "new_combo_count": self.new_combo_count,
            "orphaned_count": self.orphaned_count,
            "title_updates_needed": self.title_updates_needed,
        }


@dataclass(frozen=True)
class OptionsChangeResolved(DomainEvent):
    """Event raised when the user picks a merge strategy."""

    event_type: ClassVar[str] = "options.change_resolved"

    strategy: str = ""
    variant_count: int = 0
    added_count: int = 0
    deactivated_count: int = 0
    discarded_count: int = 0

    def _payload(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "variant_count": self.variant_count,
            "added_count": self.added_count,
            "deactivated_count": self.deactivated_count,
            "discarded_count": self.discarded_count,
        }


@dataclass(frozen=True)
class OptionsChangeCancelled(DomainEvent):
    """Event raised when a pending options change is abandoned."""

    event_type: ClassVar[str] = "options.change_cancelled"

    def _payload(self) -> dict[str, Any]:
        return {}


# ============================================================================
# Variant Events
# ============================================================================


@dataclass(frozen=True)
class PackVariantCreated(DomainEvent):
    """Event raised when a pack is derived from a base variant."""

    event_type: ClassVar[str] = "variant.pack_created"

    base_variant_id: str = ""
    pack_variant_id: str = ""
    link_id: str = ""
    pack_qty: int = 1

    def _payload(self) -> dict[str, Any]:
        return {
            "base_variant_id": self.base_variant_id,
            "pack_variant_id": self.pack_variant_id,
            "link_id": self.link_id,
            "pack_qty": self.pack_qty,
        }


@dataclass(frozen=True)
class VariantTitlesRecomputed(DomainEvent):
    """Event raised when auto-generated titles are refreshed."""

    event_type: ClassVar[str] = "variant.titles_recomputed"

    updated_count: int = 0

    def _payload(self) -> dict[str, Any]:
        return {"updated_count": self.updated_count}


# ============================================================================
# Event Registry
# ============================================================================


EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    CombinationsGenerated.event_type: CombinationsGenerated,
    OptionsChangeProposed.event_type: OptionsChangeProposed,
    OptionsChangeResolved.event_type: OptionsChangeResolved,
    OptionsChangeCancelled.event_type: OptionsChangeCancelled,
    PackVariantCreated.event_type: PackVariantCreated,
    VariantTitlesRecomputed.event_type: VariantTitlesRecomputed,
}


def get_event_class(event_type: str) -> type[DomainEvent] | None:
    """Get event class by event type string.

    Args:
        event_type: Event type identifier (e.g., 'variant.pack_created').

    Returns:
        Event class if found, None otherwise.
    """
    return EVENT_REGISTRY.get(event_type)
