"""Variant reconciliation.

Diffs the saved variant list against the combinations a new selection
implies. New combinations are found by canonical key; orphans by
membership against the union of selected value ids, since an orphan can
share some of its values with combinations that are still valid.
"""

from dataclasses import dataclass, field
from typing import Sequence

import structlog

from variant_engine.application.factory import VariantFactory
from variant_engine.catalog.generator import CombinationExplosionWarning, CombinationGenerator
from variant_engine.catalog.models import (
    AttributeCatalog,
    AttributeSelection,
    selected_attributes,
    selected_value_references,
)
from variant_engine.catalog.titles import AutoTitleGenerator
from variant_engine.domain.base import ValueObject
from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import ChangeType, VariantId

logger = structlog.get_logger()


@dataclass(frozen=True)
class OptionsChangeImpact(ValueObject):
    """What a selection change means for the saved variants.

    Attributes:
        new_combos: Fresh variants for combinations not yet covered.
        orphaned_variants: Saved variants referencing a retired value.
        title_updates_needed: Auto-titled, non-orphaned variants whose name is stale.
        change_type: Advisory classification for the confirmation dialog.
        warning: Explosion warning for the new selection, if any.
    """

    new_combos: tuple[Variant, ...] = ()
    orphaned_variants: tuple[Variant, ...] = ()
    title_updates_needed: int = 0
    change_type: ChangeType = ChangeType.MULTIPLE
    warning: CombinationExplosionWarning | None = None
    _orphaned_ids: frozenset[VariantId] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_orphaned_ids", frozenset(v.id for v in self.orphaned_variants)
        )

    @property
    def orphaned_ids(self) -> frozenset[VariantId]:
        """Ids of the orphaned variants."""
        return self._orphaned_ids

    def is_orphaned(self, variant: Variant) -> bool:
        return variant.id in self._orphaned_ids

    @property
    def has_changes(self) -> bool:
        """Check if the change adds or orphans any variant."""
        return bool(self.new_combos or self.orphaned_variants)


def classify_change(previous_names: Sequence[str], new_names: Sequence[str]) -> ChangeType:
    """Classify an options change from the selected attribute names.

    Args:
        previous_names: Names of previously selected attributes, in rank order.
        new_names: Names of newly selected attributes, in rank order.

    Returns:
        ADD_VALUE / REMOVE_VALUE on length change, RENAME when the same
        length differs, MULTIPLE otherwise.
    """
    if len(previous_names) != len(new_names):
        if len(previous_names) < len(new_names):
            return ChangeType.ADD_VALUE
        return ChangeType.REMOVE_VALUE
    if list(previous_names) != list(new_names):
        return ChangeType.RENAME
    return ChangeType.MULTIPLE


class VariantReconciler:
    """Computes the impact of a selection change on saved variants.

    Example usage:
        reconciler = VariantReconciler()
        impact = reconciler.analyze(variants, catalog, old_selection, new_selection)
        print(len(impact.new_combos), len(impact.orphaned_variants))
    """

    def __init__(self, generator: CombinationGenerator | None = None) -> None:
        self.generator = generator or CombinationGenerator()

    def analyze(
        self,
        existing: Sequence[Variant],
        catalog: AttributeCatalog | None,
        previous_selection: AttributeSelection,
        new_selection: AttributeSelection,
        previous_catalog: AttributeCatalog | None = None,
    ) -> OptionsChangeImpact:
        """Diff saved variants against a new selection.

        Args:
            existing: Saved variants.
            catalog: Catalog the new selection applies to.
            previous_selection: Selection the saved variants were built from.
            new_selection: Selection being proposed.
            previous_catalog: Catalog of the previous selection (defaults to ``catalog``).

        Returns:
            OptionsChangeImpact; empty when the catalog is missing.
        """
        if catalog is None:
            logger.info("Reconciliation skipped, no attribute catalog")
            return OptionsChangeImpact()
        old_catalog = previous_catalog or catalog

        change_type = classify_change(
            [s.attribute.name for s in selected_attributes(old_catalog, previous_selection)],
            [s.attribute.name for s in selected_attributes(catalog, new_selection)],
        )

        existing_keys = {variant.canonical_key for variant in existing}
        generated = self.generator.generate(catalog, new_selection)
        factory = VariantFactory(catalog, new_selection)
        new_combos = tuple(
            factory.blank(combination)
            for combination in generated
            if combination.canonical_key not in existing_keys
        )

        valid_refs = selected_value_references(catalog, new_selection)
        orphaned = tuple(v for v in existing if v.references_outside(valid_refs))
        orphaned_ids = {v.id for v in orphaned}

        titles = AutoTitleGenerator(catalog, new_selection)
        title_updates = sum(
            1 for v in existing if v.id not in orphaned_ids and titles.needs_update(v)
        )

        impact = OptionsChangeImpact(
            new_combos=new_combos,
            orphaned_variants=orphaned,
            title_updates_needed=title_updates,
            change_type=change_type,
            warning=generated.warning,
        )
        logger.info(
            "Analyzed options change",
            change_type=change_type.value,
            existing_count=len(existing),
            new_combo_count=len(new_combos),
            orphaned_count=len(orphaned),
            title_updates_needed=title_updates,
            exceeds_threshold=generated.exceeds_threshold,
        )
        return impact
