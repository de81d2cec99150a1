"""Merge strategies for a pending options change.

The user resolves every selection change with exactly one policy:

- REGENERATE_ALL: rebuild the list from the new combinations, dropping saved data.
- SMART_MERGE: keep matching variants, add new ones, deactivate orphans.
- KEEP_EXISTING: leave the variant list untouched.
"""

from dataclasses import dataclass
from typing import Sequence

import structlog

from variant_engine.application.factory import VariantFactory
from variant_engine.application.reconciler import OptionsChangeImpact
from variant_engine.catalog.generator import CombinationGenerator
from variant_engine.catalog.models import AttributeCatalog, AttributeSelection
from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import MergeStrategy

logger = structlog.get_logger()


@dataclass(frozen=True)
class MergeResult:
    """Outcome of applying a merge strategy.

    Attributes:
        strategy: Strategy that produced the result.
        variants: Resulting variant list.
        added: Variants created by the merge.
        deactivated: Orphans that were soft-deactivated.
        discarded: Saved variants dropped (Regenerate All only).
    """

    strategy: MergeStrategy
    variants: tuple[Variant, ...]
    added: tuple[Variant, ...] = ()
    deactivated: tuple[Variant, ...] = ()
    discarded: tuple[Variant, ...] = ()


class MergeStrategyExecutor:
    """Applies a merge strategy to the saved variant list."""

    def __init__(self, generator: CombinationGenerator | None = None) -> None:
        self.generator = generator or CombinationGenerator()

    def apply(
        self,
        strategy: MergeStrategy,
        existing: Sequence[Variant],
        impact: OptionsChangeImpact,
        catalog: AttributeCatalog,
        selection: AttributeSelection,
    ) -> MergeResult:
        """Apply a merge strategy.

        Args:
            strategy: Chosen policy.
            existing: Saved variants.
            impact: Impact computed for the pending change.
            catalog: Catalog of the new selection.
            selection: The new selection.

        Returns:
            MergeResult with the resulting variant list.
        """
        strategy = MergeStrategy(strategy)
        if strategy is MergeStrategy.REGENERATE_ALL:
            result = self.regenerate_all(existing, catalog, selection)
        elif strategy is MergeStrategy.SMART_MERGE:
            result = self.smart_merge(existing, impact)
        else:
            result = self.keep_existing(existing)

        logger.info(
            "Applied merge strategy",
            strategy=strategy.value,
            variant_count=len(result.variants),
            added_count=len(result.added),
            deactivated_count=len(result.deactivated),
            discarded_count=len(result.discarded),
        )
        return result

    def regenerate_all(
        self,
        existing: Sequence[Variant],
        catalog: AttributeCatalog,
        selection: AttributeSelection,
    ) -> MergeResult:
        """Replace the list with one fresh variant per new combination."""
        factory = VariantFactory(catalog, selection)
        fresh = tuple(factory.blank_all(self.generator.generate(catalog, selection)))
        return MergeResult(
            strategy=MergeStrategy.REGENERATE_ALL,
            variants=fresh,
            added=fresh,
            discarded=tuple(existing),
        )

    def smart_merge(self, existing: Sequence[Variant], impact: OptionsChangeImpact) -> MergeResult:
        """Keep valid variants, append new ones, then deactivated orphans.

        Ordering is kept variants in their saved order, then new
        combinations, then orphans.
        """
        kept = tuple(v for v in existing if not impact.is_orphaned(v))
        deactivated = tuple(v.deactivated() for v in existing if impact.is_orphaned(v))
        return MergeResult(
            strategy=MergeStrategy.SMART_MERGE,
            variants=kept + impact.new_combos + deactivated,
            added=impact.new_combos,
            deactivated=deactivated,
        )

    def keep_existing(self, existing: Sequence[Variant]) -> MergeResult:
        """Leave the variant list as it is."""
        return MergeResult(strategy=MergeStrategy.KEEP_EXISTING, variants=tuple(existing))
