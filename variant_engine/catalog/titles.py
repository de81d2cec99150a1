"""Automatic variant titles.

A variant's generated title is the labels of its values joined with
``" - "``. Position ``i`` of the value-id tuple is resolved against the
i-th selected attribute, the same ordering the generator uses, so
identical tuples under an identical catalog always get identical titles.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from variant_engine.catalog.models import (
    AttributeCatalog,
    AttributeSelection,
    SelectedAttribute,
    selected_attributes,
)
from variant_engine.domain.entities import UNNAMED_VARIANT, Variant
from variant_engine.domain.value_objects import (
    AttributeDefinition,
    AttributeValueDefinition,
    VariantId,
)

TITLE_SEPARATOR = " - "


@dataclass(frozen=True)
class ResolvedValue:
    """A tuple position resolved to its attribute and value."""

    attribute: AttributeDefinition
    value: AttributeValueDefinition | None


@dataclass(frozen=True)
class TitleRecomputation:
    """Result of refreshing auto-generated titles.

    Attributes:
        variants: Variants with refreshed names, in input order.
        updated_ids: Ids of variants whose name changed.
    """

    variants: tuple[Variant, ...]
    updated_ids: tuple[VariantId, ...]

    @property
    def updated_count(self) -> int:
        return len(self.updated_ids)


class AutoTitleGenerator:
    """Derives display titles from value-id tuples.

    Example usage:
        titles = AutoTitleGenerator(catalog, selection)
        titles.title_for(("red", "s"))  # "Red - S"
    """

    def __init__(self, catalog: AttributeCatalog, selection: AttributeSelection) -> None:
        """Initialize with the catalog and selection titles resolve against.

        Args:
            catalog: Attribute catalog.
            selection: Selection deciding which attributes map to tuple positions.
        """
        self._selected: list[SelectedAttribute] = selected_attributes(catalog, selection)

    def resolve(self, value_ids: Sequence[str]) -> list[ResolvedValue]:
        """Resolve each tuple position to its attribute and value.

        Positions beyond the selected attributes are dropped.

        Args:
            value_ids: Value ids (or legacy labels) in attribute order.

        Returns:
            Resolved positions; ``value`` is None for unknown ids.
        """
        resolved = []
        for position, reference in enumerate(value_ids):
            if position >= len(self._selected):
                break
            attribute = self._selected[position].attribute
            resolved.append(
                ResolvedValue(attribute=attribute, value=attribute.find_value(str(reference)))
            )
        return resolved

    def title_for(self, value_ids: Sequence[str]) -> str:
        """Generate a title for a value-id tuple.

        Args:
            value_ids: Value ids in attribute order.

        Returns:
            Labels joined with " - ", or "Unnamed Variant" when none resolve.
        """
        if not value_ids:
            return UNNAMED_VARIANT
        labels = [r.value.value for r in self.resolve(value_ids) if r.value and r.value.value]
        return TITLE_SEPARATOR.join(labels) or UNNAMED_VARIANT

    def title_for_variant(self, variant: Variant) -> str:
        """Generated title of a variant, ignoring any custom title."""
        return self.title_for(variant.option_value_ids)

    def display_title(self, variant: Variant) -> str:
        """Title shown for a variant: custom title if set, else generated."""
        if variant.has_custom_title:
            return variant.custom_title
        return self.title_for_variant(variant)

    def needs_update(self, variant: Variant) -> bool:
        """Check if an auto-titled variant's stored name is stale.

        Custom-titled variants are never auto-renamed.
        """
        if variant.has_custom_title:
            return False
        return variant.name != self.title_for_variant(variant)

    def recompute(self, variants: Iterable[Variant]) -> TitleRecomputation:
        """Refresh stale auto-generated titles.

        Args:
            variants: Variants to inspect.

        Returns:
            Refreshed variants and the ids that changed.
        """
        refreshed = []
        updated = []
        for variant in variants:
            if self.needs_update(variant):
                refreshed.append(variant.renamed(self.title_for_variant(variant)))
                updated.append(variant.id)
            else:
                refreshed.append(variant)
        return TitleRecomputation(variants=tuple(refreshed), updated_ids=tuple(updated))


def generate_title(
    value_ids: Sequence[str],
    catalog: AttributeCatalog,
    selection: AttributeSelection,
) -> str:
    """Generate a title with a one-off generator."""
    return AutoTitleGenerator(catalog, selection).title_for(value_ids)
