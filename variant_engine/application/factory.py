"""Fresh variant construction.

New combinations become zero-valued, active variants titled by the
AutoTitleGenerator. Color, size and weight are copied from the values
of attributes carrying those names so the editor's dedicated columns
are filled in.
"""

from typing import Iterable

from variant_engine.catalog.models import AttributeCatalog, AttributeSelection
from variant_engine.catalog.titles import AutoTitleGenerator
from variant_engine.domain.entities import Variant, to_decimal
from variant_engine.domain.value_objects import Combination, VariantId


class VariantFactory:
    """Materializes combinations into blank variants."""

    def __init__(self, catalog: AttributeCatalog, selection: AttributeSelection) -> None:
        self.titles = AutoTitleGenerator(catalog, selection)

    def blank(self, combination: Combination) -> Variant:
        """Create a fresh variant for a combination.

        Args:
            combination: Value ids in attribute order.

        Returns:
            Active variant with zero pricing and stock.
        """
        color = ""
        size = ""
        weight = to_decimal(0)
        for resolved in self.titles.resolve(combination.value_ids):
            if resolved.value is None:
                continue
            attribute_name = resolved.attribute.name.strip().lower()
            if attribute_name == "color":
                color = resolved.value.value
            elif attribute_name == "size":
                size = resolved.value.value
            elif attribute_name == "weight":
                weight = to_decimal(resolved.value.value)

        return Variant(
            id=VariantId.generate(),
            option_value_ids=combination.value_ids,
            name=self.titles.title_for(combination.value_ids),
            color=color,
            size=size,
            weight=weight,
            is_active=True,
            pack_qty=1,
            is_pack=False,
        )

    def blank_all(self, combinations: Iterable[Combination]) -> list[Variant]:
        """Create a fresh variant per combination, preserving order."""
        return [self.blank(combination) for combination in combinations]
