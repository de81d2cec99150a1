"""Pack variant derivation.

A pack sells ``q`` units of a base variant as one item. Prices scale up
by ``q``, stock-like counts scale down by floor division, and base and
pack share a fresh link id.
"""

from dataclasses import dataclass, replace

import structlog

from variant_engine.domain.entities import Variant
from variant_engine.domain.exceptions import InvalidPackQuantityError
from variant_engine.domain.value_objects import LinkId, VariantId

logger = structlog.get_logger()


def validate_pack_quantity(quantity: object) -> int:
    """Validate a user-entered pack quantity.

    Args:
        quantity: Requested units per pack.

    Returns:
        The quantity as an int.

    Raises:
        InvalidPackQuantityError: If the quantity is not a positive integer.
    """
    if isinstance(quantity, bool):
        raise InvalidPackQuantityError(quantity, "Pack quantity must be a whole number")
    try:
        value = int(str(quantity).strip())
    except (TypeError, ValueError):
        raise InvalidPackQuantityError(quantity, "Pack quantity must be a whole number") from None
    if value < 1:
        raise InvalidPackQuantityError(quantity)
    return value


@dataclass(frozen=True)
class PackBuildResult:
    """Base variant with its new link, plus the derived pack."""

    base: Variant
    pack: Variant


class PackVariantBuilder:
    """Derives pack variants from a base variant.

    The quantity must already be validated with validate_pack_quantity.
    """

    def build(self, base: Variant, pack_quantity: int) -> PackBuildResult:
        """Derive a pack of ``pack_quantity`` units.

        Args:
            base: Variant the pack is built from.
            pack_quantity: Units per pack (>= 1).

        Returns:
            PackBuildResult with the relinked base and the new pack.
        """
        link = LinkId.generate()
        q = pack_quantity
        title_source = base.custom_title if base.has_custom_title else base.name

        pack = replace(
            base,
            id=VariantId.generate(prefix="pack"),
            name=f"{base.name} x {q}",
            custom_title=f"{title_source} x {q}",
            is_pack=True,
            pack_qty=q,
            link=link,
            price=base.price * q,
            mrp=base.mrp * q,
            csp=base.csp * q,
            stock_quantity=base.stock_quantity // q,
            max_purchase_limit=base.max_purchase_limit // q,
            threshold=base.threshold // q,
        )
        relinked_base = base.relinked(link)

        logger.info(
            "Built pack variant",
            base_variant_id=str(base.id),
            pack_variant_id=str(pack.id),
            link=str(link),
            pack_qty=q,
        )
        return PackBuildResult(base=relinked_base, pack=pack)
