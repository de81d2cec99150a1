"""Domain entities for the variant engine.

The Variant is the only entity: a sellable product configuration whose
identity survives edits to its pricing, stock and identifiers. Engine
functions never mutate a variant in place; they derive copies through
the helpers below.
"""

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from variant_engine.domain.base import Entity
from variant_engine.domain.value_objects import (
    Combination,
    LinkId,
    VariantId,
    canonical_key,
)

UNNAMED_VARIANT = "Unnamed Variant"

_ZERO = Decimal("0")


def to_decimal(value: Any, default: Decimal | None = _ZERO) -> Decimal | None:
    """Coerce a loosely typed number into a Decimal.

    Args:
        value: int, float, str or Decimal (blank strings count as missing).
        default: Value returned when the input is missing or unparseable.

    Returns:
        Decimal value or the default.
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        return default
    try:
        return Decimal(text)
    except InvalidOperation:
        return default


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(eq=False)
class Variant(Entity[VariantId]):
    """A sellable product configuration.

    Attributes:
        id: Stable variant identifier.
        option_value_ids: The variant's combination (value ids in attribute order).
        name: Stored title, usually generated from the combination.
        custom_title: User override; wins over the generated title when set.
        sku: Stock keeping unit; cleared when the variant is orphaned.
        price: Selling price.
        mrp: Maximum retail price.
        csp: Customer selling price.
        stock_quantity: Units in stock.
        max_purchase_limit: Max units per order.
        threshold: Low-stock threshold.
        ean_number: Barcode identifier (8 or 13 digits).
        ran_number: Internal identifier used when no EAN exists.
        hsn_code: Tax classification code.
        tax_percentage: Tax rate; None when not provided.
        weight: Net weight.
        is_active: False for soft-deactivated (orphaned) variants.
        link: Shared id grouping a base variant with its pack.
        pack_qty: Units per pack (1 for non-pack variants).
        is_pack: Whether this variant is a pack derivative.
    """

    id: VariantId
    option_value_ids: tuple[str, ...] = ()
    name: str = ""
    custom_title: str = ""
    description: str = ""
    sku: str = ""
    price: Decimal = _ZERO
    mrp: Decimal = _ZERO
    csp: Decimal = _ZERO
    cust_discount: Decimal = _ZERO
    stock_quantity: int = 0
    max_purchase_limit: int = 0
    threshold: int = 0
    ean_number: str = ""
    ran_number: str = ""
    hsn_code: str = ""
    tax_percentage: Decimal | None = None
    weight: Decimal = _ZERO
    net_qty: str = ""
    color: str = ""
    size: str = ""
    is_active: bool = True
    link: LinkId | None = None
    pack_qty: int = 1
    is_pack: bool = False

    def __post_init__(self) -> None:
        # Form input arrives as strings; pack math needs numbers.
        for name in ("price", "mrp", "csp", "cust_discount", "weight"):
            setattr(self, name, to_decimal(getattr(self, name)))
        self.tax_percentage = to_decimal(self.tax_percentage, default=None)
        for name in ("stock_quantity", "max_purchase_limit", "threshold"):
            setattr(self, name, _to_int(getattr(self, name)))
        self.pack_qty = _to_int(self.pack_qty) or 1

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def combination(self) -> Combination:
        """The variant's value ids as a Combination."""
        return Combination.of(self.option_value_ids)

    @property
    def canonical_key(self) -> str:
        """Order-independent diff key of the variant's value ids."""
        return canonical_key(self.option_value_ids)

    @property
    def has_custom_title(self) -> bool:
        """Check if the user overrode the generated title."""
        return bool(self.custom_title and self.custom_title.strip())

    @property
    def display_title(self) -> str:
        """Title shown to users: custom title, else stored name."""
        if self.has_custom_title:
            return self.custom_title
        return self.name or UNNAMED_VARIANT

    def references_outside(self, valid_value_ids: frozenset[str]) -> bool:
        """Check if any value id of this variant is outside the given set.

        Args:
            valid_value_ids: Union of currently selected value references
                (ids, plus labels for variants saved before ids were stored).

        Returns:
            True if the variant references a retired value.
        """
        return any(value_id not in valid_value_ids for value_id in self.option_value_ids)

    # -------------------------------------------------------------------------
    # Derivations
    # -------------------------------------------------------------------------

    def deactivated(self) -> "Variant":
        """Copy marked inactive with its SKU cleared (orphan handling)."""
        return replace(self, is_active=False, sku="")

    def relinked(self, link: LinkId) -> "Variant":
        """Copy carrying a new pack link."""
        return replace(self, link=link)

    def renamed(self, name: str) -> "Variant":
        """Copy with a new stored name."""
        return replace(self, name=name)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary in the shape handed to the product update payload.
        """
        return {
            "id": str(self.id),
            "optionValueIds": list(self.option_value_ids),
            "customTitle": self.custom_title,
            "name": self.name,
            "description": self.description,
            "sku": self.sku,
            "price": self.price,
            "mrp": self.mrp,
            "csp": self.csp,
            "cust_discount": self.cust_discount,
            "stock_quantity": self.stock_quantity,
            "max_purchase_limit": self.max_purchase_limit,
            "threshold": self.threshold,
            "ean_number": self.ean_number,
            "ran_number": self.ran_number,
            "hsn_code": self.hsn_code,
            "tax_percentage": self.tax_percentage,
            "weight": self.weight,
            "net_qty": self.net_qty,
            "color": self.color,
            "size": self.size,
            "is_active": self.is_active,
            "link": str(self.link) if self.link else None,
            "pack_qty": self.pack_qty,
            "is_pack": self.is_pack,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Variant":
        """Create a variant from a saved-variant dictionary.

        Accepts both the editor's camelCase keys and snake_case keys.

        Args:
            data: Saved variant data.

        Returns:
            Variant instance (a fresh id is minted when none is given).
        """
        raw_ids = data.get("optionValueIds", data.get("option_value_ids")) or []
        raw_link = data.get("link")
        raw_id = data.get("id")
        return cls(
            id=VariantId(str(raw_id)) if raw_id else VariantId.generate(),
            option_value_ids=tuple(str(v) for v in raw_ids),
            name=data.get("name") or "",
            custom_title=data.get("customTitle", data.get("custom_title")) or "",
            description=data.get("description") or "",
            sku=data.get("sku") or "",
            price=to_decimal(data.get("price")),
            mrp=to_decimal(data.get("mrp")),
            csp=to_decimal(data.get("csp")),
            cust_discount=to_decimal(data.get("cust_discount")),
            stock_quantity=_to_int(data.get("stock_quantity")),
            max_purchase_limit=_to_int(data.get("max_purchase_limit")),
            threshold=_to_int(data.get("threshold")),
            ean_number=str(data.get("ean_number") or ""),
            ran_number=str(data.get("ran_number") or ""),
            hsn_code=str(data.get("hsn_code") or ""),
            tax_percentage=to_decimal(data.get("tax_percentage"), default=None),
            weight=to_decimal(data.get("weight")),
            net_qty=str(data.get("net_qty") or ""),
            color=data.get("color") or "",
            size=data.get("size") or "",
            is_active=data.get("is_active", True) is not False,
            link=LinkId(str(raw_link)) if raw_link not in (None, "") else None,
            pack_qty=_to_int(data.get("pack_qty")) or 1,
            is_pack=bool(data.get("is_pack", False)),
        )
