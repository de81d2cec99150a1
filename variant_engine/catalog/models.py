"""Attribute catalog models.

The category's attribute schema arrives from the catalog backend in a
loose shape: ids may be numbers, ranks may be missing and attribute
values are sometimes bare strings, sometimes ``{id, value}`` objects.
Pydantic schemas absorb that at the boundary and everything past this
module works with the normalized domain definitions.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Self

from pydantic import BaseModel, Field, field_validator

from variant_engine.domain.base import ValueObject
from variant_engine.domain.value_objects import (
    AttributeDefinition,
    AttributeValueDefinition,
)


# ============================================================================
# External Schemas
# ============================================================================


def _normalize_value_entry(entry: Any, index: int) -> Any:
    """Turn a bare string value into the ``{id, value}`` object shape."""
    if isinstance(entry, (str, int, float)):
        text = str(entry)
        return {"id": text, "value": text, "rank": index}
    if isinstance(entry, dict):
        data = dict(entry)
        if data.get("id") is None and data.get("value") is not None:
            data["id"] = data["value"]
        if data.get("value") is None and data.get("id") is not None:
            data["value"] = data["id"]
        if data.get("rank") is None:
            data["rank"] = data.get("sort", index)
        return data
    return entry


class AttributeValueSchema(BaseModel):
    """Attribute value as served by the catalog backend."""

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Value identifier")
    value: str = Field(..., description="Display label")
    rank: int = Field(default=0, description="Sort position")
    is_active: bool = Field(default=True, description="Whether the value is usable")

    @field_validator("id", "value", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("is_active", mode="before")
    @classmethod
    def _default_active(cls, v: Any) -> Any:
        return True if v is None else v

    def to_definition(self) -> AttributeValueDefinition:
        """Convert to the domain definition."""
        return AttributeValueDefinition(
            id=self.id,
            value=self.value,
            rank=self.rank,
            is_active=self.is_active,
        )


class AttributeSchema(BaseModel):
    """Attribute as served by the catalog backend."""

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Attribute identifier")
    name: str = Field(..., description="Attribute name")
    rank: int = Field(default=0, description="Sort position")
    is_active: bool = Field(default=True, description="Whether the attribute is usable")
    values: list[AttributeValueSchema] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("rank", mode="before")
    @classmethod
    def _default_rank(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("is_active", mode="before")
    @classmethod
    def _default_active(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("values", mode="before")
    @classmethod
    def _normalize_values(cls, v: Any) -> Any:
        if v is None:
            return []
        return [_normalize_value_entry(entry, i) for i, entry in enumerate(v)]

    def to_definition(self) -> AttributeDefinition:
        """Convert to the domain definition, keeping only active values in rank order."""
        values = sorted(
            (value for value in self.values if value.is_active),
            key=lambda value: value.rank,
        )
        return AttributeDefinition(
            id=self.id,
            name=self.name,
            rank=self.rank,
            is_active=self.is_active,
            values=tuple(value.to_definition() for value in values),
        )


class ProductTypeSchema(BaseModel):
    """Product type of a category, carrying its attribute schema."""

    model_config = {"extra": "ignore"}

    id: str | None = None
    name: str | None = None
    attributes: list[AttributeSchema] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, (int, float)) else v


class ProductTypeListResponse(BaseModel):
    """Paginated product-type listing filtered by category."""

    model_config = {"extra": "ignore"}

    count: int = 0
    results: list[ProductTypeSchema] = Field(default_factory=list)

    @property
    def attributes(self) -> list[AttributeSchema]:
        """Attributes of the first product type (the category's schema)."""
        if not self.results:
            return []
        return self.results[0].attributes


# ============================================================================
# Attribute Catalog
# ============================================================================


@dataclass(frozen=True)
class AttributeCatalog(ValueObject):
    """Active attributes of a category in rank order.

    Attributes:
        attributes: Active attributes sorted by rank, each with its
            active values sorted by rank.
    """

    attributes: tuple[AttributeDefinition, ...] = ()

    @classmethod
    def empty(cls) -> Self:
        """Catalog with no attributes (category without variation axes)."""
        return cls(attributes=())

    @classmethod
    def from_definitions(cls, definitions: Iterable[AttributeDefinition]) -> Self:
        """Build a catalog, dropping inactive attributes and ordering by rank.

        Args:
            definitions: Attribute definitions in any order.

        Returns:
            Normalized catalog.
        """
        active = [
            AttributeDefinition(
                id=attr.id,
                name=attr.name,
                rank=attr.rank,
                is_active=True,
                values=tuple(
                    sorted((v for v in attr.values if v.is_active), key=lambda v: v.rank)
                ),
            )
            for attr in definitions
            if attr.is_active
        ]
        active.sort(key=lambda attr: attr.rank)
        return cls(attributes=tuple(active))

    @classmethod
    def from_payload(cls, attributes: Iterable[Mapping[str, Any] | AttributeSchema]) -> Self:
        """Build a catalog from raw catalog-backend attribute payloads.

        Args:
            attributes: Raw attribute dicts or already-parsed schemas.

        Returns:
            Normalized catalog.
        """
        schemas = [
            a if isinstance(a, AttributeSchema) else AttributeSchema.model_validate(a)
            for a in attributes
        ]
        return cls.from_definitions(schema.to_definition() for schema in schemas)

    def get(self, attribute_id: str) -> AttributeDefinition | None:
        """Look up an attribute by id."""
        for attr in self.attributes:
            if attr.id == attribute_id:
                return attr
        return None

    def __iter__(self) -> Iterator[AttributeDefinition]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)


# ============================================================================
# Selection
# ============================================================================


def _coerce_value(entry: Any, index: int) -> AttributeValueDefinition | None:
    if entry is None:
        return None
    if isinstance(entry, AttributeValueDefinition):
        return entry
    if isinstance(entry, AttributeValueSchema):
        return entry.to_definition()
    return AttributeValueSchema.model_validate(_normalize_value_entry(entry, index)).to_definition()


@dataclass(frozen=True)
class AttributeSelection(ValueObject):
    """Values the user picked per attribute.

    Single-select attributes hold a one-element tuple. Attributes with
    no picked value are simply absent.

    Attributes:
        entries: ``(attribute_id, values)`` pairs in insertion order.
    """

    entries: tuple[tuple[str, tuple[AttributeValueDefinition, ...]], ...] = ()

    @classmethod
    def of(cls, raw: Mapping[str, Any] | None) -> Self:
        """Normalize a raw selection mapping.

        Each entry may be a single value or an ordered collection of values;
        values may be definitions, ``{id, value}`` dicts or bare strings.
        Duplicates are dropped keeping the first occurrence.

        Args:
            raw: Mapping of attribute id to selected value(s).

        Returns:
            Normalized selection.
        """
        if not raw:
            return cls()
        entries = []
        for attribute_id, selected in raw.items():
            if isinstance(selected, (list, tuple)):
                candidates = list(selected)
            else:
                candidates = [selected]
            values: list[AttributeValueDefinition] = []
            seen: set[str] = set()
            for index, entry in enumerate(candidates):
                value = _coerce_value(entry, index)
                if value is None or value.id in seen:
                    continue
                seen.add(value.id)
                values.append(value)
            if values:
                entries.append((str(attribute_id), tuple(values)))
        return cls(entries=tuple(entries))

    @classmethod
    def all_values(cls, catalog: AttributeCatalog) -> Self:
        """Selection picking every value of every attribute in the catalog."""
        return cls(
            entries=tuple((attr.id, attr.values) for attr in catalog if attr.values)
        )

    def values_for(self, attribute_id: str) -> tuple[AttributeValueDefinition, ...]:
        """Selected values of an attribute (empty when nothing is selected)."""
        for entry_id, values in self.entries:
            if entry_id == attribute_id:
                return values
        return ()

    def __contains__(self, attribute_id: object) -> bool:
        return any(entry_id == attribute_id for entry_id, _ in self.entries)

    @property
    def is_empty(self) -> bool:
        """Check if no attribute has a selected value."""
        return not self.entries


# ============================================================================
# Selected Attributes
# ============================================================================


@dataclass(frozen=True)
class SelectedAttribute(ValueObject):
    """An attribute taking part in generation, with its selected values."""

    attribute: AttributeDefinition
    values: tuple[AttributeValueDefinition, ...]


def selected_attributes(
    catalog: AttributeCatalog,
    selection: AttributeSelection,
) -> list[SelectedAttribute]:
    """Attributes with at least one selected value, in catalog rank order.

    This ordering is shared by combination generation and title
    resolution: tuple position ``i`` always maps to entry ``i``.

    Args:
        catalog: Normalized attribute catalog.
        selection: User selection.

    Returns:
        Selected attributes in rank order.
    """
    result = []
    for attr in catalog:
        values = tuple(v for v in selection.values_for(attr.id) if v.is_active)
        if values:
            result.append(SelectedAttribute(attribute=attr, values=values))
    return result


def selected_value_ids(
    catalog: AttributeCatalog,
    selection: AttributeSelection,
) -> frozenset[str]:
    """Union of every selected value id across active attributes."""
    return frozenset(
        value.id
        for selected in selected_attributes(catalog, selection)
        for value in selected.values
    )


def selected_value_references(
    catalog: AttributeCatalog,
    selection: AttributeSelection,
) -> frozenset[str]:
    """Selected value ids plus their labels.

    Variants saved before value ids were stored reference labels; both
    forms resolve the same way ``AttributeValueDefinition.matches`` does.
    """
    references: set[str] = set()
    for selected in selected_attributes(catalog, selection):
        for value in selected.values:
            references.update((value.id, value.value))
            known = selected.attribute.find_value(value.id)
            if known is not None:
                references.add(known.value)
    return frozenset(references)
