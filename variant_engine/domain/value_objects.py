"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity: typed identifiers, attribute definitions,
combinations and the small tagged enums used across the engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Self
from uuid import uuid4

from variant_engine.domain.base import ValueObject


# ============================================================================
# Typed Identifiers
# ============================================================================


@dataclass(frozen=True)
class VariantId(ValueObject):
    """Strongly-typed variant identifier.

    Saved variants arrive with ids minted by the catalog backend, so the
    value is an opaque string rather than a UUID.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate variant ID."""
        if not self.value or not self.value.strip():
            raise ValueError("Variant ID cannot be empty")

    @classmethod
    def generate(cls, prefix: str = "var") -> Self:
        """Generate a new variant ID.

        Args:
            prefix: Id prefix ("pack" for pack derivatives).

        Returns:
            New VariantId with a random suffix.
        """
        return cls(value=f"{prefix}-{uuid4().hex}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LinkId(ValueObject):
    """Identifier shared by a base variant and its pack derivative."""

    value: str

    def __post_init__(self) -> None:
        """Validate link ID."""
        if not self.value or not self.value.strip():
            raise ValueError("Link ID cannot be empty")

    @classmethod
    def generate(cls) -> Self:
        """Generate a new link ID.

        Returns:
            New LinkId with a random suffix.
        """
        return cls(value=f"link-{uuid4().hex}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SessionId(ValueObject):
    """Identifier of a single user's edit session."""

    value: str

    @classmethod
    def generate(cls) -> Self:
        """Generate a new session ID."""
        return cls(value=str(uuid4()))

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Attribute Definitions
# ============================================================================


@dataclass(frozen=True)
class AttributeValueDefinition(ValueObject):
    """A permitted value of an attribute.

    Attributes:
        id: Value identifier referenced by variant combinations.
        value: Display label (e.g., "Red").
        rank: Sort position within the attribute.
        is_active: Whether the value can take part in generation.
    """

    id: str
    value: str
    rank: int = 0
    is_active: bool = True

    def matches(self, reference: str) -> bool:
        """Check whether a stored reference points at this value.

        Older variants store the label instead of the id, so both match.

        Args:
            reference: Value id or label taken from a variant.

        Returns:
            True if the reference resolves to this value.
        """
        return reference == self.id or reference == self.value


@dataclass(frozen=True)
class AttributeDefinition(ValueObject):
    """An axis of product variation (e.g., Color) and its ranked values.

    Attributes:
        id: Attribute identifier.
        name: Display name.
        rank: Sort position among the category's attributes.
        is_active: Whether the attribute takes part in generation.
        values: Values in rank order.
    """

    id: str
    name: str
    rank: int = 0
    is_active: bool = True
    values: tuple[AttributeValueDefinition, ...] = ()

    def find_value(self, reference: str) -> AttributeValueDefinition | None:
        """Resolve a value id (or label) to its definition.

        Args:
            reference: Value id or label.

        Returns:
            Matching value, or None when the reference is unknown.
        """
        for value in self.values:
            if value.matches(reference):
                return value
        return None

    @property
    def value_ids(self) -> frozenset[str]:
        """Ids of every value of this attribute."""
        return frozenset(v.id for v in self.values)


# ============================================================================
# Combination
# ============================================================================


@dataclass(frozen=True)
class Combination(ValueObject):
    """One value id per selected attribute, in attribute-rank order.

    Tuple order drives titles; identity for diffing is the set of ids,
    exposed through ``canonical_key``.
    """

    value_ids: tuple[str, ...]

    @classmethod
    def of(cls, value_ids: Iterable[str]) -> Self:
        """Build a combination from any iterable of value ids."""
        return cls(value_ids=tuple(value_ids))

    @property
    def canonical_key(self) -> str:
        """Order-independent key: ids sorted and joined with commas."""
        return canonical_key(self.value_ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self.value_ids)

    def __len__(self) -> int:
        return len(self.value_ids)


def canonical_key(value_ids: Iterable[str]) -> str:
    """Compute the diff key of a list of value ids.

    Args:
        value_ids: Value ids in any order.

    Returns:
        Sorted ids joined with commas.
    """
    return ",".join(sorted(str(v) for v in value_ids))


# ============================================================================
# Tagged Enums
# ============================================================================


class Gs1Status(str, Enum):
    """Latest known outcome of the GS1 barcode lookup for an EAN."""

    NOT_CHECKED = "not_checked"
    PENDING = "pending"
    VALID = "valid"
    INVALID = "invalid"

    def is_resolved(self) -> bool:
        """Check if the lookup finished (found or not found)."""
        return self in {Gs1Status.VALID, Gs1Status.INVALID}


class ChangeType(str, Enum):
    """Advisory classification of an options change."""

    ADD_VALUE = "add_value"
    REMOVE_VALUE = "remove_value"
    RENAME = "rename"
    MULTIPLE = "multiple"

    @property
    def label(self) -> str:
        """Human-readable label for confirmation dialogs."""
        return self.value.replace("_", " ")


class MergeStrategy(str, Enum):
    """Policy the user picks to resolve an options change."""

    REGENERATE_ALL = "regenerate_all"
    SMART_MERGE = "smart_merge"
    KEEP_EXISTING = "keep_existing"
