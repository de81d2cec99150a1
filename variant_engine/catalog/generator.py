"""Combination generator.

Computes the Cartesian product of the selected attribute values. Only
attributes with at least one selected value take part; each output tuple
holds one value id per such attribute, in attribute-rank order.
"""

from dataclasses import dataclass
from math import prod
from typing import Iterator

import structlog

from variant_engine.catalog.models import (
    AttributeCatalog,
    AttributeSelection,
    selected_attributes,
)
from variant_engine.domain.value_objects import Combination
from variant_engine.infrastructure.config import Settings, settings

logger = structlog.get_logger()


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for combination generation.

    Attributes:
        warning_threshold: Combination count above which a warning is raised.
    """

    warning_threshold: int = 100

    @classmethod
    def from_settings(cls, app_settings: Settings | None = None) -> "GeneratorConfig":
        """Create config from application settings.

        Args:
            app_settings: Settings instance (module settings when omitted).

        Returns:
            Generator config.
        """
        source = app_settings or settings
        return cls(warning_threshold=source.combination_warning_threshold)


# ============================================================================
# Results
# ============================================================================


@dataclass(frozen=True)
class CombinationExplosionWarning:
    """Advisory raised when a selection implies too many variants.

    Attributes:
        combination_count: Number of combinations the selection implies.
        threshold: Configured warning threshold.
    """

    combination_count: int
    threshold: int

    @property
    def message(self) -> str:
        """Warning text for the confirmation UI."""
        return (
            f"This selection generates {self.combination_count} variants, "
            f"more than the recommended {self.threshold}."
        )


@dataclass(frozen=True)
class GenerationResult:
    """Combinations produced for a selection.

    Attributes:
        combinations: Combinations in generation order.
        warning: Set when the count exceeds the configured threshold.
    """

    combinations: tuple[Combination, ...] = ()
    warning: CombinationExplosionWarning | None = None

    @property
    def exceeds_threshold(self) -> bool:
        """Check if the explosion warning fired."""
        return self.warning is not None

    def __iter__(self) -> Iterator[Combination]:
        return iter(self.combinations)

    def __len__(self) -> int:
        return len(self.combinations)


# ============================================================================
# Combination Generator
# ============================================================================


class CombinationGenerator:
    """Generates variant combinations from an attribute selection.

    Example usage:
        generator = CombinationGenerator()
        result = generator.generate(catalog, selection)
        for combination in result:
            print(combination.value_ids)
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration (defaults from settings).
        """
        self.config = config or GeneratorConfig.from_settings()

    def potential_count(self, catalog: AttributeCatalog, selection: AttributeSelection) -> int:
        """Number of combinations a selection implies, without building them.

        Args:
            catalog: Attribute catalog.
            selection: User selection.

        Returns:
            Product of selected value counts, 0 when nothing is selected.
        """
        selected = selected_attributes(catalog, selection)
        if not selected:
            return 0
        return prod(len(s.values) for s in selected)

    def generate(self, catalog: AttributeCatalog, selection: AttributeSelection) -> GenerationResult:
        """Generate every combination of the selected values.

        Args:
            catalog: Attribute catalog (active attributes in rank order).
            selection: User selection.

        Returns:
            GenerationResult, empty when no attribute has a selection.
        """
        selected = selected_attributes(catalog, selection)
        if not selected:
            return GenerationResult()

        value_lists = [[value.id for value in s.values] for s in selected]
        combinations = tuple(
            Combination.of(value_ids) for value_ids in self._combine(value_lists, 0)
        )

        warning = None
        if len(combinations) > self.config.warning_threshold:
            warning = CombinationExplosionWarning(
                combination_count=len(combinations),
                threshold=self.config.warning_threshold,
            )
            logger.warning(
                "Large combination set",
                combination_count=len(combinations),
                threshold=self.config.warning_threshold,
            )

        logger.debug(
            "Generated combinations",
            attribute_count=len(selected),
            combination_count=len(combinations),
        )
        return GenerationResult(combinations=combinations, warning=warning)

    def _combine(self, value_lists: list[list[str]], index: int) -> list[tuple[str, ...]]:
        """Cartesian product of ``value_lists[index:]``, first list varying slowest."""
        if index >= len(value_lists):
            return [()]
        rest = self._combine(value_lists, index + 1)
        return [(value,) + combo for value in value_lists[index] for combo in rest]


def generate_combinations(
    catalog: AttributeCatalog,
    selection: AttributeSelection,
    config: GeneratorConfig | None = None,
) -> GenerationResult:
    """Generate combinations with a one-off generator."""
    return CombinationGenerator(config).generate(catalog, selection)
