"""Tests for the combination generator."""

import pytest

from variant_engine.catalog.generator import (
    CombinationGenerator,
    GeneratorConfig,
    generate_combinations,
)
from variant_engine.catalog.models import AttributeSelection
from variant_engine.infrastructure.config import Settings


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_default_threshold(self) -> None:
        """Default warning threshold is 100."""
        assert GeneratorConfig().warning_threshold == 100

    def test_from_settings(self) -> None:
        """Threshold is read from settings."""
        config = GeneratorConfig.from_settings(Settings(combination_warning_threshold=5))
        assert config.warning_threshold == 5


class TestCombinationGenerator:
    """Tests for CombinationGenerator."""

    @pytest.fixture
    def generator(self) -> CombinationGenerator:
        """Create generator with the default threshold."""
        return CombinationGenerator(GeneratorConfig(warning_threshold=100))

    def test_cartesian_product_order(self, generator, catalog, select) -> None:
        """First attribute varies slowest; values keep selection order."""
        result = generator.generate(catalog, select(color=["red", "blue"], size=["s", "m"]))
        assert [c.value_ids for c in result] == [
            ("red", "s"),
            ("red", "m"),
            ("blue", "s"),
            ("blue", "m"),
        ]

    def test_selection_order_within_attribute(self, generator, catalog, select) -> None:
        """Values are emitted in the order the user picked them."""
        result = generator.generate(catalog, select(color=["blue", "red"]))
        assert [c.value_ids for c in result] == [("blue",), ("red",)]

    def test_tuples_follow_attribute_rank(self, generator, catalog) -> None:
        """Tuple positions follow catalog rank even if the selection lists size first."""
        selection = AttributeSelection.of({"size": ["l"], "color": ["green"]})
        result = generator.generate(catalog, selection)
        assert [c.value_ids for c in result] == [("green", "l")]

    def test_product_size(self, generator, catalog, select) -> None:
        """Result size is the product of the selected value counts."""
        selection = select(color=["red", "blue", "green"], size=["s", "m"])
        result = generator.generate(catalog, selection)
        assert len(result) == 6
        assert generator.potential_count(catalog, selection) == 6

    def test_unselected_attribute_skipped(self, generator, catalog, select) -> None:
        """Attributes without a selection are not wildcards."""
        result = generator.generate(catalog, select(size=["s", "l"]))
        assert [c.value_ids for c in result] == [("s",), ("l",)]

    def test_empty_selection(self, generator, catalog) -> None:
        """No selection yields no combinations and no warning."""
        result = generator.generate(catalog, AttributeSelection())
        assert len(result) == 0
        assert not result.exceeds_threshold
        assert generator.potential_count(catalog, AttributeSelection()) == 0

    def test_generation_is_deterministic(self, generator, catalog, select) -> None:
        """Same inputs produce the same ordered output."""
        selection = select(color=["green", "red"], size=["m", "s", "l"])
        first = generator.generate(catalog, selection)
        second = generator.generate(catalog, selection)
        assert first.combinations == second.combinations

    def test_one_value_per_selected_attribute(self, generator, catalog, select) -> None:
        """Every combination holds one id per selected attribute."""
        result = generator.generate(catalog, select(color=["red", "blue"], size=["s", "m", "l"]))
        for combination in result:
            assert len(combination) == 2
            assert combination.value_ids[0] in {"red", "blue"}
            assert combination.value_ids[1] in {"s", "m", "l"}

    def test_warning_above_threshold(self, catalog, select) -> None:
        """Exceeding the threshold attaches a warning but still generates."""
        generator = CombinationGenerator(GeneratorConfig(warning_threshold=3))
        result = generator.generate(catalog, select(color=["red", "blue"], size=["s", "m"]))
        assert len(result) == 4
        assert result.exceeds_threshold
        assert result.warning.combination_count == 4
        assert result.warning.threshold == 3
        assert "4 variants" in result.warning.message

    def test_no_warning_at_threshold(self, catalog, select) -> None:
        """Reaching the threshold exactly does not warn."""
        generator = CombinationGenerator(GeneratorConfig(warning_threshold=4))
        result = generator.generate(catalog, select(color=["red", "blue"], size=["s", "m"]))
        assert not result.exceeds_threshold

    def test_generate_combinations_helper(self, catalog, select) -> None:
        """Module helper matches the generator."""
        result = generate_combinations(
            catalog, select(color=["red"]), GeneratorConfig(warning_threshold=10)
        )
        assert [c.value_ids for c in result] == [("red",)]
