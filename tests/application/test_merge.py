"""Tests for merge strategies."""

from decimal import Decimal

import pytest

from variant_engine.application.merge import MergeStrategyExecutor
from variant_engine.application.reconciler import VariantReconciler
from variant_engine.catalog.generator import CombinationGenerator, GeneratorConfig
from variant_engine.domain.value_objects import MergeStrategy


@pytest.fixture
def generator() -> CombinationGenerator:
    """Generator with a fixed threshold."""
    return CombinationGenerator(GeneratorConfig(warning_threshold=100))


@pytest.fixture
def executor(generator) -> MergeStrategyExecutor:
    """Merge executor."""
    return MergeStrategyExecutor(generator)


@pytest.fixture
def saved(make_variant) -> list:
    """Saved variants: red/blue x s."""
    return [
        make_variant("red", "s", variant_id="v-rs", name="Red - S", sku="RS", price=Decimal("10")),
        make_variant("blue", "s", variant_id="v-bs", name="Blue - S", sku="BS", price=Decimal("12")),
    ]


@pytest.fixture
def change(generator, catalog, select, saved):
    """Drop blue and add green: one kept, one orphan, one new."""
    new_selection = select(color=["red", "green"], size=["s"])
    impact = VariantReconciler(generator).analyze(
        saved, catalog, select(color=["red", "blue"], size=["s"]), new_selection
    )
    return impact, new_selection


class TestSmartMerge:
    """Tests for Smart Merge."""

    def test_order_kept_new_orphaned(self, executor, catalog, saved, change) -> None:
        """Kept variants come first, then new ones, then orphans."""
        impact, selection = change
        result = executor.apply(MergeStrategy.SMART_MERGE, saved, impact, catalog, selection)
        assert [v.option_value_ids for v in result.variants] == [
            ("red", "s"),
            ("green", "s"),
            ("blue", "s"),
        ]

    def test_never_deletes(self, executor, catalog, saved, change) -> None:
        """Every saved variant survives Smart Merge."""
        impact, selection = change
        result = executor.apply(MergeStrategy.SMART_MERGE, saved, impact, catalog, selection)
        ids = {v.id for v in result.variants}
        assert all(v.id in ids for v in saved)
        assert len(result.variants) == len(saved) + len(impact.new_combos)

    def test_orphans_deactivated(self, executor, catalog, saved, change) -> None:
        """Orphans are inactive with their SKU cleared; data is retained."""
        impact, selection = change
        result = executor.apply(MergeStrategy.SMART_MERGE, saved, impact, catalog, selection)
        orphan = result.variants[-1]
        assert str(orphan.id) == "v-bs"
        assert not orphan.is_active
        assert orphan.sku == ""
        assert orphan.price == Decimal("12")
        assert result.deactivated == (orphan,)

    def test_kept_variants_untouched(self, executor, catalog, saved, change) -> None:
        """Kept variants keep their data."""
        impact, selection = change
        result = executor.apply(MergeStrategy.SMART_MERGE, saved, impact, catalog, selection)
        kept = result.variants[0]
        assert kept.sku == "RS"
        assert kept.price == Decimal("10")
        assert kept.is_active


class TestRegenerateAll:
    """Tests for Regenerate All."""

    def test_exactly_new_combinations(self, executor, catalog, saved, change) -> None:
        """Result holds one fresh variant per new combination."""
        impact, selection = change
        result = executor.apply(MergeStrategy.REGENERATE_ALL, saved, impact, catalog, selection)
        assert [v.option_value_ids for v in result.variants] == [("red", "s"), ("green", "s")]
        assert all(v.price == Decimal("0") for v in result.variants)
        assert all(v.is_active for v in result.variants)

    def test_fresh_ids(self, executor, catalog, saved, change) -> None:
        """No saved id survives a regeneration."""
        impact, selection = change
        result = executor.apply(MergeStrategy.REGENERATE_ALL, saved, impact, catalog, selection)
        saved_ids = {v.id for v in saved}
        assert not any(v.id in saved_ids for v in result.variants)
        assert result.discarded == tuple(saved)


class TestKeepExisting:
    """Tests for Keep Existing."""

    def test_list_untouched(self, executor, catalog, saved, change) -> None:
        """The variant list is returned as-is."""
        impact, selection = change
        result = executor.apply("keep_existing", saved, impact, catalog, selection)
        assert result.strategy is MergeStrategy.KEEP_EXISTING
        assert result.variants == tuple(saved)
        assert [v.sku for v in result.variants] == ["RS", "BS"]
        assert result.added == ()
