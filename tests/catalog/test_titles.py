"""Tests for automatic variant titles."""

import pytest

from variant_engine.catalog.titles import AutoTitleGenerator, generate_title
from variant_engine.domain.entities import UNNAMED_VARIANT


class TestAutoTitleGenerator:
    """Tests for AutoTitleGenerator."""

    @pytest.fixture
    def titles(self, catalog, select) -> AutoTitleGenerator:
        """Title generator for Color x Size."""
        return AutoTitleGenerator(catalog, select(color=["red", "blue"], size=["s", "m"]))

    def test_labels_joined(self, titles) -> None:
        """Labels are joined with a spaced hyphen."""
        assert titles.title_for(("red", "s")) == "Red - S"

    def test_empty_tuple(self, titles) -> None:
        """Empty combinations are unnamed."""
        assert titles.title_for(()) == UNNAMED_VARIANT

    def test_unknown_ids(self, titles) -> None:
        """Combinations with no resolvable value are unnamed."""
        assert titles.title_for(("nope", "zzz")) == UNNAMED_VARIANT

    def test_partial_resolution(self, titles) -> None:
        """Unresolvable positions are skipped."""
        assert titles.title_for(("red", "zzz")) == "Red"

    def test_matches_legacy_labels(self, titles) -> None:
        """Stored labels resolve like ids."""
        assert titles.title_for(("Blue", "M")) == "Blue - M"

    def test_extra_positions_ignored(self, catalog, select) -> None:
        """Positions beyond the selected attributes are dropped."""
        titles = AutoTitleGenerator(catalog, select(color=["red"]))
        assert titles.title_for(("red", "s")) == "Red"

    def test_display_title_prefers_custom(self, titles, make_variant) -> None:
        """Custom titles override the generated one."""
        variant = make_variant("red", "s", custom_title="Crimson Small")
        assert titles.display_title(variant) == "Crimson Small"

    def test_blank_custom_title_ignored(self, titles, make_variant) -> None:
        """Whitespace custom titles fall back to the generated title."""
        variant = make_variant("red", "s", custom_title="   ")
        assert titles.display_title(variant) == "Red - S"

    def test_needs_update(self, titles, make_variant) -> None:
        """Only auto-titled variants with a stale name need an update."""
        assert titles.needs_update(make_variant("red", "s", name="Old"))
        assert not titles.needs_update(make_variant("red", "s", name="Red - S"))
        assert not titles.needs_update(make_variant("red", "s", name="Old", custom_title="Mine"))

    def test_recompute(self, titles, make_variant) -> None:
        """Recompute renames stale auto-titled variants only."""
        stale = make_variant("red", "s", name="Old")
        fresh = make_variant("blue", "m", name="Blue - M")
        custom = make_variant("red", "m", name="Old", custom_title="Mine")

        result = titles.recompute([stale, fresh, custom])

        assert result.updated_count == 1
        assert result.updated_ids == (stale.id,)
        assert [v.name for v in result.variants] == ["Red - S", "Blue - M", "Old"]

    def test_generate_title_helper(self, catalog, select) -> None:
        """Module helper matches the generator."""
        assert generate_title(("blue",), catalog, select(color=["blue"])) == "Blue"
