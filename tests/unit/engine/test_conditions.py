"""Tests for the condition library and modifier aggregation."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from thirdera.core.exceptions import ConditionLookupError
from thirdera.engine.conditions import (
    EMPTY_LOOKUP,
    ConditionLibrary,
    ConditionLookup,
    StaticConditionSource,
    aggregate_condition_modifiers,
    slugify_condition_id,
)
from thirdera.models.derived import BreakdownEntry
from thirdera.models.enums import SaveType
from thirdera.models.items import ConditionItem


def _condition(condition_id: str, *changes: tuple[str, object], name: str = "") -> ConditionItem:
    return ConditionItem(
        name=name or condition_id.title(),
        condition_id=condition_id,
        changes=[{"key": key, "value": value} for key, value in changes],
    )


class FailingSource:
    """Condition source whose fetch always fails."""

    async def fetch_conditions(self) -> Sequence[ConditionItem]:
        raise OSError("pack unavailable")


class TestSlugify:
    """Tests for condition id normalisation."""

    @pytest.mark.parametrize(
        ("raw", "slug"),
        [
            ("shaken", "shaken"),
            ("  Flat Footed ", "flat-footed"),
            ("Flat_Footed", "flat-footed"),
            ("Dazed!", "dazed"),
            ("   ", ""),
        ],
    )
    def test_slugify(self, raw: str, slug: str) -> None:
        """Test ids are trimmed, lowercased and slugified."""
        assert slugify_condition_id(raw) == slug


class TestConditionLookup:
    """Tests for the immutable lookup."""

    def test_lookup_normalises_keys(self) -> None:
        """Test lookups accept any spelling of the id."""
        lookup = ConditionLookup([_condition("flat-footed")])

        assert "Flat Footed" in lookup
        assert lookup["FLAT_FOOTED"].condition_id == "flat-footed"
        assert len(lookup) == 1

    def test_world_overrides_compendium(self) -> None:
        """Test world definitions win identifier collisions."""
        pack = _condition("shaken", ("attack", -2))
        world = _condition("shaken", ("attack", -1))

        lookup = ConditionLookup.merge([pack], [world])

        assert lookup["shaken"] is world

    def test_items_without_id_skipped(self) -> None:
        """Test definitions without an identifier are not indexed."""
        assert len(ConditionLookup([_condition("", name="Nameless")])) == 0


class TestConditionLibrary:
    """Tests for the async refresh."""

    @pytest.mark.asyncio
    async def test_refresh_publishes_merged_lookup(self) -> None:
        """Test both sources are fetched and merged."""
        library = ConditionLibrary(
            compendium=StaticConditionSource([_condition("shaken"), _condition("blinded")]),
            world=StaticConditionSource([_condition("homebrew")]),
            pack_id="test.pack",
        )
        assert library.lookup is EMPTY_LOOKUP

        lookup = await library.refresh()

        assert library.lookup is lookup
        assert sorted(lookup) == ["blinded", "homebrew", "shaken"]

    @pytest.mark.asyncio
    async def test_refresh_without_sources(self) -> None:
        """Test a library with no sources publishes an empty lookup."""
        lookup = await ConditionLibrary(pack_id="test.pack").refresh()
        assert len(lookup) == 0

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_lookup(self) -> None:
        """Test a failing source raises and leaves the published lookup intact."""
        library = ConditionLibrary(
            compendium=StaticConditionSource([_condition("shaken")]), pack_id="test.pack"
        )
        previous = await library.refresh()
        library._world = FailingSource()

        with pytest.raises(ConditionLookupError) as exc_info:
            await library.refresh()

        assert exc_info.value.details["source"] == "world"
        assert library.lookup is previous

    def test_pack_id_defaults_to_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the pack id comes from settings when not given."""
        monkeypatch.setenv("THIRDERA_RULES_CONDITION_PACK", "world.conditions")
        assert ConditionLibrary().pack_id == "world.conditions"


class TestAggregateConditionModifiers:
    """Tests for summing condition changes."""

    def test_shaken(self, shaken_condition: ConditionItem) -> None:
        """Test attack and save penalties with breakdown rows."""
        lookup = ConditionLookup([shaken_condition])

        mods = aggregate_condition_modifiers(["Shaken"], lookup)

        assert mods.attack_melee == -2
        assert mods.attack_ranged == -2
        assert mods.saves == {SaveType.FORT: -2, SaveType.REF: -2, SaveType.WILL: -2}
        assert mods.save_breakdowns[SaveType.WILL] == [BreakdownEntry(label="Shaken", value=-2)]
        assert mods.applied == ["shaken"]

    def test_sums_ac_and_specific_attacks(self) -> None:
        """Test AC and per-kind attack changes accumulate."""
        lookup = ConditionLookup(
            [
                _condition("blinded", ("ac", -2), ("acLoseDex", 1)),
                _condition("entangled", ("attackMelee", -2), ("attackRanged", "-1")),
            ]
        )

        mods = aggregate_condition_modifiers(["blinded", "entangled"], lookup)

        assert mods.ac == -2
        assert mods.lose_dex_to_ac
        assert mods.attack_melee == -2
        assert mods.attack_ranged == -1

    def test_speed_multipliers(self) -> None:
        """Test valid multipliers compound and invalid ones are ignored."""
        lookup = ConditionLookup(
            [
                _condition("entangled", ("speedMultiplier", 0.5)),
                _condition("exhausted", ("speedMultiplier", "0.5")),
                _condition("hasted", ("speedMultiplier", 2)),
                _condition("frozen", ("speedMultiplier", 0)),
            ]
        )

        mods = aggregate_condition_modifiers(["entangled", "exhausted", "hasted", "frozen"], lookup)

        assert mods.speed_multiplier == 0.25

    def test_lose_dex_zero_does_not_set(self) -> None:
        """Test a zero acLoseDex value leaves the flag clear."""
        lookup = ConditionLookup([_condition("alert", ("acLoseDex", 0))])
        assert not aggregate_condition_modifiers(["alert"], lookup).lose_dex_to_ac

    def test_degrades_silently(self) -> None:
        """Test unknown ids, unknown keys and non-numeric values are skipped."""
        lookup = ConditionLookup(
            [
                _condition(
                    "odd",
                    ("ac", "lots"),
                    ("ac", True),
                    ("ac", None),
                    ("ac", float("nan")),
                    ("charisma", -4),
                    ("saveWill", 1.0),
                )
            ]
        )

        mods = aggregate_condition_modifiers(["odd", "unknown"], lookup)

        assert mods.ac == 0
        assert mods.ac_breakdown == []
        assert mods.saves[SaveType.WILL] == 1
        assert isinstance(mods.saves[SaveType.WILL], int)
        assert mods.applied == ["odd"]

    def test_duplicate_ids_applied_once(self, shaken_condition: ConditionItem) -> None:
        """Test listing a condition twice applies it once."""
        lookup = ConditionLookup([shaken_condition])

        mods = aggregate_condition_modifiers(["shaken", "Shaken"], lookup)

        assert mods.attack_melee == -2

    def test_empty(self) -> None:
        """Test no active conditions yields neutral modifiers."""
        mods = aggregate_condition_modifiers([], EMPTY_LOOKUP)

        assert mods.ac == 0
        assert mods.speed_multiplier == 1.0
        assert not mods.lose_dex_to_ac
