"""Tests for the Dex cap, Armor Class and speed."""

from __future__ import annotations

import pytest

from thirdera.engine.armor import (
    apply_max_dex,
    compute_armor_class,
    compute_speed,
    get_effective_max_dex,
    resolve_dex_cap,
    select_best_armor,
)
from thirdera.engine.encumbrance import get_load_effects
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.actor import Actor
from thirdera.models.derived import BreakdownEntry, ConditionModifiers, DexCap
from thirdera.models.enums import LoadStatus
from thirdera.models.items import ArmorItem


NO_CONDITIONS = ConditionModifiers()
LIGHT = get_load_effects(LoadStatus.LIGHT)


def _snapshot(*items: ArmorItem, **actor_fields: object) -> ActorSnapshot:
    return ActorSnapshot.from_actor(Actor(items=list(items), **actor_fields))


def _armor(bonus: int, max_dex: int | None = None, **fields: object) -> ArmorItem:
    return ArmorItem(name=f"Armor +{bonus}", equipped="true", bonus=bonus, max_dex=max_dex, **fields)


class TestDexCap:
    """Tests for capping the Dex modifier."""

    def test_apply_max_dex(self) -> None:
        """Test caps only ever lower the modifier."""
        assert apply_max_dex(5, None) == 5
        assert apply_max_dex(5, 2) == 2
        assert apply_max_dex(-1, 2) == -1

    def test_effective_max_dex_lowest_wins(self) -> None:
        """Test the lowest non-null cap applies."""
        assert get_effective_max_dex([None, None]) is None
        assert get_effective_max_dex([4, 2]) == 2
        assert get_effective_max_dex([4], 1) == 1
        assert get_effective_max_dex([], None) is None

    def test_character_capped_by_armor_only(self) -> None:
        """Test characters ignore the load cap."""
        snapshot = _snapshot(_armor(4, max_dex=4))
        heavy = get_load_effects(LoadStatus.HEAVY)

        dex = resolve_dex_cap(snapshot, 3, heavy)

        assert dex.mod == 3
        assert dex.cap == 4
        assert not dex.capped

    def test_npc_capped_by_load(self) -> None:
        """Test NPCs also respect the load cap."""
        snapshot = _snapshot(_armor(4, max_dex=4), kind="npc")
        heavy = get_load_effects(LoadStatus.HEAVY)

        dex = resolve_dex_cap(snapshot, 3, heavy)

        assert dex.mod == 1
        assert dex.capped

    def test_unequipped_armor_and_shields_do_not_cap(self) -> None:
        """Test only equipped body armor caps Dex."""
        snapshot = _snapshot(
            ArmorItem(bonus=8, max_dex=1, equipped="false"),
            ArmorItem(category="shield", bonus=2, max_dex=0, equipped="true"),
        )
        assert resolve_dex_cap(snapshot, 3, LIGHT).mod == 3


class TestArmorClass:
    """Tests for AC, touch and flat-footed AC."""

    def test_capped_dex_scenario(self) -> None:
        """Test Dex +3 under a max Dex 2 armor gives 16 / 12 / 14."""
        snapshot = _snapshot(_armor(4, max_dex=2))
        dex = resolve_dex_cap(snapshot, 3, LIGHT)

        ac = compute_armor_class(snapshot, dex, NO_CONDITIONS)

        assert (ac.value, ac.touch, ac.flat_footed) == (16, 12, 14)
        assert BreakdownEntry(label="Dex (max +2)", value=2) in ac.breakdown
        assert all(entry.value != 10 for entry in ac.breakdown)

    def test_best_armor_and_shield_only(self) -> None:
        """Test only the best armor and best shield contribute."""
        snapshot = _snapshot(
            _armor(3),
            _armor(5),
            _armor(5),
            _armor(1, category="shield"),
            _armor(2, category="shield"),
        )
        dex = DexCap(uncapped_mod=0, cap=None, mod=0)

        ac = compute_armor_class(snapshot, dex, NO_CONDITIONS)

        assert ac.value == 17
        assert select_best_armor(snapshot.equipped_armor) is snapshot.equipped_armor[1]

    def test_size_misc_and_conditions(self) -> None:
        """Test size, misc and condition AC add to every value."""
        snapshot = _snapshot(attributes={"ac": {"misc": 1}}, details={"size": "Small"})
        dex = DexCap(uncapped_mod=2, cap=None, mod=2)
        conditions = ConditionModifiers(
            ac=-2, ac_breakdown=[BreakdownEntry(label="Blinded", value=-2)]
        )

        ac = compute_armor_class(snapshot, dex, conditions)

        assert (ac.value, ac.touch, ac.flat_footed) == (12, 12, 10)
        assert [entry.label for entry in ac.breakdown] == ["Dex", "Size", "Misc", "Blinded"]

    def test_negative_dex_applies_to_flat_footed(self) -> None:
        """Test a Dex penalty stays in flat-footed AC."""
        snapshot = _snapshot()
        dex = DexCap(uncapped_mod=-1, cap=None, mod=-1)

        ac = compute_armor_class(snapshot, dex, NO_CONDITIONS)

        assert ac.flat_footed == ac.value == 9

    def test_lose_dex_zeroes_dex_term(self) -> None:
        """Test losing Dex to AC removes the Dex term everywhere."""
        snapshot = _snapshot(_armor(4))
        dex = DexCap(uncapped_mod=3, cap=None, mod=3)

        ac = compute_armor_class(snapshot, dex, ConditionModifiers(lose_dex_to_ac=True))

        assert (ac.value, ac.touch, ac.flat_footed) == (14, 10, 14)

    @pytest.mark.parametrize("dex_mod", [-3, -1, 0, 1, 4])
    def test_flat_footed_never_exceeds_ac(self, dex_mod: int) -> None:
        """Test flat-footed AC is at most full AC, equal when Dex is not positive."""
        snapshot = _snapshot(_armor(2))
        dex = DexCap(uncapped_mod=dex_mod, cap=None, mod=dex_mod)

        ac = compute_armor_class(snapshot, dex, NO_CONDITIONS)

        assert ac.flat_footed <= ac.value
        if dex_mod <= 0:
            assert ac.flat_footed == ac.value


class TestSpeed:
    """Tests for speed after armor, load and conditions."""

    def test_unarmored_light_load(self) -> None:
        """Test no reductions leave base speed."""
        speed = compute_speed(_snapshot(), LoadStatus.LIGHT, LIGHT)

        assert speed.value == 30
        assert not speed.reduced
        assert speed.reduced_by == []

    def test_medium_armor_reduces(self) -> None:
        """Test medium armor uses its 30 ft column."""
        breastplate = _armor(5, category="medium", speed={"ft30": 20, "ft20": 15})
        breastplate = breastplate.model_copy(update={"name": "Breastplate"})

        speed = compute_speed(_snapshot(breastplate), LoadStatus.LIGHT, LIGHT)

        assert speed.value == 20
        assert speed.reduced_by == ["Breastplate"]

    def test_light_armor_never_reduces(self) -> None:
        """Test light armor is ignored for speed."""
        shirt = _armor(4, category="light", speed={"ft30": 20, "ft20": 15})
        assert compute_speed(_snapshot(shirt), LoadStatus.LIGHT, LIGHT).value == 30

    def test_slow_creature_uses_20ft_column(self) -> None:
        """Test base speeds below 30 ft read the 20 ft column."""
        snapshot = _snapshot(attributes={"speed": {"value": 20}})
        medium = get_load_effects(LoadStatus.MEDIUM)

        speed = compute_speed(snapshot, LoadStatus.MEDIUM, medium)

        assert speed.value == 15
        assert speed.reduced_by == ["Encumbrance (medium)"]

    def test_condition_multiplier_floors(self) -> None:
        """Test condition multipliers apply last and floor."""
        speed = compute_speed(_snapshot(attributes={"speed": {"value": 35}}), LoadStatus.LIGHT, LIGHT, 0.5)

        assert speed.value == 17
        assert speed.reduced_by == ["Conditions"]
        assert speed.multiplier == 0.5

    def test_overload(self) -> None:
        """Test an overloaded creature cannot move."""
        overload = get_load_effects(LoadStatus.OVERLOAD)
        assert compute_speed(_snapshot(), LoadStatus.OVERLOAD, overload).value == 0
