"""Integration tests for deriving complete actors.

These tests run the full pipeline, from authored actor data through the
condition library to roll actions, the way a host application would.
"""

from __future__ import annotations

from typing import Any

import pytest

from thirdera import ConditionLibrary, StaticConditionSource, derive_actor, load_actor
from thirdera.core.config import get_settings
from thirdera.core.exceptions import ValidationError
from thirdera.engine import DiceRoller, roll_weapon_attack
from thirdera.models.actor import Actor
from thirdera.models.enums import Ability, HpCondition, LoadStatus, SaveType
from thirdera.models.items import ConditionItem, EquipmentItem, SkillItem


class TestCharacterDerivation:
    """Derivation of the sample level 6 fighter."""

    def test_core_statistics(self, sample_character: Actor) -> None:
        """Test the headline numbers of a fully derived fighter."""
        derived = derive_actor(sample_character)

        assert derived.actor_id == "actor-valeros"
        assert derived.progression.total_level == 6
        assert derived.combat.bab == 6
        assert derived.hp.max == 52
        assert (derived.ac.value, derived.ac.touch, derived.ac.flat_footed) == (16, 12, 14)
        assert derived.saves[SaveType.FORT].total == 7
        assert derived.saves[SaveType.REF].total == 4
        assert derived.saves[SaveType.WILL].total == 3
        assert derived.initiative.total == 2
        assert derived.combat.grapple == 9

    def test_inventory_and_speed(self, sample_character: Actor) -> None:
        """Test armor and weapon weight leave a light load at full speed."""
        derived = derive_actor(sample_character)

        assert derived.inventory.total_weight == 29
        assert derived.inventory.capacity.heavy == 230
        assert derived.inventory.load == LoadStatus.LIGHT
        assert derived.speed.value == 30

    def test_weapon(self, sample_character: Actor) -> None:
        """Test the longsword's attack and damage."""
        longsword = derive_actor(sample_character).weapons["wpn-longsword"]

        assert longsword.attack_total == 9
        assert longsword.damage_formula == "1d8 + 3"
        assert longsword.wielding.can_wield

    def test_no_natural_attacks_or_hp_condition(self, sample_character: Actor) -> None:
        """Test characters get no natural attacks and healthy hp has no condition."""
        derived = derive_actor(sample_character)

        assert derived.natural_attacks == []
        assert derived.hp_state.condition is None

    def test_derivation_does_not_modify_actor(self, sample_character: Actor) -> None:
        """Test the authored actor is unchanged by derivation."""
        before = sample_character.model_dump()

        derive_actor(sample_character)

        assert sample_character.model_dump() == before

    def test_currency_weight_setting(
        self, sample_character_data: dict[str, Any], mock_env_vars: dict[str, str]
    ) -> None:
        """Test coins push the fighter into a medium load when counted."""
        actor = load_actor({**sample_character_data, "currency": {"gp": 5000}})

        derived = derive_actor(actor, settings=get_settings())

        assert derived.inventory.total_weight == 129
        assert derived.inventory.load == LoadStatus.MEDIUM
        assert derived.speed.value == 20
        assert derived.speed.reduced_by == ["Encumbrance (medium)"]
        assert derived.dex.mod == 2

    def test_currency_ignored_by_default(self, sample_character_data: dict[str, Any]) -> None:
        """Test coins weigh nothing unless the setting is on."""
        actor = load_actor({**sample_character_data, "currency": {"gp": 5000}})

        assert derive_actor(actor).inventory.load == LoadStatus.LIGHT

    def test_heavy_load_penalizes_skills(self) -> None:
        """Test a heavy load applies its check penalty to flagged skills."""
        actor = Actor(
            name="Porter",
            items=[
                EquipmentItem(id="eq-crate", name="Crate", weight=80),
                SkillItem(
                    id="sk-climb", name="Climb", key="climb", ability="str", armor_check_penalty=True
                ),
            ],
        )

        derived = derive_actor(actor)

        assert derived.inventory.load == LoadStatus.HEAVY
        assert derived.skills["sk-climb"].total == -6
        assert derived.skills["sk-climb"].breakdown[-1].label == "Load ACP"

    def test_invalid_data_rejected(self, sample_character_data: dict[str, Any]) -> None:
        """Test malformed authored data raises the engine's validation error."""
        with pytest.raises(ValidationError):
            load_actor({**sample_character_data, "kind": "dragon"})


class TestConditionFlow:
    """Conditions published by the library feed derivation."""

    @pytest.mark.asyncio
    async def test_shaken_fighter(
        self, sample_character: Actor, shaken_condition: ConditionItem
    ) -> None:
        """Test Shaken lowers attacks and saves through the published lookup."""
        library = ConditionLibrary(
            compendium=StaticConditionSource([shaken_condition]), pack_id="test.pack"
        )
        lookup = await library.refresh()
        shaken = sample_character.model_copy(update={"active_conditions": ["shaken"]})

        derived = derive_actor(shaken, conditions=lookup)

        assert derived.conditions.applied == ["shaken"]
        assert derived.combat.melee.total == 7
        assert derived.weapons["wpn-longsword"].attack_total == 7
        assert derived.saves[SaveType.FORT].total == 5
        assert derived.saves[SaveType.WILL].breakdown[-1].label == "Shaken"
        assert derived.ac.value == 16

    @pytest.mark.asyncio
    async def test_blinded_loses_dex(self, sample_character: Actor) -> None:
        """Test losing Dex to AC and a speed multiplier apply together."""
        blinded = ConditionItem(
            name="Blinded",
            condition_id="blinded",
            changes=[
                {"key": "ac", "value": -2},
                {"key": "acLoseDex", "value": 1},
                {"key": "speedMultiplier", "value": 0.5},
            ],
        )
        library = ConditionLibrary(world=StaticConditionSource([blinded]), pack_id="test.pack")
        lookup = await library.refresh()
        actor = sample_character.model_copy(update={"active_conditions": ["Blinded"]})

        derived = derive_actor(actor, conditions=lookup)

        assert (derived.ac.value, derived.ac.touch, derived.ac.flat_footed) == (12, 8, 12)
        assert derived.speed.value == 15

    def test_without_lookup_conditions_are_inert(self, sample_character: Actor) -> None:
        """Test active conditions have no effect before a lookup is published."""
        shaken = sample_character.model_copy(update={"active_conditions": ["shaken"]})

        derived = derive_actor(shaken)

        assert derived.conditions.applied == []
        assert derived.combat.melee.total == 9


class TestNpcDerivation:
    """Derivation of the sample orc NPC."""

    def test_authored_values(self, sample_npc: Actor) -> None:
        """Test NPC BAB, saves and hit points come from the stat block."""
        derived = derive_actor(sample_npc)

        assert derived.abilities[Ability.STR].effective == 17
        assert derived.combat.bab == 1
        assert derived.combat.melee.total == 4
        assert derived.saves[SaveType.FORT].base == 2
        assert derived.hp.max == 5

    def test_natural_attacks(self, sample_npc: Actor) -> None:
        """Test primary and secondary natural attacks."""
        bite, claw = derive_actor(sample_npc).natural_attacks

        assert (bite.name, bite.attack_total, bite.damage_formula) == ("Bite", 4, "1d6 + 3")
        assert (claw.name, claw.attack_total, claw.damage_formula) == ("Claw", -1, "1d4 + 1")

    @pytest.mark.parametrize(
        ("hp", "stable", "expected"),
        [
            (0, False, HpCondition.DISABLED),
            (-4, False, HpCondition.DYING),
            (-4, True, HpCondition.STABLE),
            (-12, False, HpCondition.DEAD),
        ],
    )
    def test_hp_state(
        self, sample_npc: Actor, hp: int, stable: bool, expected: HpCondition
    ) -> None:
        """Test the hp condition follows current hit points."""
        wounded = Actor.model_validate(
            {
                **sample_npc.model_dump(),
                "attributes": {"hp": {"value": hp, "max": 5, "stable": stable}},
            }
        )

        assert derive_actor(wounded).hp_state.condition == expected


def test_roll_from_derived_actor(sample_character: Actor) -> None:
    """Test rolling an attack straight from a derived actor."""
    derived = derive_actor(sample_character)

    outcome = roll_weapon_attack(sample_character, derived, "wpn-longsword", roller=DiceRoller(seed=3))

    assert outcome.success
    assert 10 <= outcome.total <= 29
