"""Tests for roll actions on derived statistics."""

from __future__ import annotations

import pytest

from thirdera.engine.actions import (
    ActionOutcome,
    roll_ability_check,
    roll_initiative,
    roll_saving_throw,
    roll_skill_check,
    roll_weapon_attack,
    roll_weapon_damage,
)
from thirdera.engine.dice import DiceRoller
from thirdera.engine.pipeline import derive_actor
from thirdera.models.actor import Actor
from thirdera.models.derived import DerivedStats
from thirdera.models.items import SkillItem, WeaponItem


@pytest.fixture
def dice_roller() -> DiceRoller:
    return DiceRoller(seed=1234)


@pytest.fixture
def armed_fighter(sample_character: Actor) -> Actor:
    """The sample fighter also carrying a Huge greataxe and a Climb skill."""
    greataxe = WeaponItem(
        id="wpn-huge-greataxe",
        name="Huge Greataxe",
        damage={"dice": "1d12"},
        critical={"range": 20, "multiplier": 3},
        handedness="twoHanded",
        size="Huge",
    )
    climb = SkillItem(id="sk-climb", name="Climb", key="climb", ability="str", ranks=4)
    return sample_character.model_copy(
        update={"items": [*sample_character.items, greataxe, climb]}
    )


@pytest.fixture
def derived(armed_fighter: Actor) -> DerivedStats:
    return derive_actor(armed_fighter)


class TestWeaponActions:
    """Tests for weapon attack and damage rolls."""

    def test_attack_expression(
        self, armed_fighter: Actor, derived: DerivedStats, dice_roller: DiceRoller
    ) -> None:
        """Test the attack rolls 1d20 plus the weapon's attack total."""
        outcome = roll_weapon_attack(armed_fighter, derived, "wpn-longsword", roller=dice_roller)

        assert outcome.success
        assert outcome.label == "Longsword Attack"
        assert outcome.expression == "1d20 + 9"
        assert outcome.total == outcome.roll.natural + 9
        assert outcome.threat == (outcome.roll.natural >= 19)

    def test_damage_expression(
        self, armed_fighter: Actor, derived: DerivedStats, dice_roller: DiceRoller
    ) -> None:
        """Test damage rolls effective dice plus Strength."""
        outcome = roll_weapon_damage(armed_fighter, derived, "wpn-longsword", roller=dice_roller)

        assert outcome.success
        assert outcome.expression == "1d8 + 3"
        assert 4 <= outcome.total <= 11

    def test_critical_damage(
        self, armed_fighter: Actor, derived: DerivedStats, dice_roller: DiceRoller
    ) -> None:
        """Test a critical rolls the damage once per multiplier step."""
        outcome = roll_weapon_damage(
            armed_fighter, derived, "wpn-longsword", critical=True, roller=dice_roller
        )

        assert outcome.expression == "(1d8 + 3) + (1d8 + 3)"
        assert len(outcome.roll.dice) == 2

    def test_unowned_weapon_rejected(self, armed_fighter: Actor, derived: DerivedStats) -> None:
        """Test rolling a weapon the actor does not own is rejected."""
        outcome = roll_weapon_attack(armed_fighter, derived, "wpn-missing")

        assert not outcome.success
        assert "not owned" in outcome.reason
        assert outcome.roll is None
        assert outcome.total is None

    def test_non_weapon_rejected(self, armed_fighter: Actor, derived: DerivedStats) -> None:
        """Test rolling armor as a weapon is rejected."""
        outcome = roll_weapon_damage(armed_fighter, derived, "arm-chain-shirt")

        assert not outcome.success
        assert outcome.reason == "Chain Shirt is not a weapon."

    def test_unwieldable_weapon_rejected(self, armed_fighter: Actor, derived: DerivedStats) -> None:
        """Test a weapon two sizes too large cannot be used."""
        assert not derived.weapons["wpn-huge-greataxe"].wielding.can_wield

        outcome = roll_weapon_attack(armed_fighter, derived, "wpn-huge-greataxe")

        assert not outcome.success
        assert "cannot wield" in outcome.reason


class TestChecks:
    """Tests for skill, ability, save and initiative rolls."""

    @pytest.mark.parametrize("skill", ["sk-climb", "climb", "Climb"])
    def test_skill_lookup(self, derived: DerivedStats, dice_roller: DiceRoller, skill: str) -> None:
        """Test skills resolve by item id, key or name."""
        outcome = roll_skill_check(derived, skill, roller=dice_roller)

        assert outcome.success
        assert outcome.label == "Climb Check"
        assert outcome.expression == "1d20 + 7"

    def test_unknown_skill_rejected(self, derived: DerivedStats) -> None:
        """Test an unknown skill is rejected."""
        outcome = roll_skill_check(derived, "juggling")

        assert not outcome.success
        assert outcome.reason == "Skill juggling not found on actor."

    def test_ability_check(self, derived: DerivedStats, dice_roller: DiceRoller) -> None:
        """Test ability checks use the ability modifier."""
        outcome = roll_ability_check(derived, "cha", roller=dice_roller)

        assert outcome.label == "Charisma Check"
        assert outcome.expression == "1d20 - 1"

    def test_invalid_ability_rejected(self, derived: DerivedStats) -> None:
        """Test an unknown ability is rejected instead of raising."""
        outcome = roll_ability_check(derived, "luck")

        assert outcome == ActionOutcome(
            success=False, reason="Ability luck not found.", label="Ability Check"
        )

    def test_saving_throw(self, derived: DerivedStats, dice_roller: DiceRoller) -> None:
        """Test saves roll their derived total."""
        outcome = roll_saving_throw(derived, "fort", roller=dice_roller)

        assert outcome.label == "Fortitude Save"
        assert outcome.expression == "1d20 + 7"

    def test_initiative(self, derived: DerivedStats, dice_roller: DiceRoller) -> None:
        """Test initiative rolls the capped Dex modifier."""
        outcome = roll_initiative(derived, roller=dice_roller)

        assert outcome.label == "Initiative"
        assert outcome.expression == "1d20 + 2"
