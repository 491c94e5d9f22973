"""Roll actions built on derived statistics.

Each action reads totals from a :class:`DerivedStats` record, builds the
dice expression and rolls it. An action that cannot be taken (a weapon
the actor does not own, an item that is not a weapon, a weapon too large
or too small to wield) returns a rejected :class:`ActionOutcome` with a
reason meant for the player instead of raising.

Example:
    >>> derived = derive_actor(actor)
    >>> outcome = roll_weapon_attack(actor, derived, longsword.id)
    >>> outcome.success, outcome.expression
    (True, '1d20 + 9')
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from thirdera.core.logging import get_logger
from thirdera.engine.dice import DiceExpression, DiceRoller, format_check_expression
from thirdera.engine.weapons import format_damage_formula
from thirdera.models.actor import Actor
from thirdera.models.derived import DerivedStats, SkillDerived, WeaponDerived
from thirdera.models.enums import Ability, SaveType
from thirdera.models.items import WeaponItem


logger = get_logger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    """Result of attempting a roll action.

    Attributes:
        success: Whether the action was taken and rolled.
        reason: Why the action was rejected; empty on success.
        label: Display label such as ``"Longsword Attack"``.
        expression: The dice expression rolled.
        roll: The roll result, None when rejected.
        threat: For attacks, whether the natural roll is a critical threat.
    """

    success: bool
    reason: str = ""
    label: str = ""
    expression: str = ""
    roll: DiceExpression | None = None
    threat: bool = False

    @property
    def total(self) -> int | None:
        return self.roll.total if self.roll is not None else None

    @classmethod
    def rejected(cls, reason: str, label: str = "") -> ActionOutcome:
        logger.info("Action rejected", label=label, reason=reason)
        return cls(success=False, reason=reason, label=label)


def _roller(roller: DiceRoller | None) -> DiceRoller:
    return roller if roller is not None else DiceRoller()


def _check(label: str, modifier: int, roller: DiceRoller | None) -> ActionOutcome:
    expression = format_check_expression(modifier)
    result = _roller(roller).roll(expression)
    logger.info("Check rolled", label=label, expression=expression, total=result.total)
    return ActionOutcome(success=True, label=label, expression=expression, roll=result)


# =============================================================================
# Weapons
# =============================================================================


def _resolve_weapon(
    actor: Actor,
    derived: DerivedStats,
    weapon_id: str,
    label: str,
) -> tuple[WeaponItem, WeaponDerived] | ActionOutcome:
    item = actor.get_item(weapon_id)
    if item is None:
        return ActionOutcome.rejected(f"This weapon is not owned by {actor.name or 'this actor'}.", label)
    if not isinstance(item, WeaponItem):
        return ActionOutcome.rejected(f"{item.name} is not a weapon.", label)
    weapon = derived.weapons.get(item.id)
    if weapon is None:
        return ActionOutcome.rejected(f"{item.name} has no derived statistics.", label)
    if not weapon.wielding.can_wield:
        return ActionOutcome.rejected(
            f"{actor.name or 'This actor'} cannot wield {item.name}: "
            f"a {item.size} weapon is too far from a {actor.details.size} wielder's size.",
            label,
        )
    return item, weapon


def roll_weapon_attack(
    actor: Actor,
    derived: DerivedStats,
    weapon_id: str,
    *,
    roller: DiceRoller | None = None,
) -> ActionOutcome:
    """Roll ``1d20 + attack total`` for one owned weapon.

    Args:
        actor: The attacking actor.
        derived: The actor's derived statistics.
        weapon_id: Id of the weapon item.
        roller: Dice roller; a fresh one by default.

    Returns:
        ActionOutcome. ``threat`` is set when the natural roll falls in
        the weapon's critical threat range.
    """
    label = "Attack"
    resolved = _resolve_weapon(actor, derived, weapon_id, label)
    if isinstance(resolved, ActionOutcome):
        return resolved
    item, weapon = resolved

    label = f"{item.name} Attack"
    expression = format_check_expression(weapon.attack_total)
    result = _roller(roller).roll(expression)
    threat = result.threatens(item.critical.range)
    logger.info("Attack rolled", weapon=item.name, total=result.total, threat=threat)
    return ActionOutcome(success=True, label=label, expression=expression, roll=result, threat=threat)


def roll_weapon_damage(
    actor: Actor,
    derived: DerivedStats,
    weapon_id: str,
    *,
    critical: bool = False,
    roller: DiceRoller | None = None,
) -> ActionOutcome:
    """Roll effective damage dice plus the Strength damage modifier.

    Ranged weapons add no Strength. On a confirmed critical the damage is
    rolled once per point of the weapon's critical multiplier.
    """
    label = "Damage"
    resolved = _resolve_weapon(actor, derived, weapon_id, label)
    if isinstance(resolved, ActionOutcome):
        return resolved
    item, weapon = resolved

    label = f"{item.name} Damage"
    expression = format_damage_formula(weapon.effective_dice, weapon.damage_mod)
    multiplier = item.critical.multiplier if critical else 1
    result = _roller(roller).roll_damage(expression, multiplier=multiplier)
    logger.info("Damage rolled", weapon=item.name, total=result.total, critical=critical)
    return ActionOutcome(success=True, label=label, expression=result.expression, roll=result)


# =============================================================================
# Checks
# =============================================================================


def _find_skill(derived: DerivedStats, skill: str) -> SkillDerived | None:
    if skill in derived.skills:
        return derived.skills[skill]
    for resolved in derived.skills.values():
        if skill in (resolved.key, resolved.name):
            return resolved
    return None


def roll_skill_check(
    derived: DerivedStats,
    skill: str,
    *,
    roller: DiceRoller | None = None,
) -> ActionOutcome:
    """Roll a skill check by skill item id, key or name."""
    resolved = _find_skill(derived, skill)
    if resolved is None:
        return ActionOutcome.rejected(f"Skill {skill} not found on actor.", "Skill Check")
    return _check(f"{resolved.name} Check", math.floor(resolved.total), roller)


def roll_ability_check(
    derived: DerivedStats,
    ability: Ability | str,
    *,
    roller: DiceRoller | None = None,
) -> ActionOutcome:
    """Roll ``1d20 + ability modifier``; Dexterity uses the capped modifier."""
    try:
        ability = Ability(ability)
    except ValueError:
        return ActionOutcome.rejected(f"Ability {ability} not found.", "Ability Check")
    return _check(f"{ability.full_name} Check", derived.ability_mod(ability), roller)


def roll_saving_throw(
    derived: DerivedStats,
    save: SaveType | str,
    *,
    roller: DiceRoller | None = None,
) -> ActionOutcome:
    try:
        save = SaveType(save)
    except ValueError:
        return ActionOutcome.rejected(f"Save {save} not found.", "Saving Throw")
    resolved = derived.saves.get(save)
    if resolved is None:
        return ActionOutcome.rejected(f"Save {save} has not been derived.", "Saving Throw")
    return _check(f"{save.full_name} Save", resolved.total, roller)


def roll_initiative(derived: DerivedStats, *, roller: DiceRoller | None = None) -> ActionOutcome:
    modifier = derived.initiative.total if derived.initiative is not None else 0
    return _check("Initiative", modifier, roller)


__all__ = [
    "ActionOutcome",
    "roll_weapon_attack",
    "roll_weapon_damage",
    "roll_skill_check",
    "roll_ability_check",
    "roll_saving_throw",
    "roll_initiative",
]
