"""Saving throws, initiative, attack totals, grapple and natural attacks.

Every total here is built from already-resolved inputs: capped Dex,
base attack bonus and base saves from class progression, and the
aggregated condition modifiers.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from thirdera.core.constants import (
    DEAD_HP_THRESHOLD,
    DEFAULT_NATURAL_DICE,
    GRAPPLE_SIZE_MODIFIERS,
    NATURAL_SECONDARY_PENALTY,
    SIZE_MODIFIERS,
)
from thirdera.engine.weapons import format_damage_formula
from thirdera.models.actor import NaturalAttack
from thirdera.models.derived import (
    AttackDerived,
    BreakdownEntry,
    ClassProgression,
    CombatDerived,
    ConditionModifiers,
    HpState,
    NaturalAttackDerived,
    SaveDerived,
)
from thirdera.models.enums import Ability, HpCondition, SaveType


# =============================================================================
# Saves & Initiative
# =============================================================================


def compute_saves(
    progression: ClassProgression,
    ability_mods: Mapping[Ability, int],
    conditions: ConditionModifiers,
) -> dict[SaveType, SaveDerived]:
    """Save totals: base + key ability modifier + condition bonuses.

    Breakdowns list the per-class base rows, the ability row and one row
    per condition.
    """
    saves: dict[SaveType, SaveDerived] = {}
    for save in SaveType:
        base = progression.base_saves.get(save, 0)
        ability_mod = ability_mods.get(save.ability, 0)
        condition_bonus = conditions.saves.get(save, 0)
        breakdown = [
            *progression.save_breakdowns.get(save, []),
            BreakdownEntry(label=save.ability.abbreviation, value=ability_mod),
            *conditions.save_breakdowns.get(save, []),
        ]
        saves[save] = SaveDerived(
            base=base,
            total=math.floor(base + ability_mod + condition_bonus),
            breakdown=breakdown,
        )
    return saves


def compute_initiative(dex_mod: int) -> AttackDerived:
    """Initiative bonus, the capped Dex modifier."""
    return AttackDerived(total=dex_mod, breakdown=[BreakdownEntry(label="DEX", value=dex_mod)])


# =============================================================================
# Attack Totals & Grapple
# =============================================================================


def _attack_total(
    label: str,
    bab: int,
    ability_mod: int,
    size_mod: int,
    misc: int,
    condition_bonus: int | float,
    condition_breakdown: list[BreakdownEntry],
) -> AttackDerived:
    breakdown = [
        BreakdownEntry(label="BAB", value=bab),
        BreakdownEntry(label=label, value=ability_mod),
        BreakdownEntry(label="Size", value=size_mod),
    ]
    if misc:
        breakdown.append(BreakdownEntry(label="Misc", value=misc))
    breakdown.extend(condition_breakdown)
    return AttackDerived(
        total=math.floor(bab + ability_mod + size_mod + misc + condition_bonus),
        breakdown=breakdown,
    )


def compute_combat(
    *,
    bab: int,
    size: str,
    ability_mods: Mapping[Ability, int],
    melee_misc: int,
    ranged_misc: int,
    conditions: ConditionModifiers,
) -> CombatDerived:
    """Melee and ranged attack totals plus the grapple modifier.

    Args:
        bab: Base attack bonus.
        size: Size category of the actor.
        ability_mods: Ability modifiers, Dex already capped.
        melee_misc: Authored melee bonus.
        ranged_misc: Authored ranged bonus.
        conditions: Aggregated condition modifiers.

    Returns:
        CombatDerived. Grapple is BAB + Str + the special grapple size
        modifier.
    """
    str_mod = ability_mods.get(Ability.STR, 0)
    dex_mod = ability_mods.get(Ability.DEX, 0)
    size_mod = SIZE_MODIFIERS.get(size, 0)
    grapple_size = GRAPPLE_SIZE_MODIFIERS.get(size, 0)

    grapple_breakdown = [
        BreakdownEntry(label="BAB", value=bab),
        BreakdownEntry(label="STR", value=str_mod),
    ]
    if grapple_size:
        grapple_breakdown.append(BreakdownEntry(label="Size", value=grapple_size))

    return CombatDerived(
        bab=bab,
        grapple=bab + str_mod + grapple_size,
        grapple_breakdown=grapple_breakdown,
        melee=_attack_total(
            "STR",
            bab,
            str_mod,
            size_mod,
            melee_misc,
            conditions.attack_melee,
            conditions.attack_melee_breakdown,
        ),
        ranged=_attack_total(
            "DEX",
            bab,
            dex_mod,
            size_mod,
            ranged_misc,
            conditions.attack_ranged,
            conditions.attack_ranged_breakdown,
        ),
    )


# =============================================================================
# Natural Attacks
# =============================================================================


def resolve_natural_attack(attack: NaturalAttack, melee_total: int, str_mod: int) -> NaturalAttackDerived:
    """Attack bonus and damage of one natural attack.

    Primary attacks use the full melee bonus and full Strength. Secondary
    attacks take -5 to hit and half Strength (floored) to damage.
    """
    breakdown = [BreakdownEntry(label="Melee", value=melee_total)]
    if attack.primary:
        attack_total = melee_total
        damage_mod = str_mod
    else:
        attack_total = melee_total + NATURAL_SECONDARY_PENALTY
        breakdown.append(BreakdownEntry(label="Secondary", value=NATURAL_SECONDARY_PENALTY))
        damage_mod = str_mod // 2

    dice = attack.dice.strip() or DEFAULT_NATURAL_DICE
    return NaturalAttackDerived(
        name=attack.name,
        dice=dice,
        primary=attack.primary,
        attack_total=attack_total,
        attack_breakdown=breakdown,
        damage_mod=damage_mod,
        damage_formula=format_damage_formula(dice, damage_mod),
    )


def resolve_natural_attacks(
    attacks: list[NaturalAttack],
    melee_total: int,
    str_mod: int,
) -> list[NaturalAttackDerived]:
    return [resolve_natural_attack(attack, melee_total, str_mod) for attack in attacks]


# =============================================================================
# HP State
# =============================================================================


def get_derived_hp_condition_id(hp_value: int, stable: bool = False) -> HpCondition | None:
    """Condition implied by current hit points (SRD: Dying, Dead).

    Returns:
        None above 0 hp, DISABLED at 0, DYING or STABLE from -1 to -9,
        DEAD at -10 or below.
    """
    if hp_value > 0:
        return None
    if hp_value <= DEAD_HP_THRESHOLD:
        return HpCondition.DEAD
    if hp_value < 0:
        return HpCondition.STABLE if stable else HpCondition.DYING
    return HpCondition.DISABLED


def resolve_hp_state(hp_value: int, stable: bool = False) -> HpState:
    return HpState(value=hp_value, condition=get_derived_hp_condition_id(hp_value, stable))


__all__ = [
    "compute_saves",
    "compute_initiative",
    "compute_combat",
    "resolve_natural_attack",
    "resolve_natural_attacks",
    "get_derived_hp_condition_id",
    "resolve_hp_state",
]
