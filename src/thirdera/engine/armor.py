"""Dexterity cap, Armor Class and speed.

SRD formulas implemented here:
    AC          = 10 + armor + shield + Dex + size + misc + conditions
    Touch AC    = 10 + Dex + size + misc + conditions
    Flat-footed = AC with the Dex term clamped to ``min(Dex, 0)``

Only one armor and one shield contribute: the highest bonus of each,
the first one found winning ties. A condition that makes the creature
lose its Dex bonus zeroes the Dex term of all three values.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from thirdera.core.constants import BASE_ARMOR_CLASS, SIZE_MODIFIERS, SPEED_THRESHOLD
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import (
    ArmorClassDerived,
    BreakdownEntry,
    ConditionModifiers,
    DexCap,
    LoadEffects,
    SpeedInfo,
)
from thirdera.models.enums import LoadStatus
from thirdera.models.items import ArmorItem


def _signed(n: int) -> str:
    return f"+{n}" if n >= 0 else str(n)


# =============================================================================
# Dex Cap
# =============================================================================


def get_effective_max_dex(armor_caps: Iterable[int | None], load_max_dex: int | None = None) -> int | None:
    """Lowest of the given caps; ``None`` entries mean unlimited.

    Returns:
        The effective cap, or None when nothing limits Dex.
    """
    caps = [cap for cap in (*armor_caps, load_max_dex) if cap is not None]
    return min(caps) if caps else None


def apply_max_dex(dex_mod: int, max_dex: int | None) -> int:
    """Clamp a Dex modifier down to a cap; the cap never raises it."""
    if max_dex is None:
        return dex_mod
    return min(dex_mod, max_dex)


def resolve_dex_cap(snapshot: ActorSnapshot, dex_mod: int, load: LoadEffects) -> DexCap:
    """Cap the Dex modifier for an actor.

    Characters are capped by equipped body armor only. NPCs are also
    capped by their encumbrance load. Shields never cap Dex.

    Args:
        snapshot: The indexed actor.
        dex_mod: Uncapped Dex modifier.
        load: Effects of the actor's current load.
    """
    armor_caps = (armor.max_dex for armor in snapshot.equipped_armor)
    load_cap = load.max_dex if snapshot.is_npc else None
    cap = get_effective_max_dex(armor_caps, load_cap)
    return DexCap(uncapped_mod=dex_mod, cap=cap, mod=apply_max_dex(dex_mod, cap))


# =============================================================================
# Armor Class
# =============================================================================


def select_best_armor(items: Iterable[ArmorItem]) -> ArmorItem | None:
    """Highest-bonus item; the first one wins ties. Zero bonuses never win."""
    best: ArmorItem | None = None
    for item in items:
        if item.bonus > (best.bonus if best else 0):
            best = item
    return best


def compute_armor_class(
    snapshot: ActorSnapshot,
    dex: DexCap,
    conditions: ConditionModifiers,
) -> ArmorClassDerived:
    """Compute AC, touch AC and flat-footed AC with a breakdown.

    Args:
        snapshot: The indexed actor.
        dex: The capped Dex modifier.
        conditions: Aggregated condition modifiers.

    Returns:
        ArmorClassDerived. The breakdown lists only non-zero terms and
        leaves out the base 10.
    """
    armor = select_best_armor(snapshot.equipped_armor)
    shield = select_best_armor(snapshot.equipped_shields)
    armor_bonus = armor.bonus if armor else 0
    shield_bonus = shield.bonus if shield else 0

    size_mod = SIZE_MODIFIERS.get(snapshot.size, 0)
    misc = snapshot.actor.attributes.ac.misc
    condition_ac = conditions.ac

    if conditions.lose_dex_to_ac:
        dex_term = 0
        flat_footed_dex = 0
    else:
        dex_term = dex.mod
        flat_footed_dex = min(dex.mod, 0)

    common = BASE_ARMOR_CLASS + size_mod + misc + condition_ac
    value = common + armor_bonus + shield_bonus + dex_term
    touch = common + dex_term
    flat_footed = common + armor_bonus + shield_bonus + flat_footed_dex

    breakdown: list[BreakdownEntry] = []
    if armor_bonus:
        breakdown.append(BreakdownEntry(label=armor.name, value=armor_bonus))
    if shield_bonus:
        breakdown.append(BreakdownEntry(label=shield.name, value=shield_bonus))
    if dex_term:
        label = f"Dex (max {_signed(dex.cap)})" if dex.capped else "Dex"
        breakdown.append(BreakdownEntry(label=label, value=dex_term))
    if size_mod:
        breakdown.append(BreakdownEntry(label="Size", value=size_mod))
    if misc:
        breakdown.append(BreakdownEntry(label="Misc", value=misc))
    breakdown.extend(entry for entry in conditions.ac_breakdown if entry.value)

    return ArmorClassDerived(
        value=math.floor(value),
        touch=math.floor(touch),
        flat_footed=math.floor(flat_footed),
        breakdown=breakdown,
    )


# =============================================================================
# Speed
# =============================================================================


def compute_speed(
    snapshot: ActorSnapshot,
    load: LoadStatus,
    load_effects: LoadEffects,
    speed_multiplier: float = 1.0,
) -> SpeedInfo:
    """Resolve land speed after armor, encumbrance and conditions.

    Armor and load each look up their capped speed in the 30 ft column
    when the base speed is 30 ft or more, else the 20 ft column, and
    only ever lower the speed. Conditions multiply last; the result is
    floored.

    Args:
        snapshot: The indexed actor.
        load: Current encumbrance load.
        load_effects: Effects of that load.
        speed_multiplier: Product of condition speed factors.
    """
    base_speed = snapshot.actor.attributes.speed.value
    fast = base_speed >= SPEED_THRESHOLD
    speed = base_speed
    reduced_by: list[str] = []

    for armor in snapshot.equipped_armor:
        if not armor.category.reduces_speed:
            continue
        armor_speed = armor.speed.ft30 if fast else armor.speed.ft20
        if armor_speed < speed:
            speed = armor_speed
            reduced_by.append(armor.name)
        break

    if load != LoadStatus.LIGHT:
        load_speed = load_effects.speed30 if fast else load_effects.speed20
        if load_speed < speed:
            speed = load_speed
            reduced_by.append(f"Encumbrance ({load})")

    if speed_multiplier != 1:
        multiplied = math.floor(speed * speed_multiplier)
        if multiplied < speed:
            reduced_by.append("Conditions")
        speed = multiplied

    return SpeedInfo(
        value=speed,
        base_speed=base_speed,
        reduced=speed < base_speed,
        reduced_by=reduced_by,
        multiplier=speed_multiplier,
    )


__all__ = [
    "get_effective_max_dex",
    "apply_max_dex",
    "resolve_dex_cap",
    "select_best_armor",
    "compute_armor_class",
    "compute_speed",
]
