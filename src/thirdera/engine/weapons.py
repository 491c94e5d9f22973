"""Weapon wielding, two-weapon fighting, Strength damage and size progression.

A weapon stores only its Medium-size base damage; its effective damage
for any size comes from the SRD damage progression table. A weapon sized
for another creature shifts one handedness step and costs -2 to attack
per size step, and one more than a step away cannot be wielded at all.
"""

from __future__ import annotations

import math

from thirdera.core.constants import (
    DAMAGE_PLACEHOLDER,
    DAMAGE_PROGRESSIONS,
    HANDEDNESS_ORDER,
    MAX_WIELDING_SIZE_STEPS,
    STR_MULTIPLIER_DEFAULT,
    STR_MULTIPLIER_OFFHAND,
    STR_MULTIPLIER_TWO_HANDED,
    TWF_DEFAULT_PENALTIES,
    TWF_PENALTIES,
    WIELDING_PENALTY_PER_STEP,
    size_index,
)
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import (
    AttackDerived,
    BreakdownEntry,
    TwfPenalties,
    WeaponDerived,
    WieldingInfo,
)
from thirdera.models.enums import EquipSlot, Handedness
from thirdera.models.items import WeaponItem


# =============================================================================
# Rules Helpers
# =============================================================================


def get_wielding_info(weapon_size: str, handedness: str, wielder_size: str) -> WieldingInfo:
    """How a creature of one size wields a weapon of another.

    Args:
        weapon_size: Size category of the weapon.
        handedness: Base handedness of the weapon.
        wielder_size: Size category of the wielder.

    Returns:
        WieldingInfo. Unrecognized sizes or handedness yield the safe
        default: wieldable, unchanged handedness, no penalty.

    Example:
        >>> get_wielding_info("Large", "oneHanded", "Medium").effective_handedness
        <Handedness.TWO_HANDED: 'twoHanded'>
    """
    weapon_index = size_index(weapon_size)
    wielder_index = size_index(wielder_size)
    if weapon_index is None or wielder_index is None or handedness not in HANDEDNESS_ORDER:
        return WieldingInfo(
            effective_handedness=handedness if handedness in HANDEDNESS_ORDER else None,
            attack_penalty=0,
            can_wield=True,
        )

    steps = weapon_index - wielder_index
    if steps == 0:
        return WieldingInfo(effective_handedness=handedness, attack_penalty=0, can_wield=True)

    shifted = HANDEDNESS_ORDER.index(handedness) + steps
    in_range = 0 <= shifted < len(HANDEDNESS_ORDER)
    can_wield = in_range and abs(steps) <= MAX_WIELDING_SIZE_STEPS
    return WieldingInfo(
        effective_handedness=HANDEDNESS_ORDER[shifted] if can_wield else None,
        attack_penalty=abs(steps) * WIELDING_PENALTY_PER_STEP,
        can_wield=can_wield,
    )


def get_twf_penalties(offhand_handedness: str | None) -> TwfPenalties:
    """Two-weapon fighting penalties keyed by the off-hand's effective handedness.

    A light off-hand weapon gives -4 / -8; anything else -6 / -10.
    """
    if offhand_handedness == Handedness.LIGHT:
        primary, offhand = TWF_PENALTIES[Handedness.LIGHT]
    else:
        primary, offhand = TWF_DEFAULT_PENALTIES
    return TwfPenalties(primary=primary, offhand=offhand)


def get_str_multiplier(hand: str, effective_handedness: str | None) -> float:
    """Strength damage multiplier: off-hand x0.5, two-handed x1.5, else x1."""
    if hand == EquipSlot.OFFHAND:
        return STR_MULTIPLIER_OFFHAND
    if effective_handedness == Handedness.TWO_HANDED:
        return STR_MULTIPLIER_TWO_HANDED
    return STR_MULTIPLIER_DEFAULT


def apply_str_multiplier(str_mod: int, multiplier: float) -> int:
    """Scale a positive Strength modifier (floored); penalties apply in full."""
    if str_mod <= 0:
        return str_mod
    return math.floor(str_mod * multiplier)


def get_effective_damage(base_dice: str, size: str) -> str:
    """Damage dice of a weapon of the given size.

    Args:
        base_dice: Medium base damage, e.g. ``"1d8"``.
        size: Size category of the weapon.

    Returns:
        The progressed dice. Sizes too small for the row give the
        placeholder ``"1"``; bases or sizes outside the table return
        ``base_dice`` unchanged.
    """
    index = size_index(size)
    progression = DAMAGE_PROGRESSIONS.get(base_dice)
    if index is None or progression is None:
        return base_dice
    return progression[index] or DAMAGE_PLACEHOLDER


def format_damage_formula(dice: str, modifier: int) -> str:
    """``"1d8 + 3"``, ``"1d8 - 1"`` or just ``"1d8"`` for a zero modifier."""
    if modifier > 0:
        return f"{dice} + {modifier}"
    if modifier < 0:
        return f"{dice} - {abs(modifier)}"
    return dice


# =============================================================================
# Per-Weapon Derivation
# =============================================================================


def resolve_weapon(
    weapon: WeaponItem,
    *,
    wielder_size: str,
    melee: AttackDerived,
    ranged: AttackDerived,
    str_mod: int,
    twf: TwfPenalties | None,
) -> WeaponDerived:
    """Compute the attack bonus and damage of one weapon.

    Args:
        weapon: The weapon.
        wielder_size: Size category of the wielder.
        melee: The actor's melee attack total.
        ranged: The actor's ranged attack total.
        str_mod: The actor's Strength modifier.
        twf: Two-weapon fighting penalties when both hands are in use,
            or None.
    """
    wielding = get_wielding_info(weapon.size, weapon.handedness, wielder_size)
    base_attack = melee if weapon.is_melee else ranged

    twf_active = False
    twf_penalty = 0
    if twf is not None and weapon.slot == EquipSlot.OFFHAND:
        twf_active, twf_penalty = True, twf.offhand
    elif twf is not None and weapon.slot == EquipSlot.PRIMARY:
        twf_active, twf_penalty = True, twf.primary

    breakdown = list(base_attack.breakdown)
    if wielding.attack_penalty:
        breakdown.append(BreakdownEntry(label="Size mismatch", value=wielding.attack_penalty))
    if twf_penalty:
        breakdown.append(BreakdownEntry(label="Two-weapon fighting", value=twf_penalty))

    if weapon.is_melee:
        str_multiplier = get_str_multiplier(weapon.slot, wielding.effective_handedness)
        damage_mod = apply_str_multiplier(str_mod, str_multiplier)
    else:
        str_multiplier = 0.0
        damage_mod = 0

    effective_dice = get_effective_damage(weapon.damage.dice, weapon.size)
    return WeaponDerived(
        item_id=weapon.id,
        name=weapon.name,
        effective_dice=effective_dice,
        wielding=wielding,
        hand=weapon.slot,
        twf_active=twf_active,
        twf_penalty=twf_penalty,
        attack_total=base_attack.total + wielding.attack_penalty + twf_penalty,
        attack_breakdown=breakdown,
        str_multiplier=str_multiplier,
        damage_mod=damage_mod,
        damage_formula=format_damage_formula(effective_dice, damage_mod),
    )


def resolve_weapons(
    snapshot: ActorSnapshot,
    *,
    melee: AttackDerived,
    ranged: AttackDerived,
    str_mod: int,
) -> dict[str, WeaponDerived]:
    """Resolve every owned weapon, keyed by item id.

    Two-weapon fighting applies while a weapon is equipped in the off
    hand; its penalties follow the effective handedness of the first
    off-hand weapon.
    """
    wielder_size = snapshot.size
    offhand = snapshot.weapons_in(EquipSlot.OFFHAND)
    twf: TwfPenalties | None = None
    if offhand:
        offhand_wielding = get_wielding_info(offhand[0].size, offhand[0].handedness, wielder_size)
        twf = get_twf_penalties(offhand_wielding.effective_handedness)

    return {
        weapon.id: resolve_weapon(
            weapon,
            wielder_size=wielder_size,
            melee=melee,
            ranged=ranged,
            str_mod=str_mod,
            twf=twf,
        )
        for weapon in snapshot.weapons
    }


__all__ = [
    "get_wielding_info",
    "get_twf_penalties",
    "get_str_multiplier",
    "apply_str_multiplier",
    "get_effective_damage",
    "format_damage_formula",
    "resolve_weapon",
    "resolve_weapons",
]
