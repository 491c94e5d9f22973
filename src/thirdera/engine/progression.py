"""Class levels, base attack bonus, base saves, hit points and spellcasting.

Characters derive everything here from their level history: each entry
names the class a level was taken in and the hit die rolled for it.
NPCs carry authored BAB, base saves and maximum hit points instead.
"""

from __future__ import annotations

from collections.abc import Mapping

from thirdera.core.constants import MAX_SPELL_LEVEL
from thirdera.core.logging import get_logger
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import (
    BreakdownEntry,
    ClassLevel,
    ClassProgression,
    HitPointsDerived,
    HpLevelRow,
    SpellcastingDerived,
)
from thirdera.models.enums import Ability, SaveType
from thirdera.models.progression import (
    calculate_hp_for_level,
    get_bab_for_level,
    get_base_save_for_level,
    get_spells_per_day,
)


logger = get_logger(__name__)

UNKNOWN_CLASS_NAME = "Unknown"


# =============================================================================
# Class Progression
# =============================================================================


def aggregate_class_progression(snapshot: ActorSnapshot) -> ClassProgression:
    """Sum BAB and base saves across all classes the actor has levels in.

    Args:
        snapshot: The indexed actor.

    Returns:
        ClassProgression with per-class breakdowns. Classes with no
        levels are omitted.
    """
    actor = snapshot.actor
    total_level = len(actor.level_history) or actor.details.level

    if snapshot.is_npc:
        return _npc_progression(snapshot, total_level)

    class_levels: list[ClassLevel] = []
    bab = 0
    bab_breakdown: list[BreakdownEntry] = []
    base_saves = {save: 0 for save in SaveType}
    save_breakdowns: dict[SaveType, list[BreakdownEntry]] = {save: [] for save in SaveType}

    for class_item, level in snapshot.classes_with_levels:
        class_levels.append(
            ClassLevel(class_item_id=class_item.id, class_name=class_item.name, level=level)
        )

        contribution = get_bab_for_level(class_item.bab_progression, level)
        bab += contribution
        bab_breakdown.append(BreakdownEntry(label=class_item.name, value=contribution))

        for save in SaveType:
            save_contribution = get_base_save_for_level(class_item.saves.get(save), level)
            base_saves[save] += save_contribution
            save_breakdowns[save].append(
                BreakdownEntry(label=class_item.name, value=save_contribution)
            )

    return ClassProgression(
        class_levels=class_levels,
        total_level=total_level,
        bab=bab,
        bab_breakdown=bab_breakdown,
        base_saves=base_saves,
        save_breakdowns=save_breakdowns,
    )


def _npc_progression(snapshot: ActorSnapshot, total_level: int) -> ClassProgression:
    actor = snapshot.actor
    base_saves = {save: getattr(actor.saves, save.value) for save in SaveType}
    return ClassProgression(
        class_levels=[
            ClassLevel(class_item_id=item.id, class_name=item.name, level=level)
            for item, level in snapshot.classes_with_levels
        ],
        total_level=total_level,
        bab=actor.combat.bab,
        bab_breakdown=[BreakdownEntry(label="Base", value=actor.combat.bab)],
        base_saves=base_saves,
        save_breakdowns={
            save: [BreakdownEntry(label="Base", value=value)] for save, value in base_saves.items()
        },
    )


# =============================================================================
# Hit Points
# =============================================================================


def accumulate_hit_points(snapshot: ActorSnapshot, con_mod: int) -> HitPointsDerived:
    """Maximum hit points from the level history.

    Each level grants ``max(1, hp_rolled + con_mod)`` using the current
    Con modifier, so a Con change applies retroactively to every level.
    Flat adjustments are added afterwards and the total never drops
    below 1. Without a level history (and always for NPCs) the authored
    maximum is the base.

    Args:
        snapshot: The indexed actor.
        con_mod: Current Constitution modifier.

    Returns:
        HitPointsDerived with one breakdown row per level.
    """
    hp = snapshot.actor.attributes.hp
    rows: list[HpLevelRow] = []
    running = 0

    if snapshot.is_npc or not snapshot.actor.level_history:
        from_levels = hp.max
    else:
        for character_level, entry in enumerate(snapshot.actor.level_history, start=1):
            class_item = snapshot.get_class(entry.class_item_id)
            if class_item is None:
                logger.debug(
                    "Level history class not found",
                    actor=snapshot.actor.name,
                    class_item_id=entry.class_item_id,
                )
            level_hp = calculate_hp_for_level(entry.hp_rolled, con_mod)
            running += level_hp
            rows.append(
                HpLevelRow(
                    character_level=character_level,
                    class_name=class_item.name if class_item else UNKNOWN_CLASS_NAME,
                    hp_rolled=entry.hp_rolled,
                    con_mod=con_mod,
                    subtotal=level_hp,
                )
            )
        from_levels = running

    adjustments = [
        BreakdownEntry(label=adjustment.label, value=adjustment.value)
        for adjustment in hp.adjustments
        if adjustment.value
    ]
    adjustments_total = sum(adjustment.value for adjustment in hp.adjustments)

    return HitPointsDerived(
        max=max(1, from_levels + adjustments_total),
        from_levels=from_levels,
        adjustments_total=adjustments_total,
        breakdown=rows,
        adjustments=adjustments,
    )


# =============================================================================
# Spellcasting
# =============================================================================


def summarize_spellcasting(
    snapshot: ActorSnapshot,
    ability_mods: Mapping[Ability, int],
) -> list[SpellcastingDerived]:
    """Caster level, base DC and spells per day for each casting class.

    Args:
        snapshot: The indexed actor.
        ability_mods: Ability modifiers, Dex already capped.
    """
    summaries: list[SpellcastingDerived] = []
    for class_item, level in snapshot.classes_with_levels:
        if not class_item.casts_spells:
            continue
        config = class_item.spellcasting
        ability_mod = ability_mods.get(config.casting_ability, 0)
        summaries.append(
            SpellcastingDerived(
                class_item_id=class_item.id,
                class_name=class_item.name,
                caster_level=level,
                caster_type=config.caster_type,
                preparation_type=config.preparation_type,
                casting_ability=config.casting_ability,
                ability_mod=ability_mod,
                base_spell_dc=10 + ability_mod,
                spells_per_day={
                    spell_level: get_spells_per_day(config.spells_per_day_table, level, spell_level)
                    for spell_level in range(MAX_SPELL_LEVEL + 1)
                },
            )
        )
    return summaries


__all__ = [
    "aggregate_class_progression",
    "accumulate_hit_points",
    "summarize_spellcasting",
]
