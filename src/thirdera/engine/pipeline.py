"""Derivation pipeline: authored actor in, immutable derived record out.

Every stage is a function ``(snapshot, derived) -> derived`` that returns
a new :class:`DerivedStats` with its own section filled in. Stages read
earlier results from that record only, so the order below is the whole
dependency graph:

    abilities -> inventory -> dex cap -> class progression -> hit points
    -> skills -> features -> conditions -> combat basics -> spellcasting
    -> armor class -> speed -> weapons -> natural attacks -> hp state

Saves and attack totals include condition bonuses, so combat basics run
right after the condition stage.

Example:
    >>> derived = derive_actor(actor, conditions=library.lookup)
    >>> derived.ac.value, derived.combat.bab
    (16, 6)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial

from thirdera.core.config import Settings, get_settings
from thirdera.core.logging import actor_context, get_logger, stage_context
from thirdera.engine.abilities import resolve_abilities
from thirdera.engine.armor import compute_armor_class, compute_speed, resolve_dex_cap
from thirdera.engine.combat import (
    compute_combat,
    compute_initiative,
    compute_saves,
    resolve_hp_state,
    resolve_natural_attacks,
)
from thirdera.engine.conditions import EMPTY_LOOKUP, aggregate_condition_modifiers
from thirdera.engine.encumbrance import (
    compute_total_weight,
    get_carrying_capacity,
    get_load_effects,
    get_load_status,
)
from thirdera.engine.features import aggregate_features
from thirdera.engine.progression import (
    accumulate_hit_points,
    aggregate_class_progression,
    summarize_spellcasting,
)
from thirdera.engine.skills import resolve_skills
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.engine.weapons import resolve_weapons
from thirdera.models.actor import Actor
from thirdera.models.derived import DerivedStats, InventoryDerived
from thirdera.models.enums import Ability
from thirdera.models.items import ConditionItem, FeatureItem


logger = get_logger(__name__)

Stage = Callable[[ActorSnapshot, DerivedStats], DerivedStats]


def _ability_mods(derived: DerivedStats) -> dict[Ability, int]:
    return {ability: derived.ability_mod(ability) for ability in Ability}


# =============================================================================
# Stages
# =============================================================================


def abilities_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    return derived.model_copy(update={"abilities": resolve_abilities(snapshot)})


def inventory_stage(
    snapshot: ActorSnapshot,
    derived: DerivedStats,
    *,
    include_currency: bool = False,
) -> DerivedStats:
    """Carried weight, capacity from effective Strength, and the load."""
    strength = derived.abilities[Ability.STR].effective
    capacity = get_carrying_capacity(strength, snapshot.size)
    total_weight = compute_total_weight(snapshot, include_currency=include_currency)
    load = get_load_status(total_weight, capacity)
    inventory = InventoryDerived(
        total_weight=total_weight,
        capacity=capacity,
        load=load,
        effects=get_load_effects(load),
    )
    return derived.model_copy(update={"inventory": inventory})


def dex_cap_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    dex = resolve_dex_cap(snapshot, derived.abilities[Ability.DEX].mod, derived.inventory.effects)
    return derived.model_copy(update={"dex": dex})


def progression_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    return derived.model_copy(update={"progression": aggregate_class_progression(snapshot)})


def hit_points_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    hp = accumulate_hit_points(snapshot, derived.ability_mod(Ability.CON))
    return derived.model_copy(update={"hp": hp})


def skills_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    skills, budget = resolve_skills(
        snapshot,
        _ability_mods(derived),
        derived.progression.total_level,
        load_penalty=derived.inventory.effects.acp,
    )
    return derived.model_copy(update={"skills": skills, "skill_points": budget})


def features_stage(
    snapshot: ActorSnapshot,
    derived: DerivedStats,
    *,
    library: Mapping[str, FeatureItem] | None = None,
) -> DerivedStats:
    return derived.model_copy(update={"features": aggregate_features(snapshot, library)})


def conditions_stage(
    snapshot: ActorSnapshot,
    derived: DerivedStats,
    *,
    lookup: Mapping[str, ConditionItem] = EMPTY_LOOKUP,
) -> DerivedStats:
    modifiers = aggregate_condition_modifiers(snapshot.actor.active_conditions, lookup)
    return derived.model_copy(update={"conditions": modifiers})


def combat_basics_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    """Saves, initiative, grapple and the melee and ranged attack totals."""
    mods = _ability_mods(derived)
    combat_input = snapshot.actor.combat
    return derived.model_copy(
        update={
            "saves": compute_saves(derived.progression, mods, derived.conditions),
            "initiative": compute_initiative(mods[Ability.DEX]),
            "combat": compute_combat(
                bab=derived.progression.bab,
                size=snapshot.size,
                ability_mods=mods,
                melee_misc=combat_input.melee_misc,
                ranged_misc=combat_input.ranged_misc,
                conditions=derived.conditions,
            ),
        }
    )


def spellcasting_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    spellcasting = summarize_spellcasting(snapshot, _ability_mods(derived))
    return derived.model_copy(update={"spellcasting": spellcasting})


def armor_class_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    ac = compute_armor_class(snapshot, derived.dex, derived.conditions)
    return derived.model_copy(update={"ac": ac})


def speed_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    speed = compute_speed(
        snapshot,
        derived.inventory.load,
        derived.inventory.effects,
        derived.conditions.speed_multiplier,
    )
    return derived.model_copy(update={"speed": speed})


def weapons_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    weapons = resolve_weapons(
        snapshot,
        melee=derived.combat.melee,
        ranged=derived.combat.ranged,
        str_mod=derived.ability_mod(Ability.STR),
    )
    return derived.model_copy(update={"weapons": weapons})


def natural_attacks_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    """Natural attacks are an NPC stat-block feature; characters get none."""
    if not snapshot.is_npc:
        return derived
    attacks = resolve_natural_attacks(
        snapshot.actor.natural_attacks,
        derived.combat.melee.total,
        derived.ability_mod(Ability.STR),
    )
    return derived.model_copy(update={"natural_attacks": attacks})


def hp_state_stage(snapshot: ActorSnapshot, derived: DerivedStats) -> DerivedStats:
    hp = snapshot.actor.attributes.hp
    return derived.model_copy(update={"hp_state": resolve_hp_state(hp.value, hp.stable)})


# =============================================================================
# Entry Point
# =============================================================================


def build_stages(
    *,
    conditions: Mapping[str, ConditionItem] | None = None,
    feature_library: Mapping[str, FeatureItem] | None = None,
    include_currency: bool = False,
) -> tuple[Stage, ...]:
    """Stages in dependency order, bound to the session-wide inputs."""
    return (
        abilities_stage,
        partial(inventory_stage, include_currency=include_currency),
        dex_cap_stage,
        progression_stage,
        hit_points_stage,
        skills_stage,
        partial(features_stage, library=feature_library),
        partial(conditions_stage, lookup=conditions if conditions is not None else EMPTY_LOOKUP),
        combat_basics_stage,
        spellcasting_stage,
        armor_class_stage,
        speed_stage,
        weapons_stage,
        natural_attacks_stage,
        hp_state_stage,
    )


def derive_actor(
    actor: Actor,
    *,
    conditions: Mapping[str, ConditionItem] | None = None,
    feature_library: Mapping[str, FeatureItem] | None = None,
    settings: Settings | None = None,
) -> DerivedStats:
    """Run the full rules pipeline for one actor.

    The actor is never modified. Missing references (an unknown class
    id, an unresolved condition, a feature without a definition) degrade
    to neutral values instead of raising.

    Args:
        actor: The authored actor with its owned items.
        conditions: Published condition lookup, e.g.
            ``ConditionLibrary.lookup``. Without one, active conditions
            have no effect.
        feature_library: Feature definitions by id, consulted when the
            actor does not own the referenced feature item.
        settings: Engine settings; the cached settings by default.

    Returns:
        The derived statistics.
    """
    settings = settings or get_settings()
    snapshot = ActorSnapshot.from_actor(actor)
    stages = build_stages(
        conditions=conditions,
        feature_library=feature_library,
        include_currency=settings.rules.currency_weight,
    )

    derived = DerivedStats(actor_id=actor.id)
    with actor_context(actor.id, actor.name, actor.kind):
        for stage in stages:
            with stage_context(stage):
                derived = stage(snapshot, derived)

        logger.debug(
            "Actor derived",
            level=derived.progression.total_level,
            hp=derived.hp.max,
            ac=derived.ac.value,
            bab=derived.combat.bab,
            load=derived.inventory.load,
            conditions=derived.conditions.applied,
        )
    return derived


__all__ = [
    "Stage",
    "build_stages",
    "derive_actor",
    "abilities_stage",
    "inventory_stage",
    "dex_cap_stage",
    "progression_stage",
    "hit_points_stage",
    "skills_stage",
    "features_stage",
    "conditions_stage",
    "combat_basics_stage",
    "spellcasting_stage",
    "armor_class_stage",
    "speed_stage",
    "weapons_stage",
    "natural_attacks_stage",
    "hp_state_stage",
]
