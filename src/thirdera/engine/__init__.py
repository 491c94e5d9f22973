"""Rules engine for Third Era (3.5 SRD) characters and NPCs.

This module derives every computed statistic of an actor from its
authored data through a dependency-ordered pipeline of pure resolvers,
and provides the condition library, dice roller and roll actions built
on the derived record.

Submodules:
    snapshot: Read-only per-actor index of owned items
    abilities: Effective ability scores and modifiers
    encumbrance: Carried weight, carrying capacity and load
    armor: Dex cap, Armor Class and speed
    progression: BAB, base saves, hit points and spellcasting
    skills: Skill totals, class skills and the skill point budget
    features: Class feature and feat aggregation
    conditions: Condition lookup (async refresh) and aggregation
    combat: Saves, initiative, attack totals, grapple, natural attacks
    weapons: Wielding, two-weapon fighting and weapon damage
    pipeline: The derive_actor entry point
    dice: Dice rolling (d20 library)
    actions: Attack, damage, skill, ability, save and initiative rolls

Example:
    >>> from thirdera.engine import ConditionLibrary, derive_actor
    >>>
    >>> library = ConditionLibrary(compendium=pack_source, world=world_source)
    >>> lookup = await library.refresh()
    >>> derived = derive_actor(actor, conditions=lookup)
    >>> derived.ac.value, derived.ac.touch, derived.ac.flat_footed
    (16, 12, 14)
"""

from __future__ import annotations

# =============================================================================
# Pipeline
# =============================================================================
from thirdera.engine.pipeline import Stage, build_stages, derive_actor
from thirdera.engine.snapshot import ActorSnapshot

# =============================================================================
# Resolvers
# =============================================================================
from thirdera.engine.abilities import compute_modifier, resolve_abilities
from thirdera.engine.armor import (
    apply_max_dex,
    compute_armor_class,
    compute_speed,
    get_effective_max_dex,
    resolve_dex_cap,
)
from thirdera.engine.combat import (
    compute_combat,
    compute_initiative,
    compute_saves,
    get_derived_hp_condition_id,
    resolve_natural_attacks,
)
from thirdera.engine.encumbrance import (
    compute_total_weight,
    get_carrying_capacity,
    get_load_effects,
    get_load_status,
)
from thirdera.engine.features import aggregate_features, resolve_scaling_value
from thirdera.engine.progression import (
    accumulate_hit_points,
    aggregate_class_progression,
    summarize_spellcasting,
)
from thirdera.engine.skills import resolve_skills
from thirdera.engine.weapons import (
    get_effective_damage,
    get_str_multiplier,
    get_twf_penalties,
    get_wielding_info,
    resolve_weapons,
)

# =============================================================================
# Conditions
# =============================================================================
from thirdera.engine.conditions import (
    EMPTY_LOOKUP,
    ConditionLibrary,
    ConditionLookup,
    ConditionSource,
    StaticConditionSource,
    aggregate_condition_modifiers,
    slugify_condition_id,
)

# =============================================================================
# Dice & Actions
# =============================================================================
from thirdera.engine.actions import (
    ActionOutcome,
    roll_ability_check,
    roll_initiative,
    roll_saving_throw,
    roll_skill_check,
    roll_weapon_attack,
    roll_weapon_damage,
)
from thirdera.engine.dice import DiceExpression, DiceRoller, roll


__all__ = [
    # Pipeline
    "Stage",
    "build_stages",
    "derive_actor",
    "ActorSnapshot",
    # Resolvers
    "compute_modifier",
    "resolve_abilities",
    "apply_max_dex",
    "compute_armor_class",
    "compute_speed",
    "get_effective_max_dex",
    "resolve_dex_cap",
    "compute_combat",
    "compute_initiative",
    "compute_saves",
    "get_derived_hp_condition_id",
    "resolve_natural_attacks",
    "compute_total_weight",
    "get_carrying_capacity",
    "get_load_effects",
    "get_load_status",
    "aggregate_features",
    "resolve_scaling_value",
    "accumulate_hit_points",
    "aggregate_class_progression",
    "summarize_spellcasting",
    "resolve_skills",
    "get_effective_damage",
    "get_str_multiplier",
    "get_twf_penalties",
    "get_wielding_info",
    "resolve_weapons",
    # Conditions
    "EMPTY_LOOKUP",
    "ConditionLibrary",
    "ConditionLookup",
    "ConditionSource",
    "StaticConditionSource",
    "aggregate_condition_modifiers",
    "slugify_condition_id",
    # Dice & Actions
    "ActionOutcome",
    "roll_ability_check",
    "roll_initiative",
    "roll_saving_throw",
    "roll_skill_check",
    "roll_weapon_attack",
    "roll_weapon_damage",
    "DiceExpression",
    "DiceRoller",
    "roll",
]
