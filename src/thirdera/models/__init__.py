"""Pydantic models for the Third Era rules engine.

Exports:
    Authored inputs: Actor and its parts, the Item union and its variants.
    Derived outputs: DerivedStats and its per-section records.
    Enumerations: ability, size, item, progression and condition keys.
    Progression: XP table and BAB/save/spells-per-day helpers.
"""

from __future__ import annotations

from thirdera.models.actor import (
    AbilityScore,
    Actor,
    ActorAttributes,
    ActorDetails,
    CombatInput,
    Currency,
    GrantedSkill,
    HitPoints,
    HpAdjustment,
    LevelHistoryEntry,
    NaturalAttack,
    SaveBases,
    load_actor,
)
from thirdera.models.derived import (
    AbilityDerived,
    ArmorClassDerived,
    AttackDerived,
    BreakdownEntry,
    CarryingCapacity,
    ClassProgression,
    CombatDerived,
    ConditionModifiers,
    DerivedStats,
    DexCap,
    FeatureAggregation,
    GrantedFeature,
    HitPointsDerived,
    HpState,
    InventoryDerived,
    LoadEffects,
    NaturalAttackDerived,
    SaveDerived,
    SkillDerived,
    SkillPointBudget,
    SpeedInfo,
    SpellcastingDerived,
    TwfPenalties,
    WeaponDerived,
    WieldingInfo,
)
from thirdera.models.enums import (
    Ability,
    ActorKind,
    ArmorCategory,
    BabProgression,
    CasterType,
    ConditionChangeKey,
    EquippedState,
    EquipSlot,
    Handedness,
    HpCondition,
    ItemType,
    LoadStatus,
    PreparationType,
    SaveProgression,
    SaveType,
    Size,
    WeaponKind,
    WeightMode,
)
from thirdera.models.items import (
    ArmorItem,
    ClassItem,
    ConditionChange,
    ConditionItem,
    EquipmentItem,
    FeatureGrant,
    FeatureItem,
    Item,
    RaceItem,
    ScalingRow,
    SkillItem,
    SpellcastingConfig,
    WeaponItem,
)
from thirdera.models.progression import (
    get_level_for_xp,
    get_midpoint_xp_for_level,
    get_next_level_xp,
    get_xp_for_level,
    get_xp_progress,
)


__all__ = [
    # Actor
    "Actor",
    "AbilityScore",
    "ActorAttributes",
    "ActorDetails",
    "CombatInput",
    "Currency",
    "GrantedSkill",
    "HitPoints",
    "HpAdjustment",
    "LevelHistoryEntry",
    "NaturalAttack",
    "SaveBases",
    "load_actor",
    # Items
    "Item",
    "ArmorItem",
    "ClassItem",
    "ConditionChange",
    "ConditionItem",
    "EquipmentItem",
    "FeatureGrant",
    "FeatureItem",
    "RaceItem",
    "ScalingRow",
    "SkillItem",
    "SpellcastingConfig",
    "WeaponItem",
    # Derived
    "DerivedStats",
    "AbilityDerived",
    "ArmorClassDerived",
    "AttackDerived",
    "BreakdownEntry",
    "CarryingCapacity",
    "ClassProgression",
    "CombatDerived",
    "ConditionModifiers",
    "DexCap",
    "FeatureAggregation",
    "GrantedFeature",
    "HitPointsDerived",
    "HpState",
    "InventoryDerived",
    "LoadEffects",
    "NaturalAttackDerived",
    "SaveDerived",
    "SkillDerived",
    "SkillPointBudget",
    "SpeedInfo",
    "SpellcastingDerived",
    "TwfPenalties",
    "WeaponDerived",
    "WieldingInfo",
    # Enums
    "Ability",
    "ActorKind",
    "ArmorCategory",
    "BabProgression",
    "CasterType",
    "ConditionChangeKey",
    "EquippedState",
    "EquipSlot",
    "Handedness",
    "HpCondition",
    "ItemType",
    "LoadStatus",
    "PreparationType",
    "SaveProgression",
    "SaveType",
    "Size",
    "WeaponKind",
    "WeightMode",
    # Progression
    "get_xp_for_level",
    "get_midpoint_xp_for_level",
    "get_next_level_xp",
    "get_level_for_xp",
    "get_xp_progress",
]
