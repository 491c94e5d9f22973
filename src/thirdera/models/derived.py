"""Derived statistics records produced by the rules pipeline.

Every record here is immutable. Pipeline stages never mutate a record;
they return a copy of :class:`DerivedStats` with their own section
filled in, so each stage only sees what earlier stages produced.

Breakdowns are ordered lists of :class:`BreakdownEntry` that explain how
a number was reached, suitable for display next to the total.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

from thirdera.models.enums import (
    Ability,
    CasterType,
    EquipSlot,
    Handedness,
    HpCondition,
    LoadStatus,
    PreparationType,
    SaveType,
)


class Record(BaseModel):
    """Base class for derived, read-only records."""

    model_config = ConfigDict(frozen=True)


class BreakdownEntry(Record):
    """One labelled term of a computed total."""

    label: str
    value: int | float


Breakdown = list[BreakdownEntry]


# =============================================================================
# Abilities & Inventory
# =============================================================================


class AbilityDerived(Record):
    value: int
    racial: int
    effective: int
    mod: int


class CarryingCapacity(Record):
    """Load thresholds in pounds.

    ``heavy`` is the maximum load; ``light`` and ``medium`` are one third
    and two thirds of it, floored.
    """

    light: int
    medium: int
    heavy: int
    base_max_load: int = Field(description="Maximum load before the size multiplier")
    size_multiplier: float


class LoadEffects(Record):
    """Rules effects of an encumbrance load."""

    max_dex: int | None
    acp: int
    speed30: int
    speed20: int


class InventoryDerived(Record):
    total_weight: float
    capacity: CarryingCapacity
    load: LoadStatus
    effects: LoadEffects


class DexCap(Record):
    """Dexterity modifier after armor (and, for NPCs, load) caps."""

    uncapped_mod: int
    cap: int | None
    mod: int

    @computed_field(description="Whether the cap lowered the modifier")
    @property
    def capped(self) -> bool:
        return self.mod < self.uncapped_mod


# =============================================================================
# Class Progression & Hit Points
# =============================================================================


class ClassLevel(Record):
    class_item_id: str
    class_name: str
    level: int


class ClassProgression(Record):
    """Class levels, base attack bonus and base saves."""

    class_levels: list[ClassLevel] = Field(default_factory=list)
    total_level: int = 0
    bab: int = 0
    bab_breakdown: Breakdown = Field(default_factory=list)
    base_saves: dict[SaveType, int] = Field(default_factory=dict)
    save_breakdowns: dict[SaveType, Breakdown] = Field(default_factory=dict)

    def level_of(self, class_item_id: str) -> int:
        for entry in self.class_levels:
            if entry.class_item_id == class_item_id:
                return entry.level
        return 0


class HpLevelRow(Record):
    character_level: int
    class_name: str
    hp_rolled: int
    con_mod: int
    subtotal: int


class HitPointsDerived(Record):
    max: int
    from_levels: int
    adjustments_total: int
    breakdown: list[HpLevelRow] = Field(default_factory=list)
    adjustments: Breakdown = Field(default_factory=list)


# =============================================================================
# Skills
# =============================================================================


class SkillDerived(Record):
    """Computed state of one owned skill."""

    item_id: str
    key: str
    name: str
    ability: Ability
    ranks: int | float
    is_granted: bool = False
    is_class_skill: bool = False
    is_forbidden: bool = False
    forbidden_reason: str | None = None
    max_ranks: int | float = 0
    armor_penalty: int = 0
    total: int | float = 0
    breakdown: Breakdown = Field(default_factory=list)


class SkillPointBudget(Record):
    """Skill points available and spent; ``remaining`` may be negative."""

    available: int = 0
    spent: int | float = 0

    @computed_field(description="Unspent skill points")
    @property
    def remaining(self) -> float:
        return self.available - self.spent


# =============================================================================
# Features
# =============================================================================


class FeatureSource(Record):
    class_name: str
    grant_level: int


class ClassFeature(Record):
    """A feature granted by one class at its current level."""

    feat_key: str
    feat_name: str
    feat_item_id: str | None
    grant_level: int
    class_item_id: str
    class_name: str
    class_level: int
    scaling_value: str | None = None
    type: str = "feature"


class GrantedFeature(Record):
    """A feature aggregated by key across all classes."""

    feat_key: str
    feat_name: str
    feat_item_id: str | None
    type: str = "feature"
    scaling_value: str | None = None
    sources: list[FeatureSource] = Field(default_factory=list)
    is_duplicate: bool = False


class FeatureAggregation(Record):
    granted: list[GrantedFeature] = Field(default_factory=list)
    by_class: dict[str, list[ClassFeature]] = Field(default_factory=dict)

    def has(self, feat_key: str) -> bool:
        return any(feature.feat_key == feat_key for feature in self.granted)


# =============================================================================
# Conditions
# =============================================================================


class ConditionModifiers(Record):
    """Summed numeric effects of the active conditions."""

    ac: int | float = 0
    ac_breakdown: Breakdown = Field(default_factory=list)
    lose_dex_to_ac: bool = False
    speed_multiplier: float = 1.0
    saves: dict[SaveType, int | float] = Field(default_factory=lambda: {save: 0 for save in SaveType})
    save_breakdowns: dict[SaveType, Breakdown] = Field(
        default_factory=lambda: {save: [] for save in SaveType}
    )
    attack_melee: int | float = 0
    attack_melee_breakdown: Breakdown = Field(default_factory=list)
    attack_ranged: int | float = 0
    attack_ranged_breakdown: Breakdown = Field(default_factory=list)
    applied: list[str] = Field(default_factory=list, description="Condition ids that resolved")


# =============================================================================
# Defense & Movement
# =============================================================================


class ArmorClassDerived(Record):
    value: int
    touch: int
    flat_footed: int
    breakdown: Breakdown = Field(default_factory=list)


class SpeedInfo(Record):
    value: int
    base_speed: int
    reduced: bool = False
    reduced_by: list[str] = Field(default_factory=list)
    multiplier: float = 1.0


# =============================================================================
# Combat
# =============================================================================


class SaveDerived(Record):
    base: int
    total: int
    breakdown: Breakdown = Field(default_factory=list)


class AttackDerived(Record):
    total: int
    breakdown: Breakdown = Field(default_factory=list)


class CombatDerived(Record):
    bab: int
    grapple: int
    grapple_breakdown: Breakdown = Field(default_factory=list)
    melee: AttackDerived
    ranged: AttackDerived


class WieldingInfo(Record):
    """Whether and how well a creature of one size wields a weapon."""

    effective_handedness: Handedness | None
    attack_penalty: int = 0
    can_wield: bool = True


class TwfPenalties(Record):
    primary: int
    offhand: int


class WeaponDerived(Record):
    """Computed state of one owned weapon."""

    item_id: str
    name: str
    effective_dice: str
    wielding: WieldingInfo
    hand: EquipSlot
    twf_active: bool = False
    twf_penalty: int = 0
    attack_total: int = 0
    attack_breakdown: Breakdown = Field(default_factory=list)
    str_multiplier: float = 1.0
    damage_mod: int = 0
    damage_formula: str = ""


class NaturalAttackDerived(Record):
    name: str
    dice: str
    primary: bool
    attack_total: int
    attack_breakdown: Breakdown = Field(default_factory=list)
    damage_mod: int = 0
    damage_formula: str = ""


class SpellcastingDerived(Record):
    """Spellcasting summary for one class."""

    class_item_id: str
    class_name: str
    caster_level: int
    caster_type: CasterType
    preparation_type: PreparationType
    casting_ability: Ability
    ability_mod: int
    base_spell_dc: int
    spells_per_day: dict[int, int] = Field(default_factory=dict)


class HpState(Record):
    """Condition implied by current hit points."""

    value: int
    condition: HpCondition | None = None

    @computed_field(description="Hit points are between -9 and -1")
    @property
    def dying_stable_visible(self) -> bool:
        return -9 <= self.value <= -1


# =============================================================================
# Aggregate
# =============================================================================


class DerivedStats(Record):
    """All derived statistics of one actor.

    Sections are ``None`` (or empty) until the stage that owns them has
    run; a completed derivation fills every section.
    """

    actor_id: str
    abilities: dict[Ability, AbilityDerived] = Field(default_factory=dict)
    inventory: InventoryDerived | None = None
    dex: DexCap | None = None
    progression: ClassProgression | None = None
    hp: HitPointsDerived | None = None
    saves: dict[SaveType, SaveDerived] = Field(default_factory=dict)
    initiative: AttackDerived | None = None
    spellcasting: list[SpellcastingDerived] = Field(default_factory=list)
    skills: dict[str, SkillDerived] = Field(default_factory=dict)
    skill_points: SkillPointBudget = Field(default_factory=SkillPointBudget)
    features: FeatureAggregation = Field(default_factory=FeatureAggregation)
    conditions: ConditionModifiers = Field(default_factory=ConditionModifiers)
    ac: ArmorClassDerived | None = None
    speed: SpeedInfo | None = None
    combat: CombatDerived | None = None
    weapons: dict[str, WeaponDerived] = Field(default_factory=dict)
    natural_attacks: list[NaturalAttackDerived] = Field(default_factory=list)
    hp_state: HpState | None = None

    def ability_mod(self, ability: Ability) -> int:
        """Modifier of an ability, 0 before abilities are resolved.

        Dexterity returns the capped modifier once the cap is known.
        """
        if ability == Ability.DEX and self.dex is not None:
            return self.dex.mod
        resolved = self.abilities.get(ability)
        return resolved.mod if resolved is not None else 0


__all__ = [
    "Record",
    "BreakdownEntry",
    "Breakdown",
    "AbilityDerived",
    "CarryingCapacity",
    "LoadEffects",
    "InventoryDerived",
    "DexCap",
    "ClassLevel",
    "ClassProgression",
    "HpLevelRow",
    "HitPointsDerived",
    "SkillDerived",
    "SkillPointBudget",
    "FeatureSource",
    "ClassFeature",
    "GrantedFeature",
    "FeatureAggregation",
    "ConditionModifiers",
    "ArmorClassDerived",
    "SpeedInfo",
    "SaveDerived",
    "AttackDerived",
    "CombatDerived",
    "WieldingInfo",
    "TwfPenalties",
    "WeaponDerived",
    "NaturalAttackDerived",
    "SpellcastingDerived",
    "HpState",
    "DerivedStats",
]
