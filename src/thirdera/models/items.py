"""Authored item documents owned by an actor.

Items form a discriminated union on ``type``. Every variant shares the
identity and inventory fields of :class:`ItemBase`; the rest of each
schema mirrors what the rules engine reads from that kind of item.

The engine never writes back onto items. Anything derived per item
(skill totals, weapon attack bonuses) is returned in
:class:`thirdera.models.derived.DerivedStats` keyed by item id.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from thirdera.models.enums import (
    Ability,
    ArmorCategory,
    BabProgression,
    CasterType,
    EquippedState,
    EquipSlot,
    Handedness,
    PreparationType,
    SaveProgression,
    SaveType,
    Size,
    WeaponKind,
    WeightMode,
)


# =============================================================================
# Base
# =============================================================================


class Document(BaseModel):
    """Base class for authored documents and their nested parts.

    Authored data is read-only to the engine, and unknown keys from the
    host's storage format are ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )


class ItemBase(Document):
    """Fields common to every owned item."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Stable item identifier")
    name: str = Field(default="")
    weight: float = Field(default=0.0, ge=0, description="Weight of one unit in pounds")
    quantity: int = Field(default=1, ge=0)
    container_id: str | None = Field(default=None, description="Owning container item id")

    @field_validator("name", mode="before")
    @classmethod
    def default_none_name(cls, v: Any) -> str:
        """Replace a null name with an empty string."""
        if v is None:
            return ""
        return str(v)

    @property
    def stack_weight(self) -> float:
        """Weight of the whole stack; a quantity of 0 counts as 1."""
        return self.weight * max(self.quantity, 1)


# =============================================================================
# Armor & Shields
# =============================================================================


class ArmorSpeed(Document):
    """Speed while wearing the armor, for 30 ft and 20 ft base speeds."""

    ft30: int = Field(default=30, ge=0)
    ft20: int = Field(default=20, ge=0)


class ArmorItem(ItemBase):
    """Body armor or a shield."""

    type: Literal["armor"] = "armor"
    equipped: EquippedState = Field(default=EquippedState.FALSE)
    category: ArmorCategory = Field(default=ArmorCategory.LIGHT)
    bonus: int = Field(default=0, ge=0, description="Armor or shield bonus to AC")
    max_dex: int | None = Field(default=None, ge=0, description="Maximum Dex bonus; None is unlimited")
    check_penalty: int = Field(default=0, le=0, description="Armor check penalty")
    spell_failure: int = Field(default=0, ge=0, le=100)
    speed: ArmorSpeed = Field(default_factory=ArmorSpeed)

    @property
    def is_equipped(self) -> bool:
        return self.equipped == EquippedState.TRUE

    @property
    def is_shield(self) -> bool:
        return self.category == ArmorCategory.SHIELD


# =============================================================================
# Weapons
# =============================================================================


class WeaponDamage(Document):
    """Medium-size base damage."""

    dice: str = Field(default="1d6", description="Damage dice for a Medium weapon")
    type: str = Field(default="", description="Damage type, e.g. 'slashing'")


class WeaponCritical(Document):
    """Critical threat range and multiplier."""

    range: int = Field(default=20, ge=2, le=20, description="Lowest natural roll that threatens")
    multiplier: int = Field(default=2, ge=2)


class WeaponItem(ItemBase):
    """A melee or ranged weapon."""

    type: Literal["weapon"] = "weapon"
    damage: WeaponDamage = Field(default_factory=WeaponDamage)
    critical: WeaponCritical = Field(default_factory=WeaponCritical)
    range: int = Field(default=0, ge=0, description="Range increment in feet")
    kind: WeaponKind = Field(default=WeaponKind.MELEE)
    handedness: Handedness = Field(default=Handedness.ONE_HANDED)
    size: Size = Field(default=Size.MEDIUM)
    slot: EquipSlot = Field(default=EquipSlot.NONE, description="Hand the weapon is wielded in")

    @property
    def is_equipped(self) -> bool:
        return self.slot != EquipSlot.NONE

    @property
    def is_melee(self) -> bool:
        return self.kind == WeaponKind.MELEE


# =============================================================================
# Classes
# =============================================================================


class ClassSaves(Document):
    """Save progression for each of the three saves.

    Values are kept as authored strings; keys other than those of
    :class:`SaveProgression` contribute nothing.
    """

    fort: str = Field(default=SaveProgression.POOR.value)
    ref: str = Field(default=SaveProgression.POOR.value)
    will: str = Field(default=SaveProgression.POOR.value)

    def get(self, save: SaveType) -> str:
        return getattr(self, save.value)


class FeatureGrant(Document):
    """A feat or class feature granted at a class level."""

    level: int = Field(default=1, ge=1)
    feat_item_id: str | None = Field(default=None, description="Referenced feature definition id")
    feat_key: str = Field(default="", description="Stable aggregation key")
    feat_name: str = Field(default="")


class SpellcastingConfig(Document):
    """Spellcasting block of a class.

    ``spells_per_day_table`` is raw: row ``n`` is class level ``n + 1``,
    column ``m`` is spell level ``m``.
    """

    enabled: bool = False
    caster_type: CasterType = Field(default=CasterType.NONE)
    casting_ability: Ability = Field(default=Ability.INT)
    preparation_type: PreparationType = Field(default=PreparationType.NONE)
    spells_per_day_table: list[list[int]] = Field(default_factory=list)


class ClassItem(ItemBase):
    """A character class."""

    type: Literal["class"] = "class"
    hit_die: str = Field(default="d8")
    bab_progression: str = Field(
        default=BabProgression.AVERAGE.value,
        description="good, average or poor; anything else contributes nothing",
    )
    saves: ClassSaves = Field(default_factory=ClassSaves)
    skill_points_per_level: int = Field(default=2, ge=0)
    class_skills: list[str] = Field(default_factory=list, description="Ordered class-skill keys")
    features: list[FeatureGrant] = Field(default_factory=list)
    spellcasting: SpellcastingConfig | None = Field(default=None)

    @property
    def casts_spells(self) -> bool:
        return (
            self.spellcasting is not None
            and self.spellcasting.enabled
            and self.spellcasting.caster_type != CasterType.NONE
        )


# =============================================================================
# Skills, Races, Conditions, Features
# =============================================================================


class SkillItem(ItemBase):
    """An owned skill."""

    type: Literal["skill"] = "skill"
    key: str = Field(default="", description="Stable skill key, e.g. 'tumble'")
    ability: Ability = Field(default=Ability.INT)
    ranks: int | float = Field(default=0, ge=0)
    misc: int = Field(default=0)
    exclusive: bool = Field(default=False, description="Usable only as a class skill")
    armor_check_penalty: bool = Field(default=False)
    trained_only: bool = Field(default=False)


class RaceItem(ItemBase):
    """A character's race."""

    type: Literal["race"] = "race"
    size: Size = Field(default=Size.MEDIUM)
    speed: int = Field(default=30, ge=0)
    ability_adjustments: dict[Ability, int] = Field(default_factory=dict)
    excluded_skills: list[str] = Field(default_factory=list, description="Skill keys this race cannot use")
    favored_class: str = Field(default="")

    def adjustment(self, ability: Ability) -> int:
        """Racial adjustment for one ability, 0 when not listed."""
        return self.ability_adjustments.get(ability, 0)


class ConditionChange(Document):
    """One numeric change declared by a condition.

    ``value`` is kept as authored; non-numeric values are skipped when
    modifiers are aggregated.
    """

    key: str
    value: Any = None


class ConditionItem(ItemBase):
    """A status condition definition."""

    type: Literal["condition"] = "condition"
    condition_id: str = Field(default="", description="Status identifier, e.g. 'shaken'")
    description: str = Field(default="")
    changes: list[ConditionChange] = Field(default_factory=list)


class ScalingRow(Document):
    """A scaling value that applies from ``min_level`` upward."""

    min_level: int = Field(default=1, ge=1)
    value: str = Field(default="")


class FeatureItem(ItemBase):
    """A feat or class feature definition."""

    type: Literal["feature"] = "feature"
    key: str = Field(default="")
    kind: Literal["feat", "feature"] = "feature"
    description: str = Field(default="")
    scaling_table: list[ScalingRow] = Field(default_factory=list)


# =============================================================================
# Equipment & Containers
# =============================================================================


class EquipmentItem(ItemBase):
    """Adventuring gear, optionally a container for other items."""

    type: Literal["equipment"] = "equipment"
    equipped: EquippedState = Field(default=EquippedState.FALSE)
    is_container: bool = False
    weight_mode: WeightMode = Field(
        default=WeightMode.FULL,
        description="FIXED containers hide their contents' weight",
    )


Item = Annotated[
    ArmorItem
    | WeaponItem
    | ClassItem
    | SkillItem
    | ConditionItem
    | RaceItem
    | EquipmentItem
    | FeatureItem,
    Field(discriminator="type"),
]
"""Any owned item, discriminated on ``type``."""


__all__ = [
    "Document",
    "ItemBase",
    "ArmorSpeed",
    "ArmorItem",
    "WeaponDamage",
    "WeaponCritical",
    "WeaponItem",
    "ClassSaves",
    "FeatureGrant",
    "SpellcastingConfig",
    "ClassItem",
    "SkillItem",
    "RaceItem",
    "ConditionChange",
    "ConditionItem",
    "ScalingRow",
    "FeatureItem",
    "EquipmentItem",
    "Item",
]
