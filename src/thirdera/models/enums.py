"""Enumeration types for the Third Era rules engine.

Enum values are the exact keys used by authored documents (``"str"``,
``"oneHanded"``, ``"Medium"``...), so raw strings and enum members compare
equal and can be used interchangeably as table keys.
"""

from __future__ import annotations

from enum import StrEnum

from thirdera.core.constants import GRAPPLE_SIZE_MODIFIERS, SIZE_MODIFIERS, SIZE_ORDER


class Ability(StrEnum):
    """The six 3.5 SRD ability scores."""

    STR = "str"
    DEX = "dex"
    CON = "con"
    INT = "int"
    WIS = "wis"
    CHA = "cha"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability (e.g. 'Strength' for STR)."""
        names = {
            Ability.STR: "Strength",
            Ability.DEX: "Dexterity",
            Ability.CON: "Constitution",
            Ability.INT: "Intelligence",
            Ability.WIS: "Wisdom",
            Ability.CHA: "Charisma",
        }
        return names[self]

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation (e.g. 'STR')."""
        return self.name


class Size(StrEnum):
    """SRD creature and object size categories."""

    FINE = "Fine"
    DIMINUTIVE = "Diminutive"
    TINY = "Tiny"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    HUGE = "Huge"
    GARGANTUAN = "Gargantuan"
    COLOSSAL = "Colossal"

    @property
    def index(self) -> int:
        """Position in the size order, Fine = 0 through Colossal = 8."""
        return SIZE_ORDER.index(self.value)

    @property
    def modifier(self) -> int:
        """Size modifier to AC and attack rolls."""
        return SIZE_MODIFIERS[self.value]

    @property
    def grapple_modifier(self) -> int:
        """Special size modifier to grapple checks."""
        return GRAPPLE_SIZE_MODIFIERS[self.value]


class ActorKind(StrEnum):
    """Kind of actor; characters and NPCs follow slightly different rules."""

    CHARACTER = "character"
    NPC = "npc"


class ItemType(StrEnum):
    """Discriminator for owned item variants."""

    ARMOR = "armor"
    WEAPON = "weapon"
    CLASS = "class"
    SKILL = "skill"
    CONDITION = "condition"
    RACE = "race"
    EQUIPMENT = "equipment"
    FEATURE = "feature"


class EquippedState(StrEnum):
    """Legacy tri-state equip flag; only TRUE counts as equipped."""

    NONE = "none"
    TRUE = "true"
    FALSE = "false"


class ArmorCategory(StrEnum):
    """Armor categories. Shields are armor items with the SHIELD category."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    SHIELD = "shield"

    @property
    def reduces_speed(self) -> bool:
        """Whether armor of this category can lower its wearer's speed."""
        return self in (ArmorCategory.MEDIUM, ArmorCategory.HEAVY)


class Handedness(StrEnum):
    """Weapon handedness categories, lightest first."""

    LIGHT = "light"
    ONE_HANDED = "oneHanded"
    TWO_HANDED = "twoHanded"


class EquipSlot(StrEnum):
    """Hand a weapon is wielded in."""

    NONE = "none"
    PRIMARY = "primary"
    OFFHAND = "offhand"


class WeaponKind(StrEnum):
    """Melee or ranged weapon."""

    MELEE = "melee"
    RANGED = "ranged"


class BabProgression(StrEnum):
    """Base attack bonus progressions."""

    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class SaveProgression(StrEnum):
    """Base save progressions."""

    GOOD = "good"
    POOR = "poor"


class SaveType(StrEnum):
    """The three saving throws and their key abilities."""

    FORT = "fort"
    REF = "ref"
    WILL = "will"

    @property
    def ability(self) -> Ability:
        """Ability whose modifier adds to this save."""
        abilities = {
            SaveType.FORT: Ability.CON,
            SaveType.REF: Ability.DEX,
            SaveType.WILL: Ability.WIS,
        }
        return abilities[self]

    @property
    def full_name(self) -> str:
        """Display name of the save."""
        names = {
            SaveType.FORT: "Fortitude",
            SaveType.REF: "Reflex",
            SaveType.WILL: "Will",
        }
        return names[self]


class LoadStatus(StrEnum):
    """Encumbrance load tiers."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    OVERLOAD = "overload"


class WeightMode(StrEnum):
    """How a container's contents count toward carried weight."""

    FULL = "full"
    FIXED = "fixed"
    REDUCED = "reduced"


class ConditionChangeKey(StrEnum):
    """Numeric change keys a condition definition may declare."""

    AC = "ac"
    AC_LOSE_DEX = "acLoseDex"
    SPEED_MULTIPLIER = "speedMultiplier"
    SAVE_FORT = "saveFort"
    SAVE_REF = "saveRef"
    SAVE_WILL = "saveWill"
    ATTACK = "attack"
    ATTACK_MELEE = "attackMelee"
    ATTACK_RANGED = "attackRanged"


class CasterType(StrEnum):
    """Spellcasting tradition of a class."""

    NONE = "none"
    ARCANE = "arcane"
    DIVINE = "divine"


class PreparationType(StrEnum):
    """How a caster readies spells."""

    NONE = "none"
    PREPARED = "prepared"
    SPONTANEOUS = "spontaneous"


class HpCondition(StrEnum):
    """Conditions implied by current hit points."""

    DISABLED = "disabled"
    DYING = "dying"
    STABLE = "stable"
    DEAD = "dead"


__all__ = [
    "Ability",
    "Size",
    "ActorKind",
    "ItemType",
    "EquippedState",
    "ArmorCategory",
    "Handedness",
    "EquipSlot",
    "WeaponKind",
    "BabProgression",
    "SaveProgression",
    "SaveType",
    "LoadStatus",
    "WeightMode",
    "ConditionChangeKey",
    "CasterType",
    "PreparationType",
    "HpCondition",
]
