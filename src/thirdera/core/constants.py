"""Read-only rules tables for the Third Era rules engine.

These are the process-wide lookup tables the resolvers consult: size
ordering and size-dependent modifiers, the SRD carrying-capacity table,
encumbrance load effects, weapon damage size progressions and the
two-weapon fighting penalty table. They are loaded once at import and
never mutated.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

# =============================================================================
# Sizes (SRD: Size Modifiers)
# =============================================================================

SIZE_ORDER: Final[tuple[str, ...]] = (
    "Fine",
    "Diminutive",
    "Tiny",
    "Small",
    "Medium",
    "Large",
    "Huge",
    "Gargantuan",
    "Colossal",
)
"""The nine SRD size categories, smallest first."""

DEFAULT_SIZE: Final = "Medium"

SIZE_MODIFIERS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "Fine": 8,
        "Diminutive": 4,
        "Tiny": 2,
        "Small": 1,
        "Medium": 0,
        "Large": -1,
        "Huge": -2,
        "Gargantuan": -4,
        "Colossal": -8,
    }
)
"""Size modifier applied to AC and attack rolls."""

GRAPPLE_SIZE_MODIFIERS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "Fine": -16,
        "Diminutive": -12,
        "Tiny": -8,
        "Small": -4,
        "Medium": 0,
        "Large": 4,
        "Huge": 8,
        "Gargantuan": 12,
        "Colossal": 16,
    }
)
"""Special size modifier applied to grapple checks."""

# =============================================================================
# Carrying Capacity (SRD: Carrying Capacity table)
# =============================================================================

MAX_LOAD_TABLE: Final[Mapping[int, int]] = MappingProxyType(
    {
        1: 10, 2: 20, 3: 30, 4: 40, 5: 50, 6: 60, 7: 70, 8: 80, 9: 90, 10: 100,
        11: 115, 12: 130, 13: 150, 14: 175, 15: 200, 16: 230, 17: 260, 18: 300,
        19: 350, 20: 400, 21: 460, 22: 520, 23: 600, 24: 700, 25: 800, 26: 920,
        27: 1040, 28: 1200, 29: 1400,
    }
)
"""Maximum (heavy) load in pounds for a Medium biped, Strength 1-29."""

CARRY_SIZE_MULTIPLIERS: Final[Mapping[str, float]] = MappingProxyType(
    {
        "Fine": 0.125,
        "Diminutive": 0.25,
        "Tiny": 0.5,
        "Small": 0.75,
        "Medium": 1,
        "Large": 2,
        "Huge": 4,
        "Gargantuan": 8,
        "Colossal": 16,
    }
)

COINS_PER_POUND: Final = 50

# =============================================================================
# Encumbrance Load Effects
# =============================================================================

LOAD_ORDER: Final[tuple[str, ...]] = ("light", "medium", "heavy", "overload")

LOAD_EFFECTS: Final[Mapping[str, Mapping[str, int | None]]] = MappingProxyType(
    {
        "light": MappingProxyType({"max_dex": None, "acp": 0, "speed30": 30, "speed20": 20}),
        "medium": MappingProxyType({"max_dex": 3, "acp": -3, "speed30": 20, "speed20": 15}),
        "heavy": MappingProxyType({"max_dex": 1, "acp": -6, "speed30": 20, "speed20": 15}),
        "overload": MappingProxyType({"max_dex": 0, "acp": -10, "speed30": 0, "speed20": 0}),
    }
)
"""Per-load max Dex (None = unlimited), check penalty and capped speeds."""

SPEED_THRESHOLD: Final = 30
"""Base speeds at or above this use the 30 ft column, below it the 20 ft one."""

# =============================================================================
# Weapons
# =============================================================================

HANDEDNESS_ORDER: Final[tuple[str, ...]] = ("light", "oneHanded", "twoHanded")

WIELDING_PENALTY_PER_STEP: Final = -2
MAX_WIELDING_SIZE_STEPS: Final = 1

TWF_PENALTIES: Final[Mapping[str, tuple[int, int]]] = MappingProxyType(
    {
        "light": (-4, -8),
        "oneHanded": (-6, -10),
    }
)
"""(primary, off-hand) attack penalties keyed by off-hand effective handedness."""

TWF_DEFAULT_PENALTIES: Final = TWF_PENALTIES["oneHanded"]

STR_MULTIPLIER_OFFHAND: Final = 0.5
STR_MULTIPLIER_TWO_HANDED: Final = 1.5
STR_MULTIPLIER_DEFAULT: Final = 1.0

DAMAGE_PLACEHOLDER: Final = "1"
"""Damage used when a weapon is too small for its progression row."""

DAMAGE_PROGRESSIONS: Final[Mapping[str, tuple[str | None, ...]]] = MappingProxyType(
    {
        # Fine, Diminutive, Tiny, Small, Medium, Large, Huge, Gargantuan, Colossal
        "1d2": (None, None, None, "1", "1d2", "1d3", "1d4", "1d6", "1d8"),
        "1d3": (None, None, "1", "1d2", "1d3", "1d4", "1d6", "1d8", "2d6"),
        "1d4": (None, "1", "1d2", "1d3", "1d4", "1d6", "1d8", "2d6", "3d6"),
        "1d6": ("1", "1d2", "1d3", "1d4", "1d6", "1d8", "2d6", "3d6", "4d6"),
        "1d8": ("1d2", "1d3", "1d4", "1d6", "1d8", "2d6", "3d6", "4d6", "6d6"),
        "1d10": ("1d3", "1d4", "1d6", "1d8", "1d10", "2d8", "3d8", "4d8", "6d8"),
        "1d12": ("1d4", "1d6", "1d8", "1d10", "1d12", "3d6", "4d6", "6d6", "8d6"),
        "2d4": ("1d2", "1d3", "1d4", "1d6", "2d4", "2d6", "3d6", "4d6", "6d6"),
        "2d6": ("1d4", "1d6", "1d8", "1d10", "2d6", "3d6", "4d6", "6d6", "8d6"),
        "2d8": ("1d6", "1d8", "1d10", "2d6", "2d8", "3d8", "4d8", "6d8", "8d8"),
        "2d10": ("1d8", "1d10", "2d6", "2d8", "2d10", "4d8", "6d8", "8d8", "12d8"),
    }
)
"""SRD weapon damage by size, keyed by Medium base damage, indexed by SIZE_ORDER."""

NATURAL_SECONDARY_PENALTY: Final = -5
DEFAULT_NATURAL_DICE: Final = "1d4"

# =============================================================================
# Miscellaneous
# =============================================================================

BASE_ARMOR_CLASS: Final = 10
FIRST_LEVEL_SKILL_MULTIPLIER: Final = 4
MAX_RANKS_BONUS: Final = 3
DEFAULT_SPEED: Final = 30
MAX_SPELL_LEVEL: Final = 9

DEAD_HP_THRESHOLD: Final = -10
"""Hit points at or below this are dead (SRD: Dying and Dead)."""


def size_index(size: str) -> int | None:
    """Return the position of a size in SIZE_ORDER, or None if unknown."""
    try:
        return SIZE_ORDER.index(size)
    except ValueError:
        return None


__all__ = [
    "SIZE_ORDER",
    "DEFAULT_SIZE",
    "SIZE_MODIFIERS",
    "GRAPPLE_SIZE_MODIFIERS",
    "MAX_LOAD_TABLE",
    "CARRY_SIZE_MULTIPLIERS",
    "COINS_PER_POUND",
    "LOAD_ORDER",
    "LOAD_EFFECTS",
    "SPEED_THRESHOLD",
    "HANDEDNESS_ORDER",
    "WIELDING_PENALTY_PER_STEP",
    "MAX_WIELDING_SIZE_STEPS",
    "TWF_PENALTIES",
    "TWF_DEFAULT_PENALTIES",
    "STR_MULTIPLIER_OFFHAND",
    "STR_MULTIPLIER_TWO_HANDED",
    "STR_MULTIPLIER_DEFAULT",
    "DAMAGE_PLACEHOLDER",
    "DAMAGE_PROGRESSIONS",
    "NATURAL_SECONDARY_PENALTY",
    "DEFAULT_NATURAL_DICE",
    "BASE_ARMOR_CLASS",
    "FIRST_LEVEL_SKILL_MULTIPLIER",
    "MAX_RANKS_BONUS",
    "DEFAULT_SPEED",
    "MAX_SPELL_LEVEL",
    "DEAD_HP_THRESHOLD",
    "size_index",
]
