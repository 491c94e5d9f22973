"""3.5 SRD level progression data.

This module contains the static data needed for level progression:
- XP thresholds, including the epic-level formula
- Base attack bonus and base save progressions
- Raw spells-per-day table access

All functions here are stateless and can be called independently of the
derivation pipeline.
"""

from __future__ import annotations

from functools import lru_cache

from thirdera.core.constants import MAX_SPELL_LEVEL
from thirdera.models.enums import BabProgression, SaveProgression

# =============================================================================
# XP Thresholds (SRD: Experience and Levels; Epic: Epic Basics)
# =============================================================================

XP_TABLE: tuple[int, ...] = (
    0,
    1000,
    3000,
    6000,
    10000,
    15000,
    21000,
    28000,
    36000,
    45000,
    55000,
    66000,
    78000,
    91000,
    105000,
    120000,
    136000,
    153000,
    171000,
    190000,
)
"""Cumulative XP to reach levels 1-20; index 0 is level 1."""

MAX_TABLE_LEVEL = len(XP_TABLE)


@lru_cache(maxsize=None)
def get_xp_for_level(level: int) -> int:
    """Cumulative XP required to reach a character level.

    Levels above 20 double the XP needed to advance between the two
    levels two below: ``xp(N) = xp(N-1) + 2 * (xp(N-2) - xp(N-3))``.

    Args:
        level: Character level (1-based).

    Returns:
        Cumulative XP for that level; 0 for levels below 1.

    Example:
        >>> get_xp_for_level(21)
        226000
    """
    if level < 1:
        return 0
    if level <= MAX_TABLE_LEVEL:
        return XP_TABLE[level - 1]
    # Walk up from the table with the last three thresholds.
    before, previous, current = XP_TABLE[-3:]
    for _ in range(MAX_TABLE_LEVEL, level):
        before, previous, current = previous, current, current + 2 * (previous - before)
    return current


def get_midpoint_xp_for_level(level: int) -> int:
    """XP halfway between a level's threshold and the next one, floored."""
    if level < 1:
        return 0
    return (get_xp_for_level(level) + get_xp_for_level(level + 1)) // 2


def get_next_level_xp(total_level: int) -> int:
    """Cumulative XP needed to reach ``total_level + 1``."""
    return get_xp_for_level(max(total_level, 0) + 1)


def get_level_for_xp(xp: int) -> int:
    """Determine character level from total XP, epic levels included."""
    level = 1
    while xp >= get_xp_for_level(level + 1):
        level += 1
    return level


def get_xp_progress(xp: int, current_level: int) -> tuple[int, int]:
    """Get (xp_into_level, xp_needed_for_level).

    Returns:
        Tuple of (progress, total) for progress bar display.
    """
    current_threshold = get_xp_for_level(max(current_level, 1))
    next_threshold = get_xp_for_level(max(current_level, 1) + 1)
    return (xp - current_threshold, next_threshold - current_threshold)


# =============================================================================
# Base Attack Bonus & Base Saves (SRD: Classes)
# =============================================================================


def get_bab_for_level(progression: str, level: int) -> int:
    """Base attack bonus one class contributes at a class level.

    Good is ``level``, average ``floor(3 * level / 4)``, poor
    ``floor(level / 2)``. Unknown progressions contribute 0.
    """
    if level <= 0:
        return 0
    if progression == BabProgression.GOOD:
        return level
    if progression == BabProgression.AVERAGE:
        return (3 * level) // 4
    if progression == BabProgression.POOR:
        return level // 2
    return 0


def get_base_save_for_level(progression: str, level: int) -> int:
    """Base save one class contributes at a class level.

    Good is ``2 + floor(level / 2)``, poor ``floor(level / 3)``. Unknown
    progressions contribute 0.
    """
    if level <= 0:
        return 0
    if progression == SaveProgression.GOOD:
        return 2 + level // 2
    if progression == SaveProgression.POOR:
        return level // 3
    return 0


def calculate_hp_for_level(hp_rolled: int, con_mod: int) -> int:
    """Hit points gained for one level; always at least 1."""
    return max(1, hp_rolled + con_mod)


# =============================================================================
# Spells per Day
# =============================================================================


def get_spells_per_day(table: list[list[int]], class_level: int, spell_level: int) -> int:
    """Read one cell of a raw spells-per-day table.

    Row ``class_level - 1`` and column ``spell_level``; missing rows or
    cells read as 0.
    """
    if class_level < 1 or not 0 <= spell_level <= MAX_SPELL_LEVEL:
        return 0
    if class_level > len(table):
        return 0
    row = table[class_level - 1]
    if spell_level >= len(row):
        return 0
    return row[spell_level]


__all__ = [
    "XP_TABLE",
    "get_xp_for_level",
    "get_midpoint_xp_for_level",
    "get_next_level_xp",
    "get_level_for_xp",
    "get_xp_progress",
    "get_bab_for_level",
    "get_base_save_for_level",
    "calculate_hp_for_level",
    "get_spells_per_day",
]
