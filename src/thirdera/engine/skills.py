"""Skill totals, class-skill classification and the skill point budget.

A skill is a class skill when the GM granted it to the actor or when any
class the actor has levels in lists its key. GM grants also lift every
restriction. Otherwise a skill is forbidden when the race excludes it, or
when it is exclusive and no class grants it; forbidden skills cost no
points regardless of their ranks.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from thirdera.core.constants import FIRST_LEVEL_SKILL_MULTIPLIER, MAX_RANKS_BONUS
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import BreakdownEntry, SkillDerived, SkillPointBudget
from thirdera.models.enums import Ability
from thirdera.models.items import ArmorItem, SkillItem


EXCLUDED_BY_RACE = "Excluded by race"
EXCLUSIVE_NOT_GRANTED = "Exclusive: requires a class that grants this skill"


def total_armor_check_penalty(armor: Iterable[ArmorItem]) -> int:
    """Sum of check penalties across equipped armor and shields."""
    return sum(item.check_penalty for item in armor)


def get_check_penalty(armor_penalty: int, load_penalty: int) -> tuple[int, str]:
    """The worse of the armor and load check penalties, with its label."""
    if load_penalty < armor_penalty:
        return load_penalty, "Load ACP"
    if armor_penalty and load_penalty == armor_penalty:
        return armor_penalty, "Armor & Load ACP"
    return armor_penalty, "Armor ACP"


def compute_skill_points_available(snapshot: ActorSnapshot, int_mod: int) -> int:
    """Skill points earned over the level history.

    Each level grants ``max(1, class points + Int mod)``; the first
    character level grants four times that.
    """
    available = 0
    for index, entry in enumerate(snapshot.actor.level_history):
        class_item = snapshot.get_class(entry.class_item_id)
        base_points = class_item.skill_points_per_level if class_item else 0
        points = max(1, base_points + int_mod)
        if index == 0:
            points *= FIRST_LEVEL_SKILL_MULTIPLIER
        available += points
    return available


def collect_class_skill_keys(snapshot: ActorSnapshot) -> set[str]:
    """Class-skill keys of every class the actor has at least one level in."""
    keys: set[str] = set()
    for class_item, _ in snapshot.classes_with_levels:
        keys.update(class_item.class_skills)
    return keys


def get_max_ranks(total_level: int, is_class_skill: bool) -> int | float:
    """Rank ceiling; cross-class ceilings may be fractional."""
    ceiling = total_level + MAX_RANKS_BONUS
    return ceiling if is_class_skill else ceiling / 2


def resolve_skill(
    skill: SkillItem,
    *,
    ability_mod: int,
    total_level: int,
    armor_penalty: int,
    load_penalty: int = 0,
    class_skill_keys: set[str],
    granted_keys: set[str],
    excluded_keys: set[str],
) -> SkillDerived:
    """Classify one skill and compute its total with a breakdown."""
    key = skill.key
    is_granted = bool(key) and key in granted_keys
    is_class_skill = is_granted or (bool(key) and key in class_skill_keys)

    forbidden_reason: str | None = None
    if not is_granted and key:
        if key in excluded_keys:
            forbidden_reason = EXCLUDED_BY_RACE
        elif skill.exclusive and key not in class_skill_keys:
            forbidden_reason = EXCLUSIVE_NOT_GRANTED

    penalty, penalty_label = get_check_penalty(armor_penalty, load_penalty)
    if not skill.armor_check_penalty:
        penalty = 0

    breakdown = [
        BreakdownEntry(label="Ability", value=ability_mod),
        BreakdownEntry(label="Ranks", value=skill.ranks),
    ]
    if skill.misc:
        breakdown.append(BreakdownEntry(label="Misc", value=skill.misc))
    if penalty:
        breakdown.append(BreakdownEntry(label=penalty_label, value=penalty))

    return SkillDerived(
        item_id=skill.id,
        key=key,
        name=skill.name,
        ability=skill.ability,
        ranks=skill.ranks,
        is_granted=is_granted,
        is_class_skill=is_class_skill,
        is_forbidden=forbidden_reason is not None,
        forbidden_reason=forbidden_reason,
        max_ranks=get_max_ranks(total_level, is_class_skill),
        armor_penalty=penalty,
        total=ability_mod + skill.ranks + skill.misc + penalty,
        breakdown=breakdown,
    )


def resolve_skills(
    snapshot: ActorSnapshot,
    ability_mods: Mapping[Ability, int],
    total_level: int,
    load_penalty: int = 0,
) -> tuple[dict[str, SkillDerived], SkillPointBudget]:
    """Resolve every owned skill and the skill point budget.

    NPC skills only get totals: they have no budget and are never
    forbidden.

    Args:
        snapshot: The indexed actor.
        ability_mods: Ability modifiers, Dex already capped.
        total_level: Total character level.
        load_penalty: Check penalty of the carried load; flagged skills
            take the worse of it and the armor penalty.

    Returns:
        Tuple of (skills keyed by item id, budget).
    """
    armor_penalty = total_armor_check_penalty(
        (*snapshot.equipped_armor, *snapshot.equipped_shields)
    )

    if snapshot.is_npc:
        class_skill_keys: set[str] = set()
        granted_keys: set[str] = set()
        excluded_keys: set[str] = set()
    else:
        class_skill_keys = collect_class_skill_keys(snapshot)
        granted_keys = {grant.key for grant in snapshot.actor.granted_skills}
        excluded_keys = set(snapshot.race.excluded_skills) if snapshot.race else set()

    skills: dict[str, SkillDerived] = {}
    spent: int | float = 0
    for skill in snapshot.skills:
        resolved = resolve_skill(
            skill,
            ability_mod=ability_mods.get(skill.ability, 0),
            total_level=total_level,
            armor_penalty=armor_penalty,
            load_penalty=load_penalty,
            class_skill_keys=class_skill_keys,
            granted_keys=granted_keys,
            excluded_keys=excluded_keys,
        )
        skills[skill.id] = resolved
        if not resolved.is_forbidden:
            spent += skill.ranks if resolved.is_class_skill else skill.ranks * 2

    if snapshot.is_npc:
        return skills, SkillPointBudget()

    budget = SkillPointBudget(
        available=compute_skill_points_available(snapshot, ability_mods.get(Ability.INT, 0)),
        spent=spent,
    )
    return skills, budget


__all__ = [
    "EXCLUDED_BY_RACE",
    "EXCLUSIVE_NOT_GRANTED",
    "total_armor_check_penalty",
    "get_check_penalty",
    "compute_skill_points_available",
    "collect_class_skill_keys",
    "get_max_ranks",
    "resolve_skill",
    "resolve_skills",
]
