"""Ability score resolution.

Effective score = authored value + racial adjustment. Characters take the
adjustment from their race item; NPCs carry it on the score itself.
"""

from __future__ import annotations

from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import AbilityDerived
from thirdera.models.enums import Ability


def compute_modifier(score: int) -> int:
    """Ability modifier: ``floor((score - 10) / 2)``."""
    return (score - 10) // 2


def resolve_ability(value: int, racial: int) -> AbilityDerived:
    effective = value + racial
    return AbilityDerived(
        value=value,
        racial=racial,
        effective=effective,
        mod=compute_modifier(effective),
    )


def resolve_abilities(snapshot: ActorSnapshot) -> dict[Ability, AbilityDerived]:
    """Resolve all six abilities for an actor.

    Args:
        snapshot: The indexed actor.

    Returns:
        Effective score and modifier per ability.
    """
    resolved: dict[Ability, AbilityDerived] = {}
    for ability, score in snapshot.actor.abilities.items():
        if snapshot.is_npc:
            racial = score.racial
        elif snapshot.race is not None:
            racial = snapshot.race.adjustment(ability)
        else:
            racial = 0
        resolved[ability] = resolve_ability(score.value, racial)
    return resolved


__all__ = [
    "compute_modifier",
    "resolve_ability",
    "resolve_abilities",
]
