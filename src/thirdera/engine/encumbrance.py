"""Carrying capacity, carried weight and encumbrance load.

Capacity follows the SRD Carrying Capacity table for Strength 1-29; every
ten points above that multiplies the maximum load by four. Size scales
the result for non-Medium creatures.
"""

from __future__ import annotations

import math

from thirdera.core.constants import (
    CARRY_SIZE_MULTIPLIERS,
    COINS_PER_POUND,
    LOAD_EFFECTS,
    MAX_LOAD_TABLE,
)
from thirdera.core.logging import get_logger
from thirdera.engine.snapshot import ActorSnapshot
from thirdera.models.derived import CarryingCapacity, LoadEffects
from thirdera.models.enums import LoadStatus, WeightMode


logger = get_logger(__name__)


def get_base_max_load(strength: int) -> int:
    """Maximum load in pounds for a Medium creature of this Strength.

    Scores above 29 reuse the 20-29 row, multiplied by 4 for every full
    ten points above it.
    """
    if strength < 1:
        return 0
    if strength in MAX_LOAD_TABLE:
        return MAX_LOAD_TABLE[strength]
    tens_above, remainder = divmod(strength - 20, 10)
    return MAX_LOAD_TABLE[20 + remainder] * 4**tens_above


def get_carrying_capacity(strength: int, size: str = "Medium") -> CarryingCapacity:
    """Light, medium and heavy load thresholds.

    Args:
        strength: Effective Strength score.
        size: Size category; unknown sizes use the Medium multiplier.

    Returns:
        CarryingCapacity with the three thresholds. Strength below 1
        yields all-zero thresholds.

    Example:
        >>> get_carrying_capacity(10).heavy
        100
    """
    multiplier = CARRY_SIZE_MULTIPLIERS.get(size, 1)
    base = get_base_max_load(strength)
    max_load = base * multiplier
    return CarryingCapacity(
        light=math.floor(max_load / 3),
        medium=math.floor(max_load * 2 / 3),
        heavy=math.floor(max_load),
        base_max_load=base,
        size_multiplier=multiplier,
    )


def get_load_status(weight: float, capacity: CarryingCapacity) -> LoadStatus:
    """Load tier for a carried weight; boundaries are inclusive."""
    if weight <= capacity.light:
        return LoadStatus.LIGHT
    if weight <= capacity.medium:
        return LoadStatus.MEDIUM
    if weight <= capacity.heavy:
        return LoadStatus.HEAVY
    return LoadStatus.OVERLOAD


def get_load_effects(load: LoadStatus | str) -> LoadEffects:
    """Max Dex, check penalty and capped speeds for a load tier.

    Unknown tiers are treated as light.
    """
    effects = LOAD_EFFECTS.get(str(load), LOAD_EFFECTS[LoadStatus.LIGHT])
    return LoadEffects(**effects)


def compute_total_weight(snapshot: ActorSnapshot, *, include_currency: bool = False) -> float:
    """Total carried weight of an actor's items.

    Loose items count in full. A container's own weight counts once, and
    its contents count unless the container's weight mode is FIXED.
    Items whose container is not an owned container count as loose.

    Args:
        snapshot: The indexed actor.
        include_currency: Whether coins add weight, one pound per 50.

    Returns:
        Total weight in pounds.
    """
    total = 0.0
    for item in snapshot.actor.items:
        if item.container_id and item.container_id not in snapshot.containers:
            logger.debug(
                "Item container not found, counting as loose",
                item=item.name,
                container_id=item.container_id,
            )
        if _inside_fixed_container(snapshot, item.container_id):
            continue
        total += item.stack_weight

    if include_currency:
        total += snapshot.actor.currency.total_coins // COINS_PER_POUND

    return total


def _inside_fixed_container(snapshot: ActorSnapshot, container_id: str | None) -> bool:
    """Whether any enclosing container hides its contents' weight."""
    seen: set[str] = set()
    while container_id and container_id not in seen:
        seen.add(container_id)
        container = snapshot.containers.get(container_id)
        if container is None:
            return False
        if container.weight_mode == WeightMode.FIXED:
            return True
        container_id = container.container_id
    return False


__all__ = [
    "get_base_max_load",
    "get_carrying_capacity",
    "get_load_status",
    "get_load_effects",
    "compute_total_weight",
]
