"""Condition definitions and their aggregated numeric effects.

Working with conditions has two phases:

1. :meth:`ConditionLibrary.refresh` fetches condition items from a
   compendium source and a world source concurrently, then publishes an
   immutable :class:`ConditionLookup`. World items override compendium
   items with the same identifier. This is the only I/O, and it runs
   once per session or update batch, never per actor.
2. :func:`aggregate_condition_modifiers` is synchronous and pure. It
   reads the published lookup and sums the changes of an actor's active
   conditions into :class:`ConditionModifiers`.

Example:
    >>> library = ConditionLibrary(compendium=StaticConditionSource(pack_items))
    >>> lookup = await library.refresh()
    >>> mods = aggregate_condition_modifiers(["Shaken"], lookup)
    >>> mods.saves[SaveType.WILL]
    -2
"""

from __future__ import annotations

import asyncio
import math
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Protocol

from thirdera.core.config import get_settings
from thirdera.core.exceptions import ConditionLookupError
from thirdera.core.logging import get_logger
from thirdera.models.derived import BreakdownEntry, ConditionModifiers
from thirdera.models.enums import ConditionChangeKey, SaveType
from thirdera.models.items import ConditionItem


logger = get_logger(__name__)

_SLUG_SEPARATORS = re.compile(r"[\s_]+")
_SLUG_INVALID = re.compile(r"[^a-z0-9-]")

_KNOWN_KEYS = frozenset(ConditionChangeKey)

_SAVE_KEYS = {
    ConditionChangeKey.SAVE_FORT: SaveType.FORT,
    ConditionChangeKey.SAVE_REF: SaveType.REF,
    ConditionChangeKey.SAVE_WILL: SaveType.WILL,
}


def slugify_condition_id(raw: str) -> str:
    """Normalize a condition identifier: trimmed, lowercased, slugified.

    Example:
        >>> slugify_condition_id("  Flat Footed ")
        'flat-footed'
    """
    slug = _SLUG_SEPARATORS.sub("-", raw.strip().lower())
    return _SLUG_INVALID.sub("", slug)


# =============================================================================
# Lookup
# =============================================================================


class ConditionLookup(Mapping[str, ConditionItem]):
    """Immutable mapping of normalized condition id to condition item.

    Keys are normalized on the way in and on every lookup, so
    ``lookup["Flat Footed"]`` and ``lookup["flat-footed"]`` agree.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[ConditionItem] = ()) -> None:
        table: dict[str, ConditionItem] = {}
        for item in items:
            key = slugify_condition_id(item.condition_id)
            if key:
                table[key] = item
        self._items: Mapping[str, ConditionItem] = MappingProxyType(table)

    @classmethod
    def merge(
        cls,
        compendium: Iterable[ConditionItem],
        world: Iterable[ConditionItem],
    ) -> ConditionLookup:
        """Build a lookup where world items win identifier collisions."""
        return cls([*compendium, *world])

    def __getitem__(self, condition_id: str) -> ConditionItem:
        return self._items[slugify_condition_id(condition_id)]

    def __contains__(self, condition_id: object) -> bool:
        return isinstance(condition_id, str) and slugify_condition_id(condition_id) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ConditionLookup({sorted(self._items)!r})"


EMPTY_LOOKUP = ConditionLookup()


# =============================================================================
# Sources & Library
# =============================================================================


class ConditionSource(Protocol):
    """Anything that can asynchronously provide condition items."""

    async def fetch_conditions(self) -> Sequence[ConditionItem]:
        """Fetch every condition item this source knows about."""
        ...


class StaticConditionSource:
    """In-memory condition source, e.g. for bundled definitions or tests."""

    def __init__(self, items: Iterable[ConditionItem] = ()) -> None:
        self._items = tuple(items)

    async def fetch_conditions(self) -> Sequence[ConditionItem]:
        return self._items


class ConditionLibrary:
    """Owns the published :class:`ConditionLookup` for a session.

    Attributes:
        pack_id: Identifier of the shared compendium, used in logs.
    """

    def __init__(
        self,
        compendium: ConditionSource | None = None,
        world: ConditionSource | None = None,
        *,
        pack_id: str | None = None,
    ) -> None:
        self._compendium = compendium
        self._world = world
        self.pack_id = pack_id or get_settings().rules.condition_pack
        self._lookup = EMPTY_LOOKUP

    @property
    def lookup(self) -> ConditionLookup:
        """The most recently published lookup (empty before the first refresh)."""
        return self._lookup

    async def refresh(self) -> ConditionLookup:
        """Fetch both sources concurrently and publish a new lookup.

        Returns:
            The newly published lookup.

        Raises:
            ConditionLookupError: If either source fails. The previously
                published lookup is kept.
        """
        compendium_items, world_items = await asyncio.gather(
            self._fetch(self._compendium, self.pack_id),
            self._fetch(self._world, "world"),
        )
        self._lookup = ConditionLookup.merge(compendium_items, world_items)
        logger.info(
            "Condition library refreshed",
            pack=self.pack_id,
            compendium=len(compendium_items),
            world=len(world_items),
            conditions=len(self._lookup),
        )
        return self._lookup

    @staticmethod
    async def _fetch(source: ConditionSource | None, name: str) -> Sequence[ConditionItem]:
        if source is None:
            return ()
        try:
            return await source.fetch_conditions()
        except ConditionLookupError:
            raise
        except Exception as exc:
            raise ConditionLookupError(
                f"Condition source {name!r} failed: {exc}",
                source=name,
            ) from exc


# =============================================================================
# Aggregation
# =============================================================================


def _coerce_number(value: object) -> int | float | None:
    """Numeric value of a change, or None if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def aggregate_condition_modifiers(
    active_ids: Iterable[str],
    lookup: Mapping[str, ConditionItem],
) -> ConditionModifiers:
    """Sum the numeric changes of an actor's active conditions.

    Unknown condition ids and unknown change keys are ignored, and
    non-numeric values are skipped. Each id is applied once even if the
    actor lists it several times. ``acLoseDex`` is set by any non-zero
    value and never cleared. ``speedMultiplier`` values in (0, 1]
    multiply together; others are ignored. ``attack`` adds to both melee
    and ranged.

    Args:
        active_ids: Active status identifiers of the actor.
        lookup: Published condition lookup.

    Returns:
        ConditionModifiers with one breakdown row per contribution,
        labelled with the condition's name.
    """
    ac = 0
    ac_breakdown: list[BreakdownEntry] = []
    lose_dex = False
    speed_multiplier = 1.0
    saves = {save: 0 for save in SaveType}
    save_breakdowns: dict[SaveType, list[BreakdownEntry]] = {save: [] for save in SaveType}
    melee = 0
    melee_breakdown: list[BreakdownEntry] = []
    ranged = 0
    ranged_breakdown: list[BreakdownEntry] = []
    applied: list[str] = []

    for raw_id in active_ids:
        condition_id = slugify_condition_id(raw_id)
        if not condition_id or condition_id in applied:
            continue
        condition = lookup.get(condition_id)
        if condition is None:
            logger.debug("Unknown condition id ignored", condition_id=condition_id)
            continue
        applied.append(condition_id)
        label = condition.name or condition_id

        for change in condition.changes:
            key = change.key.strip()
            if key not in _KNOWN_KEYS:
                continue
            value = _coerce_number(change.value)
            if value is None:
                logger.debug(
                    "Non-numeric condition change skipped",
                    condition_id=condition_id,
                    key=key,
                    value=change.value,
                )
                continue

            entry = BreakdownEntry(label=label, value=value)
            if key == ConditionChangeKey.AC:
                ac += value
                ac_breakdown.append(entry)
            elif key == ConditionChangeKey.AC_LOSE_DEX:
                if value != 0:
                    lose_dex = True
            elif key == ConditionChangeKey.SPEED_MULTIPLIER:
                if 0 < value <= 1:
                    speed_multiplier *= value
            elif key in _SAVE_KEYS:
                save = _SAVE_KEYS[key]
                saves[save] += value
                save_breakdowns[save].append(entry)
            elif key == ConditionChangeKey.ATTACK:
                melee += value
                ranged += value
                melee_breakdown.append(entry)
                ranged_breakdown.append(entry)
            elif key == ConditionChangeKey.ATTACK_MELEE:
                melee += value
                melee_breakdown.append(entry)
            elif key == ConditionChangeKey.ATTACK_RANGED:
                ranged += value
                ranged_breakdown.append(entry)

    return ConditionModifiers(
        ac=ac,
        ac_breakdown=ac_breakdown,
        lose_dex_to_ac=lose_dex,
        speed_multiplier=speed_multiplier,
        saves=saves,
        save_breakdowns=save_breakdowns,
        attack_melee=melee,
        attack_melee_breakdown=melee_breakdown,
        attack_ranged=ranged,
        attack_ranged_breakdown=ranged_breakdown,
        applied=applied,
    )


__all__ = [
    "slugify_condition_id",
    "ConditionLookup",
    "EMPTY_LOOKUP",
    "ConditionSource",
    "StaticConditionSource",
    "ConditionLibrary",
    "aggregate_condition_modifiers",
]
