"""Read-only index over one actor's owned items.

Resolvers never scan ``actor.items`` themselves. :class:`ActorSnapshot`
groups the items once per derivation (equipped armor, weapons by hand,
classes with their level counts, skills, containers) and is shared by
every pipeline stage.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from thirdera.models.actor import Actor
from thirdera.models.enums import EquipSlot, Size
from thirdera.models.items import (
    ArmorItem,
    ClassItem,
    EquipmentItem,
    FeatureItem,
    ItemBase,
    RaceItem,
    SkillItem,
    WeaponItem,
)


@dataclass(frozen=True)
class ActorSnapshot:
    """Immutable, precomputed view of an actor and its items.

    Attributes:
        actor: The authored actor.
        items_by_id: Every owned item keyed by id.
        race: First owned race item, if any.
        equipped_armor: Equipped non-shield armor, in authored order.
        equipped_shields: Equipped shields, in authored order.
        weapons: Every owned weapon, in authored order.
        skills: Every owned skill, in authored order.
        containers: Owned container items keyed by id.
        features: Owned feature definitions keyed by id.
        class_levels: Level count per class item id, from the level history.
        classes_with_levels: Owned classes with at least one level, with
            their level, in authored item order.
    """

    actor: Actor
    items_by_id: Mapping[str, ItemBase]
    race: RaceItem | None
    equipped_armor: tuple[ArmorItem, ...]
    equipped_shields: tuple[ArmorItem, ...]
    weapons: tuple[WeaponItem, ...]
    skills: tuple[SkillItem, ...]
    containers: Mapping[str, EquipmentItem]
    features: Mapping[str, FeatureItem]
    class_levels: Mapping[str, int]
    classes_with_levels: tuple[tuple[ClassItem, int], ...] = field(default=())

    @classmethod
    def from_actor(cls, actor: Actor) -> ActorSnapshot:
        """Index an actor's items."""
        armor = [item for item in actor.items_of_type(ArmorItem) if item.is_equipped]
        class_levels = Counter(entry.class_item_id for entry in actor.level_history)

        return cls(
            actor=actor,
            items_by_id=MappingProxyType({item.id: item for item in actor.items}),
            race=next(actor.items_of_type(RaceItem), None),
            equipped_armor=tuple(item for item in armor if not item.is_shield),
            equipped_shields=tuple(item for item in armor if item.is_shield),
            weapons=tuple(actor.items_of_type(WeaponItem)),
            skills=tuple(actor.items_of_type(SkillItem)),
            containers=MappingProxyType(
                {item.id: item for item in actor.items_of_type(EquipmentItem) if item.is_container}
            ),
            features=MappingProxyType({item.id: item for item in actor.items_of_type(FeatureItem)}),
            class_levels=MappingProxyType(dict(class_levels)),
            classes_with_levels=tuple(
                (item, class_levels[item.id])
                for item in actor.items_of_type(ClassItem)
                if class_levels.get(item.id, 0) > 0
            ),
        )

    # -------------------------------------------------------------------------
    # Convenience accessors
    # -------------------------------------------------------------------------

    @property
    def is_npc(self) -> bool:
        return self.actor.is_npc

    @property
    def size(self) -> Size:
        return self.actor.details.size

    @property
    def equipped_weapons(self) -> tuple[WeaponItem, ...]:
        return tuple(weapon for weapon in self.weapons if weapon.is_equipped)

    def weapons_in(self, slot: EquipSlot) -> tuple[WeaponItem, ...]:
        """Equipped weapons in one hand, in authored order."""
        return tuple(weapon for weapon in self.weapons if weapon.slot == slot)

    def get_class(self, class_item_id: str) -> ClassItem | None:
        item = self.items_by_id.get(class_item_id)
        return item if isinstance(item, ClassItem) else None


__all__ = ["ActorSnapshot"]
