"""The authored actor document.

An :class:`Actor` is everything the rules engine reads for one character
or NPC: ability scores, details, authored attributes, currency, level
history, GM skill grants, active status identifiers and the owned items.
It is an input only; derivation returns a separate
:class:`thirdera.models.derived.DerivedStats` record.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from thirdera.core.config import get_settings
from thirdera.core.exceptions import ValidationError
from thirdera.models.enums import Ability, ActorKind, Size
from thirdera.models.items import Document, Item, ItemBase


ItemT = TypeVar("ItemT", bound=ItemBase)


# =============================================================================
# Nested Parts
# =============================================================================


class AbilityScore(Document):
    """One ability score as authored.

    ``racial`` is only read for NPCs; characters take racial adjustments
    from their race item.
    """

    value: int = Field(default=10, ge=0)
    racial: int = Field(default=0)


class ActorDetails(Document):
    """Descriptive details that feed the rules."""

    size: Size = Field(default_factory=lambda: Size(get_settings().rules.default_size))
    level: int = Field(default=1, ge=0, description="Fallback level when there is no level history")
    cr: str = Field(default="1")
    alignment: str = Field(default="")


class HpAdjustment(Document):
    """A flat bonus or penalty to maximum hit points."""

    value: int = 0
    label: str = "Misc"


class HitPoints(Document):
    """Authored hit points."""

    value: int = Field(default=1, description="Current hit points; may be negative")
    max: int = Field(default=1, ge=0)
    stable: bool = False
    adjustments: list[HpAdjustment] = Field(default_factory=list)


class ArmorClassInput(Document):
    """Authored AC inputs."""

    misc: int = 0


class SpeedInput(Document):
    """Authored land speed."""

    value: int = Field(default=30, ge=0)


class ActorAttributes(Document):
    hp: HitPoints = Field(default_factory=HitPoints)
    ac: ArmorClassInput = Field(default_factory=ArmorClassInput)
    speed: SpeedInput = Field(default_factory=SpeedInput)


class SaveBases(Document):
    """Authored base saves. Derived for characters, read as-is for NPCs."""

    fort: int = 0
    ref: int = 0
    will: int = 0


class CombatInput(Document):
    """Authored combat numbers."""

    bab: int = Field(default=0, description="Base attack bonus (NPCs only)")
    melee_misc: int = 0
    ranged_misc: int = 0


class Currency(Document):
    pp: int = Field(default=0, ge=0)
    gp: int = Field(default=0, ge=0)
    sp: int = Field(default=0, ge=0)
    cp: int = Field(default=0, ge=0)

    @property
    def total_coins(self) -> int:
        return self.pp + self.gp + self.sp + self.cp


class LevelHistoryEntry(Document):
    """One level taken, in order."""

    class_item_id: str
    hp_rolled: int = Field(default=0, ge=0)


class GrantedSkill(Document):
    """A GM override making a skill a class skill for this actor."""

    key: str
    name: str = ""


class NaturalAttack(Document):
    """An NPC natural attack such as a bite or claw."""

    name: str = ""
    dice: str = ""
    damage_type: str = ""
    primary: bool = True
    reach: int = Field(default=5, ge=0)


# =============================================================================
# Actor
# =============================================================================


class Actor(Document):
    """A character or NPC with its owned items.

    Example:
        >>> actor = Actor(name="Valeros", abilities={"str": {"value": 16}})
        >>> actor.abilities[Ability.STR].value
        16
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(default="Unknown")
    kind: ActorKind = Field(default=ActorKind.CHARACTER)

    abilities: dict[Ability, AbilityScore] = Field(default_factory=dict, validate_default=True)
    details: ActorDetails = Field(default_factory=ActorDetails)
    attributes: ActorAttributes = Field(default_factory=ActorAttributes)
    saves: SaveBases = Field(default_factory=SaveBases)
    combat: CombatInput = Field(default_factory=CombatInput)
    currency: Currency = Field(default_factory=Currency)

    level_history: list[LevelHistoryEntry] = Field(default_factory=list)
    granted_skills: list[GrantedSkill] = Field(default_factory=list)
    active_conditions: list[str] = Field(default_factory=list, description="Active status identifiers")
    natural_attacks: list[NaturalAttack] = Field(default_factory=list)

    items: list[Item] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def default_none_name(cls, v: Any) -> str:
        if v is None:
            return "Unknown"
        return str(v)

    @field_validator("abilities", mode="after")
    @classmethod
    def fill_missing_abilities(cls, v: dict[Ability, AbilityScore]) -> dict[Ability, AbilityScore]:
        """Ensure all six abilities are present, defaulting to 10."""
        return {ability: v.get(ability) or AbilityScore() for ability in Ability}

    @property
    def is_npc(self) -> bool:
        return self.kind == ActorKind.NPC

    def get_item(self, item_id: str) -> Item | None:
        """Find an owned item by id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def items_of_type(self, item_cls: type[ItemT]) -> Iterator[ItemT]:
        """Iterate owned items of one variant, in authored order."""
        for item in self.items:
            if isinstance(item, item_cls):
                yield item


def load_actor(data: Mapping[str, Any]) -> Actor:
    """Validate an authored actor document.

    Args:
        data: Raw actor document, items included.

    Returns:
        The validated Actor.

    Raises:
        ValidationError: If the document does not match the schema. The
            first failing field is reported as ``field_name``.
    """
    try:
        return Actor.model_validate(data)
    except PydanticValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        raise ValidationError(
            f"Actor document failed validation: {exc.error_count()} error(s)",
            field_name=".".join(str(part) for part in first.get("loc", ())) or None,
            invalid_value=first.get("input"),
            details={"validation_errors": str(exc)},
        ) from exc


__all__ = [
    "AbilityScore",
    "ActorDetails",
    "HpAdjustment",
    "HitPoints",
    "ArmorClassInput",
    "SpeedInput",
    "ActorAttributes",
    "SaveBases",
    "CombatInput",
    "Currency",
    "LevelHistoryEntry",
    "GrantedSkill",
    "NaturalAttack",
    "Actor",
    "load_actor",
]
