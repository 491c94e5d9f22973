"""Pytest configuration and shared fixtures.

This module provides common fixtures for the thirdera test suite:
settings cache isolation and a small library of SRD-flavoured actors
and items.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from thirdera.models.actor import Actor
from thirdera.models.items import (
    ArmorItem,
    ClassItem,
    ConditionItem,
    RaceItem,
    SkillItem,
    WeaponItem,
)


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from thirdera.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "THIRDERA_DEBUG": "true",
        "THIRDERA_LOG_LEVEL": "DEBUG",
        "THIRDERA_RULES_CURRENCY_WEIGHT": "true",
        "THIRDERA_RULES_CONDITION_PACK": "world.test-conditions",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Item Fixtures
# =============================================================================


@pytest.fixture
def fighter_class() -> ClassItem:
    """A fighter class: good BAB, good Fortitude."""
    return ClassItem(
        id="cls-fighter",
        name="Fighter",
        hit_die="d10",
        bab_progression="good",
        saves={"fort": "good", "ref": "poor", "will": "poor"},
        skill_points_per_level=2,
        class_skills=["climb", "jump", "swim"],
    )


@pytest.fixture
def rogue_class() -> ClassItem:
    """A rogue class: average BAB, good Reflex."""
    return ClassItem(
        id="cls-rogue",
        name="Rogue",
        hit_die="d6",
        bab_progression="average",
        saves={"fort": "poor", "ref": "good", "will": "poor"},
        skill_points_per_level=8,
        class_skills=["tumble", "hide", "climb"],
    )


@pytest.fixture
def chain_shirt() -> ArmorItem:
    """Equipped light armor: +4 AC, max Dex +4, ACP -2."""
    return ArmorItem(
        id="arm-chain-shirt",
        name="Chain Shirt",
        equipped="true",
        category="light",
        bonus=4,
        max_dex=4,
        check_penalty=-2,
        weight=25,
    )


@pytest.fixture
def longsword() -> WeaponItem:
    """A Medium one-handed longsword held in the primary hand."""
    return WeaponItem(
        id="wpn-longsword",
        name="Longsword",
        damage={"dice": "1d8", "type": "slashing"},
        critical={"range": 19, "multiplier": 2},
        handedness="oneHanded",
        size="Medium",
        slot="primary",
        weight=4,
    )


@pytest.fixture
def shaken_condition() -> ConditionItem:
    """SRD Shaken: -2 on attack rolls and saves."""
    return ConditionItem(
        name="Shaken",
        condition_id="shaken",
        changes=[
            {"key": "attack", "value": -2},
            {"key": "saveFort", "value": -2},
            {"key": "saveRef", "value": -2},
            {"key": "saveWill", "value": -2},
        ],
    )


@pytest.fixture
def human_race() -> RaceItem:
    return RaceItem(id="race-human", name="Human", size="Medium", speed=30)


# =============================================================================
# Actor Fixtures
# =============================================================================


@pytest.fixture
def sample_abilities() -> dict[str, dict[str, int]]:
    """Provide sample authored ability scores.

    Returns:
        Dictionary of ability scores keyed by ability.
    """
    return {
        "str": {"value": 16},
        "dex": {"value": 14},
        "con": {"value": 14},
        "int": {"value": 10},
        "wis": {"value": 12},
        "cha": {"value": 8},
    }


@pytest.fixture
def sample_character_data(
    sample_abilities: dict[str, dict[str, int]],
    fighter_class: ClassItem,
    chain_shirt: ArmorItem,
    longsword: WeaponItem,
    human_race: RaceItem,
) -> dict[str, Any]:
    """Provide a level 6 fighter as authored data.

    Args:
        sample_abilities: Authored ability scores.
        fighter_class: The fighter class item.
        chain_shirt: Equipped armor.
        longsword: Primary weapon.
        human_race: Race item.

    Returns:
        Dictionary suitable for ``Actor.model_validate``.
    """
    return {
        "id": "actor-valeros",
        "name": "Valeros",
        "kind": "character",
        "abilities": sample_abilities,
        "attributes": {"hp": {"value": 40, "max": 40}},
        "level_history": [
            {"class_item_id": fighter_class.id, "hp_rolled": 10},
            *({"class_item_id": fighter_class.id, "hp_rolled": 6} for _ in range(5)),
        ],
        "items": [
            human_race.model_dump(),
            fighter_class.model_dump(),
            chain_shirt.model_dump(),
            longsword.model_dump(),
        ],
    }


@pytest.fixture
def sample_character(sample_character_data: dict[str, Any]) -> Actor:
    """Create the sample fighter Actor."""
    return Actor.model_validate(sample_character_data)


@pytest.fixture
def sample_npc() -> Actor:
    """A Medium orc warrior NPC with authored BAB and saves."""
    return Actor(
        id="actor-orc",
        name="Orc Warrior",
        kind="npc",
        abilities={"str": {"value": 15, "racial": 2}, "dex": {"value": 10}},
        attributes={"hp": {"value": 5, "max": 5}},
        saves={"fort": 2, "ref": 0, "will": -1},
        combat={"bab": 1},
        natural_attacks=[
            {"name": "Bite", "dice": "1d6", "primary": True},
            {"name": "Claw", "dice": "", "primary": False},
        ],
    )
