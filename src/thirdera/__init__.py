"""thirdera - derived-statistics engine for Third Era (3.5 SRD) actors.

Authored data goes in, an immutable derived record comes out. The engine
resolves abilities, encumbrance, the Dex cap, class progression, hit
points, skills, class features, conditions, Armor Class, speed, saves and
attacks in dependency order, with a breakdown for every computed number.

Example:
    >>> from thirdera import Actor, derive_actor
    >>>
    >>> actor = Actor.model_validate(document)
    >>> derived = derive_actor(actor)
    >>> derived.combat.melee.total
    9

Modules:
    core: Configuration, logging, rules tables and exceptions.
    models: Pydantic V2 schemas for authored and derived data.
    engine: Resolvers, the derivation pipeline, conditions, dice and actions.
"""

from __future__ import annotations

# Core
from thirdera.core.config import Settings, get_settings
from thirdera.core.exceptions import ThirdEraError
from thirdera.core.logging import configure_logging, get_logger

# Models
from thirdera.models.actor import Actor, load_actor
from thirdera.models.derived import DerivedStats

# Engine
from thirdera.engine.actions import ActionOutcome
from thirdera.engine.conditions import ConditionLibrary, ConditionLookup, StaticConditionSource
from thirdera.engine.pipeline import derive_actor


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "ThirdEraError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Actor",
    "load_actor",
    "DerivedStats",
    # Engine
    "ActionOutcome",
    "ConditionLibrary",
    "ConditionLookup",
    "StaticConditionSource",
    "derive_actor",
]
