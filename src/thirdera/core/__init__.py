"""Core module providing configuration, logging, rules tables and exceptions.

Exports:
    Exceptions:
        ThirdEraError: Base exception for all engine errors.
        RulesEngineError: Errors raised around the derivation pipeline.
        ConditionLookupError: A condition source failed to refresh.
        DiceRollError: Invalid dice expression.
        ConfigurationError: Configuration-related errors.
        ValidationError: Authored data validation errors.

    Configuration:
        Settings: Main engine settings class.
        RulesSettings: Rules-affecting switches.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        actor_context: Tag log events with the actor being derived.
        stage_context: Tag log events with the running pipeline stage.
"""

from __future__ import annotations

from thirdera.core.config import (
    RulesSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from thirdera.core.exceptions import (
    ConditionLookupError,
    ConfigurationError,
    DiceRollError,
    RulesEngineError,
    ThirdEraError,
    ValidationError,
)
from thirdera.core.logging import (
    actor_context,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    stage_context,
)


__all__ = [
    # Exceptions
    "ThirdEraError",
    "RulesEngineError",
    "ConditionLookupError",
    "DiceRollError",
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "RulesSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "actor_context",
    "stage_context",
]
