"""Configuration management for the Third Era rules engine.

Settings are loaded with pydantic-settings from environment variables and
an optional ``.env`` file. The only rules-affecting switch the host
application owns is whether coin weight counts toward encumbrance; the
rest controls logging and identifies the shared condition library.

Example:
    >>> from thirdera.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.currency_weight
    False

Environment Variables:
    THIRDERA_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    THIRDERA_DEBUG: Enable debug mode
    THIRDERA_RULES_CURRENCY_WEIGHT: Count coins (50 per lb) toward carried weight
    THIRDERA_RULES_CONDITION_PACK: Identifier of the shared condition library
    THIRDERA_RULES_DEFAULT_SIZE: Size used for actors without an authored size
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from thirdera.core.constants import SIZE_ORDER
from thirdera.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Configuration for rules-engine behaviour.

    Attributes:
        currency_weight: Whether carried coins add weight (1 lb per 50 coins).
        condition_pack: Identifier of the shared condition compendium.
        default_size: Size category assumed when an actor has none.
    """

    model_config = SettingsConfigDict(
        env_prefix="THIRDERA_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    currency_weight: bool = Field(
        default=False,
        description="Count coin weight toward encumbrance",
    )
    condition_pack: str = Field(
        default="thirdera.thirdera_conditions",
        min_length=1,
        description="Shared condition library identifier",
    )
    default_size: str = Field(
        default="Medium",
        description="Size category for actors without an authored size",
    )

    @field_validator("default_size", mode="after")
    @classmethod
    def validate_default_size(cls, value: str) -> str:
        """Ensure the default size is one of the nine SRD categories.

        Raises:
            ConfigurationError: If the size is unknown.
        """
        if value not in SIZE_ORDER:
            raise ConfigurationError(
                f"Unknown size category {value!r}; expected one of {', '.join(SIZE_ORDER)}",
                config_key="default_size",
            )
        return value


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Engine logging level.
        rules: Rules-engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="THIRDERA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Third Era Rules Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Primarily useful for tests or when environment variables change at
    runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
