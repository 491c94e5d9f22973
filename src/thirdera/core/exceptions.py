"""Custom exception hierarchy for the Third Era rules engine.

The derivation pipeline itself degrades silently (missing references fall
back to neutral defaults), so exceptions only surface at the boundaries:
loading settings, validating authored data, refreshing the condition
library from its sources, and rolling dice. All exceptions inherit from
ThirdEraError, enabling unified error handling by the host application.

Example:
    >>> from thirdera.core.exceptions import ConditionLookupError
    >>> raise ConditionLookupError("Compendium unavailable", source="compendium")
"""

from __future__ import annotations

from typing import Any


class ThirdEraError(Exception):
    """Base exception for all Third Era engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(ThirdEraError):
    """Base exception for errors raised around the derivation pipeline.

    The numeric pipeline never raises these for missing or malformed
    authored data; they are reserved for failures of its collaborators.
    """


class ConditionLookupError(RulesEngineError):
    """Raised when a condition source fails during a library refresh.

    The previously published lookup stays in place, so callers may keep
    deriving with slightly stale condition definitions.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize condition lookup error with source context.

        Args:
            message: Human-readable error description.
            source: Name of the condition source that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source:
            combined_details["source"] = source
        super().__init__(message, details=combined_details)


class DiceRollError(RulesEngineError):
    """Raised when a dice expression cannot be parsed or rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(ThirdEraError):
    """Raised when engine configuration is invalid.

    This includes malformed environment values or incompatible
    configuration combinations.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(ThirdEraError):
    """Raised when authored actor or item data fails validation.

    Wraps pydantic validation failures at the document boundary so hosts
    can catch a single engine exception type.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    "ThirdEraError",
    "RulesEngineError",
    "ConditionLookupError",
    "DiceRollError",
    "ConfigurationError",
    "ValidationError",
]
