"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from thirdera.core.exceptions import (
    ConditionLookupError,
    ConfigurationError,
    DiceRollError,
    RulesEngineError,
    ThirdEraError,
    ValidationError,
)


class TestThirdEraError:
    """Tests for the base ThirdEraError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = ThirdEraError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = ThirdEraError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(ThirdEraError("Test", details={"x": 1}))
        assert "ThirdEraError" in repr_str
        assert "Test" in repr_str


class TestRulesEngineErrors:
    """Tests for pipeline collaborator exceptions."""

    def test_condition_lookup_error_source(self) -> None:
        """Test ConditionLookupError records the failing source."""
        exc = ConditionLookupError("Pack unavailable", source="world")
        assert exc.details["source"] == "world"
        assert isinstance(exc, RulesEngineError)

    def test_dice_roll_error_expression(self) -> None:
        """Test DiceRollError records the expression."""
        exc = DiceRollError("Invalid dice", expression="1d")
        assert exc.details["expression"] == "1d"
        assert isinstance(exc, ThirdEraError)

    def test_hierarchy_catchable_as_base(self) -> None:
        """Test every engine exception is a ThirdEraError."""
        with pytest.raises(ThirdEraError):
            raise ConditionLookupError("boom")


class TestBoundaryErrors:
    """Tests for configuration and validation exceptions."""

    def test_configuration_error_key(self) -> None:
        """Test ConfigurationError records the config key."""
        exc = ConfigurationError("Bad size", config_key="default_size")
        assert exc.details == {"config_key": "default_size"}

    def test_validation_error_fields(self) -> None:
        """Test ValidationError records field name and value."""
        exc = ValidationError("Bad value", field_name="bonus", invalid_value=-1)
        assert exc.details["field_name"] == "bonus"
        assert exc.details["invalid_value"] == -1

    def test_validation_error_omits_missing_context(self) -> None:
        """Test that absent context keys are not recorded."""
        exc = ValidationError("Bad value")
        assert exc.details == {}
