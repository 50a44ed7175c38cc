"""
Unit tests for the declarative validators.
"""

from decimal import Decimal

import pytest

from app.shared.cqrs import CreateProductCommand
from app.shared.exceptions import DataValidationError
from app.shared.validators import (
    CreateProductCommandValidator,
    Validator,
    ValidatorRegistry
)


@pytest.fixture
def validator():
    return CreateProductCommandValidator()


class TestCreateProductCommandValidator:
    """Name and price rules."""

    def test_valid_command_passes(self, validator):
        result = validator.validate(CreateProductCommand(name="Widget", price=Decimal("9.99")))

        assert result.is_valid is True
        assert result.failures == []

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, validator, name):
        result = validator.validate(CreateProductCommand(name=name, price=Decimal("1")))

        assert result.is_valid is False
        assert result.failed_fields == ["name"]
        assert result.failures[0].code == "NOT_EMPTY"
        assert result.failures[0].message == "'Name' must not be empty."

    def test_name_at_limit_passes(self, validator):
        result = validator.validate(CreateProductCommand(name="x" * 100, price=Decimal("1")))
        assert result.is_valid is True

    def test_name_over_limit_rejected(self, validator):
        result = validator.validate(CreateProductCommand(name="x" * 101, price=Decimal("1")))

        assert result.failed_fields == ["name"]
        assert result.failures[0].code == "MAXIMUM_LENGTH"
        assert "You entered 101 characters" in result.failures[0].message

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-0.01"), Decimal("-10")])
    def test_non_positive_price_rejected(self, validator, price):
        result = validator.validate(CreateProductCommand(name="Widget", price=price))

        assert result.failed_fields == ["price"]
        assert result.failures[0].code == "GREATER_THAN"
        assert result.failures[0].message == "'Price' must be greater than '0'."

    def test_smallest_positive_price_passes(self, validator):
        result = validator.validate(CreateProductCommand(name="Widget", price=Decimal("0.01")))
        assert result.is_valid is True

    def test_all_failing_fields_reported(self, validator):
        result = validator.validate(CreateProductCommand(name="", price=Decimal("0")))

        assert result.failed_fields == ["name", "price"]

    def test_custom_name_limit(self):
        validator = CreateProductCommandValidator(max_name_length=5)

        assert validator.validate({"name": "abcde", "price": 1}).is_valid is True
        assert validator.validate({"name": "abcdef", "price": 1}).failed_fields == ["name"]

    def test_validate_or_raise_names_fields(self, validator):
        with pytest.raises(DataValidationError) as exc_info:
            validator.validate_or_raise(CreateProductCommand(name="", price=Decimal("-1")))

        error = exc_info.value
        assert error.field_names == ["name", "price"]
        assert error.field_name == "name"
        assert error.status_code == 400
        assert {e["code"] for e in error.validation_errors} == {"NOT_EMPTY", "GREATER_THAN"}


class TestRuleChains:
    """Generic rule builder behaviour."""

    def test_chain_stops_at_first_failure(self):
        class NameValidator(Validator):
            def __init__(self):
                super().__init__()
                self.rule_for("name").not_empty().maximum_length(0)

        result = NameValidator().validate({"name": ""})

        assert len(result.failures) == 1
        assert result.failures[0].code == "NOT_EMPTY"

    def test_with_message_overrides_last_rule(self):
        class PriceValidator(Validator):
            def __init__(self):
                super().__init__()
                self.rule_for("price").greater_than(10).with_message("Too cheap")

        result = PriceValidator().validate({"price": 5})

        assert result.failures[0].message == "Too cheap"

    def test_with_message_requires_a_rule(self):
        validator = Validator()
        with pytest.raises(ValueError):
            validator.rule_for("name").with_message("nothing to override")

    def test_missing_value_fails_greater_than(self):
        class PriceValidator(Validator):
            def __init__(self):
                super().__init__()
                self.rule_for("price").greater_than(0)

        assert PriceValidator().validate({}).failed_fields == ["price"]

    def test_result_to_dict(self):
        result = CreateProductCommandValidator().validate({"name": "", "price": 3})

        assert result.to_dict() == {
            "is_valid": False,
            "errors": [
                {"field": "name", "message": "'Name' must not be empty.", "code": "NOT_EMPTY"}
            ]
        }


class TestValidatorRegistry:

    def test_unregistered_type_is_valid(self):
        registry = ValidatorRegistry()

        assert registry.validate(CreateProductCommand(name="", price=Decimal("0"))).is_valid is True
        registry.validate_or_raise(CreateProductCommand(name="", price=Decimal("0")))

    def test_registered_validator_is_applied(self):
        registry = ValidatorRegistry()
        registry.register(CreateProductCommand, CreateProductCommandValidator())

        assert registry.get(CreateProductCommand) is not None
        with pytest.raises(DataValidationError):
            registry.validate_or_raise(CreateProductCommand(name="", price=Decimal("1")))
