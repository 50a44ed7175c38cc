"""
Declarative validation for commands.

Validators declare per-field rule chains in their constructor:

    class CreateProductCommandValidator(Validator):
        def __init__(self):
            super().__init__()
            self.rule_for("name").not_empty().maximum_length(100)
            self.rule_for("price").greater_than(0)

Every field chain is evaluated; inside one chain evaluation stops at the
first failing rule so each field reports at most one problem.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .exceptions import DataValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationFailure:
    """A single failed rule."""
    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass
class ValidationResult:
    """Outcome of running a validator against one object."""
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def failed_fields(self) -> List[str]:
        names = []
        for failure in self.failures:
            if failure.field not in names:
                names.append(failure.field)
        return names

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [failure.to_dict() for failure in self.failures]
        }


@dataclass(frozen=True)
class Rule:
    """Predicate over a field value plus the failure it produces."""
    code: str
    predicate: Callable[[Any], bool]
    message: Callable[[str, Any], str]


def _display_name(field_name: str) -> str:
    return field_name.replace("_", " ").title()


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


class RuleBuilder:
    """Fluent chain of rules for one field."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        self.rules: List[Rule] = []

    def not_empty(self) -> "RuleBuilder":
        self.rules.append(Rule(
            code="NOT_EMPTY",
            predicate=lambda value: not _is_empty(value),
            message=lambda name, value: f"'{name}' must not be empty."
        ))
        return self

    def maximum_length(self, max_length: int) -> "RuleBuilder":
        self.rules.append(Rule(
            code="MAXIMUM_LENGTH",
            predicate=lambda value: value is None or len(value) <= max_length,
            message=lambda name, value: (
                f"The length of '{name}' must be {max_length} characters or fewer. "
                f"You entered {len(value)} characters."
            )
        ))
        return self

    def greater_than(self, threshold: Any) -> "RuleBuilder":
        self.rules.append(Rule(
            code="GREATER_THAN",
            predicate=lambda value: value is not None and value > threshold,
            message=lambda name, value: f"'{name}' must be greater than '{threshold}'."
        ))
        return self

    def with_message(self, message: str) -> "RuleBuilder":
        """Replace the message of the most recently added rule."""
        if not self.rules:
            raise ValueError("with_message() must follow a rule")
        last = self.rules[-1]
        self.rules[-1] = Rule(code=last.code, predicate=last.predicate, message=lambda name, value: message)
        return self

    def evaluate(self, value: Any) -> Optional[ValidationFailure]:
        display = _display_name(self.field_name)
        for rule in self.rules:
            if not rule.predicate(value):
                return ValidationFailure(
                    field=self.field_name,
                    message=rule.message(display, value),
                    code=rule.code
                )
        return None


class Validator:
    """Base class for declarative validators."""

    def __init__(self):
        self._chains: List[RuleBuilder] = []

    def rule_for(self, field_name: str) -> RuleBuilder:
        chain = RuleBuilder(field_name)
        self._chains.append(chain)
        return chain

    @staticmethod
    def _get_value(obj: Any, field_name: str) -> Any:
        if isinstance(obj, dict):
            return obj.get(field_name)
        return getattr(obj, field_name, None)

    def validate(self, obj: Any) -> ValidationResult:
        result = ValidationResult()
        for chain in self._chains:
            failure = chain.evaluate(self._get_value(obj, chain.field_name))
            if failure is not None:
                result.failures.append(failure)
        return result

    def validate_or_raise(self, obj: Any) -> None:
        """
        Raises:
            DataValidationError: naming every failing field
        """
        result = self.validate(obj)
        if not result.is_valid:
            raise DataValidationError(
                message=f"Validation failed for {', '.join(result.failed_fields)}",
                validation_errors=[failure.to_dict() for failure in result.failures]
            )


class ValidatorRegistry:
    """Maps request types to the validator that guards them."""

    def __init__(self):
        self._validators: Dict[type, Validator] = {}

    def register(self, request_type: type, validator: Validator) -> None:
        self._validators[request_type] = validator
        logger.info(f"Registered validator {type(validator).__name__} for {request_type.__name__}")

    def get(self, request_type: type) -> Optional[Validator]:
        return self._validators.get(request_type)

    def validate(self, request: Any) -> ValidationResult:
        validator = self.get(type(request))
        if validator is None:
            return ValidationResult()
        return validator.validate(request)

    def validate_or_raise(self, request: Any) -> None:
        validator = self.get(type(request))
        if validator is not None:
            validator.validate_or_raise(request)


class CreateProductCommandValidator(Validator):
    """Name required and bounded; price strictly positive."""

    def __init__(self, max_name_length: int = 100):
        super().__init__()
        self.rule_for("name").not_empty().maximum_length(max_name_length)
        self.rule_for("price").greater_than(0)
