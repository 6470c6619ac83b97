from dataclasses import dataclass, field

from taskapi.tasks.rules import DEFAULT_BUSINESS_RULES, BusinessRule
from taskapi.tasks.validators import DEFAULT_FIELD_VALIDATORS, FieldValidator


@dataclass
class ValidationRegistry:
    """Field validators and update rules used by the task service.

    Built once at startup and shared by every request. Registration methods
    are not synchronized and must only be called before the app serves
    traffic.
    """

    field_validators: dict[str, FieldValidator] = field(
        default_factory=lambda: dict(DEFAULT_FIELD_VALIDATORS)
    )
    business_rules: list[BusinessRule] = field(
        default_factory=lambda: list(DEFAULT_BUSINESS_RULES)
    )

    def add_rule(self, rule: BusinessRule) -> None:
        self.business_rules.append(rule)

    def set_field_validator(self, field_name: str, validator: FieldValidator) -> None:
        self.field_validators[field_name] = validator

    def get_field_validator(self, field_name: str) -> FieldValidator | None:
        return self.field_validators.get(field_name)


def create_default_registry() -> ValidationRegistry:
    return ValidationRegistry()
