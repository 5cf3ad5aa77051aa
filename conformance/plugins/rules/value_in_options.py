from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class ValueInOptionsRule(BaseRule):
    name: str = "value_in_options"
    priority: int = 42

    target_fields = "*"
    meta = RuleMeta(
        name="ValueInOptionsRule",
        description="Validates that fields contain allowed values.",
        tests={
            "default": RuleTest(
                message='Value "{{value}}" is not in the allowed values for this field. Allowed values are: {{options}}.',
                sample_values={"value": "Maybe", "options": ["https://schema.org/EventScheduled"]},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES,
            ),
            "flexibleType": RuleTest(
                message="Use one of the recommended types for {{model}} if applicable",
                sample_values={"model": "Place"},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES,
            ),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []
        spec = node.model.get_field(field)
        if spec is None or spec.options is None:
            return []

        value = node.get_value(field)
        if value is MISSING:
            return []

        if isinstance(value, list) and spec.can_be_array():
            in_options = all(v in spec.options for v in value)
        else:
            in_options = value in spec.options
        if in_options:
            return []

        ctx = {"value": value, "path": node.get_path(field)}
        if field == "type" and node.model.has_flexible_type:
            return [self.create_error("flexibleType", ctx, {"model": node.model.type})]
        return [self.create_error("default", ctx, {"options": spec.options})]


RULE = ValueInOptionsRule()
