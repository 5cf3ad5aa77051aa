from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class ValueIsRequiredContentRule(BaseRule):
    name: str = "value_is_required_content"
    priority: int = 43

    target_fields = "*"
    meta = RuleMeta(
        name="ValueIsRequiredContentRule",
        description="Validates that fields match defined required content.",
        tests={
            "default": RuleTest(
                message="Value for this field must be '{{requiredContent}}'",
                sample_values={"requiredContent": "https://openactive.io/"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES,
            ),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []
        spec = node.model.get_field(field)
        # type is policed by value_in_options
        if spec is None or spec.required_content is None or field == "type":
            return []

        value = node.get_mapped_value(field)
        if value is MISSING or value == spec.required_content:
            return []
        return [
            self.create_error(
                "default",
                {"value": value, "path": node.get_path(field)},
                {"requiredContent": spec.required_content},
            )
        ]


RULE = ValueIsRequiredContentRule()
