from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

_INVALID = dict(
    category=ValidationErrorCategory.CONFORMANCE,
    severity=ValidationErrorSeverity.FAILURE,
    type=ValidationErrorType.INVALID_TYPE,
)


@dataclass
class FieldsCorrectTypeRule(BaseRule):
    name: str = "fields_correct_type"
    priority: int = 40

    target_fields = "*"
    meta = RuleMeta(
        name="FieldsCorrectTypeRule",
        description="Validates that all fields are the correct type.",
        tests={
            "singleType": RuleTest(
                message="Invalid type, expected '{{expected}}' but found '{{found}}'",
                sample_values={"expected": "https://schema.org/Text", "found": "https://schema.org/Integer"},
                **_INVALID,
            ),
            "multipleTypes": RuleTest(
                message="Invalid type, expected one of '{{expected}}' but found '{{found}}'",
                sample_values={"expected": ["https://schema.org/Text", "#Concept"], "found": "https://schema.org/Integer"},
                **_INVALID,
            ),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []
        spec = node.model.get_field(field)
        if spec is None:
            return []

        expected = spec.get_all_possible_types()
        if not expected:
            return []

        value = node.get_value(field)
        if value is MISSING or spec.detected_type_is_allowed(value):
            return []

        test_key = "singleType" if len(expected) == 1 else "multipleTypes"
        return [
            self.create_error(
                test_key,
                {"value": value, "path": node.get_path(field)},
                {"expected": expected, "found": spec.detect_type(value)},
            )
        ]


RULE = FieldsCorrectTypeRule()
