from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class MinValueInclusiveRule(BaseRule):
    name: str = "min_value_inclusive"
    priority: int = 44

    target_fields = "*"
    meta = RuleMeta(
        name="MinValueInclusiveRule",
        description="Validates that all properties meet the associated minValueInclusive constraint.",
        tests={
            "belowMinimum": RuleTest(
                description="Raises a failure if the value is below the associated minValueInclusive property.",
                message="The value of this property must be greater than or equal to {{minValueInclusive}}.",
                sample_values={"minValueInclusive": 4},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.BELOW_MIN_VALUE_INCLUSIVE,
            ),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []
        spec = node.model.get_field(field)
        if spec is None or spec.min_value_inclusive is None:
            return []

        value = node.get_value(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return []
        if value >= spec.min_value_inclusive:
            return []

        minimum = spec.min_value_inclusive
        if float(minimum).is_integer():
            minimum = int(minimum)
        return [
            self.create_error(
                "belowMinimum",
                {"value": value, "path": node.get_path(field)},
                {"minValueInclusive": minimum},
            )
        ]


RULE = MinValueInclusiveRule()
