from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.helpers import get_precision
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class PrecisionRule(BaseRule):
    name: str = "precision"
    priority: int = 45

    target_fields = "*"
    meta = RuleMeta(
        name="PrecisionRule",
        description="Validates that all fields are to the correct number of decimal places.",
        tests={
            "belowMinDecimalPlaces": RuleTest(
                message=(
                    "This field should have at least {{minDecimalPlaces}} decimal places. "
                    "Note that this notice will also appear when trailing zeros have been truncated."
                ),
                sample_values={"minDecimalPlaces": 2},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.SUGGESTION,
                type=ValidationErrorType.INVALID_PRECISION,
            ),
            "aboveMaxDecimalPlaces": RuleTest(
                message="This field should not exceed {{maxDecimalPlaces}} decimal places.",
                sample_values={"maxDecimalPlaces": 2},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.INVALID_PRECISION,
            ),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []
        spec = node.model.get_field(field)
        if spec is None:
            return []

        value = node.get_value(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return []

        places = get_precision(value)
        ctx = {"value": value, "path": node.get_path(field)}
        errors = []
        if spec.min_decimal_places is not None and places < spec.min_decimal_places:
            errors.append(self.create_error("belowMinDecimalPlaces", ctx, {"minDecimalPlaces": spec.min_decimal_places}))
        if spec.max_decimal_places is not None and places > spec.max_decimal_places:
            errors.append(self.create_error("aboveMaxDecimalPlaces", ctx, {"maxDecimalPlaces": spec.max_decimal_places}))
        return errors


RULE = PrecisionRule()
