from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class DeprecatedFieldsRule(BaseRule):
    name: str = "deprecated_fields"
    priority: int = 30

    target_models = "*"
    meta = RuleMeta(
        name="DeprecatedFieldsRule",
        description="Validates that deprecated properties are not present in the JSON data.",
        tests={
            "default": RuleTest(
                message="Deprecated properties must not be used in Open Booking API implementations. {{deprecationGuidance}}",
                sample_values={"deprecationGuidance": "Field is deprecated."},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_DEPRECATED,
            ),
            "feed": RuleTest(
                message="This property is deprecated. {{deprecationGuidance}}",
                sample_values={"deprecationGuidance": "Field is deprecated."},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.FIELD_DEPRECATED,
            ),
        },
    )

    def validate_model(self, node):
        if not node.model.has_specification:
            return []

        test_key = "feed" if node.options.validation_mode == "RPDEFeed" else "default"
        errors = []
        for spec in node.model.get_deprecated_fields():
            value = node.get_value(spec.field_name)
            if value is MISSING:
                continue
            errors.append(
                self.create_error(
                    test_key,
                    {"value": value, "path": node.get_path(spec.field_name)},
                    {"deprecationGuidance": spec.deprecation_guidance},
                )
            )
        return errors


RULE = DeprecatedFieldsRule()
