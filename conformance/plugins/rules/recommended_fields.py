from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class RecommendedFieldsRule(BaseRule):
    name: str = "recommended_fields"
    priority: int = 22

    target_models = "*"
    meta = RuleMeta(
        name="RecommendedFieldsRule",
        description="Validates that all recommended fields are present in the JSON data.",
        tests={
            "default": RuleTest(
                message='Recommended field "{{field}}" is missing from "{{model}}".',
                sample_values={"field": "description", "model": "Event"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.MISSING_RECOMMENDED_FIELD,
            ),
        },
    )

    def validate_model(self, node):
        if not node.model.has_specification:
            return []

        errors = []
        for field in node.model.recommended_fields:
            if node.get_value_with_inheritance(field) is MISSING:
                errors.append(
                    self.create_error(
                        "default",
                        {"value": MISSING, "path": node.get_path(field)},
                        {"field": field, "model": node.model.type},
                    )
                )
        return errors


RULE = RecommendedFieldsRule()
