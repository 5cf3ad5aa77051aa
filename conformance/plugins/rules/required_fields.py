from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class RequiredFieldsRule(BaseRule):
    name: str = "required_fields"
    priority: int = 20

    target_models = "*"
    meta = RuleMeta(
        name="RequiredFieldsRule",
        description="Validates that all required fields are present in the JSON data.",
        tests={
            "default": RuleTest(
                message='Required field "{{field}}" is missing from "{{model}}".',
                sample_values={"field": "name", "model": "Event"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
        },
    )

    def validate_model(self, node):
        # Nothing to require from a type we have no definition for
        if not node.model.has_specification:
            return []

        errors = []
        for field in node.model.required_fields:
            if node.get_value_with_inheritance(field) is MISSING:
                errors.append(
                    self.create_error(
                        "default",
                        {"value": MISSING, "path": node.get_path(field)},
                        {"field": field, "model": node.model.type},
                    )
                )
        return errors


RULE = RequiredFieldsRule()
