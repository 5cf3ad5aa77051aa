from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

_MISSING = dict(
    category=ValidationErrorCategory.CONFORMANCE,
    severity=ValidationErrorSeverity.FAILURE,
    type=ValidationErrorType.MISSING_REQUIRED_FIELD,
)


@dataclass
class RequiredOptionalFieldsRule(BaseRule):
    name: str = "required_optional_fields"
    priority: int = 21

    target_models = "*"
    meta = RuleMeta(
        name="RequiredOptionalFieldsRule",
        description="Validates that at least one field of each required group is present in the JSON data.",
        tests={
            "default": RuleTest(
                message='One of "{{fields}}" is required on "{{model}}".',
                sample_values={"fields": ["geo", "address"], "model": "Place"},
                **_MISSING,
            ),
            "described": RuleTest(message="{{description}}", **_MISSING),
        },
    )

    def validate_model(self, node):
        if not node.model.has_specification:
            return []

        errors = []
        for option in node.model.required_options:
            if not option.options:
                continue
            if any(node.get_value(f) not in (MISSING, None) for f in option.options):
                continue

            ctx = {"value": MISSING, "path": node.get_path(option.options[0])}
            if option.description:
                errors.append(self.create_error("described", ctx, {"description": " ".join(option.description)}))
            else:
                errors.append(
                    self.create_error("default", ctx, {"fields": option.options, "model": node.model.type})
                )
        return errors


RULE = RequiredOptionalFieldsRule()
