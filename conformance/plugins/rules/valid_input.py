from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.rules import BaseRawRule, RawRuleResult, RuleMeta, RuleTest

_GUIDANCE = (
    "Please only submit single objects for validation: either an object conforming to the "
    "Modelling Specification, or an RPDE feed root object."
)


@dataclass
class ValidInputRule(BaseRawRule):
    name: str = "valid_input"
    priority: int = 0

    meta = RuleMeta(
        name="ValidInputRule",
        description="Validates that the JSON submission is in the correct format for the library.",
        tests={
            "noArray": RuleTest(
                description="Generates a warning if the JSON submission is an array.",
                message=f"Arrays are not supported for validation. {_GUIDANCE}",
                category=ValidationErrorCategory.INTERNAL,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.INVALID_JSON,
            ),
            "noInvalid": RuleTest(
                description="Generates an error if the submission is not a valid JSON object.",
                message=f"Only objects are supported for validation. {_GUIDANCE}",
                category=ValidationErrorCategory.INTERNAL,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.INVALID_JSON,
            ),
        },
    )

    def validate_raw(self, data: Any, options: Any) -> RawRuleResult:
        test_key = None
        if isinstance(data, list):
            test_key = "noArray"
        elif not isinstance(data, dict):
            test_key = "noInvalid"

        if test_key is None:
            return RawRuleResult()
        return RawRuleResult(errors=[self.create_error(test_key, {"value": data, "path": "$"})])


RAW_RULE = ValidInputRule()
