from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

_EMPTY = dict(
    category=ValidationErrorCategory.CONFORMANCE,
    severity=ValidationErrorSeverity.FAILURE,
    type=ValidationErrorType.FIELD_IS_EMPTY,
)


@dataclass
class NoEmptyValuesRule(BaseRule):
    name: str = "no_empty_values"
    priority: int = 41

    target_fields = "*"
    meta = RuleMeta(
        name="NoEmptyValuesRule",
        description="Validates that fields are not null, an empty string or an empty array.",
        tests={
            "null": RuleTest(message="Fields must not be null", **_EMPTY),
            "emptyArray": RuleTest(message="Fields must not contain empty arrays", **_EMPTY),
            "emptyString": RuleTest(message="Fields must not contain empty strings", **_EMPTY),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []

        value = node.get_value(field)
        if value is None:
            test_key = "null"
        elif isinstance(value, list) and not value:
            test_key = "emptyArray"
        elif value == "":
            test_key = "emptyString"
        else:
            return []
        return [self.create_error(test_key, {"value": value, "path": node.get_path(field)})]


RULE = NoEmptyValuesRule()
