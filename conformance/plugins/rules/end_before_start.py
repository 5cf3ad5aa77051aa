from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.helpers import parse_iso_datetime
from conformance.core.model import MISSING
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class EndBeforeStartRule(BaseRule):
    name: str = "end_before_start"
    priority: int = 61

    target_models = ("Event", "Schedule")
    meta = RuleMeta(
        name="EndBeforeStartRule",
        description="Validates that startDate is before the endDate of an Event or Schedule.",
        tests={
            "default": RuleTest(
                message="The `startDate` of this `{{model}}` is after its `endDate`.",
                sample_values={"model": "Event"},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.START_DATE_AFTER_END_DATE,
            ),
            "invalidFormat": RuleTest(
                message="`{{field}}` could not be read as an ISO 8601 date, so it was not compared with the other end of the range.",
                sample_values={"field": "startDate"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.INVALID_FORMAT,
            ),
        },
    )

    def validate_model(self, node):
        raw = {
            "startDate": node.get_value_with_inheritance("startDate"),
            "endDate": node.get_value_with_inheritance("endDate"),
        }
        if MISSING in (raw["startDate"], raw["endDate"]):
            return []

        errors = []
        parsed = {}
        for field, value in raw.items():
            parsed[field] = parse_iso_datetime(value)
            if parsed[field] is None:
                errors.append(
                    self.create_error(
                        "invalidFormat",
                        {"value": value, "path": node.get_path(field)},
                        {"field": field},
                    )
                )
        if errors:
            return errors

        if parsed["startDate"] > parsed["endDate"]:
            errors.append(
                self.create_error(
                    "default",
                    {"value": raw["startDate"], "path": node.get_path("startDate")},
                    {"model": node.model.type},
                )
            )
        return errors


RULE = EndBeforeStartRule()
