from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ValidationErrorSeverity(str, Enum):
    FAILURE = "failure"
    WARNING = "warning"
    NOTICE = "notice"
    SUGGESTION = "suggestion"


class ValidationErrorCategory(str, Enum):
    CONFORMANCE = "conformance"
    DATA_QUALITY = "data-quality"
    INTERNAL = "internal"


class ValidationErrorType(str, Enum):
    INVALID_JSON = "invalid_json"
    FOUND_RPDE_FEED = "found_rpde_feed"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    MISSING_RECOMMENDED_FIELD = "missing_recommended_field"
    MODEL_NOT_FOUND = "model_not_found"
    FILE_NOT_FOUND = "file_not_found"
    FIELD_NOT_IN_SPEC = "field_not_in_spec"
    FIELD_NOT_ALLOWED_IN_SPEC = "field_not_allowed_in_spec"
    FIELD_COULD_BE_TYPO = "field_could_be_typo"
    FIELD_DEPRECATED = "field_deprecated"
    EXPERIMENTAL_FIELDS_NOT_CHECKED = "experimental_fields_not_checked"
    SCHEMA_ORG_FIELDS_NOT_CHECKED = "schema_org_fields_not_checked"
    INVALID_TYPE = "invalid_type"
    INVALID_FORMAT = "invalid_format"
    INVALID_PRECISION = "invalid_precision"
    INVALID_ID = "invalid_id"
    FIELD_IS_EMPTY = "field_is_empty"
    FIELD_NOT_IN_DEFINED_VALUES = "field_not_in_defined_values"
    BELOW_MIN_VALUE_INCLUSIVE = "below_min_value_inclusive"
    VALUE_OUTWITH_CONSTRAINT = "value_outwith_constraint"
    USE_FIELD_ALIASES = "use_field_aliases"
    START_DATE_AFTER_END_DATE = "start_date_after_end_date"
    MIN_VALUE_GREATER_THAN_MAX_VALUE = "min_value_greater_than_max_value"
    DATES_MUST_HAVE_DURATION = "dates_must_have_duration"
    NO_ZERO_DURATION = "no_zero_duration"
    DATE_IN_THE_PAST = "date_in_the_past"
    ACTIVITY_NOT_IN_ACTIVITY_LIST = "activity_not_in_activity_list"
    USE_OFFICIAL_ACTIVITY_LIST = "use_official_activity_list"
    MISSING_IS_ACCESSIBLE_FOR_FREE = "missing_is_accessible_for_free"
    OFFER_NAMES_NOT_UNIQUE = "offer_names_not_unique"
    NO_HTML = "no_html"
    ADDRESS_HAS_TRAILING_COMMA = "address_has_trailing_comma"
    CONSUMER_ASSUME_NO_GENDER_RESTRICTION = "consumer_assume_no_gender_restriction"
    CONSUMER_ASSUME_AGE_RANGE = "consumer_assume_age_range"
    CONSUMER_ASSUME_EVENT_STATUS = "consumer_assume_event_status"


DEFAULT_MESSAGES: Dict[ValidationErrorType, str] = {
    ValidationErrorType.INVALID_JSON: "The JSON fragment supplied is invalid.",
    ValidationErrorType.FOUND_RPDE_FEED: "The JSON submitted appears to be an RPDE feed.",
    ValidationErrorType.MISSING_REQUIRED_FIELD: "Required field is missing.",
    ValidationErrorType.MISSING_RECOMMENDED_FIELD: "Recommended field is missing.",
    ValidationErrorType.MODEL_NOT_FOUND: "Could not load definition for model",
    ValidationErrorType.FIELD_NOT_IN_SPEC: "This field is not defined in the specification",
    ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED: "The validator does not currently check experimental fields",
    ValidationErrorType.INVALID_TYPE: "Field is an invalid type",
    ValidationErrorType.INVALID_FORMAT: "Field is not in the correct format",
    ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES: "This value supplied is not in the allowed values for this field",
    ValidationErrorType.START_DATE_AFTER_END_DATE: "Start date is after the end date of the event",
}


@dataclass(frozen=True)
class ValidationError:
    """
    One data validation finding.

    `path` is document-rooted (`$.subEvent[0].name`). `model_type` is the type of
    the node that produced the error; the engine stamps it after each hook.
    """
    category: ValidationErrorCategory
    type: ValidationErrorType
    severity: ValidationErrorSeverity
    message: str
    path: str
    value: Any = None
    model_type: Optional[str] = None
    rule: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "value": self.value,
            "rule": self.rule,
        }


def default_message(error_type: ValidationErrorType) -> str:
    return DEFAULT_MESSAGES.get(error_type, "")
