from __future__ import annotations

from typing import Dict, List

from conformance.core.errors import ValidationErrorType as T

from .models import ExclusionMode, Profile

_OPPORTUNITY_TYPES = [
    "Event",
    "FacilityUse",
    "IndividualFacilityUse",
    "CourseInstance",
    "EventSeries",
    "HeadlineEvent",
    "SessionSeries",
    "Course",
]


def _per_type(field: str, types: List[str]) -> Dict[str, List[str]]:
    return {t: [field] for t in types}


_ACTIVITY_NOT_RECOGNISED = {
    "errorType": [T.ACTIVITY_NOT_IN_ACTIVITY_LIST, T.USE_OFFICIAL_ACTIVITY_LIST],
}


def common_profile() -> Profile:
    activity_types = [t for t in _OPPORTUNITY_TYPES if t not in ("FacilityUse", "IndividualFacilityUse")]
    url_types = _OPPORTUNITY_TYPES + ["Slot", "ScheduledSession"]
    return Profile.from_dict({
        "name": "Common use",
        "identifier": "common",
        "measures": [
            {
                "name": "Has a leader name",
                "exclusions": [
                    {"errorType": [T.MISSING_REQUIRED_FIELD], "targetPaths": [r"\.leader\.name"]},
                ],
            },
            {
                "name": "Has a name",
                "description": "The name of the opportunity is essential for a participant to understand the activity",
                "exclusions": [
                    {"errorType": [T.MISSING_REQUIRED_FIELD], "targetFields": _per_type("name", _OPPORTUNITY_TYPES)},
                ],
            },
            {
                "name": "Has a description",
                "exclusions": [
                    {"errorType": [T.MISSING_RECOMMENDED_FIELD], "targetFields": _per_type("description", _OPPORTUNITY_TYPES)},
                ],
            },
            {
                "name": "Has a postcode or lat/long",
                "exclusions": [
                    {"errorType": [T.MISSING_REQUIRED_FIELD], "targetFields": {"Place": ["geo", "address"]}},
                ],
            },
            {
                "name": "Has a date in the future",
                "exclusions": [
                    {"errorType": [T.DATE_IN_THE_PAST]},
                ],
            },
            {
                "name": "Activity List ID matches",
                "exclusions": [
                    {"errorType": [T.MISSING_REQUIRED_FIELD], "targetFields": _per_type("activity", activity_types)},
                    _ACTIVITY_NOT_RECOGNISED,
                ],
            },
            {
                "name": "Session has name, description or matching activity",
                "exclusionMode": ExclusionMode.ALL,
                "exclusions": [
                    {"errorType": [T.MISSING_REQUIRED_FIELD], "targetFields": _per_type("name", _OPPORTUNITY_TYPES)},
                    {"errorType": [T.MISSING_RECOMMENDED_FIELD], "targetFields": _per_type("description", _OPPORTUNITY_TYPES)},
                    _ACTIVITY_NOT_RECOGNISED,
                ],
            },
            {
                "name": "Has a unique URL (e.g. for booking)",
                "exclusions": [
                    {"errorType": [T.MISSING_REQUIRED_FIELD], "targetFields": _per_type("url", url_types)},
                ],
            },
        ],
    })


def accessibility_profile() -> Profile:
    return Profile.from_dict({
        "name": "Accessibility",
        "identifier": "accessibility",
        "measures": [
            {
                "name": "Has accessibilitySupport",
                "exclusions": [
                    {"errorType": [T.MISSING_RECOMMENDED_FIELD], "targetPaths": [r"\.accessibilitySupport"]},
                ],
            },
        ],
    })


def builtin_profiles() -> List[Profile]:
    return [common_profile(), accessibility_profile()]
