from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.options import OFFICIAL_ACTIVITY_LIST
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

# Legacy spellings of the official list that should be replaced by OFFICIAL_ACTIVITY_LIST
UPGRADE_ACTIVITY_LISTS = (
    "https://www.openactive.io/activity-list/activity-list.jsonld",
    "https://openactive.io/activity-list/activity-list.jsonld",
    "http://www.openactive.io/activity-list/activity-list.jsonld",
    "http://openactive.io/activity-list/activity-list.jsonld",
    "https://www.openactive.io/activity-list/",
    "https://openactive.io/activity-list/",
    "http://www.openactive.io/activity-list/",
    "http://openactive.io/activity-list/",
    "https://www.openactive.io/activity-list",
    "http://www.openactive.io/activity-list",
    "http://openactive.io/activity-list",
)

DEFAULT_ACTIVITY_LISTS = (OFFICIAL_ACTIVITY_LIST,)

_ACTIVITY_MODELS = (
    "Event",
    "FacilityUse",
    "IndividualFacilityUse",
    "CourseInstance",
    "EventSeries",
    "HeadlineEvent",
    "SessionSeries",
    "Course",
)


def _scheme_id(scheme: Dict[str, Any]) -> Optional[str]:
    for key in ("id", "@id", "@url", "url"):
        v = scheme.get(key)
        if isinstance(v, str) and v:
            return v
    return None


@dataclass
class ActivityInActivityListRule(BaseRule):
    name: str = "activity_in_activity_list"
    priority: int = 62

    target_fields = {model: ["activity"] for model in _ACTIVITY_MODELS}
    meta = RuleMeta(
        name="ActivityInActivityListRule",
        description="Validates that an activity is in the OpenActive activity list.",
        tests={
            "default": RuleTest(
                message='Activity `"{{activity}}"` could not be found in the OpenActive activity list.',
                sample_values={"activity": "Touch Football"},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.ACTIVITY_NOT_IN_ACTIVITY_LIST,
            ),
            "noPrefLabelMatch": RuleTest(
                message=(
                    'Activity `"{{activity}}"` was found in the activity list `"{{list}}"`, but the `"prefLabel"` did not match.\n\n'
                    'The correct `"prefLabel"` is `"{{correctPrefLabel}}"`.'
                ),
                sample_values={
                    "activity": "https://openactive.io/activity-list#dc8b8b2b-0a83-403f-863a-4ec05ebb2410",
                    "correctPrefLabel": "Touch Rugby Union",
                    "list": OFFICIAL_ACTIVITY_LIST,
                },
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.ACTIVITY_NOT_IN_ACTIVITY_LIST,
            ),
            "noIdMatch": RuleTest(
                message=(
                    'Activity `"{{activity}}"` was found in the activity list `"{{list}}"`, but the `"id"` did not match.\n\n'
                    'The correct `"id"` is `"{{correctId}}"`.'
                ),
                sample_values={
                    "activity": "Touch Rugby Union",
                    "correctId": "https://openactive.io/activity-list#dc8b8b2b-0a83-403f-863a-4ec05ebb2410",
                    "list": OFFICIAL_ACTIVITY_LIST,
                },
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.ACTIVITY_NOT_IN_ACTIVITY_LIST,
            ),
            "upgradeActivityList": RuleTest(
                message=(
                    'URL `"https://openactive.io/activity-list"` should now be used in the `"inScheme"` property '
                    'to reference the OpenActive Activity list rather than `"{{list}}"`.'
                ),
                sample_values={"list": UPGRADE_ACTIVITY_LISTS[0]},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES,
            ),
            "useOfficialActivityList": RuleTest(
                message=(
                    "To ensure your data gets used by the largest number of apps and websites, it is recommended "
                    "that you align your activities with the official OpenActive activity list."
                ),
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.USE_OFFICIAL_ACTIVITY_LIST,
            ),
        },
    )

    def validate_field(self, node, field):
        value = node.get_value(field)
        if value is MISSING or not isinstance(value, list):
            return []

        schemes = {}
        for scheme in node.options.activity_lists:
            sid = _scheme_id(scheme)
            if sid is not None:
                schemes[sid] = scheme

        errors = []
        for index, activity in enumerate(value):
            if not isinstance(activity, dict):
                continue
            errors.extend(self._check_activity(node, field, index, activity, schemes))
        return errors

    def _check_activity(self, node, field, index, activity, schemes):
        ctx = {"value": activity, "path": node.get_path(field, index)}
        keys = node.resolver.index_keys(None, activity)
        in_scheme = activity.get(keys["inScheme"]) if "inScheme" in keys else None
        pref_label = activity.get(keys["prefLabel"]) if "prefLabel" in keys else None
        concept_id = activity.get(keys["id"]) if "id" in keys else None

        errors = []
        list_urls: List[str] = list(DEFAULT_ACTIVITY_LISTS)
        if in_scheme is None:
            errors.append(self.create_error("useOfficialActivityList", ctx))
        elif in_scheme in UPGRADE_ACTIVITY_LISTS:
            errors.append(self.create_error("upgradeActivityList", ctx, {"list": in_scheme}))
        elif in_scheme not in DEFAULT_ACTIVITY_LISTS:
            list_urls = [in_scheme]
            errors.append(self.create_error("useOfficialActivityList", ctx))

        lists = [(url, schemes[url]) for url in list_urls if url in schemes]
        # Nothing to compare against
        if not lists:
            return errors

        found = False
        label_match = id_match = True
        identifier = pref_label if pref_label is not None else concept_id
        correct_label = correct_id = current_list = None
        for url, scheme in lists:
            current_list = url
            for concept in scheme.get("concept") or []:
                if not isinstance(concept, dict):
                    continue
                if isinstance(pref_label, str):
                    correct_label = concept.get("prefLabel")
                    label_match = isinstance(correct_label, str) and correct_label.lower() == pref_label.lower()
                    found = found or label_match
                if concept_id is not None:
                    if pref_label is None or not label_match:
                        identifier = concept_id
                    correct_id = concept.get("id", concept.get("@id"))
                    id_match = correct_id == concept_id
                    found = found or id_match
                if found:
                    break
            if found:
                break

        if not found:
            errors.append(self.create_error("default", ctx, {"activity": identifier}))
        elif not label_match:
            errors.append(
                self.create_error(
                    "noPrefLabelMatch",
                    ctx,
                    {"activity": identifier, "correctPrefLabel": correct_label, "list": current_list},
                )
            )
        elif not id_match:
            errors.append(
                self.create_error(
                    "noIdMatch",
                    ctx,
                    {"activity": identifier, "correctId": correct_id, "list": current_list},
                )
            )
        return errors


RULE = ActivityInActivityListRule()
