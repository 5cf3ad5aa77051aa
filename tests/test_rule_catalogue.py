import copy

import pytest

from conformance.core.engine import validate
from conformance.core.errors import ValidationErrorSeverity as S
from conformance.core.errors import ValidationErrorType as T
from conformance.core.measures import ExclusionMatcher, common_profile

from conftest import engine_for, make_models

OA = "https://openactive.io/"
ACTIVITY_LIST = "https://openactive.io/activity-list"
YOGA_ID = "https://openactive.io/activity-list#c16df6ed-a4a0-4275-a8c3-1c8cff56856f"

YOGA = {"type": "Concept", "id": YOGA_ID, "prefLabel": "Yoga", "inScheme": ACTIVITY_LIST}

SESSION_SERIES = {
    "@context": OA,
    "type": "SessionSeries",
    "id": "https://example.org/session-series/1",
    "name": "Morning Yoga",
    "description": "Gentle yoga for all levels",
    "activity": [YOGA],
    "location": {
        "type": "Place",
        "name": "Community Hall",
        "geo": {"type": "GeoCoordinates", "latitude": 51.5072, "longitude": -0.1276},
    },
    "organizer": {"type": "Organization", "name": "Yoga Co", "url": "https://example.org"},
    "offers": [{"type": "Offer", "name": "Drop-in", "price": 5.25, "priceCurrency": "GBP"}],
    "subEvent": [
        {
            "type": "ScheduledSession",
            "id": "https://example.org/sessions/1",
            "startDate": "2024-05-01T10:00:00Z",
            "endDate": "2024-05-01T11:00:00Z",
            "eventStatus": "https://schema.org/EventScheduled",
        }
    ],
}


def _event(**extra):
    doc = {
        "@context": OA,
        "type": "Event",
        "name": "Swim",
        "activity": [YOGA],
        "location": {"type": "Place", "geo": {"type": "GeoCoordinates", "latitude": 51.5, "longitude": -0.1}},
        "startDate": "2024-05-01T10:00:00Z",
    }
    doc.update(extra)
    return doc


def run(rule, doc, **opts):
    return engine_for({rule}, **opts).validate(doc)


def summary(errors):
    return [(e.type, e.severity, e.path) for e in errors]


def test_well_formed_document_is_clean():
    errors = validate(copy.deepcopy(SESSION_SERIES))
    assert [e.to_dict() for e in errors] == []
    score = ExclusionMatcher.compute_score(errors, common_profile())
    assert score.overall_score == 1.0


# --- raw input ---

def test_valid_input_warns_on_arrays():
    errors = validate([{"type": "Thing"}], {"rules": ["valid_input"]})
    assert summary(errors) == [(T.INVALID_JSON, S.WARNING, "$")]


def test_valid_input_rejects_scalars():
    errors = validate("just a string", {"rules": ["valid_input"]})
    assert summary(errors) == [(T.INVALID_JSON, S.FAILURE, "$")]


# --- @context ---

def test_context_missing_from_root():
    doc = _event()
    del doc["@context"]
    assert summary(run("context_in_root_node", doc)) == [(T.MISSING_REQUIRED_FIELD, S.FAILURE, "$.@context")]


def test_context_must_lead_with_openactive():
    doc = _event(**{"@context": ["https://example.org/ctx.jsonld", OA]})
    assert summary(run("context_in_root_node", doc)) == [(T.FIELD_NOT_IN_DEFINED_VALUES, S.FAILURE, "$.@context")]
    assert run("context_in_root_node", _event(**{"@context": [OA, "https://example.org/ctx.jsonld"]})) == []


def test_inline_context_object_is_wrong_type():
    doc = _event(**{"@context": {"@vocab": "https://schema.org/"}})
    assert summary(run("context_in_root_node", doc)) == [(T.INVALID_TYPE, S.FAILURE, "$.@context")]


def test_context_only_in_root():
    doc = _event()
    doc["location"]["@context"] = OA
    assert summary(run("context_in_root_node", doc)) == [(T.FIELD_NOT_IN_SPEC, S.FAILURE, "$.location.@context")]


# --- required / recommended ---

def test_required_fields():
    doc = _event()
    del doc["startDate"]
    errors = run("required_fields", doc)
    assert summary(errors) == [(T.MISSING_REQUIRED_FIELD, S.FAILURE, "$.startDate")]
    assert errors[0].message == 'Required field "startDate" is missing from "Event".'
    assert errors[0].model_type == "Event"


def test_required_fields_inherited_from_parent():
    # activity and location come down from the SessionSeries
    assert run("required_fields", copy.deepcopy(SESSION_SERIES)) == []


def test_required_options_group():
    doc = _event(location={"type": "Place", "name": "Pool"})
    errors = run("required_optional_fields", doc)
    assert summary(errors) == [(T.MISSING_REQUIRED_FIELD, S.FAILURE, "$.location.geo")]
    assert "either a `geo` or an `address`" in errors[0].message


def test_required_options_treat_null_as_absent():
    doc = _event(location={"type": "Place", "geo": None})
    assert len(run("required_optional_fields", doc)) == 1
    doc = _event(location={"type": "Place", "address": {"type": "PostalAddress", "postalCode": "N1 1AA"}})
    assert run("required_optional_fields", doc) == []


def test_recommended_fields():
    errors = run("recommended_fields", _event(description="Lengths", endDate="2024-05-01T11:00:00Z"))
    paths = [e.path for e in errors if e.model_type == "Event"]
    assert paths == ["$.organizer"]
    assert all(e.severity == S.WARNING and e.type == T.MISSING_RECOMMENDED_FIELD for e in errors)


# --- deprecated / unknown fields / aliases ---

def test_deprecated_field_fails_by_default():
    assert summary(run("deprecated_fields", _event(startTime="10:00"))) == [(T.FIELD_DEPRECATED, S.FAILURE, "$.startTime")]


def test_deprecated_field_warns_in_feeds():
    errors = run("deprecated_fields", _event(startTime="10:00"), validation_mode="RPDEFeed")
    assert summary(errors) == [(T.FIELD_DEPRECATED, S.WARNING, "$.startTime")]
    assert "Use `startDate`" in errors[0].message


def test_fields_not_in_model():
    doc = _event(**{"colour": "red", "desc": "typo", "ext:difficulty": 3, "beta:isVirtual": False})
    assert summary(run("fields_not_in_model", doc)) == [
        (T.FIELD_NOT_IN_SPEC, S.WARNING, "$.colour"),
        (T.FIELD_COULD_BE_TYPO, S.FAILURE, "$.desc"),
        (T.EXPERIMENTAL_FIELDS_NOT_CHECKED, S.NOTICE, "$.ext:difficulty"),
        (T.EXPERIMENTAL_FIELDS_NOT_CHECKED, S.NOTICE, "$.beta:isVirtual"),
    ]


def test_typo_hint_message():
    errors = run("fields_not_in_model", _event(desc="typo"))
    assert errors[0].message == 'Field "desc" is a common typo for "description". Please correct this field to "description".'


def test_aliased_fields_are_in_spec():
    doc = _event(**{"schema:description": "Lengths", "https://schema.org/endDate": "2024-05-01T11:00:00Z"})
    assert run("fields_not_in_model", doc) == []


def test_no_prefix_or_namespace():
    doc = _event(**{"schema:description": "Lengths", "https://schema.org/endDate": "2024-05-01T11:00:00Z"})
    doc["@type"] = doc.pop("type")
    errors = run("no_prefix_or_namespace", doc)
    assert sorted(summary(errors), key=lambda t: t[2]) == [
        (T.USE_FIELD_ALIASES, S.WARNING, "$.@type"),
        (T.USE_FIELD_ALIASES, S.WARNING, "$.https://schema.org/endDate"),
        (T.USE_FIELD_ALIASES, S.WARNING, "$.schema:description"),
    ]
    by_path = {e.path: e.message for e in errors}
    assert by_path["$.@type"] == 'Field "@type" should be submitted as "type"'


# --- value checks ---

def test_single_type_mismatch():
    errors = run("fields_correct_type", _event(maximumAttendeeCapacity="ten"))
    assert summary(errors) == [(T.INVALID_TYPE, S.FAILURE, "$.maximumAttendeeCapacity")]
    assert errors[0].message == (
        "Invalid type, expected 'https://schema.org/Integer' but found 'https://schema.org/Text'"
    )


def test_multiple_type_mismatch():
    errors = run("fields_correct_type", _event(startDate=5))
    assert summary(errors) == [(T.INVALID_TYPE, S.FAILURE, "$.startDate")]
    assert "expected one of" in errors[0].message


def test_object_expected():
    errors = run("fields_correct_type", _event(location="The pool"))
    assert summary(errors) == [(T.INVALID_TYPE, S.FAILURE, "$.location")]


def test_prefixed_type_satisfies_model_field():
    place = {"@type": "schema:Place", "geo": {"type": "GeoCoordinates", "latitude": 51.5, "longitude": -0.1}}
    assert run("fields_correct_type", _event(location=place)) == []


@pytest.mark.parametrize(
    "value,message",
    [
        (None, "Fields must not be null"),
        ("", "Fields must not contain empty strings"),
        ([], "Fields must not contain empty arrays"),
    ],
)
def test_no_empty_values(value, message):
    errors = run("no_empty_values", _event(description=value))
    assert summary(errors) == [(T.FIELD_IS_EMPTY, S.FAILURE, "$.description")]
    assert errors[0].message == message


def test_value_in_options():
    errors = run("value_in_options", _event(eventStatus="https://schema.org/EventMaybe"))
    assert summary(errors) == [(T.FIELD_NOT_IN_DEFINED_VALUES, S.FAILURE, "$.eventStatus")]
    assert "https://schema.org/EventScheduled" in errors[0].message


def test_flexible_type_only_warns():
    doc = _event(location={"type": "Stadium", "geo": {"type": "GeoCoordinates", "latitude": 1.0, "longitude": 1.0}})
    errors = run("value_in_options", doc)
    assert summary(errors) == [(T.FIELD_NOT_IN_DEFINED_VALUES, S.WARNING, "$.location.type")]
    assert errors[0].message == "Use one of the recommended types for Place if applicable"


def test_value_is_required_content():
    models = make_models({
        "type": "Widget",
        "fields": {
            "type": {"requiredType": "https://schema.org/Text", "requiredContent": "Gadget"},
            "kind": {"requiredType": "https://schema.org/Text", "requiredContent": "fixed"},
        },
    })
    errors = run("value_is_required_content", {"type": "Widget", "kind": "loose"}, models=models)
    assert summary(errors) == [(T.FIELD_NOT_IN_DEFINED_VALUES, S.FAILURE, "$.kind")]
    assert errors[0].message == "Value for this field must be 'fixed'"


def test_min_value_inclusive():
    errors = run("min_value_inclusive", _event(maximumAttendeeCapacity=-1))
    assert summary(errors) == [(T.BELOW_MIN_VALUE_INCLUSIVE, S.FAILURE, "$.maximumAttendeeCapacity")]
    assert errors[0].message == "The value of this property must be greater than or equal to 0."
    assert run("min_value_inclusive", _event(maximumAttendeeCapacity=0)) == []


@pytest.mark.parametrize(
    "price,expected",
    [
        (5.25, []),
        (5.5, [(T.INVALID_PRECISION, S.SUGGESTION, "$.offers[0].price")]),
        (5.255, [(T.INVALID_PRECISION, S.WARNING, "$.offers[0].price")]),
    ],
)
def test_price_precision(price, expected):
    doc = _event(offers=[{"type": "Offer", "price": price, "priceCurrency": "GBP"}])
    assert summary(run("precision", doc)) == expected


def test_coordinate_precision():
    doc = _event(location={"type": "Place", "geo": {"type": "GeoCoordinates", "latitude": 51.1234567, "longitude": 0.5}})
    assert summary(run("precision", doc)) == [(T.INVALID_PRECISION, S.WARNING, "$.location.geo.latitude")]


# --- data quality ---

def test_currency_required_for_non_zero_price():
    doc = _event(offers=[{"type": "Offer", "price": 10}])
    errors = run("currency_if_non_zero_price", doc)
    assert summary(errors) == [(T.MISSING_REQUIRED_FIELD, S.FAILURE, "$.offers[0].price")]
    assert '"price": 10' in errors[0].message


@pytest.mark.parametrize(
    "offer",
    [
        {"type": "Offer", "price": 0},
        {"type": "Offer", "price": 10, "priceCurrency": "GBP"},
        {"type": "Offer", "name": "Free"},
    ],
)
def test_currency_not_required(offer):
    assert run("currency_if_non_zero_price", _event(offers=[offer])) == []


def test_end_before_start():
    doc = _event(startDate="2024-05-02T10:00:00Z", endDate="2024-05-01T10:00:00Z")
    assert summary(run("end_before_start", doc)) == [(T.START_DATE_AFTER_END_DATE, S.WARNING, "$.startDate")]
    assert run("end_before_start", _event(endDate="2024-05-01T11:00:00Z")) == []


def test_end_before_start_unparseable_date():
    doc = _event(startDate="soon", endDate="2024-05-01T10:00:00Z")
    assert summary(run("end_before_start", doc)) == [(T.INVALID_FORMAT, S.FAILURE, "$.startDate")]


def test_end_before_start_needs_both_dates():
    assert run("end_before_start", _event()) == []


# --- activity lists ---

LISTS = [{"id": ACTIVITY_LIST, "concept": [{"id": YOGA_ID, "prefLabel": "Yoga"}]}]


def _activity(**fields):
    concept = {"type": "Concept"}
    concept.update(fields)
    return _event(activity=[concept])


def test_activity_found():
    assert run("activity_in_activity_list", _activity(id=YOGA_ID, prefLabel="yoga", inScheme=ACTIVITY_LIST), activity_lists=LISTS) == []


def test_activity_not_found():
    doc = _activity(id="https://openactive.io/activity-list#nope", prefLabel="Underwater Hockey", inScheme=ACTIVITY_LIST)
    errors = run("activity_in_activity_list", doc, activity_lists=LISTS)
    assert summary(errors) == [(T.ACTIVITY_NOT_IN_ACTIVITY_LIST, S.WARNING, "$.activity[0]")]


def test_activity_label_mismatch():
    doc = _activity(id=YOGA_ID, prefLabel="Yogga", inScheme=ACTIVITY_LIST)
    errors = run("activity_in_activity_list", doc, activity_lists=LISTS)
    assert summary(errors) == [(T.ACTIVITY_NOT_IN_ACTIVITY_LIST, S.WARNING, "$.activity[0]")]
    assert 'The correct `"prefLabel"` is `"Yoga"`' in errors[0].message


def test_activity_id_mismatch():
    doc = _activity(id="https://openactive.io/activity-list#wrong", prefLabel="Yoga", inScheme=ACTIVITY_LIST)
    errors = run("activity_in_activity_list", doc, activity_lists=LISTS)
    assert summary(errors) == [(T.ACTIVITY_NOT_IN_ACTIVITY_LIST, S.FAILURE, "$.activity[0]")]
    assert YOGA_ID in errors[0].message


def test_activity_without_scheme_uses_official_list():
    errors = run("activity_in_activity_list", _activity(id=YOGA_ID, prefLabel="Yoga"), activity_lists=LISTS)
    assert summary(errors) == [(T.USE_OFFICIAL_ACTIVITY_LIST, S.WARNING, "$.activity[0]")]


def test_legacy_activity_list_url():
    doc = _activity(id=YOGA_ID, prefLabel="Yoga", inScheme="https://www.openactive.io/activity-list/activity-list.jsonld")
    errors = run("activity_in_activity_list", doc, activity_lists=LISTS)
    assert summary(errors) == [(T.FIELD_NOT_IN_DEFINED_VALUES, S.FAILURE, "$.activity[0]")]


def test_custom_activity_list():
    custom = "https://example.org/activities"
    lists = LISTS + [{"@id": custom, "concept": [{"@id": "https://example.org/activities#padel", "prefLabel": "Padel"}]}]
    doc = _activity(id="https://example.org/activities#padel", prefLabel="Padel", inScheme=custom)
    errors = run("activity_in_activity_list", doc, activity_lists=lists)
    assert summary(errors) == [(T.USE_OFFICIAL_ACTIVITY_LIST, S.WARNING, "$.activity[0]")]


def test_activity_prefixed_concept_keys():
    doc = _activity(**{"@id": YOGA_ID, "skos:prefLabel": "Yoga", "skos:inScheme": ACTIVITY_LIST})
    assert run("activity_in_activity_list", doc, activity_lists=LISTS) == []


def test_unconfigured_list_only_reports_scheme():
    doc = _activity(id="https://openactive.io/activity-list#nope", prefLabel="Nope", inScheme=ACTIVITY_LIST)
    assert run("activity_in_activity_list", doc) == []
