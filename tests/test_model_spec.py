import pytest

from conformance.core.errors import ModelSpecError
from conformance.core.model import FieldSpec, InheritancePolicy, ModelSpec, normalize_type_name
from conformance.core.model.field_spec import DATE, DATETIME, FLOAT, INTEGER, TEXT, URL


def test_normalize_type_name():
    assert normalize_type_name("ArrayOf#Event") == "Event"
    assert normalize_type_name("#Event") == "Event"
    assert normalize_type_name("schema:Event") == "Event"
    assert normalize_type_name(None) is None


def test_fields_take_their_key_as_name():
    m = ModelSpec.from_dict({"type": "Event", "fields": {"name": {"requiredType": TEXT}}})
    assert m.get_field("name").field_name == "name"
    assert m.has_specification is True


def test_from_dict_rejects_bad_input():
    with pytest.raises(ModelSpecError):
        ModelSpec.from_dict(["not", "an", "object"])
    with pytest.raises(ModelSpecError):
        ModelSpec.from_dict({"type": "Event", "requiredFields": "name"})


def test_bad_inheritance_policy_is_a_model_error():
    with pytest.raises(ModelSpecError):
        ModelSpec.from_dict({
            "type": "Event",
            "fields": {"subEvent": {"model": "ArrayOf#Event", "inheritsTo": {"only": ["name"]}}},
        })


def test_lineage_includes_sub_class_graph():
    m = ModelSpec.from_dict({"type": "ScheduledSession", "subClassGraph": ["#Event", "https://schema.org/Thing"]})
    assert m.lineage[0] == "ScheduledSession"
    assert "Event" in m.lineage


def test_unspecified_model():
    m = ModelSpec.unspecified("Widget")
    assert m.type == "Widget"
    assert m.has_specification is False
    assert m.fields == {}


def test_in_spec_and_deprecated():
    m = ModelSpec.from_dict({
        "type": "Event",
        "inSpec": ["name"],
        "fields": {
            "name": {"requiredType": TEXT},
            "startTime": {"requiredType": TEXT, "deprecationGuidance": "Use startDate."},
        },
    })
    assert m.has_field_in_spec("name")
    assert m.has_field_in_spec("startTime")
    assert not m.has_field_in_spec("colour")
    assert [f.field_name for f in m.get_deprecated_fields()] == ["startTime"]


@pytest.mark.parametrize(
    "raw,field,expected",
    [
        ("*", "name", True),
        ({"include": ["id"]}, "name", False),
        ({"include": ["id"]}, "id", True),
        ({"exclude": ["name"]}, "name", False),
        ({"exclude": ["id"]}, "name", True),
        (None, "name", False),
    ],
)
def test_inheritance_policy(raw, field, expected):
    assert InheritancePolicy.parse(raw).permits(field) is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, "https://schema.org/Boolean"),
        (3, INTEGER),
        (3.5, FLOAT),
        ("plain words", TEXT),
        ("https://example.org/x", URL),
        ("2024-05-01", DATE),
        ("2024-05-01T10:00:00Z", DATETIME),
        (None, "null"),
        ({"type": "Place"}, "#Place"),
        ({"type": "schema:Place"}, "#Place"),
        ({"@type": "#Place"}, "#Place"),
        ({}, "#Thing"),
        ([], "Array"),
    ],
)
def test_detect_type(value, expected):
    spec = FieldSpec(fieldName="x")
    assert spec.detect_type(value) == expected


def test_detect_type_widens_to_declared_type():
    # an integer satisfies a Float field and is reported as Float
    spec = FieldSpec(fieldName="price", requiredType=FLOAT)
    assert spec.detect_type(10) == FLOAT
    assert spec.detected_type_is_allowed(10)


def test_detect_type_for_arrays():
    spec = FieldSpec(fieldName="activity", model="ArrayOf#Concept")
    assert spec.detect_type([{"type": "Concept"}]) == "ArrayOf#Concept"
    assert spec.detected_type_is_allowed([{"type": "Concept"}])
    assert spec.can_be_array()
    assert not spec.detected_type_is_allowed({"type": "Concept"})


def test_url_is_acceptable_text():
    spec = FieldSpec(fieldName="name", requiredType=TEXT)
    assert spec.detected_type_is_allowed("https://example.org/")
    assert not spec.detected_type_is_allowed(12)
