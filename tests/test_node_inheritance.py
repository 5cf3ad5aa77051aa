import pytest

from conformance.core.errors import ValidationErrorType
from conformance.core.model import MISSING, ModelSpec

from conftest import engine_for, make_models, make_node


def _event(sub_event_inherits_to=None, super_event_inherits_from=None):
    fields = {
        "id": {"requiredType": "https://schema.org/url"},
        "name": {"requiredType": "https://schema.org/Text"},
        "subEvent": {"model": "ArrayOf#Event"},
        "superEvent": {"model": "#Event"},
    }
    if sub_event_inherits_to is not None:
        fields["subEvent"]["inheritsTo"] = sub_event_inherits_to
    if super_event_inherits_from is not None:
        fields["superEvent"]["inheritsFrom"] = super_event_inherits_from
    return {"type": "Event", "requiredFields": ["name"], "fields": fields}


def _required_errors(models, doc):
    errors = engine_for({"required_fields"}, models=models).validate(doc)
    assert all(e.type == ValidationErrorType.MISSING_REQUIRED_FIELD for e in errors)
    return [e.path for e in errors]


@pytest.mark.parametrize(
    "policy,expected",
    [
        ("*", []),
        ({"include": ["id"]}, ["$.subEvent[0].name"]),
        ({"exclude": ["name"]}, ["$.subEvent[0].name"]),
        ({"exclude": ["id"]}, []),
    ],
)
def test_name_inherits_down_to_sub_event(policy, expected):
    models = make_models(_event(sub_event_inherits_to=policy))
    doc = {"name": "Test Event", "type": "Event", "subEvent": [{"type": "Event"}]}
    assert _required_errors(models, doc) == expected


def test_no_policy_means_no_inheritance():
    models = make_models(_event())
    doc = {"name": "Test Event", "type": "Event", "subEvent": [{"type": "Event"}]}
    assert _required_errors(models, doc) == ["$.subEvent[0].name"]


@pytest.mark.parametrize(
    "policy,expected",
    [
        ("*", []),
        ({"include": ["id"]}, ["$.name"]),
        ({"exclude": ["name"]}, ["$.name"]),
        ({"exclude": ["id"]}, []),
    ],
)
def test_name_inherits_up_from_super_event(policy, expected):
    models = make_models(_event(super_event_inherits_from=policy))
    doc = {"type": "Event", "superEvent": {"type": "Event", "name": "Parent Series"}}
    assert _required_errors(models, doc) == expected


def test_each_walk_keeps_its_direction():
    # inheritsFrom on superEvent must not let the parent's value flow into superEvent's node
    models = make_models(_event(super_event_inherits_from="*"))
    doc = {"type": "Event", "name": "Child", "superEvent": {"type": "Event"}}
    assert _required_errors(models, doc) == ["$.superEvent.name"]


def test_inheritance_resolves_through_several_levels():
    models = make_models(_event(sub_event_inherits_to="*"))
    doc = {
        "type": "Event",
        "name": "Festival",
        "subEvent": [{"type": "Event", "subEvent": [{"type": "Event"}]}],
    }
    assert _required_errors(models, doc) == []


def test_get_value_with_inheritance_on_nodes():
    models = make_models(_event(sub_event_inherits_to={"include": ["name"]}))
    model = models.get("Event")
    root = make_node({"type": "Event", "name": "Parent", "subEvent": [{"type": "Event"}]}, model, models)
    child = next(root.children())

    assert child.get_path() == "$.subEvent[0]"
    assert child.parent_node is root
    assert child.get_value("name") is MISSING
    assert child.get_value_with_inheritance("name") == "Parent"
    assert child.get_value_with_inheritance("id") is MISSING


def test_missing_is_distinct_from_null():
    model = ModelSpec.from_dict(_event())
    node = make_node({"type": "Event", "name": None}, model)
    assert node.get_value("name") is None
    assert node.get_value("id") is MISSING
    assert not MISSING
    assert repr(MISSING) == "MISSING"


def test_paths():
    model = ModelSpec.from_dict(_event())
    node = make_node({"type": "Event"}, model)
    assert node.get_path() == "$"
    assert node.get_path("name") == "$.name"
    assert node.get_path("subEvent", 2) == "$.subEvent[2]"


def test_value_objects_are_not_children():
    model = ModelSpec.from_dict(_event())
    node = make_node({"type": "Event", "superEvent": {"@value": "x"}, "subEvent": [{"@value": 1}, {"type": "Event"}]}, model)
    assert [c.get_path() for c in node.children()] == ["$.subEvent[1]"]
