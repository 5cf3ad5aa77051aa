import copy

from conformance.core.engine import validate
from conformance.core.errors import ValidationErrorSeverity as S
from conformance.core.errors import ValidationErrorType as T

from conftest import engine_for

OA = "https://openactive.io/"
NEXT = "https://example.org/feed?afterTimestamp=4&afterId=4"


def _item(n, state="updated", with_context=True):
    item = {"state": state, "kind": "SessionSeries", "id": str(n), "modified": n}
    if state == "updated":
        data = {"type": "SessionSeries", "id": f"https://example.org/session-series/{n}", "name": f"Session {n}"}
        if with_context:
            data["@context"] = OA
        item["data"] = data
    return item


def _feed(*items):
    return {"items": list(items), "next": NEXT, "license": "https://creativecommons.org/licenses/by/4.0/"}


def _by_type(errors, error_type):
    return [e for e in errors if e.type == error_type]


def test_feed_page_gets_notice():
    errors = validate(_feed(_item(1)), {"validationMode": "RPDEFeed"})
    notices = _by_type(errors, T.FOUND_RPDE_FEED)
    assert [(e.severity, e.path, e.rule) for e in notices] == [(S.NOTICE, "$", "rpde_feed")]
    assert notices[0].message.startswith("The JSON you have submitted appears to be an RPDE feed.")


def test_feed_page_needs_no_context():
    errors = validate(_feed(_item(1)), {"validationMode": "RPDEFeed"})
    assert not [e for e in errors if e.path == "$.@context"]
    assert not [e for e in errors if e.path.startswith("$.items[0].@context")]


def test_item_data_is_validated_as_root():
    errors = validate(_feed(_item(1, with_context=False)), {"validationMode": "RPDEFeed"})
    missing = _by_type(errors, T.MISSING_REQUIRED_FIELD)
    assert "$.items[0].data.@context" in [e.path for e in missing]


def test_feed_page_required_fields():
    page = _feed(_item(1))
    del page["next"]
    errors = engine_for({"required_fields"}).validate(page)
    page_errors = [e for e in errors if e.model_type == "FeedPage"]
    assert [(e.type, e.path) for e in page_errors] == [(T.MISSING_REQUIRED_FIELD, "$.next")]
    assert not [e for e in errors if e.model_type == "RpdeItem"]


def test_item_limit_truncates_after_updated_items():
    page = _feed(_item(1), _item(2, state="deleted"), _item(3), _item(4, with_context=False))
    before = copy.deepcopy(page)

    errors = validate(page, {"validationMode": "RPDEFeed", "rpdeItemLimit": 2})

    notices = _by_type(errors, T.FOUND_RPDE_FEED)
    assert len(notices) == 1
    assert "only checked the first 2 items" in notices[0].message
    # the fourth item was cut before validation
    assert not [e for e in errors if e.path.startswith("$.items[3]")]
    assert page == before


def test_item_limit_not_reached_keeps_plain_notice():
    page = _feed(_item(1), _item(2, with_context=False))
    errors = validate(page, {"validationMode": "RPDEFeed", "rpdeItemLimit": 5})
    notices = _by_type(errors, T.FOUND_RPDE_FEED)
    assert len(notices) == 1
    assert "only checked" not in notices[0].message
    assert "$.items[1].data.@context" in [e.path for e in errors]


def test_typed_document_is_not_a_feed():
    doc = {"@context": OA, "type": "Event", "items": [_item(1)]}
    assert _by_type(validate(doc), T.FOUND_RPDE_FEED) == []
