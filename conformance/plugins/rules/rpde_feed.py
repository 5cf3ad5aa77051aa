from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.helpers import is_rpde_feed
from conformance.core.rules import BaseRawRule, RawRuleResult, RuleMeta, RuleTest

_SCOPE = (
    "Please note that validation on RPDE feeds within the model validator is limited to checking "
    "whether required fields are present, and that the data in each item is a valid data model."
)

_NOTICE = dict(
    category=ValidationErrorCategory.INTERNAL,
    severity=ValidationErrorSeverity.NOTICE,
    type=ValidationErrorType.FOUND_RPDE_FEED,
)


def _cut_after_updated(items: List[Any], limit: int) -> Optional[int]:
    """Index just past the `limit`-th updated item, or None if the page never gets that far."""
    seen = 0
    for index, item in enumerate(items):
        state = item.get("state") if isinstance(item, dict) else None
        if isinstance(state, str) and state.lower() == "updated":
            seen += 1
            if seen == limit:
                return index + 1
    return None


@dataclass
class RpdeFeedRule(BaseRawRule):
    name: str = "rpde_feed"
    priority: int = 1

    meta = RuleMeta(
        name="RpdeFeedRule",
        description="Adds notices if the JSON submission is detected to be an RPDE feed.",
        tests={
            "isRpdeFeed": RuleTest(
                description="Adds a notice if the JSON submission is detected to be an RPDE feed.",
                message=f"The JSON you have submitted appears to be an RPDE feed. {_SCOPE}",
                **_NOTICE,
            ),
            "isRpdeFeedWithLimit": RuleTest(
                description="Adds a notice if only the first items of an RPDE feed were validated.",
                message=(
                    "The JSON you have submitted appears to be an RPDE feed. For performance reasons, "
                    f"the validator has only checked the first {{{{limit}}}} items in this feed. {_SCOPE}"
                ),
                sample_values={"limit": 10},
                **_NOTICE,
            ),
        },
    )

    def validate_raw(self, data: Any, options: Any) -> RawRuleResult:
        if not is_rpde_feed(data):
            return RawRuleResult()

        limit = getattr(options, "rpde_item_limit", None)
        items = data["items"]
        cut = _cut_after_updated(items, limit) if limit else None
        if cut is None or cut >= len(items):
            return RawRuleResult(errors=[self.create_error("isRpdeFeed", {"value": data, "path": "$"})])

        # the caller's document is left untouched
        page = {**data, "items": items[:cut]}
        err = self.create_error("isRpdeFeedWithLimit", {"value": page, "path": "$"}, {"limit": limit})
        return RawRuleResult(errors=[err], data=page)


RAW_RULE = RpdeFeedRule()
