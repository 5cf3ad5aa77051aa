from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.model import MISSING
from conformance.core.model.resolver import KEYWORD_FIELDS
from conformance.core.options import OA_CONTEXT_URL
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

_CONTEXT_HINT = f"It should contain the OpenActive context ({OA_CONTEXT_URL}) as a string or the first element in an array."


@dataclass
class ContextInRootNodeRule(BaseRule):
    name: str = "context_in_root_node"
    priority: int = 10

    target_models = "*"
    meta = RuleMeta(
        name="ContextInRootNodeRule",
        description="Validates that @context is present in the root node, and that it contains the OpenActive context.",
        tests={
            "noContext": RuleTest(
                description="Raises a failure if the @context is missing from the root node.",
                message=f"The @context field is required in the root node of your data. {_CONTEXT_HINT}",
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
            "hasContext": RuleTest(
                description="Raises a failure if the @context is present in a non-root node.",
                message=f"The @context field is required to only be in the root node of your data. {_CONTEXT_HINT}",
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_NOT_IN_SPEC,
            ),
            "oaNotInRightPlace": RuleTest(
                message=f"The @context should contain the OpenActive context ({OA_CONTEXT_URL}) as a string or the first element in an array.",
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES,
            ),
            "type": RuleTest(
                description="Validates that the context is a url or an array of urls.",
                message=(
                    "Whilst JSON-LD supports inline context objects, the @context should be a URL or array of URLs, "
                    "with each URL pointing to a published context."
                ),
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.INVALID_TYPE,
            ),
        },
    )

    def validate_model(self, node):
        if not node.model.is_jsonld:
            return []

        value = node.get_value("@context")
        parent = node.parent_node
        test_key = None

        if parent is None or not parent.model.is_jsonld:
            declared = node.model.get_field("@context") or KEYWORD_FIELDS["@context"]
            if value is MISSING:
                test_key = "noContext"
            elif not declared.detected_type_is_allowed(value):
                test_key = "type"
            elif (isinstance(value, str) and value != OA_CONTEXT_URL) or (
                isinstance(value, list) and (not value or value[0] != OA_CONTEXT_URL)
            ):
                test_key = "oaNotInRightPlace"
        elif value is not MISSING:
            test_key = "hasContext"

        if test_key is None:
            return []
        return [self.create_error(test_key, {"value": value, "path": node.get_path("@context")})]


RULE = ContextInRootNodeRule()
