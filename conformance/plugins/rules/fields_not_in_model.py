from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

# Namespaces whose terms this validator knows; anything else prefixed is an extension
CORE_PREFIXES = frozenset({"schema", "oa"})


@dataclass
class FieldsNotInModelRule(BaseRule):
    name: str = "fields_not_in_model"
    priority: int = 31

    target_fields = "*"
    meta = RuleMeta(
        name="FieldsNotInModelRule",
        description="Validates that all fields are present in the specification.",
        tests={
            "invalidExperimental": RuleTest(
                description="Raises a notice if extension fields are detected.",
                message=(
                    "No definition for this extension field could be found. Extension fields should be described "
                    "by a published JSON-LD definition, which should be referred to in the @context."
                ),
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.NOTICE,
                type=ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED,
            ),
            "typoHint": RuleTest(
                description="Detects common typos, and raises a failure informing on how to correct.",
                message='Field "{{typoField}}" is a common typo for "{{actualField}}". Please correct this field to "{{actualField}}".',
                sample_values={"typoField": "offer", "actualField": "offers"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_COULD_BE_TYPO,
            ),
            "notInSpec": RuleTest(
                description="Raises a warning for fields that aren't in the specification.",
                message="This field is not defined in the OpenActive specification.",
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.FIELD_NOT_IN_SPEC,
            ),
        },
    )

    def _is_extension(self, node, raw_key: str) -> bool:
        resolver = node.resolver
        kind = resolver.key_kind(raw_key)
        if kind == "prefixed":
            return resolver.split_prefixed(raw_key)[0] not in CORE_PREFIXES
        if kind == "iri":
            by_iri = resolver.split_iri(raw_key)
            return by_iri is None or by_iri[0] not in CORE_PREFIXES
        # unknown prefix, e.g. "myorg:field"
        return ":" in raw_key

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []
        # @context belongs to context_in_root_node
        if field == "@context" or node.model.has_field_in_spec(field):
            return []

        raw_key = node.get_mapped_field_name(field) or field
        params = None
        if self._is_extension(node, raw_key):
            test_key = "invalidExperimental"
        elif field in node.model.common_typos:
            test_key = "typoHint"
            params = {"typoField": field, "actualField": node.model.common_typos[field]}
        else:
            test_key = "notInSpec"

        return [
            self.create_error(
                test_key,
                {"value": node.get_value(field), "path": node.get_path(raw_key)},
                params,
            )
        ]


RULE = FieldsNotInModelRule()
