from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.rules import BaseRule, RuleMeta, RuleTest

_ALIAS = dict(
    category=ValidationErrorCategory.CONFORMANCE,
    severity=ValidationErrorSeverity.WARNING,
    type=ValidationErrorType.USE_FIELD_ALIASES,
)


@dataclass
class NoPrefixOrNamespaceRule(BaseRule):
    name: str = "no_prefix_or_namespace"
    priority: int = 32

    target_fields = "*"
    meta = RuleMeta(
        name="NoPrefixOrNamespaceRule",
        description="Validates that fields that are aliased in the @context are not submitted in their unaliased form.",
        tests={
            "typeAndId": RuleTest(
                description="Validates that @type and @id are submitted as type and id.",
                message='Field "@{{field}}" should be submitted as "{{field}}"',
                sample_values={"field": "type"},
                **_ALIAS,
            ),
            "noNamespace": RuleTest(
                description="Validates that a field in the specification is not submitted with its namespace.",
                message='Whilst valid JSON-LD, field "{{submittedField}}" should be submitted without its namespace as "{{field}}".',
                sample_values={"submittedField": "https://schema.org/name", "field": "name"},
                **_ALIAS,
            ),
            "noPrefix": RuleTest(
                description="Validates that a field in the specification is not submitted with its prefix.",
                message='Whilst valid JSON-LD, field "{{submittedField}}" should be submitted without its prefix as "{{field}}".',
                sample_values={"submittedField": "schema:name", "field": "name"},
                **_ALIAS,
            ),
        },
    )

    def validate_field(self, node, field):
        if not node.model.has_specification:
            return []

        resolver = node.resolver
        errors = []
        # every spelling of this field on the node, not only the one that won the index
        for raw_key in resolver.keys_for(node.model, field, node.value):
            if raw_key == field:
                continue
            kind = resolver.key_kind(raw_key)
            test_key = None
            if kind == "keyword" and raw_key in ("@type", "@id"):
                test_key = "typeAndId"
            elif node.model.has_field_in_spec(field):
                if kind == "prefixed":
                    test_key = "noPrefix"
                elif kind == "iri":
                    test_key = "noNamespace"
            if test_key is None:
                continue
            errors.append(
                self.create_error(
                    test_key,
                    {"value": node.value[raw_key], "path": node.get_path(raw_key)},
                    {"field": field, "submittedField": raw_key},
                )
            )
        return errors


RULE = NoPrefixOrNamespaceRule()
