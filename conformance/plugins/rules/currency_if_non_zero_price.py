from __future__ import annotations

from dataclasses import dataclass

from conformance.core.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from conformance.core.rules import BaseRule, RuleMeta, RuleTest


@dataclass
class CurrencyIfNonZeroPriceRule(BaseRule):
    name: str = "currency_if_non_zero_price"
    priority: int = 60

    target_models = ("TaxChargeSpecification", "PriceSpecification", "Offer", "OfferOverride")
    meta = RuleMeta(
        name="CurrencyIfNonZeroPriceRule",
        description="Validates that a priceCurrency is set if an Offer's price is non-zero.",
        tests={
            "default": RuleTest(
                message=(
                    "A `priceCurrency` is required on an `Offer` containing a non-zero `price`.\n\n"
                    "You can fix this by setting a `priceCurrency` field on this `Offer`.\n\n"
                    'e.g.\n\n```\n{\n  "@type": "{{model}}",\n  "price": {{price}},\n  "priceCurrency": "GBP"\n}\n```'
                ),
                sample_values={"model": "Offer", "price": 5},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
        },
    )

    def validate_model(self, node):
        if not node.has_mapped_field("price") or node.has_mapped_field("priceCurrency"):
            return []

        price = node.get_mapped_value("price")
        if price == 0:
            return []
        return [
            self.create_error(
                "default",
                {"value": price, "path": node.get_path("price")},
                {"model": node.model.type, "price": price},
            )
        ]


RULE = CurrencyIfNonZeroPriceRule()
