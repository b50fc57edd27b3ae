"""
Unit tests for derived fields on product response models.
"""

import pytest

from safercosmetics.api.models import AlternativeProduct, ProductSummary


def _product(**overrides):
    data = {
        "id": 1,
        "notif_no": "NOT202001",
        "name": "Glow Whitening Cream",
        "category": "Skin Care",
        "status": "Cancelled",
        "reason_for_cancellation": "contains mercury",
    }
    data.update(overrides)
    return data


class TestProductSummary:
    def test_cancelled_product_has_formatted_reason(self):
        dumped = ProductSummary(**_product()).model_dump(by_alias=True)

        assert dumped["riskLevel"] == "unsafe"
        assert dumped["formattedReason"] == "Contains mercury."

    def test_missing_reason_is_not_specified(self):
        summary = ProductSummary(**_product(reason_for_cancellation="  "))

        assert summary.formatted_reason == "Reason not specified"

    def test_notified_product_has_no_formatted_reason(self):
        summary = ProductSummary(**_product(status="Notified", reason_for_cancellation=None))

        assert summary.formatted_reason is None


class TestAlternativeProduct:
    @pytest.mark.parametrize(
        "status, risk_level",
        [("Notified", "safe"), ("approved", "safe"), ("not_found", "unknown")],
    )
    def test_risk_level_follows_status(self, status, risk_level):
        alternative = AlternativeProduct(**_product(status=status, reason_for_cancellation=None))

        assert alternative.model_dump(mode="json", by_alias=True)["riskLevel"] == risk_level
