"""
Unit tests for product status helpers.
"""

import pytest

from safercosmetics.models import (
    ProductStatus,
    RiskLevel,
    calculate_risk_level,
    format_cancellation_reason,
    is_cancelled,
)


@pytest.mark.parametrize(
    "status, expected",
    [
        ("approved", RiskLevel.SAFE),
        ("notified", RiskLevel.SAFE),
        ("Notified", RiskLevel.SAFE),
        (ProductStatus.APPROVED, RiskLevel.SAFE),
        ("cancelled", RiskLevel.UNSAFE),
        ("Cancelled", RiskLevel.UNSAFE),
        ("not_found", RiskLevel.UNKNOWN),
        ("recalled", RiskLevel.UNKNOWN),
        ("", RiskLevel.UNKNOWN),
        (None, RiskLevel.UNKNOWN),
    ],
)
def test_calculate_risk_level(status, expected):
    assert calculate_risk_level(status) == expected


def test_is_cancelled():
    assert is_cancelled("Cancelled")
    assert not is_cancelled("Notified")
    assert not is_cancelled(None)


@pytest.mark.parametrize(
    "reason, expected",
    [
        ("contains mercury", "Contains mercury."),
        ("Contains hydroquinone.", "Contains hydroquinone."),
        ("  banned colourant  ", "Banned colourant."),
        ("", "Reason not specified"),
        ("   ", "Reason not specified"),
        (None, "Reason not specified"),
    ],
)
def test_format_cancellation_reason(reason, expected):
    assert format_cancellation_reason(reason) == expected
