# tests/billing_test.py
import pytest

from utils.billing import (
    RATE,
    alert_for_usage,
    calculate_bill,
    estimate_revenue,
    parse_usage,
)
from utils.errors import ValidationError


@pytest.mark.parametrize("usage", [0, 1, 350, 799.5, 1234.56, 10_000])
def test_amount_is_usage_times_rate_rounded(usage):
    result = calculate_bill(usage)
    assert result["amount"] == round(usage * 0.15, 2)
    assert result["rate"] == RATE == 0.15
    assert result["usage"] == usage


def test_bill_example():
    assert calculate_bill(350) == {
        "usage": 350,
        "amount": pytest.approx(52.50),
        "rate": 0.15,
        "message": "Bill calculated for 350 kWh",
    }


def test_numeric_string_is_accepted():
    result = calculate_bill("350")
    assert result["usage"] == 350
    assert result["message"] == "Bill calculated for 350 kWh"


@pytest.mark.parametrize("usage", [None, "abc", "", True, [350], {"kwh": 1}, -5, "nan", "inf"])
def test_invalid_usage_is_rejected(usage):
    with pytest.raises(ValidationError) as exc:
        calculate_bill(usage)
    assert exc.value.status_code == 400


def test_parse_usage_names_the_field():
    with pytest.raises(ValidationError, match="initialUsage"):
        parse_usage("lots", "initialUsage")


@pytest.mark.parametrize(
    "usage, alert",
    [(0, None), (500, None), (800, None), (800.01, "High Usage"), (900, "High Usage")],
)
def test_alert_threshold(usage, alert):
    assert alert_for_usage(usage) == alert


def test_estimate_revenue():
    customers = [{"monthly_usage": 450}, {"monthly_usage": 320}, {"monthly_usage": 890}]
    assert estimate_revenue(customers) == pytest.approx(249.0)
    assert estimate_revenue([]) == 0


def test_integer_too_large_for_a_float_is_rejected():
    with pytest.raises(ValidationError, match="finite"):
        calculate_bill(10**400)
