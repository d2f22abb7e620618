# tests/anomalies_test.py
import pytest

from utils.anomalies import detect_anomalies
from utils.errors import ValidationError


def test_normal_history():
    result = detect_anomalies([300, 320, 350, 400, 350])
    assert result["isAnomaly"] is False
    assert result["averageUsage"] == 344.0
    assert result["latestUsage"] == 350
    assert result["percentageChange"] == pytest.approx(1.74, abs=0.01)
    assert result["message"] == "Usage patterns normal"


def test_spike_is_flagged():
    history = [300, 320, 350, 400, 900]
    result = detect_anomalies(history)

    mean = sum(history) / len(history)
    assert result["isAnomaly"] is True
    assert result["averageUsage"] == round(mean, 2)
    assert result["percentageChange"] == pytest.approx((900 - mean) / mean * 100, abs=0.01)
    assert result["message"] == (
        f"High usage detected! {(900 - mean) / mean * 100:.2f}% above average"
    )


@pytest.mark.parametrize(
    "history",
    [[100], [100, 100, 100], [100, 200], [10, 10, 10, 25], [0.5, 1.5, 3.1]],
)
def test_flag_matches_threshold_rule(history):
    mean = sum(history) / len(history)
    result = detect_anomalies(history)
    assert result["isAnomaly"] == (history[-1] > mean * 1.5)


def test_all_zero_history():
    result = detect_anomalies([0, 0, 0])
    assert result["isAnomaly"] is False
    assert result["percentageChange"] == 0


@pytest.mark.parametrize("history", [None, [], "300,400", [300, "400"], [300, None], [True, 1], 42])
def test_invalid_history_is_rejected(history):
    with pytest.raises(ValidationError):
        detect_anomalies(history)


@pytest.mark.parametrize(
    "history",
    [[1, float("nan")], [1, float("inf")], [-10, -1], [300, -5, 400], [1, 10**400]],
)
def test_history_values_must_be_finite_and_non_negative(history):
    with pytest.raises(ValidationError):
        detect_anomalies(history)


def test_history_too_large_to_average():
    with pytest.raises(ValidationError, match="too large"):
        detect_anomalies([1e308, 1e308])
