import math

from utils.billing import parse_usage
from utils.errors import ValidationError
from utils.util import validate_payload

ANOMALY_FACTOR = 1.5  # latest usage above average * factor is flagged

ANOMALY_PAYLOAD_FIELDS = [
    {"field": "usageHistory", "type": list[float], "required": True},
]


def detect_anomalies(usage_history: list) -> dict:
    """
    Flags the latest usage value when it is well above the historical average.

    Args:
        usage_history: monthly usage values in kWh, oldest first, latest last

    Returns:
        dict with isAnomaly, averageUsage, latestUsage, percentageChange and a message
    """
    validate_payload({"usageHistory": usage_history}, ANOMALY_PAYLOAD_FIELDS)

    if len(usage_history) == 0:
        raise ValidationError("valid usageHistory array is required")

    # same finite, non-negative rule as a single bill usage
    usage_history = [parse_usage(u, "usageHistory") for u in usage_history]

    try:
        average = math.fsum(usage_history) / len(usage_history)
    except OverflowError:
        raise ValidationError("usageHistory values are too large")

    latest = usage_history[-1]

    is_anomaly = latest > average * ANOMALY_FACTOR
    if average:
        percentage_change = (latest - average) / average * 100
    else:
        # all-zero history, nothing to compare against
        percentage_change = 0.0

    if not math.isfinite(percentage_change):
        raise ValidationError("usageHistory values are too large")

    if is_anomaly:
        message = f"High usage detected! {percentage_change:.2f}% above average"
    else:
        message = "Usage patterns normal"

    return {
        "isAnomaly": is_anomaly,
        "averageUsage": round(average, 2),
        "latestUsage": latest,
        "percentageChange": round(percentage_change, 2),
        "message": message,
    }
