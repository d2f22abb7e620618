import math
from typing import Any, Optional

from utils.errors import ValidationError

RATE = 0.15  # currency units per kWh
HIGH_USAGE_THRESHOLD = 800  # kWh
HIGH_USAGE_ALERT = "High Usage"


def parse_usage(value: Any, field_name: str = "usage") -> float:
    """
    Coerces a usage value from a json payload into a number.

    Args:
        value: raw value from the payload, a number or a numeric string
        field_name: name of the payload field, used in error messages

    Returns:
        the usage as an int or float
    """
    if value is None:
        raise ValidationError(f"payload missing required field: {field_name}")

    # bool is an int subclass, but true kWh is not a usage
    if isinstance(value, bool):
        raise ValidationError(f"payload field '{field_name}' must be a number")

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(f"payload field '{field_name}' must be a number")
        if value.is_integer():
            value = int(value)

    if not isinstance(value, (int, float)):
        raise ValidationError(f"payload field '{field_name}' must be a number")

    try:
        finite = math.isfinite(float(value))
    except OverflowError:
        finite = False
    if not finite:
        raise ValidationError(f"payload field '{field_name}' must be a finite number")

    if value < 0:
        raise ValidationError(f"payload field '{field_name}' must not be negative")

    return value


def alert_for_usage(usage: float) -> Optional[str]:
    """
    Derives the alert flag for a monthly usage value.

    Returns:
        "High Usage" above the threshold, None otherwise
    """
    return HIGH_USAGE_ALERT if usage > HIGH_USAGE_THRESHOLD else None


def calculate_bill(usage: Any) -> dict:
    """
    Calculates the monthly bill for a usage value at the fixed rate.

    Args:
        usage: energy usage in kWh

    Returns:
        dict with the usage, amount, rate and a message
    """
    usage = parse_usage(usage)
    amount = round(usage * RATE, 2)

    return {
        "usage": usage,
        "amount": amount,
        "rate": RATE,
        "message": f"Bill calculated for {usage} kWh",
    }


def estimate_revenue(customers: list[dict]) -> float:
    """
    Sums the bill amount of every customer's current monthly usage.
    """
    total = sum((c.get("monthly_usage") or 0) * RATE for c in customers)
    return round(total, 2)
