from typing import Any, get_origin, get_args
from datetime import datetime, timezone

from utils.errors import ValidationError


def validate_payload(data: dict, payload_fields: list[dict]) -> None:
    """
    Validates an incoming payload.
        - checks that required fields are present; blank strings count as missing.
        - checks that present fields are of the correct data type.

    Args:
        data: json payload
        payload_fields: list of dicts with payload field name, data type, required flag

    Returns:
        None
    """
    if not isinstance(data, dict):
        raise ValidationError("missing json payload")

    errors = []

    for item in payload_fields:
        field_name = item["field"]
        expected_type = item["type"]
        required_field = item["required"]
        value = data.get(field_name)

        if isinstance(value, str) and value.strip() == "":
            value = None

        if value is None:
            if required_field:
                errors.append(f"payload missing required field: {field_name}")
            continue

        # handle generic types like list[float]
        origin = get_origin(expected_type)
        if origin is list:
            item_type = get_args(expected_type)[0]
            if not isinstance(value, list) or not all(
                is_of_type(x, item_type) for x in value
            ):
                errors.append(
                    f"payload field '{field_name}' must be a list of {item_type.__name__}"
                )

        # handle other types
        else:
            if not is_of_type(value, expected_type):
                errors.append(
                    f"payload field '{field_name}' must be of type {expected_type.__name__}"
                )

    if errors:
        raise ValidationError("; ".join(errors))


def is_of_type(value: Any, expected_type: type) -> bool:
    """
    isinstance check that follows json rather than python number rules:
    bools are never numbers, and ints are accepted where floats are expected.
    """
    if isinstance(value, bool):
        return expected_type is bool
    if expected_type is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected_type)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
