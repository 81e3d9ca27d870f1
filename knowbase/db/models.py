"""
Conversion helpers between Python values and DynamoDB items.

DynamoDB has no float type and returns every number as Decimal; these
helpers translate in both directions and drop unset attributes.
"""

from decimal import Decimal
from typing import Any


def convert_floats_to_decimal(obj: Any) -> Any:
    """
    Recursively convert float values to Decimal for DynamoDB compatibility.

    Args:
        obj: Any Python object (dict, list, float, etc.)

    Returns:
        The same object with all floats converted to Decimal
    """
    if isinstance(obj, list):
        return [convert_floats_to_decimal(item) for item in obj]
    elif isinstance(obj, dict):
        return {key: convert_floats_to_decimal(value) for key, value in obj.items()}
    elif isinstance(obj, float):
        return Decimal(str(obj))  # Convert via string to avoid precision issues
    else:
        return obj


def convert_decimals(obj: Any) -> Any:
    """
    Recursively convert Decimal values returned by DynamoDB to int or float.

    Integral decimals become int so JSON output stays clean.
    """
    if isinstance(obj, list):
        return [convert_decimals(item) for item in obj]
    elif isinstance(obj, dict):
        return {key: convert_decimals(value) for key, value in obj.items()}
    elif isinstance(obj, Decimal):
        return int(obj) if obj == obj.to_integral_value() else float(obj)
    else:
        return obj


def to_dynamodb_item(data: dict[str, Any]) -> dict[str, Any]:
    """Drop None attributes and convert floats so the dict can be stored."""
    return convert_floats_to_decimal(
        {key: value for key, value in data.items() if value is not None}
    )
