"""
Submission validation.

Runs against the raw JSON body before anything is rendered or sent to the
hosting API.
"""

from typing import Any, Dict, List, Optional

from propertysite.core.constants import REQUIRED_FIELDS
from propertysite.exceptions import ValidationError
from propertysite.utils.formatting import parse_number

NON_NEGATIVE_FIELDS = [
    "property.price",
    "property.bedrooms",
    "property.bathrooms",
    "property.sqft",
]


def get_field(data: Optional[Dict[str, Any]], dotted: str) -> Any:
    """Look up a dotted path like ``"property.city"``; missing parts yield None."""
    value: Any = data
    for part in dotted.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return False


def find_missing_fields(data: Optional[Dict[str, Any]]) -> List[str]:
    """Return the required fields that are absent, empty, or zero."""
    return [name for name in REQUIRED_FIELDS if _is_blank(get_field(data, name))]


def validate_submission(data: Optional[Dict[str, Any]]) -> None:
    """Raise ValidationError unless every required field is present and sane.

    Raises:
        ValidationError: with ``missing_fields`` listing the offending fields.
    """
    missing = find_missing_fields(data)
    if missing:
        raise ValidationError("Missing required fields", missing_fields=missing)

    invalid = []
    for name in NON_NEGATIVE_FIELDS:
        value = get_field(data, name)
        try:
            if parse_number(value, strict=True) < 0:
                invalid.append(name)
        except ValueError:
            invalid.append(name)
    if invalid:
        raise ValidationError("Invalid numeric fields", missing_fields=invalid)
