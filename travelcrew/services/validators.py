"""
Travel Crew Backend — Resource Field Validators
=================================================

What:  Turns raw multipart form values into a validated change set for a
       resource kind, or raises ValidationError naming the offending field.
Who:   Called by ResourceService before any asset store or document store call.

Rules (per FormField):
    TEXT     required: non-empty after trimming. Optional: blank means unset
             on create, and keeps the stored value on update.
    NUMBER   plain decimal (sign, digits, point, exponent), finite, >= minimum.
    INTEGER  as NUMBER, and a whole number.
    LIST     comma-separated; items trimmed, empties dropped, order kept.
    BOOLEAN  the string "true" (any case) is True, anything else False;
             omitted on create is False.

Create vs update:
    create  every required field must be supplied; omitted lists become [].
    update  omitted fields are left out of the change set (keep prior value);
            a supplied-but-blank required field is rejected, a blank optional
            field or list is ignored.
"""

import math
import re
import uuid
from typing import Any, Dict, List, Mapping, Optional, Union

from travelcrew.exceptions import ValidationError
from travelcrew.kinds import FormField, FieldType, ResourceKind

Number = Union[int, float]

# Digits with optional sign, decimal point and exponent; no "1_000", "0x10", "inf"
DECIMAL_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_list(raw: str) -> List[str]:
    """
    Split a comma-separated string into its non-empty, trimmed items.

    >>> parse_list("a, b ,,c")
    ['a', 'b', 'c']
    """
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() == "true"


def parse_number(field: FormField, raw: str) -> Number:
    """
    Parse a numeric form value and enforce the field's minimum.

    Raises:
        ValidationError naming the field when the value is not a finite
        number, is below the minimum, or is fractional for INTEGER fields.
    """
    name = field.wire_name
    minimum = field.minimum if field.minimum is not None else 0
    message = f"{name} must be a number greater than or equal to {minimum:g}"

    text = raw.strip()
    if not DECIMAL_PATTERN.fullmatch(text):
        raise ValidationError(message=message, field=name, context={"value": raw})

    value = float(text)

    if not math.isfinite(value) or value < minimum:
        raise ValidationError(message=message, field=name, context={"value": raw})

    if field.type is FieldType.INTEGER:
        if not value.is_integer():
            raise ValidationError(
                message=f"{name} must be a whole number",
                field=name,
                context={"value": raw},
            )
        return int(value)
    return value


def parse_document_id(raw: str, kind: ResourceKind) -> uuid.UUID:
    """Convert a path identifier to a UUID; malformed ids are a client error."""
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise ValidationError(
            message=f"Invalid {kind.name} id '{raw}'",
            field="id",
        )


def _text_value(field: FormField, raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValidationError(
            message=f"{field.wire_name} must be a text value",
            field=field.wire_name,
        )
    return raw


def _convert(field: FormField, raw: str) -> Any:
    """Convert a supplied, non-blank value according to its field type."""
    if field.type is FieldType.TEXT:
        return raw.strip()
    if field.type in (FieldType.NUMBER, FieldType.INTEGER):
        return parse_number(field, raw)
    if field.type is FieldType.LIST:
        return parse_list(raw)
    return parse_bool(raw)


def validate_create(kind: ResourceKind, raw_fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a full field set for a new document.

    Args:
        kind:        Resource kind descriptor
        raw_fields:  Form values keyed by wire name (camelCase)

    Returns:
        Dict keyed by ORM attribute name, ready to be merged with asset fields.

    Raises:
        ValidationError for the first field that fails, in declaration order.
    """
    values: Dict[str, Any] = {}
    for field in kind.fields:
        raw: Optional[str] = raw_fields.get(field.wire_name)
        if raw is not None:
            raw = _text_value(field, raw)

        if field.type is FieldType.LIST:
            values[field.attr] = parse_list(raw) if raw is not None else []
            continue

        if field.type is FieldType.BOOLEAN:
            values[field.attr] = parse_bool(raw) if raw is not None else False
            continue

        if raw is None or not raw.strip():
            if field.required:
                raise ValidationError(
                    message=f"{field.wire_name} is required",
                    field=field.wire_name,
                )
            values[field.attr] = None
            continue

        values[field.attr] = _convert(field, raw)
    return values


def validate_update(kind: ResourceKind, raw_fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial field set for an existing document.

    Only supplied, non-blank fields appear in the result. Supplying a
    required field as blank is rejected; a blank optional field or list
    keeps its stored value, like an omitted one.
    """
    changes: Dict[str, Any] = {}
    for field in kind.fields:
        if field.wire_name not in raw_fields:
            continue
        raw = _text_value(field, raw_fields[field.wire_name])

        if field.type is FieldType.BOOLEAN:
            changes[field.attr] = parse_bool(raw)
            continue

        if not raw.strip():
            if field.required:
                raise ValidationError(
                    message=f"{field.wire_name} cannot be empty",
                    field=field.wire_name,
                )
            continue

        if field.type is FieldType.LIST:
            changes[field.attr] = parse_list(raw)
            continue

        changes[field.attr] = _convert(field, raw)
    return changes
