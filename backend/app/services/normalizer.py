"""
Atelier Catalog — Facet Normalizer
====================================

What:  Turns raw client field maps into canonical, column-keyed values ready
       to be set on ORM rows.
How:   Every field is looked up in the Facet Registry and coerced by the rule
       registered for its FieldKind. Pure and synchronous: no I/O, no clock.
Who:   Called by ProductService before the validation gate runs.

Canonical forms:
    DECIMAL       "12.50" (fixed scale) or "0.5" (trailing zeros stripped)
    INTEGER       "42"
    JSON          '["a","b"]' (compact separators, non-ASCII kept)
    DATE          ISO-8601 text as submitted
    TRUST_BADGES  three slot columns, each compact JSON or None

Identical raw input always yields identical output, so repeating an update
is a no-op at the column level.
"""

import json
import uuid
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import NotFoundError, ValidationError
from app.services.facet_registry import (
    READ_ONLY_ROOT_FIELDS,
    ROOT_FIELDS,
    STATISTIC_FIELDS,
    FieldKind,
    FieldSpec,
    get_facet,
)

# Decimal-as-string columns are String(32)
MAX_NUMBER_TEXT = 32

_url_adapter = TypeAdapter(AnyUrl)


def _dump_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _reject(spec: FieldSpec, message: str, value: Any = None) -> ValidationError:
    context: Dict[str, Any] = {}
    if value is not None:
        context["received_type"] = type(value).__name__
    return ValidationError(message=message, field=spec.name, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Rules (one per FieldKind)
# ══════════════════════════════════════════════════════════════════════════

def _require_str(spec: FieldSpec, value: Any) -> str:
    if not isinstance(value, str):
        raise _reject(spec, f"Field '{spec.name}' must be a string", value)
    return value


def _check_length(spec: FieldSpec, text: str) -> None:
    if spec.min_length is not None and len(text) < spec.min_length:
        raise _reject(spec, f"Field '{spec.name}' must be at least {spec.min_length} characters")
    if spec.max_length is not None and len(text) > spec.max_length:
        raise _reject(spec, f"Field '{spec.name}' must be at most {spec.max_length} characters")


def _check_range(spec: FieldSpec, number: Decimal) -> None:
    if spec.min_value is not None and number < spec.min_value:
        raise _reject(spec, f"Field '{spec.name}' must be greater than or equal to {spec.min_value}")
    if spec.max_value is not None and number > spec.max_value:
        raise _reject(spec, f"Field '{spec.name}' must be less than or equal to {spec.max_value}")


def normalize_string(spec: FieldSpec, value: Any) -> str:
    text = _require_str(spec, value)
    _check_length(spec, text)
    return text


def normalize_text(spec: FieldSpec, value: Any) -> str:
    return _require_str(spec, value)


def normalize_enum(spec: FieldSpec, value: Any) -> str:
    text = _require_str(spec, value)
    if text not in spec.choices:
        raise _reject(spec, f"Field '{spec.name}' must be one of: {', '.join(spec.choices)}")
    return text


def normalize_url(spec: FieldSpec, value: Any) -> str:
    """Syntax check only; the submitted string is what gets stored."""
    text = _require_str(spec, value)
    try:
        _url_adapter.validate_python(text)
    except PydanticValidationError:
        raise _reject(spec, f"Field '{spec.name}' must be a valid URL")
    return text


def normalize_uuid(spec: FieldSpec, value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    text = _require_str(spec, value)
    try:
        return uuid.UUID(text)
    except ValueError:
        raise _reject(spec, f"Field '{spec.name}' must be a valid UUID")


def to_decimal(spec: FieldSpec, value: Any) -> Decimal:
    """
    Coerce a number-like value to a finite Decimal.

    Floats go through their shortest repr, so 12.5 becomes Decimal("12.5")
    rather than the binary expansion.
    """
    if isinstance(value, bool):
        raise _reject(spec, f"Field '{spec.name}' must be a number", value)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            raise _reject(spec, f"Field '{spec.name}' must be a numeric string")
    else:
        raise _reject(spec, f"Field '{spec.name}' must be a number", value)

    if not number.is_finite():
        raise _reject(spec, f"Field '{spec.name}' must be a finite number")
    return number


def normalize_decimal(spec: FieldSpec, value: Any) -> str:
    number = to_decimal(spec, value)
    _check_range(spec, number)
    if number and number.adjusted() >= MAX_NUMBER_TEXT:
        raise _reject(spec, f"Field '{spec.name}' is too large")

    try:
        if spec.scale is not None:
            number = number.quantize(Decimal(1).scaleb(-spec.scale), rounding=ROUND_HALF_UP)
        else:
            number = number.normalize()
    except DecimalException:
        raise _reject(spec, f"Field '{spec.name}' is too large")

    if number == 0:
        number = abs(number)
    text = format(number, "f")
    if len(text) > MAX_NUMBER_TEXT:
        raise _reject(spec, f"Field '{spec.name}' is too large")
    return text


def to_integer(spec: FieldSpec, value: Any) -> int:
    if isinstance(value, bool):
        raise _reject(spec, f"Field '{spec.name}' must be an integer", value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise _reject(spec, f"Field '{spec.name}' must be an integer string")
    else:
        raise _reject(spec, f"Field '{spec.name}' must be an integer", value)

    _check_range(spec, Decimal(number))
    return number


def normalize_integer(spec: FieldSpec, value: Any) -> str:
    text = str(to_integer(spec, value))
    if len(text) > MAX_NUMBER_TEXT:
        raise _reject(spec, f"Field '{spec.name}' is too large")
    return text


def normalize_boolean(spec: FieldSpec, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise _reject(spec, f"Field '{spec.name}' must be a boolean", value)


def _decode_json(spec: FieldSpec, value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            raise _reject(spec, f"Field '{spec.name}' must be valid JSON")
    return value


def normalize_json_array(spec: FieldSpec, value: Any) -> str:
    decoded = _decode_json(spec, value)
    if isinstance(decoded, tuple):
        decoded = list(decoded)
    if not isinstance(decoded, list):
        raise _reject(spec, f"Field '{spec.name}' must be a JSON array", decoded)
    return _dump_json(decoded)


def normalize_json_object(spec: FieldSpec, value: Any) -> str:
    decoded = _decode_json(spec, value)
    if not isinstance(decoded, dict):
        raise _reject(spec, f"Field '{spec.name}' must be a JSON object", decoded)
    return _dump_json(decoded)


def normalize_date(spec: FieldSpec, value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    text = _require_str(spec, value).strip()
    candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        raise _reject(spec, f"Field '{spec.name}' must be an ISO-8601 date")
    return text


def split_trust_badges(spec: FieldSpec, value: Any) -> Dict[str, Optional[str]]:
    """
    Spread a badge list over the fixed slot columns.

    Entries past the last slot are dropped; missing or falsy entries clear
    their slot. Text that does not parse as JSON is kept whole in the
    first slot.
    """
    slots = spec.stored_columns
    if isinstance(value, str):
        _check_length(spec, value)
        try:
            decoded = json.loads(value)
        except ValueError:
            return {column: (value if i == 0 else None) for i, column in enumerate(slots)}
    else:
        decoded = value

    if isinstance(decoded, tuple):
        decoded = list(decoded)
    if not isinstance(decoded, list):
        raise _reject(spec, f"Field '{spec.name}' must be a JSON array", decoded)

    stored: Dict[str, Optional[str]] = {}
    for i, column in enumerate(slots):
        entry = decoded[i] if i < len(decoded) else None
        stored[column] = _dump_json(entry) if entry else None
    return stored


RULES: Dict[FieldKind, Callable[[FieldSpec, Any], Any]] = {
    FieldKind.STRING: normalize_string,
    FieldKind.TEXT: normalize_text,
    FieldKind.DECIMAL: normalize_decimal,
    FieldKind.INTEGER: normalize_integer,
    FieldKind.BOOLEAN: normalize_boolean,
    FieldKind.JSON_ARRAY: normalize_json_array,
    FieldKind.JSON_OBJECT: normalize_json_object,
    FieldKind.DATE: normalize_date,
    FieldKind.ENUM: normalize_enum,
    FieldKind.URL: normalize_url,
    FieldKind.UUID: normalize_uuid,
}


def normalize_value(spec: FieldSpec, value: Any) -> Dict[str, Any]:
    """
    Apply one field's rule; returns the columns it writes.

    An explicit None clears every column the field owns.
    """
    if value is None:
        return {column: None for column in spec.stored_columns}
    if spec.kind is FieldKind.TRUST_BADGES:
        return split_trust_badges(spec, value)
    return {spec.column: RULES[spec.kind](spec, value)}


def _require_mapping(raw: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValidationError(
            message=f"'{label}' must be an object of field values",
            field=label,
        )
    return raw


# ══════════════════════════════════════════════════════════════════════════
# Public entry points
# ══════════════════════════════════════════════════════════════════════════

def normalize_facet(facet_name: str, raw_fields: Any) -> Dict[str, Any]:
    """
    Validate and canonicalize one facet's field map.

    Args:
        facet_name: Registry name (e.g. "pricing")
        raw_fields: Wire-named values from the client

    Returns:
        Column-keyed canonical values, only for the fields supplied

    Raises:
        NotFoundError:   facet_name is not registered
        ValidationError: unknown field or a rule rejected a value
    """
    facet = get_facet(facet_name)
    if facet is None:
        raise NotFoundError(resource="facet", resource_id=facet_name)

    values: Dict[str, Any] = {}
    for key, value in _require_mapping(raw_fields, facet_name).items():
        spec = facet.get_field(key)
        if spec is None:
            raise ValidationError(
                message=f"Unknown field '{key}' for facet '{facet_name}'",
                field=key,
                context={"facet": facet_name},
            )
        try:
            values.update(normalize_value(spec, value))
        except ValidationError as exc:
            exc.context.setdefault("facet", facet_name)
            raise
    return values


def normalize_root(raw_fields: Any, partial: bool = False) -> Dict[str, Any]:
    """
    Validate the root's own fields.

    Statistics, ids and audit fields are dropped without complaint; the
    name is required unless this is a partial update, and is never blank.
    """
    values: Dict[str, Any] = {}
    for key, value in _require_mapping(raw_fields, "product").items():
        if key in READ_ONLY_ROOT_FIELDS:
            continue
        spec = ROOT_FIELDS.get(key)
        if spec is None:
            raise ValidationError(message=f"Unknown product field '{key}'", field=key)
        values.update(normalize_value(spec, value))

    if "name" in values or not partial:
        name = values.get("name")
        if name is None or not name.strip():
            raise ValidationError(message="Product name is required", field="name")
    return values


def normalize_statistic(stat_name: str, value: Any) -> Any:
    """Canonical value of a root statistic: rating as text, counts as int."""
    spec = STATISTIC_FIELDS.get(stat_name)
    if spec is None:
        raise ValidationError(
            message=f"Unknown statistic '{stat_name}'. Allowed: {', '.join(STATISTIC_FIELDS)}",
            field=stat_name,
        )
    if value is None:
        raise ValidationError(message=f"Statistic '{stat_name}' requires a value", field=stat_name)
    if spec.kind is FieldKind.INTEGER:
        return to_integer(spec, value)
    return normalize_decimal(spec, value)
