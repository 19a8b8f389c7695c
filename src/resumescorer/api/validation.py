"""Response validation and formatting against a declarative schema."""

import copy
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from resumescorer.exceptions import (
    MalformedProviderResponseError,
    SchemaViolationError,
    truncate_payload,
)

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """JSON types a response field may be declared with."""

    STRING = "string"
    NUMBER = "number"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class FieldSpec:
    """Contract for a single response field.

    Attributes:
        type: Expected JSON type.
        required: Whether the field must be present.
        default: Value used when an optional field is absent.
        minimum: Inclusive lower bound for numbers.
        maximum: Inclusive upper bound for numbers.
        min_length: Minimum length for strings.
        items: Expected JSON type of array elements.
    """

    type: FieldType
    required: bool = False
    default: Any = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_length: Optional[int] = None
    items: Optional[FieldType] = None


ResponseSchema = Mapping[str, FieldSpec]


def json_type_of(value: Any) -> str:
    """Return the JSON type name of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return FieldType.NUMBER.value
    if isinstance(value, str):
        return FieldType.STRING.value
    if isinstance(value, (list, tuple)):
        return FieldType.ARRAY.value
    if isinstance(value, Mapping):
        return FieldType.OBJECT.value
    return type(value).__name__


def _check_field(name: str, value: Any, spec: FieldSpec) -> None:
    actual = json_type_of(value)
    if actual != spec.type.value:
        raise SchemaViolationError(
            f"Invalid type for {name}: Expected {spec.type.value}, got {actual}",
            field=name,
        )

    if spec.type is FieldType.NUMBER:
        if not math.isfinite(value):
            raise SchemaViolationError(
                f"Invalid {name}: Must be a finite number, got {value}", field=name
            )
        if spec.minimum is not None and value < spec.minimum:
            raise SchemaViolationError(
                f"Invalid {name}: Must be >= {spec.minimum:g}, got {value}", field=name
            )
        if spec.maximum is not None and value > spec.maximum:
            raise SchemaViolationError(
                f"Invalid {name}: Must be <= {spec.maximum:g}, got {value}", field=name
            )

    if spec.type is FieldType.STRING and spec.min_length is not None:
        if len(value.strip()) < spec.min_length:
            raise SchemaViolationError(
                f"Invalid {name}: Must be at least {spec.min_length} characters",
                field=name,
            )

    if spec.type is FieldType.ARRAY and spec.items is not None:
        for index, item in enumerate(value):
            item_type = json_type_of(item)
            if item_type != spec.items.value:
                raise SchemaViolationError(
                    f"Invalid {name}[{index}]: Expected {spec.items.value}, got {item_type}",
                    field=name,
                )


def format_response(raw: Any, schema: ResponseSchema) -> Dict[str, Any]:
    """Validate ``raw`` against ``schema`` and keep only the declared keys.

    A field whose value is ``None`` is treated as absent. Numeric values
    outside their declared bounds are rejected, never clamped.

    Args:
        raw: Decoded provider response.
        schema: Mapping of field name to :class:`FieldSpec`.

    Returns:
        A new dict holding exactly the schema's keys, with absent optional
        fields set to a copy of their default.

    Raises:
        SchemaViolationError: If a required field is missing or any field
            fails its type or range check.
    """
    if not isinstance(raw, Mapping):
        raise SchemaViolationError(
            f"Invalid response data: Expected an object, got {json_type_of(raw)}"
        )

    formatted: Dict[str, Any] = {}
    for name, spec in schema.items():
        value = raw.get(name)
        if value is None:
            if spec.required:
                raise SchemaViolationError(f"Missing required field: {name}", field=name)
            formatted[name] = copy.deepcopy(spec.default)
            continue

        _check_field(name, value, spec)
        formatted[name] = copy.deepcopy(value)

    dropped = set(raw) - set(schema)
    if dropped:
        logger.debug("Dropping undeclared response fields: %s", sorted(dropped))

    return formatted


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def extract_tool_arguments(completion: Any, tool_name: str) -> Dict[str, Any]:
    """Pull the decoded arguments of a tool call out of a chat completion.

    Accepts both SDK response objects and plain dicts. Legacy
    ``function_call`` envelopes are understood as well as ``tool_calls``.

    Raises:
        MalformedProviderResponseError: If the envelope is missing, names a
            different function, or its arguments are not a JSON object.
    """
    choices = _get(completion, "choices") or []
    message = _get(choices[0], "message") if choices else None
    if message is None:
        raise MalformedProviderResponseError(
            "Invalid OpenAI response structure: Missing message"
        )

    tool_calls = _get(message, "tool_calls") or []
    function = _get(tool_calls[0], "function") if tool_calls else _get(message, "function_call")
    if function is None:
        raise MalformedProviderResponseError(
            "Invalid OpenAI response structure: Missing required tool calls",
            raw_payload=_get(message, "content"),
        )

    name = _get(function, "name")
    if name != tool_name:
        raise MalformedProviderResponseError(
            f"Invalid tool call response: Expected '{tool_name}' but got '{name}'"
        )

    arguments = _get(function, "arguments")
    if not arguments:
        raise MalformedProviderResponseError("Missing function arguments in tool call")

    try:
        decoded = json.loads(arguments)
    except json.JSONDecodeError as e:
        logger.debug("Undecodable tool arguments: %s", truncate_payload(arguments))
        raise MalformedProviderResponseError(
            f"Failed to parse tool call arguments: {e.msg}", raw_payload=arguments
        ) from e

    if not isinstance(decoded, dict):
        raise MalformedProviderResponseError(
            f"Tool call arguments must be a JSON object, got {json_type_of(decoded)}",
            raw_payload=arguments,
        )
    return decoded
