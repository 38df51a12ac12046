"""
Classification of raw JSON values into the four cases the walker handles.
"""
import json
import math
from typing import Any, Union

from ..errors import MalformedInputError
from ..types import JsonArray, JsonNull, JsonObject, JsonPrimitive

JsonValue = Union[JsonNull, JsonPrimitive, JsonArray, JsonObject]

NULL = JsonNull()


def render_number(value: Union[int, float]) -> str:
    """Render a number the way JSON text would show it: 30.0 -> "30"."""
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def classify(key: str, value: Any) -> JsonValue:
    """Classify `value` found under `key`.

    Raises MalformedInputError for anything that is not a JSON value.
    """
    if value is None:
        return NULL
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return JsonPrimitive("boolean", "true" if value else "false")
    if isinstance(value, str):
        return JsonPrimitive("string", value)
    if isinstance(value, int):
        return JsonPrimitive("number", render_number(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedInputError(f"Non-finite number {value!r} is not a JSON value", field_key=key)
        return JsonPrimitive("number", render_number(value))
    if isinstance(value, (list, tuple)):
        return JsonArray(tuple(value))
    if isinstance(value, dict):
        for name in value:
            if not isinstance(name, str):
                raise MalformedInputError(f"Object key {name!r} is not a string", field_key=key)
        return JsonObject(tuple(value.items()))
    raise MalformedInputError(f"Unsupported value of type {type(value).__name__}", field_key=key)


def parse_json_text(text: Union[str, bytes]) -> Any:
    """Parse raw editor text into a JSON value."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"JSON text is not valid UTF-8: {e.reason} at byte {e.start}") from e
    if not isinstance(text, str):
        raise MalformedInputError(f"Expected JSON text, got {type(text).__name__}")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON: {e.msg}", line=e.lineno, column=e.colno) from e
    except RecursionError as e:
        raise MalformedInputError("JSON text is nested too deeply to parse") from e


def _reject_constant(name: str):
    raise MalformedInputError(f"{name} is not a JSON value")
