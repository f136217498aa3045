"""TOON encoder implementation."""

import dataclasses
import logging
import math
from collections.abc import Generator, Iterable, Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from .coerce import field_name
from .errors import UnsupportedValueError
from .primitives import encode_key, encode_primitive, format_number, format_tabular_header
from .types import EncodeOptions, JsonValue, ValueKind, is_scalar, kind_of

logger = logging.getLogger(__name__)


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """
    Encode a Python value to TOON format.

    Args:
        value: The value to encode (dict, list, dataclass, or primitive).
        options: Encoding options.

    Returns:
        The TOON-formatted string.

    Raises:
        UnsupportedValueError: If the value cannot be represented.
    """
    opts = options or EncodeOptions()
    lines = list(encode_lines(value, opts))
    return "\n".join(lines)


def encode_lines(value: Any, options: EncodeOptions | None = None) -> Generator[str, None, None]:
    """
    Encode a Python value to TOON format, yielding lines.

    The value is normalized up front, so an unsupported value fails before
    any line is produced.

    Args:
        value: The value to encode.
        options: Encoding options.

    Yields:
        Lines of TOON output.
    """
    opts = options or EncodeOptions()
    normalized = normalize_value(value)
    logger.debug("Encoding %s root with indent %d", kind_of(normalized).value, opts.indent)
    yield from _encode_value_lines(normalized, opts, 0)


def encode_bytes(value: Any, options: EncodeOptions | None = None) -> bytes:
    """Encode a Python value to UTF-8 encoded TOON."""
    return encode(value, options).encode("utf-8")


def _encode_value_lines(value: JsonValue, opts: EncodeOptions, depth: int) -> Generator[str, None, None]:
    """Encode any value as a block starting at ``depth``."""
    indent = " " * (opts.indent * depth)
    kind = kind_of(value)

    if kind is ValueKind.OBJECT:
        if not value:
            yield f"{indent}{{}}"
        else:
            yield from _encode_object_lines(value, opts, depth)
    elif kind is ValueKind.ARRAY:
        if not value:
            yield f"{indent}[]"
        elif _is_tabular_array(value):
            yield from _encode_tabular_array(value, opts, depth)
        else:
            for item in value:
                yield from _encode_list_item(item, opts, depth)
    else:
        yield indent + encode_primitive(value)


def _encode_object_lines(obj: dict, opts: EncodeOptions, depth: int) -> Generator[str, None, None]:
    """Encode an object's key-value pairs."""
    indent = " " * (opts.indent * depth)

    for key, value in obj.items():
        encoded_key = encode_key(key)
        if is_scalar(value):
            yield f"{indent}{encoded_key}: {encode_primitive(value)}"
        else:
            yield f"{indent}{encoded_key}:"
            yield from _encode_value_lines(value, opts, depth + 1)


def _encode_list_item(item: JsonValue, opts: EncodeOptions, depth: int) -> Generator[str, None, None]:
    """Encode a list item (after the - marker)."""
    indent = " " * (opts.indent * depth)

    if is_scalar(item):
        yield f"{indent}- {encode_primitive(item)}"
    else:
        yield f"{indent}-"
        yield from _encode_value_lines(item, opts, depth + 1)


def _encode_tabular_array(arr: list, opts: EncodeOptions, depth: int) -> Generator[str, None, None]:
    """Encode a header line followed by one delimited row per element."""
    indent = " " * (opts.indent * depth)
    fields = list(arr[0].keys())

    yield indent + format_tabular_header(len(arr), fields, opts.delimiter)
    for row in arr:
        yield from _encode_tabular_row(row, fields, opts, depth + 1)


def _encode_tabular_row(row: dict, fields: list[str], opts: EncodeOptions, depth: int) -> Generator[str, None, None]:
    """Encode a single tabular row."""
    indent = " " * (opts.indent * depth)
    values = [encode_primitive(row[f], opts.delimiter) for f in fields]
    yield indent + opts.delimiter.join(values)


def _is_tabular_array(arr: list) -> bool:
    """Check if array can use tabular format."""
    if not arr:
        return False

    # All elements must be objects
    if not all(isinstance(v, dict) for v in arr):
        return False

    # All objects must have same keys
    first_keys = set(arr[0].keys())
    # Headers cannot carry an empty field name
    if not first_keys or "" in first_keys:
        return False

    for item in arr[1:]:
        if set(item.keys()) != first_keys:
            return False

    # All values must be primitives
    return all(is_scalar(v) for item in arr for v in item.values())


def normalize_value(value: Any) -> JsonValue:
    """
    Normalize a Python value into the Value Model.

    Converts:
    - NaN and infinities to None, -0.0 to 0
    - Enum members to their value
    - Dataclass instances and named tuples to objects
    - Mappings to objects with string keys
    - Tuples, sets and other iterables to lists
    - Date and time objects to ISO strings

    Args:
        value: The value to normalize.

    Returns:
        A Value Model tree.

    Raises:
        UnsupportedValueError: For values with no Value Model form, and for
            circular references.
    """
    return _normalize(value, set())


def _normalize(value: Any, active: set[int]) -> JsonValue:
    # Before the scalar checks: str and int mixin members are instances of both
    if isinstance(value, Enum):
        return _normalize(value.value, active)

    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, (int, float)):
        # Handle special float values
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return None
            # Normalize -0 to 0
            if value == 0.0:
                return 0
            return float(value)
        return int(value)

    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    if id(value) in active:
        raise UnsupportedValueError(f"Circular reference to {type(value).__name__}")

    active.add(id(value))
    try:
        return _normalize_container(value, active)
    finally:
        active.discard(id(value))


def _normalize_container(value: Any, active: set[int]) -> JsonValue:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field_name(f): _normalize(getattr(value, f.name), active)
            for f in dataclasses.fields(value)
        }

    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return {str(k): _normalize(v, active) for k, v in value._asdict().items()}

    if isinstance(value, Mapping):
        return {_normalize_key(k): _normalize(v, active) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [_normalize(v, active) for v in value]

    if isinstance(value, (set, frozenset)):
        return [_normalize(v, active) for v in sorted(value, key=str)]

    if isinstance(value, (bytes, bytearray)):
        raise UnsupportedValueError(f"Cannot encode value of type {type(value).__name__}")

    if isinstance(value, Iterable):
        return [_normalize(v, active) for v in value]

    raise UnsupportedValueError(f"Cannot encode value of type {type(value).__name__}")


def _normalize_key(key: Any) -> str:
    """Stringify a mapping key."""
    if isinstance(key, Enum):
        return _normalize_key(key.value)
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, bool):
        return encode_primitive(key)
    if isinstance(key, (int, float)):
        return format_number(key)
    return str(key)
