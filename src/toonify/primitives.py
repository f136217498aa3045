"""Primitive value encoding and parsing for TOON."""

import math
from typing import TYPE_CHECKING

from .errors import ToonSyntaxError
from .string_utils import (
    DIGITS,
    escape_string,
    is_float_literal,
    is_integer_literal,
    needs_quoting,
    split_by_delimiter,
    unescape_string,
)
from .types import DELIMITERS, TabularHeader

if TYPE_CHECKING:
    from .types import Delimiter, JsonPrimitive, JsonValue


def encode_primitive(value: "JsonPrimitive", delimiter: "Delimiter | None" = None) -> str:
    """
    Encode a primitive value to TOON format.

    Args:
        value: The primitive value (str, int, float, bool, or None).
        delimiter: The active tabular delimiter, for quoting checks.

    Returns:
        The encoded string representation.
    """
    if value is None:
        return "null"

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (int, float)):
        return format_number(value)

    if isinstance(value, str):
        return encode_string_literal(value, delimiter)

    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def format_number(value: int | float) -> str:
    """Format a number as canonical decimal text."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return "null"
        # Normalize -0 to 0
        if value == 0.0:
            return "0"
        # repr is the shortest round-trippable form
        s = repr(value)
        # Remove unnecessary .0 for whole numbers
        if s.endswith(".0") and "e" not in s.lower():
            return s[:-2]
        return s

    return str(value)


def encode_string_literal(value: str, delimiter: "Delimiter | None" = None) -> str:
    """
    Encode a string value, with or without quotes.

    Args:
        value: The string to encode.
        delimiter: The active tabular delimiter, for quoting checks.

    Returns:
        The encoded string (quoted if necessary).
    """
    if needs_quoting(value, delimiter):
        return f'"{escape_string(value)}"'
    return value


def encode_key(key: str) -> str:
    """
    Encode an object key for TOON format.

    Keys starting with ``[`` or ``-`` are quoted as well, so they cannot be
    read back as a tabular header or a list item.

    Args:
        key: The key string.

    Returns:
        The encoded key (quoted if necessary).
    """
    if needs_quoting(key) or key.startswith(("[", "-")):
        return f'"{escape_string(key)}"'
    return key


def parse_primitive(token: str) -> "JsonValue":
    """
    Parse a scalar token to a Python value.

    Checked in order: quoted string, ``null``, ``true``/``false``, the empty
    containers ``{}`` and ``[]``, integer, float, bare string.

    Args:
        token: The token string.

    Returns:
        The parsed Python value.
    """
    token = token.strip()

    # Quoted string
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return unescape_string(token[1:-1])

    # Literals
    if token == "null":
        return None
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "{}":
        return {}
    if token == "[]":
        return []

    number = try_parse_number(token)
    if number is not None:
        return number

    # Unquoted string
    return token


def try_parse_number(token: str) -> int | float | None:
    """
    Try to parse a token as a number.

    Returns None if it's not a valid number.
    """
    if is_integer_literal(token):
        return int(token)

    if is_float_literal(token):
        value = float(token)
        if math.isinf(value):
            return None
        return value

    return None


def parse_key(key: str) -> str:
    """Parse a key, handling quoted keys."""
    key = key.strip()
    if len(key) >= 2 and key[0] == '"' and key[-1] == '"':
        return unescape_string(key[1:-1])
    return key


def format_tabular_header(length: int, fields: list[str], delimiter: "Delimiter" = ",") -> str:
    """
    Format a tabular array header line.

    Args:
        length: The row count.
        fields: Field names, in row order.
        delimiter: The row delimiter (included in the bracket if not comma).

    Returns:
        The formatted header, e.g. ``[2]{id,name}:`` or ``[2|]{id,name}:``.
    """
    if delimiter == ",":
        bracket = f"[{length}]"
    else:
        bracket = f"[{length}{delimiter}]"

    encoded_fields = [encode_key(f) for f in fields]
    return bracket + "{" + ",".join(encoded_fields) + "}:"


def parse_tabular_header(content: str, line_number: int = 0, column: int = 0) -> TabularHeader | None:
    """
    Recognize a tabular array header.

    Args:
        content: Trimmed line content.
        line_number: Line number for error reporting.
        column: Indent column for error reporting.

    Returns:
        The parsed header, or None if the line is not a header.

    Raises:
        ToonSyntaxError: If the line has the shape of a header but is malformed.
    """
    if not (content.startswith("[") and content.endswith("}:")):
        return None

    def malformed(reason: str) -> ToonSyntaxError:
        return ToonSyntaxError(f"Malformed tabular header ({reason}): {content}", line_number, column)

    i = 1
    while i < len(content) and content[i] in DIGITS:
        i += 1
    if i == 1:
        raise malformed("missing row count")
    length = int(content[1:i])

    delimiter = ","
    if content[i] in DELIMITERS:
        delimiter = content[i]
        i += 1

    if content[i : i + 2] != "]{":
        raise malformed("expected ']{'")

    fields_str = content[i + 2 : -2]
    if not fields_str.strip():
        raise malformed("no fields")

    fields = [parse_key(f) for f in split_by_delimiter(fields_str, ",")]
    if any(not f for f in fields):
        raise malformed("empty field name")
    if len(set(fields)) != len(fields):
        raise malformed("duplicate field name")

    return TabularHeader(length=length, delimiter=delimiter, fields=fields)
