"""Type definitions for the TOON encoder/decoder."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

# JSON type aliases
JsonPrimitive = str | int | float | bool | None
JsonArray = list["JsonValue"]
JsonObject = dict[str, "JsonValue"]
JsonValue = JsonPrimitive | JsonArray | JsonObject

# Delimiter options
Delimiter = Literal[",", "\t", "|"]

DELIMITERS: tuple[str, ...] = (",", "\t", "|")


class ValueKind(Enum):
    """The closed set of Value Model kinds."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def is_scalar(self) -> bool:
        return self not in (ValueKind.OBJECT, ValueKind.ARRAY)


def kind_of(value: JsonValue) -> ValueKind:
    """
    Classify a Value Model node.

    ``bool`` is checked before numbers since it is an ``int`` subclass.

    Raises:
        TypeError: If the value is not part of the Value Model.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY
    raise TypeError(f"Not a TOON value: {type(value).__name__}")


def is_scalar(value: JsonValue) -> bool:
    """Check if value is a scalar (not an Object or Array)."""
    return kind_of(value).is_scalar


@dataclass
class EncodeOptions:
    """Options for TOON encoding."""

    indent: int = 2
    """Number of spaces per indentation level."""

    delimiter: Delimiter = ","
    """Delimiter for tabular rows."""

    key_folding: Literal["off", "safe"] = "off"
    """Reserved; accepted but not applied."""

    flatten_depth: int | None = None
    """Reserved; accepted but not applied."""

    def __post_init__(self) -> None:
        _check_indent(self.indent)
        if self.delimiter not in DELIMITERS:
            raise ValueError(f"Unsupported delimiter: {self.delimiter!r}")


@dataclass
class DecodeOptions:
    """Options for TOON decoding."""

    indent: int = 2
    """Expected number of spaces per indentation level."""

    strict: bool = True
    """Reject unknown record fields and tabs in indentation."""

    expand_paths: Literal["off", "safe"] = "off"
    """Reserved; accepted but not applied."""

    def __post_init__(self) -> None:
        _check_indent(self.indent)


def _check_indent(indent: int) -> None:
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 1:
        raise ValueError(f"Indent must be a positive integer, got {indent!r}")


@dataclass
class ParsedLine:
    """A parsed line with indentation info."""

    content: str
    """Content after stripping indentation and trailing whitespace."""

    indent: int
    """Number of leading spaces."""

    line_number: int
    """1-based line number."""


@dataclass
class TabularHeader:
    """Parsed tabular array header information."""

    length: int
    """Declared row count."""

    delimiter: Delimiter = ","
    """Delimiter for this array's rows."""

    fields: list[str] = field(default_factory=list)
    """Field names, in header order."""
