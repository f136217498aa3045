"""TOON decoder implementation."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from typing import Any

from .coerce import coerce, coerce_fields, compile_shape, zero_value
from .errors import ToonSyntaxError
from .primitives import parse_key, parse_primitive, parse_tabular_header
from .string_utils import count_indent, find_unquoted_colon, is_list_item, split_by_delimiter
from .types import DecodeOptions, JsonArray, JsonObject, JsonValue, ParsedLine, TabularHeader

logger = logging.getLogger(__name__)


def decode(text: str, options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON text to a Python value.

    Args:
        text: The TOON-formatted string.
        options: Decoding options.

    Returns:
        The decoded Python value (None for empty input).

    Raises:
        ToonSyntaxError: For malformed input.
    """
    opts = options or DecodeOptions()
    if not text.strip():
        return None
    return decode_lines(text.replace("\r\n", "\n").split("\n"), opts)


def decode_lines(lines: Iterable[str], options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON from pre-split lines.

    Args:
        lines: Iterable of line strings.
        options: Decoding options.

    Returns:
        The decoded Python value.
    """
    opts = options or DecodeOptions()
    parsed_lines = list(_parse_lines(lines, opts.strict))
    logger.debug("Decoding %d lines with indent %d", len(parsed_lines), opts.indent)

    cursor = _Cursor(parsed_lines, opts)
    # The root block sits at the indent of the first non-blank line
    first = cursor.peek()
    root_indent = first.indent if first else 0
    result = _decode_block(cursor, root_indent)

    trailing = cursor.peek()
    if trailing:
        if trailing.indent > root_indent:
            raise _error("Unexpected indentation", trailing)
        raise _error("Unexpected content after document", trailing)

    return result


def decode_bytes(data: bytes, options: DecodeOptions | None = None) -> JsonValue:
    """Decode UTF-8 encoded TOON."""
    return decode(data.decode("utf-8"), options)


def decode_into(text: str, destination: Any, options: DecodeOptions | None = None) -> Any:
    """
    Decode TOON text into a typed destination.

    ``destination`` is either a type hint (``list[int]``, a dataclass, ...),
    in which case the coerced value is returned, or a mutable instance
    (dataclass instance, ``dict`` or ``list``) which is filled in place and
    returned. An instance is only modified once the whole document has been
    coerced, so a failed call leaves it untouched.

    Raises:
        ToonSyntaxError: For malformed input.
        TypeMismatchError: If the document does not fit the destination.
        UnknownFieldError: For unmatched record keys in strict mode.
    """
    opts = options or DecodeOptions()
    value = decode(text, opts)

    if isinstance(destination, type) or not _is_instance_target(destination):
        return coerce(value, destination, strict=opts.strict)

    if isinstance(destination, dict):
        destination.update(coerce(value, dict[str, Any], strict=opts.strict))
        return destination

    if isinstance(destination, list):
        destination[:] = coerce(value, list[Any], strict=opts.strict)
        return destination

    shape = compile_shape(type(destination))
    if value is None:
        zero = zero_value(shape)
        updates = {f.attr: getattr(zero, f.attr) for f in shape.fields if f.settable}
    else:
        updates = coerce_fields(value, shape, strict=opts.strict)
    for attr, field_value in updates.items():
        setattr(destination, attr, field_value)
    return destination


def _is_instance_target(destination: Any) -> bool:
    if isinstance(destination, (dict, list)):
        return True
    return dataclasses.is_dataclass(destination) and not isinstance(destination, type)


class _Cursor:
    """Cursor for iterating through parsed lines."""

    def __init__(self, lines: list[ParsedLine], options: DecodeOptions):
        self.lines = lines
        self.options = options
        self.pos = 0

    @property
    def step(self) -> int:
        return self.options.indent

    def peek(self) -> ParsedLine | None:
        """Look at current line without advancing."""
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if line.content:  # Skip blank lines
                return line
            self.pos += 1
        return None

    def advance(self) -> ParsedLine | None:
        """Get current line and advance position."""
        line = self.peek()
        if line:
            self.pos += 1
        return line

    def peek_at_indent(self, indent: int) -> ParsedLine | None:
        """
        Peek at the next line if it belongs to a block at ``indent``.

        Raises:
            ToonSyntaxError: If the line is indented deeper than ``indent``.
        """
        line = self.peek()
        if line is None or line.indent < indent:
            return None
        if line.indent > indent:
            raise _error("Unexpected indentation", line)
        return line


def _parse_lines(lines: Iterable[str], strict: bool) -> Iterable[ParsedLine]:
    """Parse raw lines into ParsedLine objects."""
    for i, raw in enumerate(lines, start=1):
        raw = raw.rstrip("\r")
        indent = count_indent(raw)

        if strict and raw.strip() and raw[indent : indent + 1] == "\t":
            raise ToonSyntaxError("Tab in indentation (use spaces)", i, indent)

        yield ParsedLine(content=raw.strip(), indent=indent, line_number=i)


def _error(message: str, line: ParsedLine) -> ToonSyntaxError:
    return ToonSyntaxError(message, line.line_number, line.indent)


def _decode_block(cursor: _Cursor, indent: int) -> JsonValue:
    """Decode whatever value starts at ``indent``; None if the block is empty."""
    line = cursor.peek_at_indent(indent)
    if not line:
        return None

    header = parse_tabular_header(line.content, line.line_number, line.indent)
    if header:
        cursor.advance()
        return _decode_tabular_rows(cursor, header, line, indent + cursor.step)

    if is_list_item(line.content):
        return _decode_list(cursor, indent)

    if find_unquoted_colon(line.content) != -1:
        return _decode_object(cursor, indent)

    # Single scalar line
    cursor.advance()
    return parse_primitive(line.content)


def _decode_object(cursor: _Cursor, indent: int) -> JsonObject:
    """Decode key/value lines at the given indent."""
    result: JsonObject = {}

    while True:
        line = cursor.peek_at_indent(indent)
        if not line:
            break

        content = line.content
        if is_list_item(content):
            raise _error("List item inside an object", line)

        colon_pos = find_unquoted_colon(content)
        if colon_pos == -1:
            raise _error(f"Expected key: value, got {content!r}", line)

        cursor.advance()
        key = parse_key(content[:colon_pos])
        rest = content[colon_pos + 1 :].strip()

        if rest:
            result[key] = parse_primitive(rest)
        else:
            result[key] = _decode_block(cursor, indent + cursor.step)

    return result


def _decode_list(cursor: _Cursor, indent: int) -> JsonArray:
    """Decode list items (lines starting with -) at the given indent."""
    result: JsonArray = []

    while True:
        line = cursor.peek_at_indent(indent)
        if not line:
            break

        if not is_list_item(line.content):
            raise _error("Expected list item", line)

        cursor.advance()
        rest = line.content[1:].strip()
        if rest:
            result.append(parse_primitive(rest))
        else:
            result.append(_decode_block(cursor, indent + cursor.step))

    return result


def _decode_tabular_rows(
    cursor: _Cursor, header: TabularHeader, header_line: ParsedLine, row_indent: int
) -> list:
    """Decode up to ``header.length`` delimited rows at ``row_indent``."""
    result = []
    width = len(header.fields)

    while len(result) < header.length:
        line = cursor.peek()
        if not line or line.indent != row_indent:
            break

        cursor.advance()
        values = split_by_delimiter(line.content, header.delimiter)
        if len(values) != width:
            raise _error(
                f"Field count mismatch: expected {width}, got {len(values)}", line
            )

        result.append({f: parse_primitive(v) for f, v in zip(header.fields, values)})

    if len(result) < header.length:
        logger.debug(
            "Tabular array at line %d declared %d rows, read %d",
            header_line.line_number,
            header.length,
            len(result),
        )

    return result
