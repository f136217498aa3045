"""Lexical helpers shared by the TOON encoder and decoder."""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Delimiter

ESCAPE_MAP = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

UNESCAPE_MAP = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_ESCAPE_TABLE = str.maketrans(ESCAPE_MAP)
_ESCAPE_RE = re.compile(r'\\(["\\nrt])')

# Strings that would read back as another kind of value
RESERVED_LITERALS = frozenset({"true", "false", "null", "{}", "[]", "-"})

# Characters that always force quoting
SPECIAL_CHARS = frozenset(':,"\n\r\t')

DIGITS = frozenset("0123456789")


def count_indent(line: str) -> int:
    """Count the leading spaces of a line."""
    return len(line) - len(line.lstrip(" "))


def escape_string(value: str) -> str:
    """Escape ``value`` for the inside of a quoted string."""
    return value.translate(_ESCAPE_TABLE)


def unescape_string(value: str) -> str:
    """
    Unescape the content of a TOON quoted string.

    Processes ``\\"``, ``\\\\``, ``\\n``, ``\\r`` and ``\\t``. Any other
    backslash, including a trailing one, is kept as written.
    """
    return _ESCAPE_RE.sub(lambda m: UNESCAPE_MAP[m.group(1)], value)


def is_integer_literal(value: str) -> bool:
    """Check for an optionally signed run of decimal digits."""
    digits = value[1:] if value[:1] in ("-", "+") else value
    return bool(digits) and all(c in DIGITS for c in digits)


def is_float_literal(value: str) -> bool:
    """
    Check for a decimal floating literal: ``1.5``, ``-.5``, ``2.``, ``1e10``.

    Special values (``inf``, ``nan``) and digit separators are not literals.
    """
    s = value[1:] if value[:1] in ("-", "+") else value

    mantissa, exponent = s, None
    for marker in ("e", "E"):
        if marker in s:
            mantissa, _, exponent = s.partition(marker)
            break

    whole, dot, fraction = mantissa.partition(".")
    if not (whole or fraction):
        return False
    if not all(c in DIGITS for c in whole + fraction):
        return False
    if exponent is None:
        return bool(dot)
    return is_integer_literal(exponent)


def looks_like_number(value: str) -> bool:
    """Check if a string would read back as a number."""
    if is_integer_literal(value):
        return True
    if is_float_literal(value):
        return float(value) not in (float("inf"), float("-inf"))
    return False


def needs_quoting(value: str, delimiter: "Delimiter | None" = None) -> bool:
    """
    Check if a string needs to be quoted.

    A string is quoted if it is empty, is a reserved literal, reads back as
    a number, contains ``: , " \\n \\r \\t``, has leading or trailing
    whitespace, starts with a list marker, or contains the active delimiter.

    Args:
        value: The string to check.
        delimiter: The delimiter of the surrounding tabular row, if any.

    Returns:
        True if the string needs quotes.
    """
    if not value:
        return True

    if value in RESERVED_LITERALS:
        return True

    if looks_like_number(value):
        return True

    if any(c in SPECIAL_CHARS for c in value):
        return True

    if value != value.strip():
        return True

    if value.startswith("- "):
        return True

    if delimiter is not None and delimiter in value:
        return True

    return False


def is_list_item(content: str) -> bool:
    """Check if trimmed line content is a list item (``-`` or ``- ...``)."""
    return content == "-" or content.startswith("- ")


def find_unquoted_colon(line: str) -> int:
    """Index of the first colon outside double quotes, or -1."""
    in_quotes = escaped = False
    for i, char in enumerate(line):
        if escaped:
            escaped = False
        elif in_quotes and char == "\\":
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char == ":" and not in_quotes:
            return i
    return -1


def split_by_delimiter(value: str, delimiter: "Delimiter") -> list[str]:
    """
    Split a string by delimiter, respecting quoted sections.

    Inside quotes a delimiter does not split, a backslash escape is kept
    intact and a doubled quote is rewritten to ``\\"``.

    Args:
        value: The string to split.
        delimiter: The delimiter character.

    Returns:
        List of trimmed values (still quoted if originally quoted).
    """
    result = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(value):
        char = value[i]
        if in_quotes and char == "\\" and i + 1 < len(value):
            current.append(value[i : i + 2])
            i += 2
            continue
        if in_quotes and char == '"' and value[i + 1 : i + 2] == '"':
            current.append('\\"')
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == delimiter and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    # Add the last segment
    result.append("".join(current).strip())
    return result
