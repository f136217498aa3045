"""Errors raised by the TOON codec."""


class ToonError(Exception):
    """Base class for every codec error.

    ``line`` is 1-based; ``line`` and ``column`` are 0 when no position applies.
    """

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line > 0:
            return f"line {self.line}, column {self.column}: {self.message}"
        return self.message


class ToonSyntaxError(ToonError, SyntaxError):
    """Malformed TOON text: indentation, tabular headers, row widths."""


class TypeMismatchError(ToonError, TypeError):
    """A decoded value cannot be converted to the requested destination."""


class UnsupportedValueError(ToonError, TypeError):
    """The encoder met a value it cannot map onto the Value Model."""


UnsupportedTypeError = UnsupportedValueError


class UnknownFieldError(ToonError, KeyError):
    """A strict record coercion met a key with no matching field."""

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"Unknown field: {field}")
        self.field = field
