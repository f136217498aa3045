"""
toonify - a TOON (Token-Oriented Object Notation) codec.

TOON renders the JSON data model with YAML-like indentation, plus a
tabular shorthand for arrays of uniform flat objects.

Usage:
    import toonify

    # Encode Python data to TOON
    data = {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]}
    encoded = toonify.encode(data)
    # users:
    #   [2]{id,name}:
    #     1,Alice
    #     2,Bob

    # Decode TOON to Python data
    decoded = toonify.decode(encoded)

    # Decode into a typed destination
    users = toonify.decode_into("[1]{id,name}:\\n  1,Alice", list[User])

    # With options
    from toonify import EncodeOptions, DecodeOptions

    encoded = toonify.encode(data, EncodeOptions(indent=4, delimiter="|"))
    decoded = toonify.decode(encoded, DecodeOptions(indent=4))
"""

import logging

__version__ = "0.3.0"

from .coerce import Shape, ShapeKind, coerce, compile_shape
from .decode import decode, decode_bytes, decode_into, decode_lines
from .encode import encode, encode_bytes, encode_lines, normalize_value
from .errors import (
    ToonError,
    ToonSyntaxError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedTypeError,
    UnsupportedValueError,
)
from .types import DecodeOptions, EncodeOptions, JsonValue, ValueKind, kind_of

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Main API
    "encode",
    "encode_lines",
    "encode_bytes",
    "decode",
    "decode_lines",
    "decode_bytes",
    "decode_into",
    # Coercion
    "coerce",
    "compile_shape",
    "normalize_value",
    "Shape",
    "ShapeKind",
    # Options
    "EncodeOptions",
    "DecodeOptions",
    # Types
    "JsonValue",
    "ValueKind",
    "kind_of",
    # Errors
    "ToonError",
    "ToonSyntaxError",
    "TypeMismatchError",
    "UnknownFieldError",
    "UnsupportedTypeError",
    "UnsupportedValueError",
]
